"""Query engine for Android module-info.json and Android.bp files."""
