"""amodinfo command-line interface."""
