import logging
from pathlib import Path

import pytest

from amodinfo.config import get_settings
from amodinfo.logging import clear_context

DATA_DIR = Path(__file__).resolve().parent / "data"

_ENV_KEYS = (
    "APP_ENV",
    "LOG_LEVEL",
    "ANDROID_PRODUCT_OUT",
    "ANDROID_BUILD_TOP",
    "MODULE_INFO_STRATEGY",
    "MODULE_INFO_PRESORTED",
    "MODULE_INFO_SCHEMA",
)


@pytest.fixture(autouse=True)
def test_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    # keep a developer's .env out of the settings
    monkeypatch.chdir(tmp_path)
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    clear_context()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture()
def data_dir() -> Path:
    return DATA_DIR


@pytest.fixture()
def module_info_text() -> str:
    return (DATA_DIR / "module-info.json").read_text(encoding="utf-8")


@pytest.fixture()
def blueprint_text() -> str:
    return (DATA_DIR / "frameworks/base/cmds/idmap2/Android.bp").read_text(encoding="utf-8")
