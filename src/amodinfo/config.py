"""Application configuration contract."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from amodinfo.errors import ConfigError
from amodinfo.modinfo.decoder import SCHEMAS
from amodinfo.modinfo.scanner import STRATEGIES

MODULE_INFO_FILE = "module-info.json"
BLUEPRINT_FILE = "Android.bp"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = Field(alias="APP_ENV", default="dev")
    log_level: str = Field(alias="LOG_LEVEL", default="WARNING")
    android_product_out: str = Field(alias="ANDROID_PRODUCT_OUT", default="")
    android_build_top: str = Field(alias="ANDROID_BUILD_TOP", default="")
    module_info_strategy: str = Field(alias="MODULE_INFO_STRATEGY", default="scan")
    module_info_presorted: int = Field(alias="MODULE_INFO_PRESORTED", default=1)
    module_info_schema: str = Field(alias="MODULE_INFO_SCHEMA", default="v2")


def validate_settings(settings: Settings) -> None:
    problems: list[str] = []
    if settings.module_info_strategy not in STRATEGIES:
        problems.append(f"MODULE_INFO_STRATEGY={settings.module_info_strategy}")
    if settings.module_info_schema not in SCHEMAS:
        problems.append(f"MODULE_INFO_SCHEMA={settings.module_info_schema}")
    if settings.module_info_presorted not in (0, 1):
        problems.append(f"MODULE_INFO_PRESORTED={settings.module_info_presorted}")
    if problems:
        raise ConfigError(f"invalid configuration: {', '.join(problems)}")


def resolve_module_info_path(settings: Settings, override: str | None = None) -> Path:
    """Use `override` if given, else `$ANDROID_PRODUCT_OUT/module-info.json`."""
    if override:
        return Path(override)
    if not settings.android_product_out.strip():
        raise ConfigError("ANDROID_PRODUCT_OUT not set")
    return Path(settings.android_product_out) / MODULE_INFO_FILE


def resolve_blueprint_path(
    settings: Settings, module_path: list[str], override: str | None = None
) -> Path:
    """Use `override` if given, else the Android.bp in the module's first source dir."""
    if override:
        return Path(override)
    if not settings.android_build_top.strip():
        raise ConfigError("ANDROID_BUILD_TOP not set")
    if not module_path:
        raise ConfigError("module has no source path")
    return Path(settings.android_build_top) / module_path[0] / BLUEPRINT_FILE


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
