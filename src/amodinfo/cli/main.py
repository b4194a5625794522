"""Click CLI group: list, show, and source commands."""

from __future__ import annotations

import logging
from pathlib import Path

import click
from pydantic import ValidationError

from amodinfo.blueprint import find_module_source
from amodinfo.config import (
    Settings,
    get_settings,
    resolve_blueprint_path,
    resolve_module_info_path,
    validate_settings,
)
from amodinfo.errors import AmodinfoError, DecodeError
from amodinfo.logging import bind_query_context, configure_logging
from amodinfo.modinfo import ModuleIndex, ModuleRecord

logger = logging.getLogger(__name__)


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise click.ClickException(f"{path}: {exc}") from exc


def _settings() -> Settings:
    try:
        return get_settings()
    except ValidationError as exc:
        problems = ", ".join(
            f"{'.'.join(str(item) for item in error['loc'])}: {error['msg']}"
            for error in exc.errors(include_url=False)
        )
        raise click.ClickException(f"invalid configuration: {problems}") from exc


def _load_index(ctx: click.Context, name: str | None = None) -> ModuleIndex:
    settings = _settings()
    try:
        validate_settings(settings)
        path = resolve_module_info_path(settings, ctx.obj.get("module_info"))
    except AmodinfoError as exc:
        raise click.ClickException(str(exc)) from exc
    bind_query_context(module_info=str(path), module=name)
    document = _read_text(path)
    try:
        return ModuleIndex.from_document(
            document,
            strategy=settings.module_info_strategy,
            presorted=bool(settings.module_info_presorted),
            schema=settings.module_info_schema,
        )
    except AmodinfoError as exc:
        raise click.ClickException(f"{path}: {exc}") from exc


def _find_or_fail(index: ModuleIndex, name: str) -> ModuleRecord:
    try:
        record = index.find(name)
    except DecodeError as exc:
        raise click.ClickException(f"{name}: {exc}") from exc
    if record is None:
        raise click.ClickException(f"{name}: module not found")
    return record


@click.group()
@click.option(
    "--module-info",
    "module_info",
    type=click.Path(dir_okay=False, path_type=str),
    default=None,
    help="Path to module-info.json (default: $ANDROID_PRODUCT_OUT/module-info.json).",
)
@click.option("--log-level", type=str, default=None, help="Override LOG_LEVEL.")
@click.pass_context
def cli(ctx: click.Context, module_info: str | None, log_level: str | None) -> None:
    """Query an Android module-info.json without decoding all of it."""
    configure_logging(log_level or _settings().log_level)
    ctx.ensure_object(dict)
    ctx.obj["module_info"] = module_info


@cli.command("list")
@click.pass_context
def list_modules(ctx: click.Context) -> None:
    """Print every module name, one per line."""
    index = _load_index(ctx)
    for name in index.names():
        click.echo(name)


@cli.command()
@click.argument("name")
@click.option("--raw", is_flag=True, help="Print the undecoded JSON payload.")
@click.pass_context
def show(ctx: click.Context, name: str, raw: bool) -> None:
    """Print the record of one module."""
    index = _load_index(ctx, name)
    if raw:
        payload = index.payload(name)
        if payload is None:
            raise click.ClickException(f"{name}: module not found")
        click.echo(payload)
        return
    record = _find_or_fail(index, name)
    click.echo(record.model_dump_json(by_alias=True, indent=2))


@cli.command()
@click.argument("name")
@click.option(
    "--blueprint",
    type=click.Path(dir_okay=False, path_type=str),
    default=None,
    help="Android.bp to search (default: $ANDROID_BUILD_TOP/<module path>/Android.bp).",
)
@click.pass_context
def source(ctx: click.Context, name: str, blueprint: str | None) -> None:
    """Print the Android.bp rule block that defines a module."""
    record = _find_or_fail(_load_index(ctx, name), name)
    try:
        path = resolve_blueprint_path(_settings(), record.path, blueprint)
    except AmodinfoError as exc:
        raise click.ClickException(str(exc)) from exc
    logger.debug("searching %s for %s", path, name)
    text = find_module_source(_read_text(path), name)
    if text is None:
        raise click.ClickException(f"{name}: module source not found in {path}")
    click.echo(text)
