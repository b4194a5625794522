from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from amodinfo.cli.main import cli


def _invoke(*args: str):
    return CliRunner().invoke(cli, list(args))


def _module_info(data_dir: Path) -> str:
    return str(data_dir / "module-info.json")


def test_missing_command() -> None:
    result = _invoke()
    assert "Usage" in result.output


def test_command_help() -> None:
    result = _invoke("--help")
    assert result.exit_code == 0
    assert "Usage" in result.output
    for command in ("list", "show", "source"):
        assert command in result.output


def test_command_list(data_dir: Path) -> None:
    result = _invoke("--module-info", _module_info(data_dir), "list")
    assert result.exit_code == 0
    assert "idmap2\n" in result.output
    assert "libziparchive\n" in result.output
    assert result.output.splitlines()[0] == "Bluetooth"


def test_command_show(data_dir: Path) -> None:
    result = _invoke("--module-info", _module_info(data_dir), "show")
    assert result.exit_code != 0

    result = _invoke("--module-info", _module_info(data_dir), "show", "does-not-exist")
    assert result.exit_code != 0
    assert "does-not-exist: module not found" in result.output

    result = _invoke("--module-info", _module_info(data_dir), "show", "idmap2")
    assert result.exit_code == 0
    assert "frameworks/base/cmds/idmap2" in result.output
    shown = json.loads(result.output)
    assert shown["module_name"] == "idmap2"
    assert shown["class"] == ["EXECUTABLES"]


def test_command_show_raw(data_dir: Path) -> None:
    result = _invoke("--module-info", _module_info(data_dir), "show", "--raw", "aapt2")
    assert result.exit_code == 0
    assert result.output.startswith('{ "class": ["EXECUTABLES"]')

    result = _invoke("--module-info", _module_info(data_dir), "show", "--raw", "nope")
    assert result.exit_code != 0


def test_implicit_module_info_path(data_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANDROID_PRODUCT_OUT", str(data_dir))
    result = _invoke("show", "idmap2")
    assert result.exit_code == 0
    assert "frameworks/base/cmds/idmap2" in result.output


def test_product_out_not_set() -> None:
    result = _invoke("list")
    assert result.exit_code != 0
    assert "ANDROID_PRODUCT_OUT not set" in result.output


def test_missing_module_info_file(tmp_path: Path) -> None:
    result = _invoke("--module-info", str(tmp_path / "absent.json"), "list")
    assert result.exit_code != 0
    assert "absent.json" in result.output


def test_corrupt_module_info(tmp_path: Path) -> None:
    path = tmp_path / "module-info.json"
    path.write_text('{\n  "foo": { ... \n}\n', encoding="utf-8")
    result = _invoke("--module-info", str(path), "list")
    assert result.exit_code != 0
    assert "2: <json> element not terminated" in result.output


def test_show_undecodable_module(tmp_path: Path) -> None:
    path = tmp_path / "module-info.json"
    path.write_text('{\n  "foo": { ... }\n}\n', encoding="utf-8")
    result = _invoke("--module-info", str(path), "list")
    assert result.exit_code == 0
    assert result.output == "foo\n"

    result = _invoke("--module-info", str(path), "show", "foo")
    assert result.exit_code != 0
    assert "bad JSON" in result.output


def test_invalid_strategy_setting(data_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MODULE_INFO_STRATEGY", "guess")
    result = _invoke("--module-info", _module_info(data_dir), "list")
    assert result.exit_code != 0
    assert "invalid configuration: MODULE_INFO_STRATEGY=guess" in result.output


def test_lines_strategy_setting(data_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MODULE_INFO_STRATEGY", "lines")
    result = _invoke("--module-info", _module_info(data_dir), "show", "libidmap2")
    assert result.exit_code == 0
    assert '"module_name": "libidmap2"' in result.output


def test_command_source(data_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANDROID_BUILD_TOP", str(data_dir))
    result = _invoke("--module-info", _module_info(data_dir), "source", "idmap2")
    assert result.exit_code == 0
    assert result.output.startswith('cc_binary {\n    name: "idmap2",\n')


def test_command_source_explicit_blueprint(data_dir: Path) -> None:
    blueprint = data_dir / "frameworks/base/cmds/idmap2/Android.bp"
    result = _invoke(
        "--module-info",
        _module_info(data_dir),
        "source",
        "--blueprint",
        str(blueprint),
        "idmap2_tests",
    )
    assert result.exit_code == 0
    assert result.output.startswith("cc_test {")


def test_command_source_without_build_top(data_dir: Path) -> None:
    result = _invoke("--module-info", _module_info(data_dir), "source", "idmap2")
    assert result.exit_code != 0
    assert "ANDROID_BUILD_TOP not set" in result.output


def test_command_source_not_in_blueprint(data_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANDROID_BUILD_TOP", str(data_dir))
    blueprint = data_dir / "frameworks/base/cmds/idmap2/Android.bp"
    result = _invoke(
        "--module-info", _module_info(data_dir), "source", "--blueprint", str(blueprint), "aapt2"
    )
    assert result.exit_code != 0
    assert "aapt2: module source not found" in result.output


def test_malformed_setting_is_reported(data_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MODULE_INFO_PRESORTED", "yes")
    result = _invoke("--module-info", _module_info(data_dir), "list")
    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "invalid configuration: MODULE_INFO_PRESORTED" in result.output
    assert "Traceback" not in result.output


def test_show_logs_query_context(data_dir: Path) -> None:
    result = _invoke(
        "--module-info", _module_info(data_dir), "--log-level", "DEBUG", "show", "idmap2"
    )
    assert result.exit_code == 0
    assert "module-info indexed" in result.output
    assert "module=idmap2" in result.output
