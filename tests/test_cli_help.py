from __future__ import annotations

import argparse
from pathlib import Path

from vidamrr.app import _cli_help_text, _resolve_options, main
from vidamrr.config import AppConfig
from vidamrr.paths import config_path


def test_cli_help_text_includes_config_path() -> None:
    text = _cli_help_text()
    assert "/new" in text
    assert str(config_path()) in text


def test_main_help_flag_prints_help(capsys) -> None:
    main(["-help"])
    captured = capsys.readouterr()
    assert "vidamrr" in captured.out


def test_cli_values_override_config(tmp_path: Path) -> None:
    args = argparse.Namespace(data_file=str(tmp_path / "cli.json"), timeout=2.0, debug=True)
    config = AppConfig(data_file=str(tmp_path / "config.json"), fetch_timeout=5.0)
    options = _resolve_options(args, config, None)
    assert options.data_file == tmp_path / "cli.json"
    assert options.timeout == 2.0
    assert options.debug


def test_config_used_without_cli_values(tmp_path: Path) -> None:
    args = argparse.Namespace(data_file=None, timeout=None, debug=False)
    config = AppConfig(data_file=str(tmp_path / "config.json"), fetch_timeout=5.0)
    options = _resolve_options(args, config, "Config file is not valid JSON")
    assert options.data_file == tmp_path / "config.json"
    assert options.timeout == 5.0
    assert options.status == "Config file is not valid JSON"
