from __future__ import annotations

from pathlib import Path

from platformdirs import user_config_path, user_log_path

APP_NAME = "vidamrr"
DEFAULT_DATA_FILENAME = "videos.json"


def config_root() -> Path:
    root = user_config_path(APP_NAME)
    root.mkdir(parents=True, exist_ok=True)
    return root


def config_path() -> Path:
    return config_root() / "config.json"


def log_root() -> Path:
    root = user_log_path(APP_NAME)
    root.mkdir(parents=True, exist_ok=True)
    return root


def log_path() -> Path:
    return log_root() / f"{APP_NAME}.log"


def default_data_path() -> Path:
    return Path.cwd() / DEFAULT_DATA_FILENAME
