from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .paths import config_path

CONFIG_VERSION = 1
DEFAULT_FETCH_TIMEOUT = 8.0
DEFAULT_OEMBED_ENDPOINT = "https://www.youtube.com/oembed?url={url}&format=json"


@dataclass
class AppConfig:
    version: int = CONFIG_VERSION
    data_file: str | None = None
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    oembed_endpoint: str = DEFAULT_OEMBED_ENDPOINT


def load_config(path: Path | None = None) -> tuple[AppConfig, str | None]:
    path = path or config_path()
    if not path.exists():
        return AppConfig(), None
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        return AppConfig(), f"Failed to read config: {path} ({exc})"
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return AppConfig(), f"Config file is not valid JSON: {path}"
    if not isinstance(data, dict):
        return AppConfig(), f"Config file must be a JSON object: {path}"
    return _parse_config_data(data), None


def save_config(config: AppConfig, path: Path | None = None) -> str | None:
    path = path or config_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        return f"Failed to create config directory: {path.parent} ({exc})"
    payload = _config_to_dict(config)
    try:
        path.write_text(
            json.dumps(payload, ensure_ascii=True, indent=2),
            encoding="utf-8",
        )
    except OSError as exc:
        return f"Failed to write config: {path} ({exc})"
    return None


def ensure_config(path: Path | None = None) -> tuple[AppConfig, str | None]:
    """Load the config, writing a default file on first run."""
    path = path or config_path()
    if path.exists():
        return load_config(path)
    config = AppConfig()
    return config, save_config(config, path)


def _parse_config_data(data: dict[str, Any]) -> AppConfig:
    return AppConfig(
        version=_as_int(data.get("version")) or CONFIG_VERSION,
        data_file=_as_str(data.get("data_file")),
        fetch_timeout=_as_positive_float(data.get("fetch_timeout")) or DEFAULT_FETCH_TIMEOUT,
        oembed_endpoint=_as_endpoint(data.get("oembed_endpoint")) or DEFAULT_OEMBED_ENDPOINT,
    )


def _config_to_dict(config: AppConfig) -> dict[str, Any]:
    data: dict[str, Any] = {"version": config.version}
    if config.data_file is not None:
        data["data_file"] = config.data_file
    data["fetch_timeout"] = config.fetch_timeout
    data["oembed_endpoint"] = config.oembed_endpoint
    return data


def _as_str(value: Any) -> str | None:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return None


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _as_positive_float(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if value <= 0:
        return None
    return float(value)


def _as_endpoint(value: Any) -> str | None:
    text = _as_str(value)
    if text is None or "{url}" not in text:
        return None
    return text
