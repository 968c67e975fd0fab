"""RU: Загрузка config.yaml и построение конфигурации процессов.

EN: Load config.yaml and build process configuration from it.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from rtsp_hls_forge.process import DEFAULT_FFMPEG, Process, ProcessLoggingOpts


def load_config(path: str | Path) -> dict[str, Any]:
    """RU: Читает YAML-конфиг. Пустой файл даёт пустой словарь.

    EN: Read a YAML config file. An empty file yields an empty dict.
    """
    config_path = Path(path)
    if not config_path.exists():
        message = f"Config file not found: {config_path}"
        raise FileNotFoundError(message)

    with config_path.open(encoding="utf-8") as f:
        conf = yaml.safe_load(f) or {}

    if not isinstance(conf, dict):
        message = f"Config root must be a mapping, got {type(conf).__name__}"
        raise ValueError(message)
    return conf


def _section(conf: dict[str, Any], name: str) -> dict[str, Any]:
    value = conf.get(name, {})
    return value if isinstance(value, dict) else {}


def _as_int(section: dict[str, Any], key: str, default: int) -> int:
    value = section.get(key, default)
    try:
        return int(value)
    except (TypeError, ValueError):
        message = f"Expected an integer for '{key}', got: {value!r}"
        raise ValueError(message) from None


def _as_bool(section: dict[str, Any], key: str, default: bool) -> bool:
    # Quoted "false" would be truthy; only YAML booleans are accepted.
    value = section.get(key, default)
    if value is None:
        return default
    if not isinstance(value, bool):
        message = f"Expected true/false for '{key}', got: {value!r}"
        raise ValueError(message)
    return value


def logging_opts_from_config(conf: dict[str, Any]) -> ProcessLoggingOpts:
    """Build process logging options from the `process_logging` section."""
    defaults = ProcessLoggingOpts()
    lc = _section(conf, "process_logging")
    return ProcessLoggingOpts(
        enabled=_as_bool(lc, "enabled", defaults.enabled),
        directory=str(lc.get("directory", defaults.directory)),
        max_size=_as_int(lc, "max_size", defaults.max_size),
        max_backups=_as_int(lc, "max_backups", defaults.max_backups),
        max_age=_as_int(lc, "max_age", defaults.max_age),
        compress=_as_bool(lc, "compress", defaults.compress),
    )


def process_from_config(conf: dict[str, Any]) -> Process:
    """RU: Строит Process из секций `transcoding` и `process_logging`.

    EN: Build a Process from the `transcoding` and `process_logging` sections.
    """
    tc = _section(conf, "transcoding")
    return Process(
        keep_files=_as_bool(tc, "keep_files", False),
        audio=_as_bool(tc, "audio", True),
        live=_as_bool(tc, "live", True),
        stream_duration=_as_int(tc, "stream_duration", 0),
        logging_opts=logging_opts_from_config(conf),
        ffmpeg_path=str(tc.get("ffmpeg_path") or DEFAULT_FFMPEG),
    )


def cli_flags_from_config(conf: dict[str, Any]) -> tuple[bool, bool]:
    """Return (quiet, verbose) from the `cli` section."""
    cc = _section(conf, "cli")
    return _as_bool(cc, "quiet", False), _as_bool(cc, "verbose", False)
