"""Tests for config.yaml loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from rtsp_hls_forge.config import (
    cli_flags_from_config,
    load_config,
    logging_opts_from_config,
    process_from_config,
)
from rtsp_hls_forge.process import Process, ProcessLoggingOpts


def test_load_config_reads_yaml(tmp_path: Path) -> None:
    cfg = tmp_path / "config.yaml"
    cfg.write_text(
        "transcoding:\n"
        "  keep_files: true\n"
        "  audio: false\n"
        "  live: false\n"
        "  stream_duration: 120\n"
        "  ffmpeg_path: /usr/local/bin/ffmpeg\n"
        "process_logging:\n"
        "  enabled: true\n"
        "  directory: /var/log/hls\n"
        "  max_size: 10\n"
        "  max_backups: 2\n"
        "  max_age: 3\n"
        "  compress: true\n",
        encoding="utf-8",
    )

    p = process_from_config(load_config(cfg))

    assert p == Process(
        keep_files=True,
        audio=False,
        live=False,
        stream_duration=120,
        logging_opts=ProcessLoggingOpts(
            enabled=True,
            directory="/var/log/hls",
            max_size=10,
            max_backups=2,
            max_age=3,
            compress=True,
        ),
        ffmpeg_path="/usr/local/bin/ffmpeg",
    )


def test_empty_config_gives_defaults(tmp_path: Path) -> None:
    cfg = tmp_path / "config.yaml"
    cfg.write_text("", encoding="utf-8")

    conf = load_config(cfg)

    assert conf == {}
    assert process_from_config(conf) == Process()
    assert cli_flags_from_config(conf) == (False, False)


def test_missing_config_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="Config file not found"):
        load_config(tmp_path / "missing.yaml")


def test_non_mapping_config_raises(tmp_path: Path) -> None:
    cfg = tmp_path / "config.yaml"
    cfg.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError, match="mapping"):
        load_config(cfg)


def test_bad_integer_names_the_key() -> None:
    with pytest.raises(ValueError, match="stream_duration"):
        process_from_config({"transcoding": {"stream_duration": "soon"}})


def test_numeric_strings_are_coerced() -> None:
    p = process_from_config({"transcoding": {"stream_duration": "45"}})
    assert p.stream_duration == 45


def test_non_dict_sections_are_ignored() -> None:
    conf = {"transcoding": "nope", "process_logging": None}
    assert process_from_config(conf) == Process()
    assert logging_opts_from_config(conf) == ProcessLoggingOpts()


def test_cli_flags() -> None:
    assert cli_flags_from_config({"cli": {"quiet": True}}) == (True, False)
    assert cli_flags_from_config({"cli": {"verbose": True}}) == (False, True)
    assert cli_flags_from_config({"cli": {"verbose": None}}) == (False, False)


@pytest.mark.parametrize("value", ["false", "no", 0, 1])
def test_non_boolean_flag_names_the_key(value: object) -> None:
    with pytest.raises(ValueError, match="keep_files"):
        process_from_config({"transcoding": {"keep_files": value}})


def test_quoted_false_is_rejected_in_logging_section(tmp_path: Path) -> None:
    cfg = tmp_path / "config.yaml"
    cfg.write_text('process_logging:\n  enabled: "false"\n', encoding="utf-8")
    with pytest.raises(ValueError, match="enabled"):
        logging_opts_from_config(load_config(cfg))
