"""RU: CLI: собрать команду FFmpeg для RTSP → HLS и запустить её.

EN: CLI: build the RTSP → HLS FFmpeg command and run it.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import yaml

from rtsp_hls_forge.config import cli_flags_from_config, load_config, process_from_config
from rtsp_hls_forge.runner import run_command
from rtsp_hls_forge.utils.logging_utils import process_logger, setup_logging

LOG = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""

    ap = argparse.ArgumentParser(
        prog="rtsp-hls-forge", description="Transcode an RTSP stream to HLS with FFmpeg",
    )
    ap.add_argument("uri", nargs="?", help="RTSP source URI")
    ap.add_argument("--config", default="config.yaml", help="Path to config.yaml")
    ap.add_argument("--outdir", type=Path, help="Directory for segments and index.m3u8")
    ap.add_argument(
        "--dry-run", action="store_true", help="Print the ffmpeg command instead of running it",
    )
    ap.add_argument("--quiet", action="store_true", help="Only errors")
    ap.add_argument("--verbose", action="store_true", help="Verbose logs incl. ffmpeg params")
    ap.add_argument("--version", action="store_true")
    return ap.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """RU: Точка входа CLI.

    EN: Main entry point.
    """
    args = parse_args(argv)

    if args.version:
        from . import __version__

        print(__version__)
        return 0

    setup_logging(verbose=args.verbose, quiet=args.quiet)

    if not args.uri or args.outdir is None:
        LOG.error("Both URI and --outdir are required")
        return 2

    try:
        conf = load_config(args.config)
        process = process_from_config(conf)
        quiet_conf, verbose_conf = cli_flags_from_config(conf)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        LOG.error("Failed to load config %s: %s", args.config, exc)
        return 1

    setup_logging(verbose=args.verbose or verbose_conf, quiet=args.quiet or quiet_conf)

    cmd = process.spawn(args.outdir, args.uri)
    if args.dry_run:
        print(cmd)
        return 0

    LOG.info("streaming %s -> %s", args.uri, args.outdir)
    try:
        plog = process_logger(process.logging_opts, args.outdir.name or "stream")
    except OSError as exc:
        LOG.error("Failed to open ffmpeg log in %s: %s", process.logging_opts.directory, exc)
        return 1
    return run_command(cmd, process_log=plog)
