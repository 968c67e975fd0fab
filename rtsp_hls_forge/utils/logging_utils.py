"""RU: Утилиты настройки логирования.

EN: Logging setup utilities.
"""

from __future__ import annotations

import gzip
import logging
import os
import shutil
import time
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Final

import coloredlogs

if TYPE_CHECKING:
    from rtsp_hls_forge.process import ProcessLoggingOpts

DEFAULT_LOGGER_NAME: Final = "rtsp_hls_forge"
PROCESS_LOGGER_PREFIX: Final = "rtsp_hls_forge.ffmpeg"

_MEGABYTE: Final = 1024 * 1024
_DAY_SECONDS: Final = 24 * 60 * 60


def setup_logging(*, verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """RU: Настраивает логирование c учётом флагов.

    EN: Configure logging according to verbosity flags.
    """
    level = logging.INFO
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG

    logger = logging.getLogger(DEFAULT_LOGGER_NAME)
    logger.setLevel(level)

    # RU: Избегаем двойных handlers при повторном вызове.
    # EN: Avoid double handlers if called multiple times.
    if logger.handlers:
        for h in logger.handlers:
            h.setLevel(level)
        return logger

    coloredlogs.install(
        level=level, logger=logger, fmt="%(asctime)s %(levelname)s %(message)s",
    )
    return logger


def _gzip_rotator(source: str, dest: str) -> None:
    with open(source, "rb") as src, gzip.open(dest, "wb") as dst:
        shutil.copyfileobj(src, dst)
    os.remove(source)


def _gzip_namer(name: str) -> str:
    return name + ".gz"


class ProcessLogHandler(RotatingFileHandler):
    """RU: Ротация логов FFmpeg по размеру, со сжатием и сроком хранения.

    EN: Size-based rotation for transcoder logs with optional gzip and max age.
    """

    def __init__(
        self,
        filename: str | os.PathLike[str],
        *,
        max_size: int,
        max_backups: int,
        max_age: int,
        compress: bool,
    ) -> None:
        super().__init__(
            filename,
            maxBytes=max(max_size, 0) * _MEGABYTE,
            backupCount=max(max_backups, 0),
            encoding="utf-8",
        )
        self.max_age = max_age
        if compress:
            self.namer = _gzip_namer
            self.rotator = _gzip_rotator

    def doRollover(self) -> None:  # noqa: N802
        super().doRollover()
        self.prune_expired()

    def prune_expired(self) -> list[Path]:
        """Delete rotated backups older than max_age days."""
        if self.max_age <= 0:
            return []
        base = Path(self.baseFilename)
        cutoff = time.time() - self.max_age * _DAY_SECONDS
        removed: list[Path] = []
        for p in base.parent.glob(base.name + ".*"):
            try:
                if p.stat().st_mtime < cutoff:
                    p.unlink()
                    removed.append(p)
            except OSError:
                continue
        return removed


def process_logger(opts: ProcessLoggingOpts, name: str) -> logging.Logger | None:
    """RU: Возвращает логгер для вывода FFmpeg или None, если логирование выключено.

    EN: Return a logger for the transcoder's output, or None when disabled.

    Records go to ``<opts.directory>/<name>.log`` only; the logger does not
    propagate to the application log.
    """
    if not opts.enabled:
        return None

    log_dir = Path(opts.directory)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / f"{name}.log"

    logger = logging.getLogger(f"{PROCESS_LOGGER_PREFIX}.{name}")
    logger.setLevel(logging.INFO)
    logger.propagate = False

    for h in logger.handlers:
        if isinstance(h, ProcessLogHandler) and h.baseFilename == os.path.abspath(log_path):
            return logger

    handler = ProcessLogHandler(
        log_path,
        max_size=opts.max_size,
        max_backups=opts.max_backups,
        max_age=opts.max_age,
        compress=opts.compress,
    )
    handler.setFormatter(logging.Formatter("%(asctime)s %(message)s"))
    logger.addHandler(handler)
    return logger
