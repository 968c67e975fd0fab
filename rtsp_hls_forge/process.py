"""RU: Сборка команды FFmpeg для перекодирования RTSP-потока в HLS.

EN: Build the FFmpeg command that transcodes an RTSP source into HLS.
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from dataclasses import dataclass, field
from typing import Any, Final

LOG = logging.getLogger(__name__)

DEFAULT_FFMPEG: Final = "ffmpeg"
SEGMENT_TEMPLATE: Final = "%d.ts"
PLAYLIST_NAME: Final = "index.m3u8"


@dataclass(frozen=True)
class ProcessLoggingOpts:
    """Options for the per-stream transcoder log."""

    enabled: bool = False
    directory: str = "logs"
    max_size: int = 500  # megabytes
    max_backups: int = 3
    max_age: int = 28  # days
    compress: bool = False


@dataclass(frozen=True)
class TranscodeCommand:
    """RU: Готовая к запуску команда: исполняемый файл и аргументы.

    EN: A ready-to-run command: executable plus its arguments.
    """

    executable: str
    args: tuple[str, ...]

    @property
    def argv(self) -> list[str]:
        return [self.executable, *self.args]

    def __str__(self) -> str:
        return shlex.join(self.argv)

    def resolve_executable(self) -> str | None:
        """Return the full path of the executable, or None if it can't be found."""
        path = shutil.which(self.executable)
        if path:
            LOG.debug("Found %s at: %s", self.executable, path)
        else:
            LOG.error("%s not found in system PATH.", self.executable)
        return path

    def start(self, **popen_kwargs: Any) -> subprocess.Popen:
        """Start the transcoder. The caller owns the returned process."""
        LOG.debug("Running: %s", self)
        return subprocess.Popen(self.argv, **popen_kwargs)


def ensure_output_dir(path: str | os.PathLike[str]) -> bool:
    """RU: Создаёт директорию вывода (вместе с родительскими).

    EN: Create the output directory and any missing parents.

    Returns False instead of raising when the directory can't be created.
    """
    try:
        os.makedirs(path, mode=0o777, exist_ok=True)
    except OSError as exc:
        LOG.warning("Could not create output directory %s: %s", path, exc)
        return False
    return True


def _input_args(uri: str) -> list[str]:
    return [
        "-y",
        "-rtsp_transport",
        "tcp",
        "-i",
        uri,
        "-c:v",
        "libx264",
        "-x264opts",
        "keyint=30:no-scenecut",
        "-preset",
        "veryfast",
    ]


def _audio_args(audio: bool) -> list[str]:
    if audio:
        return ["-c:a", "copy"]
    return ["-an"]


def _duration_args(stream_duration: int) -> list[str]:
    if stream_duration > 0:
        return ["-t", str(stream_duration)]
    return []


def _mode_args(process: Process) -> list[str]:
    if process.live:
        # Sliding window of 3 one-second segments.
        return [
            "-hls_flags",
            process.hls_flags(),
            "-segment_list_flags",
            "live",
            "-hls_time",
            "1",
            "-hls_list_size",
            "3",
        ]
    # List size 0 keeps every segment in the playlist.
    return ["-hls_list_size", "0", "-hls_time", "5"]


def _output_args(path: str) -> list[str]:
    return [
        "-hls_segment_filename",
        f"{path}/{SEGMENT_TEMPLATE}",
        f"{path}/{PLAYLIST_NAME}",
    ]


def build_args(process: Process, path: str | os.PathLike[str], uri: str) -> list[str]:
    """RU: Собирает аргументы FFmpeg из конфигурации и (path, uri).

    Порядок важен: FFmpeg разбирает флаги позиционно. Последние два
    аргумента всегда шаблон сегментов и путь к плейлисту.

    EN: Assemble FFmpeg arguments from the configuration and (path, uri).

    Order matters: FFmpeg parses flags positionally. The last two arguments
    are always the segment template and the playlist path.
    """
    out_dir = os.fspath(path)
    return [
        *_input_args(uri),
        *_audio_args(process.audio),
        *_duration_args(process.stream_duration),
        "-f",
        "hls",
        *_mode_args(process),
        *_output_args(out_dir),
    ]


@dataclass(frozen=True)
class Process:
    """RU: Конфигурация для запуска процессов перекодирования FFmpeg.

    EN: Configuration able to spawn FFmpeg transcoding commands.

    Attributes:
        keep_files: Keep old segment files instead of deleting them as the
            live window advances.
        audio: Copy the audio stream; otherwise output is video-only.
        live: Sliding-window live playlist instead of a complete one.
        stream_duration: Cap output duration in seconds when > 0.
        logging_opts: Options for the transcoder's own log file.
        ffmpeg_path: Executable name or path.

    """

    keep_files: bool = False
    audio: bool = True
    live: bool = True
    stream_duration: int = 0
    logging_opts: ProcessLoggingOpts = field(default_factory=ProcessLoggingOpts)
    ffmpeg_path: str = DEFAULT_FFMPEG

    def hls_flags(self) -> str:
        """Return the -hls_flags value for live mode."""
        if self.keep_files:
            return "append_list"
        return "delete_segments+append_list"

    def build_args(self, path: str | os.PathLike[str], uri: str) -> list[str]:
        return build_args(self, path, uri)

    def spawn(self, path: str | os.PathLike[str], uri: str) -> TranscodeCommand:
        """RU: Создаёт директорию вывода и возвращает команду FFmpeg.

        EN: Create the output directory and return the FFmpeg command.

        Never raises: a directory that can't be created is only logged, and
        the transcoder will fail on start if it is really unusable.
        """
        ensure_output_dir(path)
        args = self.build_args(path, uri)
        LOG.debug("ffmpeg params: %s", args)
        return TranscodeCommand(executable=self.ffmpeg_path, args=tuple(args))
