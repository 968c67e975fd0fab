"""Run a transcoder command once and report its exit status.

No restarts or health checks: the caller decides what a failure means.
"""

from __future__ import annotations

import logging
import subprocess
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from rtsp_hls_forge.process import TranscodeCommand

LOGGER = logging.getLogger(__name__)

EXIT_NOT_FOUND: Final = 127


def stop(p: subprocess.Popen, timeout_s: float = 10) -> None:
    """Terminate a transcoder process, killing it if it doesn't exit in time."""
    try:
        p.terminate()
        p.wait(timeout=timeout_s)
    except subprocess.TimeoutExpired:
        LOGGER.warning("ffmpeg did not terminate in time; killing")
        try:
            p.kill()
        except OSError:
            LOGGER.exception("Failed to kill ffmpeg process")
    except OSError:
        LOGGER.exception("Failed to terminate ffmpeg process")


def run_command(
    command: TranscodeCommand,
    *,
    process_log: logging.Logger | None = None,
) -> int:
    """RU: Запускает команду и ждёт завершения.

    Если передан process_log, stdout и stderr объединяются и каждая строка
    пишется в него. Иначе вывод наследуется от текущего процесса.

    EN: Start the command and wait for it to finish.

    With a process_log, stdout and stderr are merged and every line is written
    to it. Otherwise output is inherited from the current process.

    Returns:
        The transcoder exit code, or 127 if the executable was not found.

    """
    try:
        if process_log is None:
            p = command.start()
        else:
            p = command.start(
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
            )
    except FileNotFoundError:
        LOGGER.error("%s not found; is FFmpeg installed?", command.executable)
        return EXIT_NOT_FOUND

    try:
        if process_log is not None and p.stdout is not None:
            for line in p.stdout:
                process_log.info(line.rstrip())
        rc = p.wait()
    except KeyboardInterrupt:
        stop(p)
        raise

    if rc != 0:
        LOGGER.error("ffmpeg exited with code %s", rc)
    else:
        LOGGER.info("ffmpeg finished")
    return rc
