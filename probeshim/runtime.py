"""Passthrough to the real ffprobe binary.

The real binary inherits stdin, stdout and stderr, so its output reaches
the caller untouched.  Every call is bounded by a timeout.
"""
import logging
import subprocess
import sys
from pathlib import Path

from .errors import SubprocessFailure

log = logging.getLogger(__name__)

# Prevent a console window from flashing up on Windows.
_SUBPROCESS_KWARGS: dict = {}
if sys.platform == "win32":
    _SUBPROCESS_KWARGS["creationflags"] = subprocess.CREATE_NO_WINDOW


def is_real_ffprobe_available(path: str) -> bool:
    """Return True when *path* names an existing file."""
    return Path(path).is_file()


def run_real_ffprobe(path: str, args: list[str], timeout: float) -> int:
    """
    Run the real ffprobe with *args* and return its exit code.

    A missing binary is not an error: the call succeeds with no output.

    Args:
        path: Location of the real ffprobe.
        args: Arguments to forward (without the program name).
        timeout: Seconds to wait before giving up.

    Returns:
        The real ffprobe's exit code, or 0 if it is not installed.

    Raises:
        SubprocessFailure: If the binary cannot be started or times out.
    """
    if not is_real_ffprobe_available(path):
        log.warning("Real ffprobe not found at %s. Exiting gracefully.", path)
        return 0

    log.info("Falling back to real ffprobe: %s %s", path, args)
    try:
        result = subprocess.run(
            [path, *args],
            timeout=timeout,
            check=False,
            **_SUBPROCESS_KWARGS,
        )
    except subprocess.TimeoutExpired as exc:
        log.error("Real ffprobe timed out after %.1fs", timeout)
        raise SubprocessFailure(f"ffprobe command timed out after {timeout:g}s") from exc
    except OSError as exc:
        log.error("Error executing real ffprobe: %s", exc)
        raise SubprocessFailure(f"Error executing ffprobe: {exc}") from exc

    log.info("Real ffprobe exited with code %d", result.returncode)
    if result.returncode < 0:
        # Killed by a signal: report it the way a shell would.
        return 128 - result.returncode
    return result.returncode
