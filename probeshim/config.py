"""Configuration loaded from the environment and optional .env files."""
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from dotenv import load_dotenv

from .args import DEFAULT_REDUCTION_FACTOR

DEFAULT_REAL_FFPROBE = "/usr/bin/ffprobe.real"
DEFAULT_LOG_FILE = "/tmp/ffprobe-shim.log"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_TIMEOUT = 5.0  # seconds

FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class ShimConfig:
    """Settings for one shim invocation."""
    enabled: bool = False
    real_ffprobe_path: str = DEFAULT_REAL_FFPROBE
    log_file: str = DEFAULT_LOG_FILE
    log_level: str = DEFAULT_LOG_LEVEL
    timeout: float = DEFAULT_TIMEOUT
    reduce_probing: bool = False
    reduction_factor: int = DEFAULT_REDUCTION_FACTOR
    # Problems found while loading; logged once logging is set up.
    warnings: list[str] = field(default_factory=list)


def load_env_files() -> None:
    """
    Load .env files without overriding variables already set.

    Priority:
    1. Process environment
    2. .env file in current directory
    3. .env file in user home directory
    """
    for env_path in (Path.cwd() / ".env", Path.home() / ".env"):
        if env_path.is_file():
            load_dotenv(env_path, override=False)


def _flag(value: str | None) -> bool:
    """A variable counts as set unless it spells out a false value."""
    if value is None:
        return False
    return value.strip().lower() not in FALSE_VALUES


def _number(environ: Mapping[str, str], name: str, default, cast, warnings: list[str]):
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw)
    except ValueError:
        warnings.append(f"Ignoring {name}={raw!r}: not a number")
        return default
    if isinstance(value, float) and not math.isfinite(value):
        warnings.append(f"Ignoring {name}={raw!r}: not a finite number")
        return default
    if value <= 0:
        warnings.append(f"Ignoring {name}={raw!r}: must be positive")
        return default
    return value


def load_config(environ: Mapping[str, str] | None = None) -> ShimConfig:
    """
    Build a ShimConfig.

    Args:
        environ: Variables to read.  Defaults to os.environ after loading
                 any .env files.

    Returns:
        The resolved configuration.
    """
    if environ is None:
        load_env_files()
        environ = os.environ

    warnings: list[str] = []
    return ShimConfig(
        enabled=_flag(environ.get("USE_FFPROBE_SHIM")),
        real_ffprobe_path=environ.get("REAL_FFPROBE_PATH") or DEFAULT_REAL_FFPROBE,
        log_file=environ.get("FFPROBE_SHIM_LOG") or DEFAULT_LOG_FILE,
        log_level=(environ.get("FFPROBE_SHIM_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
        timeout=_number(environ, "FFPROBE_SHIM_TIMEOUT", DEFAULT_TIMEOUT, float, warnings),
        reduce_probing=_flag(environ.get("FFPROBE_SHIM_REDUCE_PROBING")),
        reduction_factor=_number(
            environ, "FFPROBE_SHIM_REDUCTION_FACTOR", DEFAULT_REDUCTION_FACTOR, int, warnings
        ),
        warnings=warnings,
    )
