"""Scanning of ffprobe-style argument vectors.

Only the options that decide routing are read: the output writer and
the pixel-format listing.  The tuning options (-probesize and
-analyzeduration) can be rewritten before a call is forwarded.
"""
import argparse
import logging
from dataclasses import dataclass
from pathlib import Path

from .errors import ArgumentScanError

log = logging.getLogger(__name__)

DEFAULT_OUTPUT_FORMAT = "json"
DEFAULT_REDUCTION_FACTOR = 10
DEFAULT_TUNING_VALUE = "500000"
TUNING_OPTIONS = ("-probesize", "-analyzeduration")


@dataclass
class ProbeRequest:
    """What the shim needs to know about one ffprobe invocation."""
    input_file: str | None
    output_format: str = DEFAULT_OUTPUT_FORMAT
    list_pixel_formats: bool = False


class _ArgumentScanner(argparse.ArgumentParser):
    """ArgumentParser that raises instead of printing usage and exiting."""

    def error(self, message: str):
        raise ArgumentScanError(message)


FORMAT_OPTIONS = ("-of", "-print_format", "-output_format")
PIXEL_FORMATS_OPTION = "-pix_fmts"


def _build_scanner() -> argparse.ArgumentParser:
    parser = _ArgumentScanner(
        prog="ffprobe",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument(
        *FORMAT_OPTIONS,
        dest="output_format",
        default=DEFAULT_OUTPUT_FORMAT,
    )
    parser.add_argument(
        PIXEL_FORMATS_OPTION,
        dest="list_pixel_formats",
        action="store_true",
    )
    return parser


def _routing_tokens(argv: list[str]) -> list[str]:
    """Keep only exact routing options (and format values).

    argparse matches single-dash prefixes on some Python versions, which
    would read ffprobe's own -o as -of.
    """
    tokens = []
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg in FORMAT_OPTIONS:
            tokens.extend(argv[i:i + 2])
            i += 2
            continue
        if arg == PIXEL_FORMATS_OPTION:
            tokens.append(arg)
        i += 1
    return tokens


def scan_arguments(argv: list[str]) -> ProbeRequest:
    """
    Extract routing information from an ffprobe argument vector.

    The input file is the last argument that does not start with a dash
    and names an existing regular file.

    Args:
        argv: Arguments without the program name.

    Returns:
        ProbeRequest describing the call.

    Raises:
        ArgumentScanError: If a routing option is malformed.
    """
    known = _build_scanner().parse_args(_routing_tokens(argv))

    input_file = None
    for arg in argv:
        if arg.startswith("-"):
            continue
        if Path(arg).is_file():
            input_file = arg
            log.debug("Detected input file: %s", arg)

    if input_file is None:
        log.info("No input file detected")

    return ProbeRequest(
        input_file=input_file,
        output_format=known.output_format,
        list_pixel_formats=known.list_pixel_formats,
    )


def reduce_by_factor(value: str, factor: int = DEFAULT_REDUCTION_FACTOR) -> str:
    """
    Divide a numeric option value by *factor* (integer division).

    Raises:
        ValueError: If *value* is not an integer or *factor* is not positive.
    """
    if factor <= 0:
        raise ValueError(f"reduction factor must be positive, got {factor}")
    return str(int(value) // factor)


def rewrite_tuning_options(
    argv: list[str],
    factor: int = DEFAULT_REDUCTION_FACTOR,
    default: str = DEFAULT_TUNING_VALUE,
) -> list[str]:
    """
    Reduce -probesize and -analyzeduration before forwarding a call.

    Supplied values are divided by *factor*; options missing from *argv*
    are prepended with *default*.  Values that are not integers are
    forwarded unchanged.

    Returns:
        A new argument list; *argv* is not modified.
    """
    result = list(argv)
    present = set()
    i = 0
    while i < len(result):
        arg = result[i]
        if arg in TUNING_OPTIONS and i + 1 < len(result):
            present.add(arg)
            try:
                result[i + 1] = reduce_by_factor(result[i + 1], factor)
            except ValueError:
                log.warning("Leaving %s %r unchanged: not an integer", arg, result[i + 1])
            i += 2
            continue
        i += 1

    missing = []
    for option in TUNING_OPTIONS:
        if option not in present:
            missing.extend([option, default])
    return missing + result
