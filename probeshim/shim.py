#!/usr/bin/env python3
"""
ffprobe-shim - filename-based ffprobe stand-in

Answers ffprobe calls for files that look like TV episodes or movies
with a report synthesized from the file name.  Anything else is handed
to the real ffprobe unchanged.
"""
import logging
import sys

from .args import rewrite_tuning_options, scan_arguments
from .config import ShimConfig, load_config
from .errors import ShimError, SubprocessFailure
from .report import build_report, encode_output, serialize
from .runtime import run_real_ffprobe

log = logging.getLogger("probeshim")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(config: ShimConfig) -> None:
    """Send package logs to the configured file.

    stdout is reserved for the report, so a log file that cannot be
    opened leaves logging disabled rather than falling back to a stream.
    """
    for old in list(log.handlers):
        log.removeHandler(old)
        old.close()
    try:
        handler: logging.Handler = logging.FileHandler(
            config.log_file, mode="a", encoding="utf-8", errors="backslashreplace"
        )
    except OSError:
        handler = logging.NullHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    log.addHandler(handler)
    log.setLevel(getattr(logging, config.log_level, logging.INFO))
    log.propagate = False


def passthrough(config: ShimConfig, argv: list[str]) -> int:
    """Forward the call to the real ffprobe and mirror its exit code."""
    args = list(argv)
    if config.reduce_probing:
        args = rewrite_tuning_options(args, factor=config.reduction_factor)
    try:
        return run_real_ffprobe(config.real_ffprobe_path, args, timeout=config.timeout)
    except SubprocessFailure as e:
        print(f"ffprobe-shim: {e}", file=sys.stderr)
        return 1


def synthesize(argv: list[str]) -> bytes | None:
    """
    Try to answer the call with a synthesized report.

    Returns:
        The encoded report, or None when the call must be passed through.
    """
    request = scan_arguments(argv)
    if request.list_pixel_formats:
        log.info("Pixel format listing requested, passing through")
        return None
    if request.input_file is None:
        log.info("No input file found, passing through")
        return None

    log.info("Processing file: %s", request.input_file)
    report = build_report(request.input_file)
    return encode_output(serialize(report, request.output_format))


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    if argv is None:
        argv = sys.argv[1:]

    config = load_config()
    setup_logging(config)
    for warning in config.warnings:
        log.warning(warning)

    if not config.enabled:
        log.info("USE_FFPROBE_SHIM not set. Passing through to real ffprobe.")
        return passthrough(config, argv)

    log.info("FFProbe shim called with args: %s", " ".join(argv))

    try:
        output = synthesize(argv)
    except ShimError as e:
        log.info("Falling back to real ffprobe: %s", e)
        output = None
    except Exception:
        # Any defect in synthesis must still leave the caller a working ffprobe.
        log.exception("Unexpected error while synthesizing report")
        output = None

    if output is None:
        return passthrough(config, argv)

    sys.stdout.flush()
    sys.stdout.buffer.write(output)
    sys.stdout.buffer.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
