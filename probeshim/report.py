"""Report assembly and serialization.

build_report() runs the whole synthesis pipeline for one input path:
tokenize, classify, clone the template, enrich, then fill the cosmetic
fields real ffprobe output always carries.  serialize() renders the
result the way ``ffprobe -print_format json`` does.
"""
import dataclasses
import json
import logging
from pathlib import PurePath
from typing import Any

from .classifier import classify_with_hint
from .enrichment import enrich
from .errors import ClassificationMiss, SerializationError, UnsupportedFormatRequest
from .models import Category, Disposition, FormatTags, MediaReport, StreamTags
from .parser import base_name, try_parse_hint
from .templates import get_template

log = logging.getLogger(__name__)

CREATION_TIME = "2021-01-01T00:00:00.000000Z"
ENCODER = "libebml v1.4.2 + libmatroska v1.6.4"
LANGUAGE = "eng"
FRAME_RATE = "24000/1001"
PROBE_SCORE = 100

CONTAINERS = {
    ".mkv": ("matroska,webm", "Matroska / WebM"),
    ".webm": ("matroska,webm", "Matroska / WebM"),
    ".mp4": ("mov,mp4,m4a,3gp,3g2,mj2", "QuickTime / MOV"),
    ".m4v": ("mov,mp4,m4a,3gp,3g2,mj2", "QuickTime / MOV"),
    ".mov": ("mov,mp4,m4a,3gp,3g2,mj2", "QuickTime / MOV"),
    ".avi": ("avi", "AVI (Audio Video Interleaved)"),
}

CODEC_LONG_NAMES = {
    "h264": "H.264 / AVC / MPEG-4 AVC / MPEG-4 part 10",
    "hevc": "H.265 / HEVC (High Efficiency Video Coding)",
    "mpeg4": "MPEG-4 part 2",
    "mpeg2video": "MPEG-2 video",
    "vc1": "SMPTE VC-1",
    "av1": "Alliance for Open Media AV1",
    "vp9": "Google VP9",
    "aac": "AAC (Advanced Audio Coding)",
    "ac3": "ATSC A/52A (AC-3)",
    "eac3": "ATSC A/52B (AC-3, E-AC-3)",
    "dts": "DCA (DTS Coherent Acoustics)",
    "truehd": "TrueHD",
    "flac": "FLAC (Free Lossless Audio Codec)",
}

CHANNEL_LAYOUTS = {1: "mono", 2: "stereo", 6: "5.1(side)", 8: "7.1"}

SUPPORTED_WRITERS = ("json",)


def assemble(report: MediaReport, path: str) -> MediaReport:
    """
    Fill the fields that depend only on the path, never on hints.

    Args:
        report: Enriched (or template-default) report, modified in place.
        path: Input path exactly as the caller passed it.

    Returns:
        The same report.
    """
    fmt = report.format
    fmt.filename = path
    fmt.nb_streams = len(report.streams)
    fmt.nb_programs = 0
    fmt.start_time = "0.000000"
    fmt.probe_score = PROBE_SCORE
    container = CONTAINERS.get(PurePath(path).suffix.lower())
    if container:
        fmt.format_name, fmt.format_long_name = container
    fmt.tags = FormatTags(
        title=base_name(path),
        encoder=ENCODER,
        creation_time=CREATION_TIME,
    )

    for index, stream in enumerate(report.streams):
        stream.index = index
        stream.codec_long_name = CODEC_LONG_NAMES.get(stream.codec_name, stream.codec_name)
        stream.time_base = "1/1000"
        stream.start_time = "0.000000"
        stream.disposition = Disposition(default=1)
        stream.tags = StreamTags(language=LANGUAGE)
        if stream.is_video:
            stream.pix_fmt = "yuv420p"
            stream.color_range = "tv"
            stream.color_space = "bt709"
            stream.r_frame_rate = FRAME_RATE
            stream.avg_frame_rate = FRAME_RATE
        elif stream.is_audio:
            stream.sample_fmt = "fltp"
            stream.channel_layout = CHANNEL_LAYOUTS.get(stream.channels)
    return report


def build_report(path: str) -> MediaReport:
    """
    Synthesize a report for *path* from its file name alone.

    Raises:
        ClassificationMiss: If the name matches no template category.
    """
    hint = try_parse_hint(path)
    category = classify_with_hint(path, hint)
    if category is Category.UNKNOWN:
        raise ClassificationMiss(base_name(path))

    report = get_template(category)
    if hint is not None:
        enrich(report, hint)
    else:
        log.info("No usable hint for %s, keeping %s defaults", base_name(path), category.value)
    return assemble(report, path)


def _to_plain(value: Any) -> Any:
    if dataclasses.is_dataclass(value):
        result = {}
        for f in dataclasses.fields(value):
            item = getattr(value, f.name)
            if item is None:
                continue
            if f.metadata.get("omitempty") and item in (0, ""):
                continue
            result[f.name] = _to_plain(item)
        return result
    if isinstance(value, list):
        return [_to_plain(item) for item in value]
    return value


def report_to_dict(report: MediaReport) -> dict[str, Any]:
    """Convert a report to plain dicts, dropping empty optional fields."""
    return _to_plain(report)


def parse_output_format(output_format: str) -> tuple[str, dict[str, str]]:
    """Split an ffprobe writer spec like ``json=compact=1`` into name and options."""
    name, _, raw_options = output_format.partition("=")
    options = {}
    for part in raw_options.split(":"):
        if not part:
            continue
        key, _, value = part.partition("=")
        options[key] = value
    return name.strip().lower(), options


def serialize(report: MediaReport, output_format: str = "json") -> str:
    """
    Render *report* with the requested ffprobe writer.

    Raises:
        UnsupportedFormatRequest: If the writer is not json.
        SerializationError: If the report cannot be encoded.
    """
    writer, options = parse_output_format(output_format)
    if writer not in SUPPORTED_WRITERS:
        raise UnsupportedFormatRequest(output_format)

    compact = options.get("compact", options.get("c", "0")) in ("1", "true")
    try:
        return json.dumps(
            report_to_dict(report),
            indent=None if compact else 4,
            ensure_ascii=False,
        )
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Cannot encode report: {exc}") from exc


def encode_output(text: str) -> bytes:
    """
    Encode a serialized report for stdout.

    Undecodable bytes from the file name (carried as lone surrogates)
    are written back as the original bytes.

    Raises:
        SerializationError: If *text* holds characters UTF-8 cannot encode.
    """
    try:
        return text.encode("utf-8", errors="surrogateescape")
    except UnicodeEncodeError as exc:
        raise SerializationError(f"Cannot encode report: {exc}") from exc
