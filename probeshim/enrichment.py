"""Enrichment of a cloned template with filename-derived specifics.

The rules in ENRICHMENT_RULES run in order against the same report.
Each rule is independent; order only matters where two rules touch the
same field (uhd_codec runs after video_codec so 4K always ends up hevc).
"""
import logging
from types import MappingProxyType
from typing import Callable, Mapping

from .models import MediaReport, ParsedHint

log = logging.getLogger(__name__)

ANIME_DURATION = "24.000000"
EPISODE_DURATION = "2700.000000"
FEATURE_DURATION = "7200.000000"

UHD_LABELS = ("2160p", "4k")

# quality label -> (width, height, video bit rate)
RESOLUTIONS = MappingProxyType({
    "720p": (1280, 720, 3_000_000),
    "1080p": (1920, 1080, 8_000_000),
    "2160p": (3840, 2160, 25_000_000),
    "4k": (3840, 2160, 25_000_000),
})

FILE_SIZES = MappingProxyType({
    "720p": 1_000_000_000,
    "1080p": 3_500_000_000,
    "2160p": 15_000_000_000,
    "4k": 15_000_000_000,
})
DEFAULT_FILE_SIZE = 2_000_000_000

DEFAULT_CHANNELS = 2
# Checked in order; the first marker found wins.
CHANNEL_MARKERS = (("7.1", 8), ("5.1", 6))

# Synonym tables are ordered: substring search walks them top to bottom,
# so longer tokens sit above the shorter tokens they contain.
VIDEO_CODEC_SYNONYMS: tuple[tuple[str, str], ...] = (
    ("x264", "h264"),
    ("x265", "hevc"),
    ("h.264", "h264"),
    ("h.265", "hevc"),
    ("h264", "h264"),
    ("h265", "hevc"),
    ("hevc", "hevc"),
    ("avc", "h264"),
    ("10bit", "hevc"),
    ("xvid", "mpeg4"),
    ("divx", "mpeg4"),
    ("vc-1", "vc1"),
    ("mpeg-2", "mpeg2video"),
    ("av1", "av1"),
    ("vp9", "vp9"),
    ("bluray", "h264"),
    ("blu-ray", "h264"),
    ("web-dl", "h264"),
    ("webrip", "h264"),
    ("hdtv", "h264"),
)

AUDIO_CODEC_SYNONYMS: tuple[tuple[str, str], ...] = (
    ("dts-hd", "dts"),
    ("dtshd", "dts"),
    ("dts", "dts"),
    ("dolby truehd", "truehd"),
    ("dolby atmos", "truehd"),
    ("truehd", "truehd"),
    ("atmos", "truehd"),
    ("dolby digital plus", "eac3"),
    ("eac3", "eac3"),
    ("dolby digital", "ac3"),
    ("dd5.1", "ac3"),
    ("ac3", "ac3"),
    ("dolby", "ac3"),
    ("dd", "ac3"),
    ("aac", "aac"),
    ("flac", "flac"),
    ("5.1", "ac3"),
    ("7.1", "dts"),
)

VIDEO_CODECS = MappingProxyType(dict(VIDEO_CODEC_SYNONYMS))
AUDIO_CODECS = MappingProxyType(dict(AUDIO_CODEC_SYNONYMS))


def lookup_codec(
    label: str,
    fields: tuple[str, ...],
    synonyms: tuple[tuple[str, str], ...],
    table: Mapping[str, str],
) -> str | None:
    """
    Map a codec label to an ffprobe codec name.

    Tries an exact (case-insensitive) match of *label* in *table* first, then a
    substring search of *label* and each field in *fields*, in order.  The first
    synonym found wins.

    Returns:
        The codec name, or None when nothing matched.
    """
    if label and label.lower() in table:
        return table[label.lower()]
    for value in (label, *fields):
        if not value:
            continue
        lowered = value.lower()
        for token, codec in synonyms:
            if token in lowered:
                return codec
    return None


def quality_key(hint: ParsedHint) -> str:
    return hint.quality.lower()


def _apply_duration(report: MediaReport, hint: ParsedHint) -> None:
    if hint.has_episode:
        if "anime" in hint.title.lower():
            duration = ANIME_DURATION
        else:
            duration = EPISODE_DURATION
    else:
        duration = FEATURE_DURATION

    for stream in report.streams:
        stream.duration = duration
    report.format.duration = duration


def _apply_resolution(report: MediaReport, hint: ParsedHint) -> None:
    resolution = RESOLUTIONS.get(quality_key(hint))
    if resolution is None:
        return
    width, height, bit_rate = resolution
    for stream in report.video_streams():
        stream.width = width
        stream.height = height
        stream.bit_rate = str(bit_rate)


def _apply_video_codec(report: MediaReport, hint: ParsedHint) -> None:
    codec = lookup_codec(
        hint.codec,
        (hint.group, hint.title, hint.container, hint.source),
        VIDEO_CODEC_SYNONYMS,
        VIDEO_CODECS,
    )
    if codec is None:
        return
    for stream in report.video_streams():
        stream.codec_name = codec


def _apply_uhd_codec(report: MediaReport, hint: ParsedHint) -> None:
    # 4K releases are reported as hevc whatever the codec hint said.
    if quality_key(hint) not in UHD_LABELS:
        return
    for stream in report.video_streams():
        stream.codec_name = "hevc"


def _apply_audio_codec(report: MediaReport, hint: ParsedHint) -> None:
    codec = lookup_codec(
        hint.audio_codec,
        (hint.group, hint.title),
        AUDIO_CODEC_SYNONYMS,
        AUDIO_CODECS,
    )
    if codec is None:
        return
    for stream in report.audio_streams():
        stream.codec_name = codec


def _apply_channels(report: MediaReport, hint: ParsedHint) -> None:
    channels = DEFAULT_CHANNELS
    for value in (hint.group, hint.audio_channels):
        matched = next((count for marker, count in CHANNEL_MARKERS if marker in value), None)
        if matched is not None:
            channels = matched
            break
    for stream in report.audio_streams():
        stream.channels = channels


def _apply_size(report: MediaReport, hint: ParsedHint) -> None:
    report.format.size = str(FILE_SIZES.get(quality_key(hint), DEFAULT_FILE_SIZE))


def _apply_total_bit_rate(report: MediaReport, hint: ParsedHint) -> None:
    total = 0
    for stream in report.streams:
        try:
            total += int(stream.bit_rate)
        except (TypeError, ValueError):
            log.debug("Skipping unparseable bit rate %r on stream %d", stream.bit_rate, stream.index)
    if total > 0:
        report.format.bit_rate = str(total)


EnrichmentRule = Callable[[MediaReport, ParsedHint], None]

ENRICHMENT_RULES: tuple[tuple[str, EnrichmentRule], ...] = (
    ("duration", _apply_duration),
    ("resolution", _apply_resolution),
    ("video_codec", _apply_video_codec),
    ("uhd_codec", _apply_uhd_codec),
    ("audio_codec", _apply_audio_codec),
    ("channels", _apply_channels),
    ("size", _apply_size),
    ("bit_rate", _apply_total_bit_rate),
)


def enrich(report: MediaReport, hint: ParsedHint) -> MediaReport:
    """Apply every enrichment rule to *report* in place and return it."""
    for _, rule in ENRICHMENT_RULES:
        rule(report, hint)
    log.debug(
        "Enriched report: video=%s audio=%s duration=%s size=%s bit_rate=%s",
        [s.codec_name for s in report.video_streams()],
        [s.codec_name for s in report.audio_streams()],
        report.format.duration,
        report.format.size,
        report.format.bit_rate,
    )
    return report
