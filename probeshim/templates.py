"""Baseline reports for each template category.

The baselines are shared, read-only data.  Callers always work on the
copy returned by get_template().
"""
from types import MappingProxyType

from .models import Category, Format, MediaReport, Stream

TV_SHOW_DURATION = "2700.000000"
MOVIE_DURATION = "7200.000000"

MATROSKA = ("matroska,webm", "Matroska / WebM")


def _baseline(
    duration: str,
    video_bit_rate: str,
    audio_codec: str,
    audio_bit_rate: str,
    size: str,
    bit_rate: str,
) -> MediaReport:
    return MediaReport(
        streams=[
            Stream(
                index=0,
                codec_name="h264",
                codec_type="video",
                width=1920,
                height=1080,
                duration=duration,
                bit_rate=video_bit_rate,
            ),
            Stream(
                index=1,
                codec_name=audio_codec,
                codec_type="audio",
                channels=6,
                sample_rate="48000",
                duration=duration,
                bit_rate=audio_bit_rate,
            ),
        ],
        format=Format(
            nb_streams=2,
            format_name=MATROSKA[0],
            format_long_name=MATROSKA[1],
            duration=duration,
            size=size,
            bit_rate=bit_rate,
        ),
    )


TEMPLATES = MappingProxyType({
    Category.TV_SHOW: _baseline(
        duration=TV_SHOW_DURATION,
        video_bit_rate="5000000",
        audio_codec="aac",
        audio_bit_rate="384000",
        size="1500000000",
        bit_rate="5384000",
    ),
    Category.MOVIE: _baseline(
        duration=MOVIE_DURATION,
        video_bit_rate="8000000",
        audio_codec="dts",
        audio_bit_rate="1536000",
        size="3500000000",
        bit_rate="9536000",
    ),
})


def get_template(category: Category) -> MediaReport:
    """
    Return an independent copy of the baseline report for *category*.

    Raises:
        KeyError: If the category has no template (Category.UNKNOWN).
    """
    return TEMPLATES[category].clone()
