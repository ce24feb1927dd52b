"""
probeshim - ffprobe stand-in

Synthesizes ffprobe reports from release file names and falls back to
the real ffprobe for everything else.
"""
import logging

from .models import (
    Category,
    ParsedHint,
    Disposition,
    StreamTags,
    FormatTags,
    Stream,
    Format,
    MediaReport
)
from .errors import (
    ShimError,
    ParseError,
    ClassificationMiss,
    SerializationError,
    UnsupportedFormatRequest,
    ArgumentScanError,
    SubprocessFailure
)
from .parser import parse_hint, try_parse_hint
from .classifier import classify, classify_with_hint
from .templates import get_template
from .enrichment import enrich
from .report import build_report, serialize

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.3.0"
__all__ = [
    "Category",
    "ParsedHint",
    "Disposition",
    "StreamTags",
    "FormatTags",
    "Stream",
    "Format",
    "MediaReport",
    "ShimError",
    "ParseError",
    "ClassificationMiss",
    "SerializationError",
    "UnsupportedFormatRequest",
    "ArgumentScanError",
    "SubprocessFailure",
    "parse_hint",
    "try_parse_hint",
    "classify",
    "classify_with_hint",
    "get_template",
    "enrich",
    "build_report",
    "serialize",
]
