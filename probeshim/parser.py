"""Parser module for extracting release hints from file names.

The heavy lifting is done by guessit; this module only flattens its
guess into a ParsedHint and decides when a guess is too thin to use.
"""
import logging
from pathlib import PurePath
from typing import Any

from guessit import guessit
from guessit.api import GuessitException

from .errors import ParseError
from .models import ParsedHint

log = logging.getLogger(__name__)

# A guess needs at least one of these to count as release naming.
# A bare title (and maybe a container) is what guessit returns for any
# random file name.
STRUCTURAL_KEYS = (
    "season",
    "episode",
    "year",
    "screen_size",
    "video_codec",
    "audio_codec",
    "source",
    "release_group",
)


def base_name(path: str) -> str:
    """Return the last component of *path*."""
    return PurePath(path).name or path


def _first(value: Any) -> Any:
    """Collapse list guesses (multi-episode, dual audio) to the first item."""
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def _as_int(value: Any) -> int:
    value = _first(value)
    try:
        return int(value) if value is not None else 0
    except (TypeError, ValueError):
        return 0


def _as_str(value: Any) -> str:
    value = _first(value)
    return str(value) if value is not None else ""


def parse_hint(filename: str) -> ParsedHint:
    """
    Parse a release filename into a ParsedHint.

    Args:
        filename: File name or full path; only the last component is used.

    Returns:
        ParsedHint with every field guessit could recognize.

    Raises:
        ParseError: If guessit fails or the name has no release structure.
    """
    name = base_name(filename)
    if not name.strip():
        raise ParseError(filename, "empty file name")

    try:
        guess = guessit(name)
    except GuessitException as exc:
        raise ParseError(name, str(exc)) from exc

    if not any(guess.get(key) for key in STRUCTURAL_KEYS):
        raise ParseError(name, "no release naming tokens")

    return ParsedHint(
        title=_as_str(guess.get("title")),
        season=_as_int(guess.get("season")),
        episode=_as_int(guess.get("episode")),
        year=_as_int(guess.get("year")),
        quality=_as_str(guess.get("screen_size")),
        codec=_as_str(guess.get("video_codec")),
        group=_as_str(guess.get("release_group")),
        container=_as_str(guess.get("container")),
        audio_codec=_as_str(guess.get("audio_codec")),
        audio_channels=_as_str(guess.get("audio_channels")),
        source=_as_str(guess.get("source")),
    )


def try_parse_hint(filename: str) -> ParsedHint | None:
    """Like parse_hint(), but return None instead of raising ParseError."""
    try:
        hint = parse_hint(filename)
    except ParseError as exc:
        log.debug("Tokenizer gave up: %s", exc)
        return None
    log.debug("Parsed hint for %s: %s", base_name(filename), hint)
    return hint

