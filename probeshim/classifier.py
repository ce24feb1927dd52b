"""Template classification: decide whether a filename is a TV episode,
a movie, or something the shim should leave alone.

Classification is an ordered list of rules.  Each rule looks at the
base filename (and the parsed hint, when the tokenizer produced one)
and either returns a Category or None.  The first rule that answers
wins, so earlier rules take precedence regardless of how many later
rules would also match.
"""
import logging
import re
from typing import Callable

from .models import Category, ParsedHint
from .parser import base_name, try_parse_hint

log = logging.getLogger(__name__)

Rule = Callable[[str, ParsedHint | None], Category | None]

# 19xx/20xx anywhere in the name, dates like 20230415 included.
_YEAR = r'(?:19|20)\d{2}'
_CONTAINER = r'.*\.(?:mkv|mp4|avi)$'

# (pattern, category) pairs tried in order by the regex rule.
PATTERNS: tuple[tuple[re.Pattern, Category], ...] = (
    # ShowName.S01E02.Quality.Source.Codec.Extension
    (re.compile(r'S\d{2}E\d{2}' + _CONTAINER, re.IGNORECASE), Category.TV_SHOW),
    # MovieName.Year.Quality.Source.Codec.Extension
    (re.compile(_YEAR + _CONTAINER, re.IGNORECASE), Category.MOVIE),
)

EPISODE_MARKERS = ("S01E", "S02E", "SEASON", "EPISODE")

YEAR_TOKEN = re.compile(_YEAR)


def _from_hint(name: str, hint: ParsedHint | None) -> Category | None:
    if hint is None:
        return None
    if hint.episode != 0 or hint.season != 0:
        return Category.TV_SHOW
    if hint.year != 0:
        return Category.MOVIE
    return None


def _from_patterns(name: str, hint: ParsedHint | None) -> Category | None:
    for pattern, category in PATTERNS:
        if pattern.search(name):
            return category
    return None


def _from_episode_markers(name: str, hint: ParsedHint | None) -> Category | None:
    upper = name.upper()
    if any(marker in upper for marker in EPISODE_MARKERS):
        return Category.TV_SHOW
    return None


def _from_year_token(name: str, hint: ParsedHint | None) -> Category | None:
    if YEAR_TOKEN.search(name):
        return Category.MOVIE
    return None


# Order is the precedence contract.
CLASSIFICATION_RULES: tuple[tuple[str, Rule], ...] = (
    ("hint", _from_hint),
    ("pattern", _from_patterns),
    ("episode_marker", _from_episode_markers),
    ("year_token", _from_year_token),
)


def explain(filename: str, hint: ParsedHint | None) -> tuple[Category, str | None]:
    """
    Run the rules and report which one decided.

    Args:
        filename: File name or path; only the last component is examined.
        hint: Tokenizer output for the same name, or None if it failed.

    Returns:
        Tuple of (category, rule_name).  rule_name is None for UNKNOWN.
    """
    name = base_name(filename)
    for rule_name, rule in CLASSIFICATION_RULES:
        category = rule(name, hint)
        if category is not None:
            return category, rule_name
    return Category.UNKNOWN, None


def classify_with_hint(filename: str, hint: ParsedHint | None) -> Category:
    """Classify *filename* using an already parsed hint."""
    category, rule_name = explain(filename, hint)
    log.info("Classified %s as %s (rule: %s)", base_name(filename), category.value, rule_name)
    return category


def classify(filename: str) -> Category:
    """Classify *filename*, running the tokenizer first."""
    return classify_with_hint(filename, try_parse_hint(filename))
