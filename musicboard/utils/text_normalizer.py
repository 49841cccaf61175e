"""Text normalization helpers for artist and release titles.

Upstream catalogs disagree on casing, punctuation and "The" prefixes
("The Beatles - Abbey Road" on Discogs vs "Abbey Road" by "Beatles"
typed by a user), so anything that compares a user query against an
upstream title goes through :func:`normalize_title` first.
"""

import re

from rapidfuzz import fuzz

_PUNCTUATION_RE = re.compile(r"[^\w\s]", re.UNICODE)
_WHITESPACE_RE = re.compile(r"\s+")
_LEADING_ARTICLE_RE = re.compile(r"^the\s+", re.IGNORECASE)


def normalize_title(text: str) -> str:
    """Lower-case, strip punctuation and a leading "The", collapse whitespace."""
    normalized = _PUNCTUATION_RE.sub(" ", text.strip().lower())
    normalized = _WHITESPACE_RE.sub(" ", normalized).strip()
    return _LEADING_ARTICLE_RE.sub("", normalized)


def match_confidence(query: str, candidate: str) -> float:
    """Return a 0.0-1.0 fuzzy similarity between *query* and *candidate*.

    Uses ``token_set_ratio`` so that a Discogs title of the form
    ``"Artist - Album"`` still scores 1.0 against the query
    ``"Artist Album"`` regardless of the separator or word order.
    """
    if not query or not candidate:
        return 0.0
    return round(fuzz.token_set_ratio(normalize_title(query), normalize_title(candidate)) / 100.0, 3)
