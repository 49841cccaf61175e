"""Extracts structured album picks from a free-form chat reply.

The recommender's system prompt asks the model to embed each pick as::

    RECOMMENDATION: {"albumTitle": "...", "artist": "...", "cover": "🎸",
                     "matchPercentage": 92, "genres": [...], "reasoning": "..."}

:func:`parse_recommendations` pulls every such occurrence out of the
reply, in order of appearance, and returns the remaining prose
separately.

Malformed occurrences
---------------------
An occurrence whose text does not decode as JSON is dropped from the
recommendation list and left untouched in the prose.  Every decoded
object is accepted; :class:`AlbumRecommendation` coerces loosely typed
values such as ``"92%"`` or a bare genre string.

The object pattern ``\\{[^}]+\\}`` stops at the first closing brace, so a
recommendation can hold lists but not nested objects; the prompt never
asks for nested objects.
"""

from __future__ import annotations

import json
import re

import structlog

from musicboard.models.chat import AlbumRecommendation, ChatReply
from musicboard.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

RECOMMENDATION_MARKER = "RECOMMENDATION:"
_RECOMMENDATION_RE = re.compile(re.escape(RECOMMENDATION_MARKER) + r"\s*(\{[^}]+\})")


def parse_recommendations(text: str) -> ChatReply:
    """Split *text* into cleaned prose and the recommendations embedded in it."""
    recommendations: list[AlbumRecommendation] = []

    def _extract(match: re.Match[str]) -> str:
        raw = match.group(1)
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError as exc:
            _logger.warning("recommendation_parse_failed", snippet=raw[:120], error=str(exc))
            return match.group(0)
        recommendations.append(AlbumRecommendation.model_validate(decoded))
        return ""

    content = _RECOMMENDATION_RE.sub(_extract, text or "").strip()

    _logger.debug("recommendations_parsed", count=len(recommendations))
    return ChatReply(content=content, recommendations=recommendations)
