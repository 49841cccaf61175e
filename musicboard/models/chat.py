"""Chat models for the AI music recommender.

The chat model is asked to embed structured picks in its prose as
``RECOMMENDATION: {...}`` lines.  :class:`AlbumRecommendation` is the
validated shape of one such line; field names stay camelCase because
they are the literal JSON keys the prompt asks the model to produce.
"""

from __future__ import annotations

import math
import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_RECOMMENDATION_COVER = "🎵"

_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")


class ChatMessage(BaseModel):
    """One turn of the conversation as sent by the page."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str = Field(min_length=1)

    @field_validator("content")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("content must not be blank")
        return value


class AlbumRecommendation(BaseModel):
    """A structured album pick extracted from a chat reply.

    Every field has a default because the model does not always emit all
    six keys; unknown keys are kept so nothing the model said is lost.
    Values are coerced rather than rejected: ``"92%"`` becomes ``92``, a
    bare genre string becomes a one-item list, ``null`` falls back to the
    field default.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    albumTitle: str = ""  # noqa: N815
    artist: str = ""
    cover: str = DEFAULT_RECOMMENDATION_COVER
    matchPercentage: int = Field(default=0, ge=0, le=100)  # noqa: N815
    genres: list[str] = Field(default_factory=list)
    reasoning: str = ""

    @field_validator("albumTitle", "artist", "reasoning", mode="before")
    @classmethod
    def _as_text(cls, value: object) -> str:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    @field_validator("cover", mode="before")
    @classmethod
    def _as_cover(cls, value: object) -> str:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_RECOMMENDATION_COVER
        return value if isinstance(value, str) else str(value)

    @field_validator("matchPercentage", mode="before")
    @classmethod
    def _as_percentage(cls, value: object) -> int:
        if isinstance(value, bool) or value is None:
            return 0
        if isinstance(value, str):
            match = _NUMBER_RE.search(value)
            if match is None:
                return 0
            value = float(match.group(0))
        if not isinstance(value, (int, float)):
            return 0
        if isinstance(value, float) and not math.isfinite(value):
            return 0
        return max(0, min(100, round(value)))

    @field_validator("genres", mode="before")
    @classmethod
    def _as_genres(cls, value: object) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [value.strip()] if value.strip() else []
        if isinstance(value, (list, tuple)):
            return [item if isinstance(item, str) else str(item) for item in value if item is not None]
        return [str(value)]


class ChatReply(BaseModel):
    """The prose of a chat reply plus the recommendations parsed out of it."""

    model_config = ConfigDict(frozen=True)

    content: str
    recommendations: list[AlbumRecommendation] = Field(default_factory=list)
