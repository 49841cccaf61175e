"""Musicboard data models.

All models are frozen Pydantic v2 classes.  Upstream DTOs (``catalog``,
``vinyl``, ``chat``) define the normalised shapes the function endpoints
return; store models (``ratings``, ``boards``, ``lists``, ``listen_later``,
``profile``) mirror the rows of the relational store.
"""

from musicboard.models.boards import Board, BoardDetail, BoardItem, BoardSort, BoardType, LikeState
from musicboard.models.catalog import (
    AlbumDetail,
    AlbumSummary,
    AlbumTrack,
    ArtistSummary,
    CatalogSearchResults,
    TrackSummary,
)
from musicboard.models.chat import AlbumRecommendation, ChatMessage, ChatReply
from musicboard.models.listen_later import ListenLaterEntry, ListenLaterResult
from musicboard.models.lists import ListItem, ListLikeState, MusicList
from musicboard.models.profile import Profile
from musicboard.models.ratings import AlbumRater, Rating, RatingSummary, Review, TargetType, TrackRatingStats
from musicboard.models.vinyl import VinylRelease, VinylSearchResult

__all__ = [
    "AlbumDetail",
    "AlbumRater",
    "AlbumRecommendation",
    "AlbumSummary",
    "AlbumTrack",
    "ArtistSummary",
    "Board",
    "BoardDetail",
    "BoardItem",
    "BoardSort",
    "BoardType",
    "CatalogSearchResults",
    "ChatMessage",
    "ChatReply",
    "LikeState",
    "ListItem",
    "ListLikeState",
    "ListenLaterEntry",
    "ListenLaterResult",
    "MusicList",
    "Profile",
    "Rating",
    "RatingSummary",
    "Review",
    "TargetType",
    "TrackRatingStats",
    "TrackSummary",
    "VinylRelease",
    "VinylSearchResult",
]
