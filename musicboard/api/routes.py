"""FastAPI store routes for ratings, reviews, boards, lists, Listen Later and profiles.

Replaces the page-side data access of the hosted store with plain REST
endpoints.  The caller's identity arrives in the ``X-User-Id`` header,
set by the external auth service in front of this API; write routes
require it, read routes use it (when present) to show the viewer's own
rating, like state and private rows.

Services raise ``MusicboardError`` subclasses; the error-handling
middleware turns them into ``{error, detail}`` bodies (400 validation,
403 ownership, 404 unknown or hidden row).

# ─── API ROUTE MAP ────────────────────────────────────────────────────
#
# Endpoint                              Method  Description
# ─────────────────────────────────────────────────────────────────────
# /api/v1/albums/{id}/rating            PUT     Rate an album → summary
# /api/v1/albums/{id}/ratings           GET     Album rating summary
# /api/v1/albums/{id}/track-ratings     GET     Per-track stats for an album
# /api/v1/albums/{id}/raters            GET     Latest raters with their profiles
# /api/v1/albums/{id}/listen-later      POST    Save an album to Listen Later
# /api/v1/tracks/{id}/rating            PUT     Rate a track → summary
# /api/v1/tracks/{id}/ratings           GET     Track rating summary
# /api/v1/reviews/{target_id}           PUT     Create or edit my review
# /api/v1/reviews/{target_id}           GET     Reviews of a target
# /api/v1/reviews/{target_id}/mine      GET     My review of a target
# /api/v1/reviews/{target_id}           DELETE  Delete my review
# /api/v1/boards                        POST    Create a board
# /api/v1/boards                        GET     Public board feed
# /api/v1/boards/{id}                   GET     Board + items + like state
# /api/v1/boards/{id}                   DELETE  Delete my board
# /api/v1/boards/{id}/items             POST    Append an item
# /api/v1/boards/{id}/items/{item_id}   DELETE  Remove an item
# /api/v1/boards/{id}/like              POST    Toggle my like
# /api/v1/lists                         POST    Publish a list
# /api/v1/lists                         GET     Public list feed
# /api/v1/lists/{id}                    GET     One list with items
# /api/v1/lists/{id}                    DELETE  Delete my list
# /api/v1/lists/{id}/like               POST    Toggle my like
# /api/v1/listen-later                  GET     My Listen Later queue
# /api/v1/listen-later/{album_id}       DELETE  Remove an album from my queue
# /api/v1/profiles/me                   PUT     Create or update my profile
# /api/v1/profiles/{id}                 GET     A user's profile
# /api/v1/users/{id}/ratings            GET     A user's recent ratings
# /api/v1/users/{id}/boards             GET     A user's boards
# /api/v1/health                        GET     Health check + upstream status
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request

from musicboard.api.schemas import (
    AddBoardItemRequest,
    CreateBoardRequest,
    CreateListRequest,
    HealthResponse,
    ListenLaterRequest,
    ProfileUpdateRequest,
    RateRequest,
    RatingSummaryResponse,
    ReviewRequest,
    TrackRatingsResponse,
)
from musicboard.models.boards import Board, BoardDetail, BoardItem, BoardSort, LikeState
from musicboard.models.listen_later import ListenLaterEntry, ListenLaterResult
from musicboard.models.lists import ListItem, ListLikeState, MusicList
from musicboard.models.profile import Profile
from musicboard.models.ratings import AlbumRater, Rating, Review, TargetType
from musicboard.utils.errors import RecordNotFoundError
from musicboard.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter(prefix="/api/v1")

_VERSION = "0.1.0"


# ---------------------------------------------------------------------------
# Dependency injection helpers: resolve singletons from app.state
# ---------------------------------------------------------------------------


def _get_rating_service(request: Request) -> Any:
    return request.app.state.rating_service


def _get_board_service(request: Request) -> Any:
    return request.app.state.board_service


def _get_list_service(request: Request) -> Any:
    return request.app.state.list_service


def _get_profile_store(request: Request) -> Any:
    return request.app.state.profile_store


def _get_listen_later_service(request: Request) -> Any:
    return request.app.state.listen_later_service


def _get_user_id(x_user_id: Annotated[str | None, Header()] = None) -> str:
    """The signed-in caller; 401 when the auth service sent no identity."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Authentication required")
    return x_user_id.strip()


def _get_viewer_id(x_user_id: Annotated[str | None, Header()] = None) -> str | None:
    if x_user_id and x_user_id.strip():
        return x_user_id.strip()
    return None


RatingServiceDep = Annotated[Any, Depends(_get_rating_service)]
BoardServiceDep = Annotated[Any, Depends(_get_board_service)]
ListServiceDep = Annotated[Any, Depends(_get_list_service)]
ProfileStoreDep = Annotated[Any, Depends(_get_profile_store)]
ListenLaterServiceDep = Annotated[Any, Depends(_get_listen_later_service)]
UserIdDep = Annotated[str, Depends(_get_user_id)]
ViewerIdDep = Annotated[str | None, Depends(_get_viewer_id)]


# ---------------------------------------------------------------------------
# Ratings
# ---------------------------------------------------------------------------


@router.put("/albums/{album_id}/rating", response_model=RatingSummaryResponse)
async def rate_album(
    album_id: str,
    body: RateRequest,
    user_id: UserIdDep,
    ratings: RatingServiceDep,
) -> RatingSummaryResponse:
    summary = await ratings.rate(
        user_id,
        album_id,
        TargetType.ALBUM,
        body.rating,
        album_name=body.album_name,
        artist_name=body.artist_name,
        image_url=body.image_url,
    )
    return RatingSummaryResponse.from_summary(summary)


@router.get("/albums/{album_id}/ratings", response_model=RatingSummaryResponse)
async def get_album_ratings(
    album_id: str,
    viewer_id: ViewerIdDep,
    ratings: RatingServiceDep,
) -> RatingSummaryResponse:
    summary = await ratings.get_summary(album_id, TargetType.ALBUM, viewer_id)
    return RatingSummaryResponse.from_summary(summary)


@router.get("/albums/{album_id}/track-ratings", response_model=TrackRatingsResponse)
async def get_album_track_ratings(album_id: str, ratings: RatingServiceDep) -> TrackRatingsResponse:
    return TrackRatingsResponse(album_id=album_id, tracks=await ratings.get_track_summaries(album_id))


@router.get("/albums/{album_id}/raters", response_model=list[AlbumRater])
async def get_album_raters(
    album_id: str,
    ratings: RatingServiceDep,
    limit: int | None = Query(default=None, ge=1, le=50),
) -> list[AlbumRater]:
    return await ratings.get_album_raters(album_id, limit)


@router.put("/tracks/{track_id}/rating", response_model=RatingSummaryResponse)
async def rate_track(
    track_id: str,
    body: RateRequest,
    user_id: UserIdDep,
    ratings: RatingServiceDep,
) -> RatingSummaryResponse:
    summary = await ratings.rate(
        user_id,
        track_id,
        TargetType.TRACK,
        body.rating,
        album_id=body.album_id,
        album_name=body.album_name,
        artist_name=body.artist_name,
        image_url=body.image_url,
    )
    return RatingSummaryResponse.from_summary(summary)


@router.get("/tracks/{track_id}/ratings", response_model=RatingSummaryResponse)
async def get_track_ratings(
    track_id: str,
    viewer_id: ViewerIdDep,
    ratings: RatingServiceDep,
) -> RatingSummaryResponse:
    summary = await ratings.get_summary(track_id, TargetType.TRACK, viewer_id)
    return RatingSummaryResponse.from_summary(summary)


@router.get("/users/{user_id}/ratings", response_model=list[Rating])
async def get_user_ratings(
    user_id: str,
    ratings: RatingServiceDep,
    limit: int = Query(default=20, ge=1, le=100),
) -> list[Rating]:
    return await ratings.get_user_ratings(user_id, limit)


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------


@router.put("/reviews/{target_id}", response_model=Review)
async def submit_review(
    target_id: str,
    body: ReviewRequest,
    user_id: UserIdDep,
    ratings: RatingServiceDep,
) -> Review:
    return await ratings.submit_review(
        user_id,
        target_id,
        body.rating,
        body.review_text,
        target_type=body.target_type,
    )


@router.get("/reviews/{target_id}", response_model=list[Review])
async def get_reviews(
    target_id: str,
    ratings: RatingServiceDep,
    limit: int = Query(default=50, ge=1, le=200),
) -> list[Review]:
    return await ratings.get_reviews(target_id, limit)


@router.get("/reviews/{target_id}/mine", response_model=Review)
async def get_my_review(target_id: str, user_id: UserIdDep, ratings: RatingServiceDep) -> Review:
    return await ratings.get_review(user_id, target_id)


@router.delete("/reviews/{target_id}", status_code=204)
async def delete_review(target_id: str, user_id: UserIdDep, ratings: RatingServiceDep) -> None:
    await ratings.delete_review(user_id, target_id)


# ---------------------------------------------------------------------------
# Boards
# ---------------------------------------------------------------------------


@router.post("/boards", response_model=Board, status_code=201)
async def create_board(body: CreateBoardRequest, user_id: UserIdDep, boards: BoardServiceDep) -> Board:
    return await boards.create_board(
        owner_id=user_id,
        title=body.title,
        board_type=body.board_type,
        description=body.description,
        is_public=body.is_public,
    )


@router.get("/boards", response_model=list[Board])
async def list_boards(
    boards: BoardServiceDep,
    sort: BoardSort = BoardSort.RECENT,
    limit: int | None = Query(default=None, ge=1, le=100),
) -> list[Board]:
    return await boards.list_boards(sort=sort, limit=limit)


@router.get("/users/{owner_id}/boards", response_model=list[Board])
async def list_user_boards(owner_id: str, viewer_id: ViewerIdDep, boards: BoardServiceDep) -> list[Board]:
    return await boards.list_user_boards(owner_id, viewer_id)


@router.get("/boards/{board_id}", response_model=BoardDetail)
async def get_board(board_id: int, viewer_id: ViewerIdDep, boards: BoardServiceDep) -> BoardDetail:
    return await boards.get_board_detail(board_id, viewer_id)


@router.delete("/boards/{board_id}", status_code=204)
async def delete_board(board_id: int, user_id: UserIdDep, boards: BoardServiceDep) -> None:
    await boards.delete_board(board_id, user_id)


@router.post("/boards/{board_id}/items", response_model=BoardItem, status_code=201)
async def add_board_item(
    board_id: int,
    body: AddBoardItemRequest,
    user_id: UserIdDep,
    boards: BoardServiceDep,
) -> BoardItem:
    return await boards.add_item(
        board_id,
        user_id,
        title=body.title,
        external_id=body.external_id,
        artist=body.artist,
        image_url=body.image_url,
    )


@router.delete("/boards/{board_id}/items/{item_id}", status_code=204)
async def remove_board_item(
    board_id: int,
    item_id: int,
    user_id: UserIdDep,
    boards: BoardServiceDep,
) -> None:
    await boards.remove_item(board_id, user_id, item_id)


@router.post("/boards/{board_id}/like", response_model=LikeState)
async def toggle_board_like(board_id: int, user_id: UserIdDep, boards: BoardServiceDep) -> LikeState:
    return await boards.toggle_like(board_id, user_id)


# ---------------------------------------------------------------------------
# Lists
# ---------------------------------------------------------------------------


@router.post("/lists", response_model=MusicList, status_code=201)
async def publish_list(body: CreateListRequest, user_id: UserIdDep, lists: ListServiceDep) -> MusicList:
    items = [
        ListItem(album_title=item.album_title, artist=item.artist, genre=item.genre, emoji=item.emoji)
        for item in body.items
    ]
    return await lists.publish_list(
        owner_id=user_id,
        title=body.title,
        items=items,
        description=body.description,
        story=body.story,
        genre=body.genre,
        is_public=body.is_public,
    )


@router.get("/lists", response_model=list[MusicList])
async def list_lists(
    lists: ListServiceDep,
    sort: BoardSort = BoardSort.POPULAR,
    limit: int | None = Query(default=None, ge=1, le=100),
) -> list[MusicList]:
    return await lists.list_lists(sort=sort, limit=limit)


@router.get("/lists/{list_id}", response_model=MusicList)
async def get_list(list_id: int, viewer_id: ViewerIdDep, lists: ListServiceDep) -> MusicList:
    return await lists.get_list(list_id, viewer_id)


@router.delete("/lists/{list_id}", status_code=204)
async def delete_list(list_id: int, user_id: UserIdDep, lists: ListServiceDep) -> None:
    await lists.delete_list(list_id, user_id)


@router.post("/lists/{list_id}/like", response_model=ListLikeState)
async def toggle_list_like(list_id: int, user_id: UserIdDep, lists: ListServiceDep) -> ListLikeState:
    return await lists.toggle_like(list_id, user_id)


# ---------------------------------------------------------------------------
# Listen Later
# ---------------------------------------------------------------------------


@router.post("/albums/{album_id}/listen-later", response_model=ListenLaterResult)
async def add_to_listen_later(
    album_id: str,
    body: ListenLaterRequest,
    user_id: UserIdDep,
    listen_later: ListenLaterServiceDep,
) -> ListenLaterResult:
    """Queue an album; a repeat save answers 200 with ``added: false``."""
    return await listen_later.add(
        user_id,
        album_id,
        album_name=body.album_name,
        artist_name=body.artist_name,
        image_url=body.image_url,
    )


@router.get("/listen-later", response_model=list[ListenLaterEntry])
async def get_listen_later(
    user_id: UserIdDep,
    listen_later: ListenLaterServiceDep,
    limit: int | None = Query(default=None, ge=1, le=200),
) -> list[ListenLaterEntry]:
    return await listen_later.list_queue(user_id, limit)


@router.delete("/listen-later/{album_id}", status_code=204)
async def remove_from_listen_later(album_id: str, user_id: UserIdDep, listen_later: ListenLaterServiceDep) -> None:
    await listen_later.remove(user_id, album_id)


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------


@router.put("/profiles/me", response_model=Profile)
async def update_my_profile(
    body: ProfileUpdateRequest,
    user_id: UserIdDep,
    profiles: ProfileStoreDep,
) -> Profile:
    profile = await profiles.upsert_profile(
        Profile(
            id=user_id,
            username=body.username,
            display_name=body.display_name,
            avatar_url=body.avatar_url,
            bio=body.bio,
        )
    )
    _logger.info("profile_updated", user_id=user_id)
    return profile


@router.get("/profiles/{user_id}", response_model=Profile)
async def get_profile(user_id: str, profiles: ProfileStoreDep) -> Profile:
    profile = await profiles.get_profile(user_id)
    if profile is None:
        raise RecordNotFoundError(message="Profile not found")
    return profile


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Application health check",
)
async def health_check(request: Request) -> HealthResponse:
    """Return application health, version, and which upstreams are configured."""
    upstreams: dict[str, bool] = {}
    if hasattr(request.app.state, "upstream_registry"):
        upstreams = dict(request.app.state.upstream_registry)

    llm_provider = getattr(request.app.state, "llm_provider", None)
    llm_name = llm_provider.get_provider_name() if llm_provider is not None else None

    # Catalog search is the one feature every page needs.
    status = "healthy" if upstreams.get("spotify", False) else "degraded"

    return HealthResponse(
        status=status,
        version=_VERSION,
        upstreams=upstreams,
        llm_provider=llm_name,
    )
