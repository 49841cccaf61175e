"""Function endpoints: one POST route per upstream adapter.

The browser pages call these exactly as they called the hosted functions:
a JSON body (usually ``{action, ...}``) in, a JSON body out, with the
same CORS headers on every response and an empty 200 for preflight.

These routes are the adapter boundary.  Providers raise
``MusicboardError`` subclasses; each route below converts them into the
status code and ``{error}`` body its page expects, and nothing escapes
to the error-handling middleware.

# ─── FUNCTION MAP ─────────────────────────────────────────────────────
#
# /functions/v1/audiodb-search          AudioDB catalog actions
# /functions/v1/bandsintown-api         artist profile / upcoming events
# /functions/v1/discogs-vinyl           vinyl pressings (soft when unconfigured)
# /functions/v1/genius-lyrics           lyrics search (always soft)
# /functions/v1/spotify-search          catalog search
# /functions/v1/spotify-recommendations new releases
# /functions/v1/spotify-album-details   album page data
# /functions/v1/music-chat              AI recommender turn
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import json
from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from musicboard.api.schemas import ChatRequest
from musicboard.utils.errors import (
    InvalidActionError,
    LLMError,
    MusicboardError,
    NotConfiguredError,
    NotFoundError,
    PaymentRequiredError,
    RateLimitError,
    UpstreamAuthError,
    UpstreamError,
    ValidationFailureError,
)
from musicboard.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter(prefix="/functions/v1")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

_GENIUS_TOKEN_MESSAGE = "Lyrics service requires valid API token. Please configure GENIUS_API_TOKEN."


# ---------------------------------------------------------------------------
# Dependency injection helpers
# ---------------------------------------------------------------------------


def _get_audiodb(request: Request) -> Any:
    return request.app.state.audiodb_provider


def _get_bandsintown(request: Request) -> Any:
    return request.app.state.bandsintown_provider


def _get_discogs(request: Request) -> Any:
    return request.app.state.discogs_provider


def _get_genius(request: Request) -> Any:
    return request.app.state.genius_provider


def _get_spotify(request: Request) -> Any:
    return request.app.state.spotify_provider


def _get_chat_service(request: Request) -> Any:
    return request.app.state.chat_service


AudioDBDep = Annotated[Any, Depends(_get_audiodb)]
BandsintownDep = Annotated[Any, Depends(_get_bandsintown)]
DiscogsDep = Annotated[Any, Depends(_get_discogs)]
GeniusDep = Annotated[Any, Depends(_get_genius)]
SpotifyDep = Annotated[Any, Depends(_get_spotify)]
ChatServiceDep = Annotated[Any, Depends(_get_chat_service)]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _respond(payload: Any, status_code: int = 200) -> JSONResponse:
    return JSONResponse(content=payload, status_code=status_code, headers=CORS_HEADERS)


async def _read_body(request: Request) -> dict[str, Any]:
    """Decode the JSON object body; an empty body reads as ``{}``."""
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ValidationFailureError(message="Request body must be valid JSON") from exc
    if not isinstance(body, dict):
        raise ValidationFailureError(message="Request body must be a JSON object")
    return body


def _log_failure(function: str, exc: MusicboardError) -> None:
    _logger.warning(
        "function_failed",
        function=function,
        error_type=type(exc).__name__,
        message=exc.message,
        provider=exc.provider_name,
    )


def _unexpected(function: str, exc: Exception, payload: dict[str, Any]) -> JSONResponse:
    _logger.exception("function_crashed", function=function, error_type=type(exc).__name__)
    return _respond(payload, status_code=500)


@router.options("/{function_name}")
async def preflight(function_name: str) -> Response:
    """CORS preflight for every function."""
    return Response(status_code=200, headers=CORS_HEADERS)


# ---------------------------------------------------------------------------
# Catalog: AudioDB
# ---------------------------------------------------------------------------


@router.post("/audiodb-search")
async def audiodb_search(request: Request, audiodb: AudioDBDep) -> JSONResponse:
    try:
        body = await _read_body(request)
        return _respond(await audiodb.invoke(body.get("action"), body))
    except (InvalidActionError, ValidationFailureError) as exc:
        return _respond({"error": exc.message}, status_code=400)
    except MusicboardError as exc:
        _log_failure("audiodb-search", exc)
        return _respond({"error": exc.message}, status_code=500)
    except Exception as exc:
        return _unexpected("audiodb-search", exc, {"error": "Internal server error"})


# ---------------------------------------------------------------------------
# Events: Bandsintown
# ---------------------------------------------------------------------------


@router.post("/bandsintown-api")
async def bandsintown_api(request: Request, bandsintown: BandsintownDep) -> JSONResponse:
    try:
        body = await _read_body(request)
        return _respond(await bandsintown.invoke(body.get("action"), body))
    except (InvalidActionError, ValidationFailureError) as exc:
        return _respond({"error": exc.message}, status_code=400)
    except NotFoundError:
        return _respond({"error": "Artist not found"}, status_code=404)
    except MusicboardError as exc:
        _log_failure("bandsintown-api", exc)
        return _respond({"error": exc.message}, status_code=500)
    except Exception as exc:
        return _unexpected("bandsintown-api", exc, {"error": "Internal server error"})


# ---------------------------------------------------------------------------
# Vinyl: Discogs
# ---------------------------------------------------------------------------


@router.post("/discogs-vinyl")
async def discogs_vinyl(request: Request, discogs: DiscogsDep) -> JSONResponse:
    """Vinyl pressings of one album.

    An unconfigured token is soft (200 with an empty result list) so the
    album page simply hides its vinyl panel.
    """
    try:
        body = await _read_body(request)
        result = await discogs.search_vinyl(body.get("artist") or "", body.get("album") or "")
        return _respond(result.model_dump(by_alias=True))
    except ValidationFailureError as exc:
        return _respond({"error": exc.message}, status_code=400)
    except NotConfiguredError as exc:
        return _respond({"error": exc.message, "results": []})
    except MusicboardError as exc:
        _log_failure("discogs-vinyl", exc)
        return _respond({"error": "Failed to fetch vinyl data", "results": []}, status_code=500)
    except Exception as exc:
        return _unexpected("discogs-vinyl", exc, {"error": "Failed to fetch vinyl data", "results": []})


# ---------------------------------------------------------------------------
# Lyrics: Genius
# ---------------------------------------------------------------------------


def _lyrics_message(exc: MusicboardError) -> str:
    if isinstance(exc, NotConfiguredError):
        return exc.message
    if isinstance(exc, NotFoundError):
        return "Song not found"
    if isinstance(exc, UpstreamAuthError):
        return _GENIUS_TOKEN_MESSAGE
    if isinstance(exc, UpstreamError) and exc.status_code is None:
        return "Lyrics service temporarily unavailable"
    return "Unable to fetch lyrics"


@router.post("/genius-lyrics")
async def genius_lyrics(request: Request, genius: GeniusDep) -> JSONResponse:
    """Lyrics lookup; every upstream failure is soft (HTTP 200)."""
    try:
        body = await _read_body(request)
        return _respond(await genius.invoke(body.get("action"), body))
    except (InvalidActionError, ValidationFailureError) as exc:
        return _respond({"error": exc.message}, status_code=400)
    except MusicboardError as exc:
        _log_failure("genius-lyrics", exc)
        return _respond({"error": _lyrics_message(exc), "response": {"hits": []}})
    except Exception as exc:
        return _unexpected("genius-lyrics", exc, {"error": "Unable to fetch lyrics", "response": {"hits": []}})


# ---------------------------------------------------------------------------
# Catalog: Spotify
# ---------------------------------------------------------------------------


def _spotify_message(exc: MusicboardError, fallback: str) -> str:
    if isinstance(exc, NotConfiguredError):
        return "Spotify API not configured"
    if isinstance(exc, UpstreamAuthError):
        return "Failed to authenticate with Spotify"
    return fallback


@router.post("/spotify-search")
async def spotify_search(request: Request, spotify: SpotifyDep) -> JSONResponse:
    try:
        body = await _read_body(request)
        query = str(body.get("query") or "").strip()
        if not query:
            return _respond({"error": "Query is required"}, status_code=400)
        types = body.get("type") or "album,track,artist"
        results = await spotify.search(query, types)
        return _respond(results.model_dump(by_alias=True))
    except ValidationFailureError as exc:
        return _respond({"error": exc.message}, status_code=400)
    except MusicboardError as exc:
        _log_failure("spotify-search", exc)
        return _respond({"error": _spotify_message(exc, "Spotify search failed")}, status_code=500)
    except Exception as exc:
        return _unexpected("spotify-search", exc, {"error": "Spotify search failed"})


@router.post("/spotify-recommendations")
async def spotify_recommendations(request: Request, spotify: SpotifyDep) -> JSONResponse:
    """New releases for the home page; the body is ignored."""
    try:
        albums = await spotify.new_releases()
        return _respond({"albums": [album.model_dump(by_alias=True) for album in albums]})
    except MusicboardError as exc:
        _log_failure("spotify-recommendations", exc)
        return _respond(
            {"error": _spotify_message(exc, "Failed to fetch recommendations")},
            status_code=500,
        )
    except Exception as exc:
        return _unexpected("spotify-recommendations", exc, {"error": "Failed to fetch recommendations"})


@router.post("/spotify-album-details")
async def spotify_album_details(request: Request, spotify: SpotifyDep) -> JSONResponse:
    try:
        body = await _read_body(request)
        album_id = str(body.get("albumId") or "").strip()
        if not album_id:
            return _respond({"error": "Album ID is required"}, status_code=400)
        album = await spotify.album_details(album_id)
        return _respond(album.model_dump(by_alias=True))
    except ValidationFailureError as exc:
        return _respond({"error": exc.message}, status_code=400)
    except NotFoundError:
        return _respond({"error": "Album not found"}, status_code=404)
    except MusicboardError as exc:
        _log_failure("spotify-album-details", exc)
        return _respond(
            {"error": _spotify_message(exc, "Failed to fetch album details")},
            status_code=500,
        )
    except Exception as exc:
        return _unexpected("spotify-album-details", exc, {"error": "Failed to fetch album details"})


# ---------------------------------------------------------------------------
# AI chat
# ---------------------------------------------------------------------------


@router.post("/music-chat")
async def music_chat(request: Request, chat_service: ChatServiceDep) -> JSONResponse:
    """One recommender turn: ``{messages}`` in, ``{content, recommendations}`` out."""
    try:
        body = await _read_body(request)
        chat_request = ChatRequest.model_validate(body)
        reply = await chat_service.reply(chat_request.messages)
        return _respond(reply.model_dump())
    except ValidationError:
        return _respond({"error": "Invalid messages"}, status_code=400)
    except ValidationFailureError as exc:
        return _respond({"error": exc.message}, status_code=400)
    except RateLimitError:
        return _respond({"error": "Rate limits exceeded, please try again later."}, status_code=429)
    except PaymentRequiredError:
        return _respond({"error": "Payment required, please add funds to your workspace."}, status_code=402)
    except LLMError as exc:
        _log_failure("music-chat", exc)
        return _respond({"error": "AI gateway error"}, status_code=500)
    except MusicboardError as exc:
        _log_failure("music-chat", exc)
        return _respond({"error": exc.message}, status_code=500)
    except Exception as exc:
        return _unexpected("music-chat", exc, {"error": "Internal server error"})
