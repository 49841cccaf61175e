"""Integration tests for the /api/v1 store endpoints.

Routes run against the real services and SQLite stores on a temporary
database, behind ErrorHandlingMiddleware as in the production app.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from musicboard.api.middleware import ErrorHandlingMiddleware
from musicboard.api.routes import router as api_router
from musicboard.providers.boards.sqlite_board_provider import SQLiteBoardProvider
from musicboard.providers.listen_later.sqlite_listen_later_provider import SQLiteListenLaterProvider
from musicboard.providers.lists.sqlite_list_provider import SQLiteListProvider
from musicboard.providers.profiles.sqlite_profile_provider import SQLiteProfileProvider
from musicboard.providers.ratings.sqlite_rating_provider import SQLiteRatingProvider
from musicboard.services.board_service import BoardService
from musicboard.services.list_service import ListService
from musicboard.services.listen_later_service import ListenLaterService
from musicboard.services.rating_service import RatingService

_ALICE = {"X-User-Id": "alice"}
_BOB = {"X-User-Id": "bob"}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _create_test_app(db_path: Path, upstreams: dict[str, bool] | None = None) -> FastAPI:
    rating_store = SQLiteRatingProvider(db_path=db_path)
    board_store = SQLiteBoardProvider(db_path=db_path)
    list_store = SQLiteListProvider(db_path=db_path)
    profile_store = SQLiteProfileProvider(db_path=db_path)
    listen_later_store = SQLiteListenLaterProvider(db_path=db_path)

    async def _init() -> None:
        for store in (rating_store, board_store, list_store, profile_store, listen_later_store):
            await store.initialize()

    asyncio.run(_init())

    app = FastAPI()
    app.add_middleware(ErrorHandlingMiddleware)
    app.include_router(api_router)
    app.state.rating_service = RatingService(rating_store, profile_store=profile_store)
    app.state.board_service = BoardService(board_store)
    app.state.list_service = ListService(list_store)
    app.state.listen_later_service = ListenLaterService(listen_later_store)
    app.state.profile_store = profile_store
    app.state.upstream_registry = upstreams if upstreams is not None else {"spotify": True, "genius": False}
    app.state.llm_provider = MagicMock(get_provider_name=MagicMock(return_value="openai-compatible"))
    return app


@pytest.fixture()
def client(tmp_path: Path) -> TestClient:
    return TestClient(_create_test_app(tmp_path / "api.db"))


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


class TestIdentity:
    @pytest.mark.parametrize(
        ("method", "path", "json"),
        [
            ("PUT", "/api/v1/albums/al1/rating", {"rating": 4}),
            ("POST", "/api/v1/boards", {"title": "Picks"}),
            ("POST", "/api/v1/lists", {"title": "x", "items": []}),
            ("PUT", "/api/v1/profiles/me", {"username": "alice"}),
            ("POST", "/api/v1/albums/al1/listen-later", {}),
            ("GET", "/api/v1/listen-later", None),
            ("POST", "/api/v1/lists/1/like", None),
        ],
    )
    def test_writes_require_identity(self, client: TestClient, method: str, path: str, json: dict) -> None:
        response = client.request(method, path, json=json)

        assert response.status_code == 401

    def test_reads_do_not(self, client: TestClient) -> None:
        response = client.get("/api/v1/albums/al1/ratings")

        assert response.status_code == 200
        assert response.json()["count"] == 0
        assert response.json()["display_average"] == "0.0"


# ---------------------------------------------------------------------------
# Ratings and reviews
# ---------------------------------------------------------------------------


class TestRatings:
    def test_rate_album_returns_summary(self, client: TestClient) -> None:
        client.put("/api/v1/albums/al1/rating", json={"rating": 4}, headers=_BOB)

        response = client.put(
            "/api/v1/albums/al1/rating",
            json={"rating": 5, "album_name": "In Rainbows", "artist_name": "Radiohead"},
            headers=_ALICE,
        )

        body = response.json()
        assert response.status_code == 200
        assert body["count"] == 2
        assert body["display_average"] == "4.5"
        assert body["user_rating"] == 5.0
        assert sum(body["distribution"]) == 2

    def test_viewer_rating_on_read(self, client: TestClient) -> None:
        client.put("/api/v1/albums/al1/rating", json={"rating": 3.5}, headers=_ALICE)

        mine = client.get("/api/v1/albums/al1/ratings", headers=_ALICE).json()
        anonymous = client.get("/api/v1/albums/al1/ratings").json()

        assert mine["user_rating"] == 3.5
        assert anonymous["user_rating"] == 0.0

    def test_invalid_rating_is_400(self, client: TestClient) -> None:
        response = client.put("/api/v1/albums/al1/rating", json={"rating": 4.2}, headers=_ALICE)

        assert response.status_code == 400
        assert response.json()["detail"] == "ValidationFailureError"
        assert "0.5" in response.json()["error"]

    def test_missing_rating_is_400(self, client: TestClient) -> None:
        response = client.put("/api/v1/albums/al1/rating", json={}, headers=_ALICE)

        assert response.status_code == 400
        assert response.json()["error"] == "Please select a rating"

    def test_track_ratings(self, client: TestClient) -> None:
        client.put("/api/v1/tracks/t1/rating", json={"rating": 4, "album_id": "al1"}, headers=_ALICE)
        client.put("/api/v1/tracks/t1/rating", json={"rating": 5, "album_id": "al1"}, headers=_BOB)

        response = client.get("/api/v1/albums/al1/track-ratings")

        tracks = response.json()["tracks"]
        assert tracks["t1"]["count"] == 2
        assert tracks["t1"]["average"] == pytest.approx(4.5)

    def test_track_rating_needs_album(self, client: TestClient) -> None:
        response = client.put("/api/v1/tracks/t1/rating", json={"rating": 4}, headers=_ALICE)

        assert response.status_code == 400

    def test_album_raters_include_profiles(self, client: TestClient) -> None:
        client.put("/api/v1/profiles/me", json={"username": "alice", "display_name": "Alice"}, headers=_ALICE)
        client.put("/api/v1/albums/al1/rating", json={"rating": 4.5}, headers=_ALICE)
        client.put("/api/v1/albums/al1/rating", json={"rating": 2}, headers=_BOB)

        response = client.get("/api/v1/albums/al1/raters")

        assert response.status_code == 200
        raters = {r["user_id"]: r for r in response.json()}
        assert raters["alice"]["rating"] == 4.5
        assert raters["alice"]["username"] == "alice"
        assert raters["alice"]["display_name"] == "Alice"
        assert raters["bob"]["username"] is None
        assert len(client.get("/api/v1/albums/al1/raters", params={"limit": 1}).json()) == 1
        assert client.get("/api/v1/albums/al1/raters", params={"limit": 0}).status_code == 422

    def test_user_ratings(self, client: TestClient) -> None:
        client.put("/api/v1/albums/al1/rating", json={"rating": 4, "album_name": "Kid A"}, headers=_ALICE)

        response = client.get("/api/v1/users/alice/ratings")

        assert [r["album_name"] for r in response.json()] == ["Kid A"]


class TestReviews:
    def test_review_lifecycle(self, client: TestClient) -> None:
        created = client.put(
            "/api/v1/reviews/al1",
            json={"rating": 4.5, "review_text": "  Warm, patient and strange.  "},
            headers=_ALICE,
        )
        assert created.status_code == 200
        assert created.json()["review_text"] == "Warm, patient and strange."

        assert len(client.get("/api/v1/reviews/al1").json()) == 1
        assert client.get("/api/v1/reviews/al1/mine", headers=_ALICE).json()["rating"] == 4.5

        assert client.delete("/api/v1/reviews/al1", headers=_ALICE).status_code == 204
        assert client.get("/api/v1/reviews/al1/mine", headers=_ALICE).status_code == 404

    def test_short_review_is_400(self, client: TestClient) -> None:
        response = client.put("/api/v1/reviews/al1", json={"rating": 4, "review_text": "too short"}, headers=_ALICE)

        assert response.status_code == 400
        assert "10" in response.json()["error"]


# ---------------------------------------------------------------------------
# Boards
# ---------------------------------------------------------------------------


class TestBoards:
    def _create(self, client: TestClient, **fields) -> dict:
        payload = {"title": "Late night", "board_type": "album", **fields}
        response = client.post("/api/v1/boards", json=payload, headers=_ALICE)
        assert response.status_code == 201
        return response.json()

    def test_create_and_fetch(self, client: TestClient) -> None:
        board = self._create(client, description="quiet records")

        detail = client.get(f"/api/v1/boards/{board['id']}").json()

        assert detail["board"]["title"] == "Late night"
        assert detail["items"] == []
        assert detail["is_liked"] is False

    def test_invalid_board_type(self, client: TestClient) -> None:
        response = client.post("/api/v1/boards", json={"title": "x", "board_type": "podcast"}, headers=_ALICE)

        assert response.status_code == 400

    def test_items_and_ownership(self, client: TestClient) -> None:
        board = self._create(client)
        items_path = f"/api/v1/boards/{board['id']}/items"

        forbidden = client.post(items_path, json={"title": "Kid A", "external_id": "al1"}, headers=_BOB)
        assert forbidden.status_code == 403
        assert forbidden.json()["detail"] == "PermissionDeniedError"

        first = client.post(items_path, json={"title": "Kid A", "external_id": "al1"}, headers=_ALICE).json()
        client.post(items_path, json={"title": "Amnesiac", "external_id": "al2"}, headers=_ALICE)

        assert client.delete(f"{items_path}/{first['id']}", headers=_ALICE).status_code == 204
        items = client.get(f"/api/v1/boards/{board['id']}").json()["items"]
        assert [(i["title"], i["position"]) for i in items] == [("Amnesiac", 0)]

    def test_like_toggle(self, client: TestClient) -> None:
        board = self._create(client)
        like_path = f"/api/v1/boards/{board['id']}/like"

        liked = client.post(like_path, headers=_BOB).json()
        assert liked == {"board_id": board["id"], "liked": True, "likes_count": 1}
        assert client.get(f"/api/v1/boards/{board['id']}", headers=_BOB).json()["is_liked"] is True

        unliked = client.post(like_path, headers=_BOB).json()
        assert unliked["liked"] is False
        assert unliked["likes_count"] == 0

    def test_private_board_is_404_for_others(self, client: TestClient) -> None:
        board = self._create(client, is_public=False)

        assert client.get(f"/api/v1/boards/{board['id']}", headers=_BOB).status_code == 404
        assert client.get(f"/api/v1/boards/{board['id']}", headers=_ALICE).status_code == 200
        assert client.get("/api/v1/boards").json() == []
        assert client.get("/api/v1/users/alice/boards", headers=_BOB).json() == []

    def test_delete(self, client: TestClient) -> None:
        board = self._create(client)

        assert client.delete(f"/api/v1/boards/{board['id']}", headers=_BOB).status_code == 403
        assert client.delete(f"/api/v1/boards/{board['id']}", headers=_ALICE).status_code == 204
        assert client.get(f"/api/v1/boards/{board['id']}").status_code == 404

    def test_missing_board(self, client: TestClient) -> None:
        response = client.get("/api/v1/boards/9999")

        assert response.status_code == 404
        assert response.json()["detail"] == "RecordNotFoundError"


# ---------------------------------------------------------------------------
# Lists
# ---------------------------------------------------------------------------


class TestLists:
    def test_publish_and_browse(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/lists",
            json={
                "title": "Spiritual jazz primer",
                "genre": "Jazz",
                "items": [
                    {"album_title": "Karma", "artist": "Pharoah Sanders"},
                    {"album_title": "Journey in Satchidananda", "artist": "Alice Coltrane", "emoji": "🎷"},
                ],
            },
            headers=_ALICE,
        )

        created = response.json()
        assert response.status_code == 201
        assert [i["position"] for i in created["items"]] == [0, 1]
        assert created["items"][0]["genre"] == "Jazz"
        assert created["items"][0]["emoji"] == "🎵"

        feed = client.get("/api/v1/lists").json()
        assert [m["id"] for m in feed] == [created["id"]]

    def test_empty_list_is_400(self, client: TestClient) -> None:
        response = client.post("/api/v1/lists", json={"title": "Nothing yet", "items": []}, headers=_ALICE)

        assert response.status_code == 400
        assert response.json()["error"] == "Please add a title and at least one album"

    def test_like_toggle_drives_popular_feed(self, client: TestClient) -> None:
        items = [{"album_title": "Karma", "artist": "Pharoah Sanders"}]
        first = client.post("/api/v1/lists", json={"title": "First", "items": items}, headers=_ALICE).json()
        second = client.post("/api/v1/lists", json={"title": "Second", "items": items}, headers=_ALICE).json()

        liked = client.post(f"/api/v1/lists/{first['id']}/like", headers=_BOB)

        assert liked.status_code == 200
        assert liked.json() == {"list_id": first["id"], "liked": True, "likes_count": 1}
        popular = client.get("/api/v1/lists", params={"sort": "popular"}).json()
        assert [m["id"] for m in popular] == [first["id"], second["id"]]
        assert popular[0]["likes_count"] == 1

        unliked = client.post(f"/api/v1/lists/{first['id']}/like", headers=_BOB).json()
        assert unliked["likes_count"] == 0

    def test_like_missing_list(self, client: TestClient) -> None:
        assert client.post("/api/v1/lists/999/like", headers=_BOB).status_code == 404


# ---------------------------------------------------------------------------
# Listen Later
# ---------------------------------------------------------------------------


class TestListenLater:
    def test_add_then_duplicate(self, client: TestClient) -> None:
        body = {"album_name": "Kid A", "artist_name": "Radiohead", "image_url": "https://img/al1.jpg"}

        first = client.post("/api/v1/albums/al1/listen-later", json=body, headers=_ALICE)
        second = client.post("/api/v1/albums/al1/listen-later", json={}, headers=_ALICE)

        assert first.status_code == 200
        assert first.json()["added"] is True
        assert first.json()["message"] == "Added to Listen Later"
        assert first.json()["entry"]["album_name"] == "Kid A"
        assert second.status_code == 200
        assert second.json()["added"] is False
        assert second.json()["message"] == "Already in Listen Later"

    def test_queue_is_private_to_the_caller(self, client: TestClient) -> None:
        client.post("/api/v1/albums/al1/listen-later", json={}, headers=_ALICE)
        client.post("/api/v1/albums/al2/listen-later", json={}, headers=_ALICE)

        mine = client.get("/api/v1/listen-later", headers=_ALICE).json()
        theirs = client.get("/api/v1/listen-later", headers=_BOB).json()

        assert [e["album_id"] for e in mine] == ["al2", "al1"]
        assert theirs == []

    def test_remove(self, client: TestClient) -> None:
        client.post("/api/v1/albums/al1/listen-later", json={}, headers=_ALICE)

        assert client.delete("/api/v1/listen-later/al1", headers=_ALICE).status_code == 204
        response = client.delete("/api/v1/listen-later/al1", headers=_ALICE)
        assert response.status_code == 404
        assert response.json()["error"] == "Album is not in your Listen Later queue"


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------


class TestProfiles:
    def test_update_and_read(self, client: TestClient) -> None:
        response = client.put(
            "/api/v1/profiles/me",
            json={"username": "alice_b", "display_name": "Alice", "bio": "Crate digger"},
            headers=_ALICE,
        )
        assert response.status_code == 200

        profile = client.get("/api/v1/profiles/alice").json()
        assert profile["username"] == "alice_b"
        assert profile["bio"] == "Crate digger"

    def test_username_taken(self, client: TestClient) -> None:
        client.put("/api/v1/profiles/me", json={"username": "same_name"}, headers=_ALICE)

        response = client.put("/api/v1/profiles/me", json={"username": "same_name"}, headers=_BOB)

        assert response.status_code == 400

    def test_username_format_is_422(self, client: TestClient) -> None:
        response = client.put("/api/v1/profiles/me", json={"username": "no spaces allowed"}, headers=_ALICE)

        assert response.status_code == 422

    def test_unknown_profile(self, client: TestClient) -> None:
        assert client.get("/api/v1/profiles/nobody").status_code == 404


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class TestHealth:
    def test_healthy_when_catalog_configured(self, client: TestClient) -> None:
        body = client.get("/api/v1/health").json()

        assert body["status"] == "healthy"
        assert body["upstreams"] == {"spotify": True, "genius": False}
        assert body["llm_provider"] == "openai-compatible"

    def test_degraded_without_catalog(self, tmp_path: Path) -> None:
        client = TestClient(_create_test_app(tmp_path / "api.db", upstreams={"spotify": False}))

        assert client.get("/api/v1/health").json()["status"] == "degraded"
