"""Unit tests for the SQLite stores: ratings, boards, lists, profiles and Listen Later.

Every test gets a fresh database under ``tmp_path`` via the store
fixtures in ``tests/conftest.py``.
"""

from __future__ import annotations

import pytest

from musicboard.models.boards import BoardSort, BoardType
from musicboard.models.listen_later import ListenLaterEntry
from musicboard.models.lists import ListItem, MusicList
from musicboard.models.profile import Profile
from musicboard.models.ratings import Review, TargetType
from musicboard.utils.errors import RecordNotFoundError, ValidationFailureError
from tests.conftest import make_rating

# ======================================================================
# Ratings and reviews
# ======================================================================


class TestSQLiteRatingProvider:
    @pytest.mark.asyncio
    async def test_upsert_returns_stored_row(self, rating_store) -> None:
        stored = await rating_store.upsert_rating(make_rating(album_name="Kid A", artist_name="Radiohead"))

        assert stored.rating == 4.0
        assert stored.album_name == "Kid A"
        assert stored.created_at is not None

    @pytest.mark.asyncio
    async def test_second_rating_overwrites_first(self, rating_store) -> None:
        await rating_store.upsert_rating(make_rating(rating=2.0, album_name="Kid A"))
        await rating_store.upsert_rating(make_rating(rating=4.5))

        rows = await rating_store.get_ratings("album-1", TargetType.ALBUM)

        assert len(rows) == 1
        assert rows[0].rating == 4.5
        assert rows[0].album_name == "Kid A"

    @pytest.mark.asyncio
    async def test_ratings_by_many_users(self, rating_store) -> None:
        for user, value in (("u1", 4.0), ("u2", 5.0), ("u3", 3.0)):
            await rating_store.upsert_rating(make_rating(user_id=user, rating=value))

        rows = await rating_store.get_ratings("album-1", TargetType.ALBUM)

        assert sorted(r.rating for r in rows) == [3.0, 4.0, 5.0]
        assert await rating_store.get_user_rating("u2", "album-1", TargetType.ALBUM) is not None
        assert await rating_store.get_user_rating("u9", "album-1", TargetType.ALBUM) is None

    @pytest.mark.asyncio
    async def test_album_and_track_ratings_are_separate(self, rating_store) -> None:
        await rating_store.upsert_rating(make_rating(target_id="x"))
        await rating_store.upsert_rating(
            make_rating(target_id="x", target_type=TargetType.TRACK, album_id="album-1", rating=1.0)
        )

        albums = await rating_store.get_ratings("x", TargetType.ALBUM)
        tracks = await rating_store.get_ratings("x", TargetType.TRACK)

        assert [r.rating for r in albums] == [4.0]
        assert [r.rating for r in tracks] == [1.0]
        assert tracks[0].target_type is TargetType.TRACK

    @pytest.mark.asyncio
    async def test_track_ratings_for_album(self, rating_store) -> None:
        for track in ("t1", "t2"):
            await rating_store.upsert_rating(
                make_rating(target_id=track, target_type=TargetType.TRACK, album_id="album-1")
            )
        await rating_store.upsert_rating(
            make_rating(target_id="t9", target_type=TargetType.TRACK, album_id="album-2")
        )

        rows = await rating_store.get_track_ratings_for_album("album-1")

        assert {r.target_id for r in rows} == {"t1", "t2"}

    @pytest.mark.asyncio
    async def test_recent_ratings_by_user(self, rating_store) -> None:
        for n in range(3):
            await rating_store.upsert_rating(make_rating(target_id=f"album-{n}"))
        await rating_store.upsert_rating(make_rating(user_id="someone-else", target_id="album-9"))

        rows = await rating_store.get_recent_ratings_by_user("user-1", limit=2)

        assert len(rows) == 2
        assert all(r.user_id == "user-1" for r in rows)

    @pytest.mark.asyncio
    async def test_latest_ratings_for_target(self, rating_store) -> None:
        for user_id in ("u1", "u2", "u3"):
            await rating_store.upsert_rating(make_rating(user_id=user_id, target_id="album-1"))
        await rating_store.upsert_rating(make_rating(user_id="u4", target_id="album-2"))

        latest = await rating_store.get_latest_ratings("album-1", TargetType.ALBUM, limit=2)

        assert [r.user_id for r in latest] == ["u3", "u2"]
        assert await rating_store.get_latest_ratings("album-1", TargetType.TRACK) == []

    @pytest.mark.asyncio
    async def test_review_upsert_get_delete(self, rating_store) -> None:
        review = Review(user_id="user-1", target_id="album-1", rating=4.0, review_text="A careful record.")
        first = await rating_store.upsert_review(review)
        edited = await rating_store.upsert_review(review.model_copy(update={"review_text": "Grew on me a lot."}))

        assert edited.id == first.id
        assert (await rating_store.get_review("user-1", "album-1")).review_text == "Grew on me a lot."
        assert len(await rating_store.get_reviews("album-1")) == 1

        assert await rating_store.delete_review("user-1", "album-1") is True
        assert await rating_store.delete_review("user-1", "album-1") is False
        assert await rating_store.get_review("user-1", "album-1") is None


# ======================================================================
# Boards
# ======================================================================


class TestSQLiteBoardProvider:
    @pytest.mark.asyncio
    async def test_create_and_get(self, board_store) -> None:
        board = await board_store.create_board("owner", "Late night", BoardType.ALBUM, "quiet records", False)

        fetched = await board_store.get_board(board.id)

        assert fetched == board
        assert fetched.is_public is False
        assert fetched.likes_count == 0
        assert await board_store.get_board(board.id + 100) is None

    @pytest.mark.asyncio
    async def test_items_are_appended_in_order(self, board_store) -> None:
        board = await board_store.create_board("owner", "Picks", BoardType.MIXED)
        for n in range(3):
            await board_store.add_item(board.id, f"Item {n}", f"ext-{n}")

        items = await board_store.get_items(board.id)

        assert [i.position for i in items] == [0, 1, 2]
        assert [i.title for i in items] == ["Item 0", "Item 1", "Item 2"]

    @pytest.mark.asyncio
    async def test_remove_item_closes_the_gap(self, board_store) -> None:
        board = await board_store.create_board("owner", "Picks", BoardType.MIXED)
        added = [await board_store.add_item(board.id, f"Item {n}", f"ext-{n}") for n in range(3)]

        assert await board_store.remove_item(board.id, added[1].id) is True
        items = await board_store.get_items(board.id)

        assert [i.title for i in items] == ["Item 0", "Item 2"]
        assert [i.position for i in items] == [0, 1]

        follow_up = await board_store.add_item(board.id, "Item 3", "ext-3")
        assert follow_up.position == 2

    @pytest.mark.asyncio
    async def test_remove_item_from_other_board(self, board_store) -> None:
        first = await board_store.create_board("owner", "One", BoardType.MIXED)
        second = await board_store.create_board("owner", "Two", BoardType.MIXED)
        item = await board_store.add_item(first.id, "Item", "ext")

        assert await board_store.remove_item(second.id, item.id) is False
        assert len(await board_store.get_items(first.id)) == 1

    @pytest.mark.asyncio
    async def test_like_is_idempotent(self, board_store) -> None:
        board = await board_store.create_board("owner", "Picks", BoardType.MIXED)

        await board_store.like_board(board.id, "fan")
        state = await board_store.like_board(board.id, "fan")

        assert state.liked is True
        assert state.likes_count == 1
        assert await board_store.is_liked(board.id, "fan") is True

    @pytest.mark.asyncio
    async def test_unlike_without_like_keeps_count(self, board_store) -> None:
        board = await board_store.create_board("owner", "Picks", BoardType.MIXED)

        state = await board_store.unlike_board(board.id, "stranger")

        assert state.liked is False
        assert state.likes_count == 0

    @pytest.mark.asyncio
    async def test_like_then_unlike(self, board_store) -> None:
        board = await board_store.create_board("owner", "Picks", BoardType.MIXED)
        await board_store.like_board(board.id, "a")
        await board_store.like_board(board.id, "b")

        state = await board_store.unlike_board(board.id, "a")

        assert state.likes_count == 1
        assert (await board_store.get_board(board.id)).likes_count == 1

    @pytest.mark.asyncio
    async def test_like_missing_board(self, board_store) -> None:
        with pytest.raises(RecordNotFoundError):
            await board_store.like_board(404, "fan")

    @pytest.mark.asyncio
    async def test_delete_cascades(self, board_store) -> None:
        board = await board_store.create_board("owner", "Picks", BoardType.MIXED)
        await board_store.add_item(board.id, "Item", "ext")
        await board_store.like_board(board.id, "fan")

        assert await board_store.delete_board(board.id) is True

        assert await board_store.get_board(board.id) is None
        assert await board_store.get_items(board.id) == []
        assert await board_store.is_liked(board.id, "fan") is False
        assert await board_store.delete_board(board.id) is False

    @pytest.mark.asyncio
    async def test_public_feed(self, board_store) -> None:
        quiet = await board_store.create_board("a", "Quiet", BoardType.MIXED)
        loved = await board_store.create_board("b", "Loved", BoardType.MIXED)
        await board_store.create_board("c", "Hidden", BoardType.MIXED, is_public=False)
        await board_store.like_board(loved.id, "fan")

        recent = await board_store.list_public_boards(10, BoardSort.RECENT)
        popular = await board_store.list_public_boards(10, BoardSort.POPULAR)

        assert [b.id for b in recent] == [loved.id, quiet.id]
        assert popular[0].id == loved.id
        assert len(await board_store.list_public_boards(1)) == 1

    @pytest.mark.asyncio
    async def test_boards_by_owner_include_private(self, board_store) -> None:
        await board_store.create_board("owner", "Public", BoardType.MIXED)
        await board_store.create_board("owner", "Private", BoardType.MIXED, is_public=False)
        await board_store.create_board("other", "Theirs", BoardType.MIXED)

        boards = await board_store.list_boards_by_owner("owner")

        assert {b.title for b in boards} == {"Public", "Private"}


# ======================================================================
# Lists
# ======================================================================


def _music_list(**overrides) -> MusicList:
    fields = {
        "owner_id": "owner",
        "title": "Spiritual jazz primer",
        "description": "Where to start",
        "genre": "Jazz",
        "items": [
            ListItem(album_title="Journey in Satchidananda", artist="Alice Coltrane"),
            ListItem(album_title="Karma", artist="Pharoah Sanders", emoji="🎷"),
        ],
    }
    fields.update(overrides)
    return MusicList(**fields)


class TestSQLiteListProvider:
    @pytest.mark.asyncio
    async def test_create_with_items(self, list_store) -> None:
        created = await list_store.create_list(_music_list())

        assert created.id is not None
        assert [i.position for i in created.items] == [0, 1]
        assert created.items[1].emoji == "🎷"
        assert all(i.list_id == created.id for i in created.items)
        assert await list_store.get_list(created.id) == created

    @pytest.mark.asyncio
    async def test_public_lists_hide_private(self, list_store) -> None:
        shown = await list_store.create_list(_music_list())
        await list_store.create_list(_music_list(title="Drafts", is_public=False))

        lists = await list_store.list_public_lists(10)

        assert [m.id for m in lists] == [shown.id]
        assert len(lists[0].items) == 2

    @pytest.mark.asyncio
    async def test_like_counter_moves_once_per_user(self, list_store) -> None:
        created = await list_store.create_list(_music_list())

        await list_store.like_list(created.id, "fan")
        again = await list_store.like_list(created.id, "fan")
        assert (again.liked, again.likes_count) == (True, 1)
        assert await list_store.is_liked(created.id, "fan") is True

        stranger = await list_store.unlike_list(created.id, "stranger")
        assert stranger.likes_count == 1

        state = await list_store.unlike_list(created.id, "fan")
        assert (state.liked, state.likes_count) == (False, 0)
        assert (await list_store.get_list(created.id)).likes_count == 0

    @pytest.mark.asyncio
    async def test_like_missing_list(self, list_store) -> None:
        with pytest.raises(RecordNotFoundError):
            await list_store.like_list(404, "fan")

    @pytest.mark.asyncio
    async def test_popular_sort_follows_likes(self, list_store) -> None:
        quiet = await list_store.create_list(_music_list(title="Quiet"))
        loved = await list_store.create_list(_music_list(title="Loved"))
        newest = await list_store.create_list(_music_list(title="Newest"))
        await list_store.like_list(loved.id, "a")
        await list_store.like_list(loved.id, "b")
        await list_store.like_list(quiet.id, "a")

        popular = await list_store.list_public_lists(10, BoardSort.POPULAR)
        recent = await list_store.list_public_lists(10, BoardSort.RECENT)

        assert [m.id for m in popular] == [loved.id, quiet.id, newest.id]
        assert recent[0].id == newest.id

    @pytest.mark.asyncio
    async def test_delete_removes_items(self, list_store) -> None:
        created = await list_store.create_list(_music_list())
        await list_store.like_list(created.id, "fan")

        assert await list_store.delete_list(created.id) is True
        assert await list_store.get_list(created.id) is None
        assert await list_store.is_liked(created.id, "fan") is False
        assert await list_store.delete_list(created.id) is False


# ======================================================================
# Profiles
# ======================================================================


class TestSQLiteProfileProvider:
    @pytest.mark.asyncio
    async def test_upsert_and_get(self, profile_store) -> None:
        await profile_store.upsert_profile(Profile(id="u1", username="crate_digger"))
        updated = await profile_store.upsert_profile(
            Profile(id="u1", username="crate_digger", bio="Mostly 70s jazz")
        )

        assert updated.bio == "Mostly 70s jazz"
        assert (await profile_store.get_profile("u1")).username == "crate_digger"
        assert (await profile_store.get_profile_by_username("crate_digger")).id == "u1"
        assert await profile_store.get_profile("u2") is None

    @pytest.mark.asyncio
    async def test_username_must_be_unique(self, profile_store) -> None:
        await profile_store.upsert_profile(Profile(id="u1", username="crate_digger"))

        with pytest.raises(ValidationFailureError):
            await profile_store.upsert_profile(Profile(id="u2", username="crate_digger"))

    @pytest.mark.asyncio
    async def test_get_profiles_in_bulk(self, profile_store) -> None:
        await profile_store.upsert_profile(Profile(id="u1", username="crate_digger"))
        await profile_store.upsert_profile(Profile(id="u2", username="night_owl", display_name="Owl"))

        profiles = await profile_store.get_profiles(["u1", "u2", "ghost"])

        assert set(profiles) == {"u1", "u2"}
        assert profiles["u2"].display_name == "Owl"
        assert await profile_store.get_profiles([]) == {}


# ======================================================================
# Listen Later
# ======================================================================


class TestSQLiteListenLaterProvider:
    @pytest.mark.asyncio
    async def test_add_then_duplicate(self, listen_later_store) -> None:
        entry = ListenLaterEntry(user_id="u1", album_id="al1", album_name="Kid A", artist_name="Radiohead")

        stored, added = await listen_later_store.add_entry(entry)
        again, added_again = await listen_later_store.add_entry(entry.model_copy(update={"album_name": "Renamed"}))

        assert added is True
        assert stored.id is not None
        assert stored.created_at is not None
        assert added_again is False
        assert again.id == stored.id
        assert again.album_name == "Kid A"

    @pytest.mark.asyncio
    async def test_queue_is_per_user_newest_first(self, listen_later_store) -> None:
        for album_id in ("al1", "al2", "al3"):
            await listen_later_store.add_entry(ListenLaterEntry(user_id="u1", album_id=album_id))
        await listen_later_store.add_entry(ListenLaterEntry(user_id="u2", album_id="al1"))

        queue = await listen_later_store.list_entries("u1")

        assert [e.album_id for e in queue] == ["al3", "al2", "al1"]
        assert len(await listen_later_store.list_entries("u1", limit=1)) == 1
        assert [e.album_id for e in await listen_later_store.list_entries("u2")] == ["al1"]

    @pytest.mark.asyncio
    async def test_remove(self, listen_later_store) -> None:
        await listen_later_store.add_entry(ListenLaterEntry(user_id="u1", album_id="al1"))

        assert await listen_later_store.remove_entry("u1", "al1") is True
        assert await listen_later_store.remove_entry("u1", "al1") is False
        assert await listen_later_store.list_entries("u1") == []
