"""
Tests for MusicViewModel.

Tests cover:
- Initial background load
- Favorite toggling with read-after-write reload
- Artist filtering over the in-memory snapshot
- Teardown discarding late results
- Change events on the bus
"""

from __future__ import annotations

import asyncio
import logging
from unittest.mock import AsyncMock

import pytest

from labmusic.core.db.models import Artist, Song
from labmusic.core.events import Event, EventBus
from labmusic.core.music_db import MusicDb
from labmusic.core.view_model import MusicViewModel


@pytest.fixture
async def db() -> MusicDb:
    """In-memory store with the Metallica/Gojira scenario loaded."""
    db = MusicDb(":memory:")
    await db.insert_artist(Artist("A", "Metallica", 8_234_567, 10))
    await db.insert_artist(Artist("B", "Gojira", 1_234_567, 6))
    await db.insert_song(Song(0, "Enter Sandman", "A", "Heavy Metal", 332))
    await db.insert_song(Song(0, "Nothing Else Matters", "A", "Heavy Metal", 386))
    yield db
    await db.close()


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


class TestInitialLoad:
    """Tests for the load scheduled at construction."""

    async def test_lists_empty_until_loaded(self, db: MusicDb, bus: EventBus) -> None:
        """Snapshots read empty before the background load finishes."""
        vm = MusicViewModel(db, bus=bus)
        assert vm.song_list == ()
        assert vm.artist_list == ()
        assert vm.pending == 2

        await vm.join()

        assert [s.name for s in vm.song_list] == ["Enter Sandman", "Nothing Else Matters"]
        assert [a.id for a in vm.artist_list] == ["A", "B"]
        assert vm.pending == 0

    async def test_requires_running_loop(self, db: MusicDb) -> None:
        """Construction outside an event loop fails."""
        loop = asyncio.get_running_loop()
        with pytest.raises(RuntimeError):
            await loop.run_in_executor(None, MusicViewModel, db)


class TestToggleFavorite:
    """Tests for toggle_favorite."""

    async def test_toggle_moves_song_to_top(self, db: MusicDb, bus: EventBus) -> None:
        """Favoriting a song reorders the reloaded list."""
        vm = MusicViewModel(db, bus=bus)
        await vm.join()

        sandman = vm.song_list[0]
        await vm.toggle_favorite(sandman)

        assert [(s.name, s.is_favorite) for s in vm.song_list] == [
            ("Enter Sandman", True),
            ("Nothing Else Matters", False),
        ]

    async def test_toggle_promotes_later_song(self, db: MusicDb, bus: EventBus) -> None:
        """A favorite later in the alphabet jumps ahead of non-favorites."""
        vm = MusicViewModel(db, bus=bus)
        await vm.join()

        await vm.toggle_favorite(vm.song_list[1])

        assert [s.name for s in vm.song_list] == ["Nothing Else Matters", "Enter Sandman"]
        assert vm.song_list[0].is_favorite is True

    async def test_toggle_twice_restores_flag(self, db: MusicDb, bus: EventBus) -> None:
        """Two sequential toggles return the song to its original state."""
        vm = MusicViewModel(db, bus=bus)
        await vm.join()
        song_id = vm.song_list[0].id

        await vm.toggle_favorite(vm.song_list[0])
        toggled = next(s for s in vm.song_list if s.id == song_id)
        assert toggled.is_favorite is True

        await vm.toggle_favorite(toggled)
        restored = next(s for s in vm.song_list if s.id == song_id)
        assert restored.is_favorite is False
        assert (await db.get_song(song_id)).is_favorite is False

    async def test_snapshot_is_replaced_not_patched(self, db: MusicDb, bus: EventBus) -> None:
        """The reload picks up changes made behind the view model's back."""
        vm = MusicViewModel(db, bus=bus)
        await vm.join()

        await db.insert_song(Song(0, "Battery", "A", "Thrash Metal", 312))
        await vm.toggle_favorite(vm.song_list[0])

        assert len(vm.song_list) == 3
        assert "Battery" in [s.name for s in vm.song_list]

    async def test_toggle_failure_propagates_to_task(self, bus: EventBus) -> None:
        """A failing store call terminates the task with that error."""
        db = AsyncMock(spec=MusicDb)
        db.list_songs.return_value = []
        db.list_artists.return_value = []
        db.set_favorite.side_effect = RuntimeError("disk full")

        vm = MusicViewModel(db, bus=bus)
        await vm.join()

        task = vm.toggle_favorite(Song(1, "x", "A", "g", 1))
        with pytest.raises(RuntimeError, match="disk full"):
            await task
        db.set_favorite.assert_awaited_once_with(1, True)


class TestArtistViews:
    """Tests for in-memory artist filtering."""

    async def test_songs_for_artist(self, db: MusicDb, bus: EventBus) -> None:
        """Filtering returns only the artist's songs."""
        vm = MusicViewModel(db, bus=bus)
        await vm.join()

        assert len(vm.songs_for_artist("A")) == 2
        assert vm.songs_for_artist("B") == []

    async def test_dangling_reference(self, db: MusicDb, bus: EventBus) -> None:
        """A song with an unknown artist is listed but matches no artist."""
        await db.insert_song(Song(0, "Orphan", "Z", "Ambient", 100))
        vm = MusicViewModel(db, bus=bus)
        await vm.join()

        orphan = next(s for s in vm.song_list if s.name == "Orphan")
        assert vm.find_artist(orphan.artist_id) is None
        for artist in vm.artist_list:
            assert orphan not in vm.songs_for_artist(artist.id)

    async def test_find_artist(self, db: MusicDb, bus: EventBus) -> None:
        vm = MusicViewModel(db, bus=bus)
        await vm.join()

        artist = vm.find_artist("B")
        assert artist is not None
        assert artist.name == "Gojira"


class TestTeardown:
    """Tests for close()."""

    async def test_close_discards_in_flight_load(self, db: MusicDb, bus: EventBus) -> None:
        """Results arriving after close are not written to the snapshot."""
        vm = MusicViewModel(db, bus=bus)
        vm.close()
        await vm.join()

        assert vm.closed
        assert vm.song_list == ()
        assert vm.artist_list == ()

    async def test_close_does_not_cancel_mutation(self, db: MusicDb, bus: EventBus) -> None:
        """An abandoned toggle still reaches the store."""
        vm = MusicViewModel(db, bus=bus)
        await vm.join()
        song = vm.song_list[0]

        task = vm.toggle_favorite(song)
        vm.close()
        await task

        assert not task.cancelled()
        assert (await db.get_song(song.id)).is_favorite is True
        assert vm.song_list[0].is_favorite is False


class TestEvents:
    """Tests for change notifications."""

    async def test_reloads_publish_events(self, db: MusicDb, bus: EventBus) -> None:
        """Every completed reload publishes a change event."""
        received: list[Event] = []

        async def handler(event: Event) -> None:
            received.append(event)

        bus.subscribe("library.*", handler)

        vm = MusicViewModel(db, bus=bus)
        await vm.join()
        assert sorted(e.event_type for e in received) == ["library.artists", "library.songs"]

        received.clear()
        await vm.toggle_favorite(vm.song_list[0])
        assert [e.to_dict() for e in received] == [{"type": "library.songs", "count": 2}]

    async def test_handler_error_is_isolated(self, db: MusicDb, bus: EventBus, caplog) -> None:
        """A failing subscriber doesn't break the reload."""

        async def broken(event: Event) -> None:
            raise ValueError("boom")

        bus.subscribe("library.songs", broken)

        with caplog.at_level(logging.ERROR):
            vm = MusicViewModel(db, bus=bus)
            await vm.join()

        assert len(vm.song_list) == 2
        assert "Error in event handler" in caplog.text
