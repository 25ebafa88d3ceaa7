"""
Application state holder.

`MusicViewModel` keeps the song and artist lists the UI renders. Reads are
plain attribute access on the last completed snapshot; every mutation goes to
the store and is followed by a full reload, so the snapshot always mirrors the
database once a task finishes.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Coroutine

from labmusic.core.db.models import Artist, Song
from labmusic.core.events import ArtistsChangedEvent, EventBus, SongsChangedEvent, event_bus
from labmusic.core.music_db import MusicDb

logger = logging.getLogger(__name__)


class MusicViewModel:
    """
    In-memory view of the music store.

    Must be constructed inside a running event loop: the initial load of both
    lists is scheduled immediately and runs in the background. Until it
    completes `song_list` and `artist_list` are empty.

    Tasks started by this object are never cancelled. After `close()` their
    results are dropped instead of being written to the snapshot.
    """

    def __init__(self, db: MusicDb, *, bus: EventBus | None = None) -> None:
        # Raises RuntimeError outside of a running loop.
        self._loop = asyncio.get_running_loop()
        self._db = db
        self._bus = bus if bus is not None else event_bus
        self._songs: tuple[Song, ...] = ()
        self._artists: tuple[Artist, ...] = ()
        self._tasks: set[asyncio.Task[Any]] = set()
        self._closed = False

        self._launch(self._load_songs(), "load-songs")
        self._launch(self._load_artists(), "load-artists")

    @property
    def song_list(self) -> tuple[Song, ...]:
        return self._songs

    @property
    def artist_list(self) -> tuple[Artist, ...]:
        return self._artists

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        """Number of load/mutation tasks still running."""
        return len(self._tasks)

    def toggle_favorite(self, song: Song) -> asyncio.Task[None]:
        """
        Flip `song.is_favorite` in the store, then reload the song list.

        The flag is negated from the `song` passed in, not from the store.
        Returns the background task so callers can await completion.
        """
        return self._launch(self._toggle_favorite(song), f"toggle-{song.id}")

    def songs_for_artist(self, artist_id: str) -> list[Song]:
        """Songs in the current snapshot that reference `artist_id`."""
        return [s for s in self._songs if s.artist_id == artist_id]

    def find_artist(self, artist_id: str) -> Artist | None:
        for artist in self._artists:
            if artist.id == artist_id:
                return artist
        return None

    async def join(self) -> None:
        """Wait until every task started so far has finished. Re-raises failures."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def close(self) -> None:
        """Tear down: late results from in-flight tasks are discarded."""
        if self._closed:
            return
        self._closed = True
        if self._tasks:
            logger.debug("View model closed with %d task(s) in flight", len(self._tasks))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _launch(self, coro: Coroutine[Any, Any, None], name: str) -> asyncio.Task[None]:
        task = self._loop.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Task %s failed: %s", task.get_name(), exc, exc_info=exc)

    async def _load_songs(self) -> None:
        songs = await self._db.list_songs()
        if self._closed:
            return
        self._songs = tuple(songs)
        await self._bus.publish(SongsChangedEvent(count=len(songs)))

    async def _load_artists(self) -> None:
        artists = await self._db.list_artists()
        if self._closed:
            return
        self._artists = tuple(artists)
        await self._bus.publish(ArtistsChangedEvent(count=len(artists)))

    async def _toggle_favorite(self, song: Song) -> None:
        new_state = not song.is_favorite
        logger.debug("Setting favorite=%s for song %d (%s)", new_state, song.id, song.name)
        await self._db.set_favorite(song.id, new_state)
        await self._load_songs()
