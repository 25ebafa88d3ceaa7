"""
Music database access layer.

Goals:
- SQLite + aiosqlite, async/await friendly.
- A single connection per process, opened lazily on first use.
- Keep schema small, but leave room to evolve (via user_version migrations).

Note:
- Models/DTOs live in `labmusic.core.db.models`
- Schema/versioning lives in `labmusic.core.db.schema`
- Query functions live in `labmusic.core.db.queries_*` modules
- `MusicDb` is the facade used by the rest of the codebase
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
import threading
from pathlib import Path

import aiosqlite

from labmusic.config import AppConfig, get_config
from labmusic.core import DuplicateKeyError, StoreError
from labmusic.core.db import queries_artists, queries_songs
from labmusic.core.db.models import Artist, Song
from labmusic.core.db.schema import ensure_schema as ensure_schema_sql

logger = logging.getLogger(__name__)


def _constraint_error(error: sqlite3.IntegrityError, duplicate_message: str) -> StoreError:
    """Map an IntegrityError: primary-key collisions become DuplicateKeyError."""
    if error.sqlite_errorname == "SQLITE_CONSTRAINT_PRIMARYKEY":
        return DuplicateKeyError(duplicate_message)
    return StoreError(f"Constraint failed: {error}")


class MusicDb:
    """
    Async access layer for the artists/songs store.

    Usage:
        db = MusicDb("music_database")
        songs = await db.list_songs()   # opens + ensures schema on first use

    Notes:
    - Prefer `get_database()` over constructing this directly; the process
      should share one instance.
    - Every write commits immediately. SQLite serializes conflicting writes.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = str(db_path)
        self._conn: aiosqlite.Connection | None = None
        self._open_lock = asyncio.Lock()

    @property
    def db_path(self) -> str:
        return self._db_path

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    async def open(self) -> None:
        """Open the connection and ensure the schema. Safe to call repeatedly."""
        await self._connection()

    async def close(self) -> None:
        if self._conn is None:
            return
        await self._conn.close()
        self._conn = None
        logger.debug("Closed music database %s", self._db_path)

    async def _connection(self) -> aiosqlite.Connection:
        if self._conn is not None:
            return self._conn

        async with self._open_lock:
            if self._conn is None:
                conn = await aiosqlite.connect(self._db_path)
                try:
                    conn.row_factory = aiosqlite.Row
                    await conn.execute("PRAGMA journal_mode = WAL;")
                    await conn.execute("PRAGMA synchronous = NORMAL;")
                    await ensure_schema_sql(conn)
                except BaseException:
                    # Stop the worker thread; a half-opened store is never kept.
                    await conn.close()
                    raise
                self._conn = conn
                logger.info("Opened music database %s", self._db_path)
        return self._conn

    # ===========================================================================
    # Songs
    # ===========================================================================

    async def list_songs(self) -> list[Song]:
        """All songs, favorites first, then by name ascending."""
        conn = await self._connection()
        return await queries_songs.list_songs(conn)

    async def get_song(self, song_id: int) -> Song | None:
        conn = await self._connection()
        return await queries_songs.get_song_by_id(conn, song_id)

    async def count_songs(self) -> int:
        conn = await self._connection()
        return await queries_songs.count_songs(conn)

    async def insert_song(self, song: Song, *, preserve_id: bool = False) -> int:
        """
        Insert a song and return the id the store assigned.

        The supplied `song.id` is ignored unless `preserve_id` is set, in which
        case an id collision raises `DuplicateKeyError`.
        """
        conn = await self._connection()
        try:
            song_id = await queries_songs.insert_song(conn, song, preserve_id=preserve_id)
        except sqlite3.IntegrityError as e:
            await conn.rollback()
            raise _constraint_error(e, f"Song id {song.id} already exists") from e
        await conn.commit()
        logger.debug("Inserted song %d (%s)", song_id, song.name)
        return song_id

    async def set_favorite(self, song_id: int, is_favorite: bool) -> None:
        """Set one song's favorite flag. Unknown ids are ignored."""
        conn = await self._connection()
        touched = await queries_songs.set_favorite(conn, song_id, is_favorite)
        await conn.commit()
        if touched == 0:
            logger.debug("set_favorite: no song with id %d", song_id)

    async def update_song(self, song: Song) -> None:
        """Rewrite all columns of the song with `song.id`. Unknown ids are ignored."""
        conn = await self._connection()
        touched = await queries_songs.update_song(conn, song)
        await conn.commit()
        if touched == 0:
            logger.debug("update_song: no song with id %d", song.id)

    # ===========================================================================
    # Artists
    # ===========================================================================

    async def list_artists(self) -> list[Artist]:
        conn = await self._connection()
        return await queries_artists.list_artists(conn)

    async def get_artist(self, artist_id: str) -> Artist | None:
        """Lookup by id; a dangling `Song.artist_id` simply yields None."""
        conn = await self._connection()
        return await queries_artists.get_artist_by_id(conn, artist_id)

    async def count_artists(self) -> int:
        conn = await self._connection()
        return await queries_artists.count_artists(conn)

    async def insert_artist(self, artist: Artist) -> None:
        """Insert an artist. An existing id raises `DuplicateKeyError`."""
        conn = await self._connection()
        try:
            await queries_artists.insert_artist(conn, artist)
        except sqlite3.IntegrityError as e:
            await conn.rollback()
            raise _constraint_error(e, f"Artist id {artist.id!r} already exists") from e
        await conn.commit()
        logger.debug("Inserted artist %s (%s)", artist.id, artist.name)


# Process-wide store. Construction is guarded so concurrent first callers
# from several threads still end up with exactly one instance.
_database: MusicDb | None = None
_database_lock = threading.Lock()


def get_database(config: AppConfig | None = None) -> MusicDb:
    """
    Get the process-wide MusicDb, constructing it on first call.

    Args:
        config: Used only by the first caller to pick the database path.
            Later calls return the existing instance and ignore it.

    Returns:
        The shared MusicDb instance.
    """
    global _database

    db = _database
    if db is not None:
        return db

    with _database_lock:
        if _database is None:
            cfg = config if config is not None else get_config()
            _database = MusicDb(cfg.database_path)
            logger.debug("Created music database handle for %s", cfg.database_path)
        return _database


def reset_database() -> None:
    """
    Forget the process-wide MusicDb.

    Useful for testing. Closing the old instance is the caller's job.
    """
    global _database
    with _database_lock:
        _database = None
