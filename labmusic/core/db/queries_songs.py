"""
Song-related DB queries used by `labmusic.core.music_db.MusicDb`.

Design:
- Functions are *pure DB helpers*: they take an open `aiosqlite.Connection`
  and return entities.
- These functions assume `conn.row_factory = aiosqlite.Row`.
- Writes are not committed here; the facade owns transactions.

Important:
- Do NOT interpolate user input into SQL.
"""

from __future__ import annotations

import aiosqlite

from labmusic.core.db.models import Song, song_from_row

_SONG_COLUMNS = "id, name, artist_id, genre, duration, isFavorite"


async def list_songs(conn: aiosqlite.Connection) -> list[Song]:
    """All songs, favorites first, then by name."""
    cursor = await conn.execute(
        f"""
        SELECT {_SONG_COLUMNS}
        FROM songs
        ORDER BY isFavorite DESC, name ASC
        """
    )
    rows = await cursor.fetchall()
    return [song_from_row(r) for r in rows]


async def get_song_by_id(conn: aiosqlite.Connection, song_id: int) -> Song | None:
    cursor = await conn.execute(
        f"SELECT {_SONG_COLUMNS} FROM songs WHERE id = ?",
        (int(song_id),),
    )
    row = await cursor.fetchone()
    if row is None:
        return None
    return song_from_row(row)


async def count_songs(conn: aiosqlite.Connection) -> int:
    cursor = await conn.execute("SELECT COUNT(*) AS c FROM songs;")
    row = await cursor.fetchone()
    return int(row["c"]) if row is not None else 0


async def insert_song(
    conn: aiosqlite.Connection, song: Song, *, preserve_id: bool = False
) -> int:
    """
    Insert a song and return its id.

    By default the supplied `song.id` is ignored and SQLite assigns a fresh one.
    With `preserve_id=True` the id is written as-is, so a collision raises
    `sqlite3.IntegrityError`.
    """
    params = {
        "name": song.name,
        "artist_id": song.artist_id,
        "genre": song.genre,
        "duration": int(song.duration),
        "is_favorite": 1 if song.is_favorite else 0,
    }
    if preserve_id:
        params["id"] = int(song.id)
        cursor = await conn.execute(
            """
            INSERT INTO songs (id, name, artist_id, genre, duration, isFavorite)
            VALUES (:id, :name, :artist_id, :genre, :duration, :is_favorite)
            """,
            params,
        )
    else:
        cursor = await conn.execute(
            """
            INSERT INTO songs (name, artist_id, genre, duration, isFavorite)
            VALUES (:name, :artist_id, :genre, :duration, :is_favorite)
            """,
            params,
        )
    return int(cursor.lastrowid)


async def set_favorite(conn: aiosqlite.Connection, song_id: int, is_favorite: bool) -> int:
    """Set the favorite flag of one song. Returns the number of rows touched (0 or 1)."""
    cursor = await conn.execute(
        "UPDATE songs SET isFavorite = ? WHERE id = ?",
        (1 if is_favorite else 0, int(song_id)),
    )
    return cursor.rowcount


async def update_song(conn: aiosqlite.Connection, song: Song) -> int:
    """Rewrite every column of the song with the same id. Returns rows touched."""
    cursor = await conn.execute(
        """
        UPDATE songs
        SET name = :name,
            artist_id = :artist_id,
            genre = :genre,
            duration = :duration,
            isFavorite = :is_favorite
        WHERE id = :id
        """,
        {
            "id": int(song.id),
            "name": song.name,
            "artist_id": song.artist_id,
            "genre": song.genre,
            "duration": int(song.duration),
            "is_favorite": 1 if song.is_favorite else 0,
        },
    )
    return cursor.rowcount
