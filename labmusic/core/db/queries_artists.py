"""
Artist-related DB queries used by `labmusic.core.music_db.MusicDb`.

Same conventions as `queries_songs`: pure helpers over an open connection,
`aiosqlite.Row` row factory, no commits.
"""

from __future__ import annotations

import aiosqlite

from labmusic.core.db.models import Artist, artist_from_row

_ARTIST_COLUMNS = "id, name, monthlyListeners, album_count"


async def list_artists(conn: aiosqlite.Connection) -> list[Artist]:
    """All artists in storage order."""
    cursor = await conn.execute(f"SELECT {_ARTIST_COLUMNS} FROM artists")
    rows = await cursor.fetchall()
    return [artist_from_row(r) for r in rows]


async def get_artist_by_id(conn: aiosqlite.Connection, artist_id: str) -> Artist | None:
    cursor = await conn.execute(
        f"SELECT {_ARTIST_COLUMNS} FROM artists WHERE id = ?",
        (artist_id,),
    )
    row = await cursor.fetchone()
    if row is None:
        return None
    return artist_from_row(row)


async def count_artists(conn: aiosqlite.Connection) -> int:
    cursor = await conn.execute("SELECT COUNT(*) AS c FROM artists;")
    row = await cursor.fetchone()
    return int(row["c"]) if row is not None else 0


async def insert_artist(conn: aiosqlite.Connection, artist: Artist) -> None:
    """Plain INSERT: an existing id raises `sqlite3.IntegrityError`."""
    await conn.execute(
        """
        INSERT INTO artists (id, name, monthlyListeners, album_count)
        VALUES (?, ?, ?, ?)
        """,
        (artist.id, artist.name, int(artist.monthly_listeners), int(artist.album_count)),
    )
