"""
Database schema + versioning for LabMusic.

- Connection management and the public `MusicDb` facade live in `music_db.py`
- Schema creation and forward-only migrations live here

Design notes:
- We use SQLite `PRAGMA user_version` as the schema version.
- Migrations are forward-only (no downgrade support).
- Column names (`monthlyListeners`, `isFavorite`, ...) are part of the on-disk
  layout and must not be renamed.
"""

from __future__ import annotations

import logging
from typing import Final

import aiosqlite

from labmusic.core import SchemaVersionError

logger = logging.getLogger(__name__)

# Bump when you change the schema and add a migration in `migrate()`.
SCHEMA_VERSION: Final[int] = 1


async def ensure_schema(conn: aiosqlite.Connection) -> None:
    """
    Create or migrate schema to current version.

    This function assumes `conn` is an open aiosqlite connection.
    """
    cursor = await conn.execute("PRAGMA user_version;")
    row = await cursor.fetchone()
    current = int(row[0]) if row is not None else 0

    if current > SCHEMA_VERSION:
        raise SchemaVersionError(
            f"Database schema version {current} is newer than supported {SCHEMA_VERSION}."
        )

    if current == SCHEMA_VERSION:
        return

    logger.info("Migrating music database schema %d -> %d", current, SCHEMA_VERSION)
    await migrate(conn, from_version=current, to_version=SCHEMA_VERSION)
    await conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION};")
    await conn.commit()


async def migrate(conn: aiosqlite.Connection, *, from_version: int, to_version: int) -> None:
    """Perform forward-only migrations."""
    # v0 -> v1
    if from_version == 0 and to_version >= 1:
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS artists (
                id TEXT PRIMARY KEY,
                name TEXT,
                monthlyListeners INTEGER,
                album_count INTEGER
            )
            """
        )

        # artist_id is a plain string: songs may point at artists that don't exist.
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS songs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT,
                artist_id TEXT,
                genre TEXT,
                duration INTEGER,
                isFavorite INTEGER
            )
            """
        )
        await conn.commit()
        from_version = 1

    if from_version != to_version:
        raise SchemaVersionError(f"No migration path from {from_version} to {to_version}.")
