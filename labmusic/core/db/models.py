"""
DB models (entities + seed DTOs).

This module is intentionally lightweight:
- No DB connection knowledge
- No SQL
- Pure dataclasses + row conversion helpers
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class Artist:
    """Artist record as stored in SQLite. `id` is supplied by the seed data."""

    id: str
    name: str
    monthly_listeners: int
    album_count: int


@dataclass(frozen=True, slots=True)
class Song:
    """
    Song record as stored in SQLite.

    Notes:
    - `id` is assigned by the store on insert; pass 0 as a placeholder.
    - `artist_id` is a free-form reference to `Artist.id` (no FK constraint).
    - `duration` is in seconds.
    """

    id: int
    name: str
    artist_id: str
    genre: str
    duration: int
    is_favorite: bool = False


@dataclass(frozen=True, slots=True)
class ArtistDTO:
    """Seed record for an artist."""

    id: str
    name: str
    monthly_listeners: int
    album_count: int

    def to_entity(self) -> Artist:
        return Artist(
            id=self.id,
            name=self.name,
            monthly_listeners=self.monthly_listeners,
            album_count=self.album_count,
        )


@dataclass(frozen=True, slots=True)
class SongDTO:
    """Seed record for a song. `id` is the generation order, not the stored id."""

    id: int
    name: str
    artist_id: str
    genre: str
    duration: int

    def to_entity(self) -> Song:
        # The store generates the real id.
        return Song(
            id=0,
            name=self.name,
            artist_id=self.artist_id,
            genre=self.genre,
            duration=self.duration,
            is_favorite=False,
        )


def artist_from_row(row: Mapping[str, Any]) -> Artist:
    """Build an `Artist` from an `aiosqlite.Row` of the artists table."""
    return Artist(
        id=str(row["id"]),
        name=row["name"],
        monthly_listeners=int(row["monthlyListeners"]),
        album_count=int(row["album_count"]),
    )


def song_from_row(row: Mapping[str, Any]) -> Song:
    """Build a `Song` from an `aiosqlite.Row` of the songs table."""
    return Song(
        id=int(row["id"]),
        name=row["name"],
        artist_id=row["artist_id"],
        genre=row["genre"],
        duration=int(row["duration"]),
        is_favorite=bool(row["isFavorite"]),
    )
