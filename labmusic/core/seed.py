"""
Initial library contents.

`DataGenerator` returns the fixed seed records; `seed_if_empty` is the startup
policy that writes them into an empty store.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from labmusic.core.db.models import ArtistDTO, SongDTO

if TYPE_CHECKING:
    from labmusic.core.music_db import MusicDb

logger = logging.getLogger(__name__)


class DataGenerator:
    """Deterministic seed data. No I/O, no randomness."""

    @staticmethod
    def get_artists() -> list[ArtistDTO]:
        return [
            ArtistDTO("A", "Metallica", 8_234_567, 10),
            ArtistDTO("B", "Gojira", 1_234_567, 6),
            ArtistDTO("C", "Taylor Swift", 9_876_543, 9),
        ]

    @staticmethod
    def get_songs() -> list[SongDTO]:
        rows = [
            ("Enter Sandman", "A", "Heavy Metal", 332),
            ("Nothing Else Matters", "A", "Heavy Metal", 386),
        ]
        return [
            SongDTO(song_id, name, artist_id, genre, duration)
            for song_id, (name, artist_id, genre, duration) in enumerate(rows, start=1)
        ]


async def seed_if_empty(db: MusicDb, generator: type[DataGenerator] = DataGenerator) -> bool:
    """
    Insert the seed data if the store has no artists.

    Artists are inserted before songs, one awaited insert at a time.
    The check-then-insert is not locked; run it from a single startup path.

    Returns:
        True if the store was seeded, False if it already had data.
    """
    if await db.list_artists():
        logger.debug("Music database already populated, skipping seed")
        return False

    logger.info("Music database is empty, inserting initial data...")
    artists = generator.get_artists()
    songs = generator.get_songs()

    for artist in artists:
        await db.insert_artist(artist.to_entity())

    for song in songs:
        await db.insert_song(song.to_entity())

    logger.info("Inserted %d artists and %d songs", len(artists), len(songs))
    return True
