"""
Internal DB subpackage for LabMusic.

Models, schema and query groups live here; `MusicDb` in
`labmusic.core.music_db` stays the single public interface that the rest of
the codebase imports.
"""

from __future__ import annotations

# Models / DTOs
from .models import Artist, ArtistDTO, Song, SongDTO

# Schema / migrations
from .schema import SCHEMA_VERSION, ensure_schema, migrate

__all__ = [
    # models
    "Artist",
    "ArtistDTO",
    "Song",
    "SongDTO",
    # schema
    "SCHEMA_VERSION",
    "ensure_schema",
    "migrate",
]
