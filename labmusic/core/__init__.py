"""
Core domain package.

This package contains the music library logic (store, seed data, state holder)
and is independent of any UI layer.

We intentionally keep exports minimal; consumers should usually import from the
specific module they need (e.g. `labmusic.core.music_db`).
"""

from __future__ import annotations

__all__: list[str] = [
    "CoreError",
    "StoreError",
    "DuplicateKeyError",
    "SchemaVersionError",
]


class CoreError(Exception):
    """Base class for core-layer exceptions."""


class StoreError(CoreError):
    """Raised when the local music store rejects an operation."""


class DuplicateKeyError(StoreError):
    """Raised when an insert collides with an existing primary key."""


class SchemaVersionError(StoreError):
    """Raised when the database file was written by a newer schema."""
