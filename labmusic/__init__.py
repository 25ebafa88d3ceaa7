"""
LabMusic - a small local music library.

Lists songs and artists from an on-device SQLite database, lets the user mark
favorites, and shows artist details.
"""

__version__ = "0.1.0"
__author__ = "LabMusic Contributors"
__license__ = "GPL-2.0"

from labmusic.app import MusicApp

__all__ = ["MusicApp", "__version__"]
