"""
Change notifications for LabMusic.

UI layers subscribe here instead of polling the view model. Event types:
- library.songs: The in-memory song list was reloaded
- library.artists: The in-memory artist list was reloaded
- library.seeded: The empty store was filled with the seed data

Usage:
    from labmusic.core.events import event_bus

    async def on_songs(event: SongsChangedEvent) -> None:
        print(f"{event.count} songs")

    unsubscribe = event_bus.subscribe("library.songs", on_songs)
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from fnmatch import fnmatchcase
from typing import Any, Callable, ClassVar, Coroutine

logger = logging.getLogger(__name__)

# Type alias for event handlers
EventHandler = Callable[["Event"], Coroutine[Any, Any, None]]


@dataclass(frozen=True)
class Event:
    """Base class for all events. Subclasses set `event_type`."""

    event_type: ClassVar[str] = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert event to dictionary for JSON serialization."""
        return {"type": self.event_type, **asdict(self)}


@dataclass(frozen=True)
class SongsChangedEvent(Event):
    """Fired after the song snapshot has been replaced."""

    event_type: ClassVar[str] = "library.songs"
    count: int = 0


@dataclass(frozen=True)
class ArtistsChangedEvent(Event):
    """Fired after the artist snapshot has been replaced."""

    event_type: ClassVar[str] = "library.artists"
    count: int = 0


@dataclass(frozen=True)
class LibrarySeededEvent(Event):
    """Fired once the startup sequence has inserted the seed data."""

    event_type: ClassVar[str] = "library.seeded"
    artists: int = 0
    songs: int = 0


class EventBus:
    """
    Pub/sub for library change events.

    Subscriptions take a glob pattern ("library.songs", "library.*", "*").
    All calls happen on the event loop thread, so no locking is needed.
    A failing handler is logged and skipped.
    """

    def __init__(self) -> None:
        self._subscriptions: list[tuple[str, EventHandler]] = []

    def subscribe(self, pattern: str, handler: EventHandler) -> Callable[[], None]:
        """Register `handler` for events matching `pattern`. Returns an unsubscribe callable."""
        entry = (pattern, handler)
        self._subscriptions.append(entry)
        logger.debug("Subscribed to %s: %s", pattern, handler)

        def unsubscribe() -> None:
            if entry in self._subscriptions:
                self._subscriptions.remove(entry)

        return unsubscribe

    async def publish(self, event: Event) -> int:
        """Deliver `event` to matching handlers. Returns how many ran successfully."""
        handlers = [h for p, h in self._subscriptions if fnmatchcase(event.event_type, p)]

        delivered = 0
        for handler in handlers:
            try:
                await handler(event)
            except Exception:
                logger.exception("Error in event handler for %s", event.event_type)
            else:
                delivered += 1
        return delivered


# Global event bus instance
event_bus = EventBus()
