"""
LabMusic application wiring.

`MusicApp` owns the startup sequence: acquire the shared store, seed it when
empty, then build the view model the UI reads from.
"""

from __future__ import annotations

import logging

from labmusic.config import AppConfig, get_config
from labmusic.core.events import EventBus, LibrarySeededEvent, event_bus
from labmusic.core.music_db import MusicDb, get_database
from labmusic.core.seed import DataGenerator, seed_if_empty
from labmusic.core.view_model import MusicViewModel

logger = logging.getLogger(__name__)


class MusicApp:
    """
    Coordinates the store, the seed data and the view model.

    Seeding completes before the view model is created, so the first load
    already sees the seed rows.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        db: MusicDb | None = None,
        bus: EventBus | None = None,
    ) -> None:
        """
        Args:
            config: Application config. Defaults to the global config.
            db: Store to use instead of the process-wide one (tests).
            bus: Event bus to publish on. Defaults to the global bus.
        """
        self.config = config if config is not None else get_config()
        self._db = db
        self.bus = bus if bus is not None else event_bus
        self.view_model: MusicViewModel | None = None
        self._running = False

    @property
    def db(self) -> MusicDb:
        if self._db is None:
            self._db = get_database(self.config)
        return self._db

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> MusicViewModel:
        """Run the startup sequence and return the loaded view model."""
        if self._running and self.view_model is not None:
            return self.view_model

        logger.info("Starting LabMusic (database: %s)", self.db.db_path)
        await self.db.open()

        if await seed_if_empty(self.db):
            await self.bus.publish(
                LibrarySeededEvent(
                    artists=len(DataGenerator.get_artists()),
                    songs=len(DataGenerator.get_songs()),
                )
            )

        self.view_model = MusicViewModel(self.db, bus=self.bus)
        await self.view_model.join()
        self._running = True

        logger.info(
            "Library loaded: %d songs, %d artists",
            len(self.view_model.song_list),
            len(self.view_model.artist_list),
        )
        return self.view_model

    async def stop(self) -> None:
        """
        Tear down the view model and close the store.

        Also safe after a failed or partial `start()`: whatever was opened
        gets closed.
        """
        if self._running:
            logger.info("Stopping LabMusic...")
        self._running = False
        if self.view_model is not None:
            self.view_model.close()
        if self._db is not None:
            await self._db.close()
