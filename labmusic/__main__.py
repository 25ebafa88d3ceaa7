"""
LabMusic - Entry Point

Run with: python -m labmusic
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from labmusic import __version__
from labmusic.app import MusicApp
from labmusic.config import AppConfig, load_config
from labmusic.core.view_model import MusicViewModel


def setup_logging(level: str = "INFO", verbose: bool = False) -> None:
    """Configure logging for the application."""
    log_level = logging.DEBUG if verbose else getattr(logging, level, logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Reduce noise from third-party libraries
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="labmusic",
        description="LabMusic - browse songs and artists from the local library",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to a TOML config file (default: bundled labmusic.toml)",
    )

    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory holding the music database (overrides the config)",
    )

    parser.add_argument(
        "--toggle",
        type=int,
        metavar="SONG_ID",
        default=None,
        help="Toggle the favorite flag of a song before listing",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser.parse_args(argv)


def format_duration(seconds: int) -> str:
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}:{secs:02d}"


def render(view_model: MusicViewModel) -> str:
    """Plain-text rendering of both lists."""
    lines = ["Songs"]
    for song in view_model.song_list:
        star = "*" if song.is_favorite else " "
        lines.append(
            f" {star} [{song.id}] {song.name} - {song.genre} "
            f"({format_duration(song.duration)}) artist: {song.artist_id}"
        )

    lines.append("")
    lines.append("Artists")
    for artist in view_model.artist_list:
        songs = view_model.songs_for_artist(artist.id)
        lines.append(
            f"   [{artist.id}] {artist.name} - {artist.monthly_listeners:,} monthly listeners, "
            f"{artist.album_count} albums, {len(songs)} songs"
        )
    return "\n".join(lines)


async def run_app(config: AppConfig, toggle: int | None) -> None:
    """Start the app, apply an optional toggle and print the library."""
    app = MusicApp(config)
    try:
        view_model = await app.start()
        if toggle is not None:
            song = next((s for s in view_model.song_list if s.id == toggle), None)
            if song is None:
                logging.getLogger(__name__).warning("No song with id %d", toggle)
            else:
                await view_model.toggle_favorite(song)
        print(render(view_model))
    finally:
        await app.stop()


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the application."""
    args = parse_args(argv)
    config = load_config(args.config)
    if args.data_dir is not None:
        config.data_dir = args.data_dir
    setup_logging(config.log_level, verbose=args.verbose)

    logger = logging.getLogger(__name__)
    logger.debug("Starting LabMusic...")

    try:
        asyncio.run(run_app(config, args.toggle))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.exception("Fatal error: %s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
