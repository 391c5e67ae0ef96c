#!/usr/bin/env python3
"""Main entry point for the StoryVibe player preview CLI."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import logging.config
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from storyvibe_player.domain.playback.events import PlaybackRejected
from storyvibe_player.domain.playback.value_objects import PlaybackOptions, PlaybackState
from storyvibe_player.domain.shared.messages import DisplayMessages, LogTemplates

if TYPE_CHECKING:
    from storyvibe_player.config.settings import Settings

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"


def setup_logging(log_level: str = "INFO") -> None:
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)

    try:
        with open(_LOGGING_CONFIG_PATH) as f:
            config = json.load(f)
        logging.config.dictConfig(config)
    except (FileNotFoundError, json.JSONDecodeError, ValueError):
        logging.basicConfig(
            level=resolved_level,
            format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.warning(
            "Could not load %s, falling back to basic config", _LOGGING_CONFIG_PATH
        )

    logging.getLogger().setLevel(resolved_level)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="storyvibe-player",
        description="Load a chapter music track and run it through the playback controller.",
    )
    parser.add_argument("url", help="Audio URL or local file path")
    parser.add_argument("--no-loop", action="store_true", help="Stop at the end of the track")
    parser.add_argument("--no-fade", action="store_true", help="Skip the autoplay fade-in")
    parser.add_argument("--autoplay", action="store_true", help="Start playback automatically")
    parser.add_argument(
        "--volume", type=float, default=None, help="Initial volume between 0 and 1"
    )
    parser.add_argument(
        "--seconds", type=float, default=5.0, help="How long to keep playing (default: 5)"
    )
    return parser


async def preview(
    source_url: str, options: PlaybackOptions, *, seconds: float, settings: Settings
) -> int:
    """Mount a player, play for *seconds*, and print the time label as it changes."""
    from storyvibe_player.config.container import create_container

    container = create_container(settings)
    host = container.create_player_host(title=source_url)
    controller = host.controller

    settled = asyncio.Event()
    finished = asyncio.Event()
    last_line = ""

    def on_change(snapshot) -> None:
        nonlocal last_line
        if not snapshot.is_loading:
            settled.set()
        if snapshot.state in {PlaybackState.ENDED, PlaybackState.FAILED}:
            finished.set()

        view = host.view()
        line = f"[{snapshot.state.value}] {view.time_label} vol={snapshot.effective_volume:.2f}"
        if line != last_line:
            last_line = line
            print(line, flush=True)

    controller.subscribe(on_change)

    async def on_rejected(event: PlaybackRejected) -> None:
        print(DisplayMessages.PLAYBACK_REJECTED.format(reason=event.reason), file=sys.stderr)

    container.event_bus.subscribe(PlaybackRejected, on_rejected)

    try:
        host.mount(source_url, options)
        await settled.wait()

        if controller.snapshot().has_failed:
            print(host.view().message, file=sys.stderr)
            return 1

        if not options.auto_play:
            await controller.play()

        try:
            await asyncio.wait_for(finished.wait(), timeout=seconds)
        except TimeoutError:
            pass
        return 0
    finally:
        await controller.flush_events()
        container.shutdown()
        await controller.flush_events()


def main(argv: list[str] | None = None) -> int:
    from storyvibe_player.config.settings import get_settings

    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level)

    logger = logging.getLogger(__name__)
    logger.info(LogTemplates.APP_STARTING, settings.environment)

    volume = settings.playback.default_volume if args.volume is None else args.volume
    options = PlaybackOptions(
        loop=not args.no_loop,
        fade_enabled=not args.no_fade,
        auto_play=args.autoplay,
        initial_volume=max(0.0, min(1.0, volume)),
    )

    try:
        return asyncio.run(preview(args.url, options, seconds=args.seconds, settings=settings))
    except KeyboardInterrupt:
        logger.info(LogTemplates.APP_KEYBOARD_INTERRUPT)
        return 0
    except Exception as e:
        logger.exception(LogTemplates.APP_FATAL_ERROR, e)
        return 1


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
