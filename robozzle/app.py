"""Application entry point: load settings and levels, then drive the session."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from PySide6.QtCore import QCoreApplication

from robozzle.core.levels import (
    EmptyLevelDirectoryError,
    LevelDirectoryNotFoundError,
    LevelParseError,
    load_levels_from_directory,
)
from robozzle.core.progress import LevelType, ProgressTracker, parse_full_name
from robozzle.core.session import GameSession
from robozzle.core.settings import Settings, load_settings
from robozzle.ui.controller import GameController


def configure_logging() -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def load_tracker(settings: Settings) -> ProgressTracker:
    """Load both level sets. Raises the level loading errors unchanged."""
    tracker = ProgressTracker()
    tracker.set_levels(LevelType.TUTORIAL, load_levels_from_directory(settings.tutorials_dir))
    tracker.set_levels(LevelType.SCORED, load_levels_from_directory(settings.levels_dir))
    return tracker


def _parse_args(argv: List[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="robozzle", description="Robot programming puzzles")
    parser.add_argument("name", nargs="+", help="player name, last name first")
    parser.add_argument("--settings", type=Path, default=None, help="path to a settings YAML file")
    return parser.parse_args(argv)


def run(argv: Optional[List[str]] = None) -> int:
    """Load everything, start the frame loop and block until the session ends."""
    configure_logging()
    args = _parse_args(sys.argv[1:] if argv is None else argv)

    player = parse_full_name(" ".join(args.name))
    if player is None:
        logging.error("Please give a last name and a first name")
        return 2

    settings = load_settings(args.settings)
    try:
        tracker = load_tracker(settings)
    except LevelDirectoryNotFoundError as e:
        logging.error("Missing level directory: %s", e)
        return 1
    except EmptyLevelDirectoryError as e:
        logging.error("Empty level directory: %s", e)
        return 1
    except LevelParseError as e:
        logging.error("Invalid level file: %s", e)
        return 1

    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    app.setApplicationName("Robozzle")

    session = GameSession(tracker, settings)
    session.enter_level(0)
    controller = GameController(session, player, settings.frame_interval_ms, settings.results_dir)
    controller.tutorials_completed.connect(lambda: controller.switch_level_type(LevelType.SCORED))
    controller.time_up.connect(app.quit)
    controller.all_levels_completed.connect(app.quit)
    logging.info("Player %s %s ready", player.last_name, player.first_name)

    controller.start()
    code = app.exec()
    controller.shutdown()
    return code


if __name__ == "__main__":
    sys.exit(run())
