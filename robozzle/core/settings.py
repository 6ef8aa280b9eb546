from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from robozzle.core.execution import ExecutionSpeed

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent.parent / "data"
DEFAULT_SETTINGS_FILE = DATA_DIR / "settings.yaml"


@dataclass
class Settings:
    """Runtime configuration. Directories are absolute once loaded."""

    tutorials_dir: Path = field(default_factory=lambda: DATA_DIR / "levels" / "tutorials")
    levels_dir: Path = field(default_factory=lambda: DATA_DIR / "levels" / "scored")
    results_dir: Path = field(default_factory=Path.cwd)
    session_minutes: float = 25.0
    frame_interval_ms: int = 16
    initial_speed: ExecutionSpeed = ExecutionSpeed.NORMAL


def _as_dir(raw: Dict[str, Any], key: str, base_dir: Path, default: Path) -> Path:
    value = raw.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValueError(f"settings: '{key}' must be a path string")
    path = Path(value).expanduser()
    return path if path.is_absolute() else base_dir / path


def _as_number(raw: Dict[str, Any], key: str, default: float) -> float:
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ValueError(f"settings: '{key}' must be a positive number")
    return value


def settings_from_dict(raw: Dict[str, Any], base_dir: Path) -> Settings:
    defaults = Settings()
    speed_name = raw.get("initial_speed", defaults.initial_speed.value)
    try:
        speed = ExecutionSpeed(speed_name)
    except ValueError:
        raise ValueError(f"settings: unknown 'initial_speed' {speed_name!r}") from None
    return Settings(
        tutorials_dir=_as_dir(raw, "tutorials_dir", base_dir, defaults.tutorials_dir),
        levels_dir=_as_dir(raw, "levels_dir", base_dir, defaults.levels_dir),
        results_dir=_as_dir(raw, "results_dir", base_dir, defaults.results_dir),
        session_minutes=float(_as_number(raw, "session_minutes", defaults.session_minutes)),
        frame_interval_ms=int(_as_number(raw, "frame_interval_ms", defaults.frame_interval_ms)),
        initial_speed=speed,
    )


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load settings from YAML; a missing or unreadable file yields the defaults."""
    path = Path(path) if path is not None else DEFAULT_SETTINGS_FILE
    if not path.exists():
        logger.info("No settings file at %s, using defaults", path)
        return Settings()
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, OSError) as e:
        logger.warning("Could not load settings from %s: %s", path, e)
        return Settings()
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        logger.warning("Settings file %s is not a mapping, using defaults", path)
        return Settings()
    return settings_from_dict(raw, path.resolve().parent)
