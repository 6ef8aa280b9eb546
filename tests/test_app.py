"""Tests for robozzle.app – startup checks before the frame loop."""

from __future__ import annotations

from pathlib import Path

from robozzle.app import load_tracker, run
from robozzle.core.progress import LevelType
from robozzle.core.settings import Settings


def _settings_file(tmp_path: Path, tutorials: str, scored: str) -> Path:
    path = tmp_path / "settings.yaml"
    path.write_text(f"tutorials_dir: {tutorials}\nlevels_dir: {scored}\n", encoding="utf-8")
    return path


class TestLoadTracker:
    def test_bundled_levels(self):
        tracker = load_tracker(Settings())
        assert tracker.current_type is LevelType.TUTORIAL
        assert len(tracker.levels(LevelType.TUTORIAL)) == 3
        assert len(tracker.levels(LevelType.SCORED)) == 3


class TestRun:
    def test_single_word_name_rejected(self):
        assert run(["Solo"]) == 2

    def test_missing_level_directory(self, tmp_path: Path):
        (tmp_path / "tut").mkdir()
        (tmp_path / "tut" / "1.txt").write_text("LEVEL One\n", encoding="utf-8")
        path = _settings_file(tmp_path, "tut", "missing")
        assert run(["DUPONT", "Jean", "--settings", str(path)]) == 1

    def test_empty_level_directory(self, tmp_path: Path):
        (tmp_path / "tut").mkdir()
        path = _settings_file(tmp_path, "tut", "tut")
        assert run(["DUPONT", "Jean", "--settings", str(path)]) == 1

    def test_invalid_level_file(self, tmp_path: Path):
        (tmp_path / "tut").mkdir()
        (tmp_path / "tut" / "1.txt").write_text("SIZE x 1\n", encoding="utf-8")
        path = _settings_file(tmp_path, "tut", "tut")
        assert run(["DUPONT", "Jean", "--settings", str(path)]) == 1
