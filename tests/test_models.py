"""Tests for robozzle.ui.models – LevelState and level list building."""

from __future__ import annotations

import pytest

from robozzle.core.levels import LevelDescriptor, parse_level
from robozzle.core.progress import LevelType, ProgressTracker
from robozzle.ui.models import LevelState, build_level_states


def _level(level_id: int, name: str = "Basics") -> LevelDescriptor:
    return parse_level(f"LEVEL {name}\nSIZE 3 1\nGRID:\n. * *\n", level_id=level_id)


# ===========================================================================
# LevelState dataclass
# ===========================================================================

class TestLevelState:
    @pytest.fixture()
    def sample_level(self) -> LevelDescriptor:
        return _level(0)

    def test_creation(self, sample_level: LevelDescriptor):
        ls = LevelState(level=sample_level, unlocked=True, completed=False, stars_collected=1)
        assert ls.level is sample_level
        assert ls.best_time is None
        assert ls.is_current is False  # default

    def test_star_ratio(self, sample_level: LevelDescriptor):
        ls = LevelState(level=sample_level, unlocked=True, completed=False, stars_collected=1)
        assert ls.star_ratio == "1/2"

    def test_equality(self, sample_level: LevelDescriptor):
        a = LevelState(level=sample_level, unlocked=True, completed=True, stars_collected=2)
        b = LevelState(level=sample_level, unlocked=True, completed=True, stars_collected=2)
        assert a == b


# ===========================================================================
# build_level_states
# ===========================================================================

class TestBuildLevelStates:
    @pytest.fixture()
    def tracker(self) -> ProgressTracker:
        t = ProgressTracker()
        t.set_levels(LevelType.TUTORIAL, [_level(0, "One"), _level(1, "Two"), _level(2, "Three")])
        t.set_levels(LevelType.SCORED, [_level(0, "Alpha"), _level(1, "Beta")])
        return t

    def test_tutorial_unlocking(self, tracker: ProgressTracker):
        states = build_level_states(tracker)
        assert [s.level.name for s in states] == ["One", "Two", "Three"]
        assert [s.unlocked for s in states] == [True, False, False]
        assert [s.is_current for s in states] == [True, False, False]

    def test_completed_level_unlocks_next(self, tracker: ProgressTracker):
        state = tracker.problem_state(0)
        state.stars_collected = 2
        state.check_completion(2)
        state.set_completion_time(7.5)
        states = build_level_states(tracker)
        assert states[0].completed is True
        assert states[0].best_time == 7.5
        assert states[0].star_ratio == "2/2"
        assert [s.unlocked for s in states] == [True, True, False]

    def test_scored_all_unlocked(self, tracker: ProgressTracker):
        tracker.switch_level_type(LevelType.SCORED)
        states = build_level_states(tracker)
        assert all(s.unlocked for s in states)

    def test_other_collection_is_locked(self, tracker: ProgressTracker):
        states = build_level_states(tracker, LevelType.SCORED)
        assert [s.level.name for s in states] == ["Alpha", "Beta"]
        assert not any(s.unlocked or s.is_current for s in states)
