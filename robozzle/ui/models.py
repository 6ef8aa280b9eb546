"""Data models used by the UI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from robozzle.core.levels import LevelDescriptor
from robozzle.core.progress import LevelType, ProgressTracker


@dataclass
class LevelState:
    """UI state for a single level: progress, unlock status, and selection."""

    level: LevelDescriptor
    unlocked: bool
    completed: bool
    stars_collected: int
    best_time: Optional[float] = None
    is_current: bool = False

    @property
    def star_ratio(self) -> str:
        return f"{self.stars_collected}/{self.level.total_stars}"


def build_level_states(tracker: ProgressTracker, level_type: Optional[LevelType] = None) -> List[LevelState]:
    level_type = level_type or tracker.current_type
    in_current = level_type is tracker.current_type
    states = []
    for index, level in enumerate(tracker.levels(level_type)):
        problem = tracker.problem_state(level.id, level_type)
        states.append(
            LevelState(
                level=level,
                unlocked=tracker.can_switch_to(index) if in_current else False,
                completed=problem.is_completed if problem else False,
                stars_collected=problem.stars_collected if problem else 0,
                best_time=problem.completion_time if problem else None,
                is_current=in_current and index == tracker.current_index,
            )
        )
    return states
