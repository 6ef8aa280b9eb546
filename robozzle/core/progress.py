from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from robozzle.core.levels import LevelDescriptor
from robozzle.core.problems import ProblemState

logger = logging.getLogger(__name__)


class LevelType(Enum):
    TUTORIAL = "tutorial"
    SCORED = "scored"


@dataclass
class PlayerInfo:
    first_name: str
    last_name: str

    @property
    def report_filename(self) -> str:
        last = self.last_name.replace(" ", "_")
        first = self.first_name.replace(" ", "_")
        return f"results_{last}_{first}.txt"


def parse_full_name(full_name: str) -> Optional[PlayerInfo]:
    """Split "LAST First [Middle...]" into a player; None if fewer than two words."""
    parts = full_name.split()
    if len(parts) < 2:
        return None
    return PlayerInfo(first_name=" ".join(parts[1:]), last_name=parts[0])


class ProgressTracker:
    """Level sets and per-level progress for the tutorial and scored collections.

    Each collection keeps its own current index and its own ProblemState per
    level id. Switching collection always restarts at its first level.
    """

    def __init__(self) -> None:
        self._current_type = LevelType.TUTORIAL
        self._current_index = 0
        self._levels: Dict[LevelType, List[LevelDescriptor]] = {t: [] for t in LevelType}
        self._states: Dict[LevelType, Dict[int, ProblemState]] = {t: {} for t in LevelType}

    @property
    def current_type(self) -> LevelType:
        return self._current_type

    @property
    def current_index(self) -> int:
        return self._current_index

    def set_levels(self, level_type: LevelType, levels: List[LevelDescriptor]) -> None:
        self._levels[level_type] = list(levels)
        self._states[level_type] = {
            level.id: ProblemState.for_limits(level.function_limits) for level in levels
        }
        if level_type is self._current_type:
            self._current_index = 0

    def levels(self, level_type: Optional[LevelType] = None) -> List[LevelDescriptor]:
        return list(self._levels[level_type or self._current_type])

    def current_level(self) -> Optional[LevelDescriptor]:
        levels = self._levels[self._current_type]
        if 0 <= self._current_index < len(levels):
            return levels[self._current_index]
        return None

    def problem_state(self, level_id: int, level_type: Optional[LevelType] = None) -> Optional[ProblemState]:
        return self._states[level_type or self._current_type].get(level_id)

    def current_problem_state(self) -> Optional[ProblemState]:
        level = self.current_level()
        if level is None:
            return None
        return self.problem_state(level.id)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def switch_level_type(self, level_type: LevelType) -> None:
        self._current_type = level_type
        self._current_index = 0

    def switch_to_level(self, index: int) -> None:
        if not 0 <= index < len(self._levels[self._current_type]):
            raise IndexError(f"No {self._current_type.value} level at index {index}")
        self._current_index = index

    def can_proceed_to_next(self) -> bool:
        state = self.current_problem_state()
        return state is not None and state.is_completed

    def can_switch_to(self, index: int) -> bool:
        """Tutorials unlock one at a time; scored levels are all open."""
        if not 0 <= index < len(self._levels[self._current_type]):
            return False
        if self._current_type is LevelType.SCORED:
            return True
        return index <= self._current_index or (
            index == self._current_index + 1 and self.can_proceed_to_next()
        )

    def try_next_level(self) -> Optional[int]:
        if self._current_type is LevelType.TUTORIAL and not self.can_proceed_to_next():
            return None
        next_index = self._current_index + 1
        if next_index >= len(self._levels[self._current_type]):
            return None
        self._current_index = next_index
        return next_index

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    def _all_completed(self, level_type: LevelType) -> bool:
        states = self._states[level_type]
        return all(
            states[level.id].is_completed if level.id in states else False
            for level in self._levels[level_type]
        )

    def all_tutorials_completed(self) -> bool:
        return self._all_completed(LevelType.TUTORIAL)

    def all_levels_completed(self) -> bool:
        return self._all_completed(LevelType.SCORED)

    def completed_count(self, level_type: Optional[LevelType] = None) -> int:
        states = self._states[level_type or self._current_type]
        return sum(1 for state in states.values() if state.is_completed)

    # ------------------------------------------------------------------
    # Report
    # ------------------------------------------------------------------

    def generate_final_report(self, player: PlayerInfo) -> str:
        lines = [f"{player.last_name} {player.first_name}", ""]
        states = self._states[LevelType.SCORED]
        for number, level in enumerate(self._levels[LevelType.SCORED], start=1):
            state = states.get(level.id)
            if state is None:
                continue
            status = "Passed" if state.is_completed else "Failed"
            time_str = ""
            if state.completion_time is not None:
                time_str = f" - Time: {state.completion_time:.1f}s"
            lines.append(
                f"Problem {number} : {level.name} "
                f"({state.stars_collected}/{level.total_stars}) - {status}{time_str}"
            )
        return "\n".join(lines) + "\n"

    def save_final_report(self, player: PlayerInfo, directory: Optional[Path] = None) -> Optional[Path]:
        """Write the report; returns its path, or None when saving failed."""
        path = Path(directory or Path.cwd()) / player.report_filename
        try:
            path.write_text(self.generate_final_report(player), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save report to %s: %s", path, e)
            return None
        logger.info("Report saved to %s", path)
        return path
