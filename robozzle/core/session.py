from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from robozzle.core.execution import ExecutionEngine, ExecutionSpeed, StarCollected
from robozzle.core.instructions import Instruction
from robozzle.core.levels import LevelDescriptor
from robozzle.core.problems import ProblemState
from robozzle.core.progress import LevelType, ProgressTracker
from robozzle.core.robot import Robot
from robozzle.core.settings import Settings
from robozzle.core.tiles import Grid, TileColor
from robozzle.core.timers import GameTimer, LevelTimer

logger = logging.getLogger(__name__)


@dataclass
class TickReport:
    """What happened during one ``GameSession.update`` call."""

    stars: List[StarCollected] = field(default_factory=list)
    completed: bool = False
    stopped: bool = False
    error: Optional[str] = None
    time_up: bool = False
    all_completed: bool = False


class GameSession:
    """The level being played: its grid, robot, engine and timers.

    All mutation of the grid and robot goes through ``update`` or the
    control methods below; an edit to the program while a run is active
    stops the run first so the engine never points past a shortened
    function.
    """

    def __init__(self, tracker: ProgressTracker, settings: Optional[Settings] = None) -> None:
        self._settings = settings or Settings()
        self._tracker = tracker
        self._engine = ExecutionEngine(self._settings.initial_speed)
        self._level_timer = LevelTimer()
        self._game_timer = GameTimer(self._settings.session_minutes)
        self._level: Optional[LevelDescriptor] = None
        self._grid = Grid(0, 0)
        self._robot = Robot(0, 0)

    @property
    def tracker(self) -> ProgressTracker:
        return self._tracker

    @property
    def engine(self) -> ExecutionEngine:
        return self._engine

    @property
    def grid(self) -> Grid:
        return self._grid

    @property
    def robot(self) -> Robot:
        return self._robot

    @property
    def level(self) -> Optional[LevelDescriptor]:
        return self._level

    @property
    def level_timer(self) -> LevelTimer:
        return self._level_timer

    @property
    def game_timer(self) -> GameTimer:
        return self._game_timer

    @property
    def problem(self) -> ProblemState:
        if self._level is None:
            raise RuntimeError("No level has been entered")
        state = self._tracker.problem_state(self._level.id)
        if state is None:
            raise RuntimeError(f"No progress record for level {self._level.id}")
        return state

    def is_time_up(self) -> bool:
        return self._game_timer.is_finished()

    # ------------------------------------------------------------------
    # Levels
    # ------------------------------------------------------------------

    def enter_level(self, index: Optional[int] = None) -> LevelDescriptor:
        """Switch to ``index`` (or re-enter the current level) with a fresh board."""
        if index is not None:
            self._tracker.switch_to_level(index)
        level = self._tracker.current_level()
        if level is None:
            raise RuntimeError(f"No {self._tracker.current_type.value} levels loaded")

        self._engine.stop()
        self._engine.clear_error()
        self._level = level
        problem = self.problem
        self._grid = level.build_grid()
        self._grid.reset_stars(collected=problem.is_completed)
        self._robot = level.build_robot()
        self._level_timer.reset()
        problem.start_timer(0.0)
        logger.info("Entered %s level %d: %s", self._tracker.current_type.value, level.id + 1, level.name)
        return level

    def next_level(self) -> Optional[LevelDescriptor]:
        if self._tracker.try_next_level() is None:
            return None
        return self.enter_level()

    def reset_level_state(self) -> None:
        """Robot back to its start pose; uncompleted levels also get their stars back."""
        self._robot.reset_to_start()
        problem = self.problem
        if not problem.is_completed:
            self._grid.reset_stars()
            problem.reset_stars()

    # ------------------------------------------------------------------
    # Execution control
    # ------------------------------------------------------------------

    def run(self) -> None:
        """Run button: start when stopped, otherwise toggle pause."""
        if self._engine.is_stopped():
            self.reset_level_state()
            self._engine.start()
        elif self._engine.is_running():
            self._engine.pause()
        else:
            self._engine.resume()

    def pause(self) -> None:
        self._engine.pause()

    def resume(self) -> None:
        self._engine.resume()

    def stop(self) -> None:
        self._engine.stop()

    def reset(self) -> None:
        self._engine.stop()
        self._engine.clear_error()
        self.reset_level_state()

    def step(self) -> TickReport:
        """Execute exactly one instruction now and leave the run paused."""
        if self.is_time_up():
            return TickReport(time_up=True)
        if self._engine.is_running():
            self._engine.pause()
        elif self._engine.is_stopped():
            self.reset_level_state()
        self._engine.request_step()
        return self.update(0.0)

    def cycle_speed(self) -> ExecutionSpeed:
        speed = self._engine.cycle_speed()
        logger.info("Execution speed set to %s", speed.label)
        return speed

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def _before_edit(self) -> None:
        if not self._engine.is_stopped():
            self._engine.stop()
            self.reset_level_state()

    def place_instruction(self, function_index: int, slot: int, instruction: Instruction) -> None:
        self._before_edit()
        self.problem.place_instruction(function_index, slot, instruction)

    def set_condition(self, function_index: int, slot: int, color: TileColor) -> None:
        self._before_edit()
        self.problem.set_condition(function_index, slot, color)

    def clear_slot(self, function_index: int, slot: int) -> None:
        self._before_edit()
        self.problem.clear_slot(function_index, slot)

    def clear_functions(self) -> None:
        self._engine.stop()
        self.problem.clear_functions()

    # ------------------------------------------------------------------
    # Frame update
    # ------------------------------------------------------------------

    def update(self, delta: float) -> TickReport:
        """Advance timers by ``delta`` seconds and run at most one instruction."""
        report = TickReport()
        if self._level is None:
            return report

        if self._tracker.current_type is LevelType.SCORED and not self.is_time_up():
            self._game_timer.tick(delta)
            self._level_timer.tick(delta)
            if self._game_timer.just_finished():
                logger.info("Time is up")
                self._engine.stop()
                report.time_up = True
                report.stopped = True
                return report
        if self.is_time_up():
            report.time_up = True
            return report

        was_stopped = self._engine.is_stopped()
        report.stars = self._engine.update(delta, self.problem.functions, self._grid, self._robot)
        if report.stars:
            self._on_stars_collected()
        report.completed = self._check_completion()
        if report.stars and self._all_stars_collected() and not self._engine.is_stopped():
            logger.info("All stars collected, stopping the run")
            self._engine.stop()
        report.stopped = not was_stopped and self._engine.is_stopped()
        report.error = self._engine.error_message if report.stopped else None
        if self._tracker.current_type is LevelType.SCORED and self._tracker.all_levels_completed():
            report.all_completed = True
        return report

    def _on_stars_collected(self) -> None:
        problem = self.problem
        problem.stars_collected = self._grid.collected_stars()
        total = self._level.total_stars
        logger.info("Stars collected: %d/%d", problem.stars_collected, total)

    def _all_stars_collected(self) -> bool:
        return self._grid.collected_stars() >= self._level.total_stars

    def _check_completion(self) -> bool:
        """Mark the level solved and record its time. True when newly recorded."""
        problem = self.problem
        if not self._all_stars_collected():
            return False
        collected = self._grid.collected_stars()
        problem.stars_collected = max(problem.stars_collected, collected)
        problem.check_completion(self._level.total_stars)
        if problem.record_completion_time(self._level_timer.elapsed):
            logger.info(
                "Level %d completed in %.1fs (best %.1fs)",
                self._level.id + 1,
                self._level_timer.elapsed,
                problem.completion_time,
            )
            return True
        return False
