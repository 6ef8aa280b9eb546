"""Qt bridge between a GameSession and whatever renders it.

The controller owns the frame timer that drives the session and turns each
TickReport into signals, so views never poke at the engine directly.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QElapsedTimer, QObject, QTimer, Signal

from robozzle.core.execution import ExecutionSpeed
from robozzle.core.instructions import Instruction
from robozzle.core.progress import LevelType, PlayerInfo
from robozzle.core.session import GameSession, TickReport
from robozzle.core.tiles import TileColor

logger = logging.getLogger(__name__)


class GameController(QObject):
    star_collected = Signal(int, int)
    execution_stopped = Signal(str)
    level_completed = Signal(int)
    level_switched = Signal(int)
    tutorials_completed = Signal()
    all_levels_completed = Signal()
    time_up = Signal()
    program_changed = Signal()

    def __init__(
        self,
        session: GameSession,
        player: Optional[PlayerInfo] = None,
        frame_interval_ms: int = 16,
        results_dir: Optional[Path] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._session = session
        self._player = player
        self._results_dir = results_dir
        self._finished = False
        self._clock = QElapsedTimer()
        self._frame_timer = QTimer(self)
        self._frame_timer.setInterval(frame_interval_ms)
        self._frame_timer.timeout.connect(self._on_frame)

    @property
    def session(self) -> GameSession:
        return self._session

    @property
    def is_finished(self) -> bool:
        return self._finished

    # ------------------------------------------------------------------
    # Frame loop
    # ------------------------------------------------------------------

    def start(self) -> None:
        self._clock.start()
        self._frame_timer.start()

    def shutdown(self) -> None:
        self._frame_timer.stop()

    def _on_frame(self) -> None:
        delta = self._clock.restart() / 1000.0
        self.advance(delta)

    def advance(self, delta: float) -> TickReport:
        """Feed ``delta`` seconds to the session and publish what happened."""
        report = self._session.update(delta)
        self._publish(report)
        return report

    def _publish(self, report: TickReport) -> None:
        for star in report.stars:
            self.star_collected.emit(star.x, star.y)
        if report.completed and self._session.level is not None:
            self.level_completed.emit(self._session.level.id)
            tracker = self._session.tracker
            if tracker.current_type is LevelType.TUTORIAL and tracker.all_tutorials_completed():
                self.tutorials_completed.emit()
        if report.stopped:
            self.execution_stopped.emit(report.error or "")
        if report.time_up:
            if self._finish("time up"):
                self.time_up.emit()
        elif report.all_completed:
            if self._finish("all levels completed"):
                self.all_levels_completed.emit()

    def _finish(self, reason: str) -> bool:
        if self._finished:
            return False
        self._finished = True
        self._frame_timer.stop()
        logger.info("Session finished: %s", reason)
        if self._player is not None:
            self.save_report()
        return True

    def save_report(self, directory: Optional[Path] = None) -> Optional[Path]:
        if self._player is None:
            logger.warning("No player registered, report not saved")
            return None
        return self._session.tracker.save_final_report(self._player, directory or self._results_dir)

    # ------------------------------------------------------------------
    # Requests from the view
    # ------------------------------------------------------------------

    def switch_level(self, index: int) -> bool:
        tracker = self._session.tracker
        if not tracker.can_switch_to(index):
            logger.info("Level %d is locked", index + 1)
            return False
        level = self._session.enter_level(index)
        self.level_switched.emit(level.id)
        return True

    def switch_level_type(self, level_type: LevelType) -> None:
        self._session.tracker.switch_level_type(level_type)
        level = self._session.enter_level()
        self.level_switched.emit(level.id)

    def next_level(self) -> bool:
        level = self._session.next_level()
        if level is None:
            return False
        self.level_switched.emit(level.id)
        return True

    def run(self) -> None:
        self._session.run()

    def step(self) -> None:
        self._publish(self._session.step())

    def stop(self) -> None:
        was_stopped = self._session.engine.is_stopped()
        self._session.stop()
        if not was_stopped:
            self.execution_stopped.emit("")

    def reset(self) -> None:
        self._session.reset()

    def cycle_speed(self) -> ExecutionSpeed:
        return self._session.cycle_speed()

    def place_instruction(self, function_index: int, slot: int, instruction: Instruction) -> None:
        self._session.place_instruction(function_index, slot, instruction)
        self.program_changed.emit()

    def set_condition(self, function_index: int, slot: int, color: TileColor) -> None:
        self._session.set_condition(function_index, slot, color)
        self.program_changed.emit()

    def clear_slot(self, function_index: int, slot: int) -> None:
        self._session.clear_slot(function_index, slot)
        self.program_changed.emit()

    def clear_functions(self) -> None:
        self._session.clear_functions()
        self.program_changed.emit()
