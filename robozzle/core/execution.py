"""Interpreter for player programs.

The engine walks the player's functions one instruction per tick using an
explicit call stack. It never owns the grid, robot or program: the caller
passes them in on every update, so the same engine can be reused across
levels.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from robozzle.core.instructions import (
    CallFunction,
    Conditional,
    Forward,
    Instruction,
    Noop,
    Program,
    TurnLeft,
    TurnRight,
)
from robozzle.core.robot import Robot
from robozzle.core.tiles import Grid

logger = logging.getLogger(__name__)


class ExecutionSpeed(Enum):
    NORMAL = "normal"
    FAST = "fast"
    VERY_FAST = "very_fast"

    @property
    def interval(self) -> float:
        """Seconds between two instructions."""
        return _INTERVALS[self]

    @property
    def label(self) -> str:
        return _LABELS[self]

    def next(self) -> "ExecutionSpeed":
        order = list(ExecutionSpeed)
        return order[(order.index(self) + 1) % len(order)]


_INTERVALS = {
    ExecutionSpeed.NORMAL: 0.5,
    ExecutionSpeed.FAST: 0.25,
    ExecutionSpeed.VERY_FAST: 0.02,
}
_LABELS = {
    ExecutionSpeed.NORMAL: "x1",
    ExecutionSpeed.FAST: "x2",
    ExecutionSpeed.VERY_FAST: "x5",
}


class ExecutionStatus(Enum):
    STOPPED = "stopped"
    RUNNING = "running"
    PAUSED = "paused"


@dataclass(frozen=True)
class StarCollected:
    x: int
    y: int


class ExecutionFault(Exception):
    """Unrecoverable error in the current run (illegal move, bad call target)."""


class ExecutionEngine:
    def __init__(self, speed: ExecutionSpeed = ExecutionSpeed.NORMAL) -> None:
        self._speed = speed
        self._status = ExecutionStatus.STOPPED
        self._elapsed = 0.0
        self._single_step = False
        self._current_function = 0
        self._current_instruction = 0
        self._call_stack: List[Tuple[int, int]] = []
        self._error_message: Optional[str] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def status(self) -> ExecutionStatus:
        return self._status

    @property
    def speed(self) -> ExecutionSpeed:
        return self._speed

    @property
    def current_function(self) -> int:
        return self._current_function

    @property
    def current_instruction(self) -> int:
        return self._current_instruction

    @property
    def call_stack(self) -> List[Tuple[int, int]]:
        return list(self._call_stack)

    @property
    def error_message(self) -> Optional[str]:
        return self._error_message

    def is_running(self) -> bool:
        return self._status is ExecutionStatus.RUNNING

    def is_paused(self) -> bool:
        return self._status is ExecutionStatus.PAUSED

    def is_stopped(self) -> bool:
        return self._status is ExecutionStatus.STOPPED

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------

    def _reset_counters(self) -> None:
        self._current_function = 0
        self._current_instruction = 0
        self._call_stack.clear()
        self._single_step = False

    def start(self) -> None:
        self._reset_counters()
        self._error_message = None
        self._elapsed = 0.0
        self._status = ExecutionStatus.RUNNING

    def pause(self) -> None:
        if self._status is ExecutionStatus.RUNNING:
            self._status = ExecutionStatus.PAUSED

    def resume(self) -> None:
        if self._status is ExecutionStatus.PAUSED:
            self._status = ExecutionStatus.RUNNING

    def stop(self) -> None:
        # The error message survives so a fault stays visible after its stop.
        self._reset_counters()
        self._elapsed = 0.0
        self._status = ExecutionStatus.STOPPED

    def fail(self, message: str) -> None:
        self.stop()
        self._error_message = message

    def clear_error(self) -> None:
        self._error_message = None

    def cycle_speed(self) -> ExecutionSpeed:
        self._speed = self._speed.next()
        self._elapsed = 0.0
        return self._speed

    def request_step(self) -> None:
        """Arrange for exactly one instruction on the next tick, then pause."""
        if self.is_stopped():
            self.start()
        self._single_step = True
        self._status = ExecutionStatus.RUNNING

    def tick(self, delta: float) -> bool:
        """Advance the timer by ``delta`` seconds; True when an instruction is due."""
        if self._status is not ExecutionStatus.RUNNING:
            return False
        if self._single_step:
            self._single_step = False
            self._status = ExecutionStatus.PAUSED
            return True
        self._elapsed += delta
        interval = self._speed.interval
        if self._elapsed < interval:
            return False
        self._elapsed %= interval
        return True

    # ------------------------------------------------------------------
    # Interpreter
    # ------------------------------------------------------------------

    def update(self, delta: float, program: Program, grid: Grid, robot: Robot) -> List[StarCollected]:
        if not self.tick(delta):
            return []
        return self.run_cycle(program, grid, robot)

    def run_cycle(self, program: Program, grid: Grid, robot: Robot) -> List[StarCollected]:
        """Execute the next non-skipped instruction."""
        events: List[StarCollected] = []
        while self._settle(program):
            instruction = program[self._current_function][self._current_instruction]
            if self._skips(instruction, grid, robot):
                self._current_instruction += 1
                continue
            try:
                self._execute(instruction, program, grid, robot, events)
            except ExecutionFault as e:
                logger.warning(
                    "Execution aborted at F%d:%d: %s",
                    self._current_function + 1,
                    self._current_instruction,
                    e,
                )
                robot.reset_to_start()
                self.fail(str(e))
                return events
            self._settle(program)
            break
        return events

    def _settle(self, program: Program) -> bool:
        """Return from finished functions. False once the program has stopped."""
        while not self.is_stopped():
            if not 0 <= self._current_function < len(program):
                self.stop()
                break
            if self._current_instruction < len(program[self._current_function]):
                return True
            if not self._call_stack:
                logger.info("Program finished")
                self.stop()
                break
            function, instruction = self._call_stack.pop()
            self._current_function = function
            self._current_instruction = instruction + 1
        return False

    @staticmethod
    def _skips(instruction: Instruction, grid: Grid, robot: Robot) -> bool:
        if not isinstance(instruction, Conditional):
            return False
        tile = grid.tile_at(robot.x, robot.y)
        return tile is None or tile.color is not instruction.color

    def _execute(
        self,
        instruction: Instruction,
        program: Program,
        grid: Grid,
        robot: Robot,
        events: List[StarCollected],
    ) -> None:
        if isinstance(instruction, Forward):
            x, y = robot.ahead()
            if not grid.is_valid_position(x, y):
                raise ExecutionFault(f"Out of bounds: the robot left the puzzle at ({x}, {y})")
            robot.move_to(x, y)
            tile = grid.tile_at_mut(x, y)
            if tile is not None and tile.collect_star():
                logger.info("Star collected at (%d, %d)", x, y)
                events.append(StarCollected(x, y))
            self._current_instruction += 1
        elif isinstance(instruction, TurnLeft):
            robot.turn_left()
            self._current_instruction += 1
        elif isinstance(instruction, TurnRight):
            robot.turn_right()
            self._current_instruction += 1
        elif isinstance(instruction, CallFunction):
            if not 0 <= instruction.index < len(program):
                raise ExecutionFault(f"Function F{instruction.index + 1} does not exist")
            logger.debug(
                "Calling F%d from F%d:%d",
                instruction.index + 1,
                self._current_function + 1,
                self._current_instruction,
            )
            self._call_stack.append((self._current_function, self._current_instruction))
            self._current_function = instruction.index
            self._current_instruction = 0
        elif isinstance(instruction, Conditional):
            tile = grid.tile_at(robot.x, robot.y)
            if tile is not None and tile.color is instruction.color:
                self._execute(instruction.inner, program, grid, robot, events)
            else:
                self._current_instruction += 1
        elif isinstance(instruction, Noop):
            self._current_instruction += 1
        else:
            raise ExecutionFault(f"Unknown instruction {instruction!r}")
