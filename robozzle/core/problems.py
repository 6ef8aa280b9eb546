from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from robozzle.core.instructions import (
    Function,
    Instruction,
    Noop,
    condition_color,
    unwrap_conditional,
    wrap_with_condition,
)
from robozzle.core.tiles import TileColor


@dataclass
class ProblemState:
    """The player's program for one level plus its completion record.

    ``is_completed`` never reverts and ``completion_time`` only ever
    improves, so replaying a solved level cannot lose its result.
    """

    capacities: List[int]
    functions: List[Function] = field(default_factory=list)
    stars_collected: int = 0
    is_completed: bool = False
    completion_time: Optional[float] = None
    start_time: float = 0.0
    completion_time_recorded: bool = False

    def __post_init__(self) -> None:
        if not self.functions:
            self.functions = [[] for _ in self.capacities]

    @classmethod
    def for_limits(cls, function_limits: Sequence[int]) -> "ProblemState":
        return cls(capacities=list(function_limits))

    # ------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------

    def reset_stars(self) -> None:
        self.stars_collected = 0
        if not self.is_completed:
            self.completion_time_recorded = False

    def check_completion(self, total_stars: int) -> bool:
        if self.stars_collected >= total_stars:
            self.is_completed = True
        return self.is_completed

    def start_timer(self, current_time: float) -> None:
        self.start_time = current_time
        if not self.is_completed:
            self.completion_time_recorded = False

    def set_completion_time(self, elapsed: float) -> None:
        if self.completion_time is None or elapsed < self.completion_time:
            self.completion_time = elapsed

    def record_completion_time(self, elapsed: float) -> bool:
        """Record ``elapsed`` once per attempt. Returns True when it was recorded."""
        if not self.is_completed or self.completion_time_recorded:
            return False
        self.set_completion_time(elapsed)
        self.completion_time_recorded = True
        return True

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def _check_slot(self, function_index: int, slot: int) -> None:
        if not 0 <= function_index < len(self.functions):
            raise IndexError(f"Function F{function_index + 1} does not exist")
        capacity = self.capacities[function_index]
        if not 0 <= slot < capacity:
            raise IndexError(
                f"Slot {slot} is outside F{function_index + 1} (capacity {capacity})"
            )

    def _ensure_size(self, function_index: int, slot: int) -> Function:
        function = self.functions[function_index]
        while len(function) <= slot:
            function.append(Noop())
        return function

    def instruction_at(self, function_index: int, slot: int) -> Instruction:
        self._check_slot(function_index, slot)
        function = self.functions[function_index]
        return function[slot] if slot < len(function) else Noop()

    def place_instruction(self, function_index: int, slot: int, instruction: Instruction) -> None:
        """Put ``instruction`` in a slot, keeping the slot's colour condition if any."""
        self._check_slot(function_index, slot)
        function = self._ensure_size(function_index, slot)
        color = condition_color(function[slot])
        if color is not None and condition_color(instruction) is None:
            instruction = wrap_with_condition(instruction, color)
        function[slot] = instruction

    def set_condition(self, function_index: int, slot: int, color: TileColor) -> None:
        """Attach, replace or (with gray) remove the colour condition of a slot."""
        self._check_slot(function_index, slot)
        function = self._ensure_size(function_index, slot)
        function[slot] = wrap_with_condition(unwrap_conditional(function[slot]), color)

    def clear_slot(self, function_index: int, slot: int) -> None:
        self._check_slot(function_index, slot)
        function = self.functions[function_index]
        if slot < len(function):
            function[slot] = Noop()

    def clear_functions(self) -> None:
        for function in self.functions:
            function.clear()
