"""Instruction set for player programs.

A program is a list of functions, each an ordered list of instructions.
Instructions are immutable values; conditionals wrap exactly one inner
instruction and may nest to any depth.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Union

from robozzle.core.tiles import TileColor


@dataclass(frozen=True)
class Forward:
    pass


@dataclass(frozen=True)
class TurnLeft:
    pass


@dataclass(frozen=True)
class TurnRight:
    pass


@dataclass(frozen=True)
class Noop:
    pass


@dataclass(frozen=True)
class CallFunction:
    index: int


@dataclass(frozen=True)
class Conditional:
    """Run ``inner`` only when the robot stands on a tile of ``color``."""

    color: TileColor
    inner: "Instruction"

    def __post_init__(self) -> None:
        if self.color is TileColor.GRAY:
            raise ValueError("Conditionals require a red, green or blue tile colour")


Instruction = Union[Forward, TurnLeft, TurnRight, CallFunction, Conditional, Noop]
Function = List[Instruction]
Program = Sequence[Sequence[Instruction]]


def ConditionalRed(inner: Instruction) -> Conditional:
    return Conditional(TileColor.RED, inner)


def ConditionalGreen(inner: Instruction) -> Conditional:
    return Conditional(TileColor.GREEN, inner)


def ConditionalBlue(inner: Instruction) -> Conditional:
    return Conditional(TileColor.BLUE, inner)


def condition_color(instruction: Instruction) -> TileColor | None:
    """Colour gating the instruction, or None for an unconditional one."""
    if isinstance(instruction, Conditional):
        return instruction.color
    return None


def unwrap_conditional(instruction: Instruction) -> Instruction:
    """Strip one level of colour condition."""
    if isinstance(instruction, Conditional):
        return instruction.inner
    return instruction


def wrap_with_condition(instruction: Instruction, color: TileColor) -> Instruction:
    """Gate ``instruction`` on ``color``; gray means unconditional."""
    if color is TileColor.GRAY:
        return instruction
    return Conditional(color, instruction)


_LABELS = {
    Forward: "Forward",
    TurnLeft: "Turn left",
    TurnRight: "Turn right",
    Noop: "Empty",
}


def describe(instruction: Instruction) -> str:
    """Human readable label, e.g. ``If red: Call F2``."""
    if isinstance(instruction, CallFunction):
        return f"Call F{instruction.index + 1}"
    if isinstance(instruction, Conditional):
        return f"If {instruction.color.value}: {describe(instruction.inner)}"
    return _LABELS[type(instruction)]
