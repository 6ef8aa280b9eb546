"""Tests for robozzle.core.instructions – the instruction values and helpers."""

from __future__ import annotations

import pytest

from robozzle.core.instructions import (
    CallFunction,
    Conditional,
    ConditionalBlue,
    ConditionalGreen,
    ConditionalRed,
    Forward,
    Noop,
    TurnLeft,
    TurnRight,
    condition_color,
    describe,
    unwrap_conditional,
    wrap_with_condition,
)
from robozzle.core.tiles import TileColor


class TestValues:
    def test_equality(self):
        assert Forward() == Forward()
        assert CallFunction(1) == CallFunction(1)
        assert CallFunction(1) != CallFunction(2)
        assert ConditionalRed(Forward()) == Conditional(TileColor.RED, Forward())

    def test_frozen(self):
        c = CallFunction(0)
        with pytest.raises(AttributeError):
            c.index = 3  # type: ignore[misc]

    def test_gray_condition_rejected(self):
        with pytest.raises(ValueError):
            Conditional(TileColor.GRAY, Forward())

    def test_nesting_allowed(self):
        nested = ConditionalRed(ConditionalBlue(CallFunction(2)))
        assert nested.inner.inner == CallFunction(2)


class TestHelpers:
    def test_condition_color(self):
        assert condition_color(ConditionalGreen(TurnLeft())) is TileColor.GREEN
        assert condition_color(TurnLeft()) is None

    def test_unwrap_one_level(self):
        assert unwrap_conditional(ConditionalRed(Forward())) == Forward()
        inner = ConditionalBlue(Forward())
        assert unwrap_conditional(ConditionalRed(inner)) == inner
        assert unwrap_conditional(Noop()) == Noop()

    def test_wrap(self):
        assert wrap_with_condition(Forward(), TileColor.BLUE) == ConditionalBlue(Forward())
        assert wrap_with_condition(Forward(), TileColor.GRAY) == Forward()


class TestDescribe:
    @pytest.mark.parametrize(
        "instruction, text",
        [
            (Forward(), "Forward"),
            (TurnLeft(), "Turn left"),
            (TurnRight(), "Turn right"),
            (Noop(), "Empty"),
            (CallFunction(0), "Call F1"),
            (ConditionalRed(CallFunction(1)), "If red: Call F2"),
            (ConditionalGreen(ConditionalBlue(Forward())), "If green: If blue: Forward"),
        ],
    )
    def test_labels(self, instruction, text):
        assert describe(instruction) == text
