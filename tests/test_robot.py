"""Tests for robozzle.core.robot – headings and the robot pose."""

from __future__ import annotations

import pytest

from robozzle.core.robot import Direction, Robot


class TestDirection:
    @pytest.mark.parametrize("d", list(Direction))
    def test_left_then_right_round_trip(self, d):
        assert d.turn_left().turn_right() is d
        assert d.turn_right().turn_left() is d

    @pytest.mark.parametrize("d", list(Direction))
    def test_four_lefts_is_identity(self, d):
        assert d.turn_left().turn_left().turn_left().turn_left() is d

    def test_right_cycle(self):
        assert Direction.NORTH.turn_right() is Direction.EAST
        assert Direction.EAST.turn_right() is Direction.SOUTH
        assert Direction.SOUTH.turn_right() is Direction.WEST
        assert Direction.WEST.turn_right() is Direction.NORTH

    def test_offsets_y_down(self):
        assert Direction.NORTH.offset == (0, -1)
        assert Direction.EAST.offset == (1, 0)
        assert Direction.SOUTH.offset == (0, 1)
        assert Direction.WEST.offset == (-1, 0)

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("N", Direction.NORTH),
            ("north", Direction.NORTH),
            ("e", Direction.EAST),
            ("South", Direction.SOUTH),
            ("WEST", Direction.WEST),
        ],
    )
    def test_parse(self, text, expected):
        assert Direction.parse(text) is expected

    @pytest.mark.parametrize("text", ["", "NE", "up", "X"])
    def test_parse_invalid(self, text):
        assert Direction.parse(text) is None


class TestRobot:
    def test_start_pose_captured(self):
        r = Robot(2, 3, Direction.WEST)
        assert (r.start_x, r.start_y, r.start_direction) == (2, 3, Direction.WEST)

    def test_ahead(self):
        r = Robot(2, 2, Direction.NORTH)
        assert r.ahead() == (2, 1)
        r.turn_right()
        assert r.ahead() == (3, 2)

    def test_reset_restores_exact_pose(self):
        r = Robot(1, 1, Direction.SOUTH)
        r.move_to(4, 0)
        r.turn_left()
        r.reset_to_start()
        assert r.position == (1, 1)
        assert r.direction is Direction.SOUTH

    def test_start_pose_not_moved_by_actions(self):
        r = Robot(0, 0, Direction.EAST)
        r.move_to(1, 0)
        r.turn_left()
        assert (r.start_x, r.start_y, r.start_direction) == (0, 0, Direction.EAST)
