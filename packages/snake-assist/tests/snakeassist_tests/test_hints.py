"""Tests for the per-tick hint advisor."""

import pytest
from snakeassist.dtypes import Direction
from snakeassist.hints import HintAdvice, HintAdvisor
from snakeassist.pathfinding import Priority


@pytest.fixture
def advisor(pathfinder):
    """Create a hint advisor on a 10x10 board."""
    return HintAdvisor(pathfinder)


class TestHintAdvisor:
    """Test hint computation."""

    def test_route_to_food(self, advisor):
        """Test that a reachable food yields a path and its first move."""
        advice = advisor.update((2, 2), (5, 2), [(1, 2), (0, 2)])

        assert advice.path == [(2, 2), (3, 2), (4, 2), (5, 2)]
        assert advice.next_move == Direction.RIGHT
        assert advice.fallback is None
        assert advisor.has_path_to_goal

    def test_fallback_when_food_unreachable(self, advisor):
        """Test that an unreachable food falls back to ranked moves."""
        wall = [(5, y) for y in range(10)]

        advice = advisor.update((2, 5), (8, 5), wall)

        assert advice.path is None
        assert advice.fallback is not None
        assert advice.fallback.moves
        assert advice.next_move == advice.fallback.moves[0].direction
        assert not advisor.has_path_to_goal

    def test_boxed_in_head(self, advisor):
        """Test that an enclosed head gets critical advice without a move."""
        box = [(5, 4), (5, 6), (4, 5), (6, 5)]

        advice = advisor.update((5, 5), (0, 0), box)

        assert advice.next_move is None
        assert advice.fallback.priority == Priority.CRITICAL

    def test_disabled_advisor_returns_empty_advice(self, advisor):
        """Test that disabling hints clears the cached path."""
        advisor.update((2, 2), (5, 2), [])

        assert advisor.toggle() is False
        assert advisor.current_path is None
        assert advisor.update((2, 2), (5, 2), []) == HintAdvice()
        assert advisor.toggle() is True
