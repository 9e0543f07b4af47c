"""Core type definitions for Snake Assist.

This module provides the type aliases and the direction enum used across
the pathfinding, risk and board modules.
"""

from enum import Enum

# =============================================================================
# Position Types
# =============================================================================

# Grid position (discrete x, y coordinates; y grows downwards)
GridPosition = tuple[int, int]

# =============================================================================
# Path Types
# =============================================================================

# Route through the board, start and goal included
Path = list[GridPosition]

# Snake segments, head first
Body = list[GridPosition]


class Direction(str, Enum):
    """Orthogonal moves on the board."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def offset(self) -> tuple[int, int]:
        """Return the (dx, dy) unit step for this direction."""
        return DIRECTION_OFFSETS[self]

    @property
    def opposite(self) -> "Direction":
        """Return the direction pointing the other way."""
        return OPPOSITE_DIRECTIONS[self]


# Fixed neighbour discovery order, also the tie-break order for equal scores
DIRECTION_ORDER = (Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT)

DIRECTION_OFFSETS: dict[Direction, tuple[int, int]] = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}

OPPOSITE_DIRECTIONS: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


def step(position: GridPosition, direction: Direction) -> GridPosition:
    """Return the cell one unit away from ``position`` in ``direction``."""
    dx, dy = DIRECTION_OFFSETS[direction]
    return (position[0] + dx, position[1] + dy)


def manhattan_distance(a: GridPosition, b: GridPosition) -> int:
    """Return ``|dx| + |dy|`` between two cells."""
    return abs(a[0] - b[0]) + abs(a[1] - b[1])
