"""Board bounds and packed obstacle lookups shared by the assistant engines."""

from collections.abc import Iterable, Iterator

import numpy as np

from snakeassist.dtypes import DIRECTION_ORDER, Direction, GridPosition, step
from snakeassist.errors import ERROR_INVALID_BOARD_SIZE
from snakeassist.logging_config import logger

# Smallest board the engines accept
MIN_BOARD_SIZE = 1


class OccupancyGrid:
    """
    Fixed-size boolean grid of blocked cells for one board snapshot.

    Built once per engine call from the obstacle iterable so that every
    membership test afterwards is an array lookup. Obstacles outside the
    board are ignored.

    Attributes
    ----------
    width : int
        Board width in cells.
    height : int
        Board height in cells.
    blocked : np.ndarray
        Boolean array of shape (width, height), indexed ``blocked[x, y]``.
    """

    def __init__(self, width: int, height: int, obstacles: Iterable[GridPosition] = ()) -> None:
        self.width = width
        self.height = height
        self.blocked = np.zeros((width, height), dtype=bool)
        self.obstacle_count = 0
        for x, y in obstacles:
            if 0 <= x < width and 0 <= y < height and not self.blocked[x, y]:
                self.blocked[x, y] = True
                self.obstacle_count += 1

    def in_bounds(self, position: GridPosition) -> bool:
        """Check whether ``position`` lies on the board."""
        return 0 <= position[0] < self.width and 0 <= position[1] < self.height

    def is_blocked(self, position: GridPosition) -> bool:
        """Check whether an in-bounds ``position`` holds an obstacle."""
        return bool(self.blocked[position[0], position[1]])

    def is_open(self, position: GridPosition) -> bool:
        """Check whether ``position`` is on the board and unobstructed."""
        return self.in_bounds(position) and not self.blocked[position[0], position[1]]

    def neighbors(self, position: GridPosition) -> Iterator[tuple[Direction, GridPosition]]:
        """Yield the in-bounds orthogonal neighbours in UP, DOWN, LEFT, RIGHT order."""
        for direction in DIRECTION_ORDER:
            neighbor = step(position, direction)
            if self.in_bounds(neighbor):
                yield direction, neighbor

    def open_neighbors(self, position: GridPosition) -> Iterator[tuple[Direction, GridPosition]]:
        """Yield the in-bounds, unobstructed orthogonal neighbours."""
        for direction, neighbor in self.neighbors(position):
            if not self.blocked[neighbor[0], neighbor[1]]:
                yield direction, neighbor

    def escape_routes(self, position: GridPosition) -> int:
        """Count the open orthogonal neighbours of ``position``."""
        return sum(1 for _ in self.open_neighbors(position))

    def key(self, position: GridPosition) -> int:
        """Pack an in-bounds position into a single integer key."""
        return position[0] * self.height + position[1]


def validate_board_size(width: int, height: int) -> None:
    """Raise ``ValueError`` when the board is smaller than one cell."""
    if width < MIN_BOARD_SIZE or height < MIN_BOARD_SIZE:
        error_message = ERROR_INVALID_BOARD_SIZE.format(
            minimum=MIN_BOARD_SIZE,
            width=width,
            height=height,
        )
        logger.error(error_message)
        raise ValueError(error_message)
