"""Module for the headless board."""

__all__ = [
    "DEFAULT_BOARD_HEIGHT",
    "DEFAULT_BOARD_WIDTH",
    "DEFAULT_INITIAL_LENGTH",
    "FOOD_SCORE",
    "SnakeBoard",
    "StepOutcome",
    "Theme",
]

from snakeassist.env.env import (
    DEFAULT_BOARD_HEIGHT,
    DEFAULT_BOARD_WIDTH,
    DEFAULT_INITIAL_LENGTH,
    FOOD_SCORE,
    SnakeBoard,
    StepOutcome,
)
from snakeassist.env.theme import Theme
