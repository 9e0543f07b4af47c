"""Module for adaptive difficulty."""

__all__ = [
    "DifficultyConfig",
    "DifficultyController",
    "DifficultyState",
    "DifficultyStore",
    "InMemoryDifficultyStore",
    "JsonFileDifficultyStore",
    "PerformanceSample",
    "PerformanceStats",
    "RunTracker",
]

from snakeassist.difficulty.controller import (
    DifficultyConfig,
    DifficultyController,
    DifficultyState,
    PerformanceStats,
)
from snakeassist.difficulty.storage import (
    DifficultyStore,
    InMemoryDifficultyStore,
    JsonFileDifficultyStore,
)
from snakeassist.difficulty.tracker import PerformanceSample, RunTracker
