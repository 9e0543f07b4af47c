"""Run tracking for the adaptive difficulty system."""

import math
import time
from collections.abc import Callable

from pydantic import BaseModel, ConfigDict, Field


def _wall_clock_ms() -> float:
    return time.time() * 1000.0


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class PerformanceSample(BaseModel):
    """
    Outcome of a single finished run.

    Attributes
    ----------
    score : float
        Final score of the run.
    survival_time_ms : float
        How long the run lasted, in milliseconds.
    food_collected : int
        Number of food items eaten during the run.
    speed_at_end : float
        Game speed (ms per move) when the run ended.
    timestamp : float
        Wall-clock time the run ended, in milliseconds since the epoch.
    average_collection_time_ms : float | None
        Mean time between food pickups. Derived from survival time and food
        count when not supplied.
    """

    model_config = ConfigDict(frozen=True)

    score: float = Field(ge=0.0)
    survival_time_ms: float = Field(ge=0.0)
    food_collected: int = Field(default=0, ge=0)
    speed_at_end: float = Field(default=0.0, ge=0.0)
    timestamp: float = Field(default_factory=_wall_clock_ms)
    average_collection_time_ms: float | None = Field(default=None, ge=0.0)

    @property
    def collection_interval_ms(self) -> float:
        """Mean time between food pickups, infinite when nothing was eaten."""
        if self.average_collection_time_ms is not None:
            return self.average_collection_time_ms
        if self.food_collected == 0:
            return math.inf
        return self.survival_time_ms / self.food_collected


class RunTracker:
    """Tracks food-collection timing across a single run.

    Parameters
    ----------
    clock : Callable[[], float] | None
        Returns the current time in milliseconds. A monotonic clock is used
        when omitted.

    Attributes
    ----------
    collection_times_ms : list[float]
        Time elapsed before each food pickup, in milliseconds.
    """

    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        """Initialize the tracker and start timing a run."""
        self.clock = clock or _monotonic_ms
        self.run_started_ms = self.clock()
        self.last_food_ms = self.run_started_ms
        self.collection_times_ms: list[float] = []

    @property
    def foods_collected(self) -> int:
        """Get the number of food pickups in the current run."""
        return len(self.collection_times_ms)

    @property
    def survival_time_ms(self) -> float:
        """Get the elapsed time of the current run."""
        return self.clock() - self.run_started_ms

    @property
    def average_collection_time_ms(self) -> float:
        """Get the mean time between pickups, 0.0 before the first pickup."""
        if not self.collection_times_ms:
            return 0.0
        return sum(self.collection_times_ms) / len(self.collection_times_ms)

    def start_run(self) -> None:
        """Reset timing for a new run."""
        self.run_started_ms = self.clock()
        self.last_food_ms = self.run_started_ms
        self.collection_times_ms = []

    def track_food(self) -> float:
        """Record a food pickup and return the time since the previous one."""
        now = self.clock()
        elapsed = now - self.last_food_ms
        self.collection_times_ms.append(elapsed)
        self.last_food_ms = now
        return elapsed

    def build_sample(self, score: float, speed_at_end: float) -> PerformanceSample:
        """Build the performance sample for the run that just ended."""
        return PerformanceSample(
            score=score,
            survival_time_ms=max(0.0, self.survival_time_ms),
            food_collected=self.foods_collected,
            speed_at_end=speed_at_end,
            average_collection_time_ms=(
                self.average_collection_time_ms if self.collection_times_ms else None
            ),
        )
