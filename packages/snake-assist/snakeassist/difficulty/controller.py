"""
Adaptive difficulty for the snake game.

``DifficultyController`` adjusts the game speed (milliseconds per move)
from observed player performance. Two independent counters drive it:
consecutive food pickups make the game faster, finished runs are scored
over a short window and make the game slower when the player struggles.
The state survives sessions through a ``DifficultyStore``.
"""

import math
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field, ValidationError, model_validator

from snakeassist.difficulty.storage import DifficultyStore
from snakeassist.difficulty.tracker import PerformanceSample, RunTracker
from snakeassist.errors import ERROR_INVALID_SPEED_BOUNDS
from snakeassist.logging_config import logger

SCHEMA_VERSION = "1.0"

# Lowest and highest difficulty levels reported to the player
MIN_LEVEL = 1
MAX_LEVEL = 10

# Run classification thresholds
STRUGGLING_SCORE = 50.0
STRUGGLING_SURVIVAL_MS = 10_000.0
STRONG_SCORE = 100.0
STRONG_SURVIVAL_MS = 30_000.0
STRONG_COLLECTION_INTERVAL_MS = 3_000.0

# Runs needed before performance is evaluated
MIN_RUNS_FOR_EVALUATION = 2


class DifficultyConfig(BaseModel):
    """Configuration for the adaptive difficulty controller.

    Attributes
    ----------
    base_speed : float
        Speed (ms per move) for a new player.
    min_speed : float
        Fastest allowed speed (hardest).
    max_speed : float
        Slowest allowed speed (easiest).
    speed_step : float
        Change applied per difficulty adjustment.
    success_threshold : int
        Consecutive food pickups that make the game harder.
    failure_threshold : int
        Runs ended since the last easing that count as struggling.
    history_length : int
        Number of finished runs kept.
    evaluation_window : int
        Number of most recent runs averaged when a run ends.
    """

    base_speed: float = 150.0
    min_speed: float = Field(default=50.0, gt=0.0)
    max_speed: float = 300.0
    speed_step: float = Field(default=15.0, gt=0.0)
    success_threshold: int = Field(default=3, ge=1)
    failure_threshold: int = Field(default=2, ge=1)
    history_length: int = Field(default=10, ge=1)
    evaluation_window: int = Field(default=3, ge=1)

    @model_validator(mode="after")
    def validate_speed_bounds(self) -> "DifficultyConfig":
        """Ensure min < max and the base speed lies between them."""
        if not (self.min_speed < self.max_speed and self.min_speed <= self.base_speed <= self.max_speed):
            error_message = ERROR_INVALID_SPEED_BOUNDS.format(
                min_speed=self.min_speed,
                max_speed=self.max_speed,
                base_speed=self.base_speed,
            )
            logger.error(error_message)
            raise ValueError(error_message)
        return self


class PerformanceStats(BaseModel):
    """Summary of the stored run history for the stats display."""

    games_played: int
    average_score: float
    average_survival_ms: float
    best_score: float
    difficulty_level: int
    current_speed: float


@dataclass
class DifficultyState:
    """Mutable difficulty state owned by a ``DifficultyController``."""

    current_speed: float
    consecutive_successes: int = 0
    recent_failures: int = 0
    history: deque[PerformanceSample] = field(default_factory=deque)


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool) and math.isfinite(value)


def _is_counter(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


class DifficultyController:
    """
    Adapts the game speed to the player's recent performance.

    Parameters
    ----------
    config : DifficultyConfig | None
        Speed bounds, step and thresholds. Defaults are used when omitted.
    store : DifficultyStore | None
        Persistence for the state. Without a store the state lives only in
        memory.
    clock : Callable[[], float] | None
        Returns the current time in milliseconds, used for run timing.

    Attributes
    ----------
    state : DifficultyState
        Current speed, counters and run history.
    tracker : RunTracker
        Timing of the run in progress.
    """

    def __init__(
        self,
        config: DifficultyConfig | None = None,
        store: DifficultyStore | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.config = config or DifficultyConfig()
        self.store = store
        self.tracker = RunTracker(clock)
        self.state = self._default_state()
        self._load()

    @property
    def current_speed(self) -> float:
        """Get the current speed in milliseconds per move."""
        return self.state.current_speed

    @property
    def history(self) -> list[PerformanceSample]:
        """Get the stored run history, oldest first."""
        return list(self.state.history)

    def start_run(self) -> None:
        """Prepare for a new run; a player with no history starts at base speed."""
        self.tracker.start_run()
        if not self.state.history:
            self.state.current_speed = self.config.base_speed
        logger.info(f"Run started with speed: {self.state.current_speed}ms")

    def on_goal_reached(self, score: float, length: int) -> None:
        """
        Record a food pickup and make the game harder after enough in a row.

        Parameters
        ----------
        score : float
            Score after the pickup.
        length : int
            Snake length after the pickup.
        """
        self.tracker.track_food()
        self.state.consecutive_successes += 1
        logger.debug(
            f"Food collected (score={score}, length={length}). "
            f"Consecutive successes: {self.state.consecutive_successes}",
        )

        if self.state.consecutive_successes >= self.config.success_threshold:
            self._increase_difficulty()
            self.state.consecutive_successes = 0
            self._persist()

    def on_run_ended(self, sample: PerformanceSample) -> None:
        """
        Record a finished run and re-evaluate the difficulty.

        Parameters
        ----------
        sample : PerformanceSample
            Outcome of the run that just ended.
        """
        history = self.state.history
        history.append(sample)
        while len(history) > self.config.history_length:
            history.popleft()

        self.state.consecutive_successes = 0
        self.state.recent_failures += 1

        self._evaluate(sample)
        self._persist()
        logger.info(
            f"Run ended. Recent failures: {self.state.recent_failures}, "
            f"speed: {self.state.current_speed}ms",
        )

    def end_run(self, score: float) -> PerformanceSample:
        """Build a sample from the tracked run, record it and return it."""
        sample = self.tracker.build_sample(score=score, speed_at_end=self.state.current_speed)
        self.on_run_ended(sample)
        return sample

    def difficulty_level(self) -> int:
        """
        Map the current speed onto a 1 (easiest) to 10 (hardest) scale.

        Returns
        -------
        int
            Difficulty level.
        """
        speed_range = self.config.max_speed - self.config.min_speed
        current_range = self.config.max_speed - self.state.current_speed
        level = math.floor(current_range / speed_range * (MAX_LEVEL - 1)) + 1
        return max(MIN_LEVEL, min(MAX_LEVEL, level))

    def performance_stats(self) -> PerformanceStats:
        """Summarise the stored run history."""
        history = self.state.history
        if not history:
            return PerformanceStats(
                games_played=0,
                average_score=0.0,
                average_survival_ms=0.0,
                best_score=0.0,
                difficulty_level=self.difficulty_level(),
                current_speed=self.state.current_speed,
            )

        scores = [run.score for run in history]
        survivals = [run.survival_time_ms for run in history]
        return PerformanceStats(
            games_played=len(history),
            average_score=sum(scores) / len(scores),
            average_survival_ms=sum(survivals) / len(survivals),
            best_score=max(scores),
            difficulty_level=self.difficulty_level(),
            current_speed=self.state.current_speed,
        )

    def set_speed(self, speed: float) -> float:
        """Set the speed manually, clamped to the configured bounds."""
        self.state.current_speed = self._clamp(speed)
        logger.info(f"Speed manually set to: {self.state.current_speed}ms")
        return self.state.current_speed

    def reset_difficulty(self) -> None:
        """Return to base speed and forget counters and history."""
        self.state = self._default_state()
        self._persist()
        logger.info("Difficulty reset to base level")

    def clear_saved_data(self) -> None:
        """Remove the persisted snapshot, keeping the in-memory state."""
        if self.store is None:
            return
        try:
            self.store.clear()
        except Exception as e:
            logger.warning(f"Difficulty store failed to clear: {e}")

    def snapshot(self) -> dict[str, Any]:
        """Build the JSON-compatible snapshot handed to the store."""
        return {
            "current_speed": self.state.current_speed,
            "history": [run.model_dump() for run in self.state.history],
            "consecutive_successes": self.state.consecutive_successes,
            "recent_failures": self.state.recent_failures,
            "timestamp": time.time() * 1000.0,
            "schema_version": SCHEMA_VERSION,
        }

    def restore(self, data: dict[str, Any]) -> None:
        """
        Restore state from a stored snapshot.

        Each field is checked on its own. A missing or invalid field falls
        back to its default while the valid fields are kept.

        Parameters
        ----------
        data : dict[str, Any]
            Snapshot previously produced by ``snapshot``.
        """
        state = self._default_state()

        speed = data.get("current_speed")
        if _is_number(speed) and self.config.min_speed <= speed <= self.config.max_speed:
            state.current_speed = float(speed)
        elif speed is not None:
            logger.warning(f"Discarding stored speed outside bounds: {speed!r}")

        history = data.get("history")
        if isinstance(history, list | tuple):
            state.history = deque(self._restore_history(history))
        elif history is not None:
            logger.warning(f"Discarding stored history of type {type(history).__name__}")

        successes = data.get("consecutive_successes")
        if _is_counter(successes):
            state.consecutive_successes = min(successes, self.config.success_threshold)
        elif successes is not None:
            logger.warning(f"Discarding invalid consecutive_successes: {successes!r}")

        failures = data.get("recent_failures")
        if _is_counter(failures):
            state.recent_failures = min(failures, self.config.failure_threshold)
        elif failures is not None:
            logger.warning(f"Discarding invalid recent_failures: {failures!r}")

        self.state = state
        logger.info(
            f"Loaded difficulty data: speed={state.current_speed}ms, "
            f"history={len(state.history)}, "
            f"consecutive_successes={state.consecutive_successes}, "
            f"recent_failures={state.recent_failures}",
        )

    def _restore_history(self, entries: list | tuple) -> list[PerformanceSample]:
        samples = []
        for entry in entries:
            try:
                samples.append(PerformanceSample.model_validate(entry))
            except ValidationError as e:
                logger.warning(f"Dropping malformed history entry: {e.error_count()} errors")
        return samples[-self.config.history_length :]

    def _evaluate(self, latest: PerformanceSample) -> None:
        history = self.state.history
        if len(history) < MIN_RUNS_FOR_EVALUATION:
            return

        recent = list(history)[-self.config.evaluation_window :]
        average_score = sum(run.score for run in recent) / len(recent)
        average_survival = sum(run.survival_time_ms for run in recent) / len(recent)

        is_struggling = (
            average_score < STRUGGLING_SCORE
            or average_survival < STRUGGLING_SURVIVAL_MS
            or self.state.recent_failures >= self.config.failure_threshold
        )
        is_performing_well = (
            average_score > STRONG_SCORE
            and average_survival > STRONG_SURVIVAL_MS
            and latest.collection_interval_ms < STRONG_COLLECTION_INTERVAL_MS
        )

        if is_struggling:
            self._decrease_difficulty()
            self.state.recent_failures = 0
        elif is_performing_well and self.state.recent_failures == 0:
            self._increase_difficulty()

    def _increase_difficulty(self) -> bool:
        old_speed = self.state.current_speed
        self.state.current_speed = self._clamp(old_speed - self.config.speed_step)
        if self.state.current_speed != old_speed:
            logger.info(f"Difficulty increased: {old_speed}ms -> {self.state.current_speed}ms")
            return True
        return False

    def _decrease_difficulty(self) -> bool:
        old_speed = self.state.current_speed
        self.state.current_speed = self._clamp(old_speed + self.config.speed_step)
        if self.state.current_speed != old_speed:
            logger.info(f"Difficulty decreased: {old_speed}ms -> {self.state.current_speed}ms")
            return True
        return False

    def _clamp(self, speed: float) -> float:
        return max(self.config.min_speed, min(self.config.max_speed, speed))

    def _default_state(self) -> DifficultyState:
        return DifficultyState(current_speed=self.config.base_speed)

    def _load(self) -> None:
        if self.store is None:
            return
        try:
            data = self.store.load()
        except Exception as e:
            logger.warning(f"Difficulty store failed to load, using defaults: {e}")
            return
        if data is None:
            return
        if not isinstance(data, dict):
            logger.warning(f"Discarding stored difficulty data of type {type(data).__name__}")
            return
        self.restore(data)

    def _persist(self) -> None:
        if self.store is None:
            return
        try:
            self.store.save(self.snapshot())
        except Exception as e:
            logger.warning(f"Difficulty store failed to save, keeping in-memory state: {e}")
