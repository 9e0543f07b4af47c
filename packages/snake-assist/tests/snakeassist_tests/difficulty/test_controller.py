"""Tests for the adaptive difficulty controller."""

from unittest.mock import Mock

import pytest
from snakeassist.difficulty import (
    DifficultyConfig,
    DifficultyController,
    InMemoryDifficultyStore,
    JsonFileDifficultyStore,
    PerformanceSample,
)
from snakeassist.difficulty.controller import SCHEMA_VERSION


def sample_dict(score=20.0, survival_time_ms=5_000.0, **overrides):
    """Build a serialized performance sample."""
    data = {
        "score": score,
        "survival_time_ms": survival_time_ms,
        "food_collected": 2,
        "speed_at_end": 150.0,
        "timestamp": 1_700_000_000_000.0,
        "average_collection_time_ms": None,
    }
    data.update(overrides)
    return data


class TestDifficultyConfig:
    """Test difficulty configuration validation."""

    def test_default_values(self):
        """Test DifficultyConfig default values."""
        config = DifficultyConfig()
        assert config.base_speed == 150
        assert config.min_speed == 50
        assert config.max_speed == 300
        assert config.speed_step == 15
        assert config.success_threshold == 3
        assert config.failure_threshold == 2
        assert config.history_length == 10
        assert config.evaluation_window == 3

    @pytest.mark.parametrize(
        ("min_speed", "max_speed", "base_speed"),
        [(300, 300, 300), (300, 50, 150), (50, 300, 400), (50, 300, 10)],
    )
    def test_invalid_bounds_rejected(self, min_speed, max_speed, base_speed):
        """Test that inverted bounds or an out-of-range base speed are rejected."""
        with pytest.raises(ValueError, match="min_speed"):
            DifficultyConfig(min_speed=min_speed, max_speed=max_speed, base_speed=base_speed)


class TestGoalReached:
    """Test difficulty increases from consecutive pickups."""

    def test_three_goals_speed_up_one_step(self, memory_store):
        """Test that three pickups in a row lower the speed by one step."""
        controller = DifficultyController(store=memory_store)

        for score in (10, 20, 30):
            controller.on_goal_reached(score, 4)

        assert controller.current_speed == 135
        assert controller.state.consecutive_successes == 0
        assert memory_store.save_count == 1
        assert memory_store.snapshot["current_speed"] == 135

    def test_below_threshold_no_change(self, memory_store):
        """Test that two pickups do not change the speed or persist."""
        controller = DifficultyController(store=memory_store)

        controller.on_goal_reached(10, 4)
        controller.on_goal_reached(20, 5)

        assert controller.current_speed == 150
        assert controller.state.consecutive_successes == 2
        assert memory_store.save_count == 0

    def test_speed_clamped_at_minimum(self):
        """Test that the speed never drops below the minimum."""
        controller = DifficultyController()
        controller.set_speed(55)

        for _ in range(6):
            controller.on_goal_reached(10, 4)

        assert controller.current_speed == 50


class TestRunEnded:
    """Test difficulty evaluation when a run ends."""

    def test_first_run_is_not_evaluated(self, poor_run):
        """Test that a single run only records the failure."""
        controller = DifficultyController()

        controller.on_run_ended(poor_run)

        assert controller.current_speed == 150
        assert controller.state.recent_failures == 1
        assert controller.history == [poor_run]

    def test_two_poor_runs_ease_one_step(self, memory_store, poor_run):
        """Test that two low-scoring runs slow the game by one step."""
        controller = DifficultyController(store=memory_store)

        controller.on_run_ended(poor_run)
        controller.on_run_ended(poor_run)

        assert controller.current_speed == 165
        assert controller.state.recent_failures == 0
        assert memory_store.save_count == 2

    def test_run_end_resets_consecutive_successes(self, poor_run):
        """Test that a run end breaks the pickup streak."""
        controller = DifficultyController()
        controller.on_goal_reached(10, 4)
        controller.on_goal_reached(20, 5)

        controller.on_run_ended(poor_run)

        assert controller.state.consecutive_successes == 0

    def test_speed_clamped_at_maximum(self, poor_run):
        """Test that easing never exceeds the maximum speed."""
        controller = DifficultyController()
        controller.set_speed(295)

        for _ in range(6):
            controller.on_run_ended(poor_run)

        assert controller.current_speed == 300

    def test_strong_runs_wait_for_failure_counter(self, strong_run):
        """Test that strong runs only speed up the game with no recorded failure."""
        controller = DifficultyController()

        controller.on_run_ended(strong_run)
        controller.on_run_ended(strong_run)
        assert controller.current_speed == 165

        controller.on_run_ended(strong_run)
        assert controller.current_speed == 165
        assert controller.state.recent_failures == 1

    def test_history_keeps_newest_runs(self):
        """Test that the history is capped at ten runs, oldest evicted first."""
        controller = DifficultyController()

        for score in range(12):
            controller.on_run_ended(PerformanceSample(score=score, survival_time_ms=1_000))

        assert len(controller.history) == 10
        assert [run.score for run in controller.history] == list(range(2, 12))


class TestDifficultyLevel:
    """Test the 1-10 difficulty scale."""

    @pytest.mark.parametrize(
        ("speed", "level"),
        [(300, 1), (175, 5), (150, 6), (100, 8), (50, 10)],
    )
    def test_level_mapping(self, speed, level):
        """Test the speed to level mapping."""
        controller = DifficultyController()
        controller.set_speed(speed)

        assert controller.difficulty_level() == level

    def test_level_always_in_range(self, poor_run):
        """Test that the level stays between 1 and 10 through many events."""
        controller = DifficultyController()

        for _ in range(30):
            controller.on_goal_reached(10, 4)
            assert 1 <= controller.difficulty_level() <= 10
        for _ in range(30):
            controller.on_run_ended(poor_run)
            assert 1 <= controller.difficulty_level() <= 10
            assert 50 <= controller.current_speed <= 300


class TestRunTracking:
    """Test run timing through the controller."""

    def test_end_run_builds_sample_from_tracking(self, clock):
        """Test that the tracked timing ends up in the recorded sample."""
        controller = DifficultyController(clock=clock)
        controller.start_run()

        clock.advance(2_000)
        controller.on_goal_reached(10, 4)
        clock.advance(3_000)
        sample = controller.end_run(10)

        assert sample.survival_time_ms == 5_000
        assert sample.food_collected == 1
        assert sample.average_collection_time_ms == 2_000
        assert sample.speed_at_end == 150
        assert controller.history == [sample]

    def test_start_run_without_history_resets_speed(self, poor_run):
        """Test that a new player starts at the base speed."""
        controller = DifficultyController()
        controller.set_speed(100)

        controller.start_run()
        assert controller.current_speed == 150

        controller.on_run_ended(poor_run)
        controller.set_speed(100)
        controller.start_run()
        assert controller.current_speed == 100


class TestAdministration:
    """Test stats and manual adjustments."""

    def test_performance_stats_without_history(self):
        """Test the stats of a new player."""
        stats = DifficultyController().performance_stats()

        assert stats.games_played == 0
        assert stats.average_score == 0
        assert stats.best_score == 0
        assert stats.difficulty_level == 6
        assert stats.current_speed == 150

    def test_performance_stats(self):
        """Test averages and best score over the history."""
        controller = DifficultyController()
        controller.on_run_ended(PerformanceSample(score=40, survival_time_ms=20_000))
        controller.on_run_ended(PerformanceSample(score=80, survival_time_ms=40_000))

        stats = controller.performance_stats()

        assert stats.games_played == 2
        assert stats.average_score == 60
        assert stats.average_survival_ms == 30_000
        assert stats.best_score == 80

    def test_set_speed_is_clamped(self):
        """Test that manual speeds are clamped to the bounds."""
        controller = DifficultyController()

        assert controller.set_speed(10) == 50
        assert controller.set_speed(1_000) == 300

    def test_reset_difficulty(self, memory_store, poor_run):
        """Test that a reset restores defaults and persists them."""
        controller = DifficultyController(store=memory_store)
        controller.on_run_ended(poor_run)
        controller.on_run_ended(poor_run)

        controller.reset_difficulty()

        assert controller.current_speed == 150
        assert controller.history == []
        assert controller.state.recent_failures == 0
        assert memory_store.snapshot["history"] == []

    def test_clear_saved_data(self, memory_store):
        """Test that clearing delegates to the store."""
        controller = DifficultyController(store=memory_store)
        for _ in range(3):
            controller.on_goal_reached(10, 4)

        controller.clear_saved_data()

        assert memory_store.snapshot is None
        assert controller.current_speed == 135


class TestPersistence:
    """Test snapshot save and restore."""

    def test_snapshot_fields(self, poor_run):
        """Test the keys of the persisted snapshot."""
        controller = DifficultyController()
        controller.on_run_ended(poor_run)

        snapshot = controller.snapshot()

        assert set(snapshot) == {
            "current_speed",
            "history",
            "consecutive_successes",
            "recent_failures",
            "timestamp",
            "schema_version",
        }
        assert snapshot["schema_version"] == SCHEMA_VERSION
        assert snapshot["history"] == [poor_run.model_dump()]

    def test_state_survives_sessions(self, tmp_path, poor_run):
        """Test that a new controller picks up the saved state from disk."""
        store = JsonFileDifficultyStore(tmp_path / "difficulty.json")
        controller = DifficultyController(store=store)
        for _ in range(3):
            controller.on_goal_reached(10, 4)
        controller.on_run_ended(poor_run)

        restored = DifficultyController(store=JsonFileDifficultyStore(tmp_path / "difficulty.json"))

        assert restored.current_speed == 135
        assert restored.history == [poor_run]
        assert restored.state.recent_failures == 1

    def test_invalid_fields_replaced_individually(self):
        """Test that each invalid field falls back to its default on its own."""
        store = InMemoryDifficultyStore(
            {
                "current_speed": 999,
                "history": "not a list",
                "consecutive_successes": -1,
                "recent_failures": 1,
            },
        )

        controller = DifficultyController(store=store)

        assert controller.current_speed == 150
        assert controller.history == []
        assert controller.state.consecutive_successes == 0
        assert controller.state.recent_failures == 1

    @pytest.mark.parametrize("speed", ["fast", True, None, float("nan")])
    def test_non_numeric_speed_replaced(self, speed):
        """Test that a speed that is not a finite number is discarded."""
        controller = DifficultyController(store=InMemoryDifficultyStore({"current_speed": speed}))

        assert controller.current_speed == 150

    def test_valid_speed_kept(self):
        """Test that an in-bounds stored speed is restored."""
        controller = DifficultyController(store=InMemoryDifficultyStore({"current_speed": 90}))

        assert controller.current_speed == 90

    def test_malformed_history_entries_dropped(self):
        """Test that only the invalid history entries are discarded."""
        history = [sample_dict(score=30), sample_dict(score=-5), "junk", {"score": 10}]

        controller = DifficultyController(store=InMemoryDifficultyStore({"history": history}))

        assert [run.score for run in controller.history] == [30]

    def test_restored_history_truncated_to_newest(self):
        """Test that an oversized stored history keeps the newest entries."""
        history = [sample_dict(score=score) for score in range(15)]

        controller = DifficultyController(store=InMemoryDifficultyStore({"history": history}))

        assert [run.score for run in controller.history] == list(range(5, 15))

    def test_counters_capped_at_thresholds(self):
        """Test that stored counters are capped at their thresholds."""
        store = InMemoryDifficultyStore({"consecutive_successes": 7, "recent_failures": 9})

        controller = DifficultyController(store=store)

        assert controller.state.consecutive_successes == 3
        assert controller.state.recent_failures == 2

    @pytest.mark.parametrize("value", [True, 1.5, "2"])
    def test_non_integer_counters_replaced(self, value):
        """Test that counters must be plain non-negative integers."""
        store = InMemoryDifficultyStore({"consecutive_successes": value, "recent_failures": value})

        controller = DifficultyController(store=store)

        assert controller.state.consecutive_successes == 0
        assert controller.state.recent_failures == 0

    def test_failing_store_does_not_propagate(self, poor_run):
        """Test that store errors leave the in-memory state working."""
        store = Mock()
        store.load.side_effect = OSError("disk unavailable")
        store.save.side_effect = OSError("disk full")
        store.clear.side_effect = OSError("read-only")

        controller = DifficultyController(store=store)
        for _ in range(3):
            controller.on_goal_reached(10, 4)
        controller.on_run_ended(poor_run)
        controller.clear_saved_data()

        assert controller.current_speed == 135
        assert store.save.call_count == 2

    def test_store_raising_unexpected_error_does_not_propagate(self, poor_run):
        """Test that errors outside OSError and ValueError are also absorbed."""
        store = Mock()
        store.load.side_effect = RuntimeError("backend offline")
        store.save.side_effect = KeyError("snapshot")
        store.clear.side_effect = RuntimeError("backend offline")

        controller = DifficultyController(store=store)
        controller.on_run_ended(poor_run)
        controller.clear_saved_data()

        assert controller.current_speed == 150
        assert store.save.call_count == 1

    def test_store_returning_non_dict_keeps_defaults(self):
        """Test that a store yielding a list instead of a dict is ignored."""
        store = Mock()
        store.load.return_value = [("current_speed", 90)]

        controller = DifficultyController(store=store)

        assert controller.current_speed == 150
        assert controller.history == []

    def test_memory_store_with_non_dict_snapshot_keeps_defaults(self):
        """Test that a malformed in-memory snapshot loads as nothing."""
        store = InMemoryDifficultyStore(snapshot=[("current_speed", 90)])

        controller = DifficultyController(store=store)

        assert store.load() is None
        assert controller.current_speed == 150
