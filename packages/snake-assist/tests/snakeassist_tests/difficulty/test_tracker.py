"""Tests for run tracking and performance samples."""

import math

import pytest
from pydantic import ValidationError
from snakeassist.difficulty import PerformanceSample, RunTracker


class TestPerformanceSample:
    """Test performance sample validation and derived values."""

    def test_negative_score_rejected(self):
        """Test that scores cannot be negative."""
        with pytest.raises(ValidationError):
            PerformanceSample(score=-1, survival_time_ms=1_000)

    def test_sample_is_immutable(self, poor_run):
        """Test that a recorded sample cannot be changed."""
        with pytest.raises(ValidationError):
            poor_run.score = 500

    def test_explicit_collection_interval(self, strong_run):
        """Test that a supplied average collection time is used as is."""
        assert strong_run.collection_interval_ms == 2_000

    def test_derived_collection_interval(self, poor_run):
        """Test the interval derived from survival time and food count."""
        assert poor_run.collection_interval_ms == 2_500

    def test_no_food_interval_is_infinite(self):
        """Test that a run without food never counts as fast collection."""
        sample = PerformanceSample(score=0, survival_time_ms=4_000)

        assert math.isinf(sample.collection_interval_ms)


class TestRunTracker:
    """Test per-run timing."""

    def test_tracks_food_intervals(self, clock):
        """Test the time between consecutive pickups."""
        tracker = RunTracker(clock)

        clock.advance(1_000)
        assert tracker.track_food() == 1_000
        clock.advance(3_000)
        assert tracker.track_food() == 3_000

        assert tracker.foods_collected == 2
        assert tracker.average_collection_time_ms == 2_000
        assert tracker.survival_time_ms == 4_000

    def test_average_before_first_pickup(self, clock):
        """Test the average collection time with no pickups."""
        assert RunTracker(clock).average_collection_time_ms == 0.0

    def test_start_run_resets(self, clock):
        """Test that a new run forgets the previous timing."""
        tracker = RunTracker(clock)
        clock.advance(500)
        tracker.track_food()

        clock.advance(10_000)
        tracker.start_run()
        clock.advance(250)

        assert tracker.foods_collected == 0
        assert tracker.survival_time_ms == 250

    def test_build_sample(self, clock):
        """Test the sample built at the end of a run."""
        tracker = RunTracker(clock)
        clock.advance(6_000)

        sample = tracker.build_sample(score=0, speed_at_end=165)

        assert sample.survival_time_ms == 6_000
        assert sample.food_collected == 0
        assert sample.average_collection_time_ms is None
        assert sample.speed_at_end == 165
