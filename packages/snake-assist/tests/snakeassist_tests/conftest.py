import pytest
from snakeassist.difficulty import InMemoryDifficultyStore, PerformanceSample
from snakeassist.pathfinding import GridPathfinder
from snakeassist.risk import RiskAnalyzer


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start_ms: float = 0.0) -> None:
        self.now_ms = start_ms

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, milliseconds: float) -> None:
        self.now_ms += milliseconds


@pytest.fixture
def clock():
    """Create a manually advanced clock starting at zero."""
    return FakeClock()


@pytest.fixture
def pathfinder():
    """Create a pathfinder for a 10x10 board."""
    return GridPathfinder(10, 10)


@pytest.fixture
def analyzer():
    """Create a risk analyzer for a 10x10 board."""
    return RiskAnalyzer(10, 10)


@pytest.fixture
def memory_store():
    """Create an empty in-memory difficulty store."""
    return InMemoryDifficultyStore()


@pytest.fixture
def poor_run():
    """Create a short, low-scoring run."""
    return PerformanceSample(
        score=20,
        survival_time_ms=5_000,
        food_collected=2,
        speed_at_end=150,
        timestamp=1_700_000_000_000,
    )


@pytest.fixture
def strong_run():
    """Create a long, high-scoring run with quick pickups."""
    return PerformanceSample(
        score=200,
        survival_time_ms=60_000,
        food_collected=20,
        speed_at_end=150,
        timestamp=1_700_000_000_000,
        average_collection_time_ms=2_000,
    )
