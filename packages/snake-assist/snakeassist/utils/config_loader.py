"""Load and configure assistant settings from a YAML file."""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from snakeassist.difficulty import (
    DifficultyConfig,
    DifficultyStore,
    InMemoryDifficultyStore,
    JsonFileDifficultyStore,
)
from snakeassist.env import (
    DEFAULT_BOARD_HEIGHT,
    DEFAULT_BOARD_WIDTH,
    DEFAULT_INITIAL_LENGTH,
    Theme,
)
from snakeassist.grid import MIN_BOARD_SIZE
from snakeassist.logging_config import logger
from snakeassist.pathfinding import MoveScoringConfig
from snakeassist.risk import RiskConfig


class BoardConfig(BaseModel):
    """Configuration for the board the snake plays on."""

    width: int = Field(default=DEFAULT_BOARD_WIDTH, ge=MIN_BOARD_SIZE)
    height: int = Field(default=DEFAULT_BOARD_HEIGHT, ge=MIN_BOARD_SIZE)
    initial_body_length: int = Field(default=DEFAULT_INITIAL_LENGTH, ge=1)
    theme: Theme = Theme.ASCII


class StorageConfig(BaseModel):
    """Configuration for difficulty persistence.

    A missing ``path`` keeps the difficulty state in memory only.
    """

    path: str | None = "difficulty.json"


class AssistConfig(BaseModel):
    """Configuration for the snake assistant."""

    board: BoardConfig | None = None
    scoring: MoveScoringConfig | None = None
    risk: RiskConfig | None = None
    difficulty: DifficultyConfig | None = None
    storage: StorageConfig | None = None
    seed: int | None = None
    max_steps: int | None = None


def load_assist_config(config_path: str | Path) -> AssistConfig:
    """
    Load assistant configuration from a YAML file and parse it into an AssistConfig model.

    Args:
        config_path (str | Path): Path to the YAML configuration file.

    Returns
    -------
        AssistConfig: Parsed configuration as a Pydantic model.
    """
    with Path(config_path).open() as file:
        data = yaml.safe_load(file) or {}
        return AssistConfig(**data)


def configure_board(config: AssistConfig) -> BoardConfig:
    """Get the board configuration, with defaults when the section is missing."""
    return config.board or BoardConfig()


def configure_move_scoring(config: AssistConfig) -> MoveScoringConfig:
    """Get the fallback move weights, with defaults when the section is missing."""
    return config.scoring or MoveScoringConfig()


def configure_risk(config: AssistConfig) -> RiskConfig:
    """Get the risk analysis settings, with defaults when the section is missing."""
    return config.risk or RiskConfig()


def configure_difficulty(config: AssistConfig) -> DifficultyConfig:
    """Get the difficulty settings, with defaults when the section is missing."""
    return config.difficulty or DifficultyConfig()


def configure_storage(config: AssistConfig) -> StorageConfig:
    """Get the persistence settings, with defaults when the section is missing."""
    return config.storage or StorageConfig()


def create_difficulty_store(storage_config: StorageConfig) -> DifficultyStore:
    """
    Create the difficulty store described by ``storage_config``.

    Args:
        storage_config (StorageConfig): Persistence settings.

    Returns
    -------
        DifficultyStore: A JSON file store, or an in-memory store when no path is set.
    """
    if storage_config.path is None:
        logger.info("No difficulty storage path configured, keeping state in memory")
        return InMemoryDifficultyStore()
    return JsonFileDifficultyStore(Path(storage_config.path))
