"""Utilities module for Snake Assist."""

from snakeassist.utils.seeding import (
    derive_run_seed,
    ensure_seed,
    generate_seed,
    get_rng,
)

__all__ = [
    "derive_run_seed",
    "ensure_seed",
    "generate_seed",
    "get_rng",
]
