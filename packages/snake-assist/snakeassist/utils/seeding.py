"""Seeding helpers for reproducible simulations.

Usage:
    # Auto-generate seed if not provided
    seed = ensure_seed(user_seed)

    # Create a seeded numpy RNG for a board
    rng = get_rng(seed)
"""

import secrets

import numpy as np

# Maximum seed value (2^32 - 1, compatible with numpy)
MAX_SEED = 2**32


def generate_seed() -> int:
    """Generate a cryptographically random seed in [0, 2^32)."""
    return secrets.randbelow(MAX_SEED)


def ensure_seed(seed: int | None = None) -> int:
    """Return ``seed`` unchanged, or a newly generated one when it is None."""
    if seed is not None:
        return seed
    return generate_seed()


def get_rng(seed: int | None = None) -> np.random.Generator:
    """Create a seeded numpy random number Generator.

    Args:
        seed: Seed for the RNG, or None to use a random seed

    Returns
    -------
        A numpy Generator instance seeded with the given seed
    """
    return np.random.default_rng(ensure_seed(seed))


def derive_run_seed(base_seed: int, run_index: int) -> int:
    """Derive a deterministic seed for one run of a multi-run simulation."""
    return (base_seed + run_index) % MAX_SEED
