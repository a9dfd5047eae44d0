"""Seeded random generators for reproducible splits, folds and vote tie-breaks."""

import numpy as np


def derive_rng(seed: int, *keys: int) -> np.random.Generator:
    """
    Build an independent generator from ``seed`` and any number of integer keys.

    Generators derived from different keys are statistically independent, so
    a fold or a candidate k gets the same stream regardless of the order in
    which work is executed.
    """
    if seed is None:
        raise ValueError("A seed is required; ambient randomness is not supported")
    return np.random.default_rng([int(seed), *(int(key) for key in keys)])


def is_valid_seed(seed) -> bool:
    """Seeds must be non-negative integers; booleans are rejected."""
    return not isinstance(seed, bool) and isinstance(seed, (int, np.integer)) and seed >= 0
