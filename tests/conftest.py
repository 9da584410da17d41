"""Shared pytest configuration and fixtures for the test suite."""

import random

import pytest

from utils.bitcoin import U64_MAX

#: fixed seed so the sampled values are the same in every run
SEED = 20240501


@pytest.fixture
def rng() -> random.Random:
    """Seeded random generator for sampled property checks."""
    return random.Random(SEED)


@pytest.fixture
def u64_samples(rng: random.Random) -> list[int]:
    """Random u64 values plus the boundaries of the range."""
    samples = [rng.getrandbits(64) for _ in range(200)]
    samples += [rng.randrange(0, 10_000) for _ in range(200)]
    return samples + [0, 1, 249, 250, 251, U64_MAX - 1, U64_MAX]
