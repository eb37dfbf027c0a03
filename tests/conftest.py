"""
Pytest configuration and fixtures for PGA2D tests.
"""

import pytest
import torch

from pga2d.pga import (
    MultiVector, Scalar, Vector, BiVector, TriVector, Motor,
)


NAMED_SHAPES = [Scalar, Vector, BiVector, TriVector, Motor, MultiVector]


@pytest.fixture
def seeded():
    """Deterministic random values."""
    torch.manual_seed(0)


@pytest.fixture
def regression_a():
    """Left operand of the fixed regression vector."""
    return MultiVector(2, 3, 5, 7, 11, 13, 17, 19)


@pytest.fixture
def regression_b():
    """Right operand of the fixed regression vector."""
    return MultiVector(23, 29, 31, 37, 41, 43, 47, 53)


@pytest.fixture
def regression_product():
    """Expected regression_a * regression_b under the Cayley table."""
    return MultiVector(-339, -1351, 477, -57, 1477, -741, 453, 1253)


def random_of(cls, low: float = 1.0, high: float = 2.0):
    """Instance of cls with every Real slot drawn from [low, high)."""
    values = {
        name: torch.empty(()).uniform_(low, high)
        for name in cls.SHAPE
    }
    return cls(**values)


@pytest.fixture
def make_random(seeded):
    """Factory for random instances of a multivector class."""
    return random_of
