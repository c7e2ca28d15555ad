"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def lu_matrix():
    """Non-singular 3x3 matrix with determinant -1."""
    return np.array([
        [1.0, 2.0, 3.0],
        [2.0, 5.0, 3.0],
        [1.0, 0.0, 8.0],
    ])


@pytest.fixture
def singular_matrix():
    """Rank-2 3x3 matrix (third row = first + second)."""
    return np.array([
        [2.0, -1.0, 0.0],
        [1.0, 3.0, 4.0],
        [3.0, 2.0, 4.0],
    ])


@pytest.fixture
def spd_matrix():
    """5x5 SPD matrix L L' with L[i] = consecutive integers; determinant 7290000."""
    return np.array([
        [1.0, 2.0, 4.0, 7.0, 11.0],
        [2.0, 13.0, 23.0, 38.0, 58.0],
        [4.0, 23.0, 77.0, 122.0, 182.0],
        [7.0, 38.0, 122.0, 294.0, 430.0],
        [11.0, 58.0, 182.0, 430.0, 855.0],
    ])


@pytest.fixture
def tall_matrix(rng):
    """Full column rank 7x4 matrix."""
    return rng.standard_normal((7, 4))


@pytest.fixture
def wide_matrix(rng):
    """Full row rank 3x5 matrix."""
    return rng.standard_normal((3, 5))


@pytest.fixture
def ill_conditioned_matrix():
    """100x100 symmetric matrix with diagonal 1.2^i and unit off-diagonals."""
    n = 100
    a = np.ones((n, n))
    np.fill_diagonal(a, 1.2 ** np.arange(n))
    return a
