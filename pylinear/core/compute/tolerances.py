"""
Default thresholds for singularity, symmetry and positivity checks.

Values are absolute unless the name says otherwise. Every decomposition
accepts keyword overrides, so these are only the defaults.

Used by the decompositions, the iterative solvers and the test suite.
"""

from dataclasses import dataclass

import numpy as np


# Unit in the last place of 1.0
MACHINE_EPSILON = float(np.finfo(np.float64).eps)

# Smallest positive normal double
SAFE_MIN = float(np.finfo(np.float64).tiny)


@dataclass(frozen=True)
class DecompositionThresholds:
    """Thresholds used by the direct decompositions."""
    lu_singularity: float
    cholesky_relative_symmetry: float
    cholesky_absolute_positivity: float
    qr_singularity: float
    rrqr_drop: float
    description: str


DEFAULT_THRESHOLDS = DecompositionThresholds(
    lu_singularity=1e-11,
    cholesky_relative_symmetry=1e-15,
    cholesky_absolute_positivity=1e-10,
    qr_singularity=0.0,
    rrqr_drop=0.0,
    description="Double precision defaults",
)

# Relative condition number above which solve() warns about accuracy.
# At cond(A) = 1e12 only about four significant digits survive.
CONDITION_WARNING_THRESHOLD = 1e12


def svd_rank_tolerance(dimension: int, largest_singular_value: float) -> float:
    """
    Cutoff below which a singular value counts as zero.

    ``dimension`` is the larger of the row and column counts.
    """
    return max(dimension * largest_singular_value * MACHINE_EPSILON, float(np.sqrt(SAFE_MIN)))


def eigen_symmetry_tolerance(dimension: int) -> float:
    """Relative asymmetry an n x n matrix may show and still count as symmetric."""
    return 10.0 * dimension * dimension * MACHINE_EPSILON
