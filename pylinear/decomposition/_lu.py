"""
LU decomposition with partial pivoting.

Computes P A = L U for a square real matrix with LAPACK getrf (through
scipy.linalg.lu_factor). L is unit lower triangular, U upper triangular
and P the row permutation.

Singularity policy:
    The pivot chosen for column k is the entry of largest magnitude, which
    ends up as U[k, k]. If any |U[k, k]| is below ``singularity_threshold``
    (absolute, default 1e-11) the matrix is declared singular: L, U and P
    are then None, the determinant is 0 and the solver refuses to solve.
    LAPACK's own warning about exactly-zero pivots is folded into that flag.
"""

from __future__ import annotations

import logging
import warnings
from functools import cached_property
from typing import Any

import numpy as np
from numpy.typing import NDArray
import scipy.linalg as sla

from pylinear.core.compute.tolerances import DEFAULT_THRESHOLDS
from pylinear.core.validation import check_square
from pylinear.decomposition._solver import RealDecompositionSolver, as_real_array
from pylinear.matrix import RealMatrix

logger = logging.getLogger(__name__)


def permutation_from_ipiv(ipiv: NDArray[np.int32]) -> tuple[NDArray[np.intp], bool]:
    """
    Convert LAPACK's sequential row interchanges into a permutation.

    Returns:
        (pivot, even): pivot[i] is the original row now in position i;
        even tells whether the number of interchanges is even
    """
    pivot = np.arange(len(ipiv))
    even = True
    for i, p in enumerate(ipiv):
        if p != i:
            pivot[i], pivot[p] = pivot[p], pivot[i]
            even = not even
    return pivot, even


class LUDecomposition:
    """
    LU decomposition of a square real matrix.

    Args:
        matrix: RealMatrix or 2-D array-like (n x n)
        singularity_threshold: Pivots with magnitude below this are zero

    Raises:
        NonSquareMatrixError: If the matrix is not square

    Examples:
        >>> lu = LUDecomposition([[1, 2, 3], [2, 5, 3], [1, 0, 8]])
        >>> lu.determinant
        -1.0
    """

    def __init__(
        self,
        matrix: Any,
        singularity_threshold: float = DEFAULT_THRESHOLDS.lu_singularity,
    ):
        a = as_real_array(matrix)
        check_square(a.shape[0], a.shape[1], 'matrix')
        self._threshold = singularity_threshold

        with warnings.catch_warnings():
            warnings.simplefilter('ignore', sla.LinAlgWarning)
            self._lu, self._ipiv = sla.lu_factor(a, check_finite=False)

        self._pivot, self._even = permutation_from_ipiv(self._ipiv)
        pivots = np.abs(np.diag(self._lu))
        self._singular = bool(np.any(~(pivots >= singularity_threshold)))
        if self._singular:
            logger.debug(
                "LU: singular %dx%d matrix (smallest pivot %g, threshold %g)",
                a.shape[0], a.shape[0], float(np.min(pivots)), singularity_threshold,
            )

    @cached_property
    def L(self) -> RealMatrix | None:
        """Unit lower triangular factor, or None if singular."""
        if self._singular:
            return None
        n = self._lu.shape[0]
        return RealMatrix(np.tril(self._lu, -1) + np.eye(n), copy=False)

    @cached_property
    def U(self) -> RealMatrix | None:
        """Upper triangular factor, or None if singular."""
        if self._singular:
            return None
        return RealMatrix(np.triu(self._lu), copy=False)

    @cached_property
    def P(self) -> RealMatrix | None:
        """Row permutation matrix, or None if singular."""
        if self._singular:
            return None
        n = self._lu.shape[0]
        p = np.zeros((n, n))
        p[np.arange(n), self._pivot] = 1.0
        return RealMatrix(p, copy=False)

    def get_pivot(self) -> NDArray[np.intp]:
        """Copy of the permutation: entry i is the original row at position i."""
        return self._pivot.copy()

    @property
    def determinant(self) -> float:
        if self._singular:
            return 0.0
        sign = 1.0 if self._even else -1.0
        return sign * float(np.prod(np.diag(self._lu)))

    @cached_property
    def solver(self) -> LUSolver:
        return LUSolver(self)


class LUSolver(RealDecompositionSolver):
    """Solver facade over an LUDecomposition."""

    def __init__(self, decomposition: LUDecomposition):
        self._decomposition = decomposition
        self._rows = self._columns = decomposition._lu.shape[0]

    def is_non_singular(self) -> bool:
        return not self._decomposition._singular

    def _solve_array(self, b: NDArray[np.float64]) -> NDArray[np.float64]:
        d = self._decomposition
        return sla.lu_solve((d._lu, d._ipiv), b, check_finite=False)
