"""
Cholesky decomposition A = L L' of a symmetric positive definite matrix.

All structural checks happen at construction:

    1. Square, else NonSquareMatrixError.
    2. Symmetric: for every mirrored pair, |a_ij - a_ji| must not exceed
       relative_symmetry_threshold * max(|a_ij|, |a_ji|), else
       NonSymmetricMatrixError naming the first offending pair.
    3. Positive definite: every pivot met during the right-looking
       factorisation must not fall below absolute_positivity_threshold, else
       NotPositiveDefiniteError naming the pivot index.

The factorisation works on the upper triangle (L') row by row; L is its
transpose, and both are cached independently.
"""

from __future__ import annotations

from functools import cached_property
from typing import Any

import numpy as np
from numpy.typing import NDArray
import scipy.linalg as sla

from pylinear.core.compute.tolerances import DEFAULT_THRESHOLDS
from pylinear.core.exceptions import NonSymmetricMatrixError, NotPositiveDefiniteError
from pylinear.core.validation import check_square
from pylinear.decomposition._solver import RealDecompositionSolver, as_real_array
from pylinear.matrix import RealMatrix


def check_symmetric(a: NDArray[np.float64], relative_threshold: float) -> None:
    """
    Raises:
        NonSymmetricMatrixError: On the first pair (row-major) that is too far apart
    """
    upper_rows, upper_cols = np.triu_indices(a.shape[0], k=1)
    upper = a[upper_rows, upper_cols]
    lower = a[upper_cols, upper_rows]
    max_delta = relative_threshold * np.maximum(np.abs(upper), np.abs(lower))
    bad = np.flatnonzero(np.abs(upper - lower) > max_delta)
    if bad.size:
        i, j = int(upper_rows[bad[0]]), int(upper_cols[bad[0]])
        raise NonSymmetricMatrixError(
            f"matrix is not symmetric: entries ({i}, {j}) = {a[i, j]} and "
            f"({j}, {i}) = {a[j, i]} differ beyond relative threshold {relative_threshold}",
            row=i,
            column=j,
            threshold=relative_threshold,
        )


class CholeskyDecomposition:
    """
    Cholesky decomposition of a symmetric positive definite real matrix.

    Args:
        matrix: RealMatrix or 2-D array-like (n x n)
        relative_symmetry_threshold: Allowed relative asymmetry of a_ij vs a_ji
        absolute_positivity_threshold: Smallest acceptable pivot

    Raises:
        NonSquareMatrixError: If the matrix is not square
        NonSymmetricMatrixError: If the matrix is not symmetric
        NotPositiveDefiniteError: If the matrix is not positive definite
    """

    def __init__(
        self,
        matrix: Any,
        relative_symmetry_threshold: float = DEFAULT_THRESHOLDS.cholesky_relative_symmetry,
        absolute_positivity_threshold: float = DEFAULT_THRESHOLDS.cholesky_absolute_positivity,
    ):
        a = as_real_array(matrix)
        check_square(a.shape[0], a.shape[1], 'matrix')
        check_symmetric(a, relative_symmetry_threshold)

        n = a.shape[0]
        lt = np.triu(a)
        for i in range(n):
            if lt[i, i] < absolute_positivity_threshold:
                raise NotPositiveDefiniteError(
                    f"matrix is not positive definite: pivot {i} is {lt[i, i]}, "
                    f"below {absolute_positivity_threshold}",
                    matrix_name='matrix',
                    index=i,
                    threshold=absolute_positivity_threshold,
                )
            lt[i, i] = np.sqrt(lt[i, i])
            row = lt[i, i + 1:] / lt[i, i]
            lt[i, i + 1:] = row
            lt[i + 1:, i + 1:] -= np.triu(np.outer(row, row))
        self._lt = lt

    @cached_property
    def LT(self) -> RealMatrix:
        """Upper triangular factor L'."""
        return RealMatrix(self._lt.copy(), copy=False)

    @cached_property
    def L(self) -> RealMatrix:
        """Lower triangular factor L."""
        return RealMatrix(self._lt.T.copy(), copy=False)

    @property
    def determinant(self) -> float:
        """(prod diag L)^2"""
        d = float(np.prod(np.diag(self._lt)))
        return d * d

    @cached_property
    def solver(self) -> CholeskySolver:
        return CholeskySolver(self)


class CholeskySolver(RealDecompositionSolver):
    """Solver facade over a CholeskyDecomposition (never singular)."""

    def __init__(self, decomposition: CholeskyDecomposition):
        self._decomposition = decomposition
        self._rows = self._columns = decomposition._lt.shape[0]

    def is_non_singular(self) -> bool:
        return True

    def _solve_array(self, b: NDArray[np.float64]) -> NDArray[np.float64]:
        # upper factor: A = U'U with U = L'
        return sla.cho_solve((self._decomposition._lt, False), b, check_finite=False)
