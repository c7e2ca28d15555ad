"""
Singular value decomposition A = U S V'.

Computed with LAPACK gesdd (numpy.linalg.svd, full matrices): U is m x m,
S is m x n with the singular values on its diagonal in non-increasing
order, V is n x n.

Non-finite input is not an error: LAPACK cannot factor it, so every
singular value, and every entry of U and V, is reported as NaN. The rank
of such a matrix is 0.

Rank and solver use the cutoff
    tol = max(max(m, n) * s_0 * eps, sqrt(smallest positive normal double))
"""

from __future__ import annotations

from functools import cached_property
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pylinear.core.compute.tolerances import svd_rank_tolerance
from pylinear.core.exceptions import ValidationError
from pylinear.decomposition._solver import RealDecompositionSolver, as_real_array
from pylinear.matrix import RealMatrix


class SingularValueDecomposition:
    """
    SVD of an m x n real matrix.

    Args:
        matrix: RealMatrix or 2-D array-like
    """

    def __init__(self, matrix: Any):
        a = as_real_array(matrix)
        m, n = a.shape
        self._shape = (m, n)
        if np.all(np.isfinite(a)):
            u, s, vt = np.linalg.svd(a, full_matrices=True)
        else:
            k = min(m, n)
            u = np.full((m, m), np.nan)
            s = np.full(k, np.nan)
            vt = np.full((n, n), np.nan)
        self._u = u
        self._s = s
        self._v = vt.T
        self._tol = svd_rank_tolerance(max(m, n), float(s[0])) if s.size else 0.0

    @property
    def singular_values(self) -> NDArray[np.float64]:
        """Copy of the singular values, largest first."""
        return self._s.copy()

    @cached_property
    def U(self) -> RealMatrix:
        return RealMatrix(self._u.copy(), copy=False)

    @cached_property
    def UT(self) -> RealMatrix:
        return RealMatrix(self._u.T.copy(), copy=False)

    @cached_property
    def S(self) -> RealMatrix:
        m, n = self._shape
        s = np.zeros((m, n))
        k = self._s.size
        s[np.arange(k), np.arange(k)] = self._s
        return RealMatrix(s, copy=False)

    @cached_property
    def V(self) -> RealMatrix:
        return RealMatrix(self._v.copy(), copy=False)

    @cached_property
    def VT(self) -> RealMatrix:
        return RealMatrix(self._v.T.copy(), copy=False)

    def get_norm(self) -> float:
        """L2 norm of the matrix (largest singular value)."""
        return float(self._s[0])

    def get_condition_number(self) -> float:
        """Ratio of the extreme singular values; inf for a singular matrix."""
        with np.errstate(divide='ignore', invalid='ignore'):
            return float(self._s[0] / self._s[-1])

    def get_inverse_condition_number(self) -> float:
        with np.errstate(divide='ignore', invalid='ignore'):
            return float(self._s[-1] / self._s[0])

    def get_rank(self) -> int:
        """Number of singular values above the cutoff."""
        return int(np.sum(self._s > self._tol))

    def get_covariance(self, min_singular_value: float) -> RealMatrix:
        """
        V_k diag(1 / s_i^2) V_k' over the leading singular values >= cutoff.

        Raises:
            ValidationError: If even the largest singular value is below the cutoff
        """
        dimension = 0
        while dimension < self._s.size and self._s[dimension] >= min_singular_value:
            dimension += 1
        if dimension == 0:
            raise ValidationError(
                f"cutoff singular value {min_singular_value} is larger than the "
                f"largest singular value {self._s[0] if self._s.size else float('nan')}"
            )
        jv = self._v[:, :dimension].T / self._s[:dimension, np.newaxis]
        return RealMatrix(jv.T @ jv, copy=False)

    @cached_property
    def solver(self) -> SVDSolver:
        return SVDSolver(self)


class SVDSolver(RealDecompositionSolver):
    """
    Pseudo-inverse solver.

    Non-singular iff the rank equals min(m, n); a rank-deficient matrix
    makes solve and get_inverse raise SingularMatrixError.
    """

    def __init__(self, decomposition: SingularValueDecomposition):
        self._decomposition = decomposition
        self._rows, self._columns = decomposition._shape

    def is_non_singular(self) -> bool:
        return self._decomposition.get_rank() == min(self._rows, self._columns)

    @cached_property
    def _pseudo_inverse(self) -> NDArray[np.float64]:
        d = self._decomposition
        keep = d._s > d._tol
        k = d._s.size
        inverse_s = np.where(keep, 1.0 / np.where(keep, d._s, 1.0), 0.0)
        return (d._v[:, :k] * inverse_s) @ d._u[:, :k].T

    def _solve_array(self, b: NDArray[np.float64]) -> NDArray[np.float64]:
        return self._pseudo_inverse @ b
