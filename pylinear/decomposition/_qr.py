"""
QR and rank-revealing QR decompositions.

QR: A = Q R for any m x n real matrix, by Householder reflections
(LAPACK geqrf through scipy.linalg.qr in raw mode). The reflectors are
kept in compact form; Q, R and H are materialised on first access.

Solver semantics:
    k = min(m, n). y = Q' b, then R[:k, :k] x[:k] = y[:k] by back
    substitution. For m >= n this is the least squares solution; for
    m < n the trailing n - m unknowns are fixed at zero. The system is
    singular when some |R_ii| (i < k) is at or below ``threshold``.

RRQR: A P = Q R with column pivoting (LAPACK geqp3), which pushes small
trailing blocks of R towards the bottom right so that ``get_rank`` can
read the numerical rank off the decay of their Frobenius norms.
"""

from __future__ import annotations

from functools import cached_property
from typing import Any

import numpy as np
from numpy.typing import NDArray
import scipy.linalg as sla

from pylinear.core.compute.tolerances import DEFAULT_THRESHOLDS
from pylinear.decomposition._solver import RealDecompositionSolver, as_real_array
from pylinear.matrix import RealMatrix


class QRDecomposition:
    """
    QR decomposition of an m x n real matrix.

    Args:
        matrix: RealMatrix or 2-D array-like
        threshold: Singularity threshold on |R_ii|
    """

    def __init__(self, matrix: Any, threshold: float = DEFAULT_THRESHOLDS.qr_singularity):
        a = as_real_array(matrix)
        self._threshold = threshold
        self._factorize(a)

    def _factorize(self, a: NDArray[np.float64]) -> None:
        (self._h, self._tau), _ = sla.qr(a, mode='raw', check_finite=False)

    @property
    def _shape(self) -> tuple[int, int]:
        return self._h.shape

    @cached_property
    def R(self) -> RealMatrix:
        """Upper trapezoidal factor (m x n)."""
        return RealMatrix(np.triu(self._h), copy=False)

    @cached_property
    def H(self) -> RealMatrix:
        """Householder vectors as columns (m x min(m, n), unit diagonal)."""
        m, n = self._shape
        k = min(m, n)
        h = np.tril(self._h[:, :k], -1)
        h[np.arange(k), np.arange(k)] = 1.0
        return RealMatrix(h, copy=False)

    @cached_property
    def Q(self) -> RealMatrix:
        """Orthogonal factor (m x m), the product of the reflectors."""
        m, _ = self._shape
        q = np.eye(m)
        h = self.H.get_data()
        for i in range(h.shape[1] - 1, -1, -1):
            v = h[:, i]
            q -= self._tau[i] * np.outer(v, v @ q)
        return RealMatrix(q, copy=False)

    @cached_property
    def QT(self) -> RealMatrix:
        return self.Q.transpose()

    @cached_property
    def solver(self) -> QRSolver:
        return QRSolver(self)

    def _r_diagonal(self) -> NDArray[np.float64]:
        m, n = self._shape
        k = min(m, n)
        return self._h[np.arange(k), np.arange(k)]

    def _solve_upper(self, b: NDArray[np.float64]) -> NDArray[np.float64]:
        """Solve A x = b (un-pivoted) for a (m, k) block b."""
        m, n = self._shape
        k = min(m, n)
        y = self.QT.get_data() @ b
        x = np.zeros((n, b.shape[1]))
        x[:k] = sla.solve_triangular(np.triu(self._h[:k, :k]), y[:k], check_finite=False)
        return x


class QRSolver(RealDecompositionSolver):
    """Solver facade over a QRDecomposition."""

    def __init__(self, decomposition: QRDecomposition):
        self._decomposition = decomposition
        self._rows, self._columns = decomposition._shape

    def is_non_singular(self) -> bool:
        d = self._decomposition
        return bool(np.all(np.abs(d._r_diagonal()) > d._threshold))

    def _solve_array(self, b: NDArray[np.float64]) -> NDArray[np.float64]:
        return self._decomposition._solve_upper(b)


class RRQRDecomposition(QRDecomposition):
    """
    Rank-revealing QR decomposition A P = Q R.

    Args:
        matrix: RealMatrix or 2-D array-like
        threshold: Singularity threshold on |R_ii|
    """

    def _factorize(self, a: NDArray[np.float64]) -> None:
        (self._h, self._tau), _, self._permutation = sla.qr(
            a, mode='raw', pivoting=True, check_finite=False
        )

    @cached_property
    def P(self) -> RealMatrix:
        """Column permutation matrix: column j of A P is column p[j] of A."""
        n = self._shape[1]
        p = np.zeros((n, n))
        p[self._permutation, np.arange(n)] = 1.0
        return RealMatrix(p, copy=False)

    def get_rank(self, drop_threshold: float = DEFAULT_THRESHOLDS.rrqr_drop) -> int:
        """
        Numerical rank.

        The rank grows while the Frobenius norm of the trailing block
        R[rank:, rank:], relative to the previous trailing block and scaled
        by the norm of R, stays at or above ``drop_threshold``.
        """
        r = np.triu(self._h)
        rows, columns = r.shape
        r_norm = float(np.linalg.norm(r))
        last_norm = r_norm
        rank = 1
        while rank < min(rows, columns):
            this_norm = float(np.linalg.norm(r[rank:, rank:]))
            if this_norm == 0 or (this_norm / last_norm) * r_norm < drop_threshold:
                break
            last_norm = this_norm
            rank += 1
        return rank

    @cached_property
    def solver(self) -> RRQRSolver:
        return RRQRSolver(self)


class RRQRSolver(QRSolver):
    """Solves (A P) y = b by QR, then returns x = P y."""

    def _solve_array(self, b: NDArray[np.float64]) -> NDArray[np.float64]:
        d = self._decomposition
        y = d._solve_upper(b)
        x = np.empty_like(y)
        x[d._permutation] = y
        return x
