"""
Eigen decomposition A = V D V' of a real symmetric matrix.

Computed with LAPACK syevr through scipy.linalg.eigh. The eigenvalues are
real; they are stored largest first, and column i of V is the unit
eigenvector for eigenvalue i. V is orthogonal, so V' is its inverse.

Only symmetric input is accepted. The default symmetry check allows a
relative asymmetry of 10 n^2 eps between mirrored entries.
"""

from __future__ import annotations

from functools import cached_property
from typing import Any

import numpy as np
from numpy.typing import NDArray
import scipy.linalg as sla

from pylinear.core.compute.tolerances import MACHINE_EPSILON, eigen_symmetry_tolerance
from pylinear.core.exceptions import NotPositiveDefiniteError
from pylinear.core.validation import check_index, check_square
from pylinear.decomposition._cholesky import check_symmetric
from pylinear.decomposition._solver import RealDecompositionSolver, as_real_array
from pylinear.matrix import DiagonalMatrix, RealMatrix, RealVector


class EigenDecomposition:
    """
    Eigen decomposition of a symmetric real matrix.

    Args:
        matrix: RealMatrix or 2-D array-like (n x n)
        relative_symmetry_threshold: Allowed relative asymmetry of a_ij vs
            a_ji; None means 10 n^2 eps

    Raises:
        NonSquareMatrixError: If the matrix is not square
        NonSymmetricMatrixError: If the matrix is not symmetric

    Examples:
        >>> eigen = EigenDecomposition([[59.0, 12.0], [12.0, 66.0]])
        >>> eigen.eigenvalues
        array([75., 50.])
    """

    def __init__(self, matrix: Any, relative_symmetry_threshold: float | None = None):
        a = as_real_array(matrix)
        n = a.shape[0]
        check_square(n, a.shape[1], 'matrix')
        if relative_symmetry_threshold is None:
            relative_symmetry_threshold = eigen_symmetry_tolerance(n)
        check_symmetric(a, relative_symmetry_threshold)

        values, vectors = sla.eigh(a, lower=False, check_finite=False)
        order = np.argsort(values)[::-1]
        self._values = values[order]
        self._vectors = vectors[:, order]

    @property
    def eigenvalues(self) -> NDArray[np.float64]:
        """Copy of the eigenvalues, largest first."""
        return self._values.copy()

    def get_eigenvalue(self, i: int) -> float:
        check_index(i, self._values.size, 'eigenvalue')
        return float(self._values[i])

    def get_eigenvector(self, i: int) -> RealVector:
        check_index(i, self._values.size, 'eigenvector')
        return RealVector(self._vectors[:, i].copy(), copy=False)

    @cached_property
    def V(self) -> RealMatrix:
        return RealMatrix(self._vectors.copy(), copy=False)

    @cached_property
    def VT(self) -> RealMatrix:
        return RealMatrix(self._vectors.T.copy(), copy=False)

    @cached_property
    def D(self) -> DiagonalMatrix:
        return DiagonalMatrix(self._values)

    @property
    def determinant(self) -> float:
        """Product of the eigenvalues."""
        return float(np.prod(self._values))

    def get_square_root(self) -> RealMatrix:
        """
        Symmetric B with B B = A, namely V sqrt(D) V'.

        Raises:
            NotPositiveDefiniteError: If some eigenvalue is not positive
        """
        non_positive = np.flatnonzero(self._values <= 0.0)
        if non_positive.size:
            i = int(non_positive[0])
            raise NotPositiveDefiniteError(
                f"square root needs a positive definite matrix: eigenvalue {i} is "
                f"{self._values[i]}",
                matrix_name='matrix',
                index=i,
                threshold=0.0,
            )
        root = (self._vectors * np.sqrt(self._values)) @ self._vectors.T
        return RealMatrix(root, copy=False)

    @cached_property
    def solver(self) -> EigenSolver:
        return EigenSolver(self)


class EigenSolver(RealDecompositionSolver):
    """
    Solves through x = V D^-1 V' b.

    Singular when every eigenvalue is zero, or when the ratio of some
    eigenvalue to the largest in magnitude is within machine epsilon of 0.
    """

    def __init__(self, decomposition: EigenDecomposition):
        self._decomposition = decomposition
        self._rows = self._columns = decomposition._values.size

    def is_non_singular(self) -> bool:
        magnitudes = np.abs(self._decomposition._values)
        largest = float(np.max(magnitudes))
        if largest == 0.0:
            return False
        return bool(np.all(magnitudes / largest > MACHINE_EPSILON))

    def _solve_array(self, b: NDArray[np.float64]) -> NDArray[np.float64]:
        d = self._decomposition
        return d._vectors @ ((d._vectors.T @ b) / d._values[:, np.newaxis])
