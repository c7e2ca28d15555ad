"""
Shared plumbing of the direct solver facades.

Every real decomposition exposes a solver that accepts a right-hand side
as a RealMatrix, a 2-D array, a RealVector, any VectorLike, or a 1-D
sequence, and answers in kind (matrix in, matrix out; vector in, vector
out). Only the triangular / orthogonal back-end differs between
decompositions, so subclasses implement ``_solve_array`` on a 2-D float64
block and ``is_non_singular``.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import NDArray

from pylinear.core.exceptions import SingularMatrixError
from pylinear.core.protocols import VectorLike
from pylinear.core.validation import (
    check_array,
    check_dimension,
    check_not_none,
    check_rectangular,
)
from pylinear.field import REAL_FIELD
from pylinear.matrix import FieldMatrix, RealMatrix, RealVector
from pylinear.matrix._vector import vector_entries


def as_real_array(matrix: Any, name: str = 'matrix') -> NDArray[np.float64]:
    """
    Copy of a RealMatrix or 2-D array-like as a float64 ndarray.

    Raises:
        NoDataError: If the matrix is empty
        DimensionError: If the input is ragged or not 2-D
    """
    check_not_none(matrix, name)
    if not isinstance(matrix, FieldMatrix):
        matrix = RealMatrix(matrix)
    data = matrix.get_data()
    if matrix.field != REAL_FIELD:
        data = data.astype(np.float64)
    check_rectangular(data, name)
    return data


def as_right_hand_side(b: Any, rows: int) -> tuple[NDArray[np.float64], bool]:
    """
    Right-hand side as an (rows, k) block.

    Returns:
        (block, is_matrix): is_matrix tells whether the caller handed in a
        matrix (answer with a RealMatrix) or a vector (answer with a
        RealVector)

    Raises:
        DimensionError: If b does not have ``rows`` rows
    """
    check_not_none(b, 'b')
    if isinstance(b, FieldMatrix):
        block = b.get_data().astype(np.float64)
        is_matrix = True
    elif isinstance(b, VectorLike):
        block = vector_entries(REAL_FIELD, b, 'b')[:, np.newaxis]
        is_matrix = False
    else:
        data = check_array(b, 'b')
        is_matrix = data.ndim == 2
        block = data if is_matrix else data.reshape(-1, 1)
    check_dimension(block.shape[0], rows, 'b')
    return block, is_matrix


class RealDecompositionSolver:
    """
    Base of the real solver facades.

    Subclasses set ``_rows`` / ``_columns`` and implement
    ``is_non_singular`` and ``_solve_array``.
    """

    _rows: int
    _columns: int
    _name: str = 'matrix'

    def is_non_singular(self) -> bool:
        raise NotImplementedError

    def _solve_array(self, b: NDArray[np.float64]) -> NDArray[np.float64]:
        raise NotImplementedError

    def solve(self, b: Any) -> RealVector | RealMatrix:
        """
        Solve A x = b.

        Args:
            b: Vector (RealVector, VectorLike, 1-D sequence) or matrix
               (RealMatrix, 2-D array) right-hand side

        Returns:
            RealVector for a vector b, RealMatrix for a matrix b

        Raises:
            DimensionError: If b's row count differs from A's
            SingularMatrixError: If A is singular
        """
        block, is_matrix = as_right_hand_side(b, self._rows)
        if not self.is_non_singular():
            raise SingularMatrixError(
                f"{self._name} is singular", matrix_name=self._name
            )
        x = self._solve_array(block)
        if is_matrix:
            return RealMatrix(x, copy=False)
        return RealVector(np.ascontiguousarray(x[:, 0]), copy=False)

    def get_inverse(self) -> RealMatrix:
        """
        Inverse (or pseudo-inverse for rectangular A) as solve(identity).

        Raises:
            SingularMatrixError: If A is singular
        """
        return self.solve(RealMatrix.identity(self._rows))  # type: ignore[return-value]
