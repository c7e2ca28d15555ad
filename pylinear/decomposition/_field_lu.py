"""
LU decomposition over an arbitrary field.

Crout-style elimination written against the Field interface only, so it
runs unchanged on exact rationals. With exact arithmetic there is no
round-off to control, and the pivot of each column is simply its first
non-zero candidate; a column without one makes the matrix singular.
"""

from __future__ import annotations

from functools import cached_property
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pylinear.core.exceptions import SingularMatrixError
from pylinear.core.validation import check_dimension, check_not_none, check_square
from pylinear.field import Field
from pylinear.matrix import FieldMatrix, FieldVector
from pylinear.matrix._vector import vector_entries


class FieldLUDecomposition:
    """
    LU decomposition P A = L U of a square FieldMatrix.

    Args:
        matrix: Square FieldMatrix

    Raises:
        NonSquareMatrixError: If the matrix is not square
    """

    def __init__(self, matrix: FieldMatrix):
        check_not_none(matrix, 'matrix')
        check_square(matrix.row_dimension, matrix.column_dimension, 'matrix')
        field = matrix.field
        m = matrix.row_dimension
        lu = matrix.get_data()

        self._field = field
        self._pivot = np.arange(m)
        self._even = True
        self._singular = False

        for col in range(m):
            # upper part of the column
            for row in range(col):
                total = lu[row, col]
                for i in range(row):
                    total = field.subtract(total, field.multiply(lu[row, i], lu[i, col]))
                lu[row, col] = total

            # lower part, searching for the first usable pivot
            non_zero = col
            for row in range(col, m):
                total = lu[row, col]
                for i in range(col):
                    total = field.subtract(total, field.multiply(lu[row, i], lu[i, col]))
                lu[row, col] = total
                if field.is_zero(lu[non_zero, col]):
                    non_zero += 1

            if non_zero >= m:
                self._singular = True
                break

            if non_zero != col:
                lu[[non_zero, col], :] = lu[[col, non_zero], :]
                self._pivot[[non_zero, col]] = self._pivot[[col, non_zero]]
                self._even = not self._even

            diagonal = lu[col, col]
            for row in range(col + 1, m):
                lu[row, col] = field.divide(lu[row, col], diagonal)

        self._lu = lu

    @property
    def field(self) -> Field:
        return self._field

    @cached_property
    def L(self) -> FieldMatrix | None:
        if self._singular:
            return None
        m = self._lu.shape[0]
        data = self._field.full((m, m), self._field.zero)
        for i in range(m):
            data[i, :i] = self._lu[i, :i]
            data[i, i] = self._field.one
        return FieldMatrix(self._field, data, copy=False)

    @cached_property
    def U(self) -> FieldMatrix | None:
        if self._singular:
            return None
        m = self._lu.shape[0]
        data = self._field.full((m, m), self._field.zero)
        for i in range(m):
            data[i, i:] = self._lu[i, i:]
        return FieldMatrix(self._field, data, copy=False)

    @cached_property
    def P(self) -> FieldMatrix | None:
        if self._singular:
            return None
        m = self._lu.shape[0]
        data = self._field.full((m, m), self._field.zero)
        for i in range(m):
            data[i, self._pivot[i]] = self._field.one
        return FieldMatrix(self._field, data, copy=False)

    def get_pivot(self) -> NDArray[np.intp]:
        return self._pivot.copy()

    @property
    def determinant(self) -> Any:
        """Exact determinant (field zero when singular)."""
        field = self._field
        if self._singular:
            return field.zero
        det = field.one if self._even else field.negate(field.one)
        for i in range(self._lu.shape[0]):
            det = field.multiply(det, self._lu[i, i])
        return det

    @cached_property
    def solver(self) -> FieldLUSolver:
        return FieldLUSolver(self)


class FieldLUSolver:
    """Solver facade over a FieldLUDecomposition."""

    def __init__(self, decomposition: FieldLUDecomposition):
        self._decomposition = decomposition

    def is_non_singular(self) -> bool:
        return not self._decomposition._singular

    def solve(self, b: Any) -> FieldVector | FieldMatrix:
        """
        Solve A x = b exactly.

        Args:
            b: FieldVector / VectorLike / sequence, or FieldMatrix

        Raises:
            DimensionError: If b's row count differs from A's
            SingularMatrixError: If A is singular
        """
        d = self._decomposition
        field = d.field
        m = d._lu.shape[0]
        check_not_none(b, 'b')
        if isinstance(b, FieldMatrix):
            block = field.array(b.get_data())
            is_matrix = True
        else:
            block = vector_entries(field, b, 'b')[:, np.newaxis]
            is_matrix = False
        check_dimension(block.shape[0], m, 'b')
        if d._singular:
            raise SingularMatrixError("matrix is singular", matrix_name='matrix')

        x = block[d._pivot, :].copy()
        lu = d._lu
        # forward substitution with unit lower L
        for col in range(m):
            for i in range(col + 1, m):
                x[i, :] = [field.subtract(xi, field.multiply(xc, lu[i, col]))
                           for xi, xc in zip(x[i, :], x[col, :])]
        # back substitution with U
        for col in range(m - 1, -1, -1):
            x[col, :] = [field.divide(xc, lu[col, col]) for xc in x[col, :]]
            for i in range(col):
                x[i, :] = [field.subtract(xi, field.multiply(xc, lu[i, col]))
                           for xi, xc in zip(x[i, :], x[col, :])]

        if is_matrix:
            return FieldMatrix(field, x, copy=False)
        return FieldVector(field, x[:, 0].copy(), copy=False)

    def get_inverse(self) -> FieldMatrix:
        d = self._decomposition
        return self.solve(FieldMatrix.identity(d.field, d._lu.shape[0]))  # type: ignore[return-value]
