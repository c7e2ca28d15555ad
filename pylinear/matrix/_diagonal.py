"""
Square matrix that stores only its diagonal.

DiagonalMatrix is a RealMatrix, so every read operation of the dense
class works on it unchanged. Writes go through a dense scratch copy and
are accepted only if the result is still diagonal; a non-zero value off
the diagonal raises NonZeroOffDiagonalError and leaves the matrix as it
was. Products with another DiagonalMatrix stay diagonal, products with a
dense matrix scale its rows.
"""

from __future__ import annotations

from typing import Any, Callable

import numpy as np
from numpy.typing import NDArray

from pylinear.core.exceptions import NoDataError, NonZeroOffDiagonalError, SingularMatrixError
from pylinear.core.protocols import VectorLike
from pylinear.core.validation import check_dimension, check_index, check_not_none
from pylinear.field import REAL_FIELD
from pylinear.matrix._matrix import RealMatrix, _check_dimensions
from pylinear.matrix._vector import FieldVector, RealVector, vector_entries


class DiagonalMatrix(RealMatrix):
    """
    Diagonal matrix of doubles.

    Args:
        data: The diagonal entries, or an int n for the n x n zero matrix
        copy: If False and data is a 1-D float64 ndarray, share it

    Raises:
        NullArgumentError: If data is None
        NoDataError: If the diagonal is empty
        NotPositiveError: If n < 1

    Examples:
        >>> d = DiagonalMatrix([2.0, 4.0])
        >>> d.operate([1.0, 1.0])
        array([2., 4.])
        >>> d.inverse().get_entry(1, 1)
        0.25
    """

    def __init__(self, data: Any, *, copy: bool = True):
        check_not_none(data, 'data')
        self._field = REAL_FIELD
        if isinstance(data, (int, np.integer)):
            _check_dimensions(int(data), int(data))
            self._diagonal = np.zeros(int(data))
            return
        if (not copy and isinstance(data, np.ndarray) and data.ndim == 1
                and data.dtype == np.float64):
            diagonal = data
        else:
            diagonal = np.array(vector_entries(REAL_FIELD, data, 'data'), dtype=np.float64)
        if diagonal.size == 0:
            raise NoDataError("data: empty diagonal")
        self._diagonal = diagonal

    @property
    def _data(self) -> NDArray[np.float64]:
        # dense image for the inherited read paths; never written through
        return np.diag(self._diagonal)

    def _rewrite(self, mutate: Callable[[RealMatrix], Any]) -> Any:
        dense = RealMatrix(np.diag(self._diagonal), copy=False)
        outcome = mutate(dense)
        data = dense.get_data()
        off_diagonal = np.argwhere((data != 0.0) & ~np.eye(data.shape[0], dtype=bool))
        if off_diagonal.size:
            i, j = (int(k) for k in off_diagonal[0])
            raise NonZeroOffDiagonalError(
                f"entry ({i}, {j}) = {data[i, j]} would leave the diagonal",
                row=i,
                column=j,
                value=float(data[i, j]),
            )
        self._diagonal[:] = np.diagonal(data)
        return outcome

    # ------------------------------------------------------------------
    # Shape and entries
    # ------------------------------------------------------------------

    @property
    def row_dimension(self) -> int:
        return self._diagonal.shape[0]

    @property
    def column_dimension(self) -> int:
        return self._diagonal.shape[0]

    def get_diagonal(self) -> NDArray[np.float64]:
        return self._diagonal.copy()

    def get_entry(self, row: int, column: int) -> float:
        check_index(row, self.row_dimension, 'row')
        check_index(column, self.column_dimension, 'column')
        return float(self._diagonal[row]) if row == column else 0.0

    def set_entry(self, row: int, column: int, value: Any) -> None:
        self._rewrite(lambda dense: dense.set_entry(row, column, value))

    def add_to_entry(self, row: int, column: int, increment: Any) -> None:
        self._rewrite(lambda dense: dense.add_to_entry(row, column, increment))

    def multiply_entry(self, row: int, column: int, factor: Any) -> None:
        """Scale a diagonal entry; off the diagonal this only checks the indices."""
        check_index(row, self.row_dimension, 'row')
        check_index(column, self.column_dimension, 'column')
        if row == column:
            self._diagonal[row] *= float(factor)

    def set_row(self, row: int, values: Any) -> None:
        self._rewrite(lambda dense: dense.set_row(row, values))

    def set_column(self, column: int, values: Any) -> None:
        self._rewrite(lambda dense: dense.set_column(column, values))

    def set_row_vector(self, row: int, vector: FieldVector) -> None:
        self._rewrite(lambda dense: dense.set_row_vector(row, vector))

    def set_column_vector(self, column: int, vector: FieldVector) -> None:
        self._rewrite(lambda dense: dense.set_column_vector(column, vector))

    def set_sub_matrix(self, data: Any, row: int, column: int) -> None:
        self._rewrite(lambda dense: dense.set_sub_matrix(data, row, column))

    def copy(self) -> DiagonalMatrix:
        return DiagonalMatrix(self._diagonal)

    def _walk(self, visitor: Any, bounds: tuple[int | None, ...], column_major: bool) -> Any:
        return self._rewrite(lambda dense: dense._walk(visitor, bounds, column_major))

    # ------------------------------------------------------------------
    # Algebra
    # ------------------------------------------------------------------

    def add(self, m: Any) -> RealMatrix:
        if isinstance(m, DiagonalMatrix):
            check_dimension(m.row_dimension, self.row_dimension, 'matrix')
            return DiagonalMatrix(self._diagonal + m._diagonal, copy=False)
        return super().add(m)

    def subtract(self, m: Any) -> RealMatrix:
        if isinstance(m, DiagonalMatrix):
            check_dimension(m.row_dimension, self.row_dimension, 'matrix')
            return DiagonalMatrix(self._diagonal - m._diagonal, copy=False)
        return super().subtract(m)

    def multiply(self, m: Any) -> RealMatrix:
        if isinstance(m, DiagonalMatrix):
            check_dimension(m.row_dimension, self.column_dimension, 'matrix rows')
            return DiagonalMatrix(self._diagonal * m._diagonal, copy=False)
        other = self._operand(m)
        check_dimension(other.shape[0], self.column_dimension, 'matrix rows')
        return RealMatrix(self._diagonal[:, np.newaxis] * other, copy=False)

    def transpose(self) -> DiagonalMatrix:
        return self.copy()

    def operate(self, v: Any) -> Any:
        entries = vector_entries(REAL_FIELD, v)
        check_dimension(entries.shape[0], self.column_dimension, 'vector')
        product = self._diagonal * entries
        if isinstance(v, (FieldVector, VectorLike)):
            return RealVector(product, copy=False)
        return product

    def pre_multiply_vector(self, v: Any) -> Any:
        return self.operate(v)

    def is_singular(self, threshold: float = 0.0) -> bool:
        """True if some diagonal entry has magnitude at most ``threshold``."""
        return bool(np.any(np.abs(self._diagonal) <= threshold))

    def inverse(self, threshold: float = 0.0) -> DiagonalMatrix:
        """
        Raises:
            SingularMatrixError: If is_singular(threshold)
        """
        if self.is_singular(threshold):
            raise SingularMatrixError(
                f"diagonal matrix is singular at threshold {threshold}",
                matrix_name='diagonal',
            )
        return DiagonalMatrix(1.0 / self._diagonal, copy=False)

    def __repr__(self) -> str:
        return f"DiagonalMatrix({self._diagonal.tolist()})"
