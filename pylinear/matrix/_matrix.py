"""
Dense matrices over a scalar field.

FieldMatrix keeps a row-major 2-D numpy array of the field's dtype. The
algebra (add, multiply, transpose, operate, power) is written once against
that array and therefore works unchanged for float64 and for object arrays
of exact rationals. RealMatrix is the RealField specialisation; it adds the
real norms and a few factories and is what the decompositions consume.

A matrix constructed with no data is uninitialised (0x0). The only way to
give it dimensions afterwards is set_sub_matrix at the origin.

All argument checks run before the receiver is touched, so a failed call
leaves the matrix as it was.
"""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np
from numpy.typing import NDArray

from pylinear.core.exceptions import (
    DimensionError,
    IllegalStateError,
    NotPositiveError,
    ValidationError,
)
from pylinear.core.protocols import VectorLike
from pylinear.core.validation import (
    check_dimension,
    check_index,
    check_not_none,
    check_rectangular,
    check_same_shape,
    check_square,
    check_sub_matrix_indices,
    check_sub_matrix_range,
)
from pylinear.field import Field, REAL_FIELD
from pylinear.matrix._vector import FieldVector, RealVector, vector_entries
from pylinear.matrix.visitors import MatrixChangingVisitor


class FieldMatrix:
    """
    Matrix of field elements.

    Args:
        field: Scalar field of the entries
        data: Row-major 2-D array-like; None gives an uninitialised matrix
        copy: If False and data is a 2-D ndarray of the field's dtype, share it

    Raises:
        NoDataError: If data has no rows or an empty first row
        DimensionError: If data is ragged
    """

    def __init__(self, field: Field, data: Any = None, *, copy: bool = True):
        check_not_none(field, 'field')
        self._field = field
        if data is None:
            self._data = field.array(np.empty((0, 0)))
            return
        if (not copy and isinstance(data, np.ndarray) and data.ndim == 2
                and data.dtype == np.dtype(field.dtype)):
            self._data = data
            return
        check_rectangular(data, 'data')
        self._data = field.array(data)

    @classmethod
    def zeros(cls, field: Field, rows: int, columns: int) -> FieldMatrix:
        """Zero-filled ``rows`` x ``columns`` matrix (both strictly positive)."""
        _check_dimensions(rows, columns)
        return cls(field, field.full((rows, columns), field.zero), copy=False)

    @classmethod
    def identity(cls, field: Field, n: int) -> FieldMatrix:
        _check_dimensions(n, n)
        data = field.full((n, n), field.zero)
        np.fill_diagonal(data, field.one)
        return cls(field, data, copy=False)

    def _like(self, data: np.ndarray) -> FieldMatrix:
        """New matrix of the same family owning ``data``."""
        return FieldMatrix(self._field, data, copy=False)

    def _vector(self, data: np.ndarray) -> FieldVector:
        return FieldVector(self._field, data, copy=False)

    def _operand(self, m: Any, name: str = 'matrix') -> np.ndarray:
        check_not_none(m, name)
        if isinstance(m, FieldMatrix) and m.field == self._field:
            return m._data
        if isinstance(m, FieldMatrix):
            return self._field.array(m._data)
        check_rectangular(m, name)
        return self._field.array(m)

    # ------------------------------------------------------------------
    # Shape and entries
    # ------------------------------------------------------------------

    @property
    def field(self) -> Field:
        return self._field

    @property
    def row_dimension(self) -> int:
        return self._data.shape[0]

    @property
    def column_dimension(self) -> int:
        return self._data.shape[1]

    def is_square(self) -> bool:
        return self.row_dimension == self.column_dimension

    def get_entry(self, row: int, column: int) -> Any:
        check_index(row, self.row_dimension, 'row')
        check_index(column, self.column_dimension, 'column')
        return self._data[row, column]

    def set_entry(self, row: int, column: int, value: Any) -> None:
        check_index(row, self.row_dimension, 'row')
        check_index(column, self.column_dimension, 'column')
        self._data[row, column] = self._field.coerce(value)

    def add_to_entry(self, row: int, column: int, increment: Any) -> None:
        check_index(row, self.row_dimension, 'row')
        check_index(column, self.column_dimension, 'column')
        self._data[row, column] = self._data[row, column] + self._field.coerce(increment)

    def multiply_entry(self, row: int, column: int, factor: Any) -> None:
        check_index(row, self.row_dimension, 'row')
        check_index(column, self.column_dimension, 'column')
        self._data[row, column] = self._data[row, column] * self._field.coerce(factor)

    def get_data(self) -> np.ndarray:
        """Copy of the entries as a 2-D ndarray."""
        return self._data.copy()

    def copy(self) -> FieldMatrix:
        return self._like(self._data.copy())

    # ------------------------------------------------------------------
    # Rows and columns
    # ------------------------------------------------------------------

    def get_row(self, row: int) -> np.ndarray:
        check_index(row, self.row_dimension, 'row')
        return self._data[row, :].copy()

    def get_column(self, column: int) -> np.ndarray:
        check_index(column, self.column_dimension, 'column')
        return self._data[:, column].copy()

    def set_row(self, row: int, values: Any) -> None:
        check_index(row, self.row_dimension, 'row')
        entries = vector_entries(self._field, values, 'row')
        check_dimension(entries.shape[0], self.column_dimension, 'row')
        self._data[row, :] = entries

    def set_column(self, column: int, values: Any) -> None:
        check_index(column, self.column_dimension, 'column')
        entries = vector_entries(self._field, values, 'column')
        check_dimension(entries.shape[0], self.row_dimension, 'column')
        self._data[:, column] = entries

    def get_row_vector(self, row: int) -> FieldVector:
        return self._vector(self.get_row(row))

    def get_column_vector(self, column: int) -> FieldVector:
        return self._vector(self.get_column(column))

    def set_row_vector(self, row: int, vector: FieldVector) -> None:
        self.set_row(row, vector)

    def set_column_vector(self, column: int, vector: FieldVector) -> None:
        self.set_column(column, vector)

    # ------------------------------------------------------------------
    # Sub-matrices
    # ------------------------------------------------------------------

    def _block(self, args: tuple[Any, ...]) -> tuple[np.ndarray, np.ndarray]:
        """Row and column index arrays of a range or an index selection."""
        if len(args) == 4:
            start_row, end_row, start_column, end_column = args
            check_sub_matrix_range(
                self.row_dimension, self.column_dimension,
                start_row, end_row, start_column, end_column,
            )
            return np.arange(start_row, end_row + 1), np.arange(start_column, end_column + 1)
        if len(args) == 2:
            selected_rows, selected_columns = args
            check_sub_matrix_indices(
                self.row_dimension, self.column_dimension, selected_rows, selected_columns
            )
            return (np.asarray(selected_rows, dtype=np.intp),
                    np.asarray(selected_columns, dtype=np.intp))
        raise ValidationError(
            f"expected (start_row, end_row, start_column, end_column) or "
            f"(selected_rows, selected_columns), got {len(args)} arguments"
        )

    def get_sub_matrix(self, *args: Any) -> FieldMatrix:
        """
        Extract a sub-matrix.

        Either ``get_sub_matrix(start_row, end_row, start_column, end_column)``
        with inclusive bounds, or ``get_sub_matrix(selected_rows,
        selected_columns)`` with explicit index sequences.

        Raises:
            OutOfRangeError: If an index is outside the matrix
            RangeInversionError: If a range ends before it starts
            NoDataError: If an index selection is empty
        """
        rows, columns = self._block(args)
        return self._like(self._data[np.ix_(rows, columns)])

    def copy_sub_matrix(self, *args: Any) -> None:
        """
        Copy a sub-matrix into a caller-supplied 2-D destination.

        Same addressing as get_sub_matrix, with the destination appended as
        the last argument. The destination may be larger than the block.

        Raises:
            DimensionError: If the destination is too small
        """
        if not args:
            raise ValidationError("copy_sub_matrix requires a destination")
        *block, destination = args
        check_not_none(destination, 'destination')
        rows, columns = self._block(tuple(block))
        dest_rows = len(destination)
        dest_columns = len(destination[0]) if dest_rows else 0
        if dest_rows < len(rows) or dest_columns < len(columns):
            raise DimensionError(
                f"destination: {dest_rows}x{dest_columns} is smaller than the "
                f"{len(rows)}x{len(columns)} block",
                actual=(dest_rows, dest_columns),
                expected=(len(rows), len(columns)),
            )
        for i, r in enumerate(rows):
            for j, c in enumerate(columns):
                destination[i][j] = self._data[r, c]

    def set_sub_matrix(self, data: Any, row: int, column: int) -> None:
        """
        Overwrite the block whose top-left corner is (row, column).

        On an uninitialised matrix only the origin is allowed and the
        matrix takes the dimensions of ``data``.

        Raises:
            IllegalStateError: If uninitialised and (row, column) != (0, 0)
            NoDataError: If data is empty
            DimensionError: If data is ragged
            OutOfRangeError: If the block does not fit
        """
        check_not_none(data, 'data')
        if self._data.size == 0:
            if row != 0:
                raise IllegalStateError(f"first row {row} must be 0 on an uninitialised matrix")
            if column != 0:
                raise IllegalStateError(
                    f"first column {column} must be 0 on an uninitialised matrix"
                )
            check_rectangular(data, 'data')
            self._data = self._field.array(data)
            return
        n_rows, n_columns = check_rectangular(data, 'data')
        check_index(row, self.row_dimension, 'row')
        check_index(column, self.column_dimension, 'column')
        check_index(row + n_rows - 1, self.row_dimension, 'row')
        check_index(column + n_columns - 1, self.column_dimension, 'column')
        self._data[row:row + n_rows, column:column + n_columns] = self._field.array(data)

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def _walk(self, visitor: Any, bounds: tuple[int | None, ...], column_major: bool) -> Any:
        check_not_none(visitor, 'visitor')
        if all(b is None for b in bounds):
            start_row, end_row = 0, self.row_dimension - 1
            start_column, end_column = 0, self.column_dimension - 1
        elif any(b is None for b in bounds):
            raise ValidationError(
                f"walk bounds must be all given or all omitted, got {bounds}"
            )
        else:
            start_row, end_row, start_column, end_column = bounds
            check_sub_matrix_range(
                self.row_dimension, self.column_dimension,
                start_row, end_row, start_column, end_column,
            )
        visitor.start(
            self.row_dimension, self.column_dimension,
            start_row, end_row, start_column, end_column,
        )
        changing = isinstance(visitor, MatrixChangingVisitor)
        data = self._data
        if column_major:
            cells = ((i, j) for j in range(start_column, end_column + 1)
                     for i in range(start_row, end_row + 1))
        else:
            cells = ((i, j) for i in range(start_row, end_row + 1)
                     for j in range(start_column, end_column + 1))
        for i, j in cells:
            if changing:
                data[i, j] = visitor.visit(i, j, data[i, j])
            else:
                visitor.visit(i, j, data[i, j])
        return visitor.end()

    def walk_in_row_order(
        self,
        visitor: Any,
        start_row: int | None = None,
        end_row: int | None = None,
        start_column: int | None = None,
        end_column: int | None = None,
    ) -> Any:
        """
        Visit the (sub-)matrix row by row.

        With no bounds the whole matrix is visited; otherwise exactly the
        inclusive rectangle [start_row, end_row] x [start_column, end_column].

        Returns:
            visitor.end()
        """
        return self._walk(visitor, (start_row, end_row, start_column, end_column), False)

    def walk_in_column_order(
        self,
        visitor: Any,
        start_row: int | None = None,
        end_row: int | None = None,
        start_column: int | None = None,
        end_column: int | None = None,
    ) -> Any:
        """Visit the (sub-)matrix column by column."""
        return self._walk(visitor, (start_row, end_row, start_column, end_column), True)

    def walk_in_optimized_order(
        self,
        visitor: Any,
        start_row: int | None = None,
        end_row: int | None = None,
        start_column: int | None = None,
        end_column: int | None = None,
    ) -> Any:
        """
        Visit every cell of the (sub-)matrix once in an unspecified order.

        Storage is row-major, so this currently walks in row order.
        """
        return self._walk(visitor, (start_row, end_row, start_column, end_column), False)

    # ------------------------------------------------------------------
    # Algebra
    # ------------------------------------------------------------------

    def add(self, m: Any) -> FieldMatrix:
        other = self._operand(m)
        check_same_shape(other.shape, self._data.shape, 'matrix')
        return self._like(self._data + other)

    def subtract(self, m: Any) -> FieldMatrix:
        other = self._operand(m)
        check_same_shape(other.shape, self._data.shape, 'matrix')
        return self._like(self._data - other)

    def multiply(self, m: Any) -> FieldMatrix:
        """self x m"""
        other = self._operand(m)
        check_dimension(other.shape[0], self.column_dimension, 'matrix rows')
        return self._like(self._data @ other)

    def pre_multiply(self, m: Any) -> FieldMatrix:
        """m x self"""
        other = self._operand(m)
        check_dimension(other.shape[1], self.row_dimension, 'matrix columns')
        return self._like(other @ self._data)

    def scalar_add(self, d: Any) -> FieldMatrix:
        return self._like(self._data + self._field.coerce(d))

    def scalar_multiply(self, d: Any) -> FieldMatrix:
        return self._like(self._data * self._field.coerce(d))

    def transpose(self) -> FieldMatrix:
        return self._like(self._data.T.copy())

    def operate(self, v: Any) -> Any:
        """
        Matrix-vector product self x v.

        Returns a vector of this family when ``v`` is a vector (or any
        VectorLike), otherwise a 1-D ndarray.
        """
        entries = vector_entries(self._field, v)
        check_dimension(entries.shape[0], self.column_dimension, 'vector')
        product = self._data @ entries
        if isinstance(v, (FieldVector, VectorLike)):
            return self._vector(product)
        return product

    def pre_multiply_vector(self, v: Any) -> Any:
        """Row-vector product v x self."""
        entries = vector_entries(self._field, v)
        check_dimension(entries.shape[0], self.row_dimension, 'vector')
        product = entries @ self._data
        if isinstance(v, (FieldVector, VectorLike)):
            return self._vector(product)
        return product

    def power(self, p: int) -> FieldMatrix:
        """
        self raised to the non-negative integer power ``p``.

        Uses binary exponentiation. power(0) is the identity and power(1) a
        copy of self.

        Raises:
            NonSquareMatrixError: If the matrix is not square
            NotPositiveError: If p < 0
        """
        check_square(self.row_dimension, self.column_dimension, 'matrix')
        if p < 0:
            raise NotPositiveError(f"power: exponent {p} must be non-negative", value=p)
        n = self.row_dimension
        result = self._field.full((n, n), self._field.zero)
        np.fill_diagonal(result, self._field.one)
        if p == 0:
            return self._like(result)
        if p == 1:
            return self.copy()
        square = self._data
        first = True
        while p > 0:
            if p & 1:
                result = square.copy() if first else result @ square
                first = False
            p >>= 1
            if p:
                square = square @ square
        return self._like(result)

    def get_trace(self) -> Any:
        check_square(self.row_dimension, self.column_dimension, 'matrix')
        trace = self._field.zero
        for i in range(self.row_dimension):
            trace = self._field.add(trace, self._data[i, i])
        return trace

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldMatrix) or other.field != self._field:
            return NotImplemented
        if self._data.shape != other._data.shape:
            return False
        return bool(np.all(self._data == other._data))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data.tolist()})"


class RealMatrix(FieldMatrix):
    """
    Matrix of doubles.

    Args:
        data: Row-major 2-D array-like; None gives an uninitialised matrix
        copy: If False and data is a float64 2-D ndarray, share it

    Examples:
        >>> m = RealMatrix([[1.0, 2.0], [3.0, 4.0]])
        >>> m.operate(RealVector([1.0, 1.0]))
        RealVector([3.0, 7.0])
    """

    def __init__(self, data: Any = None, *, copy: bool = True):
        super().__init__(REAL_FIELD, data, copy=copy)

    @classmethod
    def zeros(cls, rows: int, columns: int) -> RealMatrix:  # type: ignore[override]
        _check_dimensions(rows, columns)
        return RealMatrix(np.zeros((rows, columns)), copy=False)

    @classmethod
    def identity(cls, n: int) -> RealMatrix:  # type: ignore[override]
        _check_dimensions(n, n)
        return RealMatrix(np.eye(n), copy=False)

    @classmethod
    def diagonal(cls, values: Sequence[float]) -> RealMatrix:
        return RealMatrix(np.diag(np.asarray(values, dtype=np.float64)), copy=False)

    def _like(self, data: np.ndarray) -> RealMatrix:
        return RealMatrix(data, copy=False)

    def _vector(self, data: np.ndarray) -> RealVector:
        return RealVector(data, copy=False)

    def get_entry(self, row: int, column: int) -> float:
        return float(super().get_entry(row, column))

    def get_data(self) -> NDArray[np.float64]:
        return self._data.copy()

    def get_norm(self) -> float:
        """Maximum absolute column sum (the L1 operator norm)."""
        if self._data.size == 0:
            return 0.0
        return float(np.max(np.sum(np.abs(self._data), axis=0)))

    def get_frobenius_norm(self) -> float:
        return float(np.linalg.norm(self._data))


def _check_dimensions(rows: int, columns: int) -> None:
    if rows < 1:
        raise NotPositiveError(f"row dimension {rows} must be strictly positive", value=rows)
    if columns < 1:
        raise NotPositiveError(
            f"column dimension {columns} must be strictly positive", value=columns
        )

