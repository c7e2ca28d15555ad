"""
Argument checks for PyLinear.

Each check_* function tests one condition and raises straight away,
naming the offending argument and its actual value. Mutating operations
run their checks first, so a failed call leaves the receiver untouched.
Conversion is limited to np.asarray on array-likes and promotion of
integer data to float64.
"""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylinear.core.exceptions import (
    DimensionError,
    NoDataError,
    NonSquareMatrixError,
    NonSquareOperatorError,
    NullArgumentError,
    OutOfRangeError,
    RangeInversionError,
    ValidationError,
)


def check_not_none(value: Any, name: str) -> None:
    """
    Verify a required argument was supplied.

    Raises:
        NullArgumentError: If value is None
    """
    if value is None:
        raise NullArgumentError(f"{name}: must not be None", argument=name)


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to a float64 numpy array.

    Accepts any array-like and converts to numpy array. Rejects inputs
    that result in object dtype (indicating ragged rows, mixed types or
    non-numeric data).

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with float64 dtype

    Raises:
        NullArgumentError: If array is None
        ValidationError: If input cannot be converted to numeric array
    """
    check_not_none(array, name)
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating ragged rows, "
            f"mixed types or non-numeric data"
        )

    # Reject non-numeric dtypes (strings, bytes, datetime, etc.)
    if not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    if result.dtype != np.float64:
        result = result.astype(np.float64)

    return result


def check_rectangular(data: Sequence[Sequence[Any]], name: str) -> tuple[int, int]:
    """
    Verify a nested sequence is a non-empty, non-ragged 2-D block.

    Args:
        data: Row-major nested sequence (or 2-D ndarray)
        name: Parameter name for error messages

    Returns:
        (rows, columns)

    Raises:
        NullArgumentError: If data is None
        NoDataError: If there are no rows or the first row is empty
        DimensionError: If some row differs in length from the first
    """
    check_not_none(data, name)
    if isinstance(data, np.ndarray):
        if data.ndim != 2:
            raise DimensionError(
                f"{name}: expected 2D array, got {data.ndim}D", actual=data.ndim, expected=2
            )
        if data.size == 0:
            raise NoDataError(f"{name}: empty 2D array (shape {data.shape})")
        return data.shape[0], data.shape[1]

    rows = len(data)
    if rows == 0:
        raise NoDataError(f"{name}: no rows")
    if not all(hasattr(row, "__len__") for row in data):
        raise DimensionError(f"{name}: expected 2D data, got 1D", actual=1, expected=2)
    columns = len(data[0])
    if columns == 0:
        raise NoDataError(f"{name}: row 0 is empty")
    for i, row in enumerate(data):
        if len(row) != columns:
            raise DimensionError(
                f"{name}: ragged rows, row {i} has {len(row)} entries, expected {columns}",
                actual=len(row),
                expected=columns,
            )
    return rows, columns


def check_index(index: int, size: int, name: str) -> None:
    """
    Verify 0 <= index < size.

    Raises:
        OutOfRangeError: If index is outside [0, size - 1]
    """
    if not 0 <= index < size:
        raise OutOfRangeError(
            f"{name} index {index} out of allowed range [0, {size - 1}]",
            value=index,
            low=0,
            high=size - 1,
        )


def check_sub_matrix_range(
    rows: int,
    columns: int,
    start_row: int,
    end_row: int,
    start_column: int,
    end_column: int,
) -> None:
    """
    Verify an inclusive sub-rectangle lies inside a rows x columns matrix.

    Raises:
        OutOfRangeError: If a bound is outside the matrix
        RangeInversionError: If end_row < start_row or end_column < start_column
    """
    check_index(start_row, rows, 'row')
    check_index(end_row, rows, 'row')
    if end_row < start_row:
        raise RangeInversionError(
            f"initial row {start_row} after final row {end_row}",
            start=start_row,
            end=end_row,
        )
    check_index(start_column, columns, 'column')
    check_index(end_column, columns, 'column')
    if end_column < start_column:
        raise RangeInversionError(
            f"initial column {start_column} after final column {end_column}",
            start=start_column,
            end=end_column,
        )


def check_sub_matrix_indices(
    rows: int,
    columns: int,
    selected_rows: Sequence[int],
    selected_columns: Sequence[int],
) -> None:
    """
    Verify explicit row / column selections are non-empty and in range.

    Raises:
        NullArgumentError: If a selection is None
        NoDataError: If a selection is empty
        OutOfRangeError: If an index is outside the matrix
    """
    check_not_none(selected_rows, 'selected_rows')
    check_not_none(selected_columns, 'selected_columns')
    if len(selected_rows) == 0:
        raise NoDataError("empty selected row index array")
    if len(selected_columns) == 0:
        raise NoDataError("empty selected column index array")
    for row in selected_rows:
        check_index(row, rows, 'row')
    for column in selected_columns:
        check_index(column, columns, 'column')


def check_dimension(actual: int, expected: int, name: str) -> None:
    """
    Verify a vector (or row / column) has the expected length.

    Raises:
        DimensionError: If the lengths differ
    """
    if actual != expected:
        raise DimensionError(
            f"{name}: dimension mismatch, got {actual} but expected {expected}",
            actual=actual,
            expected=expected,
        )


def check_same_shape(
    actual: tuple[int, int],
    expected: tuple[int, int],
    name: str,
) -> None:
    """
    Verify two matrices have identical shapes (for add / subtract).

    Raises:
        DimensionError: If the shapes differ
    """
    if tuple(actual) != tuple(expected):
        raise DimensionError(
            f"{name}: got {actual[0]}x{actual[1]} but expected {expected[0]}x{expected[1]}",
            actual=tuple(actual),
            expected=tuple(expected),
        )


def check_square(rows: int, columns: int, name: str, *, operator: bool = False) -> None:
    """
    Verify a matrix or linear operator is square.

    Args:
        rows: Row dimension
        columns: Column dimension
        name: Parameter name for error messages
        operator: Raise the operator flavour of the error

    Raises:
        NonSquareMatrixError: If rows != columns (matrix)
        NonSquareOperatorError: If rows != columns (operator)
    """
    if rows != columns:
        error = NonSquareOperatorError if operator else NonSquareMatrixError
        kind = 'operator' if operator else 'matrix'
        raise error(
            f"{name}: non-square {kind} ({rows}x{columns})",
            rows=rows,
            columns=columns,
        )
