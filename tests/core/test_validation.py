"""
Tests for input validation utilities.

Validates every function in core/validation.py:
    - check_not_none / check_array: presence, conversion, object rejection
    - check_rectangular: empty and ragged nested sequences
    - check_index / check_sub_matrix_range / check_sub_matrix_indices
    - check_dimension / check_same_shape / check_square
"""

import numpy as np
import pytest

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
from pylinear.core.validation import (
    check_array,
    check_dimension,
    check_index,
    check_not_none,
    check_rectangular,
    check_same_shape,
    check_square,
    check_sub_matrix_indices,
    check_sub_matrix_range,
)


# ═══════════════════════════════════════════════════════════════════════
# check_not_none / check_array
# ═══════════════════════════════════════════════════════════════════════


class TestCheckNotNone:

    def test_none_raises(self):
        with pytest.raises(NullArgumentError, match="b: must not be None") as exc_info:
            check_not_none(None, 'b')
        assert exc_info.value.argument == 'b'

    def test_zero_is_not_none(self):
        check_not_none(0, 'x')


class TestCheckArray:
    """check_array converts to a float64 ndarray and rejects non-numeric data."""

    def test_list_to_float_array(self):
        result = check_array([1, 2, 3], "b")
        assert isinstance(result, np.ndarray)
        assert result.dtype == np.float64
        np.testing.assert_array_equal(result, [1.0, 2.0, 3.0])

    def test_int_array_promoted_to_float(self):
        result = check_array(np.array([1, 2, 3], dtype=np.int32), "b")
        assert result.dtype == np.float64

    def test_nested_list_to_2d(self):
        result = check_array([[1, 2], [3, 4]], "a")
        assert result.shape == (2, 2)

    def test_none_raises(self):
        with pytest.raises(NullArgumentError):
            check_array(None, "a")

    def test_ragged_rejected(self):
        with pytest.raises(ValidationError, match="a:"):
            check_array([[1, 2], [3]], "a")

    def test_strings_rejected(self):
        with pytest.raises(ValidationError, match="non-numeric"):
            check_array(np.array(["a", "b"]), "b")


# ═══════════════════════════════════════════════════════════════════════
# check_rectangular
# ═══════════════════════════════════════════════════════════════════════


class TestCheckRectangular:

    def test_returns_shape(self):
        assert check_rectangular([[1, 2, 3], [4, 5, 6]], 'data') == (2, 3)

    def test_ndarray_shape(self):
        assert check_rectangular(np.zeros((4, 2)), 'data') == (4, 2)

    def test_no_rows(self):
        with pytest.raises(NoDataError, match="no rows"):
            check_rectangular([], 'data')

    def test_empty_first_row(self):
        with pytest.raises(NoDataError, match="row 0 is empty"):
            check_rectangular([[]], 'data')

    def test_ragged(self):
        with pytest.raises(DimensionError, match="ragged") as exc_info:
            check_rectangular([[1, 2], [3, 4, 5]], 'data')
        assert exc_info.value.actual == 3
        assert exc_info.value.expected == 2

    def test_flat_sequence(self):
        with pytest.raises(DimensionError, match="expected 2D"):
            check_rectangular([1.0, 2.0], 'data')

    def test_1d_ndarray(self):
        with pytest.raises(DimensionError, match="expected 2D"):
            check_rectangular(np.zeros(3), 'data')

    def test_empty_ndarray(self):
        with pytest.raises(NoDataError):
            check_rectangular(np.zeros((0, 3)), 'data')


# ═══════════════════════════════════════════════════════════════════════
# Indices and ranges
# ═══════════════════════════════════════════════════════════════════════


class TestCheckIndex:

    @pytest.mark.parametrize("index", [0, 2, 4])
    def test_valid(self, index):
        check_index(index, 5, 'row')

    @pytest.mark.parametrize("index", [-1, 5, 100])
    def test_out_of_range(self, index):
        with pytest.raises(OutOfRangeError, match="row index") as exc_info:
            check_index(index, 5, 'row')
        assert exc_info.value.value == index
        assert exc_info.value.low == 0
        assert exc_info.value.high == 4


class TestCheckSubMatrix:

    def test_valid_range(self):
        check_sub_matrix_range(4, 4, 1, 2, 0, 3)

    def test_row_inversion(self):
        with pytest.raises(RangeInversionError, match="row"):
            check_sub_matrix_range(4, 4, 2, 1, 0, 3)

    def test_column_inversion(self):
        with pytest.raises(RangeInversionError, match="column"):
            check_sub_matrix_range(4, 4, 0, 1, 3, 2)

    def test_range_out_of_bounds(self):
        with pytest.raises(OutOfRangeError):
            check_sub_matrix_range(4, 4, 0, 4, 0, 1)

    def test_valid_indices(self):
        check_sub_matrix_indices(4, 4, [3, 0], [1])

    def test_empty_selection(self):
        with pytest.raises(NoDataError, match="row"):
            check_sub_matrix_indices(4, 4, [], [1])
        with pytest.raises(NoDataError, match="column"):
            check_sub_matrix_indices(4, 4, [1], [])

    def test_selection_out_of_range(self):
        with pytest.raises(OutOfRangeError):
            check_sub_matrix_indices(4, 4, [0, 4], [1])

    def test_none_selection(self):
        with pytest.raises(NullArgumentError):
            check_sub_matrix_indices(4, 4, None, [1])


# ═══════════════════════════════════════════════════════════════════════
# Dimensions
# ═══════════════════════════════════════════════════════════════════════


class TestDimensions:

    def test_dimension_match(self):
        check_dimension(3, 3, 'b')

    def test_dimension_mismatch(self):
        with pytest.raises(DimensionError, match="got 2 but expected 3") as exc_info:
            check_dimension(2, 3, 'b')
        assert exc_info.value.actual == 2
        assert exc_info.value.expected == 3

    def test_same_shape(self):
        check_same_shape((2, 3), (2, 3), 'matrix')
        with pytest.raises(DimensionError, match="2x3"):
            check_same_shape((2, 3), (3, 2), 'matrix')

    def test_square(self):
        check_square(3, 3, 'a')

    def test_non_square_matrix(self):
        with pytest.raises(NonSquareMatrixError, match="non-square matrix") as exc_info:
            check_square(2, 3, 'a')
        assert not isinstance(exc_info.value, NonSquareOperatorError)

    def test_non_square_operator(self):
        with pytest.raises(NonSquareOperatorError, match="non-square operator"):
            check_square(2, 3, 'a', operator=True)
