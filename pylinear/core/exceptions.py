"""
Exception hierarchy for PyLinear.

Every error raised by the package derives from LinearAlgebraError.
Argument problems (wrong shapes, indices, nulls) are ValidationErrors;
failures that depend on the numbers themselves (singular or indefinite
matrices, exhausted iteration budgets) are NumericalErrors. Each class
keeps the offending values as attributes so callers can inspect them
without parsing the message.
"""

from __future__ import annotations

from typing import Any


class LinearAlgebraError(Exception):
    """Base exception for all PyLinear errors."""
    pass


class ValidationError(LinearAlgebraError):
    """An argument was rejected before any computation started."""
    pass


class NullArgumentError(ValidationError):
    """A required argument was None."""

    def __init__(self, message: str, argument: str | None = None):
        super().__init__(message)
        self.argument = argument


class NoDataError(ValidationError):
    """An array or index selection that must not be empty was empty."""
    pass


class NotPositiveError(ValidationError):
    """
    A value that must be non-negative was negative.

    Attributes:
        value: The offending value
    """

    def __init__(self, message: str, value: float | int | None = None):
        super().__init__(message)
        self.value = value


class RangeInversionError(ValidationError):
    """
    A range was given with its end before its start.

    Attributes:
        start: Start of the range
        end: End of the range
    """

    def __init__(self, message: str, start: int, end: int):
        super().__init__(message)
        self.start = start
        self.end = end


class OutOfRangeError(ValidationError, IndexError):
    """
    An index (row, column or vector entry) fell outside its valid range.

    Also an IndexError, so plain Python sequence handling keeps working.

    Attributes:
        value: The offending index
        low: Smallest valid index
        high: Largest valid index
    """

    def __init__(self, message: str, value: int, low: int, high: int):
        super().__init__(message)
        self.value = value
        self.low = low
        self.high = high


class DimensionError(ValidationError):
    """
    Operand dimensions do not agree, e.g. a right-hand side whose length
    differs from the row dimension of the matrix.

    Attributes:
        actual: Dimension that was supplied
        expected: Dimension that was required
    """

    def __init__(
        self,
        message: str,
        actual: int | tuple[int, ...] | None = None,
        expected: int | tuple[int, ...] | None = None,
    ):
        super().__init__(message)
        self.actual = actual
        self.expected = expected


class NonZeroOffDiagonalError(ValidationError):
    """
    A diagonal matrix was asked to hold a non-zero entry off its diagonal.

    Attributes:
        row: Row of the rejected entry
        column: Column of the rejected entry
        value: The rejected value
    """

    def __init__(self, message: str, row: int, column: int, value: float):
        super().__init__(message)
        self.row = row
        self.column = column
        self.value = value


class NonSquareMatrixError(DimensionError):
    """
    A square matrix was required.

    Attributes:
        rows: Row dimension of the offending matrix
        columns: Column dimension of the offending matrix
    """

    def __init__(self, message: str, rows: int, columns: int):
        super().__init__(message, actual=columns, expected=rows)
        self.rows = rows
        self.columns = columns


class NonSquareOperatorError(NonSquareMatrixError):
    """A square linear operator was required."""
    pass


class IllegalStateError(LinearAlgebraError):
    """The receiving object is not in a state that allows the operation."""
    pass


class UnsupportedOperationError(LinearAlgebraError):
    """
    The operation is not supported by this object.

    Raised for instance when mutating a read-only vector view.
    """
    pass


class MathArithmeticError(LinearAlgebraError):
    """Arithmetic failure such as normalising a zero-norm vector."""
    pass


class NumericalError(LinearAlgebraError):
    """The arguments were well formed but their values defeat the algorithm."""
    pass


class SingularMatrixError(NumericalError):
    """
    A solve or inverse was requested from a singular decomposition.

    Which pivots or singular values count as zero is decided by the
    decomposition's own threshold, so an exactly invertible but badly
    scaled matrix can land here too.

    Attributes:
        matrix_name: Label of the decomposition that was asked to solve
    """

    def __init__(self, message: str, matrix_name: str | None = None):
        super().__init__(message)
        self.matrix_name = matrix_name


class SingularOperatorError(NumericalError):
    """
    Linear operator is singular.

    Raised by SymmLQ when the right-hand side turns out to be an
    eigenvector of the operator for the eigenvalue ``shift``.
    """
    pass


class NotPositiveDefiniteError(NumericalError):
    """
    A Cholesky pivot (or an operator quadratic form) was not positive.

    Attributes:
        matrix_name: Label of the offending matrix or operator type
        index: Index of the offending pivot, if known
        threshold: Positivity threshold that was violated, if any
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        index: int | None = None,
        threshold: float | None = None,
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.index = index
        self.threshold = threshold


class NonPositiveDefiniteOperatorError(NotPositiveDefiniteError):
    """
    Linear operator (or preconditioner) is not positive definite.

    Detected lazily by the iterative solvers the first time a non-positive
    quadratic form is observed.

    Attributes:
        operator: The offending operator
        vector: Vector x such that x'Ax <= 0
    """

    def __init__(self, message: str, operator: Any = None, vector: Any = None):
        super().__init__(message, matrix_name=type(operator).__name__)
        self.operator = operator
        self.vector = vector


class NonSymmetricMatrixError(NumericalError):
    """
    Matrix is not symmetric.

    Attributes:
        row: Row index of the first asymmetric pair
        column: Column index of the first asymmetric pair
        threshold: Relative tolerance that was exceeded
    """

    def __init__(self, message: str, row: int, column: int, threshold: float):
        super().__init__(message)
        self.row = row
        self.column = column
        self.threshold = threshold


class NonSelfAdjointOperatorError(NumericalError):
    """
    Linear operator (or preconditioner) is not self-adjoint.

    Attributes:
        operator: The offending operator
        vector1: First test vector x
        vector2: Second test vector y such that x'Ay differs from y'Ax
        threshold: Tolerance that was exceeded
    """

    def __init__(
        self,
        message: str,
        operator: Any = None,
        vector1: Any = None,
        vector2: Any = None,
        threshold: float | None = None,
    ):
        super().__init__(message)
        self.operator = operator
        self.vector1 = vector1
        self.vector2 = vector2
        self.threshold = threshold


class IllConditionedOperatorError(NumericalError):
    """
    Linear operator is too ill-conditioned for the requested solve.

    Attributes:
        condition_number: Estimated condition number
    """

    def __init__(self, message: str, condition_number: float):
        super().__init__(message)
        self.condition_number = condition_number


class ConvergenceError(LinearAlgebraError):
    """
    An iterative solver stopped without meeting its stopping criterion.

    Attributes:
        iterations: Iterations counted when the solver gave up
        reason: Short machine-readable cause, e.g. 'max_iterations'
    """

    def __init__(self, message: str, iterations: int, reason: str | None = None):
        super().__init__(message)
        self.iterations = iterations
        self.reason = reason


class MaxCountExceededError(ConvergenceError):
    """
    An iteration counter went past its configured maximum.

    The partial iterate remains inspectable through the last event fired
    by the iteration manager.

    Attributes:
        max_count: The maximal count that was exceeded
    """

    def __init__(self, message: str, max_count: int):
        super().__init__(message, iterations=max_count, reason='max_iterations')
        self.max_count = max_count
