"""
Core infrastructure for PyLinear.

This module provides shared abstractions and utilities used by the field,
matrix, decomposition and iterative subpackages.

Key components:
    protocols: VectorLike, LinearOperator, DecompositionSolver protocols
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing and numerical thresholds
"""

from pylinear.core.protocols import VectorLike, LinearOperator, DecompositionSolver
from pylinear.core.result import Result
from pylinear.core.exceptions import (
    LinearAlgebraError,
    ValidationError,
    NullArgumentError,
    NoDataError,
    NotPositiveError,
    RangeInversionError,
    OutOfRangeError,
    NonZeroOffDiagonalError,
    DimensionError,
    NonSquareMatrixError,
    NonSquareOperatorError,
    IllegalStateError,
    UnsupportedOperationError,
    MathArithmeticError,
    NumericalError,
    SingularMatrixError,
    SingularOperatorError,
    NotPositiveDefiniteError,
    NonPositiveDefiniteOperatorError,
    NonSymmetricMatrixError,
    NonSelfAdjointOperatorError,
    IllConditionedOperatorError,
    ConvergenceError,
    MaxCountExceededError,
)

__all__ = [
    # Protocols
    "VectorLike",
    "LinearOperator",
    "DecompositionSolver",
    # Result
    "Result",
    # Exceptions
    "LinearAlgebraError",
    "ValidationError",
    "NullArgumentError",
    "NoDataError",
    "NotPositiveError",
    "RangeInversionError",
    "OutOfRangeError",
    "NonZeroOffDiagonalError",
    "DimensionError",
    "NonSquareMatrixError",
    "NonSquareOperatorError",
    "IllegalStateError",
    "UnsupportedOperationError",
    "MathArithmeticError",
    "NumericalError",
    "SingularMatrixError",
    "SingularOperatorError",
    "NotPositiveDefiniteError",
    "NonPositiveDefiniteOperatorError",
    "NonSymmetricMatrixError",
    "NonSelfAdjointOperatorError",
    "IllConditionedOperatorError",
    "ConvergenceError",
    "MaxCountExceededError",
]
