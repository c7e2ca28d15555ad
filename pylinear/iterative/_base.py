"""
Common behaviour of the iterative linear solvers.

Holds the iteration manager, the argument checks every solver runs before
its first iteration, and the plumbing that moves vectors in and out of
user-supplied linear operators.
"""

from __future__ import annotations

from typing import Any

from pylinear.core.exceptions import ValidationError
from pylinear.core.validation import check_dimension, check_not_none, check_square
from pylinear.field import REAL_FIELD
from pylinear.iterative.events import IterationManager
from pylinear.matrix import ReadOnlyVector, RealVector
from pylinear.matrix._vector import vector_entries


def as_real_vector(v: Any, name: str) -> RealVector:
    """RealVector view of ``v`` (``v`` itself if it already is one)."""
    check_not_none(v, name)
    if isinstance(v, RealVector):
        return v
    return RealVector(vector_entries(REAL_FIELD, v, name))


def apply_operator(op: Any, x: RealVector) -> RealVector:
    """
    y = op x as a fresh RealVector.

    The operator sees a read-only view of x, and its result is copied, so
    neither side can alias the solver's working vectors.

    Raises:
        DimensionError: If the operator returns a vector of the wrong length
    """
    y = vector_entries(REAL_FIELD, op.operate(ReadOnlyVector(x)), 'operate(x)')
    check_dimension(y.shape[0], op.row_dimension, 'operate(x)')
    return RealVector(y)


def check_parameters(a: Any, b: RealVector, x0: RealVector, m: Any = None) -> None:
    """
    Validate the arguments of a solve.

    Raises:
        NullArgumentError: If a, b or x0 is None
        NonSquareOperatorError: If a (or m) is not square
        DimensionError: If b, x0 or m do not match a
    """
    check_not_none(a, 'a')
    check_not_none(b, 'b')
    check_not_none(x0, 'x0')
    check_square(a.row_dimension, a.column_dimension, 'a', operator=True)
    check_dimension(b.dimension, a.row_dimension, 'b')
    check_dimension(x0.dimension, a.column_dimension, 'x0')
    if m is not None:
        check_square(m.row_dimension, m.column_dimension, 'preconditioner', operator=True)
        check_dimension(m.row_dimension, a.row_dimension, 'preconditioner')


class IterativeLinearSolver:
    """
    Base class of the (preconditioned) iterative solvers.

    Args:
        max_iterations: Iteration budget, initialisation included
        delta: Relative tolerance on the residual
        check: Run the optional positivity / self-adjointness checks
    """

    name = 'iterative'

    def __init__(self, max_iterations: int, delta: float, check: bool = False):
        if max_iterations < 1:
            raise ValidationError(f"max_iterations: must be at least 1, got {max_iterations}")
        self._manager = IterationManager(max_iterations)
        self._delta = delta
        self._check = check

    @property
    def iteration_manager(self) -> IterationManager:
        return self._manager

    @property
    def delta(self) -> float:
        return self._delta

    @property
    def check(self) -> bool:
        return self._check

    def _in_place_target(self, x0: Any) -> RealVector:
        check_not_none(x0, 'x0')
        if not isinstance(x0, RealVector):
            raise ValidationError(
                f"x0: solve_in_place needs a RealVector to update, got {type(x0).__name__}"
            )
        return x0

    def _copy_of_guess(self, x0: Any, n: int) -> RealVector:
        if x0 is None:
            return RealVector.zeros(n)
        return RealVector(vector_entries(REAL_FIELD, x0, 'x0'))
