"""
Preconditioned iterative solvers for large, possibly matrix-free systems.

Operators only need to satisfy the LinearOperator protocol
(row_dimension, column_dimension, operate).

Public API:
    ConjugateGradient    - symmetric positive definite A
    SymmLQ               - symmetric (possibly indefinite, shifted) A
    IterationManager, IterationListener,
    IterationEvent, IterativeLinearSolverEvent - progress reporting
    HilbertMatrix, InverseHilbertMatrix,
    JacobiPreconditioner, ScipyOperator        - ready-made operators
"""

from pylinear.iterative._base import IterativeLinearSolver
from pylinear.iterative._cg import ConjugateGradient
from pylinear.iterative._symmlq import SymmLQ
from pylinear.iterative.events import (
    IterationEvent,
    IterationListener,
    IterationManager,
    IterativeLinearSolverEvent,
)
from pylinear.iterative.operators import (
    HilbertMatrix,
    InverseHilbertMatrix,
    JacobiPreconditioner,
    ScipyOperator,
)

__all__ = [
    "IterativeLinearSolver",
    "ConjugateGradient",
    "SymmLQ",
    "IterationEvent",
    "IterationListener",
    "IterationManager",
    "IterativeLinearSolverEvent",
    "HilbertMatrix",
    "InverseHilbertMatrix",
    "JacobiPreconditioner",
    "ScipyOperator",
]
