"""
PyLinear: dense linear algebra and iterative solvers for Python.

Direct decompositions (LU, Cholesky, QR, rank-revealing QR, SVD, symmetric
eigen) with solver facades, matrices and vectors generic over a scalar
field, and preconditioned Conjugate Gradient / SYMMLQ with iteration listeners.

Submodules:
    field: Scalar fields (reals, exact rationals)
    matrix: Dense matrices, vectors and visitors
    decomposition: Direct decompositions and their solvers
    iterative: Iterative solvers, events and ready-made operators
"""

__version__ = "0.1.0"

from pylinear import field
from pylinear import matrix
from pylinear import decomposition
from pylinear import iterative
from pylinear.solvers import solve
from pylinear.solution import LinearSolution, SolveParams

__all__ = [
    "__version__",
    "field",
    "matrix",
    "decomposition",
    "iterative",
    "solve",
    "LinearSolution",
    "SolveParams",
]
