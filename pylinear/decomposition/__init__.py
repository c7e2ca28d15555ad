"""
Direct dense decompositions and their solver facades.

Every decomposition is computed once at construction; factor matrices are
cached so repeated access returns the identical object. Each exposes a
``solver`` with ``solve(b)``, ``get_inverse()`` and ``is_non_singular()``.

Public API:
    LUDecomposition            - P A = L U, partial pivoting
    FieldLUDecomposition       - the same over any Field (exact for rationals)
    CholeskyDecomposition      - A = L L' for symmetric positive definite A
    QRDecomposition            - A = Q R (Householder)
    RRQRDecomposition          - A P = Q R with column pivoting, get_rank()
    SingularValueDecomposition - A = U S V'
    EigenDecomposition         - A = V D V' for symmetric A
"""

from pylinear.decomposition._lu import LUDecomposition, LUSolver
from pylinear.decomposition._field_lu import FieldLUDecomposition, FieldLUSolver
from pylinear.decomposition._cholesky import CholeskyDecomposition, CholeskySolver
from pylinear.decomposition._qr import (
    QRDecomposition,
    QRSolver,
    RRQRDecomposition,
    RRQRSolver,
)
from pylinear.decomposition._svd import SingularValueDecomposition, SVDSolver
from pylinear.decomposition._eigen import EigenDecomposition, EigenSolver
from pylinear.decomposition._solver import RealDecompositionSolver

__all__ = [
    "LUDecomposition",
    "LUSolver",
    "FieldLUDecomposition",
    "FieldLUSolver",
    "CholeskyDecomposition",
    "CholeskySolver",
    "QRDecomposition",
    "QRSolver",
    "RRQRDecomposition",
    "RRQRSolver",
    "SingularValueDecomposition",
    "SVDSolver",
    "EigenDecomposition",
    "EigenSolver",
    "RealDecompositionSolver",
]
