"""
Dense matrix and vector storage.

Public API:
    FieldMatrix, FieldVector - generic over a pylinear.field.Field
    RealMatrix, RealVector   - float64 specialisations
    DiagonalMatrix           - square RealMatrix storing only its diagonal
    ReadOnlyVector           - non-writeable view of a RealVector
    MatrixChangingVisitor, MatrixPreservingVisitor,
    VectorChangingVisitor, VectorPreservingVisitor - traversal callbacks
"""

from pylinear.matrix._matrix import FieldMatrix, RealMatrix
from pylinear.matrix._vector import FieldVector, RealVector, ReadOnlyVector
from pylinear.matrix._diagonal import DiagonalMatrix
from pylinear.matrix.visitors import (
    MatrixChangingVisitor,
    MatrixPreservingVisitor,
    VectorChangingVisitor,
    VectorPreservingVisitor,
)

__all__ = [
    "FieldMatrix",
    "RealMatrix",
    "DiagonalMatrix",
    "FieldVector",
    "RealVector",
    "ReadOnlyVector",
    "MatrixChangingVisitor",
    "MatrixPreservingVisitor",
    "VectorChangingVisitor",
    "VectorPreservingVisitor",
]
