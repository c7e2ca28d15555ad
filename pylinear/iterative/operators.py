"""
Concrete linear operators.

    HilbertMatrix        - H_ij = 1 / (i + j + 1), known only through operate()
    InverseHilbertMatrix - exact integer entries of H^-1
    JacobiPreconditioner - diagonal preconditioner diag(A)^-1
    ScipyOperator        - adapts scipy.sparse.linalg.LinearOperator (and
                           anything aslinearoperator accepts: ndarrays,
                           sparse matrices, ...)

All of them satisfy the LinearOperator protocol, so they can be handed to
the iterative solvers as operator or preconditioner. operate() accepts any
vector of this package, any VectorLike, or a 1-D array-like, and returns a
RealVector.
"""

from __future__ import annotations

from math import comb
from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy.sparse.linalg import aslinearoperator

from pylinear.core.validation import check_dimension, check_index, check_not_none, check_square
from pylinear.field import REAL_FIELD
from pylinear.matrix import FieldMatrix, RealVector
from pylinear.matrix._vector import vector_entries


def _entries(x: Any, dimension: int) -> NDArray[np.float64]:
    data = vector_entries(REAL_FIELD, x, 'x')
    check_dimension(data.shape[0], dimension, 'x')
    return data


class HilbertMatrix:
    """The n x n Hilbert matrix, a classic ill-conditioned SPD operator."""

    def __init__(self, n: int):
        self._n = n
        i = np.arange(n)
        self._h = 1.0 / (i[:, np.newaxis] + i[np.newaxis, :] + 1.0)

    @property
    def row_dimension(self) -> int:
        return self._n

    @property
    def column_dimension(self) -> int:
        return self._n

    def operate(self, x: Any) -> RealVector:
        return RealVector(self._h @ _entries(x, self._n), copy=False)


class InverseHilbertMatrix:
    """
    Inverse of the n x n Hilbert matrix.

    Entries are exact integers:
        (-1)^(i+j) (i+j+1) C(n+i, n-j-1) C(n+j, n-i-1) C(i+j, i)^2
    """

    def __init__(self, n: int):
        self._n = n

    @property
    def row_dimension(self) -> int:
        return self._n

    @property
    def column_dimension(self) -> int:
        return self._n

    def get_entry(self, i: int, j: int) -> int:
        check_index(i, self._n, 'row')
        check_index(j, self._n, 'column')
        n = self._n
        value = (i + j + 1) * comb(n + i, n - j - 1) * comb(n + j, n - i - 1) * comb(i + j, i) ** 2
        return -value if (i + j) % 2 else value

    def operate(self, x: Any) -> RealVector:
        data = _entries(x, self._n)
        y = np.array([
            sum(self.get_entry(i, j) * float(data[j]) for j in range(self._n))
            for i in range(self._n)
        ], dtype=np.float64)
        return RealVector(y, copy=False)


class JacobiPreconditioner:
    """
    Diagonal (Jacobi) preconditioner M = diag(a_11, ..., a_nn)^-1.

    Args:
        diagonal: Diagonal of the operator to precondition
    """

    def __init__(self, diagonal: Any):
        self._diag = np.array(vector_entries(REAL_FIELD, diagonal, 'diagonal'), dtype=np.float64)

    @classmethod
    def create(cls, a: Any) -> JacobiPreconditioner:
        """
        Build the preconditioner of a square operator.

        The diagonal is read with get_entry when ``a`` is a matrix, and
        otherwise recovered one entry at a time by applying ``a`` to the
        unit vectors.

        Raises:
            NonSquareOperatorError: If a is not square
        """
        check_not_none(a, 'a')
        n = a.row_dimension
        check_square(n, a.column_dimension, 'a', operator=True)
        if isinstance(a, FieldMatrix):
            diagonal = [a.get_entry(i, i) for i in range(n)]
        else:
            diagonal = []
            unit = RealVector.zeros(n)
            for i in range(n):
                unit.set(0.0)
                unit.set_entry(i, 1.0)
                column = vector_entries(REAL_FIELD, a.operate(unit), 'a.operate(e_i)')
                diagonal.append(float(column[i]))
        return cls(diagonal)

    @property
    def row_dimension(self) -> int:
        return self._diag.shape[0]

    @property
    def column_dimension(self) -> int:
        return self._diag.shape[0]

    def operate(self, x: Any) -> RealVector:
        return RealVector(_entries(x, self._diag.shape[0]) / self._diag, copy=False)

    def sqrt(self) -> JacobiPreconditioner:
        """Square root of the preconditioner, diag(sqrt(a_ii))^-1."""
        return JacobiPreconditioner(np.sqrt(self._diag))


class ScipyOperator:
    """
    LinearOperator view of a scipy operator, ndarray or sparse matrix.

    Rectangular operators are allowed; the solvers check squareness.
    """

    def __init__(self, operator: Any):
        check_not_none(operator, 'operator')
        self._op = aslinearoperator(operator)

    @property
    def row_dimension(self) -> int:
        return int(self._op.shape[0])

    @property
    def column_dimension(self) -> int:
        return int(self._op.shape[1])

    def operate(self, x: Any) -> RealVector:
        y = self._op.matvec(_entries(x, self.column_dimension))
        return RealVector(np.ravel(np.asarray(y, dtype=np.float64)))
