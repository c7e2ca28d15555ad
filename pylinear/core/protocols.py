"""
Structural interfaces for vectors and operators.

Solvers accept anything that looks like a linear operator: an object
exposing row_dimension, column_dimension and operate(). These are
typing.Protocols rather than base classes, so a caller's own operator
needs no import from this package. They are runtime_checkable because
the conversion helpers branch on isinstance(v, VectorLike).
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class VectorLike(Protocol):
    """
    Minimal read capability of a vector.

    Right-hand sides handed to the direct and iterative solvers only need
    to satisfy this protocol. RealVector and FieldVector implement it, as
    does any user type exposing the two members below.
    """

    @property
    def dimension(self) -> int:
        """Number of entries."""
        ...

    def get_entry(self, index: int) -> Any:
        """
        Entry at ``index``.

        Implementations should raise an IndexError subclass (OutOfRangeError
        for the types in this package) for indices outside [0, dimension).
        """
        ...


@runtime_checkable
class LinearOperator(Protocol):
    """
    A linear map known only through its action on vectors.

    Matrices are one implementation; synthetic operators (Hilbert matrix
    generator, Jacobi preconditioner) and test doubles are others. Nothing
    requires the operator to be materialised.

    The iterative solvers call ``operate`` with a RealVector and accept a
    RealVector, a VectorLike or a 1-D array-like in return.
    """

    @property
    def row_dimension(self) -> int:
        """Dimension of the codomain."""
        ...

    @property
    def column_dimension(self) -> int:
        """Dimension of the domain."""
        ...

    def operate(self, x: Any) -> Any:
        """
        Compute y = A x.

        Args:
            x: Vector of length column_dimension

        Returns:
            Vector of length row_dimension
        """
        ...


@runtime_checkable
class DecompositionSolver(Protocol):
    """
    Solver facade bound to one decomposition.

    Stateless with respect to the decomposition: solving never mutates the
    decomposition or the matrix it was computed from.
    """

    def is_non_singular(self) -> bool:
        """True if the decomposed matrix admits a (unique) solution."""
        ...

    def solve(self, b: Any) -> Any:
        """
        Solve A x = b for a vector or a multi-column matrix b.

        Raises:
            DimensionError: If b does not have A's row dimension
            SingularMatrixError: If the decomposed matrix is singular
        """
        ...

    def get_inverse(self) -> Any:
        """solve(identity)."""
        ...
