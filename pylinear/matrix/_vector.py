"""
Dense vectors over a scalar field.

FieldVector stores its entries in a 1-D numpy array whose dtype is chosen
by the field (float64 for reals, object for exact rationals), so entrywise
algebra is vectorised for both. RealVector is the RealField
specialisation and adds the norms and geometric helpers that only make
sense for reals. ReadOnlyVector is a RealVector sharing the storage of
another vector through a non-writeable view; every mutator raises.

Operands of the binary operations may be any vector of this package, any
object satisfying the VectorLike protocol, or a 1-D array-like.
"""

from __future__ import annotations

from typing import Any, Callable, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from pylinear.core.exceptions import (
    MathArithmeticError,
    RangeInversionError,
    UnsupportedOperationError,
    ValidationError,
)
from pylinear.core.protocols import VectorLike
from pylinear.core.validation import check_dimension, check_index, check_not_none
from pylinear.field import Field, REAL_FIELD
from pylinear.matrix.visitors import VectorChangingVisitor

if TYPE_CHECKING:
    from pylinear.matrix._matrix import FieldMatrix, RealMatrix


def vector_entries(field: Field, v: Any, name: str = 'vector') -> np.ndarray:
    """
    Entries of ``v`` as a 1-D ndarray of the field's dtype.

    The array may share storage with ``v`` when ``v`` is a vector of this
    package over the same field; callers must not write to it.

    Raises:
        NullArgumentError: If v is None
        DimensionError: If v is not one-dimensional
    """
    check_not_none(v, name)
    if isinstance(v, FieldVector) and v.field == field:
        return v._data
    if isinstance(v, VectorLike):
        return field.array([v.get_entry(i) for i in range(v.dimension)])
    data = field.array(v)
    if data.ndim != 1:
        raise ValidationError(f"{name}: expected 1D data, got {data.ndim}D")
    return data


class FieldVector:
    """
    Vector of field elements.

    Args:
        field: Scalar field of the entries
        data: 1-D array-like or VectorLike; None gives an empty vector
        copy: If False and data is an ndarray of the field's dtype, share it
    """

    def __init__(self, field: Field, data: Any = None, *, copy: bool = True):
        check_not_none(field, 'field')
        self._field = field
        if data is None:
            self._data = field.array([])
        elif (not copy and isinstance(data, np.ndarray) and data.ndim == 1
                and data.dtype == np.dtype(field.dtype)):
            self._data = data
        else:
            self._data = vector_entries(field, data, 'data').copy()

    @classmethod
    def zeros(cls, field: Field, dimension: int) -> FieldVector:
        return cls(field, field.full(dimension, field.zero), copy=False)

    def _like(self, data: np.ndarray) -> FieldVector:
        """New vector of the same family owning ``data``."""
        return FieldVector(self._field, data, copy=False)

    def _writable(self) -> np.ndarray:
        return self._data

    def _operand(self, v: Any) -> np.ndarray:
        data = vector_entries(self._field, v)
        check_dimension(data.shape[0], self.dimension, 'vector')
        return data

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------

    @property
    def field(self) -> Field:
        return self._field

    @property
    def dimension(self) -> int:
        return self._data.shape[0]

    def get_entry(self, index: int) -> Any:
        check_index(index, self.dimension, 'vector')
        return self._data[index]

    def set_entry(self, index: int, value: Any) -> None:
        check_index(index, self.dimension, 'vector')
        self._writable()[index] = self._field.coerce(value)

    def add_to_entry(self, index: int, increment: Any) -> None:
        check_index(index, self.dimension, 'vector')
        data = self._writable()
        data[index] = data[index] + self._field.coerce(increment)

    def set(self, value: Any) -> None:
        """Set every entry to ``value``."""
        self._writable()[:] = self._field.coerce(value)

    def to_array(self) -> np.ndarray:
        return self._data.copy()

    def copy(self) -> FieldVector:
        return self._like(self._data.copy())

    def get_sub_vector(self, index: int, n: int) -> FieldVector:
        """The ``n`` entries starting at ``index``."""
        if n < 0:
            raise ValidationError(f"sub-vector length {n} is negative")
        check_index(index, self.dimension, 'vector')
        if n > 0:
            check_index(index + n - 1, self.dimension, 'vector')
        return self._like(self._data[index:index + n].copy())

    def set_sub_vector(self, index: int, v: Any) -> None:
        data = vector_entries(self._field, v)
        check_index(index, self.dimension, 'vector')
        if data.shape[0] > 0:
            check_index(index + data.shape[0] - 1, self.dimension, 'vector')
        self._writable()[index:index + data.shape[0]] = data

    def append(self, v: Any) -> FieldVector:
        """New vector made of this vector's entries followed by ``v``."""
        if isinstance(v, (FieldVector, VectorLike, list, tuple, np.ndarray)):
            tail = vector_entries(self._field, v)
        else:
            tail = self._field.array([v])
        return self._like(np.concatenate([self._data, tail]))

    # ------------------------------------------------------------------
    # Algebra
    # ------------------------------------------------------------------

    def add(self, v: Any) -> FieldVector:
        return self._like(self._data + self._operand(v))

    def subtract(self, v: Any) -> FieldVector:
        return self._like(self._data - self._operand(v))

    def ebe_multiply(self, v: Any) -> FieldVector:
        return self._like(self._data * self._operand(v))

    def ebe_divide(self, v: Any) -> FieldVector:
        other = self._operand(v)
        if self._field != REAL_FIELD and any(self._field.is_zero(e) for e in other):
            raise MathArithmeticError("entrywise division by zero")
        with np.errstate(divide='ignore', invalid='ignore'):
            return self._like(self._data / other)

    def dot_product(self, v: Any) -> Any:
        other = self._operand(v)
        if self.dimension == 0:
            return self._field.zero
        return np.dot(self._data, other)

    def outer_product(self, v: Any) -> FieldMatrix:
        from pylinear.matrix._matrix import FieldMatrix
        other = vector_entries(self._field, v)
        return FieldMatrix(self._field, np.outer(self._data, other), copy=False)

    def map_add(self, d: Any) -> FieldVector:
        return self._like(self._data + self._field.coerce(d))

    def map_subtract(self, d: Any) -> FieldVector:
        return self._like(self._data - self._field.coerce(d))

    def map_multiply(self, d: Any) -> FieldVector:
        return self._like(self._data * self._field.coerce(d))

    def map_divide(self, d: Any) -> FieldVector:
        d = self._field.coerce(d)
        if self._field != REAL_FIELD and self._field.is_zero(d):
            raise MathArithmeticError("division of vector by zero")
        with np.errstate(divide='ignore', invalid='ignore'):
            return self._like(self._data / d)

    def map_add_to_self(self, d: Any) -> FieldVector:
        self._writable()[:] = self.map_add(d)._data
        return self

    def map_subtract_to_self(self, d: Any) -> FieldVector:
        self._writable()[:] = self.map_subtract(d)._data
        return self

    def map_multiply_to_self(self, d: Any) -> FieldVector:
        self._writable()[:] = self.map_multiply(d)._data
        return self

    def map_divide_to_self(self, d: Any) -> FieldVector:
        self._writable()[:] = self.map_divide(d)._data
        return self

    def map(self, fn: Callable[[Any], Any]) -> FieldVector:
        """New vector with ``fn`` applied to every entry."""
        return self._like(self._field.array([fn(e) for e in self._data]))

    def map_to_self(self, fn: Callable[[Any], Any]) -> FieldVector:
        self._writable()[:] = self.map(fn)._data
        return self

    def combine(self, a: Any, b: Any, y: Any) -> FieldVector:
        """a * self + b * y"""
        other = self._operand(y)
        return self._like(self._field.coerce(a) * self._data + self._field.coerce(b) * other)

    def combine_to_self(self, a: Any, b: Any, y: Any) -> FieldVector:
        self._writable()[:] = self.combine(a, b, y)._data
        return self

    def projection(self, v: Any) -> FieldVector:
        """Orthogonal projection of this vector onto ``v``."""
        other = self._operand(v)
        norm2 = np.dot(other, other) if other.shape[0] else self._field.zero
        if self._field.is_zero(norm2):
            raise MathArithmeticError("cannot project onto a zero vector")
        return self._like(other * (np.dot(self._data, other) / norm2))

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def _walk(self, visitor: Any, start: int | None, end: int | None) -> Any:
        check_not_none(visitor, 'visitor')
        if start is None and end is None:
            start, end = 0, self.dimension - 1
        elif start is None or end is None:
            raise ValidationError(
                f"walk bounds must be both given or both omitted, got {start}, {end}"
            )
        else:
            check_index(start, self.dimension, 'vector')
            check_index(end, self.dimension, 'vector')
            if end < start:
                raise RangeInversionError(
                    f"initial index {start} after final index {end}", start=start, end=end
                )
        changing = isinstance(visitor, VectorChangingVisitor)
        data = self._writable() if changing else self._data
        visitor.start(self.dimension, start, end)
        for i in range(start, end + 1):
            if changing:
                data[i] = visitor.visit(i, data[i])
            else:
                visitor.visit(i, data[i])
        return visitor.end()

    def walk_in_default_order(self, visitor: Any, start: int | None = None,
                              end: int | None = None) -> Any:
        """Visit entries ``start..end`` (inclusive) in increasing index order."""
        return self._walk(visitor, start, end)

    def walk_in_optimized_order(self, visitor: Any, start: int | None = None,
                                end: int | None = None) -> Any:
        """Visit entries ``start..end`` in an unspecified order (index order here)."""
        return self._walk(visitor, start, end)

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldVector) or other.field != self._field:
            return NotImplemented
        return self.dimension == other.dimension and bool(np.all(self._data == other._data))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data.tolist()})"


class RealVector(FieldVector):
    """
    Vector of doubles.

    Args:
        data: 1-D array-like or VectorLike; None gives an empty vector
        copy: If False and data is a float64 ndarray, share it
    """

    def __init__(self, data: Any = None, *, copy: bool = True):
        super().__init__(REAL_FIELD, data, copy=copy)

    @classmethod
    def zeros(cls, dimension: int) -> RealVector:  # type: ignore[override]
        return RealVector(np.zeros(dimension), copy=False)

    @classmethod
    def full(cls, dimension: int, value: float) -> RealVector:
        return RealVector(np.full(dimension, float(value)), copy=False)

    def _like(self, data: np.ndarray) -> RealVector:
        return RealVector(data, copy=False)

    def to_array(self) -> NDArray[np.float64]:
        return self._data.copy()

    def get_entry(self, index: int) -> float:
        return float(super().get_entry(index))

    def dot_product(self, v: Any) -> float:
        return float(super().dot_product(v))

    def outer_product(self, v: Any) -> RealMatrix:
        from pylinear.matrix._matrix import RealMatrix
        return RealMatrix(np.outer(self._data, vector_entries(REAL_FIELD, v)), copy=False)

    def get_norm(self) -> float:
        """Euclidean (L2) norm."""
        return float(np.linalg.norm(self._data))

    def get_l1_norm(self) -> float:
        return float(np.sum(np.abs(self._data)))

    def get_l_inf_norm(self) -> float:
        return float(np.max(np.abs(self._data))) if self.dimension else 0.0

    def get_distance(self, v: Any) -> float:
        return float(np.linalg.norm(self._data - self._operand(v)))

    def cosine(self, v: Any) -> float:
        """Cosine of the angle between this vector and ``v``."""
        other = self._operand(v)
        norm = self.get_norm()
        other_norm = float(np.linalg.norm(other))
        if norm == 0 or other_norm == 0:
            raise MathArithmeticError("cosine is undefined for a zero-norm vector")
        return float(np.dot(self._data, other)) / (norm * other_norm)

    def unit_vector(self) -> RealVector:
        norm = self.get_norm()
        if norm == 0:
            raise MathArithmeticError("cannot normalise a zero-norm vector")
        return self._like(self._data / norm)

    def unitize(self) -> None:
        norm = self.get_norm()
        if norm == 0:
            raise MathArithmeticError("cannot normalise a zero-norm vector")
        self._writable()[:] = self._data / norm

    def is_nan(self) -> bool:
        return bool(np.any(np.isnan(self._data)))

    def is_infinite(self) -> bool:
        """True if some entry is infinite and none is NaN."""
        return not self.is_nan() and bool(np.any(np.isinf(self._data)))


class ReadOnlyVector(RealVector):
    """
    Read-only view of a RealVector.

    Reads go to the storage of the wrapped vector, so the view follows later
    changes made through the original. Every mutator raises
    UnsupportedOperationError; operations that build a new vector return an
    ordinary, writable RealVector.
    """

    def __init__(self, vector: RealVector):
        check_not_none(vector, 'vector')
        view = vector._data.view()
        view.flags.writeable = False
        super().__init__(view, copy=False)

    def _writable(self) -> np.ndarray:
        raise UnsupportedOperationError(
            "vector is a read-only view and cannot be modified"
        )
