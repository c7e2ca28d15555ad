"""
Scalar fields.

A Field supplies the algebra (zero, one, +, -, x, /) that generic matrix,
vector and decomposition code is written against. Two fields ship with the
package:

    RealField     - IEEE double precision, stored as float64 arrays
    FractionField - exact rationals (fractions.Fraction), stored as object arrays

Elements of both fields are plain Python numbers whose operators already
implement the field operations, so numpy can vectorise bulk arithmetic
over either storage dtype. The named methods below are what the
element-by-element algorithms (exact LU, power, traces) call.
"""

from __future__ import annotations

from fractions import Fraction
from typing import Any

import numpy as np

from pylinear.core.exceptions import MathArithmeticError, ValidationError


class Field:
    """
    Base class of scalar fields.

    Subclasses define ``zero``, ``one``, ``dtype`` and ``coerce``; the
    arithmetic defaults rely on the element type's operators.
    """

    name: str = 'field'

    @property
    def zero(self) -> Any:
        raise NotImplementedError

    @property
    def one(self) -> Any:
        raise NotImplementedError

    @property
    def dtype(self) -> Any:
        """numpy dtype used to store elements of this field."""
        raise NotImplementedError

    def coerce(self, value: Any) -> Any:
        """Convert a Python number into an element of this field."""
        raise NotImplementedError

    def add(self, a: Any, b: Any) -> Any:
        return a + b

    def subtract(self, a: Any, b: Any) -> Any:
        return a - b

    def negate(self, a: Any) -> Any:
        return -a

    def multiply(self, a: Any, b: Any) -> Any:
        return a * b

    def divide(self, a: Any, b: Any) -> Any:
        if self.is_zero(b):
            raise MathArithmeticError(f"division by zero in {self.name} field")
        return a / b

    def reciprocal(self, a: Any) -> Any:
        return self.divide(self.one, a)

    def is_zero(self, a: Any) -> bool:
        return a == self.zero

    def array(self, data: Any) -> np.ndarray:
        """
        Build an ndarray of field elements from nested numbers.

        Raises:
            ValidationError: If an entry cannot be converted
        """
        raw = np.asarray(data, dtype=object)
        try:
            converted = [self.coerce(v) for v in raw.ravel()]
        except (TypeError, ValueError) as e:
            raise ValidationError(f"cannot convert entry to {self.name}: {e}") from e
        result = np.empty(raw.shape, dtype=self.dtype)
        if raw.size:
            result.ravel()[:] = converted
        return result

    def full(self, shape: int | tuple[int, ...], value: Any) -> np.ndarray:
        """ndarray of the given shape filled with one field element."""
        return np.full(shape, self.coerce(value), dtype=self.dtype)

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class RealField(Field):
    """Double-precision real numbers."""

    name = 'real'

    @property
    def zero(self) -> float:
        return 0.0

    @property
    def one(self) -> float:
        return 1.0

    @property
    def dtype(self) -> Any:
        return np.float64

    def coerce(self, value: Any) -> float:
        return float(value)

    def divide(self, a: float, b: float) -> float:
        # IEEE semantics: x / 0 is +-inf or nan, never an error
        with np.errstate(divide='ignore', invalid='ignore'):
            return float(np.float64(a) / np.float64(b))

    def array(self, data: Any) -> np.ndarray:
        try:
            return np.array(data, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"cannot convert entry to real: {e}") from e


class FractionField(Field):
    """Exact rational numbers backed by fractions.Fraction."""

    name = 'fraction'

    @property
    def zero(self) -> Fraction:
        return Fraction(0)

    @property
    def one(self) -> Fraction:
        return Fraction(1)

    @property
    def dtype(self) -> Any:
        return object

    def coerce(self, value: Any) -> Fraction:
        """
        Convert ``value`` to a Fraction without rounding.

        A float becomes the exact binary rational it stores, so 0.1 maps to
        3602879701896397/36028797018963968 and not to 1/10. Pass a string
        or a Fraction to get a decimal value exactly.
        """
        if isinstance(value, Fraction):
            return value
        if isinstance(value, (float, np.floating)):
            return Fraction(float(value))
        if isinstance(value, np.integer):
            return Fraction(int(value))
        return Fraction(value)


REAL_FIELD = RealField()
FRACTION_FIELD = FractionField()
