"""
Scalar field abstraction.

Generic matrix, vector and decomposition code is parameterised by a Field
instead of being duplicated per scalar type.

Public API:
    Field           - base class (zero, one, add, subtract, multiply, divide, ...)
    RealField       - float64 reals
    FractionField   - exact rationals (fractions.Fraction)
    REAL_FIELD, FRACTION_FIELD - shared instances
"""

from pylinear.field._field import (
    Field,
    RealField,
    FractionField,
    REAL_FIELD,
    FRACTION_FIELD,
)

__all__ = [
    "Field",
    "RealField",
    "FractionField",
    "REAL_FIELD",
    "FRACTION_FIELD",
]
