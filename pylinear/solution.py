"""
Solution types of the one-call solve API.

Contains the parameter payload and user-facing solution wrapper.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pylinear.core.result import Result


@dataclass(frozen=True)
class SolveParams:
    """
    Parameter payload of a linear solve.

    This is the immutable data computed by the selected method.
    """
    solution: NDArray[np.floating[Any]]
    residual_norm: float
    rhs_norm: float
    iterations: int | None = None
    rank: int | None = None


@dataclass
class LinearSolution:
    """
    User-facing result of pylinear.solve().

    Wraps the method Result and provides convenient accessors.
    """
    _result: Result[SolveParams]

    @property
    def x(self) -> NDArray[np.floating[Any]]:
        return self._result.params.solution

    @property
    def residual_norm(self) -> float:
        """||b - A x|| (Frobenius norm for a matrix right-hand side)."""
        return self._result.params.residual_norm

    @property
    def relative_residual(self) -> float:
        rhs = self._result.params.rhs_norm
        if rhs == 0:
            return 0.0 if self.residual_norm == 0 else float('inf')
        return self.residual_norm / rhs

    @property
    def iterations(self) -> int | None:
        return self._result.params.iterations

    @property
    def rank(self) -> int | None:
        return self._result.params.rank

    @property
    def method(self) -> str:
        return self._result.method_name

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        """Short plain-text report."""
        lines = [
            "Linear Solve",
            "=" * 40,
            f"Method: {self.method}",
            f"Unknowns: {self.x.shape[0]}",
            f"Residual norm: {self.residual_norm:.6e}",
            f"Relative residual: {self.relative_residual:.6e}",
        ]
        if self.rank is not None:
            lines.append(f"Rank: {self.rank}")
        if self.iterations is not None:
            lines.append(f"Iterations: {self.iterations}")
        if 'condition_number' in self.info:
            lines.append(f"Condition number: {self.info['condition_number']:.3e}")
        for w in self.warnings:
            lines.append(f"Warning: {w}")
        if self.timing:
            lines.append(f"Time: {self.timing.get('total_seconds', 0):.4f}s")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"LinearSolution(method={self.method!r}, n={self.x.shape[0]}, "
            f"residual_norm={self.residual_norm:.3e})"
        )
