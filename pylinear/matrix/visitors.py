"""
Traversal visitors for matrices and vectors.

A walk calls ``start`` once, then ``visit`` once per cell of the requested
(sub-)rectangle or sub-range, then returns whatever ``end`` returns.

Changing visitors return the new value of each cell; preserving visitors
only read. The walk methods tell the two apart with isinstance, so user
visitors subclass one of the four classes below. The defaults are no-ops
(changing visitors leave every cell as it was), so subclasses override
only what they need.
"""

from __future__ import annotations

from typing import Any


class MatrixChangingVisitor:
    """Visitor whose ``visit`` return value replaces the visited cell."""

    def start(
        self,
        rows: int,
        columns: int,
        start_row: int,
        end_row: int,
        start_column: int,
        end_column: int,
    ) -> None:
        pass

    def visit(self, row: int, column: int, value: Any) -> Any:
        return value

    def end(self) -> Any:
        return None


class MatrixPreservingVisitor:
    """Read-only matrix visitor."""

    def start(
        self,
        rows: int,
        columns: int,
        start_row: int,
        end_row: int,
        start_column: int,
        end_column: int,
    ) -> None:
        pass

    def visit(self, row: int, column: int, value: Any) -> None:
        pass

    def end(self) -> Any:
        return None


class VectorChangingVisitor:
    """Visitor whose ``visit`` return value replaces the visited entry."""

    def start(self, dimension: int, start: int, end: int) -> None:
        pass

    def visit(self, index: int, value: Any) -> Any:
        return value

    def end(self) -> Any:
        return None


class VectorPreservingVisitor:
    """Read-only vector visitor."""

    def start(self, dimension: int, start: int, end: int) -> None:
        pass

    def visit(self, index: int, value: Any) -> None:
        pass

    def end(self) -> Any:
        return None
