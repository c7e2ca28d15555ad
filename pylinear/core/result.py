"""
Envelope shared by every method solve() dispatches to.

Direct and iterative methods report different payloads (a determinant
here, an iteration count there), so the payload type is a parameter and
everything method-independent sits on the envelope itself.
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Frozen record of one solve.

    Attributes:
        params: Method payload, e.g. solution and residual norm
        info: Method metadata such as 'determinant' or 'iterations'
        timing: Phase breakdown from Timer.as_dict(), or None
        method_name: Key the method was dispatched under ('lu', 'cg', ...)
        warnings: Messages of the RuntimeWarnings raised while solving
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    method_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        return any(substring in message for message in self.warnings)
