"""
Wall-clock timing of solve phases.

solve() reports how long a call spent factorising and back-substituting
(direct methods) or building the preconditioner and iterating (Krylov
methods). Phases are recorded under their own names next to
'total_seconds'.
"""

import logging
import time
from contextlib import contextmanager
from typing import Iterator

logger = logging.getLogger(__name__)


class Timer:
    """
    Phase timer for a single solve.

    Usable as a context manager, in which case the overall clock runs for
    the body of the ``with`` block::

        with Timer() as timer:
            with timer.phase('factorize'):
                lu = LUDecomposition(a)
            with timer.phase('solve'):
                x = lu.solver.solve(b)
        timer.as_dict()
        # {'total_seconds': 0.05, 'factorize': 0.03, 'solve': 0.02}

    A phase entered more than once accumulates.
    """

    def __init__(self):
        self._phases: dict[str, float] = {}
        self._started: float | None = None
        self._elapsed: float | None = None

    def __enter__(self) -> 'Timer':
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()

    def start(self) -> None:
        self._started = time.perf_counter()
        self._elapsed = None

    def stop(self) -> None:
        if self._started is None:
            raise RuntimeError("Timer stopped before start")
        self._elapsed = time.perf_counter() - self._started

    @property
    def elapsed(self) -> float | None:
        """Overall seconds, or None while the timer is still running."""
        return self._elapsed

    @contextmanager
    def phase(self, name: str) -> Iterator[None]:
        begin = time.perf_counter()
        try:
            yield
        finally:
            seconds = time.perf_counter() - begin
            self._phases[name] = self._phases.get(name, 0.0) + seconds
            logger.debug("phase %s took %.6fs", name, seconds)

    def as_dict(self) -> dict[str, float]:
        """
        Timing breakdown as a plain dict.

        Raises:
            RuntimeError: If the overall clock has not been stopped.
        """
        if self._elapsed is None:
            raise RuntimeError("Timer read before stop")
        return {'total_seconds': self._elapsed, **self._phases}
