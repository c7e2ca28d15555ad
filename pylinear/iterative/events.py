"""
Iteration events, listeners and the iteration manager.

Every solve runs through the same lifecycle

    initialization -> (iteration started -> iteration performed)* -> termination

and the IterationManager dispatches each transition to its listeners,
synchronously and in registration order, before the solver goes on.

The manager also owns the iteration counter. Incrementing it past
``max_iterations`` raises MaxCountExceededError; the last event fired
still describes the partial iterate.
"""

from __future__ import annotations

from typing import Any

from pylinear.core.exceptions import MaxCountExceededError, UnsupportedOperationError
from pylinear.core.validation import check_not_none
from pylinear.matrix import ReadOnlyVector


class IterationEvent:
    """
    Base event.

    Attributes:
        source: The solver that fired the event
        iterations: Iteration count at the time of the event
    """

    def __init__(self, source: Any, iterations: int):
        self.source = source
        self.iterations = iterations


class IterativeLinearSolverEvent(IterationEvent):
    """
    Event fired by the iterative linear solvers.

    The vectors are read-only views of the solver's working vectors; they
    reflect the state at the time the event is handled, and any attempt to
    modify them raises UnsupportedOperationError.

    Args:
        source: The solver that fired the event
        iterations: Iteration count
        solution: Current estimate x
        right_hand_side: b
        norm_of_residual: Estimate of the (possibly preconditioned) residual norm
        residual: Current residual r = b - A x, if the solver tracks it
    """

    def __init__(
        self,
        source: Any,
        iterations: int,
        solution: ReadOnlyVector,
        right_hand_side: ReadOnlyVector,
        norm_of_residual: float,
        residual: ReadOnlyVector | None = None,
    ):
        super().__init__(source, iterations)
        self._solution = solution
        self._right_hand_side = right_hand_side
        self._norm_of_residual = norm_of_residual
        self._residual = residual

    @property
    def solution(self) -> ReadOnlyVector:
        return self._solution

    @property
    def right_hand_side(self) -> ReadOnlyVector:
        return self._right_hand_side

    @property
    def norm_of_residual(self) -> float:
        return self._norm_of_residual

    @property
    def provides_residual(self) -> bool:
        return self._residual is not None

    @property
    def residual(self) -> ReadOnlyVector:
        """
        Raises:
            UnsupportedOperationError: If the solver does not track r
        """
        if self._residual is None:
            raise UnsupportedOperationError(
                f"{type(self.source).__name__} does not provide the residual vector"
            )
        return self._residual


class IterationListener:
    """
    Base class of iteration listeners.

    All four hooks do nothing by default; override the ones of interest.
    """

    def initialization_performed(self, event: IterationEvent) -> None:
        pass

    def iteration_started(self, event: IterationEvent) -> None:
        pass

    def iteration_performed(self, event: IterationEvent) -> None:
        pass

    def termination_performed(self, event: IterationEvent) -> None:
        pass


class IterationManager:
    """
    Iteration counter plus listener registry.

    Args:
        max_iterations: Largest count the solver may reach
    """

    def __init__(self, max_iterations: int):
        self._max_iterations = max_iterations
        self._iterations = 0
        self._listeners: list[IterationListener] = []

    @property
    def max_iterations(self) -> int:
        return self._max_iterations

    @property
    def iterations(self) -> int:
        """Number of iterations of the current (or last) solve."""
        return self._iterations

    def add_iteration_listener(self, listener: IterationListener) -> None:
        check_not_none(listener, 'listener')
        self._listeners.append(listener)

    def remove_iteration_listener(self, listener: IterationListener) -> None:
        """Remove the first registration of ``listener`` (no-op if absent)."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def reset_iteration_count(self) -> None:
        self._iterations = 0

    def increment_iteration_count(self) -> None:
        """
        Raises:
            MaxCountExceededError: If the count goes past max_iterations
        """
        self._iterations += 1
        if self._iterations > self._max_iterations:
            raise MaxCountExceededError(
                f"iteration count exceeded its maximum of {self._max_iterations}",
                max_count=self._max_iterations,
            )

    def fire_initialization_event(self, event: IterationEvent) -> None:
        for listener in list(self._listeners):
            listener.initialization_performed(event)

    def fire_iteration_started_event(self, event: IterationEvent) -> None:
        for listener in list(self._listeners):
            listener.iteration_started(event)

    def fire_iteration_performed_event(self, event: IterationEvent) -> None:
        for listener in list(self._listeners):
            listener.iteration_performed(event)

    def fire_termination_event(self, event: IterationEvent) -> None:
        for listener in list(self._listeners):
            listener.termination_performed(event)
