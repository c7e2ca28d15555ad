"""
SYMMLQ: Paige and Saunders' method for symmetric (possibly indefinite) systems.

Solves (A - shift I) x = b for a self-adjoint operator A, optionally with a
symmetric positive definite preconditioner M. The Lanczos process builds
an orthonormal basis of the Krylov space; an LQ factorisation of the
tridiagonal Lanczos matrix gives the SYMMLQ iterate x_L, and the CG iterate
is recovered from it cheaply whenever it is the better of the two.

Unlike CG, no initial guess is used: x is overwritten from the start.

Stopping rule (||.|| estimates kept incrementally, never recomputed):
    cgnorm <= anorm * ynorm * eps   or   cgnorm <= anorm * ynorm * delta

Failure modes:
    NonSelfAdjointOperatorError      (check=True) A or M fails x'Ay == y'Ax
                                     within (s + eps) * eps^(1/3)
    NonPositiveDefiniteOperatorError M is not positive definite
    IllConditionedOperatorError      condition estimate reaches 0.1 / eps
    SingularOperatorError            b is an eigenvector of A for ``shift``

References:
    Paige, C. C. & Saunders, M. A. (1975). Solution of sparse indefinite
    systems of linear equations. SIAM J. Numer. Anal. 12(4), 617-629.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pylinear.core.compute.tolerances import MACHINE_EPSILON
from pylinear.core.exceptions import (
    IllConditionedOperatorError,
    NonPositiveDefiniteOperatorError,
    NonSelfAdjointOperatorError,
    SingularOperatorError,
)
from pylinear.core.validation import check_not_none
from pylinear.iterative._base import (
    IterativeLinearSolver,
    apply_operator,
    as_real_vector,
    check_parameters,
)
from pylinear.iterative.events import IterativeLinearSolverEvent
from pylinear.matrix import ReadOnlyVector, RealVector

logger = logging.getLogger(__name__)

MACH_PREC = MACHINE_EPSILON
CBRT_MACH_PREC = float(np.cbrt(MACH_PREC))


def _operate(op: Any, x: NDArray[np.float64]) -> NDArray[np.float64]:
    return apply_operator(op, RealVector(x, copy=False)).to_array()


def check_symmetry(
    op: Any,
    x: NDArray[np.float64],
    y: NDArray[np.float64],
    z: NDArray[np.float64],
) -> None:
    """
    Test y = L x and z = L y for self-adjointness: y'y must match x'z.

    Raises:
        NonSelfAdjointOperatorError: If |y'y - x'z| > (y'y + eps) * eps^(1/3)
    """
    s = float(np.dot(y, y))
    t = float(np.dot(x, z))
    epsa = (s + MACH_PREC) * CBRT_MACH_PREC
    if abs(s - t) > epsa:
        raise NonSelfAdjointOperatorError(
            f"operator is not self-adjoint: |{s} - {t}| > {epsa}",
            operator=op,
            vector1=RealVector(x),
            vector2=RealVector(y),
            threshold=epsa,
        )


def _not_positive_definite(op: Any, v: NDArray[np.float64]) -> NonPositiveDefiniteOperatorError:
    return NonPositiveDefiniteOperatorError(
        "preconditioner is not positive definite", operator=op, vector=RealVector(v)
    )


class _SymmLQState:
    """Working state of one SYMMLQ solve."""

    def __init__(
        self,
        a: Any,
        m: Any,
        b: NDArray[np.float64],
        goodb: bool,
        shift: float,
        delta: float,
        check: bool,
    ):
        self.a = a
        self.m = m
        self.b = b
        self.x_l = np.zeros(b.shape[0])
        self.goodb = goodb
        self.shift = shift
        self.mb = b if m is None else _operate(m, b)
        self.check = check
        self.delta = delta
        self.b_is_null = False
        self.has_converged = False
        self.rnorm = 0.0

    def init(self) -> None:
        a, m = self.a, self.m
        self.r1 = self.b.copy()
        self.y = self.b.copy() if m is None else _operate(m, self.r1)
        if m is not None and self.check:
            check_symmetry(m, self.r1, self.y, _operate(m, self.y))

        self.beta1 = float(np.dot(self.r1, self.y))
        if self.beta1 < 0.0:
            raise _not_positive_definite(m, self.y)
        if self.beta1 == 0.0:
            self.b_is_null = True
            return
        self.beta1 = float(np.sqrt(self.beta1))

        v = self.y / self.beta1
        self.y = _operate(a, v)
        if self.check:
            check_symmetry(a, v, self.y, _operate(a, self.y))
        self.y = self.y - self.shift * v
        alpha = float(np.dot(v, self.y))
        self.y = self.y - (alpha / self.beta1) * self.r1
        # one step of reorthogonalisation against v
        self.y = self.y - (float(np.dot(v, self.y)) / float(np.dot(v, v))) * v
        self.r2 = self.y.copy()
        if m is not None:
            self.y = _operate(m, self.r2)
        self.oldb = self.beta1
        self.beta = float(np.dot(self.r2, self.y))
        if self.beta < 0.0:
            raise _not_positive_definite(m, self.y)
        self.beta = float(np.sqrt(self.beta))

        self.cgnorm = self.beta1
        self.gbar = alpha
        self.dbar = self.beta
        self.gamma_zeta = self.beta1
        self.minus_eps_zeta = 0.0
        self.bstep = 0.0
        self.snprod = 1.0
        self.tnorm = alpha * alpha + self.beta * self.beta
        self.ynorm2 = 0.0
        self.gmax = abs(alpha) + MACH_PREC
        self.gmin = self.gmax
        self.wbar = np.zeros(self.b.shape[0]) if self.goodb else v
        self._update_norms()

    def update(self) -> None:
        v = self.y / self.beta
        y = _operate(self.a, v)
        y = y - self.shift * v - (self.beta / self.oldb) * self.r1
        alpha = float(np.dot(v, y))
        y = y - (alpha / self.beta) * self.r2
        self.r1 = self.r2
        self.r2 = y
        self.y = y if self.m is None else _operate(self.m, self.r2)
        self.oldb = self.beta
        self.beta = float(np.dot(self.r2, self.y))
        if self.beta < 0.0:
            raise _not_positive_definite(self.m, self.y)
        self.beta = float(np.sqrt(self.beta))
        self.tnorm += alpha * alpha + self.oldb * self.oldb + self.beta * self.beta

        # plane rotation eliminating the sub-diagonal of the Lanczos matrix
        gamma = float(np.sqrt(self.gbar * self.gbar + self.oldb * self.oldb))
        c = self.gbar / gamma
        s = self.oldb / gamma
        deltak = c * self.dbar + s * alpha
        self.gbar = s * self.dbar - c * alpha
        eps = s * self.beta
        self.dbar = -c * self.beta
        zeta = self.gamma_zeta / gamma

        self.x_l = self.x_l + (zeta * c) * self.wbar + (zeta * s) * v
        self.wbar = s * self.wbar - c * v

        self.bstep += self.snprod * c * zeta
        self.snprod *= s
        self.gmax = max(self.gmax, gamma)
        self.gmin = min(self.gmin, gamma)
        self.ynorm2 += zeta * zeta
        self.gamma_zeta = self.minus_eps_zeta - deltak * zeta
        self.minus_eps_zeta = -eps * zeta
        self._update_norms()

    def _update_norms(self) -> None:
        anorm = float(np.sqrt(self.tnorm))
        ynorm = float(np.sqrt(self.ynorm2))
        epsa = anorm * MACH_PREC
        epsx = anorm * ynorm * MACH_PREC
        epsr = anorm * ynorm * self.delta
        diag = epsa if self.gbar == 0.0 else self.gbar
        if diag == 0.0:
            # A - shift I vanishes on the whole Krylov space
            raise IllConditionedOperatorError(
                "operator is singular for the given shift",
                condition_number=float('inf'),
            )
        self.lqnorm = float(np.sqrt(
            self.gamma_zeta * self.gamma_zeta + self.minus_eps_zeta * self.minus_eps_zeta
        ))
        qrnorm = self.snprod * self.beta1
        self.cgnorm = qrnorm * self.beta / abs(diag)

        if self.lqnorm <= self.cgnorm:
            acond = self.gmax / self.gmin
        else:
            acond = self.gmax / min(self.gmin, abs(diag))
        if acond * MACH_PREC >= 0.1:
            raise IllConditionedOperatorError(
                f"operator is too ill-conditioned (condition estimate {acond:g})",
                condition_number=acond,
            )
        if self.beta1 <= epsx:
            raise SingularOperatorError(
                "right-hand side is an eigenvector of the operator for the given shift"
            )
        self.rnorm = min(self.cgnorm, self.lqnorm)
        self.has_converged = self.cgnorm <= epsx or self.cgnorm <= epsr

    def refine_solution(self, x: RealVector) -> None:
        """Write the better of the LQ and CG iterates into x."""
        if self.lqnorm < self.cgnorm:
            if not self.goodb:
                refined = self.x_l
            else:
                refined = self.x_l + (self.bstep / self.beta1) * self.mb
        else:
            anorm = float(np.sqrt(self.tnorm))
            diag = anorm * MACH_PREC if self.gbar == 0.0 else self.gbar
            zbar = self.gamma_zeta / diag
            refined = self.x_l + zbar * self.wbar
            if self.goodb:
                step = (self.bstep + self.snprod * zbar) / self.beta1
                refined = refined + step * self.mb
        x.set_sub_vector(0, refined)

    @property
    def beta_equals_zero(self) -> bool:
        return self.beta < MACH_PREC


class SymmLQ(IterativeLinearSolver):
    """
    SYMMLQ solver.

    Args:
        max_iterations: Iteration budget, initialisation included
        delta: Relative tolerance of the stopping rule
        check: Check A and M for self-adjointness before iterating

    Examples:
        >>> x = SymmLQ(100, 1e-10, check=True).solve(HilbertMatrix(5), [1, 0, 0, 0, 0])
    """

    name = 'symmlq'

    def solve(
        self,
        a: Any,
        b: Any,
        x0: Any = None,
        *,
        preconditioner: Any = None,
        goodb: bool = False,
        shift: float = 0.0,
    ) -> RealVector:
        """
        Solve (A - shift I) x = b into a new vector.

        ``x0`` is only used for its dimension check; SYMMLQ ignores initial
        guesses.
        """
        check_not_none(a, 'a')
        x = self._copy_of_guess(x0, a.column_dimension)
        return self.solve_in_place(
            a, b, x, preconditioner=preconditioner, goodb=goodb, shift=shift
        )

    def solve_in_place(
        self,
        a: Any,
        b: Any,
        x0: RealVector,
        *,
        preconditioner: Any = None,
        goodb: bool = False,
        shift: float = 0.0,
    ) -> RealVector:
        """
        Solve (A - shift I) x = b, overwriting and returning ``x0``.

        Args:
            a: Self-adjoint LinearOperator
            b: Right-hand side
            x0: Vector receiving the solution (its content is ignored)
            preconditioner: Optional SPD LinearOperator M
            goodb: Set when b is expected to be close to a multiple of M b;
                   the solution is then tracked relative to M b
            shift: Solve the shifted system (A - shift I) x = b

        Raises:
            NonSquareOperatorError: If a or the preconditioner is not square
            DimensionError: If b, x0 or the preconditioner do not match a
            NonSelfAdjointOperatorError: With check=True, if A or M is not
                self-adjoint
            NonPositiveDefiniteOperatorError: If M is not positive definite
            IllConditionedOperatorError: If A - shift I is too ill-conditioned
            SingularOperatorError: If b is an eigenvector for eigenvalue shift
            MaxCountExceededError: If the iteration budget runs out
        """
        x = self._in_place_target(x0)
        b = as_real_vector(b, 'b')
        m = preconditioner
        check_parameters(a, b, x, m)

        manager = self.iteration_manager
        manager.reset_iteration_count()
        # initialisation counts as an iteration
        manager.increment_iteration_count()

        state = _SymmLQState(a, m, b.to_array(), goodb, shift, self.delta, self.check)
        state.init()
        xro = ReadOnlyVector(x)
        bro = ReadOnlyVector(b)

        if state.b_is_null:
            # b = 0 exactly: the solution is 0
            x.set(0.0)
            event = IterativeLinearSolverEvent(self, manager.iterations, xro, bro, 0.0)
            manager.fire_initialization_event(event)
            manager.fire_termination_event(event)
            return x

        state.refine_solution(x)
        event = IterativeLinearSolverEvent(self, manager.iterations, xro, bro, state.rnorm)
        early_stop = state.beta_equals_zero or state.has_converged
        manager.fire_initialization_event(event)
        if not early_stop:
            while True:
                manager.increment_iteration_count()
                event = IterativeLinearSolverEvent(
                    self, manager.iterations, xro, bro, state.rnorm
                )
                manager.fire_iteration_started_event(event)
                state.update()
                state.refine_solution(x)
                event = IterativeLinearSolverEvent(
                    self, manager.iterations, xro, bro, state.rnorm
                )
                manager.fire_iteration_performed_event(event)
                if state.has_converged:
                    break

        event = IterativeLinearSolverEvent(self, manager.iterations, xro, bro, state.rnorm)
        manager.fire_termination_event(event)
        logger.debug(
            "SymmLQ: stopped after %d iterations (residual estimate %g)",
            manager.iterations, state.rnorm,
        )
        return x
