"""
Preconditioned Conjugate Gradient.

Solves A x = b for a symmetric positive definite operator A, optionally
preconditioned by an SPD operator M approximating A^-1.

Iteration (initialisation counts as iteration 1):

    r = b - A x0;  stop if |r| <= delta |b|
    loop:
        z = M r;  rho = r'z              (check: rho > 0, else M is not SPD)
        p = z on the first pass, else p = (rho / rho_prev) p + z
        q = A p;  pq = p'q               (check: pq > 0, else A is not SPD)
        alpha = rho / pq
        x += alpha p;  r -= alpha q
        stop if |r| <= delta |b|

The positivity checks only run with ``check=True``; without them a
non-SPD operator silently produces garbage, as in any CG code.

References:
    Barrett, R. et al. (1994). Templates for the Solution of Linear Systems:
    Building Blocks for Iterative Methods. SIAM. Section 2.3.
"""

from __future__ import annotations

import logging
from typing import Any

from pylinear.core.exceptions import NonPositiveDefiniteOperatorError
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


class ConjugateGradient(IterativeLinearSolver):
    """
    Conjugate Gradient solver.

    Args:
        max_iterations: Iteration budget, initialisation included
        delta: Stop when |r| <= delta * |b|
        check: Raise NonPositiveDefiniteOperatorError on a non-positive
               quadratic form instead of carrying on

    Examples:
        >>> cg = ConjugateGradient(100, 1e-10, check=True)
        >>> x = cg.solve(RealMatrix([[4.0, 1.0], [1.0, 3.0]]), [1.0, 2.0])
    """

    name = 'cg'

    def solve(self, a: Any, b: Any, x0: Any = None, *, preconditioner: Any = None) -> RealVector:
        """
        Solve A x = b, leaving ``x0`` untouched.

        Args:
            a: Square LinearOperator
            b: Right-hand side
            x0: Initial guess (zero vector if None)
            preconditioner: Optional square LinearOperator M

        Returns:
            A new RealVector
        """
        check_not_none(a, 'a')
        x = self._copy_of_guess(x0, a.column_dimension)
        return self.solve_in_place(a, b, x, preconditioner=preconditioner)

    def solve_in_place(
        self, a: Any, b: Any, x0: RealVector, *, preconditioner: Any = None
    ) -> RealVector:
        """
        Solve A x = b, overwriting and returning ``x0``.

        Raises:
            NonSquareOperatorError: If a or the preconditioner is not square
            DimensionError: If b, x0 or the preconditioner do not match a
            NonPositiveDefiniteOperatorError: With check=True, if A or M is
                found not to be positive definite
            MaxCountExceededError: If the iteration budget runs out
        """
        x = self._in_place_target(x0)
        b = as_real_vector(b, 'b')
        m = preconditioner
        check_parameters(a, b, x, m)

        manager = self.iteration_manager
        manager.reset_iteration_count()
        rmax = self.delta * b.get_norm()
        bro = ReadOnlyVector(b)

        # initialisation counts as an iteration
        manager.increment_iteration_count()
        xro = ReadOnlyVector(x)
        p = x.copy()
        q = apply_operator(a, p)
        r = b.combine(1.0, -1.0, q)
        rro = ReadOnlyVector(r)
        rnorm = r.get_norm()
        z = r if m is None else None

        event = IterativeLinearSolverEvent(self, manager.iterations, xro, bro, rnorm, rro)
        manager.fire_initialization_event(event)
        if rnorm <= rmax:
            manager.fire_termination_event(event)
            logger.debug("CG: initial guess already within tolerance")
            return x

        rho_prev = 0.0
        while True:
            manager.increment_iteration_count()
            event = IterativeLinearSolverEvent(self, manager.iterations, xro, bro, rnorm, rro)
            manager.fire_iteration_started_event(event)

            if m is not None:
                z = apply_operator(m, r)
            rho_next = r.dot_product(z)
            if self.check and rho_next <= 0.0:
                raise NonPositiveDefiniteOperatorError(
                    f"preconditioner is not positive definite (r'Mr = {rho_next})",
                    operator=m,
                    vector=r.copy(),
                )
            if manager.iterations == 2:
                p.set_sub_vector(0, z)
            else:
                p.combine_to_self(rho_next / rho_prev, 1.0, z)

            q = apply_operator(a, p)
            pq = p.dot_product(q)
            if self.check and pq <= 0.0:
                raise NonPositiveDefiniteOperatorError(
                    f"operator is not positive definite (p'Ap = {pq})",
                    operator=a,
                    vector=p.copy(),
                )
            alpha = rho_next / pq
            x.combine_to_self(1.0, alpha, p)
            r.combine_to_self(1.0, -alpha, q)
            rho_prev = rho_next
            rnorm = r.get_norm()

            event = IterativeLinearSolverEvent(self, manager.iterations, xro, bro, rnorm, rro)
            manager.fire_iteration_performed_event(event)
            if rnorm <= rmax:
                manager.fire_termination_event(event)
                logger.debug(
                    "CG: converged after %d iterations (residual %g)",
                    manager.iterations, rnorm,
                )
                return x
