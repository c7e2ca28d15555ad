"""
Tests for the SYMMLQ solver.

The Saunders cases reproduce the test driver distributed with Paige and
Saunders' SYMMLQ Fortran code: a diagonal operator with eigenvalues
(i + 1) * 1.1 / n, optionally shifted, optionally with a slightly
perturbed diagonal preconditioner.
"""

import numpy as np
import pytest

from pylinear.core.exceptions import (
    DimensionError,
    IllConditionedOperatorError,
    NonPositiveDefiniteOperatorError,
    NonSelfAdjointOperatorError,
    NonSquareOperatorError,
    UnsupportedOperationError,
)
from pylinear.decomposition import LUDecomposition
from pylinear.iterative import (
    HilbertMatrix,
    InverseHilbertMatrix,
    IterationListener,
    JacobiPreconditioner,
    SymmLQ,
)
from pylinear.matrix import RealMatrix, RealVector


class Diagonal:
    """Operator acting as diag(d)."""

    def __init__(self, d):
        self.d = np.asarray(d, dtype=float)
        self.row_dimension = self.column_dimension = self.d.shape[0]

    def operate(self, x):
        return RealVector(self.d * x.to_array())


class SolverOperator:
    """Operator x -> solver.solve(x)."""

    def __init__(self, solver, n):
        self.solver = solver
        self.row_dimension = self.column_dimension = n

    def operate(self, x):
        return self.solver.solve(x)


def unit(n, j):
    e = np.zeros(n)
    e[j] = 1.0
    return e


def inverse_hilbert(n):
    ainv = InverseHilbertMatrix(n)
    return np.array([[ainv.get_entry(i, j) for j in range(n)] for i in range(n)], dtype=float)


# ═══════════════════════════════════════════════════════════════════════
# Saunders test driver
# ═══════════════════════════════════════════════════════════════════════


SAUNDERS_CASES = [
    # n, goodb, precon, shift, pertbn
    (1, False, False, 0.0, 0.0),
    (2, False, False, 0.0, 0.0),
    (1, False, True, 0.0, 0.0),
    (2, False, True, 0.0, 0.0),
    (5, False, True, 0.0, 0.0),
    (5, False, True, 0.25, 0.0),
    (50, False, False, 0.0, 0.0),
    (50, False, False, 0.25, 0.0),
    (50, False, True, 0.0, 0.10),
    (50, False, True, 0.25, 0.10),
    (1, True, False, 0.0, 0.0),
    (2, True, False, 0.0, 0.0),
    (1, True, True, 0.0, 0.0),
    (2, True, True, 0.0, 0.0),
    (5, True, True, 0.0, 0.0),
    (5, True, True, 0.25, 0.0),
    (50, True, False, 0.0, 0.0),
    (50, True, False, 0.25, 0.0),
    (50, True, True, 0.0, 0.10),
    (50, True, True, 0.25, 0.10),
]


class TestSaunders:

    @pytest.mark.parametrize("n, goodb, precon, shift, pertbn", SAUNDERS_CASES)
    def test_solution(self, n, goodb, precon, shift, pertbn):
        eigenvalues = (np.arange(n) + 1) * 1.1 / n
        a = Diagonal(eigenvalues)
        minv = None
        if precon:
            d = np.abs(eigenvalues - shift)
            d[::10] += abs(pertbn)
            minv = Diagonal(1.0 / d)

        xtrue = n - np.arange(n, dtype=float)
        b = eigenvalues * xtrue - shift * xtrue

        solver = SymmLQ(2 * n, 1e-12, check=True)
        x = solver.solve(a, b, preconditioner=minv, goodb=goodb, shift=shift)
        enorm = np.linalg.norm(x.to_array() - xtrue) / np.linalg.norm(xtrue)
        assert enorm <= 1e-5


# ═══════════════════════════════════════════════════════════════════════
# Argument and operator checks
# ═══════════════════════════════════════════════════════════════════════


class TestArguments:

    def test_non_square_operator(self):
        with pytest.raises(NonSquareOperatorError):
            SymmLQ(10, 0.0).solve(RealMatrix.zeros(2, 3), np.zeros(2), np.zeros(3))

    def test_rhs_dimension(self):
        with pytest.raises(DimensionError):
            SymmLQ(10, 0.0).solve(RealMatrix.identity(3), np.zeros(2))

    def test_solution_dimension(self):
        with pytest.raises(DimensionError):
            SymmLQ(10, 0.0).solve(RealMatrix.identity(3), np.zeros(3), np.zeros(2))

    def test_non_square_preconditioner(self):
        with pytest.raises(NonSquareOperatorError):
            SymmLQ(10, 0.0).solve(
                RealMatrix.identity(2), np.ones(2), preconditioner=RealMatrix.zeros(2, 3)
            )

    def test_mismatched_preconditioner(self):
        with pytest.raises(DimensionError):
            SymmLQ(10, 0.0).solve(
                RealMatrix.identity(2), np.ones(2), preconditioner=RealMatrix.identity(3)
            )


class TestOperatorChecks:

    def test_non_self_adjoint_operator(self):
        a = RealMatrix([[1.0, 2.0, 3.0], [2.0, 4.0, 5.0], [2.999, 5.0, 6.0]])
        with pytest.raises(NonSelfAdjointOperatorError) as exc_info:
            SymmLQ(100, 1.0, check=True).solve(a, [1.0, 1.0, 1.0])
        assert exc_info.value.operator is a

    def test_non_self_adjoint_preconditioner(self):
        a = RealMatrix([[1.0, 2.0, 3.0], [2.0, 4.0, 5.0], [3.0, 5.0, 6.0]])
        m = RealMatrix([[1.0, 0.0, 1.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]])
        minv = SolverOperator(LUDecomposition(m).solver, 3)
        with pytest.raises(NonSelfAdjointOperatorError) as exc_info:
            SymmLQ(100, 1.0, check=True).solve(a, [1.0, 1.0, 1.0], preconditioner=minv)
        assert exc_info.value.operator is minv

    def test_non_positive_definite_preconditioner(self):
        a = RealMatrix([[1.0, 2.0], [3.0, 4.0]])
        m = Diagonal([-1.0, -1.0])
        with pytest.raises(NonPositiveDefiniteOperatorError) as exc_info:
            SymmLQ(10, 0.0, check=True).solve(a, [-1.0, -1.0], preconditioner=m)
        assert exc_info.value.operator is m

    def test_singular_shift(self):
        # b is an eigenvector of A for the eigenvalue 1
        with pytest.raises(IllConditionedOperatorError):
            SymmLQ(10, 1e-10).solve(Diagonal([1.0, 2.0]), [1.0, 0.0], shift=1.0)


# ═══════════════════════════════════════════════════════════════════════
# Solutions
# ═══════════════════════════════════════════════════════════════════════


class TestSolution:

    def test_unpreconditioned_hilbert(self):
        n = 5
        solver = SymmLQ(100, 1e-10, check=True)
        expected = inverse_hilbert(n)
        for j in range(n):
            x = solver.solve(HilbertMatrix(n), unit(n, j))
            np.testing.assert_allclose(x.to_array(), expected[:, j], rtol=1e-6)

    def test_preconditioned_hilbert(self):
        n = 8
        a = HilbertMatrix(n)
        m = JacobiPreconditioner.create(a)
        solver = SymmLQ(100, 1e-15, check=True)
        expected = inverse_hilbert(n)
        for j in range(n):
            x = solver.solve(a, unit(n, j), preconditioner=m)
            np.testing.assert_allclose(x.to_array(), expected[:, j], rtol=1e-6)

    def test_initial_guess_is_ignored(self):
        n = 5
        x0 = RealVector.full(n, 1.0)
        x = SymmLQ(100, 1e-10, check=True).solve_in_place(HilbertMatrix(n), unit(n, 3), x0)
        assert x is x0
        np.testing.assert_allclose(x.to_array(), inverse_hilbert(n)[:, 3], rtol=1e-6)

    def test_solve_leaves_guess_untouched(self):
        n = 5
        x0 = RealVector.full(n, 1.0)
        x = SymmLQ(100, 1e-10, check=True).solve(HilbertMatrix(n), unit(n, 0), x0)
        assert x is not x0
        np.testing.assert_array_equal(x0.to_array(), np.ones(n))

    def test_zero_rhs(self):
        x0 = RealVector.full(3, 1.0)
        solver = SymmLQ(10, 1e-10)
        x = solver.solve_in_place(RealMatrix.identity(3), np.zeros(3), x0)
        np.testing.assert_array_equal(x.to_array(), np.zeros(3))
        assert solver.iteration_manager.iterations == 1

    def test_indefinite_operator(self):
        a = RealMatrix([[2.0, 1.0, 0.0], [1.0, -3.0, 1.0], [0.0, 1.0, 1.0]])
        x_true = np.array([1.0, -2.0, 0.5])
        x = SymmLQ(50, 1e-12, check=True).solve(a, a.get_data() @ x_true)
        np.testing.assert_allclose(x.to_array(), x_true, rtol=1e-8)

    def test_preconditioned_matches_unpreconditioned(self, ill_conditioned_matrix):
        a = RealMatrix(ill_conditioned_matrix)
        b = unit(100, 0)
        prec = SymmLQ(100000, 1e-15, check=True)
        unprec = SymmLQ(100000, 1e-15, check=True)
        px = prec.solve(a, b, preconditioner=JacobiPreconditioner.create(a))
        x = unprec.solve(a, b)
        np.testing.assert_allclose(px.to_array(), x.to_array(), rtol=5e-5)


# ═══════════════════════════════════════════════════════════════════════
# Events
# ═══════════════════════════════════════════════════════════════════════


class CountingListener(IterationListener):

    def __init__(self):
        self.counts = [0, 0, 0, 0]
        self.final_solution = None
        self.events = []

    def initialization_performed(self, event):
        self.counts[0] += 1
        self.events.append('init')

    def iteration_started(self, event):
        self.counts[1] += 1
        assert self.counts[1] == event.iterations - 1

    def iteration_performed(self, event):
        self.counts[2] += 1
        assert self.counts[2] == event.iterations - 1

    def termination_performed(self, event):
        self.counts[3] += 1
        self.events.append('termination')
        self.final_solution = event.solution.to_array()


class TestEvents:

    def test_event_management(self):
        n = 5
        solver = SymmLQ(100, 1e-10, check=True)
        listener = CountingListener()
        solver.iteration_manager.add_iteration_listener(listener)
        for j in range(n):
            listener.counts = [0, 0, 0, 0]
            x = solver.solve(HilbertMatrix(n), unit(n, j))
            assert listener.counts[0] == 1
            assert listener.counts[3] == 1
            # no refinement after the last iteration
            np.testing.assert_array_equal(listener.final_solution, x.to_array())

    def test_zero_rhs_initialises_and_terminates(self):
        solver = SymmLQ(10, 1e-10)
        listener = CountingListener()
        solver.iteration_manager.add_iteration_listener(listener)
        solver.solve(RealMatrix.identity(2), [0.0, 0.0])
        assert listener.events == ['init', 'termination']
        assert listener.counts[1:3] == [0, 0]
        np.testing.assert_array_equal(listener.final_solution, [0.0, 0.0])

    def test_residual_not_provided(self):
        seen = []

        class ResidualReader(IterationListener):
            def termination_performed(self, event):
                assert not event.provides_residual
                with pytest.raises(UnsupportedOperationError):
                    event.residual
                seen.append(event)

        solver = SymmLQ(10, 1e-10)
        solver.iteration_manager.add_iteration_listener(ResidualReader())
        solver.solve(RealMatrix.identity(2), [1.0, 2.0])
        assert len(seen) == 1

    def test_solution_view_is_read_only(self):
        raised = []

        class Mutator(IterationListener):
            def iteration_performed(self, event):
                with pytest.raises(UnsupportedOperationError):
                    event.solution.set_entry(0, 1.0)
                raised.append(event.iterations)

        solver = SymmLQ(100, 1e-10)
        solver.iteration_manager.add_iteration_listener(Mutator())
        solver.solve(HilbertMatrix(4), unit(4, 0))
        assert raised

    @pytest.mark.parametrize("preconditioned", [False, True])
    def test_norm_of_residual(self, preconditioned):
        n = 5
        a = HilbertMatrix(n)
        m = JacobiPreconditioner.create(a) if preconditioned else None
        p = m.sqrt() if preconditioned else None

        def check(event):
            x = event.solution.to_array()
            b = event.right_hand_side.to_array()
            r = b - a.operate(x).to_array()
            if p is not None:
                r = p.operate(r).to_array()
            rnorm = np.linalg.norm(r)
            assert abs(event.norm_of_residual - rnorm) <= max(1e-5 * rnorm, 1e-10)

        class NormCheck(IterationListener):
            def initialization_performed(self, event):
                check(event)

            def iteration_started(self, event):
                check(event)

            def iteration_performed(self, event):
                check(event)

            def termination_performed(self, event):
                check(event)

        solver = SymmLQ(100, 1e-10, check=True)
        solver.iteration_manager.add_iteration_listener(NormCheck())
        for j in range(n):
            solver.solve(a, unit(n, j), preconditioner=m)
