"""
Tests for LUDecomposition and LUSolver.
"""

import numpy as np
import pytest

from pylinear.core.exceptions import DimensionError, NonSquareMatrixError, SingularMatrixError
from pylinear.decomposition import LUDecomposition
from pylinear.matrix import RealMatrix, RealVector


class VectorLikeRHS:
    """Right-hand side known only through dimension / get_entry."""

    def __init__(self, values):
        self._values = list(values)

    @property
    def dimension(self):
        return len(self._values)

    def get_entry(self, index):
        return self._values[index]


# ═══════════════════════════════════════════════════════════════════════
# Factorisation
# ═══════════════════════════════════════════════════════════════════════


class TestFactors:

    def test_pa_equals_lu(self, lu_matrix):
        lu = LUDecomposition(lu_matrix)
        pa = lu.P.multiply(RealMatrix(lu_matrix))
        np.testing.assert_allclose(lu.L.multiply(lu.U).get_data(), pa.get_data(), atol=1e-14)

    def test_random_matrix(self, rng):
        a = rng.standard_normal((6, 6))
        lu = LUDecomposition(a)
        np.testing.assert_allclose(
            lu.L.multiply(lu.U).get_data(), lu.P.get_data() @ a, atol=1e-12
        )

    def test_triangular_shapes(self, lu_matrix):
        lu = LUDecomposition(lu_matrix)
        l = lu.L.get_data()
        u = lu.U.get_data()
        np.testing.assert_array_equal(np.diag(l), np.ones(3))
        np.testing.assert_array_equal(np.triu(l, 1), np.zeros((3, 3)))
        np.testing.assert_array_equal(np.tril(u, -1), np.zeros((3, 3)))

    def test_pivot_is_permutation(self, lu_matrix):
        lu = LUDecomposition(lu_matrix)
        pivot = lu.get_pivot()
        assert sorted(pivot.tolist()) == [0, 1, 2]
        np.testing.assert_array_equal(lu.P.get_data(), np.eye(3)[pivot])

    def test_pivot_is_a_copy(self, lu_matrix):
        lu = LUDecomposition(lu_matrix)
        lu.get_pivot()[0] = 99
        assert 99 not in lu.get_pivot()

    def test_factors_are_cached(self, lu_matrix):
        lu = LUDecomposition(lu_matrix)
        assert lu.L is lu.L
        assert lu.U is lu.U
        assert lu.P is lu.P
        assert lu.solver is lu.solver

    def test_determinant(self, lu_matrix):
        assert LUDecomposition(lu_matrix).determinant == pytest.approx(-1.0, rel=1e-12)

    def test_determinant_matches_numpy(self, rng):
        a = rng.standard_normal((5, 5))
        assert LUDecomposition(a).determinant == pytest.approx(np.linalg.det(a), rel=1e-10)

    def test_accepts_real_matrix(self, lu_matrix):
        lu = LUDecomposition(RealMatrix(lu_matrix))
        assert lu.determinant == pytest.approx(-1.0, rel=1e-12)

    def test_non_square(self):
        with pytest.raises(NonSquareMatrixError):
            LUDecomposition([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])


class TestSingular:

    def test_factors_are_none(self, singular_matrix):
        lu = LUDecomposition(singular_matrix)
        assert lu.L is None
        assert lu.U is None
        assert lu.P is None
        assert lu.determinant == 0.0
        assert not lu.solver.is_non_singular()

    def test_solve_raises(self, singular_matrix):
        with pytest.raises(SingularMatrixError):
            LUDecomposition(singular_matrix).solver.solve([1.0, 2.0, 3.0])

    def test_zero_matrix(self):
        assert not LUDecomposition(np.zeros((2, 2))).solver.is_non_singular()

    def test_threshold_is_absolute(self):
        a = np.diag([1.0, 1e-12])
        assert not LUDecomposition(a).solver.is_non_singular()
        assert LUDecomposition(a, singularity_threshold=1e-13).solver.is_non_singular()


# ═══════════════════════════════════════════════════════════════════════
# Solver
# ═══════════════════════════════════════════════════════════════════════


class TestSolver:

    def test_matrix_rhs(self, lu_matrix):
        b = [[1.0, 0.0], [2.0, -5.0], [3.0, 1.0]]
        x = LUDecomposition(lu_matrix).solver.solve(RealMatrix(b))
        assert isinstance(x, RealMatrix)
        np.testing.assert_allclose(
            x.get_data(), [[19.0, -71.0], [-6.0, 22.0], [-2.0, 9.0]], rtol=1e-12
        )

    def test_array_rhs(self, lu_matrix):
        b = np.array([[1.0, 0.0], [2.0, -5.0], [3.0, 1.0]])
        x = LUDecomposition(lu_matrix).solver.solve(b)
        assert isinstance(x, RealMatrix)

    @pytest.mark.parametrize("make_rhs", [
        lambda v: RealVector(v),
        lambda v: v,
        lambda v: np.array(v),
        lambda v: VectorLikeRHS(v),
    ])
    def test_vector_rhs(self, lu_matrix, make_rhs):
        x = LUDecomposition(lu_matrix).solver.solve(make_rhs([1.0, 2.0, 3.0]))
        assert isinstance(x, RealVector)
        np.testing.assert_allclose(x.to_array(), [19.0, -6.0, -2.0], rtol=1e-12)

    def test_dimension_mismatch(self, lu_matrix):
        with pytest.raises(DimensionError):
            LUDecomposition(lu_matrix).solver.solve([1.0, 2.0])

    def test_dimension_checked_before_singularity(self, singular_matrix):
        with pytest.raises(DimensionError):
            LUDecomposition(singular_matrix).solver.solve([1.0, 2.0])

    def test_inverse(self, rng):
        a = rng.standard_normal((4, 4))
        inverse = LUDecomposition(a).solver.get_inverse()
        np.testing.assert_allclose(inverse.get_data() @ a, np.eye(4), atol=1e-12)

    def test_solve_leaves_rhs_untouched(self, lu_matrix):
        b = RealVector([1.0, 2.0, 3.0])
        LUDecomposition(lu_matrix).solver.solve(b)
        np.testing.assert_array_equal(b.to_array(), [1.0, 2.0, 3.0])
