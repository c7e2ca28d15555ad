"""
Tests for SingularValueDecomposition and SVDSolver.
"""

import warnings

import numpy as np
import pytest

from pylinear.core.exceptions import DimensionError, SingularMatrixError, ValidationError
from pylinear.decomposition import SingularValueDecomposition
from pylinear.matrix import RealMatrix, RealVector


class TestFactors:

    @pytest.mark.parametrize("shape", [(4, 4), (7, 4), (3, 5)])
    def test_usv_equals_a(self, rng, shape):
        a = rng.standard_normal(shape)
        svd = SingularValueDecomposition(a)
        usv = svd.U.multiply(svd.S).multiply(svd.VT)
        np.testing.assert_allclose(usv.get_data(), a, atol=1e-13)

    @pytest.mark.parametrize("shape", [(4, 4), (7, 4), (3, 5)])
    def test_orthogonal_factors(self, rng, shape):
        svd = SingularValueDecomposition(rng.standard_normal(shape))
        for q in (svd.U, svd.V):
            data = q.get_data()
            np.testing.assert_allclose(data.T @ data, np.eye(data.shape[0]), atol=1e-13)

    def test_shapes(self, tall_matrix):
        svd = SingularValueDecomposition(tall_matrix)
        assert (svd.U.row_dimension, svd.U.column_dimension) == (7, 7)
        assert (svd.S.row_dimension, svd.S.column_dimension) == (7, 4)
        assert (svd.V.row_dimension, svd.V.column_dimension) == (4, 4)

    def test_transposes(self, tall_matrix):
        svd = SingularValueDecomposition(tall_matrix)
        np.testing.assert_array_equal(svd.UT.get_data(), svd.U.get_data().T)
        np.testing.assert_array_equal(svd.VT.get_data(), svd.V.get_data().T)

    def test_singular_values_sorted(self, rng):
        s = SingularValueDecomposition(rng.standard_normal((6, 5))).singular_values
        assert np.all(s[:-1] >= s[1:])
        assert np.all(s >= 0)

    def test_singular_values_copy(self, tall_matrix):
        svd = SingularValueDecomposition(tall_matrix)
        svd.singular_values[0] = -1.0
        assert svd.singular_values[0] > 0

    def test_known_values(self):
        svd = SingularValueDecomposition(np.diag([3.0, -4.0, 0.5]))
        np.testing.assert_allclose(svd.singular_values, [4.0, 3.0, 0.5])
        assert svd.get_norm() == pytest.approx(4.0)
        assert svd.get_condition_number() == pytest.approx(8.0)
        assert svd.get_inverse_condition_number() == pytest.approx(0.125)

    def test_singular_condition_number(self):
        svd = SingularValueDecomposition(np.diag([2.0, 0.0]))
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert svd.get_condition_number() == np.inf
            assert svd.get_inverse_condition_number() == 0.0

    def test_cached(self, tall_matrix):
        svd = SingularValueDecomposition(tall_matrix)
        assert svd.U is svd.U
        assert svd.S is svd.S
        assert svd.V is svd.V
        assert svd.solver is svd.solver


class TestRank:

    def test_full_rank(self, tall_matrix):
        assert SingularValueDecomposition(tall_matrix).get_rank() == 4

    def test_rank_deficient(self, singular_matrix):
        assert SingularValueDecomposition(singular_matrix).get_rank() == 2

    def test_wide_cutoff_uses_column_count(self):
        # 8e-16 is above 2 eps but below 6 eps
        a = np.zeros((2, 6))
        a[0, 0] = 1.0
        a[1, 1] = 8e-16
        assert SingularValueDecomposition(a).get_rank() == 1
        assert SingularValueDecomposition(a.T).get_rank() == 1

    def test_zero_matrix(self):
        assert SingularValueDecomposition(np.zeros((3, 2))).get_rank() == 0

    def test_non_finite_input(self):
        svd = SingularValueDecomposition([[1.0, np.nan], [0.0, 1.0]])
        assert np.all(np.isnan(svd.singular_values))
        assert np.all(np.isnan(svd.U.get_data()))
        assert svd.get_rank() == 0


class TestCovariance:

    def test_matches_normal_equations(self, tall_matrix):
        covariance = SingularValueDecomposition(tall_matrix).get_covariance(0.0)
        expected = np.linalg.inv(tall_matrix.T @ tall_matrix)
        np.testing.assert_allclose(covariance.get_data(), expected, rtol=1e-10)

    def test_cutoff_drops_small_values(self):
        covariance = SingularValueDecomposition(np.diag([2.0, 0.1])).get_covariance(1.0)
        np.testing.assert_allclose(covariance.get_data(), [[0.25, 0.0], [0.0, 0.0]], atol=1e-15)

    def test_cutoff_too_large(self):
        with pytest.raises(ValidationError, match="larger than the largest"):
            SingularValueDecomposition(np.eye(2)).get_covariance(2.0)


class TestSolver:

    def test_square(self, lu_matrix):
        x = SingularValueDecomposition(lu_matrix).solver.solve(RealVector([1.0, 2.0, 3.0]))
        np.testing.assert_allclose(x.to_array(), [19.0, -6.0, -2.0], rtol=1e-9)

    def test_least_squares(self, tall_matrix, rng):
        b = rng.standard_normal(7)
        x = SingularValueDecomposition(tall_matrix).solver.solve(b)
        expected, *_ = np.linalg.lstsq(tall_matrix, b, rcond=None)
        np.testing.assert_allclose(x.to_array(), expected, rtol=1e-10)

    def test_minimum_norm(self, wide_matrix, rng):
        b = rng.standard_normal(3)
        x = SingularValueDecomposition(wide_matrix).solver.solve(b).to_array()
        np.testing.assert_allclose(x, np.linalg.pinv(wide_matrix) @ b, atol=1e-12)

    def test_inverse_is_pseudo_inverse(self, tall_matrix):
        inverse = SingularValueDecomposition(tall_matrix).solver.get_inverse()
        np.testing.assert_allclose(inverse.get_data(), np.linalg.pinv(tall_matrix), atol=1e-12)

    def test_matrix_rhs(self, lu_matrix):
        b = RealMatrix([[1.0, 0.0], [2.0, -5.0], [3.0, 1.0]])
        x = SingularValueDecomposition(lu_matrix).solver.solve(b)
        np.testing.assert_allclose(
            x.get_data(), [[19.0, -71.0], [-6.0, 22.0], [-2.0, 9.0]], rtol=1e-9
        )

    def test_rank_deficient_is_singular(self, singular_matrix):
        solver = SingularValueDecomposition(singular_matrix).solver
        assert not solver.is_non_singular()
        with pytest.raises(SingularMatrixError):
            solver.solve([1.0, 2.0, 3.0])
        with pytest.raises(SingularMatrixError):
            solver.get_inverse()

    def test_dimension_mismatch(self, tall_matrix):
        with pytest.raises(DimensionError):
            SingularValueDecomposition(tall_matrix).solver.solve(np.ones(4))
