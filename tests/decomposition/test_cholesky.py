"""
Tests for CholeskyDecomposition and CholeskySolver.
"""

import numpy as np
import pytest

from pylinear.core.exceptions import (
    DimensionError,
    NonSquareMatrixError,
    NonSymmetricMatrixError,
    NotPositiveDefiniteError,
)
from pylinear.decomposition import CholeskyDecomposition
from pylinear.matrix import RealMatrix, RealVector


EXPECTED_L = np.array([
    [1.0, 0.0, 0.0, 0.0, 0.0],
    [2.0, 3.0, 0.0, 0.0, 0.0],
    [4.0, 5.0, 6.0, 0.0, 0.0],
    [7.0, 8.0, 9.0, 10.0, 0.0],
    [11.0, 12.0, 13.0, 14.0, 15.0],
])


class TestFactors:

    def test_known_factor(self, spd_matrix):
        chol = CholeskyDecomposition(spd_matrix)
        np.testing.assert_allclose(chol.L.get_data(), EXPECTED_L, rtol=1e-12, atol=1e-12)

    def test_llt_equals_a(self, spd_matrix):
        chol = CholeskyDecomposition(spd_matrix)
        np.testing.assert_allclose(chol.L.multiply(chol.LT).get_data(), spd_matrix, rtol=1e-13)

    def test_lt_is_transpose(self, spd_matrix):
        chol = CholeskyDecomposition(spd_matrix)
        np.testing.assert_array_equal(chol.LT.get_data(), chol.L.get_data().T)

    def test_triangular(self, spd_matrix):
        chol = CholeskyDecomposition(spd_matrix)
        np.testing.assert_array_equal(np.triu(chol.L.get_data(), 1), np.zeros((5, 5)))

    def test_cached(self, spd_matrix):
        chol = CholeskyDecomposition(spd_matrix)
        assert chol.L is chol.L
        assert chol.LT is chol.LT
        assert chol.solver is chol.solver

    def test_determinant(self, spd_matrix):
        assert CholeskyDecomposition(spd_matrix).determinant == pytest.approx(7290000.0, rel=1e-12)

    def test_random_spd(self, rng):
        b = rng.standard_normal((6, 6))
        a = b @ b.T + 6 * np.eye(6)
        chol = CholeskyDecomposition(RealMatrix(a))
        np.testing.assert_allclose(chol.L.get_data(), np.linalg.cholesky(a), rtol=1e-10, atol=1e-12)


class TestValidation:

    def test_non_square(self):
        with pytest.raises(NonSquareMatrixError):
            CholeskyDecomposition([[1.0, 2.0, 3.0], [2.0, 5.0, 6.0]])

    def test_non_symmetric(self, spd_matrix):
        a = spd_matrix.copy()
        a[0, 2] += 1e-10
        with pytest.raises(NonSymmetricMatrixError) as exc_info:
            CholeskyDecomposition(a)
        assert (exc_info.value.row, exc_info.value.column) == (0, 2)
        assert exc_info.value.threshold == 1e-15

    def test_symmetry_threshold_is_relative(self):
        a = np.array([[4.0, 1e6], [1e6 + 1e-4, 1e13]])
        with pytest.raises(NonSymmetricMatrixError):
            CholeskyDecomposition(a)
        chol = CholeskyDecomposition(a, relative_symmetry_threshold=1e-9)
        assert chol.determinant > 0

    def test_not_positive_definite(self):
        with pytest.raises(NotPositiveDefiniteError) as exc_info:
            CholeskyDecomposition([[1.0, 2.0], [2.0, 1.0]])
        assert exc_info.value.index == 1
        assert exc_info.value.threshold == 1e-10

    def test_first_pivot_not_positive(self):
        with pytest.raises(NotPositiveDefiniteError) as exc_info:
            CholeskyDecomposition([[0.0, 0.0], [0.0, 1.0]])
        assert exc_info.value.index == 0

    def test_positivity_threshold(self):
        a = np.diag([1.0, 1e-11])
        with pytest.raises(NotPositiveDefiniteError):
            CholeskyDecomposition(a)
        CholeskyDecomposition(a, absolute_positivity_threshold=1e-12)

    def test_pivot_equal_to_threshold_is_accepted(self):
        cholesky = CholeskyDecomposition(np.diag([1.0, 1e-10]))
        assert cholesky.L.get_entry(1, 1) == pytest.approx(1e-5)


class TestSolver:

    def test_solve_vector(self, spd_matrix):
        x_true = np.array([1.0, -1.0, 2.0, 0.5, 3.0])
        solver = CholeskyDecomposition(spd_matrix).solver
        assert solver.is_non_singular()
        x = solver.solve(RealVector(spd_matrix @ x_true))
        assert isinstance(x, RealVector)
        np.testing.assert_allclose(x.to_array(), x_true, rtol=1e-9)

    def test_solve_matrix(self, spd_matrix, rng):
        b = rng.standard_normal((5, 3))
        x = CholeskyDecomposition(spd_matrix).solver.solve(RealMatrix(b))
        np.testing.assert_allclose(spd_matrix @ x.get_data(), b, atol=1e-9)

    def test_inverse(self, spd_matrix):
        inverse = CholeskyDecomposition(spd_matrix).solver.get_inverse()
        np.testing.assert_allclose(inverse.get_data() @ spd_matrix, np.eye(5), atol=1e-9)

    def test_dimension_mismatch(self, spd_matrix):
        with pytest.raises(DimensionError):
            CholeskyDecomposition(spd_matrix).solver.solve([1.0, 2.0])
