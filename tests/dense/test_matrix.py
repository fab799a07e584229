"""
Tests for the matrix entity: construction, lifecycle, equality, fill,
transpose, random generation and conversions.

Every test taking ``matrix_cls`` runs once per backend.
"""

import copy as stdlib_copy

import numpy as np
import pytest

from pymatrix.core.exceptions import DimensionError, OwnershipError, ValidationError
from pymatrix.dense import Matrix, Temporary, copy, move, numel, seed


# ═══════════════════════════════════════════════════════════════════════
# Construction
# ═══════════════════════════════════════════════════════════════════════


class TestConstruction:

    def test_dimensioned(self, matrix_cls):
        A = matrix_cls(2, 3)
        assert A.shape == (2, 3)
        assert (A.rows, A.cols) == (2, 3)
        assert A.size == numel(A) == 6
        assert A.data.shape == (6,)
        assert A.data.dtype == np.float64

    def test_default_columns_is_vector(self, matrix_cls):
        assert matrix_cls(4).shape == (4, 1)

    def test_empty(self, matrix_cls):
        A = matrix_cls()
        assert A.rows == 0
        assert A.cols == 0
        assert A.data is None
        assert A.is_empty

    def test_zero_elements_has_no_storage(self, matrix_cls):
        A = matrix_cls(3, 0)
        assert A.data is None
        assert A.shape == (3, 0)
        assert not A.is_empty

    def test_negative_dimension_rejected(self, matrix_cls):
        with pytest.raises(ValidationError, match="non-negative"):
            matrix_cls(-1, 2)

    def test_generic_matrix_not_instantiable(self):
        with pytest.raises(TypeError, match="generic"):
            Matrix(2, 2)
        with pytest.raises(TypeError, match="generic"):
            Temporary(2, 2)

    def test_from_rows(self, matrix_cls):
        A = matrix_cls.from_rows([[1, 2, 3], [4, 5, 6]])
        assert A.shape == (2, 3)
        assert A[1][2] == 6.0
        np.testing.assert_array_equal(A.data, [1, 2, 3, 4, 5, 6])

    def test_from_array_1d_is_column(self, matrix_cls):
        x = matrix_cls.from_array(np.array([2.0, 1.0]))
        assert x.shape == (2, 1)

    def test_from_array_3d_rejected(self, matrix_cls):
        with pytest.raises(DimensionError, match="3D"):
            matrix_cls.from_array(np.zeros((2, 2, 2)))

    def test_from_array_non_numeric_rejected(self, matrix_cls):
        with pytest.raises(ValidationError):
            matrix_cls.from_rows([["a", "b"]])

    def test_from_array_empty_rows(self, matrix_cls):
        A = matrix_cls.from_array(np.zeros((0, 3)))
        assert A.shape == (0, 3)
        assert A.data is None

    def test_to_numpy_is_independent(self, matrix_cls):
        A = matrix_cls.from_rows([[1, 2], [3, 4]])
        arr = A.to_numpy()
        arr[0, 0] = 99.0
        assert A[0][0] == 1.0
        assert A.tolist() == [[1.0, 2.0], [3.0, 4.0]]


# ═══════════════════════════════════════════════════════════════════════
# Copy and move
# ═══════════════════════════════════════════════════════════════════════


class TestCopy:

    def test_copy_equals_and_is_independent(self, rotation):
        B = rotation.copy()
        assert B == rotation
        assert not B.is_temporary
        B[0][0] = 7.0
        assert rotation[0][0] == 0.0
        assert B != rotation

    def test_free_copy_is_temporary(self, matrix_cls, rotation):
        t = copy(rotation)
        assert isinstance(t, matrix_cls.Temporary)
        assert t.is_temporary
        assert t == rotation
        assert t.data is not rotation.data

    def test_copy_of_empty(self, matrix_cls):
        assert matrix_cls().copy().is_empty

    def test_shallow_copy_refused(self, rotation):
        with pytest.raises(OwnershipError, match="shallow copy"):
            stdlib_copy.copy(rotation)

    def test_deepcopy_is_copy(self, rotation):
        B = stdlib_copy.deepcopy(rotation)
        assert B == rotation
        assert B.data is not rotation.data


class TestMove:

    def test_move_empties_source(self, matrix_cls, rotation):
        reference = rotation.copy()
        buffer = rotation.data
        t = move(rotation)
        assert rotation.is_empty
        assert rotation.data is None
        assert rotation == matrix_cls()
        assert t == reference
        assert t.data is buffer

    def test_take_is_persistent(self, matrix_cls, rotation):
        reference = rotation.copy()
        B = matrix_cls.take(rotation)
        assert type(B) is matrix_cls
        assert B == reference
        assert rotation.is_empty

    def test_move_assignment(self, matrix_cls, rotation):
        reference = rotation.copy()
        B = matrix_cls(5, 5)
        assert B.move_from(rotation) is B
        assert B == reference
        assert rotation.is_empty

    def test_self_move_is_noop(self, rotation):
        reference = rotation.copy()
        rotation.move_from(rotation)
        assert rotation == reference

    def test_persist(self, matrix_cls, rotation):
        t = rotation * rotation
        buffer = t.data
        P = t.persist()
        assert type(P) is matrix_cls
        assert P.data is buffer
        assert t.is_empty

    def test_move_rejects_non_matrix(self):
        with pytest.raises(TypeError):
            move(np.zeros(3))


# ═══════════════════════════════════════════════════════════════════════
# Equality
# ═══════════════════════════════════════════════════════════════════════


class TestEquality:

    def test_reflexive(self, rotation):
        assert rotation == rotation

    def test_value_difference(self, rotation):
        B = rotation.copy()
        B.data[0] += 1.0
        assert rotation != B

    def test_shape_difference(self, matrix_cls):
        A = matrix_cls.from_rows([[1, 2, 3, 4]])
        B = matrix_cls.from_array([1, 2, 3, 4])
        assert A != B

    def test_empty_vs_zero_element(self, matrix_cls):
        assert matrix_cls() == matrix_cls()
        assert matrix_cls() == matrix_cls(0, 0)
        assert matrix_cls() != matrix_cls(0, 3)
        assert matrix_cls(3, 0) != matrix_cls(0, 3)

    def test_exact_no_tolerance(self, matrix_cls):
        A = matrix_cls.from_rows([[1.0]])
        B = matrix_cls.from_rows([[1.0 + 1e-15]])
        assert A != B

    def test_non_matrix_not_equal(self, rotation):
        assert rotation != [[0, 1], [-1, 0]]

    def test_unhashable(self, rotation):
        with pytest.raises(TypeError):
            hash(rotation)


# ═══════════════════════════════════════════════════════════════════════
# Fill, transpose, random
# ═══════════════════════════════════════════════════════════════════════


class TestFill:

    def test_fill(self, matrix_cls):
        A = matrix_cls(3, 2)
        A.fill(3.14)
        np.testing.assert_array_equal(A.data, np.full(6, 3.14))

    def test_fill_empty_is_noop(self, matrix_cls):
        A = matrix_cls()
        A.fill(1.0)
        assert A.is_empty

    def test_fill_rejects_non_scalar(self, matrix_cls):
        with pytest.raises(ValidationError):
            matrix_cls(2).fill("x")


class TestTranspose:

    def test_ten_by_five(self, matrix_cls):
        X = matrix_cls.from_array(np.arange(50.0).reshape(10, 5))
        Y = X.transpose()
        assert Y.shape == (5, 10)
        assert Y.is_temporary
        for i in range(10):
            for j in range(5):
                assert X[i][j] == Y[j][i]

    def test_source_unchanged(self, rotation):
        reference = rotation.copy()
        rotation.T
        assert rotation == reference

    def test_vector(self, matrix_cls):
        x = matrix_cls.from_array([1, 2, 3])
        assert x.transpose().tolist() == [[1.0, 2.0, 3.0]]

    def test_empty(self, matrix_cls):
        assert matrix_cls(0, 4).transpose().shape == (4, 0)


class TestRandn:

    def test_shape(self, matrix_cls):
        assert matrix_cls.randn(3, 4).shape == (3, 4)
        assert matrix_cls.randn(5).shape == (5, 1)

    def test_seed_reproducible(self, matrix_cls):
        seed(7)
        A = matrix_cls.randn(3, 3)
        seed(7)
        B = matrix_cls.randn(3, 3)
        assert A == B

    def test_successive_calls_differ(self, matrix_cls):
        seed(11)
        assert matrix_cls.randn(4, 4) != matrix_cls.randn(4, 4)

    def test_roughly_standard_normal(self, matrix_cls):
        seed(0)
        values = matrix_cls.randn(200, 50).data
        assert abs(values.mean()) < 0.05
        assert abs(values.std() - 1.0) < 0.05


def test_repr(matrix_cls, rotation):
    text = repr(rotation)
    assert matrix_cls.__name__ in text
    assert "2x2" in text
    assert "empty" in repr(matrix_cls())
    assert ".Temporary" in repr(copy(rotation))
