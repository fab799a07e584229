"""
Tests for the capability providers.

Each primitive is exercised directly on raw buffers for every backend and
checked against a closed-form NumPy expectation. Blocked kernels may
reorder sums, so comparisons use the backend's tolerance tier.
"""

import numpy as np
import pytest

from pymatrix.core.capabilities import ALL_PRIMITIVES, PRIMITIVE_GEMM
from pymatrix.core.compute.tolerances import NUMPY_FP64, loosest, select_tolerance
from pymatrix.core.protocols import Backend
from pymatrix.dense.backends import BLASBackend, NumPyBackend, ReferenceBackend


@pytest.fixture(params=[ReferenceBackend, NumPyBackend, BLASBackend], ids=['ref', 'numpy', 'blas'])
def backend(request):
    return request.param()


def assert_close(backend, actual, expected):
    tol = loosest(select_tolerance(backend.name), NUMPY_FP64)
    np.testing.assert_allclose(actual, expected, rtol=tol.rtol, atol=tol.atol)


# ═══════════════════════════════════════════════════════════════════════
# Protocol conformance
# ═══════════════════════════════════════════════════════════════════════


class TestProtocol:

    def test_is_backend(self, backend):
        assert isinstance(backend, Backend)

    def test_supports_every_primitive(self, backend):
        assert all(backend.supports(p) for p in ALL_PRIMITIVES)
        assert backend.supports(PRIMITIVE_GEMM)

    def test_unknown_capability(self, backend):
        assert backend.supports('sparse_gemm') is False

    def test_names_unique(self):
        names = {cls().name for cls in (ReferenceBackend, NumPyBackend, BLASBackend)}
        assert names == {'ref', 'numpy', 'blas'}


# ═══════════════════════════════════════════════════════════════════════
# Storage
# ═══════════════════════════════════════════════════════════════════════


class TestStorage:

    def test_allocate(self, backend):
        buffer = backend.allocate(6)
        assert buffer.shape == (6,)
        assert buffer.dtype == np.float64
        assert buffer.flags['C_CONTIGUOUS']

    def test_allocate_zero_is_none(self, backend):
        assert backend.allocate(0) is None

    def test_deallocate_none(self, backend):
        backend.deallocate(None)
        backend.deallocate(backend.allocate(3))


# ═══════════════════════════════════════════════════════════════════════
# Level 1
# ═══════════════════════════════════════════════════════════════════════


class TestLevel1:

    def test_copy_unit_stride(self, backend):
        y = np.zeros(4)
        backend.copy(4, np.array([1.0, 2.0, 3.0, 4.0]), 1, y)
        np.testing.assert_array_equal(y, [1, 2, 3, 4])

    def test_copy_stride_zero(self, backend):
        y = np.zeros(3)
        backend.copy(3, np.array([3.14]), 0, y)
        np.testing.assert_array_equal(y, [3.14, 3.14, 3.14])

    def test_copy_into_view(self, backend):
        y = np.zeros(6)
        backend.copy(2, np.array([1.0, 2.0]), 1, y[2:4])
        np.testing.assert_array_equal(y, [0, 0, 1, 2, 0, 0])

    def test_axpy_stride_zero(self, backend):
        y = np.array([1.0, 2.0, 3.0])
        backend.axpy(3, 0.5, np.array([4.0]), 0, y)
        np.testing.assert_array_equal(y, [3.0, 4.0, 5.0])

    def test_copy_stride_zero_into_view(self, backend):
        y = np.ones(5)
        backend.copy(2, np.array([0.0]), 0, y[1:3])
        np.testing.assert_array_equal(y, [1.0, 0.0, 0.0, 1.0, 1.0])

    def test_axpy(self, backend):
        y = np.array([1.0, 1.0, 1.0])
        backend.axpy(3, -2.0, np.array([1.0, 0.0, 5.0, 0.0, 2.0]), 2, y)
        np.testing.assert_array_equal(y, [-1.0, -9.0, -3.0])

    def test_dot(self, backend):
        assert backend.dot(3, np.array([1.0, 2.0, 3.0]), np.array([4.0, 5.0, 6.0])) == 32.0

    def test_scal(self, backend):
        x = np.array([1.0, -2.0])
        backend.scal(2, 0.5, x)
        np.testing.assert_array_equal(x, [0.5, -1.0])

    def test_nrm2(self, backend, rng):
        x = rng.standard_normal(50)
        assert_close(backend, backend.nrm2(50, x), np.linalg.norm(x))

    def test_hprod_aliased_output(self, backend):
        x = np.array([1.0, 2.0, 3.0])
        backend.hprod(3, x, np.array([2.0, 2.0, -1.0]), x)
        np.testing.assert_array_equal(x, [2.0, 4.0, -3.0])

    def test_sub(self, backend):
        out = np.empty(2)
        backend.sub(2, np.array([5.0, 1.0]), np.array([2.0, 3.0]), out)
        np.testing.assert_array_equal(out, [3.0, -2.0])

    def test_tanh(self, backend):
        x = np.array([0.0, 0.5, -3.0])
        backend.tanh(3, x)
        np.testing.assert_allclose(x, np.tanh([0.0, 0.5, -3.0]), rtol=1e-15)


# ═══════════════════════════════════════════════════════════════════════
# Level 2 / 3
# ═══════════════════════════════════════════════════════════════════════


class TestGer:

    def test_rank_one(self, backend):
        a = np.zeros(6)
        backend.ger(2, 3, 2.0, np.array([1.0, -1.0]), np.array([1.0, 2.0, 3.0]), a)
        np.testing.assert_array_equal(a.reshape(2, 3), [[2, 4, 6], [-2, -4, -6]])

    def test_accumulates(self, backend):
        a = np.ones(4)
        backend.ger(2, 2, 1.0, np.array([1.0, 2.0]), np.array([2.0, 3.0]), a)
        np.testing.assert_array_equal(a.reshape(2, 2), [[3, 4], [5, 7]])


class TestGemm:

    @pytest.mark.parametrize("trans_a", [False, True])
    @pytest.mark.parametrize("trans_b", [False, True])
    def test_against_numpy(self, backend, rng, trans_a, trans_b):
        m, n, k = 3, 4, 5
        a = rng.standard_normal((k, m) if trans_a else (m, k))
        b = rng.standard_normal((n, k) if trans_b else (k, n))
        c = np.empty(m * n)
        backend.gemm(
            trans_a, trans_b, m, n, k, 1.5,
            a.ravel(), a.shape[1], b.ravel(), b.shape[1], c, n,
        )
        op_a = a.T if trans_a else a
        op_b = b.T if trans_b else b
        assert_close(backend, c.reshape(m, n), 1.5 * op_a @ op_b)

    def test_leading_dimension(self, backend):
        a = np.array([0.0, 1.0, -1.0, 0.0])
        x = np.array([2.0, 1.0])
        c = np.array([7.0, -3.0, 7.0, 5.0])
        backend.gemm(False, False, 2, 1, 2, 1.0, a, 2, x, 1, c, 2)
        np.testing.assert_array_equal(c, [1.0, -3.0, -2.0, 5.0])
