"""
NumPy capability provider.

Vectorised implementation of the primitive set. Matrix products go
through numpy.matmul and therefore through whatever BLAS NumPy links.
All writes land in the caller's buffer via slice assignment or ``out=``,
never by rebinding.
"""

import numpy as np

from pymatrix.core.capabilities import ALL_PRIMITIVES
from pymatrix.core.exceptions import AllocationError
from pymatrix.core.protocols import Buffer


def _strided(x: Buffer, n: int, inc: int) -> Buffer:
    """View of the n elements a stride-inc read touches (inc 0 broadcasts)."""
    if inc == 0:
        return np.broadcast_to(x[0], (n,))
    return x[: (n - 1) * inc + 1 : inc]


class NumPyBackend:
    """
    NumPy implementation of the primitive set.

    Implements the Backend protocol. Sums may be reordered relative to
    the reference loops (pairwise summation, BLAS blocking), so results
    agree within pymatrix.core.compute.tolerances.NUMPY_FP64.
    """

    @property
    def name(self) -> str:
        return 'numpy'

    def supports(self, capability: str) -> bool:
        return capability in ALL_PRIMITIVES

    def allocate(self, size: int) -> Buffer | None:
        if size == 0:
            return None
        try:
            return np.empty(size, dtype=np.float64)
        except (MemoryError, ValueError) as e:
            raise AllocationError(
                f"numpy: cannot allocate {size} float64 elements: {e}", size=size
            ) from e

    def deallocate(self, buffer: Buffer | None) -> None:
        pass

    def copy(self, n: int, x: Buffer, incx: int, y: Buffer) -> None:
        y[:n] = _strided(x, n, incx)

    def axpy(self, n: int, alpha: float, x: Buffer, incx: int, y: Buffer) -> None:
        y[:n] += alpha * _strided(x, n, incx)

    def ger(self, m: int, n: int, alpha: float, x: Buffer, y: Buffer, a: Buffer) -> None:
        a2 = a[: m * n].reshape(m, n)
        a2 += alpha * np.outer(x[:m], y[:n])

    def dot(self, n: int, x: Buffer, y: Buffer) -> float:
        return float(np.dot(x[:n], y[:n]))

    def hprod(self, n: int, x: Buffer, y: Buffer, out: Buffer) -> None:
        np.multiply(x[:n], y[:n], out=out[:n])

    def gemm(
        self,
        trans_a: bool,
        trans_b: bool,
        m: int,
        n: int,
        k: int,
        alpha: float,
        a: Buffer,
        lda: int,
        b: Buffer,
        ldb: int,
        c: Buffer,
        ldc: int,
    ) -> None:
        a_rows = k if trans_a else m
        b_rows = n if trans_b else k
        a2 = a[: a_rows * lda].reshape(a_rows, lda)
        b2 = b[: b_rows * ldb].reshape(b_rows, ldb)
        op_a = a2.T if trans_a else a2
        op_b = b2.T if trans_b else b2
        c2 = c[: m * ldc].reshape(m, ldc)[:, :n]
        product = np.matmul(op_a, op_b)
        if alpha != 1.0:
            product *= alpha
        c2[...] = product

    def scal(self, n: int, alpha: float, x: Buffer) -> None:
        x[:n] *= alpha

    def nrm2(self, n: int, x: Buffer) -> float:
        return float(np.linalg.norm(x[:n]))

    def sub(self, n: int, x: Buffer, y: Buffer, out: Buffer) -> None:
        np.subtract(x[:n], y[:n], out=out[:n])

    def tanh(self, n: int, x: Buffer) -> None:
        np.tanh(x[:n], out=x[:n])
