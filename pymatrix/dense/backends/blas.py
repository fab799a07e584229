"""
SciPy BLAS capability provider.

Forwards the level-1/2/3 primitives straight to the BLAS routines that
SciPy exposes in scipy.linalg.blas (dcopy, daxpy, dger, ddot, dgemm,
dscal, dnrm2). BLAS is column-major, so a row-major m x n buffer is
handed over as its (n x m) column-major transpose and the operands of
gemm/ger are swapped accordingly; no data is copied to change layout.

BLAS has no elementwise product, difference or tanh; those three use
NumPy ufuncs writing into the caller's buffer.
"""

import numpy as np
from scipy.linalg import blas

from pymatrix.core.capabilities import ALL_PRIMITIVES
from pymatrix.core.exceptions import AllocationError
from pymatrix.core.protocols import Buffer


class BLASBackend:
    """
    BLAS implementation of the primitive set via scipy.linalg.blas.

    Implements the Backend protocol. Blocked (and possibly threaded)
    kernels reorder sums, so results agree with the reference loops within
    pymatrix.core.compute.tolerances.BLAS_FP64.
    """

    @property
    def name(self) -> str:
        return 'blas'

    def supports(self, capability: str) -> bool:
        return capability in ALL_PRIMITIVES

    def allocate(self, size: int) -> Buffer | None:
        if size == 0:
            return None
        try:
            return np.empty(size, dtype=np.float64)
        except (MemoryError, ValueError) as e:
            raise AllocationError(
                f"blas: cannot allocate {size} float64 elements: {e}", size=size
            ) from e

    def deallocate(self, buffer: Buffer | None) -> None:
        pass

    def copy(self, n: int, x: Buffer, incx: int, y: Buffer) -> None:
        # dcopy rejects incx=0
        if incx == 0:
            y[:n] = x[0]
            return
        y[:n] = blas.dcopy(x, y[:n], n=n, incx=incx)

    def axpy(self, n: int, alpha: float, x: Buffer, incx: int, y: Buffer) -> None:
        if incx == 0:
            y[:n] += alpha * x[0]
            return
        y[:n] = blas.daxpy(x, y[:n], n=n, a=alpha, incx=incx)

    def ger(self, m: int, n: int, alpha: float, x: Buffer, y: Buffer, a: Buffer) -> None:
        # Row-major A (m x n) is column-major A^T (n x m): A^T += alpha * y x^T
        a_t = a[: m * n].reshape(m, n).T
        a_t[...] = blas.dger(alpha, y[:n], x[:m], a=a_t, overwrite_a=1)

    def dot(self, n: int, x: Buffer, y: Buffer) -> float:
        return float(blas.ddot(x, y, n=n))

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
        a_t = a[: a_rows * lda].reshape(a_rows, lda).T
        b_t = b[: b_rows * ldb].reshape(b_rows, ldb).T
        # C^T = op(B)^T op(A)^T, computed column-major
        c_t = blas.dgemm(
            alpha, b_t, a_t, trans_a=int(trans_b), trans_b=int(trans_a)
        )
        c[: m * ldc].reshape(m, ldc)[:, :n] = c_t.T

    def scal(self, n: int, alpha: float, x: Buffer) -> None:
        x[:n] = blas.dscal(alpha, x[:n], n=n)

    def nrm2(self, n: int, x: Buffer) -> float:
        return float(blas.dnrm2(x, n=n))

    def sub(self, n: int, x: Buffer, y: Buffer, out: Buffer) -> None:
        np.subtract(x[:n], y[:n], out=out[:n])

    def tanh(self, n: int, x: Buffer) -> None:
        np.tanh(x[:n], out=x[:n])
