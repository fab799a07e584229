"""
Reference capability provider.

Straightforward loops over the raw buffers: a triple loop for the matrix
product and a single loop for everything else. Slow, but every other
provider is validated against it.
"""

import math

import numpy as np

from pymatrix.core.capabilities import ALL_PRIMITIVES
from pymatrix.core.exceptions import AllocationError
from pymatrix.core.protocols import Buffer


class ReferenceBackend:
    """
    Pure-Python reference implementation of the primitive set.

    Implements the Backend protocol. Buffers are only indexed element by
    element, so views into larger buffers are written through directly.
    """

    @property
    def name(self) -> str:
        return 'ref'

    def supports(self, capability: str) -> bool:
        return capability in ALL_PRIMITIVES

    def allocate(self, size: int) -> Buffer | None:
        if size == 0:
            return None
        try:
            return np.empty(size, dtype=np.float64)
        except (MemoryError, ValueError) as e:
            raise AllocationError(
                f"ref: cannot allocate {size} float64 elements: {e}", size=size
            ) from e

    def deallocate(self, buffer: Buffer | None) -> None:
        pass

    def copy(self, n: int, x: Buffer, incx: int, y: Buffer) -> None:
        ix = 0
        for i in range(n):
            y[i] = x[ix]
            ix += incx

    def axpy(self, n: int, alpha: float, x: Buffer, incx: int, y: Buffer) -> None:
        ix = 0
        for i in range(n):
            y[i] += alpha * x[ix]
            ix += incx

    def ger(self, m: int, n: int, alpha: float, x: Buffer, y: Buffer, a: Buffer) -> None:
        for i in range(m):
            row = i * n
            for j in range(n):
                a[row + j] += alpha * x[i] * y[j]

    def dot(self, n: int, x: Buffer, y: Buffer) -> float:
        total = 0.0
        for i in range(n):
            total += x[i] * y[i]
        return float(total)

    def hprod(self, n: int, x: Buffer, y: Buffer, out: Buffer) -> None:
        for i in range(n):
            out[i] = x[i] * y[i]

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
        for i in range(m):
            for j in range(n):
                total = 0.0
                for p in range(k):
                    aip = a[p * lda + i] if trans_a else a[i * lda + p]
                    bpj = b[j * ldb + p] if trans_b else b[p * ldb + j]
                    total += aip * bpj
                c[i * ldc + j] = alpha * total

    def scal(self, n: int, alpha: float, x: Buffer) -> None:
        for i in range(n):
            x[i] *= alpha

    def nrm2(self, n: int, x: Buffer) -> float:
        return math.sqrt(self.dot(n, x, x))

    def sub(self, n: int, x: Buffer, y: Buffer, out: Buffer) -> None:
        for i in range(n):
            out[i] = x[i] - y[i]

    def tanh(self, n: int, x: Buffer) -> None:
        for i in range(n):
            x[i] = math.tanh(x[i])
