"""
Core protocols for pymatrix.

These define structural interfaces that backend implementations must satisfy.
We use Protocol (structural typing) rather than ABC (nominal typing) so a
provider never has to import pymatrix to be usable.

Design Principles:
    - Raw contract: providers see flat row-major float64 buffers and counts,
      never matrices, and never validate shapes (the caller already did)
    - Capability-driven: use supports() to query primitives by name
    - Stateless: a provider holds no per-matrix state
"""

from typing import Protocol, runtime_checkable

import numpy as np
from numpy.typing import NDArray

Buffer = NDArray[np.float64]


@runtime_checkable
class Backend(Protocol):
    """
    Protocol for capability providers.

    A backend implements the fixed primitive set listed in
    pymatrix.core.capabilities over one-dimensional C-contiguous float64
    buffers. Buffers passed in may be views into a larger buffer (a row,
    a column start, the leading block of a wider destination); providers
    must write through them rather than rebind them.

    Different providers must produce numerically compatible results, not
    bit-identical ones; see pymatrix.core.compute.tolerances.
    """

    @property
    def name(self) -> str:
        """
        Backend identifier.

        Examples: 'ref', 'numpy', 'blas'
        """
        ...

    def supports(self, capability: str) -> bool:
        """
        Check if this backend implements a primitive.

        Note:
            Unknown capabilities MUST return False, never raise.
        """
        ...

    def allocate(self, size: int) -> Buffer | None:
        """Uninitialized buffer of ``size`` elements, None when size is 0."""
        ...

    def deallocate(self, buffer: Buffer | None) -> None:
        """Release a buffer; no-op on None."""
        ...

    def copy(self, n: int, x: Buffer, incx: int, y: Buffer) -> None:
        """y[i] = x[i*incx] for i < n."""
        ...

    def axpy(self, n: int, alpha: float, x: Buffer, incx: int, y: Buffer) -> None:
        """y[i] += alpha * x[i*incx] for i < n."""
        ...

    def ger(self, m: int, n: int, alpha: float, x: Buffer, y: Buffer, a: Buffer) -> None:
        """a[i*n + j] += alpha * x[i] * y[j]."""
        ...

    def dot(self, n: int, x: Buffer, y: Buffer) -> float:
        """Sum of x[i] * y[i] for i < n."""
        ...

    def hprod(self, n: int, x: Buffer, y: Buffer, out: Buffer) -> None:
        """out[i] = x[i] * y[i]; out may alias x or y."""
        ...

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
        """
        C = alpha * op(A) * op(B), row-major.

        op(A) is m x k, op(B) is k x n. Only the leading n columns of each
        of the m rows of C (row stride ldc) are written.
        """
        ...

    def scal(self, n: int, alpha: float, x: Buffer) -> None:
        """x[i] *= alpha."""
        ...

    def nrm2(self, n: int, x: Buffer) -> float:
        """Euclidean (Frobenius) norm of the first n elements."""
        ...

    def sub(self, n: int, x: Buffer, y: Buffer, out: Buffer) -> None:
        """out[i] = x[i] - y[i]; out may alias x or y."""
        ...

    def tanh(self, n: int, x: Buffer) -> None:
        """x[i] = tanh(x[i])."""
        ...


__all__ = ["Backend", "Buffer"]
