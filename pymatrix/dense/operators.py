"""
Non-allocating composition layer.

Free functions that write into caller-supplied destinations. Every
function validates backends and shapes first and only then calls a
backend primitive, so a failed call leaves all operands unchanged.

Functions:
    mprod: C = alpha * op(A) * op(B), optionally into the leading columns of C
    msub: C = A - B
    hprod: C = A elementwise-times B
    maxpy: B += alpha * X
    mger: A += alpha * x * y^T
    mcopy: B = X
    dot, norm, tanh, transpose, numel, allclose
"""

from typing import Any

import numpy as np

from pymatrix.core.compute.tolerances import ToleranceTier, loosest, select_tolerance
from pymatrix.core.exceptions import ValidationError
from pymatrix.core.protocols import Buffer
from pymatrix.core.validation import (
    check_array,
    check_gemm_shapes,
    check_raw_length,
    check_raw_stride,
    check_same_shape,
    check_scalar,
    check_unit_stride,
    check_vector_length,
)
from pymatrix.dense.matrix import Matrix, _check_backend, _dispatch_gemm, numel

__all__ = [
    "mprod",
    "msub",
    "hprod",
    "maxpy",
    "mger",
    "mcopy",
    "dot",
    "norm",
    "tanh",
    "transpose",
    "numel",
    "allclose",
]


def mprod(
    A: Matrix,
    B: Matrix,
    C: Matrix,
    *,
    trans_a: bool = False,
    trans_b: bool = False,
    alpha: float = 1.0,
    ldc: int | None = None,
) -> None:
    """
    Matrix product into an existing destination.

    Computes ``C = alpha * op(A) * op(B)`` where op transposes its operand
    when the matching flag is set. With ``ldc`` (which must equal C.cols)
    op(B) may have fewer columns than C and only the leading columns of
    each row of C are written.

    Args:
        A: Left operand
        B: Right operand
        C: Destination, distinct from A and B
        trans_a: Use A transposed
        trans_b: Use B transposed
        alpha: Scale factor
        ldc: Row stride of C when writing a column sub-block

    Raises:
        DimensionError: If shapes are incompatible
        ValidationError: If C is A or B
        BackendMismatchError: If operands use different backends

    Example:
        >>> C = BLASMatrix(2, 2)
        >>> mprod(A, A, C, trans_a=True)      # C = A^T A
    """
    _check_backend(C, A)
    _check_backend(C, B)
    if C is A or C is B:
        raise ValidationError("mprod: destination must not be one of the operands")
    alpha = check_scalar(alpha, 'alpha')
    m, n, k = check_gemm_shapes(trans_a, trans_b, A.shape, B.shape, C.shape, ldc)
    _dispatch_gemm(
        bool(trans_a), bool(trans_b), alpha, A, B, C, m, n, k,
        C.cols if ldc is None else ldc,
    )


def msub(A: Matrix, B: Matrix, C: Matrix) -> None:
    """C = A - B elementwise. C may be A or B."""
    _check_backend(C, A)
    _check_backend(C, B)
    check_same_shape(A.shape, B.shape, 'msub')
    check_same_shape(A.shape, C.shape, 'msub')
    if C.size:
        C.backend.sub(C.size, A._data, B._data, C._data)


def hprod(A: Matrix, B: Matrix, C: Matrix) -> None:
    """C = A * B elementwise (Hadamard product). C may be A or B."""
    _check_backend(C, A)
    _check_backend(C, B)
    check_same_shape(A.shape, B.shape, 'hprod')
    check_same_shape(A.shape, C.shape, 'hprod')
    if C.size:
        C.backend.hprod(C.size, A._data, B._data, C._data)


def _source(X: Any, B: Matrix, inc: Any, operation: str) -> tuple[Buffer | None, int]:
    """Resolve the source of maxpy/mcopy to (buffer, stride) after validation."""
    if isinstance(X, Matrix):
        _check_backend(B, X)
        check_unit_stride(inc, 'X')
        check_same_shape(B.shape, X.shape, operation)
        return X._data, 1
    values = check_array(X, 'X').ravel()
    inc = check_raw_stride(inc, 'inc')
    check_raw_length(values.size, B.size, inc, 'X', operation)
    return values, inc


def maxpy(alpha: float, X: Any, B: Matrix, *, inc: int = 1) -> None:
    """
    Scaled accumulate: ``B += alpha * X``.

    X is either a matrix of B's shape (read with unit stride) or a raw
    float buffer read as ``X[i * inc]`` for each of B's elements.

    Raises:
        DimensionError: If X's shape or length does not fit B
        StrideError: If a matrix source is given a non-unit stride, or a
            raw source a negative one
    """
    alpha = check_scalar(alpha, 'alpha')
    x, inc = _source(X, B, inc, 'maxpy')
    if B.size:
        B.backend.axpy(B.size, alpha, x, inc, B._data)


def mcopy(X: Any, B: Matrix, *, inc: int = 1) -> None:
    """
    Copy into B: ``B[k] = X[k * inc]``.

    A matrix source must have B's shape. A raw source may use any
    non-negative stride; ``inc=0`` fills B with ``X[0]``.
    """
    x, inc = _source(X, B, inc, 'mcopy')
    if B.size:
        B.backend.copy(B.size, x, inc, B._data)


def _vector(v: Any, A: Matrix, name: str) -> tuple[Buffer | None, int]:
    if isinstance(v, Matrix):
        _check_backend(A, v)
        return v._data, v.size
    values = check_array(v, name).ravel()
    return values, values.size


def mger(alpha: float, x: Any, y: Any, A: Matrix) -> None:
    """
    Rank-one update ``A += alpha * x * y^T``.

    x and y are matrices (any shape, read as flat vectors) or raw buffers
    with numel(x) == A.rows and numel(y) == A.cols.
    """
    alpha = check_scalar(alpha, 'alpha')
    x_data, x_len = _vector(x, A, 'x')
    y_data, y_len = _vector(y, A, 'y')
    check_vector_length(x_len, A.rows, 'x', 'mger')
    check_vector_length(y_len, A.cols, 'y', 'mger')
    if A.size:
        A.backend.ger(A.rows, A.cols, alpha, x_data, y_data, A._data)


def dot(A: Matrix, B: Matrix) -> float:
    """Sum of elementwise products of two same-shape matrices."""
    _check_backend(A, B)
    check_same_shape(A.shape, B.shape, 'dot')
    if not A.size:
        return 0.0
    return A.backend.dot(A.size, A._data, B._data)


def norm(A: Matrix) -> float:
    """Frobenius norm."""
    if not A.size:
        return 0.0
    return A.backend.nrm2(A.size, A._data)


def tanh(A: Matrix) -> None:
    """Apply the hyperbolic tangent to every element of A in place."""
    if A.size:
        A.backend.tanh(A.size, A._data)


def transpose(A: Matrix) -> Matrix:
    """Fresh temporary holding A transposed."""
    return A.transpose()


def allclose(A: Matrix, B: Matrix, *, tier: ToleranceTier | None = None) -> bool:
    """
    Tolerance comparison for results produced by different backends.

    Unlike ``A == B`` this accepts operands from different backends. By
    default the tier of the less precise backend is used.

    Args:
        A: First matrix
        B: Second matrix
        tier: Tolerance tier overriding the default

    Returns:
        False when shapes differ, otherwise whether every element pair
        satisfies ``|a - b| <= atol + rtol * |b|``
    """
    if A.shape != B.shape:
        return False
    if tier is None:
        tier = loosest(
            select_tolerance(A.backend.name),
            select_tolerance(B.backend.name),
        )
    if not A.size:
        return True
    return bool(np.allclose(A._data, B._data, rtol=tier.rtol, atol=tier.atol))
