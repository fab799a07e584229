"""
Input validation utilities for pymatrix.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent. Every check runs before a
backend primitive touches a buffer, which is what makes the composition
layer all-or-nothing.

Design principles:
    - Validators see shapes and counts, never buffers they could mutate
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Operation names included in all error messages
"""

import numbers
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pymatrix.core.exceptions import DimensionError, StrideError, ValidationError

Shape = tuple[int, int]


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.float64]:
    """
    Validate and convert input to a float64 numpy array.

    Accepts any array-like and converts to numpy array. Rejects inputs
    that result in object dtype (indicating mixed types or non-numeric data).

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with float64 dtype

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if not np.issubdtype(result.dtype, np.number) or np.issubdtype(result.dtype, np.complexfloating):
        raise ValidationError(
            f"{name}: non-real dtype {result.dtype}, expected real numeric data"
        )

    return np.ascontiguousarray(result, dtype=np.float64)


def check_dims(m: Any, n: Any) -> Shape:
    """
    Verify matrix dimensions are non-negative integers.

    Args:
        m: Row count
        n: Column count

    Returns:
        (m, n) as plain ints

    Raises:
        ValidationError: If either dimension is not an integer or is negative
    """
    for label, value in (('rows', m), ('cols', n)):
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise ValidationError(
                f"{label}: expected a non-negative integer, got {type(value).__name__}"
            )
        if value < 0:
            raise ValidationError(f"{label}: must be non-negative, got {value}")
    return int(m), int(n)


def check_scalar(value: Any, name: str) -> float:
    """
    Verify a scale factor is a real number.

    Raises:
        ValidationError: If value is not a real number
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValidationError(f"{name}: expected a real scalar, got {type(value).__name__}")
    return float(value)


def check_same_shape(a: Shape, b: Shape, operation: str) -> None:
    """
    Verify two operands have identical shapes.

    Args:
        a: Shape of the first operand
        b: Shape of the second operand
        operation: Operation name for error messages

    Raises:
        DimensionError: If shapes differ
    """
    if a != b:
        raise DimensionError(
            f"{operation}: shape mismatch, {a[0]}x{a[1]} vs {b[0]}x{b[1]}",
            operation=operation,
            expected=a,
            actual=b,
        )


def check_inner_dims(a: Shape, b: Shape, operation: str) -> None:
    """
    Verify A's column count equals B's row count for A * B.

    Raises:
        DimensionError: If the inner dimensions differ
    """
    if a[1] != b[0]:
        raise DimensionError(
            f"{operation}: inner dimensions differ, "
            f"{a[0]}x{a[1]} * {b[0]}x{b[1]}",
            operation=operation,
            expected=a[1],
            actual=b[0],
        )


def check_gemm_shapes(
    trans_a: bool,
    trans_b: bool,
    a: Shape,
    b: Shape,
    c: Shape,
    ldc: int | None = None,
) -> tuple[int, int, int]:
    """
    Verify shapes for C = alpha * op(A) * op(B).

    op(X) is X transposed when the matching flag is set. Without ldc the
    destination must be exactly op(A).rows x op(B).cols. With ldc the
    destination's row stride must equal ldc and op(B) may be narrower than
    C, in which case only the leading columns of C are written.

    Args:
        trans_a: Transpose A
        trans_b: Transpose B
        a: Shape of A
        b: Shape of B
        c: Shape of the destination
        ldc: Leading dimension of the destination, or None

    Returns:
        (m, n, k) with op(A) m x k and op(B) k x n

    Raises:
        DimensionError: If any dimension is incompatible
    """
    m, k = (a[1], a[0]) if trans_a else a
    kb, n = (b[1], b[0]) if trans_b else b

    if m != c[0]:
        raise DimensionError(
            f"mprod: destination has {c[0]} rows, op(A) has {m}",
            operation='mprod',
            expected=m,
            actual=c[0],
        )
    if k != kb:
        raise DimensionError(
            f"mprod: inner dimensions differ, op(A) is {m}x{k}, op(B) is {kb}x{n}",
            operation='mprod',
            expected=k,
            actual=kb,
        )
    if ldc is None:
        if n != c[1]:
            raise DimensionError(
                f"mprod: destination has {c[1]} columns, op(B) has {n}",
                operation='mprod',
                expected=n,
                actual=c[1],
            )
    else:
        if ldc != c[1]:
            raise DimensionError(
                f"mprod: ldc={ldc} must equal destination columns {c[1]}",
                operation='mprod',
                expected=c[1],
                actual=ldc,
            )
        if n > c[1]:
            raise DimensionError(
                f"mprod: op(B) has {n} columns, destination holds only {c[1]}",
                operation='mprod',
                expected=c[1],
                actual=n,
            )
    return m, n, k


def check_vector_length(length: int, expected: int, name: str, operation: str) -> None:
    """
    Verify a vector operand has the expected number of elements.

    Raises:
        DimensionError: If the element count differs
    """
    if length != expected:
        raise DimensionError(
            f"{operation}: {name} has {length} elements, expected {expected}",
            operation=operation,
            expected=expected,
            actual=length,
        )


def check_unit_stride(inc: int, name: str) -> None:
    """
    Verify a matrix operand is read with unit stride.

    Raises:
        StrideError: If inc is not 1
    """
    if inc != 1:
        raise StrideError(
            f"{name}: matrix operands require unit stride, got inc={inc}",
            stride=inc,
            allowed='1',
        )


def check_raw_stride(inc: Any, name: str) -> int:
    """
    Verify a raw-buffer stride is a non-negative integer.

    Zero is allowed and broadcasts the first element.

    Raises:
        StrideError: If inc is negative or not an integer
    """
    if isinstance(inc, bool) or not isinstance(inc, numbers.Integral) or inc < 0:
        raise StrideError(
            f"{name}: stride must be a non-negative integer, got {inc!r}",
            stride=inc if isinstance(inc, numbers.Integral) else None,
            allowed='>= 0',
        )
    return int(inc)


def check_raw_length(length: int, n: int, inc: int, name: str, operation: str) -> None:
    """
    Verify a raw buffer holds every element a strided read of n items touches.

    Raises:
        DimensionError: If the buffer is too short
    """
    required = 0 if n == 0 else (n - 1) * inc + 1
    if length < required:
        raise DimensionError(
            f"{operation}: {name} holds {length} elements, "
            f"reading {n} with stride {inc} needs {required}",
            operation=operation,
            expected=required,
            actual=length,
        )
