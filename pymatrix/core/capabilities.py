"""
Primitive-operation names for pymatrix backends.

This module is the SINGLE SOURCE OF TRUTH for the names of the primitive
operations every capability provider must implement. Import from here,
never use raw strings.

Usage:
    from pymatrix.core.capabilities import PRIMITIVE_GEMM, ALL_PRIMITIVES

    if backend.supports(PRIMITIVE_GEMM):
        backend.gemm(...)
"""

# Storage lifecycle
PRIMITIVE_ALLOCATE = 'allocate'
PRIMITIVE_DEALLOCATE = 'deallocate'

# y[i] = x[i*incx]
PRIMITIVE_COPY = 'copy'

# y[i] += alpha * x[i*incx]
PRIMITIVE_AXPY = 'axpy'

# A += alpha * x * y^T
PRIMITIVE_GER = 'ger'

# sum(x[i] * y[i])
PRIMITIVE_DOT = 'dot'

# out[i] = x[i] * y[i]
PRIMITIVE_HPROD = 'hprod'

# C = alpha * op(A) * op(B)
PRIMITIVE_GEMM = 'gemm'

# x[i] *= alpha
PRIMITIVE_SCAL = 'scal'

# sqrt(sum(x[i]**2))
PRIMITIVE_NRM2 = 'nrm2'

# out[i] = x[i] - y[i]
PRIMITIVE_SUB = 'sub'

# x[i] = tanh(x[i])
PRIMITIVE_TANH = 'tanh'

# All primitives as a frozenset for validation
ALL_PRIMITIVES = frozenset({
    PRIMITIVE_ALLOCATE,
    PRIMITIVE_DEALLOCATE,
    PRIMITIVE_COPY,
    PRIMITIVE_AXPY,
    PRIMITIVE_GER,
    PRIMITIVE_DOT,
    PRIMITIVE_HPROD,
    PRIMITIVE_GEMM,
    PRIMITIVE_SCAL,
    PRIMITIVE_NRM2,
    PRIMITIVE_SUB,
    PRIMITIVE_TANH,
})

__all__ = [
    'PRIMITIVE_ALLOCATE',
    'PRIMITIVE_DEALLOCATE',
    'PRIMITIVE_COPY',
    'PRIMITIVE_AXPY',
    'PRIMITIVE_GER',
    'PRIMITIVE_DOT',
    'PRIMITIVE_HPROD',
    'PRIMITIVE_GEMM',
    'PRIMITIVE_SCAL',
    'PRIMITIVE_NRM2',
    'PRIMITIVE_SUB',
    'PRIMITIVE_TANH',
    'ALL_PRIMITIVES',
]
