"""
Tolerance tiers for cross-backend numerical comparison.

Matrix equality (``A == B``) is bit-exact and never consults these tiers.
Different providers may sum in different orders (blocked BLAS kernels,
fused multiply-add), so results produced by two backends are compared
with allclose() and the tier of the less precise of the two:

- REF FP64 (reference): naive loops, the baseline
- NumPy FP64: vectorised NumPy, may reorder sums
- BLAS FP64: SciPy BLAS kernels, blocked and possibly multithreaded

Used by the test suite, the benchmark and pymatrix.dense.operators.allclose.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# Reference loops compared with themselves: exact
REF_FP64 = ToleranceTier(
    rtol=0.0,
    atol=0.0,
    name='ref_fp64',
    description='Reference loops, bit-exact against itself',
)

# NumPy kernels: pairwise summation and BLAS-backed matmul
NUMPY_FP64 = ToleranceTier(
    rtol=1e-12,
    atol=1e-14,
    name='numpy_fp64',
    description='NumPy double precision, summation order may differ from reference',
)

# SciPy BLAS: blocked, possibly multithreaded kernels
BLAS_FP64 = ToleranceTier(
    rtol=1e-12,
    atol=1e-14,
    name='blas_fp64',
    description='BLAS double precision, blocked summation order',
)

# Unregistered providers get the loosest double-precision tier
EXTERNAL_FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='external_fp64',
    description='Third-party provider, numerically compatible, not bit-identical',
)

_TIERS = {
    'ref': REF_FP64,
    'numpy': NUMPY_FP64,
    'blas': BLAS_FP64,
}


def select_tolerance(backend_name: str) -> ToleranceTier:
    """Select the tolerance tier for a given backend."""
    return _TIERS.get(backend_name, EXTERNAL_FP64)


def loosest(*tiers: ToleranceTier) -> ToleranceTier:
    """Return the tier with the largest rtol (ties broken by atol)."""
    if not tiers:
        raise ValueError("loosest() requires at least one tier")
    return max(tiers, key=lambda t: (t.rtol, t.atol))
