"""
Shared compute infrastructure for pymatrix.

IMPORTANT: This is NOT where capability providers live. Those go in
dense/backends/. This module contains shared timing and tolerance
infrastructure used by the benchmark, the tests and allclose().

Submodules:
    timing: Execution timing utilities
    tolerances: Cross-backend tolerance tiers
"""

from pymatrix.core.compute.timing import Timer, timed
from pymatrix.core.compute.tolerances import ToleranceTier, select_tolerance

__all__ = [
    # Timing
    "Timer",
    "timed",
    # Tolerances
    "ToleranceTier",
    "select_tolerance",
]
