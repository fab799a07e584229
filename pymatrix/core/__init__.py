"""
Core infrastructure for pymatrix.

This module provides shared abstractions and utilities used by the dense
matrix domain and by external capability providers.

Key components:
    protocols: Backend protocol (the primitive-operation contract)
    capabilities: Primitive names
    exceptions: Exception hierarchy
    validation: Shape, stride and input validators
    compute: Timing and tolerance tiers
"""

from pymatrix.core.protocols import Backend
from pymatrix.core.exceptions import (
    PyMatrixError,
    ValidationError,
    DimensionError,
    StrideError,
    OwnershipError,
    BackendMismatchError,
    AllocationError,
    InvalidStateError,
    SerializationError,
)

__all__ = [
    # Protocols
    "Backend",
    # Exceptions
    "PyMatrixError",
    "ValidationError",
    "DimensionError",
    "StrideError",
    "OwnershipError",
    "BackendMismatchError",
    "AllocationError",
    "InvalidStateError",
    "SerializationError",
]
