"""
Dense-matrix capability providers.

Available backends:
    ReferenceBackend: pure-Python loops, the correctness reference
    NumPyBackend: vectorised NumPy
    BLASBackend: direct scipy.linalg.blas calls
"""

from pymatrix.dense.backends.reference import ReferenceBackend
from pymatrix.dense.backends.cpu import NumPyBackend
from pymatrix.dense.backends.blas import BLASBackend

__all__ = [
    "ReferenceBackend",
    "NumPyBackend",
    "BLASBackend",
]
