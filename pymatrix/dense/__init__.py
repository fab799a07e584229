"""
Dense row-major float64 matrices with explicit ownership.

Public API:
    RefMatrix, NumPyMatrix, BLASMatrix: matrix classes, one per backend
    matrix_type(choice) -> matrix class
    move(A), copy(A): hand a value to a consuming operator
    mprod, msub, hprod, maxpy, mger, mcopy: non-allocating operations
    dot, norm, tanh, transpose, numel, allclose
    dump/dumps/load/loads/save/load_file: binary codec

Example:
    >>> from pymatrix.dense import BLASMatrix, move, copy
    >>> A = BLASMatrix.from_rows([[0, 1], [-1, 0]])
    >>> B = A * A                  # fresh temporary, A untouched
    >>> C = copy(A) + B            # reuses the copy's storage
    >>> D = 2.0 * move(C)          # scales C's storage, C is now empty
"""

from pymatrix.dense.matrix import Matrix, Temporary, copy, move, numel, seed
from pymatrix.dense.view import RowView
from pymatrix.dense.operators import (
    allclose,
    dot,
    hprod,
    maxpy,
    mcopy,
    mger,
    mprod,
    msub,
    norm,
    tanh,
    transpose,
)
from pymatrix.dense.serialization import dump, dumps, load, load_file, loads, save
from pymatrix.dense.registry import (
    BackendChoice,
    BLASMatrix,
    NumPyMatrix,
    RefMatrix,
    available_backends,
    matrix_type,
    register_backend,
)

__all__ = [
    # Entity
    "Matrix",
    "Temporary",
    "RowView",
    "move",
    "copy",
    "numel",
    "seed",
    # Backends
    "RefMatrix",
    "NumPyMatrix",
    "BLASMatrix",
    "BackendChoice",
    "matrix_type",
    "register_backend",
    "available_backends",
    # Operations
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
    "allclose",
    # Serialization
    "dump",
    "dumps",
    "load",
    "loads",
    "save",
    "load_file",
]
