"""
pymatrix: dense matrix arithmetic with explicit storage ownership.

Write numeric code with ordinary operators (``A * B``, ``A + B``,
``alpha * A``) while deciding at each call site whether a result reuses
an operand's storage or allocates. Matrices are dense, row-major and
float64, backed by an interchangeable capability provider.

Submodules:
    dense: Matrix entity, operators, serialization and backends
    core: Exceptions, backend protocol, validation, timing, tolerances
    benchmark: Matrix-product benchmark and its command-line driver
    diagnostics: Stream redirection and log-file helpers
"""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

from pymatrix import dense
from pymatrix.dense import (
    BLASMatrix,
    NumPyMatrix,
    RefMatrix,
    copy,
    matrix_type,
    move,
)

__all__ = [
    "__version__",
    "dense",
    "RefMatrix",
    "NumPyMatrix",
    "BLASMatrix",
    "matrix_type",
    "move",
    "copy",
]
