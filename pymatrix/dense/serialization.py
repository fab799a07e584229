"""
Binary serialization codec.

Layout, native byte order, no magic number or version tag:

    [rows: int64][cols: int64][rows * cols float64, row-major]

An empty matrix serializes to the 16-byte header alone. Reading the
same bytes back reproduces every element bit for bit.
"""

import io
import struct
import sys
from os import PathLike
from pathlib import Path
from typing import BinaryIO

import numpy as np

from pymatrix.core.exceptions import SerializationError
from pymatrix.dense.matrix import Matrix

HEADER = struct.Struct('=qq')
ITEMSIZE = np.dtype(np.float64).itemsize
MAX_ELEMENTS = sys.maxsize // ITEMSIZE
CHUNK_SIZE = 1 << 24

__all__ = ["dump", "dumps", "load", "loads", "save", "load_file", "HEADER"]


def dump(matrix: Matrix, fp: BinaryIO) -> None:
    """Write matrix to a binary stream."""
    fp.write(HEADER.pack(matrix.rows, matrix.cols))
    if matrix.size:
        fp.write(matrix.data.tobytes())


def dumps(matrix: Matrix) -> bytes:
    """Serialize matrix to bytes."""
    buffer = io.BytesIO()
    dump(matrix, buffer)
    return buffer.getvalue()


def _read_exact(fp: BinaryIO, count: int, what: str) -> bytearray:
    # at most CHUNK_SIZE bytes per read
    data = bytearray()
    while len(data) < count:
        chunk = fp.read(min(count - len(data), CHUNK_SIZE))
        if not chunk:
            break
        data += chunk
    if len(data) != count:
        raise SerializationError(
            f"truncated {what}: expected {count} bytes, got {len(data)}",
            expected_bytes=count,
            actual_bytes=len(data),
        )
    return data


def load(fp: BinaryIO, target: type[Matrix] | Matrix) -> Matrix:
    """
    Read one matrix from a binary stream.

    Args:
        fp: Stream positioned at a matrix header
        target: A matrix class, to build a new persistent matrix, or an
            existing matrix, which is released, reallocated to the stream's
            shape and filled

    Returns:
        The populated matrix

    Raises:
        SerializationError: If the header or payload is truncated, or the
            header holds negative or unaddressable dimensions. target
            is unchanged when the header is rejected.
    """
    rows, cols = HEADER.unpack(_read_exact(fp, HEADER.size, 'header'))
    if rows < 0 or cols < 0:
        raise SerializationError(f"invalid header: negative shape {rows}x{cols}")
    if cols and rows > MAX_ELEMENTS // cols:
        raise SerializationError(
            f"invalid header: {rows}x{cols} exceeds the addressable size",
            expected_bytes=rows * cols * ITEMSIZE,
        )

    payload = _read_exact(fp, rows * cols * ITEMSIZE, 'payload')
    values = np.frombuffer(payload, dtype=np.float64)

    if isinstance(target, Matrix):
        cls = type(target)._persistent()
    else:
        cls = target._persistent()

    if rows == 0 and cols == 0:
        result = cls()
    else:
        result = cls(rows, cols)
    if result.size:
        cls.backend.copy(result.size, values, 1, result.data)

    if isinstance(target, Matrix):
        return target.move_from(result)
    return result


def loads(data: bytes, target: type[Matrix] | Matrix) -> Matrix:
    """Deserialize one matrix from bytes; see load()."""
    return load(io.BytesIO(data), target)


def save(matrix: Matrix, path: str | PathLike) -> None:
    """Write matrix to a file."""
    with Path(path).open('wb') as fp:
        dump(matrix, fp)


def load_file(path: str | PathLike, target: type[Matrix] | Matrix) -> Matrix:
    """Read a matrix from a file; see load()."""
    with Path(path).open('rb') as fp:
        return load(fp, target)
