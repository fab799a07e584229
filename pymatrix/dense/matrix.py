"""
Dense matrix entity and its value categories.

A Matrix exclusively owns a flat row-major float64 buffer plus its row
and column counts. Exactly one object owns a given buffer at any time:
copies are always explicit and O(mn), moves are O(1) and leave the source
in the canonical empty state (0 x 0, no buffer).

Matrix is generic over its capability provider. Concrete classes
(RefMatrix, NumPyMatrix, BLASMatrix in pymatrix.dense.registry) bind a
provider as a class attribute, so dispatch is a plain attribute lookup
with no per-call tag check.

Value categories:
    Persistent values are ordinary Matrix instances the caller still owns.
    Temporaries (instances of ``M.Temporary``) are values the caller has
    relinquished: the result of move(A), copy(A), A * B and transpose().

    Operators that can reuse storage (``alpha * X``, ``+``, ``-``) mutate
    the consumable operand in place and hand its buffer to a new temporary,
    leaving the consumed object empty. ``A + B`` and ``A - B`` with two
    persistent operands raise OwnershipError instead of allocating behind
    the caller's back.

Example:
    >>> from pymatrix.dense import RefMatrix, move, copy
    >>> A = RefMatrix.from_rows([[0, 1], [-1, 0]])
    >>> B = RefMatrix.from_rows([[1, 1], [1, 1]])
    >>> C = copy(A) + B        # A untouched, one allocation
    >>> D = move(A) + B        # A emptied, no allocation
"""

from __future__ import annotations

import numbers
import operator
from typing import Any, ClassVar, Iterator

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pymatrix.core.exceptions import (
    BackendMismatchError,
    DimensionError,
    InvalidStateError,
    OwnershipError,
)
from pymatrix.core.protocols import Backend, Buffer
from pymatrix.core.validation import (
    check_array,
    check_dims,
    check_inner_dims,
    check_same_shape,
    check_scalar,
)
from pymatrix.dense.view import RowView

# Process-wide generator behind Matrix.randn(); reseeded only by seed()
_rng = np.random.default_rng()

_ZERO = np.zeros(1, dtype=np.float64)


def seed(value: int | None) -> None:
    """Reseed the generator used by Matrix.randn()."""
    global _rng
    _rng = np.random.default_rng(value)


class Matrix:
    """
    Dense row-major matrix owning its storage.

    Construction:
        M()                 # canonical empty matrix, no storage
        M(m, n=1)           # m x n, uninitialized (values are NOT zeroed)
        M.from_rows(rows)   # from nested sequences
        M.randn(m, n=1)     # standard-normal entries
        A.copy()            # deep copy
        M.take(A)           # O(1) move, A becomes empty

    where M is a concrete class such as RefMatrix. The generic Matrix
    cannot be instantiated.

    Scalar multiplication consumes its matrix operand from either side:
    ``A * alpha`` empties A exactly like ``alpha * A``. Use ``A *= alpha``
    to scale while keeping the name.
    """

    __slots__ = ('_m', '_n', '_data')

    backend: ClassVar[Backend | None] = None
    Temporary: ClassVar[type[Matrix]]
    _family: ClassVar[type[Matrix]]
    _consumable: ClassVar[bool] = False

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if cls._consumable or cls.__dict__.get('backend') is None:
            return
        cls._family = cls
        cls.Temporary = type(
            f"{cls.__name__}Temporary",
            (Temporary, cls),
            {
                '__slots__': (),
                '__module__': cls.__module__,
                '__qualname__': f"{cls.__qualname__}.Temporary",
            },
        )

    def __init__(self, m: int | None = None, n: int = 1):
        backend = type(self).backend
        if backend is None:
            raise TypeError(
                f"{type(self).__name__} is generic over its backend; "
                f"use a concrete class such as RefMatrix or matrix_type(...)"
            )
        if m is None:
            self._m = 0
            self._n = 0
            self._data = None
            return
        m, n = check_dims(m, n)
        self._m = m
        self._n = n
        self._data = backend.allocate(m * n)

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def _persistent(cls) -> type[Matrix]:
        return cls._family if cls._consumable else cls

    @classmethod
    def _adopt(cls, source: Matrix) -> Matrix:
        """New instance of cls taking source's buffer; source becomes empty."""
        result = cls.__new__(cls)
        result._m = source._m
        result._n = source._n
        result._data = source._data
        source._m = 0
        source._n = 0
        source._data = None
        return result

    @classmethod
    def take(cls, source: Matrix) -> Matrix:
        """
        Move-construct a persistent matrix in O(1).

        Args:
            source: Matrix or temporary whose buffer is transferred

        Returns:
            Persistent matrix owning source's former buffer. source is left
            in the empty state.
        """
        target = cls._persistent()
        _check_backend(target, source)
        return target._adopt(source)

    @classmethod
    def from_array(cls, array: ArrayLike) -> Matrix:
        """
        Build a matrix from a 1-D (column vector) or 2-D array-like.

        Raises:
            ValidationError: If the input is not real numeric data
            DimensionError: If the input has more than two dimensions
        """
        values = check_array(array, 'array')
        if values.ndim == 1:
            values = values.reshape(-1, 1)
        elif values.ndim == 0 or values.ndim > 2:
            raise DimensionError(
                f"array: expected 1D or 2D data, got {values.ndim}D with shape {values.shape}",
                operation='from_array',
                expected=2,
                actual=values.ndim,
            )
        m, n = values.shape
        result = cls(m, n)
        if result.size:
            cls.backend.copy(result.size, values.ravel(), 1, result._data)
        return result

    @classmethod
    def from_rows(cls, rows: ArrayLike) -> Matrix:
        """Build a matrix from a sequence of equal-length rows."""
        return cls.from_array(rows)

    @classmethod
    def randn(cls, m: int, n: int = 1) -> Matrix:
        """m x n matrix of independent standard-normal entries."""
        result = cls(m, n)
        if result.size:
            samples = _rng.standard_normal(result.size)
            cls.backend.copy(result.size, samples, 1, result._data)
        return result

    def _clone_into(self, cls: type[Matrix]) -> Matrix:
        result = cls(self._m, self._n)
        if result.size:
            self.backend.copy(result.size, self._data, 1, result._data)
        return result

    def copy(self) -> Matrix:
        """Deep copy with independent storage (persistent)."""
        return self._clone_into(self._persistent())

    def move_from(self, source: Matrix) -> Matrix:
        """
        Move-assign: release this matrix's buffer and take source's.

        Self-move is a no-op.

        Returns:
            self
        """
        if source is self:
            return self
        _check_backend(self, source)
        self._release()
        self._m = source._m
        self._n = source._n
        self._data = source._data
        source._m = 0
        source._n = 0
        source._data = None
        return self

    def _release(self) -> None:
        data = self._data
        self._m = 0
        self._n = 0
        self._data = None
        self.backend.deallocate(data)

    def __copy__(self):
        raise OwnershipError(
            "a shallow copy would share the buffer between two owners; "
            "use A.copy(), copy(A) or move(A)"
        )

    def __deepcopy__(self, memo: dict) -> Matrix:
        return self.copy()

    # ------------------------------------------------------------------
    # Shape and raw access
    # ------------------------------------------------------------------

    @property
    def rows(self) -> int:
        return self._m

    @property
    def cols(self) -> int:
        return self._n

    @property
    def shape(self) -> tuple[int, int]:
        return (self._m, self._n)

    @property
    def size(self) -> int:
        """Number of elements (rows * cols)."""
        return self._m * self._n

    @property
    def data(self) -> Buffer | None:
        """
        The owned flat row-major buffer, or None when there is no storage.

        Borrowed: do not keep it past a move or reallocation of this matrix.
        """
        return self._data

    @property
    def is_empty(self) -> bool:
        """True for the canonical empty state (0 x 0, no storage)."""
        return self._m == 0 and self._n == 0

    @property
    def is_temporary(self) -> bool:
        return self._consumable

    def to_numpy(self) -> NDArray[np.float64]:
        """Independent 2-D copy of the values."""
        if self._data is None:
            return np.empty((self._m, self._n), dtype=np.float64)
        return self._data.reshape(self._m, self._n).copy()

    def tolist(self) -> list[list[float]]:
        return self.to_numpy().tolist()

    # ------------------------------------------------------------------
    # Indexing
    # ------------------------------------------------------------------

    def _row(self, i) -> RowView:
        if self._data is None:
            raise InvalidStateError(
                f"cannot index a {self._m}x{self._n} matrix with no storage "
                f"(empty or moved-from)"
            )
        i = operator.index(i)
        if not 0 <= i < self._m:
            raise IndexError(f"row index {i} out of range for {self._m} rows")
        return RowView(self, i)

    def __getitem__(self, index) -> RowView | float:
        if isinstance(index, tuple):
            i, j = _split_index(index)
            return self._row(i)[j]
        return self._row(index)

    def __setitem__(self, index, value) -> None:
        if isinstance(index, tuple):
            i, j = _split_index(index)
            self._row(i)[j] = value
        else:
            self._row(index).assign(value)

    def __iter__(self) -> Iterator[RowView]:
        for i in range(self._m):
            yield self._row(i)

    # ------------------------------------------------------------------
    # Equality and in-place updates
    # ------------------------------------------------------------------

    def equals(self, other: Matrix) -> bool:
        """
        Exact equality: same shape and bit-for-bit equal elements.

        No floating-point tolerance is applied; see operators.allclose().
        """
        if self.shape != other.shape:
            return False
        if self._data is None or other._data is None:
            return self._data is None and other._data is None
        return bool(np.array_equal(self._data, other._data))

    def __eq__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.equals(other)

    __hash__ = None

    def fill(self, value: float) -> None:
        """Overwrite every element with value."""
        value = check_scalar(value, 'value')
        if self.size:
            self.backend.copy(self.size, np.array([value]), 0, self._data)

    def _accumulate(self, other: Matrix) -> None:
        _check_backend(self, other)
        check_same_shape(self.shape, other.shape, 'add')
        if self.size:
            self.backend.axpy(self.size, 1.0, other._data, 1, self._data)

    def _subtract(self, other: Matrix) -> None:
        _check_backend(self, other)
        check_same_shape(self.shape, other.shape, 'subtract')
        if self.size:
            self.backend.sub(self.size, self._data, other._data, self._data)

    def _scale(self, alpha: float) -> None:
        if self.size:
            self.backend.scal(self.size, alpha, self._data)

    def _handoff(self) -> Matrix:
        """Transfer this storage to a new temporary; self becomes empty."""
        return self.Temporary._adopt(self)

    def __iadd__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        self._accumulate(other)
        return self

    def __isub__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        self._subtract(other)
        return self

    def __imul__(self, alpha):
        if isinstance(alpha, Matrix):
            raise OwnershipError(
                "A *= B would allocate a new result; use C = A * B or mprod(A, B, C)"
            )
        if not isinstance(alpha, numbers.Real):
            return NotImplemented
        self._scale(float(alpha))
        return self

    # ------------------------------------------------------------------
    # Allocation-eliding operators
    # ------------------------------------------------------------------

    def __add__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        if self._consumable:
            self._accumulate(other)
            return self._handoff()
        if other._consumable:
            other._accumulate(self)
            return other._handoff()
        raise OwnershipError(
            "A + B needs one consumable operand: write move(A) + B to reuse A's "
            "storage, or copy(A) + B to keep A"
        )

    def __sub__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        if self._consumable:
            self._subtract(other)
            return self._handoff()
        if other._consumable:
            # A - B computed in B's storage as -(B - A)
            other._subtract(self)
            other._scale(-1.0)
            return other._handoff()
        raise OwnershipError(
            "A - B needs one consumable operand: write move(A) - B to reuse A's "
            "storage, or copy(A) - B to keep A"
        )

    def __mul__(self, other):
        if isinstance(other, Matrix):
            return self._matmul(other)
        if isinstance(other, numbers.Real):
            self._scale(float(other))
            return self._handoff()
        return NotImplemented

    def __rmul__(self, alpha):
        if isinstance(alpha, numbers.Real):
            self._scale(float(alpha))
            return self._handoff()
        return NotImplemented

    def __matmul__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self._matmul(other)

    def _matmul(self, other: Matrix) -> Matrix:
        _check_backend(self, other)
        check_inner_dims(self.shape, other.shape, 'multiply')
        result = self.Temporary(self._m, other._n)
        _dispatch_gemm(False, False, 1.0, self, other, result, self._m, other._n, self._n, other._n)
        return result

    def transpose(self) -> Matrix:
        """Fresh n x m temporary with result[i][j] == self[j][i]."""
        result = self.Temporary(self._n, self._m)
        if result.size:
            m, n = self._m, self._n
            for i in range(n):
                # row i of the result is column i of self: stride n
                self.backend.copy(m, self._data[i:], n, result._data[i * m:(i + 1) * m])
        return result

    @property
    def T(self) -> Matrix:
        return self.transpose()

    def __repr__(self) -> str:
        name = type(self).__qualname__
        if self.is_empty:
            return f"{name}(empty)"
        body = np.array2string(self.to_numpy(), separator=', ', threshold=64)
        return f"{name}({self._m}x{self._n}, {body})"


class Temporary(Matrix):
    """
    A matrix value its caller has relinquished.

    Consuming operators reuse a temporary's storage for their result.
    Each concrete matrix class M has its own ``M.Temporary`` subclass.
    """

    __slots__ = ()

    _consumable = True

    def persist(self) -> Matrix:
        """Move this value into a persistent matrix in O(1)."""
        return self._family._adopt(self)


def move(matrix: Matrix) -> Matrix:
    """
    Relinquish a matrix: O(1), no allocation.

    Returns:
        Temporary owning matrix's former buffer. matrix is left empty.
    """
    if not isinstance(matrix, Matrix):
        raise TypeError(f"move() expects a Matrix, got {type(matrix).__name__}")
    return matrix.Temporary._adopt(matrix)


def copy(matrix: Matrix) -> Matrix:
    """
    Explicit deep copy as a temporary; matrix is untouched.

    Use it to feed a persistent value to a consuming operator:
    ``copy(A) + B``.
    """
    if not isinstance(matrix, Matrix):
        raise TypeError(f"copy() expects a Matrix, got {type(matrix).__name__}")
    return matrix._clone_into(matrix.Temporary)


def numel(matrix: Matrix) -> int:
    """Number of elements (rows * cols)."""
    return matrix.size


def _split_index(index: tuple) -> tuple[Any, Any]:
    if len(index) != 2:
        raise IndexError(f"matrices take one or two indices, got {len(index)}")
    return index


def _check_backend(left, right) -> None:
    if left.backend is not right.backend:
        raise BackendMismatchError(
            f"operands use different backends: {left.backend.name!r} and {right.backend.name!r}",
            left=left.backend.name,
            right=right.backend.name,
        )


def _dispatch_gemm(
    trans_a: bool,
    trans_b: bool,
    alpha: float,
    a: Matrix,
    b: Matrix,
    c: Matrix,
    m: int,
    n: int,
    k: int,
    ldc: int,
) -> None:
    """Run a validated gemm; zero-sized products never reach the backend."""
    if m == 0 or n == 0:
        return
    backend = c.backend
    if k == 0:
        for i in range(m):
            backend.copy(n, _ZERO, 0, c._data[i * ldc:i * ldc + n])
        return
    backend.gemm(
        trans_a, trans_b, m, n, k, alpha,
        a._data, a._n, b._data, b._n, c._data, ldc,
    )
