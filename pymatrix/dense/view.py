"""
Non-owning row accessor.

A RowView borrows a contiguous run of ``cols`` elements from its owner's
buffer. It never allocates or frees and is only valid while the owner
still holds the buffer the view was taken from. Python cannot enforce
that lifetime statically, so every access re-checks it and raises
InvalidStateError once the owner's storage has been moved or released.
"""

from __future__ import annotations

import numbers
import operator
from typing import TYPE_CHECKING, Iterator

from pymatrix.core.exceptions import DimensionError, InvalidStateError
from pymatrix.core.validation import check_scalar

if TYPE_CHECKING:
    from pymatrix.dense.matrix import Matrix


class RowView:
    """
    Borrowed view of one matrix row.

    ``A[i][j]`` reads element (i, j). For one-column matrices the view also
    behaves as the scalar A(i, 0): ``float(A[i])``, ``A[i] == v``,
    ``2 * A[i]``, ``A[i] > 1.5``. Arithmetic yields plain floats.
    """

    __slots__ = ('_owner', '_buffer', '_offset', '_width')

    def __init__(self, owner: Matrix, row: int):
        self._owner = owner
        self._buffer = owner._data
        self._width = owner._n
        self._offset = row * owner._n

    def _live(self):
        if self._owner._data is not self._buffer:
            raise InvalidStateError(
                "row view used after its matrix's storage was moved or released"
            )
        return self._buffer

    def _column(self, j) -> int:
        j = operator.index(j)
        if not 0 <= j < self._width:
            raise IndexError(f"column index {j} out of range for row of width {self._width}")
        return j

    def __getitem__(self, j) -> float:
        buffer = self._live()
        return float(buffer[self._offset + self._column(j)])

    def __setitem__(self, j, value) -> None:
        buffer = self._live()
        buffer[self._offset + self._column(j)] = check_scalar(value, 'value')

    def __len__(self) -> int:
        return self._width

    def __iter__(self) -> Iterator[float]:
        buffer = self._live()
        for j in range(self._width):
            yield float(buffer[self._offset + j])

    def __float__(self) -> float:
        self._require_scalar()
        return float(self._live()[self._offset])

    def assign(self, value) -> None:
        """Write the scalar of a one-column row."""
        self._require_scalar()
        self._live()[self._offset] = check_scalar(value, 'value')

    def _require_scalar(self) -> None:
        if self._width != 1:
            raise DimensionError(
                f"row of width {self._width} is not a scalar; index a column as A[i][j]",
                operation='scalar access',
                expected=1,
                actual=self._width,
            )

    def tolist(self) -> list[float]:
        return list(self)

    def __eq__(self, other):
        if isinstance(other, RowView):
            return self.tolist() == other.tolist()
        if isinstance(other, numbers.Real):
            return self._width == 1 and float(self) == other
        return NotImplemented

    __hash__ = None

    # ------------------------------------------------------------------
    # Scalar arithmetic and ordering (one-column rows only)
    # ------------------------------------------------------------------

    @staticmethod
    def _operand(other) -> float | None:
        if isinstance(other, RowView):
            return float(other)
        if isinstance(other, numbers.Real):
            return float(other)
        return None

    def _binary(self, other, op, reflected=False):
        value = self._operand(other)
        if value is None:
            return NotImplemented
        scalar = float(self)
        return op(value, scalar) if reflected else op(scalar, value)

    def __add__(self, other):
        return self._binary(other, operator.add)

    def __radd__(self, other):
        return self._binary(other, operator.add, reflected=True)

    def __sub__(self, other):
        return self._binary(other, operator.sub)

    def __rsub__(self, other):
        return self._binary(other, operator.sub, reflected=True)

    def __mul__(self, other):
        return self._binary(other, operator.mul)

    def __rmul__(self, other):
        return self._binary(other, operator.mul, reflected=True)

    def __truediv__(self, other):
        return self._binary(other, operator.truediv)

    def __rtruediv__(self, other):
        return self._binary(other, operator.truediv, reflected=True)

    def __pow__(self, other):
        return self._binary(other, operator.pow)

    def __rpow__(self, other):
        return self._binary(other, operator.pow, reflected=True)

    def __lt__(self, other):
        return self._binary(other, operator.lt)

    def __le__(self, other):
        return self._binary(other, operator.le)

    def __gt__(self, other):
        return self._binary(other, operator.gt)

    def __ge__(self, other):
        return self._binary(other, operator.ge)

    def __neg__(self) -> float:
        return -float(self)

    def __pos__(self) -> float:
        return float(self)

    def __abs__(self) -> float:
        return abs(float(self))

    def __repr__(self) -> str:
        try:
            values = self.tolist()
        except InvalidStateError:
            return "RowView(<released>)"
        return f"RowView({values})"
