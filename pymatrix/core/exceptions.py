"""
Exception hierarchy for pymatrix.

All exceptions inherit from PyMatrixError to allow catching any
library-specific error. Domain-specific exceptions should inherit from
the appropriate base class here.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Shape and ownership errors fire before any buffer is touched
"""


class PyMatrixError(Exception):
    """Base exception for all pymatrix errors."""
    pass


class ValidationError(PyMatrixError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Matrix shapes are incompatible for the requested operation.

    Raised by every binary/ternary operation before any mutation, so the
    operands are unchanged when this fires.

    Attributes:
        operation: Name of the operation that rejected the shapes
        expected: Shape (or count) the operation required
        actual: Shape (or count) it received
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        expected: tuple[int, ...] | int | None = None,
        actual: tuple[int, ...] | int | None = None,
    ):
        super().__init__(message)
        self.operation = operation
        self.expected = expected
        self.actual = actual


class StrideError(ValidationError):
    """
    A stride argument is not allowed for this overload.

    Attributes:
        stride: The stride that was passed
        allowed: Human-readable description of accepted strides
    """

    def __init__(self, message: str, stride: int | None = None, allowed: str | None = None):
        super().__init__(message)
        self.stride = stride
        self.allowed = allowed


class OwnershipError(PyMatrixError, TypeError):
    """
    The operation would have to allocate or alias storage implicitly.

    Raised for ``A + B`` / ``A - B`` when neither operand is a temporary,
    and for shallow copies that would share a buffer between two owners.
    """
    pass


class BackendMismatchError(PyMatrixError, TypeError):
    """
    Operands are backed by different capability providers.

    Attributes:
        left: Backend name of the first operand
        right: Backend name of the second operand
    """

    def __init__(self, message: str, left: str | None = None, right: str | None = None):
        super().__init__(message)
        self.left = left
        self.right = right


class AllocationError(PyMatrixError, MemoryError):
    """
    A backend could not obtain storage for the requested shape.

    Fatal: callers should not retry.

    Attributes:
        size: Number of float64 elements requested
    """

    def __init__(self, message: str, size: int | None = None):
        super().__init__(message)
        self.size = size


class InvalidStateError(PyMatrixError):
    """
    Element access on an empty matrix, or through a stale row view.

    Raised when a matrix has no storage (never allocated, or moved from)
    and an element is requested, or when a RowView outlives the buffer it
    was borrowed from.
    """
    pass


class SerializationError(PyMatrixError):
    """
    A serialized matrix stream is malformed or truncated.

    Attributes:
        expected_bytes: Bytes required by the header or payload
        actual_bytes: Bytes actually available
    """

    def __init__(
        self,
        message: str,
        expected_bytes: int | None = None,
        actual_bytes: int | None = None,
    ):
        super().__init__(message)
        self.expected_bytes = expected_bytes
        self.actual_bytes = actual_bytes
