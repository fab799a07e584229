"""
Backend selection for dense matrices.

The backend tag of a matrix is its class: RefMatrix, NumPyMatrix and
BLASMatrix each bind one capability provider at class level. Code picks
a class once (directly or through matrix_type) and every operation on its
instances dispatches to that provider with no per-call check.

Example:
    >>> M = matrix_type('auto')       # PYMATRIX_BACKEND, else 'blas'
    >>> A = M.randn(64, 64)
    >>> B = A * A
"""

import logging
import os
from typing import Literal

from pymatrix.core.capabilities import ALL_PRIMITIVES
from pymatrix.core.exceptions import ValidationError
from pymatrix.core.protocols import Backend
from pymatrix.dense.backends import BLASBackend, NumPyBackend, ReferenceBackend
from pymatrix.dense.matrix import Matrix

logger = logging.getLogger(__name__)

# Type alias for backend selection
BackendChoice = Literal['auto', 'ref', 'numpy', 'blas']

ENV_VAR = 'PYMATRIX_BACKEND'
DEFAULT_BACKEND = 'blas'


class RefMatrix(Matrix):
    """Matrix backed by the reference loops."""
    __slots__ = ()
    backend = ReferenceBackend()


class NumPyMatrix(Matrix):
    """Matrix backed by vectorised NumPy."""
    __slots__ = ()
    backend = NumPyBackend()


class BLASMatrix(Matrix):
    """Matrix backed by scipy.linalg.blas."""
    __slots__ = ()
    backend = BLASBackend()


_REGISTRY: dict[str, type[Matrix]] = {
    cls.backend.name: cls for cls in (RefMatrix, NumPyMatrix, BLASMatrix)
}


def _missing_primitives(backend: Backend) -> list[str]:
    return sorted(
        primitive
        for primitive in ALL_PRIMITIVES
        if not backend.supports(primitive) or not callable(getattr(backend, primitive, None))
    )


def register_backend(backend: Backend) -> type[Matrix]:
    """
    Register an external capability provider and build its matrix class.

    Args:
        backend: Object implementing every primitive of the Backend protocol

    Returns:
        New Matrix subclass bound to backend

    Raises:
        ValidationError: If any primitive is missing
        ValueError: If a backend with the same name is already registered
    """
    name = backend.name
    if name in _REGISTRY:
        raise ValueError(f"Backend {name!r} is already registered")

    missing = _missing_primitives(backend)
    if missing:
        raise ValidationError(
            f"backend {name!r} does not implement: {', '.join(missing)}"
        )

    cls = type(
        f"{name.capitalize()}Matrix",
        (Matrix,),
        {'__slots__': (), 'backend': backend, '__module__': __name__},
    )
    _REGISTRY[name] = cls
    logger.debug("registered backend %r as %s", name, cls.__name__)
    return cls


def available_backends() -> tuple[str, ...]:
    """Names of every registered backend, in registration order."""
    return tuple(_REGISTRY)


def matrix_type(choice: BackendChoice | str = 'auto') -> type[Matrix]:
    """
    Resolve a backend choice to its matrix class.

    Args:
        choice: Backend to use:
            - 'auto': The PYMATRIX_BACKEND environment variable if set,
              else 'blas'
            - 'ref': Reference loops
            - 'numpy': Vectorised NumPy
            - 'blas': SciPy BLAS
            - any name passed to register_backend()

    Returns:
        The matrix class bound to that backend

    Raises:
        ValueError: If unknown backend specified
    """
    if choice == 'auto':
        choice = os.environ.get(ENV_VAR) or DEFAULT_BACKEND
    try:
        return _REGISTRY[choice]
    except KeyError:
        raise ValueError(
            f"Unknown backend: {choice!r} (available: {', '.join(_REGISTRY)})"
        ) from None
