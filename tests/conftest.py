"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from pymatrix.dense import BLASMatrix, NumPyMatrix, RefMatrix
from pymatrix.diagnostics import log_to_file, test_log_path


MATRIX_CLASSES = (RefMatrix, NumPyMatrix, BLASMatrix)


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture(params=MATRIX_CLASSES, ids=lambda cls: cls.backend.name)
def matrix_cls(request):
    """Every built-in matrix class; tests using it run once per backend."""
    return request.param


@pytest.fixture
def rotation(matrix_cls):
    """2x2 quarter-turn rotation [[0, 1], [-1, 0]]; its square is -I."""
    return matrix_cls.from_rows([[0, 1], [-1, 0]])


@pytest.fixture
def test_log(request, tmp_path):
    """
    Per-test log file at tmp_path/log/<suite>/<test>.log.

    The 'pymatrix' logger writes to it for the duration of the test.
    """
    node = request.node
    suite = node.cls.__name__ if node.cls is not None else node.module.__name__.rsplit('.', 1)[-1]
    path = test_log_path(tmp_path, suite, node.name)
    with log_to_file(path):
        yield path
