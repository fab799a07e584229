"""
Tests for the binary codec.

Layout: [rows: int64][cols: int64][rows * cols float64], native order.
"""

import io
import struct

import numpy as np
import pytest

from pymatrix.core.exceptions import SerializationError
from pymatrix.dense import dump, dumps, load, load_file, loads, save


class TestRoundTrip:

    def test_bit_identical(self, matrix_cls, rng):
        A = matrix_cls.from_array(rng.standard_normal((4, 3)))
        B = loads(dumps(A), matrix_cls)
        assert B == A
        assert type(B) is matrix_cls

    def test_special_values(self, matrix_cls):
        A = matrix_cls.from_rows([[np.inf, -0.0, 5e-324]])
        B = loads(dumps(A), matrix_cls)
        assert B == A
        assert np.signbit(B[0][1])

    def test_empty(self, matrix_cls):
        data = dumps(matrix_cls())
        assert len(data) == 16
        assert loads(data, matrix_cls).is_empty

    def test_zero_element_shape_kept(self, matrix_cls):
        B = loads(dumps(matrix_cls(3, 0)), matrix_cls)
        assert B.shape == (3, 0)

    def test_stream(self, matrix_cls, rotation):
        stream = io.BytesIO()
        dump(rotation, stream)
        dump(rotation * rotation, stream)
        stream.seek(0)
        assert load(stream, matrix_cls) == rotation
        assert load(stream, matrix_cls) == matrix_cls.from_rows([[-1, 0], [0, -1]])

    def test_file(self, matrix_cls, rotation, tmp_path):
        path = tmp_path / "A.bin"
        save(rotation, path)
        assert path.stat().st_size == 16 + 4 * 8
        assert load_file(path, matrix_cls) == rotation

    def test_temporary_target_class_gives_persistent(self, matrix_cls, rotation):
        B = loads(dumps(rotation), matrix_cls.Temporary)
        assert type(B) is matrix_cls


class TestLayout:

    def test_header_and_payload(self, matrix_cls):
        A = matrix_cls.from_rows([[1, 2, 3], [4, 5, 6]])
        data = dumps(A)
        assert struct.unpack('=qq', data[:16]) == (2, 3)
        np.testing.assert_array_equal(np.frombuffer(data[16:], dtype=np.float64), [1, 2, 3, 4, 5, 6])

    def test_reads_foreign_bytes(self, matrix_cls):
        data = struct.pack('=qq', 1, 2) + np.array([7.0, 8.0]).tobytes()
        assert loads(data, matrix_cls).tolist() == [[7.0, 8.0]]


class TestExistingTarget:

    def test_reallocates_to_stream_shape(self, matrix_cls, rotation):
        target = matrix_cls(5, 5)
        result = loads(dumps(rotation), target)
        assert result is target
        assert target.shape == (2, 2)
        assert target == rotation

    def test_target_becomes_empty(self, matrix_cls, rotation):
        loads(dumps(matrix_cls()), rotation)
        assert rotation.is_empty


class TestMalformed:

    def test_truncated_header(self, matrix_cls):
        with pytest.raises(SerializationError, match="header") as info:
            loads(b'\x00' * 10, matrix_cls)
        assert info.value.expected_bytes == 16
        assert info.value.actual_bytes == 10

    def test_truncated_payload(self, matrix_cls, rotation):
        data = dumps(rotation)[:-8]
        with pytest.raises(SerializationError, match="payload") as info:
            loads(data, matrix_cls)
        assert info.value.expected_bytes == 32
        assert info.value.actual_bytes == 24

    def test_negative_shape(self, matrix_cls):
        with pytest.raises(SerializationError, match="negative"):
            loads(struct.pack('=qq', -1, 2), matrix_cls)

    @pytest.mark.parametrize("rows, cols", [(2**40, 2**20), (2**31, 2**31)])
    def test_unaddressable_shape(self, matrix_cls, rows, cols):
        with pytest.raises(SerializationError, match="addressable"):
            loads(struct.pack('=qq', rows, cols), matrix_cls)

    def test_huge_shape_from_file_is_truncated(self, matrix_cls, tmp_path):
        path = tmp_path / 'huge.bin'
        path.write_bytes(struct.pack('=qq', 2**20, 2**20) + b'\x00' * 64)
        with pytest.raises(SerializationError, match="payload") as info:
            load_file(path, matrix_cls)
        assert info.value.expected_bytes == 2**43
        assert info.value.actual_bytes == 64

    def test_target_untouched_on_error(self, matrix_cls, rotation):
        reference = rotation.copy()
        with pytest.raises(SerializationError):
            loads(dumps(rotation)[:20], rotation)
        assert rotation == reference
