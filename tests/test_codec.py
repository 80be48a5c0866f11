"""
Tests for the keypoint and descriptor blob codec.
"""

import struct

import numpy as np
import pytest

from image_store.core.codec import (
    KEYPOINT_DTYPE,
    decode_descriptors,
    decode_keypoints,
    encode_descriptors,
    encode_keypoints,
)
from image_store.core.errors import DecodeError
from image_store.core.schema import KeyPointData


def test_keypoints_round_trip():
    """Test that keypoints survive encode/decode unchanged."""
    keypoints = [
        KeyPointData(x=0.0, y=0.0, size=1.0, angle=0.0),
        KeyPointData(x=1.0, y=1.0, size=2.0, angle=45.0),
        KeyPointData(x=640.25, y=-3.5, size=31.0, angle=359.9),
    ]
    assert decode_keypoints(encode_keypoints(keypoints)) == keypoints


def test_empty_keypoints_round_trip():
    """Test that an empty keypoint list round-trips to an empty list."""
    blob = encode_keypoints([])
    assert len(blob) == 8
    assert decode_keypoints(blob) == []


def test_keypoints_not_representable_in_float32():
    """Test that values are normalized to float32 so round trips compare equal."""
    keypoint = KeyPointData(x=0.1, y=0.2, size=0.3, angle=12.345678)
    assert keypoint.x == float(np.float32(0.1))
    assert decode_keypoints(encode_keypoints([keypoint])) == [keypoint]


def test_keypoint_blob_layout():
    """Test the count header and per-keypoint packing."""
    blob = encode_keypoints([KeyPointData(x=1.0, y=2.0, size=3.0, angle=4.0)])
    assert KEYPOINT_DTYPE.itemsize == 16
    assert struct.unpack_from("<Q", blob, 0) == (1,)
    assert struct.unpack_from("<4f", blob, 8) == (1.0, 2.0, 3.0, 4.0)


def test_descriptors_round_trip():
    """Test that descriptor bytes survive encode/decode unchanged."""
    data = bytes(range(256)) * 2
    assert decode_descriptors(encode_descriptors(data)) == data
    assert decode_descriptors(encode_descriptors(b"")) == b""


def test_descriptors_accept_int_list():
    """Test that a list of byte values is encoded like the equivalent bytes."""
    assert encode_descriptors(list(range(10))) == encode_descriptors(bytes(range(10)))


def test_descriptors_are_length_prefixed():
    """Test that the stored descriptor blob wraps the raw bytes with a length header."""
    blob = encode_descriptors(b"\x01\x02\x03")
    assert blob == struct.pack("<Q", 3) + b"\x01\x02\x03"


@pytest.mark.parametrize("blob", [
    b"",
    b"\x01\x02",
    struct.pack("<Q", 2) + b"\x00" * 16,
    struct.pack("<Q", 1) + b"\x00" * 17,
    struct.pack("<Q", 2 ** 60),
])
def test_decode_keypoints_malformed(blob):
    """Test that truncated or inconsistent keypoint blobs raise DecodeError."""
    with pytest.raises(DecodeError):
        decode_keypoints(blob)


@pytest.mark.parametrize("blob", [
    b"\x00" * 7,
    struct.pack("<Q", 5) + b"abc",
    struct.pack("<Q", 1) + b"ab",
])
def test_decode_descriptors_malformed(blob):
    """Test that truncated or inconsistent descriptor blobs raise DecodeError."""
    with pytest.raises(DecodeError):
        decode_descriptors(blob)


def test_decode_rejects_non_bytes():
    """Test that a NULL column (None) is reported as a decode failure."""
    with pytest.raises(DecodeError):
        decode_keypoints(None)
    with pytest.raises(DecodeError):
        decode_descriptors("not bytes")
