"""
Binary codec for the keypoint and descriptor blobs.

Both blobs share one layout: an 8-byte little-endian element count followed
by the packed elements. Keypoints are packed as four little-endian float32
fields (x, y, size, angle); descriptors are packed as raw bytes.
"""

import struct
from typing import List, Union

import numpy as np

from .errors import DecodeError
from .schema import KeyPointData

KEYPOINT_DTYPE = np.dtype([
    ("x", "<f4"),
    ("y", "<f4"),
    ("size", "<f4"),
    ("angle", "<f4"),
])

_COUNT = struct.Struct("<Q")


def _read_count(blob, label: str, item_size: int) -> int:
    """Validate the blob against its count header and return the element count."""
    if not isinstance(blob, (bytes, bytearray, memoryview)):
        raise DecodeError(f"{label} blob must be bytes, got {type(blob).__name__}")
    if len(blob) < _COUNT.size:
        raise DecodeError(f"{label} blob too short for header ({len(blob)} bytes)")

    (count,) = _COUNT.unpack_from(blob, 0)
    expected = _COUNT.size + count * item_size
    if len(blob) != expected:
        raise DecodeError(
            f"{label} blob length mismatch: header declares {count} items "
            f"({expected} bytes), got {len(blob)} bytes"
        )
    return count


def encode_keypoints(keypoints: List[KeyPointData]) -> bytes:
    """Serialize a keypoint list to a storage blob."""
    rows = [(kp.x, kp.y, kp.size, kp.angle) for kp in keypoints]
    array = np.array(rows, dtype=KEYPOINT_DTYPE)
    return _COUNT.pack(len(array)) + array.tobytes()


def decode_keypoints(blob: bytes) -> List[KeyPointData]:
    """Parse a keypoint blob produced by encode_keypoints."""
    count = _read_count(blob, "keypoints", KEYPOINT_DTYPE.itemsize)
    if count == 0:
        return []
    array = np.frombuffer(blob, dtype=KEYPOINT_DTYPE, count=count, offset=_COUNT.size)
    return [
        KeyPointData(
            x=float(row["x"]),
            y=float(row["y"]),
            size=float(row["size"]),
            angle=float(row["angle"]),
        )
        for row in array
    ]


def encode_descriptors(descriptors: Union[bytes, bytearray, List[int]]) -> bytes:
    """Serialize a descriptor byte sequence to a storage blob."""
    data = bytes(descriptors)
    return _COUNT.pack(len(data)) + data


def decode_descriptors(blob: bytes) -> bytes:
    """Parse a descriptor blob produced by encode_descriptors."""
    _read_count(blob, "descriptors", 1)
    return bytes(blob[_COUNT.size:])
