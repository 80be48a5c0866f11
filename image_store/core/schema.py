"""
Record types persisted by the image feature store.
"""

from dataclasses import dataclass
from typing import List, Optional, Union
import numpy as np


def _f32(value) -> float:
    # Stored as float32; normalize so a record equals its reloaded copy
    return float(np.float32(value))


@dataclass
class KeyPointData:
    """A detected point of interest: pixel position, scale and orientation (degrees)."""
    x: float
    y: float
    size: float
    angle: float

    def __post_init__(self):
        self.x = _f32(self.x)
        self.y = _f32(self.y)
        self.size = _f32(self.size)
        self.angle = _f32(self.angle)

    @classmethod
    def from_cv(cls, keypoint) -> 'KeyPointData':
        """Build from an OpenCV-style keypoint exposing ``pt``, ``size`` and ``angle``."""
        x, y = keypoint.pt
        return cls(x=x, y=y, size=keypoint.size, angle=keypoint.angle)


@dataclass
class ImageFeature:
    """One capture event's features for a camera."""
    id: str
    keypoints: List[KeyPointData]
    descriptors: Union[bytes, bytearray, List[int]]
    motion_mean: float
    motion_std: float
    created_at_utc: str
    camera_id: str
    img_filename: Optional[str] = None

    def __post_init__(self):
        self.keypoints = list(self.keypoints)
        self.descriptors = bytes(self.descriptors)
        self.motion_mean = float(self.motion_mean)
        self.motion_std = float(self.motion_std)


@dataclass
class ImageDescription:
    image_name: str
    datetime: str
    camera_id: str
    anomaly: Optional[str] = None
