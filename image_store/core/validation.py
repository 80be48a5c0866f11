"""
Pydantic request models used to validate records before they are written.
Only enforced when SCHEMA_VALIDATION_STRICT is enabled.
"""

import math
from typing import List, Optional

from pydantic import BaseModel, field_validator


class KeyPointModel(BaseModel):
    x: float
    y: float
    size: float
    angle: float

    @field_validator('size')
    @classmethod
    def size_must_not_be_negative(cls, v):
        if v < 0:
            raise ValueError('size cannot be negative')
        return v


class ImageFeatureRequest(BaseModel):
    id: str
    keypoints: List[KeyPointModel]
    descriptors: bytes
    motion_mean: float
    motion_std: float
    created_at_utc: str
    img_filename: Optional[str] = None
    camera_id: str

    @field_validator('id', 'camera_id', 'created_at_utc')
    @classmethod
    def must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('field cannot be empty')
        return v

    @field_validator('motion_mean', 'motion_std')
    @classmethod
    def must_be_finite(cls, v):
        if not math.isfinite(v):
            raise ValueError('motion statistics must be finite')
        return v

    @field_validator('motion_std')
    @classmethod
    def std_must_not_be_negative(cls, v):
        if v < 0:
            raise ValueError('motion_std cannot be negative')
        return v


class ImageDescriptionRequest(BaseModel):
    image_name: str
    datetime: str
    camera_id: str
    anomaly: Optional[str] = None

    @field_validator('image_name', 'datetime', 'camera_id')
    @classmethod
    def must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('field cannot be empty')
        return v
