"""
SQLite-backed storage for image feature and image description records.
"""

from .core.codec import decode_descriptors, decode_keypoints, encode_descriptors, encode_keypoints
from .core.dao import (
    count_features_by_camera,
    delete_features_by_camera,
    get_description,
    get_feature_by_camera,
    insert_description,
    insert_feature,
    replace_features_by_camera,
)
from .core.db import drop_feature_table, health_check, init_db, init_description_table, init_feature_table
from .core.errors import (
    DecodeError,
    ImageStoreError,
    RecordValidationError,
    SchemaNotInitialized,
    StorageBusy,
    StorageUnavailable,
    UniqueViolation,
)
from .core.schema import ImageDescription, ImageFeature, KeyPointData

__all__ = [
    'KeyPointData',
    'ImageFeature',
    'ImageDescription',
    'encode_keypoints',
    'decode_keypoints',
    'encode_descriptors',
    'decode_descriptors',
    'init_feature_table',
    'init_description_table',
    'init_db',
    'drop_feature_table',
    'health_check',
    'insert_feature',
    'delete_features_by_camera',
    'replace_features_by_camera',
    'get_feature_by_camera',
    'count_features_by_camera',
    'insert_description',
    'get_description',
    'ImageStoreError',
    'StorageUnavailable',
    'StorageBusy',
    'SchemaNotInitialized',
    'UniqueViolation',
    'DecodeError',
    'RecordValidationError',
]
