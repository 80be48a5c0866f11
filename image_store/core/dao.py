"""
Record repository for the image_features and image_description tables.

Each function opens its own connection on the database path it is given and
closes it before returning. Tables must already exist (see db.init_db).
"""

import sqlite3
from dataclasses import asdict
from typing import Optional

from pydantic import ValidationError

from .codec import decode_descriptors, decode_keypoints, encode_descriptors, encode_keypoints
from .config import SCHEMA_VALIDATION_STRICT
from .db import DESCRIPTION_TABLE, FEATURE_TABLE, get_db
from .errors import DecodeError, ImageStoreError, RecordValidationError, UniqueViolation
from .schema import ImageDescription, ImageFeature
from .validation import ImageDescriptionRequest, ImageFeatureRequest
from util.logging import logger

_FEATURE_COLUMNS = (
    "id, keypoints, descriptors, motion_mean, motion_std, "
    "created_at_utc, img_filename, camera_id"
)


def _integrity_error(table: str, key: str, error: sqlite3.IntegrityError) -> ImageStoreError:
    if "UNIQUE" in str(error) or "PRIMARY KEY" in str(error):
        return UniqueViolation(table, key)
    return ImageStoreError(f"Constraint violation in '{table}' for '{key}': {error}")


def _validate(model, record, operation: str, identifier: str):
    """Run strict pydantic validation on a record when enabled."""
    if not SCHEMA_VALIDATION_STRICT:
        return
    try:
        model(**asdict(record))
    except ValidationError as e:
        errors = e.errors()
        logger.log_schema_validation_error(operation, errors, identifier)
        raise RecordValidationError(operation, errors) from e


def _encode_feature(record: ImageFeature):
    # Both blobs are encoded before any connection is opened
    return encode_keypoints(record.keypoints), encode_descriptors(record.descriptors)


def _write_feature(conn: sqlite3.Connection, record: ImageFeature, keypoints_blob: bytes, descriptors_blob: bytes):
    conn.execute(
        f"INSERT INTO image_features ({_FEATURE_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
        (
            record.id,
            keypoints_blob,
            descriptors_blob,
            record.motion_mean,
            record.motion_std,
            record.created_at_utc,
            record.img_filename,
            record.camera_id,
        )
    )


def insert_feature(record: ImageFeature, db_path: str):
    """Insert a new image feature row. Raises UniqueViolation if the id exists."""
    _validate(ImageFeatureRequest, record, "insert_feature", record.id)
    keypoints_blob, descriptors_blob = _encode_feature(record)

    try:
        with get_db(db_path) as conn:
            _write_feature(conn, record, keypoints_blob, descriptors_blob)
            conn.commit()
    except sqlite3.IntegrityError as e:
        error = _integrity_error(FEATURE_TABLE, record.id, e)
        logger.log_feature_operation("insert", record.camera_id, {"id": record.id, "error": str(error)}, status="failed")
        raise error from e
    except ImageStoreError as e:
        logger.log_feature_operation("insert", record.camera_id, {"id": record.id, "error": str(e)}, status="failed")
        raise

    logger.log_feature_operation("insert", record.camera_id, {
        "id": record.id,
        "keypoints": len(record.keypoints),
        "descriptor_bytes": len(record.descriptors)
    })


def delete_features_by_camera(camera_id: str, db_path: str) -> int:
    """Delete every feature row for a camera. Returns the number of rows removed."""
    try:
        with get_db(db_path) as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM image_features WHERE camera_id = ?", (camera_id,))
            removed = cursor.rowcount
            conn.commit()
    except ImageStoreError as e:
        logger.log_feature_operation("delete", camera_id, {"error": str(e)}, status="failed")
        raise

    logger.log_feature_operation("delete", camera_id, {"removed": removed})
    return removed


def replace_features_by_camera(camera_id: str, record: ImageFeature, db_path: str) -> int:
    """Replace all feature rows for a camera with a single new record.

    The delete and the insert run in one transaction: if the insert fails the
    camera's previous rows are left in place. Returns the number of rows removed.
    """
    _validate(ImageFeatureRequest, record, "replace_features_by_camera", record.id)
    keypoints_blob, descriptors_blob = _encode_feature(record)

    if record.camera_id != camera_id:
        logger.warning(
            f"Replacing features for camera '{camera_id}' with a record for camera '{record.camera_id}'"
        )

    try:
        with get_db(db_path) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute("DELETE FROM image_features WHERE camera_id = ?", (camera_id,))
                removed = cursor.rowcount
                _write_feature(conn, record, keypoints_blob, descriptors_blob)
                conn.commit()
            except sqlite3.Error:
                conn.rollback()
                raise
    except sqlite3.IntegrityError as e:
        error = _integrity_error(FEATURE_TABLE, record.id, e)
        logger.log_feature_operation("replace", camera_id, {"id": record.id, "error": str(error)}, status="failed")
        raise error from e
    except ImageStoreError as e:
        logger.log_feature_operation("replace", camera_id, {"id": record.id, "error": str(e)}, status="failed")
        raise

    logger.log_feature_operation("replace", camera_id, {"id": record.id, "removed": removed})
    return removed


def get_feature_by_camera(camera_id: str, db_path: str) -> Optional[ImageFeature]:
    """Get the first-inserted feature row for a camera, or None if it has none."""
    with get_db(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute(
            f"SELECT {_FEATURE_COLUMNS} FROM image_features WHERE camera_id = ? ORDER BY rowid LIMIT 1",
            (camera_id,)
        )
        row = cursor.fetchone()

    if row is None:
        logger.log_feature_operation("get", camera_id, {"found": False})
        return None

    row_id, keypoints_blob, descriptors_blob, motion_mean, motion_std, created_at_utc, img_filename, row_camera = row
    try:
        keypoints = decode_keypoints(keypoints_blob)
        descriptors = decode_descriptors(descriptors_blob)
        for column, value in (("motion_mean", motion_mean), ("motion_std", motion_std)):
            if not isinstance(value, (int, float)):
                raise DecodeError(f"Row '{row_id}' has non-numeric {column}: {value!r}")
    except DecodeError as e:
        logger.log_feature_operation("get", camera_id, {"id": row_id, "error": str(e)}, status="failed")
        raise

    logger.log_feature_operation("get", camera_id, {"id": row_id, "found": True})
    return ImageFeature(
        id=row_id,
        keypoints=keypoints,
        descriptors=descriptors,
        motion_mean=motion_mean,
        motion_std=motion_std,
        created_at_utc=created_at_utc,
        img_filename=img_filename,
        camera_id=row_camera,
    )


def count_features_by_camera(camera_id: str, db_path: str) -> int:
    """Count feature rows stored for a camera."""
    with get_db(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT COUNT(*) FROM image_features WHERE camera_id = ?", (camera_id,))
        return cursor.fetchone()[0]


def insert_description(record: ImageDescription, db_path: str):
    """Insert an image description. Raises UniqueViolation if image_name exists."""
    _validate(ImageDescriptionRequest, record, "insert_description", record.image_name)

    try:
        with get_db(db_path) as conn:
            conn.execute(
                "INSERT INTO image_description (image_name, datetime, camera_id, anomaly) VALUES (?, ?, ?, ?)",
                (record.image_name, record.datetime, record.camera_id, record.anomaly)
            )
            conn.commit()
    except sqlite3.IntegrityError as e:
        error = _integrity_error(DESCRIPTION_TABLE, record.image_name, e)
        logger.log_description_operation("insert", record.image_name, record.camera_id, status="failed")
        raise error from e
    except ImageStoreError:
        logger.log_description_operation("insert", record.image_name, record.camera_id, status="failed")
        raise

    logger.log_description_operation("insert", record.image_name, record.camera_id)


def get_description(image_name: str, db_path: str) -> Optional[ImageDescription]:
    """Get an image description by image name."""
    with get_db(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute(
            "SELECT image_name, datetime, camera_id, anomaly FROM image_description WHERE image_name = ?",
            (image_name,)
        )
        row = cursor.fetchone()

    if row is None:
        return None

    name, taken_at, camera_id, anomaly = row
    return ImageDescription(image_name=name, datetime=taken_at, camera_id=camera_id, anomaly=anomaly)
