#!/usr/bin/env python3
"""
Smoke-test driver for the image feature store.

Creates both tables on the production and test databases, stores one image
description and one image feature in production, then reads the feature back
by camera id.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from image_store.core.config import debug_enabled, ensure_db_directory, get_target
from image_store.core.dao import get_feature_by_camera, insert_description, insert_feature
from image_store.core.db import init_description_table, init_feature_table
from image_store.core.errors import ImageStoreError
from image_store.core.schema import ImageDescription, ImageFeature, KeyPointData
from util.logging import logger


def run_demo(prod_db: str, test_db: str) -> ImageFeature:
    """Run the demo against the given databases and return the fetched feature (or None)."""
    for db_path in (prod_db, test_db):
        ensure_db_directory(db_path)
        init_feature_table(db_path)
        init_description_table(db_path)

    insert_description(ImageDescription(
        image_name="test_image.jpg",
        datetime="2024-06-12T12:34:56Z",
        camera_id="camera_1",
        anomaly=None
    ), prod_db)

    insert_feature(ImageFeature(
        id="1",
        keypoints=[
            KeyPointData(x=0.0, y=0.0, size=1.0, angle=0.0),
            KeyPointData(x=1.0, y=1.0, size=2.0, angle=45.0),
        ],
        descriptors=list(range(10)),
        motion_mean=0.5,
        motion_std=0.1,
        created_at_utc="2024-06-12T12:34:56Z",
        img_filename="image_1.jpg",
        camera_id="camera_1"
    ), prod_db)

    return get_feature_by_camera("camera_1", prod_db)


def main():
    parser = argparse.ArgumentParser(
        description="Store and read back a sample image feature record"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging (also enabled by DEBUG=true)"
    )
    args = parser.parse_args()

    if args.verbose or debug_enabled():
        logger.set_level(logging.DEBUG)

    try:
        feature = run_demo(get_target("prod"), get_target("test"))
    except ImageStoreError as e:
        print(f"ERROR: {e}")
        return 1

    if feature is not None:
        print(f"Retrieved image feature: {feature}")
    else:
        print("No image feature found for the given camera_id.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
