"""
SQLite connection handling and table creation for the image feature store.
Every call opens its own connection against the database path it is given.
"""

import sqlite3
from contextlib import contextmanager
from typing import Generator

from . import config
from .errors import ImageStoreError, SchemaNotInitialized, StorageBusy, StorageUnavailable
from util.logging import logger

FEATURE_TABLE = "image_features"
DESCRIPTION_TABLE = "image_description"


def _translate(db_path: str, error: sqlite3.DatabaseError) -> ImageStoreError:
    """Map a sqlite error onto the store's error kinds."""
    message = str(error)
    lowered = message.lower()
    if "locked" in lowered or "busy" in lowered:
        return StorageBusy(db_path, message)
    if "no such table" in lowered:
        return SchemaNotInitialized(f"{message} (database '{db_path}' not initialized)")
    return StorageUnavailable(db_path, message)


@contextmanager
def get_db(db_path: str) -> Generator[sqlite3.Connection, None, None]:
    """Get a SQLite connection to db_path, closed when the block exits.

    sqlite errors raised inside the block are re-raised as store errors,
    except IntegrityError which callers translate with table context.
    """
    logger.debug(f"Opening connection to '{db_path}' (busy timeout {config.DB_BUSY_TIMEOUT_SEC}s)")
    try:
        conn = sqlite3.connect(db_path, timeout=config.DB_BUSY_TIMEOUT_SEC)
    except sqlite3.Error as e:
        raise StorageUnavailable(db_path, str(e)) from e

    try:
        yield conn
    except sqlite3.IntegrityError:
        raise
    except sqlite3.DatabaseError as e:
        raise _translate(db_path, e) from e
    finally:
        conn.close()
        logger.debug(f"Closed connection to '{db_path}'")


def init_feature_table(db_path: str):
    """Create the image_features table if it does not exist."""
    with get_db(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS image_features (
                id TEXT PRIMARY KEY,
                keypoints BLOB,
                descriptors BLOB,
                motion_mean REAL,
                motion_std REAL,
                created_at_utc TEXT NOT NULL,
                img_filename TEXT,
                camera_id TEXT NOT NULL
            )
        ''')
        conn.commit()
    logger.log_operation("schema.ensure", "success", {"table": FEATURE_TABLE, "db_path": db_path})


def init_description_table(db_path: str):
    """Create the image_description table if it does not exist."""
    with get_db(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS image_description (
                image_name TEXT PRIMARY KEY,
                datetime TEXT NOT NULL,
                camera_id TEXT NOT NULL,
                anomaly TEXT
            )
        ''')
        conn.commit()
    logger.log_operation("schema.ensure", "success", {"table": DESCRIPTION_TABLE, "db_path": db_path})


def init_db(db_path: str):
    """Initialize the database with both tables."""
    init_feature_table(db_path)
    init_description_table(db_path)


def drop_feature_table(db_path: str):
    """Drop the image_features table. Used to reset a test database."""
    with get_db(db_path) as conn:
        conn.execute(f"DROP TABLE IF EXISTS {FEATURE_TABLE}")
        conn.commit()
    logger.log_operation("schema.drop", "success", {"table": FEATURE_TABLE, "db_path": db_path})


def health_check(db_path: str) -> bool:
    """Check that both tables exist in the database."""
    try:
        with get_db(db_path) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT name FROM sqlite_master WHERE type='table';")
            table_names = [row[0] for row in cursor.fetchall()]
            return FEATURE_TABLE in table_names and DESCRIPTION_TABLE in table_names
    except ImageStoreError as e:
        logger.warning(f"Health check failed for '{db_path}': {e}")
        return False
