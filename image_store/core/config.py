"""
Configuration for the image feature store.
Values are read from the environment (and a local .env file) once at import.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# Storage targets
PROD_DB_PATH = os.getenv("IMAGE_STORE_DB_PATH", "./data/image_features.db")
TEST_DB_PATH = os.getenv("IMAGE_STORE_TEST_DB_PATH", "./data/image_features_test.db")

# Seconds sqlite waits on a locked file before raising "database is locked"
DB_BUSY_TIMEOUT_SEC = float(os.getenv("DB_BUSY_TIMEOUT_SEC", "5.0"))

# Validate records with pydantic before writing them
SCHEMA_VALIDATION_STRICT = os.getenv("SCHEMA_VALIDATION_STRICT", "false").lower() == "true"

_TARGETS = {
    "prod": PROD_DB_PATH,
    "test": TEST_DB_PATH,
}


def get_target(name: str) -> str:
    """Resolve a named storage target ("prod" or "test") to its database path."""
    try:
        return _TARGETS[name]
    except KeyError:
        raise ValueError(f"Unknown storage target: {name!r} (expected one of {sorted(_TARGETS)})")


def debug_enabled():
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "false").lower() == "true"


def ensure_db_directory(db_path: str):
    """Ensure the directory holding a database file exists."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
