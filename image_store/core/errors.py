"""
Error kinds raised by the schema manager, codec and repository.
"""


class ImageStoreError(Exception):
    """Base class for all image store errors."""
    retryable = False


class StorageUnavailable(ImageStoreError):
    """The backing database file cannot be opened or accessed."""

    def __init__(self, db_path: str, message: str):
        self.db_path = db_path
        super().__init__(f"Storage unavailable at '{db_path}': {message}")


class StorageBusy(StorageUnavailable):
    """The database file is locked by another writer. Safe to retry."""
    retryable = True


class SchemaNotInitialized(ImageStoreError):
    """A repository call hit a table that was never created."""
    pass


class UniqueViolation(ImageStoreError):
    """Primary key conflict on insert."""

    def __init__(self, table: str, key: str):
        self.table = table
        self.key = key
        super().__init__(f"Duplicate primary key '{key}' in table '{table}'")


class DecodeError(ImageStoreError):
    """A stored blob could not be parsed back into its structured form."""
    pass


class RecordValidationError(ImageStoreError):
    """A record was rejected by strict schema validation."""

    def __init__(self, operation: str, errors):
        self.operation = operation
        self.errors = errors
        super().__init__(f"Validation failed for {operation}: {len(errors)} error(s)")
