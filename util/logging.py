"""
Structured logging for image store operations.
"""

import logging
from typing import Any, Dict, List


class StructuredLogger:
    """Structured logger for schema, feature and description operations."""

    def __init__(self, name: str = "image_store"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        if status == "failed":
            self.logger.error(message)
        else:
            self.logger.info(message)

    def log_feature_operation(self, operation: str, camera_id: str, details: Dict[str, Any] = None, status: str = "success"):
        """Log an image feature operation. Blob contents are never logged."""
        log_details = {"camera_id": camera_id}
        if details:
            log_details.update(details)

        self.log_operation(f"feature.{operation}", status, log_details)

    def log_description_operation(self, operation: str, image_name: str, camera_id: str = None, status: str = "success"):
        """Log an image description operation."""
        details = {"image_name": image_name}
        if camera_id is not None:
            details["camera_id"] = camera_id

        self.log_operation(f"description.{operation}", status, details)

    def log_schema_validation_error(self, operation: str, errors: List[Any], target_identifier: str = None):
        """Log schema validation errors with sanitized details."""
        sanitized_errors = []
        for error in errors:
            if isinstance(error, dict):
                sanitized_error = {k: v for k, v in error.items() if k in ('loc', 'msg', 'type')}
                sanitized_errors.append(sanitized_error)
            else:
                sanitized_errors.append(str(error)[:100])  # Limit error message length

        log_details = {
            "operation": operation,
            "errors": sanitized_errors,
            "error_count": len(sanitized_errors)
        }
        if target_identifier:
            log_details["target_identifier"] = target_identifier

        self.log_operation("schema_validation.error", "rejected", log_details)

    # Standard logging methods for compatibility
    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)

    def set_level(self, level: int) -> None:
        """Change the level of the underlying logger."""
        self.logger.setLevel(level)


# Global logger instance
logger = StructuredLogger()
