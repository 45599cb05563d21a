"""
Error model for the TalentFlow store and MCP tools.

Provides structured error codes, typed exceptions for the store contract,
and sanitized error messages.
"""

import os
import re
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Structured error codes for the MCP tools."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    DUPLICATE_KEY = "DUPLICATE_KEY"
    INVALID_POSITION = "INVALID_POSITION"
    TRANSIENT_WRITE = "TRANSIENT_WRITE"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    DB_ERROR = "DB_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ToolError(Exception):
    """Base exception for tool errors with structured error information."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        retryable: bool = False,
        original_error: Optional[Exception] = None,
        operation: Optional[str] = None,
        entity_id: Optional[Any] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize a tool error.

        Args:
            code: The error code
            message: Human-readable error message
            retryable: Whether the operation can be retried
            original_error: The original exception if this wraps another error
            operation: Name of the operation that failed
            entity_id: Identifier of the record the operation targeted
            details: Optional structured details (e.g. per-field messages)
        """
        self.code = code
        self.message = message
        self.retryable = retryable
        self.original_error = original_error
        self.operation = operation
        self.entity_id = entity_id
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert error to dictionary format for MCP response."""
        error: Dict[str, Any] = {
            "code": self.code.value,
            "message": self.message,
            "retryable": self.retryable,
        }
        if self.operation is not None:
            error["operation"] = self.operation
        if self.entity_id is not None:
            error["entity_id"] = self.entity_id
        if self.details:
            error["details"] = self.details
        return {"error": error}


class NotFoundError(ToolError):
    """An operation required an existing record and none was found."""

    def __init__(self, message: str, operation: Optional[str] = None, entity_id: Any = None):
        super().__init__(
            code=ErrorCode.NOT_FOUND,
            message=message,
            retryable=False,
            operation=operation,
            entity_id=entity_id,
        )


class DuplicateKeyError(ToolError):
    """An insert-only operation targeted an existing explicit key."""

    def __init__(self, message: str, operation: Optional[str] = None, entity_id: Any = None):
        super().__init__(
            code=ErrorCode.DUPLICATE_KEY,
            message=message,
            retryable=False,
            operation=operation,
            entity_id=entity_id,
        )


class InvalidPositionError(ToolError):
    """A reorder was requested with a position outside the current range."""

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(
            code=ErrorCode.INVALID_POSITION,
            message=message,
            retryable=False,
            operation=operation,
        )


class TransientWriteError(ToolError):
    """A write failed before commit; nothing was persisted and a retry is safe."""

    def __init__(self, message: str, operation: Optional[str] = None, entity_id: Any = None):
        super().__init__(
            code=ErrorCode.TRANSIENT_WRITE,
            message=message,
            retryable=True,
            operation=operation,
            entity_id=entity_id,
        )


class StoreUnavailableError(ToolError):
    """The record store is not initialized or cannot be reached."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            code=ErrorCode.STORE_UNAVAILABLE,
            message=message,
            retryable=False,
            original_error=original_error,
            operation=operation,
        )


def sanitize_path(path: str) -> str:
    """
    Sanitize file paths to avoid exposing sensitive system details.

    Returns only the basename for absolute paths, keeps relative paths.

    Args:
        path: The file path to sanitize

    Returns:
        Sanitized path string
    """
    if os.path.isabs(path):
        return os.path.basename(path)
    return path


def sanitize_sql_error(error_msg: str) -> str:
    """
    Sanitize SQL error messages to remove sensitive details.

    Removes SQL fragments and keeps only actionable information.

    Args:
        error_msg: The original error message

    Returns:
        Sanitized error message
    """
    sanitized = re.sub(r"SQL:.*", "", error_msg, flags=re.IGNORECASE)
    sanitized = re.sub(r'"[^"]*SELECT[^"]*"', "[SQL query]", sanitized, flags=re.IGNORECASE)
    sanitized = re.sub(r"'[^']*SELECT[^']*'", "[SQL query]", sanitized, flags=re.IGNORECASE)

    # Unquoted statements
    sanitized = re.sub(
        r"\b(SELECT|INSERT|UPDATE|DELETE)\b.*", "[SQL query]", sanitized, flags=re.IGNORECASE
    )

    sanitized = re.sub(r"/[^\s]+/", "[path]/", sanitized)

    return sanitized.strip()


def sanitize_stack_trace(error_msg: str) -> str:
    """
    Remove stack traces from error messages.

    Args:
        error_msg: The original error message

    Returns:
        Error message without stack trace
    """
    lines = error_msg.split("\n")
    if lines:
        return lines[0].strip()
    return error_msg


def create_validation_error(message: str, details: Optional[Dict[str, Any]] = None) -> ToolError:
    """
    Create a validation error.

    Args:
        message: Description of the validation failure
        details: Optional per-field messages

    Returns:
        ToolError with VALIDATION_ERROR code
    """
    return ToolError(
        code=ErrorCode.VALIDATION_ERROR, message=message, retryable=False, details=details
    )


def create_not_found_error(
    entity: str, entity_id: Any, operation: Optional[str] = None
) -> NotFoundError:
    """
    Create a not-found error for a missing record.

    Args:
        entity: Human-readable entity name (e.g. "Job")
        entity_id: The identifier that was looked up
        operation: Name of the operation that required the record

    Returns:
        NotFoundError with NOT_FOUND code
    """
    return NotFoundError(
        message=f"{entity} not found: {entity_id}",
        operation=operation,
        entity_id=entity_id,
    )


def create_store_unavailable_error(
    db_path: Optional[str] = None,
    operation: Optional[str] = None,
    original_error: Optional[Exception] = None,
) -> StoreUnavailableError:
    """
    Create a store-unavailable error.

    Args:
        db_path: The database path that could not be used, if known
        operation: Name of the operation that needed the store
        original_error: The original exception

    Returns:
        StoreUnavailableError with STORE_UNAVAILABLE code
    """
    if db_path:
        message = f"Record store unavailable: {sanitize_path(db_path)}"
    else:
        message = "Record store unavailable: store is not open"
    return StoreUnavailableError(
        message=message, operation=operation, original_error=original_error
    )


def create_db_error(
    message: str, retryable: bool = False, original_error: Optional[Exception] = None
) -> ToolError:
    """
    Create a database error.

    Args:
        message: Description of the database error
        retryable: Whether the operation can be retried
        original_error: The original exception

    Returns:
        ToolError with DB_ERROR code
    """
    sanitized_message = sanitize_sql_error(message)
    sanitized_message = sanitize_stack_trace(sanitized_message)

    return ToolError(
        code=ErrorCode.DB_ERROR,
        message=f"Database error: {sanitized_message}",
        retryable=retryable,
        original_error=original_error,
    )


def create_internal_error(message: str, original_error: Optional[Exception] = None) -> ToolError:
    """
    Create an internal error for unexpected exceptions.

    Args:
        message: Description of the internal error
        original_error: The original exception

    Returns:
        ToolError with INTERNAL_ERROR code
    """
    sanitized_message = sanitize_stack_trace(message)

    return ToolError(
        code=ErrorCode.INTERNAL_ERROR,
        message=f"Internal error: {sanitized_message}",
        retryable=True,
        original_error=original_error,
    )
