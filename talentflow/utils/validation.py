"""
Input validation utilities and shared constants for the TalentFlow tools.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable

from talentflow.models.errors import create_validation_error

# Constants for list validation
MIN_PAGE = 1
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 1000
DEFAULT_JOBS_PAGE_SIZE = 10
DEFAULT_CANDIDATES_PAGE_SIZE = 50

# Job list sort keys; created_at sorts newest first
JOB_SORT_KEYS = ("order", "title", "created_at")
DEFAULT_JOB_SORT = "order"


def validate_record_id(value: Any, field_name: str) -> str:
    """
    Validate a string record identifier.

    Args:
        value: The identifier to validate
        field_name: Parameter name used in error messages

    Returns:
        Validated identifier

    Raises:
        ToolError: If the identifier is missing, not a string, or blank
    """
    if value is None:
        raise create_validation_error(f"Invalid {field_name}: cannot be null")

    if not isinstance(value, str):
        raise create_validation_error(
            f"Invalid {field_name} type: expected string, got {type(value).__name__}"
        )

    if not value.strip():
        raise create_validation_error(f"Invalid {field_name}: cannot be empty")

    if value != value.strip():
        raise create_validation_error(
            f"Invalid {field_name}: '{value}' contains leading or trailing whitespace"
        )

    return value


def get_current_utc_timestamp() -> str:
    """
    Generate a UTC timestamp in ISO 8601 format with millisecond precision.

    Returns a timestamp string in the format: YYYY-MM-DDTHH:MM:SS.mmmZ
    Example: 2026-02-04T03:47:36.966Z

    Fixed-width output keeps lexical order equal to chronological order,
    which the list sorts rely on.

    Returns:
        ISO 8601 UTC timestamp string with millisecond precision and Z suffix
    """
    return format_timestamp(datetime.now(timezone.utc))


def format_timestamp(moment: datetime) -> str:
    """Render an aware datetime in the store's timestamp format."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


def pick_params(args: Dict[str, Any], keys: Iterable[str]) -> Dict[str, Any]:
    """Select the named parameters that were actually supplied (non-None)."""
    return {key: args[key] for key in keys if args.get(key) is not None}


def require_mapping(args: Dict[str, Any], name: str) -> Dict[str, Any]:
    """
    Fetch a required object-valued parameter.

    Raises:
        ToolError: If the parameter is missing or not an object
    """
    if name not in args or args[name] is None:
        raise create_validation_error(f"Missing required parameter: '{name}'")
    value = args[name]
    if not isinstance(value, dict):
        raise create_validation_error(
            f"Invalid {name} type: expected object, got {type(value).__name__}"
        )
    return value
