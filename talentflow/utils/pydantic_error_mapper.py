"""Convert Pydantic validation errors to project ToolError contract."""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from talentflow.models.errors import ToolError, create_validation_error

ModelT = TypeVar("ModelT", bound=BaseModel)


def _loc_to_field(loc: tuple[Any, ...]) -> str:
    parts = [str(part) for part in loc if part != "__root__"]
    return ".".join(parts)


def _clean_pydantic_message(message: str) -> str:
    if message.startswith("Value error, "):
        return message[len("Value error, ") :]
    return message


def map_pydantic_validation_error(error: ValidationError) -> ToolError:
    """Map Pydantic ValidationError to a VALIDATION_ERROR ToolError.

    The message names the first failing field; every failing field is listed
    in ``details`` when there is more than one.
    """
    issues = error.errors()
    if not issues:
        return create_validation_error("Invalid input")

    first = issues[0]
    field = _loc_to_field(first.get("loc", ()))
    message = _clean_pydantic_message(first.get("msg", "Invalid input"))

    details = None
    if len(issues) > 1:
        details = {
            (_loc_to_field(issue.get("loc", ())) or "input"): _clean_pydantic_message(
                issue.get("msg", "Invalid input")
            )
            for issue in issues
        }

    if field:
        return create_validation_error(f"Invalid {field}: {message}", details=details)
    return create_validation_error(message, details=details)


def parse_model(model_cls: type[ModelT], data: Any) -> ModelT:
    """Validate ``data`` against ``model_cls``, raising VALIDATION_ERROR on failure."""
    try:
        return model_cls.model_validate(data)
    except ValidationError as e:
        raise map_pydantic_validation_error(e) from e
