"""Shared schema primitives for MCP tool request/response models."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Type

from pydantic import BaseModel, ConfigDict, field_validator

from talentflow.utils.validation import MAX_PAGE_SIZE, MIN_PAGE, MIN_PAGE_SIZE


def validate_enum_value(value: Optional[str], enum_cls: Type[Enum]) -> Optional[str]:
    """Check a plain string against the values of a ``(str, Enum)`` class."""
    if value is None:
        return None
    allowed = [member.value for member in enum_cls]
    if value not in allowed:
        raise ValueError(f"'{value}' is not allowed. Allowed values are: {', '.join(allowed)}")
    return value


class StrictIgnoreRequest(BaseModel):
    """Request base with strict typing and ignored unknown fields."""

    model_config = ConfigDict(extra="ignore", strict=True)


class StrictResponse(BaseModel):
    """Response/result base with strict typing and forbidden unknown fields."""

    model_config = ConfigDict(extra="forbid")


class StoredRecord(BaseModel):
    """Base for records read back from the store.

    Unknown stored keys are dropped so tool output keeps a fixed schema.
    """

    model_config = ConfigDict(extra="ignore")


class PageRequestMixin(BaseModel):
    """Reusable page/page_size fields for list requests."""

    page: int = MIN_PAGE
    page_size: int = MIN_PAGE_SIZE

    @field_validator("page")
    @classmethod
    def validate_page(cls, value: int) -> int:
        if value < MIN_PAGE:
            raise ValueError(f"{value} is below minimum of {MIN_PAGE}")
        return value

    @field_validator("page_size")
    @classmethod
    def validate_page_size(cls, value: int) -> int:
        if value < MIN_PAGE_SIZE:
            raise ValueError(f"{value} is below minimum of {MIN_PAGE_SIZE}")
        if value > MAX_PAGE_SIZE:
            raise ValueError(f"{value} exceeds maximum of {MAX_PAGE_SIZE}")
        return value


class PaginationMeta(StrictResponse):
    """Pagination block returned alongside every list page."""

    page: int
    page_size: int
    total: int
    total_pages: int
