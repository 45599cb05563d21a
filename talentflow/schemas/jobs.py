"""Pydantic schemas for the job tools."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import field_validator

from talentflow.models.status import JobStatus
from talentflow.schemas.common import (
    PageRequestMixin,
    PaginationMeta,
    StoredRecord,
    StrictIgnoreRequest,
    StrictResponse,
    validate_enum_value,
)
from talentflow.utils.validation import DEFAULT_JOB_SORT, DEFAULT_JOBS_PAGE_SIZE, JOB_SORT_KEYS


def _clean_string_list(values: list[str], dedupe: bool) -> list[str]:
    cleaned = []
    for value in values:
        value = value.strip()
        if not value:
            continue
        if dedupe and value in cleaned:
            continue
        cleaned.append(value)
    return cleaned


class GetJobsRequest(PageRequestMixin, StrictIgnoreRequest):
    """Request schema for get_jobs."""

    search: Optional[str] = None
    status: Optional[str] = None
    page_size: int = DEFAULT_JOBS_PAGE_SIZE
    sort: str = DEFAULT_JOB_SORT

    @field_validator("status")
    @classmethod
    def validate_status(cls, value: Optional[str]) -> Optional[str]:
        if value == "":
            return None
        return validate_enum_value(value, JobStatus)

    @field_validator("sort")
    @classmethod
    def validate_sort(cls, value: str) -> str:
        if value not in JOB_SORT_KEYS:
            raise ValueError(
                f"'{value}' is not allowed. Allowed values are: {', '.join(JOB_SORT_KEYS)}"
            )
        return value


class _JobFieldsMixin(StrictIgnoreRequest):
    """Shared cleanup for the editable job fields."""

    @field_validator("title", check_fields=False)
    @classmethod
    def validate_title(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        if not value:
            raise ValueError("cannot be empty")
        return value

    @field_validator("status", check_fields=False)
    @classmethod
    def validate_status(cls, value: Optional[str]) -> Optional[str]:
        return validate_enum_value(value, JobStatus)

    @field_validator("tags", check_fields=False)
    @classmethod
    def clean_tags(cls, value: Optional[list[str]]) -> Optional[list[str]]:
        if value is None:
            return None
        return _clean_string_list(value, dedupe=True)

    @field_validator("requirements", check_fields=False)
    @classmethod
    def clean_requirements(cls, value: Optional[list[str]]) -> Optional[list[str]]:
        if value is None:
            return None
        return _clean_string_list(value, dedupe=False)


class CreateJobRequest(_JobFieldsMixin):
    """Request schema for create_job."""

    title: str
    description: str = ""
    status: str = JobStatus.ACTIVE.value
    tags: list[str] = []
    requirements: list[str] = []


class UpdateJobRequest(_JobFieldsMixin):
    """Request schema for update_job.

    Only the editable fields are accepted; ``id``, ``slug``, ``order`` and
    timestamps are ignored if supplied.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    tags: Optional[list[str]] = None
    requirements: Optional[list[str]] = None

    def changes(self) -> dict[str, Any]:
        """Return only the fields the caller actually supplied."""
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}


class ReorderJobsRequest(StrictIgnoreRequest):
    """Request schema for reorder_jobs."""

    from_order: int
    to_order: int


class JobRecord(StoredRecord):
    """Job record schema returned by the job tools."""

    id: str
    title: str
    slug: str
    status: str
    order: int
    tags: list[str] = []
    description: str = ""
    requirements: list[str] = []
    created_at: str
    updated_at: str


class JobListResponse(StrictResponse):
    """Success response schema for get_jobs."""

    data: list[JobRecord]
    pagination: PaginationMeta


class ReorderJobsResponse(StrictResponse):
    """Success response schema for reorder_jobs."""

    success: bool
    moved_count: int
