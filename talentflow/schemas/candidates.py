"""Pydantic schemas for the candidate and timeline tools."""

from __future__ import annotations

import re
from typing import Any, Optional

from pydantic import field_validator

from talentflow.models.status import CandidateStage
from talentflow.schemas.common import (
    PageRequestMixin,
    PaginationMeta,
    StoredRecord,
    StrictIgnoreRequest,
    StrictResponse,
    validate_enum_value,
)
from talentflow.utils.validation import DEFAULT_CANDIDATES_PAGE_SIZE

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _validate_email(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not _EMAIL_PATTERN.match(value):
        raise ValueError(f"'{value}' is not a valid email address")
    return value


class GetCandidatesRequest(PageRequestMixin, StrictIgnoreRequest):
    """Request schema for get_candidates."""

    search: Optional[str] = None
    stage: Optional[str] = None
    job_id: Optional[str] = None
    page_size: int = DEFAULT_CANDIDATES_PAGE_SIZE

    @field_validator("stage")
    @classmethod
    def validate_stage(cls, value: Optional[str]) -> Optional[str]:
        if value == "":
            return None
        return validate_enum_value(value, CandidateStage)

    @field_validator("job_id")
    @classmethod
    def validate_job_id(cls, value: Optional[str]) -> Optional[str]:
        if value == "":
            return None
        return value


class CreateCandidateRequest(StrictIgnoreRequest):
    """Request schema for create_candidate."""

    name: str
    email: str
    job_id: str
    resume: str = ""

    @field_validator("name", "job_id")
    @classmethod
    def validate_required_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("cannot be empty")
        return value.strip()

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _validate_email(value)


class UpdateCandidateRequest(StrictIgnoreRequest):
    """Request schema for update_candidate.

    Editable fields are name, email, stage and resume; ``notes``, ``job_id``
    and timestamps are ignored if supplied.
    """

    name: Optional[str] = None
    email: Optional[str] = None
    stage: Optional[str] = None
    resume: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        if not value.strip():
            raise ValueError("cannot be empty")
        return value.strip()

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: Optional[str]) -> Optional[str]:
        return _validate_email(value)

    @field_validator("stage")
    @classmethod
    def validate_stage(cls, value: Optional[str]) -> Optional[str]:
        return validate_enum_value(value, CandidateStage)

    def changes(self) -> dict[str, Any]:
        """Return only the fields the caller actually supplied."""
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}


class CandidateRecord(StoredRecord):
    """Candidate record schema returned by the candidate tools."""

    id: str
    name: str
    email: str
    job_id: str
    stage: str
    applied_at: str
    updated_at: str
    resume: str = ""
    notes: list[Any] = []


class TimelineEventRecord(StoredRecord):
    """Timeline event schema returned by get_candidate_timeline."""

    id: int
    candidate_id: str
    action: str
    stage: str
    timestamp: str
    note: str = ""


class CandidateListResponse(StrictResponse):
    """Success response schema for get_candidates."""

    data: list[CandidateRecord]
    pagination: PaginationMeta
