"""Pydantic schemas for assessments and assessment responses."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from talentflow.models.status import CHOICE_QUESTION_TYPES, TEXT_QUESTION_TYPES, QuestionType
from talentflow.schemas.common import StoredRecord, StrictIgnoreRequest, validate_enum_value


class Question(BaseModel):
    """A single assessment question.

    Type-specific constraints:
    - single-choice / multi-choice: ``options`` (at least one, distinct)
    - short-text / long-text: optional ``max_length`` (positive)
    - numeric: optional ``min`` / ``max`` with min <= max

    Extra keys (e.g. a sample ``correct_answer``) are kept as-is.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    type: str
    question: str
    required: bool = False
    options: Optional[list[str]] = None
    max_length: Optional[int] = None
    min: Optional[float] = None
    max: Optional[float] = None

    @field_validator("id", "question")
    @classmethod
    def validate_non_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("cannot be empty")
        return value

    @field_validator("type")
    @classmethod
    def validate_type(cls, value: str) -> str:
        return validate_enum_value(value, QuestionType)

    @model_validator(mode="after")
    def validate_constraints(self) -> "Question":
        question_type = QuestionType(self.type)

        if question_type in CHOICE_QUESTION_TYPES:
            if not self.options:
                raise ValueError(f"Question '{self.id}' needs at least one option")
            if len(set(self.options)) != len(self.options):
                raise ValueError(f"Question '{self.id}' has duplicate options")

        if question_type in TEXT_QUESTION_TYPES and self.max_length is not None:
            if self.max_length < 1:
                raise ValueError(f"Question '{self.id}' max_length must be positive")

        if question_type == QuestionType.NUMERIC:
            if self.min is not None and self.max is not None and self.min > self.max:
                raise ValueError(f"Question '{self.id}' min must not exceed max")

        return self


class Section(BaseModel):
    """An ordered group of questions."""

    model_config = ConfigDict(extra="allow")

    id: str
    title: str
    questions: list[Question] = []


class AssessmentPayload(BaseModel):
    """Assessment content accepted by save_assessment.

    ``job_id`` and ``updated_at`` are owned by the store and ignored here.
    """

    model_config = ConfigDict(extra="ignore")

    title: str
    sections: list[Section] = []

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("cannot be empty")
        return value

    @model_validator(mode="after")
    def validate_unique_ids(self) -> "AssessmentPayload":
        section_ids = [section.id for section in self.sections]
        if len(set(section_ids)) != len(section_ids):
            raise ValueError("Section ids must be unique")

        question_ids = [q.id for section in self.sections for q in section.questions]
        duplicates = sorted({qid for qid in question_ids if question_ids.count(qid) > 1})
        if duplicates:
            raise ValueError(f"Duplicate question ids: {', '.join(duplicates)}")
        return self

    def to_record_fields(self) -> dict[str, Any]:
        """Dump title and sections, omitting unset optional constraints."""
        return self.model_dump(exclude_none=True)


class SubmitAssessmentResponseRequest(StrictIgnoreRequest):
    """Request schema for submit_assessment_response."""

    job_id: str
    candidate_id: str
    responses: dict[str, Any]


class AssessmentRecord(StoredRecord):
    """Assessment record schema returned by get_assessment/save_assessment."""

    job_id: str
    title: str
    sections: list[dict[str, Any]] = []
    updated_at: Optional[str] = None


class AssessmentResponseRecord(StoredRecord):
    """Stored candidate answers for one assessment."""

    id: int
    job_id: str
    candidate_id: str
    responses: dict[str, Any]
    submitted_at: str
