"""
Assessment access layer.

One assessment per job, stored wholesale under the job id, and append-only
candidate responses checked against the assessment's questions.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from talentflow.db.record_store import RecordStore
from talentflow.db.schema import ASSESSMENT_RESPONSES, ASSESSMENTS, CANDIDATES, JOBS
from talentflow.models.errors import create_not_found_error, create_validation_error
from talentflow.schemas.assessments import (
    AssessmentPayload,
    AssessmentRecord,
    AssessmentResponseRecord,
    SubmitAssessmentResponseRequest,
)
from talentflow.utils.assessment_validation import validate_responses
from talentflow.utils.pydantic_error_mapper import parse_model
from talentflow.utils.validation import get_current_utc_timestamp, validate_record_id

logger = logging.getLogger(__name__)

FailureInjector = Callable[[str, Any], None]


class AssessmentsAccess:
    """Assessment and assessment-response operations bound to one record store."""

    def __init__(self, store: RecordStore, failure_injector: Optional[FailureInjector] = None):
        self.store = store
        self.failure_injector = failure_injector

    def _fail_point(self, operation: str, entity_id: Any = None) -> None:
        if self.failure_injector is not None:
            self.failure_injector(operation, entity_id)

    def get_assessment(self, job_id: str) -> Optional[Dict[str, Any]]:
        """Return the job's assessment, or None if it has none yet."""
        validate_record_id(job_id, "job_id")
        assessment = self.store.get(ASSESSMENTS, job_id)
        if assessment is None:
            return None
        return AssessmentRecord.model_validate(assessment).model_dump()

    def save_assessment(self, job_id: str, assessment: Dict[str, Any]) -> Dict[str, Any]:
        """
        Replace the job's assessment.

        Raises:
            NotFoundError: If the job does not exist
        """
        validate_record_id(job_id, "job_id")
        payload = parse_model(AssessmentPayload, assessment)

        with self.store.transaction() as txn:
            if txn.get(JOBS, job_id) is None:
                raise create_not_found_error("Job", job_id, operation="save_assessment")

            record = {
                "job_id": job_id,
                **payload.to_record_fields(),
                "updated_at": get_current_utc_timestamp(),
            }
            txn.put(ASSESSMENTS, record)
            self._fail_point("save_assessment", job_id)

        question_count = sum(len(section["questions"]) for section in record["sections"])
        logger.info("Saved assessment for %s (%d questions)", job_id, question_count)
        return AssessmentRecord.model_validate(record).model_dump()

    def submit_assessment_response(
        self, job_id: str, candidate_id: str, responses: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Validate and append a candidate's answers.

        Raises:
            NotFoundError: If the assessment or the candidate does not exist
            ToolError: VALIDATION_ERROR with per-question details when any
                answer fails its question's rules
        """
        request = parse_model(
            SubmitAssessmentResponseRequest,
            {"job_id": job_id, "candidate_id": candidate_id, "responses": responses},
        )
        validate_record_id(request.job_id, "job_id")
        validate_record_id(request.candidate_id, "candidate_id")

        with self.store.transaction() as txn:
            assessment = txn.get(ASSESSMENTS, request.job_id)
            if assessment is None:
                raise create_not_found_error(
                    "Assessment", request.job_id, operation="submit_assessment_response"
                )
            if txn.get(CANDIDATES, request.candidate_id) is None:
                raise create_not_found_error(
                    "Candidate", request.candidate_id, operation="submit_assessment_response"
                )

            errors = validate_responses(assessment, request.responses)
            if errors:
                raise create_validation_error(
                    "Assessment response failed validation", details=errors
                )

            record = {
                "job_id": request.job_id,
                "candidate_id": request.candidate_id,
                "responses": request.responses,
                "submitted_at": get_current_utc_timestamp(),
            }
            record["id"] = txn.add(ASSESSMENT_RESPONSES, record)
            self._fail_point("submit_assessment_response", request.candidate_id)

        logger.info(
            "Stored assessment response %s for %s on %s",
            record["id"],
            request.candidate_id,
            request.job_id,
        )
        return AssessmentResponseRecord.model_validate(record).model_dump()

    def get_assessment_responses(
        self, candidate_id: str, job_id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        Return a candidate's submitted responses, oldest first.

        Args:
            candidate_id: Candidate whose responses to return
            job_id: Optional filter to one job's assessment
        """
        validate_record_id(candidate_id, "candidate_id")
        if job_id is not None:
            validate_record_id(job_id, "job_id")

        records = self.store.get_by_index(ASSESSMENT_RESPONSES, "candidate_id", candidate_id)
        if job_id is not None:
            records = [r for r in records if r["job_id"] == job_id]
        return [AssessmentResponseRecord.model_validate(r).model_dump() for r in records]
