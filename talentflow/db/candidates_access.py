"""
Candidate access layer.

List/get/create/update over the ``candidates`` collection. Creating a
candidate and changing its stage append timeline events through the stage
transition recorder inside the same transaction as the candidate write.
"""

import logging
import uuid
from typing import Any, Callable, Dict, List, Optional

from talentflow.db.record_store import RecordStore
from talentflow.db.schema import CANDIDATES, JOBS, TIMELINE
from talentflow.db.timeline_recorder import record_application, record_stage_change
from talentflow.models.errors import create_not_found_error
from talentflow.models.status import CandidateStage
from talentflow.schemas.candidates import (
    CandidateListResponse,
    CandidateRecord,
    CreateCandidateRequest,
    GetCandidatesRequest,
    TimelineEventRecord,
    UpdateCandidateRequest,
)
from talentflow.utils.listing import filter_records, stable_sort
from talentflow.utils.pagination import paginate_results
from talentflow.utils.pydantic_error_mapper import parse_model
from talentflow.utils.validation import get_current_utc_timestamp, validate_record_id

logger = logging.getLogger(__name__)

FailureInjector = Callable[[str, Any], None]

CANDIDATE_SEARCH_FIELDS = ("name", "email")


def new_candidate_id() -> str:
    return f"candidate-{uuid.uuid4().hex[:12]}"


def to_candidate_schema(record: Dict[str, Any]) -> Dict[str, Any]:
    """Map a stored candidate to the stable output schema."""
    return CandidateRecord.model_validate(record).model_dump()


class CandidatesAccess:
    """Candidate and timeline operations bound to one record store."""

    def __init__(self, store: RecordStore, failure_injector: Optional[FailureInjector] = None):
        self.store = store
        self.failure_injector = failure_injector

    def _fail_point(self, operation: str, entity_id: Any = None) -> None:
        if self.failure_injector is not None:
            self.failure_injector(operation, entity_id)

    def list_candidates(self, **params: Any) -> Dict[str, Any]:
        """
        Return one page of candidates, most recently updated first.

        Args:
            **params: search, stage, job_id, page, page_size

        Returns:
            {"data": [...], "pagination": {...}}
        """
        request = parse_model(GetCandidatesRequest, params)

        if request.job_id:
            candidates = self.store.get_by_index(CANDIDATES, "job_id", request.job_id)
        else:
            candidates = self.store.get_all(CANDIDATES)

        candidates = filter_records(
            candidates,
            search=request.search,
            search_fields=CANDIDATE_SEARCH_FIELDS,
            equals={"stage": request.stage},
        )
        candidates = stable_sort(candidates, key=lambda c: c["updated_at"], descending=True)

        data, pagination = paginate_results(candidates, request.page, request.page_size)
        response = CandidateListResponse(
            data=[CandidateRecord.model_validate(c) for c in data], pagination=pagination
        )
        return response.model_dump()

    def get_candidate(self, candidate_id: str) -> Dict[str, Any]:
        """
        Fetch one candidate.

        Raises:
            NotFoundError: If no candidate has this id
        """
        validate_record_id(candidate_id, "candidate_id")
        candidate = self.store.get(CANDIDATES, candidate_id)
        if candidate is None:
            raise create_not_found_error("Candidate", candidate_id, operation="get_candidate")
        return to_candidate_schema(candidate)

    def create_candidate(self, candidate_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Register a new applicant for an existing job.

        The candidate starts in ``applied`` and gets its initial timeline
        event in the same transaction.

        Raises:
            NotFoundError: If the job does not exist
        """
        request = parse_model(CreateCandidateRequest, candidate_data)
        timestamp = get_current_utc_timestamp()

        with self.store.transaction() as txn:
            if txn.get(JOBS, request.job_id) is None:
                raise create_not_found_error("Job", request.job_id, operation="create_candidate")

            candidate = {
                "id": new_candidate_id(),
                "name": request.name,
                "email": request.email,
                "job_id": request.job_id,
                "stage": CandidateStage.APPLIED.value,
                "applied_at": timestamp,
                "updated_at": timestamp,
                "resume": request.resume,
                "notes": [],
            }
            txn.add(CANDIDATES, candidate)
            record_application(txn, candidate, timestamp)
            self._fail_point("create_candidate", candidate["id"])

        logger.info("Created candidate %s for job %s", candidate["id"], request.job_id)
        return to_candidate_schema(candidate)

    def update_candidate(self, candidate_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply a partial update to a candidate.

        A stage change and its timeline event commit together or not at
        all; setting the current stage again records nothing.

        Raises:
            NotFoundError: If no candidate has this id
        """
        validate_record_id(candidate_id, "candidate_id")
        changes = parse_model(UpdateCandidateRequest, updates).changes()

        with self.store.transaction() as txn:
            candidate = txn.get(CANDIDATES, candidate_id)
            if candidate is None:
                raise create_not_found_error(
                    "Candidate", candidate_id, operation="update_candidate"
                )

            timestamp = get_current_utc_timestamp()
            updated = {**candidate, **changes, "updated_at": timestamp}
            txn.put(CANDIDATES, updated)

            new_stage = changes.get("stage")
            if new_stage is not None and new_stage != candidate["stage"]:
                record_stage_change(txn, candidate_id, candidate["stage"], new_stage, timestamp)

            self._fail_point("update_candidate", candidate_id)

        if updated["stage"] != candidate["stage"]:
            logger.info(
                "Candidate %s moved from %s to %s",
                candidate_id,
                candidate["stage"],
                updated["stage"],
            )
        return to_candidate_schema(updated)

    def get_candidate_timeline(self, candidate_id: str) -> List[Dict[str, Any]]:
        """
        Return a candidate's timeline events in insertion order.

        Raises:
            NotFoundError: If no candidate has this id
        """
        validate_record_id(candidate_id, "candidate_id")
        if self.store.get(CANDIDATES, candidate_id) is None:
            raise create_not_found_error(
                "Candidate", candidate_id, operation="get_candidate_timeline"
            )
        events = self.store.get_by_index(TIMELINE, "candidate_id", candidate_id)
        return [TimelineEventRecord.model_validate(event).model_dump() for event in events]
