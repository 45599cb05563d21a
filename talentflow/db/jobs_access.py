"""
Job access layer.

Typed list/get/create/update operations over the ``jobs`` collection plus
the reorder operation that keeps ``order`` dense. Filtering, sorting and
pagination run in memory over a full collection read.
"""

import logging
import uuid
from typing import Any, Callable, Dict, Optional

from talentflow.db.record_store import RecordStore
from talentflow.db.schema import JOBS
from talentflow.models.errors import create_not_found_error
from talentflow.schemas.jobs import (
    CreateJobRequest,
    GetJobsRequest,
    JobListResponse,
    JobRecord,
    ReorderJobsRequest,
    ReorderJobsResponse,
    UpdateJobRequest,
)
from talentflow.utils.listing import filter_records, stable_sort
from talentflow.utils.ordering import compute_reorder, next_position, validate_positions
from talentflow.utils.pagination import paginate_results
from talentflow.utils.pydantic_error_mapper import parse_model
from talentflow.utils.slug import generate_slug
from talentflow.utils.validation import get_current_utc_timestamp, validate_record_id

logger = logging.getLogger(__name__)

FailureInjector = Callable[[str, Any], None]

JOB_SEARCH_FIELDS = ("title", "tags")

_SORT_KEYS = {
    "order": (lambda job: job["order"], False),
    "title": (lambda job: job["title"].casefold(), False),
    "created_at": (lambda job: job["created_at"], True),
}


def new_job_id() -> str:
    return f"job-{uuid.uuid4().hex[:12]}"


def to_job_schema(record: Dict[str, Any]) -> Dict[str, Any]:
    """Map a stored job to the stable output schema."""
    return JobRecord.model_validate(record).model_dump()


class JobsAccess:
    """
    Job operations bound to one record store.

    Writes call ``failure_injector(operation, entity_id)`` inside their
    transaction after staging changes, so an injected failure rolls back
    everything the call wrote.
    """

    def __init__(self, store: RecordStore, failure_injector: Optional[FailureInjector] = None):
        self.store = store
        self.failure_injector = failure_injector

    def _fail_point(self, operation: str, entity_id: Any = None) -> None:
        if self.failure_injector is not None:
            self.failure_injector(operation, entity_id)

    def list_jobs(self, **params: Any) -> Dict[str, Any]:
        """
        Return one page of jobs.

        Args:
            **params: search, status, page, page_size, sort (see GetJobsRequest)

        Returns:
            {"data": [...], "pagination": {...}}
        """
        request = parse_model(GetJobsRequest, params)

        if request.status:
            jobs = self.store.get_by_index(JOBS, "status", request.status)
        else:
            jobs = self.store.get_all(JOBS)

        jobs = filter_records(jobs, search=request.search, search_fields=JOB_SEARCH_FIELDS)
        key, descending = _SORT_KEYS[request.sort]
        jobs = stable_sort(jobs, key=key, descending=descending)

        data, pagination = paginate_results(jobs, request.page, request.page_size)
        response = JobListResponse(
            data=[JobRecord.model_validate(job) for job in data], pagination=pagination
        )
        return response.model_dump()

    def get_job(self, job_id: str) -> Dict[str, Any]:
        """
        Fetch one job.

        Raises:
            NotFoundError: If no job has this id
        """
        validate_record_id(job_id, "job_id")
        job = self.store.get(JOBS, job_id)
        if job is None:
            raise create_not_found_error("Job", job_id, operation="get_job")
        return to_job_schema(job)

    def create_job(self, job_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a job at the end of the ordering.

        The max-order lookup and the insert share one transaction so two
        creates cannot claim the same position.
        """
        request = parse_model(CreateJobRequest, job_data)
        timestamp = get_current_utc_timestamp()

        with self.store.transaction() as txn:
            job = {
                "id": new_job_id(),
                "title": request.title,
                "slug": generate_slug(request.title),
                "status": request.status,
                "order": next_position(txn.get_all(JOBS)),
                "tags": request.tags,
                "description": request.description,
                "requirements": request.requirements,
                "created_at": timestamp,
                "updated_at": timestamp,
            }
            txn.add(JOBS, job)
            self._fail_point("create_job", job["id"])

        logger.info("Created job %s at position %d", job["id"], job["order"])
        return to_job_schema(job)

    def update_job(self, job_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply a partial update to a job.

        Only title, description, status, tags and requirements change; the
        slug follows the title. ``order`` moves only through reorder_jobs.

        Raises:
            NotFoundError: If no job has this id
        """
        validate_record_id(job_id, "job_id")
        changes = parse_model(UpdateJobRequest, updates).changes()

        with self.store.transaction() as txn:
            job = txn.get(JOBS, job_id)
            if job is None:
                raise create_not_found_error("Job", job_id, operation="update_job")

            updated = {**job, **changes, "updated_at": get_current_utc_timestamp()}
            if "title" in changes and changes["title"] != job["title"]:
                updated["slug"] = generate_slug(changes["title"])

            txn.put(JOBS, updated)
            self._fail_point("update_job", job_id)

        return to_job_schema(updated)

    def reorder_jobs(self, from_order: int, to_order: int) -> Dict[str, Any]:
        """
        Move the job at ``from_order`` to ``to_order``.

        Jobs between the two positions shift by one; only jobs whose
        position changes are written, all in one transaction.

        Raises:
            InvalidPositionError: If either position is outside [0, n-1]
        """
        request = parse_model(ReorderJobsRequest, {"from_order": from_order, "to_order": to_order})

        with self.store.transaction() as txn:
            jobs = txn.get_all(JOBS)
            validate_positions(request.from_order, request.to_order, len(jobs))

            if request.from_order == request.to_order:
                return ReorderJobsResponse(success=True, moved_count=0).model_dump()

            changes = compute_reorder(jobs, request.from_order, request.to_order)
            timestamp = get_current_utc_timestamp()
            for job in jobs:
                if job["id"] in changes:
                    txn.put(JOBS, {**job, "order": changes[job["id"]], "updated_at": timestamp})
            self._fail_point("reorder_jobs")

        logger.info(
            "Reordered jobs: %d -> %d (%d moved)",
            request.from_order,
            request.to_order,
            len(changes),
        )
        return ReorderJobsResponse(success=True, moved_count=len(changes)).model_dump()
