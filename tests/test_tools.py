"""
Tests for the MCP tool handlers.

Handlers must return plain dicts: data on success, {"error": {...}} on
failure, never raising.
"""

import json
import random

import pytest

from talentflow.db.record_store import RecordStore
from talentflow.db.schema import CANDIDATES, TIMELINE
from talentflow.db.seed import seed_database
from talentflow.tools.assessments import (
    get_assessment,
    get_assessment_responses,
    save_assessment,
    submit_assessment_response,
)
from talentflow.tools.candidates import (
    create_candidate,
    get_candidate,
    get_candidate_timeline,
    get_candidates,
    update_candidate,
)
from talentflow.tools.jobs import create_job, get_job, get_jobs, reorder_jobs, update_job
from talentflow.utils.transport import SimulatedNetwork


@pytest.fixture
def store(tmp_path):
    store = RecordStore(str(tmp_path / "talentflow.db")).open()
    seed_database(store, rng=random.Random(3), job_count=5, candidate_count=30)
    yield store
    store.close()


@pytest.fixture
def failing_network():
    return SimulatedNetwork(failure_rate=1.0)


class TestJobTools:
    def test_get_jobs_defaults(self, store):
        result = get_jobs({}, store)

        assert [job["order"] for job in result["data"]] == [0, 1, 2, 3, 4]
        assert result["pagination"] == {"page": 1, "page_size": 10, "total": 5, "total_pages": 1}

    def test_none_arguments_use_defaults(self, store):
        result = get_jobs({"search": None, "page": None, "sort": None}, store)
        assert result["pagination"]["total"] == 5

    def test_results_are_json_serializable(self, store):
        json.dumps(get_jobs({}, store))
        json.dumps(get_candidates({}, store))

    def test_get_job(self, store):
        assert get_job({"job_id": "job-1"}, store)["job"]["id"] == "job-1"

    def test_get_job_not_found(self, store):
        result = get_job({"job_id": "job-404"}, store)

        assert result["error"]["code"] == "NOT_FOUND"
        assert result["error"]["retryable"] is False
        assert result["error"]["entity_id"] == "job-404"

    def test_get_job_missing_argument(self, store):
        assert get_job({}, store)["error"]["code"] == "VALIDATION_ERROR"

    def test_create_and_update_job(self, store):
        created = create_job({"title": "Platform Engineer", "tags": ["Go"]}, store)["job"]
        assert created["order"] == 5

        updated = update_job(
            {"job_id": created["id"], "updates": {"title": "Staff Platform Engineer"}}, store
        )["job"]
        assert updated["slug"] == "staff-platform-engineer"

    def test_update_job_requires_object(self, store):
        result = update_job({"job_id": "job-1", "updates": "archive it"}, store)

        assert result["error"]["code"] == "VALIDATION_ERROR"
        assert "updates" in result["error"]["message"]

    def test_reorder_jobs(self, store):
        assert reorder_jobs({"from_order": 4, "to_order": 0}, store) == {
            "success": True,
            "moved_count": 5,
        }

    def test_reorder_jobs_invalid_position(self, store):
        result = reorder_jobs({"from_order": 0, "to_order": 5}, store)
        assert result["error"]["code"] == "INVALID_POSITION"

    def test_injected_failure_is_retryable(self, store, failing_network):
        result = create_job({"title": "Platform Engineer"}, store, failing_network)

        assert result["error"]["code"] == "TRANSIENT_WRITE"
        assert result["error"]["retryable"] is True
        assert get_jobs({}, store)["pagination"]["total"] == 5

    def test_reads_are_not_failed_by_the_network(self, store, failing_network):
        """Test failure injection only applies to writes."""
        assert "data" in get_jobs({}, store, failing_network)

    def test_closed_store(self, store):
        store.close()
        result = get_jobs({}, store)
        assert result["error"]["code"] == "STORE_UNAVAILABLE"

    def test_unexpected_error_becomes_internal_error(self, store, monkeypatch):
        """Test unexpected exceptions are returned as a sanitized INTERNAL_ERROR."""
        def broken(*args, **kwargs):
            raise RuntimeError("unexpected\nTraceback details")

        monkeypatch.setattr("talentflow.db.jobs_access.JobsAccess.list_jobs", broken)

        result = get_jobs({}, store)

        assert result["error"]["code"] == "INTERNAL_ERROR"
        assert result["error"]["message"] == "Internal error: unexpected"


class TestCandidateTools:
    @pytest.fixture
    def candidate(self, store):
        return create_candidate(
            {"name": "Riley Chen", "email": "riley@example.com", "job_id": "job-1"}, store
        )["candidate"]

    def test_get_candidates_filters(self, store):
        result = get_candidates({"job_id": "job-1", "page_size": 100}, store)
        assert all(c["job_id"] == "job-1" for c in result["data"])

    def test_create_candidate(self, store):
        created = create_candidate(
            {"name": "Alex Smith", "email": "alex@example.com", "job_id": "job-2"}, store
        )["candidate"]

        fetched = get_candidate({"candidate_id": created["id"]}, store)["candidate"]
        assert fetched == created

    def test_stage_change_and_timeline(self, store, candidate):
        result = update_candidate(
            {"candidate_id": candidate["id"], "updates": {"stage": "screen"}}, store
        )
        timeline = get_candidate_timeline({"candidate_id": candidate["id"]}, store)

        assert result["candidate"]["stage"] == "screen"
        assert timeline["candidate_id"] == candidate["id"]
        assert [e["action"] for e in timeline["events"]] == ["applied", "stage_change"]
        assert timeline["events"][-1]["note"] == "Moved from applied to screen"

    def test_failed_stage_change_is_atomic(self, store, candidate, failing_network):
        """Test a failed stage change through the tool leaves stage and timeline untouched."""
        events_before = store.get_by_index(TIMELINE, "candidate_id", candidate["id"])

        result = update_candidate(
            {"candidate_id": candidate["id"], "updates": {"stage": "tech"}},
            store,
            failing_network,
        )

        assert result["error"]["code"] == "TRANSIENT_WRITE"
        assert store.get(CANDIDATES, candidate["id"])["stage"] == "applied"
        assert store.get_by_index(TIMELINE, "candidate_id", candidate["id"]) == events_before

    def test_timeline_unknown_candidate(self, store):
        result = get_candidate_timeline({"candidate_id": "candidate-404"}, store)
        assert result["error"]["code"] == "NOT_FOUND"


class TestAssessmentTools:
    def test_get_missing_assessment_is_not_an_error(self, store):
        """Test a job without an assessment returns null rather than NOT_FOUND."""
        assert get_assessment({"job_id": "job-2"}, store) == {"job_id": "job-2", "assessment": None}

    def test_seeded_assessment(self, store):
        assessment = get_assessment({"job_id": "job-1"}, store)["assessment"]
        assert assessment["title"] == "Frontend Developer Assessment"

    def test_save_and_submit(self, store):
        saved = save_assessment(
            {
                "job_id": "job-2",
                "assessment": {
                    "title": "Quick check",
                    "sections": [
                        {
                            "id": "s1",
                            "title": "Only",
                            "questions": [
                                {
                                    "id": "q1",
                                    "type": "numeric",
                                    "question": "Years?",
                                    "required": True,
                                    "min": 0,
                                    "max": 10,
                                }
                            ],
                        }
                    ],
                },
            },
            store,
        )["assessment"]
        assert saved["job_id"] == "job-2"

        rejected = submit_assessment_response(
            {"job_id": "job-2", "candidate_id": "candidate-1", "responses": {"q1": 11}}, store
        )
        assert rejected["error"]["code"] == "VALIDATION_ERROR"
        assert rejected["error"]["details"] == {"q1": "Value must be at most 10"}

        accepted = submit_assessment_response(
            {"job_id": "job-2", "candidate_id": "candidate-1", "responses": {"q1": 4}}, store
        )
        assert accepted["response"]["responses"] == {"q1": 4}

        listed = get_assessment_responses({"candidate_id": "candidate-1"}, store)
        assert [r["id"] for r in listed["responses"]] == [accepted["response"]["id"]]

    def test_save_assessment_requires_object(self, store):
        result = save_assessment({"job_id": "job-1"}, store)
        assert result["error"]["code"] == "VALIDATION_ERROR"
