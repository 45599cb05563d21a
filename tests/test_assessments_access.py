"""
Tests for AssessmentsAccess: save/get round trip and response submission.
"""

import copy

import pytest

from talentflow.db.assessments_access import AssessmentsAccess
from talentflow.db.record_store import RecordStore
from talentflow.db.schema import ASSESSMENT_RESPONSES, ASSESSMENTS, CANDIDATES, JOBS
from talentflow.models.errors import ErrorCode, NotFoundError, ToolError, TransientWriteError

ASSESSMENT = {
    "title": "Backend Screening",
    "sections": [
        {
            "id": "section-1",
            "title": "Basics",
            "questions": [
                {
                    "id": "q1",
                    "type": "single-choice",
                    "question": "Pick a database",
                    "required": True,
                    "options": ["PostgreSQL", "Excel"],
                    "correct_answer": "PostgreSQL",
                },
                {
                    "id": "q2",
                    "type": "numeric",
                    "question": "Years of experience",
                    "required": True,
                    "min": 0,
                    "max": 40,
                },
                {
                    "id": "q3",
                    "type": "short-text",
                    "question": "Favorite language",
                    "max_length": 20,
                },
            ],
        }
    ],
}


def _always_fail(operation, entity_id=None):
    raise TransientWriteError(f"Transient failure during {operation}", operation=operation)


@pytest.fixture
def store(tmp_path):
    store = RecordStore(str(tmp_path / "talentflow.db")).open()
    store.put(JOBS, {"id": "job-1", "title": "Backend Engineer", "status": "active", "order": 0})
    store.put(JOBS, {"id": "job-2", "title": "Data Scientist", "status": "active", "order": 1})
    store.put(CANDIDATES, {"id": "c-1", "name": "Alex Smith", "job_id": "job-1"})
    yield store
    store.close()


@pytest.fixture
def assessments(store):
    return AssessmentsAccess(store)


class TestSaveAndGetAssessment:
    def test_missing_assessment_is_none(self, assessments):
        assert assessments.get_assessment("job-1") is None

    def test_round_trip(self, assessments):
        saved = assessments.save_assessment("job-1", copy.deepcopy(ASSESSMENT))
        fetched = assessments.get_assessment("job-1")

        assert fetched == saved
        assert fetched["job_id"] == "job-1"
        assert fetched["title"] == "Backend Screening"
        assert fetched["updated_at"]

        questions = fetched["sections"][0]["questions"]
        assert [q["id"] for q in questions] == ["q1", "q2", "q3"]
        assert questions[0]["correct_answer"] == "PostgreSQL"
        assert questions[1]["min"] == 0
        # Unset constraints are not stored
        assert "options" not in questions[2]
        assert questions[2]["required"] is False

    def test_extra_keys_are_kept_on_sections_and_questions(self, assessments):
        """Test unknown keys survive a save at both the section and question level."""
        payload = copy.deepcopy(ASSESSMENT)
        payload["sections"][0]["description"] = "Warm-up questions"

        assessments.save_assessment("job-1", payload)

        section = assessments.get_assessment("job-1")["sections"][0]
        assert section["description"] == "Warm-up questions"
        assert section["questions"][0]["correct_answer"] == "PostgreSQL"

    def test_save_replaces_wholesale(self, assessments):
        assessments.save_assessment("job-1", copy.deepcopy(ASSESSMENT))
        assessments.save_assessment("job-1", {"title": "Replaced", "sections": []})

        fetched = assessments.get_assessment("job-1")
        assert fetched["title"] == "Replaced"
        assert fetched["sections"] == []

    def test_job_id_in_payload_is_ignored(self, store, assessments):
        assessments.save_assessment("job-1", {**copy.deepcopy(ASSESSMENT), "job_id": "job-2"})
        assert store.get(ASSESSMENTS, "job-2") is None

    def test_unknown_job(self, store, assessments):
        with pytest.raises(NotFoundError) as exc_info:
            assessments.save_assessment("job-missing", copy.deepcopy(ASSESSMENT))
        assert exc_info.value.operation == "save_assessment"
        assert store.count(ASSESSMENTS) == 0

    def test_choice_question_needs_options(self, assessments):
        bad = copy.deepcopy(ASSESSMENT)
        bad["sections"][0]["questions"][0]["options"] = []

        with pytest.raises(ToolError) as exc_info:
            assessments.save_assessment("job-1", bad)

        assert exc_info.value.code == ErrorCode.VALIDATION_ERROR
        assert "q1" in exc_info.value.message

    def test_numeric_bounds_must_be_ordered(self, assessments):
        bad = copy.deepcopy(ASSESSMENT)
        bad["sections"][0]["questions"][1].update({"min": 10, "max": 1})

        with pytest.raises(ToolError) as exc_info:
            assessments.save_assessment("job-1", bad)
        assert "q2" in exc_info.value.message

    def test_duplicate_question_ids(self, assessments):
        bad = copy.deepcopy(ASSESSMENT)
        bad["sections"][0]["questions"][2]["id"] = "q1"

        with pytest.raises(ToolError) as exc_info:
            assessments.save_assessment("job-1", bad)
        assert "Duplicate question ids: q1" in exc_info.value.message

    def test_unknown_question_type(self, assessments):
        bad = copy.deepcopy(ASSESSMENT)
        bad["sections"][0]["questions"][2]["type"] = "essay"

        with pytest.raises(ToolError) as exc_info:
            assessments.save_assessment("job-1", bad)
        assert exc_info.value.code == ErrorCode.VALIDATION_ERROR

    def test_injected_failure_keeps_previous_version(self, store, assessments):
        assessments.save_assessment("job-1", copy.deepcopy(ASSESSMENT))
        failing = AssessmentsAccess(store, failure_injector=_always_fail)

        with pytest.raises(TransientWriteError):
            failing.save_assessment("job-1", {"title": "Replaced", "sections": []})

        assert assessments.get_assessment("job-1")["title"] == "Backend Screening"


class TestSubmitAssessmentResponse:
    @pytest.fixture
    def with_assessment(self, assessments):
        assessments.save_assessment("job-1", copy.deepcopy(ASSESSMENT))
        return assessments

    def test_valid_submission_is_stored(self, store, with_assessment):
        responses = {"q1": "PostgreSQL", "q2": 5, "q3": "Python"}

        stored = with_assessment.submit_assessment_response("job-1", "c-1", responses)

        assert isinstance(stored["id"], int)
        assert stored["responses"] == responses
        assert stored["submitted_at"]
        assert store.count(ASSESSMENT_RESPONSES) == 1

    def test_optional_answer_may_be_omitted(self, with_assessment):
        stored = with_assessment.submit_assessment_response(
            "job-1", "c-1", {"q1": "Excel", "q2": "12"}
        )
        assert stored["responses"] == {"q1": "Excel", "q2": "12"}

    def test_invalid_answers_are_reported_per_question(self, store, with_assessment):
        with pytest.raises(ToolError) as exc_info:
            with_assessment.submit_assessment_response(
                "job-1", "c-1", {"q1": "MongoDB", "q2": 41, "q3": "x" * 21, "q9": "?"}
            )

        error = exc_info.value
        assert error.code == ErrorCode.VALIDATION_ERROR
        assert error.details == {
            "q1": "Please choose one of the available options",
            "q2": "Value must be at most 40",
            "q3": "Text must be 20 characters or less",
            "q9": "Unknown question",
        }
        assert store.count(ASSESSMENT_RESPONSES) == 0

    @pytest.mark.parametrize("answer", ["NaN", "nan", "Infinity", "-inf"])
    def test_non_finite_number_is_rejected(self, store, with_assessment, answer):
        """Test non-finite numbers are rejected even though float() parses them."""
        with pytest.raises(ToolError) as exc_info:
            with_assessment.submit_assessment_response(
                "job-1", "c-1", {"q1": "Excel", "q2": answer}
            )

        assert exc_info.value.details == {"q2": "Please enter a valid number"}
        assert store.count(ASSESSMENT_RESPONSES) == 0

    def test_missing_required_answers(self, with_assessment):
        with pytest.raises(ToolError) as exc_info:
            with_assessment.submit_assessment_response("job-1", "c-1", {})

        assert exc_info.value.details == {
            "q1": "This field is required",
            "q2": "This field is required",
        }

    def test_job_without_assessment(self, with_assessment):
        with pytest.raises(NotFoundError) as exc_info:
            with_assessment.submit_assessment_response("job-2", "c-1", {})
        assert "Assessment" in exc_info.value.message

    def test_unknown_candidate(self, with_assessment):
        with pytest.raises(NotFoundError) as exc_info:
            with_assessment.submit_assessment_response("job-1", "c-missing", {"q1": "Excel"})
        assert exc_info.value.entity_id == "c-missing"

    def test_responses_must_be_an_object(self, with_assessment):
        with pytest.raises(ToolError) as exc_info:
            with_assessment.submit_assessment_response("job-1", "c-1", ["PostgreSQL"])
        assert exc_info.value.code == ErrorCode.VALIDATION_ERROR

    def test_injected_failure_stores_nothing(self, store, with_assessment):
        failing = AssessmentsAccess(store, failure_injector=_always_fail)

        with pytest.raises(TransientWriteError):
            failing.submit_assessment_response("job-1", "c-1", {"q1": "Excel", "q2": 1})

        assert store.count(ASSESSMENT_RESPONSES) == 0


class TestGetAssessmentResponses:
    def test_responses_by_candidate_and_job(self, store, assessments):
        assessments.save_assessment("job-1", copy.deepcopy(ASSESSMENT))
        assessments.save_assessment("job-2", {"title": "Short", "sections": []})
        assessments.submit_assessment_response("job-1", "c-1", {"q1": "Excel", "q2": 1})
        assessments.submit_assessment_response("job-2", "c-1", {})

        all_responses = assessments.get_assessment_responses("c-1")
        job_two = assessments.get_assessment_responses("c-1", job_id="job-2")

        assert [r["job_id"] for r in all_responses] == ["job-1", "job-2"]
        assert [r["job_id"] for r in job_two] == ["job-2"]
        assert assessments.get_assessment_responses("c-other") == []
