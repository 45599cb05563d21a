"""
Tests for the structured error model.
"""

import pytest

from talentflow.models.errors import (
    DuplicateKeyError,
    ErrorCode,
    InvalidPositionError,
    NotFoundError,
    StoreUnavailableError,
    ToolError,
    TransientWriteError,
    create_db_error,
    create_internal_error,
    create_not_found_error,
    create_store_unavailable_error,
    create_validation_error,
    sanitize_path,
    sanitize_sql_error,
    sanitize_stack_trace,
)


class TestToolError:
    def test_minimal_dict(self):
        error = ToolError(ErrorCode.VALIDATION_ERROR, "bad input")
        assert error.to_dict() == {
            "error": {"code": "VALIDATION_ERROR", "message": "bad input", "retryable": False}
        }

    def test_optional_fields_are_included_when_set(self):
        error = ToolError(
            ErrorCode.NOT_FOUND,
            "Job not found: job-9",
            operation="get_job",
            entity_id="job-9",
            details={"job_id": "unknown"},
        )

        payload = error.to_dict()["error"]
        assert payload["operation"] == "get_job"
        assert payload["entity_id"] == "job-9"
        assert payload["details"] == {"job_id": "unknown"}

    def test_zero_entity_id_is_kept(self):
        """Test a falsy but present entity_id still appears in the error dict."""
        error = NotFoundError("Response not found: 0", entity_id=0)
        assert error.to_dict()["error"]["entity_id"] == 0

    @pytest.mark.parametrize(
        "error, code, retryable",
        [
            (NotFoundError("x"), ErrorCode.NOT_FOUND, False),
            (DuplicateKeyError("x"), ErrorCode.DUPLICATE_KEY, False),
            (InvalidPositionError("x"), ErrorCode.INVALID_POSITION, False),
            (TransientWriteError("x"), ErrorCode.TRANSIENT_WRITE, True),
            (StoreUnavailableError("x"), ErrorCode.STORE_UNAVAILABLE, False),
        ],
    )
    def test_subclass_codes(self, error, code, retryable):
        assert isinstance(error, ToolError)
        assert error.code == code
        assert error.retryable is retryable


class TestSanitizers:
    def test_absolute_path_keeps_basename(self):
        assert sanitize_path("/home/user/data/talentflow.db") == "talentflow.db"

    def test_relative_path_is_kept(self):
        assert sanitize_path("data/talentflow.db") == "data/talentflow.db"

    def test_sql_is_removed(self):
        sanitized = sanitize_sql_error("no such column: x in SELECT body FROM jobs")
        assert "SELECT" not in sanitized
        assert "[SQL query]" in sanitized

    def test_stack_trace_is_removed(self):
        assert sanitize_stack_trace("boom\nTraceback (most recent call last):") == "boom"


class TestFactories:
    def test_validation_error(self):
        error = create_validation_error("Invalid page", details={"page": "too small"})
        assert error.code == ErrorCode.VALIDATION_ERROR
        assert error.details == {"page": "too small"}

    def test_not_found_error(self):
        error = create_not_found_error("Candidate", "candidate-7", operation="get_candidate")
        assert error.message == "Candidate not found: candidate-7"
        assert error.entity_id == "candidate-7"

    def test_store_unavailable_hides_directories(self):
        error = create_store_unavailable_error("/var/lib/talentflow/talentflow.db")
        assert error.message == "Record store unavailable: talentflow.db"

    def test_store_unavailable_without_path(self):
        assert "not open" in create_store_unavailable_error().message

    def test_db_error(self):
        error = create_db_error("database is locked", retryable=True)
        assert error.code == ErrorCode.DB_ERROR
        assert error.message == "Database error: database is locked"
        assert error.retryable is True

    def test_internal_error_is_retryable(self):
        original = RuntimeError("boom")
        error = create_internal_error("boom\n  at frame", original_error=original)

        assert error.message == "Internal error: boom"
        assert error.retryable is True
        assert error.original_error is original
