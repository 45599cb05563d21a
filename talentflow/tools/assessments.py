"""
MCP tool handlers for assessments and assessment responses.
"""

from typing import Any, Dict, Optional

from talentflow.db.assessments_access import AssessmentsAccess
from talentflow.db.record_store import RecordStore
from talentflow.models.errors import ToolError, create_internal_error
from talentflow.utils.transport import SimulatedNetwork
from talentflow.utils.validation import require_mapping


def _access(store: RecordStore, network: Optional[SimulatedNetwork]) -> AssessmentsAccess:
    if network is None:
        return AssessmentsAccess(store)
    network.delay()
    return AssessmentsAccess(store, failure_injector=network.maybe_fail)


def get_assessment(
    args: Dict[str, Any], store: RecordStore, network: Optional[SimulatedNetwork] = None
) -> Dict[str, Any]:
    """
    Fetch the assessment for a job.

    Returns:
        {"job_id": str, "assessment": {...} | None}; None means the job has
        no assessment yet, which is not an error
    """
    try:
        job_id = args.get("job_id")
        return {"job_id": job_id, "assessment": _access(store, network).get_assessment(job_id)}
    except ToolError as e:
        return e.to_dict()
    except Exception as e:
        return create_internal_error(message=str(e), original_error=e).to_dict()


def save_assessment(
    args: Dict[str, Any], store: RecordStore, network: Optional[SimulatedNetwork] = None
) -> Dict[str, Any]:
    """
    Create or replace the assessment for a job.

    Args:
        args: job_id (required) and assessment ({"title", "sections"})

    Returns:
        {"assessment": {...}} as stored, with a fresh updated_at
    """
    try:
        assessment = require_mapping(args, "assessment")
        saved = _access(store, network).save_assessment(args.get("job_id"), assessment)
        return {"assessment": saved}
    except ToolError as e:
        return e.to_dict()
    except Exception as e:
        return create_internal_error(message=str(e), original_error=e).to_dict()


def submit_assessment_response(
    args: Dict[str, Any], store: RecordStore, network: Optional[SimulatedNetwork] = None
) -> Dict[str, Any]:
    """
    Validate and store a candidate's answers.

    Args:
        args: job_id, candidate_id and responses (question id -> answer)

    Returns:
        {"response": {...}} or VALIDATION_ERROR with per-question details
    """
    try:
        responses = require_mapping(args, "responses")
        response = _access(store, network).submit_assessment_response(
            args.get("job_id"), args.get("candidate_id"), responses
        )
        return {"response": response}
    except ToolError as e:
        return e.to_dict()
    except Exception as e:
        return create_internal_error(message=str(e), original_error=e).to_dict()


def get_assessment_responses(
    args: Dict[str, Any], store: RecordStore, network: Optional[SimulatedNetwork] = None
) -> Dict[str, Any]:
    """Return {"candidate_id", "responses": [...]}, optionally limited to one job."""
    try:
        candidate_id = args.get("candidate_id")
        responses = _access(store, network).get_assessment_responses(
            candidate_id, job_id=args.get("job_id")
        )
        return {"candidate_id": candidate_id, "responses": responses}
    except ToolError as e:
        return e.to_dict()
    except Exception as e:
        return create_internal_error(message=str(e), original_error=e).to_dict()
