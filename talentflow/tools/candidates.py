"""
MCP tool handlers for candidates and their timelines.
"""

from typing import Any, Dict, Optional

from talentflow.db.candidates_access import CandidatesAccess
from talentflow.db.record_store import RecordStore
from talentflow.models.errors import ToolError, create_internal_error
from talentflow.utils.transport import SimulatedNetwork
from talentflow.utils.validation import pick_params, require_mapping


def _access(store: RecordStore, network: Optional[SimulatedNetwork]) -> CandidatesAccess:
    if network is None:
        return CandidatesAccess(store)
    network.delay()
    return CandidatesAccess(store, failure_injector=network.maybe_fail)


def get_candidates(
    args: Dict[str, Any], store: RecordStore, network: Optional[SimulatedNetwork] = None
) -> Dict[str, Any]:
    """
    List candidates, most recently updated first.

    Args:
        args: Dictionary containing optional parameters:
            - search (str): Case-insensitive match on name or email
            - stage (str): One of the candidate stages
            - job_id (str): Only candidates for this job
            - page (int): 1-based page number (default 1)
            - page_size (int): 1-1000 (default 50)

    Returns:
        {"data": [candidate, ...], "pagination": {...}} or {"error": {...}}
    """
    try:
        params = pick_params(args, ("search", "stage", "job_id", "page", "page_size"))
        return _access(store, network).list_candidates(**params)
    except ToolError as e:
        return e.to_dict()
    except Exception as e:
        return create_internal_error(message=str(e), original_error=e).to_dict()


def get_candidate(
    args: Dict[str, Any], store: RecordStore, network: Optional[SimulatedNetwork] = None
) -> Dict[str, Any]:
    try:
        return {"candidate": _access(store, network).get_candidate(args.get("candidate_id"))}
    except ToolError as e:
        return e.to_dict()
    except Exception as e:
        return create_internal_error(message=str(e), original_error=e).to_dict()


def create_candidate(
    args: Dict[str, Any], store: RecordStore, network: Optional[SimulatedNetwork] = None
) -> Dict[str, Any]:
    """
    Register a new applicant for an existing job.

    Args:
        args: name, email, job_id (required) and optional resume

    Returns:
        {"candidate": {...}} in stage "applied"
    """
    try:
        candidate_data = pick_params(args, ("name", "email", "job_id", "resume"))
        return {"candidate": _access(store, network).create_candidate(candidate_data)}
    except ToolError as e:
        return e.to_dict()
    except Exception as e:
        return create_internal_error(message=str(e), original_error=e).to_dict()


def update_candidate(
    args: Dict[str, Any], store: RecordStore, network: Optional[SimulatedNetwork] = None
) -> Dict[str, Any]:
    """
    Apply a partial update to a candidate.

    A stage change appends a timeline event in the same transaction.

    Args:
        args: candidate_id (required) and updates (name, email, stage, resume)

    Returns:
        {"candidate": {...}} with the updated record
    """
    try:
        updates = require_mapping(args, "updates")
        candidate = _access(store, network).update_candidate(args.get("candidate_id"), updates)
        return {"candidate": candidate}
    except ToolError as e:
        return e.to_dict()
    except Exception as e:
        return create_internal_error(message=str(e), original_error=e).to_dict()


def get_candidate_timeline(
    args: Dict[str, Any], store: RecordStore, network: Optional[SimulatedNetwork] = None
) -> Dict[str, Any]:
    """Return {"candidate_id", "events": [...]} in insertion order."""
    try:
        candidate_id = args.get("candidate_id")
        events = _access(store, network).get_candidate_timeline(candidate_id)
        return {"candidate_id": candidate_id, "events": events}
    except ToolError as e:
        return e.to_dict()
    except Exception as e:
        return create_internal_error(message=str(e), original_error=e).to_dict()
