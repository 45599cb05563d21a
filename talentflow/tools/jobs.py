"""
MCP tool handlers for jobs.

Each handler takes the raw argument dict, applies the simulated network,
delegates to ``JobsAccess`` and returns a JSON-serializable dict. Errors are
returned as ``{"error": {...}}`` and never raised to the server.
"""

from typing import Any, Dict, Optional

from talentflow.db.jobs_access import JobsAccess
from talentflow.db.record_store import RecordStore
from talentflow.models.errors import ToolError, create_internal_error
from talentflow.utils.transport import SimulatedNetwork
from talentflow.utils.validation import pick_params, require_mapping


def _access(store: RecordStore, network: Optional[SimulatedNetwork]) -> JobsAccess:
    if network is None:
        return JobsAccess(store)
    network.delay()
    return JobsAccess(store, failure_injector=network.maybe_fail)


def get_jobs(
    args: Dict[str, Any], store: RecordStore, network: Optional[SimulatedNetwork] = None
) -> Dict[str, Any]:
    """
    List jobs with search, status filter, sort and page-based pagination.

    Args:
        args: Dictionary containing optional parameters:
            - search (str): Case-insensitive match on title or any tag
            - status (str): "active" or "archived"
            - page (int): 1-based page number (default 1)
            - page_size (int): 1-1000 (default 10)
            - sort (str): "order" (default), "title" or "created_at"
        store: Open record store
        network: Optional simulated network

    Returns:
        {"data": [job, ...], "pagination": {page, page_size, total, total_pages}}
        or {"error": {...}}
    """
    try:
        params = pick_params(args, ("search", "status", "page", "page_size", "sort"))
        return _access(store, network).list_jobs(**params)
    except ToolError as e:
        return e.to_dict()
    except Exception as e:
        return create_internal_error(message=str(e), original_error=e).to_dict()


def get_job(
    args: Dict[str, Any], store: RecordStore, network: Optional[SimulatedNetwork] = None
) -> Dict[str, Any]:
    """Fetch one job: {"job": {...}} or NOT_FOUND."""
    try:
        return {"job": _access(store, network).get_job(args.get("job_id"))}
    except ToolError as e:
        return e.to_dict()
    except Exception as e:
        return create_internal_error(message=str(e), original_error=e).to_dict()


def create_job(
    args: Dict[str, Any], store: RecordStore, network: Optional[SimulatedNetwork] = None
) -> Dict[str, Any]:
    """
    Create a job at the end of the ordering.

    Args:
        args: title (required), description, status, tags, requirements

    Returns:
        {"job": {...}} with generated id, slug, order and timestamps
    """
    try:
        job_data = pick_params(args, ("title", "description", "status", "tags", "requirements"))
        return {"job": _access(store, network).create_job(job_data)}
    except ToolError as e:
        return e.to_dict()
    except Exception as e:
        return create_internal_error(message=str(e), original_error=e).to_dict()


def update_job(
    args: Dict[str, Any], store: RecordStore, network: Optional[SimulatedNetwork] = None
) -> Dict[str, Any]:
    """
    Apply a partial update to a job.

    Args:
        args: job_id (required) and updates (object of editable fields)

    Returns:
        {"job": {...}} with the updated record
    """
    try:
        updates = require_mapping(args, "updates")
        return {"job": _access(store, network).update_job(args.get("job_id"), updates)}
    except ToolError as e:
        return e.to_dict()
    except Exception as e:
        return create_internal_error(message=str(e), original_error=e).to_dict()


def reorder_jobs(
    args: Dict[str, Any], store: RecordStore, network: Optional[SimulatedNetwork] = None
) -> Dict[str, Any]:
    """
    Move the job at from_order to to_order.

    Returns:
        {"success": true, "moved_count": int} or INVALID_POSITION
    """
    try:
        return _access(store, network).reorder_jobs(args.get("from_order"), args.get("to_order"))
    except ToolError as e:
        return e.to_dict()
    except Exception as e:
        return create_internal_error(message=str(e), original_error=e).to_dict()
