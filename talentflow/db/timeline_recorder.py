"""
Stage transition recorder.

Appends immutable timeline events for candidates. Callers pass the
transaction the candidate write runs in, so a stage change is never stored
without its event.
"""

import logging
from typing import Any, Dict

from talentflow.db.record_store import StoreTransaction
from talentflow.db.schema import TIMELINE
from talentflow.models.errors import create_validation_error
from talentflow.models.status import CandidateStage, TimelineAction

logger = logging.getLogger(__name__)


def record_application(txn: StoreTransaction, candidate: Dict[str, Any], timestamp: str) -> int:
    """
    Append the initial ``applied`` event for a new candidate.

    Returns:
        The id of the new timeline event
    """
    event = {
        "candidate_id": candidate["id"],
        "action": TimelineAction.APPLIED.value,
        "stage": CandidateStage.APPLIED.value,
        "timestamp": timestamp,
        "note": f"{candidate['name']} applied for the position",
    }
    return txn.add(TIMELINE, event)


def record_stage_change(
    txn: StoreTransaction,
    candidate_id: str,
    from_stage: str,
    to_stage: str,
    timestamp: str,
) -> int:
    """
    Append a ``stage_change`` event.

    Args:
        txn: Transaction the candidate update runs in
        candidate_id: Candidate whose stage changed
        from_stage: Stage before the change
        to_stage: Stage after the change
        timestamp: Time of the change

    Returns:
        The id of the new timeline event

    Raises:
        ToolError: VALIDATION_ERROR if the stages are equal
    """
    if from_stage == to_stage:
        raise create_validation_error(
            f"Stage change for {candidate_id} must move to a different stage (got '{to_stage}')"
        )

    event = {
        "candidate_id": candidate_id,
        "action": TimelineAction.STAGE_CHANGE.value,
        "stage": to_stage,
        "timestamp": timestamp,
        "note": f"Moved from {from_stage} to {to_stage}",
    }
    event_id = txn.add(TIMELINE, event)
    logger.debug("Candidate %s moved from %s to %s", candidate_id, from_stage, to_stage)
    return event_id
