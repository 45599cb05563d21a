"""
Dense ordering helpers for the job list.

Jobs carry an ``order`` value; across all jobs the values form the
permutation 0..n-1. Moving one job shifts the jobs between the two
positions by one to keep the sequence gap-free.
"""

from typing import Dict, List

from talentflow.models.errors import InvalidPositionError


def validate_positions(from_position: int, to_position: int, count: int) -> None:
    """
    Check that both positions address an existing slot.

    Args:
        from_position: Current position of the job being moved
        to_position: Target position
        count: Number of jobs in the ordering

    Raises:
        InvalidPositionError: If either position is outside [0, count-1]
    """
    for name, value in (("from_order", from_position), ("to_order", to_position)):
        if value < 0 or value >= count:
            if count == 0:
                bounds = "no jobs exist"
            else:
                bounds = f"must be between 0 and {count - 1}"
            raise InvalidPositionError(
                f"Invalid {name}: {value} ({bounds})", operation="reorder_jobs"
            )


def shift_position(position: int, from_position: int, to_position: int) -> int:
    """
    Compute where an item at ``position`` lands after moving from -> to.

    Examples:
        >>> [shift_position(p, 0, 2) for p in range(4)]
        [2, 0, 1, 3]
        >>> [shift_position(p, 3, 1) for p in range(4)]
        [0, 2, 3, 1]
    """
    if position == from_position:
        return to_position
    if from_position < to_position and from_position < position <= to_position:
        return position - 1
    if from_position > to_position and to_position <= position < from_position:
        return position + 1
    return position


def compute_reorder(
    records: List[Dict], from_position: int, to_position: int, field: str = "order"
) -> Dict[str, int]:
    """
    Compute the new position of every record whose position changes.

    Args:
        records: Records carrying ``id`` and the position field
        from_position: Position of the record being moved
        to_position: Target position
        field: Name of the position field

    Returns:
        Mapping of record id -> new position, for changed records only
    """
    changes = {}
    for record in records:
        current = record[field]
        new_position = shift_position(current, from_position, to_position)
        if new_position != current:
            changes[record["id"]] = new_position
    return changes


def next_position(records: List[Dict], field: str = "order") -> int:
    """Return the position after the current maximum, or 0 when empty."""
    return max((record[field] for record in records), default=-1) + 1
