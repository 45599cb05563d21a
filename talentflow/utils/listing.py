"""
In-memory search and sort helpers for list queries.

Search is a case-insensitive substring match over declared fields; list
fields (such as job tags) match when any element matches. Sorting relies on
Python's stable sort so ties keep the store's natural order.
"""

from typing import Any, Callable, Dict, Iterable, List, Optional


def matches_search(record: Dict[str, Any], search: str, fields: Iterable[str]) -> bool:
    """
    Check whether any searchable field contains the search text.

    Args:
        record: Record to test
        search: Search text (matched case-insensitively)
        fields: Names of searchable fields

    Returns:
        True if any field (or any element of a list field) contains search
    """
    needle = search.casefold()
    for field in fields:
        value = record.get(field)
        if value is None:
            continue
        values = value if isinstance(value, list) else [value]
        for item in values:
            if needle in str(item).casefold():
                return True
    return False


def filter_records(
    records: List[Dict[str, Any]],
    search: Optional[str] = None,
    search_fields: Iterable[str] = (),
    equals: Optional[Dict[str, Any]] = None,
) -> List[Dict[str, Any]]:
    """
    Filter records by search text and exact field values.

    Empty search text and None filter values are ignored.
    """
    search_fields = tuple(search_fields)
    conditions = {k: v for k, v in (equals or {}).items() if v is not None}

    result = []
    for record in records:
        if search and not matches_search(record, search, search_fields):
            continue
        if any(record.get(field) != value for field, value in conditions.items()):
            continue
        result.append(record)
    return result


def stable_sort(
    records: List[Dict[str, Any]], key: Callable[[Dict[str, Any]], Any], descending: bool = False
) -> List[Dict[str, Any]]:
    """Sort records without disturbing the relative order of ties."""
    # sorted(reverse=True) keeps ties in their original order as well
    return sorted(records, key=key, reverse=descending)
