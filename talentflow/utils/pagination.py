"""
Pagination helper functions for list tools.

Pages are 1-based and computed in memory over an already filtered and
sorted sequence.
"""

import math
from typing import Any, Dict, List, Sequence, Tuple


def compute_total_pages(total: int, page_size: int) -> int:
    """
    Number of pages needed for ``total`` records.

    Args:
        total: Number of matching records
        page_size: Records per page (>= 1)

    Returns:
        ceil(total / page_size); 0 when there are no records
    """
    return math.ceil(total / page_size)


def slice_page(records: Sequence[Any], page: int, page_size: int) -> List[Any]:
    """
    Extract one page from a sequence.

    A page past the end yields an empty list rather than an error.

    Args:
        records: Filtered and sorted records
        page: 1-based page number
        page_size: Records per page

    Returns:
        Records for the requested page (at most page_size)
    """
    start = (page - 1) * page_size
    return list(records[start : start + page_size])


def paginate_results(
    records: Sequence[Any], page: int, page_size: int
) -> Tuple[List[Any], Dict[str, int]]:
    """
    Apply pagination logic to an in-memory result set.

    Args:
        records: Filtered and sorted records
        page: 1-based page number
        page_size: Records per page

    Returns:
        Tuple of (data, pagination) where pagination carries
        page, page_size, total and total_pages
    """
    total = len(records)
    data = slice_page(records, page, page_size)
    pagination = {
        "page": page,
        "page_size": page_size,
        "total": total,
        "total_pages": compute_total_pages(total, page_size),
    }
    return data, pagination
