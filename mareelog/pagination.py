"""
Pagination of Chronological Rows

Pages are chunks of rows sized for one chart. Every page after the first
starts with the last row of the page before it, so a line drawn across
consecutive pages has no gap at the boundary.
"""

from typing import List, Sequence, TypeVar

T = TypeVar("T")


def chunk(items: Sequence[T], size: int) -> List[List[T]]:
    """
    Split a sequence into contiguous chunks of ``size`` items.

    Raises:
        ValueError: If size is less than 1.
    """
    if size < 1:
        raise ValueError(f"Page size must be at least 1, got {size}")
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


def paginate(rows: Sequence[T], page_size: int) -> List[List[T]]:
    """
    Split rows into overlapping pages.

    Args:
        rows: Chronologically sorted rows.
        page_size: Rows per page before the overlap row is added.

    Returns:
        List of pages. Page k > 0 holds the last original row of page k - 1
        followed by its own rows.
    """
    pages = chunk(rows, page_size)

    last_row = None
    for i, page in enumerate(pages):
        own_last = page[-1]
        if i > 0:
            page.insert(0, last_row)
        last_row = own_last

    return pages
