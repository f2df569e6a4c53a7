"""Compact page-number windows for pagination controls."""

from research_feed.utils.errors import InvalidPage

ELLIPSIS = "…"

# Windows up to this many pages are shown in full.
MAX_FULL_WINDOW = 7

PageToken = int | str


def page_window(current_page: int, total_pages: int) -> list[PageToken]:
    """
    Return the page numbers to show, with ``ELLIPSIS`` for skipped runs.

    >>> page_window(1, 20)
    [1, 2, 3, 4, 5, '…', 20]
    >>> page_window(10, 20)
    [1, '…', 9, 10, 11, '…', 20]

    An empty result (``total_pages == 0``) means no pagination should be
    shown at all.

    Raises:
        InvalidPage: ``total_pages`` is negative, or ``current_page`` is
            outside ``1..total_pages``
    """
    if total_pages < 0:
        raise InvalidPage(f"total_pages must be >= 0, got {total_pages}")
    if total_pages == 0:
        return []
    if not 1 <= current_page <= total_pages:
        raise InvalidPage(f"Page {current_page} is outside 1..{total_pages}")

    if total_pages <= MAX_FULL_WINDOW:
        return list(range(1, total_pages + 1))

    if current_page <= 4:
        return [1, 2, 3, 4, 5, ELLIPSIS, total_pages]

    if current_page >= total_pages - 3:
        return [1, ELLIPSIS, *range(total_pages - 4, total_pages + 1)]

    return [
        1,
        ELLIPSIS,
        current_page - 1,
        current_page,
        current_page + 1,
        ELLIPSIS,
        total_pages,
    ]


def total_pages_for(total_items: int, page_size: int) -> int:
    """Number of pages needed for ``total_items`` (ceiling division)."""
    return -(-total_items // page_size)


def clamp_page(page: int, total_pages: int) -> int:
    """Clamp into ``1..total_pages``; page 1 when there are no pages."""
    return max(1, min(page, max(total_pages, 1)))
