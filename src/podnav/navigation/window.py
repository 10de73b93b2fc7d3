"""Page window arithmetic.

Turns (total items, requested page, page size) into a clamped page
window. Out-of-range page requests are corrected, never rejected:
pressing "next" on the last page is a normal user action.
"""

import math
from typing import Literal

from pydantic import BaseModel, ConfigDict

from podnav.utils.errors import InvalidInputError

UNLIMITED: Literal["unlimited"] = "unlimited"

PageSize = int | Literal["unlimited"]


class PageWindow(BaseModel):
    """Pagination metadata describing one slice of an ordered collection."""

    model_config = ConfigDict(frozen=True)

    current_page: int
    total_pages: int
    total_items: int
    page_size: PageSize
    has_next: bool
    has_previous: bool

    @property
    def start_item(self) -> int:
        """1-based position of the first item on the page (0 when empty)."""
        if self.total_items == 0:
            return 0
        return page_slice(self).start + 1

    @property
    def end_item(self) -> int:
        """1-based position of the last item on the page (0 when empty)."""
        if self.total_items == 0:
            return 0
        return page_slice(self).stop


def validate_page_size(page_size: PageSize) -> None:
    """Reject page sizes outside the domain (zero, negative, unknown strings)."""
    if page_size == UNLIMITED:
        return
    if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size < 1:
        raise InvalidInputError(
            f"Invalid page size: {page_size!r}",
            suggestion="Use a positive integer or 'unlimited'",
        )


def compute_window(total_items: int, requested_page: int, page_size: PageSize) -> PageWindow:
    """Compute the page window for a collection.

    Args:
        total_items: Number of items in the collection (>= 0)
        requested_page: 1-based page the caller asked for; clamped into range
        page_size: Items per page, or "unlimited" for a single page

    Returns:
        PageWindow with current_page clamped to [1, max(total_pages, 1)]

    Raises:
        InvalidInputError: If total_items is negative or page_size is invalid

    Example:
        >>> compute_window(100, 3, 20).total_pages
        5
    """
    if total_items < 0:
        raise InvalidInputError(f"Total items cannot be negative: {total_items}")
    validate_page_size(page_size)

    if total_items == 0:
        return PageWindow(
            current_page=1,
            total_pages=0,
            total_items=0,
            page_size=page_size,
            has_next=False,
            has_previous=False,
        )

    effective_size = total_items if page_size == UNLIMITED else page_size
    total_pages = math.ceil(total_items / effective_size)
    current_page = min(max(requested_page, 1), total_pages)

    return PageWindow(
        current_page=current_page,
        total_pages=total_pages,
        total_items=total_items,
        page_size=page_size,
        has_next=current_page < total_pages,
        has_previous=current_page > 1,
    )


def page_slice(window: PageWindow) -> slice:
    """0-based slice of the flat collection covered by a window."""
    if window.page_size == UNLIMITED:
        return slice(0, window.total_items)

    start = (window.current_page - 1) * window.page_size
    return slice(start, min(start + window.page_size, window.total_items))


def parse_page_size(raw: str) -> PageSize:
    """Parse a page size typed by a user ("20", "unlimited", "all")."""
    value = raw.strip().lower()
    if value in (UNLIMITED, "all"):
        return UNLIMITED
    try:
        page_size = int(value)
    except ValueError:
        raise InvalidInputError(
            f"Invalid page size: {raw!r}",
            suggestion="Use a positive integer or 'unlimited'",
        ) from None
    validate_page_size(page_size)
    return page_size
