"""Keep the user's place when the page size changes."""

from podnav.utils.errors import InvalidInputError


def reconcile_page(old_page: int, old_page_size: int, new_page_size: int) -> int:
    """Recompute the current page for a new page size.

    The position tracks the first item the user was viewing (the anchor),
    not the page number. The result is not clamped against the collection
    size; pass it through compute_window if the total may have shrunk.

    Args:
        old_page: Page shown before the change (>= 1)
        old_page_size: Previous page size (>= 1)
        new_page_size: New page size (>= 1)

    Returns:
        Page containing the anchor item under the new page size

    Raises:
        InvalidInputError: If any argument is below 1

    Example:
        >>> reconcile_page(2, 20, 10)
        3
    """
    if old_page < 1:
        raise InvalidInputError(f"Page must be >= 1, got {old_page}")
    if old_page_size < 1 or new_page_size < 1:
        raise InvalidInputError(
            f"Page sizes must be positive, got {old_page_size} -> {new_page_size}"
        )

    anchor_index = (old_page - 1) * old_page_size
    return anchor_index // new_page_size + 1
