"""Resume cursors for chunked traversal.

A cursor is the decimal string of a pre-order walk position: how many stack
entries had been consumed when the previous page halted. Resuming replays the
walk over a fresh snapshot and fast-forwards by that many entries, so a
cursor is only meaningful against the same document snapshot and the same
filter configuration that produced it.
"""

from typing import Optional

from ..errors import InvalidCursor


def parse_cursor(cursor: Optional[str]) -> int:
    """Convert a cursor into a walk position.

    Args:
        cursor: Cursor from a previous page, or None to start at the beginning

    Returns:
        Number of walk entries to skip

    Raises:
        InvalidCursor: If the cursor is not a non-negative decimal integer string
    """
    if cursor is None:
        return 0
    if not isinstance(cursor, str):
        raise InvalidCursor(cursor)
    if not cursor.isdigit() or not cursor.isascii():
        raise InvalidCursor(cursor)
    return int(cursor)


def format_cursor(position: int) -> str:
    """Encode a walk position as a cursor string."""
    if position < 0:
        raise ValueError(f"Cursor position cannot be negative: {position}")
    return str(position)
