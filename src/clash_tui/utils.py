"""
Utility functions for the clashtui dashboard.

Contains:
- format_bytes / format_speed: human readable sizes and rates
- truncate: fixed-width text columns
- visible_window: scroll window that keeps a cursor on screen
"""

from typing import Optional, Tuple

_UNITS = [("GB", 1024 ** 3), ("MB", 1024 ** 2), ("KB", 1024)]


def format_bytes(value: int) -> str:
    """Format a byte count using binary units, e.g. ``1.50 MB``."""
    for unit, size in _UNITS:
        if value >= size:
            return f"{value / size:.2f} {unit}"
    return f"{value} B"


def format_speed(bytes_per_sec: int) -> str:
    return f"{format_bytes(bytes_per_sec)}/s"


def truncate(text: str, max_len: int) -> str:
    """Cut ``text`` to ``max_len`` characters, marking the cut with an ellipsis."""
    if len(text) <= max_len:
        return text
    return text[:max_len - 1] + "…"


def visible_window(count: int, cursor: Optional[int], height: int) -> Tuple[int, int]:
    """
    Slice bounds for a list of ``count`` rows shown in ``height`` lines.

    The window scrolls just enough to keep the cursor visible, keeping the
    cursor row roughly centred once the list is longer than the view.
    """
    if height <= 0 or count <= height:
        return 0, count
    position = cursor or 0
    start = max(0, min(position - height // 2, count - height))
    return start, start + height
