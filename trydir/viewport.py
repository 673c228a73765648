"""Scroll-window math for the selector list."""

from __future__ import annotations

RESERVED_LINES = 8
MIN_VISIBLE_ITEMS = 3


def compute_viewport(cursor: int, scroll: int, max_visible: int, total: int) -> tuple[int, int]:
    """Return ``(scroll, end)`` keeping ``cursor`` inside the visible window.

    Moving above the window snaps ``scroll`` to the cursor; moving past it
    makes the cursor the last visible row. ``end`` is exclusive and clamped
    to ``total``.
    """
    if cursor < scroll:
        scroll = cursor
    elif cursor >= scroll + max_visible:
        scroll = cursor + 1 - max_visible
    return scroll, min(scroll + max_visible, total)


def max_visible_rows(
    term_lines: int,
    reserved: int = RESERVED_LINES,
    minimum: int = MIN_VISIBLE_ITEMS,
) -> int:
    """Rows available to list entries after header/footer chrome."""
    return max(term_lines - reserved, minimum)
