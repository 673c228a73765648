"""Rendering for the try-directory selector.

Defines the per-frame render context and composes full ANSI frames that are
written in one call. Also formats the line-mode prompts shown by the rename
and delete sub-flows.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from .ansi import clip_text, display_width
from .entry import Entry
from .text import format_human_size
from .ui_theme import DEFAULT_THEME, UITheme
from .viewport import compute_viewport, max_visible_rows

TITLE = "📁 Try Directory Selection"
ENTRY_ICON = "📁 "
HELP_LINE = "↑↓: Navigate  Enter: Select  Ctrl-D: Delete  ESC: Cancel"
DELETE_PENDING_HINT = "delete pending: type YES to confirm"
CREATE_ROWS = 1
SIZE_PLACEHOLDER = "..."

_JUST_NOW_MAX = 9
_MINUTE = 60
_HOUR = 3_600
_DAY = 86_400
_MONTH = 2_592_000
_YEAR = 31_536_000


@dataclass
class RenderContext:
    width: int
    height: int
    cursor: int
    scroll: int
    input_buf: str
    entries: list[Entry]
    now: float
    status_message: str | None = None
    show_delete_pending: bool = False
    theme: UITheme = field(default=DEFAULT_THEME)


def format_relative_time(timestamp: float | None, now: float) -> str:
    """Format ``timestamp`` as a short age such as ``3h ago``."""
    if timestamp is None:
        return "?"
    seconds = int(now - timestamp)
    if seconds <= _JUST_NOW_MAX:
        return "just now"
    if seconds < _HOUR:
        return f"{seconds // _MINUTE}m ago"
    if seconds < _DAY:
        return f"{seconds // _HOUR}h ago"
    if seconds < _MONTH:
        return f"{seconds // _DAY}d ago"
    if seconds < _YEAR:
        return f"{seconds // _MONTH}mo ago"
    return f"{seconds // _YEAR}y ago"


def highlight_matches(text: str, query: str, theme: UITheme, selected: bool) -> str:
    """Style the characters of ``text`` consumed by an in-order walk of ``query``."""
    if not query:
        return text
    query_folded = query.lower()
    restore = theme.reset + (theme.reverse if selected else "")
    out: list[str] = []
    qi = 0
    for ch in text:
        if qi < len(query_folded) and ch.lower() == query_folded[qi]:
            out.append(f"{theme.match}{ch}{restore}")
            qi += 1
        else:
            out.append(ch)
    return "".join(out)


def _entry_meta(entry: Entry, now: float) -> str:
    age = format_relative_time(entry.modified_at, now)
    size = SIZE_PLACEHOLDER if entry.size is None else format_human_size(entry.size)
    return f"{size}, {age}"


def _entry_row(entry: Entry, context: RenderContext, selected: bool) -> str:
    theme = context.theme
    prefix = "→ " if selected else "  "
    name = clip_text(entry.name, max(0, context.width - display_width(prefix + ENTRY_ICON) - 1))
    parts = [prefix, ENTRY_ICON]
    if selected:
        parts.append(theme.reverse)
    parts.append(highlight_matches(name, context.input_buf, theme, selected))
    parts.append(theme.reset)

    used = display_width(prefix + ENTRY_ICON) + display_width(name)
    remaining = context.width - used
    if remaining > 1:
        meta = _entry_meta(entry, context.now)
        if len(meta) >= remaining:
            meta = " " + meta[: remaining - 1]
        else:
            meta = meta.rjust(remaining)
        parts.append(f"{theme.dim}{meta}{theme.reset}")
    return "".join(parts)


def _create_row(context: RenderContext, selected: bool) -> str:
    theme = context.theme
    label = "Create new" if not context.input_buf else f"Create new: {context.input_buf}"
    marker = f"{theme.marker}→ {theme.reset}" if selected else "  "
    body = clip_text(label, max(0, context.width - 4))
    if selected:
        body = f"{theme.reverse}{body}{theme.reset}"
    return f"{marker}+ {body}"


def build_frame(context: RenderContext) -> str:
    """Compose one full selector frame.

    Every line ends with erase-to-end-of-line and the frame ends with
    erase-below, so redraws overwrite in place instead of clearing first.
    """
    theme = context.theme
    separator = "─" * max(context.width - 1, 1)
    lines: list[str] = [
        f"{theme.title}{TITLE}{theme.reset}",
        f"{theme.dim}{separator}{theme.reset}",
        f"Search: {context.input_buf}",
        "",
    ]

    total = len(context.entries) + CREATE_ROWS
    max_visible = max_visible_rows(context.height)
    scroll, end = compute_viewport(context.cursor, context.scroll, max_visible, total)
    for idx in range(scroll, end):
        selected = idx == context.cursor
        if idx < len(context.entries):
            lines.append(_entry_row(context.entries[idx], context, selected))
            continue
        if context.entries:
            lines.append("")
        lines.append(_create_row(context, selected))

    lines.append(f"{theme.dim}{separator}{theme.reset}")
    lines.append(f"{theme.dim}{HELP_LINE}{theme.reset}")
    if context.show_delete_pending:
        lines.append(f"{theme.dim}{DELETE_PENDING_HINT}{theme.reset}")
    elif context.status_message:
        lines.append(f"{theme.dim}{context.status_message}{theme.reset}")

    return "\x1b[H" + "\x1b[K\r\n".join(lines) + "\x1b[K\x1b[J"


def render_selector(context: RenderContext, fd: int) -> None:
    os.write(fd, build_frame(context).encode("utf-8", errors="replace"))


def rename_prompt(today: str, theme: UITheme) -> str:
    return f"{theme.prompt_title}Enter new try name{theme.reset}\n> {theme.dim}{today}-{theme.reset}"


def delete_prompt(entry: Entry, files: int, total_bytes: int, theme: UITheme) -> str:
    return (
        f"{theme.prompt_title}Delete Directory{theme.reset}\n\n"
        f"Are you sure you want to delete: {entry.name}\n"
        f"  in {entry.location}\n"
        f"  files: {files} files\n"
        f"  size: {format_human_size(total_bytes)}\n\n"
        f"{theme.warning}Type {theme.reset}YES{theme.warning} to confirm: {theme.reset}"
    )

