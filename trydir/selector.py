"""Interactive try-directory selector.

``TrySelector`` owns the session state, turns key and resize events into
state transitions, and drives the redraw loop. The rename and delete
sub-flows are explicit ``SelectorMode`` values; the loop hands the terminal
back to cooked line input while one of them is active.
"""

from __future__ import annotations

import os
import time
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path

from loguru import logger

from .entry import Entry
from .input import Event, EventSource, KeyEvent, ResizeEvent, read_line
from .render import RenderContext, delete_prompt, rename_prompt, render_selector
from .scoring import score
from .storage import delete_entry, directory_stats, scan_entries
from .terminal import TerminalController, is_interactive, terminal_size
from .text import dated_name, is_printable, sanitize_query, today_prefix
from .ui_theme import DEFAULT_THEME, UITheme
from .viewport import compute_viewport, max_visible_rows

POLL_INTERVAL_MS = 200
CREATE_ROWS = 1
DELETE_CONFIRMATION = "YES"

_UP_KEYS = frozenset({"UP", "CTRL_P", "PAGE_UP"})
_DOWN_KEYS = frozenset({"DOWN", "CTRL_N", "PAGE_DOWN"})
_CANCEL_KEYS = frozenset({"ESC", "CTRL_C"})


class ActionType(Enum):
    OPEN_EXISTING = "open_existing"
    CREATE_NEW = "create_new"
    CANCEL = "cancel"


@dataclass(frozen=True)
class Selection:
    kind: ActionType
    path: Path | None = None

    def __post_init__(self) -> None:
        if self.kind is ActionType.CANCEL and self.path is not None:
            raise ValueError("a cancelled selection carries no path")
        if self.kind is not ActionType.CANCEL and self.path is None:
            raise ValueError(f"{self.kind.value} selection requires a path")


class SelectorMode(Enum):
    MAIN = "main"
    RENAME_PROMPT = "rename_prompt"
    DELETE_CONFIRM = "delete_confirm"


@dataclass
class SelectorState:
    columns: int
    lines: int
    input: str = ""
    cursor: int = 0
    scroll: int = 0
    entries_cache: list[Entry] | None = None
    status_message: str | None = None
    result: Selection | None = None
    mode: SelectorMode = SelectorMode.MAIN
    delete_target: Entry | None = None
    dirty: bool = True


def rank_entries(entries: list[Entry], query: str, now: float) -> list[Entry]:
    """Score ``entries`` against ``query`` and sort them best first.

    With a non-empty query, entries scoring ``0.0`` are dropped. The sort is
    stable, so ties keep scan order.
    """
    scored = [
        replace(entry, score=score(entry.name, query, entry.created_at, entry.modified_at, now))
        for entry in entries
    ]
    if query:
        scored = [entry for entry in scored if entry.score > 0.0]
    scored.sort(key=lambda entry: entry.score, reverse=True)
    return scored


class TrySelector:
    """Selection engine over the child directories of ``base_path``."""

    def __init__(
        self,
        base_path: Path,
        initial_query: str = "",
        *,
        stdin_fd: int = 0,
        ui_fd: int = 2,
        theme: UITheme = DEFAULT_THEME,
        clock: Callable[[], float] = time.time,
        list_entries: Callable[[Path], list[Entry]] = scan_entries,
        draw: Callable[[RenderContext], None] | None = None,
        size: tuple[int, int] | None = None,
        poll_interval_ms: int = POLL_INTERVAL_MS,
    ) -> None:
        self.base_path = base_path
        self.stdin_fd = stdin_fd
        self.ui_fd = ui_fd
        self.theme = theme
        self.poll_interval_ms = poll_interval_ms
        self._clock = clock
        self._list_entries = list_entries
        self._draw = draw if draw is not None else self._draw_to_ui
        columns, lines = size if size is not None else terminal_size(ui_fd)
        self.state = SelectorState(columns=columns, lines=lines, input=sanitize_query(initial_query))
        self.ranked: list[Entry] = []

    # state transitions

    @property
    def total_items(self) -> int:
        return len(self.ranked) + CREATE_ROWS

    def load_entries(self) -> list[Entry]:
        if self.state.entries_cache is None:
            self.state.entries_cache = self._list_entries(self.base_path)
        return self.state.entries_cache

    def refresh(self, now: float) -> None:
        """Rescore, clamp the cursor, and recompute the viewport."""
        state = self.state
        self.ranked = rank_entries(self.load_entries(), state.input, now)
        state.cursor = min(state.cursor, self.total_items - 1)
        state.scroll, _ = compute_viewport(
            state.cursor,
            state.scroll,
            max_visible_rows(state.lines),
            self.total_items,
        )

    def render_context(self, now: float) -> RenderContext:
        state = self.state
        return RenderContext(
            width=state.columns,
            height=state.lines,
            cursor=state.cursor,
            scroll=state.scroll,
            input_buf=state.input,
            entries=self.ranked,
            now=now,
            status_message=state.status_message,
            show_delete_pending=state.mode is SelectorMode.DELETE_CONFIRM,
            theme=self.theme,
        )

    def handle_event(self, event: Event) -> None:
        if isinstance(event, ResizeEvent):
            self.state.columns = event.columns
            self.state.lines = event.lines
            self.state.dirty = True
        elif isinstance(event, KeyEvent):
            self.handle_key(event.key)

    def handle_key(self, key: str) -> None:
        """Apply one key token to the main-mode state."""
        state = self.state
        if key in _CANCEL_KEYS:
            state.result = Selection(ActionType.CANCEL)
        elif key in _UP_KEYS:
            if state.cursor > 0:
                state.cursor -= 1
                state.dirty = True
        elif key in _DOWN_KEYS:
            if state.cursor + 1 < self.total_items:
                state.cursor += 1
                state.dirty = True
        elif key == "ENTER":
            self._activate_cursor()
        elif key == "BACKSPACE":
            state.input = state.input[:-1]
            state.cursor = 0
            state.dirty = True
        elif key == "CTRL_D":
            if state.cursor < len(self.ranked):
                state.delete_target = self.ranked[state.cursor]
                state.mode = SelectorMode.DELETE_CONFIRM
                state.dirty = True
        elif is_printable(key):
            state.input += key
            state.cursor = 0
            state.dirty = True

    def _activate_cursor(self) -> None:
        state = self.state
        if state.cursor < len(self.ranked):
            state.result = Selection(ActionType.OPEN_EXISTING, self.ranked[state.cursor].location)
        elif state.input:
            name = dated_name(today_prefix(self._clock()), state.input)
            state.result = Selection(ActionType.CREATE_NEW, self.base_path / name)
        else:
            state.mode = SelectorMode.RENAME_PROMPT

    # sub-flows

    def rename_flow(self, terminal: TerminalController, read_input: Callable[[], str]) -> None:
        """Prompt for a new entry name in line mode; an empty answer aborts."""
        state = self.state
        today = today_prefix(self._clock())
        try:
            with terminal.line_mode():
                self._write(rename_prompt(today, self.theme))
                name = read_input().strip()
        finally:
            state.mode = SelectorMode.MAIN
            state.dirty = True
        if name:
            state.result = Selection(ActionType.CREATE_NEW, self.base_path / dated_name(today, name))
        else:
            state.status_message = "Create cancelled"

    def delete_flow(self, terminal: TerminalController, read_input: Callable[[], str]) -> None:
        """Show size details for the pending entry and delete it on exact ``YES``."""
        state = self.state
        target = state.delete_target
        if target is None:
            state.mode = SelectorMode.MAIN
            return
        files, total_bytes = directory_stats(target.location)
        try:
            with terminal.line_mode():
                self._write(delete_prompt(target, files, total_bytes, self.theme))
                answer = read_input().strip()
        finally:
            state.mode = SelectorMode.MAIN
            state.delete_target = None
            state.dirty = True

        if answer == DELETE_CONFIRMATION:
            delete_entry(target.location)
            state.entries_cache = None
            state.status_message = f"Deleted: {target.name}"
            logger.debug("deleted {} ({} files, {} bytes)", target.location, files, total_bytes)
        else:
            state.status_message = "Delete cancelled"

    # loop

    def run(self) -> Selection | None:
        """Run the interactive session on the real terminal.

        Returns ``None`` without touching terminal modes when stdin or the UI
        stream is not a terminal.
        """
        if not is_interactive(self.stdin_fd, self.ui_fd):
            logger.warning("try requires an interactive terminal")
            return None
        terminal = TerminalController(self.stdin_fd, self.ui_fd)
        events = EventSource(self.stdin_fd, lambda: terminal_size(self.ui_fd))
        return self.run_loop(terminal, events, lambda: read_line(self.stdin_fd))

    def run_loop(
        self,
        terminal: TerminalController,
        events: EventSource,
        read_input: Callable[[], str],
    ) -> Selection | None:
        """Poll events and redraw until a selection is made.

        Only dirty iterations rescore and redraw. Interrupts cancel.
        """
        state = self.state
        with terminal.raw_mode():
            while state.result is None:
                try:
                    if state.mode is SelectorMode.RENAME_PROMPT:
                        self.rename_flow(terminal, read_input)
                        continue
                    if state.dirty:
                        now = self._clock()
                        self.refresh(now)
                        self._draw(self.render_context(now))
                        state.dirty = False
                    if state.mode is SelectorMode.DELETE_CONFIRM:
                        self.delete_flow(terminal, read_input)
                        continue
                    event = events.poll(self.poll_interval_ms)
                except KeyboardInterrupt:
                    state.result = Selection(ActionType.CANCEL)
                    break
                if event is not None:
                    self.handle_event(event)
        logger.debug("selector finished with {}", state.result)
        return state.result

    def _write(self, text: str) -> None:
        os.write(self.ui_fd, text.encode("utf-8", errors="replace"))

    def _draw_to_ui(self, context: RenderContext) -> None:
        render_selector(context, self.ui_fd)
