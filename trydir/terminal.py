"""Terminal control helpers for the selector session.

Owns the raw-mode and alternate-screen lifecycle, plus the temporary
hand-back to cooked line input used by the rename and delete prompts.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty

ENTER_TUI = b"\x1b[?1049h\x1b[?25l\x1b[2J\x1b[H"
LEAVE_TUI = b"\x1b[2J\x1b[H\x1b[?25h\x1b[?1049l"
SHOW_CURSOR_AND_CLEAR = b"\x1b[?25h\x1b[2J\x1b[H"
HIDE_CURSOR = b"\x1b[?25l"


DEFAULT_SIZE = (80, 24)


def is_interactive(stdin_fd: int, ui_fd: int) -> bool:
    """Return whether both the input and the UI output streams are terminals."""
    return os.isatty(stdin_fd) and os.isatty(ui_fd)


def terminal_size(fd: int) -> tuple[int, int]:
    """Return ``(columns, lines)`` for ``fd``.

    Stdout is usually captured by the shell wrapper, so the size is read from
    the UI stream instead of going through ``shutil.get_terminal_size``.
    """
    try:
        size = os.get_terminal_size(fd)
    except OSError:
        return DEFAULT_SIZE
    if size.columns <= 0 or size.lines <= 0:
        return DEFAULT_SIZE
    return size.columns, size.lines


class TerminalController:
    """Manage terminal mode transitions for one interactive run."""

    def __init__(self, stdin_fd: int, ui_fd: int) -> None:
        """Capture tty state and bind input/UI file descriptors."""
        self.stdin_fd = stdin_fd
        self.ui_fd = ui_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)
        self._tui_active = False

    @property
    def tui_active(self) -> bool:
        return self._tui_active

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with the cursor hidden."""
        if self._tui_active:
            return
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        # Raw mode is already applied, so a failed write below must still restore.
        self._tui_active = True
        os.write(self.ui_fd, ENTER_TUI)

    def disable_tui_mode(self) -> None:
        """Restore the saved terminal state; safe to call more than once."""
        if not self._tui_active:
            return
        self._tui_active = False
        try:
            os.write(self.ui_fd, LEAVE_TUI)
        finally:
            termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield self
        finally:
            self.disable_tui_mode()

    @contextlib.contextmanager
    def line_mode(self):
        """Temporarily switch to cooked, echoing input on a cleared screen.

        Raw mode is re-entered on the way out, including when the body raises,
        so the caller's main loop always resumes in the state it left.
        """
        termios.tcsetattr(self.stdin_fd, termios.TCSADRAIN, self._saved_tty_state)
        os.write(self.ui_fd, SHOW_CURSOR_AND_CLEAR)
        try:
            yield self
        finally:
            tty.setraw(self.stdin_fd, termios.TCSADRAIN)
            os.write(self.ui_fd, HIDE_CURSOR)
