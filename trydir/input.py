"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into normalized key tokens.
``EventSource`` layers resize detection on top so the selector loop can
pull one event at a time with a bounded wait.
"""

from __future__ import annotations

import os
import select
from collections.abc import Callable
from dataclasses import dataclass

ESC_SEQUENCE_TIMEOUT_MS = 25
_PENDING_BYTES: list[bytes] = []

_CONTROL_KEYS = {
    b"\x03": "CTRL_C",
    b"\x04": "CTRL_D",
    b"\x0e": "CTRL_N",
    b"\x10": "CTRL_P",
    b"\t": "TAB",
    b"\x08": "BACKSPACE",
    b"\x7f": "BACKSPACE",
    b"\r": "ENTER",
    b"\n": "ENTER",
}

_CSI_FINAL_KEYS = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
    b"H": "HOME",
    b"F": "END",
}

_CSI_TILDE_KEYS = {
    "1": "HOME",
    "3": "DELETE",
    "4": "END",
    "5": "PAGE_UP",
    "6": "PAGE_DOWN",
}


@dataclass(frozen=True)
class KeyEvent:
    key: str


@dataclass(frozen=True)
class ResizeEvent:
    columns: int
    lines: int


Event = KeyEvent | ResizeEvent


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


def _read_csi(fd: int) -> str:
    """Decode the remainder of an ``ESC [`` sequence."""
    params: list[bytes] = []
    while True:
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            return "ESC"
        if b"@" <= part <= b"~":
            break
        params.append(part)
        if len(params) > 16:
            return "UNKNOWN"
    raw_params = b"".join(params).decode("ascii", errors="replace")
    if part == b"~":
        return _CSI_TILDE_KEYS.get(raw_params.split(";")[0], "UNKNOWN")
    key = _CSI_FINAL_KEYS.get(part)
    if key is None:
        return "UNKNOWN"
    if ";" in raw_params:
        # Modified arrow keys (shift/alt/ctrl) carry a ``1;N`` parameter.
        return f"MOD_{key}"
    return key


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Read one key token, or ``""`` when ``timeout_ms`` elapses without input."""
    if _PENDING_BYTES:
        ch = _PENDING_BYTES.pop(0)
    else:
        if timeout_ms is not None:
            ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return ""

        ch = os.read(fd, 1)
        if not ch:
            return ""

    control = _CONTROL_KEYS.get(ch)
    if control is not None:
        return control

    if ch == b"\x1b":
        return _read_escape(fd)

    if ch[0] < 0x20:
        return f"CTRL_{chr(ch[0] + 64)}"

    extra = _utf8_length(ch[0]) - 1
    while extra > 0:
        more = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if more is None:
            break
        ch += more
        extra -= 1
    return ch.decode("utf-8", errors="replace")


def _read_escape(fd: int) -> str:
    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq == b"[":
        return _read_csi(fd)
    if seq == b"O":
        final = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if final is None:
            return "ESC"
        return _CSI_FINAL_KEYS.get(final, "UNKNOWN")
    if seq == b"\x1b":
        _PENDING_BYTES.append(seq)
        return "ESC"
    # Meta/Alt chord: terminals send ESC followed by the key itself.
    return f"ALT_{seq.decode('utf-8', errors='replace')}"


def read_line(fd: int) -> str:
    """Read one cooked-mode line from ``fd`` without the trailing newline."""
    buf = bytearray()
    while True:
        ch = os.read(fd, 1)
        if not ch or ch == b"\n":
            break
        buf += ch
    return buf.decode("utf-8", errors="replace").rstrip("\r")


class EventSource:
    """Pull-based event reader with a bounded wait.

    Each ``poll`` returns a ``ResizeEvent`` if the terminal size changed since
    the previous call, otherwise the next ``KeyEvent``, or ``None`` when the
    wait elapses with nothing to report.
    """

    def __init__(self, stdin_fd: int, size_provider: Callable[[], tuple[int, int]]) -> None:
        self.stdin_fd = stdin_fd
        self._size_provider = size_provider
        self._last_size = size_provider()

    def _resize_event(self) -> ResizeEvent | None:
        size = self._size_provider()
        if size == self._last_size:
            return None
        self._last_size = size
        return ResizeEvent(columns=size[0], lines=size[1])

    def poll(self, timeout_ms: int) -> Event | None:
        resized = self._resize_event()
        if resized is not None:
            return resized
        key = read_key(self.stdin_fd, timeout_ms=timeout_ms)
        if key:
            return KeyEvent(key)
        return self._resize_event()
