"""Small string helpers shared by the selector and the CLI.

Covers the query sanitizer, ``YYYY-MM-DD-`` date prefixes, human-readable
sizes, and POSIX/fish shell quoting for the emitted command lines.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from pathlib import Path

DATE_PREFIX_LEN = 11
_DATE_HYPHEN_POSITIONS = (4, 7, 10)
_ALLOWED_PUNCTUATION = frozenset("-_. ")
_SIZE_UNITS = ("B", "K", "M", "G", "T")


def is_printable(ch: str) -> bool:
    """Return whether a typed character may enter the query buffer."""
    return len(ch) == 1 and ((ch.isascii() and ch.isalnum()) or ch in _ALLOWED_PUNCTUATION)


def sanitize_query(text: str) -> str:
    """Drop every character outside ASCII alphanumerics and ``-_.`` plus space."""
    return "".join(ch for ch in text if is_printable(ch))


def split_date_prefixed(name: str) -> tuple[str, str] | None:
    """Split ``YYYY-MM-DD-rest`` into ``("YYYY-MM-DD", "rest")``.

    Only hyphen positions are checked, so ``2025-08-2x-foo`` still splits.
    """
    if len(name) < DATE_PREFIX_LEN:
        return None
    if any(name[pos] != "-" for pos in _DATE_HYPHEN_POSITIONS):
        return None
    return name[:10], name[DATE_PREFIX_LEN:]


def today_prefix(now: float | None = None) -> str:
    """Return the UTC date for ``now`` (default: current time) as ``YYYY-MM-DD``."""
    stamp = time.time() if now is None else now
    return time.strftime("%Y-%m-%d", time.gmtime(max(0.0, stamp)))


def dated_name(prefix: str, name: str) -> str:
    """Join a date prefix and a name, turning each whitespace char into ``-``."""
    return "".join("-" if ch.isspace() else ch for ch in f"{prefix}-{name}")


def format_human_size(num_bytes: int) -> str:
    value = float(num_bytes)
    idx = 0
    while value >= 1024.0 and idx + 1 < len(_SIZE_UNITS):
        value /= 1024.0
        idx += 1
    if idx == 0:
        return f"{num_bytes}B"
    return f"{value:.1f}{_SIZE_UNITS[idx]}"


def shell_escape(path: Path | str) -> str:
    """Single-quote ``path`` for POSIX shells."""
    escaped = str(path).replace("'", "'\\''")
    return f"'{escaped}'"


def is_fish_shell(environ: Mapping[str, str]) -> bool:
    return "fish" in environ.get("SHELL", "")


def dir_assign_for_shell(directory: Path, environ: Mapping[str, str]) -> str:
    escaped = shell_escape(directory)
    if is_fish_shell(environ):
        return f"set -l dir {escaped}"
    return f"dir={escaped}"


def join_shell(parts: list[str]) -> str:
    return " && ".join(parts)


def expand_home(raw: str, home: Path | None = None) -> Path:
    """Expand a leading ``~/`` (or bare ``~``) against ``home``."""
    base = home if home is not None else Path.home()
    if raw == "~":
        return base
    if raw.startswith("~/"):
        return base / raw[2:]
    return Path(raw)
