from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass
class Entry:
    """One candidate directory under the tries root.

    ``created_at`` and ``modified_at`` are POSIX timestamps when the platform
    reports them. ``score`` is recomputed for every query edit and never
    persisted.
    """

    name: str
    location: Path
    created_at: float | None = None
    modified_at: float | None = None
    score: float = 0.0
    size: int | None = None
