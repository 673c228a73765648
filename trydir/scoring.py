"""Ranking for try directories.

Scores combine a case-insensitive ordered-subsequence match against the
query with recency boosts from creation and modification times. The caller
supplies ``now`` so results are deterministic for a fixed clock.
"""

from __future__ import annotations

import math

from .text import split_date_prefixed

DATE_PREFIX_BONUS = 2.0
LENGTH_SMOOTHING = 10.0
CREATED_WEIGHT = 2.0
MODIFIED_WEIGHT = 3.0
SECONDS_PER_DAY = 86_400.0
SECONDS_PER_HOUR = 3_600.0


def _age(now: float, timestamp: float, unit_seconds: float) -> float:
    # Future timestamps (clock skew) count as age zero.
    return max(0.0, now - timestamp) / unit_seconds


def recency_bonus(created_at: float | None, modified_at: float | None, now: float) -> float:
    """Return the creation (per-day) plus modification (per-hour) decay boosts."""
    bonus = 0.0
    if created_at is not None:
        bonus += CREATED_WEIGHT / math.sqrt(_age(now, created_at, SECONDS_PER_DAY) + 1.0)
    if modified_at is not None:
        bonus += MODIFIED_WEIGHT / math.sqrt(_age(now, modified_at, SECONDS_PER_HOUR) + 1.0)
    return bonus


def score(
    text: str,
    query: str,
    created_at: float | None,
    modified_at: float | None,
    now: float,
) -> float:
    """Score ``text`` against ``query``.

    Matching walks ``text`` once, consuming ``query`` characters in order.
    Every match adds 1, a word-boundary match adds another 1, and each match
    after the first adds ``1/sqrt(gap+1)``. The accumulated score (date
    bonus included) is then scaled by ``len(query) / (last_pos + 1)`` and by
    ``10 / (len(text) + 10)``. An unmatched query returns exactly ``0.0``.
    Recency boosts are added last and apply even for an empty query.
    """
    total = DATE_PREFIX_BONUS if split_date_prefixed(text) is not None else 0.0

    if query:
        text_folded = text.lower()
        query_folded = query.lower()
        query_len = len(query_folded)
        matched = 0
        last_pos: int | None = None
        prev_ch: str | None = None
        for pos, ch in enumerate(text_folded):
            if matched >= query_len:
                break
            if ch == query_folded[matched]:
                total += 1.0
                if prev_ch is None or not prev_ch.isalnum():
                    total += 1.0
                if last_pos is not None:
                    total += 1.0 / math.sqrt(pos - last_pos)
                last_pos = pos
                matched += 1
            prev_ch = ch

        if matched < query_len or last_pos is None:
            return 0.0
        total *= query_len / (last_pos + 1)
        total *= LENGTH_SMOOTHING / (len(text) + LENGTH_SMOOTHING)

    return total + recency_bonus(created_at, modified_at, now)
