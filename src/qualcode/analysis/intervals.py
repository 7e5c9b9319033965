"""Interval arithmetic over character offsets within a single document.

Intervals are half-open ``[start, end)``. Accepts ``Interval`` objects or
plain ``(start, end)`` tuples.
"""

from __future__ import annotations

from typing import Iterable, Union

from qualcode.errors import ValidationError
from qualcode.store.models import Interval

IntervalLike = Union[Interval, tuple[int, int]]


def _normalize(intervals: Iterable[IntervalLike]) -> list[Interval]:
    out: list[Interval] = []
    for item in intervals:
        iv = item if isinstance(item, Interval) else Interval(*item)
        if iv.end <= iv.start:
            raise ValidationError(
                f"invalid interval [{iv.start}:{iv.end}]: end must be greater than start",
                field="intervals",
            )
        out.append(iv)
    out.sort(key=lambda iv: (iv.start, iv.end))
    return out


def covered_chars(intervals: Iterable[IntervalLike]) -> int:
    """Number of distinct characters covered by *intervals* (overlaps counted once).

    Sweep over intervals sorted by start, tracking the furthest end seen so far.

    Raises:
        ValidationError: If any interval has ``end <= start``.
    """
    total = 0
    max_end: int | None = None
    for iv in _normalize(intervals):
        start = iv.start if max_end is None else max(iv.start, max_end)
        total += max(0, iv.end - start)
        max_end = iv.end if max_end is None else max(max_end, iv.end)
    return total


def coverage_percent(intervals: Iterable[IntervalLike], total_length: int) -> float:
    """Covered characters as a percentage of *total_length* (0.0 for empty documents)."""
    if total_length == 0:
        return 0.0
    return 100.0 * covered_chars(intervals) / total_length


def merge_intervals(intervals: Iterable[IntervalLike]) -> list[Interval]:
    """Union of *intervals* as sorted, non-overlapping spans.

    Touching spans (``a.end == b.start``) are joined.
    """
    merged: list[Interval] = []
    for iv in _normalize(intervals):
        if merged and iv.start <= merged[-1].end:
            last = merged[-1]
            merged[-1] = Interval(last.start, max(last.end, iv.end))
        else:
            merged.append(iv)
    return merged


def overlaps(a: IntervalLike, b: IntervalLike) -> bool:
    """True if the two spans share at least one character."""
    a_start, a_end = (a.start, a.end) if isinstance(a, Interval) else a
    b_start, b_end = (b.start, b.end) if isinstance(b, Interval) else b
    return a_start < b_end and a_end > b_start


def overlap_length(a: IntervalLike, b: IntervalLike) -> int:
    a_start, a_end = (a.start, a.end) if isinstance(a, Interval) else a
    b_start, b_end = (b.start, b.end) if isinstance(b, Interval) else b
    return max(0, min(a_end, b_end) - max(a_start, b_start))
