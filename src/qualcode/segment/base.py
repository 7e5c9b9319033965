"""Base segmenter interface for reliability comparison units."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from qualcode.store.models import Interval


@dataclass(frozen=True)
class Segment:
    """One comparison unit: a span of the original text."""

    index: int
    start: int
    end: int
    text: str

    @property
    def interval(self) -> Interval:
        return Interval(self.start, self.end)


class BaseSegmenter(ABC):
    """Abstract base for all segmenters.

    Subclasses implement ``_spans()``; ``segment()`` turns the spans into
    Segment objects and applies the whole-document fallback when no unit
    was found (e.g. empty content).
    """

    unit: str = ""

    def segment(self, content: str) -> list[Segment]:
        """Split *content* into comparison units.

        Returns:
            Ordered Segments whose offsets index into *content*. Never empty.
        """
        spans = self._spans(content)
        if not spans:
            spans = [(0, len(content))]
        return [
            Segment(index=i, start=start, end=end, text=content[start:end])
            for i, (start, end) in enumerate(spans)
        ]

    @abstractmethod
    def _spans(self, content: str) -> list[tuple[int, int]]:
        """Return ``(start, end)`` offsets of each unit, in document order."""
