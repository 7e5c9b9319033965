"""Transcript segmentation into comparison units (paragraphs, sentences)."""

from __future__ import annotations

from qualcode.errors import ValidationError
from qualcode.segment.base import BaseSegmenter, Segment
from qualcode.segment.paragraph import ParagraphSegmenter
from qualcode.segment.sentence import SentenceSegmenter

_SEGMENTERS: dict[str, BaseSegmenter] = {
    s.unit: s for s in (ParagraphSegmenter(), SentenceSegmenter())
}

UNITS: tuple[str, ...] = tuple(_SEGMENTERS)


def get_segmenter(unit: str) -> BaseSegmenter:
    """Return the segmenter registered for *unit*.

    Raises:
        ValidationError: If the unit is not supported.
    """
    try:
        return _SEGMENTERS[unit]
    except KeyError:
        supported = ", ".join(UNITS)
        raise ValidationError(
            f"unknown segmentation unit {unit!r} (supported: {supported})", field="unit"
        ) from None


def segment(content: str, unit: str = "paragraph") -> list[Segment]:
    """Split *content* into units of the given kind."""
    return get_segmenter(unit).segment(content)


__all__ = [
    "BaseSegmenter",
    "ParagraphSegmenter",
    "Segment",
    "SentenceSegmenter",
    "UNITS",
    "get_segmenter",
    "segment",
]
