"""Paragraph segmenter: units separated by one or more blank lines."""

from __future__ import annotations

import re

from qualcode.segment.base import BaseSegmenter

# A line break, optional whitespace (including further blank lines), a line break.
_BLANK_LINE_RE = re.compile(r"\n\s*\n")


class ParagraphSegmenter(BaseSegmenter):
    """Split on blank-line boundaries.

    Each part is trimmed and empty parts are dropped. Offsets are recovered by
    searching the trimmed text in the original string, starting after the
    previous unit, so repeated paragraphs are located correctly.
    """

    unit = "paragraph"

    def _spans(self, content: str) -> list[tuple[int, int]]:
        spans: list[tuple[int, int]] = []
        offset = 0
        for part in _BLANK_LINE_RE.split(content):
            trimmed = part.strip()
            if not trimmed:
                continue
            start = content.find(trimmed, offset)
            end = start + len(trimmed)
            spans.append((start, end))
            offset = end
        return spans
