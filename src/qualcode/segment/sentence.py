"""Sentence segmenter: runs of text closed by ``.``, ``!`` or ``?``."""

from __future__ import annotations

import re

from qualcode.segment.base import BaseSegmenter

_SENTENCE_RE = re.compile(r"[^.!?]+[.!?]+")


class SentenceSegmenter(BaseSegmenter):
    """Each unit is a run of non-terminator characters plus its terminator(s).

    Trailing text without a terminator does not form a unit.
    """

    unit = "sentence"

    def _spans(self, content: str) -> list[tuple[int, int]]:
        return [m.span() for m in _SENTENCE_RE.finditer(content)]
