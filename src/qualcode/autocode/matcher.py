"""Pattern compilation and match scanning for auto-coding."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterator

from qualcode.errors import PatternError, ValidationError
from qualcode.store.models import Transcript

logger = logging.getLogger(__name__)

MODES: tuple[str, ...] = ("keyword", "regex")


@dataclass(frozen=True)
class PatternMatch:
    transcript_id: str
    transcript_title: str
    start: int
    end: int
    text: str
    context: str


def compile_pattern(pattern: str, mode: str = "keyword") -> re.Pattern[str]:
    """Compile an auto-code pattern, case-insensitively.

    ``keyword`` matches the literal text; ``regex`` uses Python regular
    expression syntax.

    Raises:
        ValidationError: If *pattern* is blank or *mode* is unknown.
        PatternError: If a regex pattern does not compile.
    """
    if mode not in MODES:
        raise ValidationError(
            f"unknown pattern mode {mode!r} (supported: {', '.join(MODES)})", field="mode"
        )
    if not pattern or not pattern.strip():
        raise ValidationError("pattern must not be blank", field="pattern")

    source = re.escape(pattern) if mode == "keyword" else pattern
    try:
        return re.compile(source, re.IGNORECASE)
    except re.error as exc:
        raise PatternError(pattern, exc.msg, exc.pos) from exc


def context_excerpt(content: str, start: int, end: int, chars: int) -> str:
    """Match text padded with *chars* characters either side, ``...`` where cut."""
    lo = max(0, start - chars)
    hi = min(len(content), end + chars)
    prefix = "..." if lo > 0 else ""
    suffix = "..." if hi < len(content) else ""
    return f"{prefix}{content[lo:hi]}{suffix}"


def scan(
    regex: re.Pattern[str],
    transcript: Transcript,
    context_chars: int,
) -> Iterator[PatternMatch]:
    """Yield non-overlapping, non-empty matches of *regex* in *transcript*."""
    content = transcript.content
    skipped = 0
    for m in regex.finditer(content):
        start, end = m.span()
        if start == end:
            skipped += 1
            continue
        yield PatternMatch(
            transcript_id=transcript.id,
            transcript_title=transcript.title,
            start=start,
            end=end,
            text=m.group(0),
            context=context_excerpt(content, start, end, context_chars),
        )
    if skipped:
        logger.warning(
            "Skipped %d zero-length matches of %r in %s",
            skipped, regex.pattern, transcript.id,
        )
