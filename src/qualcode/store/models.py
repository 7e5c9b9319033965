"""Domain models for the coding engine."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone


def new_id() -> str:
    return uuid.uuid4().hex


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


@dataclass(frozen=True)
class Interval:
    """Half-open character span ``[start, end)`` within one document."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class Case:
    id: str
    name: str
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Transcript:
    id: str
    title: str
    content: str  # immutable once created; offsets index into this
    case_id: str | None = None

    def __len__(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class Code:
    """A code (research question / theme). Codes form a forest via parent_code_id."""

    id: str
    text: str
    color: str = "#6B7280"
    parent_code_id: str | None = None


@dataclass(frozen=True)
class Coding:
    """A span of a transcript bound to a code."""

    id: str
    transcript_id: str
    code_id: str
    start_offset: int
    end_offset: int
    coded_text: str
    created_at: str = field(default_factory=utc_now)

    @property
    def interval(self) -> Interval:
        return Interval(self.start_offset, self.end_offset)

    @property
    def length(self) -> int:
        return self.end_offset - self.start_offset
