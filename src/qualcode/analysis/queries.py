"""Overlap-based queries over codings: co-occurrence and boolean coding queries."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Literal

from qualcode.analysis.intervals import overlap_length, overlaps
from qualcode.errors import ValidationError
from qualcode.store.models import Coding
from qualcode.store.project import Project

MAX_QUERY_MATCHES = 100

Operator = Literal["AND", "OR", "NOT"]
_OPERATORS: frozenset[str] = frozenset({"AND", "OR", "NOT"})


# ---------------------------------------------------------------------------
# Co-occurrence
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class OverlapSegment:
    transcript_id: str
    start: int
    end: int
    text: str


@dataclass
class CooccurrencePair:
    code_ids: tuple[str, str]
    segments: list[OverlapSegment] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.segments)


def cooccurrence(
    project: Project,
    code_ids: list[str],
    min_overlap: int = 1,
) -> list[CooccurrencePair]:
    """Find where each pair of codes is applied to overlapping text.

    Args:
        project: Project to query.
        code_ids: Codes to compare pairwise (fewer than two → no pairs).
        min_overlap: Minimum shared characters for a pair of codings to count.

    Returns:
        One CooccurrencePair per code pair that has at least one overlap,
        in the order the pairs appear in *code_ids*.
    """
    if min_overlap < 1:
        raise ValidationError("min_overlap must be >= 1", field="min_overlap")
    code_ids = list(dict.fromkeys(code_ids))
    if len(code_ids) < 2:
        return []
    for code_id in code_ids:
        project.get_code(code_id)

    wanted = set(code_ids)
    by_transcript: dict[str, list[Coding]] = {}
    for coding in project.codings.codings_for():
        if coding.code_id in wanted:
            by_transcript.setdefault(coding.transcript_id, []).append(coding)

    pairs: list[CooccurrencePair] = []
    for code_a, code_b in itertools.combinations(code_ids, 2):
        pair = CooccurrencePair(code_ids=(code_a, code_b))
        for transcript_id, codings in by_transcript.items():
            content = project.get_transcript(transcript_id).content
            a_codings = [c for c in codings if c.code_id == code_a]
            b_codings = [c for c in codings if c.code_id == code_b]
            for a in a_codings:
                for b in b_codings:
                    if overlap_length(a.interval, b.interval) >= min_overlap:
                        start = max(a.start_offset, b.start_offset)
                        end = min(a.end_offset, b.end_offset)
                        pair.segments.append(
                            OverlapSegment(transcript_id, start, end, content[start:end])
                        )
        if pair.segments:
            pairs.append(pair)
    return pairs


# ---------------------------------------------------------------------------
# Boolean coding query
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class QueryCondition:
    code_id: str
    operator: Operator = "AND"


@dataclass(frozen=True)
class QueryMatch:
    transcript_id: str
    transcript_title: str
    start: int
    end: int
    text: str


@dataclass
class CodingQueryResult:
    matches: list[QueryMatch]
    total: int


def coding_query(project: Project, conditions: list[QueryCondition]) -> CodingQueryResult:
    """Combine codes with AND / OR / NOT on overlapping text.

    The first condition's code supplies the base codings (its operator is
    ignored). Later conditions filter them: ``AND`` keeps base codings that
    overlap a coding of that code, ``NOT`` drops them. ``OR`` adds the
    condition code's own codings unless the same span already matched.
    """
    if not conditions:
        return CodingQueryResult(matches=[], total=0)
    for cond in conditions:
        if cond.operator not in _OPERATORS:
            raise ValidationError(f"unknown operator {cond.operator!r}", field="operator")
        project.get_code(cond.code_id)

    by_transcript: dict[str, list[Coding]] = {}
    for coding in project.codings.codings_for():
        by_transcript.setdefault(coding.transcript_id, []).append(coding)

    matches: list[QueryMatch] = []
    base_code = conditions[0].code_id
    rest = conditions[1:]

    for transcript_id, codings in by_transcript.items():
        transcript = project.get_transcript(transcript_id)
        seen: set[tuple[int, int]] = set()

        for base in (c for c in codings if c.code_id == base_code):
            if _passes(base, codings, rest):
                matches.append(_match(transcript.title, base))
                seen.add((base.start_offset, base.end_offset))

        for cond in rest:
            if cond.operator != "OR":
                continue
            for coding in (c for c in codings if c.code_id == cond.code_id):
                span = (coding.start_offset, coding.end_offset)
                if span not in seen:
                    matches.append(_match(transcript.title, coding))
                    seen.add(span)

    return CodingQueryResult(matches=matches[:MAX_QUERY_MATCHES], total=len(matches))


def _passes(base: Coding, codings: list[Coding], conditions: list[QueryCondition]) -> bool:
    for cond in conditions:
        if cond.operator == "OR":
            continue
        hit = any(
            overlaps(base.interval, c.interval) for c in codings if c.code_id == cond.code_id
        )
        if cond.operator == "AND" and not hit:
            return False
        if cond.operator == "NOT" and hit:
            return False
    return True


def _match(title: str, coding: Coding) -> QueryMatch:
    return QueryMatch(
        transcript_id=coding.transcript_id,
        transcript_title=title,
        start=coding.start_offset,
        end=coding.end_offset,
        text=coding.coded_text,
    )
