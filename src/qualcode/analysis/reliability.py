"""Intercoder reliability: Cohen's Kappa between two codes over segmented units.

Each transcript is split into units (paragraphs or sentences). For every unit
we record whether code A and code B each have at least one overlapping coding,
giving a 2x2 contingency table:

                 B coded   B not coded
    A coded        a11        a10
    A not coded    a01        a00

Kappa is computed on the table aggregated across transcripts, and again per
transcript for the breakdown view.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from qualcode.analysis.intervals import overlaps
from qualcode.errors import ValidationError
from qualcode.segment import get_segmenter
from qualcode.store.models import Coding
from qualcode.store.project import Project

logger = logging.getLogger(__name__)

# Landis & Koch bands; upper bounds are inclusive.
_BANDS: list[tuple[float, str]] = [
    (0.20, "Slight"),
    (0.40, "Fair"),
    (0.60, "Moderate"),
    (0.80, "Substantial"),
]


@dataclass(frozen=True)
class KappaResult:
    kappa: float
    po: float  # observed agreement
    pe: float  # agreement expected by chance
    n: int


@dataclass
class ContingencyTable:
    both: int = 0     # a11
    only_a: int = 0   # a10
    only_b: int = 0   # a01
    neither: int = 0  # a00

    @property
    def n(self) -> int:
        return self.both + self.only_a + self.only_b + self.neither

    @property
    def agreements(self) -> int:
        return self.both + self.neither

    def add(self, has_a: bool, has_b: bool) -> None:
        if has_a and has_b:
            self.both += 1
        elif has_a:
            self.only_a += 1
        elif has_b:
            self.only_b += 1
        else:
            self.neither += 1

    def merge(self, other: ContingencyTable) -> None:
        self.both += other.both
        self.only_a += other.only_a
        self.only_b += other.only_b
        self.neither += other.neither

    def kappa(self) -> KappaResult:
        return compute_kappa(self.both, self.only_a, self.only_b, self.neither)


@dataclass(frozen=True)
class TranscriptAgreement:
    transcript_id: str
    title: str
    table: ContingencyTable
    result: KappaResult
    units: int


@dataclass
class ReliabilityReport:
    code_a: str
    code_b: str
    unit: str
    table: ContingencyTable
    result: KappaResult
    interpretation: str
    per_transcript: list[TranscriptAgreement] = field(default_factory=list)

    @property
    def kappa(self) -> float:
        return self.result.kappa


def compute_kappa(a11: int, a10: int, a01: int, a00: int) -> KappaResult:
    """Cohen's Kappa for a 2x2 table.

    ``kappa = (po - pe) / (1 - pe)``, with ``kappa = 1`` when ``pe == 1``.
    An empty table (``n == 0``) yields all zeros instead of dividing by zero.
    """
    n = a11 + a10 + a01 + a00
    if n == 0:
        return KappaResult(kappa=0.0, po=0.0, pe=0.0, n=0)
    po = (a11 + a00) / n
    p_a = (a11 + a10) / n
    p_b = (a11 + a01) / n
    pe = p_a * p_b + (1 - p_a) * (1 - p_b)
    kappa = 1.0 if pe == 1 else (po - pe) / (1 - pe)
    return KappaResult(kappa=kappa, po=po, pe=pe, n=n)


def interpret_kappa(kappa: float) -> str:
    """Verbal label for a kappa value."""
    if kappa < 0:
        return "Poor"
    for upper, label in _BANDS:
        if kappa <= upper:
            return label
    return "Almost Perfect"


class ReliabilityAnalyzer:
    """Compare two codes' coverage of the same transcripts."""

    def __init__(self, project: Project) -> None:
        self.project = project

    def analyze(
        self,
        code_a: str,
        code_b: str,
        unit: str = "paragraph",
        transcript_ids: list[str] | None = None,
    ) -> ReliabilityReport:
        """Build the contingency table for *code_a* vs *code_b* and compute kappa.

        Args:
            code_a: Id of the first code.
            code_b: Id of the second code.
            unit: Segmentation unit (``"paragraph"`` or ``"sentence"``).
            transcript_ids: Restrict to these transcripts (default: all).

        Returns:
            ReliabilityReport with aggregate and per-transcript results.

        Raises:
            ValidationError: If the codes are identical, either has no codings,
                or the unit is unknown.
            NotFoundError: If a code or transcript id is unknown.
        """
        if code_a == code_b:
            raise ValidationError("reliability needs two different codes", field="code_b")

        segmenter = get_segmenter(unit)
        project = self.project
        with project.lock:
            for code_id in (code_a, code_b):
                project.get_code(code_id)
            codings_a = project.codings.codings_by_code(code_a)
            codings_b = project.codings.codings_by_code(code_b)
            transcripts = project.select_transcripts(transcript_ids)

        for code_id, codings in ((code_a, codings_a), (code_b, codings_b)):
            if not codings:
                raise ValidationError(f"code {code_id!r} has no codings", field="code_id")

        by_transcript_a = _group(codings_a)
        by_transcript_b = _group(codings_b)

        total = ContingencyTable()
        rows: list[TranscriptAgreement] = []
        for transcript in transcripts:
            units = segmenter.segment(transcript.content)
            local_a = by_transcript_a.get(transcript.id, [])
            local_b = by_transcript_b.get(transcript.id, [])

            table = ContingencyTable()
            for seg in units:
                has_a = any(overlaps(c.interval, seg.interval) for c in local_a)
                has_b = any(overlaps(c.interval, seg.interval) for c in local_b)
                table.add(has_a, has_b)

            total.merge(table)
            rows.append(
                TranscriptAgreement(
                    transcript_id=transcript.id,
                    title=transcript.title,
                    table=table,
                    result=table.kappa(),
                    units=len(units),
                )
            )

        result = total.kappa()
        logger.debug(
            "Reliability %s vs %s (%s): n=%d kappa=%.3f",
            code_a, code_b, unit, result.n, result.kappa,
        )
        return ReliabilityReport(
            code_a=code_a,
            code_b=code_b,
            unit=unit,
            table=total,
            result=result,
            interpretation=interpret_kappa(result.kappa),
            per_transcript=rows,
        )


def _group(codings: list[Coding]) -> dict[str, list[Coding]]:
    grouped: dict[str, list[Coding]] = {}
    for coding in codings:
        grouped.setdefault(coding.transcript_id, []).append(coding)
    return grouped
