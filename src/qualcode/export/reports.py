"""Tabular and plain-text renderings of codebooks and analysis results."""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from qualcode.analysis.coverage import CoverageReporter, TranscriptCoverage
from qualcode.analysis.reliability import ReliabilityReport
from qualcode.store.project import Project

CODEBOOK_HEADERS: tuple[str, ...] = (
    "Code Name",
    "Color",
    "Parent Theme",
    "Frequency",
    "Coverage %",
    "Example Excerpts",
)

TRANSCRIPT_COVERAGE_HEADERS: tuple[str, ...] = (
    "Transcript",
    "Coded Characters",
    "Total Characters",
    "Coverage %",
    "Codings",
    "Distinct Codes",
    "Words",
    "Share %",
)

NO_PARENT = "-"
EXAMPLE_SEPARATOR = " | "


@dataclass(frozen=True)
class CodebookEntry:
    name: str
    color: str
    parent_theme: str
    frequency: int
    coverage_percent: float
    examples: tuple[str, ...]


def codebook_rows(
    project: Project,
    examples: int = 3,
    excerpt_chars: int = 80,
    decimals: int = 1,
) -> list[CodebookEntry]:
    """One entry per code, in codebook order.

    Coverage is the code's union coverage over all transcripts, rounded to
    *decimals* places. Examples are the first *examples* coded texts, each cut
    to *excerpt_chars* characters.
    """
    with project.lock:
        reporter = CoverageReporter(project)
        entries: list[CodebookEntry] = []
        for code in project.codes:
            stats = reporter.code_coverage(code.id)
            parent = (
                project.get_code(code.parent_code_id).text
                if code.parent_code_id is not None
                else NO_PARENT
            )
            codings = project.codings.codings_by_code(code.id)
            entries.append(
                CodebookEntry(
                    name=code.text,
                    color=code.color,
                    parent_theme=parent,
                    frequency=stats.frequency,
                    coverage_percent=round(stats.coverage_percent, decimals),
                    examples=tuple(c.coded_text[:excerpt_chars] for c in codings[:examples]),
                )
            )
    return entries


def render_table(
    headers: Sequence[str],
    rows: Iterable[Sequence[Any]],
    delimiter: str = ",",
) -> str:
    """Render *rows* as CSV (or TSV with ``delimiter="\\t"``), quoting only when needed."""
    buf = io.StringIO()
    writer = csv.writer(buf, delimiter=delimiter, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(headers)
    writer.writerows(rows)
    return buf.getvalue()


def render_codebook(entries: list[CodebookEntry], delimiter: str = ",") -> str:
    return render_table(
        CODEBOOK_HEADERS,
        (
            (
                e.name,
                e.color,
                e.parent_theme,
                e.frequency,
                f"{e.coverage_percent}%",
                EXAMPLE_SEPARATOR.join(e.examples),
            )
            for e in entries
        ),
        delimiter,
    )


def render_transcript_coverage(
    rows: list[TranscriptCoverage],
    delimiter: str = ",",
    decimals: int = 1,
) -> str:
    return render_table(
        TRANSCRIPT_COVERAGE_HEADERS,
        (
            (
                r.title,
                r.coded_chars,
                r.total_chars,
                f"{r.coverage_percent:.{decimals}f}",
                r.coding_count,
                r.distinct_code_count,
                r.word_count,
                f"{r.share_percent:.{decimals}f}",
            )
            for r in rows
        ),
        delimiter,
    )


def render_reliability_report(report: ReliabilityReport, name_a: str, name_b: str) -> str:
    """Plain-text intercoder reliability report.

    Args:
        report: Result of ``ReliabilityAnalyzer.analyze``.
        name_a: Display name of the first code.
        name_b: Display name of the second code.
    """
    r = report.result
    t = report.table
    lines = [
        "Intercoder Reliability Report",
        f"Code A: {name_a}",
        f"Code B: {name_b}",
        f"Unit: {report.unit}",
        "",
        f"Cohen's Kappa: {r.kappa:.3f} ({report.interpretation})",
        f"Observed Agreement: {r.po * 100:.1f}%",
        f"Expected Agreement: {r.pe * 100:.1f}%",
        f"Total Units: {r.n}",
        "",
        "Contingency Table:",
        f"  Both coded: {t.both}",
        f"  Only {name_a}: {t.only_a}",
        f"  Only {name_b}: {t.only_b}",
        f"  Neither: {t.neither}",
        "",
        "Per-Transcript Breakdown:",
    ]
    for row in report.per_transcript:
        lines.append(
            f"  {row.title}: kappa={row.result.kappa:.3f}, {row.units} units, "
            f"agree={row.table.agreements}/{row.units}"
        )
    return "\n".join(lines) + "\n"
