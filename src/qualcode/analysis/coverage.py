"""Coverage and frequency statistics derived from current project state.

All figures are recomputed on every call. Coded characters are always
counted per transcript through ``covered_chars`` so overlapping codings are
never double counted.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from qualcode.analysis.intervals import covered_chars
from qualcode.store.models import Coding, Transcript
from qualcode.store.project import Project


@dataclass(frozen=True)
class TranscriptCoverage:
    transcript_id: str
    title: str
    coded_chars: int
    total_chars: int
    coverage_percent: float
    coding_count: int
    distinct_code_count: int
    word_count: int
    share_percent: float  # share of all codings in the project


@dataclass(frozen=True)
class CodeCoverage:
    code_id: str
    name: str
    frequency: int
    coded_chars: int
    coverage_percent: float
    share_percent: float  # share of all codings in the project


@dataclass(frozen=True)
class ProjectCoverage:
    coded_chars: int
    total_chars: int
    coverage_percent: float
    transcript_count: int
    code_count: int
    coding_count: int


@dataclass
class CoverageReport:
    project: ProjectCoverage
    transcripts: list[TranscriptCoverage] = field(default_factory=list)
    codes: list[CodeCoverage] = field(default_factory=list)


def _percent(part: int, whole: int) -> float:
    return 100.0 * part / whole if whole else 0.0


class CoverageReporter:
    """Read-only coverage statistics for a project."""

    def __init__(self, project: Project) -> None:
        self.project = project

    def transcript_coverage(self, transcript_id: str) -> TranscriptCoverage:
        transcript = self.project.get_transcript(transcript_id)
        return self._transcript_row(
            transcript, self.project.codings.codings_for(transcript_id), len(self.project.codings)
        )

    def all_transcripts(self) -> list[TranscriptCoverage]:
        by_transcript = self._codings_by_transcript()
        total_codings = len(self.project.codings)
        return [
            self._transcript_row(t, by_transcript.get(t.id, []), total_codings)
            for t in self.project.transcripts
        ]

    def code_coverage(self, code_id: str) -> CodeCoverage:
        """Frequency and coverage of one code across all transcripts."""
        code = self.project.get_code(code_id)
        codings = self.project.codings.codings_by_code(code_id)
        coded = _coded_chars_per_transcript(codings)
        total = self._total_chars()
        return CodeCoverage(
            code_id=code.id,
            name=code.text,
            frequency=len(codings),
            coded_chars=coded,
            coverage_percent=_percent(coded, total),
            share_percent=_percent(len(codings), len(self.project.codings)),
        )

    def all_codes(self) -> list[CodeCoverage]:
        return [self.code_coverage(c.id) for c in self.project.codes]

    def code_frequencies(self) -> list[CodeCoverage]:
        """Codes ordered by frequency (highest first), then by name."""
        return sorted(self.all_codes(), key=lambda c: (-c.frequency, c.name.lower()))

    def project_coverage(self) -> ProjectCoverage:
        """Union coverage of all codings over all transcripts."""
        codings = self.project.codings.codings_for()
        coded = _coded_chars_per_transcript(codings)
        total = self._total_chars()
        return ProjectCoverage(
            coded_chars=coded,
            total_chars=total,
            coverage_percent=_percent(coded, total),
            transcript_count=len(self.project.transcripts),
            code_count=len(self.project.codes),
            coding_count=len(codings),
        )

    def report(self) -> CoverageReport:
        with self.project.lock:
            return CoverageReport(
                project=self.project_coverage(),
                transcripts=self.all_transcripts(),
                codes=self.all_codes(),
            )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _total_chars(self) -> int:
        return sum(len(t.content) for t in self.project.transcripts)

    def _codings_by_transcript(self) -> dict[str, list[Coding]]:
        grouped: dict[str, list[Coding]] = {}
        for coding in self.project.codings.codings_for():
            grouped.setdefault(coding.transcript_id, []).append(coding)
        return grouped

    @staticmethod
    def _transcript_row(
        transcript: Transcript, codings: list[Coding], total_codings: int
    ) -> TranscriptCoverage:
        coded = covered_chars(c.interval for c in codings)
        total = len(transcript.content)
        return TranscriptCoverage(
            transcript_id=transcript.id,
            title=transcript.title,
            coded_chars=coded,
            total_chars=total,
            coverage_percent=_percent(coded, total),
            coding_count=len(codings),
            distinct_code_count=len({c.code_id for c in codings}),
            word_count=len(transcript.content.split()),
            share_percent=_percent(len(codings), total_codings),
        )


def _coded_chars_per_transcript(codings: list[Coding]) -> int:
    """Sum of per-transcript union coverage (intervals never cross documents)."""
    grouped: dict[str, list[Coding]] = {}
    for coding in codings:
        grouped.setdefault(coding.transcript_id, []).append(coding)
    return sum(covered_chars(c.interval for c in group) for group in grouped.values())
