"""Transcript comparison: one code profile per transcript."""

from __future__ import annotations

from dataclasses import dataclass, field

from qualcode.analysis.intervals import coverage_percent
from qualcode.store.project import Project


@dataclass(frozen=True)
class CodeProfile:
    code_id: str
    count: int
    coverage_percent: float


@dataclass
class TranscriptProfile:
    transcript_id: str
    title: str
    profile: list[CodeProfile] = field(default_factory=list)

    def get(self, code_id: str) -> CodeProfile | None:
        return next((p for p in self.profile if p.code_id == code_id), None)


def compare_transcripts(
    project: Project,
    transcript_ids: list[str] | None = None,
    code_ids: list[str] | None = None,
) -> list[TranscriptProfile]:
    """Count and coverage of each code in each selected transcript.

    Coverage is the union of the code's codings in that transcript, as a
    percentage of the transcript length. Empty or ``None`` filters select
    everything.

    Raises:
        NotFoundError: If a transcript or code id is unknown.
    """
    with project.lock:
        transcripts = project.select_transcripts(transcript_ids)
        codes = (
            [project.get_code(c) for c in dict.fromkeys(code_ids)] if code_ids else project.codes
        )

        rows: list[TranscriptProfile] = []
        for transcript in transcripts:
            in_transcript = project.codings.codings_for(transcript.id)
            row = TranscriptProfile(transcript_id=transcript.id, title=transcript.title)
            for code in codes:
                codings = [c for c in in_transcript if c.code_id == code.id]
                row.profile.append(
                    CodeProfile(
                        code_id=code.id,
                        count=len(codings),
                        coverage_percent=coverage_percent(
                            (c.interval for c in codings), len(transcript.content)
                        ),
                    )
                )
            rows.append(row)
    return rows
