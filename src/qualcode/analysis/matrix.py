"""Framework matrix: cases as rows, codes as columns."""

from __future__ import annotations

from dataclasses import dataclass, field

from qualcode.store.project import Project

MAX_MATRIX_EXCERPTS = 5


@dataclass(frozen=True)
class MatrixCell:
    code_id: str
    count: int
    excerpts: tuple[str, ...] = ()


@dataclass
class MatrixRow:
    case_id: str
    case_name: str
    cells: list[MatrixCell] = field(default_factory=list)


def framework_matrix(
    project: Project,
    code_ids: list[str] | None = None,
    case_ids: list[str] | None = None,
    max_excerpts: int = MAX_MATRIX_EXCERPTS,
) -> list[MatrixRow]:
    """Summarise codings per case and code.

    Each cell counts the codings of a code in the transcripts assigned to a
    case and keeps the first *max_excerpts* coded texts. Transcripts with no
    case do not appear. Empty or ``None`` filters select everything.
    """
    with project.lock:
        codes = [project.get_code(c) for c in code_ids] if code_ids else project.codes
        cases = [project.get_case(c) for c in case_ids] if case_ids else project.cases

        rows: list[MatrixRow] = []
        for case in cases:
            transcript_ids = {t.id for t in project.transcripts_in_case(case.id)}
            in_case = [
                c for c in project.codings.codings_for() if c.transcript_id in transcript_ids
            ]
            row = MatrixRow(case_id=case.id, case_name=case.name)
            for code in codes:
                texts = [c.coded_text for c in in_case if c.code_id == code.id]
                row.cells.append(
                    MatrixCell(
                        code_id=code.id,
                        count=len(texts),
                        excerpts=tuple(texts[:max_excerpts]),
                    )
                )
            rows.append(row)
    return rows
