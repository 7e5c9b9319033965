"""Tests for qualcode.analysis.comparison."""

from __future__ import annotations

import pytest
from conftest import INTERVIEW_1, INTERVIEW_2

from qualcode.analysis.comparison import compare_transcripts
from qualcode.errors import NotFoundError
from qualcode.store.project import Project


def test_profile_per_transcript_and_code(coded_project: Project) -> None:
    rows = compare_transcripts(coded_project)

    assert [r.transcript_id for r in rows] == ["t1", "t2"]
    assert rows[0].title == "Interview 1"
    assert [p.code_id for p in rows[0].profile] == ["q1", "q2", "q3"]

    q1 = rows[0].get("q1")
    assert q1.count == 2
    # "sustainability" (14) + "Sustainability also means saving money." (39)
    assert q1.coverage_percent == pytest.approx(100.0 * 53 / len(INTERVIEW_1))

    t2 = rows[1]
    assert t2.get("q1").count == 0
    assert t2.get("q1").coverage_percent == 0.0
    assert t2.get("q3").coverage_percent == pytest.approx(
        100.0 * len("Money matters most.") / len(INTERVIEW_2)
    )


def test_overlapping_codings_counted_once(coded_project: Project) -> None:
    coded_project.codings.create("t2", "q3", 0, 5)
    profile = compare_transcripts(coded_project, ["t2"], ["q3"])[0].get("q3")
    assert profile.count == 2
    assert profile.coverage_percent == pytest.approx(
        100.0 * len("Money matters most.") / len(INTERVIEW_2)
    )


def test_filters(coded_project: Project) -> None:
    rows = compare_transcripts(coded_project, transcript_ids=["t2"], code_ids=["q3", "q3"])
    assert len(rows) == 1
    assert [p.code_id for p in rows[0].profile] == ["q3"]
    assert rows[0].get("q1") is None

    assert len(compare_transcripts(coded_project, transcript_ids=[])) == 2


def test_unknown_ids(coded_project: Project) -> None:
    with pytest.raises(NotFoundError):
        compare_transcripts(coded_project, transcript_ids=["t9"])
    with pytest.raises(NotFoundError):
        compare_transcripts(coded_project, code_ids=["q9"])
