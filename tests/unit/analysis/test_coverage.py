"""Tests for qualcode.analysis.coverage."""

from __future__ import annotations

import pytest
from conftest import INTERVIEW_1, INTERVIEW_2

from qualcode.analysis.coverage import CoverageReporter
from qualcode.errors import NotFoundError
from qualcode.store.project import Project

# Union of k1 ("sustainability"), k2 ("Recycling is hard") and k4 (the last
# paragraph, which already contains k3).
T1_CODED = len("sustainability") + len("Recycling is hard") + len(
    "Sustainability also means saving money."
)
T2_CODED = len("Money matters most.")
TOTAL = len(INTERVIEW_1) + len(INTERVIEW_2)


def test_transcript_coverage_unions_overlaps(coded_project: Project) -> None:
    row = CoverageReporter(coded_project).transcript_coverage("t1")
    assert row.coded_chars == T1_CODED
    assert row.total_chars == len(INTERVIEW_1)
    assert row.coverage_percent == pytest.approx(100.0 * T1_CODED / len(INTERVIEW_1))
    assert row.coding_count == 4
    assert row.distinct_code_count == 3
    assert row.word_count == len(INTERVIEW_1.split())


def test_all_transcripts_in_project_order(coded_project: Project) -> None:
    rows = CoverageReporter(coded_project).all_transcripts()
    assert [r.transcript_id for r in rows] == ["t1", "t2"]
    assert rows[1].coded_chars == T2_CODED


def test_code_coverage(coded_project: Project) -> None:
    reporter = CoverageReporter(coded_project)
    q1 = reporter.code_coverage("q1")
    assert q1.frequency == 2
    assert q1.coded_chars == len("sustainability") + len("Sustainability also means saving money.")
    assert q1.coverage_percent == pytest.approx(100.0 * q1.coded_chars / TOTAL)

    q3 = reporter.code_coverage("q3")
    assert q3.coded_chars == len("saving money") + T2_CODED

    with pytest.raises(NotFoundError):
        reporter.code_coverage("missing")


def test_code_frequencies_sorted_by_count_then_name(coded_project: Project) -> None:
    names = [c.name for c in CoverageReporter(coded_project).code_frequencies()]
    assert names == ["Cost", "Sustainability", "Recycling"]


def test_project_coverage(coded_project: Project) -> None:
    summary = CoverageReporter(coded_project).project_coverage()
    assert summary.coded_chars == T1_CODED + T2_CODED
    assert summary.total_chars == TOTAL
    assert summary.coverage_percent == pytest.approx(100.0 * (T1_CODED + T2_CODED) / TOTAL)
    assert (summary.transcript_count, summary.code_count, summary.coding_count) == (2, 3, 5)


def test_report_reflects_current_state(coded_project: Project) -> None:
    reporter = CoverageReporter(coded_project)
    before = reporter.report()
    coded_project.codings.delete("k5")
    after = reporter.report()
    assert before.project.coded_chars - after.project.coded_chars == T2_CODED
    assert len(after.codes) == 3


def test_empty_transcript_and_project() -> None:
    p = Project()
    p.add_transcript("Empty", "", id="e")
    reporter = CoverageReporter(p)
    assert reporter.transcript_coverage("e").coverage_percent == 0.0
    assert reporter.project_coverage().coverage_percent == 0.0
    assert reporter.all_codes() == []
    assert reporter.transcript_coverage("e").share_percent == 0.0


def test_share_of_all_codings(coded_project: Project) -> None:
    reporter = CoverageReporter(coded_project)
    shares = {c.code_id: c.share_percent for c in reporter.all_codes()}
    assert shares == pytest.approx({"q1": 40.0, "q2": 20.0, "q3": 40.0})
    assert [t.share_percent for t in reporter.all_transcripts()] == pytest.approx([80.0, 20.0])
    assert reporter.transcript_coverage("t2").share_percent == pytest.approx(20.0)
