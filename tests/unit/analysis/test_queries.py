"""Tests for qualcode.analysis.queries, words and matrix."""

from __future__ import annotations

import pytest
from conftest import span

from qualcode.analysis.matrix import framework_matrix
from qualcode.analysis.queries import (
    MAX_QUERY_MATCHES,
    QueryCondition,
    coding_query,
    cooccurrence,
)
from qualcode.analysis.words import tokenize, word_frequency
from qualcode.errors import NotFoundError, ValidationError
from qualcode.store.project import Project


# ---------------------------------------------------------------------------
# Co-occurrence
# ---------------------------------------------------------------------------


def test_cooccurrence_reports_overlapping_text(coded_project: Project) -> None:
    pairs = cooccurrence(coded_project, ["q1", "q3"])
    assert len(pairs) == 1
    pair = pairs[0]
    assert pair.code_ids == ("q1", "q3")
    assert pair.count == 1
    assert pair.segments[0].text == "saving money"


def test_cooccurrence_min_overlap_and_small_inputs(coded_project: Project) -> None:
    assert cooccurrence(coded_project, ["q1", "q3"], min_overlap=13) == []
    assert cooccurrence(coded_project, ["q1"]) == []
    assert cooccurrence(coded_project, ["q1", "q1"]) == []
    assert cooccurrence(coded_project, ["q1", "q2"]) == []
    with pytest.raises(ValidationError):
        cooccurrence(coded_project, ["q1", "q3"], min_overlap=0)
    with pytest.raises(NotFoundError):
        cooccurrence(coded_project, ["q1", "missing"])


# ---------------------------------------------------------------------------
# Boolean coding query
# ---------------------------------------------------------------------------


def test_query_and_keeps_overlapping_base_codings(coded_project: Project) -> None:
    result = coding_query(coded_project, [QueryCondition("q1"), QueryCondition("q3", "AND")])
    assert result.total == 1
    assert result.matches[0].text == "Sustainability also means saving money."


def test_query_not_drops_overlapping_base_codings(coded_project: Project) -> None:
    result = coding_query(coded_project, [QueryCondition("q1"), QueryCondition("q3", "NOT")])
    assert [m.text for m in result.matches] == ["sustainability"]


def test_query_or_adds_unmatched_codings(coded_project: Project) -> None:
    result = coding_query(coded_project, [QueryCondition("q2"), QueryCondition("q3", "OR")])
    assert [m.text for m in result.matches] == [
        "Recycling is hard",
        "saving money",
        "Money matters most.",
    ]
    assert result.total == 3


def test_query_caps_matches_but_reports_total(project: Project) -> None:
    content = project.get_transcript("t1").content
    for i in range(MAX_QUERY_MATCHES + 5):
        project.codings.create("t1", "q1", i % len(content), i % len(content) + 1)
    result = coding_query(project, [QueryCondition("q1")])
    assert result.total == MAX_QUERY_MATCHES + 5
    assert len(result.matches) == MAX_QUERY_MATCHES


def test_query_validation(coded_project: Project) -> None:
    assert coding_query(coded_project, []).total == 0
    with pytest.raises(ValidationError):
        coding_query(coded_project, [QueryCondition("q1"), QueryCondition("q3", "XOR")])  # type: ignore[arg-type]
    with pytest.raises(NotFoundError):
        coding_query(coded_project, [QueryCondition("missing")])


# ---------------------------------------------------------------------------
# Word frequency
# ---------------------------------------------------------------------------


def test_tokenize_drops_stop_words_short_words_and_punctuation() -> None:
    assert tokenize("We can't say the bins, really, are far-away!") == ["can't", "say", "bins", "far-away"]
    assert tokenize("Bins bins", stop_words=["BINS"]) == []
    assert tokenize("an ox ran", min_length=2) == ["ox", "ran"]


def test_word_frequency(project: Project) -> None:
    p = project
    p.codings.create("t1", "q1", *span(p, "t1", "sustainability in every project"))
    p.codings.create("t1", "q1", *span(p, "t1", "Sustainability also means saving money"))
    p.codings.create("t2", "q3", *span(p, "t2", "Money matters most"))

    words = word_frequency(p, "q1")
    assert words[0].text == "sustainability"
    assert words[0].count == 2
    assert {w.text for w in words} == {
        "sustainability", "every", "project", "means", "saving", "money"
    }

    everything = word_frequency(p, max_words=1)
    assert len(everything) == 1
    assert everything[0].text in {"sustainability", "money"}
    assert everything[0].count == 2

    assert [w.text for w in word_frequency(p, "q3", stop_words=["matters"])] == ["money"]


def test_word_frequency_validation(project: Project) -> None:
    with pytest.raises(ValidationError):
        word_frequency(project, max_words=0)
    with pytest.raises(NotFoundError):
        word_frequency(project, "missing")


# ---------------------------------------------------------------------------
# Framework matrix
# ---------------------------------------------------------------------------


def test_framework_matrix_rows_per_case(coded_project: Project) -> None:
    rows = framework_matrix(coded_project)
    assert [r.case_name for r in rows] == ["Site A"]
    cells = {c.code_id: c for c in rows[0].cells}
    assert cells["q1"].count == 2
    assert cells["q3"].count == 1  # k5 is in t2, which has no case
    assert cells["q2"].excerpts == ("Recycling is hard",)


def test_framework_matrix_filters_and_excerpt_cap(coded_project: Project) -> None:
    rows = framework_matrix(coded_project, code_ids=["q1"], case_ids=["c1"], max_excerpts=1)
    assert len(rows[0].cells) == 1
    assert rows[0].cells[0].count == 2
    assert rows[0].cells[0].excerpts == ("sustainability",)
    with pytest.raises(NotFoundError):
        framework_matrix(coded_project, case_ids=["missing"])
