"""Tests for qualcode.analysis.sentiment."""

from __future__ import annotations

import pytest

from qualcode.analysis.sentiment import analyze_sentiment, classify, score_text
from qualcode.errors import NotFoundError, ValidationError
from qualcode.store.project import Project


# ---------------------------------------------------------------------------
# score_text / classify
# ---------------------------------------------------------------------------


def test_score_is_weight_per_word() -> None:
    result = score_text("This is good")
    assert result.score == pytest.approx(1.0)
    assert result.magnitude == 3


@pytest.mark.parametrize("text", ["not good", "isn't good", "Never good!"])
def test_negation_flips_the_next_word(text: str) -> None:
    result = score_text(text)
    assert result.score == pytest.approx(-1.5)
    assert result.magnitude == 3


def test_negation_only_reaches_one_word() -> None:
    assert score_text("not very good").score == pytest.approx(1.0)


def test_unscored_and_empty_text() -> None:
    assert score_text("hello world").score == 0.0
    assert score_text("").score == 0.0
    assert score_text("").magnitude == 0


def test_classify_thresholds() -> None:
    assert classify(0.06) == "positive"
    assert classify(-0.06) == "negative"
    assert classify(0.05) == "neutral"
    assert classify(-0.05) == "neutral"


# ---------------------------------------------------------------------------
# sentiment
# ---------------------------------------------------------------------------


def test_overall_and_items_by_code(coded_project: Project) -> None:
    result = analyze_sentiment(coded_project)

    # Only "Recycling is hard" carries a lexicon word (hard: -1).
    assert (result.overall.positive, result.overall.negative, result.overall.neutral) == (0, 1, 4)
    assert result.overall.average_score == pytest.approx((-1 / 3) / 5)

    assert [i.label for i in result.items] == ["Sustainability", "Cost", "Recycling"]
    recycling = result.items[-1]
    assert recycling.id == "q2"
    assert recycling.score == pytest.approx(-1 / 3)
    assert recycling.sample_text == "Recycling is hard"


def test_items_by_transcript(coded_project: Project) -> None:
    result = analyze_sentiment(coded_project, scope="transcript")
    assert [i.id for i in result.items] == ["t2", "t1"]
    assert result.items[0].label == "Interview 2"
    assert result.items[1].score == pytest.approx(-1 / 11)


def test_scope_id_restricts_codings(coded_project: Project) -> None:
    result = analyze_sentiment(coded_project, scope="code", scope_id="q2")
    assert (result.overall.negative, result.overall.neutral) == (1, 0)
    assert [i.id for i in result.items] == ["q2"]

    by_transcript = analyze_sentiment(coded_project, scope="transcript", scope_id="t2")
    assert by_transcript.overall.neutral == 1


def test_sample_text_is_cut(project: Project) -> None:
    project.codings.create("t1", "q1", 0, len(project.get_transcript("t1").content))
    item = analyze_sentiment(project).items[0]
    assert len(item.sample_text) == 80


def test_empty_project_and_bad_arguments(project: Project) -> None:
    empty = analyze_sentiment(project)
    assert empty.items == []
    assert empty.overall.average_score == 0.0

    with pytest.raises(ValidationError):
        analyze_sentiment(project, scope="paragraph")
    with pytest.raises(NotFoundError):
        analyze_sentiment(project, scope="code", scope_id="q9")
    with pytest.raises(NotFoundError):
        analyze_sentiment(project, scope="transcript", scope_id="t9")
