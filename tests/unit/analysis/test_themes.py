"""Tests for qualcode.analysis.themes."""

from __future__ import annotations

import pytest

from qualcode.analysis.themes import theme_map
from qualcode.errors import NotFoundError, ValidationError
from qualcode.store.project import Project


def test_sized_by_codings(coded_project: Project) -> None:
    themes = theme_map(coded_project)

    assert [(n.code_id, n.size) for n in themes.nodes] == [("q1", 2), ("q2", 1), ("q3", 2)]
    assert themes.total == 5
    assert themes.nodes[0].color == "#10B981"
    assert [n.code_id for n in themes.children()] == ["q1", "q3"]
    assert [n.code_id for n in themes.children("q1")] == ["q2"]


def test_sized_by_union_characters(coded_project: Project) -> None:
    coded_project.codings.create("t2", "q3", 0, 5)  # inside "Money matters most."
    themes = theme_map(coded_project, metric="characters")

    sizes = {n.code_id: n.size for n in themes.nodes}
    assert sizes == {
        "q1": len("sustainability") + len("Sustainability also means saving money."),
        "q2": len("Recycling is hard"),
        "q3": len("saving money") + len("Money matters most."),
    }
    assert themes.total == sum(sizes.values())


def test_codes_without_codings_are_left_off(coded_project: Project) -> None:
    coded_project.add_code("Unused", id="q4")
    assert "q4" not in {n.code_id for n in theme_map(coded_project).nodes}


def test_filtered_child_moves_to_top_level(coded_project: Project) -> None:
    themes = theme_map(coded_project, code_ids=["q2"])
    assert [n.code_id for n in themes.children()] == ["q2"]
    assert themes.total == 1


def test_empty_and_invalid(project: Project) -> None:
    empty = theme_map(project)
    assert empty.nodes == []
    assert empty.total == 0

    with pytest.raises(ValidationError):
        theme_map(project, metric="words")
    with pytest.raises(NotFoundError):
        theme_map(project, code_ids=["q9"])
