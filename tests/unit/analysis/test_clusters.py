"""Tests for qualcode.analysis.clusters."""

from __future__ import annotations

import pytest

from qualcode.analysis.clusters import cluster_codings
from qualcode.errors import NotFoundError, ValidationError
from qualcode.store.project import Project

SEGMENTS = [
    ("r1", "recycling bins recycling plastic"),
    ("b1", "budget costs money budget"),
    ("r2", "plastic recycling bins"),
    ("b2", "money costs budget"),
]


@pytest.fixture
def topics() -> Project:
    """One transcript per segment; recycling talk and budget talk share no words."""
    p = Project()
    p.add_code("Waste", id="w")
    p.add_code("Money", id="m")
    for coding_id, text in SEGMENTS:
        p.add_transcript(coding_id, text, id=f"t-{coding_id}")
        code = "w" if coding_id.startswith("r") else "m"
        p.codings.create(f"t-{coding_id}", code, 0, len(text), id=coding_id)
    return p


def _partition(clusters) -> set[frozenset[str]]:
    return {frozenset(s.coding_id for s in c.segments) for c in clusters}


def test_separates_disjoint_vocabularies(topics: Project) -> None:
    clusters = cluster_codings(topics, k=2)

    assert _partition(clusters) == {frozenset({"r1", "r2"}), frozenset({"b1", "b2"})}
    assert [c.label for c in clusters] == [f"Cluster {c.id + 1}" for c in clusters]
    assert sum(c.size for c in clusters) == 4

    by_members = {frozenset(s.coding_id for s in c.segments): c for c in clusters}
    recycling = by_members[frozenset({"r1", "r2"})]
    assert recycling.keywords[0] == "recycling"
    assert set(recycling.keywords) == {"recycling", "bins", "plastic"}


def test_same_seed_same_result(topics: Project) -> None:
    assert cluster_codings(topics, k=2, seed=7) == cluster_codings(topics, k=2, seed=7)


def test_k_is_capped_by_segment_count(topics: Project) -> None:
    clusters = cluster_codings(topics, k=10)
    assert sum(c.size for c in clusters) == 4
    assert len(clusters) <= 4


def test_single_cluster_holds_everything(topics: Project) -> None:
    clusters = cluster_codings(topics, k=1)
    assert len(clusters) == 1
    assert clusters[0].size == 4


def test_code_filter(topics: Project) -> None:
    clusters = cluster_codings(topics, k=2, code_ids=["m"])
    assert _partition(clusters) <= {frozenset({"b1"}), frozenset({"b2"}), frozenset({"b1", "b2"})}
    assert sum(c.size for c in clusters) == 2
    with pytest.raises(NotFoundError):
        cluster_codings(topics, code_ids=["x"])


def test_segments_without_countable_words() -> None:
    p = Project()
    p.add_transcript("T", "it is so", id="t")
    p.add_code("Filler", id="f")
    p.codings.create("t", "f", 0, 2)
    p.codings.create("t", "f", 3, 8)

    clusters = cluster_codings(p, k=2)
    assert sum(c.size for c in clusters) == 2
    assert all(c.keywords == [] for c in clusters)


def test_empty_and_invalid(project: Project) -> None:
    assert cluster_codings(project) == []
    with pytest.raises(ValidationError):
        cluster_codings(project, k=0)
