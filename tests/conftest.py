"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from qualcode.cli.common import console
from qualcode.projectfile import save_project
from qualcode.store.project import Project

INTERVIEW_1 = (
    "We care about sustainability in every project.\n\n"
    "Recycling is hard because the bins are far away.\n\n"
    "Sustainability also means saving money."
)

INTERVIEW_2 = (
    "Money matters most. Sustainability is a luxury!\n\n"
    "We recycle at home."
)


def span(project: Project, transcript_id: str, text: str, start: int = 0) -> tuple[int, int]:
    """Offsets of the first occurrence of *text* at or after *start*."""
    content = project.get_transcript(transcript_id).content
    begin = content.index(text, start)
    return begin, begin + len(text)


@pytest.fixture
def project() -> Project:
    """Two transcripts in one case, three codes (q2 is a child of q1), no codings."""
    p = Project(name="Pilot study")
    p.add_case("Site A", {"region": "north"}, id="c1")
    p.add_transcript("Interview 1", INTERVIEW_1, case_id="c1", id="t1")
    p.add_transcript("Interview 2", INTERVIEW_2, id="t2")
    p.add_code("Sustainability", color="#10B981", id="q1")
    p.add_code("Recycling", parent_code_id="q1", id="q2")
    p.add_code("Cost", id="q3")
    return p


@pytest.fixture
def coded_project(project: Project) -> Project:
    """The *project* fixture with a handful of codings on every code."""
    p = project
    p.codings.create("t1", "q1", *span(p, "t1", "sustainability"), id="k1")
    p.codings.create("t1", "q2", *span(p, "t1", "Recycling is hard"), id="k2")
    p.codings.create("t1", "q3", *span(p, "t1", "saving money"), id="k3")
    p.codings.create("t1", "q1", *span(p, "t1", "Sustainability also means saving money."), id="k4")
    p.codings.create("t2", "q3", *span(p, "t2", "Money matters most."), id="k5")
    return p


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point the global config at a missing file and clear QUALCODE_* overrides."""
    monkeypatch.setattr("qualcode.config._GLOBAL_CONFIG_PATH", tmp_path / "no-home" / "config.yaml")
    monkeypatch.delenv("QUALCODE_RELIABILITY_UNIT", raising=False)
    monkeypatch.delenv("QUALCODE_LOG_LEVEL", raising=False)


@pytest.fixture
def coded_file(coded_project: Project, tmp_path: Path) -> Path:
    """*coded_project* saved as tmp_path/coded.yaml."""
    path = tmp_path / "coded.yaml"
    save_project(coded_project, path)
    return path


@pytest.fixture
def wide_console(monkeypatch: pytest.MonkeyPatch) -> None:
    """Widen the CLI console so table cells never wrap."""
    monkeypatch.setattr(console, "width", 200)


@pytest.fixture
def project_file(tmp_path: Path) -> Path:
    """A project YAML file on disk, with one transcript loaded from a side file."""
    (tmp_path / "interviews").mkdir()
    (tmp_path / "interviews" / "one.txt").write_text(INTERVIEW_1, encoding="utf-8")

    start = INTERVIEW_1.index("sustainability")
    data = {
        "name": "Pilot study",
        "cases": [{"id": "c1", "name": "Site A"}],
        "transcripts": [
            {"id": "t1", "title": "Interview 1", "case": "c1", "path": "interviews/one.txt"},
            {"id": "t2", "title": "Interview 2", "content": INTERVIEW_2},
        ],
        "codes": [
            {"id": "q2", "text": "Recycling", "parent": "q1"},
            {"id": "q1", "text": "Sustainability", "color": "#10B981"},
            {"id": "q3", "text": "Cost"},
        ],
        "codings": [
            {
                "id": "k1",
                "transcript": "t1",
                "code": "q1",
                "start": start,
                "end": start + len("sustainability"),
                "text": "sustainability",
            },
        ],
    }
    path = tmp_path / "study.yaml"
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return path
