"""Tests for qualcode project file load / save."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from conftest import INTERVIEW_1, INTERVIEW_2

from qualcode.projectfile import ProjectFileError, dump_project, load_project, save_project
from qualcode.store.project import Project


def _write(path: Path, data: dict) -> Path:
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# load
# ---------------------------------------------------------------------------


def test_load_project(project_file: Path) -> None:
    project = load_project(project_file)

    assert project.name == "Pilot study"
    assert project.get_transcript("t1").content == INTERVIEW_1
    assert project.get_transcript("t1").case_id == "c1"
    assert project.get_transcript("t2").content == INTERVIEW_2
    assert project.get_code("q2").parent_code_id == "q1"
    assert project.get_code("q1").color == "#10B981"
    assert project.codings.get("k1").coded_text == "sustainability"


def test_name_defaults_to_file_stem(tmp_path: Path) -> None:
    project = load_project(_write(tmp_path / "my-study.yaml", {"transcripts": []}))
    assert project.name == "my-study"
    assert project.transcripts == []


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ProjectFileError, match="not found"):
        load_project(tmp_path / "nope.yaml")


def test_invalid_yaml(tmp_path: Path) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("name: [unclosed\n", encoding="utf-8")
    with pytest.raises(ProjectFileError, match="not valid YAML"):
        load_project(path)


def test_top_level_must_be_mapping(tmp_path: Path) -> None:
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ProjectFileError):
        load_project(path)


def test_section_must_be_list_of_mappings(tmp_path: Path) -> None:
    with pytest.raises(ProjectFileError, match="'codes'"):
        load_project(_write(tmp_path / "p.yaml", {"codes": "Sustainability"}))


def test_missing_required_key_names_the_entry(tmp_path: Path) -> None:
    path = _write(tmp_path / "p.yaml", {"transcripts": [{"id": "t1", "content": "x"}]})
    with pytest.raises(ProjectFileError, match=r"transcripts\[0\].*'title'"):
        load_project(path)


def test_transcript_needs_content_or_path(tmp_path: Path) -> None:
    path = _write(tmp_path / "p.yaml", {"transcripts": [{"id": "t1", "title": "T"}]})
    with pytest.raises(ProjectFileError, match="content"):
        load_project(path)


def test_bad_coding_is_rejected(tmp_path: Path) -> None:
    data = {
        "transcripts": [{"id": "t1", "title": "T", "content": "hello world"}],
        "codes": [{"id": "q1", "text": "Greeting"}],
        "codings": [{"transcript": "t1", "code": "q1", "start": 0, "end": 5, "text": "HELLO"}],
    }
    with pytest.raises(ProjectFileError, match=r"codings\[0\]"):
        load_project(_write(tmp_path / "p.yaml", data))


def test_unknown_reference_is_rejected(tmp_path: Path) -> None:
    data = {
        "transcripts": [{"id": "t1", "title": "T", "content": "hello world"}],
        "codings": [{"transcript": "t1", "code": "q9", "start": 0, "end": 5}],
    }
    with pytest.raises(ProjectFileError, match="code not found"):
        load_project(_write(tmp_path / "p.yaml", data))


def test_parent_cycle_is_rejected(tmp_path: Path) -> None:
    data = {
        "codes": [
            {"id": "a", "text": "A", "parent": "b"},
            {"id": "b", "text": "B", "parent": "a"},
        ]
    }
    with pytest.raises(ProjectFileError):
        load_project(_write(tmp_path / "p.yaml", data))


# ---------------------------------------------------------------------------
# save
# ---------------------------------------------------------------------------


def test_save_then_load_preserves_project(coded_project: Project, tmp_path: Path) -> None:
    path = tmp_path / "out" / "saved.yaml"
    save_project(coded_project, path)
    loaded = load_project(path)

    assert loaded.name == coded_project.name
    assert [t.content for t in loaded.transcripts] == [t.content for t in coded_project.transcripts]
    assert [(c.id, c.parent_code_id) for c in loaded.codes] == [
        (c.id, c.parent_code_id) for c in coded_project.codes
    ]
    assert list(loaded.codings) == list(coded_project.codings)


def test_dump_inlines_transcript_content(project_file: Path) -> None:
    data = yaml.safe_load(dump_project(load_project(project_file)))
    assert data["transcripts"][0]["content"] == INTERVIEW_1
    assert "path" not in data["transcripts"][0]
