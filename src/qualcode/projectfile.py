"""YAML project files: load a Project from disk and write it back.

Layout::

    name: Pilot study
    cases:
      - {id: c1, name: Site A, attributes: {region: north}}
    transcripts:
      - {id: t1, title: Interview 1, case: c1, path: interviews/one.txt}
      - {id: t2, title: Interview 2, content: "inline text ..."}
    codes:
      - {id: q1, text: Sustainability, color: "#10B981"}
      - {id: q2, text: Recycling, parent: q1}
    codings:
      - {transcript: t1, code: q1, start: 10, end: 24, text: "..."}

Transcript ``path`` entries are resolved relative to the project file. Every
coding is created through ``CodingStore.create`` so the loaded project obeys
the same offset and text rules as one built in code.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

import yaml

from qualcode.errors import QualcodeError
from qualcode.export.writer import write_atomic
from qualcode.store.project import Project

logger = logging.getLogger(__name__)


class ProjectFileError(ValueError):
    """Raised when a project file is unreadable or structurally invalid."""


# ---------------------------------------------------------------------------
# Load
# ---------------------------------------------------------------------------


def load_project(path: Path) -> Project:
    """Read a project file into a new *Project*.

    Raises:
        ProjectFileError: If the file is missing, is not valid YAML, or any
            entry is malformed or references an unknown id.
    """
    path = Path(path)
    if not path.is_file():
        raise ProjectFileError(f"Project file not found: '{path}'")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ProjectFileError(f"Project file '{path}' is not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ProjectFileError(f"Project file '{path}' must contain a mapping at the top level.")

    project = Project(name=str(data.get("name") or path.stem))
    base_dir = path.parent

    for i, raw in enumerate(_section(data, "cases", path)):
        with _entry("cases", i, raw):
            project.add_case(
                str(raw["name"]),
                raw.get("attributes") or {},
                id=_opt_str(raw.get("id")),
            )

    for i, raw in enumerate(_section(data, "transcripts", path)):
        with _entry("transcripts", i, raw):
            project.add_transcript(
                str(raw["title"]),
                _transcript_content(raw, base_dir),
                case_id=_opt_str(raw.get("case")),
                id=_opt_str(raw.get("id")),
            )

    # Parents may be listed after their children, so link them in a second pass.
    codes = _section(data, "codes", path)
    code_ids: list[str] = []
    for i, raw in enumerate(codes):
        with _entry("codes", i, raw):
            kwargs: dict[str, Any] = {"id": _opt_str(raw.get("id"))}
            if raw.get("color"):
                kwargs["color"] = str(raw["color"])
            code_ids.append(project.add_code(str(raw["text"]), **kwargs).id)
    for i, (raw, code_id) in enumerate(zip(codes, code_ids)):
        if raw.get("parent") is not None:
            with _entry("codes", i, raw):
                project.set_code_parent(code_id, str(raw["parent"]))

    for i, raw in enumerate(_section(data, "codings", path)):
        with _entry("codings", i, raw):
            project.codings.create(
                str(raw["transcript"]),
                str(raw["code"]),
                raw["start"],
                raw["end"],
                raw.get("text"),
                id=_opt_str(raw.get("id")),
                created_at=_opt_str(raw.get("created_at")),
            )

    logger.info("Loaded %r from %s", project, path)
    return project


def _section(data: dict[str, Any], key: str, path: Path) -> list[dict[str, Any]]:
    items = data.get(key) or []
    if not isinstance(items, list) or not all(isinstance(x, dict) for x in items):
        raise ProjectFileError(f"'{key}' in '{path}' must be a list of mappings.")
    return items


def _opt_str(value: Any) -> str | None:
    return None if value is None else str(value)


def _transcript_content(raw: dict[str, Any], base_dir: Path) -> str:
    if "content" in raw:
        return str(raw["content"])
    if "path" in raw:
        return (base_dir / str(raw["path"])).read_text(encoding="utf-8")
    raise KeyError("content")


@contextmanager
def _entry(section: str, index: int, raw: dict[str, Any]) -> Iterator[None]:
    """Re-raise failures while building one entry as ProjectFileError."""
    label = f"{section}[{index}]"
    if "id" in raw:
        label += f" (id {raw['id']!r})"
    try:
        yield
    except KeyError as exc:
        raise ProjectFileError(f"{label}: missing required key {exc.args[0]!r}") from exc
    except (QualcodeError, OSError, TypeError, ValueError) as exc:
        raise ProjectFileError(f"{label}: {exc}") from exc


# ---------------------------------------------------------------------------
# Dump
# ---------------------------------------------------------------------------


def project_to_dict(project: Project) -> dict[str, Any]:
    """Plain-data form of *project*; transcripts always carry inline content."""
    with project.lock:
        return {
            "name": project.name,
            "cases": [
                {"id": c.id, "name": c.name, "attributes": dict(c.attributes)}
                for c in project.cases
            ],
            "transcripts": [
                {"id": t.id, "title": t.title, "case": t.case_id, "content": t.content}
                for t in project.transcripts
            ],
            "codes": [
                {"id": q.id, "text": q.text, "color": q.color, "parent": q.parent_code_id}
                for q in project.codes
            ],
            "codings": [
                {
                    "id": c.id,
                    "transcript": c.transcript_id,
                    "code": c.code_id,
                    "start": c.start_offset,
                    "end": c.end_offset,
                    "text": c.coded_text,
                    "created_at": c.created_at,
                }
                for c in project.codings
            ],
        }


def dump_project(project: Project) -> str:
    return yaml.safe_dump(
        project_to_dict(project), sort_keys=False, allow_unicode=True, width=100
    )


def save_project(project: Project, path: Path) -> None:
    """Write *project* to *path* atomically."""
    write_atomic(Path(path), dump_project(project))
    logger.info("Saved %r to %s", project, path)
