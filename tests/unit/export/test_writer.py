"""Tests for qualcode.export.writer."""

from __future__ import annotations

import io
from pathlib import Path
from unittest.mock import patch

import pytest
from rich.console import Console

from qualcode.export.writer import OutputPathError, ReportWriter, resolve_output_path, write_atomic


def _writer(tmp_path: Path, yes: bool = False) -> tuple[ReportWriter, io.StringIO]:
    buf = io.StringIO()
    console = Console(file=buf, width=200, highlight=False, color_system=None)
    return ReportWriter(console, yes=yes, base=tmp_path), buf


# ---------------------------------------------------------------------------
# resolve_output_path
# ---------------------------------------------------------------------------


def test_relative_path_is_resolved_under_base(tmp_path: Path) -> None:
    path = resolve_output_path("reports/kappa.txt", base=tmp_path)
    assert path == (tmp_path / "reports" / "kappa.txt").resolve()


def test_traversal_is_blocked(tmp_path: Path) -> None:
    with pytest.raises(OutputPathError) as excinfo:
        resolve_output_path("../../etc/passwd", base=tmp_path)
    assert excinfo.value.output == "../../etc/passwd"
    assert excinfo.value.base == tmp_path.resolve()


def test_absolute_path_is_accepted(tmp_path: Path) -> None:
    target = tmp_path / "abs.csv"
    assert resolve_output_path(str(target)) == target.resolve()


# ---------------------------------------------------------------------------
# write_atomic
# ---------------------------------------------------------------------------


def test_write_atomic_creates_parents_and_leaves_no_temp(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b" / "codebook.csv"
    write_atomic(target, "Code Name\nSustainability\n")
    assert target.read_text(encoding="utf-8") == "Code Name\nSustainability\n"
    assert [p.name for p in target.parent.iterdir()] == ["codebook.csv"]


def test_write_atomic_failed_rename_cleans_up(tmp_path: Path) -> None:
    target = tmp_path / "out.txt"
    target.write_text("old", encoding="utf-8")
    with patch("qualcode.export.writer.os.replace", side_effect=OSError("disk full")):
        with pytest.raises(OSError):
            write_atomic(target, "new")
    assert target.read_text(encoding="utf-8") == "old"
    assert [p.name for p in tmp_path.iterdir()] == ["out.txt"]


# ---------------------------------------------------------------------------
# ReportWriter
# ---------------------------------------------------------------------------


def test_target_new_file_or_yes(tmp_path: Path) -> None:
    writer, _ = _writer(tmp_path)
    assert writer.target("new.csv") == (tmp_path / "new.csv").resolve()

    (tmp_path / "new.csv").write_text("x", encoding="utf-8")
    yes_writer, _ = _writer(tmp_path, yes=True)
    assert yes_writer.target("new.csv") == (tmp_path / "new.csv").resolve()


def test_target_declined_overwrite_returns_none(tmp_path: Path) -> None:
    (tmp_path / "exists.csv").write_text("x", encoding="utf-8")
    writer, _ = _writer(tmp_path)
    with patch("qualcode.export.writer.typer.confirm", return_value=False) as confirm:
        assert writer.target("exists.csv") is None
    confirm.assert_called_once()


def test_target_rejects_escape(tmp_path: Path) -> None:
    writer, _ = _writer(tmp_path)
    with pytest.raises(OutputPathError):
        writer.target("../outside.csv")


def test_write_reports_path_with_brackets(tmp_path: Path) -> None:
    writer, buf = _writer(tmp_path)
    path = writer.target("[final] report.txt")
    writer.write(path, "kappa 0.8\n")

    assert path.read_text(encoding="utf-8") == "kappa 0.8\n"
    assert "✓ Written to" in buf.getvalue()
    assert "[final] report.txt" in buf.getvalue()
