"""qualcode coverage: how much of the data has been coded.

Usage:
  qualcode coverage study.yaml
  qualcode coverage study.yaml --by code
  qualcode coverage study.yaml --by transcript --csv coverage.csv
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from qualcode.analysis.coverage import CoverageReport, CoverageReporter
from qualcode.cli.common import console, open_session, output_writer, prepare_output
from qualcode.export.reports import render_transcript_coverage


class CoverageView(str, Enum):
    transcript = "transcript"
    code = "code"
    all = "all"


def coverage_cmd(
    ctx: typer.Context,
    project: Annotated[Path, typer.Argument(help="Project file (YAML).")],
    by: Annotated[
        CoverageView,
        typer.Option("--by", help="Breakdown to show: transcript, code or all."),
    ] = CoverageView.all,
    csv_out: Annotated[
        str | None,
        typer.Option("--csv", help="Also write per-transcript coverage to this CSV file."),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Overwrite --csv without asking."),
    ] = False,
) -> None:
    """Show coded-character coverage per project, transcript and code."""
    session = open_session(ctx, project)
    decimals = session.config.report.decimals
    report = CoverageReporter(session.project).report()

    _show_project_panel(session.project.name, report, decimals)
    if by in (CoverageView.transcript, CoverageView.all):
        _show_transcript_table(report, decimals)
    if by in (CoverageView.code, CoverageView.all):
        _show_code_table(report, decimals)

    if csv_out:
        writer = output_writer(yes)
        path = prepare_output(writer, csv_out)
        writer.write(path, render_transcript_coverage(report.transcripts, decimals=decimals))


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------


def _show_project_panel(name: str, report: CoverageReport, decimals: int) -> None:
    p = report.project
    lines = [
        f"Project:     [bold]{escape(name)}[/]",
        f"Transcripts: {p.transcript_count}  |  Codes: {p.code_count}  |  Codings: {p.coding_count}",
        f"Coverage:    [bold]{p.coverage_percent:.{decimals}f}%[/] "
        f"[dim]({p.coded_chars:,} / {p.total_chars:,} chars)[/]",
    ]
    console.print(Panel("\n".join(lines), title="[bold]Coverage[/]", expand=False))


def _show_transcript_table(report: CoverageReport, decimals: int) -> None:
    table = Table(title="Transcripts", title_justify="left")
    table.add_column("Transcript", style="bold")
    table.add_column("Coverage", justify="right")
    table.add_column("Coded / Total", justify="right", style="dim")
    table.add_column("Codings", justify="right")
    table.add_column("Codes", justify="right")
    table.add_column("Words", justify="right", style="dim")
    table.add_column("Share", justify="right")
    for row in report.transcripts:
        table.add_row(
            escape(row.title),
            f"{row.coverage_percent:.{decimals}f}%",
            f"{row.coded_chars:,} / {row.total_chars:,}",
            str(row.coding_count),
            str(row.distinct_code_count),
            f"{row.word_count:,}",
            f"{row.share_percent:.{decimals}f}%",
        )
    console.print(table)


def _show_code_table(report: CoverageReport, decimals: int) -> None:
    table = Table(title="Codes", title_justify="left")
    table.add_column("Code", style="bold")
    table.add_column("Frequency", justify="right")
    table.add_column("Coverage", justify="right")
    table.add_column("Coded chars", justify="right", style="dim")
    table.add_column("Share", justify="right")
    for row in sorted(report.codes, key=lambda c: (-c.frequency, c.name.lower())):
        table.add_row(
            escape(row.name),
            str(row.frequency),
            f"{row.coverage_percent:.{decimals}f}%",
            f"{row.coded_chars:,}",
            f"{row.share_percent:.{decimals}f}%",
        )
    console.print(table)
