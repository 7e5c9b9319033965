"""qualcode reliability: Cohen's Kappa between two codes.

Usage:
  qualcode reliability study.yaml --code-a "Coder 1: Barriers" --code-b "Coder 2: Barriers"
  qualcode reliability study.yaml --code-a q1 --code-b q2 --unit sentence --report kappa.txt
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from qualcode.analysis.reliability import ReliabilityAnalyzer, ReliabilityReport
from qualcode.cli.common import (
    console,
    open_session,
    output_writer,
    prepare_output,
    resolve_code,
)
from qualcode.cli.errors import err_code_without_codings, err_invalid_input, err_same_code
from qualcode.errors import ValidationError
from qualcode.export.reports import render_reliability_report

_KAPPA_STYLE = {
    "Poor": "red",
    "Slight": "red",
    "Fair": "yellow",
    "Moderate": "yellow",
    "Substantial": "green",
    "Almost Perfect": "green",
}


def reliability_cmd(
    ctx: typer.Context,
    project: Annotated[Path, typer.Argument(help="Project file (YAML).")],
    code_a: Annotated[str, typer.Option("--code-a", "-a", help="First code (id or name).")],
    code_b: Annotated[str, typer.Option("--code-b", "-b", help="Second code (id or name).")],
    unit: Annotated[
        str | None,
        typer.Option("--unit", "-u", help="Comparison unit: paragraph or sentence."),
    ] = None,
    report_out: Annotated[
        str | None,
        typer.Option("--report", "-o", help="Write a plain-text report to this path."),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Overwrite --report without asking."),
    ] = False,
) -> None:
    """Compute intercoder agreement (Cohen's Kappa) between two codes."""
    session = open_session(ctx, project)
    proj = session.project
    first = resolve_code(proj, code_a)
    second = resolve_code(proj, code_b)

    if first.id == second.id:
        console.print(err_same_code("--code-a", "--code-b"))
        raise typer.Exit(1)
    for code in (first, second):
        if not proj.codings.codings_by_code(code.id):
            console.print(err_code_without_codings(code.text))
            raise typer.Exit(1)

    try:
        result = ReliabilityAnalyzer(proj).analyze(
            first.id, second.id, unit=unit or session.config.reliability.unit
        )
    except ValidationError as exc:
        console.print(err_invalid_input(str(exc)))
        raise typer.Exit(1)

    _show_result(result, first.text, second.text)

    if report_out:
        writer = output_writer(yes)
        path = prepare_output(writer, report_out)
        writer.write(path, render_reliability_report(result, first.text, second.text))


def _show_result(report: ReliabilityReport, name_a: str, name_b: str) -> None:
    r = report.result
    name_a, name_b = escape(name_a), escape(name_b)
    style = _KAPPA_STYLE.get(report.interpretation, "bold")
    lines = [
        f"Code A: [bold]{name_a}[/]",
        f"Code B: [bold]{name_b}[/]",
        f"Unit:   {report.unit}",
        "",
        f"Cohen's Kappa: [{style}]{r.kappa:.3f}[/] ({report.interpretation})",
        f"Observed agreement: {r.po * 100:.1f}%  |  Expected: {r.pe * 100:.1f}%  |  Units: {r.n}",
    ]
    console.print(Panel("\n".join(lines), title="[bold]Intercoder Reliability[/]", expand=False))

    t = report.table
    grid = Table(show_header=True, box=None, padding=(0, 2))
    grid.add_column("")
    grid.add_column(f"{name_b} coded", justify="right")
    grid.add_column(f"{name_b} not coded", justify="right")
    grid.add_row(f"{name_a} coded", str(t.both), str(t.only_a))
    grid.add_row(f"{name_a} not coded", str(t.only_b), str(t.neither))
    console.print(grid)

    if report.per_transcript:
        table = Table(title="Per transcript", title_justify="left")
        table.add_column("Transcript", style="bold")
        table.add_column("Kappa", justify="right")
        table.add_column("Units", justify="right")
        table.add_column("Agree", justify="right", style="dim")
        for row in report.per_transcript:
            table.add_row(
                escape(row.title),
                f"{row.result.kappa:.3f}",
                str(row.units),
                f"{row.table.agreements}/{row.units}",
            )
        console.print(table)
