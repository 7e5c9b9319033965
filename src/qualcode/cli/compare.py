"""qualcode compare: code profile of each transcript side by side.

Each cell shows how often a code was applied in a transcript and the share of
the transcript's characters it covers.

Usage:
  qualcode compare study.yaml
  qualcode compare study.yaml -t t1 -t t2 --code Barriers --code Cost
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from qualcode.analysis.comparison import compare_transcripts
from qualcode.cli.common import console, open_session, resolve_code
from qualcode.cli.errors import err_transcript_not_found
from qualcode.errors import NotFoundError


def compare_cmd(
    ctx: typer.Context,
    project: Annotated[Path, typer.Argument(help="Project file (YAML).")],
    transcript: Annotated[
        list[str] | None,
        typer.Option("--transcript", "-t", help="Transcript id to include (repeatable)."),
    ] = None,
    code: Annotated[
        list[str] | None,
        typer.Option("--code", "-c", help="Code to include, id or name (repeatable)."),
    ] = None,
) -> None:
    """Compare code counts and coverage across transcripts."""
    session = open_session(ctx, project)
    proj = session.project
    if code:
        codes = list({c.id: c for c in (resolve_code(proj, ref) for ref in code)}.values())
    else:
        codes = proj.codes

    try:
        rows = compare_transcripts(proj, transcript, [c.id for c in codes])
    except NotFoundError as exc:
        console.print(err_transcript_not_found(exc.id, proj))
        raise typer.Exit(1)

    if not rows or not codes:
        console.print("[yellow]Nothing to compare: the project needs transcripts and codes.[/]")
        return

    decimals = session.config.report.decimals
    table = Table(title="Transcript comparison", title_justify="left")
    table.add_column("Transcript", style="bold")
    for c in codes:
        table.add_column(escape(c.text), justify="right")
    for row in rows:
        table.add_row(
            escape(row.title),
            *(
                f"{p.count} [dim]({p.coverage_percent:.{decimals}f}%)[/]" if p.count else "[dim]-[/]"
                for p in row.profile
            ),
        )
    console.print(table)
