"""qualcode codebook: export the code list with frequencies and examples.

Columns: Code Name, Color, Parent Theme, Frequency, Coverage %, Example Excerpts.

Usage:
  qualcode codebook study.yaml --output codebook.csv
  qualcode codebook study.yaml --output codebook.tsv --tsv --yes
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from qualcode.cli.common import console, open_session, output_writer, prepare_output
from qualcode.export.reports import codebook_rows, render_codebook


def codebook_cmd(
    ctx: typer.Context,
    project: Annotated[Path, typer.Argument(help="Project file (YAML).")],
    output: Annotated[
        str,
        typer.Option("--output", "-o", help="Output file path (required)."),
    ],
    tsv: Annotated[
        bool,
        typer.Option("--tsv", help="Write tab-separated values instead of CSV."),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Overwrite without asking."),
    ] = False,
) -> None:
    """Export the codebook as CSV or TSV."""
    session = open_session(ctx, project)
    writer = output_writer(yes)
    path = prepare_output(writer, output)

    cfg = session.config.report
    entries = codebook_rows(
        session.project,
        examples=cfg.examples_per_code,
        excerpt_chars=cfg.excerpt_chars,
        decimals=cfg.decimals,
    )
    if not entries:
        console.print("[yellow]No codes in this project; writing headers only.[/]")

    writer.write(path, render_codebook(entries, delimiter="\t" if tsv else ","))
