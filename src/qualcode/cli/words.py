"""qualcode words: most frequent words in coded text.

Minimum word length, list size and extra stop words come from the
``words:`` section of qualcode.yaml; --max overrides the list size.

Usage:
  qualcode words study.yaml
  qualcode words study.yaml --code Sustainability --max 20
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from qualcode.analysis.words import word_frequency
from qualcode.cli.common import console, open_session, resolve_code
from qualcode.cli.errors import err_invalid_input
from qualcode.errors import ValidationError


def words_cmd(
    ctx: typer.Context,
    project: Annotated[Path, typer.Argument(help="Project file (YAML).")],
    code: Annotated[
        str | None,
        typer.Option("--code", "-c", help="Only count text coded with this code (id or name)."),
    ] = None,
    max_words: Annotated[
        int | None,
        typer.Option("--max", "-n", help="Number of words to list (default: words.max_words)."),
    ] = None,
) -> None:
    """List the most frequent words in coded segments."""
    session = open_session(ctx, project)
    proj = session.project
    cfg = session.config.words
    target = resolve_code(proj, code) if code else None

    try:
        counts = word_frequency(
            proj,
            target.id if target else None,
            max_words=max_words if max_words is not None else cfg.max_words,
            stop_words=cfg.stop_words,
            min_length=cfg.min_length,
        )
    except ValidationError as exc:
        console.print(err_invalid_input(str(exc)))
        raise typer.Exit(1)

    scope = escape(target.text) if target else "all codes"
    if not counts:
        console.print(f"[yellow]No countable words in text coded with {scope}.[/]")
        return

    table = Table(title=f"Word frequency: {scope}", title_justify="left")
    table.add_column("Word", style="bold")
    table.add_column("Count", justify="right")
    for wc in counts:
        table.add_row(escape(wc.text), str(wc.count))
    console.print(table)
