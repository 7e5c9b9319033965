"""qualcode sentiment: lexicon sentiment of coded segments.

Usage:
  qualcode sentiment study.yaml
  qualcode sentiment study.yaml --scope transcript
  qualcode sentiment study.yaml --scope code --id Barriers
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from qualcode.analysis.sentiment import SentimentResult, analyze_sentiment, classify
from qualcode.cli.common import console, open_session, resolve_code
from qualcode.cli.errors import err_transcript_not_found
from qualcode.errors import NotFoundError

_CLASS_STYLE = {"positive": "green", "negative": "red", "neutral": "dim"}


class SentimentScope(str, Enum):
    all = "all"
    code = "code"
    transcript = "transcript"


def sentiment_cmd(
    ctx: typer.Context,
    project: Annotated[Path, typer.Argument(help="Project file (YAML).")],
    scope: Annotated[
        SentimentScope,
        typer.Option("--scope", "-s", help="Group by code (all, code) or by transcript."),
    ] = SentimentScope.all,
    scope_id: Annotated[
        str | None,
        typer.Option("--id", help="Restrict to one code (id or name) or transcript id."),
    ] = None,
) -> None:
    """Score coded segments as positive, negative or neutral."""
    session = open_session(ctx, project)
    proj = session.project

    if scope is SentimentScope.code and scope_id:
        scope_id = resolve_code(proj, scope_id).id
    try:
        result = analyze_sentiment(proj, scope.value, scope_id)
    except NotFoundError as exc:
        console.print(err_transcript_not_found(exc.id, proj))
        raise typer.Exit(1)

    _show_result(result, "Transcript" if scope is SentimentScope.transcript else "Code")


def _show_result(result: SentimentResult, group: str) -> None:
    o = result.overall
    console.print(
        f"\nSegments: [green]{o.positive} positive[/]  |  [red]{o.negative} negative[/]  |  "
        f"[dim]{o.neutral} neutral[/]  |  Average score: [bold]{o.average_score:+.3f}[/]"
    )
    if not result.items:
        console.print("[yellow]No coded segments to score.[/]")
        return

    table = Table(title=f"By {group.lower()}", title_justify="left")
    table.add_column(group, style="bold")
    table.add_column("Score", justify="right")
    table.add_column("Magnitude", justify="right", style="dim")
    table.add_column("Sample")
    for item in result.items:
        style = _CLASS_STYLE[classify(item.score)]
        table.add_row(
            escape(item.label),
            f"[{style}]{item.score:+.3f}[/]",
            str(item.magnitude),
            escape(item.sample_text),
        )
    console.print(table)
