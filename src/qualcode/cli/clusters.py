"""qualcode clusters: group coded segments by shared vocabulary.

Usage:
  qualcode clusters study.yaml
  qualcode clusters study.yaml -k 5 --code Barriers --code Motivation --seed 42
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.panel import Panel

from qualcode.analysis.clusters import DEFAULT_K, cluster_codings
from qualcode.cli.common import console, open_session, resolve_code
from qualcode.cli.errors import err_invalid_input
from qualcode.errors import ValidationError

SHOWN_SEGMENTS = 3


def clusters_cmd(
    ctx: typer.Context,
    project: Annotated[Path, typer.Argument(help="Project file (YAML).")],
    k: Annotated[int, typer.Option("-k", help="Number of clusters.")] = DEFAULT_K,
    code: Annotated[
        list[str] | None,
        typer.Option("--code", "-c", help="Only cluster codings of this code (repeatable)."),
    ] = None,
    seed: Annotated[int, typer.Option("--seed", help="Seed for reproducible clusters.")] = 0,
) -> None:
    """Cluster coded segments with TF-IDF and k-means."""
    session = open_session(ctx, project)
    proj = session.project
    code_ids = [resolve_code(proj, ref).id for ref in code] if code else None

    try:
        clusters = cluster_codings(proj, k=k, code_ids=code_ids, seed=seed)
    except ValidationError as exc:
        console.print(err_invalid_input(str(exc)))
        raise typer.Exit(1)

    if not clusters:
        console.print("[yellow]No coded segments to cluster.[/]")
        return

    for cluster in clusters:
        keywords = ", ".join(escape(w) for w in cluster.keywords) or "[dim](none)[/]"
        lines = [f"Keywords: [bold]{keywords}[/]"]
        lines += [f"  • {escape(s.text)}" for s in cluster.segments[:SHOWN_SEGMENTS]]
        hidden = cluster.size - SHOWN_SEGMENTS
        if hidden > 0:
            lines.append(f"  [dim]… {hidden} more[/]")
        console.print(
            Panel(
                "\n".join(lines),
                title=f"[bold]{cluster.label}[/] ({cluster.size} segments)",
                title_align="left",
                expand=False,
            )
        )
