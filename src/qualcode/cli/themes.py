"""qualcode themes: the code hierarchy sized by codings or coded characters.

Usage:
  qualcode themes study.yaml
  qualcode themes study.yaml --metric characters
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.tree import Tree

from qualcode.analysis.themes import ThemeMap, theme_map
from qualcode.cli.common import console, open_session, resolve_code


class ThemeMetric(str, Enum):
    codings = "codings"
    characters = "characters"


def themes_cmd(
    ctx: typer.Context,
    project: Annotated[Path, typer.Argument(help="Project file (YAML).")],
    metric: Annotated[
        ThemeMetric,
        typer.Option("--metric", "-m", help="Size codes by number of codings or coded characters."),
    ] = ThemeMetric.codings,
    code: Annotated[
        list[str] | None,
        typer.Option("--code", "-c", help="Only include this code, id or name (repeatable)."),
    ] = None,
) -> None:
    """Show each code's weight within the code hierarchy."""
    session = open_session(ctx, project)
    proj = session.project
    code_ids = [resolve_code(proj, ref).id for ref in code] if code else None

    themes = theme_map(proj, metric.value, code_ids)
    if not themes.nodes:
        console.print("[yellow]No coded text yet: every code has size 0.[/]")
        return

    tree = Tree(f"[bold]Themes[/] [dim]({themes.total:,} {themes.metric})[/]")
    _add_children(tree, themes, None, session.config.report.decimals)
    console.print(tree)


def _add_children(branch: Tree, themes: ThemeMap, parent_id: str | None, decimals: int) -> None:
    for node in themes.children(parent_id):
        share = 100.0 * node.size / themes.total
        child = branch.add(
            f"[bold]{escape(node.name)}[/]  {node.size:,} [dim]({share:.{decimals}f}%)[/]"
        )
        _add_children(child, themes, node.code_id, decimals)
