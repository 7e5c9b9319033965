"""qualcode merge: fold one code into another.

Every coding of the source code is reassigned to the target, child codes move
under the target, and the source code is deleted.

Usage:
  qualcode merge study.yaml --source "Recycling" --target "Sustainability"
  qualcode merge study.yaml --source q2 --target q1 --output merged.yaml --yes
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from qualcode.cli.common import console, open_session, output_writer, prepare_output, resolve_code
from qualcode.cli.errors import err_same_code
from qualcode.projectfile import dump_project


def merge_cmd(
    ctx: typer.Context,
    project: Annotated[Path, typer.Argument(help="Project file (YAML).")],
    source: Annotated[str, typer.Option("--source", "-s", help="Code to merge away (id or name).")],
    target: Annotated[str, typer.Option("--target", "-t", help="Code that absorbs it (id or name).")],
    output: Annotated[
        str | None,
        typer.Option("--output", "-o", help="Save the merged project here instead of in place."),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Merge the source code into the target code."""
    session = open_session(ctx, project)
    proj = session.project
    src = resolve_code(proj, source)
    dst = resolve_code(proj, target)

    if src.id == dst.id:
        console.print(err_same_code("--source", "--target"))
        raise typer.Exit(1)

    moving = len(proj.codings.codings_by_code(src.id))
    children = len(proj.children_of(src.id))
    console.print(f"\nMerge [bold]{escape(src.text)}[/] into [bold]{escape(dst.text)}[/]")
    console.print(f"  Codings reassigned: {moving}  |  Child codes moved: {children}")

    writer = output_writer(yes)
    dest = prepare_output(writer, output) if output else session.path
    if not yes:
        if not typer.confirm("Confirm merge?", default=False):
            console.print("[dim]Cancelled.[/]")
            raise typer.Exit(0)

    result = proj.codings.merge_code(src.id, dst.id)
    console.print(
        f"  [green]✓[/] Merged. [bold]{escape(dst.text)}[/] now has {result.coding_count} codings"
    )
    writer.write(dest, dump_project(proj))
