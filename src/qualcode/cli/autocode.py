"""qualcode autocode: code every match of a keyword or regex.

Without --commit the command only previews matches. With --commit every
match becomes a coding and the project is saved (in place, or to --output).

Usage:
  qualcode autocode study.yaml --pattern sustainability --code Sustainability
  qualcode autocode study.yaml --pattern "recycl\\w*" --regex --code q1 --commit
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from qualcode.autocode import AutoCodePreview, AutoCoder
from qualcode.cli.common import console, open_session, output_writer, prepare_output, resolve_code
from qualcode.cli.errors import err_invalid_input, err_invalid_pattern, err_transcript_not_found
from qualcode.errors import NotFoundError, PatternError, ValidationError
from qualcode.projectfile import dump_project


def autocode_cmd(
    ctx: typer.Context,
    project: Annotated[Path, typer.Argument(help="Project file (YAML).")],
    pattern: Annotated[str, typer.Option("--pattern", "-p", help="Keyword (or regex with --regex).")],
    code: Annotated[str, typer.Option("--code", "-c", help="Code to apply (id or name).")],
    regex: Annotated[
        bool,
        typer.Option("--regex", help="Treat --pattern as a regular expression."),
    ] = False,
    transcript: Annotated[
        list[str] | None,
        typer.Option("--transcript", "-t", help="Limit to this transcript id (repeatable)."),
    ] = None,
    commit: Annotated[
        bool,
        typer.Option("--commit", help="Create the codings (default: preview only)."),
    ] = False,
    output: Annotated[
        str | None,
        typer.Option("--output", "-o", help="Save the updated project here instead of in place."),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompts."),
    ] = False,
) -> None:
    """Preview or apply a keyword / regex auto-coding pass."""
    session = open_session(ctx, project)
    proj = session.project
    target = resolve_code(proj, code)
    mode = "regex" if regex else "keyword"

    coder = AutoCoder(
        proj,
        preview_limit=session.config.autocode.preview_limit,
        context_chars=session.config.autocode.context_chars,
    )

    try:
        preview = coder.preview(pattern, mode, transcript)
    except PatternError as exc:
        console.print(err_invalid_pattern(exc))
        raise typer.Exit(1)
    except NotFoundError as exc:
        console.print(err_transcript_not_found(exc.id, proj))
        raise typer.Exit(1)
    except ValidationError as exc:
        console.print(err_invalid_input(str(exc)))
        raise typer.Exit(1)

    _show_preview(preview, target.text)

    if not commit:
        if preview.count:
            console.print("  [dim]Preview only. Re-run with --commit to create the codings.[/]")
        return
    if not preview.count:
        return

    writer = output_writer(yes)
    dest = prepare_output(writer, output) if output else session.path
    if not yes and not output:
        if not typer.confirm(f"Create codings and save {dest.name}?", default=False):
            console.print("[dim]Cancelled.[/]")
            raise typer.Exit(0)

    result = coder.commit(pattern, mode, target.id, transcript)
    console.print(
        f"  [green]✓[/] Created [bold]{result.created}[/] codings for [bold]{escape(target.text)}[/]"
    )
    writer.write(dest, dump_project(proj))


def _show_preview(preview: AutoCodePreview, code_name: str) -> None:
    plus = "+" if preview.truncated else ""
    noun = "match" if preview.count == 1 else "matches"
    console.print(
        f"\nPattern [bold]{escape(preview.pattern)}[/] ({preview.mode}) → [bold]{escape(code_name)}[/]: "
        f"{preview.count}{plus} {noun}"
    )
    if not preview.count:
        return

    table = Table(show_header=True, box=None, padding=(0, 1))
    table.add_column("Transcript", style="bold")
    table.add_column("Offset", justify="right", style="dim")
    table.add_column("Context")
    for m in preview.matches:
        table.add_row(escape(m.transcript_title), f"{m.start}-{m.end}", escape(m.context))
    console.print(table)
