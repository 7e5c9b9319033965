"""qualcode CLI entry point."""

from __future__ import annotations

import importlib.metadata
from typing import Annotated

import typer

from qualcode.cli.autocode import autocode_cmd
from qualcode.cli.clusters import clusters_cmd
from qualcode.cli.codebook import codebook_cmd
from qualcode.cli.compare import compare_cmd
from qualcode.cli.coverage import coverage_cmd
from qualcode.cli.merge import merge_cmd
from qualcode.cli.reliability import reliability_cmd
from qualcode.cli.sentiment import sentiment_cmd
from qualcode.cli.themes import themes_cmd
from qualcode.cli.words import words_cmd


def _installed_version() -> str:
    try:
        return importlib.metadata.version("qualcode")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"qualcode {_installed_version()}")
        raise typer.Exit()


app = typer.Typer(
    name="qualcode",
    help=(
        "qualcode: text coding and coding analytics for qualitative research.\n\n"
        "  qualcode coverage     How much of each transcript has been coded.\n"
        "  qualcode reliability  Cohen's Kappa between two codes.\n"
        "  qualcode words        Most frequent words in coded text.\n"
        "  qualcode compare      Code profile of each transcript.\n"
        "  qualcode sentiment    Positive and negative segments.\n"
        "  qualcode clusters     Segments grouped by vocabulary.\n"
        "  qualcode themes       Code hierarchy sized by codings."
    ),
    add_completion=False,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging."),
    ] = False,
) -> None:
    """qualcode: text coding and coding analytics."""
    ctx.obj = {"verbose": verbose}


app.command("coverage")(coverage_cmd)
app.command("reliability")(reliability_cmd)
app.command("autocode")(autocode_cmd)
app.command("merge")(merge_cmd)
app.command("codebook")(codebook_cmd)
app.command("words")(words_cmd)
app.command("compare")(compare_cmd)
app.command("sentiment")(sentiment_cmd)
app.command("clusters")(clusters_cmd)
app.command("themes")(themes_cmd)


@app.command("version")
def version_cmd() -> None:
    """Show the installed qualcode version."""
    typer.echo(f"qualcode {_installed_version()}")


if __name__ == "__main__":
    app()
