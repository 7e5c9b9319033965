"""Shared CLI plumbing: project loading, config, logging and output files."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from qualcode.cli.errors import (
    err_code_not_found,
    err_config,
    err_output_path_unsafe,
    err_project_file,
)
from qualcode.config import ConfigError, QualcodeConfig, load_config
from qualcode.errors import NotFoundError
from qualcode.export.writer import OutputPathError, ReportWriter
from qualcode.projectfile import ProjectFileError, load_project
from qualcode.store.models import Code
from qualcode.store.project import Project

console = Console()
err_console = Console(stderr=True)


@dataclass
class Session:
    """A loaded project together with the config that applies to it."""

    path: Path
    project: Project
    config: QualcodeConfig


def configure_logging(level: int) -> None:
    """Route ``qualcode.*`` log records through a single RichHandler."""
    logger = logging.getLogger("qualcode")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    logger.addHandler(RichHandler(console=err_console, show_path=False))
    logger.setLevel(level)


def open_session(ctx: typer.Context, project_path: Path) -> Session:
    """Load config and project for a command, exiting 1 on user errors."""
    verbose = bool(ctx.obj and ctx.obj.get("verbose"))

    try:
        cfg = load_config(project_path.parent)
    except ConfigError as exc:
        console.print(err_config(str(exc)))
        raise typer.Exit(1)

    configure_logging(logging.DEBUG if verbose else cfg.log_level)

    try:
        project = load_project(project_path)
    except ProjectFileError as exc:
        console.print(err_project_file(str(project_path), str(exc)))
        raise typer.Exit(1)

    return Session(path=project_path, project=project, config=cfg)


def resolve_code(project: Project, ref: str) -> Code:
    try:
        return project.find_code(ref)
    except NotFoundError:
        console.print(err_code_not_found(ref, project))
        raise typer.Exit(1)


def output_writer(yes: bool) -> ReportWriter:
    return ReportWriter(console, yes=yes)


def prepare_output(writer: ReportWriter, output: str) -> Path:
    """Resolve *output* through *writer*; exits 1 on an unsafe path, 0 on a declined overwrite."""
    try:
        path = writer.target(output)
    except OutputPathError:
        console.print(err_output_path_unsafe(output))
        raise typer.Exit(1)

    if path is None:
        console.print("  [dim]Cancelled.[/]")
        raise typer.Exit(0)
    return path
