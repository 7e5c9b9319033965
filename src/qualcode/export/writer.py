"""Output files written by qualcode commands.

Every file a command produces (codebook and coverage tables, reliability
reports, saved projects) goes through ``ReportWriter``:

  * relative paths stay inside the working directory (``../`` escapes fail),
  * an existing file is replaced only after confirmation or ``--yes``,
  * content lands in a sibling temp file first and is renamed into place, so
    a crash never leaves a half-written project or table behind.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

logger = logging.getLogger(__name__)


class OutputPathError(ValueError):
    """Raised when a relative output path resolves outside its base directory."""

    def __init__(self, output: str, base: Path) -> None:
        super().__init__(f"output path {output!r} resolves outside {str(base)!r}")
        self.output = output
        self.base = base


def resolve_output_path(output: str | Path, base: Path | None = None) -> Path:
    """Absolute path for *output*; relative paths must stay below *base* (default: CWD).

    Raises:
        OutputPathError: If a relative *output* escapes *base*.
    """
    path = Path(output)
    if path.is_absolute():
        return path.resolve()

    root = (base or Path.cwd()).resolve()
    resolved = (root / path).resolve()
    if not resolved.is_relative_to(root):
        raise OutputPathError(str(output), root)
    return resolved


def write_atomic(path: Path, content: str) -> None:
    """Replace *path* with *content* via a temp file in the same directory."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        "w", encoding="utf-8", newline="", dir=path.parent,
        prefix=f".{path.name}.", suffix=".tmp", delete=False,
    ) as tmp:
        tmp.write(content)
    try:
        os.replace(tmp.name, path)
    except OSError:
        os.unlink(tmp.name)
        raise
    logger.debug("Wrote %d characters to %s", len(content), path)


@dataclass
class ReportWriter:
    """Resolves, guards and writes command output, reporting each file on *console*."""

    console: Console
    yes: bool = False
    base: Path | None = None

    def target(self, output: str | Path) -> Path | None:
        """Validated destination for *output*, or ``None`` if the user declines to overwrite.

        Raises:
            OutputPathError: If *output* escapes the base directory.
        """
        path = resolve_output_path(output, self.base)
        if path.exists() and not self.yes:
            if not typer.confirm(f"  File exists: {path.name}\n  Overwrite?", default=False):
                return None
        return path

    def write(self, path: Path, content: str) -> None:
        write_atomic(path, content)
        self.console.print(f"  [green]✓[/] Written to [bold]{escape(str(path))}[/]")
