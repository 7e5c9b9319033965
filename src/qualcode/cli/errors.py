"""qualcode rich error messages with actionable feedback.

Every error shown to the user must contain:
  1. What went wrong (clear cause)
  2. The exact action the user should take to fix it

Usage:
    from qualcode.cli.errors import err_code_not_found
    console.print(err_code_not_found("Sustainability", project))
    raise typer.Exit(1)
"""

from __future__ import annotations

from rich.markup import escape

from qualcode.errors import PatternError
from qualcode.store.project import Project


def err_project_file(path: str, detail: str) -> str:
    """Project file missing or malformed."""
    return (
        f"[red]Error:[/] Could not load project file '{escape(path)}'.\n"
        f"  {escape(detail)}\n"
        "  Fix the entry above, or check the path you passed as PROJECT."
    )


def err_config(detail: str) -> str:
    """qualcode.yaml / global config holds an invalid value."""
    return (
        f"[red]Error:[/] Invalid configuration: {escape(detail)}\n"
        "  Edit qualcode.yaml next to the project file (or ~/.qualcode/config.yaml)."
    )


def err_code_not_found(ref: str, project: Project) -> str:
    """Code reference matches neither an id nor a code name."""
    names = ", ".join(escape(c.text) for c in project.codes) or "(none)"
    return (
        f"[red]Error:[/] Code '{escape(ref)}' not found.\n"
        f"  Available codes: {names}\n"
        "  Pass a code id or its exact name."
    )


def err_transcript_not_found(ref: str, project: Project) -> str:
    ids = ", ".join(escape(t.id) for t in project.transcripts) or "(none)"
    return (
        f"[red]Error:[/] Transcript '{escape(ref)}' not found.\n"
        f"  Available transcript ids: {ids}"
    )


def err_invalid_pattern(exc: PatternError) -> str:
    """Regex auto-code pattern does not compile."""
    where = f" (at position {exc.position})" if exc.position is not None else ""
    return (
        f"[red]Error:[/] Invalid regular expression '{escape(exc.pattern)}': "
        f"{escape(exc.reason)}{where}\n"
        "  Fix the pattern, or drop --regex to match it as a literal keyword."
    )


def err_same_code(flag_a: str, flag_b: str) -> str:
    return (
        f"[red]Error:[/] {flag_a} and {flag_b} refer to the same code.\n"
        "  Choose two different codes."
    )


def err_code_without_codings(name: str) -> str:
    """Reliability needs both codes to be applied somewhere."""
    return (
        f"[red]Error:[/] Code '{escape(name)}' has no codings in this project.\n"
        "  Code some text with it first, e.g.:\n"
        f"    qualcode autocode PROJECT --pattern <keyword> --code \"{escape(name)}\" --commit"
    )


def err_invalid_input(detail: str) -> str:
    return f"[red]Error:[/] {escape(detail)}"


def err_output_path_unsafe(path: str) -> str:
    """--output path fails security validation."""
    return (
        f"[red]Error:[/] Output path is not allowed: '{escape(path)}'\n"
        "  Use a path within the current working directory."
    )
