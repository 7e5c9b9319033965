"""Codebook and report export."""

from qualcode.export.reports import (
    CODEBOOK_HEADERS,
    CodebookEntry,
    codebook_rows,
    render_codebook,
    render_reliability_report,
    render_table,
    render_transcript_coverage,
)
from qualcode.export.writer import OutputPathError, ReportWriter, resolve_output_path, write_atomic

__all__ = [
    "CODEBOOK_HEADERS",
    "CodebookEntry",
    "OutputPathError",
    "ReportWriter",
    "codebook_rows",
    "render_codebook",
    "render_reliability_report",
    "render_table",
    "render_transcript_coverage",
    "resolve_output_path",
    "write_atomic",
]
