"""Keyword and regex auto-coding."""

from qualcode.autocode.autocoder import (
    DEFAULT_CONTEXT_CHARS,
    DEFAULT_PREVIEW_LIMIT,
    AutoCodePreview,
    AutoCoder,
    AutoCodeResult,
)
from qualcode.autocode.matcher import MODES, PatternMatch, compile_pattern, context_excerpt

__all__ = [
    "DEFAULT_CONTEXT_CHARS",
    "DEFAULT_PREVIEW_LIMIT",
    "MODES",
    "AutoCodePreview",
    "AutoCodeResult",
    "AutoCoder",
    "PatternMatch",
    "compile_pattern",
    "context_excerpt",
]
