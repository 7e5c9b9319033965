"""Find pattern matches across transcripts and turn them into codings.

Usage:
    coder = AutoCoder(project)
    preview = coder.preview("sustainability")
    result = coder.commit("sustainability", "keyword", code_id)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from qualcode.autocode.matcher import PatternMatch, compile_pattern, scan
from qualcode.store.coding_store import CodingSpec
from qualcode.store.models import Coding
from qualcode.store.project import Project

logger = logging.getLogger(__name__)

DEFAULT_PREVIEW_LIMIT = 50
DEFAULT_CONTEXT_CHARS = 20


@dataclass
class AutoCodePreview:
    pattern: str
    mode: str
    matches: list[PatternMatch] = field(default_factory=list)
    truncated: bool = False

    @property
    def count(self) -> int:
        return len(self.matches)


@dataclass
class AutoCodeResult:
    code_id: str
    codings: list[Coding] = field(default_factory=list)

    @property
    def created(self) -> int:
        return len(self.codings)


class AutoCoder:
    """Keyword / regex auto-coding over a project's transcripts."""

    def __init__(
        self,
        project: Project,
        preview_limit: int = DEFAULT_PREVIEW_LIMIT,
        context_chars: int = DEFAULT_CONTEXT_CHARS,
    ) -> None:
        self.project = project
        self.preview_limit = preview_limit
        self.context_chars = context_chars

    def find_matches(
        self,
        pattern: str,
        mode: str = "keyword",
        transcript_ids: list[str] | None = None,
        limit: int | None = None,
        context_chars: int | None = None,
    ) -> list[PatternMatch]:
        """All matches of *pattern*, in transcript order then offset order.

        Args:
            pattern: Keyword or regular expression.
            mode: ``"keyword"`` or ``"regex"``.
            transcript_ids: Transcripts to scan (empty or ``None``: all).
            limit: Stop after this many matches.
            context_chars: Characters of context either side of a match.

        Raises:
            ValidationError: Blank pattern or unknown mode.
            PatternError: Invalid regular expression.
            NotFoundError: Unknown transcript id.
        """
        regex = compile_pattern(pattern, mode)
        chars = self.context_chars if context_chars is None else context_chars
        transcripts = self.project.select_transcripts(transcript_ids)

        matches: list[PatternMatch] = []
        for transcript in transcripts:
            for match in scan(regex, transcript, chars):
                if limit is not None and len(matches) >= limit:
                    return matches
                matches.append(match)
        return matches

    def preview(
        self,
        pattern: str,
        mode: str = "keyword",
        transcript_ids: list[str] | None = None,
    ) -> AutoCodePreview:
        """Matches up to ``preview_limit``, without creating anything."""
        # One extra match tells us whether the cap cut anything off.
        found = self.find_matches(
            pattern, mode, transcript_ids, limit=self.preview_limit + 1
        )
        truncated = len(found) > self.preview_limit
        logger.debug(
            "Preview %r (%s): %d matches%s",
            pattern, mode, min(len(found), self.preview_limit), "+" if truncated else "",
        )
        return AutoCodePreview(
            pattern=pattern,
            mode=mode,
            matches=found[: self.preview_limit],
            truncated=truncated,
        )

    def commit(
        self,
        pattern: str,
        mode: str,
        code_id: str,
        transcript_ids: list[str] | None = None,
    ) -> AutoCodeResult:
        """Create a coding under *code_id* for every match.

        The pattern, code and transcripts are all validated before the store
        is touched; the insert itself is all or nothing.
        """
        regex = compile_pattern(pattern, mode)
        with self.project.lock:
            self.project.get_code(code_id)
            transcripts = self.project.select_transcripts(transcript_ids)
            specs = [
                CodingSpec(m.transcript_id, code_id, m.start, m.end, m.text)
                for t in transcripts
                for m in scan(regex, t, 0)
            ]
            codings = self.project.codings.create_many(specs)
        logger.info("Auto-coded %d matches of %r as %s", len(codings), pattern, code_id)
        return AutoCodeResult(code_id=code_id, codings=codings)
