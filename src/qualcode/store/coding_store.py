"""CodingStore: the single owner of a project's codings.

Every mutation validates first and then applies, under the project lock.
Multi-step operations (merge, cascades) build the complete new state before
swapping it in, so a failure never leaves a half-applied change behind.

``delete()`` is idempotent: removing an unknown coding is a no-op that
returns ``False``.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator

from qualcode.errors import NotFoundError, ValidationError
from qualcode.store.models import Code, Coding, Transcript, new_id, utc_now

if TYPE_CHECKING:
    from qualcode.store.project import Project

logger = logging.getLogger(__name__)

_IN_VIVO_MAX_CHARS = 80


@dataclass(frozen=True)
class CodingSpec:
    """Input for ``CodingStore.create_many()``."""

    transcript_id: str
    code_id: str
    start: int
    end: int
    coded_text: str | None = None


@dataclass(frozen=True)
class MergeResult:
    source_code_id: str
    target_code_id: str
    reassigned: int      # codings moved from source to target
    coding_count: int    # codings on target after the merge
    reparented: int      # child codes moved off the source


class CodingStore:
    """CRUD over codings with referential invariants.

    Not constructed directly: every ``Project`` creates its own store as
    ``project.codings``.
    """

    def __init__(self, project: Project) -> None:
        self._project = project
        self._codings: dict[str, Coding] = {}

    def __len__(self) -> int:
        return len(self._codings)

    def __iter__(self) -> Iterator[Coding]:
        return iter(self._ordered(self._codings.values()))

    def __contains__(self, coding_id: object) -> bool:
        return coding_id in self._codings

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(
        self,
        transcript_id: str,
        code_id: str,
        start: int,
        end: int,
        coded_text: str | None = None,
        *,
        id: str | None = None,
        created_at: str | None = None,
    ) -> Coding:
        """Create a coding for ``transcript.content[start:end]``.

        Args:
            transcript_id: Transcript the span belongs to.
            code_id: Code to assign.
            start: Start offset (inclusive).
            end: End offset (exclusive).
            coded_text: Expected span text. Taken from the transcript when
                omitted; must match the transcript slice when given.
            id: Explicit coding id (generated when omitted).
            created_at: Explicit ISO timestamp (now when omitted).

        Returns:
            The new Coding.

        Raises:
            NotFoundError: If the transcript or code is unknown.
            ValidationError: If the offsets are invalid or *coded_text* does
                not match the transcript.
        """
        with self._project.lock:
            coding = self._build(
                CodingSpec(transcript_id, code_id, start, end, coded_text),
                id=id,
                created_at=created_at,
            )
            self._codings[coding.id] = coding
        logger.debug(
            "Created coding %s on %s [%d:%d] -> %s",
            coding.id, transcript_id, start, end, code_id,
        )
        return coding

    def create_many(self, specs: list[CodingSpec]) -> list[Coding]:
        """Validate every spec, then insert them all (all or nothing)."""
        with self._project.lock:
            built = [self._build(spec) for spec in specs]
            for coding in built:
                self._codings[coding.id] = coding
        if built:
            logger.info("Created %d codings", len(built))
        return built

    def _build(
        self,
        spec: CodingSpec,
        *,
        id: str | None = None,
        created_at: str | None = None,
    ) -> Coding:
        transcript = self._project.get_transcript(spec.transcript_id)
        self._project.get_code(spec.code_id)
        _check_span(transcript, spec.start, spec.end)

        actual = transcript.content[spec.start:spec.end]
        if spec.coded_text is not None and spec.coded_text != actual:
            raise ValidationError(
                f"coded text does not match transcript {transcript.id!r} "
                f"at [{spec.start}:{spec.end}]",
                field="coded_text",
            )

        coding_id = id or new_id()
        if coding_id in self._codings:
            raise ValidationError(f"duplicate coding id: {coding_id!r}", field="id")

        return Coding(
            id=coding_id,
            transcript_id=spec.transcript_id,
            code_id=spec.code_id,
            start_offset=spec.start,
            end_offset=spec.end,
            coded_text=actual,
            created_at=created_at or utc_now(),
        )

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get(self, coding_id: str) -> Coding:
        try:
            return self._codings[coding_id]
        except KeyError:
            raise NotFoundError("coding", coding_id) from None

    def codings_for(self, transcript_id: str | None = None) -> list[Coding]:
        """Codings of one transcript (or all), ordered by position."""
        return self._ordered(
            c for c in self._codings.values()
            if transcript_id is None or c.transcript_id == transcript_id
        )

    def codings_by_code(self, code_id: str | None = None) -> list[Coding]:
        """Codings assigned to one code (or all), ordered by position."""
        return self._ordered(
            c for c in self._codings.values()
            if code_id is None or c.code_id == code_id
        )

    def count_by_code(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for coding in self._codings.values():
            counts[coding.code_id] = counts.get(coding.code_id, 0) + 1
        return counts

    def _ordered(self, codings) -> list[Coding]:
        position = {tid: i for i, tid in enumerate(t.id for t in self._project.transcripts)}
        return sorted(
            codings,
            key=lambda c: (
                position.get(c.transcript_id, len(position)), c.start_offset, c.end_offset, c.id
            ),
        )

    # ------------------------------------------------------------------
    # Update / delete
    # ------------------------------------------------------------------

    def delete(self, coding_id: str) -> bool:
        """Remove a coding. Returns False if it did not exist."""
        with self._project.lock:
            removed = self._codings.pop(coding_id, None)
        if removed is None:
            logger.debug("Delete of unknown coding %s ignored", coding_id)
            return False
        return True

    def reassign(self, coding_id: str, new_code_id: str) -> Coding:
        """Point a coding at another code; offsets and text are unchanged.

        Raises:
            NotFoundError: If the coding or the new code is unknown.
        """
        with self._project.lock:
            coding = self.get(coding_id)
            self._project.get_code(new_code_id)
            updated = dataclasses.replace(coding, code_id=new_code_id)
            self._codings[coding_id] = updated
        return updated

    def merge_code(self, source_code_id: str, target_code_id: str) -> MergeResult:
        """Fold *source_code_id* into *target_code_id* and delete the source.

        All source codings move to the target. Child codes of the source move
        under the target, except where the target is that child or lies below
        it; those children take the source's own parent instead.

        Raises:
            ValidationError: If source and target are the same code.
            NotFoundError: If either code is unknown.
        """
        if source_code_id == target_code_id:
            raise ValidationError("cannot merge a code into itself", field="target_code_id")

        project = self._project
        with project.lock:
            source = project.get_code(source_code_id)
            project.get_code(target_code_id)

            new_codings: dict[str, Coding] = {}
            reassigned = 0
            for cid, coding in self._codings.items():
                if coding.code_id == source_code_id:
                    coding = dataclasses.replace(coding, code_id=target_code_id)
                    reassigned += 1
                new_codings[cid] = coding

            new_codes: dict[str, Code] = {c.id: c for c in project.codes}
            children = project.children_of(source_code_id)
            for child in children:
                if child.id == target_code_id or project.is_descendant(target_code_id, child.id):
                    parent = source.parent_code_id
                else:
                    parent = target_code_id
                new_codes[child.id] = dataclasses.replace(child, parent_code_id=parent)
            del new_codes[source_code_id]

            self._codings = new_codings
            project._replace_codes(new_codes)

            coding_count = sum(1 for c in new_codings.values() if c.code_id == target_code_id)

        logger.info(
            "Merged code %s into %s (%d codings reassigned)",
            source_code_id, target_code_id, reassigned,
        )
        return MergeResult(
            source_code_id=source_code_id,
            target_code_id=target_code_id,
            reassigned=reassigned,
            coding_count=coding_count,
            reparented=len(children),
        )

    # ------------------------------------------------------------------
    # Cascading deletes
    # ------------------------------------------------------------------

    def delete_transcript(self, transcript_id: str) -> int:
        """Delete a transcript and all of its codings. Returns codings removed."""
        project = self._project
        with project.lock:
            project.get_transcript(transcript_id)
            kept = {cid: c for cid, c in self._codings.items() if c.transcript_id != transcript_id}
            removed = len(self._codings) - len(kept)
            project._drop_transcript(transcript_id)
            self._codings = kept
        logger.info("Deleted transcript %s (%d codings cascaded)", transcript_id, removed)
        return removed

    def delete_code(self, code_id: str) -> int:
        """Delete a code and all of its codings; children become roots.

        Returns:
            Number of codings removed.
        """
        project = self._project
        with project.lock:
            project.get_code(code_id)
            kept = {cid: c for cid, c in self._codings.items() if c.code_id != code_id}
            removed = len(self._codings) - len(kept)

            new_codes: dict[str, Code] = {}
            for code in project.codes:
                if code.id == code_id:
                    continue
                if code.parent_code_id == code_id:
                    code = dataclasses.replace(code, parent_code_id=None)
                new_codes[code.id] = code

            project._replace_codes(new_codes)
            self._codings = kept
        logger.info("Deleted code %s (%d codings cascaded)", code_id, removed)
        return removed

    # ------------------------------------------------------------------
    # Coding shortcuts
    # ------------------------------------------------------------------

    def code_in_vivo(self, transcript_id: str, start: int, end: int) -> Coding:
        """Create a code named after the selected text and code the selection with it."""
        with self._project.lock:
            transcript = self._project.get_transcript(transcript_id)
            _check_span(transcript, start, end)
            name = _code_name(transcript.content[start:end])
            if not name:
                raise ValidationError("cannot code blank text in vivo", field="start")
            code = self._project.add_code(name)
            return self.create(transcript_id, code.id, start, end)

    def spread_to_paragraph(
        self,
        transcript_id: str,
        start: int,
        end: int,
        code_id: str | None = None,
    ) -> Coding | None:
        """Code the whole paragraph(s) around a selection.

        The selection is widened to the nearest blank-line (``\\n\\n``)
        boundaries and then trimmed of surrounding whitespace. Without
        *code_id*, a new code named after the original selection is created.

        Returns:
            The new coding, or None if the enclosing paragraph is blank.
        """
        with self._project.lock:
            transcript = self._project.get_transcript(transcript_id)
            _check_span(transcript, start, end)
            if code_id is not None:
                self._project.get_code(code_id)

            para_start, para_end = paragraph_bounds(transcript.content, start, end)
            if para_end <= para_start:
                return None

            if code_id is None:
                name = _code_name(transcript.content[start:end])
                if not name:
                    raise ValidationError("cannot name a code after blank text", field="start")
                code_id = self._project.add_code(name).id

            return self.create(transcript_id, code_id, para_start, para_end)


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


def _check_span(transcript: Transcript, start: int, end: int) -> None:
    for name, value in (("start", start), ("end", end)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"{name} offset must be an integer, got {value!r}", field=name)
    if start >= end:
        raise ValidationError(f"start ({start}) must be less than end ({end})", field="start")
    if start < 0 or end > len(transcript.content):
        raise ValidationError(
            f"span [{start}:{end}] is outside transcript {transcript.id!r} "
            f"(length {len(transcript.content)})",
            field="end",
        )


def _code_name(text: str) -> str:
    return " ".join(text.split())[:_IN_VIVO_MAX_CHARS]


def paragraph_bounds(content: str, start: int, end: int) -> tuple[int, int]:
    """Return the trimmed ``(start, end)`` of the paragraph(s) around a span.

    Paragraphs are delimited by ``\\n\\n``. The result is empty
    (``end <= start``) when the enclosing text is only whitespace.
    """
    sep = content.rfind("\n\n", 0, start + 2)
    para_start = 0 if sep == -1 else sep + 2
    sep = content.find("\n\n", end)
    para_end = len(content) if sep == -1 else sep

    raw = content[para_start:para_end]
    stripped = raw.strip()
    if not stripped:
        return para_start, para_start
    lead = len(raw) - len(raw.lstrip())
    para_start += lead
    return para_start, para_start + len(stripped)
