"""Project aggregate: transcripts, codes, cases and the coding store.

A ``Project`` is passed explicitly to every component (AutoCoder,
ReliabilityAnalyzer, CoverageReporter, ...). It owns the transcript, code and
case collections; the coding collection is owned exclusively by
``project.codings`` (a ``CodingStore``).

Usage:
    project = Project(name="Pilot study")
    t = project.add_transcript("Interview 1", text)
    q = project.add_code("Sustainability")
    project.codings.create(t.id, q.id, 10, 24)
"""

from __future__ import annotations

import dataclasses
import logging
import threading

from qualcode.errors import NotFoundError, ValidationError
from qualcode.store.coding_store import CodingStore
from qualcode.store.models import Case, Code, Transcript, new_id

logger = logging.getLogger(__name__)

_DEFAULT_COLOR = "#6B7280"


class Project:
    """In-memory aggregate for one coding project.

    All mutations take ``self.lock`` (re-entrant), so multi-step operations on
    the coding store are never observed half-applied.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.lock = threading.RLock()
        self._transcripts: dict[str, Transcript] = {}
        self._codes: dict[str, Code] = {}
        self._cases: dict[str, Case] = {}
        self.codings = CodingStore(self)

    def __repr__(self) -> str:
        return (
            f"Project(name={self.name!r}, transcripts={len(self._transcripts)}, "
            f"codes={len(self._codes)}, codings={len(self.codings)})"
        )

    # ------------------------------------------------------------------
    # Transcripts
    # ------------------------------------------------------------------

    @property
    def transcripts(self) -> list[Transcript]:
        """All transcripts in insertion order."""
        return list(self._transcripts.values())

    def add_transcript(
        self,
        title: str,
        content: str,
        *,
        case_id: str | None = None,
        id: str | None = None,
    ) -> Transcript:
        """Add a transcript.

        Args:
            title: Display title.
            content: Full text. Coding offsets index into this string.
            case_id: Optional case the transcript belongs to.
            id: Explicit id (generated when omitted).

        Raises:
            ValidationError: If *id* is already taken.
            NotFoundError: If *case_id* is unknown.
        """
        with self.lock:
            transcript_id = id or new_id()
            if transcript_id in self._transcripts:
                raise ValidationError(f"duplicate transcript id: {transcript_id!r}", field="id")
            if case_id is not None:
                self.get_case(case_id)
            transcript = Transcript(id=transcript_id, title=title, content=content, case_id=case_id)
            self._transcripts[transcript_id] = transcript
            logger.debug("Added transcript %s (%d chars)", transcript_id, len(content))
            return transcript

    def get_transcript(self, transcript_id: str) -> Transcript:
        try:
            return self._transcripts[transcript_id]
        except KeyError:
            raise NotFoundError("transcript", transcript_id) from None

    def has_transcript(self, transcript_id: str) -> bool:
        return transcript_id in self._transcripts

    def select_transcripts(self, transcript_ids: list[str] | None = None) -> list[Transcript]:
        """Return the given transcripts (all when *transcript_ids* is empty or None).

        Raises:
            NotFoundError: If any id is unknown.
        """
        if not transcript_ids:
            return self.transcripts
        return [self.get_transcript(tid) for tid in dict.fromkeys(transcript_ids)]

    def _drop_transcript(self, transcript_id: str) -> None:
        # Coding cascade is handled by CodingStore.delete_transcript.
        del self._transcripts[transcript_id]

    # ------------------------------------------------------------------
    # Codes
    # ------------------------------------------------------------------

    @property
    def codes(self) -> list[Code]:
        """All codes in insertion order."""
        return list(self._codes.values())

    def add_code(
        self,
        text: str,
        *,
        color: str = _DEFAULT_COLOR,
        parent_code_id: str | None = None,
        id: str | None = None,
    ) -> Code:
        """Add a code, optionally as a child of *parent_code_id*.

        Raises:
            ValidationError: If *text* is blank or *id* is already taken.
            NotFoundError: If *parent_code_id* is unknown.
        """
        if not text.strip():
            raise ValidationError("code text must be non-empty", field="text")
        with self.lock:
            code_id = id or new_id()
            if code_id in self._codes:
                raise ValidationError(f"duplicate code id: {code_id!r}", field="id")
            if parent_code_id is not None:
                self.get_code(parent_code_id)
            code = Code(id=code_id, text=text, color=color, parent_code_id=parent_code_id)
            self._codes[code_id] = code
            logger.debug("Added code %s (%r)", code_id, text)
            return code

    def get_code(self, code_id: str) -> Code:
        try:
            return self._codes[code_id]
        except KeyError:
            raise NotFoundError("code", code_id) from None

    def has_code(self, code_id: str) -> bool:
        return code_id in self._codes

    def find_code(self, ref: str) -> Code:
        """Resolve a code by id, falling back to an exact (case-insensitive) name match."""
        if ref in self._codes:
            return self._codes[ref]
        wanted = ref.strip().lower()
        for code in self._codes.values():
            if code.text.strip().lower() == wanted:
                return code
        raise NotFoundError("code", ref)

    def children_of(self, code_id: str) -> list[Code]:
        return [c for c in self._codes.values() if c.parent_code_id == code_id]

    def ancestors_of(self, code_id: str) -> list[str]:
        """Return parent ids from the direct parent up to the root."""
        chain: list[str] = []
        current = self.get_code(code_id).parent_code_id
        while current is not None:
            chain.append(current)
            current = self._codes[current].parent_code_id
        return chain

    def is_descendant(self, code_id: str, ancestor_id: str) -> bool:
        return ancestor_id in self.ancestors_of(code_id)

    def set_code_parent(self, code_id: str, parent_code_id: str | None) -> Code:
        """Move a code under a new parent (or to the root with ``None``).

        Raises:
            NotFoundError: If either code is unknown.
            ValidationError: If the move would create a cycle.
        """
        with self.lock:
            code = self.get_code(code_id)
            if parent_code_id is not None:
                self.get_code(parent_code_id)
                if parent_code_id == code_id or self.is_descendant(parent_code_id, code_id):
                    raise ValidationError(
                        f"cannot move code {code_id!r} under its own descendant {parent_code_id!r}",
                        field="parent_code_id",
                    )
            updated = dataclasses.replace(code, parent_code_id=parent_code_id)
            self._codes[code_id] = updated
            return updated

    def rename_code(self, code_id: str, text: str, color: str | None = None) -> Code:
        if not text.strip():
            raise ValidationError("code text must be non-empty", field="text")
        with self.lock:
            code = self.get_code(code_id)
            updated = dataclasses.replace(code, text=text, color=color or code.color)
            self._codes[code_id] = updated
            return updated

    def _replace_codes(self, codes: dict[str, Code]) -> None:
        self._codes = codes

    # ------------------------------------------------------------------
    # Cases
    # ------------------------------------------------------------------

    @property
    def cases(self) -> list[Case]:
        return list(self._cases.values())

    def add_case(
        self,
        name: str,
        attributes: dict[str, str] | None = None,
        *,
        id: str | None = None,
    ) -> Case:
        with self.lock:
            case_id = id or new_id()
            if case_id in self._cases:
                raise ValidationError(f"duplicate case id: {case_id!r}", field="id")
            case = Case(
                id=case_id,
                name=name,
                attributes={str(k): str(v) for k, v in (attributes or {}).items()},
            )
            self._cases[case_id] = case
            return case

    def get_case(self, case_id: str) -> Case:
        try:
            return self._cases[case_id]
        except KeyError:
            raise NotFoundError("case", case_id) from None

    def assign_case(self, transcript_id: str, case_id: str | None) -> Transcript:
        with self.lock:
            transcript = self.get_transcript(transcript_id)
            if case_id is not None:
                self.get_case(case_id)
            updated = dataclasses.replace(transcript, case_id=case_id)
            self._transcripts[transcript_id] = updated
            return updated

    def delete_case(self, case_id: str) -> None:
        """Delete a case; its transcripts are kept and lose their case link."""
        with self.lock:
            self.get_case(case_id)
            for tid, transcript in list(self._transcripts.items()):
                if transcript.case_id == case_id:
                    self._transcripts[tid] = dataclasses.replace(transcript, case_id=None)
            del self._cases[case_id]

    def transcripts_in_case(self, case_id: str) -> list[Transcript]:
        return [t for t in self._transcripts.values() if t.case_id == case_id]
