"""Error taxonomy for the qualcode core.

All core failures are local and synchronous. They carry structured fields
(ids, offsets, pattern positions) so callers can build their own messages;
formatted user-facing text lives in ``qualcode.cli.errors``.
"""

from __future__ import annotations


class QualcodeError(Exception):
    """Base class for every error raised by the coding engine."""


class ValidationError(QualcodeError, ValueError):
    """Raised for malformed input: bad offsets, self-merge, identical codes, etc.

    Attributes:
        field: Name of the offending argument, when one applies.
    """

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class NotFoundError(QualcodeError, LookupError):
    """Raised when an id does not reference an existing entity.

    Attributes:
        kind: Entity kind (``"transcript"``, ``"code"``, ``"coding"``, ``"case"``).
        id: The unknown id.
    """

    def __init__(self, kind: str, id: str) -> None:
        super().__init__(f"{kind} not found: {id!r}")
        self.kind = kind
        self.id = id


class PatternError(QualcodeError, ValueError):
    """Raised when an auto-code regular expression does not compile.

    Attributes:
        pattern: The rejected pattern.
        reason: Compiler message.
        position: Offset into *pattern* where compilation failed, if known.
    """

    def __init__(self, pattern: str, reason: str, position: int | None = None) -> None:
        where = f" at position {position}" if position is not None else ""
        super().__init__(f"invalid pattern {pattern!r}: {reason}{where}")
        self.pattern = pattern
        self.reason = reason
        self.position = position
