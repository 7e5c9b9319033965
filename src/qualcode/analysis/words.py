"""Word frequencies over coded text."""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass

from qualcode.errors import ValidationError
from qualcode.store.project import Project

DEFAULT_MAX_WORDS = 100
DEFAULT_MIN_LENGTH = 3

STOP_WORDS: frozenset[str] = frozenset("""
a an the and or but in on at to for of with by from is are was were be been
being have has had do does did will would could should may might shall can
need dare it its this that these those i me my we our you your he him his she
her they them their what which who whom when where why how not no nor if then
else so as than too very just about above after again all also am any because
before below between both each few get got here into more most much must now
only other out own said same some still such take there through under up us
well over down while during until against further once upon already always
never often however although since within without like even back make made
way think know see look come go going went really thing things
""".split())

_NON_WORD_RE = re.compile(r"[^a-z0-9\s'-]")


@dataclass(frozen=True)
class WordCount:
    text: str
    count: int


def tokenize(
    text: str,
    min_length: int = DEFAULT_MIN_LENGTH,
    stop_words: Iterable[str] = (),
) -> list[str]:
    """Lowercase *text* and split it into countable words.

    Punctuation other than apostrophes and hyphens becomes whitespace. Words
    shorter than *min_length* and stop words (built-in plus *stop_words*) are
    dropped.
    """
    extra = {w.lower() for w in stop_words}
    cleaned = _NON_WORD_RE.sub(" ", text.lower())
    return [
        w for w in cleaned.split()
        if len(w) >= min_length and w not in STOP_WORDS and w not in extra
    ]


def word_frequency(
    project: Project,
    code_id: str | None = None,
    max_words: int = DEFAULT_MAX_WORDS,
    stop_words: Iterable[str] = (),
    min_length: int = DEFAULT_MIN_LENGTH,
) -> list[WordCount]:
    """Count words in the coded text of *code_id* (all codings when ``None``).

    Returns:
        Up to *max_words* entries, most frequent first; ties keep first-seen
        order.
    """
    if max_words < 1:
        raise ValidationError("max_words must be >= 1", field="max_words")
    if code_id is not None:
        project.get_code(code_id)

    stop_words = list(stop_words)
    counts: Counter[str] = Counter()
    for coding in project.codings.codings_by_code(code_id):
        counts.update(tokenize(coding.coded_text, min_length, stop_words))
    return [WordCount(text, n) for text, n in counts.most_common(max_words)]
