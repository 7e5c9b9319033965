"""Lexicon sentiment scoring of coded text.

Each word found in an AFINN-style lexicon contributes its weight, with the
sign flipped when the word directly before it is a negation ("not good").
A text's score is the summed weight divided by its word count; magnitude is
the summed absolute weight.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from qualcode.errors import ValidationError
from qualcode.store.models import Coding
from qualcode.store.project import Project

logger = logging.getLogger(__name__)

SCOPES: tuple[str, ...] = ("all", "code", "transcript")

POSITIVE_THRESHOLD = 0.05
NEGATIVE_THRESHOLD = -0.05
SAMPLE_CHARS = 80

_NON_WORD_RE = re.compile(r"[^a-z0-9\s'-]")


def _weights(spec: str) -> dict[str, int]:
    out: dict[str, int] = {}
    for entry in spec.split():
        word, _, weight = entry.partition(":")
        out[word] = int(weight)
    return out


LEXICON: dict[str, int] = _weights("""
good:3 great:3 excellent:4 amazing:4 wonderful:4 fantastic:4 outstanding:5
superb:5 brilliant:4 awesome:4 love:3 loved:3 like:2 enjoy:2 happy:3 pleased:3
satisfied:2 delighted:4 thrilled:4 excited:3 grateful:3 thankful:2 beautiful:3
best:3 better:2 improve:2 improved:2 improvement:2 success:3 successful:3 win:3
won:3 strong:2 strength:2 positive:2 benefit:2 beneficial:2 effective:2
efficient:2 helpful:2 hope:2 hopeful:2 inspire:3 inspired:3 innovative:3
progress:2 valuable:2 support:2 supported:2 encourage:2 encouraged:2 proud:3
confident:2 trust:2 trusted:2 impressive:3 remarkable:3 perfect:3 exceptional:4
incredible:4 nice:2 kind:2 generous:3 warm:2 friendly:2 safe:1 secure:2
comfortable:2 fun:3 interesting:2 fascinating:3 engaging:2 rewarding:2 worthy:2
agree:1 advantage:2 achieve:2 achievement:3 capable:2 commitment:2 committed:2
opportunity:2

bad:-3 terrible:-4 horrible:-4 awful:-4 worst:-4 poor:-2 worse:-3 negative:-2
fail:-3 failed:-3 failure:-3 problem:-2 issue:-1 concern:-1 concerned:-2
worried:-2 worry:-2 fear:-2 afraid:-2 angry:-3 frustrate:-3 frustrated:-3
frustrating:-3 annoyed:-2 annoying:-2 disappoint:-3 disappointed:-3
disappointing:-3 sad:-2 unhappy:-2 unfortunate:-2 unfortunately:-2 hate:-4
hated:-4 dislike:-2 difficult:-1 hard:-1 struggle:-2 struggling:-2 suffer:-3
suffering:-3 pain:-2 painful:-2 stress:-2 stressed:-2 stressful:-2 weak:-2
weakness:-2 lack:-2 lacking:-2 loss:-3 lost:-2 miss:-1 missing:-2 damage:-3
damaged:-3 harm:-3 harmful:-3 danger:-3 dangerous:-3 risk:-1 risky:-2 threat:-3
crisis:-3 conflict:-2 disagree:-2 wrong:-2 mistake:-2 error:-2 fault:-2 blame:-2
complain:-2 complaint:-2 reject:-3 rejected:-3 deny:-2 denied:-2 confuse:-2
confused:-2 confusing:-2 unclear:-1 impossible:-3 useless:-3 worthless:-4
boring:-2 tired:-2 exhausted:-3 overwhelm:-3 overwhelmed:-3 abuse:-4 corrupt:-4
corruption:-4 unfair:-3 unjust:-3 inequality:-2 barrier:-2 obstacle:-2
neglect:-3 neglected:-3 ignore:-2 ignored:-2
""")

NEGATIONS: frozenset[str] = frozenset("""
not no never neither nor don't doesn't didn't won't wouldn't couldn't shouldn't
isn't aren't wasn't weren't can't hasn't haven't
""".split())


@dataclass(frozen=True)
class SentimentScore:
    score: float
    magnitude: float


@dataclass(frozen=True)
class SentimentItem:
    id: str
    label: str
    score: float
    magnitude: float
    sample_text: str


@dataclass(frozen=True)
class SentimentOverall:
    positive: int
    negative: int
    neutral: int
    average_score: float


@dataclass
class SentimentResult:
    overall: SentimentOverall
    items: list[SentimentItem] = field(default_factory=list)


def score_text(text: str) -> SentimentScore:
    words = _NON_WORD_RE.sub(" ", text.lower()).split()
    total = 0
    magnitude = 0
    for i, word in enumerate(words):
        weight = LEXICON.get(word)
        if weight is None:
            continue
        if i > 0 and words[i - 1] in NEGATIONS:
            weight = -weight
        total += weight
        magnitude += abs(weight)
    return SentimentScore(score=total / len(words) if words else 0.0, magnitude=magnitude)


def classify(score: float) -> str:
    """``"positive"``, ``"negative"`` or ``"neutral"`` for a text score."""
    if score > POSITIVE_THRESHOLD:
        return "positive"
    if score < NEGATIVE_THRESHOLD:
        return "negative"
    return "neutral"


def analyze_sentiment(
    project: Project, scope: str = "all", scope_id: str | None = None
) -> SentimentResult:
    """Score every coding in *scope* and break the result down per group.

    Args:
        project: Project to analyse.
        scope: ``"all"``, ``"code"`` or ``"transcript"``. Items are grouped by
            transcript for the transcript scope and by code otherwise.
        scope_id: Restrict to one code or transcript (ignored for ``"all"``).

    Returns:
        Positive / negative / neutral counts over single codings, and one item
        per group scored on the group's joined text, highest score first.

    Raises:
        ValidationError: If *scope* is unknown.
        NotFoundError: If *scope_id* does not match a code or transcript.
    """
    if scope not in SCOPES:
        raise ValidationError(
            f"unknown sentiment scope {scope!r} (supported: {', '.join(SCOPES)})", field="scope"
        )

    with project.lock:
        codings = project.codings.codings_for()
        if scope == "code" and scope_id is not None:
            project.get_code(scope_id)
            codings = [c for c in codings if c.code_id == scope_id]
        elif scope == "transcript" and scope_id is not None:
            project.get_transcript(scope_id)
            codings = [c for c in codings if c.transcript_id == scope_id]

        if scope == "transcript":
            labels = {t.id: t.title for t in project.transcripts}
        else:
            labels = {c.id: c.text for c in project.codes}

    counts = {"positive": 0, "negative": 0, "neutral": 0}
    total = 0.0
    for coding in codings:
        score = score_text(coding.coded_text).score
        counts[classify(score)] += 1
        total += score

    groups: dict[str, list[Coding]] = {}
    for coding in codings:
        key = coding.transcript_id if scope == "transcript" else coding.code_id
        groups.setdefault(key, []).append(coding)

    items = []
    for key, members in groups.items():
        scored = score_text(" ".join(c.coded_text for c in members))
        items.append(
            SentimentItem(
                id=key,
                label=labels.get(key, key),
                score=scored.score,
                magnitude=scored.magnitude,
                sample_text=members[0].coded_text[:SAMPLE_CHARS],
            )
        )
    items.sort(key=lambda item: -item.score)

    logger.debug("Scored sentiment of %d codings in %d groups", len(codings), len(items))
    return SentimentResult(
        overall=SentimentOverall(
            average_score=total / len(codings) if codings else 0.0,
            **counts,
        ),
        items=items,
    )
