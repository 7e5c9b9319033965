"""Group coded segments by vocabulary: TF-IDF vectors + cosine k-means.

Segments are tokenized with ``qualcode.analysis.words.tokenize`` and turned
into L2-normalised TF-IDF vectors. K-means then assigns every segment to the
centroid with the highest cosine similarity. Several seeded restarts run and
the one with the best mean similarity to its centroid wins, so the same input
and seed always produce the same clusters.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np
from sklearn.feature_extraction.text import TfidfVectorizer

from qualcode.analysis.words import tokenize
from qualcode.errors import ValidationError
from qualcode.store.project import Project

logger = logging.getLogger(__name__)

DEFAULT_K = 3
MAX_ITERATIONS = 50
RESTARTS = 3
MAX_CLUSTER_SEGMENTS = 20
KEYWORDS_PER_CLUSTER = 5


@dataclass(frozen=True)
class ClusterSegment:
    coding_id: str
    text: str


@dataclass
class Cluster:
    id: int
    label: str
    size: int
    segments: list[ClusterSegment] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)


def _cosine_kmeans(
    vectors: np.ndarray, k: int, rng: np.random.Generator
) -> tuple[np.ndarray, np.ndarray, float]:
    """One k-means run; returns labels, centroids and mean similarity."""
    n = vectors.shape[0]
    centroids = vectors[rng.permutation(n)[:k]].copy()
    labels = np.full(n, -1)

    for _ in range(MAX_ITERATIONS):
        new_labels = _similarity(vectors, centroids).argmax(axis=1)
        if np.array_equal(new_labels, labels):
            break
        labels = new_labels
        for c in range(k):
            members = vectors[labels == c]
            if len(members):
                centroids[c] = members.mean(axis=0)

    sims = _similarity(vectors, centroids)[np.arange(n), labels]
    return labels, centroids, float(sims.mean())


def _similarity(vectors: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    norms = np.linalg.norm(centroids, axis=1)
    norms[norms == 0] = 1.0
    return vectors @ (centroids / norms[:, None]).T


def cluster_codings(
    project: Project,
    k: int = DEFAULT_K,
    code_ids: list[str] | None = None,
    seed: int = 0,
) -> list[Cluster]:
    """Cluster coded segments into at most *k* groups.

    Args:
        project: Project whose codings are clustered.
        k: Requested number of clusters (capped at the number of segments).
        code_ids: Only cluster codings of these codes (default: all codings).
        seed: Seed for the centroid initialisation.

    Returns:
        Non-empty clusters ordered by id. Each lists up to 20 segments and
        the top keywords by mean TF-IDF weight.

    Raises:
        ValidationError: If *k* is less than 1.
        NotFoundError: If a code id is unknown.
    """
    if k < 1:
        raise ValidationError("k must be >= 1", field="k")

    with project.lock:
        if code_ids:
            wanted = {project.get_code(c).id for c in code_ids}
            codings = [c for c in project.codings.codings_for() if c.code_id in wanted]
        else:
            codings = project.codings.codings_for()

    if not codings:
        return []

    documents = [tokenize(c.coded_text) for c in codings]
    if any(documents):
        vectorizer = TfidfVectorizer(analyzer=lambda tokens: tokens)
        vectors = vectorizer.fit_transform(documents).toarray()
        vocabulary = vectorizer.get_feature_names_out()
    else:
        vectors = np.zeros((len(codings), 0))
        vocabulary = np.array([], dtype=str)

    actual_k = min(k, len(codings))
    rng = np.random.default_rng(seed)
    best: tuple[np.ndarray, np.ndarray, float] | None = None
    for _ in range(RESTARTS):
        run = _cosine_kmeans(vectors, actual_k, rng)
        if best is None or run[2] > best[2]:
            best = run
    labels = best[0]

    clusters: list[Cluster] = []
    for cluster_id in sorted(set(labels.tolist())):
        members = np.flatnonzero(labels == cluster_id)
        mean = vectors[members].mean(axis=0)
        top = [i for i in np.argsort(-mean, kind="stable")[:KEYWORDS_PER_CLUSTER] if mean[i] > 0]
        clusters.append(
            Cluster(
                id=cluster_id,
                label=f"Cluster {cluster_id + 1}",
                size=len(members),
                segments=[
                    ClusterSegment(codings[i].id, codings[i].coded_text)
                    for i in members[:MAX_CLUSTER_SEGMENTS]
                ],
                keywords=[str(vocabulary[i]) for i in top],
            )
        )

    logger.debug("Clustered %d segments into %d clusters", len(codings), len(clusters))
    return clusters
