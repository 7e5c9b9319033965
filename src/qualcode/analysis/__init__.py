"""Coding analytics: coverage, reliability, text queries, sentiment, clusters and theme maps."""

from qualcode.analysis.clusters import Cluster, ClusterSegment, cluster_codings
from qualcode.analysis.comparison import CodeProfile, TranscriptProfile, compare_transcripts
from qualcode.analysis.coverage import (
    CodeCoverage,
    CoverageReport,
    CoverageReporter,
    ProjectCoverage,
    TranscriptCoverage,
)
from qualcode.analysis.intervals import (
    coverage_percent,
    covered_chars,
    merge_intervals,
    overlap_length,
    overlaps,
)
from qualcode.analysis.matrix import MatrixCell, MatrixRow, framework_matrix
from qualcode.analysis.queries import (
    CodingQueryResult,
    CooccurrencePair,
    QueryCondition,
    coding_query,
    cooccurrence,
)
from qualcode.analysis.reliability import (
    ContingencyTable,
    KappaResult,
    ReliabilityAnalyzer,
    ReliabilityReport,
    compute_kappa,
    interpret_kappa,
)
from qualcode.analysis.sentiment import (
    SentimentItem,
    SentimentOverall,
    SentimentResult,
    analyze_sentiment,
    score_text,
)
from qualcode.analysis.themes import ThemeMap, ThemeNode, theme_map
from qualcode.analysis.words import WordCount, word_frequency

__all__ = [
    "Cluster",
    "ClusterSegment",
    "CodeCoverage",
    "CodeProfile",
    "CodingQueryResult",
    "ContingencyTable",
    "CooccurrencePair",
    "CoverageReport",
    "CoverageReporter",
    "KappaResult",
    "MatrixCell",
    "MatrixRow",
    "ProjectCoverage",
    "QueryCondition",
    "ReliabilityAnalyzer",
    "ReliabilityReport",
    "SentimentItem",
    "SentimentOverall",
    "SentimentResult",
    "ThemeMap",
    "ThemeNode",
    "TranscriptCoverage",
    "TranscriptProfile",
    "WordCount",
    "analyze_sentiment",
    "cluster_codings",
    "coding_query",
    "compare_transcripts",
    "compute_kappa",
    "cooccurrence",
    "coverage_percent",
    "covered_chars",
    "framework_matrix",
    "interpret_kappa",
    "merge_intervals",
    "overlap_length",
    "overlaps",
    "score_text",
    "theme_map",
    "word_frequency",
]
