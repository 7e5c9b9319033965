"""Theme map: how much weight each code carries in the code hierarchy."""

from __future__ import annotations

from dataclasses import dataclass, field

from qualcode.analysis.coverage import CoverageReporter
from qualcode.errors import ValidationError
from qualcode.store.project import Project

METRICS: tuple[str, ...] = ("codings", "characters")


@dataclass(frozen=True)
class ThemeNode:
    code_id: str
    name: str
    size: int
    color: str
    parent_code_id: str | None


@dataclass
class ThemeMap:
    metric: str
    total: int
    nodes: list[ThemeNode] = field(default_factory=list)

    def children(self, code_id: str | None = None) -> list[ThemeNode]:
        """Nodes directly under *code_id*; ``None`` gives the top level.

        A node whose parent is not on the map (no codings, or filtered out)
        is shown at the top level.
        """
        present = {n.code_id for n in self.nodes}
        if code_id is None:
            return [n for n in self.nodes if n.parent_code_id not in present]
        return [n for n in self.nodes if n.parent_code_id == code_id]


def theme_map(
    project: Project,
    metric: str = "codings",
    code_ids: list[str] | None = None,
) -> ThemeMap:
    """Size every code by coding count or by coded characters.

    Characters are the union of the code's codings per transcript, so
    overlapping codings are not counted twice. Codes of size 0 are left off.

    Raises:
        ValidationError: If *metric* is unknown.
        NotFoundError: If a code id is unknown.
    """
    if metric not in METRICS:
        raise ValidationError(
            f"unknown theme metric {metric!r} (supported: {', '.join(METRICS)})", field="metric"
        )

    reporter = CoverageReporter(project)
    with project.lock:
        codes = [project.get_code(c) for c in dict.fromkeys(code_ids)] if code_ids else project.codes
        nodes = []
        for code in codes:
            row = reporter.code_coverage(code.id)
            size = row.frequency if metric == "codings" else row.coded_chars
            if size:
                nodes.append(ThemeNode(code.id, code.text, size, code.color, code.parent_code_id))

    return ThemeMap(metric=metric, total=sum(n.size for n in nodes), nodes=nodes)
