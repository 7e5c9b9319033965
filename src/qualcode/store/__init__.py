"""In-memory project state: data model, project aggregate and coding store."""

from qualcode.store.coding_store import CodingSpec, CodingStore, MergeResult
from qualcode.store.models import Case, Code, Coding, Interval, Transcript
from qualcode.store.project import Project

__all__ = [
    "Case",
    "Code",
    "Coding",
    "CodingSpec",
    "CodingStore",
    "Interval",
    "MergeResult",
    "Project",
    "Transcript",
]
