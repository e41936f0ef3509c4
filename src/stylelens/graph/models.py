"""Data models for the stylesheet dependency graph.

Nodes are normalized stylesheet paths (see ``resolver.normalize_path``).
Edges are directed: ``imports[A]`` contains B means A imports/uses/forwards B.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ScanStatus(Enum):
    SCANNED = "scanned"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class ScanOutcome:
    """Result of reading one stylesheet.

    A SCANNED file with no imports is a leaf; a SKIPPED file could not be
    read and contributes nothing to the graph.
    """

    path: str
    status: ScanStatus
    imports: frozenset[str] = frozenset()
    reason: str = ""

    @property
    def skipped(self) -> bool:
        return self.status is ScanStatus.SKIPPED


@dataclass
class DependencyGraph:
    """Stylesheet import graph.

    ``imports`` and ``imported_by`` are exact inverses: A in imported_by[B]
    if and only if B in imports[A]. Every successfully scanned file has an
    ``imports`` entry, possibly empty.
    """

    project_root: str = ""
    files: set[str] = field(default_factory=set)
    imports: dict[str, set[str]] = field(default_factory=dict)
    imported_by: dict[str, set[str]] = field(default_factory=dict)

    # path -> reason, for files found by the walk but not readable
    skipped: dict[str, str] = field(default_factory=dict)

    def add_edge(self, importer: str, imported: str) -> None:
        self.imports.setdefault(importer, set()).add(imported)
        self.imported_by.setdefault(imported, set()).add(importer)

    @property
    def edge_count(self) -> int:
        return sum(len(targets) for targets in self.imports.values())


@dataclass(frozen=True)
class RootCauseResult:
    """Outcome of a common-ancestor query.

    ``confidence`` is the fraction of input files explained by
    ``root_cause``; 0.0 when there is none.
    """

    root_cause: Optional[str]
    impacted_files: list[str]
    confidence: float

    @property
    def found(self) -> bool:
        return self.root_cause is not None


@dataclass(frozen=True)
class GraphStats:
    file_count: int
    edge_count: int
    avg_imports_per_file: float
    skipped_count: int = 0
