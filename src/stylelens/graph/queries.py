"""Traversal queries over a stylesheet dependency graph.

All walks are iterative with an explicit visited set, so import cycles and
deep partial chains are safe. ``find_common_ancestor`` is the root-cause
query used by the optimizer.
"""

from collections.abc import Iterable, Mapping, Sequence

from ..exceptions import TraversalLimitError
from ..logging_config import get_logger
from .models import DependencyGraph, GraphStats, RootCauseResult
from .resolver import PathLike, normalize_path

logger = get_logger(__name__)


class GraphQueryEngine:
    """Read-only queries on a built ``DependencyGraph``.

    Input paths may be given in any form; they are normalized before lookup.
    Unknown files behave as isolated nodes.
    """

    def __init__(self, graph: DependencyGraph, max_nodes: int = 0):
        """
        Args:
            graph: Graph produced by ``build_dependency_graph``
            max_nodes: Abort a single closure walk after this many nodes
                (0 = unlimited)
        """
        self.graph = graph
        self.max_nodes = max_nodes

    # ── Direct lookups ─────────────────────────────────────────

    def direct_imports(self, path: PathLike) -> list[str]:
        return sorted(self.graph.imports.get(normalize_path(path), ()))

    def direct_importers(self, path: PathLike) -> list[str]:
        return sorted(self.graph.imported_by.get(normalize_path(path), ()))

    # ── Transitive closures ────────────────────────────────────

    def all_descendants(self, path: PathLike) -> list[str]:
        """Every file ``path`` imports, directly or transitively.

        ``path`` itself is included only when an import cycle leads back to it.
        """
        return _closure(self.graph.imports, normalize_path(path), self.max_nodes)

    def all_ancestors(self, path: PathLike) -> list[str]:
        """Every file that imports ``path``, directly or transitively."""
        return _closure(self.graph.imported_by, normalize_path(path), self.max_nodes)

    def imports(self, importer: PathLike, imported: PathLike) -> bool:
        """True if ``importer`` depends on ``imported`` directly or transitively."""
        return normalize_path(imported) in self.all_descendants(importer)

    # ── Root cause ─────────────────────────────────────────────

    def find_common_ancestor(self, files: Sequence[PathLike]) -> RootCauseResult:
        """Find the shared dependency that explains an issue seen in ``files``.

        Every input file's descendant closure (itself included) is
        intersected. Among the shared files, those that are not inputs are
        preferred, ranked by how many inputs import them directly, then by
        path. If only input files are shared, the first of them by path is
        used.

        Confidence is the fraction of inputs whose closure contains the
        chosen file.

        Raises:
            TraversalLimitError: If a closure exceeds ``max_nodes``
        """
        inputs = list(dict.fromkeys(normalize_path(f) for f in files))

        if not inputs:
            return RootCauseResult(root_cause=None, impacted_files=[], confidence=0.0)

        if len(inputs) == 1:
            return RootCauseResult(root_cause=inputs[0], impacted_files=inputs, confidence=1.0)

        closures: dict[str, set[str]] = {}
        for path in inputs:
            closure = set(_closure(self.graph.imports, path, self.max_nodes))
            closure.add(path)
            closures[path] = closure

        common = set.intersection(*closures.values())
        if not common:
            return RootCauseResult(root_cause=None, impacted_files=inputs, confidence=0.0)

        input_set = set(inputs)
        candidates = common - input_set
        if candidates:
            best = min(
                candidates,
                key=lambda c: (-len(self.graph.imported_by.get(c, set()) & input_set), c),
            )
        else:
            best = min(common)

        covered = sum(1 for path in inputs if best in closures[path])
        confidence = covered / len(inputs)

        logger.debug(
            f"Common ancestor of {len(inputs)} files: {best} (confidence {confidence:.2f})"
        )
        return RootCauseResult(root_cause=best, impacted_files=inputs, confidence=confidence)

    # ── Diagnostics ────────────────────────────────────────────

    def stats(self) -> GraphStats:
        file_count = len(self.graph.files)
        edge_count = self.graph.edge_count
        return GraphStats(
            file_count=file_count,
            edge_count=edge_count,
            avg_imports_per_file=round(edge_count / file_count, 2) if file_count else 0.0,
            skipped_count=len(self.graph.skipped),
        )


def _closure(
    adjacency: Mapping[str, Iterable[str]], start: str, max_nodes: int = 0
) -> list[str]:
    """Nodes reachable from ``start`` over at least one edge, in discovery order."""
    reached: dict[str, None] = {}
    expanded: set[str] = set()
    stack = [start]

    while stack:
        node = stack.pop()
        if node in expanded:
            continue
        expanded.add(node)
        for neighbor in sorted(adjacency.get(node, ()), reverse=True):
            if neighbor in reached:
                continue
            reached[neighbor] = None
            if max_nodes and len(reached) > max_nodes:
                raise TraversalLimitError(start, max_nodes)
            stack.append(neighbor)

    return list(reached)
