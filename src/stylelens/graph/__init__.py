"""Stylesheet dependency graph: resolution, construction, queries."""

from .builder import build_dependency_graph, find_stylesheets, scan_stylesheet
from .models import DependencyGraph, GraphStats, RootCauseResult, ScanOutcome, ScanStatus
from .queries import GraphQueryEngine
from .resolver import normalize_path, resolve_import

__all__ = [
    "build_dependency_graph",
    "find_stylesheets",
    "scan_stylesheet",
    "DependencyGraph",
    "GraphStats",
    "RootCauseResult",
    "ScanOutcome",
    "ScanStatus",
    "GraphQueryEngine",
    "normalize_path",
    "resolve_import",
]
