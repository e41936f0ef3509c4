"""
stylelens - Root-cause analysis for stylesheet accessibility findings

Builds the @import/@use/@forward dependency graph of an Angular project's
stylesheets and collapses findings repeated across many components into a
single finding on the shared partial that causes them.
"""

__version__ = "0.3.0"

from .config import OptimizerConfig, load_config
from .graph import DependencyGraph, GraphQueryEngine, RootCauseResult, build_dependency_graph
from .optimizer import (
    Entity,
    Finding,
    OptimizationResult,
    optimize_entities,
    optimize_findings,
    optimize_results,
)

__all__ = [
    "OptimizerConfig",
    "load_config",
    "DependencyGraph",
    "GraphQueryEngine",
    "RootCauseResult",
    "build_dependency_graph",
    "Entity",
    "Finding",
    "OptimizationResult",
    "optimize_entities",
    "optimize_findings",
    "optimize_results",
]
