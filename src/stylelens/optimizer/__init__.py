"""Issue optimization: grouping duplicate findings and collapsing them to root causes."""

from .collapser import optimize_entities, optimize_findings, optimize_results
from .grouping import group_by_pattern, is_stylesheet, normalize_message, pattern_key
from .models import Entity, Finding, OptimizationResult, OptimizationStats
from .summary import format_impact_annotation, optimization_summary

__all__ = [
    "optimize_entities",
    "optimize_findings",
    "optimize_results",
    "group_by_pattern",
    "is_stylesheet",
    "normalize_message",
    "pattern_key",
    "Entity",
    "Finding",
    "OptimizationResult",
    "OptimizationStats",
    "format_impact_annotation",
    "optimization_summary",
]
