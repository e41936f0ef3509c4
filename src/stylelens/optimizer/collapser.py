"""Root-cause collapsing of duplicate stylesheet findings.

When the same issue is reported on many stylesheets that all import one
shared partial, the reports are replaced by a single finding on that partial.

Example: ten component stylesheets report "Add prefers-reduced-motion media
query" and all ``@import 'animations'``. The ten findings collapse into one
on ``_animations.scss`` with ``impact_count == 10``.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from ..config import DEFAULT_CONFIG, OptimizerConfig
from ..exceptions import InvalidPathError, TraversalLimitError
from ..graph import DependencyGraph, GraphQueryEngine, build_dependency_graph, normalize_path
from ..logging_config import get_logger
from .grouping import group_by_pattern, is_stylesheet, pattern_key
from .models import Entity, Finding, OptimizationResult, OptimizationStats

logger = get_logger(__name__)


@dataclass(frozen=True)
class _Collapse:
    """An accepted root cause for one pattern group."""

    root_cause: str
    files: frozenset[str]
    impacted_files: tuple[str, ...]
    confidence: float
    check: str
    message: str

    def covers(self, finding: Finding) -> bool:
        return is_stylesheet(finding.file) and normalize_path(finding.file) in self.files

    def to_finding(self, original_file: Optional[str]) -> Finding:
        return Finding(
            check=self.check,
            message=self.message,
            file=self.root_cause,
            is_root_cause=True,
            impact_count=len(self.impacted_files),
            impacted_files=list(self.impacted_files),
            original_file=original_file,
        )


def optimize_findings(
    findings: Sequence[Finding],
    project_root: Union[str, Path],
    config: Optional[OptimizerConfig] = None,
    graph: Optional[DependencyGraph] = None,
) -> OptimizationResult:
    """Collapse a flat finding list to root causes.

    Args:
        findings: Findings from the upstream checks
        project_root: Directory whose stylesheets form the import graph
        config: Optimizer settings (defaults if None)
        graph: Pre-built graph; built from ``project_root`` if None

    Returns:
        OptimizationResult with the optimized findings in original order,
        each synthetic finding taking the place of its group's first member.
    """
    config = config or DEFAULT_CONFIG
    findings = list(findings)

    if not config.enabled:
        return OptimizationResult(
            findings=findings, stats=OptimizationStats.unchanged(len(findings), enabled=False)
        )

    graph = graph if graph is not None else _build_graph(project_root, config)
    if not graph.files:
        logger.debug("No stylesheets found, skipping optimization")
        return OptimizationResult(findings=findings, stats=OptimizationStats.unchanged(len(findings)))

    collapses = _plan_collapses(findings, GraphQueryEngine(graph, config.max_traversal_nodes), config)
    optimized = _apply_collapses(findings, collapses, seen=set())

    stats = OptimizationStats(
        enabled=True,
        original_issue_count=len(findings),
        optimized_issue_count=len(optimized),
        root_causes_found=len(collapses),
    )
    _log_stats(stats)
    return OptimizationResult(findings=optimized, stats=stats)


def optimize_entities(
    entities: Sequence[Entity],
    project_root: Union[str, Path],
    config: Optional[OptimizerConfig] = None,
    graph: Optional[DependencyGraph] = None,
) -> OptimizationResult:
    """Collapse findings across components/routes.

    Groups are formed over the findings of all entities together. Each
    root-cause finding is emitted once for the whole run, in the first
    entity that reports a covered finding; later occurrences are dropped.
    """
    config = config or DEFAULT_CONFIG
    all_findings = [finding for entity in entities for finding in entity.issues]

    if not config.enabled:
        return OptimizationResult(
            findings=all_findings,
            stats=OptimizationStats.unchanged(len(all_findings), enabled=False),
            entities=list(entities),
        )

    graph = graph if graph is not None else _build_graph(project_root, config)
    if not graph.files:
        logger.debug("No stylesheets found, skipping optimization")
        return OptimizationResult(
            findings=all_findings,
            stats=OptimizationStats.unchanged(len(all_findings)),
            entities=list(entities),
        )

    collapses = _plan_collapses(
        all_findings, GraphQueryEngine(graph, config.max_traversal_nodes), config
    )

    seen: set[tuple[str, str, str]] = set()
    optimized_entities: list[Entity] = []
    for entity in entities:
        issues = _apply_collapses(entity.issues, collapses, seen)
        optimized_entities.append(
            Entity(
                name=entity.name,
                selector=entity.selector,
                issues=issues,
                original_issue_count=len(entity.issues),
                optimized_issue_count=len(issues),
                extra=dict(entity.extra),
            )
        )

    optimized = [finding for entity in optimized_entities for finding in entity.issues]
    stats = OptimizationStats(
        enabled=True,
        original_issue_count=len(all_findings),
        optimized_issue_count=len(optimized),
        root_causes_found=len(collapses),
    )
    _log_stats(stats)
    return OptimizationResult(findings=optimized, stats=stats, entities=optimized_entities)


def optimize_results(
    results: dict[str, Any],
    project_root: Union[str, Path],
    config: Optional[OptimizerConfig] = None,
) -> dict[str, Any]:
    """Optimize a pipeline result document in place of its issue lists.

    Accepts documents with ``entities`` (route analysis), ``components``
    (component analysis) or a flat ``issues`` list. Returns a new document
    of the same shape with ``totalIssues`` and an ``optimization`` block.
    The input is returned as-is when disabled or when there are no
    stylesheets to analyze.
    """
    config = config or DEFAULT_CONFIG
    if not config.enabled:
        return results

    graph = _build_graph(project_root, config)
    if not graph.files:
        return results

    output = dict(results)
    if "entities" in results or "components" in results:
        key = "entities" if "entities" in results else "components"
        entities = [Entity.from_dict(e) for e in results[key] or []]
        result = optimize_entities(entities, project_root, config, graph=graph)
        output[key] = [e.to_dict() for e in result.entities]
        output["componentCount"] = sum(1 for e in result.entities if e.issues)
    elif "issues" in results:
        findings = [Finding.from_dict(i) for i in results.get("issues") or []]
        result = optimize_findings(findings, project_root, config, graph=graph)
        output["issues"] = [f.to_dict() for f in result.findings]
    else:
        return results

    output["totalIssues"] = result.stats.optimized_issue_count
    output["optimization"] = result.stats.to_dict()
    return output


def _build_graph(project_root: Union[str, Path], config: OptimizerConfig) -> DependencyGraph:
    """Build the graph, or an empty one when the root cannot be scanned."""
    try:
        return build_dependency_graph(
            project_root, config.ignore_patterns, follow_symlinks=config.follow_symlinks
        )
    except InvalidPathError as e:
        logger.warning(f"Cannot scan project, leaving findings unoptimized: {e}")
        return DependencyGraph(project_root=normalize_path(project_root))


def _plan_collapses(
    findings: Sequence[Finding], engine: GraphQueryEngine, config: OptimizerConfig
) -> dict[str, _Collapse]:
    """Decide, per pattern group, whether and where to collapse."""
    collapses: dict[str, _Collapse] = {}

    for key, group in group_by_pattern(findings, scss_only=config.scss_only).items():
        if len(group) < config.min_group_size:
            continue

        files = list(
            dict.fromkeys(normalize_path(f.file) for f in group if is_stylesheet(f.file))
        )
        if len(files) < config.min_group_size:
            continue

        try:
            result = engine.find_common_ancestor(files)
        except TraversalLimitError as e:
            logger.warning(f"Keeping '{key}' unoptimized: {e}")
            continue

        if not result.found or result.confidence < config.confidence_threshold:
            logger.debug(
                f"No root cause for '{key}' across {len(files)} files "
                f"(confidence {result.confidence:.2f})"
            )
            continue

        sample = group[0]
        collapses[key] = _Collapse(
            root_cause=result.root_cause,
            files=frozenset(files),
            impacted_files=tuple(result.impacted_files),
            confidence=result.confidence,
            check=sample.check,
            message=sample.message,
        )
        logger.debug(
            f"Collapsing {len(files)} findings of '{key}' into {result.root_cause} "
            f"(confidence {collapses[key].confidence:.2f})"
        )

    return collapses


def _apply_collapses(
    findings: Iterable[Finding],
    collapses: dict[str, _Collapse],
    seen: set[tuple[str, str, str]],
) -> list[Finding]:
    """Replace covered findings with their root cause, once per ``seen`` set."""
    optimized: list[Finding] = []
    for finding in findings:
        collapse = collapses.get(pattern_key(finding)) if collapses else None
        if collapse is None or not collapse.covers(finding):
            optimized.append(finding)
            continue

        dedup_key = (collapse.root_cause, collapse.check, collapse.message)
        if dedup_key in seen:
            continue
        seen.add(dedup_key)
        optimized.append(collapse.to_finding(original_file=finding.file))

    return optimized


def _log_stats(stats: OptimizationStats) -> None:
    logger.info(
        f"Optimization: {stats.original_issue_count} findings -> "
        f"{stats.optimized_issue_count} ({stats.root_causes_found} root causes)"
    )
