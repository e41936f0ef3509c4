"""Data models for findings and optimization results.

Findings arrive as JSON-shaped dicts from the analysis pipeline (camelCase
keys). Unknown keys are carried through untouched in ``extra``.
"""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class Finding:
    check: str  # "reducedMotion", "focusStyles", etc.
    message: str  # "[Warning] Add prefers-reduced-motion media query ..."
    file: Optional[str] = None
    line: Optional[int] = None

    # Set only on synthetic root-cause findings
    is_root_cause: bool = False
    impact_count: int = 0
    impacted_files: list[str] = field(default_factory=list)
    original_file: Optional[str] = None

    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Finding":
        known = {
            "check",
            "message",
            "file",
            "line",
            "isRootCause",
            "impactCount",
            "impactedFiles",
            "originalFile",
        }
        return cls(
            check=data.get("check") or "",
            message=data.get("message") or "",
            file=data.get("file"),
            line=data.get("line"),
            is_root_cause=bool(data.get("isRootCause", False)),
            impact_count=int(data.get("impactCount") or 0),
            impacted_files=list(data.get("impactedFiles") or []),
            original_file=data.get("originalFile"),
            extra={k: v for k, v in data.items() if k not in known},
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = dict(self.extra)
        data.update({"check": self.check, "message": self.message, "file": self.file})
        if self.line is not None:
            data["line"] = self.line
        if self.is_root_cause:
            data["isRootCause"] = True
            data["impactCount"] = self.impact_count
            data["impactedFiles"] = list(self.impacted_files)
            if self.original_file is not None:
                data["originalFile"] = self.original_file
        return data


@dataclass
class Entity:
    """A component or route with its own list of findings."""

    name: str
    issues: list[Finding] = field(default_factory=list)
    selector: Optional[str] = None

    # Filled in by the optimizer
    original_issue_count: Optional[int] = None
    optimized_issue_count: Optional[int] = None

    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Entity":
        known = {"name", "selector", "issues", "originalIssueCount", "optimizedIssueCount"}
        return cls(
            name=data.get("name") or "",
            selector=data.get("selector"),
            issues=[Finding.from_dict(i) for i in data.get("issues") or []],
            extra={k: v for k, v in data.items() if k not in known},
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = dict(self.extra)
        data["name"] = self.name
        if self.selector is not None:
            data["selector"] = self.selector
        data["issues"] = [i.to_dict() for i in self.issues]
        if self.original_issue_count is not None:
            data["originalIssueCount"] = self.original_issue_count
        if self.optimized_issue_count is not None:
            data["optimizedIssueCount"] = self.optimized_issue_count
        return data


@dataclass(frozen=True)
class OptimizationStats:
    enabled: bool
    original_issue_count: int
    optimized_issue_count: int
    root_causes_found: int = 0

    @property
    def collapsed_count(self) -> int:
        return self.original_issue_count - self.optimized_issue_count

    @classmethod
    def unchanged(cls, count: int, enabled: bool = True) -> "OptimizationStats":
        return cls(enabled=enabled, original_issue_count=count, optimized_issue_count=count)

    def to_dict(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "originalIssueCount": self.original_issue_count,
            "optimizedIssueCount": self.optimized_issue_count,
            "collapsedCount": self.collapsed_count,
            "rootCausesFound": self.root_causes_found,
        }


@dataclass
class OptimizationResult:
    findings: list[Finding]
    stats: OptimizationStats
    entities: list[Entity] = field(default_factory=list)
