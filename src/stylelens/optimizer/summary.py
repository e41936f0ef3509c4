"""Human-readable annotations for optimized findings."""

from .models import Finding, OptimizationStats


def format_impact_annotation(finding: Finding) -> str:
    """Suffix for a root-cause finding, e.g. ``" (fixes 5 files)"``."""
    if not finding.is_root_cause or not finding.impact_count:
        return ""
    plural = "s" if finding.impact_count > 1 else ""
    return f" (fixes {finding.impact_count} file{plural})"


def optimization_summary(stats: OptimizationStats) -> str:
    """One-line "N issues → M unique fixes" summary; empty when disabled."""
    if not stats.enabled:
        return ""

    if stats.collapsed_count == 0:
        return "No issues could be collapsed to a common root cause."

    percentage = round(stats.collapsed_count / stats.original_issue_count * 100)
    return (
        f"Optimized: {stats.original_issue_count} issues → "
        f"{stats.optimized_issue_count} unique fixes "
        f"({percentage}% reduction via root cause analysis)"
    )
