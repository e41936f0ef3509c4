"""Grouping of findings that describe the same kind of issue."""

import re
from collections.abc import Iterable
from typing import Optional

from .models import Finding

# Quoted file names, line numbers and pixel values vary per file but not per issue
_FILE_LITERAL = re.compile(r"""['"`][^'"`]+\.(?:scss|css)[^'"`]*['"`]""")
_LINE_NUMBER = re.compile(r"line\s+\d+", re.IGNORECASE)
_PIXELS = re.compile(r"\d+px")


def is_stylesheet(path: Optional[str]) -> bool:
    return bool(path) and path.lower().endswith((".scss", ".css"))


def normalize_message(message: str) -> str:
    """Replace file-specific fragments of a message with placeholders.

    Example:
        >>> normalize_message("Touch target 32px in 'a.scss' at line 4")
        'Touch target Npx in <file> at line N'
    """
    normalized = _FILE_LITERAL.sub("<file>", message)
    normalized = _LINE_NUMBER.sub("line N", normalized)
    return _PIXELS.sub("Npx", normalized)


def pattern_key(finding: Finding) -> str:
    return f"{finding.check or 'unknown'}::{normalize_message(finding.message or '')}"


def group_by_pattern(
    findings: Iterable[Finding], scss_only: bool = True
) -> dict[str, list[Finding]]:
    """Group findings by pattern key, preserving first-seen order.

    With ``scss_only``, findings not reported on a stylesheet are left out.
    """
    groups: dict[str, list[Finding]] = {}
    for finding in findings:
        if scss_only and not is_stylesheet(finding.file):
            continue
        groups.setdefault(pattern_key(finding), []).append(finding)
    return groups
