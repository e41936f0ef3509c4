"""Dependency graph construction from stylesheet import directives."""

import os
from collections.abc import Sequence
from pathlib import Path
from typing import Union

from ..config import DEFAULT_IGNORE_PATTERNS
from ..exceptions import FileAccessError, InvalidPathError
from ..logging_config import get_logger
from .models import DependencyGraph, ScanOutcome, ScanStatus
from .parser import extract_import_specifiers
from .resolver import normalize_path, resolve_import

logger = get_logger(__name__)

STYLESHEET_EXTENSIONS = (".scss", ".css")


def build_dependency_graph(
    project_root: Union[str, Path],
    ignore_patterns: Sequence[str] = DEFAULT_IGNORE_PATTERNS,
    follow_symlinks: bool = False,
) -> DependencyGraph:
    """Scan ``project_root`` for stylesheets and link their imports.

    Unreadable files and directories are skipped; unresolvable specifiers
    simply produce no edge. A tree without stylesheets yields an empty graph.

    Raises:
        InvalidPathError: If ``project_root`` is not a directory
    """
    root = normalize_path(project_root)
    if not os.path.isdir(root):
        raise InvalidPathError(project_root, "not a directory")

    graph = DependencyGraph(project_root=root)

    for path in find_stylesheets(root, ignore_patterns, follow_symlinks=follow_symlinks):
        outcome = scan_stylesheet(path)
        if outcome.skipped:
            graph.skipped[path] = outcome.reason
            logger.debug(f"Skipped {path}: {outcome.reason}")
            continue

        graph.files.add(path)
        graph.imports.setdefault(path, set())
        for target in outcome.imports:
            graph.add_edge(path, target)

    logger.info(
        f"Stylesheet graph: {len(graph.files)} files, {graph.edge_count} edges"
        + (f", {len(graph.skipped)} skipped" if graph.skipped else "")
    )
    return graph


def scan_stylesheet(path: str) -> ScanOutcome:
    """Read one stylesheet and resolve its imports.

    Self-imports are dropped.
    """
    try:
        content = _read_text(path)
    except FileAccessError as e:
        return ScanOutcome(path=path, status=ScanStatus.SKIPPED, reason=e.reason)

    base_dir = os.path.dirname(path)
    resolved: set[str] = set()
    for specifier in extract_import_specifiers(content):
        target = resolve_import(base_dir, specifier)
        if target is None:
            logger.debug(f"Unresolved import '{specifier}' in {path}")
            continue
        if target != path:
            resolved.add(target)

    return ScanOutcome(path=path, status=ScanStatus.SCANNED, imports=frozenset(resolved))


def find_stylesheets(
    root: Union[str, Path],
    ignore_patterns: Sequence[str] = DEFAULT_IGNORE_PATTERNS,
    follow_symlinks: bool = False,
) -> list[str]:
    """Walk ``root`` and return normalized paths of every .scss/.css file.

    An entry is ignored when its path relative to ``root`` contains a
    pattern, or its name equals one.
    """
    root = os.fspath(root)
    found: list[str] = []
    # Track visited directories to survive symlink loops
    visited_dirs: set[tuple[int, int]] = set()
    stack = [root]

    while stack:
        current = stack.pop()
        try:
            stat = os.stat(current)
        except OSError as e:
            logger.debug(f"Cannot stat {current}: {e}")
            continue
        key = (stat.st_dev, stat.st_ino)
        if key in visited_dirs:
            continue
        visited_dirs.add(key)

        try:
            with os.scandir(current) as it:
                entries = sorted(it, key=lambda entry: entry.name)
        except OSError as e:
            logger.debug(f"Cannot list {current}: {e}")
            continue

        subdirs = []
        for entry in entries:
            relative = os.path.relpath(entry.path, root)
            if _is_ignored(relative, entry.name, ignore_patterns):
                continue
            try:
                if entry.is_dir(follow_symlinks=follow_symlinks):
                    subdirs.append(entry.path)
                elif entry.is_file() and entry.name.lower().endswith(STYLESHEET_EXTENSIONS):
                    found.append(normalize_path(entry.path))
            except OSError as e:
                logger.debug(f"Cannot inspect {entry.path}: {e}")

        # Reverse so the stack pops directories in name order
        stack.extend(reversed(subdirs))

    return found


def _is_ignored(relative: str, name: str, patterns: Sequence[str]) -> bool:
    return any(pattern in relative or name == pattern for pattern in patterns)


def _read_text(path: str) -> str:
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            return f.read()
    except OSError as e:
        raise FileAccessError(path, f"Cannot read file: {e}")
