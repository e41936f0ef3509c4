"""Shared test fixtures for stylelens: small stylesheet projects on disk."""

from pathlib import Path
from typing import Callable

import pytest

from stylelens.optimizer import Finding

REDUCED_MOTION = "[Warning] Add prefers-reduced-motion media query for animations"


@pytest.fixture
def make_project(tmp_path) -> Callable[[dict[str, str]], Path]:
    """Factory: write {relative_path: content} under a fresh project dir."""

    def _make(files: dict[str, str], name: str = "project") -> Path:
        root = tmp_path / name
        root.mkdir(parents=True, exist_ok=True)
        for rel, content in files.items():
            target = root / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return root

    return _make


@pytest.fixture
def animations_project(make_project) -> Path:
    """Five components that all @import one shared animations partial."""
    files = {
        "_animations.scss": "@keyframes fadeIn {\n  from { opacity: 0; }\n  to { opacity: 1; }\n}\n",
        "component.html": "<button>Click me</button>\n",
    }
    for i in range(1, 6):
        files[f"component-{i}.scss"] = (
            f"@import 'animations';\n\n.component-{i} {{\n  animation: fadeIn 0.{i}s;\n}}\n"
        )
    return make_project(files)


@pytest.fixture
def reduced_motion_findings(animations_project) -> list[Finding]:
    """One reducedMotion finding per component stylesheet."""
    return [
        Finding(
            check="reducedMotion",
            message=REDUCED_MOTION,
            file=str(animations_project / f"component-{i}.scss"),
            line=3,
        )
        for i in range(1, 6)
    ]


@pytest.fixture
def button_finding(animations_project) -> Finding:
    return Finding(
        check="buttonNames",
        message="[Error] Button missing accessible name",
        file=str(animations_project / "component.html"),
        line=1,
    )
