"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import OptimizerConfig, load_config

console = Console()


def resolve_config(
    config: Optional[Path] = None,
    min_group_size: Optional[int] = None,
    all_files: bool = False,
    verbose: bool = False,
    quiet: bool = False,
) -> OptimizerConfig:
    """Build optimizer config from CLI options."""
    overrides: dict = {"verbose": verbose, "quiet": quiet}
    if min_group_size is not None:
        overrides["min_group_size"] = min_group_size
    if all_files:
        overrides["scss_only"] = False
    return load_config(config_file=config, **overrides)
