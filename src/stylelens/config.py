"""Configuration loading and management for stylelens.

Configuration sources are merged in priority order:
    1. Defaults (defined in OptimizerConfig)
    2. Global config (~/.stylelens.toml)
    3. Project config (./stylelens.toml)
    4. Explicit config file
    5. Environment variables (STYLELENS_* prefix)
    6. Keyword overrides (typically CLI flags)

Example:
    >>> config = load_config(min_group_size=3, scss_only=False)
    >>> config.min_group_size
    3
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import InvalidConfigError, StylelensError

Verbosity = Literal["quiet", "normal", "verbose"]

# Same ignore list the rest of the analysis pipeline walks with
DEFAULT_IGNORE_PATTERNS: tuple[str, ...] = (
    "node_modules",
    ".git",
    "dist",
    "build",
    ".angular",
    "coverage",
)


@dataclass(frozen=True)
class OptimizerConfig:
    """Configuration for the root-cause optimizer.

    Attributes:
        enabled: When False the optimizer returns findings untouched
        min_group_size: Minimum same-pattern findings (and distinct
            stylesheets) before a collapse is attempted
        scss_only: Only group findings reported on .scss/.css files
        confidence_threshold: Minimum root-cause confidence to collapse
        ignore_patterns: Path fragments / names skipped during the walk
        max_traversal_nodes: Upper bound on nodes visited by one closure
            walk (0 = unlimited)
        follow_symlinks: Descend into symlinked directories
        verbosity: Logging verbosity level
    """

    enabled: bool = True
    min_group_size: int = 2
    scss_only: bool = True
    confidence_threshold: float = 0.5

    ignore_patterns: list[str] = field(default_factory=lambda: list(DEFAULT_IGNORE_PATTERNS))

    max_traversal_nodes: int = 50000
    follow_symlinks: bool = False

    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        if self.min_group_size < 1:
            raise InvalidConfigError(
                "min_group_size", self.min_group_size, "must be at least 1"
            )
        if not 0.0 <= self.confidence_threshold <= 1.0:
            raise InvalidConfigError(
                "confidence_threshold",
                self.confidence_threshold,
                "must be between 0.0 and 1.0",
            )
        if self.max_traversal_nodes < 0:
            raise InvalidConfigError(
                "max_traversal_nodes", self.max_traversal_nodes, "must be non-negative"
            )
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError(
                "verbosity", self.verbosity, "expected quiet, normal or verbose"
            )


DEFAULT_CONFIG = OptimizerConfig()


def load_config(config_file: Optional[Path] = None, **overrides) -> OptimizerConfig:
    """Load configuration with auto-discovery and merging.

    TOML files may hold the keys at top level or under an ``[optimizer]``
    table.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options fall through.

    Returns:
        Validated OptimizerConfig instance

    Raises:
        StylelensError: If a config file is invalid or missing
    """
    merged: dict = {}

    global_config = Path.home() / ".stylelens.toml"
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except StylelensError:
            raise
        except Exception as e:
            raise StylelensError(f"Invalid global config '{global_config}': {e}")

    project_config = Path.cwd() / "stylelens.toml"
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except StylelensError:
            raise
        except Exception as e:
            raise StylelensError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise StylelensError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except StylelensError:
            raise
        except Exception as e:
            raise StylelensError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    if "ignore_patterns" in merged:
        merged["ignore_patterns"] = list(merged["ignore_patterns"])

    try:
        return OptimizerConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise StylelensError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from STYLELENS_* environment variables.

    Supported environment variables:
        STYLELENS_ENABLED: bool (true/false/1/0)
        STYLELENS_MIN_GROUP_SIZE: int
        STYLELENS_SCSS_ONLY: bool
        STYLELENS_CONFIDENCE_THRESHOLD: float
        STYLELENS_MAX_TRAVERSAL_NODES: int
        STYLELENS_FOLLOW_SYMLINKS: bool
        STYLELENS_VERBOSITY: quiet/normal/verbose
        STYLELENS_IGNORE_PATTERNS: comma-separated list
    """
    type_hints = get_type_hints(OptimizerConfig)

    result: dict[str, Any] = {}

    for field_name in OptimizerConfig.__dataclass_fields__:
        env_key = f"STYLELENS_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise StylelensError(f"Invalid {env_key}: {e}")
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the field's type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    if origin is list or type_hint is list:
        return [part.strip() for part in value.split(",") if part.strip()]

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load a TOML file, flattening an ``[optimizer]`` table if present."""
    try:
        import tomllib
    except ModuleNotFoundError:
        try:
            # Fallback to tomli for Python 3.9-3.10
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise StylelensError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        data = tomllib.load(f)

    section = data.pop("optimizer", None)
    if isinstance(section, dict):
        data.update(section)
    return data
