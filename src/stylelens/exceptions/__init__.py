"""Exception hierarchy for stylelens."""

from .analysis import AnalysisError, FileAccessError, TraversalLimitError
from .base import StylelensError
from .config import ConfigurationError, InvalidConfigError, InvalidPathError

__all__ = [
    "StylelensError",
    "AnalysisError",
    "FileAccessError",
    "TraversalLimitError",
    "ConfigurationError",
    "InvalidConfigError",
    "InvalidPathError",
]
