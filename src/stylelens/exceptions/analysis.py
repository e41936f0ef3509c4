"""Analysis-related exceptions: file access, graph traversal."""

from pathlib import Path
from typing import Union

from .base import StylelensError


class AnalysisError(StylelensError):
    """Base class for analysis-related errors."""
    pass


class FileAccessError(AnalysisError):
    """Raised when a stylesheet cannot be accessed or read."""

    def __init__(self, filepath: Union[str, Path], reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class TraversalLimitError(AnalysisError):
    """Raised when a closure walk visits more nodes than allowed."""

    def __init__(self, start: str, limit: int):
        super().__init__(
            f"Traversal from {start} exceeded {limit} nodes",
            details={"start": start, "limit": str(limit)},
        )
        self.start = start
        self.limit = limit
