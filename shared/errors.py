"""
Feedback Theme Grouper - Error kinds

Each pipeline stage raises its own error type so callers can tell which
stage failed. Clustering errors are recovered inside the clustering stage.
"""

from pathlib import Path
from typing import Optional


class ThemeGrouperError(Exception):
    """Base class for all pipeline errors"""

    stage = "pipeline"

    def __str__(self) -> str:
        return f"[{self.stage}] {super().__str__()}"


class InputReadError(ThemeGrouperError):
    """Source file could not be opened or decoded"""

    stage = "input"


class EmbeddingError(ThemeGrouperError):
    """Embedding backend failed; there are no vectors to continue with"""

    stage = "embedding"


class ReductionError(ThemeGrouperError):
    """Principal component projection rejected its input"""

    stage = "reduction"

    def __init__(self, precondition: str, detail: str = ""):
        self.precondition = precondition
        message = f"precondition failed: {precondition}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class ClusteringError(ThemeGrouperError):
    """Cluster oracle failed internally"""

    stage = "clustering"


class ExportWriteError(ThemeGrouperError):
    """One tabular or image artifact could not be written"""

    stage = "export"

    def __init__(self, artifact: str, path: Optional[Path], reason: str):
        self.artifact = artifact
        self.path = path
        self.reason = reason
        super().__init__(f"{artifact} -> {path}: {reason}")
