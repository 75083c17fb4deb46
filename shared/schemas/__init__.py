"""FTG Shared Schemas"""

from .grouping import (
    NOISE,
    ArtifactFailure,
    ExportBundle,
    ExportReport,
    GroupMap,
    ProcessResult,
)

__all__ = [
    "NOISE",
    "GroupMap",
    "ExportBundle",
    "ArtifactFailure",
    "ExportReport",
    "ProcessResult",
]
