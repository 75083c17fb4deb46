"""
Feedback Theme Grouper - Grouping Schemas

Defines GroupMap views and pipeline result models
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

# Label assigned to points that belong to no cluster
NOISE = -1

GroupMap = dict[str, list[str]]


class ExportBundle(BaseModel):
    """
    A GroupMap seen by both export consumers.

    The CSV writer reads it as named columns, the word cloud renderer
    as named corpora. Key order is always taken from headers().
    """

    groups: GroupMap = Field(default_factory=dict)

    def headers(self) -> list[str]:
        return sorted(self.groups)

    def max_rows(self) -> int:
        return max((len(lines) for lines in self.groups.values()), default=0)

    def columns(self) -> list[tuple[str, list[str]]]:
        return [(key, self.groups[key]) for key in self.headers()]

    def corpora(self) -> list[tuple[str, str]]:
        """Each group's lines joined with a single space"""
        return [(key, " ".join(self.groups[key])) for key in self.headers()]


class ArtifactFailure(BaseModel):
    """One artifact that could not be written"""

    artifact: str
    path: Optional[Path] = None
    reason: str


class ExportReport(BaseModel):
    """Outcome of one export run"""

    destination: Path
    written: list[Path] = Field(default_factory=list)
    failures: list[ArtifactFailure] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class ProcessResult(BaseModel):
    """Result of grouping a batch of lines"""

    groups: GroupMap = Field(default_factory=dict)
    n_lines: int = 0
    noise_count: int = 0
    n_components: int = 0

    class Config:
        json_schema_extra = {
            "example": {
                "groups": {"0": ["good battery life", "battery issues", "battery drains fast"]},
                "n_lines": 4,
                "noise_count": 1,
                "n_components": 2,
            }
        }
