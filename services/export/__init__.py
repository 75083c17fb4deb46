"""
FTG Export Service
Writes grouped feedback as a CSV table and word cloud images

Components:
- tabular.py: side-by-side CSV columns per group
- wordcloud_export.py: exclusion vocabulary, frequency colors, WordCloudRenderer
- destination.py: DestinationRequest for cancellable folder selection
- exporter.py: ReportExporter tying both artifacts together
"""

from .destination import DestinationRequest
from .exporter import ReportExporter, export_when_resolved
from .tabular import group_rows, write_group_csv
from .wordcloud_export import (
    EXCLUDE_WORDS,
    WordCloudRenderer,
    saturation_for,
    slugify,
    unique_slugs,
    word_frequencies,
)

__all__ = [
    "DestinationRequest",
    "ReportExporter",
    "export_when_resolved",
    "group_rows",
    "write_group_csv",
    "EXCLUDE_WORDS",
    "WordCloudRenderer",
    "saturation_for",
    "slugify",
    "unique_slugs",
    "word_frequencies",
]
