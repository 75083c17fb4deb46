"""
FTG Ingest Service
Reads free-text feedback lines from delimited files

Components:
- reader.py: ResponseReader for first-column extraction
"""

from .reader import ResponseReader, extract_first_column

__all__ = ["ResponseReader", "extract_first_column"]
