"""
Tabular Export
Writes groups side by side as CSV columns
"""

import csv
from pathlib import Path

import structlog

from shared.schemas import ExportBundle, GroupMap

logger = structlog.get_logger()


def group_rows(groups: GroupMap) -> tuple[list[str], list[list[str]]]:
    """
    Lay groups out as columns.

    Returns:
        (headers, rows): headers are the sorted group keys; every row has
        one cell per header, empty where the group has run out of lines
    """
    bundle = ExportBundle(groups=groups)
    headers = bundle.headers()
    rows = []
    for i in range(bundle.max_rows()):
        rows.append([
            groups[h][i] if i < len(groups[h]) else ""
            for h in headers
        ])
    return headers, rows


def write_group_csv(groups: GroupMap, path: Path) -> Path:
    """Write groups to a UTF-8 CSV file, one column per group"""
    headers, rows = group_rows(groups)
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(headers)
        writer.writerows(rows)
    logger.info("Wrote cluster CSV", path=str(path), columns=len(headers), rows=len(rows))
    return path
