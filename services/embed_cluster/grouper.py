"""
Line Grouper
Collects lines under their cluster label, dropping noise
"""

from typing import Iterable

import structlog

from shared.schemas import NOISE, GroupMap

logger = structlog.get_logger()


def group_lines_by_cluster(pairs: Iterable[tuple[str, int]]) -> GroupMap:
    """
    Group lines by cluster label.

    Lines keep their input order inside each group and duplicates are
    kept. Noise-labelled lines are left out of every group.

    Args:
        pairs: (line, label) pairs in input order

    Returns:
        Mapping of str(cluster_id) -> lines, keyed in cluster id order
    """
    grouped: dict[int, list[str]] = {}
    dropped = 0
    for line, label in pairs:
        if label == NOISE:
            dropped += 1
            continue
        grouped.setdefault(label, []).append(line)

    if dropped:
        logger.info("Dropped noise lines", count=dropped)

    return {str(label): grouped[label] for label in sorted(grouped)}
