"""
Line Clustering Service
Assigns a density cluster or noise to each reduced vector using HDBSCAN
"""

from typing import Protocol, Sequence

import numpy as np
import structlog

from shared.errors import ClusteringError
from shared.schemas import NOISE

logger = structlog.get_logger()


class ClusterOracle(Protocol):
    """Anything that labels points with a cluster id or NOISE"""

    def cluster(
        self,
        points: np.ndarray,
        min_cluster_size: int,
        min_samples: int,
        metric: str = "euclidean",
    ) -> Sequence[int]:
        ...


class HdbscanOracle:
    """Cluster oracle backed by the hdbscan library."""

    def __init__(self, cluster_selection_method: str = "eom"):
        self.cluster_selection_method = cluster_selection_method

    def cluster(
        self,
        points: np.ndarray,
        min_cluster_size: int,
        min_samples: int,
        metric: str = "euclidean",
    ) -> Sequence[int]:
        import hdbscan

        try:
            clusterer = hdbscan.HDBSCAN(
                min_cluster_size=min_cluster_size,
                min_samples=min_samples,
                metric=metric,
                cluster_selection_method=self.cluster_selection_method,
            )
            return clusterer.fit_predict(points)
        except Exception as e:
            raise ClusteringError(str(e)) from e


def assign_clusters(
    points: np.ndarray,
    min_cluster_size: int,
    min_samples: int,
    oracle: ClusterOracle = None,
    metric: str = "euclidean",
) -> list[int]:
    """
    Label every point, falling back to all-noise if the oracle fails.

    Args:
        points: Reduced vectors, shape (n_samples, k)
        min_cluster_size: Smallest group HDBSCAN may form
        min_samples: Neighbourhood size for core points
        oracle: Cluster oracle (default: HdbscanOracle)
        metric: Distance metric passed to the oracle

    Returns:
        One label per point, either a cluster id >= 0 or NOISE
    """
    if min_cluster_size < 2:
        raise ValueError(f"min_cluster_size must be >= 2, got {min_cluster_size}")
    if min_samples < 1:
        raise ValueError(f"min_samples must be >= 1, got {min_samples}")

    oracle = oracle or HdbscanOracle()
    n_points = len(points)
    logger.info(
        "Running clustering",
        n_points=n_points,
        min_cluster_size=min_cluster_size,
        min_samples=min_samples,
    )

    try:
        raw = oracle.cluster(points, min_cluster_size, min_samples, metric=metric)
        labels = [int(label) if int(label) >= 0 else NOISE for label in raw]
        if len(labels) != n_points:
            raise ClusteringError(f"oracle returned {len(labels)} labels for {n_points} points")
    except Exception as e:
        logger.warning("Clustering failed, treating every line as noise", error=str(e))
        return [NOISE] * n_points

    clusters = set(labels)
    clusters.discard(NOISE)
    logger.info("Found clusters", n_clusters=len(clusters), noise=labels.count(NOISE))
    return labels
