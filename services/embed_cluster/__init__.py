"""
FTG Embed/Cluster Service
Embeds feedback lines and groups them into themes

Components:
- embedder.py: LineEmbedder for embeddings via sentence-transformers or Ollama
- reducer.py: reduce_with_pca for principal component projection
- clusterer.py: HdbscanOracle and assign_clusters (falls back to all noise)
- grouper.py: group_lines_by_cluster for label -> lines grouping
- cli.py: Command-line interface for embedding and grouping
"""

from .embedder import LineEmbedder, get_embedder
from .reducer import reduce_with_pca
from .clusterer import ClusterOracle, HdbscanOracle, assign_clusters
from .grouper import group_lines_by_cluster

__all__ = [
    "LineEmbedder",
    "get_embedder",
    "reduce_with_pca",
    "ClusterOracle",
    "HdbscanOracle",
    "assign_clusters",
    "group_lines_by_cluster",
]
