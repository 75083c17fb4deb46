import numpy as np
import pytest
import structlog

from shared.schemas import NOISE

BATTERY_LINES = [
    "good battery life",
    "battery issues",
    "screen is great",
    "battery drains fast",
]


class FakeEmbedder:
    """Returns fixed vectors, or raises the given error"""

    def __init__(self, vectors=None, error=None):
        self.vectors = vectors
        self.error = error
        self.calls = []

    def embed_batch(self, lines):
        self.calls.append(list(lines))
        if self.error is not None:
            raise self.error
        if self.vectors is not None:
            return np.asarray(self.vectors, dtype=np.float64)
        rng = np.random.default_rng(7)
        return rng.normal(size=(len(lines), 8))


class StaticOracle:
    """Cluster oracle returning preset labels"""

    def __init__(self, labels):
        self.labels = labels
        self.calls = []

    def cluster(self, points, min_cluster_size, min_samples, metric="euclidean"):
        self.calls.append((len(points), min_cluster_size, min_samples, metric))
        return list(self.labels)


class FailingOracle:
    def cluster(self, points, min_cluster_size, min_samples, metric="euclidean"):
        raise RuntimeError("tree construction failed")


@pytest.fixture
def battery_lines():
    return list(BATTERY_LINES)


@pytest.fixture
def battery_embedder():
    return FakeEmbedder(vectors=[
        [1.0, 0.0, 0.0],
        [0.0, 1.0, 0.0],
        [0.0, 0.0, 1.0],
        [1.0, 1.0, 0.0],
    ])


@pytest.fixture
def battery_oracle():
    return StaticOracle([0, 0, NOISE, 0])


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()
