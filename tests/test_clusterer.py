import numpy as np
import pytest

from conftest import FailingOracle, StaticOracle
from services.embed_cluster.clusterer import HdbscanOracle, assign_clusters
from shared.schemas import NOISE


def test_labels_pass_through():
    oracle = StaticOracle([0, 1, -1, 1])

    labels = assign_clusters(np.zeros((4, 2)), 2, 1, oracle=oracle)

    assert labels == [0, 1, NOISE, 1]
    assert oracle.calls == [(4, 2, 1, "euclidean")]


def test_negative_labels_become_noise():
    oracle = StaticOracle([-3, 0, np.int64(-1)])

    labels = assign_clusters(np.zeros((3, 2)), 2, 1, oracle=oracle)

    assert labels == [NOISE, 0, NOISE]


def test_oracle_failure_degrades_to_all_noise():
    labels = assign_clusters(np.zeros((5, 2)), 2, 1, oracle=FailingOracle())

    assert labels == [NOISE] * 5


def test_wrong_label_count_degrades_to_all_noise():
    labels = assign_clusters(np.zeros((3, 2)), 2, 1, oracle=StaticOracle([0, 0]))

    assert labels == [NOISE] * 3


@pytest.mark.parametrize("min_cluster_size,min_samples", [(1, 1), (5, 0)])
def test_invalid_parameters_raise(min_cluster_size, min_samples):
    with pytest.raises(ValueError):
        assign_clusters(np.zeros((3, 2)), min_cluster_size, min_samples, oracle=StaticOracle([0, 0, 0]))


def test_hdbscan_finds_separated_blobs():
    rng = np.random.default_rng(0)
    blob_a = rng.normal(loc=0.0, scale=0.1, size=(15, 2))
    blob_b = rng.normal(loc=10.0, scale=0.1, size=(15, 2))
    points = np.vstack([blob_a, blob_b])

    labels = assign_clusters(points, 5, 3, oracle=HdbscanOracle())

    assert len(labels) == 30
    assert all(label == NOISE or label >= 0 for label in labels)
    assert set(labels[:15]).isdisjoint(set(labels[15:]) - {NOISE})
    assert len(set(labels) - {NOISE}) >= 2
