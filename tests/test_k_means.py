"""
Tests for the k-means clustering module.
"""

import pytest
import numpy as np
import sys
import os

# Add the parent directory to the path to import the module
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from kalimdor.cluster.k_means import (
    Cluster, KMeans, euclidean_distance, init_clusters, assign_points_to_clusters,
    cluster_step, max_center_shift, kmeans
)
from kalimdor.components.config import Config
from kalimdor.ops import ElementTypeError, RaggedShapeError, RankMismatchError


VECTOR1 = [[1, 2], [1, 4], [1, 0], [4, 2], [4, 4], [4, 0]]


class TestCluster:
    """Tests for the Cluster class."""

    def test_init(self):
        """Test Cluster initialization."""
        cluster = Cluster(np.array([1.0, 2.0]), [1, 3, 5], 0)

        assert np.array_equal(cluster.center, [1.0, 2.0])
        assert cluster.members == [1, 3, 5]
        assert cluster.id == 0

        # Test with defaults
        cluster_default = Cluster([1, 2])
        assert cluster_default.members == []
        assert cluster_default.id is None

    def test_members(self):
        """Test adding and clearing members."""
        cluster = Cluster(np.array([1.0, 2.0]))

        cluster.add_member(5)
        cluster.add_member(3)
        assert cluster.members == [5, 3]

        cluster.clear_members()
        assert cluster.members == []

    def test_update_center(self):
        """Test updating a cluster center."""
        data = np.array([
            [1.0, 1.0],
            [2.0, 2.0],
            [3.0, 3.0]
        ])

        # Unweighted
        cluster = Cluster(np.array([0.0, 0.0]), [0, 1])
        cluster.update_center(data)
        assert np.allclose(cluster.center, [1.5, 1.5])

        # Weighted
        cluster = Cluster(np.array([0.0, 0.0]), [0, 1])
        cluster.update_center(data, np.array([1.0, 3.0, 1.0]))
        assert np.allclose(cluster.center, [1.75, 1.75])

    def test_empty_cluster_keeps_center(self):
        """A cluster with no members does not move."""
        cluster = Cluster(np.array([7.0, 7.0]))
        cluster.update_center(np.array([[1.0, 1.0]]))
        assert np.allclose(cluster.center, [7.0, 7.0])


class TestClusteringFunctions:
    """Tests for the clustering helper functions."""

    def test_euclidean_distance(self):
        """Test Euclidean distance."""
        assert euclidean_distance(np.array([0, 0]), np.array([3, 4])) == 5.0

    def test_init_clusters_first(self):
        """'first' seeding uses the first k rows."""
        data = np.array(VECTOR1, dtype=float)
        clusters = init_clusters(data, 3)

        assert len(clusters) == 3
        assert [c.id for c in clusters] == [0, 1, 2]
        assert np.allclose([c.center for c in clusters], VECTOR1[:3])

    def test_init_clusters_kmeans_plus_plus(self):
        """k-means++ never picks a center twice when points are distinct."""
        data = np.array([[0, 0], [0, 0], [0, 0], [10, 10], [10, 10], [10, 10]], dtype=float)
        clusters = init_clusters(data, 2, 'k-means++', random_state=42)

        centers = sorted(c.center.tolist() for c in clusters)
        assert centers == [[0.0, 0.0], [10.0, 10.0]]

    def test_init_clusters_reproducible(self):
        """The same seed gives the same centers."""
        data = np.random.RandomState(0).rand(20, 2)
        a = init_clusters(data, 3, 'k-means++', random_state=7)
        b = init_clusters(data, 3, 'k-means++', random_state=7)

        assert np.allclose([c.center for c in a], [c.center for c in b])

    def test_assign_points_to_clusters(self):
        """Points go to the nearest center, ties to the earlier cluster."""
        data = np.array([[0.0], [1.0], [4.0], [5.0]])
        clusters = [Cluster(np.array([0.0]), [], 0), Cluster(np.array([2.0]), [], 1)]

        labels = assign_points_to_clusters(data, clusters)

        assert labels.tolist() == [0, 0, 1, 1]
        assert clusters[0].members == [0, 1]
        assert clusters[1].members == [2, 3]

    def test_cluster_step_does_not_mutate(self):
        """cluster_step returns new clusters."""
        data = np.array(VECTOR1, dtype=float)
        clusters = init_clusters(data, 2)

        new_clusters = cluster_step(data, clusters)

        assert clusters[0].members == []
        assert np.allclose(clusters[0].center, [1, 2])
        assert np.allclose(new_clusters[0].center, [2.5, 1.0])

    def test_max_center_shift(self):
        """Test the largest center movement."""
        a = [Cluster([0, 0]), Cluster([1, 1])]
        b = [Cluster([3, 4]), Cluster([1, 1])]

        assert max_center_shift(a, b) == 5.0
        assert max_center_shift([], []) == 0.0

    def test_kmeans(self):
        """Test the functional entry point."""
        data = np.array(VECTOR1, dtype=float)
        result = kmeans(data, 2)

        assert result['labels'].tolist() == [0, 1, 0, 0, 1, 0]
        assert result['n_iter'] == 2
        assert sorted(result['clusters'][1].members) == [1, 4]


class TestKMeans:
    """Tests for the KMeans estimator."""

    def test_fit_k2(self):
        """Test two clusters."""
        result = KMeans(k=2).fit(VECTOR1)

        assert np.allclose(result['centroids'], [[2.5, 1], [2.5, 4]])
        assert result['clusters'] == [
            [[1.0, 2.0], [1.0, 0.0], [4.0, 2.0], [4.0, 0.0]],
            [[1.0, 4.0], [4.0, 4.0]]
        ]

    def test_fit_k3(self):
        """Test three clusters."""
        result = KMeans(k=3).fit(VECTOR1)

        assert np.allclose(result['centroids'], [[2.5, 2], [2.5, 4], [2.5, 0]])
        assert [len(c) for c in result['clusters']] == [2, 2, 2]

    def test_fitted_attributes(self):
        """fit stores centroids, labels and iteration count."""
        model = KMeans(k=2)
        model.fit(VECTOR1)

        assert model.centroids_.shape == (2, 2)
        assert model.labels_.tolist() == [0, 1, 0, 0, 1, 0]
        assert model.n_iter_ >= 1

    def test_sample_weight(self):
        """Weights pull the centroid."""
        result = KMeans(k=1).fit([[0], [10]], sample_weight=[3, 1])
        assert np.allclose(result['centroids'], [[2.5]])

    def test_sample_weight_length(self):
        """There must be one weight per row."""
        with pytest.raises(ValueError, match='sample_weight'):
            KMeans(k=1).fit([[0], [10]], sample_weight=[1, 2, 3])

    def test_kmeans_plus_plus(self):
        """k-means++ seeding separates well-separated groups."""
        data = [[0, 0], [0, 0], [0, 0], [10, 10], [10, 10], [10, 10]]
        result = KMeans(k=2, init='k-means++', random_state=3).fit(data)

        assert sorted(result['centroids']) == [[0.0, 0.0], [10.0, 10.0]]

    def test_numpy_input(self):
        """numpy arrays are accepted."""
        result = KMeans(k=2).fit(np.array(VECTOR1))
        assert np.allclose(result['centroids'], [[2.5, 1], [2.5, 4]])

    def test_predict(self):
        """predict returns the nearest centroid index."""
        model = KMeans(k=2)
        model.fit(VECTOR1)

        assert model.predict([[0, 0], [3, 5]]) == [0, 1]

    def test_predict_before_fit(self):
        """predict needs a fitted model."""
        with pytest.raises(RuntimeError):
            KMeans(k=2).predict(VECTOR1)

    def test_predict_feature_mismatch(self):
        """predict checks the column count."""
        model = KMeans(k=2)
        model.fit(VECTOR1)

        with pytest.raises(ValueError, match='features'):
            model.predict([[1, 2, 3]])

    def test_invalid_parameters(self):
        """Constructor arguments are checked."""
        with pytest.raises(ValueError):
            KMeans(k=0)
        with pytest.raises(ValueError):
            KMeans(k=True)
        with pytest.raises(ValueError):
            KMeans(k=2.5)
        with pytest.raises(ValueError):
            KMeans(max_iters=0)
        with pytest.raises(ValueError):
            KMeans(init='random')

    def test_too_many_clusters(self):
        """k cannot exceed the number of rows."""
        with pytest.raises(ValueError, match='must not exceed'):
            KMeans(k=7).fit(VECTOR1)

    def test_invalid_inputs(self):
        """Inputs go through the tensor engine."""
        with pytest.raises(RankMismatchError, match=r'not 2D shaped: 1 of \[\]'):
            KMeans(k=2).fit(1)
        with pytest.raises(RankMismatchError):
            KMeans(k=2).fit([1, 2, 3])
        with pytest.raises(RaggedShapeError):
            KMeans(k=2).fit([[1, 2], [3]])
        with pytest.raises(ElementTypeError):
            KMeans(k=1).fit([['a', 'b']])

    def test_from_config(self):
        """Defaults come from the kmeans config section, kwargs win."""
        config = Config({'kmeans': {'k': 2, 'max-iters': 10}})

        model = KMeans.from_config(config)
        assert model.k == 2
        assert model.max_iters == 10

        model = KMeans.from_config(config, k=4)
        assert model.k == 4
