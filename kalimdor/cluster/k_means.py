"""
K-means clustering.

Lloyd's algorithm over a validated 2D numeric matrix, with deterministic
first-k seeding by default, k-means++ seeding on request, and optional
per-sample weights.
"""

import logging
import numbers
from copy import deepcopy
from typing import Any, Dict, List, Optional

import numpy as np
from scipy.spatial.distance import cdist

from kalimdor.components.config import Config
from kalimdor.ops import validate_matrix_1d, validate_matrix_2d
from kalimdor.utils.general import as_numeric_array, weighted_means

logger = logging.getLogger(__name__)

INIT_METHODS = ('first', 'k-means++')


class Cluster:
    """
    Represents a cluster in K-means clustering.
    """

    def __init__(self,
                center: np.ndarray,
                members: Optional[List[int]] = None,
                id: Optional[int] = None):
        """
        Initialize a cluster with a center and optional members.

        Args:
            center: The center of the cluster
            members: Indices of members belonging to the cluster
            id: Unique identifier for the cluster
        """
        self.center = np.array(center, dtype=float)
        self.members = [] if members is None else list(members)
        self.id = id

    def add_member(self, idx: int) -> None:
        self.members.append(idx)

    def clear_members(self) -> None:
        self.members = []

    def update_center(self, data: np.ndarray, weights: Optional[np.ndarray] = None) -> None:
        """
        Move the center to the (weighted) mean of the members.

        An empty cluster keeps its current center.

        Args:
            data: Data matrix containing all points
            weights: Optional weights for each data point
        """
        if not self.members:
            return

        member_data = data[self.members]
        member_weights = None if weights is None else weights[self.members]
        self.center = np.array(weighted_means(member_data, member_weights))

    def __repr__(self) -> str:
        return f"Cluster(id={self.id}, members={len(self.members)})"


def euclidean_distance(a: np.ndarray, b: np.ndarray) -> float:
    """
    Calculate Euclidean distance between two vectors.

    Args:
        a: First vector
        b: Second vector

    Returns:
        Euclidean distance
    """
    return float(np.linalg.norm(a - b))


def init_clusters(data: np.ndarray,
                  k: int,
                  init: str = 'first',
                  random_state: Optional[int] = None) -> List[Cluster]:
    """
    Initialize k clusters.

    'first' seeds with the first k rows. 'k-means++' picks the first center
    uniformly and each further center with probability proportional to its
    distance from the nearest center chosen so far.

    Args:
        data: Data matrix
        k: Number of clusters
        init: Seeding method
        random_state: Seed for 'k-means++'

    Returns:
        List of initialized clusters
    """
    if init == 'first':
        return [Cluster(data[i], [], i) for i in range(k)]

    n_points = data.shape[0]
    rng = np.random.RandomState(random_state)

    centers = [data[rng.randint(0, n_points)]]
    for _ in range(1, k):
        min_dists = cdist(data, np.array(centers)).min(axis=1)

        # All points coincide with a center: fall back to uniform
        if np.sum(min_dists) == 0:
            probs = np.ones(n_points) / n_points
        else:
            probs = min_dists / np.sum(min_dists)

        next_idx = rng.choice(n_points, p=probs)
        centers.append(data[next_idx])

    return [Cluster(center, [], i) for i, center in enumerate(centers)]


def assign_points_to_clusters(data: np.ndarray, clusters: List[Cluster]) -> np.ndarray:
    """
    Assign each data point to the nearest cluster.

    Ties go to the cluster that comes first.

    Args:
        data: Data matrix
        clusters: List of clusters

    Returns:
        Array with the cluster position of each point
    """
    for cluster in clusters:
        cluster.clear_members()

    centers = np.array([cluster.center for cluster in clusters])
    labels = np.argmin(cdist(data, centers), axis=1)

    for i, label in enumerate(labels):
        clusters[label].add_member(i)

    return labels


def cluster_step(data: np.ndarray,
                clusters: List[Cluster],
                weights: Optional[np.ndarray] = None) -> List[Cluster]:
    """
    Perform one step of K-means clustering.

    Args:
        data: Data matrix
        clusters: Current clusters
        weights: Optional weights for each data point

    Returns:
        Updated clusters; the input list is left untouched
    """
    clusters = deepcopy(clusters)

    assign_points_to_clusters(data, clusters)
    for cluster in clusters:
        cluster.update_center(data, weights)

    return clusters


def max_center_shift(clusters1: List[Cluster], clusters2: List[Cluster]) -> float:
    """
    Largest distance any center moved between two clusterings of equal size.
    """
    return max(
        (euclidean_distance(c1.center, c2.center) for c1, c2 in zip(clusters1, clusters2)),
        default=0.0
    )


def kmeans(data: np.ndarray,
          k: int,
          max_iters: int = 300,
          tolerance: float = 1e-4,
          init: str = 'first',
          random_state: Optional[int] = None,
          weights: Optional[np.ndarray] = None) -> Dict[str, Any]:
    """
    Perform K-means clustering on the data.

    Args:
        data: Data matrix
        k: Number of clusters
        max_iters: Maximum number of iterations
        tolerance: Stop once no center moves further than this
        init: Seeding method, 'first' or 'k-means++'
        random_state: Seed for 'k-means++'
        weights: Optional weights for each data point

    Returns:
        Dictionary with 'clusters' (with final members), 'labels' and 'n_iter'
    """
    clusters = init_clusters(data, k, init, random_state)

    n_iter = 0
    for n_iter in range(1, max_iters + 1):
        new_clusters = cluster_step(data, clusters, weights)
        shift = max_center_shift(clusters, new_clusters)
        clusters = new_clusters

        if shift <= tolerance:
            logger.debug(f"K-means converged after {n_iter} iterations")
            break
    else:
        logger.info(f"K-means stopped at max_iters={max_iters} before converging")

    # Final assignment against the final centers
    labels = assign_points_to_clusters(data, clusters)

    return {
        'clusters': clusters,
        'labels': labels,
        'n_iter': n_iter
    }


class KMeans:
    """
    K-means clustering estimator.

    Example:
        kmean = KMeans(k=2)
        result = kmean.fit([[1, 2], [1, 4], [1, 0], [4, 2], [4, 4], [4, 0]])
        result['centroids']  # [[2.5, 1.0], [2.5, 4.0]]
    """

    def __init__(self,
                 k: int = 3,
                 max_iters: int = 300,
                 tolerance: float = 1e-4,
                 init: str = 'first',
                 random_state: Optional[int] = None):
        if isinstance(k, bool) or not isinstance(k, numbers.Integral) or k < 1:
            raise ValueError(f"k must be a positive integer, got {k!r}")
        if isinstance(max_iters, bool) or not isinstance(max_iters, numbers.Integral) or max_iters < 1:
            raise ValueError(f"max_iters must be a positive integer, got {max_iters!r}")
        if init not in INIT_METHODS:
            raise ValueError(f"init must be one of {INIT_METHODS}, got {init!r}")

        self.k = int(k)
        self.max_iters = int(max_iters)
        self.tolerance = float(tolerance)
        self.init = init
        self.random_state = random_state

        self.centroids_: Optional[np.ndarray] = None
        self.labels_: Optional[np.ndarray] = None
        self.n_iter_: Optional[int] = None

    @classmethod
    def from_config(cls, config: Config, **kwargs) -> 'KMeans':
        """
        Build an estimator from the 'kmeans' configuration section.

        Args:
            config: Configuration
            **kwargs: Explicit arguments, taking precedence over the config

        Returns:
            KMeans instance
        """
        params = {
            'k': config.get('kmeans.k', 3),
            'max_iters': config.get('kmeans.max-iters', 300),
            'tolerance': config.get('kmeans.tolerance', 1e-4),
        }
        params.update(kwargs)
        return cls(**params)

    def fit(self, X: Any, sample_weight: Optional[Any] = None) -> Dict[str, List]:
        """
        Cluster the rows of X.

        Args:
            X: 2D numeric matrix
            sample_weight: Optional 1D weights, one per row

        Returns:
            Dictionary with 'centroids' (one per cluster) and 'clusters' (the
            rows of X belonging to each cluster, in input order)
        """
        validate_matrix_2d(X)
        data = as_numeric_array(X)

        n_samples = data.shape[0]
        if self.k > n_samples:
            raise ValueError(f"k={self.k} must not exceed the number of samples ({n_samples})")

        weights = None
        if sample_weight is not None:
            validate_matrix_1d(sample_weight)
            weights = as_numeric_array(sample_weight)
            if weights.shape[0] != n_samples:
                raise ValueError(
                    f"sample_weight has {weights.shape[0]} elements, expected {n_samples}"
                )

        result = kmeans(data, self.k, self.max_iters, self.tolerance,
                        self.init, self.random_state, weights)
        clusters = result['clusters']

        self.centroids_ = np.array([cluster.center for cluster in clusters])
        self.labels_ = result['labels']
        self.n_iter_ = result['n_iter']

        return {
            'centroids': self.centroids_.tolist(),
            'clusters': [[data[i].tolist() for i in cluster.members] for cluster in clusters]
        }

    def predict(self, X: Any) -> List[int]:
        """
        Index of the nearest centroid for each row of X.

        Args:
            X: 2D numeric matrix with the fitted number of columns

        Returns:
            List of cluster indices
        """
        if self.centroids_ is None:
            raise RuntimeError("KMeans must be fit before calling predict")

        validate_matrix_2d(X)
        data = as_numeric_array(X)
        if data.shape[1] != self.centroids_.shape[1]:
            raise ValueError(
                f"X has {data.shape[1]} features, but KMeans was fit with {self.centroids_.shape[1]}"
            )

        return np.argmin(cdist(data, self.centroids_), axis=1).tolist()

    def __repr__(self) -> str:
        return f"KMeans(k={self.k}, max_iters={self.max_iters}, init={self.init!r})"
