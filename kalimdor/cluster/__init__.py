"""
Clustering algorithms.
"""

from kalimdor.cluster.k_means import KMeans, Cluster, kmeans
