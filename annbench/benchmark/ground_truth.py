"""
Exact nearest neighbors used as the reference for recall.
"""

from typing import List

import numpy as np
from numpy.typing import NDArray
from scipy.spatial.distance import cdist

from annbench.core.types import Dataset, DistanceMetric
from annbench.datasets.utils import dataset_to_array


def compute_ground_truth(
    base: Dataset,
    queries: NDArray[np.float32],
    k: int,
    metric: DistanceMetric,
    batch_size: int = 100,
) -> List[List[str]]:
    """
    Compute exact k nearest neighbor keys by brute force.

    Args:
        base: Dataset searched
        queries: Query vectors, shape (n_queries, d)
        k: Number of neighbors
        metric: Distance metric
        batch_size: Queries per distance matrix

    Returns:
        One list of at most k keys per query, nearest first
    """
    if not base or len(queries) == 0:
        return [[] for _ in range(len(queries))]

    keys = [key for key, _ in base]
    vectors = dataset_to_array(base)
    k = min(k, len(keys))

    ground_truth: List[List[str]] = []

    # Compute in batches to manage memory
    for i in range(0, len(queries), batch_size):
        query_batch = queries[i:i + batch_size]

        if metric == DistanceMetric.COSINE:
            distances = cdist(query_batch, vectors, metric="cosine")
        else:
            distances = 1.0 - query_batch @ vectors.T

        for dist_row in distances:
            if k < len(keys):
                top_k = np.argpartition(dist_row, k)[:k]
            else:
                top_k = np.arange(len(keys))
            top_k = top_k[np.argsort(dist_row[top_k], kind="stable")]
            ground_truth.append([keys[j] for j in top_k])

    return ground_truth
