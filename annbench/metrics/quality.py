"""
Search quality metrics.

Results and ground truth are lists of key lists, one per query.
"""

from typing import Sequence

import numpy as np

from annbench.core.types import QualityMetrics


def compute_recall_at_k(
    retrieved: Sequence[Sequence[str]],
    ground_truth: Sequence[Sequence[str]],
    k: int,
) -> float:
    """
    Compute mean Recall@K.

    Recall@K = |retrieved[:k] ∩ ground_truth[:k]| / |ground_truth[:k]|

    Args:
        retrieved: Retrieved keys per query
        ground_truth: Exact nearest keys per query
        k: Cutoff

    Returns:
        Recall averaged over queries (0.0 when there are no queries)
    """
    if len(retrieved) != len(ground_truth):
        raise ValueError(
            f"Got {len(retrieved)} result lists for {len(ground_truth)} ground truth lists"
        )

    recalls = []
    for found, expected in zip(retrieved, ground_truth):
        expected_set = set(expected[:k])
        if not expected_set:
            continue
        recalls.append(len(set(found[:k]) & expected_set) / len(expected_set))

    return float(np.mean(recalls)) if recalls else 0.0


def compute_all_quality_metrics(
    retrieved: Sequence[Sequence[str]],
    ground_truth: Sequence[Sequence[str]],
    k: int,
) -> QualityMetrics:
    """Compute Recall@1 and Recall@k."""
    return QualityMetrics(
        recall_at_1=compute_recall_at_k(retrieved, ground_truth, 1),
        recall_at_k=compute_recall_at_k(retrieved, ground_truth, k),
        k=k,
    )
