"""Quality, performance and resource metrics."""

from annbench.metrics.performance import (
    compute_all_performance_metrics,
    compute_latency_percentiles,
    compute_qps,
    compute_throughput,
)
from annbench.metrics.quality import compute_all_quality_metrics, compute_recall_at_k
from annbench.metrics.resource import ResourceMonitor

__all__ = [
    "compute_all_performance_metrics",
    "compute_all_quality_metrics",
    "compute_latency_percentiles",
    "compute_qps",
    "compute_recall_at_k",
    "compute_throughput",
    "ResourceMonitor",
]
