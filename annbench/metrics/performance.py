"""
Search latency and throughput figures.
"""

from typing import Dict, List, Sequence

import numpy as np

from annbench.core.types import PerformanceMetrics


def compute_latency_percentiles(
    latencies_ms: List[float],
    percentiles: Sequence[int] = (50, 99),
) -> Dict[str, float]:
    """
    Summarize per-query latencies.

    Returns:
        {"p50": ..., "p99": ..., "mean": ...} in milliseconds, all zero when
        no query ran
    """
    names = [f"p{p}" for p in percentiles]
    if not latencies_ms:
        return dict.fromkeys(names + ["mean"], 0.0)

    summary = dict(zip(names, np.percentile(latencies_ms, percentiles).tolist()))
    summary["mean"] = float(np.mean(latencies_ms))
    return summary


def compute_qps(latencies_ms: List[float]) -> float:
    """Queries per second for back-to-back queries on one thread."""
    return compute_throughput(len(latencies_ms), sum(latencies_ms) / 1000.0)


def compute_throughput(num_items: int, total_time_sec: float) -> float:
    return num_items / total_time_sec if total_time_sec > 0 else 0.0


def compute_all_performance_metrics(latencies_ms: List[float]) -> PerformanceMetrics:
    summary = compute_latency_percentiles(latencies_ms)
    return PerformanceMetrics(
        latency_p50=summary["p50"],
        latency_p99=summary["p99"],
        latency_mean=summary["mean"],
        qps_single_thread=compute_qps(latencies_ms),
        latencies_ms=list(latencies_ms),
    )
