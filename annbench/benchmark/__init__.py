"""
Benchmark execution module.

Provides the orchestration for running an index benchmark.
"""

from annbench.benchmark.ground_truth import compute_ground_truth
from annbench.benchmark.runner import BenchmarkRunner

__all__ = ["BenchmarkRunner", "compute_ground_truth"]
