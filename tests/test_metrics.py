"""Tests for metrics computation."""

import numpy as np
import pytest

from annbench.metrics.quality import compute_all_quality_metrics, compute_recall_at_k


class TestQualityMetrics:
    """Test quality metrics."""

    def setup_method(self):
        """Set up test fixtures."""
        self.ground_truth = [["a", "b", "c", "d", "e"]]

        # Perfect retrieval
        self.perfect_retrieved = [["a", "b", "c", "d", "e"]]

        # Partial retrieval
        self.partial_retrieved = [["a", "x", "c", "y", "e"]]

        # No overlap
        self.no_overlap_retrieved = [["v", "w", "x", "y", "z"]]

    def test_recall_perfect(self):
        """Test recall with perfect retrieval."""
        assert compute_recall_at_k(self.perfect_retrieved, self.ground_truth, k=5) == 1.0

    def test_recall_partial(self):
        """Test recall with partial overlap."""
        recall = compute_recall_at_k(self.partial_retrieved, self.ground_truth, k=5)
        assert recall == pytest.approx(0.6)  # 3 out of 5

    def test_recall_no_overlap(self):
        """Test recall with no overlap."""
        assert compute_recall_at_k(self.no_overlap_retrieved, self.ground_truth, k=5) == 0.0

    def test_recall_order_insensitive(self):
        """Recall@k ignores order inside the cutoff."""
        retrieved = [["e", "d", "c", "b", "a"]]
        assert compute_recall_at_k(retrieved, self.ground_truth, k=5) == 1.0

    def test_recall_at_1(self):
        retrieved = [["b", "a"]]
        assert compute_recall_at_k(retrieved, self.ground_truth, k=1) == 0.0

    def test_short_result_list(self):
        """Fewer results than k count as misses."""
        retrieved = [["a", "b"]]
        assert compute_recall_at_k(retrieved, self.ground_truth, k=5) == pytest.approx(0.4)

    def test_mean_over_queries(self):
        retrieved = self.perfect_retrieved + self.no_overlap_retrieved
        ground_truth = self.ground_truth * 2
        assert compute_recall_at_k(retrieved, ground_truth, k=5) == pytest.approx(0.5)

    def test_no_queries(self):
        assert compute_recall_at_k([], [], k=10) == 0.0

    def test_length_mismatch(self):
        with pytest.raises(ValueError):
            compute_recall_at_k([["a"]], [], k=1)

    def test_all_quality_metrics(self):
        metrics = compute_all_quality_metrics(self.partial_retrieved, self.ground_truth, k=5)
        assert metrics.recall_at_1 == 1.0
        assert metrics.recall_at_k == pytest.approx(0.6)
        assert metrics.k == 5


class TestPerformanceMetrics:
    """Test performance metrics."""

    def test_latency_percentiles(self):
        """Test latency percentile computation."""
        from annbench.metrics.performance import compute_latency_percentiles

        latencies = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0, 9.0, 10.0]
        percentiles = compute_latency_percentiles(latencies)

        assert set(percentiles) == {"p50", "p99", "mean"}
        assert percentiles["p50"] == pytest.approx(5.5)
        assert percentiles["p99"] == pytest.approx(9.91)
        assert percentiles["mean"] == pytest.approx(5.5)

    def test_custom_percentiles(self):
        from annbench.metrics.performance import compute_latency_percentiles

        percentiles = compute_latency_percentiles([1.0, 2.0, 3.0], percentiles=(0, 100))
        assert percentiles["p0"] == 1.0
        assert percentiles["p100"] == 3.0

    def test_latency_percentiles_empty(self):
        from annbench.metrics.performance import compute_latency_percentiles

        assert compute_latency_percentiles([])["p99"] == 0.0

    def test_qps_computation(self):
        """Test QPS computation."""
        from annbench.metrics.performance import compute_qps

        # 10 queries, each taking 1ms = 1000 QPS
        assert compute_qps([1.0] * 10) == pytest.approx(1000.0)
        assert compute_qps([]) == 0.0

    def test_throughput(self):
        from annbench.metrics.performance import compute_throughput

        assert compute_throughput(500, 2.0) == 250.0
        assert compute_throughput(500, 0.0) == 0.0

    def test_all_performance_metrics(self):
        from annbench.metrics.performance import compute_all_performance_metrics

        metrics = compute_all_performance_metrics([2.0, 2.0, 2.0])
        assert metrics.latency_p50 == 2.0
        assert metrics.qps_single_thread == pytest.approx(500.0)
        assert metrics.latencies_ms == [2.0, 2.0, 2.0]


class TestResourceMetrics:
    """Test resource metrics."""

    def test_resource_monitor(self):
        """Test ResourceMonitor context manager."""
        from annbench.metrics.resource import ResourceMonitor

        with ResourceMonitor() as monitor:
            # Allocate some memory
            data = np.zeros((1000, 1000), dtype=np.float32)
            monitor.sample()
            del data

        assert monitor.elapsed_sec > 0
        assert monitor.peak_memory_bytes > 0
        assert monitor.cpu_time_sec >= 0

        metrics = monitor.to_metrics()
        assert metrics.ram_bytes_peak == monitor.peak_memory_bytes


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
