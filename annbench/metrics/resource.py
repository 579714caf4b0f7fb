"""
Process resource usage while the index is being built.
"""

import time

import psutil

from annbench.core.types import ResourceMetrics


class ResourceMonitor:
    """
    Tracks wall time, CPU time and peak resident memory over a block.

    The peak is only as fine as the sampling, so long loops should call
    sample() periodically.

    Example:
        with ResourceMonitor() as monitor:
            for i, (key, vector) in enumerate(main):
                index.insert(key, vector)
                if i % 1000 == 0:
                    monitor.sample()
        print(monitor.peak_memory_bytes)
    """

    def __init__(self):
        self.process = psutil.Process()
        self.peak_memory_bytes = 0
        self.elapsed_sec = 0.0
        self.cpu_time_sec = 0.0
        self._wall_start = 0.0
        self._cpu_start = 0.0

    def __enter__(self):
        self.peak_memory_bytes = self.process.memory_info().rss
        self._cpu_start = self._cpu_total()
        self._wall_start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed_sec = time.perf_counter() - self._wall_start
        self.cpu_time_sec = self._cpu_total() - self._cpu_start
        self.sample()
        return False

    def sample(self) -> None:
        self.peak_memory_bytes = max(self.peak_memory_bytes, self.process.memory_info().rss)

    def to_metrics(self) -> ResourceMetrics:
        return ResourceMetrics(ram_bytes_peak=self.peak_memory_bytes, cpu_time_sec=self.cpu_time_sec)

    def _cpu_total(self) -> float:
        times = self.process.cpu_times()
        return times.user + times.system
