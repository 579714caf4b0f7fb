"""
Benchmark orchestration.

One run drives a single index configuration through the harness sequence:

    make index -> load dataset -> prepare -> shuffle -> split main/control
    -> insert main -> remove a fraction of main -> search control -> check

Configuration errors are raised before any dataset work starts.
"""

import json
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import numpy as np
from rich.console import Console
from rich.table import Table

from annbench.benchmark.ground_truth import compute_ground_truth
from annbench.core.base import VectorIndex
from annbench.core.config import Config, detect_hardware, load_config
from annbench.core.types import BenchmarkResult, Dataset, DatasetInfo, MetricsResult
from annbench.datasets import (
    dataset_to_array,
    generate_dataset,
    get_control_size,
    load_dataset,
    shuffle,
    split_dataset,
)
from annbench.indexes import make_index_from_config
from annbench.metrics import (
    ResourceMonitor,
    compute_all_performance_metrics,
    compute_all_quality_metrics,
    compute_throughput,
)

logger = logging.getLogger(__name__)
console = Console()

# Take a memory sample every this many inserts
SAMPLE_EVERY = 1000


class BenchmarkRunner:
    """
    Main benchmark orchestrator.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        config_path: Optional[str] = None,
        collect_hardware: bool = True,
    ):
        self.config = config or load_config(config_path)
        self.results: List[BenchmarkResult] = []
        self.hardware_info: Dict = detect_hardware() if collect_hardware else {}
        self.strict_mode = self.config.experiment.strict_mode

    def run(self) -> BenchmarkResult:
        experiment = self.config.experiment

        index = make_index_from_config(self.config.index, seed=experiment.seed)

        dataset, dataset_info = self._load_dataset()
        console.print(f"\n[bold blue]HNSW Benchmark[/bold blue]: {index.name} on {dataset_info.name}")

        index.prepare_dataset(dataset)
        shuffle(dataset, np.random.default_rng(experiment.seed))

        main: Dataset = dataset
        control: Dataset = []
        split_dataset(main, control, get_control_size(main, experiment.control_size))

        console.print(f"  Main: {len(main)}, Control: {len(control)}, Seed: {experiment.seed}")

        metrics = MetricsResult()

        # === PHASE A: BUILD ===
        self._insert(index, main, metrics)

        # === PHASE B: REMOVE ===
        remaining = self._remove(index, main, metrics)

        # === PHASE C: SEARCH ===
        self._search(index, remaining, control, metrics)

        # === PHASE D: CHECK ===
        check_start = time.perf_counter()
        passed = index.check()
        metrics.operational.check_time_sec = time.perf_counter() - check_start

        if not passed:
            msg = f"Consistency check failed for {index.name}"
            logger.error(msg)
            console.print(f"[bold red]{msg}[/bold red]")
            if self.strict_mode:
                raise RuntimeError(msg)

        result = BenchmarkResult(
            experiment_name=f"{index.name}_{dataset_info.name}",
            index_config=index.config,
            dataset_info=dataset_info,
            hardware_info=self.hardware_info,
            metrics=metrics,
            main_size=len(main),
            control_size=len(control),
            final_size=index.size(),
            check_passed=passed,
            seed=experiment.seed,
        )

        self.results.append(result)
        self._print_summary(result)
        return result

    def _load_dataset(self) -> Tuple[Dataset, DatasetInfo]:
        settings = self.config.dataset
        if settings.path:
            return load_dataset(settings.path, settings.limit)

        logger.info(
            "Generating %d %s vectors (%d dims)",
            settings.num_vectors,
            settings.distribution,
            settings.dimensions,
        )
        return generate_dataset(
            settings.num_vectors,
            settings.dimensions,
            seed=settings.seed,
            distribution=settings.distribution,
        )

    def _insert(self, index: VectorIndex, main: Dataset, metrics: MetricsResult) -> None:
        console.print("  [bold]Inserting main set...[/bold]")

        with ResourceMonitor() as monitor:
            for i, (key, vector) in enumerate(main, start=1):
                index.insert(key, vector)
                if i % SAMPLE_EVERY == 0:
                    monitor.sample()
                    logger.debug("Inserted %d/%d", i, len(main))

        metrics.operational.num_inserted = len(main)
        metrics.operational.insert_time_sec = monitor.elapsed_sec
        metrics.operational.insert_throughput = compute_throughput(len(main), monitor.elapsed_sec)
        metrics.resource = monitor.to_metrics()

    def _remove(self, index: VectorIndex, main: Dataset, metrics: MetricsResult) -> Dataset:
        """Remove the leading fraction of main and return the entries still indexed."""
        num_remove = int(len(main) * self.config.experiment.remove_fraction)
        if num_remove == 0:
            return main

        console.print(f"  [bold]Removing {num_remove} entries...[/bold]")

        start = time.perf_counter()
        for key, _ in main[:num_remove]:
            index.remove(key)
        elapsed = time.perf_counter() - start

        metrics.operational.num_removed = num_remove
        metrics.operational.remove_time_sec = elapsed
        metrics.operational.remove_throughput = compute_throughput(num_remove, elapsed)
        return main[num_remove:]

    def _search(
        self,
        index: VectorIndex,
        indexed: Dataset,
        control: Dataset,
        metrics: MetricsResult,
    ) -> None:
        k = self.config.experiment.neighbors
        console.print(f"  [bold]Searching {len(control)} control vectors (k={k})...[/bold]")

        retrieved: List[List[str]] = []
        latencies: List[float] = []

        for _, vector in control:
            start = time.perf_counter()
            results = index.search(vector, k)
            latencies.append((time.perf_counter() - start) * 1000)
            retrieved.append([r.key for r in results])

        queries = dataset_to_array(control)
        ground_truth = compute_ground_truth(indexed, queries, k, index.metric)

        metrics.quality = compute_all_quality_metrics(retrieved, ground_truth, k)
        metrics.performance = compute_all_performance_metrics(latencies)

    def _print_summary(self, result: BenchmarkResult) -> None:
        metrics = result.metrics
        table = Table(title=f"Results: {result.experiment_name}")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green")

        table.add_row("Main / Control", f"{result.main_size} / {result.control_size}")
        table.add_row("Final size", str(result.final_size))
        table.add_row("Insert time (s)", f"{metrics.operational.insert_time_sec:.3f}")
        table.add_row("Insert throughput (/s)", f"{metrics.operational.insert_throughput:.1f}")
        if metrics.operational.num_removed:
            table.add_row("Removed", str(metrics.operational.num_removed))
            table.add_row("Remove time (s)", f"{metrics.operational.remove_time_sec:.3f}")
        table.add_row("Recall@1", f"{metrics.quality.recall_at_1:.4f}")
        table.add_row(f"Recall@{metrics.quality.k}", f"{metrics.quality.recall_at_k:.4f}")
        table.add_row("Latency p50 (ms)", f"{metrics.performance.latency_p50:.3f}")
        table.add_row("Latency p99 (ms)", f"{metrics.performance.latency_p99:.3f}")
        table.add_row("QPS", f"{metrics.performance.qps_single_thread:.1f}")
        table.add_row("Peak RAM (MB)", f"{metrics.resource.ram_bytes_peak / 1024**2:.1f}")
        table.add_row("Check", "[green]passed[/green]" if result.check_passed else "[red]FAILED[/red]")
        console.print(table)

    def save_results(self, output_dir: Optional[str] = None) -> str:
        output_path = Path(output_dir or self.config.output.results_dir)
        output_path.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = output_path / f"benchmark_results_{timestamp}.json"
        results_data = [r.to_dict() for r in self.results]
        with open(filename, "w") as f:
            json.dump({
                "metadata": {
                    "generated_at": datetime.now().isoformat(),
                    "num_results": len(results_data),
                    "strict_mode": self.strict_mode,
                },
                "results": results_data,
            }, f, indent=2, default=str)
        logger.info("Results written to %s", filename)
        return str(filename)
