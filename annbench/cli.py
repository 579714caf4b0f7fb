"""
Command-line interface for the HNSW benchmark.
"""

import click
from rich.console import Console

console = Console()


@click.group()
@click.version_option(version="1.0.0")
def main():
    """annbench - HNSW index benchmarking harness."""
    pass


@main.command()
@click.option("--config", "-c", type=click.Path(exists=True), help="Path to config file")
@click.option("--dataset", "-d", type=click.Path(exists=True), help="Dataset file (.fvecs, .fbin, .tsv)")
@click.option("--limit", type=int, help="Read at most this many vectors")
@click.option("--metric", "-m", help="Distance metric (dot_product, cosine)")
@click.option("--max-links", type=int, help="Maximum links per node")
@click.option("--ef-construction", type=int, help="Construction search breadth")
@click.option("--insert-method", help="link_nearest or link_diverse")
@click.option("--remove-method", help="no_link or compensate_incoming_links")
@click.option("--control-size", type=int, help="Control set size (default: 1% of the dataset)")
@click.option("--neighbors", "-k", type=int, help="Neighbors per query")
@click.option("--remove-fraction", type=float, help="Fraction of the main set to remove")
@click.option("--seed", type=int, help="Random seed")
@click.option("--strict/--no-strict", default=None, help="Fail when the consistency check fails")
@click.option("--output", "-o", help="Output directory")
def run(config, dataset, limit, metric, max_links, ef_construction, insert_method,
        remove_method, control_size, neighbors, remove_fraction, seed, strict, output):
    """Build, mutate and query an index, then report timings and recall."""
    from annbench.benchmark.runner import BenchmarkRunner
    from annbench.core.config import Config, load_config, merge_configs, setup_logging

    base = load_config(config) if config else load_config()

    overrides = {
        "index": {
            "metric": metric,
            "max_links": max_links,
            "ef_construction": ef_construction,
            "insert_method": insert_method,
            "remove_method": remove_method,
        },
        "dataset": {"path": dataset, "limit": limit},
        "experiment": {
            "control_size": control_size,
            "neighbors": neighbors,
            "remove_fraction": remove_fraction,
            "seed": seed,
            "strict_mode": strict,
        },
        "output": {"results_dir": output},
    }
    cfg = Config(**merge_configs(base.model_dump(), overrides))

    setup_logging(cfg.output.log_level)

    runner = BenchmarkRunner(cfg)
    runner.run()
    path = runner.save_results()

    console.print(f"\n[green]Benchmark complete! Results saved to {path}[/green]")


@main.command()
@click.option("--output", "-o", required=True, type=click.Path(dir_okay=False), help="Output .fbin file")
@click.option("--num-vectors", "-n", default=10_000, show_default=True, help="Number of vectors")
@click.option("--dimensions", "-d", default=64, show_default=True, help="Vector dimensionality")
@click.option("--distribution", type=click.Choice(["gaussian", "uniform"]), default="gaussian")
@click.option("--seed", default=42, show_default=True, help="Random seed")
def generate(output, num_vectors, dimensions, distribution, seed):
    """Generate a synthetic dataset."""
    from annbench.datasets.loaders import generate_vectors, write_fbin

    vectors = generate_vectors(num_vectors, dimensions, seed, distribution)
    write_fbin(output, vectors)

    console.print(f"[green]Wrote {num_vectors} x {dimensions} vectors to {output}[/green]")


@main.command()
def list_indexes():
    """List available index variants."""
    from annbench.indexes import list_available_indexes

    console.print("[bold]Available Indexes:[/bold]")
    for name in list_available_indexes():
        console.print(f"  - {name}")


@main.command()
def info():
    """Show system information."""
    from annbench.core.config import detect_hardware

    hw = detect_hardware()

    console.print("[bold]System Information:[/bold]")
    console.print(f"  Platform: {hw.get('platform', 'Unknown')}")
    console.print(f"  Python: {hw.get('python_version', 'Unknown')}")

    cpu = hw.get("cpu", {})
    console.print(f"  CPU: {cpu.get('brand', 'Unknown')}")
    console.print(f"  Cores: {cpu.get('cores_logical', 'Unknown')}")

    mem = hw.get("memory", {})
    console.print(f"  Memory: {mem.get('total_gb', 0):.1f} GB")


if __name__ == "__main__":
    main()
