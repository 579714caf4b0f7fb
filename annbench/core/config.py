"""
Configuration management for the benchmarking harness.

This module handles loading, validating, and accessing run configuration
from YAML files, and sets up logging for the command-line entry point.
"""

import logging
import os
import platform
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator
from rich.logging import RichHandler

from annbench.core.errors import ConfigurationError
from annbench.core.types import DistanceMetric


# =============================================================================
# Configuration Models
# =============================================================================


class IndexSettings(BaseModel):
    """
    Index construction settings. Unset fields keep the index defaults.

    Tokens are kept as written and checked by make_index when the index is
    built, so an unknown one surfaces as a ConfigurationError.
    """

    metric: str = Field(default=DistanceMetric.COSINE.value, description="Distance metric")
    max_links: Optional[int] = Field(default=None, ge=2, description="Maximum links per node")
    ef_construction: Optional[int] = Field(default=None, ge=1, description="Construction search breadth")
    insert_method: Optional[str] = Field(default=None, description="link_nearest or link_diverse")
    remove_method: Optional[str] = Field(default=None, description="no_link or compensate_incoming_links")


class DatasetSettings(BaseModel):
    """Dataset source: a file on disk, or synthetic vectors when no path is set."""

    path: Optional[str] = Field(default=None, description="Dataset file (.fvecs, .fbin, .tsv)")
    limit: Optional[int] = Field(default=None, ge=1, description="Read at most this many vectors")
    num_vectors: int = Field(default=10_000, ge=1, description="Synthetic dataset size")
    dimensions: int = Field(default=64, ge=1, description="Synthetic vector dimensionality")
    distribution: str = Field(default="gaussian", description="gaussian or uniform")
    seed: int = Field(default=42, description="Synthetic generation seed")

    @field_validator("distribution")
    @classmethod
    def validate_distribution(cls, v):
        if v not in ("gaussian", "uniform"):
            raise ConfigurationError("distribution", v)
        return v


class ExperimentConfig(BaseModel):
    """Configuration for experiment execution."""

    seed: int = Field(default=42, description="Random seed for shuffling and graph levels")
    control_size: Optional[int] = Field(default=None, ge=0, description="Control set size (default: 1%)")
    neighbors: int = Field(default=10, ge=1, description="Neighbors requested per query")
    remove_fraction: float = Field(default=0.0, ge=0, le=1, description="Fraction of main set removed")
    strict_mode: bool = Field(default=False, description="Fail the run when check() fails")


class OutputConfig(BaseModel):
    """Configuration for output."""

    results_dir: str = Field(default="./results", description="Results directory")
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ConfigurationError("log_level", v)
        return level


class Config(BaseModel):
    """Main configuration model."""

    index: IndexSettings = Field(default_factory=IndexSettings)
    dataset: DatasetSettings = Field(default_factory=DatasetSettings)
    experiment: ExperimentConfig = Field(default_factory=ExperimentConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


# =============================================================================
# Configuration Loading Functions
# =============================================================================


def get_default_config_path() -> Path:
    return Path(__file__).parent.parent.parent / "config" / "default.yaml"


def load_config(config_path: Optional[Union[str, Path]] = None) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to configuration file (default: config/default.yaml,
            or the built-in defaults when that file is absent)

    Returns:
        Config object with loaded configuration

    Raises:
        FileNotFoundError: If configuration file doesn't exist
        pydantic.ValidationError: If a value is out of range
    """
    if config_path is None:
        config_path = get_default_config_path()
        if not config_path.exists():
            # Installed without the config/ directory
            return get_default_config()

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        config_dict = yaml.safe_load(f) or {}

    return Config(**config_dict)


def get_default_config() -> Config:
    """
    Get default configuration.

    Returns:
        Config object with default settings
    """
    return Config()


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge two configuration dictionaries.

    Args:
        base: Base configuration
        override: Override configuration; None values are skipped

    Returns:
        Merged configuration
    """
    result = base.copy()

    for key, value in override.items():
        if value is None:
            continue
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    return result


# =============================================================================
# Logging
# =============================================================================


def setup_logging(level: str = "INFO") -> None:
    """Route log records through rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


# =============================================================================
# Hardware Detection
# =============================================================================


def detect_hardware() -> Dict[str, Any]:
    """
    Detect hardware configuration.

    Returns:
        Dictionary with hardware information
    """
    import cpuinfo
    import psutil

    cpu_info = cpuinfo.get_cpu_info()
    memory = psutil.virtual_memory()

    return {
        "platform": platform.platform(),
        "python_version": platform.python_version(),
        "cpu": {
            "brand": cpu_info.get("brand_raw", "Unknown"),
            "arch": cpu_info.get("arch", "Unknown"),
            "cores_physical": psutil.cpu_count(logical=False),
            "cores_logical": psutil.cpu_count(logical=True) or os.cpu_count(),
            "frequency_mhz": cpu_info.get("hz_actual_friendly", "Unknown"),
        },
        "memory": {
            "total_gb": memory.total / (1024**3),
            "available_gb": memory.available / (1024**3),
        },
    }
