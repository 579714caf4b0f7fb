"""
Dataset loading and synthetic generation.

Binary formats (.fvecs, .fbin) carry no keys; entries are keyed by their
zero-based row number. Text datasets (.tsv) hold one entry per line:
the key, a tab, then the space-separated vector components.
"""

import logging
import struct
from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from annbench.core.types import Dataset, DatasetInfo
from annbench.datasets.utils import make_dataset

logger = logging.getLogger(__name__)


# =============================================================================
# File Format Readers
# =============================================================================


def read_fvecs(filename: Union[str, Path], limit: Optional[int] = None) -> NDArray[np.float32]:
    """
    Read vectors from .fvecs file format.

    Format: Each vector is preceded by its dimension (int32).
    """
    with open(filename, "rb") as f:
        data = np.fromfile(f, dtype=np.float32)

    if data.size == 0:
        return np.zeros((0, 0), dtype=np.float32)

    # First value is dimension
    d = int(data[0:1].view(np.int32)[0])
    if d <= 0 or data.size % (d + 1) != 0:
        raise ValueError(f"Malformed fvecs file: {filename}")

    # Reshape: each row has (1 + d) values (dim prefix + vector)
    data = data.reshape(-1, d + 1)
    if limit is not None:
        data = data[:limit]

    return data[:, 1:].copy()


def read_fbin(filename: Union[str, Path], limit: Optional[int] = None) -> NDArray[np.float32]:
    """
    Read vectors from .fbin (BigANN binary) format.

    Format: 8-byte header (n_vectors, dimensions as int32), then vectors.
    """
    with open(filename, "rb") as f:
        header = np.fromfile(f, dtype=np.uint32, count=2)
        if header.size != 2:
            raise ValueError(f"Malformed fbin file: {filename}")
        n_vectors, dimensions = int(header[0]), int(header[1])
        count = n_vectors if limit is None else min(n_vectors, limit)
        vectors = np.fromfile(f, dtype=np.float32, count=count * dimensions)

    if vectors.size != count * dimensions:
        raise ValueError(f"Truncated fbin file: {filename}")

    return vectors.reshape(count, dimensions)


def read_tsv(filename: Union[str, Path], limit: Optional[int] = None) -> Dataset:
    """Read a keyed text dataset."""
    dataset: Dataset = []
    dimensions = None

    with open(filename) as f:
        for line_no, line in enumerate(f, start=1):
            if limit is not None and len(dataset) >= limit:
                break
            line = line.rstrip("\n")
            if not line:
                continue

            key, sep, values = line.partition("\t")
            if not sep:
                raise ValueError(f"{filename}:{line_no}: expected '<key>\\t<vector>'")

            vector = np.array(values.split(), dtype=np.float32)
            if dimensions is None:
                dimensions = vector.shape[0]
            elif vector.shape[0] != dimensions:
                raise ValueError(
                    f"{filename}:{line_no}: expected {dimensions} components, got {vector.shape[0]}"
                )
            dataset.append((key, vector))

    return dataset


def write_fbin(filename: Union[str, Path], data: NDArray[np.float32]) -> None:
    """Writes float32 data to .fbin format (BigANN standard)."""
    data = np.ascontiguousarray(data, dtype=np.float32)
    with open(filename, "wb") as f:
        n, d = data.shape
        # Header: num_vectors, dim
        f.write(struct.pack("ii", n, d))
        f.write(data.tobytes())


# =============================================================================
# Dataset Construction
# =============================================================================


def generate_vectors(
    num_vectors: int,
    dimensions: int,
    seed: int = 42,
    distribution: str = "gaussian",
) -> NDArray[np.float32]:
    """
    Generate random vectors.

    Args:
        num_vectors: Number of vectors
        dimensions: Vector dimensionality
        seed: Random seed
        distribution: "gaussian" (standard normal) or "uniform" ([-1, 1))

    Returns:
        Array of shape (num_vectors, dimensions)
    """
    rng = np.random.default_rng(seed)

    if distribution == "gaussian":
        vectors = rng.standard_normal((num_vectors, dimensions))
    elif distribution == "uniform":
        vectors = rng.uniform(-1.0, 1.0, (num_vectors, dimensions))
    else:
        raise ValueError(f"Unknown distribution: {distribution}")

    return vectors.astype(np.float32)


def load_dataset(path: Union[str, Path], limit: Optional[int] = None) -> Tuple[Dataset, DatasetInfo]:
    """
    Load a dataset file, picking the reader from the file extension.

    Args:
        path: Dataset file
        limit: Read at most this many entries

    Returns:
        Tuple of (dataset, info)

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the extension is not supported or the file is malformed
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Dataset file not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".fvecs":
        vectors = read_fvecs(path, limit)
        dataset = make_dataset((str(i) for i in range(len(vectors))), vectors)
    elif suffix == ".fbin":
        vectors = read_fbin(path, limit)
        dataset = make_dataset((str(i) for i in range(len(vectors))), vectors)
    elif suffix in (".tsv", ".txt"):
        dataset = read_tsv(path, limit)
    else:
        raise ValueError(f"Unsupported dataset format: {path.suffix}")

    dimensions = dataset[0][1].shape[0] if dataset else 0
    logger.info("Loaded %d vectors (%d dims) from %s", len(dataset), dimensions, path)

    info = DatasetInfo(
        name=path.stem,
        num_vectors=len(dataset),
        dimensions=dimensions,
        source=str(path),
    )
    return dataset, info


def generate_dataset(
    num_vectors: int,
    dimensions: int,
    seed: int = 42,
    distribution: str = "gaussian",
) -> Tuple[Dataset, DatasetInfo]:
    """Build a synthetic dataset keyed by row number."""
    vectors = generate_vectors(num_vectors, dimensions, seed, distribution)
    dataset = make_dataset((str(i) for i in range(num_vectors)), vectors)

    info = DatasetInfo(
        name="random",
        num_vectors=num_vectors,
        dimensions=dimensions,
        source="synthetic",
        description=f"{distribution} random vectors (seed={seed})",
    )
    return dataset, info
