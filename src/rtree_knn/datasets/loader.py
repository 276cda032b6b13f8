"""Generate, cache and load benchmark point sets in HDF5 format."""

from pathlib import Path

import h5py
import numpy as np
from tqdm import tqdm

from ..search.exhaustive import exhaustive_search
from .synthetic import clustered_points, geographic_points, uniform_points

DATA_DIR = Path(__file__).resolve().parents[3] / "data"

# Named point sets and the metric their ground truth is computed with
DATASETS = {
    "uniform-10k": {
        "generator": uniform_points,
        "n_points": 10_000,
        "metric": "euclidean",
    },
    "clustered-10k": {
        "generator": clustered_points,
        "n_points": 10_000,
        "metric": "euclidean",
    },
    "uniform-100k": {
        "generator": uniform_points,
        "n_points": 100_000,
        "metric": "euclidean",
    },
    "geo-10k": {
        "generator": geographic_points,
        "n_points": 10_000,
        "metric": "haversine",
    },
    "geo-100k": {
        "generator": geographic_points,
        "n_points": 100_000,
        "metric": "haversine",
    },
}

N_QUERIES = 200
GROUND_TRUTH_K = 100


def generate_dataset(
    name: str,
    data_dir: Path | None = None,
    n_queries: int = N_QUERIES,
    k: int = GROUND_TRUTH_K,
    seed: int = 42,
) -> Path:
    """Generate a dataset with exact ground truth if not already cached.

    Args:
        name: Dataset name (e.g. "uniform-10k").
        data_dir: Directory to store files. Defaults to project data/.
        n_queries: Number of query points to draw.
        k: Number of ground-truth neighbors per query.
        seed: Seed for the generator. Points and queries come from one draw
            so queries follow the same distribution as the indexed points.

    Returns:
        Path to the HDF5 file.
    """
    if name not in DATASETS:
        raise ValueError(f"Unknown dataset '{name}'. Available: {list(DATASETS.keys())}")

    info = DATASETS[name]
    data_dir = data_dir or DATA_DIR
    data_dir.mkdir(parents=True, exist_ok=True)
    filepath = data_dir / f"{name}.hdf5"

    if filepath.exists():
        return filepath

    print(f"Generating {name} ({info['n_points']} points, metric={info['metric']})...")
    # One draw, split afterwards, so queries land in the same clusters as the points
    drawn = info["generator"](info["n_points"] + n_queries, seed=seed)
    points, queries = drawn[:info["n_points"]], drawn[info["n_points"]:]

    neighbors = np.empty((n_queries, min(k, len(points))), dtype=np.int64)
    distances = np.empty(neighbors.shape, dtype=np.float64)
    batch = 50
    for start in tqdm(range(0, n_queries, batch), desc=f"{name} ground truth"):
        end = min(start + batch, n_queries)
        neighbors[start:end], distances[start:end] = exhaustive_search(
            queries[start:end], points, k=k, metric=info["metric"]
        )

    with h5py.File(filepath, "w") as f:
        f.create_dataset("points", data=points)
        f.create_dataset("queries", data=queries)
        f.create_dataset("neighbors", data=neighbors)
        f.create_dataset("distances", data=distances)
        f.attrs["metric"] = info["metric"]

    return filepath


def load_dataset(name: str, data_dir: Path | None = None) -> dict:
    """Load a dataset, generating it if needed.

    Args:
        name: Dataset name (e.g. "uniform-10k").
        data_dir: Directory to store/find files.

    Returns:
        Dict with keys:
          - points: float64 array (n, 2)
          - queries: float64 array (n_q, 2)
          - neighbors: int64 array (n_q, k) of ground-truth neighbor indices
          - distances: float64 array (n_q, k) of ground-truth metric values
          - metric: metric name used for the ground truth
    """
    filepath = generate_dataset(name, data_dir)

    with h5py.File(filepath, "r") as f:
        points = np.array(f["points"], dtype=np.float64)
        queries = np.array(f["queries"], dtype=np.float64)
        neighbors = np.array(f["neighbors"], dtype=np.int64)
        distances = np.array(f["distances"], dtype=np.float64)
        metric = str(f.attrs["metric"])

    return {
        "points": points,
        "queries": queries,
        "neighbors": neighbors,
        "distances": distances,
        "metric": metric,
    }


def list_datasets() -> list[str]:
    """Return available dataset names."""
    return list(DATASETS.keys())
