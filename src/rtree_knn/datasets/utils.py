"""Dataset utility functions: stats and nearest-neighbor spacing."""

import numpy as np

from ..geometry.distance import DistanceMetric
from ..search.exhaustive import exhaustive_search


def metric_to_length(values: np.ndarray, metric: str = "euclidean") -> np.ndarray:
    """Convert raw metric values to a readable length.

    Planar squared distances become plain distances; the geographic metrics
    become arc lengths in degrees.

    Args:
        values: Metric values as returned by the metric functions.
        metric: Name of the metric that produced them.

    Returns:
        Array of lengths, same shape as ``values``.
    """
    metric = DistanceMetric(metric)
    values = np.maximum(np.asarray(values, dtype=np.float64), 0.0)
    if metric is DistanceMetric.Euclidean:
        return np.sqrt(values)
    if metric is DistanceMetric.Haversine:
        return np.degrees(2.0 * np.arcsin(np.sqrt(np.minimum(values, 1.0))))
    if metric is DistanceMetric.SphericalCosine:
        return np.degrees(values)
    return np.degrees(np.sqrt(values))


def dataset_stats(
    points: np.ndarray,
    metric: str = "euclidean",
    sample: int = 200,
    seed: int = 0,
) -> dict:
    """Compute basic statistics for a point set.

    The spacing figures come from the exact nearest neighbor of a random
    sample of points, excluding the point itself, measured with ``metric``.
    They are planar distances for "euclidean" and arc degrees otherwise.

    Args:
        points: Point array of shape (n, 2).
        metric: Metric name the dataset is searched with.
        sample: Number of points to measure spacing on.
        seed: Seed for the sample.

    Returns:
        Dict with keys: n, min_x, min_y, max_x, max_y, mean_spacing,
        max_spacing, spacing_units.
    """
    n = points.shape[0]
    stats = {
        "n": n,
        "min_x": float(np.min(points[:, 0])),
        "min_y": float(np.min(points[:, 1])),
        "max_x": float(np.max(points[:, 0])),
        "max_y": float(np.max(points[:, 1])),
        "mean_spacing": 0.0,
        "max_spacing": 0.0,
        "spacing_units": "planar" if DistanceMetric(metric) is DistanceMetric.Euclidean else "arc degrees",
    }
    if n < 2:
        return stats

    rng = np.random.default_rng(seed)
    idx = rng.choice(n, size=min(sample, n), replace=False)
    _, distances = exhaustive_search(points[idx], points, k=2, metric=metric)
    # Column 0 is the point itself at distance 0
    spacing = metric_to_length(distances[:, 1], metric)
    stats["mean_spacing"] = float(np.mean(spacing))
    stats["max_spacing"] = float(np.max(spacing))
    return stats
