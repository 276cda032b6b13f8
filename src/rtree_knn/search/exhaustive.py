"""Brute-force exact k-NN search baseline."""

import numpy as np

from ..geometry.distance import MetricFn, get_metric


def pairwise_distances(
    queries: np.ndarray,
    points: np.ndarray,
    metric: MetricFn | str | None = None,
) -> np.ndarray:
    """Metric value from every query to every point.

    Args:
        queries: Query points of shape (n_q, 2).
        points: Indexed points of shape (n, 2).
        metric: Metric function or name. Defaults to squared Euclidean.

    Returns:
        float64 array of shape (n_q, n).
    """
    metric = get_metric(metric)
    # Metrics index coordinates as p[0], p[1]; transpose to broadcast over points
    return np.asarray(
        metric(queries.T[:, :, np.newaxis], points.T[:, np.newaxis, :]),
        dtype=np.float64,
    )


def exhaustive_search(
    queries: np.ndarray,
    points: np.ndarray,
    k: int = 10,
    metric: MetricFn | str | None = None,
    batch_size: int = 256,
) -> tuple[np.ndarray, np.ndarray]:
    """Exact k-nearest neighbor search by scanning every point.

    Args:
        queries: Query points of shape (n_q, 2).
        points: Indexed points of shape (n, 2).
        k: Number of neighbors to return.
        metric: Metric function or name. Defaults to squared Euclidean.
        batch_size: Queries scored per step, bounding the (batch, n) matrix.

    Returns:
        indices: int64 array of shape (n_q, min(k, n)), nearest first.
        distances: float64 array of shape (n_q, min(k, n)) with metric values.
    """
    n_q = queries.shape[0]
    n_db = points.shape[0]
    k = max(0, min(k, n_db))

    all_indices = np.empty((n_q, k), dtype=np.int64)
    all_distances = np.empty((n_q, k), dtype=np.float64)
    if k == 0:
        return all_indices, all_distances

    for start in range(0, n_q, batch_size):
        end = min(start + batch_size, n_q)
        dists = pairwise_distances(queries[start:end], points, metric)
        rows = np.arange(end - start)[:, np.newaxis]

        # argpartition is faster than full sort for large n
        if k < n_db:
            top_k_idx = np.argpartition(dists, k - 1, axis=1)[:, :k]
        else:
            top_k_idx = np.broadcast_to(np.arange(n_db), (end - start, n_db))
        top_k_dists = dists[rows, top_k_idx]
        # stable so equal distances keep index order
        sorted_order = np.argsort(top_k_dists, axis=1, kind="stable")
        all_indices[start:end] = top_k_idx[rows, sorted_order]
        all_distances[start:end] = top_k_dists[rows, sorted_order]

    return all_indices, all_distances
