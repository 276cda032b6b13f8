"""Evaluation metrics: recall@k, ordering violations, QPS, memory usage."""

import numpy as np
import psutil


def recall_at_k(predicted, ground_truth: np.ndarray, k: int | None = None) -> float:
    """Compute mean recall@k.

    Args:
        predicted: Predicted neighbor indices per query. Either an array of
            shape (n_q, k_pred) or a list of sequences, which may be ragged.
        ground_truth: True neighbor indices, shape (n_q, k_true).
        k: Number of neighbors to consider. If None, uses k_true.

    Returns:
        Mean recall@k across all queries.
    """
    n_q = ground_truth.shape[0]
    if k is None:
        k = ground_truth.shape[1]
    if n_q == 0 or k == 0:
        return 1.0

    recalls = np.zeros(n_q)
    for i in range(n_q):
        pred_set = set(np.asarray(predicted[i][:k]).tolist())
        gt_set = set(ground_truth[i, :k].tolist())
        recalls[i] = len(pred_set & gt_set) / len(gt_set)

    return float(np.mean(recalls))


def ordering_violations(distances, tol: float = 0.0) -> int:
    """Count adjacent pairs where a later result is closer than an earlier one.

    Args:
        distances: Sequence of distances in the order results were returned.
        tol: Decreases no larger than this are not counted.
    """
    d = np.asarray(distances, dtype=np.float64)
    if d.size < 2:
        return 0
    return int(np.sum(np.diff(d) < -tol))


def queries_per_second(n_queries: int, elapsed_seconds: float) -> float:
    """Compute queries per second.

    Args:
        n_queries: Number of queries processed.
        elapsed_seconds: Wall-clock time in seconds.

    Returns:
        QPS value.
    """
    if elapsed_seconds <= 0:
        return float("inf")
    return n_queries / elapsed_seconds


def memory_usage_bytes() -> int:
    """Return current process RSS memory in bytes."""
    return psutil.Process().memory_info().rss
