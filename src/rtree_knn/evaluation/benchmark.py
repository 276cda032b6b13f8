"""Automated benchmark runner comparing best-first search against baselines."""

from dataclasses import dataclass

import numpy as np
from scipy.spatial import cKDTree
from tqdm import tqdm

from ..datasets.synthetic import pack_index, tree_height
from ..geometry.distance import DistanceMetric
from ..search.exhaustive import exhaustive_search
from ..search.knn import SearchStats, knn_with_distances
from ..utils.timer import timer
from .metrics import memory_usage_bytes, ordering_violations, queries_per_second, recall_at_k

METHODS = ("best_first", "exhaustive", "ckdtree")


@dataclass
class BenchmarkResult:
    """Result from a single benchmark run."""

    method: str
    params: dict
    metric: str = "euclidean"
    k: int = 10
    recall_at_1: float = 0.0
    recall_at_k: float = 0.0
    qps: float = 0.0
    build_time: float = 0.0
    memory_bytes: int = 0
    mean_nodes_expanded: float = 0.0
    ordering_violations: int = 0


def run_single_benchmark(
    method: str,
    params: dict,
    points: np.ndarray,
    queries: np.ndarray,
    ground_truth: np.ndarray,
    k: int = 10,
    metric: str = "euclidean",
    warmup_queries: int = 5,
) -> BenchmarkResult:
    """Run a single benchmark configuration.

    Args:
        method: "best_first", "exhaustive" or "ckdtree".
        params: Method-specific parameters (e.g. {"node_size": 16}).
        points: Indexed points, shape (n, 2).
        queries: Query points, shape (n_q, 2).
        ground_truth: Ground truth neighbor indices, shape (n_q, k_gt).
        k: Number of neighbors to retrieve.
        metric: Metric name. "ckdtree" only supports "euclidean".
        warmup_queries: Number of warmup queries before timing.

    Returns:
        BenchmarkResult with metrics.
    """
    if method not in METHODS:
        raise ValueError(f"Unknown method: {method}")
    metric = str(DistanceMetric(metric))
    if method == "ckdtree" and metric != "euclidean":
        raise ValueError(f"ckdtree only supports the euclidean metric, got {metric}")

    result = BenchmarkResult(method=method, params=dict(params), metric=metric, k=k)
    warmup = queries[:warmup_queries] if queries.shape[0] > warmup_queries else queries[:0]
    mem_before = memory_usage_bytes()

    if method == "best_first":
        with timer() as t_build:
            index = pack_index(points, node_size=params.get("node_size", 16))
        result.params["height"] = tree_height(index)
        result.memory_bytes = max(0, memory_usage_bytes() - mem_before)

        for q in warmup:
            knn_with_distances(index, q, k, metric)

        stats = SearchStats()
        found = []
        with timer(n_ops=queries.shape[0]) as t_search:
            for q in queries:
                found.append(knn_with_distances(index, q, k, metric, stats))
        pred_indices = [[item for item, _ in row] for row in found]
        result.ordering_violations = sum(
            ordering_violations([dist for _, dist in row]) for row in found
        )
        result.mean_nodes_expanded = stats.nodes_expanded / max(1, queries.shape[0])

    elif method == "exhaustive":
        # Nothing to build; the raw array is the index
        with timer() as t_build:
            database = np.ascontiguousarray(points, dtype=np.float64)
        exhaustive_search(warmup, database, k=k, metric=metric)
        with timer(n_ops=queries.shape[0]) as t_search:
            pred_indices, _ = exhaustive_search(queries, database, k=k, metric=metric)

    else:
        with timer() as t_build:
            tree = cKDTree(points, leafsize=params.get("leafsize", 16))
        result.memory_bytes = max(0, memory_usage_bytes() - mem_before)
        if warmup.shape[0]:
            tree.query(warmup, k=k)
        with timer(n_ops=queries.shape[0]) as t_search:
            _, pred_indices = tree.query(queries, k=k)
        pred_indices = np.asarray(pred_indices).reshape(queries.shape[0], -1)

    result.build_time = t_build.elapsed
    result.qps = queries_per_second(queries.shape[0], t_search.elapsed)
    result.recall_at_1 = recall_at_k(pred_indices, ground_truth, k=1)
    result.recall_at_k = recall_at_k(pred_indices, ground_truth, k=min(k, ground_truth.shape[1]))
    return result


def run_benchmark_sweep(
    points: np.ndarray,
    queries: np.ndarray,
    ground_truth: np.ndarray,
    k: int = 10,
    metric: str = "euclidean",
    node_sizes: list[int] | None = None,
    ks: list[int] | None = None,
) -> list[BenchmarkResult]:
    """Run full benchmark sweep: best-first over node sizes plus baselines, per k.

    Args:
        points: Indexed points.
        queries: Query points.
        ground_truth: Ground truth neighbor indices.
        k: Number of neighbors when ``ks`` is not given.
        metric: Metric name used for search and ground truth.
        node_sizes: Node capacities to try. Defaults to [4, 8, 16, 32, 64].
        ks: Neighbor counts to sweep. Defaults to [k].

    Returns:
        List of BenchmarkResults, grouped by k in the order of ``ks``.
    """
    if node_sizes is None:
        node_sizes = [4, 8, 16, 32, 64]
    if ks is None:
        ks = [k]

    results = []

    for k in ks:
        print(f" k={k}")
        for node_size in tqdm(node_sizes, desc=f"best-first sweep (k={k})"):
            try:
                r = run_single_benchmark(
                    "best_first", {"node_size": node_size},
                    points, queries, ground_truth, k=k, metric=metric,
                )
                results.append(r)
                print(f"  best_first(node_size={node_size}): recall@{k}={r.recall_at_k:.3f}, "
                      f"QPS={r.qps:.0f}, nodes/query={r.mean_nodes_expanded:.1f}")
            except Exception as e:
                print(f"  best_first(node_size={node_size}): FAILED - {e}")

        try:
            r = run_single_benchmark(
                "exhaustive", {}, points, queries, ground_truth, k=k, metric=metric
            )
            results.append(r)
            print(f"  exhaustive: recall@{k}={r.recall_at_k:.3f}, QPS={r.qps:.0f}")
        except Exception as e:
            print(f"  exhaustive: FAILED - {e}")

        if metric == "euclidean":
            try:
                r = run_single_benchmark(
                    "ckdtree", {"leafsize": 16}, points, queries, ground_truth, k=k, metric=metric
                )
                results.append(r)
                print(f"  ckdtree: recall@{k}={r.recall_at_k:.3f}, QPS={r.qps:.0f}")
            except Exception as e:
                print(f"  ckdtree: FAILED - {e}")

    return results
