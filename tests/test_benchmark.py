"""Tests for the benchmark runner and plots."""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from rtree_knn.datasets.synthetic import geographic_points, uniform_points
from rtree_knn.evaluation.benchmark import run_benchmark_sweep, run_single_benchmark
from rtree_knn.evaluation.plotting import plot_qps_vs_k
from rtree_knn.search.exhaustive import exhaustive_search


@pytest.fixture
def planar_data():
    points = uniform_points(1500, seed=21)
    queries = uniform_points(20, seed=22)
    gt, _ = exhaustive_search(queries, points, k=10)
    return points, queries, gt


class TestSingleBenchmark:
    def test_best_first_is_exact(self, planar_data):
        points, queries, gt = planar_data
        r = run_single_benchmark("best_first", {"node_size": 8}, points, queries, gt, k=10)
        assert r.recall_at_1 == 1.0
        assert r.recall_at_k == 1.0
        assert r.ordering_violations == 0
        assert r.params["height"] >= 2
        assert 0 < r.mean_nodes_expanded
        assert r.qps > 0

    def test_exhaustive(self, planar_data):
        points, queries, gt = planar_data
        r = run_single_benchmark("exhaustive", {}, points, queries, gt, k=10)
        assert r.recall_at_k == 1.0
        assert r.mean_nodes_expanded == 0.0

    def test_ckdtree(self, planar_data):
        points, queries, gt = planar_data
        r = run_single_benchmark("ckdtree", {"leafsize": 8}, points, queries, gt, k=10)
        assert r.recall_at_k == 1.0

    def test_ckdtree_rejects_geographic(self, planar_data):
        points, queries, gt = planar_data
        with pytest.raises(ValueError, match="euclidean"):
            run_single_benchmark("ckdtree", {}, points, queries, gt, metric="haversine")

    def test_unknown_method(self, planar_data):
        points, queries, gt = planar_data
        with pytest.raises(ValueError, match="Unknown method"):
            run_single_benchmark("lsh", {}, points, queries, gt)

    def test_geographic_best_first(self):
        points = geographic_points(1000, lon_range=(-40, 40), lat_range=(-40, 40), seed=23)
        queries = geographic_points(10, lon_range=(-30, 30), lat_range=(-30, 30), seed=24)
        gt, _ = exhaustive_search(queries, points, k=5, metric="haversine")
        r = run_single_benchmark(
            "best_first", {"node_size": 16}, points, queries, gt, k=5, metric="haversine"
        )
        assert r.metric == "haversine"
        assert r.recall_at_k >= 0.9


class TestSweep:
    def test_planar_sweep(self, planar_data):
        points, queries, gt = planar_data
        results = run_benchmark_sweep(points, queries, gt, k=10, node_sizes=[4, 16])
        assert [r.method for r in results] == ["best_first", "best_first", "exhaustive", "ckdtree"]
        assert all(r.recall_at_k == 1.0 for r in results)

    def test_geographic_sweep_skips_ckdtree(self):
        points = geographic_points(500, lon_range=(-20, 20), lat_range=(-20, 20), seed=25)
        queries = geographic_points(5, lon_range=(-15, 15), lat_range=(-15, 15), seed=26)
        gt, _ = exhaustive_search(queries, points, k=5, metric="equirectangular")
        results = run_benchmark_sweep(
            points, queries, gt, k=5, metric="equirectangular", node_sizes=[8]
        )
        assert [r.method for r in results] == ["best_first", "exhaustive"]

    def test_sweep_over_k(self, planar_data):
        points, queries, gt = planar_data
        results = run_benchmark_sweep(points, queries, gt, node_sizes=[8], ks=[1, 5])
        assert [(r.method, r.k) for r in results] == [
            ("best_first", 1), ("exhaustive", 1), ("ckdtree", 1),
            ("best_first", 5), ("exhaustive", 5), ("ckdtree", 5),
        ]
        assert all(r.recall_at_k == 1.0 for r in results)

    def test_ks_defaults_to_k(self, planar_data):
        points, queries, gt = planar_data
        results = run_benchmark_sweep(points, queries, gt, k=3, node_sizes=[8])
        assert {r.k for r in results} == {3}


def test_plot_qps_vs_k(planar_data, tmp_path):
    points, queries, gt = planar_data
    results = run_benchmark_sweep(points, queries, gt, node_sizes=[8], ks=[1, 10])
    path = tmp_path / "qps_vs_k.png"
    plot_qps_vs_k(results, save_path=path)
    assert path.exists()
    assert path.stat().st_size > 0
