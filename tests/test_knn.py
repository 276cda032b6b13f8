"""Tests for best-first k-NN search."""

import numpy as np
import pytest

from rtree_knn.datasets.synthetic import geographic_points, pack_index, uniform_points
from rtree_knn.geometry.box import BoundingBox
from rtree_knn.geometry.distance import (
    equirectangular_relative,
    haversine_relative,
    spherical_law_of_cosines,
)
from rtree_knn.index.nodes import InternalNode, LeafNode, SpatialIndex, point_to_bbox
from rtree_knn.search.exhaustive import exhaustive_search
from rtree_knn.search.knn import SearchStats, iter_nearest, knn, knn_with_distances


def _leaf(points):
    return LeafNode(list(points), BoundingBox.from_points(points))


def _count_nodes(node):
    if isinstance(node, LeafNode):
        return 1
    return 1 + sum(_count_nodes(c) for c in node.children)


@pytest.fixture
def small_index():
    """Two-level index: one root over two leaves of planar points."""
    left = _leaf([(0, 0), (1, 1)])
    right = _leaf([(5, 5), (5, 6)])
    root = InternalNode([right, left], BoundingBox.union([left.bbox, right.bbox]))
    return SpatialIndex(root, point_to_bbox)


@pytest.fixture
def random_points():
    return uniform_points(2000, seed=7)


class TestKnnBasics:
    def test_two_nearest(self, small_index):
        assert knn(small_index, (0, 0), 2) == [(0, 0), (1, 1)]

    def test_all_items_sorted(self, small_index):
        assert knn(small_index, (6, 6), 10) == [(5, 6), (5, 5), (1, 1), (0, 0)]

    def test_zero_results(self, small_index):
        assert knn(small_index, (0, 0), 0) == []

    def test_negative_n(self, small_index):
        assert knn(small_index, (0, 0), -3) == []

    def test_length_is_min_of_n_and_size(self, small_index):
        for n in range(7):
            assert len(knn(small_index, (2, 2), n)) == min(n, 4)

    def test_empty_leaf_root(self):
        assert knn(SpatialIndex(LeafNode()), (0, 0), 5) == []

    def test_empty_internal_root(self):
        assert knn(SpatialIndex(InternalNode()), (0, 0), 5) == []

    def test_single_leaf_root(self):
        index = SpatialIndex(_leaf([(3, 3), (1, 0), (2, 2)]))
        assert knn(index, (0, 0), 3) == [(1, 0), (2, 2), (3, 3)]

    def test_equal_distances_keep_insertion_order(self):
        index = SpatialIndex(_leaf([(1, 0), (0, 1), (-1, 0), (0, -1)]))
        assert knn(index, (0, 0), 4) == [(1, 0), (0, 1), (-1, 0), (0, -1)]

    def test_query_inside_far_leaf_box(self):
        # Both leaf boxes contain the query, so both expand before any item is returned
        near = _leaf([(0, 0), (10, 10)])
        far = _leaf([(4, 4), (20, 20)])
        root = InternalNode([near, far], BoundingBox.union([near.bbox, far.bbox]))
        assert knn(SpatialIndex(root), (4.5, 4.5), 2) == [(4, 4), (0, 0)]

    def test_invalid_node_type(self):
        with pytest.raises(TypeError, match="LeafNode or InternalNode"):
            knn(SpatialIndex(root="not a node"), (0, 0), 1)

    def test_metric_by_name(self, small_index):
        by_name = knn(small_index, (4, 4), 3, metric="equirectangular")
        by_fn = knn(small_index, (4, 4), 3, metric=equirectangular_relative)
        assert by_name == by_fn


class TestKnnArbitraryItems:
    def test_rectangle_items(self):
        items = [
            {"id": "a", "box": (0, 0, 1, 1)},
            {"id": "b", "box": (4, 4, 8, 8)},
            {"id": "c", "box": (2, 0, 3, 1)},
        ]
        index = SpatialIndex(LeafNode(items), to_bbox=lambda it: BoundingBox(*it["box"]))
        result = knn(index, (5, 5), 3)
        assert [it["id"] for it in result] == ["b", "c", "a"]

    def test_distances_are_box_distances(self):
        items = [(0, 0, 2, 2), (5, 0, 6, 1)]
        index = SpatialIndex(LeafNode(items), to_bbox=lambda b: BoundingBox(*b))
        pairs = knn_with_distances(index, (3, 1), 2)
        assert pairs == [((0, 0, 2, 2), 1), ((5, 0, 6, 1), 4)]


class TestKnnAgainstExhaustive:
    @pytest.mark.parametrize("node_size", [2, 4, 9, 16, 64])
    def test_matches_exhaustive(self, random_points, node_size):
        index = pack_index(random_points, node_size=node_size)
        queries = uniform_points(20, seed=8)
        k = 15
        true_idx, true_dist = exhaustive_search(queries, random_points, k=k)
        for i, q in enumerate(queries):
            pairs = knn_with_distances(index, q, k)
            assert [item for item, _ in pairs] == true_idx[i].tolist()
            np.testing.assert_allclose([d for _, d in pairs], true_dist[i])

    def test_full_scan_sorted(self, random_points):
        index = pack_index(random_points, node_size=8)
        pairs = knn_with_distances(index, (500.0, 500.0), len(random_points) + 10)
        assert len(pairs) == len(random_points)
        dists = np.array([d for _, d in pairs])
        assert np.all(np.diff(dists) >= 0)
        assert sorted(item for item, _ in pairs) == list(range(len(random_points)))

    def test_query_outside_extent(self, random_points):
        index = pack_index(random_points, node_size=16)
        q = np.array([[-500.0, 2000.0]])
        true_idx, _ = exhaustive_search(q, random_points, k=5)
        assert knn(index, q[0], 5) == true_idx[0].tolist()


class TestEarlyTermination:
    def test_nearest_touches_few_nodes(self, random_points):
        index = pack_index(random_points, node_size=8)
        stats = SearchStats()
        knn(index, (250.0, 250.0), 1, stats=stats)
        assert stats.items_returned == 1
        assert stats.nodes_expanded < _count_nodes(index.root) // 4

    def test_more_results_more_work(self, random_points):
        index = pack_index(random_points, node_size=8)
        few, many = SearchStats(), SearchStats()
        knn(index, (250.0, 250.0), 1, stats=few)
        knn(index, (250.0, 250.0), 500, stats=many)
        assert many.nodes_expanded > few.nodes_expanded
        assert many.entries_queued > few.entries_queued

    def test_iter_nearest_is_lazy(self, random_points):
        index = pack_index(random_points, node_size=8)
        stats = SearchStats()
        gen = iter_nearest(index, (0.0, 0.0), stats=stats)
        assert stats.nodes_expanded == 0
        next(gen)
        first = stats.nodes_expanded
        assert 0 < first < _count_nodes(index.root)


class TestGeographicKnn:
    @pytest.mark.parametrize(
        "metric", [haversine_relative, spherical_law_of_cosines, equirectangular_relative]
    )
    def test_single_leaf_matches_exhaustive(self, metric):
        pts = geographic_points(300, lon_range=(-40, 40), lat_range=(-60, 60), seed=9)
        index = SpatialIndex(
            LeafNode(list(range(len(pts)))),
            to_bbox=lambda i: BoundingBox.from_point(pts[i]),
        )
        q = np.array([[5.0, 20.0]])
        true_idx, _ = exhaustive_search(q, pts, k=10, metric=metric)
        assert knn(index, q[0], 10, metric=metric) == true_idx[0].tolist()

    def test_equator_points_exact(self):
        lons = np.linspace(-50, 50, 101)
        pts = np.column_stack([lons, np.zeros_like(lons)])
        index = pack_index(pts, node_size=4)
        result = knn(index, (12.2, 0.0), 3, metric=haversine_relative)
        assert [pts[i][0] for i in result] == [12.0, 13.0, 11.0]

    def test_packed_tree_recall(self):
        pts = geographic_points(3000, lon_range=(-60, 60), lat_range=(-50, 50), seed=10)
        index = pack_index(pts, node_size=16)
        queries = geographic_points(30, lon_range=(-50, 50), lat_range=(-40, 40), seed=11)
        k = 10
        true_idx, _ = exhaustive_search(queries, pts, k=k, metric="haversine")
        hits = 0
        for i, q in enumerate(queries):
            hits += len(set(knn(index, q, k, metric="haversine")) & set(true_idx[i].tolist()))
        assert hits / (k * len(queries)) >= 0.9
