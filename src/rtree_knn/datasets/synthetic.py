"""Synthetic point sets and a static sort-tile packer to index them.

The packer exists so searches have a realistic tree to run against in tests
and benchmarks. It builds the tree once, bottom-up, and never modifies it.
"""

import math

import numpy as np

from ..geometry.box import BoundingBox
from ..index.nodes import InternalNode, LeafNode, SpatialIndex


def uniform_points(
    n: int,
    extent: tuple[float, float, float, float] = (0.0, 0.0, 1000.0, 1000.0),
    seed: int = 42,
) -> np.ndarray:
    """Uniform planar points inside ``extent`` = (min_x, min_y, max_x, max_y).

    Returns:
        float64 array of shape (n, 2).
    """
    rng = np.random.default_rng(seed)
    min_x, min_y, max_x, max_y = extent
    xs = rng.uniform(min_x, max_x, n)
    ys = rng.uniform(min_y, max_y, n)
    return np.column_stack([xs, ys])


def clustered_points(
    n: int,
    n_clusters: int = 20,
    spread: float = 15.0,
    extent: tuple[float, float, float, float] = (0.0, 0.0, 1000.0, 1000.0),
    seed: int = 42,
) -> np.ndarray:
    """Gaussian blobs around uniformly placed centers, clipped to ``extent``."""
    rng = np.random.default_rng(seed)
    centers = uniform_points(n_clusters, extent, seed=seed + 1)
    labels = rng.integers(0, n_clusters, n)
    pts = centers[labels] + rng.normal(scale=spread, size=(n, 2))
    min_x, min_y, max_x, max_y = extent
    pts[:, 0] = np.clip(pts[:, 0], min_x, max_x)
    pts[:, 1] = np.clip(pts[:, 1], min_y, max_y)
    return pts


def geographic_points(
    n: int,
    lon_range: tuple[float, float] = (-180.0, 180.0),
    lat_range: tuple[float, float] = (-85.0, 85.0),
    seed: int = 42,
) -> np.ndarray:
    """Points uniformly distributed over a lon/lat patch of the sphere.

    Latitude is drawn uniformly in sin(latitude) so points do not bunch up
    towards the poles.

    Returns:
        float64 array of shape (n, 2) holding (longitude, latitude) degrees.
    """
    rng = np.random.default_rng(seed)
    lons = rng.uniform(lon_range[0], lon_range[1], n)
    sin_lo, sin_hi = np.sin(np.radians(lat_range))
    lats = np.degrees(np.arcsin(rng.uniform(sin_lo, sin_hi, n)))
    return np.column_stack([lons, lats])


def _sort_tile_groups(centers: np.ndarray, node_size: int) -> list[np.ndarray]:
    """Split rows of ``centers`` into groups of at most ``node_size``.

    Rows are sorted by x into vertical slices, then by y within each slice,
    and each slice is cut into consecutive runs.
    """
    n = centers.shape[0]
    n_groups = math.ceil(n / node_size)
    n_slices = math.ceil(math.sqrt(n_groups))
    slice_size = node_size * math.ceil(n_groups / n_slices)

    by_x = np.argsort(centers[:, 0], kind="stable")
    groups = []
    for start in range(0, n, slice_size):
        strip = by_x[start:start + slice_size]
        strip = strip[np.argsort(centers[strip, 1], kind="stable")]
        groups.extend(strip[i:i + node_size] for i in range(0, len(strip), node_size))
    return groups


def pack_index(points: np.ndarray, node_size: int = 16) -> SpatialIndex:
    """Pack points into a static tree whose leaf items are row indices.

    Args:
        points: Array of shape (n, 2).
        node_size: Maximum children per node, at least 2.

    Returns:
        SpatialIndex whose ``to_bbox`` maps a row index to its point's box.
    """
    if node_size < 2:
        raise ValueError(f"node_size must be >= 2, got {node_size}")
    points = np.asarray(points, dtype=np.float64).reshape(-1, 2)

    def to_bbox(i: int) -> BoundingBox:
        return BoundingBox.from_point(points[i])

    if points.shape[0] == 0:
        return SpatialIndex(LeafNode(), to_bbox)

    nodes = [
        LeafNode([int(i) for i in group], BoundingBox.from_points(points[group]))
        for group in _sort_tile_groups(points, node_size)
    ]
    while len(nodes) > 1:
        centers = np.array([
            [(nd.bbox.min_x + nd.bbox.max_x) / 2.0, (nd.bbox.min_y + nd.bbox.max_y) / 2.0]
            for nd in nodes
        ])
        nodes = [
            InternalNode(
                [nodes[i] for i in group],
                BoundingBox.union(nodes[i].bbox for i in group),
            )
            for group in _sort_tile_groups(centers, node_size)
        ]
    return SpatialIndex(nodes[0], to_bbox)


def tree_height(index: SpatialIndex) -> int:
    """Number of levels from the root down to the leaves."""
    height = 1
    node = index.root
    while isinstance(node, InternalNode):
        node = node.children[0]
        height += 1
    return height
