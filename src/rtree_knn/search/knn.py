"""Best-first k-nearest-neighbor search over a bounding-box tree.

Hjaltason and Samet style branch-and-bound: a single min-heap holds both
unexplored subtrees and candidate items, keyed by the minimum distance from
the query point to their bounding box. The closest entry is always expanded
next, so an item popped from the heap is guaranteed to be no farther than
anything still waiting in an unexpanded subtree. Results therefore come out in
ascending order and the search stops as soon as ``n`` items have been popped.
"""

import heapq
import itertools
from dataclasses import dataclass
from typing import Any, Iterator

from ..geometry.box import box_distance
from ..geometry.distance import MetricFn, get_metric
from ..index.nodes import InternalNode, LeafNode, SpatialIndex, TreeNode


@dataclass(frozen=True)
class Subtree:
    """Queue entry for a node still to be expanded."""

    node: TreeNode


@dataclass(frozen=True)
class Candidate:
    """Queue entry for a leaf item ready to be returned."""

    item: Any


@dataclass
class SearchStats:
    """Work counters for one query."""

    nodes_expanded: int = 0
    entries_queued: int = 0
    items_returned: int = 0


def iter_nearest(
    index: SpatialIndex,
    query_point,
    metric: MetricFn | str | None = None,
    stats: SearchStats | None = None,
) -> Iterator[tuple[Any, float]]:
    """Yield ``(item, distance)`` pairs in ascending distance from ``query_point``.

    The traversal is lazy: subtrees are only expanded when the consumer asks
    for more items, so stopping early skips the rest of the index. Items with
    equal distance are yielded in the order they were queued.

    Args:
        index: Index exposing ``root`` and ``to_bbox``.
        query_point: (x, y) or (longitude, latitude), matching the metric.
        metric: Metric function or name. Defaults to squared Euclidean.
        stats: Optional counters updated while the search runs.

    Yields:
        Tuples of (item, distance from query_point to the item's box).
    """
    metric = get_metric(metric)
    to_bbox = index.to_bbox
    queue: list[tuple[float, int, Subtree | Candidate]] = []
    sequence = itertools.count()
    node: TreeNode | None = index.root

    while node is not None:
        if isinstance(node, LeafNode):
            for item in node.children:
                dist = box_distance(query_point, to_bbox(item), metric)
                heapq.heappush(queue, (dist, next(sequence), Candidate(item)))
        elif isinstance(node, InternalNode):
            for child in node.children:
                dist = box_distance(query_point, child.bbox, metric)
                heapq.heappush(queue, (dist, next(sequence), Subtree(child)))
        else:
            raise TypeError(f"Expected LeafNode or InternalNode, got {type(node).__name__}")

        if stats is not None:
            stats.nodes_expanded += 1
            stats.entries_queued += len(node.children)

        # Drain every item that is already closer than any unexpanded subtree
        while queue and isinstance(queue[0][2], Candidate):
            dist, _, entry = heapq.heappop(queue)
            if stats is not None:
                stats.items_returned += 1
            yield entry.item, dist

        node = heapq.heappop(queue)[2].node if queue else None


def knn(
    index: SpatialIndex,
    query_point,
    n: int,
    metric: MetricFn | str | None = None,
    stats: SearchStats | None = None,
) -> list[Any]:
    """Return the ``n`` items closest to ``query_point``, nearest first.

    Fewer than ``n`` items are returned when the index holds fewer. ``n <= 0``
    returns an empty list without touching the index.

    Args:
        index: Index exposing ``root`` and ``to_bbox``.
        query_point: (x, y) or (longitude, latitude), matching the metric.
        n: Maximum number of items to return.
        metric: Metric function or name. Defaults to squared Euclidean.
        stats: Optional counters updated while the search runs.

    Returns:
        List of at most ``n`` items sorted by ascending distance.
    """
    if n <= 0:
        return []
    nearest = iter_nearest(index, query_point, metric, stats)
    return [item for item, _ in itertools.islice(nearest, n)]


def knn_with_distances(
    index: SpatialIndex,
    query_point,
    n: int,
    metric: MetricFn | str | None = None,
    stats: SearchStats | None = None,
) -> list[tuple[Any, float]]:
    """Like :func:`knn` but keeps each item's distance."""
    if n <= 0:
        return []
    return list(itertools.islice(iter_nearest(index, query_point, metric, stats), n))
