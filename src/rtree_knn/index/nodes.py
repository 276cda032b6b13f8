"""Read-only view of a hierarchical bounding-box index.

The search only needs three things from an index: its root node, the node
variant (leaf or internal), and a way to get the bounding box of each child.
Internal nodes carry a ``bbox`` per child node; leaf children are arbitrary
items whose box comes from the index's ``to_bbox`` function.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Union

from ..geometry.box import BoundingBox


@dataclass
class LeafNode:
    """Node whose children are indexed items."""

    children: list[Any] = field(default_factory=list)
    bbox: BoundingBox | None = None


@dataclass
class InternalNode:
    """Node whose children are subtrees, each with its own ``bbox``."""

    children: list["TreeNode"] = field(default_factory=list)
    bbox: BoundingBox | None = None


TreeNode = Union[LeafNode, InternalNode]


def point_to_bbox(item) -> BoundingBox:
    """``to_bbox`` for indices whose items are (x, y) points."""
    return BoundingBox.from_point(item)


@dataclass
class SpatialIndex:
    """An index root paired with the function that boxes its leaf items.

    Args:
        root: Root node of the tree.
        to_bbox: Maps a leaf item to its bounding box.
    """

    root: TreeNode
    to_bbox: Callable[[Any], BoundingBox] = point_to_bbox

    def __len__(self) -> int:
        return count_items(self.root)


def count_items(node: TreeNode) -> int:
    """Number of leaf items below ``node``."""
    if isinstance(node, LeafNode):
        return len(node.children)
    return sum(count_items(child) for child in node.children)
