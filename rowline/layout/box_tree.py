"""
Box Tree Builder
Turns a classified row into the binary tree the downstream sizer walks.

Every Combined node has exactly two children; three or more items fold
left-associatively, so nesting grows to the left:

    [a, b, c, d]  ->  Combined(Combined(Combined(a, b), c), d)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence, Union

from ..content_types import BoxTreePayload, ContentItem, Direction
from .classifier import LayoutShape, RowLayout


@dataclass(frozen=True, slots=True)
class Leaf:
    item: ContentItem


@dataclass(frozen=True, slots=True)
class Combined:
    direction: Direction
    left: "BoxTree"
    right: "BoxTree"


BoxTree = Union[Leaf, Combined]


def fold(items: Sequence[ContentItem], direction: Direction) -> BoxTree:
    if not items:
        raise ValueError("cannot build a box tree from zero items")
    tree: BoxTree = Leaf(items[0])
    for item in items[1:]:
        tree = Combined(direction, tree, Leaf(item))
    return tree


def build_box_tree(layout: RowLayout) -> BoxTree:
    if layout.shape is LayoutShape.MAIN_STACKED:
        return Combined("horizontal", Leaf(layout.main), fold(layout.stacked, "vertical"))

    if layout.shape is LayoutShape.NESTED_QUAD:
        top1, top2 = layout.top_pair
        return Combined(
            "horizontal",
            Leaf(layout.main),
            Combined(
                "vertical",
                Combined("horizontal", Leaf(top1), Leaf(top2)),
                Leaf(layout.bottom),
            ),
        )

    return fold(layout.items, "horizontal")


def iter_leaves(tree: BoxTree) -> Iterator[ContentItem]:
    """Leaves left to right (top to bottom inside vertical nodes)."""
    if isinstance(tree, Leaf):
        yield tree.item
        return
    yield from iter_leaves(tree.left)
    yield from iter_leaves(tree.right)


def box_tree_to_dict(tree: BoxTree) -> BoxTreePayload:
    if isinstance(tree, Leaf):
        return {"type": "leaf", "id": tree.item.id}
    return {
        "type": "combined",
        "direction": tree.direction,
        "children": [box_tree_to_dict(tree.left), box_tree_to_dict(tree.right)],
    }
