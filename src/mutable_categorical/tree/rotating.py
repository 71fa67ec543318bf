"""Sum tree variant that rotates on weight imbalance."""

from __future__ import annotations

from mutable_categorical.errors import InvalidOperation
from mutable_categorical.tree import register
from mutable_categorical.tree.node import Internal, Node
from mutable_categorical.tree.sum_tree import SumTree


@register("rotating")
class RotatingSumTree(SumTree):
    """Sum tree that rotates a heavy grandchild upward when it outweighs
    its parent's light sibling.

    The rotation is the AVL single rotation, triggered by weight instead of
    height.  It stops heavy leaves from sinking as a side effect of repeated
    insert/remove cycles, so the weighted path length stays near the Huffman
    bound under churn instead of only right after construction.
    """

    def update_to_root(self, node: Internal) -> Node:
        while True:
            node.refresh()
            heavy = node.heavy
            if isinstance(heavy, Internal) and node.light.weight < heavy.heavy.weight:
                self._rotate(node)
                node = heavy
            if node.parent is None:
                return node
            node = node.parent

    @staticmethod
    def _rotate(node: Internal) -> None:
        """Promote ``node.heavy`` into *node*'s slot.

        *node* becomes the promoted child's light child and inherits its
        former light child.
        """
        pivot = node.heavy
        if not isinstance(pivot, Internal):
            raise InvalidOperation("Cannot rotate a node whose heavy child is a leaf")
        parent = node.parent
        if parent is not None:
            parent.replace_child(node, pivot)
        pivot.parent = parent

        moved = pivot.light
        moved.parent = node
        node.heavy = moved
        node.parent = pivot
        pivot.light = node

        node.refresh()
        pivot.refresh()
