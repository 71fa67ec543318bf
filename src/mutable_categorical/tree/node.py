"""Node types for the weighted sum tree.

A tree node is either a :class:`Leaf`, which carries a user key and its
weight, or an :class:`Internal` node, which caches the summed weight of its
two children.  The two are deliberately unrelated classes; callers tell them
apart with ``isinstance``.
"""

from __future__ import annotations

from typing import Any, Union

from mutable_categorical.errors import InvalidOperation


class Leaf:
    """A keyed item with a weight."""

    __slots__ = ("key", "weight", "parent")

    def __init__(self, key: Any, weight: float) -> None:
        self.key = key
        self.weight = weight
        self.parent: Internal | None = None

    def __repr__(self) -> str:
        return f"Leaf({self.key!r}, {self.weight!r})"


class Internal:
    """Aggregates two subtrees, keeping the heavier one first.

    Invariants: ``weight == heavy.weight + light.weight`` and
    ``heavy.weight >= light.weight``.
    """

    __slots__ = ("heavy", "light", "weight", "parent")

    def __init__(self, heavy: Node, light: Node) -> None:
        self.heavy = heavy
        self.light = light
        self.weight = heavy.weight + light.weight
        self.parent: Internal | None = None

    def refresh(self) -> None:
        """Recompute the cached weight and restore heavy-first order."""
        self.weight = self.heavy.weight + self.light.weight
        if self.light.weight > self.heavy.weight:
            self.heavy, self.light = self.light, self.heavy

    def replace_child(self, old: Node, new: Node) -> None:
        """Put *new* in the slot currently held by *old*."""
        if old is self.heavy:
            self.heavy = new
        elif old is self.light:
            self.light = new
        else:
            raise InvalidOperation("Trying to replace a node that is not a child")

    def sibling_of(self, child: Node) -> Node:
        if child is self.heavy:
            return self.light
        if child is self.light:
            return self.heavy
        raise InvalidOperation("Node is not a child of this parent")

    def __repr__(self) -> str:
        return f"Internal(weight={self.weight!r})"


Node = Union[Leaf, Internal]


def join(first: Node, second: Node) -> Internal:
    """Create a parentless internal node over *first* and *second*.

    The strictly heavier node becomes the heavy child; on a tie *second*
    does.
    """
    if first.weight > second.weight:
        node = Internal(first, second)
    else:
        node = Internal(second, first)
    first.parent = node
    second.parent = node
    return node
