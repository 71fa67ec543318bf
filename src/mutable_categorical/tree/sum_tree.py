"""Self-adjusting weighted sum tree for O(log n) proportional sampling."""

from __future__ import annotations

import heapq
import itertools
import math
from collections import deque
from typing import Iterable, Iterator

from mutable_categorical.errors import InvalidOperation, OutOfRange
from mutable_categorical.tree import register
from mutable_categorical.tree.node import Internal, Leaf, Node, join


@register("plain")
class SumTree:
    """A full binary tree where each leaf holds a keyed weight and internal
    nodes store the sum of their children, heavier child first.

    New leaves are pushed down the light side until they meet a subtree no
    heavier than themselves, which keeps heavy items shallow without a
    global rebuild.  The placement is greedy: after many updates the tree
    can drift away from the Huffman optimum (see :class:`RotatingSumTree`).
    """

    def __init__(self) -> None:
        self.root: Node | None = None
        # The distribution whose key index mirrors this tree, if any
        self.owner: object | None = None

    # ── queries ───────────────────────────────────────────────────────────

    @property
    def total(self) -> float:
        """Sum of all leaf weights (root value)."""
        return 0.0 if self.root is None else self.root.weight

    def find(self, point: float) -> Leaf:
        """Return the leaf whose cumulative-weight interval contains *point*.

        Raises :class:`OutOfRange` unless ``0 <= point < total``.
        """
        if self.root is None or not 0.0 <= point < self.root.weight:
            raise OutOfRange(point, self.total)
        return self.descend(point)

    def descend(self, point: float) -> Leaf:
        """Walk from the root towards *point* without range checking.

        A point equal to a heavy child's weight goes to the heavy side.
        """
        node = self.root
        if node is None:
            raise InvalidOperation("Cannot descend an empty tree")
        while isinstance(node, Internal):
            if point <= node.heavy.weight:
                node = node.heavy
            else:
                point -= node.heavy.weight
                node = node.light
        return node

    def leaves(self) -> Iterator[Leaf]:
        """Yield leaves in cumulative order (heavy side first)."""
        stack = [] if self.root is None else [self.root]
        while stack:
            node = stack.pop()
            if isinstance(node, Internal):
                stack.append(node.light)
                stack.append(node.heavy)
            else:
                yield node

    def weighted_path_length(self) -> float:
        """Sum of internal-node weights.

        Divided by :attr:`total` this is the expected number of comparisons
        per sample.
        """
        length = 0.0
        stack = [] if self.root is None else [self.root]
        while stack:
            node = stack.pop()
            if isinstance(node, Internal):
                length += node.weight
                stack.append(node.heavy)
                stack.append(node.light)
        return length

    def depth(self) -> int:
        """Number of edges on the longest root-to-leaf path."""
        deepest = 0
        stack = [] if self.root is None else [(self.root, 0)]
        while stack:
            node, level = stack.pop()
            if isinstance(node, Internal):
                stack.append((node.heavy, level + 1))
                stack.append((node.light, level + 1))
            else:
                deepest = max(deepest, level)
        return deepest

    # ── mutation ──────────────────────────────────────────────────────────

    def insert(self, leaf: Leaf) -> Node:
        """Add a parentless *leaf* and return the new root."""
        if leaf.parent is not None:
            raise InvalidOperation(f"{leaf!r} is still attached to a tree")
        if self.root is None:
            self.root = leaf
            return leaf

        node = self.root
        while isinstance(node, Internal) and node.weight > leaf.weight:
            node = node.light

        parent = node.parent
        joined = join(node, leaf)
        joined.parent = parent
        if parent is not None:
            parent.replace_child(node, joined)
        self.root = self.update_to_root(joined)
        return self.root

    def detach(self, leaf: Node) -> Node | None:
        """Remove *leaf*, promoting its sibling, and return the new root.

        The detached leaf keeps its key and weight and may be reinserted.
        """
        if not isinstance(leaf, Leaf):
            raise InvalidOperation("Trying to detach an internal node")
        top: Node = leaf
        while top.parent is not None:
            top = top.parent
        if top is not self.root:
            raise InvalidOperation(f"{leaf!r} does not belong to this tree")

        parent = leaf.parent
        if parent is None:
            self.root = None
            return None

        sibling = parent.sibling_of(leaf)
        grandparent = parent.parent
        sibling.parent = grandparent
        leaf.parent = None
        if grandparent is None:
            self.root = sibling
        else:
            grandparent.replace_child(parent, sibling)
            self.root = self.update_to_root(grandparent)
        return self.root

    def update_to_root(self, node: Internal) -> Node:
        """Refresh every internal node from *node* up; return the root."""
        while True:
            node.refresh()
            if node.parent is None:
                return node
            node = node.parent

    def clear(self) -> None:
        self.root = None

    # ── bulk construction ─────────────────────────────────────────────────

    def build_huffman(self, leaves: Iterable[Leaf]) -> Node | None:
        """Replace the tree with the Huffman tree of *leaves*.

        Repeatedly joins the two lightest nodes, which minimises the
        weighted path length for this fixed set of weights.  O(n log n).
        """
        counter = itertools.count()
        heap: list[tuple[float, int, Node]] = []
        for leaf in leaves:
            leaf.parent = None
            heap.append((leaf.weight, next(counter), leaf))
        heapq.heapify(heap)

        while len(heap) > 1:
            _, _, first = heapq.heappop(heap)
            _, _, second = heapq.heappop(heap)
            joined = join(first, second)
            heapq.heappush(heap, (joined.weight, next(counter), joined))

        self.root = heap[0][2] if heap else None
        return self.root

    def build_balanced(self, leaves: Iterable[Leaf]) -> Node | None:
        """Replace the tree with a minimum-depth tree over *leaves*.

        Joins nodes pairwise in input order.  O(n), but ignores weights when
        choosing the shape.
        """
        queue: deque[Node] = deque()
        for leaf in leaves:
            leaf.parent = None
            queue.append(leaf)

        while len(queue) > 1:
            first = queue.popleft()
            second = queue.popleft()
            queue.append(join(first, second))

        self.root = queue[0] if queue else None
        return self.root

    # ── diagnostics ───────────────────────────────────────────────────────

    def validate(self) -> None:
        """Check the sum, ordering and parent-link invariants everywhere.

        Raises :class:`InvalidOperation` describing the first violation.
        """
        if self.root is not None and self.root.parent is not None:
            raise InvalidOperation("Root has a parent")
        stack = [] if self.root is None else [self.root]
        while stack:
            node = stack.pop()
            if isinstance(node, Leaf):
                if not (math.isfinite(node.weight) and node.weight > 0.0):
                    raise InvalidOperation(f"{node!r} has an invalid weight")
                continue
            for child in (node.heavy, node.light):
                if child.parent is not node:
                    raise InvalidOperation(f"Broken parent link below {node!r}")
                stack.append(child)
            expected = node.heavy.weight + node.light.weight
            if not math.isclose(node.weight, expected, rel_tol=1e-12, abs_tol=1e-300):
                raise InvalidOperation(f"{node!r} caches {node.weight}, children sum to {expected}")
            if node.light.weight > node.heavy.weight:
                raise InvalidOperation(f"Light child outweighs heavy child in {node!r}")
