"""Mutable weighted categorical distribution backed by a sum tree."""

from __future__ import annotations

import math
import numbers
from typing import Any, Hashable, Iterable, Iterator, Mapping, MutableMapping, TypeVar, Union

import numpy as np

from mutable_categorical.errors import EmptyDistribution, InvalidOperation, InvalidWeight, KeyNotFound
from mutable_categorical.tree import create_tree
from mutable_categorical.tree.node import Leaf
from mutable_categorical.tree.sum_tree import SumTree

K = TypeVar("K", bound=Hashable)

WeightSource = Union[Mapping[Any, float], Iterable[tuple[Any, float]]]


def _check_weight(weight: Any) -> float:
    if isinstance(weight, bool) or not isinstance(weight, numbers.Real):
        raise InvalidWeight(f"Weight must be a real number, got {weight!r}")
    try:
        value = float(weight)
    except OverflowError:
        raise InvalidWeight(f"Weight is too large to represent, got {weight!r}") from None
    if not math.isfinite(value) or value < 0.0:
        raise InvalidWeight(f"Weight must be finite and non-negative, got {weight!r}")
    return value


def _collect(items: WeightSource) -> dict[Any, float]:
    """Validate bulk input; later duplicates win and zero weights are dropped."""
    pairs = items.items() if isinstance(items, Mapping) else items
    weights: dict[Any, float] = {}
    for key, weight in pairs:
        weights[key] = _check_weight(weight)
    return {key: weight for key, weight in weights.items() if weight > 0.0}


class CategoricalDistribution(MutableMapping[K, float]):
    """A mapping from keys to non-negative weights that can be sampled.

    Each key is drawn with probability ``weight / total``.  Lookup is O(1);
    setting, removing and sampling are O(depth) on the backing
    :class:`SumTree`, which keeps heavy keys near the root.  Setting a
    weight to zero removes the key.

    The random source is injected: pass a ``numpy.random.Generator`` or a
    seed as *rng* for reproducible draws.  *tree* selects the sum tree
    variant, either by registered name or as an empty tree instance; an
    injected tree is taken over and cannot back a second distribution.
    """

    def __init__(
        self,
        weights: WeightSource | None = None,
        *,
        tree: str | SumTree = "plain",
        rng: np.random.Generator | int | None = None,
    ) -> None:
        if isinstance(tree, str):
            tree = create_tree(tree)
        elif tree.owner is not None:
            raise ValueError("The tree already backs another distribution")
        elif tree.root is not None:
            raise ValueError("The backing tree must start empty")
        tree.owner = self
        self._tree = tree
        self._leaves: dict[K, Leaf] = {}
        self._rng = np.random.default_rng(rng)
        if weights is not None:
            self.build_huffman(weights)

    @classmethod
    def from_huffman(cls, items: WeightSource, **kwargs: Any) -> CategoricalDistribution:
        """Build with the optimal tree for *items*.  O(n log n)."""
        return cls(items, **kwargs)

    @classmethod
    def from_balanced(cls, items: WeightSource, **kwargs: Any) -> CategoricalDistribution:
        """Build with a minimum-depth tree for *items*.  O(n)."""
        dist = cls(**kwargs)
        dist.build_balanced(items)
        return dist

    # ── bulk construction ─────────────────────────────────────────────────

    def build_huffman(self, items: WeightSource) -> None:
        """Replace all entries with *items*, arranged as a Huffman tree."""
        self._leaves = {key: Leaf(key, weight) for key, weight in _collect(items).items()}
        self._tree.build_huffman(self._leaves.values())

    def build_balanced(self, items: WeightSource) -> None:
        """Replace all entries with *items*, arranged as a balanced tree."""
        self._leaves = {key: Leaf(key, weight) for key, weight in _collect(items).items()}
        self._tree.build_balanced(self._leaves.values())

    # ── mapping protocol ──────────────────────────────────────────────────

    def __getitem__(self, key: K) -> float:
        leaf = self._leaves.get(key)
        if leaf is None:
            raise KeyNotFound(key)
        return leaf.weight

    def __setitem__(self, key: K, weight: float) -> None:
        self.set(key, weight)

    def __delitem__(self, key: K) -> None:
        if self.remove(key) is None:
            raise KeyNotFound(key)

    def __iter__(self) -> Iterator[K]:
        return iter(self._leaves)

    def __len__(self) -> int:
        return len(self._leaves)

    def __contains__(self, key: object) -> bool:
        return key in self._leaves

    def __repr__(self) -> str:
        entries = {key: leaf.weight for key, leaf in self._leaves.items()}
        return f"{type(self).__name__}({entries!r})"

    def get(self, key: K, default: Any = 0.0) -> Any:  # type: ignore[override]
        """Weight of *key*, or *default* (zero) when absent."""
        leaf = self._leaves.get(key)
        return default if leaf is None else leaf.weight

    # ── mutation ──────────────────────────────────────────────────────────

    def set(self, key: K, weight: float) -> None:
        """Assign *weight* to *key*; a zero weight removes the key."""
        value = _check_weight(weight)
        if value == 0.0:
            self.remove(key)
            return

        leaf = self._leaves.get(key)
        if leaf is None:
            leaf = Leaf(key, value)
            self._tree.insert(leaf)
            self._leaves[key] = leaf
            return

        # Reinserting moves the leaf to a depth that suits its new weight.
        self._tree.detach(leaf)
        leaf.weight = value
        self._tree.insert(leaf)

    def remove(self, key: K) -> float | None:
        """Remove *key* and return its weight, or ``None`` if it was absent."""
        leaf = self._leaves.pop(key, None)
        if leaf is None:
            return None
        self._tree.detach(leaf)
        return leaf.weight

    def clear(self) -> None:
        self._leaves = {}
        self._tree.clear()

    # ── sampling ──────────────────────────────────────────────────────────

    def sample(self, point: float | None = None) -> K:
        """Draw a key with probability proportional to its weight.

        With *point* given, return the key whose cumulative-weight interval
        contains it instead of drawing; raises :class:`OutOfRange` unless
        ``0 <= point < total``.
        """
        if point is not None:
            return self._tree.find(point).key
        if self._tree.root is None:
            raise EmptyDistribution("Cannot sample from an empty distribution")
        return self._tree.descend(self._rng.random() * self._tree.total).key

    @property
    def total(self) -> float:
        """Sum of all weights."""
        return self._tree.total

    def probability(self, key: K) -> float:
        return self[key] / self._tree.total

    # ── diagnostics ───────────────────────────────────────────────────────

    @property
    def tree(self) -> SumTree:
        return self._tree

    @property
    def depth(self) -> int:
        return self._tree.depth()

    def weighted_path_length(self) -> float:
        """Expected number of comparisons per sample; ``0.0`` when empty."""
        total = self._tree.total
        if total == 0.0:
            return 0.0
        return self._tree.weighted_path_length() / total

    def validate(self) -> None:
        """Check tree invariants and that the index matches the tree's leaves."""
        self._tree.validate()
        seen = 0
        for leaf in self._tree.leaves():
            if self._leaves.get(leaf.key) is not leaf:
                raise InvalidOperation(f"{leaf!r} is in the tree but not in the index")
            seen += 1
        if seen != len(self._leaves):
            raise InvalidOperation(f"Index holds {len(self._leaves)} keys, tree holds {seen}")
