"""Mutable weighted categorical distributions with O(log n) sampling."""

from __future__ import annotations

from mutable_categorical.distribution import CategoricalDistribution
from mutable_categorical.errors import (
    CategoricalError,
    EmptyDistribution,
    InvalidOperation,
    InvalidWeight,
    KeyNotFound,
    OutOfRange,
)
from mutable_categorical.huffman import huffman_path_length
from mutable_categorical.tree import available_trees, create_tree
from mutable_categorical.tree.rotating import RotatingSumTree
from mutable_categorical.tree.sum_tree import SumTree

__all__ = [
    "CategoricalDistribution",
    "CategoricalError",
    "EmptyDistribution",
    "InvalidOperation",
    "InvalidWeight",
    "KeyNotFound",
    "OutOfRange",
    "RotatingSumTree",
    "SumTree",
    "available_trees",
    "create_tree",
    "huffman_path_length",
]
