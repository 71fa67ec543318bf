"""Reference Huffman path length for a static set of weights."""

from __future__ import annotations

import heapq
from typing import Iterable


def huffman_path_length(weights: Iterable[float]) -> float:
    """Expected comparisons per sample of the optimal (Huffman) tree.

    Runs the classical priority-queue merge on *weights* alone, without
    building any nodes, and returns the summed merge costs divided by the
    total weight.  Returns ``0.0`` for fewer than two weights.
    """
    heap = [float(w) for w in weights]
    if len(heap) < 2:
        return 0.0
    heapq.heapify(heap)

    length = 0.0
    while len(heap) > 1:
        merged = heapq.heappop(heap) + heapq.heappop(heap)
        length += merged
        heapq.heappush(heap, merged)
    return length / heap[0]
