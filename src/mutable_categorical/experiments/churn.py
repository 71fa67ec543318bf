"""Churn experiment: how far do sum tree variants drift from Huffman?

Every configured tree variant starts from the same Huffman build.  Each
round then applies the same random mutations to all of them (two thirds
re-weight a key, one third remove one) and, after a burn-in, compares each
variant's expected sample cost with the Huffman optimum for the current
weights.
"""

from __future__ import annotations

import numpy as np
from tqdm import tqdm

from mutable_categorical.distribution import CategoricalDistribution
from mutable_categorical.huffman import huffman_path_length
from mutable_categorical.utils.config import ChurnConfig
from mutable_categorical.utils.logging import ExperimentLogger
from mutable_categorical.utils.seeding import make_rng


def generate_weights(kind: str, rng: np.random.Generator, size: int) -> np.ndarray:
    """Draw *size* weights from the named generator."""
    if kind == "uniform":
        return rng.random(size)
    if kind == "exponential":
        return -np.log1p(-rng.random(size))
    if kind == "resonance":
        # Mostly flat with rare very heavy keys
        return np.where(rng.random(size) < 0.99, 1.0, 1000.0)
    raise ValueError(f"Unknown weight generator '{kind}'")


def _next_present(dist: CategoricalDistribution, key: int, n_items: int) -> int | None:
    """First key at or after *key* (wrapping) still in *dist*."""
    for offset in range(n_items):
        candidate = (key + offset) % n_items
        if candidate in dist:
            return candidate
    return None


def _build(config: ChurnConfig, rng: np.random.Generator) -> dict[str, CategoricalDistribution]:
    """One Huffman-built distribution per variant, all over the same weights."""
    initial = generate_weights(config.weights, rng, config.n_items)
    items = list(enumerate(initial.tolist()))
    return {
        name: CategoricalDistribution.from_huffman(items, tree=name, rng=make_rng(config.seed, i + 1))
        for i, name in enumerate(config.variants)
    }


def _run_removal(
    config: ChurnConfig,
    dists: dict[str, CategoricalDistribution],
    rng: np.random.Generator,
    logger: ExperimentLogger | None,
) -> dict[str, float]:
    """Delete random keys from every variant until ``min_items`` remain."""
    reference = dists[config.variants[0]]
    live = list(reference)
    while len(live) > config.min_items:
        idx = int(rng.integers(len(live)))
        live[idx], live[-1] = live[-1], live[idx]
        key = live.pop()
        for dist in dists.values():
            dist.remove(key)

    huffman = huffman_path_length(reference.values())
    summary = {"huffman_mean": huffman}
    for name, dist in dists.items():
        length = dist.weighted_path_length()
        summary[f"{name}_mean"] = length
        summary[f"{name}_ratio"] = length / huffman if huffman > 0.0 else 1.0
    if logger is not None:
        logger.log_metrics(summary, step=config.n_items - len(live))
    return summary


def run_churn(
    config: ChurnConfig,
    logger: ExperimentLogger | None = None,
    progress: bool = True,
) -> dict[str, float]:
    """Run the experiment and return mean path lengths and Huffman ratios.

    Returns ``huffman_mean`` plus ``<variant>_mean`` and ``<variant>_ratio``
    for every variant, averaged over the rounds after burn-in.  In
    ``removal`` mode a single measurement is taken once the deletions are
    done.
    """
    rng = make_rng(config.seed)
    dists = _build(config, rng)
    if config.mode == "removal":
        return _run_removal(config, dists, rng, logger)
    reference = dists[config.variants[0]]

    huffman_total = 0.0
    totals = dict.fromkeys(dists, 0.0)
    count = 0

    for round_idx in tqdm(range(1, config.rounds + 1), desc="Churn", disable=not progress):
        for _ in range(config.mutations_per_round):
            key = int(rng.integers(config.n_items))
            if rng.integers(3) < 2:
                weight = float(generate_weights(config.weights, rng, 1)[0])
                for dist in dists.values():
                    dist[key] = weight
            else:
                present = _next_present(reference, key, config.n_items)
                if present is None:
                    continue
                for dist in dists.values():
                    dist.remove(present)

        if round_idx <= config.burn_in:
            continue

        huffman = huffman_path_length(reference.values())
        huffman_total += huffman
        count += 1
        metrics = {"huffman/path_length": huffman}
        for name, dist in dists.items():
            length = dist.weighted_path_length()
            totals[name] += length
            metrics[f"{name}/path_length"] = length
            if huffman > 0.0:
                metrics[f"{name}/ratio"] = length / huffman
        if logger is not None:
            logger.log_metrics(metrics, step=round_idx)

    summary = {"huffman_mean": huffman_total / count}
    for name, total in totals.items():
        summary[f"{name}_mean"] = total / count
        summary[f"{name}_ratio"] = total / huffman_total if huffman_total > 0.0 else 1.0
    return summary
