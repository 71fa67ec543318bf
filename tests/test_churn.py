"""Tests for the churn experiment."""

from __future__ import annotations

import numpy as np
import pytest

from mutable_categorical.experiments.churn import generate_weights, run_churn
from mutable_categorical.utils.config import ChurnConfig


class _RecordingLogger:
    def __init__(self) -> None:
        self.calls: list[tuple[dict[str, float], int | None]] = []

    def log_metrics(self, metrics: dict[str, float], step: int | None = None) -> None:
        self.calls.append((metrics, step))


def _small_config(**overrides) -> ChurnConfig:
    settings = dict(n_items=200, rounds=6, mutations_per_round=50, burn_in=2, seed=5)
    settings.update(overrides)
    return ChurnConfig(**settings)


@pytest.mark.parametrize("kind", ["uniform", "exponential", "resonance"])
def test_generate_weights_shapes(kind: str, rng: np.random.Generator) -> None:
    weights = generate_weights(kind, rng, 1000)
    assert weights.shape == (1000,)
    assert (weights >= 0).all()
    assert np.isfinite(weights).all()


def test_resonance_weights_are_two_valued(rng: np.random.Generator) -> None:
    weights = generate_weights("resonance", rng, 5000)
    assert set(np.unique(weights)) <= {1.0, 1000.0}
    assert (weights == 1.0).mean() > 0.95


def test_generate_unknown_weights_raises(rng: np.random.Generator) -> None:
    with pytest.raises(ValueError):
        generate_weights("gaussian", rng, 3)


def test_run_churn_summary_keys() -> None:
    summary = run_churn(_small_config(), progress=False)
    assert set(summary) == {
        "huffman_mean",
        "plain_mean",
        "plain_ratio",
        "rotating_mean",
        "rotating_ratio",
    }
    assert summary["huffman_mean"] > 0.0


def test_run_churn_never_beats_huffman() -> None:
    summary = run_churn(_small_config(weights="exponential"), progress=False)
    assert summary["plain_ratio"] >= 1.0 - 1e-9
    assert summary["rotating_ratio"] >= 1.0 - 1e-9
    assert summary["rotating_ratio"] < 2.0


def test_run_churn_is_reproducible() -> None:
    config = _small_config(weights="resonance")
    assert run_churn(config, progress=False) == run_churn(config, progress=False)


def test_run_churn_single_variant() -> None:
    summary = run_churn(_small_config(variants=["rotating"]), progress=False)
    assert "plain_mean" not in summary
    assert "rotating_ratio" in summary


def test_run_churn_logs_after_burn_in() -> None:
    logger = _RecordingLogger()
    run_churn(_small_config(), logger=logger, progress=False)
    assert [step for _, step in logger.calls] == [3, 4, 5, 6]
    metrics, _ = logger.calls[0]
    assert "huffman/path_length" in metrics
    assert "rotating/ratio" in metrics


def test_removal_mode_favours_rotation() -> None:
    config = _small_config(n_items=20_000, mode="removal", min_items=512, seed=9)
    logger = _RecordingLogger()
    summary = run_churn(config, logger=logger, progress=False)
    assert summary["plain_ratio"] >= 1.0 - 1e-9
    assert summary["rotating_ratio"] >= 1.0 - 1e-9
    assert summary["rotating_ratio"] < summary["plain_ratio"]
    assert [step for _, step in logger.calls] == [20_000 - 512]


def test_removal_mode_validates_min_items() -> None:
    with pytest.raises(ValueError, match="min_items"):
        _small_config(mode="removal", min_items=200)
    with pytest.raises(ValueError, match="Unknown churn mode"):
        _small_config(mode="splay")
