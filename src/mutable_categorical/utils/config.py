"""YAML config loading with layered merging, CLI overrides and validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from mutable_categorical.tree import available_trees

WEIGHT_GENERATORS = ("uniform", "exponential", "resonance")
MODES = ("mixed", "removal")


def load_yaml(path: str | Path) -> dict[str, Any]:
    """Load a YAML file and return its contents as a dict."""
    with open(path) as f:
        return yaml.safe_load(f) or {}


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (returns a new dict)."""
    merged = base.copy()
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def apply_overrides(config: dict, overrides: list[str]) -> dict:
    """Apply dot-notation CLI overrides like ``churn.n_items=5000``.

    Values are parsed as YAML scalars, so ``"[plain]"`` becomes a list and
    ``"42"`` an int.
    """
    for override in overrides:
        if "=" not in override:
            raise ValueError(f"Override must be key=value, got: {override!r}")
        key_path, raw_value = override.split("=", 1)
        keys = key_path.split(".")
        node = config
        for k in keys[:-1]:
            node = node.setdefault(k, {})
            if not isinstance(node, dict):
                raise ValueError(f"Cannot override inside non-mapping key in {key_path!r}")
        node[keys[-1]] = yaml.safe_load(raw_value)
    return config


def load_config(
    default_path: str | Path = "configs/default.yaml",
    weights_path: str | Path | None = None,
    overrides: list[str] | None = None,
) -> dict[str, Any]:
    """Build a config by merging: default → weights → CLI overrides."""
    config = load_yaml(default_path)
    if weights_path:
        config = deep_merge(config, load_yaml(weights_path))
    if overrides:
        config = apply_overrides(config, overrides)
    return config


@dataclass
class ChurnConfig:
    """Validated settings for a churn experiment."""

    n_items: int = 10_000
    rounds: int = 200
    mutations_per_round: int = 500
    burn_in: int = 100
    weights: str = "uniform"
    variants: list[str] = field(default_factory=lambda: ["plain", "rotating"])
    seed: int = 42
    # "removal" deletes random keys until min_items remain, then measures once
    mode: str = "mixed"
    min_items: int = 1024

    def __post_init__(self) -> None:
        if self.mode not in MODES:
            raise ValueError(f"Unknown churn mode '{self.mode}'. Available: {', '.join(MODES)}")
        if self.mode == "removal" and not 1 <= self.min_items < self.n_items:
            raise ValueError(f"min_items must be in [1, n_items), got {self.min_items}")
        if self.n_items < 2:
            raise ValueError(f"n_items must be at least 2, got {self.n_items}")
        if self.rounds < 1 or self.mutations_per_round < 1:
            raise ValueError("rounds and mutations_per_round must be positive")
        if not 0 <= self.burn_in < self.rounds:
            raise ValueError(f"burn_in must be in [0, rounds), got {self.burn_in}")
        if self.weights not in WEIGHT_GENERATORS:
            raise ValueError(
                f"Unknown weight generator '{self.weights}'. "
                f"Available: {', '.join(WEIGHT_GENERATORS)}"
            )
        unknown = sorted(set(self.variants) - set(available_trees()))
        if not self.variants or unknown:
            raise ValueError(
                f"Invalid tree variants {unknown or self.variants}. "
                f"Available: {', '.join(available_trees())}"
            )

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> ChurnConfig:
        """Read the ``churn`` section plus the top-level ``seed``."""
        section = dict(config.get("churn", {}))
        unexpected = sorted(set(section) - set(cls.__dataclass_fields__))
        if unexpected:
            raise ValueError(f"Unknown churn settings: {', '.join(unexpected)}")
        if "seed" in config:
            section["seed"] = config["seed"]
        return cls(**section)
