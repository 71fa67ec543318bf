"""Tests for the YAML config system."""

from __future__ import annotations

from pathlib import Path

import pytest

from mutable_categorical.utils.config import (
    ChurnConfig,
    apply_overrides,
    deep_merge,
    load_config,
    load_yaml,
)


def test_load_default_config(configs_dir: Path) -> None:
    config = load_yaml(configs_dir / "default.yaml")
    assert "churn" in config
    assert "mlflow" in config
    assert config["churn"]["weights"] == "uniform"
    assert config["churn"]["variants"] == ["plain", "rotating"]


def test_default_config_is_valid(default_config: dict) -> None:
    cfg = ChurnConfig.from_dict(default_config)
    assert cfg.seed == default_config["seed"]
    assert cfg.n_items == default_config["churn"]["n_items"]


def test_deep_merge_overrides_leaf() -> None:
    base = {"seed": 1, "churn": {"rounds": 2, "burn_in": 1}}
    override = {"churn": {"rounds": 99}}
    result = deep_merge(base, override)
    assert result["seed"] == 1
    assert result["churn"]["rounds"] == 99
    assert result["churn"]["burn_in"] == 1
    assert base["churn"]["rounds"] == 2


def test_deep_merge_adds_new_keys() -> None:
    base = {"a": 1}
    override = {"b": {"c": 2}}
    result = deep_merge(base, override)
    assert result["a"] == 1
    assert result["b"]["c"] == 2


def test_apply_overrides() -> None:
    config = {"churn": {"n_items": 100}, "seed": 42}
    apply_overrides(config, ["churn.n_items=5000", "seed=123", "churn.variants=[rotating]"])
    assert config["churn"]["n_items"] == 5000
    assert config["seed"] == 123
    assert config["churn"]["variants"] == ["rotating"]


def test_apply_overrides_creates_nested() -> None:
    config: dict = {}
    apply_overrides(config, ["a.b.c=hello"])
    assert config["a"]["b"]["c"] == "hello"


def test_apply_overrides_requires_equals() -> None:
    with pytest.raises(ValueError, match="key=value"):
        apply_overrides({}, ["seed"])


def test_apply_overrides_rejects_scalar_parent() -> None:
    with pytest.raises(ValueError):
        apply_overrides({"seed": 1}, ["seed.value=2"])


def test_load_config_with_weights_override(configs_dir: Path) -> None:
    config = load_config(
        default_path=configs_dir / "default.yaml",
        weights_path=configs_dir / "weights" / "resonance.yaml",
    )
    assert config["churn"]["weights"] == "resonance"
    assert config["churn"]["rounds"] == 300
    # Other defaults should be preserved
    assert config["churn"]["variants"] == ["plain", "rotating"]
    ChurnConfig.from_dict(config)


def test_load_config_with_cli_overrides(configs_dir: Path) -> None:
    config = load_config(
        default_path=configs_dir / "default.yaml",
        overrides=["seed=99", "churn.mutations_per_round=10"],
    )
    assert config["seed"] == 99
    assert config["churn"]["mutations_per_round"] == 10


def test_churn_config_rejects_unknown_settings() -> None:
    with pytest.raises(ValueError, match="Unknown churn settings"):
        ChurnConfig.from_dict({"churn": {"n_itmes": 10}})


@pytest.mark.parametrize(
    "settings",
    [
        {"n_items": 1},
        {"rounds": 0},
        {"rounds": 5, "burn_in": 5},
        {"weights": "gaussian"},
        {"variants": ["splay"]},
        {"variants": []},
    ],
)
def test_churn_config_validates(settings: dict) -> None:
    with pytest.raises(ValueError):
        ChurnConfig(**settings)
