#!/usr/bin/env python3
"""Churn benchmark: compare sum tree variants against the Huffman bound."""

from __future__ import annotations

import argparse

from mutable_categorical.experiments.churn import run_churn
from mutable_categorical.utils.config import ChurnConfig, load_config
from mutable_categorical.utils.logging import ExperimentLogger


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Measure how sum tree variants degrade under insert/remove churn",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
examples:
  python scripts/benchmark.py
  python scripts/benchmark.py --weights configs/weights/exponential.yaml
  python scripts/benchmark.py --set churn.n_items=100000 --set churn.variants=[rotating]
  python scripts/benchmark.py --no-mlflow
  python scripts/benchmark.py --set churn.mode=removal --set churn.n_items=100000
""",
    )
    parser.add_argument(
        "--config",
        default="configs/default.yaml",
        help="Path to base config (default: configs/default.yaml)",
    )
    parser.add_argument("--weights", default=None, help="Path to weight generator config override")
    parser.add_argument(
        "--set",
        action="append",
        default=[],
        dest="overrides",
        metavar="KEY=VALUE",
        help="Override config values (e.g. --set churn.rounds=50)",
    )
    parser.add_argument("--no-mlflow", action="store_true", help="Skip MLFlow tracking")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)

    config = load_config(
        default_path=args.config,
        weights_path=args.weights,
        overrides=args.overrides,
    )
    churn_cfg = ChurnConfig.from_dict(config)

    print(f"Weights: {churn_cfg.weights}")
    print(f"Items: {churn_cfg.n_items}")
    print(f"Variants: {', '.join(churn_cfg.variants)}")

    if args.no_mlflow:
        summary = run_churn(churn_cfg)
    else:
        with ExperimentLogger(
            experiment_name=config["mlflow"]["experiment_name"],
            tracking_uri=config["mlflow"]["tracking_uri"],
            run_name=churn_cfg.weights,
        ) as logger:
            logger.log_params(config)
            summary = run_churn(churn_cfg, logger=logger)
            logger.log_metrics(summary)

    print(f"{'Huffman':<12}{summary['huffman_mean']:.4f}")
    for name in churn_cfg.variants:
        print(f"{name:<12}{summary[f'{name}_mean']:.4f}  ratio {summary[f'{name}_ratio']:.4f}")


if __name__ == "__main__":
    main()
