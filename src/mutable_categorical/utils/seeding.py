"""Reproducible random sources."""

from __future__ import annotations

import numpy as np


def make_rng(seed: int | None, stream: int = 0) -> np.random.Generator:
    """Independent generator for *stream* derived from *seed*.

    Distinct streams of the same seed never share state, so each tree
    variant in an experiment can own its generator.
    """
    return np.random.default_rng(np.random.SeedSequence(seed).spawn(stream + 1)[stream])
