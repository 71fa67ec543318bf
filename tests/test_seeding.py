"""Tests for seeding helpers."""

from __future__ import annotations

from mutable_categorical.utils.seeding import make_rng


def test_make_rng_is_reproducible() -> None:
    assert make_rng(3).random() == make_rng(3).random()
    assert make_rng(3, stream=1).random() == make_rng(3, stream=1).random()


def test_make_rng_streams_differ() -> None:
    assert make_rng(3, stream=0).random() != make_rng(3, stream=1).random()
