"""Exceptions raised by the categorical distribution and its sum trees."""

from __future__ import annotations


class CategoricalError(Exception):
    """Base class for every error raised by this package."""


class KeyNotFound(CategoricalError, KeyError):
    """The requested key has no entry in the distribution."""


class EmptyDistribution(CategoricalError, LookupError):
    """Sampling was requested from a distribution with no weight."""


class OutOfRange(CategoricalError, ValueError):
    """A cumulative-weight point falls outside ``[0, total)``."""

    def __init__(self, point: float, total: float) -> None:
        super().__init__(f"Point {point!r} is outside [0, {total!r})")
        self.point = point
        self.total = total


class InvalidOperation(CategoricalError, RuntimeError):
    """The tree layer was used in a way that breaks its invariants."""


class InvalidWeight(CategoricalError, ValueError):
    """A weight is negative, NaN, infinite or not a real number."""
