"""Sum tree registry — register and create tree variants by name."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Type

if TYPE_CHECKING:
    from mutable_categorical.tree.sum_tree import SumTree

_REGISTRY: dict[str, Type[SumTree]] = {}


def register(name: str) -> Callable:
    """Decorator to register a sum tree class under *name*."""

    def wrapper(cls: Type[SumTree]) -> Type[SumTree]:
        if name in _REGISTRY:
            raise ValueError(f"Tree variant '{name}' is already registered")
        _REGISTRY[name] = cls
        return cls

    return wrapper


def create_tree(name: str) -> SumTree:
    """Instantiate an empty tree of the registered variant *name*."""
    if name not in _REGISTRY:
        available = ", ".join(sorted(_REGISTRY)) or "(none)"
        raise ValueError(f"Unknown tree variant '{name}'. Available: {available}")
    return _REGISTRY[name]()


def available_trees() -> list[str]:
    """Return sorted list of registered tree variant names."""
    return sorted(_REGISTRY)


# Variant modules register themselves on import.
from mutable_categorical.tree import rotating, sum_tree  # noqa: E402,F401
