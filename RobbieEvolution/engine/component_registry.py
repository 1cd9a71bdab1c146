"""Factories/registries for breeders selectable by name."""

from __future__ import annotations

from typing import Callable

from evolution.base import Breeder
from evolution.ga import GenomeBreeder
from evolution.trivial import HeuristicBreeder


BreederFactory = Callable[[], Breeder]


_BREEDER_FACTORIES: dict[str, BreederFactory] = {}


def register_breeder_factory(name: str, factory: BreederFactory) -> None:
    _BREEDER_FACTORIES[str(name)] = factory


def available_breeder_factories() -> list[str]:
    return sorted(_BREEDER_FACTORIES)


def create_breeder(name: str) -> Breeder:
    factory = _BREEDER_FACTORIES.get(str(name))
    if factory is None:
        available = ", ".join(available_breeder_factories()) or "<none>"
        raise ValueError(f"Unknown breeder '{name}'. Available: {available}")
    return factory()


def _register_defaults() -> None:
    if _BREEDER_FACTORIES:
        return
    register_breeder_factory("robbie", GenomeBreeder)
    register_breeder_factory("human", HeuristicBreeder)


_register_defaults()
