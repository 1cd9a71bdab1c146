"""Tests for the breeder registry and simulator builder."""

from __future__ import annotations

import pytest

from configs.loader import GameConfig
from engine import component_registry
from engine.component_registry import available_breeder_factories, create_breeder, register_breeder_factory
from evolution.ga import GenomeBreeder
from evolution.trivial import HeuristicBreeder
from main import build_simulator


def test_default_breeders_are_registered() -> None:
    assert {"robbie", "human"} <= set(available_breeder_factories())
    assert isinstance(create_breeder("robbie"), GenomeBreeder)
    assert isinstance(create_breeder("human"), HeuristicBreeder)
    assert create_breeder("robbie").name() == "robbie"
    assert create_breeder("human").name() == "human"


def test_unknown_breeder_lists_available() -> None:
    with pytest.raises(ValueError, match="Available"):
        create_breeder("does-not-exist")


def test_custom_breeder_can_be_registered(monkeypatch) -> None:
    monkeypatch.setattr(component_registry, "_BREEDER_FACTORIES", dict(component_registry._BREEDER_FACTORIES))
    register_breeder_factory("clone", GenomeBreeder)

    assert "clone" in available_breeder_factories()
    assert isinstance(create_breeder("clone"), GenomeBreeder)


def test_build_simulator_uses_configured_breeder() -> None:
    config = GameConfig(breeder="human", population_size=3, generations=1, games_per_agent=1, moves_per_episode=5)

    simulator = build_simulator(config)

    assert isinstance(simulator.breeder, HeuristicBreeder)
    assert len(simulator.population) == 3
