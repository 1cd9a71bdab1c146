"""Baseline breeder that never evolves."""

from __future__ import annotations

import random
from typing import Sequence

from agents.agent import Agent
from agents.heuristic import HeuristicPolicy
from evolution.base import Breeder


class HeuristicBreeder(Breeder):
    """Produces heuristic agents regardless of parents or mutation rate."""

    def name(self) -> str:
        return "human"

    def spawn(self, mutation_rate: float, parents: Sequence[Agent], rng: random.Random) -> Agent:
        return Agent(policy=HeuristicPolicy())
