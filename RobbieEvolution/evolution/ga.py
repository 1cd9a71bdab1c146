"""Genetic breeder for genome-backed agents."""

from __future__ import annotations

import random
from typing import Sequence

from agents.agent import Agent
from agents.genome import Genome
from evolution.base import Breeder


class GenomeBreeder(Breeder):
    """Uniform multi-parent crossover with per-slot mutation."""

    def name(self) -> str:
        return "robbie"

    def spawn(self, mutation_rate: float, parents: Sequence[Agent], rng: random.Random) -> Agent:
        """Return a new agent whose genome is bred from ``parents``."""
        genomes: list[Genome] = []
        for parent in parents:
            if not isinstance(parent.policy, Genome):
                raise TypeError("GenomeBreeder requires parents with Genome policies.")
            genomes.append(parent.policy)
        return Agent(policy=Genome.breed(mutation_rate, genomes, rng))
