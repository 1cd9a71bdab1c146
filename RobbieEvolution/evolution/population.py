"""Fixed-size cohort of agents ranked and bred together."""

from __future__ import annotations

import random
from dataclasses import dataclass

import numpy as np

from agents.agent import Agent
from agents.genome import Genome
from evolution.base import Breeder


@dataclass
class Population:
    """Ordered agents sharing one breeder.

    Ranking sorts ``agents`` in place; it is stable, so agents with equal
    scores keep their previous relative order.
    """

    agents: list[Agent]
    breeder: Breeder

    @classmethod
    def founding(cls, size: int, breeder: Breeder, rng: random.Random) -> "Population":
        """Create ``size`` parentless agents with zero mutation."""
        if size < 1:
            raise ValueError("Population size must be >= 1.")
        agents = [breeder.spawn(0.0, [], rng) for _ in range(size)]
        return cls._labelled(agents, breeder)

    @classmethod
    def _labelled(cls, agents: list[Agent], breeder: Breeder) -> "Population":
        for index, agent in enumerate(agents):
            agent.agent_id = f"agent_{index}"
        return cls(agents=agents, breeder=breeder)

    def __len__(self) -> int:
        return len(self.agents)

    def rank(self) -> None:
        """Sort agents by descending score."""
        self.agents.sort(key=lambda agent: agent.score, reverse=True)

    def alpha(self) -> Agent:
        """Return the best-scoring agent."""
        self.rank()
        return self.agents[0]

    def runt(self) -> Agent:
        """Return the worst-scoring agent."""
        self.rank()
        return self.agents[-1]

    def choose_parents(self, num_parents: int) -> list[Agent]:
        """Return the top ``min(num_parents, len(self))`` agents."""
        self.rank()
        return self.agents[: min(num_parents, len(self.agents))]

    def next_generation(self, num_parents: int, mutation_rate: float, rng: random.Random) -> "Population":
        """Breed a same-size population from the top-ranked agents."""
        parents = self.choose_parents(num_parents)
        children = [self.breeder.spawn(mutation_rate, parents, rng) for _ in self.agents]
        return self._labelled(children, self.breeder)

    def mean_score(self) -> float:
        return float(np.mean([agent.score for agent in self.agents]))

    def diversity(self) -> float:
        """Mean pairwise Hamming distance between genome policies.

        Agents without a genome are ignored; fewer than two genomes give 0.
        """
        genomes = [agent.policy.moves for agent in self.agents if isinstance(agent.policy, Genome)]
        n = len(genomes)
        if n < 2:
            return 0.0

        table = np.asarray(genomes, dtype=np.int64)
        pairs = n * (n - 1) / 2.0
        agreeing = 0.0
        for column in table.T:
            counts = np.bincount(column)
            agreeing += float(np.sum(counts * (counts - 1)) / 2.0)
        slots = table.shape[1]
        return slots - agreeing / pairs
