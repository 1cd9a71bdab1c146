"""Breeder contracts."""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import Sequence

from agents.agent import Agent


class Breeder(ABC):
    """Abstract strategy producing new agents from zero or more parents.

    A population holds exactly one breeder for its whole lineage, so every
    generation is made of the same kind of policy.
    """

    @abstractmethod
    def name(self) -> str:
        """Return the registry name of this breeder."""

    @abstractmethod
    def spawn(self, mutation_rate: float, parents: Sequence[Agent], rng: random.Random) -> Agent:
        """Create one new agent with zeroed counters.

        Args:
            mutation_rate (float): Per-slot mutation probability in [0, 1].
            parents (Sequence[Agent]): Ranked parents, possibly empty for a
                founding generation.
            rng (random.Random): Random stream used for every draw.

        Returns:
            Agent: A fresh agent instance.

        Invariants:
            - Must not mutate the parents or their policies.
            - Deterministic given equivalent RNG state and inputs.
        """
