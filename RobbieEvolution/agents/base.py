"""Policy interface definitions."""

from __future__ import annotations

import random
from abc import ABC, abstractmethod

from agents.moves import Move
from environment.grid import Observation


class Policy(ABC):
    """Abstract decision rule mapping an observation to a move.

    Policies are stateless with respect to episodes: the same observation and
    RNG state always produce the same move. Evolved (genome-backed) and fixed
    heuristic policies are interchangeable behind this contract.
    """

    @abstractmethod
    def decide(self, observation: Observation, rng: random.Random) -> Move:
        """Choose the next move for ``observation``.

        Args:
            observation (Observation): Cells sensed at the agent position.
            rng (random.Random): Task-local random stream for policies that
                break ties randomly. Deterministic policies may ignore it.

        Returns:
            Move: The move to apply this turn.

        Invariants:
            - Must not mutate the observation or any shared state.
            - Must be total over all well-formed observations.
        """
