"""Lookup-table genome evolved by the genetic algorithm."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from agents.base import Policy
from agents.moves import NUM_MOVES, Move, random_move
from environment.grid import Observation

GENOME_SIZE: int = 3**5


def encode_observation(observation: Sequence[int]) -> int:
    """Return the base-3 genome slot for ``(current, above, right, below, left)``."""
    current, above, right, below, left = (int(state) for state in observation)
    return current + 3 * above + 9 * right + 27 * below + 81 * left


@dataclass(frozen=True)
class Genome(Policy):
    """Fixed table of 243 moves, one per possible observation.

    Genomes are immutable: breeding always builds a new table.
    """

    moves: tuple[Move, ...]

    def __post_init__(self) -> None:
        if len(self.moves) != GENOME_SIZE:
            raise ValueError(f"Genome must have {GENOME_SIZE} slots, got {len(self.moves)}.")

    @classmethod
    def founding(cls, rng: random.Random) -> "Genome":
        """Create a genome with every slot drawn uniformly from the seven moves."""
        return cls(moves=tuple(random_move(rng) for _ in range(GENOME_SIZE)))

    @classmethod
    def breed(cls, mutation_rate: float, parents: Sequence["Genome"], rng: random.Random) -> "Genome":
        """Create offspring by slot-wise uniform crossover plus mutation.

        Each slot independently mutates to a random move with probability
        ``mutation_rate``; otherwise it is copied from a parent picked
        uniformly from ``parents``. With no parents this is ``founding``.
        """
        if not parents:
            return cls.founding(rng)

        count = len(parents)
        moves: list[Move] = []
        for slot in range(GENOME_SIZE):
            if rng.random() < mutation_rate:
                moves.append(random_move(rng))
            else:
                moves.append(parents[rng.randrange(count)].moves[slot])
        return cls(moves=tuple(moves))

    def decide(self, observation: Observation, rng: random.Random | None = None) -> Move:
        """Look up the move stored for ``observation``."""
        index = encode_observation(observation)
        if not 0 <= index < GENOME_SIZE:
            raise IndexError(f"Observation index {index} outside genome range.")
        return self.moves[index]

    def gene_usage(self) -> np.ndarray:
        """Count slots per move kind, indexed by ``Move`` ordinal."""
        return np.bincount(np.fromiter(self.moves, dtype=np.int64, count=GENOME_SIZE), minlength=NUM_MOVES)

    def __len__(self) -> int:
        return len(self.moves)

    def __getitem__(self, index: int) -> Move:
        return self.moves[index]
