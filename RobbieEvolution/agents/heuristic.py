"""Fixed, non-evolved policy used as a performance baseline."""

from __future__ import annotations

import random
from dataclasses import dataclass

from agents.base import Policy
from agents.moves import Move
from environment.grid import CellState, Observation


@dataclass(frozen=True)
class HeuristicPolicy(Policy):
    """Greedy rubbish collector.

    Selection policy:
    - Pick up when standing on rubbish.
    - Otherwise step towards a random neighbouring rubbish cell.
    - Otherwise step towards a random neighbouring empty cell.
    - Otherwise do nothing.
    """

    def decide(self, observation: Observation, rng: random.Random) -> Move:
        if observation.current == CellState.RUBBISH:
            return Move.PICK_UP_RUBBISH

        neighbours = (
            (observation.above, Move.MOVE_UP),
            (observation.right, Move.MOVE_RIGHT),
            (observation.below, Move.MOVE_DOWN),
            (observation.left, Move.MOVE_LEFT),
        )
        for wanted in (CellState.RUBBISH, CellState.EMPTY):
            candidates = [move for state, move in neighbours if state == wanted]
            if candidates:
                return candidates[rng.randrange(len(candidates))]
        return Move.DO_NOTHING
