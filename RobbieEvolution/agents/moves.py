"""Move vocabulary shared by policies and the grid simulator."""

from __future__ import annotations

import enum
import random


class Move(enum.IntEnum):
    """Action a policy can choose on one turn.

    Ordinals are stable and index gene-usage histograms.
    """

    DO_NOTHING = 0
    MOVE_UP = 1
    MOVE_RIGHT = 2
    MOVE_DOWN = 3
    MOVE_LEFT = 4
    MOVE_RANDOM = 5
    PICK_UP_RUBBISH = 6

    @property
    def label(self) -> str:
        """Human-readable kebab-case name used in charts and reports."""
        return self.name.lower().replace("_", "-")


NUM_MOVES: int = len(Move)

CARDINAL_MOVES: tuple[Move, ...] = (Move.MOVE_UP, Move.MOVE_RIGHT, Move.MOVE_DOWN, Move.MOVE_LEFT)

_ALL_MOVES: tuple[Move, ...] = tuple(Move)


def random_move(rng: random.Random) -> Move:
    """Draw one of the seven moves uniformly."""
    return _ALL_MOVES[rng.randrange(NUM_MOVES)]
