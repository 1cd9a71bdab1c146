"""Walled rubbish grid simulated for one episode."""

from __future__ import annotations

import enum
import random
from typing import NamedTuple

from agents.moves import CARDINAL_MOVES, Move


class CellState(enum.IntEnum):
    """Contents of a single grid cell."""

    EMPTY = 0
    RUBBISH = 1
    WALL = 2


class Observation(NamedTuple):
    """Cells sensed by the agent at its current location."""

    current: CellState
    above: CellState
    right: CellState
    below: CellState
    left: CellState


# y grows upwards: "above" is y + 1.
_OFFSETS: dict[Move, tuple[int, int]] = {
    Move.MOVE_UP: (0, 1),
    Move.MOVE_RIGHT: (1, 0),
    Move.MOVE_DOWN: (0, -1),
    Move.MOVE_LEFT: (-1, 0),
}


class Grid:
    """Square playable area of ``size`` x ``size`` cells surrounded by walls.

    Cells are stored in a flat list of ``(size + 2) ** 2`` entries. The agent
    position always lies strictly inside the wall ring, so every neighbour
    lookup from a legal position stays within the list.
    """

    def __init__(self, size: int, cells: list[CellState], x: int, y: int, rng: random.Random) -> None:
        if size < 1:
            raise ValueError("size must be >= 1")
        extended = size + 2
        if len(cells) != extended * extended:
            raise ValueError(f"Expected {extended * extended} cells, got {len(cells)}.")
        self.size = size
        self.cells = cells
        self.rng = rng
        self.x = 0
        self.y = 0
        self.place_agent(x, y)

    @classmethod
    def create(cls, size: int, rubbish_probability: float, rng: random.Random) -> "Grid":
        """Build a fresh random layout with the agent at a random interior cell."""
        extended = size + 2
        cells = [CellState.EMPTY] * (extended * extended)
        for i in range(extended):
            cells[i] = CellState.WALL
            cells[i + (extended - 1) * extended] = CellState.WALL
            cells[i * extended] = CellState.WALL
            cells[(extended - 1) + i * extended] = CellState.WALL
        grid = cls(size=size, cells=cells, x=1, y=1, rng=rng)
        for y in range(1, size + 1):
            for x in range(1, size + 1):
                if rng.random() < rubbish_probability:
                    grid.set_cell(x, y, CellState.RUBBISH)
        grid.place_agent(rng.randrange(size) + 1, rng.randrange(size) + 1)
        return grid

    @property
    def extended_size(self) -> int:
        return self.size + 2

    def _index(self, x: int, y: int) -> int:
        return x + y * self.extended_size

    def cell(self, x: int, y: int) -> CellState:
        return self.cells[self._index(x, y)]

    def set_cell(self, x: int, y: int, state: CellState) -> None:
        """Overwrite one interior cell. The wall ring is immutable."""
        if not (1 <= x <= self.size and 1 <= y <= self.size):
            raise ValueError(f"({x}, {y}) is not an interior cell.")
        if state == CellState.WALL:
            raise ValueError("Walls may only form the border.")
        self.cells[self._index(x, y)] = state

    def place_agent(self, x: int, y: int) -> None:
        """Move the agent to an interior coordinate."""
        if not (1 <= x <= self.size and 1 <= y <= self.size):
            raise ValueError(f"({x}, {y}) is not an interior cell.")
        self.x = x
        self.y = y

    @property
    def position(self) -> tuple[int, int]:
        return (self.x, self.y)

    def observe(self) -> Observation:
        """Return the current cell and its four cardinal neighbours."""
        x, y = self.x, self.y
        return Observation(
            current=self.cell(x, y),
            above=self.cell(x, y + 1),
            right=self.cell(x + 1, y),
            below=self.cell(x, y - 1),
            left=self.cell(x - 1, y),
        )

    def attempt_move(self, direction: Move) -> bool:
        """Step one cell in ``direction``.

        Returns ``False`` without moving when the destination is a wall.
        ``Move.MOVE_RANDOM`` resolves uniformly to one of the four cardinal
        directions.
        """
        if direction == Move.MOVE_RANDOM:
            direction = CARDINAL_MOVES[self.rng.randrange(len(CARDINAL_MOVES))]
        offset = _OFFSETS.get(direction)
        if offset is None:
            raise ValueError(f"{direction!r} is not a movement.")

        nx, ny = self.x + offset[0], self.y + offset[1]
        if self.cell(nx, ny) == CellState.WALL:
            return False
        self.x, self.y = nx, ny
        return True

    def attempt_pick_up(self) -> bool:
        """Clear rubbish from the current cell; ``False`` when there was none."""
        index = self._index(self.x, self.y)
        if self.cells[index] != CellState.RUBBISH:
            return False
        self.cells[index] = CellState.EMPTY
        return True

    def remaining_rubbish(self) -> int:
        """Count cells still holding rubbish."""
        return sum(1 for cell in self.cells if cell == CellState.RUBBISH)
