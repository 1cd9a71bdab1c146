"""Agent pairing a policy with cumulative performance counters."""

from __future__ import annotations

from dataclasses import dataclass

from agents.base import Policy


@dataclass
class Agent:
    """Policy holder scored across every episode of one generation.

    Reward and penalty magnitudes are passed as non-negative numbers; each
    accumulator applies the sign for its outcome.
    """

    policy: Policy
    agent_id: str = ""
    score: int = 0
    pick_ups: int = 0
    false_pick_ups: int = 0
    bumps: int = 0
    rubbish_seen: int = 0
    rubbish_missed: int = 0

    def reward(self, points: int) -> None:
        self.score += points
        self.pick_ups += 1

    def penalize_false_pick_up(self, points: int) -> None:
        self.score -= points
        self.false_pick_ups += 1

    def penalize_bump(self, points: int) -> None:
        self.score -= points
        self.bumps += 1

    def accumulate_seen(self, count: int) -> None:
        self.rubbish_seen += count

    def accumulate_missed(self, count: int) -> None:
        self.rubbish_missed += count

    def __str__(self) -> str:
        return (
            f"Agent(id={self.agent_id!r}, score={self.score}, pick_ups={self.pick_ups}, "
            f"false_pick_ups={self.false_pick_ups}, bumps={self.bumps}, "
            f"rubbish_seen={self.rubbish_seen}, rubbish_missed={self.rubbish_missed})"
        )
