"""In-memory per-generation statistics for ranked extremes."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from agents.agent import Agent
from agents.genome import Genome
from agents.moves import NUM_MOVES

ROLES: tuple[str, ...] = ("alpha", "runt")

COUNTER_FIELDS: tuple[str, ...] = (
    "score",
    "pick_ups",
    "false_pick_ups",
    "bumps",
    "rubbish_seen",
    "rubbish_missed",
)


@dataclass(frozen=True)
class AgentSnapshot:
    """Read-only copy of an agent's counters and gene usage."""

    score: int
    pick_ups: int
    false_pick_ups: int
    bumps: int
    rubbish_seen: int
    rubbish_missed: int
    gene_usage: tuple[int, ...]

    @classmethod
    def from_agent(cls, agent: Agent) -> "AgentSnapshot":
        if isinstance(agent.policy, Genome):
            usage = tuple(int(count) for count in agent.policy.gene_usage())
        else:
            usage = (0,) * NUM_MOVES
        return cls(
            score=agent.score,
            pick_ups=agent.pick_ups,
            false_pick_ups=agent.false_pick_ups,
            bumps=agent.bumps,
            rubbish_seen=agent.rubbish_seen,
            rubbish_missed=agent.rubbish_missed,
            gene_usage=usage,
        )


@dataclass
class StatisticsCollector:
    """Tracks one snapshot per role per generation."""

    snapshots: dict[str, list[AgentSnapshot]] = field(default_factory=lambda: {role: [] for role in ROLES})

    def record(self, generation_index: int, role: str, agent: Agent) -> AgentSnapshot:
        """Append a snapshot; generations must be recorded in order."""
        if role not in self.snapshots:
            raise KeyError(f"Unknown role: {role}")
        history = self.snapshots[role]
        if generation_index != len(history):
            raise ValueError(f"Expected generation {len(history)} for role '{role}', got {generation_index}.")
        snapshot = AgentSnapshot.from_agent(agent)
        history.append(snapshot)
        return snapshot

    def generations(self) -> int:
        return len(self.snapshots[ROLES[0]])

    def series(self, role: str, name: str) -> list[int]:
        if name not in COUNTER_FIELDS:
            raise KeyError(f"Unknown counter: {name}")
        return [int(getattr(snapshot, name)) for snapshot in self.snapshots[role]]

    def gene_usage(self, role: str) -> np.ndarray:
        """Return an array of shape ``(generations, 7)`` indexed by move ordinal."""
        history = self.snapshots[role]
        if not history:
            return np.zeros((0, NUM_MOVES), dtype=np.int64)
        return np.asarray([snapshot.gene_usage for snapshot in history], dtype=np.int64)
