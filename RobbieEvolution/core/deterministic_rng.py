"""Deterministic RNG container deriving independent streams from one seed."""

from __future__ import annotations

import hashlib
import random
from dataclasses import dataclass, field


def derive_seed(seed: int, name: str) -> int:
    """Stable cross-process seed derivation for ``(seed, name)``."""
    digest = hashlib.sha256(f"{seed}:{name}".encode("utf-8")).digest()
    return int.from_bytes(digest[:8], byteorder="big", signed=False)


@dataclass
class DeterministicRNG:
    """Owns deterministic RNG streams without touching global random state.

    Named streams are cached and shared by whoever asks for the same name.
    Task streams are created fresh on every call so concurrent evaluation
    tasks never share a generator.
    """

    seed: int
    _streams: dict[str, random.Random] = field(default_factory=dict, init=False, repr=False)

    def stream(self, name: str) -> random.Random:
        """Return independent deterministic stream by name."""
        if name not in self._streams:
            self._streams[name] = random.Random(derive_seed(self.seed, name))
        return self._streams[name]

    def task_stream(self, generation_index: int, agent_index: int) -> random.Random:
        """Return a new generator private to one agent's evaluation task."""
        return random.Random(derive_seed(self.seed, f"generation:{generation_index}:agent:{agent_index}"))
