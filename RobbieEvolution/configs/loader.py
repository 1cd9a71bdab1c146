"""Configuration loading and validation utilities for evolution runs."""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml


class ConfigValidationError(ValueError):
    """Raised when a run configuration fails validation."""


_EXECUTORS: frozenset[str] = frozenset({"thread", "process"})


@dataclass(frozen=True)
class GameConfig:
    """Validated, immutable parameters of one evolution run.

    Reward and penalty values are non-negative magnitudes; the sign is applied
    by the agent accumulators.
    """

    pick_up_reward: int = 10
    pick_up_penalty: int = 5
    bump_penalty: int = 1
    moves_per_episode: int = 500
    rubbish_probability: float = 0.25
    mutation_rate: float = 0.01
    grid_size: int = 10
    games_per_agent: int = 100
    generations: int = 500
    population_size: int = 200
    num_parents: int = 2
    output: str = "chart"
    seed: int = 0
    breeder: str = "robbie"
    executor: str = "thread"
    max_workers: int | None = None
    evaluation_timeout: float | None = None

    def __post_init__(self) -> None:
        for name in ("pick_up_reward", "pick_up_penalty", "bump_penalty"):
            if getattr(self, name) < 0:
                raise ConfigValidationError(f"{name} must be >= 0 (store magnitudes, not signed values)")
        for name in ("moves_per_episode", "grid_size", "games_per_agent", "generations", "population_size", "num_parents"):
            if getattr(self, name) < 1:
                raise ConfigValidationError(f"{name} must be > 0")
        if not 0.0 <= self.rubbish_probability <= 1.0:
            raise ConfigValidationError(
                f"rubbish_probability not within allowed range [0.0, 1.0]: {self.rubbish_probability}"
            )
        if not 0.0 <= self.mutation_rate <= 1.0:
            raise ConfigValidationError(f"mutation_rate not within allowed range [0.0, 1.0]: {self.mutation_rate}")
        if not self.output:
            raise ConfigValidationError("output must be non-empty")
        if not self.breeder:
            raise ConfigValidationError("breeder must be non-empty")
        if self.executor not in _EXECUTORS:
            raise ConfigValidationError(f"executor must be one of {sorted(_EXECUTORS)}, got {self.executor!r}")
        if self.max_workers is not None and self.max_workers < 1:
            raise ConfigValidationError("max_workers must be > 0 when set")
        if self.evaluation_timeout is not None and self.evaluation_timeout <= 0:
            raise ConfigValidationError("evaluation_timeout must be > 0 when set")

    def replace(self, **overrides: Any) -> "GameConfig":
        """Return a validated copy with ``overrides`` applied."""
        return dataclasses.replace(self, **overrides)

    def to_dict(self) -> dict[str, Any]:
        """Return a full dictionary view of the configuration."""
        return dataclasses.asdict(self)


_FIELD_TYPES: dict[str, type] = {
    "pick_up_reward": int,
    "pick_up_penalty": int,
    "bump_penalty": int,
    "moves_per_episode": int,
    "rubbish_probability": float,
    "mutation_rate": float,
    "grid_size": int,
    "games_per_agent": int,
    "generations": int,
    "population_size": int,
    "num_parents": int,
    "output": str,
    "seed": int,
    "breeder": str,
    "executor": str,
    "max_workers": int,
    "evaluation_timeout": float,
}


class ConfigLoader:
    """Load and validate run configuration files (YAML or JSON)."""

    @staticmethod
    def load(path: str | Path) -> GameConfig:
        """Load a single run config from ``path``.

        Args:
            path: Path to a YAML or JSON config file.

        Returns:
            A validated ``GameConfig`` instance.
        """
        payload = _read_config_payload(path)
        if payload is None:
            return GameConfig()
        if not isinstance(payload, Mapping):
            raise ConfigValidationError("Single config file must contain a mapping object.")
        return build_config(payload)

    @staticmethod
    def load_many(path: str | Path) -> list[GameConfig]:
        """Load one or many run configs from ``path``.

        Supports:
            - top-level mapping for single run
            - top-level list of mappings
            - top-level mapping with an ``experiments`` list
        """
        payload = _read_config_payload(path)

        if isinstance(payload, list):
            return [build_config(item) for item in payload]

        if isinstance(payload, Mapping) and "experiments" in payload:
            experiments = payload["experiments"]
            if not isinstance(experiments, list):
                raise ConfigValidationError("'experiments' must be a list of mappings.")
            return [build_config(item) for item in experiments]

        if isinstance(payload, Mapping):
            return [build_config(payload)]

        raise ConfigValidationError("Unsupported config file structure.")


def _read_config_payload(path: str | Path) -> Any:
    """Read raw config payload from JSON or YAML file."""
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigValidationError(f"Config file not found: {config_path}")
    suffix = config_path.suffix.lower()
    content = config_path.read_text(encoding="utf-8")

    try:
        if suffix == ".json":
            return json.loads(content)
        if suffix in {".yaml", ".yml"}:
            return yaml.safe_load(content)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigValidationError(f"Failed to parse config '{config_path}': {exc}") from exc

    raise ConfigValidationError(f"Unsupported config extension: {suffix}")


def build_config(payload: Mapping[str, Any]) -> GameConfig:
    """Validate a raw mapping and build ``GameConfig``."""
    if not isinstance(payload, Mapping):
        raise ConfigValidationError("Config entries must be mappings.")

    unknown = sorted(key for key in payload if key not in _FIELD_TYPES)
    if unknown:
        raise ConfigValidationError(f"Unknown config key(s): {', '.join(unknown)}")

    values: dict[str, Any] = {}
    for key, raw in payload.items():
        if raw is None and key in {"max_workers", "evaluation_timeout"}:
            values[key] = None
            continue
        expected = _FIELD_TYPES[key]
        if isinstance(raw, bool) or (expected is str and not isinstance(raw, str)):
            raise ConfigValidationError(f"Field '{key}' expected {expected.__name__}, got {type(raw).__name__}.")
        try:
            values[key] = expected(raw)
        except (TypeError, ValueError) as exc:
            raise ConfigValidationError(f"Field '{key}' expected {expected.__name__}: {exc}") from exc
        if expected is int and isinstance(raw, float) and not raw.is_integer():
            raise ConfigValidationError(f"Field '{key}' expected int, got {raw!r}.")

    return GameConfig(**values)
