"""Chart rendering for persisted alpha/runt statistics."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402

from agents.moves import Move  # noqa: E402
from data.logger import SimulationLogger  # noqa: E402
from data.statistics import ROLES, StatisticsCollector  # noqa: E402


def _save(fig: Any, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(path)
    plt.close(fig)
    return path


def _score_chart(rows: Sequence[dict[str, Any]], path: Path) -> Path:
    generations = list(range(len(rows)))
    fig, ax = plt.subplots(figsize=(8, 4))
    ax.plot(generations, [row["score"] for row in rows], label="score")
    ax.plot(generations, [row["rubbish_missed"] for row in rows], label="missed-rubbish")
    ax.set_xlabel("generation")
    ax.legend(loc="upper left")
    return _save(fig, path)


def _counters_chart(rows: Sequence[dict[str, Any]], path: Path) -> Path:
    generations = list(range(len(rows)))
    fig, ax = plt.subplots(figsize=(8, 4))
    for key, label in (
        ("pick_ups", "pick-ups"),
        ("false_pick_ups", "false-pick-ups"),
        ("bumps", "bumps"),
        ("rubbish_missed", "missed-rubbish"),
    ):
        ax.plot(generations, [row[key] for row in rows], label=label)
    ax.set_xlabel("generation")
    ax.legend(loc="upper left")
    return _save(fig, path)


def _genome_chart(usage: np.ndarray, path: Path) -> Path:
    """Stacked per-move gene counts; ``usage`` has shape (generations, 7)."""
    generations = np.arange(usage.shape[0])
    fig, ax = plt.subplots(figsize=(8, 4))
    if usage.shape[0]:
        ax.stackplot(generations, usage.T, labels=[move.label for move in Move], alpha=0.6)
    ax.set_xlabel("generation")
    ax.set_ylabel("genes")
    ax.legend(loc="upper left", fontsize="small")
    return _save(fig, path)


def render_charts(rows_by_role: dict[str, list[dict[str, Any]]], output_prefix: str | Path) -> list[Path]:
    """Write score, counter and genome charts for every role.

    Files are named ``<prefix>-<role>-scores.png``, ``-counters.png`` and
    ``-genome.png``.
    """
    prefix = str(output_prefix)
    written: list[Path] = []
    for role, rows in rows_by_role.items():
        usage = np.asarray([row["gene_usage"] for row in rows], dtype=np.int64).reshape(len(rows), len(Move))
        written.append(_score_chart(rows, Path(f"{prefix}-{role}-scores.png")))
        written.append(_counters_chart(rows, Path(f"{prefix}-{role}-counters.png")))
        written.append(_genome_chart(usage, Path(f"{prefix}-{role}-genome.png")))
    return written


def plot_statistics(statistics: StatisticsCollector, output_prefix: str | Path) -> list[Path]:
    """Render charts straight from an in-memory collector."""
    rows_by_role: dict[str, list[dict[str, Any]]] = {}
    for role in ROLES:
        rows_by_role[role] = [
            {
                "score": snapshot.score,
                "pick_ups": snapshot.pick_ups,
                "false_pick_ups": snapshot.false_pick_ups,
                "bumps": snapshot.bumps,
                "rubbish_missed": snapshot.rubbish_missed,
                "gene_usage": list(snapshot.gene_usage),
            }
            for snapshot in statistics.snapshots[role]
        ]
    return render_charts(rows_by_role, output_prefix)


def plot_experiment(db_path: str | Path, experiment_id: str, output_prefix: str | Path) -> list[Path]:
    """Render charts for an experiment from SQLite logs."""
    logger = SimulationLogger(db_path)
    try:
        rows_by_role = {role: logger.fetch_stats(experiment_id, role) for role in ROLES}
    finally:
        logger.close()
    if not any(rows_by_role.values()):
        raise ValueError(f"No statistics recorded for experiment '{experiment_id}'.")
    return render_charts(rows_by_role, output_prefix)
