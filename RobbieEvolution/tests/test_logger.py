"""Tests for SQLite-backed experiment logger and statistics collector."""

from __future__ import annotations

import random
import sqlite3

import pytest

from agents.agent import Agent
from agents.genome import Genome
from agents.heuristic import HeuristicPolicy
from agents.moves import Move
from data.logger import SimulationLogger
from data.statistics import AgentSnapshot, StatisticsCollector


def _snapshot(score: int, usage: tuple[int, ...] = (243, 0, 0, 0, 0, 0, 0)) -> AgentSnapshot:
    return AgentSnapshot(
        score=score,
        pick_ups=3,
        false_pick_ups=2,
        bumps=1,
        rubbish_seen=20,
        rubbish_missed=17,
        gene_usage=usage,
    )


def test_logger_persists_metadata_and_generation_rows(tmp_path) -> None:
    db_path = tmp_path / "metrics.db"
    logger = SimulationLogger(db_path)

    experiment_id = logger.start_experiment(config={"population_size": 2, "generations": 1}, seed=42)
    logger.log_generation(
        experiment_id=experiment_id,
        generation_index=0,
        snapshots={"alpha": _snapshot(9), "runt": _snapshot(-4)},
        mean_score=2.5,
        diversity=120.0,
    )
    logger.close()

    conn = sqlite3.connect(db_path)
    metadata_count = conn.execute("SELECT COUNT(*) FROM experiment_metadata").fetchone()[0]
    stats_count = conn.execute("SELECT COUNT(*) FROM generation_stats").fetchone()[0]
    conn.close()

    assert metadata_count == 1
    assert stats_count == 2


def test_fetch_stats_orders_generations_and_decodes_usage(tmp_path) -> None:
    logger = SimulationLogger(tmp_path / "metrics.db")
    experiment_id = logger.start_experiment(config={"seed": 1}, seed=1)
    usage = (10, 20, 30, 40, 50, 60, 33)
    for generation_index in (1, 0):
        logger.log_generation(
            experiment_id=experiment_id,
            generation_index=generation_index,
            snapshots={"alpha": _snapshot(generation_index * 10, usage)},
        )

    rows = logger.fetch_stats(experiment_id, "alpha")
    latest = logger.latest_experiment_id()
    logger.close()

    assert [row["generation_index"] for row in rows] == [0, 1]
    assert [row["score"] for row in rows] == [0, 10]
    assert rows[0]["gene_usage"] == list(usage)
    assert latest == experiment_id


def test_snapshot_of_genome_agent_counts_genes() -> None:
    genome = Genome.founding(random.Random(0))
    agent = Agent(policy=genome, score=7, bumps=2)

    snapshot = AgentSnapshot.from_agent(agent)

    assert snapshot.score == 7
    assert snapshot.bumps == 2
    assert sum(snapshot.gene_usage) == 243
    assert snapshot.gene_usage[Move.PICK_UP_RUBBISH] == genome.gene_usage()[Move.PICK_UP_RUBBISH]


def test_snapshot_of_heuristic_agent_has_empty_usage() -> None:
    assert AgentSnapshot.from_agent(Agent(policy=HeuristicPolicy())).gene_usage == (0,) * 7


def test_collector_tracks_series_in_generation_order() -> None:
    collector = StatisticsCollector()
    for generation_index, score in enumerate((5, 8, 13)):
        collector.record(generation_index, "alpha", Agent(policy=HeuristicPolicy(), score=score))

    assert collector.series("alpha", "score") == [5, 8, 13]
    assert collector.gene_usage("alpha").shape == (3, 7)
    assert collector.gene_usage("runt").shape == (0, 7)

    with pytest.raises(ValueError):
        collector.record(7, "alpha", Agent(policy=HeuristicPolicy()))
    with pytest.raises(KeyError):
        collector.record(0, "median", Agent(policy=HeuristicPolicy()))
    with pytest.raises(KeyError):
        collector.series("alpha", "happiness")
