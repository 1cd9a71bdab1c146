"""Tests for CLI run/batch/plot flow."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from cli.main import _UTCFormatter, run_cli
from data.logger import SimulationLogger


def _write_config(path: Path, **overrides: object) -> Path:
    payload = {
        "population_size": 4,
        "generations": 2,
        "games_per_agent": 2,
        "moves_per_episode": 20,
        "grid_size": 4,
        "seed": 7,
    }
    payload.update(overrides)
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_cli_run_writes_charts_and_plot_redraws(tmp_path) -> None:
    db_path = tmp_path / "sim.db"
    config_path = _write_config(tmp_path / "config.json", output=str(tmp_path / "run"))

    assert run_cli(["run", "--config", str(config_path), "--db", str(db_path)]) == 0
    for role in ("alpha", "runt"):
        for chart in ("scores", "counters", "genome"):
            assert (tmp_path / f"run-{role}-{chart}.png").exists()

    logger = SimulationLogger(db_path)
    exp_id = logger.latest_experiment_id()
    logger.close()
    assert exp_id is not None

    out_prefix = tmp_path / "replot" / "chart"
    assert run_cli(["plot", "--experiment", exp_id, "--db", str(db_path), "--out", str(out_prefix)]) == 0
    assert (tmp_path / "replot" / "chart-alpha-genome.png").exists()


def test_cli_overrides_and_no_plot(tmp_path, capsys) -> None:
    db_path = tmp_path / "sim.db"
    config_path = _write_config(tmp_path / "config.json", output=str(tmp_path / "unused"))

    code = run_cli(
        ["run", "--config", str(config_path), "--db", str(db_path), "--breeder", "human", "--generations", "1", "--no-plot"]
    )

    assert code == 0
    assert not (tmp_path / "unused-alpha-scores.png").exists()
    experiment_id = capsys.readouterr().out.strip()
    logger = SimulationLogger(db_path)
    rows = logger.fetch_stats(experiment_id, "alpha")
    logger.close()
    assert len(rows) == 1


def test_cli_batch_runs_each_entry(tmp_path, capsys) -> None:
    db_path = tmp_path / "sim.db"
    batch_path = tmp_path / "batch.json"
    entries = [
        {"population_size": 3, "generations": 1, "games_per_agent": 1, "moves_per_episode": 10, "seed": seed}
        for seed in (1, 2)
    ]
    batch_path.write_text(json.dumps({"experiments": entries}), encoding="utf-8")

    assert run_cli(["batch", "--config", str(batch_path), "--db", str(db_path), "--no-plot"]) == 0
    assert len(capsys.readouterr().out.split()) == 2


def test_cli_rejects_invalid_configuration(tmp_path) -> None:
    config_path = _write_config(tmp_path / "config.json", rubbish_probability=1.5)

    assert run_cli(["run", "--config", str(config_path), "--db", str(tmp_path / "sim.db")]) == 1
    assert run_cli(["run", "--breeder", "nobody", "--db", str(tmp_path / "sim.db")]) == 1


def test_log_timestamps_are_utc_with_microseconds() -> None:
    formatter = _UTCFormatter("%(asctime)s %(message)s")
    record = logging.LogRecord("robbie", logging.INFO, __file__, 1, "hello", None, None)
    record.created = 0.123456

    assert formatter.format(record) == "1970-01-01T00:00:00.123456Z hello"
