"""Command-line entry points for running, batching, and plotting evolutions."""

from __future__ import annotations

import argparse
import logging
from datetime import datetime, timezone
from pathlib import Path
import sys

# Allow `python cli/main.py ...` execution from IDEs by adding repo root to sys.path.
if __package__ in {None, ""}:
    repo_root = Path(__file__).resolve().parents[1]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))

from configs.loader import ConfigLoader, ConfigValidationError, GameConfig
from data.logger import SimulationLogger
from engine.component_registry import available_breeder_factories
from main import build_simulator
from visualization.plotting import plot_experiment

LOGGER = logging.getLogger(__name__)

_OVERRIDES: tuple[tuple[str, str, type], ...] = (
    ("--seed", "seed", int),
    ("--generations", "generations", int),
    ("--population-size", "population_size", int),
    ("--games-per-agent", "games_per_agent", int),
    ("--moves-per-episode", "moves_per_episode", int),
    ("--parents", "num_parents", int),
    ("--mutation-rate", "mutation_rate", float),
    ("--rubbish-probability", "rubbish_probability", float),
    ("--grid-size", "grid_size", int),
    ("--breeder", "breeder", str),
    ("--executor", "executor", str),
    ("--max-workers", "max_workers", int),
    ("--output", "output", str),
)


class _UTCFormatter(logging.Formatter):
    """ISO-8601 UTC timestamps with microsecond resolution."""

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        return datetime.fromtimestamp(record.created, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def _configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), force=True)
    formatter = _UTCFormatter("%(asctime)s %(levelname)s %(name)s:%(lineno)d %(message)s")
    for handler in logging.getLogger().handlers:
        handler.setFormatter(formatter)


def _check_breeder(config: GameConfig) -> GameConfig:
    if config.breeder not in available_breeder_factories():
        available = ", ".join(available_breeder_factories())
        raise ConfigValidationError(f"Unknown breeder '{config.breeder}'. Available: {available}")
    return config


def _load_run_config(args: argparse.Namespace) -> GameConfig:
    config = ConfigLoader.load(args.config) if args.config else GameConfig()
    overrides = {
        field: getattr(args, field) for _flag, field, _type in _OVERRIDES if getattr(args, field) is not None
    }
    return _check_breeder(config.replace(**overrides) if overrides else config)


def _run_single(config: GameConfig, db_path: Path, plot: bool = True) -> str:
    logger = SimulationLogger(db_path)
    experiment_id: str | None = None
    try:
        simulator = build_simulator(config=config, logger=logger)
        simulator.run()
        experiment_id = simulator.experiment_id
    finally:
        logger.close()
    if experiment_id is None:
        raise RuntimeError("Expected experiment id when logger is configured.")
    if plot:
        for path in plot_experiment(db_path, experiment_id, config.output):
            LOGGER.info("Wrote %s", path)
    return experiment_id


def run_cli(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="robbie")
    parser.add_argument("--log-level", default="INFO")
    sub = parser.add_subparsers(dest="command", required=True)

    run_cmd = sub.add_parser("run")
    run_cmd.add_argument("--config")
    run_cmd.add_argument("--db", default="simulation_metrics.db")
    run_cmd.add_argument("--no-plot", action="store_true")
    for flag, field, kind in _OVERRIDES:
        run_cmd.add_argument(flag, dest=field, type=kind, default=None)

    batch_cmd = sub.add_parser("batch")
    batch_cmd.add_argument("--config", default="configs/example_batch.yaml")
    batch_cmd.add_argument("--db", default="simulation_metrics.db")
    batch_cmd.add_argument("--no-plot", action="store_true")

    plot_cmd = sub.add_parser("plot")
    plot_cmd.add_argument("--experiment")
    plot_cmd.add_argument("--db", default="simulation_metrics.db")
    plot_cmd.add_argument("--out", default="artifacts/chart")

    args = parser.parse_args(argv)
    _configure_logging(args.log_level)

    if args.command == "run":
        try:
            config = _load_run_config(args)
        except ConfigValidationError as exc:
            LOGGER.error("%s", exc)
            run_cmd.print_usage()
            return 1
        print(_run_single(config, Path(args.db), plot=not args.no_plot))
        return 0

    if args.command == "batch":
        try:
            configs = [_check_breeder(config) for config in ConfigLoader.load_many(args.config)]
        except ConfigValidationError as exc:
            LOGGER.error("%s", exc)
            batch_cmd.print_usage()
            return 1
        for config in configs:
            print(_run_single(config, Path(args.db), plot=not args.no_plot))
        return 0

    if args.command == "plot":
        experiment_id = args.experiment
        if experiment_id is None:
            logger = SimulationLogger(args.db)
            experiment_id = logger.latest_experiment_id()
            logger.close()
            if experiment_id is None:
                LOGGER.error("No experiments recorded in %s", args.db)
                return 1
        for path in plot_experiment(args.db, experiment_id, args.out):
            print(path)
        return 0

    return 1


if __name__ == "__main__":
    raise SystemExit(run_cli())
