"""Simple evolution runner for local validation."""

from __future__ import annotations

import logging
from pathlib import Path

from configs.loader import ConfigLoader, GameConfig
from data.logger import SimulationLogger
from data.statistics import StatisticsCollector
from engine.component_registry import create_breeder
from engine.simulator import EvolutionSimulator
from visualization.plotting import plot_statistics


def build_simulator(
    config: GameConfig,
    logger: SimulationLogger | None = None,
    statistics: StatisticsCollector | None = None,
) -> EvolutionSimulator:
    """Build an evolution simulator from run configuration."""
    return EvolutionSimulator(
        config=config,
        breeder=create_breeder(config.breeder),
        statistics=statistics,
        logger=logger,
    )


def main(config_path: str = "configs/example_experiment.yaml") -> None:
    """Load config, run the evolution, and write charts."""
    logging.basicConfig(level=logging.INFO)
    config = ConfigLoader.load(config_path)
    logger = SimulationLogger(Path("simulation_metrics.db"))
    try:
        simulator = build_simulator(config=config, logger=logger)
        simulator.run()
    finally:
        logger.close()
    plot_statistics(simulator.statistics, config.output)


if __name__ == "__main__":
    main()
