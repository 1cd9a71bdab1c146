"""Generation lifecycle orchestrator."""

from __future__ import annotations

import enum
import logging
import threading
import time
from concurrent.futures import Executor, Future, ProcessPoolExecutor, ThreadPoolExecutor, wait
from typing import Any, Mapping

from agents.agent import Agent
from configs.loader import GameConfig
from core.deterministic_rng import DeterministicRNG
from data.logger import SimulationLogger
from data.statistics import AgentSnapshot, StatisticsCollector
from engine.episode import evaluate_agent
from evolution.base import Breeder
from evolution.population import Population

LOGGER = logging.getLogger(__name__)

SIMULATOR_VERSION = "0.1.0"


class SimulatorState(str, enum.Enum):
    """Execution control states for the generation loop."""

    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class SimulatorExecutionError(RuntimeError):
    """Raised when one simulator lifecycle phase fails."""


class EvaluationTimeoutError(SimulatorExecutionError):
    """Raised when a generation's evaluation tasks miss the configured deadline."""


class EvolutionSimulator:
    """Evolves a population over a fixed number of generations.

    Every generation fans out one evaluation task per agent, joins on all of
    them, ranks the population, reports the alpha and runt, and breeds the
    next population. Each task gets its own random stream derived from
    ``(seed, generation, agent index)``, so results do not depend on
    scheduling order.
    """

    def __init__(
        self,
        config: GameConfig,
        breeder: Breeder,
        statistics: StatisticsCollector | None = None,
        logger: SimulationLogger | None = None,
    ) -> None:
        """Build the founding population and register the experiment."""
        self.config = config
        self.breeder = breeder
        self.rng = DeterministicRNG(config.seed)
        self.population = Population.founding(config.population_size, breeder, self.rng.stream("founding"))
        self.statistics = statistics if statistics is not None else StatisticsCollector()

        self.logger = logger
        self.experiment_id: str | None = None
        if self.logger is not None:
            self.experiment_id = self.logger.start_experiment(
                config=config.to_dict(),
                seed=config.seed,
                metadata={"breeder": breeder.name(), "simulator_version": SIMULATOR_VERSION},
            )

        self.generation_index: int = 0
        self.alpha: Agent | None = None
        self.runt: Agent | None = None
        self.last_generation_metrics: dict[str, float] | None = None

        self._state = SimulatorState.IDLE
        self._state_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._cancel_event: threading.Event | None = None

    def _make_executor(self) -> Executor:
        if self.config.executor == "process":
            return ProcessPoolExecutor(max_workers=self.config.max_workers)
        return ThreadPoolExecutor(max_workers=self.config.max_workers, thread_name_prefix="evaluate")

    def evaluate_population(self) -> bool:
        """Score every agent concurrently and wait for all of them.

        Each task scores a fresh ``Agent`` built from the stored policy, so
        re-evaluating a population abandoned by ``stop`` or a timeout counts
        exactly ``games_per_agent`` episodes per agent. Returns ``False`` when
        the run was stopped while tasks were in flight, in which case the
        scores are incomplete and must not be bred from.
        """
        agents = self.population.agents
        generation_index = self.generation_index
        cancel = threading.Event()
        with self._state_lock:
            self._cancel_event = cancel
        if self._stop_event.is_set():
            cancel.set()
        # Events cannot cross process boundaries; process tasks run to completion.
        task_cancel = cancel if self.config.executor == "thread" else None

        executor = self._make_executor()
        futures: dict[Future[Agent], int] = {}
        timed_out = False
        try:
            for index, agent in enumerate(agents):
                fresh = Agent(policy=agent.policy, agent_id=agent.agent_id)
                rng = self.rng.task_stream(generation_index, index)
                futures[executor.submit(evaluate_agent, fresh, self.config, rng, task_cancel)] = index

            done, pending = wait(futures, timeout=self.config.evaluation_timeout)
            if pending:
                timed_out = True
                cancel.set()
                for future in pending:
                    future.cancel()
                raise EvaluationTimeoutError(
                    f"Generation {generation_index}: {len(pending)} evaluation task(s) did not finish "
                    f"within {self.config.evaluation_timeout}s."
                )

            for future in sorted(done, key=futures.__getitem__):
                index = futures[future]
                try:
                    agents[index] = future.result()
                except Exception as exc:
                    LOGGER.exception("Evaluation failed for agent %d in generation %d", index, generation_index)
                    raise SimulatorExecutionError(f"Evaluation of agent {index} failed: {exc}") from exc
        finally:
            executor.shutdown(wait=not timed_out, cancel_futures=True)
            with self._state_lock:
                self._cancel_event = None

        return not cancel.is_set()

    def run_generation(self) -> bool:
        """Run one full generation lifecycle.

        Lifecycle:
          1) concurrent evaluation of every agent,
          2) ranking,
          3) alpha/runt reporting,
          4) breeding of the next population.

        Returns ``False`` if the generation was abandoned by ``stop``.
        """
        generation_index = self.generation_index
        if not self.evaluate_population():
            LOGGER.warning("Generation %d abandoned before completion", generation_index)
            return False

        self.population.rank()
        alpha = self.population.alpha()
        runt = self.population.runt()
        snapshots = {
            "alpha": self.statistics.record(generation_index, "alpha", alpha),
            "runt": self.statistics.record(generation_index, "runt", runt),
        }
        self.last_generation_metrics = {
            "alpha_score": float(alpha.score),
            "runt_score": float(runt.score),
            "mean_score": self.population.mean_score(),
            "diversity": self.population.diversity(),
        }
        LOGGER.info("Finished generation %d: alpha %d, runt %d", generation_index, alpha.score, runt.score)
        self.on_generation_end(generation_index, snapshots)

        self.alpha = alpha
        self.runt = runt
        self.population = self.population.next_generation(
            self.config.num_parents,
            self.config.mutation_rate,
            self.rng.stream(f"breed:{generation_index}"),
        )
        self.generation_index = generation_index + 1
        return True

    def on_generation_end(self, generation_index: int, snapshots: Mapping[str, AgentSnapshot]) -> None:
        """Persist statistics for a completed generation if logger is configured."""
        if self.logger is None or self.experiment_id is None:
            return

        metrics = self.last_generation_metrics or {}
        self._safe_call(
            "logger.log_generation",
            self.logger.log_generation,
            experiment_id=self.experiment_id,
            generation_index=generation_index,
            snapshots=snapshots,
            mean_score=float(metrics.get("mean_score", 0.0)),
            diversity=float(metrics.get("diversity", 0.0)),
        )

    def control_state(self) -> str:
        """Return current execution control state."""
        with self._state_lock:
            return str(self._state.value)

    def stop(self) -> None:
        """Stop the run; in-flight thread tasks finish their current episode.

        A stop requested while no run is active makes the next ``run`` return
        without evaluating anything.
        """
        self._stop_event.set()
        with self._state_lock:
            self._state = SimulatorState.STOPPED
            if self._cancel_event is not None:
                self._cancel_event.set()

    def run(self, generations: int | None = None) -> Agent | None:
        """Run the evolution loop and return the final alpha."""
        total = self.config.generations if generations is None else generations
        if total < 0:
            raise ValueError("generations must be non-negative")

        started = time.perf_counter()
        if self._stop_event.is_set():
            LOGGER.info("Stop requested before run; skipping %d generation(s)", total)
            self._stop_event.clear()
            return self.alpha
        with self._state_lock:
            self._state = SimulatorState.RUNNING

        try:
            for _ in range(total):
                if self._stop_event.is_set():
                    break
                if not self.run_generation():
                    break
        finally:
            with self._state_lock:
                if self._state != SimulatorState.STOPPED:
                    self._state = SimulatorState.IDLE
            self._stop_event.clear()

        LOGGER.info("Final alpha: %s", self.alpha)
        LOGGER.info("took %.3fs", time.perf_counter() - started)
        return self.alpha

    @staticmethod
    def _safe_call(label: str, fn: Any, *args: Any, **kwargs: Any) -> Any:
        try:
            return fn(*args, **kwargs)
        except Exception as exc:
            raise SimulatorExecutionError(f"{label} failed: {exc}") from exc
