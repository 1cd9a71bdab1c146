"""Episode playback: drive one agent's policy against fresh grids."""

from __future__ import annotations

import random
import threading

from agents.agent import Agent
from agents.moves import Move
from configs.loader import GameConfig
from environment.grid import Grid


def play_episode(agent: Agent, grid: Grid, config: GameConfig, rng: random.Random) -> None:
    """Let ``agent`` act on ``grid`` for ``config.moves_per_episode`` turns.

    Every outcome is routed into the matching agent counter. Rubbish present
    before the first move counts as seen; rubbish left after the last move
    counts as missed.
    """
    agent.accumulate_seen(grid.remaining_rubbish())
    for _ in range(config.moves_per_episode):
        move = agent.policy.decide(grid.observe(), rng)
        if move == Move.DO_NOTHING:
            continue
        if move == Move.PICK_UP_RUBBISH:
            if grid.attempt_pick_up():
                agent.reward(config.pick_up_reward)
            else:
                agent.penalize_false_pick_up(config.pick_up_penalty)
            continue
        if not grid.attempt_move(move):
            agent.penalize_bump(config.bump_penalty)
    agent.accumulate_missed(grid.remaining_rubbish())


def evaluate_agent(
    agent: Agent,
    config: GameConfig,
    rng: random.Random,
    cancel: threading.Event | None = None,
) -> Agent:
    """Play ``config.games_per_agent`` sequential episodes and return ``agent``.

    ``rng`` must be private to this task: it seeds every grid and resolves all
    random moves. ``cancel`` is checked between episodes.
    """
    for _ in range(config.games_per_agent):
        if cancel is not None and cancel.is_set():
            break
        grid = Grid.create(config.grid_size, config.rubbish_probability, rng)
        play_episode(agent, grid, config, rng)
    return agent
