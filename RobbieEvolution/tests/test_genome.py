"""Tests for the lookup-table genome and its breeding operators."""

from __future__ import annotations

import itertools
import random

import numpy as np
import pytest

from agents.genome import GENOME_SIZE, Genome, encode_observation
from agents.moves import NUM_MOVES, Move
from environment.grid import CellState, Observation


def _uniform_fractions(genomes: list[Genome]) -> np.ndarray:
    counts = sum(genome.gene_usage() for genome in genomes)
    return counts / counts.sum()


def test_genome_size_is_three_to_the_fifth() -> None:
    assert GENOME_SIZE == 243
    assert len(Genome.founding(random.Random(0))) == GENOME_SIZE


def test_wrong_length_is_rejected() -> None:
    with pytest.raises(ValueError):
        Genome(moves=(Move.DO_NOTHING,) * 10)


def test_founding_moves_are_uniform() -> None:
    rng = random.Random(123)
    fractions = _uniform_fractions([Genome.founding(rng) for _ in range(200)])

    assert fractions.shape == (NUM_MOVES,)
    assert np.all(np.abs(fractions - 1.0 / NUM_MOVES) < 0.01)


def test_breed_without_mutation_from_one_parent_copies_it() -> None:
    rng = random.Random(7)
    parent = Genome.founding(rng)

    child = Genome.breed(0.0, [parent], rng)

    assert child == parent
    assert child is not parent


def test_breed_with_full_mutation_ignores_parents() -> None:
    rng = random.Random(8)
    parent = Genome(moves=(Move.DO_NOTHING,) * GENOME_SIZE)

    children = [Genome.breed(1.0, [parent, parent], rng) for _ in range(200)]
    fractions = _uniform_fractions(children)

    assert np.all(np.abs(fractions - 1.0 / NUM_MOVES) < 0.01)


def test_breed_without_parents_is_founding() -> None:
    assert Genome.breed(0.3, [], random.Random(11)) == Genome.founding(random.Random(11))


def test_breed_takes_each_slot_from_some_parent() -> None:
    rng = random.Random(12)
    parents = [Genome.founding(rng) for _ in range(3)]

    child = Genome.breed(0.0, parents, rng)

    for slot in range(GENOME_SIZE):
        assert child[slot] in {parent[slot] for parent in parents}
    sources = {
        index for slot in range(GENOME_SIZE) for index, parent in enumerate(parents) if child[slot] == parent[slot]
    }
    assert sources == {0, 1, 2}


def test_observation_encoding_is_a_bijection() -> None:
    indices = [encode_observation(states) for states in itertools.product(range(3), repeat=5)]

    assert len(indices) == 243
    assert sorted(indices) == list(range(243))


def test_encoding_weights_follow_neighbour_order() -> None:
    assert encode_observation((1, 0, 0, 0, 0)) == 1
    assert encode_observation((0, 1, 0, 0, 0)) == 3
    assert encode_observation((0, 0, 1, 0, 0)) == 9
    assert encode_observation((0, 0, 0, 1, 0)) == 27
    assert encode_observation((0, 0, 0, 0, 1)) == 81
    assert encode_observation((2, 2, 2, 2, 2)) == 242


def test_decide_reads_the_encoded_slot() -> None:
    genome = Genome(moves=tuple(Move(slot % NUM_MOVES) for slot in range(GENOME_SIZE)))
    observation = Observation(
        current=CellState.RUBBISH,
        above=CellState.WALL,
        right=CellState.EMPTY,
        below=CellState.EMPTY,
        left=CellState.WALL,
    )
    index = 1 + 3 * 2 + 81 * 2

    assert genome.decide(observation) == Move(index % NUM_MOVES)


def test_gene_usage_counts_every_slot() -> None:
    genome = Genome(moves=(Move.PICK_UP_RUBBISH,) * 200 + (Move.MOVE_LEFT,) * 43)

    usage = genome.gene_usage()

    assert usage.tolist() == [0, 0, 0, 0, 43, 0, 200]

