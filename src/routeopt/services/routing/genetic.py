"""Genetic algorithm over the visiting order of a single route.

Individuals are permutations of positions into the input group, so crossover
and mutation never have to compare ``Location`` values. The population is
replaced wholesale every generation (no elitism) and evolution runs for a
fixed number of generations unless the search budget runs out first.
"""

from __future__ import annotations

import logging
import random
from typing import Sequence

from ...models.domain import Location, OptimizationResult
from .builder import OptimizationContext
from .fitness import FitnessEvaluator
from .nearest_neighbor import optimize_groups
from .parameters import GeneticParameters

logger = logging.getLogger(__name__)

Permutation = list[int]


def order_crossover(parent_a: Permutation, parent_b: Permutation, rng: random.Random) -> tuple[Permutation, Permutation]:
    """Order crossover (OX) producing two children.

    A random slice ``[start, end]`` is copied from one parent into the same
    positions of the child; the free positions are filled left to right with
    the other parent's genes in their original relative order.
    """

    size = len(parent_a)
    if size != len(parent_b):
        raise ValueError("Parents must have the same length")
    if size < 2:
        return list(parent_a), list(parent_b)
    start = rng.randrange(size)
    end = rng.randrange(start, size)
    return _ox_child(parent_a, parent_b, start, end), _ox_child(parent_b, parent_a, start, end)


def _ox_child(donor: Permutation, filler: Permutation, start: int, end: int) -> Permutation:
    size = len(donor)
    child: list[int | None] = [None] * size
    child[start:end + 1] = donor[start:end + 1]
    taken = set(donor[start:end + 1])
    slot = 0
    for gene in filler:
        if gene in taken:
            continue
        while child[slot] is not None:
            slot += 1
        child[slot] = gene
        taken.add(gene)
    return child  # type: ignore[return-value]


def swap_mutation(individual: Permutation, rng: random.Random) -> Permutation:
    mutated = list(individual)
    i = rng.randrange(len(mutated))
    j = rng.randrange(len(mutated))
    mutated[i], mutated[j] = mutated[j], mutated[i]
    return mutated


def roulette_selection(
    population: Sequence[Permutation],
    scores: Sequence[float],
    rng: random.Random,
) -> list[Permutation]:
    """Fitness-proportionate selection with replacement, one draw per individual."""

    total = sum(scores)
    selected: list[Permutation] = []
    for _ in range(len(population)):
        if total <= 0:
            selected.append(list(population[rng.randrange(len(population))]))
            continue
        pick = rng.random() * total
        cumulative = 0.0
        chosen = population[-1]
        for individual, score in zip(population, scores):
            cumulative += score
            if cumulative >= pick:
                chosen = individual
                break
        selected.append(list(chosen))
    return selected


def _breed(parents: list[Permutation], params: GeneticParameters, rng: random.Random) -> list[Permutation]:
    offspring: list[Permutation] = []
    for i in range(0, len(parents), 2):
        if i + 1 < len(parents) and rng.random() < params.crossover_rate:
            offspring.extend(order_crossover(parents[i], parents[i + 1], rng))
        else:
            offspring.append(list(parents[i]))
            if i + 1 < len(parents):
                offspring.append(list(parents[i + 1]))
    return [
        swap_mutation(child, rng) if rng.random() < params.mutation_rate else child
        for child in offspring
    ]


def _score(individual: Permutation, group: Sequence[Location], evaluator: FitnessEvaluator) -> float:
    return evaluator.fitness([group[index] for index in individual])


def evolve_sequence(group: Sequence[Location], context: OptimizationContext) -> list[Location]:
    """Return the fittest ordering of ``group`` found by the genetic algorithm."""

    if len(group) < 2:
        return list(group)
    params = context.genetic
    rng = context.rng
    evaluator = context.evaluator

    population: list[Permutation] = []
    for _ in range(params.population_size):
        individual = list(range(len(group)))
        rng.shuffle(individual)
        population.append(individual)

    for generation in range(params.generations):
        if context.budget.exhausted():
            logger.warning("Genetic search stopped early at generation %d of %d", generation, params.generations)
            break
        scores = [_score(individual, group, evaluator) for individual in population]
        population = _breed(roulette_selection(population, scores, rng), params, rng)

    best = max(population, key=lambda individual: _score(individual, group, evaluator))
    return [group[index] for index in best]


def genetic_optimize(locations: Sequence[Location], context: OptimizationContext) -> OptimizationResult:
    return optimize_groups(locations, context, "genetic", evolve_sequence)
