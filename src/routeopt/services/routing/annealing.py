"""Simulated annealing over a single route's stop order."""

from __future__ import annotations

import logging
import math
from typing import Sequence

from ...models.domain import Location, OptimizationResult
from .builder import OptimizationContext
from .nearest_neighbor import optimize_groups

logger = logging.getLogger(__name__)


def acceptance_probability(current_fitness: float, new_fitness: float, temperature: float) -> float:
    """Metropolis criterion for a maximisation problem."""

    if new_fitness > current_fitness:
        return 1.0
    return math.exp((new_fitness - current_fitness) / temperature)


def anneal_sequence(group: Sequence[Location], context: OptimizationContext) -> list[Location]:
    if len(group) < 2:
        return list(group)
    params = context.annealing
    rng = context.rng
    evaluator = context.evaluator

    current = list(group)
    rng.shuffle(current)
    current_fitness = evaluator.fitness(current)
    best, best_fitness = list(current), current_fitness
    temperature = params.initial_temperature

    while temperature > params.min_temperature:
        if context.budget.exhausted():
            logger.warning("Simulated annealing stopped early at temperature %.3f", temperature)
            break
        candidate = list(current)
        i = rng.randrange(len(candidate))
        j = rng.randrange(len(candidate))
        candidate[i], candidate[j] = candidate[j], candidate[i]
        candidate_fitness = evaluator.fitness(candidate)

        if candidate_fitness > current_fitness or rng.random() < acceptance_probability(
            current_fitness, candidate_fitness, temperature
        ):
            current, current_fitness = candidate, candidate_fitness
            if current_fitness > best_fitness:
                best, best_fitness = list(current), current_fitness

        temperature *= params.cooling_rate

    return best


def simulated_annealing_optimize(locations: Sequence[Location], context: OptimizationContext) -> OptimizationResult:
    return optimize_groups(locations, context, "simulated_annealing", anneal_sequence)
