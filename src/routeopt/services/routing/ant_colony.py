"""Ant colony optimization over a single route's stop order."""

from __future__ import annotations

import logging
import random
from typing import Sequence

import numpy as np

from ...models.domain import Location, OptimizationResult
from .builder import OptimizationContext
from .fitness import FitnessEvaluator
from .nearest_neighbor import optimize_groups
from .parameters import AntColonyParameters

logger = logging.getLogger(__name__)

# Stand-in for a zero leg so co-located stops remain strongly attractive
# without dividing by zero.
MIN_DISTANCE_KM = 1e-6

Tour = list[int]


def initialize_pheromones(size: int) -> np.ndarray:
    return np.ones((size, size), dtype=float)


def transition_probabilities(
    current: int,
    candidates: Sequence[int],
    pheromones: np.ndarray,
    distances: np.ndarray,
    params: AntColonyParameters,
) -> np.ndarray:
    """Probability of moving from ``current`` to each candidate, proportional to tau^alpha * (1/d)^beta."""

    index = np.asarray(candidates, dtype=int)
    legs = np.maximum(distances[current, index], MIN_DISTANCE_KM)
    weights = np.power(pheromones[current, index], params.alpha) * np.power(1.0 / legs, params.beta)
    total = weights.sum()
    if not np.isfinite(total) or total <= 0:
        return np.full(len(index), 1.0 / len(index))
    return weights / total


def _roulette(probabilities: np.ndarray, rng: random.Random) -> int:
    pick = rng.random()
    cumulative = 0.0
    for position, probability in enumerate(probabilities):
        cumulative += probability
        if cumulative >= pick:
            return position
    return len(probabilities) - 1


def build_tour(
    size: int,
    pheromones: np.ndarray,
    distances: np.ndarray,
    params: AntColonyParameters,
    rng: random.Random,
) -> Tour:
    unvisited = list(range(size))
    current = unvisited.pop(rng.randrange(size))
    tour = [current]
    while unvisited:
        probabilities = transition_probabilities(current, unvisited, pheromones, distances, params)
        current = unvisited.pop(_roulette(probabilities, rng))
        tour.append(current)
    return tour


def update_pheromones(
    pheromones: np.ndarray,
    tours: Sequence[Tour],
    scores: Sequence[float],
    params: AntColonyParameters,
) -> None:
    """Evaporate every trail, then reinforce the edges each ant actually walked.

    Deposits are proportional to the tour's fitness and applied to both
    directions of an edge since leg distances are symmetric.
    """

    pheromones *= 1.0 - params.evaporation_rate
    for tour, score in zip(tours, scores):
        amount = params.pheromone_deposit * score
        for origin, destination in zip(tour, tour[1:]):
            pheromones[origin, destination] += amount
            pheromones[destination, origin] += amount


def _score(tour: Tour, group: Sequence[Location], evaluator: FitnessEvaluator) -> float:
    return evaluator.fitness([group[index] for index in tour])


def ant_colony_sequence(group: Sequence[Location], context: OptimizationContext) -> list[Location]:
    if len(group) < 2:
        return list(group)
    params = context.ant_colony
    size = len(group)
    distances = context.evaluator.distance_model.distance_matrix(group)
    pheromones = initialize_pheromones(size)

    best_tour: Tour = list(range(size))
    best_score = float("-inf")

    for iteration in range(params.iterations):
        if context.budget.exhausted():
            logger.warning("Ant colony stopped early at iteration %d of %d", iteration, params.iterations)
            break
        tours: list[Tour] = []
        scores: list[float] = []
        for _ in range(params.num_ants):
            tour = build_tour(size, pheromones, distances, params, context.rng)
            score = _score(tour, group, context.evaluator)
            tours.append(tour)
            scores.append(score)
            if score > best_score:
                best_tour, best_score = tour, score
        update_pheromones(pheromones, tours, scores, params)

    return [group[index] for index in best_tour]


def ant_colony_optimize(locations: Sequence[Location], context: OptimizationContext) -> OptimizationResult:
    return optimize_groups(locations, context, "ant_colony", ant_colony_sequence)
