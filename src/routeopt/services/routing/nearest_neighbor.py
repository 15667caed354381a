"""Greedy nearest-neighbour construction and multi-route splitting."""

from __future__ import annotations

from typing import Sequence

from ...models.domain import Location, OptimizationResult
from .builder import OptimizationContext, SequenceOptimizer, build_route, summarize_routes
from .distance import DistanceModel


def _nearest(current: Location, candidates: Sequence[Location], distance_model: DistanceModel) -> int:
    # Strict comparison keeps the first candidate in input order on ties.
    best_index = 0
    best_distance = distance_model.distance(current, candidates[0])
    for index in range(1, len(candidates)):
        distance = distance_model.distance(current, candidates[index])
        if distance < best_distance:
            best_distance = distance
            best_index = index
    return best_index


def split_into_groups(
    locations: Sequence[Location],
    max_stops_per_route: int,
    distance_model: DistanceModel | None = None,
) -> list[list[Location]]:
    """Partition ``locations`` into nearest-neighbour chains of at most ``max_stops_per_route`` stops.

    Each chain is seeded with the first unassigned location in input order and
    grown by repeatedly appending the closest remaining location. The result is
    deterministic for a given input ordering.
    """

    if max_stops_per_route < 1:
        raise ValueError("max_stops_per_route must be >= 1")
    distance_model = distance_model or DistanceModel()
    remaining = list(locations)
    groups: list[list[Location]] = []

    while remaining:
        current = remaining.pop(0)
        group = [current]
        while len(group) < max_stops_per_route and remaining:
            current = remaining.pop(_nearest(current, remaining, distance_model))
            group.append(current)
        groups.append(group)

    return groups


def nearest_neighbor_optimize(locations: Sequence[Location], context: OptimizationContext) -> OptimizationResult:
    groups = split_into_groups(locations, context.max_stops_per_route, context.evaluator.distance_model)
    routes = [build_route(context.driver_id, group, "nearest_neighbor", context.evaluator) for group in groups]
    return summarize_routes(routes, "nearest_neighbor")


def optimize_groups(
    locations: Sequence[Location],
    context: OptimizationContext,
    algorithm: str,
    optimizer: SequenceOptimizer,
) -> OptimizationResult:
    """Split with nearest neighbour when a single route would be too long, then reorder each group."""

    if not locations:
        return OptimizationResult.empty(algorithm)
    if len(locations) <= context.max_stops_per_route:
        groups = [list(locations)]
    else:
        groups = split_into_groups(locations, context.max_stops_per_route, context.evaluator.distance_model)
    routes = [
        build_route(context.driver_id, optimizer(group, context), algorithm, context.evaluator)
        for group in groups
    ]
    return summarize_routes(routes, algorithm)
