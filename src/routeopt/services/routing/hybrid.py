"""Hybrid strategy: nearest-neighbour baseline refined by the genetic algorithm."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Sequence

from ...models.domain import Location, OptimizationResult
from .builder import OptimizationContext, summarize_routes
from .genetic import genetic_optimize
from .nearest_neighbor import nearest_neighbor_optimize

logger = logging.getLogger(__name__)


def hybrid_optimize(locations: Sequence[Location], context: OptimizationContext) -> OptimizationResult:
    baseline = nearest_neighbor_optimize(locations, context)
    refined = genetic_optimize(locations, context)

    chosen = refined if refined.total_distance < baseline.total_distance else baseline
    logger.info(
        "Hybrid picked %s (nearest_neighbor=%.3fkm, genetic=%.3fkm)",
        chosen.algorithm,
        baseline.total_distance,
        refined.total_distance,
    )
    routes = [replace(route, algorithm="hybrid") for route in chosen.routes]
    result = summarize_routes(routes, "hybrid")
    result.metadata["selected_algorithm"] = chosen.algorithm
    return result
