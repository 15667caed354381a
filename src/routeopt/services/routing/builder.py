"""Route assembly and result aggregation shared by every algorithm."""

from __future__ import annotations

import random
import time
import uuid
from dataclasses import dataclass, field
from typing import Callable, Sequence

from ...models.domain import Improvements, Location, OptimizationResult, Route
from .budget import SearchBudget
from .fitness import FitnessEvaluator
from .parameters import AnnealingParameters, AntColonyParameters, GeneticParameters

SequenceOptimizer = Callable[[Sequence[Location], "OptimizationContext"], list[Location]]


@dataclass(slots=True)
class OptimizationContext:
    """Per-call state handed to each algorithm. Never shared between calls."""

    driver_id: str
    evaluator: FitnessEvaluator
    max_stops_per_route: int
    rng: random.Random = field(default_factory=random.Random)
    budget: SearchBudget = field(default_factory=SearchBudget.unlimited)
    genetic: GeneticParameters = field(default_factory=GeneticParameters)
    annealing: AnnealingParameters = field(default_factory=AnnealingParameters)
    ant_colony: AntColonyParameters = field(default_factory=AntColonyParameters)


def new_route_id() -> str:
    return f"route_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


def build_route(
    driver_id: str,
    locations: Sequence[Location],
    algorithm: str,
    evaluator: FitnessEvaluator,
) -> Route:
    return Route(
        route_id=new_route_id(),
        driver_id=driver_id,
        locations=tuple(locations),
        total_distance=evaluator.total_distance(locations),
        total_duration=evaluator.total_time(locations),
        estimated_earnings=evaluator.total_earnings(locations),
        algorithm=algorithm,
    )


def summarize_routes(routes: Sequence[Route], algorithm: str) -> OptimizationResult:
    return OptimizationResult(
        success=True,
        routes=list(routes),
        total_distance=sum(route.total_distance for route in routes),
        total_duration=sum(route.total_duration for route in routes),
        total_earnings=sum(route.estimated_earnings for route in routes),
        algorithm=algorithm,
    )


def measure_improvements(
    result: OptimizationResult,
    locations: Sequence[Location],
    max_stops_per_route: int,
    evaluator: FitnessEvaluator,
) -> Improvements:
    """Compare ``result`` against visiting the stops in the order they were supplied."""

    chunks = [locations[i:i + max_stops_per_route] for i in range(0, len(locations), max_stops_per_route)]
    baseline_distance = sum(evaluator.total_distance(chunk) for chunk in chunks)
    baseline_time = sum(evaluator.total_time(chunk) for chunk in chunks)
    baseline_earnings = sum(evaluator.total_earnings(chunk) for chunk in chunks)
    return Improvements(
        distance_reduction=baseline_distance - result.total_distance,
        time_reduction=baseline_time - result.total_duration,
        earnings_increase=result.total_earnings - baseline_earnings,
    )
