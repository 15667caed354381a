"""Route optimization orchestration service."""

from __future__ import annotations

import logging
import random
import threading
import time
from collections import Counter
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Iterable, Sequence

from ...config import Settings, settings as default_settings
from ...data.deliveries import ActiveDeliverySource, locations_from_deliveries
from ...errors import DeliverySourceError, DuplicateLocationError, UnknownAlgorithmError
from ...models.domain import Location, OptimizationResult, Route
from ...persistence.filesystem import FileStorage
from ...persistence.repository import InMemoryRouteRepository, RouteRepository
from ...schemas.optimization import OptimizationOptions
from ..outputs.routing_formatter import optimization_result_to_csv, optimization_result_to_json
from .annealing import simulated_annealing_optimize
from .ant_colony import ant_colony_optimize
from .budget import SearchBudget
from .builder import OptimizationContext, measure_improvements
from .distance import DistanceModel
from .fitness import FitnessEvaluator, FitnessWeights
from .genetic import genetic_optimize
from .hybrid import hybrid_optimize
from .nearest_neighbor import nearest_neighbor_optimize
from .parameters import AnnealingParameters, AntColonyParameters, GeneticParameters
from .stats import compute_route_stats

logger = logging.getLogger(__name__)

AlgorithmRunner = Callable[[Sequence[Location], OptimizationContext], OptimizationResult]

ALGORITHM_RUNNERS: dict[str, AlgorithmRunner] = {
    "nearest_neighbor": nearest_neighbor_optimize,
    "genetic": genetic_optimize,
    "simulated_annealing": simulated_annealing_optimize,
    "ant_colony": ant_colony_optimize,
    "hybrid": hybrid_optimize,
}

SAMPLE_LOCATIONS: tuple[Location, ...] = (
    Location("loc1", 40.7128, -74.0060, "New York, NY", "pickup", priority=1, estimated_duration=15),
    Location("loc2", 40.7589, -73.9851, "Times Square, NY", "delivery", priority=2, estimated_duration=10),
    Location("loc3", 40.7505, -73.9934, "Madison Square Garden, NY", "pickup", priority=1, estimated_duration=15),
    Location("loc4", 40.7614, -73.9776, "Central Park, NY", "delivery", priority=3, estimated_duration=10),
    Location("loc5", 40.6892, -74.0445, "Statue of Liberty, NY", "delivery", priority=2, estimated_duration=10),
)


def _ensure_unique_ids(locations: Sequence[Location]) -> None:
    counts = Counter(location.location_id for location in locations)
    duplicates = [location_id for location_id, count in counts.items() if count > 1]
    if duplicates:
        raise DuplicateLocationError(duplicates)


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000.0


class RouteOptimizationService:
    """Public entry point of the engine.

    Collaborators are injected so callers and tests decide where routes are
    stored and where active deliveries come from. Each call builds its own
    evaluator, random generator and search state; nothing mutable is shared
    between concurrent optimizations.
    """

    def __init__(
        self,
        repository: RouteRepository | None = None,
        delivery_source: ActiveDeliverySource | None = None,
        *,
        config: Settings | None = None,
        distance_model: DistanceModel | None = None,
        max_workers: int | None = None,
    ) -> None:
        self.config = config or default_settings
        self.repository = repository if repository is not None else InMemoryRouteRepository()
        self.delivery_source = delivery_source
        self.distance_model = distance_model or DistanceModel(self.config.default_service_minutes)
        self._max_workers = max_workers or self.config.optimization_workers
        self._executor: ThreadPoolExecutor | None = None
        self._executor_lock = threading.Lock()

    def _build_context(
        self,
        driver_id: str,
        options: OptimizationOptions,
        cancel_event: threading.Event | None,
    ) -> OptimizationContext:
        config = self.config
        evaluator = FitnessEvaluator(
            FitnessWeights(options.weight_distance, options.weight_time, options.weight_earnings),
            self.distance_model,
            earnings_per_priority=config.earnings_per_priority,
            earnings_normalization=config.earnings_normalization,
        )
        return OptimizationContext(
            driver_id=driver_id,
            evaluator=evaluator,
            max_stops_per_route=options.max_stops_per_route,
            rng=random.Random(options.seed),
            budget=SearchBudget(options.time_limit, cancel_event),
            genetic=GeneticParameters(
                population_size=config.genetic_population_size,
                generations=config.genetic_generations,
                mutation_rate=config.genetic_mutation_rate,
                crossover_rate=config.genetic_crossover_rate,
            ),
            annealing=AnnealingParameters(
                initial_temperature=config.annealing_initial_temperature,
                cooling_rate=config.annealing_cooling_rate,
                min_temperature=config.annealing_min_temperature,
            ),
            ant_colony=AntColonyParameters(
                num_ants=config.ant_colony_num_ants,
                iterations=config.ant_colony_iterations,
                alpha=config.ant_colony_alpha,
                beta=config.ant_colony_beta,
                evaporation_rate=config.ant_colony_evaporation_rate,
                pheromone_deposit=config.ant_colony_pheromone_deposit,
            ),
        )

    def optimize_routes(
        self,
        driver_id: str,
        locations: Iterable[Location],
        options: OptimizationOptions | None = None,
        *,
        cancel_event: threading.Event | None = None,
    ) -> OptimizationResult:
        """Compute optimized routes for ``driver_id``; never raises.

        Failures inside an algorithm are logged and reported as a result with
        ``success=False``. Routes are persisted best-effort after the
        optimization time has been recorded.
        """

        started = time.perf_counter()
        options = options or OptimizationOptions()
        algorithm = options.algorithm

        try:
            locations = list(locations)
            runner = ALGORITHM_RUNNERS.get(algorithm)
            if runner is None:
                raise UnknownAlgorithmError(algorithm)
            _ensure_unique_ids(locations)

            if not locations:
                result = OptimizationResult.empty(algorithm)
            else:
                logger.info(
                    "Optimizing %d stops for driver %s with %s (max %d stops/route)",
                    len(locations),
                    driver_id,
                    algorithm,
                    options.max_stops_per_route,
                )
                context = self._build_context(driver_id, options, cancel_event)
                result = runner(locations, context)
                result.improvements = measure_improvements(
                    result, locations, options.max_stops_per_route, context.evaluator
                )
                result.metadata.update(
                    {
                        "seed": options.seed,
                        "deadline_hit": context.budget.deadline_hit,
                        "cancelled": context.budget.cancelled,
                        "consider_time_windows": options.consider_time_windows,
                        "consider_traffic": options.consider_traffic,
                        "consider_driver_preferences": options.consider_driver_preferences,
                    }
                )
                if len(result.routes) > options.max_routes:
                    logger.warning(
                        "Driver %s needs %d routes, above the requested maximum of %d",
                        driver_id,
                        len(result.routes),
                        options.max_routes,
                    )
                    result.metadata["route_limit_exceeded"] = True
        except Exception as exc:
            logger.exception("Route optimization failed for driver %s using %s", driver_id, algorithm)
            return OptimizationResult.failure(algorithm, _elapsed_ms(started), str(exc))

        result.optimization_time_ms = _elapsed_ms(started)
        logger.info(
            "Optimization with %s finished in %.1fms: %d routes, %.3fkm",
            algorithm,
            result.optimization_time_ms,
            len(result.routes),
            result.total_distance,
        )
        self._persist(result.routes)
        return result

    def _persist(self, routes: Sequence[Route]) -> None:
        for route in routes:
            try:
                self.repository.save(route)
            except Exception as exc:
                logger.warning("Failed to save optimized route %s: %s", route.route_id, exc)

    def optimize_active_deliveries(self, driver_id: str) -> OptimizationResult:
        """Optimize the pickups and drop-offs of the driver's assigned and in-progress deliveries."""

        started = time.perf_counter()
        try:
            if self.delivery_source is None:
                raise DeliverySourceError("No delivery source configured")
            records = self.delivery_source.fetch_active_deliveries(driver_id)
            locations = locations_from_deliveries(records)
        except Exception as exc:
            logger.exception("Failed to load active deliveries for driver %s", driver_id)
            return OptimizationResult.failure("hybrid", _elapsed_ms(started), str(exc))

        options = OptimizationOptions(
            algorithm="hybrid",
            max_stops_per_route=self.config.active_deliveries_max_stops,
            consider_time_windows=True,
            weight_distance=0.3,
            weight_time=0.4,
            weight_earnings=0.3,
        )
        return self.optimize_routes(driver_id, locations, options)

    def sample_optimization(self, algorithm: str = "hybrid", driver_id: str = "test_driver") -> OptimizationResult:
        """Run ``algorithm`` on five fixed stops around midtown Manhattan."""

        options = OptimizationOptions(algorithm=algorithm, max_stops_per_route=10, consider_time_windows=True)
        result = self.optimize_routes(driver_id, SAMPLE_LOCATIONS, options)
        result.metadata["sample_data"] = True
        return result

    def submit_optimization(
        self,
        driver_id: str,
        locations: Iterable[Location],
        options: OptimizationOptions | None = None,
        *,
        cancel_event: threading.Event | None = None,
    ) -> Future:
        """Run :meth:`optimize_routes` on the service's worker pool."""

        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._max_workers, thread_name_prefix="route-optimizer"
                )
            executor = self._executor
        return executor.submit(
            self.optimize_routes, driver_id, list(locations), options, cancel_event=cancel_event
        )

    def shutdown(self, wait: bool = True) -> None:
        with self._executor_lock:
            if self._executor is not None:
                self._executor.shutdown(wait=wait)
                self._executor = None

    def __enter__(self) -> "RouteOptimizationService":
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()

    def get_optimized_routes(self, driver_id: str, limit: int = 10) -> list[Route]:
        if limit < 1:
            return []
        try:
            return self.repository.list_by_driver(driver_id, limit)
        except Exception as exc:
            logger.error("Failed to fetch optimized routes for driver %s: %s", driver_id, exc)
            return []

    def delete_route(self, route_id: str) -> bool:
        try:
            return self.repository.delete(route_id)
        except Exception as exc:
            logger.error("Failed to delete route %s: %s", route_id, exc)
            return False

    def route_statistics(self, driver_id: str, limit: int = 100) -> dict:
        routes = self.get_optimized_routes(driver_id, limit)
        stats = compute_route_stats(routes)
        stats["driverId"] = driver_id
        return stats

    def export_result(self, result: OptimizationResult, storage: FileStorage | None = None) -> Path:
        """Write ``summary.json`` and ``stops.csv`` for ``result`` into a fresh run directory."""

        storage = storage or FileStorage(root=self.config.data_root)
        run_dir = storage.make_run_directory(prefix=f"optimization_{result.algorithm}")
        storage.write_json(run_dir / "summary.json", optimization_result_to_json(result))
        storage.write_csv(run_dir / "stops.csv", optimization_result_to_csv(result))
        return run_dir
