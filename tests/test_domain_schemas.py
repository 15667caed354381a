from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from src.routeopt.errors import UnknownAlgorithmError
from src.routeopt.models.domain import Location, OptimizationResult, Route, TimeWindow
from src.routeopt.schemas.optimization import LocationPayload, OptimizationOptions
from src.routeopt.services.routing.budget import SearchBudget
from src.routeopt.services.routing.catalog import get_algorithm, list_algorithms
from src.routeopt.services.routing.stats import compute_route_stats


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


@pytest.mark.parametrize(
    "kwargs",
    [
        {"latitude": 91.0},
        {"longitude": -180.5},
        {"priority": 0.0},
        {"estimated_duration": -1.0},
        {"priority": float("nan")},
        {"priority": float("inf")},
        {"estimated_duration": float("nan")},
        {"estimated_duration": float("inf")},
        {"latitude": float("nan")},
        {"kind": "depot"},
    ],
)
def test_location_rejects_invalid_values(kwargs):
    values = {"location_id": "A", "latitude": 40.0, "longitude": -74.0}
    values.update(kwargs)
    with pytest.raises(ValueError):
        Location(**values)


def test_time_window_must_not_end_before_start():
    start = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)
    with pytest.raises(ValueError):
        TimeWindow(start, start - timedelta(minutes=1))
    assert TimeWindow(start, start).start == start


def test_location_payload_fills_defaults():
    location = LocationPayload(latitude=40.7, longitude=-74.0).to_domain()

    assert location.location_id.startswith("loc_")
    assert location.kind == "delivery"
    assert location.priority == 1.0
    assert location.estimated_duration == 10.0
    assert location.time_window is None


def test_location_payload_converts_time_window():
    payload = LocationPayload.model_validate(
        {
            "id": "stop-1",
            "latitude": 40.7,
            "longitude": -74.0,
            "type": "pickup",
            "priority": 3,
            "time_window": {"start": "2024-05-01T09:00:00Z", "end": "2024-05-01T10:00:00Z"},
        }
    )
    location = payload.to_domain()

    assert location.location_id == "stop-1"
    assert location.kind == "pickup"
    assert location.time_window.end - location.time_window.start == timedelta(hours=1)

    with pytest.raises(ValidationError):
        LocationPayload.model_validate(
            {
                "latitude": 40.7,
                "longitude": -74.0,
                "time_window": {"start": "2024-05-01T10:00:00Z", "end": "2024-05-01T09:00:00Z"},
            }
        )


def test_optimization_options_defaults_and_validation():
    options = OptimizationOptions()

    assert options.algorithm == "hybrid"
    assert options.max_stops_per_route == 10
    assert options.max_routes == 5
    assert options.consider_time_windows is True
    assert options.seed is None

    with pytest.raises(ValidationError):
        OptimizationOptions(algorithm="dijkstra")
    with pytest.raises(ValidationError):
        OptimizationOptions(max_stops_per_route=0)
    with pytest.raises(ValidationError):
        OptimizationOptions(weight_distance=-0.1)


def test_failure_result_reports_error():
    result = OptimizationResult.failure("genetic", 12.5, "boom")

    assert not result.success
    assert result.routes == []
    assert result.optimization_time_ms == 12.5
    assert result.metadata == {"error": "boom"}
    assert OptimizationResult.empty("genetic").stop_count == 0


def test_catalog_lists_every_algorithm():
    ids = [info.id for info in list_algorithms()]

    assert ids == ["nearest_neighbor", "genetic", "simulated_annealing", "ant_colony", "hybrid"]
    assert get_algorithm("genetic").name == "Genetic Algorithm"
    with pytest.raises(UnknownAlgorithmError):
        get_algorithm("dijkstra")


def test_search_budget_deadline_and_cancellation():
    import threading

    clock = FakeClock()
    budget = SearchBudget(time_limit_minutes=1, clock=clock)
    assert not budget.exhausted()
    clock.now += 30
    assert budget.elapsed_ms() == pytest.approx(30000.0)
    assert not budget.exhausted()
    clock.now += 30
    assert budget.exhausted()
    assert budget.deadline_hit
    assert not budget.cancelled

    cancel = threading.Event()
    cancellable = SearchBudget(cancel_event=cancel, clock=clock)
    assert not cancellable.exhausted()
    cancel.set()
    assert cancellable.exhausted()
    assert cancellable.cancelled

    assert not SearchBudget.unlimited().exhausted()


def _route(route_id: str, algorithm: str, distance: float, stops: int) -> Route:
    locations = tuple(Location(f"{route_id}-{i}", 40.0 + i * 0.01, -74.0) for i in range(stops))
    return Route(
        route_id=route_id,
        driver_id="driver-1",
        locations=locations,
        total_distance=distance,
        total_duration=stops * 10.0,
        estimated_earnings=stops * 25.0,
        algorithm=algorithm,
    )


def test_route_statistics():
    stats = compute_route_stats(
        [_route("r1", "genetic", 10.0, 4), _route("r2", "genetic", 6.0, 2), _route("r3", "hybrid", 2.0, 3)]
    )

    assert stats["totalRoutes"] == 3
    assert stats["totalStops"] == 9
    assert stats["totalDistance"] == pytest.approx(18.0)
    assert stats["algorithmUsage"] == {"genetic": 2, "hybrid": 1}
    assert stats["averages"]["distancePerRoute"] == pytest.approx(6.0)
    assert stats["averages"]["stopsPerRoute"] == pytest.approx(3.0)
    assert stats["latestRouteAt"] is not None

    empty = compute_route_stats([])
    assert empty["totalRoutes"] == 0
    assert empty["latestRouteAt"] is None
