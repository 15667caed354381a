import math

import pytest

from src.routeopt.models.domain import Location
from src.routeopt.services.geospatial import haversine_km
from src.routeopt.services.routing.distance import DistanceModel
from src.routeopt.services.routing.fitness import FitnessEvaluator, FitnessWeights


def _location(lid: str, lat: float, lon: float, **kwargs) -> Location:
    return Location(location_id=lid, latitude=lat, longitude=lon, address=f"Stop {lid}", **kwargs)


def test_haversine_known_distance():
    # One degree of latitude along a meridian.
    assert haversine_km(0.0, 0.0, 1.0, 0.0) == pytest.approx(6371.0 * math.pi / 180, rel=1e-9)


def test_distance_is_symmetric_and_zero_for_same_point():
    model = DistanceModel()
    a = _location("A", 40.7128, -74.0060)
    b = _location("B", 40.7589, -73.9851)
    same = _location("C", 40.7128, -74.0060)

    assert model.distance(a, b) == model.distance(b, a)
    assert model.distance(a, same) == 0.0
    assert model.distance(a, b) == pytest.approx(haversine_km(40.7128, -74.0060, 40.7589, -73.9851))


def test_duration_defaults_to_ten_minutes():
    model = DistanceModel()
    assert model.duration(_location("A", 0, 0)) == 10.0
    assert model.duration(_location("B", 0, 0, estimated_duration=15)) == 15.0
    assert DistanceModel(default_service_minutes=5).duration(_location("C", 0, 0)) == 5.0


def test_distance_matrix_matches_pairwise_distances():
    model = DistanceModel()
    stops = [_location("A", 21.5, 39.2), _location("B", 21.55, 39.25), _location("C", 21.6, 39.1)]
    matrix = model.distance_matrix(stops)

    assert matrix.shape == (3, 3)
    assert matrix[0, 0] == 0.0
    assert matrix[0, 2] == pytest.approx(model.distance(stops[0], stops[2]))
    assert matrix[2, 0] == matrix[0, 2]


def test_weights_are_normalized_and_zero_weights_fall_back():
    assert FitnessWeights(2, 1, 1).normalized() == FitnessWeights(0.5, 0.25, 0.25)
    assert FitnessWeights(0, 0, 0).normalized() == FitnessWeights(0.4, 0.3, 0.3)
    with pytest.raises(ValueError):
        FitnessWeights(-1, 0, 0)


def test_fitness_combines_the_three_terms():
    evaluator = FitnessEvaluator(FitnessWeights(0.4, 0.3, 0.3))
    a = _location("A", 40.7128, -74.0060, priority=2, estimated_duration=15)
    b = _location("B", 40.7589, -73.9851)
    distance = haversine_km(40.7128, -74.0060, 40.7589, -73.9851)

    assert evaluator.total_distance([a, b]) == pytest.approx(distance)
    assert evaluator.total_time([a, b]) == 25.0
    assert evaluator.total_earnings([a, b]) == 75.0
    expected = 0.4 / (1 + distance) + 0.3 / (1 + 25.0) + 0.3 * 75.0 / 1000
    assert evaluator.fitness([a, b]) == pytest.approx(expected)


def test_fitness_ignores_travel_time_between_stops():
    evaluator = FitnessEvaluator()
    near = [_location("A", 0, 0), _location("B", 0, 0.01)]
    far = [_location("A", 0, 0), _location("B", 0, 10)]

    assert evaluator.total_time(near) == evaluator.total_time(far) == 20.0


def test_fitness_of_empty_sequence():
    evaluator = FitnessEvaluator()
    assert evaluator.fitness([]) == pytest.approx(0.4 + 0.3)


def test_shorter_order_scores_higher():
    evaluator = FitnessEvaluator()
    a, b, c = _location("A", 0, 0), _location("B", 0, 1), _location("C", 0, 2)

    assert evaluator.fitness([a, b, c]) > evaluator.fitness([a, c, b])
