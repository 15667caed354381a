import random

from src.routeopt.models.domain import Location
from src.routeopt.services.routing.builder import OptimizationContext
from src.routeopt.services.routing.fitness import FitnessEvaluator
from src.routeopt.services.routing.genetic import (
    _ox_child,
    evolve_sequence,
    genetic_optimize,
    order_crossover,
    roulette_selection,
    swap_mutation,
)
from src.routeopt.services.routing.parameters import GeneticParameters


def _location(lid: str, lat: float, lon: float) -> Location:
    return Location(location_id=lid, latitude=lat, longitude=lon, address=f"Stop {lid}")


def _stops(count: int) -> list[Location]:
    return [_location(f"S{i}", 21.5 + (i * 7 % 11) * 0.01, 39.2 + (i * 5 % 13) * 0.01) for i in range(count)]


def _context(seed: int = 1, max_stops: int = 50, **params) -> OptimizationContext:
    return OptimizationContext(
        driver_id="driver-1",
        evaluator=FitnessEvaluator(),
        max_stops_per_route=max_stops,
        rng=random.Random(seed),
        genetic=GeneticParameters(**{"population_size": 20, "generations": 30, **params}),
    )


def test_ox_child_keeps_slice_and_fills_in_other_parent_order():
    donor = [0, 1, 2, 3, 4, 5, 6, 7]
    filler = [7, 6, 5, 4, 3, 2, 1, 0]

    child = _ox_child(donor, filler, 2, 4)

    assert child[2:5] == [2, 3, 4]
    assert child == [7, 6, 2, 3, 4, 5, 1, 0]


def test_order_crossover_always_yields_permutations():
    rng = random.Random(42)
    for size in range(1, 15):
        for _ in range(50):
            parent_a = list(range(size))
            parent_b = list(range(size))
            rng.shuffle(parent_a)
            rng.shuffle(parent_b)
            child_a, child_b = order_crossover(parent_a, parent_b, rng)
            assert sorted(child_a) == list(range(size))
            assert sorted(child_b) == list(range(size))


def test_swap_mutation_preserves_genes():
    rng = random.Random(3)
    individual = [4, 2, 0, 1, 3]
    mutated = swap_mutation(individual, rng)

    assert sorted(mutated) == sorted(individual)
    assert individual == [4, 2, 0, 1, 3]
    assert sum(1 for a, b in zip(individual, mutated) if a != b) in (0, 2)


def test_roulette_selection_favours_fitter_individuals():
    rng = random.Random(0)
    population = [[0, 1], [1, 0]]
    selected = roulette_selection(population, [0.0, 1.0], rng)

    assert selected == [[1, 0], [1, 0]]
    assert selected[0] is not population[1]


def test_roulette_selection_handles_zero_total():
    rng = random.Random(0)
    selected = roulette_selection([[0, 1], [1, 0]], [0.0, 0.0], rng)
    assert len(selected) == 2


def test_evolve_sequence_returns_permutation_of_input():
    stops = _stops(9)
    ordered = evolve_sequence(stops, _context())

    assert sorted(stop.location_id for stop in ordered) == sorted(stop.location_id for stop in stops)
    assert len(ordered) == len(stops)


def test_evolve_sequence_is_reproducible_for_a_seed():
    stops = _stops(8)
    first = evolve_sequence(stops, _context(seed=7))
    second = evolve_sequence(stops, _context(seed=7))

    assert [s.location_id for s in first] == [s.location_id for s in second]


def test_high_mutation_and_crossover_rates_keep_permutation():
    stops = _stops(12)
    ordered = evolve_sequence(stops, _context(seed=5, mutation_rate=1.0, crossover_rate=1.0))

    assert sorted(stop.location_id for stop in ordered) == sorted(stop.location_id for stop in stops)


def test_short_groups_are_returned_unchanged():
    stop = _location("A", 0, 0)
    assert evolve_sequence([stop], _context()) == [stop]
    assert evolve_sequence([], _context()) == []


def test_genetic_optimize_splits_long_inputs():
    stops = _stops(10)
    result = genetic_optimize(stops, _context(max_stops=4))

    assert len(result.routes) == 3
    assert all(route.stop_count <= 4 for route in result.routes)
    assert all(route.algorithm == "genetic" for route in result.routes)
    combined = [stop.location_id for route in result.routes for stop in route.locations]
    assert sorted(combined) == sorted(stop.location_id for stop in stops)
