"""Descriptions of the available optimization algorithms."""

from __future__ import annotations

from dataclasses import dataclass

from ...errors import UnknownAlgorithmError


@dataclass(frozen=True, slots=True)
class AlgorithmInfo:
    id: str
    name: str
    description: str
    complexity: str
    best_for: str
    pros: tuple[str, ...]
    cons: tuple[str, ...]


ALGORITHMS: tuple[AlgorithmInfo, ...] = (
    AlgorithmInfo(
        id="nearest_neighbor",
        name="Nearest Neighbor",
        description="Greedy construction that always moves to the closest unvisited stop.",
        complexity="O(n²)",
        best_for="Quick optimization for small datasets",
        pros=("Fast execution", "Deterministic", "Good for small routes"),
        cons=("Not optimal for complex routes", "Can get stuck in local optima"),
    ),
    AlgorithmInfo(
        id="genetic",
        name="Genetic Algorithm",
        description="Evolves a population of stop orders with order crossover and swap mutation.",
        complexity="O(g × p × n)",
        best_for="Complex routes with many constraints",
        pros=("Handles weighted objectives", "Can find near-optimal solutions", "Robust"),
        cons=("Slower execution", "Requires parameter tuning", "No optimality guarantee"),
    ),
    AlgorithmInfo(
        id="simulated_annealing",
        name="Simulated Annealing",
        description="Accepts worse orders with a temperature-controlled probability to escape local optima.",
        complexity="O(log(T0/Tmin) × n)",
        best_for="Medium complexity routes with time constraints",
        pros=("Good balance of speed and quality", "Escapes local optima", "Flexible"),
        cons=("Requires temperature tuning", "May not find global optimum"),
    ),
    AlgorithmInfo(
        id="ant_colony",
        name="Ant Colony Optimization",
        description="Ants build tours guided by per-edge pheromone trails reinforced by good tours.",
        complexity="O(i × a × n²)",
        best_for="Routes where many orderings are competitive",
        pros=("Learns good edges over iterations", "Robust"),
        cons=("Slower convergence", "Parameter sensitive"),
    ),
    AlgorithmInfo(
        id="hybrid",
        name="Hybrid Algorithm",
        description="Runs nearest neighbor and the genetic algorithm and keeps the shorter result.",
        complexity="Variable",
        best_for="Production environments requiring reliability",
        pros=("Never worse than nearest neighbor on distance", "Robust and reliable"),
        cons=("Longer execution time", "Higher resource usage"),
    ),
)


def list_algorithms() -> list[AlgorithmInfo]:
    return list(ALGORITHMS)


def get_algorithm(algorithm_id: str) -> AlgorithmInfo:
    for info in ALGORITHMS:
        if info.id == algorithm_id:
            return info
    raise UnknownAlgorithmError(algorithm_id)
