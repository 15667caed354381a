"""Tuning parameters for the metaheuristics."""

from __future__ import annotations

from dataclasses import dataclass

from ...config import settings


@dataclass(slots=True)
class GeneticParameters:
    population_size: int = settings.genetic_population_size
    generations: int = settings.genetic_generations
    mutation_rate: float = settings.genetic_mutation_rate
    crossover_rate: float = settings.genetic_crossover_rate


@dataclass(slots=True)
class AnnealingParameters:
    initial_temperature: float = settings.annealing_initial_temperature
    cooling_rate: float = settings.annealing_cooling_rate
    min_temperature: float = settings.annealing_min_temperature


@dataclass(slots=True)
class AntColonyParameters:
    num_ants: int = settings.ant_colony_num_ants
    iterations: int = settings.ant_colony_iterations
    alpha: float = settings.ant_colony_alpha
    beta: float = settings.ant_colony_beta
    evaporation_rate: float = settings.ant_colony_evaporation_rate
    pheromone_deposit: float = settings.ant_colony_pheromone_deposit
