"""Weighted scoring of candidate stop orderings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ...config import settings
from ...models.domain import Location
from .distance import DistanceModel

DEFAULT_WEIGHTS = (0.4, 0.3, 0.3)


@dataclass(frozen=True, slots=True)
class FitnessWeights:
    distance: float = DEFAULT_WEIGHTS[0]
    time: float = DEFAULT_WEIGHTS[1]
    earnings: float = DEFAULT_WEIGHTS[2]

    def __post_init__(self) -> None:
        if min(self.distance, self.time, self.earnings) < 0:
            raise ValueError("Fitness weights must be non-negative")

    def normalized(self) -> "FitnessWeights":
        total = self.distance + self.time + self.earnings
        if total <= 0:
            return FitnessWeights(*DEFAULT_WEIGHTS)
        return FitnessWeights(self.distance / total, self.time / total, self.earnings / total)


class FitnessEvaluator:
    """Scores a stop sequence; higher is better.

    The time term counts per-stop service minutes only. Travel time between
    stops is not added; distance already carries that cost.
    """

    def __init__(
        self,
        weights: FitnessWeights | None = None,
        distance_model: DistanceModel | None = None,
        *,
        earnings_per_priority: float | None = None,
        earnings_normalization: float | None = None,
    ) -> None:
        self.weights = (weights or FitnessWeights()).normalized()
        self.distance_model = distance_model or DistanceModel()
        self.earnings_per_priority = (
            earnings_per_priority if earnings_per_priority is not None else settings.earnings_per_priority
        )
        self.earnings_normalization = (
            earnings_normalization if earnings_normalization is not None else settings.earnings_normalization
        )

    def total_distance(self, sequence: Sequence[Location]) -> float:
        return self.distance_model.path_distance(sequence)

    def total_time(self, sequence: Sequence[Location]) -> float:
        return sum(self.distance_model.duration(location) for location in sequence)

    def total_earnings(self, sequence: Sequence[Location]) -> float:
        return sum(location.priority * self.earnings_per_priority for location in sequence)

    def fitness(self, sequence: Sequence[Location]) -> float:
        distance_score = 1.0 / (1.0 + self.total_distance(sequence))
        time_score = 1.0 / (1.0 + self.total_time(sequence))
        earnings_score = self.total_earnings(sequence) / self.earnings_normalization
        return (
            self.weights.distance * distance_score
            + self.weights.time * time_score
            + self.weights.earnings * earnings_score
        )

    __call__ = fitness
