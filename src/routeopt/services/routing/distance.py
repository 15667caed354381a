"""Great-circle distance and service-time estimates between stops."""

from __future__ import annotations

import functools
from typing import Sequence

import numpy as np

from ...config import settings
from ...models.domain import Location
from ..geospatial import haversine_km


@functools.lru_cache(maxsize=65536)
def _cached_haversine(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    return haversine_km(lat1, lon1, lat2, lon2)


class DistanceModel:
    """Haversine distance oracle used by every optimization algorithm.

    Pairs are canonicalised before hitting the cache so that ``distance(a, b)``
    and ``distance(b, a)`` share one entry and are bit-for-bit equal.
    """

    def __init__(self, default_service_minutes: float | None = None) -> None:
        self.default_service_minutes = (
            default_service_minutes if default_service_minutes is not None else settings.default_service_minutes
        )

    def distance(self, a: Location, b: Location) -> float:
        first = (a.latitude, a.longitude)
        second = (b.latitude, b.longitude)
        if first == second:
            return 0.0
        if second < first:
            first, second = second, first
        return _cached_haversine(first[0], first[1], second[0], second[1])

    def duration(self, location: Location) -> float:
        if location.estimated_duration is None:
            return self.default_service_minutes
        return location.estimated_duration

    def path_distance(self, sequence: Sequence[Location]) -> float:
        return sum(self.distance(sequence[i], sequence[i + 1]) for i in range(len(sequence) - 1))

    def distance_matrix(self, locations: Sequence[Location]) -> np.ndarray:
        size = len(locations)
        matrix = np.zeros((size, size), dtype=float)
        for i in range(size):
            for j in range(i + 1, size):
                value = self.distance(locations[i], locations[j])
                matrix[i, j] = value
                matrix[j, i] = value
        return matrix
