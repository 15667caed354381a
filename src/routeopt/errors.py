"""Exception hierarchy for the route optimization engine."""

from __future__ import annotations


class RouteOptimizationError(Exception):
    """Base class for engine errors."""


class UnknownAlgorithmError(RouteOptimizationError, ValueError):
    def __init__(self, algorithm: str) -> None:
        super().__init__(f"Unknown optimization algorithm '{algorithm}'")
        self.algorithm = algorithm


class DuplicateLocationError(RouteOptimizationError, ValueError):
    def __init__(self, location_ids: list[str]) -> None:
        super().__init__(f"Location ids must be unique within a request: {sorted(location_ids)}")
        self.location_ids = location_ids


class RouteStorageError(RouteOptimizationError):
    """Raised by route repositories when the backing store rejects an operation."""


class DeliverySourceError(RouteOptimizationError):
    """Raised when active deliveries cannot be fetched for a driver."""
