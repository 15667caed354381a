"""Domain models for stops, routes and optimization results."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal, Optional

LocationKind = Literal["pickup", "delivery"]
LOCATION_KINDS: tuple[str, ...] = ("pickup", "delivery")


@dataclass(frozen=True, slots=True)
class TimeWindow:
    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"Time window ends before it starts: {self.start} > {self.end}")


@dataclass(frozen=True, slots=True)
class Location:
    """A single pickup or delivery point to be visited."""

    location_id: str
    latitude: float
    longitude: float
    address: str = ""
    kind: LocationKind = "delivery"
    order_id: Optional[str] = None
    priority: float = 1.0
    time_window: Optional[TimeWindow] = None
    estimated_duration: Optional[float] = None

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Latitude out of range for location '{self.location_id}': {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"Longitude out of range for location '{self.location_id}': {self.longitude}")
        if self.kind not in LOCATION_KINDS:
            raise ValueError(f"Unknown location kind '{self.kind}'")
        if not math.isfinite(self.priority) or self.priority <= 0:
            raise ValueError(f"Priority must be a positive finite number for location '{self.location_id}'")
        if self.estimated_duration is not None and (
            not math.isfinite(self.estimated_duration) or self.estimated_duration < 0
        ):
            raise ValueError(f"Invalid service duration for location '{self.location_id}'")


@dataclass(frozen=True, slots=True)
class Route:
    """Ordered visiting sequence assigned to one driver."""

    route_id: str
    driver_id: str
    locations: tuple[Location, ...]
    total_distance: float
    total_duration: float
    estimated_earnings: float
    algorithm: str
    optimized: bool = True
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def stop_count(self) -> int:
        return len(self.locations)


@dataclass(slots=True)
class Improvements:
    distance_reduction: float
    time_reduction: float
    earnings_increase: float


@dataclass(slots=True)
class OptimizationResult:
    success: bool
    routes: list[Route]
    total_distance: float
    total_duration: float
    total_earnings: float
    algorithm: str
    optimization_time_ms: float = 0.0
    improvements: Optional[Improvements] = None
    metadata: dict = field(default_factory=dict)

    @classmethod
    def empty(cls, algorithm: str) -> "OptimizationResult":
        return cls(
            success=True,
            routes=[],
            total_distance=0.0,
            total_duration=0.0,
            total_earnings=0.0,
            algorithm=algorithm,
        )

    @classmethod
    def failure(cls, algorithm: str, elapsed_ms: float, error: str | None = None) -> "OptimizationResult":
        metadata = {"error": error} if error else {}
        return cls(
            success=False,
            routes=[],
            total_distance=0.0,
            total_duration=0.0,
            total_earnings=0.0,
            algorithm=algorithm,
            optimization_time_ms=elapsed_ms,
            metadata=metadata,
        )

    @property
    def stop_count(self) -> int:
        return sum(route.stop_count for route in self.routes)
