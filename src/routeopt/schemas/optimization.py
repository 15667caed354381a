"""Optimization request schemas and persisted route records."""

from __future__ import annotations

import time
import uuid
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..config import AlgorithmName, settings
from ..models.domain import Location, Route, TimeWindow


class OptimizationOptions(BaseModel):
    """Knobs accepted by ``RouteOptimizationService.optimize_routes``."""

    model_config = ConfigDict(frozen=True)

    algorithm: AlgorithmName = Field(default_factory=lambda: settings.default_algorithm)
    max_routes: int = Field(default_factory=lambda: settings.max_routes, ge=1)
    max_stops_per_route: int = Field(default_factory=lambda: settings.max_stops_per_route, ge=1)
    time_limit: float = Field(
        default_factory=lambda: settings.time_limit_minutes,
        gt=0,
        description="Soft budget in minutes, checked between generations and iterations.",
    )
    weight_distance: float = Field(default_factory=lambda: settings.weight_distance, ge=0)
    weight_time: float = Field(default_factory=lambda: settings.weight_time, ge=0)
    weight_earnings: float = Field(default_factory=lambda: settings.weight_earnings, ge=0)
    consider_time_windows: bool = True
    consider_traffic: bool = False
    consider_driver_preferences: bool = False
    seed: Optional[int] = Field(default=None, description="Seed for reproducible stochastic searches.")


class TimeWindowModel(BaseModel):
    start: datetime
    end: datetime

    @model_validator(mode="after")
    def _check_order(self) -> "TimeWindowModel":
        if self.end < self.start:
            raise ValueError("time window end precedes start")
        return self


class LocationPayload(BaseModel):
    """Loosely-specified stop as received from callers; ``to_domain`` fills defaults."""

    id: Optional[str] = None
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    address: str = ""
    type: Literal["pickup", "delivery"] = "delivery"
    order_id: Optional[str] = None
    priority: float = Field(default=1.0, gt=0)
    time_window: Optional[TimeWindowModel] = None
    estimated_duration: float = Field(default=10.0, ge=0)

    def to_domain(self) -> Location:
        location_id = self.id or f"loc_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"
        window = TimeWindow(self.time_window.start, self.time_window.end) if self.time_window else None
        return Location(
            location_id=location_id,
            latitude=self.latitude,
            longitude=self.longitude,
            address=self.address,
            kind=self.type,
            order_id=self.order_id,
            priority=self.priority,
            time_window=window,
            estimated_duration=self.estimated_duration,
        )


class LocationRecord(BaseModel):
    location_id: str
    latitude: float
    longitude: float
    address: str
    kind: Literal["pickup", "delivery"]
    order_id: Optional[str] = None
    priority: float
    time_window: Optional[TimeWindowModel] = None
    estimated_duration: Optional[float] = None


class RouteRecord(BaseModel):
    """Serializable form of a ``Route`` used by the persistence backends."""

    id: str
    driver_id: str
    locations: List[LocationRecord]
    total_distance: float = Field(..., ge=0)
    total_duration: float = Field(..., ge=0)
    estimated_earnings: float = Field(..., ge=0)
    optimized: bool
    algorithm: str
    created_at: datetime

    @classmethod
    def from_domain(cls, route: Route) -> "RouteRecord":
        return cls(
            id=route.route_id,
            driver_id=route.driver_id,
            locations=[
                LocationRecord(
                    location_id=location.location_id,
                    latitude=location.latitude,
                    longitude=location.longitude,
                    address=location.address,
                    kind=location.kind,
                    order_id=location.order_id,
                    priority=location.priority,
                    time_window=(
                        TimeWindowModel(start=location.time_window.start, end=location.time_window.end)
                        if location.time_window
                        else None
                    ),
                    estimated_duration=location.estimated_duration,
                )
                for location in route.locations
            ],
            total_distance=route.total_distance,
            total_duration=route.total_duration,
            estimated_earnings=route.estimated_earnings,
            optimized=route.optimized,
            algorithm=route.algorithm,
            created_at=route.created_at,
        )

    def to_domain(self) -> Route:
        return Route(
            route_id=self.id,
            driver_id=self.driver_id,
            locations=tuple(
                Location(
                    location_id=record.location_id,
                    latitude=record.latitude,
                    longitude=record.longitude,
                    address=record.address,
                    kind=record.kind,
                    order_id=record.order_id,
                    priority=record.priority,
                    time_window=(
                        TimeWindow(record.time_window.start, record.time_window.end) if record.time_window else None
                    ),
                    estimated_duration=record.estimated_duration,
                )
                for record in self.locations
            ),
            total_distance=self.total_distance,
            total_duration=self.total_duration,
            estimated_earnings=self.estimated_earnings,
            optimized=self.optimized,
            algorithm=self.algorithm,
            created_at=self.created_at,
        )
