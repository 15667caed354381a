"""Serializers for optimization outputs."""

from __future__ import annotations

import csv
import io
from dataclasses import asdict

from ...models.domain import OptimizationResult
from ...schemas.optimization import RouteRecord


def optimization_result_to_json(result: OptimizationResult) -> dict:
    return {
        "success": result.success,
        "algorithm": result.algorithm,
        "totalDistance": result.total_distance,
        "totalDuration": result.total_duration,
        "totalEarnings": result.total_earnings,
        "optimizationTime": result.optimization_time_ms,
        "improvements": asdict(result.improvements) if result.improvements else None,
        "metadata": result.metadata,
        "routes": [RouteRecord.from_domain(route).model_dump(mode="json") for route in result.routes],
    }


def optimization_result_to_csv(result: OptimizationResult) -> str:
    buffer = io.StringIO()
    fieldnames = [
        "route_id",
        "driver_id",
        "algorithm",
        "sequence",
        "location_id",
        "kind",
        "order_id",
        "latitude",
        "longitude",
        "total_distance_km",
        "total_duration_min",
        "estimated_earnings",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    for route in result.routes:
        for sequence, location in enumerate(route.locations, start=1):
            writer.writerow(
                {
                    "route_id": route.route_id,
                    "driver_id": route.driver_id,
                    "algorithm": route.algorithm,
                    "sequence": sequence,
                    "location_id": location.location_id,
                    "kind": location.kind,
                    "order_id": location.order_id or "",
                    "latitude": location.latitude,
                    "longitude": location.longitude,
                    "total_distance_km": route.total_distance,
                    "total_duration_min": route.total_duration,
                    "estimated_earnings": route.estimated_earnings,
                }
            )
    return buffer.getvalue()
