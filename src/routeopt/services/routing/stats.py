"""Aggregate statistics over stored routes."""

from __future__ import annotations

from collections import Counter
from typing import Sequence

from ...models.domain import Route


def compute_route_stats(routes: Sequence[Route]) -> dict:
    total_routes = len(routes)
    usage: Counter[str] = Counter(route.algorithm for route in routes)
    total_distance = sum(route.total_distance for route in routes)
    total_duration = sum(route.total_duration for route in routes)
    total_earnings = sum(route.estimated_earnings for route in routes)
    total_stops = sum(route.stop_count for route in routes)

    averages = {"distancePerRoute": 0.0, "stopsPerRoute": 0.0, "earningsPerRoute": 0.0}
    if total_routes:
        averages = {
            "distancePerRoute": round(total_distance / total_routes, 3),
            "stopsPerRoute": round(total_stops / total_routes, 2),
            "earningsPerRoute": round(total_earnings / total_routes, 2),
        }

    return {
        "totalRoutes": total_routes,
        "totalStops": total_stops,
        "totalDistance": round(total_distance, 3),
        "totalDuration": round(total_duration, 2),
        "totalEarnings": round(total_earnings, 2),
        "algorithmUsage": dict(usage.most_common()),
        "averages": averages,
        "latestRouteAt": max((route.created_at for route in routes), default=None),
    }
