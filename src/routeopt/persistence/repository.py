"""Route repository contract and the in-process implementation."""

from __future__ import annotations

import threading
from typing import Protocol

from ..models.domain import Route


class RouteRepository(Protocol):
    def save(self, route: Route) -> None:
        """Persist ``route``; raise ``RouteStorageError`` on failure."""

    def list_by_driver(self, driver_id: str, limit: int) -> list[Route]:
        """Return up to ``limit`` routes for ``driver_id``, newest first."""

    def delete(self, route_id: str) -> bool:
        """Remove a route, returning False when it does not exist."""


class InMemoryRouteRepository:
    """Thread-safe dictionary-backed store, used by default and in tests."""

    def __init__(self) -> None:
        self._routes: dict[str, Route] = {}
        self._lock = threading.Lock()

    def save(self, route: Route) -> None:
        with self._lock:
            self._routes[route.route_id] = route

    def list_by_driver(self, driver_id: str, limit: int) -> list[Route]:
        with self._lock:
            routes = [route for route in self._routes.values() if route.driver_id == driver_id]
        routes.sort(key=lambda route: route.created_at, reverse=True)
        return routes[:limit]

    def delete(self, route_id: str) -> bool:
        with self._lock:
            return self._routes.pop(route_id, None) is not None

    def __len__(self) -> int:
        return len(self._routes)
