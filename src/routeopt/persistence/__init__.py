"""Route persistence backends."""

from __future__ import annotations

from ..config import Settings, settings as default_settings
from .repository import InMemoryRouteRepository, RouteRepository


def build_route_repository(config: Settings | None = None) -> RouteRepository:
    """Instantiate the backend named by ``config.route_storage``."""

    config = config or default_settings
    if config.route_storage == "file":
        from .filesystem import FileRouteRepository, FileStorage

        return FileRouteRepository(FileStorage(root=config.data_root))
    if config.route_storage == "supabase":
        from .database import SupabaseRouteRepository

        return SupabaseRouteRepository(table=config.routes_table)
    return InMemoryRouteRepository()


__all__ = ["InMemoryRouteRepository", "RouteRepository", "build_route_repository"]
