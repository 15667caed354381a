"""Supabase persistence for optimized routes."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from ..config import settings
from ..db.supabase import get_supabase_client
from ..errors import RouteStorageError
from ..models.domain import Route
from ..schemas.optimization import RouteRecord

logger = logging.getLogger(__name__)


class SupabaseRouteRepository:
    """Stores routes as rows of ``settings.routes_table``; locations live in a JSON column."""

    def __init__(self, client: Any | None = None, table: str | None = None) -> None:
        self.client = client if client is not None else get_supabase_client()
        if self.client is None:
            raise RouteStorageError("Supabase is not configured; set ROUTEOPT_SUPABASE_URL and ROUTEOPT_SUPABASE_KEY.")
        self.table = table or settings.routes_table

    def save(self, route: Route) -> None:
        row = RouteRecord.from_domain(route).model_dump(mode="json")
        try:
            self.client.table(self.table).insert(row).execute()
        except Exception as exc:
            raise RouteStorageError(f"Failed to insert route '{route.route_id}': {exc}") from exc

    def list_by_driver(self, driver_id: str, limit: int) -> list[Route]:
        try:
            response = (
                self.client.table(self.table)
                .select("*")
                .eq("driver_id", driver_id)
                .order("created_at", desc=True)
                .limit(limit)
                .execute()
            )
        except Exception as exc:
            raise RouteStorageError(f"Failed to list routes for driver '{driver_id}': {exc}") from exc

        routes: list[Route] = []
        for row in response.data or []:
            try:
                routes.append(RouteRecord.model_validate(row).to_domain())
            except ValidationError as exc:
                logger.warning("Skipping malformed route row %s: %s", row.get("id"), exc)
        return routes

    def delete(self, route_id: str) -> bool:
        try:
            response = self.client.table(self.table).delete().eq("id", route_id).execute()
        except Exception as exc:
            raise RouteStorageError(f"Failed to delete route '{route_id}': {exc}") from exc
        return bool(response.data)
