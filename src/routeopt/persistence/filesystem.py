"""File-based persistence for optimized routes."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..config import settings
from ..errors import RouteStorageError
from ..models.domain import Route
from ..schemas.optimization import RouteRecord

logger = logging.getLogger(__name__)


class FileStorage:
    """Thin wrapper around the data root for storing JSON and CSV outputs."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = (root or settings.data_root).resolve()
        self.output_root = self.root / "outputs"
        self.output_root.mkdir(parents=True, exist_ok=True)

    def make_run_directory(self, prefix: str = "optimization") -> Path:
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
        path = self.output_root / f"{prefix}_{timestamp}"
        path.mkdir(parents=True, exist_ok=False)
        return path

    def write_json(self, path: Path, data: Any, *, indent: int = 2) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, ensure_ascii=False, indent=indent)

    def read_json(self, path: Path) -> Any:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)

    def write_csv(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as handle:
            handle.write(content)


def _checked_name(value: str, label: str) -> str:
    """Return ``value`` when it is usable as a single path component."""

    if not value or value in {".", ".."} or "/" in value or "\\" in value or "\x00" in value:
        raise RouteStorageError(f"Invalid {label} for file storage: {value!r}")
    return value


class FileRouteRepository:
    """Stores one JSON document per route under ``<root>/outputs/routes/<driver_id>/``."""

    def __init__(self, storage: FileStorage | None = None) -> None:
        self.storage = storage or FileStorage()
        self.routes_root = self.storage.output_root / "routes"

    def _driver_dir(self, driver_id: str) -> Path:
        return self.routes_root / _checked_name(driver_id, "driver id")

    def _route_path(self, route: Route) -> Path:
        return self._driver_dir(route.driver_id) / f"{_checked_name(route.route_id, 'route id')}.json"

    def save(self, route: Route) -> None:
        record = RouteRecord.from_domain(route)
        path = self._route_path(route)
        try:
            self.storage.write_json(path, record.model_dump(mode="json"))
        except OSError as exc:
            raise RouteStorageError(f"Failed to write route '{route.route_id}': {exc}") from exc

    def list_by_driver(self, driver_id: str, limit: int) -> list[Route]:
        driver_dir = self._driver_dir(driver_id)
        if not driver_dir.is_dir():
            return []
        routes: list[Route] = []
        for path in driver_dir.glob("*.json"):
            try:
                routes.append(RouteRecord.model_validate(self.storage.read_json(path)).to_domain())
            except (OSError, json.JSONDecodeError, ValidationError, ValueError) as exc:
                logger.warning("Skipping unreadable route file %s: %s", path, exc)
        routes.sort(key=lambda route: route.created_at, reverse=True)
        return routes[:limit]

    def delete(self, route_id: str) -> bool:
        file_name = f"{_checked_name(route_id, 'route id')}.json"
        if not self.routes_root.is_dir():
            return False
        for driver_dir in self.routes_root.iterdir():
            path = driver_dir / file_name
            if not path.is_file():
                continue
            try:
                path.unlink()
            except OSError as exc:
                raise RouteStorageError(f"Failed to delete route '{route_id}': {exc}") from exc
            return True
        return False
