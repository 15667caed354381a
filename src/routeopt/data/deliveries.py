"""Sources of a driver's active deliveries and their expansion into stops."""

from __future__ import annotations

import csv
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, Protocol, Sequence

from ..config import settings
from ..errors import DeliverySourceError
from ..models.domain import Location, TimeWindow

PICKUP_SERVICE_MINUTES = 15.0
DELIVERY_SERVICE_MINUTES = 10.0
MIN_PRIORITY = 0.01


@dataclass(slots=True)
class DeliveryRecord:
    """An assigned or in-progress delivery together with its order details."""

    delivery_id: str
    driver_id: str
    order_id: str
    status: str
    order_total: float
    pickup_address: str
    delivery_address: str
    pickup_lat: Optional[float] = None
    pickup_lng: Optional[float] = None
    delivery_lat: Optional[float] = None
    delivery_lng: Optional[float] = None
    time_window: Optional[TimeWindow] = None


class ActiveDeliverySource(Protocol):
    def fetch_active_deliveries(self, driver_id: str) -> Sequence[DeliveryRecord]:
        ...


def _priority_from_total(order_total: float) -> float:
    return max(order_total / 100.0, MIN_PRIORITY)


def locations_from_deliveries(records: Iterable[DeliveryRecord]) -> list[Location]:
    """Expand deliveries into all pickup stops followed by all drop-off stops.

    Priority is derived from the order value (one point per 100 currency
    units). Missing coordinates fall back to (0, 0).
    """

    records = list(records)
    pickups = [
        Location(
            location_id=record.delivery_id,
            latitude=record.pickup_lat or 0.0,
            longitude=record.pickup_lng or 0.0,
            address=record.pickup_address,
            kind="pickup",
            order_id=record.order_id,
            priority=_priority_from_total(record.order_total),
            estimated_duration=PICKUP_SERVICE_MINUTES,
        )
        for record in records
    ]
    drop_offs = [
        Location(
            location_id=f"{record.delivery_id}_delivery",
            latitude=record.delivery_lat or 0.0,
            longitude=record.delivery_lng or 0.0,
            address=record.delivery_address,
            kind="delivery",
            order_id=record.order_id,
            priority=_priority_from_total(record.order_total),
            time_window=record.time_window,
            estimated_duration=DELIVERY_SERVICE_MINUTES,
        )
        for record in records
    ]
    return pickups + drop_offs


class InMemoryDeliverySource:
    def __init__(self, records: Iterable[DeliveryRecord] = (), active_statuses: Sequence[str] | None = None) -> None:
        self.records = list(records)
        self.active_statuses = set(active_statuses or settings.active_statuses)

    def fetch_active_deliveries(self, driver_id: str) -> list[DeliveryRecord]:
        return [
            record
            for record in self.records
            if record.driver_id == driver_id and record.status in self.active_statuses
        ]


def _coerce_float(value: Optional[str]) -> Optional[float]:
    if value is None or value.strip() == "":
        return None
    try:
        return float(value.replace(",", ""))
    except ValueError as exc:
        raise ValueError(f"Unable to parse float from value '{value}'") from exc


def _parse_window(start: Optional[str], end: Optional[str]) -> Optional[TimeWindow]:
    if not start or not end:
        return None
    return TimeWindow(datetime.fromisoformat(start.strip()), datetime.fromisoformat(end.strip()))


class CsvDeliverySource:
    """Reads deliveries from a CSV export (one row per delivery)."""

    def __init__(self, source: Path | None = None, active_statuses: Sequence[str] | None = None) -> None:
        self.source = source or settings.deliveries_file
        self.active_statuses = {status.upper() for status in (active_statuses or settings.active_statuses)}

    def _read(self) -> list[DeliveryRecord]:
        if not self.source.exists():
            raise DeliverySourceError(f"Deliveries file not found: {self.source}")
        records: list[DeliveryRecord] = []
        with self.source.open(mode="r", encoding="utf-8-sig", newline="") as handle:
            reader = csv.DictReader(handle)
            if not reader.fieldnames:
                raise DeliverySourceError(f"Deliveries file '{self.source}' is missing a header row.")
            for line_number, row in enumerate(reader, start=2):
                try:
                    records.append(
                        DeliveryRecord(
                            delivery_id=(row.get("delivery_id") or "").strip(),
                            driver_id=(row.get("driver_id") or "").strip(),
                            order_id=(row.get("order_id") or "").strip(),
                            status=(row.get("status") or "").strip().upper(),
                            order_total=_coerce_float(row.get("order_total")) or 0.0,
                            pickup_address=(row.get("pickup_address") or "").strip(),
                            delivery_address=(row.get("delivery_address") or "").strip(),
                            pickup_lat=_coerce_float(row.get("pickup_lat")),
                            pickup_lng=_coerce_float(row.get("pickup_lng")),
                            delivery_lat=_coerce_float(row.get("delivery_lat")),
                            delivery_lng=_coerce_float(row.get("delivery_lng")),
                            time_window=_parse_window(row.get("window_start"), row.get("window_end")),
                        )
                    )
                except ValueError as exc:
                    raise DeliverySourceError(f"Invalid delivery row {line_number} in '{self.source}': {exc}") from exc
        return records

    def fetch_active_deliveries(self, driver_id: str) -> list[DeliveryRecord]:
        return [
            record
            for record in self._read()
            if record.driver_id == driver_id and record.status in self.active_statuses
        ]
