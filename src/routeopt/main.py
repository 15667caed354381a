"""Command-line entry point for running the route optimization engine.

Usage:
    routeopt algorithms
    routeopt sample [--algorithm NAME]
    routeopt optimize STOPS.json --driver ID [--algorithm NAME] [--max-stops N] [--seed N] [--export]
    routeopt active --driver ID
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from pydantic import ValidationError

from .config import settings
from .data.deliveries import CsvDeliverySource
from .errors import RouteStorageError
from .persistence import build_route_repository
from .schemas.optimization import LocationPayload, OptimizationOptions
from .services.outputs.routing_formatter import optimization_result_to_json
from .services.routing.catalog import list_algorithms
from .services.routing.service import ALGORITHM_RUNNERS, RouteOptimizationService

logger = logging.getLogger("routeopt")


def setup_logging(level: int = logging.INFO) -> None:
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(level)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="routeopt", description=settings.app_name)
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("algorithms", help="List available algorithms")

    sample = subparsers.add_parser("sample", help="Optimize the built-in Manhattan sample")
    sample.add_argument("--algorithm", choices=sorted(ALGORITHM_RUNNERS), default="hybrid")

    optimize = subparsers.add_parser("optimize", help="Optimize stops read from a JSON file")
    optimize.add_argument("stops", type=Path, help="JSON array of stop objects")
    optimize.add_argument("--driver", required=True)
    optimize.add_argument("--algorithm", choices=sorted(ALGORITHM_RUNNERS), default=settings.default_algorithm)
    optimize.add_argument("--max-stops", type=int, default=settings.max_stops_per_route)
    optimize.add_argument("--seed", type=int, default=None)
    optimize.add_argument("--export", action="store_true", help="Write summary.json and stops.csv under the data root")

    active = subparsers.add_parser("active", help="Optimize a driver's active deliveries from the deliveries CSV")
    active.add_argument("--driver", required=True)

    return parser.parse_args(argv)


def _load_stops(path: Path) -> list:
    with path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    if not isinstance(payload, list):
        raise ValueError(f"Expected a JSON array of stops in {path}")
    return [LocationPayload.model_validate(item).to_domain() for item in payload]


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    if args.command == "algorithms":
        for info in list_algorithms():
            print(f"{info.id:<20} {info.complexity:<22} {info.description}")
        return 0

    try:
        repository = build_route_repository()
    except RouteStorageError as exc:
        logger.error("Route storage is unavailable: %s", exc)
        return 2

    service = RouteOptimizationService(repository, CsvDeliverySource())
    with service:
        if args.command == "sample":
            result = service.sample_optimization(args.algorithm)
        elif args.command == "active":
            result = service.optimize_active_deliveries(args.driver)
        else:
            try:
                locations = _load_stops(args.stops)
            except (OSError, ValueError, ValidationError) as exc:
                logger.error("Could not read stops from %s: %s", args.stops, exc)
                return 2
            options = OptimizationOptions(algorithm=args.algorithm, max_stops_per_route=args.max_stops, seed=args.seed)
            result = service.optimize_routes(args.driver, locations, options)
            if args.export and result.success:
                logger.info("Exported results to %s", service.export_result(result))

    print(json.dumps(optimization_result_to_json(result), indent=2, default=str))
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
