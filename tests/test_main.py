import json

import pytest

from src.routeopt import main as cli
from src.routeopt.errors import RouteStorageError
from src.routeopt.persistence.repository import InMemoryRouteRepository


@pytest.fixture(autouse=True)
def in_memory_storage(monkeypatch):
    monkeypatch.setattr(cli, "build_route_repository", lambda: InMemoryRouteRepository())


def _write_stops(path, stops):
    path.write_text(json.dumps(stops), encoding="utf-8")
    return path


STOPS = [
    {"id": "a", "latitude": 40.7128, "longitude": -74.0060, "type": "pickup"},
    {"id": "b", "latitude": 40.7589, "longitude": -73.9851},
    {"id": "c", "latitude": 40.7505, "longitude": -73.9934, "priority": 2},
]


def test_algorithms_lists_catalog(capsys):
    assert cli.main(["algorithms"]) == 0

    output = capsys.readouterr().out
    for algorithm_id in ["nearest_neighbor", "genetic", "simulated_annealing", "ant_colony", "hybrid"]:
        assert algorithm_id in output


def test_sample_prints_json_result(capsys):
    assert cli.main(["sample", "--algorithm", "nearest_neighbor"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["success"] is True
    assert payload["algorithm"] == "nearest_neighbor"
    assert payload["metadata"]["sample_data"] is True
    assert sum(len(route["locations"]) for route in payload["routes"]) == 5


def test_optimize_reads_stops_file(tmp_path, capsys):
    stops_file = _write_stops(tmp_path / "stops.json", STOPS)

    exit_code = cli.main(
        ["optimize", str(stops_file), "--driver", "driver-7", "--algorithm", "nearest_neighbor", "--max-stops", "2"]
    )

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["success"] is True
    assert len(payload["routes"]) == 2
    assert all(route["driver_id"] == "driver-7" for route in payload["routes"])
    ids = sorted(location["location_id"] for route in payload["routes"] for location in route["locations"])
    assert ids == ["a", "b", "c"]


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        json.dumps({"id": "a", "latitude": 1.0, "longitude": 2.0}),
        json.dumps([{"id": "a", "longitude": 2.0}]),
        json.dumps([{"id": "a", "latitude": 95.0, "longitude": 2.0}]),
    ],
)
def test_optimize_rejects_unreadable_input(tmp_path, capsys, content):
    stops_file = tmp_path / "stops.json"
    stops_file.write_text(content, encoding="utf-8")

    assert cli.main(["optimize", str(stops_file), "--driver", "d"]) == 2
    assert capsys.readouterr().out == ""


def test_optimize_missing_file_exits_with_input_error(tmp_path):
    assert cli.main(["optimize", str(tmp_path / "missing.json"), "--driver", "d"]) == 2


def test_failed_optimization_exits_with_one(tmp_path, capsys):
    duplicated = [dict(STOPS[0]), dict(STOPS[0], latitude=40.8)]
    stops_file = _write_stops(tmp_path / "stops.json", duplicated)

    assert cli.main(["optimize", str(stops_file), "--driver", "d", "--algorithm", "nearest_neighbor"]) == 1
    payload = json.loads(capsys.readouterr().out)
    assert payload["success"] is False
    assert payload["routes"] == []
    assert "error" in payload["metadata"]


def test_unavailable_route_storage_exits_with_two(monkeypatch, capsys):
    def unavailable():
        raise RouteStorageError("Supabase is not configured")

    monkeypatch.setattr(cli, "build_route_repository", unavailable)

    assert cli.main(["sample", "--algorithm", "nearest_neighbor"]) == 2
    assert capsys.readouterr().out == ""
