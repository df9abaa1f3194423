"""Loading of the stops, trips and stop times files of a transit feed."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Tuple, Union

from .model import ClockTime, Line, Stop

log = logging.getLogger(__name__)

PathLike = Union[str, Path]

_TIME = re.compile(r"\s*\+?(\d+):\s*\+?(\d+)")


@dataclass
class TripIndex:
    """Per-trip headsign and route identifier."""

    headsigns: Dict[str, str] = field(default_factory=dict)
    routes: Dict[str, str] = field(default_factory=dict)


@dataclass
class Network:
    """Every stop and line of a loaded feed."""

    stops: Dict[str, Stop]
    lines: List[Line]
    trips: TripIndex


def _split_fields(line: str) -> List[str]:
    parts = line.split(",")
    if parts[-1] == "":
        parts.pop()
    return parts


def _records(path: PathLike) -> Iterator[List[str]]:
    """Yield the comma separated fields of every line after the header."""
    with open(path, encoding="utf-8", errors="replace") as handle:
        next(handle, None)
        for raw in handle:
            yield _split_fields(raw.rstrip("\n"))


def _fields(record: List[str], count: int) -> List[str]:
    return (record + [""] * count)[:count]


def read_stops(path: PathLike) -> Dict[str, Stop]:
    """Read the stops file, keyed by stop id without its last character."""
    stops: Dict[str, Stop] = {}
    for record in _records(path):
        if len(record) < 6:
            log.warning("malformed or incomplete stop line: %r", ",".join(record))
            continue
        stop_id, name = record[0], record[2]
        if stop_id.startswith("1"):
            continue
        stop_id = stop_id[:-1]
        if stop_id in stops:
            continue
        stops[stop_id] = Stop(stop_id, name)
    return stops


def read_trips(path: PathLike) -> Tuple[List[Line], TripIndex]:
    """Read the trips file: one line per route and headsign, plus the trip index."""
    lines: List[Line] = []
    trips = TripIndex()
    seen = set()
    for record in _records(path):
        route_id, _service_id, trip_id, headsign = _fields(record, 4)
        trips.headsigns[trip_id] = headsign
        trips.routes[trip_id] = route_id
        key = (route_id, headsign)
        if key not in seen:
            seen.add(key)
            lines.append(Line(trip_id, f"Ligne {route_id}", headsign))
    return lines, trips


def complete_lines(
    path: PathLike,
    lines: List[Line],
    stops: Dict[str, Stop],
    trips: TripIndex,
) -> None:
    """Fill the lines with their stops and passing times from the stop times file."""
    trip_stops: Dict[str, List[Tuple[str, ClockTime]]] = {}
    for record in _records(path):
        trip_id, arrival, _departure, stop_id, _sequence = _fields(record, 5)
        match = _TIME.match(arrival)
        if match is None:
            log.warning("invalid time format: %r", arrival)
            continue
        time = ClockTime(int(match.group(1)), int(match.group(2)))
        trip_stops.setdefault(trip_id, []).append((stop_id, time))

    for trip_id, visits in trip_stops.items():
        route_id = trips.routes.get(trip_id, "")
        headsign = trips.headsigns.get(trip_id, "")
        name = f"Ligne {route_id}"
        line = next(
            (item for item in lines if item.name == name and item.headsign == headsign),
            None,
        )
        if line is None:
            continue

        new_stops = [stop_id[:-1] for stop_id, _ in visits]
        if not line.stop_ids:
            line.stop_ids = list(new_stops)
            line.schedules = [[] for _ in new_stops]
        if line.stop_ids != new_stops:
            continue

        for schedule, stop_id, (_, time) in zip(line.schedules, new_stops, visits):
            schedule.append(time)
            stop = stops.get(stop_id)
            if stop is not None and line.line_id not in stop.lines:
                stop.add_line(line.line_id)

    clean_lines(lines)


def clean_lines(lines: List[Line]) -> None:
    """Sort and deduplicate passing times and drop repeated stops of each line."""
    for line in lines:
        line.schedules = [sorted(set(times)) for times in line.schedules]
        seen = set()
        stop_ids: List[str] = []
        schedules: List[List[ClockTime]] = []
        for stop_id, times in zip(line.stop_ids, line.schedules):
            if stop_id not in seen:
                seen.add(stop_id)
                stop_ids.append(stop_id)
                schedules.append(times)
        line.stop_ids = stop_ids
        line.schedules = schedules


def load_network(directory: PathLike) -> Network:
    """Load ``stops.txt``, ``trips.txt`` and ``stop_times.txt`` from a directory."""
    base = Path(directory)
    stops = read_stops(base / "stops.txt")
    lines, trips = read_trips(base / "trips.txt")
    complete_lines(base / "stop_times.txt", lines, stops, trips)
    return Network(stops, lines, trips)