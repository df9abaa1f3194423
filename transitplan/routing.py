"""Earliest-arrival route search over the lines of a network."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Sequence

from .model import ClockTime, Line, Stop, find_line

log = logging.getLogger(__name__)

START_LINE = "Depart"


@dataclass
class Node:
    """A stop reached on a line at a given time, linked to the node before it."""

    stop_id: str = "Vide"
    line_id: str = ""
    previous: Optional[int] = None
    time: ClockTime = field(default_factory=ClockTime)

    def __str__(self) -> str:
        return f"Arret: {self.stop_id}, Ligne: {self.line_id}, Heure: {self.time.format()}"


def visited_index(stop_id: str, visited: Sequence[Node]) -> Optional[int]:
    """Position of the first visited node at ``stop_id``, or None."""
    return next((i for i, node in enumerate(visited) if node.stop_id == stop_id), None)


def neighbour_index(stop_id: str, line_id: str, neighbours: Sequence[Node]) -> Optional[int]:
    """Position of the neighbour at ``stop_id`` reached by ``line_id``, or None."""
    return next(
        (
            i
            for i, node in enumerate(neighbours)
            if node.stop_id == stop_id and node.line_id == line_id
        ),
        None,
    )


def _lines_at(stops: Dict[str, Stop], stop_id: str) -> List[str]:
    stop = stops.get(stop_id)
    return list(stop.lines) if stop is not None else []


def _passing_time(line: Line, stop_id: str, after: ClockTime) -> Optional[ClockTime]:
    """First passing time of ``line`` at ``stop_id`` not before ``after``."""
    index = line.stop_index(stop_id)
    if index is None:
        return None
    found = line.next_departure_index(after, index)
    if found is None:
        return None
    return line.schedules[index][found]


def _following(line: Line, stop_id: str) -> Optional[str]:
    """The stop after ``stop_id`` on ``line``; None at the terminus or off the line."""
    try:
        return line.next_stop(stop_id)
    except ValueError:
        return None


def find_route(
    start: str,
    end: str,
    time: ClockTime,
    stops: Dict[str, Stop],
    lines: List[Line],
    avoid: Iterable[str] = (),
) -> List[List[Node]]:
    """Chain single-line legs from ``start`` to ``end``; an empty list when none is found."""
    avoid = list(avoid)
    legs: List[List[Node]] = []
    leg: List[Node] = []

    while not leg or leg[-1].stop_id != end:
        if leg:
            start = leg[-1].stop_id
            time = leg[-1].time.plus_minutes(1)

        departures = []
        for line_id in _lines_at(stops, start):
            line = find_line(line_id, lines)
            if line is None:
                continue
            passing = _passing_time(line, start, time)
            if passing is not None:
                departures.append(passing)
        if not departures:
            leg = []
            break

        leg = find_leg(start, end, min(departures), stops, lines, avoid)
        if not leg:
            break
        legs.append(leg)
        if len(legs) > 5:
            break

    if leg and leg[-1].stop_id == end:
        return legs
    return []


def find_leg(
    start: str,
    end: str,
    time: ClockTime,
    stops: Dict[str, Stop],
    lines: List[Line],
    avoid: Iterable[str] = (),
) -> List[Node]:
    """Follow lines from ``start`` towards ``end`` and return the nodes of one leg.

    The leg stops where the search changes line; an empty list means no way on.
    """
    avoided = set(avoid)

    if start == end:
        log.warning("start and destination are the same stop: %s", start)
        return []

    shared = Counter(_lines_at(stops, start)) & Counter(_lines_at(stops, end))
    direct = sorted(shared.elements())

    def usable(line_id: str) -> bool:
        line = find_line(line_id, lines)
        if line is None:
            return False
        leaves = line.last_time(line.stop_index(start))
        arrives = line.last_time(line.stop_index(end))
        if leaves > arrives:
            return False
        return not any(stop_id in avoided for stop_id in line.stop_ids)

    direct = [line_id for line_id in direct if usable(line_id)]
    single_line = bool(direct)

    latest = ClockTime()
    for line_id in direct if single_line else _lines_at(stops, end):
        line = find_line(line_id, lines)
        if line is not None:
            latest = max(latest, line.last_time(line.stop_index(end)))

    if not single_line:
        direct = _lines_at(stops, start)

    last = Node(start, START_LINE, None, time)
    visited: List[Node] = []
    step = 0

    while last.stop_id != end:
        neighbours: List[Node] = []

        if visited and single_line:
            line = find_line(visited[0].line_id, lines)
            following = _following(line, last.stop_id) if line is not None else None
            if following is not None:
                passing = _passing_time(line, following, last.time)
                if passing is not None:
                    neighbours.append(Node(following, line.line_id, step, passing))
        else:
            for line_id in direct:
                line = find_line(line_id, lines)
                if line is None:
                    continue
                following = _following(line, last.stop_id)
                if following is None or following in avoided:
                    continue
                if visited_index(following, visited) is not None:
                    continue
                passing = _passing_time(line, following, last.time)
                if passing is not None:
                    neighbours.append(Node(following, line.line_id, step, passing))
                if line.line_id == last.line_id:
                    break

        if not neighbours:
            return []

        best = neighbours[0]
        for node in neighbours:
            if node.line_id == last.line_id:
                best = node
                break
            if node.time < best.time:
                best = node

        if best.time > latest:
            log.warning("passing time %s is later than the last one %s", best.time, latest)

        if last.previous is None:
            last = replace(last, line_id=best.line_id)
        visited.append(last)
        if visited[0].line_id != last.line_id:
            visited.pop()
            return build_path(visited, replace(visited[-1]))

        last = best
        direct = _lines_at(stops, best.stop_id)
        step += 1

    return build_path(visited, last)


def build_path(visited: Sequence[Node], end: Node) -> List[Node]:
    """Walk the ``previous`` links back from ``end`` and return the nodes in order."""
    path: List[Node] = []
    current = end
    while current.previous is not None:
        path.append(current)
        current = visited[current.previous]
    path.append(visited[0])
    path.reverse()
    return path