"""Core timetable objects: clock times, stops and lines."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional


@dataclass(frozen=True, order=True)
class ClockTime:
    """A time of day as hours and minutes."""

    hour: int = 0
    minute: int = 0

    def plus_minutes(self, minutes: int) -> ClockTime:
        """Return this time moved forward by ``minutes``, wrapping at midnight."""
        extra_hours, minute = divmod(self.minute + minutes, 60)
        return ClockTime((self.hour + extra_hours) % 24, minute)

    def format(self) -> str:
        """Return the time as ``HH:MM``."""
        return f"{self.hour:02d}:{self.minute:02d}"

    def __str__(self) -> str:
        return self.format()


@dataclass
class Stop:
    """A stop of the network and the lines that serve it."""

    stop_id: str = "0"
    name: str = "Aucun nom"
    lines: List[str] = field(default_factory=list)

    def add_line(self, line_id: str) -> None:
        """Record that the line ``line_id`` serves this stop."""
        self.lines.append(line_id)

    def describe(self) -> str:
        """Return a readable description of the stop and its lines."""
        parts = [self.name, self.stop_id, "Lignes qui passent par cet arret"]
        parts.extend(self.lines)
        return "\n".join(parts) + "\n"


@dataclass
class Line:
    """A line: an ordered list of stops with the passing times at each."""

    line_id: str = "0"
    name: str = "Aucun nom"
    headsign: str = "Aucun terminus"
    stop_ids: List[str] = field(default_factory=list)
    schedules: List[List[ClockTime]] = field(default_factory=list)

    def add_stop(self, stop_id: str) -> None:
        """Append a stop to the line."""
        self.stop_ids.append(stop_id)

    def add_schedule(self, times: Iterable[ClockTime]) -> None:
        """Append the list of passing times for the next stop."""
        self.schedules.append(list(times))

    def _check_index(self, stop_index: int) -> None:
        if not 0 <= stop_index < len(self.schedules):
            raise IndexError(f"no stop at position {stop_index} on line {self.line_id}")

    def next_departure_index(self, time: ClockTime, stop_index: int) -> Optional[int]:
        """Index of the first passing time at or after ``time``, or None."""
        self._check_index(stop_index)
        return next(
            (i for i, passing in enumerate(self.schedules[stop_index]) if passing >= time),
            None,
        )

    def last_time(self, stop_index: Optional[int]) -> ClockTime:
        """Last passing time at a stop; midnight when the position is not valid."""
        if stop_index is not None and 0 <= stop_index < len(self.schedules):
            return self.schedules[stop_index][-1]
        return ClockTime()

    def next_stop(self, stop_id: str) -> Optional[str]:
        """The stop after ``stop_id``, or None when ``stop_id`` is the terminus."""
        index = self.stop_index(stop_id)
        if index is None:
            raise ValueError(f"stop {stop_id!r} is not on line {self.line_id}")
        if index + 1 < len(self.stop_ids):
            return self.stop_ids[index + 1]
        return None

    def stop_index(self, stop_id: str) -> Optional[int]:
        """Position of ``stop_id`` on the line, or None when it is absent."""
        try:
            return self.stop_ids.index(stop_id)
        except ValueError:
            return None

    def describe(self) -> str:
        """Return a readable description of the line, its stops and times."""
        parts = [
            self.name,
            self.line_id,
            self.headsign,
            f"Terminus : {self.headsign}",
            f"Nombre d'arrêts : {len(self.stop_ids)}",
            "Arrêts de la ligne :",
        ]
        for stop_id, times in zip(self.stop_ids, self.schedules):
            parts.append(stop_id)
            parts.append(" ".join(t.format() for t in times))
        return "\n".join(parts) + "\n"


def find_line(line_id: str, lines: Iterable[Line]) -> Optional[Line]:
    """Return the line with identifier ``line_id``, or None."""
    return next((line for line in lines if line.line_id == line_id), None)