"""Boxed text rendering of a route."""

from __future__ import annotations

from typing import Dict, Iterator, List, Sequence

from .model import ClockTime, Line, Stop, find_line
from .routing import Node
from .text import (
    BLUE,
    BOLD,
    GREEN,
    ORANGE,
    RED,
    RESET,
    WHITE,
    count_color_sequences,
    count_multibyte,
)

TOTAL_WIDTH = 50
INNER_WIDTH = TOTAL_WIDTH - 4


def box_line(text: str) -> str:
    """``text`` framed by bars and padded to the box width."""
    size = len(text.encode("utf-8")) - count_color_sequences(text)
    multibyte = count_multibyte(text)
    padding = TOTAL_WIDTH - size
    if multibyte == 0:
        padding -= 2
    elif multibyte == 1:
        padding -= 1
    else:
        padding += multibyte - 2
    return "|" + text + RESET + " " * max(padding, 0) + "|"


def centered_line(text: str) -> str:
    """``text`` centred in the box, cut to the inner width."""
    shown = text[:INNER_WIDTH]
    total = INNER_WIDTH - len(shown)
    left = total // 2
    return "| " + " " * left + shown + " " * (total - left) + " |"


def _separator() -> str:
    return "=" * TOTAL_WIDTH


def _empty() -> str:
    return "|" + " " * (TOTAL_WIDTH - 2) + "|"


def _blank() -> str:
    return " " * TOTAL_WIDTH


def _boxed(text: str) -> Iterator[str]:
    yield box_line(text)
    yield _empty()


def _clock(time: ClockTime) -> str:
    return f"{time.hour}:{time.minute:02d}"


def _stop_name(stops: Dict[str, Stop], stop_id: str) -> str:
    stop = stops.get(stop_id)
    return stop.name if stop is not None else Stop().name


def _line_header(leg: Sequence[Node], lines: List[Line], color: str) -> str:
    line = find_line(leg[0].line_id, lines)
    name = line.name if line is not None else "Inconnue"
    headsign = line.headsign if line is not None else "Inconnu"
    return color + BOLD + "  " + name + " -> " + headsign


def _place(label_color: str, label: str, name: str, time: ClockTime) -> str:
    return (
        label_color + BOLD + f"  {label} : " + WHITE + name
        + BLUE + "  Heure : " + WHITE + _clock(time)
    )


def _with_steps(legs, stops, lines) -> Iterator[str]:
    first = legs[0][0]
    yield _separator()
    yield _empty()
    yield from _boxed(_line_header(legs[0], lines, ORANGE))
    yield from _boxed(_place(GREEN, "Départ", _stop_name(stops, first.stop_id), first.time))

    step = 1
    last_index = len(legs) - 1
    for index, leg in enumerate(legs):
        if index != 0:
            yield _separator()
            yield _empty()
            yield from _boxed(_line_header(leg, lines, ORANGE))
        begin = 1 if index == 0 else 0
        end = len(leg) - 1 if index == last_index else len(leg)
        for node in leg[begin:end]:
            step += 1
            yield from _boxed(
                BLUE + BOLD + f"  Étape {step} : " + WHITE + _stop_name(stops, node.stop_id)
                + BLUE + "  Heure : " + WHITE + _clock(node.time)
            )
        if index == last_index:
            arrival = leg[-1]
            yield from _boxed(
                _place(RED, "Arrivée", _stop_name(stops, arrival.stop_id), arrival.time)
            )
        yield _separator()
        yield _blank()


def _by_line(legs, stops, lines) -> Iterator[str]:
    for leg in legs:
        start, finish = leg[0], leg[-1]
        yield _separator()
        yield _empty()
        yield from _boxed(_line_header(leg, lines, GREEN))
        yield from _boxed(_place(BLUE, "Départ", _stop_name(stops, start.stop_id), start.time))
        yield from _boxed(
            _place(BLUE, "Arrivée", _stop_name(stops, finish.stop_id), finish.time)
        )
        yield _separator()
        yield _blank()


def render_route(
    legs: Sequence[Sequence[Node]],
    stops: Dict[str, Stop],
    lines: List[Line],
    show_steps: bool = True,
) -> str:
    """Render a route of legs as a framed block of text."""
    if not legs or any(not leg for leg in legs):
        raise ValueError("no route to display")
    rows: List[str] = [_separator(), centered_line("Chemin detaille"), _separator(), _blank()]
    rows.extend(_with_steps(legs, stops, lines) if show_steps else _by_line(legs, stops, lines))
    rows.extend([_separator(), centered_line("Arrivee"), _separator()])
    return "\n".join(rows) + "\n"