"""Interactive journey planner on the terminal."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from itertools import groupby
from typing import Dict, List, Optional, Sequence, TextIO

from .display import render_route
from .model import ClockTime, Line, Stop
from .parsing import load_network
from .routing import Node, find_route
from .text import (
    BLUE,
    BOLD,
    GREEN,
    RED,
    RESET,
    WHITE,
    YELLOW,
    city_of_stop,
    clean_utf8,
    closest_stop_name,
    normalize_name,
    stop_ids_by_name,
)

_CLEAR_SCREEN = "\033[H\033[2J"


@dataclass
class Console:
    """Line-oriented terminal input and output."""

    input: Optional[TextIO] = None
    output: Optional[TextIO] = None
    error: Optional[TextIO] = None

    @property
    def _in(self) -> TextIO:
        return self.input if self.input is not None else sys.stdin

    @property
    def _out(self) -> TextIO:
        return self.output if self.output is not None else sys.stdout

    @property
    def _err(self) -> TextIO:
        return self.error if self.error is not None else sys.stderr

    def ask(self, prompt: str) -> str:
        """Write ``prompt`` and return the next input line; EOFError at end of input."""
        self._out.write(prompt)
        self._out.flush()
        line = self._in.readline()
        if not line:
            raise EOFError("end of input")
        return line.rstrip("\r\n")

    def say(self, text: str) -> None:
        """Write a line to the output."""
        self._out.write(text + "\n")

    def warn(self, text: str) -> None:
        """Write a line to the error stream."""
        self._err.write(text + "\n")


def _first_char(answer: str) -> str:
    stripped = answer.strip()
    return stripped[:1]


def _is_yes(answer: str) -> bool:
    return _first_char(answer) in ("O", "o")


def _is_no(answer: str) -> bool:
    return _first_char(answer) in ("N", "n")


def _parse_time(answer: str) -> Optional[ClockTime]:
    parts = answer.split()
    if len(parts) < 2:
        return None
    try:
        hour, minute = int(parts[0]), int(parts[1])
    except ValueError:
        return None
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    return ClockTime(hour, minute)


def _stop_name(stops: Dict[str, Stop], stop_id: str) -> str:
    stop = stops.get(stop_id)
    return stop.name if stop is not None else Stop().name


def choose_city(stop_ids: Sequence[str], stops: Dict[str, Stop], console: Console) -> List[str]:
    """Narrow stops sharing one name to the one in the city the user picks.

    Raises ValueError when the answer names none of the offered cities.
    """
    stop_ids = list(stop_ids)
    cities = [name for name, _ in groupby(city_of_stop(stop_id) for stop_id in stop_ids)]
    if len(cities) <= 1:
        return stop_ids

    stop_name = _stop_name(stops, stop_ids[0])
    prompt = (
        BLUE + BOLD + "Veuillez choisir une ville pour l'arrêt " + WHITE + stop_name
        + RESET + BLUE + BOLD + " : " + RESET + ", ".join(cities)
    )
    answer = normalize_name(console.ask(prompt + "\n"))
    if not any(normalize_name(city) == answer for city in cities):
        raise ValueError("Erreur : Ville choisie invalide.")

    chosen = next(
        stop_id for stop_id in stop_ids if normalize_name(city_of_stop(stop_id)) == answer
    )
    return [chosen]


def read_waypoints(
    stops: Dict[str, Stop],
    starts: Sequence[str],
    ends: Sequence[str],
    console: Console,
) -> List[str]:
    """Ask for a yes/no answer, then a ';' separated list of stop names.

    Returns the stop ids, leaving out starts and ends; an empty list when the
    user declines or a name matches no stop. A bad city choice raises ValueError.
    """
    answer = console.ask("").split()
    if answer and answer[0] in ("N", "n"):
        return []

    text = console.ask(
        BLUE + BOLD + "Entrez les arrêts (séparés de cette manière 'Campus ; Derain') : " + RESET
    )
    chosen: List[str] = []
    for raw in text.split(";"):
        name = clean_utf8(raw).strip(" \t")
        ids = stop_ids_by_name(name, stops)
        if not ids:
            console.warn(
                RED + "Erreur : Aucun arrêt trouvé pour le nom '" + BOLD + name + RESET
                + RED + "'." + RESET
            )
            return []
        if len(ids) > 1:
            ids = choose_city(ids, stops, console)
        stop_id = ids[0]

        if stop_id in starts:
            console.say(
                YELLOW + "L'arrêt '" + BOLD + stop_id + RESET + YELLOW
                + "' est le même que le départ/l'un des départs." + RESET
            )
            continue
        if stop_id in ends:
            console.say(
                YELLOW + "L'arrêt '" + BOLD + stop_id + RESET + YELLOW
                + "' est le même que l'arrivée/l'un des arrivés." + RESET
            )
            continue
        chosen.append(stop_id)
    return chosen


def drop_endpoints(
    avoid: Sequence[str],
    starts: Sequence[str],
    ends: Sequence[str],
    console: Console,
) -> List[str]:
    """Return ``avoid`` without any start or end stop, reporting each one dropped."""
    remaining = list(avoid)
    for start in starts:
        if start in remaining:
            console.say(
                YELLOW + "L'arrêt '" + BOLD + start + RESET + YELLOW
                + "' est le même que le départ/l'un des départs." + RESET
            )
            remaining = [stop_id for stop_id in remaining if stop_id != start]
    for end in ends:
        if end in remaining:
            console.say(
                YELLOW + "L'arrêt '" + BOLD + end + RESET + YELLOW
                + "' est le même que l'arrivée/l'un des arrivés." + RESET
            )
            remaining = [stop_id for stop_id in remaining if stop_id != end]
    return remaining


def _report_unknown(label: str, name: str, stops: Dict[str, Stop], console: Console) -> None:
    console.warn(RED + f"Erreur : Impossible de trouver l'arrêt {label} spécifié." + RESET)
    closest = closest_stop_name(name, stops)
    if closest:
        console.say(
            YELLOW + "Aucun arrêt trouvé pour '" + BOLD + name + RESET + YELLOW
            + "'. Voulez-vous dire : '" + BOLD + closest + RESET + YELLOW + "' ?" + RESET
        )
    else:
        console.say(YELLOW + "Aucun arrêt correspondant trouvé dans la base de données." + RESET)
    console.warn("")


def _show(legs: List[List[Node]], stops: Dict[str, Stop], lines: List[Line], console: Console) -> None:
    answer = console.ask(
        BLUE + BOLD + "Voulez-vous afficher les étapes intermédiaires ? (O/N) : " + RESET
    )
    console.say("")
    console.say(render_route(legs, stops, lines, show_steps=not _is_no(answer)))


def _listing(label: str, stop_ids: Sequence[str]) -> str:
    if not stop_ids:
        return label + "Aucun"
    return label + "".join(stop_id + " " for stop_id in stop_ids)


def _no_route(console: Console) -> None:
    console.warn(RED + "Erreur : Aucun chemin trouvé entre les arrêts spécifiés." + RESET)


def run_query(stops: Dict[str, Stop], lines: List[Line], console: Console) -> List[List[Node]]:
    """Run one journey request; return the legs of the route shown, or [] when aborted."""
    start_name = clean_utf8(
        console.ask(BLUE + BOLD + "Entrez le nom de l'arrêt de départ : " + RESET)
    )
    end_name = clean_utf8(
        console.ask(BLUE + BOLD + "Entrez le nom de l'arrêt d'arrivée : " + RESET)
    )
    time_prompt = BLUE + BOLD + "Entrez l'heure de départ (HH MM) : " + RESET
    time = _parse_time(console.ask(time_prompt))
    while time is None:
        console.warn(
            RED + "Erreur : Heure invalide. Veuillez entrer une heure au format HH MM "
            "(ex : 07 30)." + RESET
        )
        time = _parse_time(console.ask(time_prompt))

    starts = stop_ids_by_name(start_name, stops)
    ends = stop_ids_by_name(end_name, stops)
    if not starts or not ends:
        if not starts:
            _report_unknown("de départ", start_name, stops, console)
        if not ends:
            _report_unknown("d'arrivée", end_name, stops, console)
        return []

    if starts == ends:
        console.warn(RED + "Erreur : Le départ est le même que l'arrivée." + RESET)
        return []

    try:
        if len(starts) > 1:
            starts = choose_city(starts, stops, console)
        if len(ends) > 1:
            ends = choose_city(ends, stops, console)

        console.say(BLUE + BOLD + "Voulez vous rentrer des arrêts intermédiaires ? (O/N) " + RESET)
        waypoints = read_waypoints(stops, starts, ends, console)
        console.say(_listing("Arrêts à privilégier : ", waypoints))
        for index, waypoint in enumerate(waypoints):
            starts.append(waypoint)
            ends.insert(index, waypoint)

        console.say(BLUE + BOLD + "Voulez vous rentrer des arrêts à éviter ? (O/N) " + RESET)
        avoid = read_waypoints(stops, starts, ends, console)
        avoid = drop_endpoints(avoid, starts, ends, console)
        console.say(_listing("Arrêts à éviter : ", avoid))
    except ValueError as exc:
        console.warn(RED + str(exc) + RESET)
        return []

    legs: List[List[Node]] = []
    for start, end in zip(starts, ends):
        route = find_route(start, end, time, stops, lines, avoid)
        if not route:
            _no_route(console)
            return []
        legs.extend(route)
        time = route[-1][-1].time.plus_minutes(1)
    if not legs:
        _no_route(console)
        return []

    routes: List[List[List[Node]]] = [legs]
    _show(legs, stops, lines, console)
    console.say("")

    answer = console.ask(BLUE + BOLD + "Voulez-vous effectuer ce chemin ? (O/N) : " + RESET)
    if not _is_yes(answer):
        console.say(BLUE + BOLD + "Merci d'avoir utilisé notre service." + RESET)
        return routes[0]

    nodes = [node for route in routes for leg in route for node in leg]
    console.say(f"Nombre d'étapes : {len(nodes)}")
    step = 1
    while step <= len(nodes):
        name = _stop_name(stops, nodes[step - 1].stop_id)
        answer = console.ask(f"Etape ({step} / {len(nodes)}) {name} : Valider ? (O/N)\n")
        if _is_yes(answer):
            console.say(GREEN + BOLD + f"Etape {step} validée." + RESET)
        else:
            console.say(YELLOW + f"Etape {step} annulée." + RESET + "\n")
            new_start = clean_utf8(
                console.ask(BLUE + BOLD + "Entrez le nom de l'arrêt de départ : " + RESET)
            )
            if new_start == end_name:
                console.warn(RED + "Le départ est le même que l'arrivée." + RESET)
                return []
            time = _parse_time(console.ask(time_prompt))
            if time is None:
                console.warn(RED + "Erreur : Heure de départ invalide." + RESET)
                return []
            new_starts = stop_ids_by_name(new_start, stops)
            if len(new_starts) > 1:
                try:
                    new_starts = choose_city(new_starts, stops, console)
                except ValueError as exc:
                    console.warn(RED + str(exc) + RESET)
                    return []
            if not new_starts:
                _report_unknown("de départ", new_start, stops, console)
                return []

            routes = []
            for start in new_starts:
                for end in ends:
                    route = find_route(start, end, time, stops, lines, avoid)
                    if route:
                        routes.append(route)
            if not routes:
                _no_route(console)
                return []
            nodes = [node for route in routes for leg in route for node in leg]
            _show(routes[0], stops, lines, console)
            console.say("")
            step = 0
        step += 1

    console.say("\n" + GREEN + BOLD + "Vous êtes arrivé à votre destination !" + RESET + "\n")
    return routes[0]


def _clear(console: Console) -> None:
    stream = console.output if console.output is not None else sys.stdout
    if stream.isatty():
        stream.write(_CLEAR_SCREEN)
        stream.flush()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Load a feed directory and answer journey requests until the user stops."""
    parser = argparse.ArgumentParser(description="Plan journeys on a bus network.")
    parser.add_argument(
        "data",
        nargs="?",
        default="data",
        help="directory holding stops.txt, trips.txt and stop_times.txt",
    )
    args = parser.parse_args(argv)

    console = Console()
    _clear(console)
    try:
        network = load_network(args.data)
    except OSError as exc:
        console.warn(f"Erreur : Impossible d'ouvrir le fichier {exc.filename}")
        return 1

    try:
        while True:
            run_query(network.stops, network.lines, console)
            answer = console.ask("Voulez-vous entrer un trajet ? (O/N) : ")
            _clear(console)
            if not _is_yes(answer):
                break
    except EOFError:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())