"""Text helpers: terminal colours, name matching and the city table."""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Union

from .model import Stop

log = logging.getLogger(__name__)

RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
ORANGE = "\033[38;5;214m"
WHITE = "\033[37m"
BOLD = "\033[1m"
RESET = "\033[0m"
UNDERLINE = "\033[4m"

COLOR_SEQUENCES = (RESET, BOLD, RED, GREEN, YELLOW, BLUE, ORANGE, WHITE)

UNKNOWN_CITY = "Inconnu"

CITIES: Dict[str, str] = {
    "Perpignan": "PE",
    "Rivesaltes": "RI",
    "Baixas": "BX",
    "Canohès": "CA",
    "Saint Laurent de la Salanque": "LS",
    "Toulouges": "TO",
    "Canet en Roussillon": "CN",
    "Llupia": "LL",
    "Saint Estève": "ES",
    "Sainte Marie la Mer": "MA",
    "Cabestany": "CY",
    "Le Barcarès": "LB",
    "Bompas": "BO",
    "Pollestres": "PO",
    "Baho": "BA",
    "Cassagnes": "CG",
    "Calce": "CC",
    "Saint Nazaire": "NA",
    "Saint Féliu d'Avall": "FE",
    "Villeneuve de la Raho": "RA",
    "Saleilles": "SA",
    "Villelongue de la Salanque": "VS",
    "Cases de Pènes": "CP",
    "Peyrestortes": "PY",
    "Pézilla la Rivière": "PZ",
    "Tautavel": "TA",
    "Le Soler": "SO",
    "Espire de l'Agly": "EA",
    "Estagel": "EL",
    "Ponteilla": "PT",
    "Torreilles": "TR",
    "Villeneuve la Rivière": "VI",
    "Vingrau": "VN",
    "Saint Hyppolyte": "HY",
    "Latour de France": "LA",
    "Opoul": "OP",
}

_SPACES = frozenset(" \t\n\v\f\r")


def _is_continuation(byte: int) -> bool:
    return byte & 0xC0 == 0x80


def clean_utf8(data: Union[bytes, str]) -> str:
    """Decode ``data``, dropping every byte that is not part of a UTF-8 sequence."""
    if isinstance(data, str):
        return data
    kept = bytearray()
    i = 0
    size = len(data)
    while i < size:
        lead = data[i]
        if lead & 0x80 == 0:
            length = 1
        elif lead & 0xE0 == 0xC0:
            length = 2
        elif lead & 0xF0 == 0xE0:
            length = 3
        elif lead & 0xF8 == 0xF0:
            length = 4
        else:
            i += 1
            continue
        tail = data[i + 1:i + length]
        if len(tail) == length - 1 and all(_is_continuation(b) for b in tail):
            kept += data[i:i + length]
            i += length
        else:
            i += 1
    return kept.decode("utf-8", errors="ignore")


def normalize_name(name: str) -> str:
    """Lower-case ASCII letters, digits and spaces; dashes become spaces."""
    result = []
    for char in name:
        if char.isascii() and (char.isalnum() or char in _SPACES):
            result.append(char.lower())
        elif char == "-":
            result.append(" ")
    return "".join(result)


def levenshtein(first: str, second: str) -> int:
    """Edit distance between two strings."""
    previous = list(range(len(second) + 1))
    for i, a in enumerate(first, start=1):
        current = [i]
        for j, b in enumerate(second, start=1):
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + (a != b)))
        previous = current
    return previous[-1]


def count_multibyte(text: str) -> int:
    """Number of characters that take more than one byte in UTF-8."""
    return sum(1 for char in text if ord(char) >= 0x80)


def count_color_sequences(text: str) -> int:
    """Total length of the colour and style sequences found in ``text``."""
    return sum(text.count(sequence) * len(sequence) for sequence in COLOR_SEQUENCES)


def stop_ids_by_name(name: str, stops: Mapping[str, Stop]) -> List[str]:
    """Ids of every stop whose normalised name equals the normalised ``name``."""
    wanted = normalize_name(name)
    found = [stop_id for stop_id, stop in stops.items() if normalize_name(stop.name) == wanted]
    if not found:
        log.warning("no stop found for the name %r", name)
    return found


def city_name_by_id(city_id: str, cities: Mapping[str, str] = CITIES) -> str:
    """Name of the city with code ``city_id``, or ``Inconnu``."""
    return next((name for name, code in cities.items() if code == city_id), UNKNOWN_CITY)


def city_id_by_name(name: str, cities: Mapping[str, str] = CITIES) -> str:
    """Code of the city called ``name``, or ``Inconnu``."""
    return cities.get(name, UNKNOWN_CITY)


def city_of_stop(stop_id: str) -> str:
    """Name of the city encoded in the third and fourth characters of a stop id."""
    return city_name_by_id(stop_id[2:4])


def closest_stop_name(name: str, stops: Mapping[str, Stop]) -> Optional[str]:
    """The stop name nearest to ``name`` by edit distance, or None without stops."""
    best: Optional[str] = None
    best_distance: Optional[int] = None
    for stop in stops.values():
        distance = levenshtein(name, stop.name)
        if best_distance is None or distance < best_distance:
            best_distance = distance
            best = stop.name
    return best or None