# transitplan

An interactive journey planner for a bus network described by GTFS-style
text files. It loads stops, trips and stop times, asks for a departure stop,
an arrival stop and a departure time, and prints the itinerary in a framed
box of text. The prompts and messages are in French, and yes/no questions
take `O` or `N`.

## Installation

```
pip install .
```

## Data

The planner reads three comma-separated files, each with a header line that
is skipped:

- `stops.txt`: `stop_id` in the first column, `stop_name` in the third. Lines
  with fewer than six fields are skipped with a warning.
- `trips.txt`: `route_id`, `service_id`, `trip_id`, `trip_headsign`.
- `stop_times.txt`: `trip_id`, `arrival_time`, `departure_time`, `stop_id`,
  `stop_sequence`. Only the hours and minutes of `arrival_time` are used.

Loading works as follows:

- Stop ids lose their last character, so that the platforms of one stop are
  merged. Stops whose id starts with `1` are skipped.
- Each distinct pair of route and headsign becomes one line. The line is
  named `Ligne <route_id>`, and its id is the first trip seen for that pair.
- The first trip of a line fixes its stop sequence. A later trip adds its
  times only when it visits exactly the same stops.
- Passing times are then sorted and deduplicated, and a stop that appears
  twice on a line keeps only its first place.

## Usage

```
transitplan [DATA]
```

`DATA` is the directory that holds the three files. It defaults to `data`.
If a file cannot be opened, the command prints an error and exits with
status 1.

For each request the program asks for:

1. the departure stop name and the arrival stop name. Case is ignored, and
   hyphens count as spaces. Characters other than ASCII letters, digits and
   spaces are ignored. For an unknown name, the closest stop name by edit
   distance is suggested;
2. the departure time as `HH MM`, asking again until it is valid;
3. the town, when one name matches stops in several towns. The town is read
   from the third and fourth characters of the stop id;
4. optional stops to pass through, then optional stops to avoid, given as
   `Campus ; Derain`;
5. whether to show every intermediate stop, or only one block per line.

Once a route is shown, you can follow it step by step. If you refuse a step,
you are asked for a new departure stop and time, and the route is planned
again from there. The program loops until you answer anything other than `O`
to "Voulez-vous entrer un trajet ?", or until input ends.

## Modules

- `transitplan.model` holds the timetable objects:
  - `ClockTime`: hours and minutes, ordered. `plus_minutes` wraps at
    midnight, and `format` gives `HH:MM`.
  - `Stop`, with `add_line` and `describe`.
  - `Line`, with `stop_index`, `next_stop`, `next_departure_index`,
    `last_time`, `add_stop`, `add_schedule` and `describe`.
  - `find_line`.
- `transitplan.parsing` reads the files:
  - `read_stops`, `read_trips`, `complete_lines` and `clean_lines`.
  - `load_network(directory)`, which returns a `Network` with its `stops`,
    `lines` and `trips` (a `TripIndex`).
- `transitplan.routing` searches for routes:
  - `find_route` chains legs, each on a single line, from a start stop to an
    end stop. It gives up after six legs, and returns `[]` when no route
    reaches the end.
  - `find_leg` computes one leg.
  - `build_path`, `visited_index` and `neighbour_index` are helpers.
  - `Node` is a stop reached on a line at a time.
- `transitplan.text` holds the text helpers:
  - Name matching: `normalize_name`, `stop_ids_by_name`, `levenshtein` and
    `closest_stop_name`.
  - Byte cleaning: `clean_utf8` drops bytes that are not part of a valid
    UTF-8 sequence.
  - The town table `CITIES`, with `city_name_by_id`, `city_id_by_name` and
    `city_of_stop`.
  - The terminal colour codes.
- `transitplan.display` draws the box:
  - `render_route(legs, stops, lines, show_steps)` returns the framed text
    and raises `ValueError` when there is nothing to show.
  - `box_line` and `centered_line` build single rows.
- `transitplan.cli` runs the interactive planner:
  - `Console` wraps input, output and error streams. Its `ask` raises
    `EOFError` at end of input.
  - `choose_city`, `read_waypoints`, `drop_endpoints`, `run_query` and
    `main`.

## Library use

```python
from transitplan.parsing import load_network
from transitplan.model import ClockTime
from transitplan.routing import find_route
from transitplan.display import render_route

network = load_network("data")
legs = find_route("SOME_START", "SOME_END", ClockTime(7, 30),
                  network.stops, network.lines, [])
if legs:
    print(render_route(legs, network.stops, network.lines, show_steps=True))
```

Warnings are sent through the standard `logging` module. These include
malformed lines, unknown stop names, and a passing time later than the last
one at the destination.

## What it does not do

- Service calendars are not used: `service_id` is read but ignored, so every
  trip is assumed to run every day.
- Stop coordinates are not read, so there is no map, distance or walking
  transfer.
- The search follows lines greedily towards the destination. It does not
  promise the fastest or shortest route.
- Nothing is saved between runs.

## Tests

```
pip install .[test]
pytest
```