"""Journey planning over GTFS-style bus timetables, with an interactive terminal planner."""

__version__ = "0.1.0"