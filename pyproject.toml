[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "transitplan"
version = "0.1.0"
description = "Plan bus journeys over GTFS-style timetable files from the terminal"
requires-python = ">=3.10"
dependencies = []
keywords = ["transit", "gtfs", "timetable", "route planning", "bus", "journey planner"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Natural Language :: French",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: GIS",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
transitplan = "transitplan.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["transitplan"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
