import pytest

from transitplan.model import ClockTime, Line, Stop
from transitplan.routing import (
    Node,
    build_path,
    find_leg,
    find_route,
    neighbour_index,
    visited_index,
)


def T(hour, minute):
    return ClockTime(hour, minute)


@pytest.fixture
def network():
    l1 = Line(
        "L1",
        "Ligne 1",
        "C",
        ["A", "B", "C"],
        [[T(8, 0), T(9, 0)], [T(8, 10), T(9, 10)], [T(8, 20), T(9, 20)]],
    )
    l2 = Line(
        "L2",
        "Ligne 2",
        "E",
        ["C", "D", "E"],
        [[T(8, 30), T(9, 30)], [T(8, 40), T(9, 40)], [T(8, 50), T(9, 50)]],
    )
    stops = {
        "A": Stop("A", "Alpha", ["L1"]),
        "B": Stop("B", "Beta", ["L1"]),
        "C": Stop("C", "Gamma", ["L1", "L2"]),
        "D": Stop("D", "Delta", ["L2"]),
        "E": Stop("E", "Epsilon", ["L2"]),
    }
    return stops, [l1, l2]


def test_node_defaults_and_str():
    node = Node()
    assert node.stop_id == "Vide"
    assert node.previous is None
    assert str(node) == "Arret: Vide, Ligne: , Heure: 00:00"


def test_visited_index():
    visited = [Node("A", "L1", None, T(8, 0)), Node("B", "L1", 0, T(8, 10))]
    assert visited_index("B", visited) == 1
    assert visited_index("Z", visited) is None


def test_neighbour_index_needs_stop_and_line():
    neighbours = [Node("B", "L1", 0, T(8, 10)), Node("B", "L2", 0, T(8, 5))]
    assert neighbour_index("B", "L2", neighbours) == 1
    assert neighbour_index("B", "L3", neighbours) is None


def test_build_path_follows_links():
    visited = [Node("A", "L1", None, T(8, 0)), Node("B", "L1", 0, T(8, 10))]
    end = Node("C", "L1", 1, T(8, 20))
    path = build_path(visited, end)
    assert [n.stop_id for n in path] == ["A", "B", "C"]
    assert path[-1] is end


def test_build_path_of_start_only():
    start = Node("A", "L1", None, T(8, 0))
    assert [n.stop_id for n in build_path([start], start)] == ["A"]


def test_build_path_without_visited_fails():
    with pytest.raises(IndexError):
        build_path([], Node("A", "L1", None, T(8, 0)))


def test_find_leg_direct_line(network):
    stops, lines = network
    path = find_leg("A", "C", T(8, 0), stops, lines)
    assert [n.stop_id for n in path] == ["A", "B", "C"]
    assert [n.line_id for n in path] == ["L1", "L1", "L1"]
    assert [n.time for n in path] == [T(8, 0), T(8, 10), T(8, 20)]


def test_find_leg_same_stop_is_empty(network):
    stops, lines = network
    assert find_leg("A", "A", T(8, 0), stops, lines) == []


def test_find_leg_wrong_direction_is_empty(network):
    stops, lines = network
    assert find_leg("C", "A", T(8, 0), stops, lines) == []


def test_find_leg_reaches_stop_just_after_transfer(network):
    stops, lines = network
    path = find_leg("A", "D", T(8, 0), stops, lines)
    assert [n.stop_id for n in path] == ["A", "B", "C", "D"]
    assert path[-1].line_id == "L2"
    assert path[-1].time == T(8, 40)


def test_find_leg_stops_when_line_changes(network):
    stops, lines = network
    path = find_leg("A", "E", T(8, 0), stops, lines)
    assert [n.stop_id for n in path] == ["A", "B", "C"]
    assert {n.line_id for n in path} == {"L1"}


def test_find_route_direct(network):
    stops, lines = network
    route = find_route("A", "C", T(7, 55), stops, lines)
    assert len(route) == 1
    assert [n.stop_id for n in route[0]] == ["A", "B", "C"]
    assert route[0][0].time == T(8, 0)


def test_find_route_with_transfer(network):
    stops, lines = network
    route = find_route("A", "E", T(7, 55), stops, lines)
    assert [[n.stop_id for n in leg] for leg in route] == [["A", "B", "C"], ["C", "D", "E"]]
    assert {n.line_id for n in route[1]} == {"L2"}
    assert route[1][0].time == T(8, 30)
    assert route[-1][-1].time == T(8, 50)


def test_find_route_times_never_decrease(network):
    stops, lines = network
    route = find_route("A", "E", T(7, 55), stops, lines)
    times = [n.time for leg in route for n in leg]
    assert times == sorted(times)
    assert route[-1][-1].stop_id == "E"


def test_find_route_later_departure_uses_later_trip(network):
    stops, lines = network
    route = find_route("A", "C", T(8, 30), stops, lines)
    assert [n.time for n in route[0]] == [T(9, 0), T(9, 10), T(9, 20)]


def test_find_route_avoiding_intermediate_stop(network):
    stops, lines = network
    assert find_route("A", "C", T(7, 55), stops, lines, ["B"]) == []


def test_find_route_avoiding_transfer_path(network):
    stops, lines = network
    assert find_route("A", "E", T(7, 55), stops, lines, ["D"]) == []


def test_find_route_no_departure_left(network):
    stops, lines = network
    assert find_route("A", "C", T(10, 0), stops, lines) == []


def test_find_route_unknown_start(network):
    stops, lines = network
    assert find_route("Z", "C", T(8, 0), stops, lines) == []


def test_find_route_same_stop(network):
    stops, lines = network
    assert find_route("A", "A", T(8, 0), stops, lines) == []