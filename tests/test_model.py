import pytest

from transitplan.model import ClockTime, Line, Stop, find_line


def make_line():
    line = Line("T1", "Ligne 5", "Gare")
    for stop_id in ("A", "B", "C"):
        line.add_stop(stop_id)
    line.add_schedule([ClockTime(7, 0), ClockTime(7, 30), ClockTime(8, 0)])
    line.add_schedule([ClockTime(7, 10), ClockTime(7, 40), ClockTime(8, 10)])
    line.add_schedule([ClockTime(7, 20), ClockTime(7, 50), ClockTime(8, 20)])
    return line


def test_clock_ordering():
    assert ClockTime(7, 30) < ClockTime(8, 0)
    assert ClockTime(8, 5) > ClockTime(8, 4)
    assert ClockTime(9, 0) == ClockTime(9, 0)


def test_plus_minutes_carries_into_hour():
    assert ClockTime(7, 50).plus_minutes(15) == ClockTime(8, 5)


def test_plus_minutes_wraps_midnight():
    assert ClockTime(23, 59).plus_minutes(1) == ClockTime(0, 0)


def test_plus_minutes_whole_day_is_identity():
    t = ClockTime(13, 27)
    assert t.plus_minutes(24 * 60) == t
    assert t.plus_minutes(0) == t


def test_format_pads():
    assert ClockTime(7, 5).format() == "07:05"
    assert str(ClockTime(7, 5)) == ClockTime(7, 5).format()


def test_stop_defaults_and_lines():
    stop = Stop()
    assert stop.stop_id == "0"
    assert stop.name == "Aucun nom"
    stop.add_line("L1")
    stop.add_line("L2")
    assert stop.lines == ["L1", "L2"]


def test_stop_describe_mentions_everything():
    stop = Stop("PEA", "Campus")
    stop.add_line("T9")
    text = stop.describe()
    assert "Campus" in text
    assert "PEA" in text
    assert "T9" in text


def test_line_defaults():
    line = Line()
    assert (line.line_id, line.name, line.headsign) == ("0", "Aucun nom", "Aucun terminus")
    assert line.stop_ids == [] and line.schedules == []


def test_next_departure_index_invariant():
    line = make_line()
    query = ClockTime(7, 15)
    index = line.next_departure_index(query, 0)
    times = line.schedules[0]
    assert times[index] >= query
    assert all(t < query for t in times[:index])


def test_next_departure_exact_match():
    line = make_line()
    index = line.next_departure_index(ClockTime(7, 30), 0)
    assert line.schedules[0][index] == ClockTime(7, 30)


def test_next_departure_none_after_last():
    line = make_line()
    assert line.next_departure_index(ClockTime(9, 0), 1) is None


def test_next_departure_bad_index():
    with pytest.raises(IndexError):
        make_line().next_departure_index(ClockTime(7, 0), 5)


def test_last_time():
    line = make_line()
    assert line.last_time(0) == ClockTime(8, 0)
    assert line.last_time(None) == ClockTime(0, 0)
    assert line.last_time(42) == ClockTime(0, 0)


def test_next_stop():
    line = make_line()
    assert line.next_stop("A") == "B"
    assert line.next_stop("C") is None
    with pytest.raises(ValueError):
        line.next_stop("Z")


def test_stop_index():
    line = make_line()
    assert line.stop_ids[line.stop_index("B")] == "B"
    assert line.stop_index("Z") is None


def test_describe_line():
    text = make_line().describe()
    assert "Terminus : Gare" in text
    assert "Ligne 5" in text


def test_find_line():
    first = Line("T1", "Ligne 1", "X")
    second = Line("T2", "Ligne 2", "Y")
    assert find_line("T2", [first, second]) is second
    assert find_line("T3", [first, second]) is None