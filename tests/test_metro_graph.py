# tests/test_metro_graph.py
import pytest

from constants import AQUA_LINE, INTERCHANGE, PURPLE_LINE
from errors import StationNotFound
from metro_graph import RouteGraph, duration, fare


def test_pcmc_to_swargate_same_line(graph):
    assert graph.route("PCMC", "Swargate") == (13, False)
    assert fare(13, False) == 35
    assert duration(13, False) == 32.5

    q = graph.quote("pcmc", "swargate")
    assert (q.origin, q.destination) == ("PCMC", "Swargate")
    assert (q.stations, q.fare, q.minutes, q.transfer) == (13, 35, 32.5, False)


def test_same_line_distance_is_index_difference(graph):
    for stations in (PURPLE_LINE, AQUA_LINE):
        for i, a in enumerate(stations):
            for j, b in enumerate(stations):
                assert graph.distance(a, b) == abs(i - j), (a, b)


def test_cross_line_distance_pivots_on_interchange(graph):
    ip = PURPLE_LINE.index(INTERCHANGE)
    ia = AQUA_LINE.index(INTERCHANGE)
    for i, a in enumerate(PURPLE_LINE):
        if a == INTERCHANGE:
            continue
        for j, b in enumerate(AQUA_LINE):
            if b == INTERCHANGE:
                continue
            count, transfer = graph.route(a, b)
            assert transfer is True
            assert count == abs(i - ip) + abs(j - ia), (a, b)


def test_cross_line_quote_adds_surcharge_and_penalty(graph):
    q = graph.quote("PCMC", "Vanaz")
    assert q.stations == 10 + 8
    assert q.transfer is True
    assert q.fare == 40
    assert q.minutes == 18 * 2.5 + 7


def test_interchange_counts_as_same_line(graph):
    assert graph.route("Civil Court", "Vanaz") == (8, False)
    assert graph.route("Civil Court", "PCMC") == (10, False)


def test_fare_tiers():
    assert [fare(n, False) for n in (0, 1, 3, 4, 7, 8, 20)] == [15, 15, 15, 25, 25, 35, 35]
    assert fare(3, True) == 20
    assert fare(8, True) == 40


def test_fare_monotonic_and_transfer_never_cheaper():
    for n in range(0, 30):
        assert fare(n, False) <= fare(n + 1, False)
        assert fare(n, True) <= fare(n + 1, True)
        assert fare(n, True) >= fare(n, False)


def test_duration():
    assert duration(4, False) == 10.0
    assert duration(4, True) == 17.0


def test_unknown_station_raises_with_query(graph):
    with pytest.raises(StationNotFound) as exc:
        graph.distance("Atlantis", "PCMC")
    assert exc.value.query == "Atlantis"

    with pytest.raises(StationNotFound) as exc:
        graph.quote("PCMC", "Narnia")
    assert exc.value.query == "Narnia"


def test_blank_station_not_found(graph):
    with pytest.raises(StationNotFound):
        graph.lookup("   ")


def test_lookup_first_match_in_list_order(graph):
    # Purple line is searched first, and within a line the earliest station wins
    assert graph.lookup("court") == ("Purple Line", INTERCHANGE)
    assert graph.lookup("peth") == ("Purple Line", "Budhwar Peth")
    assert graph.lookup("nagar") == ("Purple Line", "Sant Tukaram Nagar")
    assert graph.lookup("VANAZ") == ("Aqua Line", "Vanaz")


def test_graph_requires_single_interchange():
    with pytest.raises(ValueError):
        RouteGraph({"A": ("x", "y", "z"), "B": ("y", "z", "w")})
    with pytest.raises(ValueError):
        RouteGraph({"A": ("x", "y"), "B": ("z", "w")})


def test_numbered_listing_mentions_both_lines(graph):
    listing = graph.numbered_listing()
    assert "**Purple Line (PCMC-Swargate):**" in listing
    assert "**Aqua Line (Vanaz-Ramwadi):**" in listing
    assert "1. PCMC → 2. Sant Tukaram Nagar" in listing
