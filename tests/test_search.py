"""Tests for the solo and duo pressure searches."""

import pytest

from flowsearch import (
    DuoSearch,
    ShortestPathIndex,
    SoloSearch,
    UnknownLocation,
    ValveIndex,
    ValveNetwork,
    solve_duo,
    solve_solo,
)


# ---------------------------------------------------------------------------
# End-to-end fixture values
# ---------------------------------------------------------------------------

def test_sample_solo_thirty_minutes(sample_network):
    assert solve_solo(sample_network, "AA", 30) == 1651


def test_sample_duo_twenty_six_minutes(sample_network):
    assert solve_duo(sample_network, "AA", 26, 26) == 1707


def test_triangle_values(triangle_network):
    # B, then A, then C: 8*10 + 6*5 + 4*1
    assert solve_solo(triangle_network, "A", 10) == 114
    assert solve_solo(triangle_network, "A", 6) == 50
    assert solve_duo(triangle_network, "A", 6, 6) == 54


# ---------------------------------------------------------------------------
# SoloSearch properties
# ---------------------------------------------------------------------------

def test_zero_budget_is_zero(sample_network, triangle_network):
    for network, start in ((sample_network, "AA"), (triangle_network, "A")):
        assert SoloSearch(network).maximize(start, 0) == 0
        assert DuoSearch(network).maximize(start, 0, start, 0) == 0


@pytest.mark.parametrize(
    "budget, expected",
    [
        (0, 0),
        (2, 0),
        (3, 0),   # walking 2 + opening 1 leaves nothing
        (4, 5),
        (10, 35),
    ],
)
def test_single_valve_at_distance(budget, expected):
    network = ValveNetwork.from_mapping(
        {
            "S": (0, ["M"]),
            "M": (0, ["S", "V"]),
            "V": (5, ["M"]),
        }
    )
    assert solve_solo(network, "S", budget) == expected


def test_solo_is_monotone_in_budget(sample_network):
    search = SoloSearch(sample_network)
    values = [search.maximize("AA", minutes) for minutes in range(0, 31)]

    assert values == sorted(values)
    assert values[-1] == 1651


def test_unreachable_valves_are_infeasible(split_network):
    assert solve_solo(split_network, "Y", 5) == 15  # X at distance 1: 3 * 5
    # X cannot open itself, Y has no flow, Z is unreachable.
    assert solve_solo(split_network, "X", 30) == 0
    assert solve_solo(split_network, "Z", 30) == 0


def test_opened_valves_are_excluded(sample_network):
    search = SoloSearch(sample_network)

    full = search.maximize("AA", 30)
    without_dd = search.maximize("AA", 30, opened={"DD"})
    assert without_dd < full

    everything = search.maximize("AA", 30, opened=set(sample_network.productive_valves))
    assert everything == 0


def test_opened_accepts_mask_and_names_equally(sample_network):
    search = SoloSearch(sample_network)
    mask = search.valves.mask({"BB", "JJ"})

    assert search.maximize("AA", 30, opened=mask) == search.maximize("AA", 30, opened=["JJ", "BB"])


def test_opened_accepts_single_valve_id(sample_network):
    search = SoloSearch(sample_network)

    assert search.valves.mask("DD") == search.valves.mask({"DD"})
    assert search.maximize("AA", 30, opened="DD") == search.maximize("AA", 30, opened={"DD"})
    with pytest.raises(UnknownLocation):
        search.maximize("AA", 30, opened="QQ")


def test_opened_rejects_zero_flow_and_unknown_names(sample_network):
    search = SoloSearch(sample_network)

    with pytest.raises(ValueError):
        search.maximize("AA", 30, opened={"FF"})
    with pytest.raises(UnknownLocation):
        search.maximize("AA", 30, opened={"QQ"})


def test_memoized_and_plain_search_agree(sample_network, triangle_network):
    paths = ShortestPathIndex.build(sample_network)
    cached = SoloSearch(sample_network, paths, memoize=True)
    plain = SoloSearch(sample_network, paths, memoize=False)
    for minutes in (5, 12, 20, 30):
        assert cached.maximize("AA", minutes) == plain.maximize("AA", minutes)

    cached_duo = DuoSearch(sample_network, paths, memoize=True)
    plain_duo = DuoSearch(sample_network, paths, memoize=False)
    assert cached_duo.maximize("AA", 12, "AA", 12) == plain_duo.maximize("AA", 12, "AA", 12)

    assert solve_duo(triangle_network, "A", 6, 6, memoize=False) == 54


def test_search_is_deterministic_and_pure(sample_network):
    opened = {"BB"}
    first = SoloSearch(sample_network).maximize("AA", 30, opened=opened)
    second = SoloSearch(sample_network).maximize("AA", 30, opened=opened)

    assert first == second
    assert opened == {"BB"}
    assert solve_duo(sample_network, "AA", 26, 26) == solve_duo(sample_network, "AA", 26, 26)


def test_searches_leave_shared_index_unchanged(sample_network):
    paths = ShortestPathIndex.build(sample_network)
    before = {source: dict(paths.distances_from(source)) for source in paths}

    solo = SoloSearch(sample_network, paths)
    solo.maximize("AA", 30)
    DuoSearch(sample_network, paths, solo=solo).maximize("AA", 26, "AA", 26)
    DuoSearch(sample_network, paths, memoize=False).maximize("AA", 10, "JJ", 10)

    assert {source: dict(paths.distances_from(source)) for source in paths} == before
    assert solo.maximize_mask("AA", 30, 0) == 1651


# ---------------------------------------------------------------------------
# DuoSearch properties
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("minutes", [0, 1, 5, 10, 18, 26])
def test_two_agents_never_worse_than_one(sample_network, minutes):
    assert solve_duo(sample_network, "AA", minutes, minutes) >= solve_solo(sample_network, "AA", minutes)


def test_idle_partner_reduces_to_solo(sample_network):
    # With no time for agent 1, everything comes from agent 2's solo search.
    assert solve_duo(sample_network, "AA", 0, 30) == 1651
    # With no time for agent 2, the best agent 1 prefix is the full solo run.
    assert solve_duo(sample_network, "AA", 30, 0) == 1651


def test_agents_may_start_apart(sample_network):
    duo = DuoSearch(sample_network)
    apart = duo.maximize("JJ", 20, "HH", 20)

    assert apart >= SoloSearch(sample_network).maximize("HH", 20)


# ---------------------------------------------------------------------------
# Validation and the "all opened" termination check
# ---------------------------------------------------------------------------

def test_unknown_start_raises(sample_network):
    with pytest.raises(UnknownLocation):
        solve_solo(sample_network, "QQ", 30)
    with pytest.raises(UnknownLocation):
        solve_duo(sample_network, "QQ", 26, 26)
    with pytest.raises(UnknownLocation):
        DuoSearch(sample_network).maximize("AA", 26, "QQ", 26)


def test_negative_budget_rejected(sample_network):
    with pytest.raises(ValueError):
        solve_solo(sample_network, "AA", -1)
    with pytest.raises(ValueError):
        solve_duo(sample_network, "AA", 26, -1)


def test_all_open_counts_every_location(sample_network, triangle_network):
    sample_index = ValveIndex(sample_network, ShortestPathIndex.build(sample_network))
    full_sample = sample_index.mask(sample_network.productive_valves)
    # Six productive valves out of ten locations: never "all open".
    assert sample_index.all_open(full_sample) is False

    triangle_index = ValveIndex(triangle_network, ShortestPathIndex.build(triangle_network))
    assert triangle_index.all_open(0b111) is True
    assert triangle_index.names(0b101) == frozenset({"A", "C"})


def test_verbose_facade_logs_result(sample_network, capsys, monkeypatch):
    monkeypatch.setenv("FLOWSEARCH_NO_COLOR", "1")

    solve_solo(sample_network, "AA", 30, verbose=True)

    out = capsys.readouterr().out
    assert "[•] [Index] 10 valves, 90 reachable pairs" in out
    assert "[✓] [Solo] 30 minutes from AA: 1651" in out
