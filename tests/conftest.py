"""Shared fixtures: the canonical ten-valve sample cave and a few small networks."""

import pytest

from flowsearch.network import ValveNetwork


SAMPLE_RECORDS = """\
Valve AA has flow rate=0; tunnels lead to valves DD, II, BB
Valve BB has flow rate=13; tunnels lead to valves CC, AA
Valve CC has flow rate=2; tunnels lead to valves DD, BB
Valve DD has flow rate=20; tunnels lead to valves CC, AA, EE
Valve EE has flow rate=3; tunnels lead to valves FF, DD
Valve FF has flow rate=0; tunnels lead to valves EE, GG
Valve GG has flow rate=0; tunnels lead to valves FF, HH
Valve HH has flow rate=22; tunnel leads to valve GG
Valve II has flow rate=0; tunnels lead to valves AA, JJ
Valve JJ has flow rate=21; tunnel leads to valve II
"""


@pytest.fixture
def sample_records() -> str:
    return SAMPLE_RECORDS


@pytest.fixture(scope="module")
def sample_network() -> ValveNetwork:
    return ValveNetwork.from_mapping(
        {
            "AA": (0, ["DD", "II", "BB"]),
            "BB": (13, ["CC", "AA"]),
            "CC": (2, ["DD", "BB"]),
            "DD": (20, ["CC", "AA", "EE"]),
            "EE": (3, ["FF", "DD"]),
            "FF": (0, ["EE", "GG"]),
            "GG": (0, ["FF", "HH"]),
            "HH": (22, ["GG"]),
            "II": (0, ["AA", "JJ"]),
            "JJ": (21, ["II"]),
        }
    )


@pytest.fixture
def triangle_network() -> ValveNetwork:
    # Every valve has flow, so the "all opened" termination can fire.
    return ValveNetwork.from_mapping(
        {
            "A": (5, ["B", "C"]),
            "B": (10, ["A", "C"]),
            "C": (1, ["A", "B"]),
        }
    )


@pytest.fixture
def split_network() -> ValveNetwork:
    # Z is isolated from X and Y.
    return ValveNetwork.from_mapping(
        {
            "X": (5, ["Y"]),
            "Y": (0, ["X"]),
            "Z": (7, []),
        }
    )
