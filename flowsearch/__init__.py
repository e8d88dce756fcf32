"""
Flowsearch - time-boxed pressure maximization over valve networks.

Given a cave of valves connected by unit-cost tunnels, find the most pressure
one agent (or two cooperating agents) can release before time runs out.

The search core takes a realized ValveNetwork and returns an integer.
Parsing, scenario files, parallel dispatch and console output live around it.
"""

__version__ = "0.1.0"

# Network tier
from .network import (
    ShortestPathIndex,
    SolveReport,
    UnknownLocation,
    Valve,
    ValveNetwork,
    ValveNetworkState,
    ValveState,
)

# Search core
from .search import (
    DuoSearch,
    SoloSearch,
    ValveIndex,
    solve_duo,
    solve_solo,
)

# Parallel dispatch
from .dispatch import SearchDispatchError, solve_duo_async, solve_solo_async

# Input collaborators
from .parser import MalformedInput, parse_network, parse_network_text
from .scenario import Scenario, ScenarioLoader, load_scenario

__all__ = [
    # Network
    "ShortestPathIndex",
    "SolveReport",
    "UnknownLocation",
    "Valve",
    "ValveNetwork",
    "ValveNetworkState",
    "ValveState",
    # Search
    "DuoSearch",
    "SoloSearch",
    "ValveIndex",
    "solve_duo",
    "solve_solo",
    # Dispatch
    "SearchDispatchError",
    "solve_duo_async",
    "solve_solo_async",
    # Input
    "MalformedInput",
    "parse_network",
    "parse_network_text",
    "Scenario",
    "ScenarioLoader",
    "load_scenario",
]
