"""Valve network tier: graph, serializable schemas, and shortest paths."""

from .graph import UnknownLocation, Valve, ValveNetwork
from .paths import ShortestPathIndex
from .schemas import SolveReport, ValveNetworkState, ValveState

__all__ = [
    "UnknownLocation",
    "Valve",
    "ValveNetwork",
    "ShortestPathIndex",
    "SolveReport",
    "ValveNetworkState",
    "ValveState",
]
