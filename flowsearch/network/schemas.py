"""Pydantic schemas for valve networks.

These models mirror the frozen dataclasses in ``graph.py`` but keep network
descriptions serializable and validated at the boundary (parser output,
JSON scenarios). ``ValveNetworkState.to_network`` produces the runtime graph.
"""

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field

from .graph import Valve, ValveNetwork


class ValveState(BaseModel):
    """Serializable description of a single valve."""

    flow_rate: int = Field(0, ge=0, description="Pressure released per remaining minute once open")
    tunnels: List[str] = Field(
        default_factory=list,
        description="Identifiers of valves reachable in one minute",
    )


class ValveNetworkState(BaseModel):
    """Map of valve_id → valve definition."""

    valves: Dict[str, ValveState] = Field(
        default_factory=dict,
        description="Map of valve_id → flow rate and tunnels",
    )

    def to_network(self) -> ValveNetwork:
        """Freeze into a ``ValveNetwork``; raises ``UnknownLocation`` for dangling tunnels."""
        return ValveNetwork(
            valves={
                valve_id: Valve(
                    name=valve_id,
                    flow_rate=state.flow_rate,
                    tunnels=frozenset(state.tunnels),
                )
                for valve_id, state in self.valves.items()
            }
        )

    @classmethod
    def from_network(cls, network: ValveNetwork) -> "ValveNetworkState":
        return cls(
            valves={
                valve_id: ValveState(flow_rate=valve.flow_rate, tunnels=sorted(valve.tunnels))
                for valve_id, valve in network.valves.items()
            }
        )


class SolveReport(BaseModel):
    """Result summary printed by the runner."""

    start: str
    valve_count: int
    productive_valve_count: int
    solo_minutes: int
    solo_pressure: int
    duo_minutes: int
    duo_pressure: int
    elapsed_seconds: float = Field(0.0, ge=0.0)
