"""Valve network graph.

A network maps valve identifiers to their flow rate and the tunnels leading
out of them. Tunnels are unit cost and the network is closed: every tunnel
must lead to a valve that exists in the network.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterator, Mapping


class UnknownLocation(KeyError):
    """Raised when a tunnel or start identifier names a valve that does not exist."""

    def __init__(self, valve_id: str, *, referenced_by: str | None = None) -> None:
        self.valve_id = valve_id
        self.referenced_by = referenced_by
        if referenced_by is None:
            message = f"Unknown valve '{valve_id}'"
        else:
            message = f"Unknown valve '{valve_id}' (tunnel from '{referenced_by}')"
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable.
        return self.args[0]


@dataclass(frozen=True)
class Valve:
    """A single location with its flow rate and outgoing tunnels."""

    name: str
    flow_rate: int = 0
    tunnels: FrozenSet[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class ValveNetwork:
    """Immutable, closed valve graph.

    Construction validates closure, so a network that exists is always safe
    to index and search.
    """

    valves: Mapping[str, Valve] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for valve_id, valve in self.valves.items():
            if valve.flow_rate < 0:
                raise ValueError(f"Valve '{valve_id}' has negative flow rate {valve.flow_rate}")
            for neighbor in valve.tunnels:
                if neighbor not in self.valves:
                    raise UnknownLocation(neighbor, referenced_by=valve_id)

    @classmethod
    def from_mapping(cls, data: Mapping[str, tuple[int, list[str] | set[str] | tuple[str, ...]]]) -> "ValveNetwork":
        """Build a network from ``{valve_id: (flow_rate, neighbors)}``."""
        valves: Dict[str, Valve] = {
            valve_id: Valve(name=valve_id, flow_rate=int(rate), tunnels=frozenset(neighbors))
            for valve_id, (rate, neighbors) in data.items()
        }
        return cls(valves=valves)

    def __len__(self) -> int:
        return len(self.valves)

    def __iter__(self) -> Iterator[str]:
        return iter(self.valves)

    def __contains__(self, valve_id: object) -> bool:
        return valve_id in self.valves

    def neighbors(self, valve_id: str) -> FrozenSet[str]:
        valve = self.valves.get(valve_id)
        if valve is None:
            raise UnknownLocation(valve_id)
        return valve.tunnels

    def flow_rate(self, valve_id: str) -> int:
        valve = self.valves.get(valve_id)
        if valve is None:
            raise UnknownLocation(valve_id)
        return valve.flow_rate

    def has_node(self, valve_id: str) -> bool:
        return valve_id in self.valves

    def require(self, valve_id: str) -> Valve:
        """Return the valve or raise ``UnknownLocation``."""
        valve = self.valves.get(valve_id)
        if valve is None:
            raise UnknownLocation(valve_id)
        return valve

    @property
    def productive_valves(self) -> list[str]:
        """Valves with a positive flow rate, in sorted order."""
        return sorted(v for v, valve in self.valves.items() if valve.flow_rate > 0)
