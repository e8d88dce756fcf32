"""All-pairs shortest tunnel distances for a valve network."""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional

from .graph import UnknownLocation, ValveNetwork


class ShortestPathIndex:
    """Minimum number of tunnels between every pair of connected valves.

    Distances are 1-indexed: a direct neighbor is at distance 1. A valve never
    has an entry for itself, and unreachable valves have no entry at all, so
    callers must treat a missing distance as infeasible rather than zero.
    """

    def __init__(self, distances: Mapping[str, Mapping[str, int]]):
        self._distances: Dict[str, Dict[str, int]] = {
            source: dict(row) for source, row in distances.items()
        }

    @classmethod
    def build(cls, network: ValveNetwork) -> "ShortestPathIndex":
        """Run a layered BFS from every valve. O(V·(V+E))."""
        return cls({source: _layered_bfs(network, source) for source in network})

    def distance(self, source: str, destination: str) -> Optional[int]:
        row = self._distances.get(source)
        if row is None:
            raise UnknownLocation(source)
        return row.get(destination)

    def distances_from(self, source: str) -> Mapping[str, int]:
        row = self._distances.get(source)
        if row is None:
            raise UnknownLocation(source)
        return MappingProxyType(row)

    def __contains__(self, source: object) -> bool:
        return source in self._distances

    def __iter__(self) -> Iterator[str]:
        return iter(self._distances)

    def __len__(self) -> int:
        return len(self._distances)

    @property
    def pair_count(self) -> int:
        """Number of reachable (source, destination) pairs."""
        return sum(len(row) for row in self._distances.values())


def _layered_bfs(network: ValveNetwork, source: str) -> Dict[str, int]:
    """Distances from ``source`` to every other reachable valve.

    The frontier is expanded one layer at a time; a valve is marked visited
    when it is first placed on a frontier so it keeps the smallest layer.
    """

    distances: Dict[str, int] = {}
    # The source is visited up front so cycles never record a distance to itself.
    visited = {source}
    frontier: List[str] = []
    for neighbor in sorted(network.neighbors(source)):
        if neighbor not in network:
            raise UnknownLocation(neighbor, referenced_by=source)
        if neighbor not in visited:
            visited.add(neighbor)
            frontier.append(neighbor)

    layer = 1
    while frontier:
        next_frontier: List[str] = []
        for valve_id in frontier:
            distances[valve_id] = layer
            for neighbor in sorted(network.neighbors(valve_id)):
                if neighbor not in network:
                    raise UnknownLocation(neighbor, referenced_by=valve_id)
                if neighbor in visited:
                    continue
                visited.add(neighbor)
                next_frontier.append(neighbor)
        frontier = next_frontier
        layer += 1
    return distances
