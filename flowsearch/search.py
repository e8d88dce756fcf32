"""
Time-boxed pressure maximization over a valve network.

Implements:
  - SoloSearch: one agent, one clock
  - DuoSearch: two agents on independent clocks sharing which valves are open
  - solve_solo / solve_duo: facade that builds the index and runs a search

Open valves are tracked as an int bitmask over the productive valves
(flow rate > 0), enumerated densely by ``ValveIndex``. Each branch that opens
a valve passes ``opened | bit`` down, so sibling branches never see each
other's choices and copying the set costs nothing.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional, Tuple, Union

from .logging_utils import log_deterministic, log_success
from .network import ShortestPathIndex, UnknownLocation, ValveNetwork

OpenedValves = Union[int, str, Iterable[str]]


class Move(NamedTuple):
    """One feasible step: walk to ``target`` and open it."""

    bit: int
    target: str
    distance: int
    flow_rate: int


class Branch(NamedTuple):
    """A top-level search branch after one move has been taken."""

    target: str
    time_remaining: int
    gain: int
    opened: int


class ValveIndex:
    """Dense enumeration of productive valves plus per-location move tables.

    ``bits[valve_id]`` is the single-bit mask for a productive valve. For every
    valve in the network, ``moves(valve_id)`` lists the productive valves
    reachable from it, with their distance, in a fixed order.
    """

    def __init__(self, network: ValveNetwork, paths: ShortestPathIndex):
        self.order: List[str] = network.productive_valves
        self.bits: Dict[str, int] = {valve_id: 1 << i for i, valve_id in enumerate(self.order)}
        # Every location counts, including zero-flow ones that can never be opened.
        self.location_count = len(network)
        self._moves: Dict[str, Tuple[Move, ...]] = {}
        for source in network:
            row = paths.distances_from(source)
            self._moves[source] = tuple(
                Move(self.bits[target], target, row[target], network.flow_rate(target))
                for target in self.order
                if target in row
            )

    def moves(self, valve_id: str) -> Tuple[Move, ...]:
        moves = self._moves.get(valve_id)
        if moves is None:
            raise UnknownLocation(valve_id)
        return moves

    def mask(self, opened: OpenedValves) -> int:
        """Normalize an int mask, a valve id or an iterable of valve ids into a mask."""
        if isinstance(opened, str):
            opened = (opened,)
        if isinstance(opened, int):
            if opened < 0 or opened >> len(self.order):
                raise ValueError(f"Mask {opened:#x} does not fit {len(self.order)} productive valves")
            return opened
        mask = 0
        for valve_id in opened:
            if valve_id not in self._moves:
                raise UnknownLocation(valve_id)
            bit = self.bits.get(valve_id)
            if bit is None:
                raise ValueError(f"Valve '{valve_id}' has no flow and cannot be opened")
            mask |= bit
        return mask

    def names(self, mask: int) -> frozenset[str]:
        return frozenset(valve_id for valve_id, bit in self.bits.items() if mask & bit)

    def all_open(self, mask: int) -> bool:
        # Compares against every location, so this only fires when no valve
        # in the network has zero flow.
        return mask.bit_count() == self.location_count


class SoloSearch:
    """Recursive maximizer for a single agent.

    ``maximize(current, time_remaining, opened)`` returns the largest total
    pressure obtainable by walking from ``current`` and opening valves not in
    ``opened`` before the clock runs out. Walking one tunnel costs a minute
    and opening a valve costs a minute; an opened valve releases its flow
    rate for every minute that remains afterwards.

    The result is a pure function of its arguments, so the search memoizes
    on ``(current, time_remaining, opened)`` unless ``memoize=False``.
    """

    def __init__(
        self,
        network: ValveNetwork,
        paths: Optional[ShortestPathIndex] = None,
        *,
        memoize: bool = True,
    ):
        self.network = network
        self.paths = paths if paths is not None else ShortestPathIndex.build(network)
        self.valves = ValveIndex(network, self.paths)
        self.memoize = memoize
        self._memo: Dict[Tuple[str, int, int], int] = {}

    def maximize(self, current: str, time_remaining: int, opened: OpenedValves = 0) -> int:
        self.network.require(current)
        check_budget(time_remaining)
        return self.maximize_mask(current, time_remaining, self.valves.mask(opened))

    def branches(self, current: str, time_remaining: int, opened: int) -> Iterator[Branch]:
        """Yield every feasible next move from ``current`` with its immediate gain."""
        for move in self.valves.moves(current):
            if opened & move.bit or move.distance + 1 > time_remaining:
                continue
            remaining = time_remaining - move.distance - 1
            yield Branch(move.target, remaining, remaining * move.flow_rate, opened | move.bit)

    def maximize_mask(self, current: str, time_remaining: int, opened: int) -> int:
        """Unchecked ``maximize``: ``current`` must exist and ``opened`` must be a valid mask."""
        if time_remaining == 0:
            return 0
        if self.valves.all_open(opened):
            return 0

        key = (current, time_remaining, opened)
        if self.memoize:
            cached = self._memo.get(key)
            if cached is not None:
                return cached

        best = 0
        for branch in self.branches(current, time_remaining, opened):
            value = branch.gain + self.maximize_mask(branch.target, branch.time_remaining, branch.opened)
            if value > best:
                best = value

        if self.memoize:
            self._memo[key] = best
        return best


class DuoSearch:
    """Recursive maximizer for two cooperating agents.

    At every step agent 1 either keeps going (opens another valve) or stops.
    Stopping hands the rest of the network to agent 2, which then runs a full
    solo search from its own position and clock against the valves agent 1
    has opened so far. Evaluating the stop branch at every depth covers every
    split of the productive valves between the two agents without
    interleaving their timelines.
    """

    def __init__(
        self,
        network: ValveNetwork,
        paths: Optional[ShortestPathIndex] = None,
        *,
        memoize: bool = True,
        solo: Optional[SoloSearch] = None,
    ):
        self.solo = solo if solo is not None else SoloSearch(network, paths, memoize=memoize)
        self.network = self.solo.network
        self.paths = self.solo.paths
        self.valves = self.solo.valves
        self.memoize = memoize
        self._memo: Dict[Tuple[str, int, str, int, int], int] = {}

    def maximize(
        self,
        loc1: str,
        time1: int,
        loc2: str,
        time2: int,
        opened: OpenedValves = 0,
    ) -> int:
        self.network.require(loc1)
        self.network.require(loc2)
        check_budget(time1)
        check_budget(time2)
        return self._maximize(loc1, time1, loc2, time2, self.valves.mask(opened))

    def stop_value(self, loc2: str, time2: int, opened: int) -> int:
        """Value of agent 1 stopping here: agent 2 finishes alone."""
        return self.solo.maximize_mask(loc2, time2, opened)

    def _maximize(self, loc1: str, time1: int, loc2: str, time2: int, opened: int) -> int:
        if time1 == 0 and time2 == 0:
            return 0
        if self.valves.all_open(opened):
            return 0

        key = (loc1, time1, loc2, time2, opened)
        if self.memoize:
            cached = self._memo.get(key)
            if cached is not None:
                return cached

        best = self.stop_value(loc2, time2, opened)
        for branch in self.solo.branches(loc1, time1, opened):
            value = branch.gain + self._maximize(
                branch.target, branch.time_remaining, loc2, time2, branch.opened
            )
            if value > best:
                best = value

        if self.memoize:
            self._memo[key] = best
        return best


def check_budget(minutes: int) -> None:
    if minutes < 0:
        raise ValueError(f"Time budget must be non-negative (got {minutes})")


def solve_solo(
    network: ValveNetwork,
    start: str,
    time_budget: int,
    *,
    memoize: bool = True,
    verbose: bool = False,
) -> int:
    """Maximum pressure one agent can release from ``start`` in ``time_budget`` minutes."""
    network.require(start)
    check_budget(time_budget)

    paths = ShortestPathIndex.build(network)
    if verbose:
        log_deterministic(
            f"[Index] {len(paths)} valves, {paths.pair_count} reachable pairs"
        )
    result = SoloSearch(network, paths, memoize=memoize).maximize(start, time_budget)
    if verbose:
        log_success(f"[Solo] {time_budget} minutes from {start}: {result}")
    return result


def solve_duo(
    network: ValveNetwork,
    start: str,
    time_budget_1: int,
    time_budget_2: int,
    *,
    memoize: bool = True,
    verbose: bool = False,
) -> int:
    """Maximum pressure two agents starting at ``start`` can release together."""
    network.require(start)
    check_budget(time_budget_1)
    check_budget(time_budget_2)

    paths = ShortestPathIndex.build(network)
    if verbose:
        log_deterministic(
            f"[Index] {len(paths)} valves, {paths.pair_count} reachable pairs"
        )
    result = DuoSearch(network, paths, memoize=memoize).maximize(
        start, time_budget_1, start, time_budget_2
    )
    if verbose:
        log_success(
            f"[Duo] {time_budget_1}+{time_budget_2} minutes from {start}: {result}"
        )
    return result
