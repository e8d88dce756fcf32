"""Parse puzzle-style valve records into a ``ValveNetworkState``.

Each non-blank line describes one valve::

    Valve AA has flow rate=0; tunnels lead to valves DD, II, BB
    Valve HH has flow rate=22; tunnel leads to valve GG
"""

from __future__ import annotations

import re
from typing import Dict, Iterable

from .network import ValveNetworkState, ValveState

RECORD_PATTERN = re.compile(
    r"^Valve (?P<name>\S+) has flow rate=(?P<rate>\d+); "
    r"tunnels? leads? to valves? (?P<tunnels>\S+(?:, \S+)*)$"
)


class MalformedInput(ValueError):
    """Raised when a line does not match the valve record grammar."""

    def __init__(self, line_number: int, line: str, reason: str = "does not match the valve record grammar") -> None:
        self.line_number = line_number
        self.line = line
        super().__init__(f"Line {line_number} {reason}: {line!r}")


def parse_network(lines: Iterable[str]) -> ValveNetworkState:
    """Parse an iterable of record lines. Blank lines are skipped."""
    valves: Dict[str, ValveState] = {}
    for line_number, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line:
            continue
        match = RECORD_PATTERN.match(line)
        if match is None:
            raise MalformedInput(line_number, line)
        name = match.group("name")
        if name in valves:
            raise MalformedInput(line_number, line, reason=f"redefines valve '{name}'")
        valves[name] = ValveState(
            flow_rate=int(match.group("rate")),
            tunnels=match.group("tunnels").split(", "),
        )
    return ValveNetworkState(valves=valves)


def parse_network_text(text: str) -> ValveNetworkState:
    return parse_network(text.splitlines())
