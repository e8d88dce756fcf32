"""Volcano runner: how much pressure can be released before the eruption?

Solves a valve network twice: once for a single agent, once for two
cooperating agents with a shorter clock each.

    uv run python -m examples.volcano.run --scenario sample
    uv run python -m examples.volcano.run --input my_cave.txt --parallel
    uv run python -m examples.volcano.run --scenario sample --json

Defaults for start valve and budgets come from FLOWSEARCH_* environment
variables (see ``flowsearch.config``) unless the scenario or flags override
them.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
from pathlib import Path

from flowsearch import (
    MalformedInput,
    Scenario,
    ScenarioLoader,
    SearchDispatchError,
    SolveReport,
    UnknownLocation,
    parse_network_text,
    solve_duo,
    solve_duo_async,
    solve_solo,
    solve_solo_async,
)
from flowsearch.config import Config
from flowsearch.logging_utils import log_deterministic, log_error, log_info


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Maximize released pressure in a valve network")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--input", type=Path, help="Puzzle text file with one valve record per line")
    source.add_argument(
        "--scenario",
        default="sample",
        help="Scenario name under the scenarios directory (default: sample)",
    )
    parser.add_argument("--scenarios-dir", type=Path, default=None, help="Override scenarios directory")
    parser.add_argument("--start", default=None, help="Start valve (default: scenario or FLOWSEARCH_START)")
    parser.add_argument("--solo-minutes", type=int, default=None, help="Single-agent time budget")
    parser.add_argument("--duo-minutes", type=int, default=None, help="Per-agent budget for the pair")
    parser.add_argument("--parallel", action="store_true", help="Dispatch top-level branches to worker processes")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    return parser.parse_args(argv)


def load_input(args: argparse.Namespace, *, verbose: bool = True) -> Scenario:
    if args.input is not None:
        if verbose:
            log_deterministic(f"[Parser] Reading {args.input}")
        return Scenario(name=args.input.stem, network=parse_network_text(args.input.read_text()))
    loader = ScenarioLoader(args.scenarios_dir)
    if verbose:
        log_deterministic(f"[Scenario] Loading '{args.scenario}' from {loader.scenarios_dir}")
    return loader.load(args.scenario)


async def run_scenario(
    scenario: Scenario,
    *,
    start: str | None = None,
    solo_minutes: int | None = None,
    duo_minutes: int | None = None,
    parallel: bool = False,
    verbose: bool = True,
) -> SolveReport:
    start = start or scenario.start
    solo_minutes = scenario.solo_minutes if solo_minutes is None else solo_minutes
    duo_minutes = scenario.duo_minutes if duo_minutes is None else duo_minutes

    network = scenario.network.to_network()
    if verbose:
        log_info(
            f"[{scenario.name}] {len(network)} valves, "
            f"{len(network.productive_valves)} with flow, start={start}"
        )

    t0 = time.time()
    if parallel:
        solo = await solve_solo_async(network, start, solo_minutes, verbose=verbose)
        duo = await solve_duo_async(network, start, duo_minutes, duo_minutes, verbose=verbose)
    else:
        solo = solve_solo(network, start, solo_minutes, memoize=Config.MEMOIZE, verbose=verbose)
        duo = solve_duo(network, start, duo_minutes, duo_minutes, memoize=Config.MEMOIZE, verbose=verbose)
    elapsed = time.time() - t0

    return SolveReport(
        start=start,
        valve_count=len(network),
        productive_valve_count=len(network.productive_valves),
        solo_minutes=solo_minutes,
        solo_pressure=solo,
        duo_minutes=duo_minutes,
        duo_pressure=duo,
        elapsed_seconds=elapsed,
    )


async def main(args: argparse.Namespace) -> int:
    try:
        Config.validate()
        scenario = load_input(args, verbose=not args.json)
        report = await run_scenario(
            scenario,
            start=args.start,
            solo_minutes=args.solo_minutes,
            duo_minutes=args.duo_minutes,
            parallel=args.parallel,
            verbose=not args.json,
        )
    except (FileNotFoundError, MalformedInput, UnknownLocation, SearchDispatchError, ValueError) as exc:
        log_error(str(exc))
        return 1

    if args.json:
        print(report.model_dump_json(indent=2))
    else:
        print(f"Max pressure solo: {report.solo_pressure}")
        print(f"Max pressure with elephant: {report.duo_pressure}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main(parse_args())))
