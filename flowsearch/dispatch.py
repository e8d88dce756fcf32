"""
Parallel dispatch of top-level search branches.

Sibling branches explore mutually exclusive futures and only share the
read-only network and index, so each top-level subtree runs in its own
executor worker and the results are joined with ``asyncio.gather``. Workers
receive the network, index and branch by value (pickled for process pools).
"""

import asyncio
from concurrent.futures import Executor, ProcessPoolExecutor
from functools import partial
from typing import Callable, Dict, List, Optional, Tuple

from .config import Config
from .logging_utils import log_deterministic, log_success
from .network import ShortestPathIndex, ValveNetwork
from .search import Branch, DuoSearch, SoloSearch, check_budget


class SearchDispatchError(Exception):
    """Raised when one or more dispatched branches fail.

    Contains a mapping of branch label to the underlying exception.
    """

    def __init__(self, *, errors: Dict[str, BaseException]) -> None:
        self.errors = errors
        message_lines = ["One or more search branches failed:"]
        for label, exc in errors.items():
            message_lines.append(f"  - {label}: {exc!r}")
        super().__init__("\n".join(message_lines))


# =============================
# Worker functions (run in executor)
# =============================

def _solo_subtree(
    network: ValveNetwork, paths: ShortestPathIndex, branch: Branch, memoize: bool
) -> int:
    search = SoloSearch(network, paths, memoize=memoize)
    return branch.gain + search.maximize(branch.target, branch.time_remaining, branch.opened)


def _duo_subtree(
    network: ValveNetwork,
    paths: ShortestPathIndex,
    branch: Branch,
    loc2: str,
    time2: int,
    memoize: bool,
) -> int:
    search = DuoSearch(network, paths, memoize=memoize)
    return branch.gain + search.maximize(
        branch.target, branch.time_remaining, loc2, time2, branch.opened
    )


def _duo_stop(
    network: ValveNetwork,
    paths: ShortestPathIndex,
    loc2: str,
    time2: int,
    opened: int,
    memoize: bool,
) -> int:
    return SoloSearch(network, paths, memoize=memoize).maximize(loc2, time2, opened)


# =============================
# Gathering
# =============================

async def _gather_branches(
    jobs: List[Tuple[str, Callable[[], int]]],
    executor: Optional[Executor],
) -> List[int]:
    loop = asyncio.get_running_loop()
    owned = executor is None
    if owned:
        executor = ProcessPoolExecutor(max_workers=Config.WORKERS)

    try:
        # return_exceptions=True so every failing branch is reported, not just the first.
        results = await asyncio.gather(
            *[loop.run_in_executor(executor, job) for _, job in jobs],
            return_exceptions=True,
        )
    except BaseException:
        # Cancelled or timed out: queued branches are dropped, running ones
        # finish in the background.
        if owned:
            executor.shutdown(wait=False, cancel_futures=True)
        raise
    if owned:
        await loop.run_in_executor(None, executor.shutdown)

    values: List[int] = []
    failures: Dict[str, BaseException] = {}
    for (label, _), result in zip(jobs, results):
        if isinstance(result, BaseException):
            failures[label] = result
        else:
            values.append(result)

    if failures:
        raise SearchDispatchError(errors=failures)

    return values


async def solve_solo_async(
    network: ValveNetwork,
    start: str,
    time_budget: int,
    *,
    executor: Optional[Executor] = None,
    memoize: Optional[bool] = None,
    verbose: bool = False,
) -> int:
    """Parallel ``solve_solo``: one executor job per first valve opened."""
    network.require(start)
    check_budget(time_budget)
    memoize = Config.MEMOIZE if memoize is None else memoize

    paths = ShortestPathIndex.build(network)
    root = SoloSearch(network, paths, memoize=False)
    jobs = [
        (branch.target, partial(_solo_subtree, network, paths, branch, memoize))
        for branch in root.branches(start, time_budget, 0)
    ]
    if verbose:
        log_deterministic(f"[Dispatch] Solo: {len(jobs)} top-level branches")
    if not jobs:
        return 0

    result = max(await _gather_branches(jobs, executor))
    if verbose:
        log_success(f"[Solo] {time_budget} minutes from {start}: {result}")
    return result


async def solve_duo_async(
    network: ValveNetwork,
    start: str,
    time_budget_1: int,
    time_budget_2: int,
    *,
    executor: Optional[Executor] = None,
    memoize: Optional[bool] = None,
    verbose: bool = False,
) -> int:
    """Parallel ``solve_duo``: one job for the stop branch, one per first valve of agent 1."""
    network.require(start)
    check_budget(time_budget_1)
    check_budget(time_budget_2)
    memoize = Config.MEMOIZE if memoize is None else memoize

    if time_budget_1 == 0 and time_budget_2 == 0:
        return 0

    paths = ShortestPathIndex.build(network)
    root = SoloSearch(network, paths, memoize=False)
    jobs: List[Tuple[str, Callable[[], int]]] = [
        ("stop", partial(_duo_stop, network, paths, start, time_budget_2, 0, memoize))
    ]
    jobs.extend(
        (
            branch.target,
            partial(_duo_subtree, network, paths, branch, start, time_budget_2, memoize),
        )
        for branch in root.branches(start, time_budget_1, 0)
    )
    if verbose:
        log_deterministic(f"[Dispatch] Duo: {len(jobs)} top-level branches")

    result = max(await _gather_branches(jobs, executor))
    if verbose:
        log_success(
            f"[Duo] {time_budget_1}+{time_budget_2} minutes from {start}: {result}"
        )
    return result
