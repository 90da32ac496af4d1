# -*- coding: utf-8 -*-
"""
Bounded-concurrency scheduling of async workers.

``run_bounded`` keeps at most ``limit`` workers in flight and writes every
result into the slot of its input item, so output order is input order no
matter which worker finishes first.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)


async def run_bounded(
    items: Sequence[Any],
    limit: int,
    worker: Callable[[Any], Awaitable[Any]],
    progress_callback: Optional[Callable[[int, int], None]] = None
) -> List[Any]:
    """
    Run ``worker`` over ``items`` with at most ``limit`` concurrent calls.

    The first worker failure stops dispatch of new items. Workers already
    running are left to finish, their results are discarded, and the first
    failure is raised.

    Args:
        items: Work items, dispatched in order
        limit: Concurrency ceiling (>= 1)
        worker: Coroutine function called with one item
        progress_callback: Optional callback(completed, total)

    Returns:
        Results in the same order as ``items``
    """
    if limit < 1:
        raise ValueError(f"limit must be at least 1, got {limit}")

    items = list(items)
    total = len(items)
    results: List[Any] = [None] * total
    in_flight: Dict[asyncio.Future, int] = {}
    next_index = 0
    completed = 0
    failure: Optional[BaseException] = None

    while next_index < total or in_flight:
        while failure is None and next_index < total and len(in_flight) < limit:
            task = asyncio.ensure_future(worker(items[next_index]))
            in_flight[task] = next_index
            next_index += 1

        if not in_flight:
            break

        done, _ = await asyncio.wait(in_flight.keys(), return_when=asyncio.FIRST_COMPLETED)
        for task in done:
            index = in_flight.pop(task)
            error = task.exception()
            if error is not None:
                if failure is None:
                    failure = error
                    logger.error(
                        f"Worker for item {index} failed, stopping dispatch "
                        f"({len(in_flight)} still running, {total - next_index} not started)"
                    )
                else:
                    logger.debug(f"Discarding later failure of item {index}: {error}")
                continue
            if failure is not None:
                continue

            results[index] = task.result()
            completed += 1
            if progress_callback:
                progress_callback(completed, total)

    if failure is not None:
        raise failure
    return results
