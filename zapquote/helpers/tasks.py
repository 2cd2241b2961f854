"""Concurrent remote reads."""

import asyncio
from collections.abc import Coroutine
from typing import Any


async def run_concurrently(*coros: Coroutine[Any, Any, Any]) -> list[Any]:
    """Run coroutines as sibling tasks and return their results in order.

    The first failure cancels the remaining tasks and is re-raised as is,
    not wrapped in an ExceptionGroup.
    """
    try:
        async with asyncio.TaskGroup() as group:
            tasks = [group.create_task(coro) for coro in coros]
    except ExceptionGroup as errors:
        raise errors.exceptions[0]
    return [task.result() for task in tasks]


__all__ = ["run_concurrently"]
