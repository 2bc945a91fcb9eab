"""
Runs the optimizer off the event loop with a time budget
"""

import asyncio
import threading
import logging
from typing import Any, Callable

from fastapi.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)


async def run_optimization_in_thread(
    optimize: Callable[..., Any],
    timeout: float,
    **kwargs
) -> Any:
    """
    Run a blocking optimization call in the threadpool

    The call receives a `should_cancel` callable. When `timeout` seconds
    pass, the cancellation flag is set and the optimizer stops at its
    next generation boundary, returning the best result so far.

    Args:
        optimize: Optimization function accepting `should_cancel`
        timeout: Time budget in seconds
        **kwargs: Forwarded to `optimize`

    Returns:
        Whatever `optimize` returns
    """
    cancel_event = threading.Event()
    future = asyncio.ensure_future(
        run_in_threadpool(optimize, should_cancel=cancel_event.is_set, **kwargs)
    )

    try:
        return await asyncio.wait_for(asyncio.shield(future), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"Optimization exceeded {timeout:.1f}s; stopping at the next generation")
        cancel_event.set()
        return await future
