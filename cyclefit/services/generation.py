"""Run plan generation off the event loop with a wall-clock budget.

The engines are synchronous and bounded; the timeout is a safety net so a
slow request fails with 504 instead of holding the connection.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, TypeVar

from fastapi import HTTPException

logger = logging.getLogger("cyclefit.services.generation")

T = TypeVar("T")


async def run_with_timeout(func: Callable[..., T], *args: object, timeout_seconds: float, **kwargs: object) -> T:
    """Run ``func`` in a worker thread, raising HTTP 504 if it exceeds the budget."""
    try:
        return await asyncio.wait_for(
            asyncio.to_thread(func, *args, **kwargs), timeout=timeout_seconds
        )
    except asyncio.TimeoutError:
        logger.error(
            "%s exceeded %.1fs generation budget", getattr(func, "__qualname__", func), timeout_seconds
        )
        raise HTTPException(status_code=504, detail="Plan generation timed out") from None
