"""Retry helpers for transport-level failures."""

from __future__ import annotations

import asyncio
import functools
import logging
import random
from collections.abc import Awaitable, Callable

import httpx

logger = logging.getLogger(__name__)

RETRY_EXCEPTIONS = (httpx.TransportError, OSError, asyncio.TimeoutError)


def retry_async(func: Callable[..., Awaitable], *, attempts: int = 3, base_delay: float = 1.0):
    """Retry ``func`` on connection-level errors with exponential backoff.

    HTTP error statuses are returned to the caller untouched; only failures to
    get a response at all are retried.
    """

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        delay = base_delay
        for attempt in range(1, attempts + 1):
            try:
                return await func(*args, **kwargs)
            except RETRY_EXCEPTIONS as exc:
                if attempt == attempts:
                    raise
                logger.info("Attempt %s/%s failed (%s); retrying", attempt, attempts, exc)
                await asyncio.sleep(delay + random.random() * delay)
                delay *= 2
    return wrapper
