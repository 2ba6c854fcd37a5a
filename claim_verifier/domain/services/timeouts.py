"""Timeout helpers for collaborator calls."""

import asyncio
from typing import Awaitable, Optional, TypeVar

T = TypeVar("T")


class VerificationTimeoutError(TimeoutError):
    """Raised when a batch deadline expires before a claim finished."""


async def call_with_timeout(awaitable: Awaitable[T], timeout: Optional[float]) -> T:
    """Await a collaborator call, bounded by ``timeout`` seconds when set."""
    if timeout is None:
        return await awaitable
    return await asyncio.wait_for(awaitable, timeout=timeout)
