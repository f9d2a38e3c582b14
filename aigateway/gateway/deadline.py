"""Timeout-Bounded Invoker.

Bounds one adapter call by the gateway deadline. ``asyncio.wait_for``
cancels the adapter coroutine when the deadline expires, so the in-flight
``httpx`` request is aborted and its connection closed instead of being
left running in the background.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable

from aigateway.gateway.errors import ProviderTimeoutError


async def with_deadline(call: Awaitable[str], seconds: float, provider_name: str) -> str:
    """Await *call* for at most *seconds*; raise ProviderTimeoutError otherwise."""
    try:
        return await asyncio.wait_for(call, timeout=seconds)
    except asyncio.TimeoutError as e:
        raise ProviderTimeoutError(provider_name, seconds) from e
