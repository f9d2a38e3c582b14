"""
verify.py — ping every configured AI provider directly.

Sends a tiny prompt to each provider in PROVIDER_ORDER, bypassing the
fallback chain, and reports which credentials work and how fast.

Usage:
    aigateway-verify
    python -m aigateway.verify
"""

from __future__ import annotations

import asyncio
import logging
import sys
import time

from aigateway.core.config import Settings, settings, validate_settings
from aigateway.core.logging import setup_logging
from aigateway.gateway.deadline import with_deadline
from aigateway.gateway.errors import GatewayError
from aigateway.gateway.registry import build_registry
from aigateway.gateway.types import GenerationRequest

logger = logging.getLogger("aigateway.verify")

PING_REQUEST = GenerationRequest(prompt="Hi", max_tokens=10, temperature=0.0)


async def verify_providers(config: Settings) -> dict[str, bool]:
    registry = build_registry(config)
    results: dict[str, bool] = {}

    for provider in registry:
        if not provider.is_configured:
            logger.warning("%s: %s_API_KEY is missing", provider.name, provider.name.upper())
            continue

        start = time.monotonic()
        try:
            await with_deadline(provider.invoke(PING_REQUEST), config.provider_timeout_seconds, provider.name)
        except GatewayError as e:
            logger.error("%s: FAILED (%s)", provider.name, e)
            results[provider.name] = False
            continue

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.info("%s: OK (%dms)", provider.name, elapsed_ms)
        results[provider.name] = True

    return results


def main() -> int:
    setup_logging()
    validate_settings(settings)
    results = asyncio.run(verify_providers(settings))
    if not results:
        logger.error("No providers configured")
        return 1
    return 0 if any(results.values()) else 1


if __name__ == "__main__":
    sys.exit(main())
