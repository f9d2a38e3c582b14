"""Fallback Sequencer — tries configured providers strictly in priority order.

  1. Filter the registry to configured providers (order preserved)
  2. Nothing configured → NOT_CONFIGURED, no network calls
  3. Invoke each provider through the deadline; first non-empty text wins
  4. Exhausted → ALL_PROVIDERS_EXHAUSTED with every reason, in attempt order

Per-attempt failures never escape this module; they become AttemptRecords.
"""

from __future__ import annotations

import logging
import time

from aigateway.core.metrics import observe_attempt
from aigateway.gateway.deadline import with_deadline
from aigateway.gateway.errors import EmptyResponseError, ProviderTimeoutError, TransportError
from aigateway.gateway.registry import ProviderRegistry
from aigateway.gateway.types import (
    AttemptOutcome,
    AttemptRecord,
    ErrorKind,
    GenerationRequest,
    GenerationResult,
    ProviderDescriptor,
)

logger = logging.getLogger(__name__)

NO_PROVIDERS_MESSAGE = "No providers configured"
EXHAUSTED_PREFIX = "All AI providers failed: "


class FallbackSequencer:
    def __init__(self, registry: ProviderRegistry, deadline_seconds: float):
        if deadline_seconds <= 0:
            raise ValueError("deadline_seconds must be positive")
        self.registry = registry
        self.deadline_seconds = deadline_seconds

    async def run(self, request: GenerationRequest) -> tuple[GenerationResult, list[AttemptRecord]]:
        """Return the first successful result plus the ordered attempt log."""
        attempts: list[AttemptRecord] = []

        providers = self.registry.configured()
        if not providers:
            logger.error("No AI providers configured; skipping generation")
            return GenerationResult.failure(ErrorKind.NOT_CONFIGURED, NO_PROVIDERS_MESSAGE), attempts

        for provider in providers:
            text, record = await self._attempt(provider, request)
            attempts.append(record)
            observe_attempt(record.provider_name, record.outcome.value, record.elapsed_ms)

            if record.outcome == AttemptOutcome.SUCCESS:
                logger.info(
                    "%s succeeded in %dms",
                    provider.name,
                    record.elapsed_ms,
                    extra=record.log_extra(),
                )
                return GenerationResult.success(text, provider.name), attempts

            logger.warning(
                "%s failed (%s) after %dms: %s",
                provider.name,
                record.outcome.value,
                record.elapsed_ms,
                record.message,
                extra=record.log_extra(),
            )

        error = EXHAUSTED_PREFIX + "; ".join(a.describe() for a in attempts)
        return GenerationResult.failure(ErrorKind.ALL_PROVIDERS_EXHAUSTED, error), attempts

    async def _attempt(self, provider: ProviderDescriptor, request: GenerationRequest) -> tuple[str, AttemptRecord]:
        logger.info("Trying %s...", provider.name, extra={"provider": provider.name})
        start = time.monotonic()

        try:
            text = await with_deadline(provider.invoke(request), self.deadline_seconds, provider.name)
        except ProviderTimeoutError as e:
            return "", self._record(provider, AttemptOutcome.TIMEOUT, str(e), start)
        except EmptyResponseError as e:
            return "", self._record(provider, AttemptOutcome.EMPTY_RESPONSE, str(e) or "empty response", start)
        except TransportError as e:
            return "", self._record(provider, AttemptOutcome.TRANSPORT_ERROR, str(e), start)
        except Exception as e:
            # Injected providers may raise anything
            logger.exception("%s raised an unexpected error", provider.name)
            return "", self._record(provider, AttemptOutcome.TRANSPORT_ERROR, f"{type(e).__name__}: {e}", start)

        if not isinstance(text, str):
            return "", self._record(
                provider, AttemptOutcome.TRANSPORT_ERROR, f"non-text response ({type(text).__name__})", start
            )
        if not text.strip():
            return "", self._record(provider, AttemptOutcome.EMPTY_RESPONSE, "empty response", start)
        return text, self._record(provider, AttemptOutcome.SUCCESS, "", start)

    @staticmethod
    def _record(provider: ProviderDescriptor, outcome: AttemptOutcome, message: str, start: float) -> AttemptRecord:
        return AttemptRecord(
            provider_name=provider.name,
            outcome=outcome,
            message=message,
            elapsed_ms=int((time.monotonic() - start) * 1000),
        )
