"""Generation Gateway — the single entry point AI-backed features call.

  1. Accepts a GenerationRequest (built by the generation policy)
  2. Runs the Fallback Sequencer over the static Provider Registry
  3. Repairs the winning text when JSON output was requested
  4. Returns exactly one GenerationResult shape, never raising for
     provider outages

Usage:
    gateway = LlmGateway.from_settings(settings)

    result = await gateway.generate(GenerationRequest(prompt=..., json_mode=True))
    if result.ok:
        data = parse_json(result.text)
"""

from __future__ import annotations

import logging

from aigateway.core.config import Settings
from aigateway.core.metrics import observe_result
from aigateway.gateway.errors import RepairError
from aigateway.gateway.normalizer import parse_json, repair_json
from aigateway.gateway.registry import ProviderRegistry, build_registry
from aigateway.gateway.sequencer import FallbackSequencer
from aigateway.gateway.types import (
    ErrorKind,
    GenerationRequest,
    GenerationResult,
)

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER_TIMEOUT = 25.0


class LlmGateway:
    """Resilient multi-provider gateway.

    Holds only the read-only registry and the deadline, so one instance
    can serve concurrent calls without locking.
    """

    def __init__(self, registry: ProviderRegistry, provider_timeout: float = DEFAULT_PROVIDER_TIMEOUT):
        """
        Args:
            registry: Static provider list; its order is the fallback order
            provider_timeout: Deadline in seconds applied to every attempt
        """
        self.registry = registry
        self.provider_timeout = provider_timeout
        self.sequencer = FallbackSequencer(registry, provider_timeout)

    @classmethod
    def from_settings(cls, config: Settings) -> LlmGateway:
        return cls(build_registry(config), provider_timeout=config.provider_timeout_seconds)

    def available_providers(self) -> list[dict]:
        """Provider availability in fallback order (for startup logs)."""
        return self.registry.availability()

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        """Generate text for *request* through the fallback chain.

        Raises only for malformed requests; provider failures come back
        as a failed GenerationResult.
        """
        if not isinstance(request, GenerationRequest):
            raise TypeError(f"expected GenerationRequest, got {type(request).__name__}")

        result, attempts = await self.sequencer.run(request)
        if result.ok and request.json_mode:
            result = self._repair(result)

        if result.ok:
            observe_result("success")
        else:
            observe_result(result.error_kind.value)
            logger.error(
                "Generation failed (%s) after %d attempt(s): %s",
                result.error_kind.value,
                len(attempts),
                result.error,
            )
        return result

    @staticmethod
    def _repair(result: GenerationResult) -> GenerationResult:
        repaired = repair_json(result.text)
        try:
            parse_json(repaired)
        except RepairError as e:
            return GenerationResult.failure(ErrorKind.REPAIR_FAILURE, f"{result.provider_name}: {e}")
        return GenerationResult.success(repaired, result.provider_name)
