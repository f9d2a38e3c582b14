"""Provider Registry — the static, ordered list of providers.

Built once at process start and passed to the gateway. Its order is the
fallback order; nothing reorders it at runtime.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from aigateway.core.config import Settings
from aigateway.gateway.types import ProviderDescriptor, ProviderVendor
from aigateway.gateway.vendor_adapters import BaseProviderAdapter, get_adapter

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Immutable priority-ordered collection of provider descriptors."""

    def __init__(self, descriptors: Iterable[ProviderDescriptor]):
        ordered = tuple(sorted(descriptors, key=lambda d: d.priority))

        names = [d.name for d in ordered]
        duplicate_names = sorted({n for n in names if names.count(n) > 1})
        if duplicate_names:
            raise ValueError(f"Duplicate provider names: {', '.join(duplicate_names)}")

        priorities = [d.priority for d in ordered]
        if len(set(priorities)) != len(priorities):
            raise ValueError("Provider priorities must be unique")

        self._descriptors = ordered

    def __iter__(self) -> Iterator[ProviderDescriptor]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    @property
    def names(self) -> list[str]:
        return [d.name for d in self._descriptors]

    def configured(self) -> tuple[ProviderDescriptor, ...]:
        """Configured providers, in priority order."""
        return tuple(d for d in self._descriptors if d.is_configured)

    def availability(self) -> list[dict]:
        return [{"name": d.name, "available": d.is_configured} for d in self._descriptors]


def build_adapter(vendor: ProviderVendor, config: Settings) -> BaseProviderAdapter:
    """Create the adapter for *vendor* from settings (it may be unconfigured)."""
    name = vendor.value
    kwargs: dict = {
        "model": getattr(config, f"{name}_model", ""),
        "http_timeout": config.http_timeout_seconds,
    }
    if vendor == ProviderVendor.OPENROUTER:
        kwargs["referer"] = config.openrouter_referer
        kwargs["title"] = config.openrouter_title
    return get_adapter(vendor, config.api_key_for(name), **kwargs)


def build_registry(config: Settings) -> ProviderRegistry:
    """Build the registry in ``config.provider_order`` order.

    Availability is decided here, once, from credential presence.
    """
    descriptors: list[ProviderDescriptor] = []
    for priority, name in enumerate(config.provider_order_list):
        try:
            vendor = ProviderVendor(name)
        except ValueError as e:
            raise ValueError(f"Unknown provider in PROVIDER_ORDER: {name}") from e

        adapter = build_adapter(vendor, config)
        descriptors.append(
            ProviderDescriptor(
                name=adapter.name,
                priority=priority,
                is_configured=adapter.is_configured,
                invoke=adapter.invoke,
            )
        )

    registry = ProviderRegistry(descriptors)
    logger.info(
        "Provider registry: order=%s configured=%s",
        ",".join(registry.names),
        ",".join(d.name for d in registry.configured()) or "none",
    )
    return registry
