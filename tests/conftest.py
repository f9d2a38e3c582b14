from __future__ import annotations

import asyncio

import pytest

from aigateway.core.config import Settings
from aigateway.gateway.errors import EmptyResponseError, TransportError
from aigateway.gateway.registry import ProviderRegistry
from aigateway.gateway.types import GenerationRequest, ProviderDescriptor


class FakeProvider:
    """Scripted provider: returns text, raises, or sleeps; records every call."""

    def __init__(self, name: str, text: str = "", error: Exception | None = None, delay: float = 0.0):
        self.name = name
        self.text = text
        self.error = error
        self.delay = delay
        self.calls: list[GenerationRequest] = []
        self.cancelled = False

    async def invoke(self, request: GenerationRequest) -> str:
        self.calls.append(request)
        if self.delay:
            try:
                await asyncio.sleep(self.delay)
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        if self.error is not None:
            raise self.error
        return self.text

    def descriptor(self, priority: int, is_configured: bool = True) -> ProviderDescriptor:
        return ProviderDescriptor(
            name=self.name,
            priority=priority,
            is_configured=is_configured,
            invoke=self.invoke,
        )


def make_registry(*providers: FakeProvider, unconfigured: tuple[str, ...] = ()) -> ProviderRegistry:
    return ProviderRegistry(p.descriptor(i, is_configured=p.name not in unconfigured) for i, p in enumerate(providers))


@pytest.fixture
def ok_provider():
    return FakeProvider("alpha", text='{"ok": true}')


@pytest.fixture
def failing_provider():
    return FakeProvider("beta", error=TransportError("503 unavailable", status_code=503))


@pytest.fixture
def empty_provider():
    return FakeProvider("gamma", error=EmptyResponseError("gamma returned an empty response"))


@pytest.fixture
def test_settings():
    """Settings isolated from the environment and any local .env file."""
    return Settings(
        _env_file=None,
        gemini_api_key="gemini-key",
        groq_api_key="groq-key",
        baseten_api_key="",
        openrouter_api_key="",
    )
