"""Exceptions raised inside the gateway.

Adapters raise these; the sequencer catches them and folds them into
attempt records. Only :class:`RepairError` ever reaches gateway callers,
and only through :func:`aigateway.gateway.normalizer.parse_json`.
"""

from __future__ import annotations


class GatewayError(Exception):
    """Base class for gateway errors."""


class TransportError(GatewayError):
    """Provider unreachable, non-2xx, or returned a malformed envelope."""

    def __init__(self, message: str, status_code: int = 0, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    @classmethod
    def from_status(cls, status_code: int, body: str) -> TransportError:
        snippet = " ".join(body.split())[:300]
        message = f"{status_code} {snippet}".strip()
        return cls(message, status_code=status_code, body=body)


class EmptyResponseError(GatewayError):
    """Provider answered 2xx but with no usable text."""


class ProviderTimeoutError(GatewayError):
    """Attempt exceeded the gateway deadline."""

    def __init__(self, provider_name: str, timeout_seconds: float):
        self.provider_name = provider_name
        self.timeout_ms = int(timeout_seconds * 1000)
        super().__init__(f"timed out after {self.timeout_ms}ms")


class RepairError(GatewayError, ValueError):
    """Repaired text still is not valid JSON."""

    def __init__(self, message: str, text: str = ""):
        super().__init__(message)
        self.text = text
