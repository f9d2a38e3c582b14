"""Core types and DTOs for the generation gateway."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class ProviderVendor(str, Enum):
    """Built-in LLM backends."""

    GEMINI = "gemini"
    GROQ = "groq"
    BASETEN = "baseten"
    OPENROUTER = "openrouter"


class AttemptOutcome(str, Enum):
    """How a single provider attempt ended."""

    SUCCESS = "success"
    EMPTY_RESPONSE = "empty_response"  # Reachable but returned no usable text
    TRANSPORT_ERROR = "transport_error"  # Non-2xx, network failure, malformed envelope
    TIMEOUT = "timeout"  # Gateway deadline expired


class ErrorKind(str, Enum):
    """Failure kinds surfaced to gateway callers."""

    NOT_CONFIGURED = "not_configured"
    ALL_PROVIDERS_EXHAUSTED = "all_providers_exhausted"
    REPAIR_FAILURE = "repair_failure"


# ---------------------------------------------------------------------------
# Generation Request: input to the gateway
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GenerationRequest:
    """A single prompt to send through the fallback chain.

    Built once per call (usually by the generation policy) and shared
    read-only by every attempt.
    """

    prompt: str
    max_tokens: int = 4000
    temperature: float = 0.3
    json_mode: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.prompt, str) or not self.prompt.strip():
            raise ValueError("prompt must be a non-empty string")
        if isinstance(self.max_tokens, bool) or not isinstance(self.max_tokens, int) or self.max_tokens <= 0:
            raise ValueError(f"max_tokens must be a positive int, got {self.max_tokens!r}")
        if isinstance(self.temperature, bool) or not isinstance(self.temperature, (int, float)):
            raise ValueError(f"temperature must be a number, got {self.temperature!r}")
        if not 0.0 <= self.temperature <= 2.0:
            raise ValueError(f"temperature must be within [0, 2], got {self.temperature}")


# ---------------------------------------------------------------------------
# Provider descriptor: one entry of the static registry
# ---------------------------------------------------------------------------


InvokeFn = Callable[[GenerationRequest], Awaitable[str]]


@dataclass(frozen=True)
class ProviderDescriptor:
    """A provider as the sequencer sees it: a name, a rank and a callable."""

    name: str
    priority: int
    is_configured: bool
    invoke: InvokeFn


# ---------------------------------------------------------------------------
# Attempt record: diagnostics for one bounded invocation
# ---------------------------------------------------------------------------


@dataclass
class AttemptRecord:
    provider_name: str
    outcome: AttemptOutcome
    message: str = ""
    elapsed_ms: int = 0

    def describe(self) -> str:
        return f"{self.provider_name}: {self.message}"

    def log_extra(self) -> dict:
        """Fields attached to attempt log records (see ``ATTEMPT_LOG_FIELDS``)."""
        return {
            "provider": self.provider_name,
            "outcome": self.outcome.value,
            "elapsed_ms": self.elapsed_ms,
        }

    def to_dict(self) -> dict:
        return {**self.log_extra(), "message": self.message}


# Keys of AttemptRecord.log_extra(); structured log output copies these through
ATTEMPT_LOG_FIELDS = ("provider", "outcome", "elapsed_ms")


# ---------------------------------------------------------------------------
# Generation Result: output of the gateway
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GenerationResult:
    """Either ``{text, provider_name}`` or ``{error, error_kind}``, never both.

    Use :meth:`success` / :meth:`failure` to build one.
    """

    text: str | None = None
    provider_name: str | None = None
    error: str | None = None
    error_kind: ErrorKind | None = None

    def __post_init__(self) -> None:
        has_success = self.text is not None or self.provider_name is not None
        has_failure = self.error is not None or self.error_kind is not None
        if has_success == has_failure:
            raise ValueError("GenerationResult must be either a success or a failure")
        if has_success and (not self.text or not self.provider_name):
            raise ValueError("successful GenerationResult needs both text and provider_name")
        if has_failure and (not self.error or self.error_kind is None):
            raise ValueError("failed GenerationResult needs both error and error_kind")

    @classmethod
    def success(cls, text: str, provider_name: str) -> GenerationResult:
        return cls(text=text, provider_name=provider_name)

    @classmethod
    def failure(cls, kind: ErrorKind, error: str) -> GenerationResult:
        return cls(error=error, error_kind=kind)

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    def to_dict(self) -> dict:
        """Serialize to JSON-compatible dict for API responses."""
        if self.ok:
            return {"text": self.text, "provider": self.provider_name}
        return {"error": self.error, "error_kind": self.error_kind.value}
