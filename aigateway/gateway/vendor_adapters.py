"""Provider Adapters — protocol-level handling for each LLM backend.

Each adapter translates a GenerationRequest into one backend-specific HTTP
call and returns the raw output text. Adapters never retry and never log
prompt contents; failures surface as exceptions for the sequencer to fold.

Backend-specific behaviors:
  - Gemini: Google AI generateContent, key in query string,
    finishReason SAFETY / promptFeedback.blockReason → empty response
  - Groq: OpenAI-compatible chat completions, native JSON response_format
  - Baseten: OpenAI-compatible chat completions, non-streaming
  - OpenRouter: OpenAI-compatible with attribution headers
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from aigateway.gateway.errors import EmptyResponseError, TransportError
from aigateway.gateway.types import GenerationRequest, ProviderVendor

logger = logging.getLogger(__name__)


class BaseProviderAdapter(ABC):
    """Base class for all provider adapters."""

    vendor: ProviderVendor
    default_model: str = ""

    def __init__(self, api_key: str, model: str = "", http_timeout: float = 60.0, **kwargs):
        self.api_key = api_key
        self.model = model or self.default_model
        self.http_timeout = http_timeout

    @property
    def name(self) -> str:
        return self.vendor.value

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def invoke(self, request: GenerationRequest) -> str:
        """Send *request* to the backend and return its text.

        Raises:
            TransportError: non-2xx status, network failure or malformed envelope.
            EmptyResponseError: 2xx without usable text.
        """
        data = await self._post(
            self._url(),
            payload=self._build_payload(request),
            headers=self._headers(),
            params=self._params(),
        )
        text = self._extract_text(data)
        if not text or not text.strip():
            raise EmptyResponseError(f"{self.name} returned an empty response")
        return text

    @abstractmethod
    def _url(self) -> str: ...

    @abstractmethod
    def _build_payload(self, request: GenerationRequest) -> dict[str, Any]: ...

    @abstractmethod
    def _extract_text(self, data: dict[str, Any]) -> str: ...

    def _headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json"}

    def _params(self) -> dict[str, str] | None:
        return None

    async def _post(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str],
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=self.http_timeout) as client:
                resp = await client.post(url, json=payload, headers=headers, params=params)
        except httpx.TimeoutException as e:
            raise TransportError(f"http timeout after {self.http_timeout}s ({type(e).__name__})") from e
        except httpx.HTTPError as e:
            raise TransportError(f"request failed: {type(e).__name__}: {e}") from e

        logger.debug("%s responded with HTTP %d", self.name, resp.status_code)
        if not resp.is_success:
            raise TransportError.from_status(resp.status_code, resp.text)

        try:
            data = resp.json()
        except ValueError as e:
            raise TransportError(f"malformed envelope: invalid JSON body ({resp.status_code})") from e
        if not isinstance(data, dict):
            raise TransportError("malformed envelope: expected a JSON object")
        return data


# ---------------------------------------------------------------------------
# Gemini Adapter (Google AI)
# ---------------------------------------------------------------------------


class GeminiAdapter(BaseProviderAdapter):
    """Google Gemini adapter with SAFETY filter detection."""

    vendor = ProviderVendor.GEMINI
    default_model = "gemini-2.0-flash"
    api_url_template = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

    def _url(self) -> str:
        return self.api_url_template.format(model=self.model)

    def _params(self) -> dict[str, str]:
        return {"key": self.api_key}

    def _build_payload(self, request: GenerationRequest) -> dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": request.prompt}]}],
            "generationConfig": {
                "temperature": request.temperature,
                "maxOutputTokens": request.max_tokens,
                "responseMimeType": "application/json" if request.json_mode else "text/plain",
            },
        }

    def _extract_text(self, data: dict[str, Any]) -> str:
        candidates = data.get("candidates")
        if not candidates:
            feedback = data.get("promptFeedback") or {}
            block_reason = feedback.get("blockReason", "") if isinstance(feedback, dict) else ""
            if block_reason:
                raise EmptyResponseError(f"gemini blocked the prompt: {block_reason}")
            return ""
        if not isinstance(candidates, list):
            raise TransportError("malformed envelope: candidates is not a list")

        candidate = candidates[0]
        if not isinstance(candidate, dict):
            raise TransportError("malformed envelope: candidate is not an object")
        if candidate.get("finishReason") == "SAFETY":
            raise EmptyResponseError("gemini safety filter triggered")

        content = candidate.get("content") or {}
        if not isinstance(content, dict):
            raise TransportError("malformed envelope: candidate content is not an object")
        parts = content.get("parts") or []
        if not isinstance(parts, list):
            raise TransportError("malformed envelope: content parts is not a list")

        texts = [p.get("text", "") for p in parts if isinstance(p, dict)]
        if not all(isinstance(t, str) for t in texts):
            raise TransportError("malformed envelope: part text is not a string")
        return "".join(texts)


# ---------------------------------------------------------------------------
# OpenAI-compatible adapters (Groq, Baseten, OpenRouter)
# ---------------------------------------------------------------------------


class _ChatCompletionsAdapter(BaseProviderAdapter):
    """Shared request/response shape for OpenAI-compatible chat completions."""

    api_url: str = ""

    def _url(self) -> str:
        return self.api_url

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _build_payload(self, request: GenerationRequest) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": [{"role": "user", "content": request.prompt}],
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
        }

    def _extract_text(self, data: dict[str, Any]) -> str:
        choices = data.get("choices")
        if not isinstance(choices, list):
            raise TransportError(f"malformed envelope: {self.name} response has no choices")
        if not choices:
            return ""
        message = choices[0].get("message") if isinstance(choices[0], dict) else None
        if not isinstance(message, dict):
            return ""
        content = message.get("content") or ""
        if not isinstance(content, str):
            raise TransportError(
                f"malformed envelope: {self.name} message content is {type(content).__name__}, not a string"
            )
        return content


class GroqAdapter(_ChatCompletionsAdapter):
    """Groq adapter (fast inference, OpenAI-compatible)."""

    vendor = ProviderVendor.GROQ
    default_model = "llama-3.3-70b-versatile"
    api_url = "https://api.groq.com/openai/v1/chat/completions"

    def _build_payload(self, request: GenerationRequest) -> dict[str, Any]:
        payload = super()._build_payload(request)
        if request.json_mode:
            payload["response_format"] = {"type": "json_object"}
        return payload


class BasetenAdapter(_ChatCompletionsAdapter):
    """Baseten adapter (OpenAI-compatible, blocking responses only)."""

    vendor = ProviderVendor.BASETEN
    default_model = "openai/gpt-oss-120b"
    api_url = "https://inference.baseten.co/v1/chat/completions"

    def _build_payload(self, request: GenerationRequest) -> dict[str, Any]:
        payload = super()._build_payload(request)
        payload["stream"] = False
        return payload


class OpenRouterAdapter(_ChatCompletionsAdapter):
    """OpenRouter adapter with attribution headers."""

    vendor = ProviderVendor.OPENROUTER
    default_model = "openai/gpt-4o-mini"
    api_url = "https://openrouter.ai/api/v1/chat/completions"

    def __init__(self, api_key: str, referer: str = "", title: str = "", **kwargs):
        super().__init__(api_key=api_key, **kwargs)
        self.referer = referer
        self.title = title

    def _headers(self) -> dict[str, str]:
        headers = super()._headers()
        if self.referer:
            headers["HTTP-Referer"] = self.referer
        if self.title:
            headers["X-Title"] = self.title
        return headers


# ---------------------------------------------------------------------------
# Adapter registry
# ---------------------------------------------------------------------------

ADAPTER_REGISTRY: dict[ProviderVendor, type[BaseProviderAdapter]] = {
    ProviderVendor.GEMINI: GeminiAdapter,
    ProviderVendor.GROQ: GroqAdapter,
    ProviderVendor.BASETEN: BasetenAdapter,
    ProviderVendor.OPENROUTER: OpenRouterAdapter,
}


def get_adapter(vendor: ProviderVendor, api_key: str, **kwargs) -> BaseProviderAdapter:
    """Factory: get the appropriate adapter for a vendor."""
    cls = ADAPTER_REGISTRY.get(vendor)
    if cls is None:
        raise ValueError(f"No adapter registered for vendor: {vendor}")
    return cls(api_key=api_key, **kwargs)
