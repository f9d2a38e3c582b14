"""Tests for settings validation, logging setup and the verify script."""

from __future__ import annotations

import json
import logging
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from aigateway.core.config import Settings, validate_settings
from aigateway.core.logging import JSONFormatter, setup_logging
from aigateway.gateway.errors import TransportError
from aigateway.gateway.types import AttemptOutcome, AttemptRecord
from aigateway.verify import verify_providers


class TestSettings:
    def test_defaults(self):
        config = Settings(_env_file=None)
        assert config.provider_order_list == ["gemini", "groq", "baseten", "openrouter"]
        assert config.provider_timeout_seconds == 25.0

    def test_api_key_for(self, test_settings):
        assert test_settings.api_key_for("gemini") == "gemini-key"
        assert test_settings.api_key_for("baseten") == ""
        assert test_settings.api_key_for("unknown") == ""

    def test_valid_settings_pass(self, test_settings):
        validate_settings(test_settings)

    @pytest.mark.parametrize(
        "overrides,message",
        [
            ({"provider_order": " , "}, "at least one provider"),
            ({"provider_order": "gemini,mistral"}, "unknown providers: mistral"),
            ({"provider_order": "groq,gemini,groq"}, "more than once: groq"),
            ({"provider_timeout_seconds": 0}, "PROVIDER_TIMEOUT_SECONDS"),
            ({"http_timeout_seconds": -1}, "HTTP_TIMEOUT_SECONDS"),
        ],
    )
    def test_invalid_settings(self, overrides, message):
        config = Settings(_env_file=None, **overrides)
        with pytest.raises(SystemExit, match=message):
            validate_settings(config)


class TestLogging:
    def test_json_formatter_includes_attempt_fields(self):
        attempt = AttemptRecord("groq", AttemptOutcome.TIMEOUT, "timed out after 25000ms", 25000)
        record = logging.makeLogRecord(
            {"name": "aigateway", "levelno": logging.WARNING, "levelname": "WARNING", "msg": "groq failed"}
        )
        record.__dict__.update(attempt.log_extra())

        data = json.loads(JSONFormatter().format(record))

        assert data["level"] == "WARNING"
        assert data["message"] == "groq failed"
        assert data["provider"] == "groq"
        assert data["outcome"] == "timeout"
        assert data["elapsed_ms"] == 25000

    def test_setup_logging_json(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            setup_logging("debug", json_output=True)
            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, JSONFormatter)
            assert logging.getLogger("httpx").level == logging.WARNING
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)


class TestVerifyProviders:
    @pytest.mark.asyncio
    async def test_reports_each_configured_provider(self, test_settings, monkeypatch):
        async def fake_gemini(self, request):
            return "Hello"

        async def fake_groq(self, request):
            raise TransportError("401 invalid api key", status_code=401)

        monkeypatch.setattr("aigateway.gateway.vendor_adapters.GeminiAdapter.invoke", fake_gemini)
        monkeypatch.setattr("aigateway.gateway.vendor_adapters.GroqAdapter.invoke", fake_groq)

        results = await verify_providers(test_settings)

        assert results == {"gemini": True, "groq": False}

    @pytest.mark.asyncio
    async def test_malformed_response_reported_as_failure(self, test_settings):
        malformed = httpx.Response(
            200,
            json={"choices": [{"message": {"content": [{"type": "text", "text": "Hi"}]}}]},
            request=httpx.Request("POST", "https://example.com"),
        )
        gemini_ok = httpx.Response(
            200,
            json={"candidates": [{"content": {"parts": [{"text": "Hi"}]}, "finishReason": "STOP"}]},
            request=httpx.Request("POST", "https://example.com"),
        )

        with patch("aigateway.gateway.vendor_adapters.httpx.AsyncClient") as mock_client_cls:
            mock_client = AsyncMock()
            mock_client.post.side_effect = [gemini_ok, malformed]
            mock_client.__aenter__ = AsyncMock(return_value=mock_client)
            mock_client.__aexit__ = AsyncMock(return_value=None)
            mock_client_cls.return_value = mock_client

            results = await verify_providers(test_settings)

        assert results == {"gemini": True, "groq": False}
