from pydantic_settings import BaseSettings, SettingsConfigDict

KNOWN_PROVIDERS = ("gemini", "groq", "baseten", "openrouter")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Provider credentials; a provider is configured iff its key is non-empty
    gemini_api_key: str = ""
    groq_api_key: str = ""
    baseten_api_key: str = ""
    openrouter_api_key: str = ""

    # Models
    gemini_model: str = "gemini-2.0-flash"
    groq_model: str = "llama-3.3-70b-versatile"
    baseten_model: str = "openai/gpt-oss-120b"
    openrouter_model: str = "openai/gpt-4o-mini"

    # OpenRouter attribution headers
    openrouter_referer: str = "https://resumescore.app"
    openrouter_title: str = "ResumeScore"

    # Fallback order, highest priority first (comma-separated provider names)
    provider_order: str = "gemini,groq,baseten,openrouter"

    # Gateway deadline per attempt, applied uniformly to every provider
    provider_timeout_seconds: float = 25.0
    # Adapter-level HTTP client timeout (independent of the gateway deadline)
    http_timeout_seconds: float = 60.0

    # Logging
    log_level: str = "INFO"
    log_json: bool = False  # set True in production for structured JSON logs

    @property
    def provider_order_list(self) -> list[str]:
        return [name.strip().lower() for name in self.provider_order.split(",") if name.strip()]

    def api_key_for(self, provider: str) -> str:
        return getattr(self, f"{provider}_api_key", "") or ""


settings = Settings()


def validate_settings(config: Settings | None = None) -> None:
    """Validate gateway settings. Called once at startup."""
    config = config or settings
    errors: list[str] = []

    order = config.provider_order_list
    if not order:
        errors.append("PROVIDER_ORDER must list at least one provider")

    unknown = [name for name in order if name not in KNOWN_PROVIDERS]
    if unknown:
        errors.append(f"PROVIDER_ORDER has unknown providers: {', '.join(unknown)}")

    duplicates = sorted({name for name in order if order.count(name) > 1})
    if duplicates:
        errors.append(f"PROVIDER_ORDER lists providers more than once: {', '.join(duplicates)}")

    if config.provider_timeout_seconds <= 0:
        errors.append("PROVIDER_TIMEOUT_SECONDS must be positive")
    if config.http_timeout_seconds <= 0:
        errors.append("HTTP_TIMEOUT_SECONDS must be positive")

    if errors:
        raise SystemExit("Configuration errors:\n  - " + "\n  - ".join(errors))
