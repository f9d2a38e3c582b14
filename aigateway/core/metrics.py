"""Prometheus metrics for the generation gateway."""

from prometheus_client import Counter, Histogram, generate_latest

ATTEMPT_COUNT = Counter(
    "llm_gateway_attempts_total",
    "Provider attempts made by the gateway",
    ["provider", "outcome"],
)

ATTEMPT_DURATION = Histogram(
    "llm_gateway_attempt_duration_seconds",
    "Duration of a single provider attempt in seconds",
    ["provider"],
    buckets=[0.25, 0.5, 1, 2.5, 5, 10, 15, 25, 40, 60],
)

RESULT_COUNT = Counter(
    "llm_gateway_results_total",
    "Gateway calls by final status",
    ["status"],
)


def observe_attempt(provider: str, outcome: str, elapsed_ms: int) -> None:
    ATTEMPT_COUNT.labels(provider=provider, outcome=outcome).inc()
    ATTEMPT_DURATION.labels(provider=provider).observe(elapsed_ms / 1000.0)


def observe_result(status: str) -> None:
    RESULT_COUNT.labels(status=status).inc()


def metrics_payload() -> bytes:
    """Render all metrics in the Prometheus text exposition format."""
    return generate_latest()
