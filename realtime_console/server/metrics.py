"""Prometheus metrics for the realtime console server."""

from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# Request counter
REQUESTS = Counter(
    "console_requests_total",
    "Total HTTP requests",
    labelnames=("endpoint", "method", "status"),
)

# Upstream token issuance latency (seconds)
TOKEN_LATENCY = Histogram(
    "console_token_seconds",
    "Realtime session token issuance latency in seconds",
    buckets=(0.1, 0.2, 0.4, 0.8, 1.6, 3.2, 6.4),
)

# Server-side render latency (seconds)
RENDER_LATENCY = Histogram(
    "console_render_seconds",
    "Page render latency in seconds",
    labelnames=("mode",),
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
)


def prom_latest() -> tuple[bytes, str]:
    """Generate Prometheus metrics output."""
    return generate_latest(), CONTENT_TYPE_LATEST
