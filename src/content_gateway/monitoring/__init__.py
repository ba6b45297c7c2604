"""Monitoring and metrics instrumentation for the Content Gateway.

Exports custom Prometheus metrics for operational monitoring and alerting.
"""

from content_gateway.monitoring.metrics import (
    cache_lookups_total,
    cache_tier,
    documents_rendered_total,
    upstream_attempts_total,
    upstream_latency_seconds,
)

__all__ = [
    "upstream_attempts_total",
    "upstream_latency_seconds",
    "cache_lookups_total",
    "cache_tier",
    "documents_rendered_total",
]
