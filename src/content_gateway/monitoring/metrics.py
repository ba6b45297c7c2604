"""Custom Prometheus metrics for the Content Gateway.

These metrics are exposed at /metrics endpoint and should be scraped by Prometheus.
Alert rules should be configured for:
- upstream_attempts_total (high failure or retry rate indicates a flaky upstream)
- cache_tier (value 0 means the process is running on the local fallback cache)
"""

from prometheus_client import Counter, Gauge, Histogram

# === Upstream Metrics ===

upstream_attempts_total = Counter(
    "upstream_attempts_total",
    "Total outbound call attempts by upstream and outcome",
    ["upstream", "outcome"],
)
"""
Outbound attempts counter.

Labels:
- upstream: content_api, generative_api
- outcome: success, timeout, upstream_error, transport_error
"""

upstream_latency_seconds = Histogram(
    "upstream_latency_seconds",
    "Latency of single outbound attempts in seconds",
    ["upstream"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0],
)

# === Cache Metrics ===

cache_lookups_total = Counter(
    "cache_lookups_total",
    "Total cache lookups by region and result",
    ["region", "result"],
)
"""
Cache lookups counter.

Labels:
- region: records, by-id, by-owner, generic, completions
- result: hit, miss
"""

cache_tier = Gauge(
    "cache_tier",
    "Active cache tier (1 = distributed, 0 = local fallback)",
)

# === Document Metrics ===

documents_rendered_total = Counter(
    "documents_rendered_total",
    "Total documents converted by format and status",
    ["format", "status"],
)
