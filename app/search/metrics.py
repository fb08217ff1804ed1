"""Prometheus metrics for discovery (exposed at /metrics)."""

from prometheus_client import Counter, Histogram

SEARCH_REQUESTS = Counter(
    "item_search_requests_total",
    "Item search requests by mode",
    ["geospatial", "text_strategy"],
)

SEARCH_DEGRADED = Counter(
    "item_search_degraded_total",
    "Optional search inputs that were ignored or downgraded",
    ["reason"],
)

SEARCH_FAILURES = Counter(
    "item_search_failures_total",
    "Item searches that failed in the store",
)

SEARCH_LATENCY = Histogram(
    "item_search_duration_seconds",
    "End-to-end item search latency",
)
