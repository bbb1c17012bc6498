"""Monitoring utilities leveraging Prometheus client."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

http_requests_total = Counter(
    "tasting_http_requests_total",
    "Total HTTP requests",
    ["method", "route", "status"],
)

http_request_latency_seconds = Histogram(
    "tasting_http_request_latency_seconds",
    "HTTP request latency",
    ["method", "route"],
)


def observe_request(method: str, route: str, status: int, duration_seconds: float) -> None:
    http_requests_total.labels(method=method, route=route, status=str(status)).inc()
    http_request_latency_seconds.labels(method=method, route=route).observe(duration_seconds)


__all__ = ["observe_request"]
