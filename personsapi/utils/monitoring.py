"""Monitoring utilities leveraging Prometheus client."""

from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

http_requests_total = Counter(
    "personsapi_http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)

http_request_latency_seconds = Histogram(
    "personsapi_http_request_latency_seconds",
    "HTTP request latency",
    ["method", "path"],
)

persons_exported_total = Counter(
    "personsapi_persons_exported_total",
    "Person rows written to CSV exports",
)


def observe_request(method: str, path: str, status: int, duration_seconds: float) -> None:
    http_requests_total.labels(method=method, path=path, status=str(status)).inc()
    http_request_latency_seconds.labels(method=method, path=path).observe(duration_seconds)


def observe_export(rows: int) -> None:
    persons_exported_total.inc(rows)


def render_metrics() -> tuple[bytes, str]:
    return generate_latest(), CONTENT_TYPE_LATEST
