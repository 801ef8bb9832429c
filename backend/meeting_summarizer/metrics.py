from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Callable, Iterator

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

HTTP_REQUESTS = Counter("http_requests_total", "HTTP requests", ["path", "method", "status"])

HTTP_LATENCY = Histogram(
    "http_request_duration_seconds",
    "Latencies for HTTP requests",
    ["path", "method"],
)

PROVIDER_REQUESTS = Counter(
    "provider_requests_total",
    "Outbound provider calls by outcome",
    ["provider", "outcome"],
)

PROVIDER_LATENCY = Histogram(
    "provider_request_duration_seconds",
    "Outbound provider call durations",
    ["provider"],
    buckets=(0.5, 1, 2, 5, 10, 20, 30, 60, 120),
)

ASR_RETRIES = Counter("asr_retries_total", "ASR requests re-issued after HTTP 503")


@contextmanager
def track_http_request(path: str, method: str, status_getter: Callable[[], int]) -> Iterator[None]:
    start = time.perf_counter()
    try:
        yield
    finally:
        HTTP_REQUESTS.labels(path=path, method=method, status=str(status_getter())).inc()
        HTTP_LATENCY.labels(path=path, method=method).observe(time.perf_counter() - start)


@contextmanager
def track_provider_call(provider: str) -> Iterator[None]:
    """Time one provider call and count it as ``ok`` or ``error``."""
    start = time.perf_counter()
    outcome = "error"
    try:
        yield
        outcome = "ok"
    finally:
        PROVIDER_REQUESTS.labels(provider=provider, outcome=outcome).inc()
        PROVIDER_LATENCY.labels(provider=provider).observe(time.perf_counter() - start)


def render_metrics() -> tuple[bytes, str]:
    return generate_latest(), CONTENT_TYPE_LATEST
