from __future__ import annotations

import json
from typing import Any, Callable, Iterator

import httpx
import pytest
from fastapi.testclient import TestClient

from meeting_summarizer.core.settings import Settings, get_settings
from meeting_summarizer.deps import get_http_client
from meeting_summarizer.main import app

HF_BASE = "https://hf.test/models"
GEMINI_BASE = "https://gemini.test/v1beta/models"

Handler = Callable[[httpx.Request], httpx.Response]


def make_settings(**overrides: Any) -> Settings:
    """Settings isolated from the developer's .env and environment."""
    values: dict[str, Any] = {
        "HUGGINGFACE_API_KEY": None,
        "GEMINI_API_KEY": None,
        "HF_API_BASE": HF_BASE,
        "GEMINI_API_BASE": GEMINI_BASE,
        "SUMMARY_PROVIDER_ORDER": "huggingface,gemini",
        "ASR_MAX_ATTEMPTS": 5,
        "ASR_MAX_TOTAL_WAIT_SECONDS": 120.0,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def deck_payload(slides: int = 2) -> dict[str, Any]:
    return {
        "summary": "The team agreed to ship the beta next sprint.",
        "slides": [
            {"title": f"Topic {i}", "points": [f"Point {i}.1", f"Point {i}.2", f"Point {i}.3"]}
            for i in range(1, slides + 1)
        ],
    }


def hf_generation(text: str) -> httpx.Response:
    return httpx.Response(200, json=[{"generated_text": text}])


def gemini_generation(text: str) -> httpx.Response:
    return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]})


class FakeUpstream:
    """Records outbound requests and answers them from per-host handlers."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.handlers: dict[str, list[Handler]] = {}

    def on(self, host: str, *handlers: Handler) -> None:
        self.handlers.setdefault(host, []).extend(handlers)

    def calls_to(self, host: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == host]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.handlers.get(request.url.host)
        if not queue:
            raise AssertionError(f"unexpected outbound request to {request.url}")
        # the last handler keeps answering once the queue is down to one
        handler = queue.pop(0) if len(queue) > 1 else queue[0]
        return handler(request)


def request_json(request: httpx.Request) -> Any:
    return json.loads(request.content)


@pytest.fixture()
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture()
def configure(upstream: FakeUpstream) -> Iterator[Callable[..., Settings]]:
    """Install settings overrides; outbound HTTP always goes to ``upstream``."""

    def _configure(**overrides: Any) -> Settings:
        cfg = make_settings(**overrides)
        app.dependency_overrides[get_settings] = lambda: cfg
        return cfg

    def _client() -> Iterator[httpx.Client]:
        with httpx.Client(transport=httpx.MockTransport(upstream)) as c:
            yield c

    app.dependency_overrides[get_http_client] = _client
    _configure()
    yield _configure
    app.dependency_overrides.clear()


@pytest.fixture()
def client(configure) -> Iterator[TestClient]:
    with TestClient(app) as c:
        yield c
