# frontend/frontend_api.py
from __future__ import annotations

import os
from typing import Any

import requests

API_BASE = os.getenv("API_BASE_URL", "http://127.0.0.1:3000")
TIMEOUT = 30
# Summaries and transcriptions wait on hosted models, including ASR cold starts
LONG_TIMEOUT = 300


class ApiError(Exception):
    """Error body returned by the API: ``{error, hint}``."""

    def __init__(self, message: str, hint: str | None = None, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.status = status


def _full(path: str) -> str:
    """Return an absolute URL for the API, accepting either absolute or relative paths."""
    if path.startswith(("http://", "https://")):
        return path
    return f"{API_BASE.rstrip('/')}/{path.lstrip('/')}"


def _raise_for_error(r: requests.Response) -> None:
    if r.ok:
        return
    try:
        body = r.json()
    except ValueError:
        body = {}
    message = body.get("error") if isinstance(body, dict) else None
    hint = body.get("hint") if isinstance(body, dict) else None
    raise ApiError(message or f"Request failed ({r.status_code})", hint, r.status_code)


def health() -> dict[str, Any]:
    r = requests.get(_full("/api/health"), timeout=TIMEOUT)
    _raise_for_error(r)
    return r.json()


def transcribe(filename: str, data: bytes, content_type: str) -> str:
    r = requests.post(
        _full("/api/transcribe"),
        files={"audio": (filename, data, content_type)},
        timeout=LONG_TIMEOUT,
    )
    _raise_for_error(r)
    return r.json()["transcript"]


def summarize(transcript: str) -> dict[str, Any]:
    r = requests.post(_full("/api/summarize"), json={"transcript": transcript}, timeout=LONG_TIMEOUT)
    _raise_for_error(r)
    return r.json()


def export_html(deck: dict[str, Any]) -> bytes:
    r = requests.post(_full("/api/export/html"), json=deck, timeout=TIMEOUT)
    _raise_for_error(r)
    return r.content


def export_summary(deck: dict[str, Any]) -> bytes:
    r = requests.post(_full("/api/export/summary"), json=deck, timeout=TIMEOUT)
    _raise_for_error(r)
    return r.content


def export_print(deck: dict[str, Any]) -> bytes:
    r = requests.post(_full("/api/export/print"), json=deck, timeout=TIMEOUT)
    _raise_for_error(r)
    return r.content
