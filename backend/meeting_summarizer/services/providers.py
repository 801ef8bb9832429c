"""
Hosted text-generation providers.

Each provider knows its own HTTP request shape and how to pull the completion
text out of its response envelope. Everything downstream only sees
``generate(prompt) -> str``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import httpx

from meeting_summarizer.core.errors import ProviderFormatError, ProviderTransportError
from meeting_summarizer.core.settings import Settings
from meeting_summarizer.logging_utils import get_logger
from meeting_summarizer.metrics import track_provider_call

log = get_logger(__name__)

# Upstream error bodies can be whole HTML pages
_MAX_ERROR_BODY = 500


class TextProvider(ABC):
    name: str = ""
    label: str = ""

    def __init__(self, api_key: str, model: str, *, client: httpx.Client, base_url: str) -> None:
        self.api_key = api_key
        self.model = model
        self.client = client
        self.base_url = base_url.rstrip("/")

    def generate(self, prompt: str) -> str:
        with track_provider_call(self.name):
            try:
                response = self._send(prompt)
            except httpx.HTTPError as exc:
                raise ProviderTransportError(
                    f"{self.label} request failed: {exc}", provider=self.label
                ) from exc

            if response.is_error:
                raise ProviderTransportError(
                    f"{self.label} API error: {response.text[:_MAX_ERROR_BODY]}",
                    provider=self.label,
                    status_code=response.status_code,
                )

            try:
                payload = response.json()
            except ValueError as exc:
                raise ProviderFormatError(
                    f"Unexpected response format from {self.label}", provider=self.label
                ) from exc

            return self.extract_text(payload)

    @abstractmethod
    def _send(self, prompt: str) -> httpx.Response:
        """Issue the completion request."""

    @abstractmethod
    def extract_text(self, payload: Any) -> str:
        """Pull the completion text out of the decoded response body."""


class HuggingFaceProvider(TextProvider):
    name = "huggingface"
    label = "Hugging Face"

    max_new_tokens = 2000
    temperature = 0.7

    def _send(self, prompt: str) -> httpx.Response:
        return self.client.post(
            f"{self.base_url}/{self.model}",
            headers={"Authorization": f"Bearer {self.api_key}"},
            json={
                "inputs": prompt,
                "parameters": {
                    "max_new_tokens": self.max_new_tokens,
                    "temperature": self.temperature,
                    "return_full_text": False,
                },
            },
        )

    def extract_text(self, payload: Any) -> str:
        if isinstance(payload, list) and payload and isinstance(payload[0], dict):
            text = payload[0].get("generated_text")
            if isinstance(text, str) and text:
                return text
        if isinstance(payload, dict) and isinstance(payload.get("generated_text"), str):
            return payload["generated_text"]
        if isinstance(payload, str):
            return payload
        raise ProviderFormatError(f"Unexpected response format from {self.label}", provider=self.label)


class GeminiProvider(TextProvider):
    name = "gemini"
    label = "Gemini"

    def _send(self, prompt: str) -> httpx.Response:
        return self.client.post(
            f"{self.base_url}/{self.model}:generateContent",
            headers={"x-goog-api-key": self.api_key},
            json={"contents": [{"parts": [{"text": prompt}]}]},
        )

    def extract_text(self, payload: Any) -> str:
        try:
            text = payload["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as exc:
            raise ProviderFormatError(
                f"Invalid response from {self.label} API", provider=self.label
            ) from exc
        if not isinstance(text, str):
            raise ProviderFormatError(f"Invalid response from {self.label} API", provider=self.label)
        return text


def build_text_providers(settings: Settings, client: httpx.Client) -> list[TextProvider]:
    """Providers in preference order, skipping any without a credential."""
    providers: list[TextProvider] = []
    for name in settings.provider_order:
        if name == HuggingFaceProvider.name:
            if settings.has_huggingface:
                providers.append(
                    HuggingFaceProvider(
                        settings.HUGGINGFACE_API_KEY or "",
                        settings.HF_SUMMARY_MODEL,
                        client=client,
                        base_url=settings.HF_API_BASE,
                    )
                )
        elif name == GeminiProvider.name:
            if settings.has_gemini:
                providers.append(
                    GeminiProvider(
                        settings.GEMINI_API_KEY or "",
                        settings.GEMINI_MODEL,
                        client=client,
                        base_url=settings.GEMINI_API_BASE,
                    )
                )
        else:
            log.warning("Unknown provider in SUMMARY_PROVIDER_ORDER", extra={"provider": name})
    return providers
