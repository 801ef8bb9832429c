from __future__ import annotations

import math
import time
from typing import Any, Callable, Optional

import httpx

from meeting_summarizer.core.errors import (
    TRANSCRIBE_HINT,
    ConfigurationError,
    TranscriptionError,
    TransientUnavailableError,
)
from meeting_summarizer.core.settings import Settings
from meeting_summarizer.logging_utils import get_logger
from meeting_summarizer.metrics import ASR_RETRIES, track_provider_call

log = get_logger(__name__)

DEFAULT_RETRY_AFTER_SECONDS = 10.0
MISSING_KEY_MESSAGE = (
    "Hugging Face API key not configured. Please add HUGGINGFACE_API_KEY to your .env file "
    "for audio transcription. Alternatively, you can paste the transcript directly."
)

_PROVIDER = "Hugging Face"


def retry_after_seconds(response: httpx.Response, default: float = DEFAULT_RETRY_AFTER_SECONDS) -> float:
    """Seconds from a numeric ``retry-after`` header; ``default`` when absent or not a number."""
    raw = response.headers.get("retry-after")
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    if not math.isfinite(value):
        return default
    return max(value, 0.0)


def extract_transcript_text(payload: Any) -> str:
    if isinstance(payload, str):
        return payload
    if isinstance(payload, dict) and payload.get("text"):
        return str(payload["text"])
    if isinstance(payload, list) and payload and isinstance(payload[0], dict) and payload[0].get("text"):
        return str(payload[0]["text"])
    if isinstance(payload, dict) and isinstance(payload.get("chunks"), list):
        parts = [c.get("text", "") if isinstance(c, dict) else str(c) for c in payload["chunks"]]
        return " ".join(parts)
    raise TranscriptionError(
        f"Unexpected response format from Hugging Face: {str(payload)[:200]}",
        hint=TRANSCRIBE_HINT,
    )


class HuggingFaceTranscriber:
    """
    Forward raw audio bytes to the Hugging Face inference endpoint of an ASR model.

    A 503 means the model is still loading: the request is re-issued after the
    ``retry-after`` delay, up to ``max_attempts`` requests in total and at most
    ``max_total_wait`` seconds of cumulative sleeping.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        *,
        client: httpx.Client,
        base_url: str,
        max_attempts: int = 5,
        max_total_wait: float = 120.0,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.max_attempts = max(1, max_attempts)
        self.max_total_wait = max_total_wait
        self._sleep = sleep or time.sleep

    @classmethod
    def from_settings(cls, settings: Settings, client: httpx.Client) -> "HuggingFaceTranscriber":
        if not settings.has_huggingface:
            raise ConfigurationError(MISSING_KEY_MESSAGE, hint=TRANSCRIBE_HINT)
        return cls(
            settings.HUGGINGFACE_API_KEY or "",
            settings.HF_ASR_MODEL,
            client=client,
            base_url=settings.HF_API_BASE,
            max_attempts=settings.ASR_MAX_ATTEMPTS,
            max_total_wait=settings.ASR_MAX_TOTAL_WAIT_SECONDS,
        )

    def _post(self, audio: bytes, content_type: str | None) -> httpx.Response:
        headers = {"Authorization": f"Bearer {self.api_key}"}
        if content_type:
            headers["Content-Type"] = content_type
        try:
            return self.client.post(f"{self.base_url}/{self.model}", headers=headers, content=audio)
        except httpx.HTTPError as exc:
            raise TranscriptionError(
                f"Hugging Face request failed: {exc}", hint=TRANSCRIBE_HINT
            ) from exc

    def transcribe(self, audio: bytes, content_type: str | None = None) -> str:
        waited = 0.0
        for attempt in range(1, self.max_attempts + 1):
            with track_provider_call("huggingface-asr"):
                response = self._post(audio, content_type)
            if response.status_code != 503:
                break

            delay = retry_after_seconds(response)
            if attempt == self.max_attempts or waited + delay > self.max_total_wait:
                log.error(
                    "ASR model still loading; giving up",
                    extra={"model": self.model, "attempt": attempt, "waited_seconds": waited},
                )
                raise TransientUnavailableError(
                    "Hugging Face model is still loading. Please try again in a minute.",
                    provider=_PROVIDER,
                    status_code=503,
                    hint=TRANSCRIBE_HINT,
                )

            log.info(
                "ASR model is loading, waiting before retry",
                extra={"model": self.model, "attempt": attempt, "retry_after": delay},
            )
            ASR_RETRIES.inc()
            self._sleep(delay)
            waited += delay

        if response.is_error:
            raise TranscriptionError(
                f"Hugging Face API error: {response.text[:500]}", hint=TRANSCRIBE_HINT
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise TranscriptionError(
                "Unexpected response format from Hugging Face", hint=TRANSCRIBE_HINT
            ) from exc

        text = extract_transcript_text(payload)
        log.info("Audio transcribed", extra={"model": self.model, "transcript_chars": len(text)})
        return text
