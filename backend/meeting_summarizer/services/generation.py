from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from meeting_summarizer.core.errors import (
    SUMMARIZE_HINT,
    ConfigurationError,
    GenerationError,
    InputValidationError,
    ProviderError,
)
from meeting_summarizer.logging_utils import get_logger
from meeting_summarizer.schemas.deck import MIN_TRANSCRIPT_CHARS
from meeting_summarizer.services.normalize import normalize_response
from meeting_summarizer.services.prompts import build_summary_prompt
from meeting_summarizer.services.providers import TextProvider

log = get_logger(__name__)

NO_PROVIDER_MESSAGE = (
    "No AI API configured. Please add HUGGINGFACE_API_KEY or GEMINI_API_KEY to your .env file"
)


@dataclass(frozen=True)
class ProviderChoice:
    provider: str
    model: str


@dataclass(frozen=True)
class GenerationRequest:
    transcript: str
    providers: tuple[ProviderChoice, ...]

    @classmethod
    def for_providers(cls, transcript: str, providers: Sequence[TextProvider]) -> "GenerationRequest":
        return cls(transcript, tuple(ProviderChoice(p.name, p.model) for p in providers))


def validate_transcript(transcript: Any) -> str:
    if not isinstance(transcript, str) or not transcript.strip():
        raise InputValidationError("Transcript is required")
    if len(transcript) < MIN_TRANSCRIPT_CHARS:
        raise InputValidationError(
            f"Transcript is too short. Please provide at least {MIN_TRANSCRIPT_CHARS} characters."
        )
    return transcript


def generate_slide_deck(transcript: Any, providers: Sequence[TextProvider]) -> dict[str, Any]:
    """
    Summarize a transcript into ``{summary, slides}``.

    Providers are tried strictly in order; a failure of any kind (transport,
    non-2xx, unparsable or wrongly shaped output) moves on to the next one.
    Raises ``GenerationError`` with every failure once they are exhausted.
    """
    transcript = validate_transcript(transcript)
    if not providers:
        raise ConfigurationError(NO_PROVIDER_MESSAGE, hint=SUMMARIZE_HINT)

    request = GenerationRequest.for_providers(transcript, providers)
    prompt = build_summary_prompt(request.transcript)
    failures: list[ProviderError] = []
    log.info(
        "Summarization requested",
        extra={
            "providers": [f"{c.provider}:{c.model}" for c in request.providers],
            "transcript_chars": len(request.transcript),
        },
    )

    for provider in providers:
        extra = {
            "provider": provider.name,
            "model": provider.model,
            "attempt": len(failures) + 1,
            "transcript_chars": len(request.transcript),
        }
        log.info("Generating slide deck", extra=extra)
        try:
            raw_text = provider.generate(prompt)
            deck = normalize_response(raw_text, provider=provider.label)
        except ProviderError as exc:
            failures.append(exc)
            log.warning(
                "Provider failed",
                extra={**extra, "error_type": exc.__class__.__name__, "error": exc.message},
            )
            continue

        if failures:
            log.info("Fallback provider succeeded", extra=extra)
        log.info("Slide deck generated", extra={**extra, "slides": len(deck["slides"])})
        return deck

    raise GenerationError(failures, hint=SUMMARIZE_HINT)
