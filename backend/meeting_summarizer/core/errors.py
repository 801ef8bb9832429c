# meeting_summarizer/core/errors.py
from __future__ import annotations

from typing import Any, Optional, Sequence

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_500_INTERNAL_SERVER_ERROR

from meeting_summarizer.logging_utils import get_logger

log = get_logger(__name__)

SUMMARIZE_HINT = "Make sure HUGGINGFACE_API_KEY or GEMINI_API_KEY is set in your .env file"
TRANSCRIBE_HINT = (
    "Make sure HUGGINGFACE_API_KEY is set in your .env file for audio transcription, "
    "or paste the transcript directly"
)
PARSE_FAILURE_MESSAGE = "Failed to parse AI response. Please try again."


class ApiError(BaseModel):
    error: str
    hint: Optional[str] = None
    providers: Optional[list[dict[str, str]]] = None


class SummarizerError(Exception):
    """Base error; carries the HTTP status and optional hint used at the request boundary."""

    status_code: int = HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint

    @property
    def user_message(self) -> str:
        return self.message


class InputValidationError(SummarizerError):
    status_code = HTTP_400_BAD_REQUEST


class PayloadTooLargeError(InputValidationError):
    status_code = 413


class ConfigurationError(SummarizerError):
    pass


class ProviderError(SummarizerError):
    """Any failure attributable to a single provider attempt."""

    def __init__(self, message: str, *, provider: str, hint: str | None = None) -> None:
        super().__init__(message, hint=hint)
        self.provider = provider

    @property
    def user_message(self) -> str:
        return f"AI generation failed: {self.message}"


class ProviderTransportError(ProviderError):
    """Network failure or non-2xx status from a provider."""

    def __init__(
        self,
        message: str,
        *,
        provider: str,
        status_code: int | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, provider=provider, hint=hint)
        self.upstream_status = status_code


class TransientUnavailableError(ProviderTransportError):
    """ASR endpoint kept answering 503 until the retry budget ran out."""

    @property
    def user_message(self) -> str:
        return self.message


class ProviderFormatError(ProviderError):
    """Successful response whose content could not be turned into a deck."""


class ResponseParseError(ProviderFormatError):
    @property
    def user_message(self) -> str:
        return PARSE_FAILURE_MESSAGE


class ResponseShapeError(ProviderFormatError):
    pass


class TranscriptionError(SummarizerError):
    """ASR failure surfaced verbatim (no "AI generation failed" prefix)."""

    @property
    def user_message(self) -> str:
        return self.message


class GenerationError(SummarizerError):
    """Every configured provider failed; reports the last failure to the user."""

    def __init__(self, failures: Sequence[ProviderError], *, hint: str | None = None) -> None:
        if not failures:
            raise ValueError("GenerationError requires at least one failure")
        self.failures = list(failures)
        super().__init__(self.failures[-1].user_message, hint=hint)

    @property
    def providers(self) -> list[dict[str, str]]:
        return [{"provider": f.provider, "error": f.message} for f in self.failures]


def error_response(
    status_code: int,
    error: str,
    hint: str | None = None,
    providers: list[dict[str, str]] | None = None,
) -> JSONResponse:
    payload = ApiError(error=error, hint=hint, providers=providers).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=payload)


async def summarizer_error_handler(request: Request, exc: SummarizerError) -> JSONResponse:
    providers = exc.providers if isinstance(exc, GenerationError) else None
    level = log.warning if exc.status_code < 500 else log.error
    level(
        exc.__class__.__name__,
        extra={"path": request.url.path, "status": exc.status_code, "error": exc.user_message},
    )
    return error_response(exc.status_code, exc.user_message, exc.hint, providers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Normalize all HTTPExceptions into {error, hint}
    detail: Any = exc.detail
    if isinstance(detail, dict) and "error" in detail:
        return JSONResponse(status_code=exc.status_code, content=detail, headers=exc.headers)
    log.warning("HTTPException", extra={"path": request.url.path, "status": exc.status_code})
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(detail)},
        headers=exc.headers,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    log.warning("ValidationError", extra={"path": request.url.path, "details": exc.errors()})
    return JSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content={"error": "Request validation failed", "details": jsonable_errors(exc)},
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    return [{"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in exc.errors()]


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log.error("Unhandled exception", extra={"path": request.url.path}, exc_info=exc)
    return error_response(HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SummarizerError, summarizer_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)
