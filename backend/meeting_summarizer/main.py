from __future__ import annotations

import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from meeting_summarizer import __version__
from meeting_summarizer.core.errors import register_exception_handlers
from meeting_summarizer.core.settings import Settings, settings
from meeting_summarizer.logging_utils import bind_request_context, configure_logging, get_logger
from meeting_summarizer.metrics import render_metrics, track_http_request
from meeting_summarizer.routers import export, health, summaries, transcription

# Configure structured logging for the API once at startup
configure_logging("api", settings.LOG_LEVEL)
logger = get_logger(__name__)


def log_provider_configuration(cfg: Settings) -> None:
    """Missing credentials only warn here; the error surfaces on first request."""
    if cfg.has_huggingface:
        logger.info(
            "Hugging Face API enabled for summarization and transcription",
            extra={"summary_model": cfg.HF_SUMMARY_MODEL, "asr_model": cfg.HF_ASR_MODEL},
        )
    if cfg.has_gemini:
        logger.info("Gemini API enabled for summarization", extra={"model": cfg.GEMINI_MODEL})
    if not (cfg.has_huggingface or cfg.has_gemini):
        logger.warning("No summarization API key found (HUGGINGFACE_API_KEY or GEMINI_API_KEY)")
    if not cfg.has_huggingface:
        logger.warning(
            "HUGGINGFACE_API_KEY not found - audio transcription will not work; "
            "transcripts can still be pasted directly"
        )


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    log_provider_configuration(settings)
    yield


app = FastAPI(title="Meeting Summarizer", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
)

register_exception_handlers(app)


# ---------------------------------------------------------------------------
# Observability middleware (request ID + HTTP metrics)
# ---------------------------------------------------------------------------


@app.middleware("http")
async def observability_middleware(request: Request, call_next):
    """
    Attach a request_id to logs and track basic HTTP metrics
    (path/method/status + latency) for every request.
    """
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    bind_request_context(request_id)

    status_holder: dict[str, int] = {"status": 500}
    path = request.url.path
    method = request.method

    with track_http_request(path, method, lambda: status_holder["status"]):
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "unhandled error in request",
                extra={"path": path, "method": method},
            )
            raise
        status_holder["status"] = response.status_code

    response.headers["X-Request-ID"] = request_id
    return response


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------


@app.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    """Prometheus text-format metrics for scraping."""
    body, content_type = render_metrics()
    return Response(content=body, media_type=content_type)


# ---------------------------------------------------------------------------
# API routers
# ---------------------------------------------------------------------------

app.include_router(health.router)
app.include_router(summaries.router)
app.include_router(transcription.router)
app.include_router(export.router)


def run() -> None:
    """Console entry point: serve the API with uvicorn on HOST:PORT."""
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    run()
