# meeting_summarizer/routers/health.py

from fastapi import APIRouter, Depends

from meeting_summarizer.core.settings import Settings, get_settings
from meeting_summarizer.schemas.deck import HealthResponse

router = APIRouter(tags=["health"])


def health_payload(settings: Settings) -> dict:
    return {
        "status": "ok",
        "message": "Meeting Summarizer API is running",
        "providers": {
            "huggingface": settings.has_huggingface,
            "gemini": settings.has_gemini,
        },
    }


@router.get("/api/health", response_model=HealthResponse, operation_id="health")
def health(settings: Settings = Depends(get_settings)):
    return health_payload(settings)


@router.api_route("/healthz", methods=["GET", "HEAD"], include_in_schema=False)
def healthz(settings: Settings = Depends(get_settings)):
    """Alias for infra probes that expect /healthz."""
    return health_payload(settings)
