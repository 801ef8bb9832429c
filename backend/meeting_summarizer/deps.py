# meeting_summarizer/deps.py
from __future__ import annotations

from typing import Generator

import httpx
from fastapi import Depends

from meeting_summarizer.core.settings import Settings, get_settings
from meeting_summarizer.services.providers import TextProvider, build_text_providers


def get_http_client(settings: Settings = Depends(get_settings)) -> Generator[httpx.Client, None, None]:
    """One outbound client per request, always with an explicit timeout."""
    with httpx.Client(timeout=settings.PROVIDER_TIMEOUT_SECONDS) as client:
        yield client


def get_text_providers(
    settings: Settings = Depends(get_settings),
    client: httpx.Client = Depends(get_http_client),
) -> list[TextProvider]:
    """Configured providers in fallback order; empty when no credential is set."""
    return build_text_providers(settings, client)


__all__ = ["get_http_client", "get_settings", "get_text_providers"]
