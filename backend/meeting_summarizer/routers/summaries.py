from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from meeting_summarizer.deps import get_text_providers
from meeting_summarizer.schemas.deck import SlideDeck, SummarizeRequest
from meeting_summarizer.services.generation import generate_slide_deck
from meeting_summarizer.services.providers import TextProvider

router = APIRouter(prefix="/api", tags=["summaries"])


# Sync handler: provider calls block, FastAPI runs this in its threadpool.
# The deck is returned as parsed so extra provider fields survive untouched.
@router.post("/summarize", responses={200: {"model": SlideDeck}})
def summarize(
    payload: SummarizeRequest,
    providers: list[TextProvider] = Depends(get_text_providers),
) -> dict[str, Any]:
    return generate_slide_deck(payload.transcript, providers)
