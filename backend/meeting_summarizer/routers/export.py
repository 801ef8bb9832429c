from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import HTMLResponse, PlainTextResponse

from meeting_summarizer.core.errors import InputValidationError
from meeting_summarizer.schemas.deck import SlideDeck
from meeting_summarizer.services.export import (
    presentation_filename,
    print_filename,
    render_deck_html,
    render_summary_text,
    summary_filename,
)

router = APIRouter(prefix="/api/export", tags=["export"])


def _attachment(filename: str) -> dict[str, str]:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


def _require_slides(deck: SlideDeck) -> None:
    if not deck.slides:
        raise InputValidationError("No slides available to export")


@router.post("/html", response_class=HTMLResponse)
def export_html(deck: SlideDeck):
    _require_slides(deck)
    return HTMLResponse(render_deck_html(deck), headers=_attachment(presentation_filename()))


@router.post("/print", response_class=HTMLResponse)
def export_print(deck: SlideDeck):
    """Same page as ``/html`` but it opens the browser's print (save as PDF) dialog on load."""
    _require_slides(deck)
    return HTMLResponse(
        render_deck_html(deck, print_on_load=True), headers=_attachment(print_filename())
    )


@router.post("/summary", response_class=PlainTextResponse)
def export_summary(deck: SlideDeck):
    if not deck.summary.strip():
        raise InputValidationError("No summary available to download")
    return PlainTextResponse(render_summary_text(deck), headers=_attachment(summary_filename()))
