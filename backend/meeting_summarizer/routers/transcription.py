from __future__ import annotations

from typing import Optional

import httpx
from fastapi import APIRouter, Depends, File, UploadFile

from meeting_summarizer.core.errors import InputValidationError, PayloadTooLargeError
from meeting_summarizer.core.settings import Settings, get_settings
from meeting_summarizer.deps import get_http_client
from meeting_summarizer.logging_utils import get_logger
from meeting_summarizer.schemas.deck import TranscriptResponse
from meeting_summarizer.services.transcription import HuggingFaceTranscriber

router = APIRouter(prefix="/api", tags=["transcription"])
log = get_logger(__name__)

# Browsers label audio-only .webm recordings as video/webm
AUDIO_CONTAINER_TYPES = frozenset({"video/webm"})


def _read_audio(audio: Optional[UploadFile], max_bytes: int) -> tuple[bytes, str]:
    if audio is None or not audio.filename:
        raise InputValidationError("No audio file provided")

    content_type = audio.content_type or ""
    if not (content_type.startswith("audio/") or content_type in AUDIO_CONTAINER_TYPES):
        raise InputValidationError("Only audio files are allowed")

    # One byte past the limit is enough to detect an oversize upload
    data = audio.file.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise PayloadTooLargeError(
            f"Audio file is too large. Maximum size is {max_bytes // (1024 * 1024)}MB."
        )
    if not data:
        raise InputValidationError("No audio file provided")
    return data, content_type


@router.post("/transcribe", response_model=TranscriptResponse)
def transcribe(
    audio: Optional[UploadFile] = File(default=None),
    settings: Settings = Depends(get_settings),
    client: httpx.Client = Depends(get_http_client),
):
    try:
        data, content_type = _read_audio(audio, settings.MAX_UPLOAD_BYTES)
        transcriber = HuggingFaceTranscriber.from_settings(settings, client)
        log.info(
            "Transcribing upload",
            extra={"upload_filename": audio.filename, "content_type": content_type, "bytes": len(data)},
        )
        transcript = transcriber.transcribe(data, content_type)
    finally:
        # The upload buffer is dropped on every path
        if audio is not None:
            audio.file.close()
    return {"transcript": transcript}
