from __future__ import annotations

import io

import httpx
import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

import meeting_summarizer.services.transcription as transcription
from conftest import make_settings
from meeting_summarizer.core.errors import InputValidationError, TranscriptionError
from meeting_summarizer.routers import transcription as transcription_router

AUDIO = ("meeting.wav", b"RIFF....WAVEfmt fake-audio-bytes", "audio/wav")


@pytest.fixture()
def sleeps(monkeypatch):
    calls: list[float] = []
    monkeypatch.setattr(transcription.time, "sleep", calls.append)
    return calls


def test_missing_file_is_rejected(client, configure, upstream):
    configure(HUGGINGFACE_API_KEY="hf-key")
    r = client.post("/api/transcribe")
    assert r.status_code == 400
    assert r.json()["error"] == "No audio file provided"
    assert upstream.requests == []


def test_missing_file_checked_before_credentials(client):
    r = client.post("/api/transcribe")
    assert r.status_code == 400


def test_non_audio_upload_is_rejected(client, configure, upstream):
    configure(HUGGINGFACE_API_KEY="hf-key")
    r = client.post("/api/transcribe", files={"audio": ("notes.txt", b"hello", "text/plain")})
    assert r.status_code == 400
    assert r.json()["error"] == "Only audio files are allowed"
    assert upstream.requests == []


def test_oversize_upload_is_rejected(client, configure, upstream):
    configure(HUGGINGFACE_API_KEY="hf-key", MAX_UPLOAD_BYTES=8)
    r = client.post("/api/transcribe", files={"audio": AUDIO})
    assert r.status_code == 413
    assert upstream.requests == []


def test_missing_credential_returns_hint(client, upstream):
    r = client.post("/api/transcribe", files={"audio": AUDIO})
    assert r.status_code == 500
    body = r.json()
    assert body["error"].startswith("Hugging Face API key not configured")
    assert "paste the transcript directly" in body["hint"]
    assert upstream.requests == []


def test_audio_bytes_are_forwarded_verbatim(client, configure, upstream):
    configure(HUGGINGFACE_API_KEY="hf-key", HF_ASR_MODEL="openai/whisper-tiny")
    upstream.on("hf.test", lambda req: httpx.Response(200, json={"text": "hello world"}))

    r = client.post("/api/transcribe", files={"audio": AUDIO})

    assert r.status_code == 200
    assert r.json() == {"transcript": "hello world"}
    (req,) = upstream.requests
    assert req.url.path == "/models/openai/whisper-tiny"
    assert req.content == AUDIO[1]
    assert req.headers["content-type"] == "audio/wav"
    assert req.headers["authorization"] == "Bearer hf-key"


def test_model_loading_503_is_retried_after_delay(client, configure, upstream, sleeps):
    configure(HUGGINGFACE_API_KEY="hf-key")
    upstream.on(
        "hf.test",
        lambda req: httpx.Response(503, headers={"retry-after": "2"}, json={"error": "loading"}),
        lambda req: httpx.Response(200, json={"text": "hello world"}),
    )

    r = client.post("/api/transcribe", files={"audio": AUDIO})

    assert r.status_code == 200
    assert r.json()["transcript"] == "hello world"
    assert sleeps == [2.0]
    assert len(upstream.requests) == 2
    assert upstream.requests[0].content == upstream.requests[1].content


def test_persistent_503_gives_up(client, configure, upstream, sleeps):
    configure(HUGGINGFACE_API_KEY="hf-key", ASR_MAX_ATTEMPTS=3)
    upstream.on("hf.test", lambda req: httpx.Response(503, headers={"retry-after": "1"}))

    r = client.post("/api/transcribe", files={"audio": AUDIO})

    assert r.status_code == 500
    assert "still loading" in r.json()["error"]
    assert len(upstream.requests) == 3
    assert sleeps == [1.0, 1.0]


def test_upstream_error_is_surfaced(client, configure, upstream):
    configure(HUGGINGFACE_API_KEY="hf-key")
    upstream.on("hf.test", lambda req: httpx.Response(400, text="unsupported audio"))

    r = client.post("/api/transcribe", files={"audio": AUDIO})

    assert r.status_code == 500
    assert r.json()["error"] == "Hugging Face API error: unsupported audio"


def test_webm_recording_labelled_as_video_is_forwarded(client, configure, upstream):
    configure(HUGGINGFACE_API_KEY="hf-key")
    upstream.on("hf.test", lambda req: httpx.Response(200, json={"text": "from webm"}))

    r = client.post("/api/transcribe", files={"audio": ("rec.webm", b"\x1aE\xdf\xa3webm", "video/webm")})

    assert r.status_code == 200
    assert r.json() == {"transcript": "from webm"}
    assert upstream.requests[0].headers["content-type"] == "video/webm"


def test_other_video_types_are_rejected(client, configure, upstream):
    configure(HUGGINGFACE_API_KEY="hf-key")
    r = client.post("/api/transcribe", files={"audio": ("clip.mp4", b"mp4", "video/mp4")})
    assert r.status_code == 400
    assert upstream.requests == []


def test_non_numeric_retry_after_falls_back_to_default_delay(client, configure, upstream, sleeps):
    configure(HUGGINGFACE_API_KEY="hf-key")
    upstream.on(
        "hf.test",
        lambda req: httpx.Response(503, headers={"retry-after": "nan"}),
        lambda req: httpx.Response(200, json={"text": "hello world"}),
    )

    r = client.post("/api/transcribe", files={"audio": AUDIO})

    assert r.status_code == 200
    assert r.json()["transcript"] == "hello world"
    assert sleeps == [10.0]


def _upload(content_type: str) -> UploadFile:
    return UploadFile(
        file=io.BytesIO(AUDIO[1]),
        filename=AUDIO[0],
        headers=Headers({"content-type": content_type}),
    )


def test_upload_is_closed_after_success(upstream):
    upstream.on("hf.test", lambda req: httpx.Response(200, json={"text": "hello world"}))
    audio = _upload("audio/wav")

    with httpx.Client(transport=httpx.MockTransport(upstream)) as http:
        result = transcription_router.transcribe(
            audio=audio, settings=make_settings(HUGGINGFACE_API_KEY="hf-key"), client=http
        )

    assert result == {"transcript": "hello world"}
    assert audio.file.closed


def test_upload_is_closed_after_failure(upstream):
    audio = _upload("text/plain")

    with httpx.Client(transport=httpx.MockTransport(upstream)) as http:
        with pytest.raises(InputValidationError):
            transcription_router.transcribe(audio=audio, settings=make_settings(), client=http)

    assert audio.file.closed
    assert upstream.requests == []


def test_upload_is_closed_when_upstream_fails(upstream):
    upstream.on("hf.test", lambda req: httpx.Response(500, text="boom"))
    audio = _upload("audio/wav")

    with httpx.Client(transport=httpx.MockTransport(upstream)) as http:
        with pytest.raises(TranscriptionError):
            transcription_router.transcribe(
                audio=audio, settings=make_settings(HUGGINGFACE_API_KEY="hf-key"), client=http
            )

    assert audio.file.closed
