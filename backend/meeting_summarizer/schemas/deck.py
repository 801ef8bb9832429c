from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

MIN_TRANSCRIPT_CHARS = 50


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


class Slide(BaseModel):
    # Provider output is passed through untouched, so fields may be missing or
    # hold numbers and nulls; exports coerce them to text instead of rejecting.
    model_config = ConfigDict(extra="allow")

    title: str = ""
    points: list[str] = Field(default_factory=list)

    @field_validator("title", mode="before")
    @classmethod
    def _coerce_title(cls, value: Any) -> str:
        return _as_text(value)

    @field_validator("points", mode="before")
    @classmethod
    def _coerce_points(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if not isinstance(value, (list, tuple)):
            value = [value]
        return [_as_text(point) for point in value]


class SlideDeck(BaseModel):
    model_config = ConfigDict(extra="allow")

    summary: str = ""
    slides: list[Slide] = Field(default_factory=list)

    @field_validator("summary", mode="before")
    @classmethod
    def _coerce_summary(cls, value: Any) -> str:
        return _as_text(value)

    @field_validator("slides", mode="before")
    @classmethod
    def _coerce_slides(cls, value: Any) -> list[Any]:
        if not isinstance(value, (list, tuple)):
            return []
        return [item if isinstance(item, (dict, Slide)) else {"title": item} for item in value]


class SummarizeRequest(BaseModel):
    # Optional so a missing field reaches the handler and gets the "required" message.
    transcript: Optional[str] = None


class TranscriptResponse(BaseModel):
    transcript: str


class HealthResponse(BaseModel):
    status: str
    message: str
    providers: dict[str, bool] = Field(default_factory=dict)
