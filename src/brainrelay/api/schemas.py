"""Request and response bodies for the HTTP API."""

from typing import Any

from pydantic import BaseModel, Field


class ProcessRequest(BaseModel):
    """Body of POST /api/process.

    trigger_brand_analysis accepts any JSON value; the stage runs when the
    value is truthy (true, 2, "abc"), not for false, 0, "" or null.
    """

    brain_dump: str | None = Field(default=None, description="Raw user text")
    trigger_brand_analysis: Any = Field(
        default=False,
        description="Also run the brand analysis stage when truthy",
    )


class ProcessResponse(BaseModel):
    """Aggregate pipeline output. Skipped stages are null."""

    thread_id: str
    masterFileUpdate: str | None = None
    coreMessagingUpdate: str | None = None
    identityProfileUpdate: str | None = None
    socialContent: str | None = None
    contentFeedback: str | None = None
    brandAnalysis: str | None = None


class StageContentResponse(BaseModel):
    """Latest stored output of one stage for the requesting user."""

    stage: str
    user_id: str
    content: str


class ErrorResponse(BaseModel):
    error: str
