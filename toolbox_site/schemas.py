"""Pydantic request/response schemas."""

from pydantic import BaseModel


class TranscriptRequest(BaseModel):
    """Request body for POST /api/youtube-transcript."""

    url: str


class TranscriptResponse(BaseModel):
    transcript: str


class ErrorResponse(BaseModel):
    error: str
