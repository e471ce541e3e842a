"""Upstream transcript service adapter: fetch captions for a video id and flatten them to text."""

import json
import re
from typing import Any

import httpx
import structlog
from opentelemetry import trace

from toolbox_site.config import settings

logger = structlog.get_logger()
tracer = trace.get_tracer(__name__)

FALLBACK_ERROR_MESSAGE = (
    "Transcript service is currently unavailable. "
    "Please try again later or copy captions directly from YouTube."
)

# Keys under which some upstream variants wrap the caption array.
_WRAPPER_KEYS = ("transcript", "captions", "segments")
_CODE_FENCE = re.compile(r"```[a-zA-Z]*")


class TranscriptUnavailableError(Exception):
    """Raised when the upstream service cannot provide a transcript."""


class TranscriptFormatError(TranscriptUnavailableError):
    """Raised when the upstream body matches none of the known response shapes."""


def _parse_json_body(raw: str) -> Any:
    """Parse raw as JSON, first as-is, then as text wrapped in markdown fences or prose."""
    try:
        return json.loads(raw)
    except (ValueError, RecursionError):
        pass

    unfenced = _CODE_FENCE.sub("", raw)
    start, end = unfenced.find("["), unfenced.rfind("]")
    if start != -1 and end > start:
        try:
            return json.loads(unfenced[start : end + 1])
        except (ValueError, RecursionError):
            pass
    raise TranscriptFormatError("Unable to parse transcript content")


def _caption_entries(parsed: Any) -> list:
    if isinstance(parsed, dict):
        for key in _WRAPPER_KEYS:
            if isinstance(parsed.get(key), list):
                return parsed[key]
    if isinstance(parsed, list):
        return parsed
    return []


def parse_transcript(raw: str) -> str:
    """Turn an upstream body into plain transcript text. Raises TranscriptUnavailableError."""
    entries = _caption_entries(_parse_json_body(raw))
    if not entries:
        raise TranscriptUnavailableError("No transcript available for this video.")

    texts = [
        entry["text"]
        for entry in entries
        if isinstance(entry, dict) and isinstance(entry.get("text"), str) and entry["text"]
    ]
    transcript = " ".join(texts).strip()
    if not transcript:
        raise TranscriptUnavailableError("Transcript returned empty content.")
    return transcript


def fetch_transcript(video_id: str) -> str:
    """Fetch the transcript for video_id from the upstream service. No retries."""
    params = {"format": "json", "lang": settings.TRANSCRIPT_LANG, "v": video_id}
    headers = {"User-Agent": settings.TRANSCRIPT_USER_AGENT}

    with tracer.start_as_current_span("fetch_transcript") as span:
        span.set_attribute("video.id", video_id)
        logger.info("transcript.fetch.start", video_id=video_id)
        try:
            with httpx.Client(timeout=settings.UPSTREAM_TIMEOUT_SECONDS) as client:
                response = client.get(
                    settings.TRANSCRIPT_UPSTREAM_URL, params=params, headers=headers
                )
        except httpx.HTTPError as e:
            logger.error("transcript.fetch.network_error", video_id=video_id, error=str(e))
            raise TranscriptUnavailableError(str(e) or FALLBACK_ERROR_MESSAGE) from e

        span.set_attribute("http.status_code", response.status_code)
        raw = response.text
        if response.status_code >= 400:
            reason = raw.strip() or f"Upstream responded with status {response.status_code}"
            logger.error(
                "transcript.fetch.upstream_error",
                video_id=video_id,
                status_code=response.status_code,
            )
            raise TranscriptUnavailableError(reason)

        try:
            transcript = parse_transcript(raw)
        except TranscriptFormatError:
            logger.error("transcript.fetch.unrecognized_format", video_id=video_id)
            raise
        except TranscriptUnavailableError as e:
            logger.warning("transcript.fetch.empty", video_id=video_id, error=str(e))
            raise

        logger.info("transcript.fetch.success", video_id=video_id, length=len(transcript))
        return transcript
