"""FastAPI app: YouTube transcript proxy plus the static site catch-all."""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool
from starlette.types import Scope

from toolbox_site.body_limit import BodySizeLimitMiddleware
from toolbox_site.config import settings
from toolbox_site.logging_config import setup_logging
from toolbox_site.schemas import ErrorResponse, TranscriptRequest, TranscriptResponse
from toolbox_site.static_files import StaticFileError, load_static
from toolbox_site.tracing import setup_tracing
from toolbox_site.transcript import (
    FALLBACK_ERROR_MESSAGE,
    TranscriptUnavailableError,
    fetch_transcript,
)
from toolbox_site.youtube import InvalidVideoUrlError, extract_video_id

SERVICE_NAME = "toolbox-site"
TRANSCRIPT_ROUTE = "/api/youtube-transcript"
# Everything except a transcript POST is answered from the static root.
STATIC_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _configure_observability() -> None:
    setup_logging(service_name=SERVICE_NAME, environment=settings.ENV, level=settings.LOG_LEVEL)
    setup_tracing(
        service_name=SERVICE_NAME,
        environment=settings.ENV,
        endpoint=settings.OTEL_EXPORTER_OTLP_ENDPOINT,
    )


_configure_observability()

logger = structlog.get_logger()

# Every GET path belongs to the static site, so the generated docs routes stay off.
app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)
app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.MAX_BODY_BYTES)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@app.exception_handler(ValidationError)
def validation_exception_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Return 400 for bodies that are not JSON objects with a string url."""
    logger.info("transcript.invalid_payload", path=request.url.path, errors=exc.error_count())
    return _error(400, "Invalid request payload")


@app.exception_handler(InvalidVideoUrlError)
def invalid_video_url_handler(_request: Request, exc: InvalidVideoUrlError) -> JSONResponse:
    logger.info("transcript.invalid_url", url=str(exc))
    return _error(400, "Invalid YouTube URL")


@app.exception_handler(TranscriptUnavailableError)
def transcript_unavailable_handler(_request: Request, exc: TranscriptUnavailableError) -> JSONResponse:
    """Upstream failures surface as 502 with the upstream reason when there is one."""
    return _error(502, str(exc) or FALLBACK_ERROR_MESSAGE)


@app.exception_handler(StaticFileError)
def static_file_error_handler(_request: Request, exc: StaticFileError) -> PlainTextResponse:
    return PlainTextResponse(exc.public_message, status_code=exc.status_code)


@app.post(TRANSCRIPT_ROUTE + "{suffix:path}")
async def youtube_transcript(request: Request, suffix: str) -> TranscriptResponse:
    """Extract the video id from the posted url and return the upstream transcript as plain text.

    Matches any path starting with the transcript route. The body is parsed as
    JSON whatever Content-Type the client declares.
    """
    body = TranscriptRequest.model_validate_json(await request.body())
    video_id = extract_video_id(body.url)
    if not video_id:
        raise InvalidVideoUrlError(body.url)
    logger.info("transcript.request", video_id=video_id)
    transcript = await run_in_threadpool(fetch_transcript, video_id)
    return TranscriptResponse(transcript=transcript)


def request_target(scope: Scope) -> str:
    """Undecoded request path; raw bytes that are not valid UTF-8 survive as surrogates."""
    raw_path = scope.get("raw_path") or scope["path"].encode("utf-8", "surrogateescape")
    return raw_path.decode("utf-8", "surrogateescape")


@app.api_route("/{path:path}", methods=STATIC_METHODS, include_in_schema=False)
def static_site(request: Request) -> Response:
    """Serve a file from the static root; see static_files.load_static for the fallback rules."""
    resource = load_static(
        settings.static_root_path(),
        request_target(request.scope),
        settings.DEFAULT_DOCUMENT,
    )
    return Response(content=resource.body, media_type=resource.content_type)
