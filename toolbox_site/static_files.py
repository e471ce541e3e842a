"""Static file responder: request path -> file bytes + content type, confined to the site root.

Paths without an extension, or ending in ``.html``, are documents: when they are
missing from disk the default document is served instead (single-page-app style
catch-all). Every other missing path is a plain 404.
"""

import posixpath
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from urllib.parse import unquote

import structlog

logger = structlog.get_logger()

MIME_TYPES = {
    ".html": "text/html",
    ".css": "text/css",
    ".js": "application/javascript",
    ".json": "application/json",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
    ".txt": "text/plain",
    ".pdf": "application/pdf",
}
DEFAULT_CONTENT_TYPE = "application/octet-stream"
DOCUMENT_EXTENSION = ".html"


class ResourceKind(str, Enum):
    """How a miss on disk is handled for a requested path."""

    STATIC_ASSET = "static_asset"
    DOCUMENT = "document"


class StaticFileError(Exception):
    """Base class for static responder failures; status_code is the HTTP status to answer with."""

    status_code = 500
    public_message = "Server error"


class PathOutsideRootError(StaticFileError):
    """Raised when a request path resolves outside the static root."""

    status_code = 400
    public_message = "Bad request"


class StaticFileNotFoundError(StaticFileError):
    """Raised when a non-document asset does not exist."""

    status_code = 404
    public_message = "Not found"


class FallbackUnavailableError(StaticFileError):
    """Raised when the fallback document itself cannot be read."""


@dataclass(frozen=True)
class StaticResource:
    body: bytes
    content_type: str
    path: Path


def classify_extension(extension: str) -> ResourceKind:
    """Documents (no extension or .html) fall back to the default document; everything else 404s."""
    if extension.lower() in ("", DOCUMENT_EXTENSION):
        return ResourceKind.DOCUMENT
    return ResourceKind.STATIC_ASSET


def content_type_for(extension: str) -> str:
    return MIME_TYPES.get(extension.lower() or DOCUMENT_EXTENSION, DEFAULT_CONTENT_TYPE)


def normalize_request_path(raw_path: str) -> str:
    """Decode a request target into a root-relative path.

    Query and fragment are dropped, leading slashes removed, the result
    normalized and a single leading ``..`` segment stripped. Deeper escapes are
    left in place for resolve_request_path to reject.
    """
    path = raw_path.split("?", 1)[0].split("#", 1)[0]
    path = unquote(path or "/").replace("\\", "/").lstrip("/")
    path = posixpath.normpath(path) if path else ""
    if path in (".", ".."):
        return ""
    if path.startswith("../"):
        path = path[3:]
    return path


def resolve_request_path(root: Path, raw_path: str, default_document: str) -> Path:
    """Map raw_path onto a file under root (which must already be resolved).

    Raises PathOutsideRootError if the result escapes root.
    """
    relative = normalize_request_path(raw_path)
    if "\x00" in relative:
        logger.warning("static.nul_in_path", path=raw_path)
        raise PathOutsideRootError(raw_path)
    try:
        candidate = root / relative
        if candidate.is_dir():
            candidate = candidate / default_document
        resolved = candidate.resolve()
    except (OSError, ValueError) as e:
        logger.warning("static.unresolvable_path", path=raw_path, error=str(e))
        raise PathOutsideRootError(raw_path) from e

    if not resolved.is_relative_to(root):
        logger.warning("static.path_outside_root", path=raw_path, resolved=str(resolved))
        raise PathOutsideRootError(raw_path)
    return resolved


def load_static(root: Path, raw_path: str, default_document: str = "index.html") -> StaticResource:
    """Read the file raw_path names under root, falling back to the default document for documents."""
    root = root.resolve()
    path = resolve_request_path(root, raw_path, default_document)
    extension = path.suffix

    try:
        return StaticResource(path.read_bytes(), content_type_for(extension), path)
    except OSError as e:
        if classify_extension(extension) is ResourceKind.STATIC_ASSET:
            logger.info("static.not_found", path=raw_path)
            raise StaticFileNotFoundError(raw_path) from e

    fallback = root / default_document
    logger.info("static.fallback", path=raw_path, fallback=str(fallback))
    try:
        return StaticResource(fallback.read_bytes(), MIME_TYPES[DOCUMENT_EXTENSION], fallback)
    except OSError as e:
        logger.error("static.fallback_unavailable", fallback=str(fallback), error=str(e))
        raise FallbackUnavailableError(str(fallback)) from e
