"""YouTube video id extraction."""

import re

# Tried in order; the first match wins. ASCII so \w is [A-Za-z0-9_].
_VIDEO_ID_PATTERNS = (
    re.compile(r"(?:v=)([\w-]{11})", re.ASCII),  # watch?v=
    re.compile(r"youtu\.be/([\w-]{11})", re.ASCII),  # short link
    re.compile(r"youtube\.com/embed/([\w-]{11})", re.ASCII),  # embed
)


class InvalidVideoUrlError(ValueError):
    """Raised when a submitted URL matches none of the known YouTube URL shapes."""


def extract_video_id(url: str | None) -> str | None:
    """Return the 11-character video id found in url, or None if no known URL shape matches."""
    if not url:
        return None
    for pattern in _VIDEO_ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None
