from __future__ import annotations

import re

_TAG_RE = re.compile(r"<[^>]*>")

UNTITLED = "Untitled"
PREVIEW_LENGTH = 100


def strip_html(text: str) -> str:
    """Drop every ``<...>`` span; the rest of the text is kept verbatim."""
    return _TAG_RE.sub("", text or "")


def derive_title(text: str) -> str:
    first_line = strip_html(text).split("\n", 1)[0].strip()
    return first_line or UNTITLED


def derive_preview(text: str) -> str:
    """First PREVIEW_LENGTH characters of the plain text after the first line."""
    parts = strip_html(text).split("\n", 1)
    if len(parts) < 2:
        return ""
    return parts[1].strip()[:PREVIEW_LENGTH]
