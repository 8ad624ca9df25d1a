"""Text helpers."""

from __future__ import annotations

import re

from ..core.constants import TITLE_ACRONYMS

_WORD_SPLIT = re.compile(r"[-_\s]+")


def titleize(doc_id: str, acronyms: frozenset[str] = TITLE_ACRONYMS) -> str:
    """
    Turn a doc id into a display title.

    Uses the last path segment, or its parent when the segment is 'index'.

    Example:
        titleize("security/audit-logging")  -> "Audit Logging"
        titleize("infrastructure/ci-cd")    -> "CI CD"
        titleize("overview/index")          -> "Overview"
    """
    segments = [s for s in doc_id.strip("/").split("/") if s]
    if not segments:
        return ""
    segment = segments[-1]
    if segment.lower() == "index" and len(segments) > 1:
        segment = segments[-2]

    words = [w for w in _WORD_SPLIT.split(segment) if w]
    return " ".join(w.upper() if w.lower() in acronyms else w.capitalize() for w in words)
