"""
Line-based Markdown structure extraction.

Only what the audit rules need is recognized: ATX headings, sections and
fenced code blocks. Heading-like lines inside fences are ignored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from ..models.document import CodeFence, Heading, Section

# ATX heading: up to 3 spaces, 1-6 hashes, optional closing hashes
ATX_HEADING = re.compile(r"^ {0,3}(#{1,6})(?:[ \t]+(.*?))?(?:[ \t]+#+)?[ \t]*$")

# Docusaurus explicit heading id, e.g. "## Overview {#overview}"
HEADING_ID = re.compile(r"\s*\{#[\w.:-]+\}\s*$")

FENCE_OPEN = re.compile(r"^( {0,3})(`{3,}|~{3,})(.*)$")


@dataclass
class MarkdownStructure:
    """Headings, sections and fences of a Markdown body."""

    headings: list[Heading] = field(default_factory=list)
    sections: list[Section] = field(default_factory=list)
    code_fences: list[CodeFence] = field(default_factory=list)


def _parse_info(marker: str, info: str) -> tuple[bool, str | None, str | None]:
    """Split a fence info string into (valid, lang, meta)."""
    info = info.strip()
    if marker.startswith("`") and "`" in info:
        return False, None, None
    if not info:
        return True, None, None
    lang, _, meta = info.partition(" ")
    return True, lang, meta.strip() or None


def _is_closing(line: str, fence: CodeFence) -> bool:
    match = FENCE_OPEN.match(line)
    if not match:
        return False
    marker, rest = match.group(2), match.group(3)
    return (
        marker[0] == fence.marker[0]
        and len(marker) >= len(fence.marker)
        and not rest.strip()
    )


def parse_heading(line: str) -> tuple[int, str] | None:
    """Parse an ATX heading line into (level, text)."""
    match = ATX_HEADING.match(line)
    if not match:
        return None
    text = HEADING_ID.sub("", match.group(2) or "").strip()
    return len(match.group(1)), text


def parse_markdown(body: str, start_line: int = 1) -> MarkdownStructure:
    """
    Extract headings, sections and code fences from a Markdown body.

    Args:
        body: Markdown text (front-matter already removed)
        start_line: Source line number of the first body line

    Returns:
        MarkdownStructure with 1-based source line numbers
    """
    structure = MarkdownStructure()
    lines = body.split("\n")
    open_fence: CodeFence | None = None
    heading_indexes: list[int] = []

    for index, raw_line in enumerate(lines):
        line = raw_line.rstrip("\r")
        number = start_line + index

        if open_fence is not None:
            if _is_closing(line, open_fence):
                open_fence.end_line = number
                open_fence = None
            continue

        fence_match = FENCE_OPEN.match(line)
        if fence_match:
            indent, marker, info = fence_match.groups()
            valid, lang, meta = _parse_info(marker, info)
            if valid:
                open_fence = CodeFence(line=number, indent=indent, marker=marker, lang=lang, meta=meta)
                structure.code_fences.append(open_fence)
                continue

        heading = parse_heading(line)
        if heading is not None:
            level, text = heading
            structure.headings.append(Heading(level=level, text=text, line=number))
            heading_indexes.append(index)

    structure.sections = _build_sections(lines, start_line, structure.headings, heading_indexes)
    return structure


def _build_sections(
    lines: list[str],
    start_line: int,
    headings: list[Heading],
    heading_indexes: list[int],
) -> list[Section]:
    sections = []
    for position, heading in enumerate(headings):
        begin = heading_indexes[position] + 1
        end = len(lines)
        for later_position in range(position + 1, len(headings)):
            if headings[later_position].level <= heading.level:
                end = heading_indexes[later_position]
                break

        content = [(start_line + i, lines[i].rstrip("\r")) for i in range(begin, end)]
        sections.append(Section(heading=heading, content_lines=content))
    return sections
