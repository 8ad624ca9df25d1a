"""
Front-matter extraction.

A document has front-matter only when its very first line is the ``---``
delimiter; the block runs until the next ``---`` line and must hold a YAML
mapping:

    ---
    sidebar_position: 5
    title: Audit Logging
    ---
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import yaml

from ..core.exceptions import FrontMatterError

DELIMITER = "---"
BOM = "\ufeff"


@dataclass
class FrontMatterBlock:
    """Raw front-matter located in a document."""

    raw: str
    body: str
    body_start_line: int
    line_count: int


def _lines(text: str) -> list[str]:
    if text.startswith(BOM):
        text = text[len(BOM):]
    return text.split("\n")


def locate_front_matter(text: str) -> Optional[FrontMatterBlock]:
    """
    Find the front-matter block without parsing it.

    Returns:
        FrontMatterBlock, or None when the document has no front-matter

    Raises:
        FrontMatterError: If the opening delimiter is never closed
    """
    lines = _lines(text)
    if not lines or lines[0].rstrip() != DELIMITER:
        return None

    for index in range(1, len(lines)):
        if lines[index].rstrip() == DELIMITER:
            return FrontMatterBlock(
                raw="\n".join(lines[1:index]),
                body="\n".join(lines[index + 1:]),
                body_start_line=index + 2,
                line_count=index + 1,
            )

    raise FrontMatterError("Unterminated front-matter block (missing closing '---')", line=1)


def parse_front_matter_yaml(raw: str, first_line: int = 2) -> dict[str, Any]:
    """
    Parse the YAML inside a front-matter block.

    Args:
        raw: YAML text between the delimiters
        first_line: Source line number of the first YAML line

    Raises:
        FrontMatterError: On YAML syntax errors or when the YAML is not a mapping
    """
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        line = first_line + mark.line if mark is not None else first_line
        problem = getattr(e, "problem", None) or str(e)
        raise FrontMatterError(f"Invalid YAML in front-matter: {problem}", line=line) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise FrontMatterError(
            f"Front-matter must be a mapping, got {type(data).__name__}", line=first_line
        )
    return data


def split_front_matter(text: str) -> tuple[Optional[dict[str, Any]], str, int, int]:
    """
    Split a document into front-matter data and body.

    Returns:
        (data or None, body, body_start_line, front-matter line count)

    Raises:
        FrontMatterError: If the block is unterminated or its YAML is invalid
    """
    block = locate_front_matter(text)
    if block is None:
        body = text[len(BOM):] if text.startswith(BOM) else text
        return None, body, 1, 0

    data = parse_front_matter_yaml(block.raw)
    return data, block.body, block.body_start_line, block.line_count
