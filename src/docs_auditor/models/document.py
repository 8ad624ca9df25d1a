"""
Document model for Markdown/MDX doc pages.
"""

from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

from ..core.constants import TITLE_PLACEHOLDER


def normalize_heading(text: str) -> str:
    """Collapse whitespace and lowercase heading text for comparison."""
    return " ".join(text.split()).lower()


class TemplateHeading(BaseModel):
    """One heading spec of the document template, e.g. '## Overview'."""

    level: int = Field(..., ge=1, le=6)
    text: str

    @property
    def is_title(self) -> bool:
        """Whether this spec stands for the page title."""
        return self.text == TITLE_PLACEHOLDER

    def matches(self, heading: "Heading") -> bool:
        """Check whether a document heading satisfies this spec."""
        if heading.level != self.level:
            return False
        if self.is_title:
            return True
        return normalize_heading(heading.text) == normalize_heading(self.text)

    def __str__(self) -> str:
        return f"{'#' * self.level} {self.text}"


class FrontMatter(BaseModel):
    """Parsed YAML front-matter block."""

    data: dict[str, Any] = Field(default_factory=dict)
    line_count: int = Field(default=0, description="Source lines including both delimiters")

    @property
    def title(self) -> Any:
        return self.data.get("title")

    @property
    def sidebar_position(self) -> Any:
        return self.data.get("sidebar_position")

    @property
    def doc_id(self) -> Optional[str]:
        value = self.data.get("id")
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None


class Heading(BaseModel):
    """An ATX heading."""

    level: int
    text: str
    line: int


class Section(BaseModel):
    """A heading and the lines up to the next heading of the same or higher level."""

    heading: Heading
    content_lines: list[tuple[int, str]] = Field(default_factory=list)

    @property
    def name(self) -> str:
        return self.heading.text

    @property
    def end_line(self) -> int:
        if self.content_lines:
            return self.content_lines[-1][0]
        return self.heading.line


class CodeFence(BaseModel):
    """Opening line of a fenced code block."""

    line: int
    indent: str = ""
    marker: str = "```"
    lang: Optional[str] = None
    meta: Optional[str] = None
    end_line: Optional[int] = None

    @property
    def is_closed(self) -> bool:
        return self.end_line is not None

    def opening(self) -> str:
        """Render the opening fence line."""
        info = " ".join(part for part in (self.lang, self.meta) if part)
        return f"{self.indent}{self.marker}{info}"


class StubDocument(BaseModel):
    """A doc page with its front-matter and Markdown structure."""

    path: Path
    rel_path: str
    doc_id: str
    front_matter: Optional[FrontMatter] = None
    front_matter_error: Optional[str] = None
    front_matter_error_line: Optional[int] = None
    body: str = ""
    body_start_line: int = 1
    headings: list[Heading] = Field(default_factory=list)
    sections: list[Section] = Field(default_factory=list)
    code_fences: list[CodeFence] = Field(default_factory=list)

    @property
    def directory(self) -> str:
        """POSIX parent directory relative to the docs root ('' at the root)."""
        parent = self.rel_path.rpartition("/")[0]
        return parent

    @property
    def title(self) -> Optional[str]:
        if self.front_matter is None:
            return None
        title = self.front_matter.title
        return title if isinstance(title, str) else None

    @property
    def sidebar_position(self) -> Optional[int]:
        """The sidebar position when it is a valid integer."""
        if self.front_matter is None:
            return None
        position = self.front_matter.sidebar_position
        if isinstance(position, bool) or not isinstance(position, int):
            return None
        return position

    def get_section(self, name: str) -> Optional[Section]:
        """Get the first section by heading text (case-insensitive)."""
        key = normalize_heading(name)
        for section in self.sections:
            if normalize_heading(section.name) == key:
                return section
        return None

    @property
    def last_line(self) -> int:
        return self.body_start_line + self.body.count("\n")

    def fenced_lines(self) -> set[int]:
        """Source line numbers inside code fences, delimiters included; unclosed fences run to the end."""
        lines: set[int] = set()
        for fence in self.code_fences:
            end = fence.end_line if fence.end_line is not None else self.last_line
            lines.update(range(fence.line, end + 1))
        return lines
