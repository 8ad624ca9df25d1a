"""Front-matter and Markdown parsing."""

from .front_matter import (
    FrontMatterBlock,
    locate_front_matter,
    parse_front_matter_yaml,
    split_front_matter,
)
from .markdown import MarkdownStructure, parse_heading, parse_markdown

__all__ = [
    "FrontMatterBlock",
    "MarkdownStructure",
    "locate_front_matter",
    "parse_front_matter_yaml",
    "parse_heading",
    "parse_markdown",
    "split_front_matter",
]
