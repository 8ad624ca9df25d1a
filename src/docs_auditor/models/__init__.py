"""Data models for docs-auditor."""

from .document import (
    CodeFence,
    FrontMatter,
    Heading,
    Section,
    StubDocument,
    TemplateHeading,
    normalize_heading,
)
from .findings import AuditReport, Finding
from .sidebar import DocRef, Sidebar, SidebarDefinition, SidebarItem, SidebarItemType

__all__ = [
    "AuditReport",
    "CodeFence",
    "DocRef",
    "Finding",
    "FrontMatter",
    "Heading",
    "Section",
    "Sidebar",
    "SidebarDefinition",
    "SidebarItem",
    "SidebarItemType",
    "StubDocument",
    "TemplateHeading",
    "normalize_heading",
]
