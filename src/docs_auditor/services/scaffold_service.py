"""
Scaffold service - creates stub pages for sidebar entries that have no file yet.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel

from ..core.config import Settings, get_settings
from ..core.constants import GENERIC_SECTION_PLACEHOLDER, SECTION_PLACEHOLDERS
from ..core.exceptions import ScaffoldError
from ..core.logging import get_logger, log_operation
from ..models.document import normalize_heading
from ..models.sidebar import SidebarDefinition
from ..utils.text import titleize
from .document_loader import DocumentLoader

logger = get_logger(__name__)


class ScaffoldEntry(BaseModel):
    """A stub page to be created."""

    doc_id: str
    path: Path
    title: str
    position: int


class ScaffoldService:
    """Plans and writes stub pages following the document template."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()

    def plan(self, definition: SidebarDefinition, docs_dir: Path) -> list[ScaffoldEntry]:
        """
        List the stub pages a sidebar definition needs.

        Args:
            definition: Sidebar definition referencing doc ids
            docs_dir: Docs root (may not exist yet)

        Returns:
            One entry per referenced doc id without a file, in sidebar order
        """
        docs_dir = Path(docs_dir)
        existing: set[str] = set()
        if docs_dir.is_dir():
            existing = {d.doc_id for d in DocumentLoader(docs_dir, self.settings).load_all()}

        entries: list[ScaffoldEntry] = []
        planned: set[str] = set()
        for ref in definition.iter_doc_refs():
            if ref.doc_id in existing or ref.doc_id in planned:
                continue
            path = docs_dir / f"{ref.doc_id}.md"
            if path.exists() or path.with_suffix(".mdx").exists():
                continue
            planned.add(ref.doc_id)
            entries.append(
                ScaffoldEntry(
                    doc_id=ref.doc_id,
                    path=path,
                    title=ref.label or titleize(ref.doc_id),
                    position=ref.index + 1,
                )
            )
        return entries

    def render_stub(self, title: str, position: int) -> str:
        """Render a stub page: front-matter plus the template with placeholder text."""
        front_matter = yaml.safe_dump(
            {"sidebar_position": position, "title": title},
            sort_keys=False,
            allow_unicode=True,
        )
        parts = [f"---\n{front_matter}---"]

        first_section = True
        for spec in self.settings.template:
            hashes = "#" * spec.level
            if spec.is_title:
                parts.append(f"{hashes} {title}")
                continue
            if not first_section:
                parts.append(self.settings.separator_marker)
            first_section = False
            parts.append(f"{hashes} {spec.text}")
            parts.append(self._placeholder(spec.text, title))

        return "\n\n".join(parts) + "\n"

    def _placeholder(self, section: str, title: str) -> str:
        template = SECTION_PLACEHOLDERS.get(normalize_heading(section), GENERIC_SECTION_PLACEHOLDER)
        return template.format(
            title=title,
            product=self.settings.product_name,
            section=section.lower(),
        )

    def apply(self, entries: list[ScaffoldEntry]) -> list[Path]:
        """
        Write the planned stub pages.

        Raises:
            ScaffoldError: If a target file already exists
        """
        written = []
        with log_operation(logger, "scaffold", count=len(entries)):
            for entry in entries:
                if entry.path.exists():
                    raise ScaffoldError(
                        f"Refusing to overwrite existing file {entry.path}", path=str(entry.path)
                    )
                entry.path.parent.mkdir(parents=True, exist_ok=True)
                entry.path.write_text(
                    self.render_stub(entry.title, entry.position), encoding="utf-8"
                )
                written.append(entry.path)
                logger.debug("Created stub", doc_id=entry.doc_id, path=str(entry.path))
        return written
