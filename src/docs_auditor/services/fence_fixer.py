"""
Fence fixer - rewrites code fence openings so MDX treats them as examples.

Only opening fence lines change; fence content, closing fences and
front-matter are left untouched.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from ..core.config import Settings, get_settings
from ..core.logging import get_logger
from ..parsing.fences import normalize_fence
from ..parsing.front_matter import BOM
from .document_loader import DocumentLoader, read_text

logger = get_logger(__name__)


class FenceChange(BaseModel):
    """One rewritten fence opening."""

    line: int
    before: str
    after: str


class FixResult(BaseModel):
    """Fixes for one document."""

    path: str
    changes: list[FenceChange] = Field(default_factory=list)
    written: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.changes)


class FenceFixer:
    """Applies code fence normalization to documents."""

    def __init__(self, docs_dir: Path, settings: Optional[Settings] = None) -> None:
        self.docs_dir = Path(docs_dir)
        self.settings = settings or get_settings()
        self.loader = DocumentLoader(self.docs_dir, self.settings)

    def fix_text(self, text: str, rel_path: str = "") -> tuple[str, list[FenceChange]]:
        """
        Normalize every fence opening in a document's text.

        Returns:
            (new text, list of changes)
        """
        has_bom = text.startswith(BOM)
        source = text.removeprefix(BOM)
        document = self.loader.parse(source, rel_path or "<text>")
        lines = source.split("\n")

        changes = []
        for fence in document.code_fences:
            fixed = normalize_fence(fence)
            before, after = fence.opening(), fixed.opening()
            if before == after:
                continue
            index = fence.line - 1
            ending = "\r" if lines[index].endswith("\r") else ""
            lines[index] = after + ending
            changes.append(FenceChange(line=fence.line, before=before, after=after))

        new_text = "\n".join(lines)
        return (BOM + new_text if has_bom else new_text), changes

    def fix_file(self, path: Path, write: bool = False) -> FixResult:
        """Fix one file, writing it back only when asked."""
        path = Path(path)
        rel_path = self.loader.relative_path(path)
        text = read_text(path)
        new_text, changes = self.fix_text(text, rel_path)

        result = FixResult(path=rel_path, changes=changes)
        if changes and write:
            path.write_text(new_text, encoding="utf-8")
            result.written = True
            logger.info("Fixed code fences", doc=rel_path, changes=len(changes))
        return result

    def fix_all(self, write: bool = False) -> list[FixResult]:
        """Fix every discovered document; returns only documents with changes."""
        results = [self.fix_file(path, write=write) for path in self.loader.discover()]
        changed = [r for r in results if r.changed]
        logger.info(
            "Fence fix complete",
            documents=len(results),
            changed=len(changed),
            write=write,
        )
        return changed
