"""
Document loader - discovers doc pages and parses them into StubDocuments.
"""

from __future__ import annotations

from fnmatch import fnmatch
from pathlib import Path
from typing import Optional

from ..core.config import Settings, get_settings
from ..core.exceptions import DocumentNotFoundError, DocumentReadError, FrontMatterError
from ..core.logging import get_logger
from ..models.document import FrontMatter, StubDocument
from ..parsing.front_matter import BOM, locate_front_matter, parse_front_matter_yaml
from ..parsing.markdown import parse_markdown

logger = get_logger(__name__)


def matches_glob(rel_path: str, pattern: str) -> bool:
    """fnmatch with a leading '**/' also matching at the root."""
    if fnmatch(rel_path, pattern):
        return True
    return pattern.startswith("**/") and fnmatch(rel_path, pattern[3:])


def derive_doc_id(rel_path: str, front_matter: Optional[FrontMatter]) -> str:
    """Docusaurus doc id: path without extension, last segment replaced by front-matter id."""
    stem = rel_path.rsplit(".", 1)[0] if "." in rel_path.rpartition("/")[2] else rel_path
    if front_matter is not None and front_matter.doc_id:
        parent = stem.rpartition("/")[0]
        return f"{parent}/{front_matter.doc_id}" if parent else front_matter.doc_id
    return stem


def read_text(path: Path) -> str:
    """Read a UTF-8 file, turning decode and OS failures into DocumentReadError."""
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise DocumentReadError(str(path), f"not valid UTF-8 ({e.reason} at byte {e.start})") from e
    except OSError as e:
        raise DocumentReadError(str(path), e.strerror or str(e)) from e


class DocumentLoader:
    """
    Loads doc pages from a docs directory.

    Files or directories whose name starts with '_' are partials and never loaded.
    """

    def __init__(self, docs_dir: Path, settings: Optional[Settings] = None) -> None:
        """
        Initialize the loader.

        Args:
            docs_dir: Root directory of the docs
            settings: Settings providing include/exclude globs
        """
        self.docs_dir = Path(docs_dir)
        self.settings = settings or get_settings()

    def _check_root(self) -> None:
        if not self.docs_dir.is_dir():
            raise DocumentNotFoundError(
                str(self.docs_dir), message=f"Docs directory '{self.docs_dir}' not found"
            )

    def _is_excluded(self, rel_path: str) -> bool:
        if any(part.startswith("_") for part in rel_path.split("/")):
            return True
        return any(matches_glob(rel_path, pattern) for pattern in self.settings.exclude)

    def discover(self) -> list[Path]:
        """
        Find all document files.

        Returns:
            Paths sorted by their path relative to the docs dir

        Raises:
            DocumentNotFoundError: If the docs dir does not exist
        """
        self._check_root()

        found: dict[str, Path] = {}
        for pattern in self.settings.include:
            for path in self.docs_dir.glob(pattern):
                if not path.is_file():
                    continue
                rel_path = path.relative_to(self.docs_dir).as_posix()
                if self._is_excluded(rel_path):
                    continue
                found[rel_path] = path

        logger.debug("Discovered documents", docs_dir=str(self.docs_dir), count=len(found))
        return [found[key] for key in sorted(found)]

    def relative_path(self, path: Path) -> str:
        """Path relative to the docs dir, resolving only when the plain path is outside it."""
        try:
            return Path(path).relative_to(self.docs_dir).as_posix()
        except ValueError:
            return Path(path).resolve().relative_to(self.docs_dir.resolve()).as_posix()

    def load(self, path: Path, rel_path: Optional[str] = None) -> StubDocument:
        """
        Load and parse one document.

        Front-matter errors are recorded on the document instead of raised,
        so the rest of the page can still be checked.

        Args:
            path: File to load
            rel_path: Path relative to the docs dir, as returned by discovery

        Raises:
            DocumentNotFoundError: If the file does not exist
            DocumentReadError: If the file cannot be read as UTF-8
        """
        path = Path(path)
        if not path.is_file():
            raise DocumentNotFoundError(str(path))

        text = read_text(path)
        return self.parse(text, rel_path or self.relative_path(path), path)

    def parse(self, text: str, rel_path: str, path: Optional[Path] = None) -> StubDocument:
        """Build a StubDocument from source text."""
        text = text.removeprefix(BOM)
        front_matter: Optional[FrontMatter] = None
        error: Optional[FrontMatterError] = None
        body, body_start_line = text, 1

        try:
            block = locate_front_matter(text)
        except FrontMatterError as e:
            block, error = None, e

        if block is not None:
            body, body_start_line = block.body, block.body_start_line
            try:
                data = parse_front_matter_yaml(block.raw)
                front_matter = FrontMatter(data=data, line_count=block.line_count)
            except FrontMatterError as e:
                error = e

        if error is not None:
            logger.debug("Front-matter error", doc=rel_path, error=error.message, line=error.line)

        structure = parse_markdown(body, body_start_line)
        return StubDocument(
            path=path or self.docs_dir / rel_path,
            rel_path=rel_path,
            doc_id=derive_doc_id(rel_path, front_matter),
            front_matter=front_matter,
            front_matter_error=error.message if error else None,
            front_matter_error_line=error.line if error else None,
            body=body,
            body_start_line=body_start_line,
            headings=structure.headings,
            sections=structure.sections,
            code_fences=structure.code_fences,
        )

    def load_all(self) -> list[StubDocument]:
        """Load every discovered document."""
        documents = [
            self.load(path, self.relative_path(path)) for path in self.discover()
        ]
        logger.info("Loaded documents", docs_dir=str(self.docs_dir), count=len(documents))
        return documents
