"""
Sidebar service - loads sidebar definitions, builds autogenerated sidebars
and cross-checks them against the docs on disk.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import yaml

from ..core.config import Settings, get_settings
from ..core.constants import CATEGORY_FILE_NAMES
from ..core.exceptions import SidebarDefinitionError
from ..core.logging import get_logger
from ..models.document import StubDocument
from ..models.findings import AuditReport
from ..models.sidebar import Sidebar, SidebarDefinition, SidebarItem, SidebarItemType
from ..rules.registry import SIDEBAR_RULE_IDS
from .audit_service import AuditService
from .document_loader import read_text

logger = get_logger(__name__)

INDEX_STEMS = {"index", "readme"}


def _read_structured(path: Path) -> Any:
    """Read a JSON or YAML file."""
    suffix = path.suffix.lower()
    try:
        if suffix == ".json":
            return json.loads(read_text(path))
        if suffix in (".yaml", ".yml"):
            return yaml.safe_load(read_text(path))
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise SidebarDefinitionError(f"Could not parse {path.name}: {e}", source=str(path)) from e
    raise SidebarDefinitionError(
        f"Unsupported sidebar file type '{path.suffix}' (use .json, .yaml or .yml)",
        source=str(path),
    )


class SidebarParser:
    """Turns SidebarsConfig-shaped data into a SidebarDefinition."""

    def __init__(self, source: Optional[str] = None) -> None:
        self.source = source

    def _error(self, message: str, where: str) -> SidebarDefinitionError:
        return SidebarDefinitionError(f"{message} (at {where})", source=self.source)

    def parse(self, data: Any) -> SidebarDefinition:
        if not isinstance(data, dict) or not data:
            raise SidebarDefinitionError(
                "Sidebar definition must be a non-empty mapping of sidebar names to items",
                source=self.source,
            )

        sidebars = []
        for name, raw_items in data.items():
            sidebars.append(Sidebar(name=str(name), items=self._parse_items(raw_items, str(name))))
        return SidebarDefinition(sidebars=sidebars, source=self.source)

    def _parse_items(self, raw_items: Any, where: str) -> list[SidebarItem]:
        # Shorthand: {"Category label": [items...]}
        if isinstance(raw_items, dict) and "type" not in raw_items:
            return [
                SidebarItem(
                    type=SidebarItemType.CATEGORY,
                    label=str(label),
                    items=self._parse_items(items, f"{where} > {label}"),
                )
                for label, items in raw_items.items()
            ]
        if not isinstance(raw_items, list):
            raise self._error("Expected a list of sidebar items", where)
        return [self._parse_item(raw, f"{where}[{i}]") for i, raw in enumerate(raw_items)]

    def _parse_item(self, raw: Any, where: str) -> SidebarItem:
        if isinstance(raw, str):
            return SidebarItem(type=SidebarItemType.DOC, id=raw)
        if not isinstance(raw, dict):
            raise self._error(f"Invalid sidebar item {raw!r}", where)

        item_type = raw.get("type")
        if item_type is None:
            # Nested shorthand category
            items = self._parse_items(raw, where)
            if len(items) != 1:
                raise self._error("Shorthand category must have exactly one label", where)
            return items[0]

        if item_type in ("doc", "ref"):
            doc_id = raw.get("id")
            if not isinstance(doc_id, str) or not doc_id:
                raise self._error("Doc item needs a string 'id'", where)
            return SidebarItem(type=SidebarItemType.DOC, id=doc_id, label=raw.get("label"))

        if item_type == "category":
            label = raw.get("label")
            if not isinstance(label, str) or not label:
                raise self._error("Category needs a string 'label'", where)
            link = raw.get("link") or {}
            link_id = link.get("id") if isinstance(link, dict) and link.get("type") == "doc" else None
            collapsed = raw.get("collapsed")
            return SidebarItem(
                type=SidebarItemType.CATEGORY,
                label=label,
                id=link_id,
                collapsed=collapsed if isinstance(collapsed, bool) else None,
                items=self._parse_items(raw.get("items", []), f"{where} > {label}"),
            )

        if item_type == "link":
            href, label = raw.get("href"), raw.get("label")
            if not isinstance(href, str) or not isinstance(label, str):
                raise self._error("Link item needs string 'href' and 'label'", where)
            return SidebarItem(type=SidebarItemType.LINK, href=href, label=label)

        raise self._error(f"Unsupported sidebar item type '{item_type}'", where)


class SidebarService:
    """Sidebar loading, generation and checking."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()

    def load_definition(self, path: Path) -> SidebarDefinition:
        """
        Load a sidebar definition from YAML or JSON.

        Raises:
            SidebarDefinitionError: If the file is missing or malformed
        """
        path = Path(path)
        if not path.is_file():
            raise SidebarDefinitionError(f"Sidebar file not found: {path}", source=str(path))

        definition = SidebarParser(source=path.name).parse(_read_structured(path))
        logger.info(
            "Loaded sidebar definition",
            source=str(path),
            sidebars=len(definition.sidebars),
            docs=len(definition.doc_ids()),
        )
        return definition

    def build_autogenerated(
        self,
        documents: list[StubDocument],
        docs_dir: Path,
        name: str = "docs",
    ) -> SidebarDefinition:
        """
        Build a sidebar from the filesystem layout.

        Each directory becomes a category; items are ordered by position
        (sidebar_position or _category_ position), unpositioned items last,
        ties broken by name.
        """
        root = _DirectoryNode(name="")
        for document in documents:
            node = root
            parts = document.rel_path.split("/")
            for part in parts[:-1]:
                node = node.children.setdefault(part, _DirectoryNode(name=part))
            node.documents.append(document)

        items = self._build_items(root, Path(docs_dir), is_root=True).items
        return SidebarDefinition(sidebars=[Sidebar(name=name, items=items)])

    def _build_items(self, node: "_DirectoryNode", directory: Path, is_root: bool = False) -> SidebarItem:
        meta = self._read_category_meta(directory)
        category = SidebarItem(
            type=SidebarItemType.CATEGORY,
            label=meta.get("label") or node.name,
            position=_number(meta.get("position")),
            collapsed=meta.get("collapsed") if isinstance(meta.get("collapsed"), bool) else None,
        )

        entries: list[tuple[tuple[bool, float, str], SidebarItem]] = []
        for document in node.documents:
            file_name = document.rel_path.rpartition("/")[2]
            stem = file_name.rsplit(".", 1)[0]
            if not is_root and category.id is None and stem.lower() in INDEX_STEMS | {node.name.lower()}:
                category.id = document.doc_id
                continue
            item = SidebarItem(
                type=SidebarItemType.DOC, id=document.doc_id, position=document.sidebar_position
            )
            entries.append((_sort_key(item.position, file_name), item))

        for child_name, child in node.children.items():
            item = self._build_items(child, directory / child_name)
            entries.append((_sort_key(item.position, child_name), item))

        category.items = [item for _, item in sorted(entries, key=lambda e: e[0])]
        return category

    def _read_category_meta(self, directory: Path) -> dict[str, Any]:
        for file_name in CATEGORY_FILE_NAMES:
            path = directory / file_name
            if path.is_file():
                data = _read_structured(path)
                if data is None:
                    return {}
                if not isinstance(data, dict):
                    raise SidebarDefinitionError(
                        f"{file_name} must contain a mapping", source=str(path)
                    )
                return data
        return {}

    def check(self, documents: list[StubDocument], definition: SidebarDefinition) -> AuditReport:
        """Run only the sidebar rules."""
        service = AuditService(settings=self.settings)
        return service.audit_documents(documents, sidebar=definition, only=SIDEBAR_RULE_IDS)


class _DirectoryNode:
    def __init__(self, name: str) -> None:
        self.name = name
        self.documents: list[StubDocument] = []
        self.children: dict[str, _DirectoryNode] = {}


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _sort_key(position: Optional[float], name: str) -> tuple[bool, float, str]:
    return (position is None, position if position is not None else 0.0, name)
