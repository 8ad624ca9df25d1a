"""
Sidebar models mirroring the Docusaurus SidebarsConfig structure.
"""

from enum import Enum
from typing import Any, Iterator, Optional

from pydantic import BaseModel, Field


class SidebarItemType(str, Enum):
    """Sidebar item kinds."""

    DOC = "doc"
    CATEGORY = "category"
    LINK = "link"


class SidebarItem(BaseModel):
    """A doc, category or link entry."""

    type: SidebarItemType
    id: Optional[str] = Field(default=None, description="Doc id (doc items, category links)")
    label: Optional[str] = None
    href: Optional[str] = None
    items: list["SidebarItem"] = Field(default_factory=list)
    collapsed: Optional[bool] = None
    position: Optional[float] = Field(
        default=None, description="Ordering key of autogenerated items"
    )

    @property
    def display_label(self) -> str:
        return self.label or self.id or self.href or ""

    def to_config(self) -> Any:
        """Render in SidebarsConfig shape."""
        if self.type == SidebarItemType.DOC:
            if self.label:
                return {"type": "doc", "id": self.id, "label": self.label}
            return self.id
        if self.type == SidebarItemType.LINK:
            return {"type": "link", "label": self.label, "href": self.href}

        config: dict[str, Any] = {
            "type": "category",
            "label": self.label,
        }
        if self.id:
            config["link"] = {"type": "doc", "id": self.id}
        if self.collapsed is not None:
            config["collapsed"] = self.collapsed
        config["items"] = [item.to_config() for item in self.items]
        return config


class DocRef(BaseModel):
    """A reference to a doc id found while walking a sidebar."""

    doc_id: str
    sidebar: str
    trail: list[str] = Field(default_factory=list, description="Category labels above the ref")
    index: int = Field(..., description="0-based index within the containing item list")
    label: Optional[str] = None


class Sidebar(BaseModel):
    """A named, ordered sidebar."""

    name: str
    items: list[SidebarItem] = Field(default_factory=list)

    def iter_item_lists(self) -> Iterator[tuple[list[str], list[SidebarItem]]]:
        """Yield every item list (top level and categories) with its category trail."""
        stack: list[tuple[list[str], list[SidebarItem]]] = [([], self.items)]
        while stack:
            trail, items = stack.pop(0)
            yield trail, items
            for item in items:
                if item.type == SidebarItemType.CATEGORY:
                    stack.append((trail + [item.display_label], item.items))

    def iter_categories(self) -> Iterator[tuple[list[str], SidebarItem]]:
        for trail, items in self.iter_item_lists():
            for item in items:
                if item.type == SidebarItemType.CATEGORY:
                    yield trail, item


class SidebarDefinition(BaseModel):
    """All sidebars of a docs site."""

    sidebars: list[Sidebar] = Field(default_factory=list)
    source: Optional[str] = Field(default=None, description="File the definition came from")

    def iter_doc_refs(self) -> Iterator[DocRef]:
        """Yield every doc reference in definition order."""
        for sidebar in self.sidebars:
            for trail, items in sidebar.iter_item_lists():
                for index, item in enumerate(items):
                    if item.id is None:
                        continue
                    if item.type in (SidebarItemType.DOC, SidebarItemType.CATEGORY):
                        yield DocRef(
                            doc_id=item.id,
                            sidebar=sidebar.name,
                            trail=trail,
                            index=index,
                            label=item.label,
                        )

    def doc_ids(self) -> set[str]:
        return {ref.doc_id for ref in self.iter_doc_refs()}

    def to_config(self) -> dict[str, Any]:
        """Render in SidebarsConfig shape: {sidebar_name: [items...]}."""
        return {
            sidebar.name: [item.to_config() for item in sidebar.items]
            for sidebar in self.sidebars
        }


SidebarItem.model_rebuild()
