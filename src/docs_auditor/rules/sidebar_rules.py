"""
Sidebar rules: cross-check a sidebar definition against the docs on disk.

These rules only run when a sidebar definition is part of the audit context.
"""

from collections import Counter

from ..core.constants import Severity
from ..models.document import StubDocument
from ..models.findings import Finding
from ..models.sidebar import SidebarDefinition, SidebarItemType
from .base import AuditContext, CollectionRule

DEFAULT_SOURCE = "<sidebar>"


def _source(definition: SidebarDefinition) -> str:
    return definition.source or DEFAULT_SOURCE


def _where(sidebar: str, trail: list[str]) -> str:
    return " > ".join([sidebar, *trail])


class SidebarMissingDocRule(CollectionRule):
    rule_id = "sidebar-missing-doc"
    description = "The sidebar references a doc id that has no file"

    def check_collection(
        self, documents: list[StubDocument], context: AuditContext
    ) -> list[Finding]:
        if context.sidebar is None:
            return []
        known = {d.doc_id for d in documents}
        return [
            self.finding(
                _source(context.sidebar),
                f"Doc '{ref.doc_id}' referenced in {_where(ref.sidebar, ref.trail)} does not exist",
            )
            for ref in context.sidebar.iter_doc_refs()
            if ref.doc_id not in known
        ]


class SidebarOrphanDocRule(CollectionRule):
    rule_id = "sidebar-orphan-doc"
    description = "A document is not referenced by any sidebar"
    default_severity = Severity.WARNING

    def check_collection(
        self, documents: list[StubDocument], context: AuditContext
    ) -> list[Finding]:
        if context.sidebar is None:
            return []
        referenced = context.sidebar.doc_ids()
        return [
            self.finding(d.rel_path, f"Doc '{d.doc_id}' is not in any sidebar", line=1)
            for d in documents
            if d.doc_id not in referenced
        ]


class SidebarDuplicateEntryRule(CollectionRule):
    rule_id = "sidebar-duplicate-entry"
    description = "A doc id is referenced more than once in one sidebar"
    default_severity = Severity.WARNING

    def check_collection(
        self, documents: list[StubDocument], context: AuditContext
    ) -> list[Finding]:
        if context.sidebar is None:
            return []
        counts = Counter(
            (ref.sidebar, ref.doc_id) for ref in context.sidebar.iter_doc_refs()
        )
        return [
            self.finding(
                _source(context.sidebar),
                f"Doc '{doc_id}' appears {count} times in sidebar '{sidebar}'",
            )
            for (sidebar, doc_id), count in counts.items()
            if count > 1
        ]


class SidebarEmptyCategoryRule(CollectionRule):
    rule_id = "sidebar-empty-category"
    description = "A sidebar category has no items"
    default_severity = Severity.WARNING

    def check_collection(
        self, documents: list[StubDocument], context: AuditContext
    ) -> list[Finding]:
        if context.sidebar is None:
            return []
        findings = []
        for sidebar in context.sidebar.sidebars:
            for trail, category in sidebar.iter_categories():
                if not category.items and not category.id:
                    findings.append(
                        self.finding(
                            _source(context.sidebar),
                            f"Category '{category.display_label}' in "
                            f"{_where(sidebar.name, trail)} has no items",
                        )
                    )
        return findings


class SidebarOrderRule(CollectionRule):
    rule_id = "sidebar-order-mismatch"
    description = "Docs listed together are not in ascending sidebar_position order"
    default_severity = Severity.INFO

    def check_collection(
        self, documents: list[StubDocument], context: AuditContext
    ) -> list[Finding]:
        if context.sidebar is None:
            return []
        positions = {d.doc_id: d.sidebar_position for d in documents}
        findings = []
        for sidebar in context.sidebar.sidebars:
            for trail, items in sidebar.iter_item_lists():
                listed = [
                    (item.id, positions[item.id])
                    for item in items
                    if item.type == SidebarItemType.DOC
                    and item.id in positions
                    and positions[item.id] is not None
                ]
                values = [p for _, p in listed]
                if values != sorted(values):
                    order = ", ".join(f"{doc_id} ({p})" for doc_id, p in listed)
                    findings.append(
                        self.finding(
                            _source(context.sidebar),
                            f"Docs in {_where(sidebar.name, trail)} are listed out of "
                            f"sidebar_position order: {order}",
                        )
                    )
        return findings
