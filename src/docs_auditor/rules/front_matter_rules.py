"""
Front-matter rules: every page needs an integer sidebar_position and a title.
"""

from collections import defaultdict

from ..core.constants import Severity
from ..models.document import StubDocument
from ..models.findings import Finding
from .base import AuditContext, CollectionRule, DocumentRule


class FrontMatterMissingRule(DocumentRule):
    rule_id = "front-matter-missing"
    description = "Document has no front-matter block"

    def check(self, document: StubDocument, context: AuditContext) -> list[Finding]:
        if document.front_matter is None and document.front_matter_error is None:
            return [self.finding(document.rel_path, "Missing front-matter block", line=1)]
        return []


class FrontMatterInvalidRule(DocumentRule):
    rule_id = "front-matter-invalid"
    description = "Front-matter is unterminated, not valid YAML or not a mapping"

    def check(self, document: StubDocument, context: AuditContext) -> list[Finding]:
        if document.front_matter_error is None:
            return []
        return [
            self.finding(
                document.rel_path,
                document.front_matter_error,
                line=document.front_matter_error_line,
            )
        ]


class SidebarPositionRule(DocumentRule):
    rule_id = "sidebar-position-invalid"
    description = "sidebar_position is missing or not an integer"

    def check(self, document: StubDocument, context: AuditContext) -> list[Finding]:
        if document.front_matter is None:
            return []

        data = document.front_matter.data
        if "sidebar_position" not in data:
            return [self.finding(document.rel_path, "Front-matter has no 'sidebar_position'", line=1)]

        value = data["sidebar_position"]
        if isinstance(value, bool) or not isinstance(value, int):
            return [
                self.finding(
                    document.rel_path,
                    f"'sidebar_position' must be an integer, got {value!r}",
                    line=1,
                )
            ]
        return []


class TitleRule(DocumentRule):
    rule_id = "title-missing"
    description = "title is missing, not a string or blank"

    def check(self, document: StubDocument, context: AuditContext) -> list[Finding]:
        if document.front_matter is None:
            return []

        data = document.front_matter.data
        if "title" not in data:
            return [self.finding(document.rel_path, "Front-matter has no 'title'", line=1)]

        value = data["title"]
        if not isinstance(value, str):
            return [
                self.finding(document.rel_path, f"'title' must be a string, got {value!r}", line=1)
            ]
        if not value.strip():
            return [self.finding(document.rel_path, "'title' is empty", line=1)]
        return []


class DuplicatePositionRule(CollectionRule):
    rule_id = "sidebar-position-duplicate"
    description = "Two documents in one directory share a sidebar_position"
    default_severity = Severity.WARNING

    def check_collection(
        self, documents: list[StubDocument], context: AuditContext
    ) -> list[Finding]:
        groups: dict[tuple[str, int], list[StubDocument]] = defaultdict(list)
        for document in documents:
            position = document.sidebar_position
            if position is not None:
                groups[(document.directory, position)].append(document)

        findings = []
        for (directory, position), docs in sorted(groups.items()):
            if len(docs) < 2:
                continue
            paths = ", ".join(d.rel_path for d in docs)
            for document in docs:
                findings.append(
                    self.finding(
                        document.rel_path,
                        f"sidebar_position {position} is shared by: {paths}",
                        line=1,
                    )
                )
        return findings
