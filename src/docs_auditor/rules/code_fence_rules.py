"""
Code fence rules for MDX-safe code blocks.
"""

from ..core.constants import EXAMPLE_META, Severity
from ..models.document import StubDocument
from ..models.findings import Finding
from ..parsing.fences import needs_example_meta, needs_language
from .base import AuditContext, DocumentRule


class UnclosedFenceRule(DocumentRule):
    rule_id = "code-fence-unclosed"
    description = "A fenced code block is never closed"

    def check(self, document: StubDocument, context: AuditContext) -> list[Finding]:
        return [
            self.finding(
                document.rel_path,
                f"Code fence '{fence.marker}' opened here is never closed",
                line=fence.line,
            )
            for fence in document.code_fences
            if not fence.is_closed
        ]


class FenceLanguageRule(DocumentRule):
    rule_id = "code-fence-language"
    description = "A code fence has no language"
    default_severity = Severity.WARNING
    fixable = True

    def check(self, document: StubDocument, context: AuditContext) -> list[Finding]:
        return [
            self.finding(document.rel_path, "Code fence has no language", line=fence.line)
            for fence in document.code_fences
            if needs_language(fence)
        ]


class FenceExampleMetaRule(DocumentRule):
    rule_id = "code-fence-example-meta"
    description = f"JavaScript/TypeScript fences lack the '{EXAMPLE_META}' meta"
    default_severity = Severity.INFO
    fixable = True

    def check(self, document: StubDocument, context: AuditContext) -> list[Finding]:
        return [
            self.finding(
                document.rel_path,
                f"'{fence.lang}' code fence is not marked as '{EXAMPLE_META}'",
                line=fence.line,
            )
            for fence in document.code_fences
            if needs_example_meta(fence)
        ]
