"""
Audit service - runs the registered rules over a docs tree.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..core.config import Settings, get_settings
from ..core.logging import LogContext, get_logger, log_operation
from ..models.document import StubDocument
from ..models.findings import AuditReport, Finding
from ..models.sidebar import SidebarDefinition
from ..rules.base import AuditContext
from ..rules.registry import RuleRegistry
from .document_loader import DocumentLoader

logger = get_logger(__name__)


class AuditService:
    """Audits doc pages against front-matter, template, completeness and sidebar rules."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        registry: Optional[RuleRegistry] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.registry = registry or RuleRegistry()

    def audit(
        self,
        docs_dir: Path,
        sidebar: Optional[SidebarDefinition] = None,
    ) -> AuditReport:
        """
        Audit every document under a docs directory.

        Args:
            docs_dir: Root directory of the docs
            sidebar: Optional sidebar definition to cross-check

        Returns:
            AuditReport with findings sorted by path and line

        Raises:
            UnknownRuleError: If the settings name an unknown rule
            DocumentNotFoundError: If the docs dir does not exist
            DocumentReadError: If a page cannot be read as UTF-8
        """
        with log_operation(logger, "audit", docs_dir=str(docs_dir)):
            self.registry.validate_settings(self.settings)
            documents = DocumentLoader(docs_dir, self.settings).load_all()
            report = self.audit_documents(documents, docs_dir=str(docs_dir), sidebar=sidebar)

        logger.info(
            "Audit complete",
            documents=report.documents_checked,
            errors=report.error_count,
            warnings=report.warning_count,
            infos=report.info_count,
        )
        return report

    def audit_documents(
        self,
        documents: list[StubDocument],
        docs_dir: str = "",
        sidebar: Optional[SidebarDefinition] = None,
        only: Optional[frozenset[str]] = None,
    ) -> AuditReport:
        """
        Run the enabled rules over already-loaded documents.

        Args:
            documents: Parsed documents
            docs_dir: Docs root recorded in the report
            sidebar: Optional sidebar definition to cross-check
            only: Restrict the run to these rule ids
        """
        context = AuditContext(settings=self.settings, sidebar=sidebar)
        findings: list[Finding] = []

        def selected(rules):
            return [r for r in rules if only is None or r.rule_id in only]

        document_rules = selected(self.registry.document_rules(self.settings))
        for document in documents:
            with LogContext(doc=document.rel_path):
                for rule in document_rules:
                    findings.extend(rule.check(document, context))

        for rule in selected(self.registry.collection_rules(self.settings)):
            findings.extend(rule.check_collection(documents, context))

        findings = [self._apply_override(f) for f in findings]
        return AuditReport(
            docs_dir=docs_dir,
            documents_checked=len(documents),
            findings=sorted(findings, key=Finding.sort_key),
        )

    def _apply_override(self, finding: Finding) -> Finding:
        override = self.settings.severity_overrides.get(finding.rule_id)
        if override is None or override == finding.severity:
            return finding
        return finding.model_copy(update={"severity": override})
