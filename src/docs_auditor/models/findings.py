"""
Audit findings and report models.
"""

from datetime import datetime, timezone
from itertools import groupby
from typing import Optional

from pydantic import BaseModel, Field

from ..core.constants import Severity


class Finding(BaseModel):
    """A single rule violation."""

    rule_id: str = Field(..., description="Id of the rule that produced the finding")
    severity: Severity
    message: str
    path: str = Field(..., description="Document path relative to the docs root")
    line: Optional[int] = Field(default=None, description="1-based source line")
    fixable: bool = Field(default=False, description="Whether `docs-auditor fix` resolves it")

    def sort_key(self) -> tuple[str, int, str]:
        return (self.path, self.line or 0, self.rule_id)

    @property
    def location(self) -> str:
        return f"{self.path}:{self.line}" if self.line else self.path


class AuditReport(BaseModel):
    """Result of auditing a docs tree."""

    docs_dir: str
    documents_checked: int = 0
    findings: list[Finding] = Field(default_factory=list)
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def count(self, severity: Severity) -> int:
        return sum(1 for f in self.findings if f.severity == severity)

    @property
    def error_count(self) -> int:
        return self.count(Severity.ERROR)

    @property
    def warning_count(self) -> int:
        return self.count(Severity.WARNING)

    @property
    def info_count(self) -> int:
        return self.count(Severity.INFO)

    def sorted_findings(self) -> list[Finding]:
        return sorted(self.findings, key=Finding.sort_key)

    def by_path(self) -> dict[str, list[Finding]]:
        """Findings grouped by document path, in stable order."""
        return {
            path: list(items)
            for path, items in groupby(self.sorted_findings(), key=lambda f: f.path)
        }

    def rule_ids(self) -> set[str]:
        return {f.rule_id for f in self.findings}

    def has_failures(self, strict: bool = False) -> bool:
        """Errors always fail; warnings fail only in strict mode."""
        if self.error_count:
            return True
        return strict and self.warning_count > 0
