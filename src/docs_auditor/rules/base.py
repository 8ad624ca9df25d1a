"""
Base rule classes and the shared audit context.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..core.config import Settings
from ..core.constants import Severity
from ..models.document import StubDocument
from ..models.findings import Finding
from ..models.sidebar import SidebarDefinition


@dataclass
class AuditContext:
    """Everything a rule may consult besides the documents themselves."""

    settings: Settings
    sidebar: Optional[SidebarDefinition] = None


class Rule(ABC):
    """
    A named documentation check.

    Subclasses set the class attributes and implement either
    DocumentRule.check or CollectionRule.check_collection.
    """

    rule_id: str = ""
    description: str = ""
    default_severity: Severity = Severity.ERROR
    fixable: bool = False

    def finding(
        self,
        path: str,
        message: str,
        line: Optional[int] = None,
        severity: Optional[Severity] = None,
    ) -> Finding:
        """Build a finding attributed to this rule."""
        return Finding(
            rule_id=self.rule_id,
            severity=severity or self.default_severity,
            message=message,
            path=path,
            line=line,
            fixable=self.fixable,
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.rule_id}>"


class DocumentRule(Rule):
    """A rule evaluated on one document at a time."""

    @abstractmethod
    def check(self, document: StubDocument, context: AuditContext) -> list[Finding]:
        """Return findings for a single document."""


class CollectionRule(Rule):
    """A rule evaluated across all documents."""

    @abstractmethod
    def check_collection(
        self, documents: list[StubDocument], context: AuditContext
    ) -> list[Finding]:
        """Return findings for the whole document set."""
