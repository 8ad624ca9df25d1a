"""
Custom exception hierarchy for docs-auditor.
Provides structured errors that the CLI can render and map to exit codes.
"""

from typing import Any, Optional


class DocsAuditorError(Exception):
    """Base exception for all docs-auditor errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for JSON output."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
            }
        }


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(DocsAuditorError):
    """Error in auditor configuration."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(
            message=message,
            code="CONFIGURATION_ERROR",
            details=details,
        )


class UnknownRuleError(ConfigurationError):
    """A configured rule id is not registered."""

    def __init__(self, rule_id: str) -> None:
        super().__init__(f"Unknown rule '{rule_id}'", details={"rule_id": rule_id})
        self.code = "UNKNOWN_RULE"


# =============================================================================
# Input Errors
# =============================================================================


class DocumentNotFoundError(DocsAuditorError):
    """Docs directory or document not found."""

    def __init__(self, path: str, message: Optional[str] = None) -> None:
        super().__init__(
            message=message or f"Path '{path}' not found",
            code="DOCUMENT_NOT_FOUND",
            details={"path": path},
        )


class DocumentReadError(DocsAuditorError):
    """A file exists but could not be read as UTF-8 text."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            message=f"Could not read '{path}': {reason}",
            code="DOCUMENT_READ_ERROR",
            details={"path": path, "reason": reason},
        )
        self.path = path


class FrontMatterError(DocsAuditorError):
    """Front-matter block could not be parsed."""

    def __init__(self, message: str, line: Optional[int] = None) -> None:
        super().__init__(
            message=message,
            code="FRONT_MATTER_ERROR",
            details={"line": line} if line is not None else {},
        )
        self.line = line


class SidebarDefinitionError(DocsAuditorError):
    """Sidebar definition file is malformed."""

    def __init__(self, message: str, source: Optional[str] = None) -> None:
        super().__init__(
            message=message,
            code="SIDEBAR_DEFINITION_ERROR",
            details={"source": source} if source else {},
        )


class ScaffoldError(DocsAuditorError):
    """Stub scaffolding failed."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(
            message=message,
            code="SCAFFOLD_ERROR",
            details={"path": path} if path else {},
        )
