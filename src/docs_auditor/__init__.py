"""
docs-auditor

Audits Docusaurus doc pages: front-matter, template headings, section
completeness, code fences and sidebar consistency.
"""

from .core.config import Settings, get_settings, load_settings
from .core.exceptions import DocsAuditorError
from .models.findings import AuditReport, Finding
from .services.audit_service import AuditService
from .services.fence_fixer import FenceFixer
from .services.scaffold_service import ScaffoldService
from .services.sidebar_service import SidebarService

__version__ = "0.1.0"

__all__ = [
    "AuditReport",
    "AuditService",
    "DocsAuditorError",
    "FenceFixer",
    "Finding",
    "ScaffoldService",
    "Settings",
    "SidebarService",
    "get_settings",
    "load_settings",
]
