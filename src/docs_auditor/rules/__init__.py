"""Documentation rules and their registry."""

from .base import AuditContext, CollectionRule, DocumentRule, Rule
from .registry import DEFAULT_RULES, SIDEBAR_RULE_IDS, RuleRegistry

__all__ = [
    "AuditContext",
    "CollectionRule",
    "DEFAULT_RULES",
    "DocumentRule",
    "Rule",
    "RuleRegistry",
    "SIDEBAR_RULE_IDS",
]
