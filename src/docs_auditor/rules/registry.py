"""
Rule registry - manages rule registration and selection.
"""

from typing import Iterable, Optional

from ..core.config import Settings
from ..core.exceptions import ConfigurationError, UnknownRuleError
from ..core.logging import get_logger
from .base import CollectionRule, DocumentRule, Rule
from .code_fence_rules import FenceExampleMetaRule, FenceLanguageRule, UnclosedFenceRule
from .completeness_rules import EmptySectionRule, PlaceholderSectionRule
from .front_matter_rules import (
    DuplicatePositionRule,
    FrontMatterInvalidRule,
    FrontMatterMissingRule,
    SidebarPositionRule,
    TitleRule,
)
from .sidebar_rules import (
    SidebarDuplicateEntryRule,
    SidebarEmptyCategoryRule,
    SidebarMissingDocRule,
    SidebarOrderRule,
    SidebarOrphanDocRule,
)
from .template_rules import (
    SectionSeparatorRule,
    TemplateHeadingDuplicateRule,
    TemplateHeadingMissingRule,
    TemplateHeadingOrderRule,
    TemplateHeadingUnexpectedRule,
    TitleHeadingMismatchRule,
)

logger = get_logger(__name__)

DEFAULT_RULES: list[type[Rule]] = [
    FrontMatterMissingRule,
    FrontMatterInvalidRule,
    SidebarPositionRule,
    TitleRule,
    DuplicatePositionRule,
    TemplateHeadingMissingRule,
    TemplateHeadingUnexpectedRule,
    TemplateHeadingDuplicateRule,
    TemplateHeadingOrderRule,
    TitleHeadingMismatchRule,
    SectionSeparatorRule,
    EmptySectionRule,
    PlaceholderSectionRule,
    UnclosedFenceRule,
    FenceLanguageRule,
    FenceExampleMetaRule,
    SidebarMissingDocRule,
    SidebarOrphanDocRule,
    SidebarDuplicateEntryRule,
    SidebarEmptyCategoryRule,
    SidebarOrderRule,
]

SIDEBAR_RULE_IDS = frozenset(
    rule.rule_id
    for rule in (
        SidebarMissingDocRule,
        SidebarOrphanDocRule,
        SidebarDuplicateEntryRule,
        SidebarEmptyCategoryRule,
        SidebarOrderRule,
    )
)


class RuleRegistry:
    """
    Central registry of documentation rules.

    Rules are kept in registration order, which is also the order they run in.
    """

    def __init__(self, rules: Optional[Iterable[Rule]] = None) -> None:
        """
        Initialize the registry.

        Args:
            rules: Rule instances to register (defaults to DEFAULT_RULES)
        """
        self._rules: dict[str, Rule] = {}
        for rule in rules if rules is not None else (cls() for cls in DEFAULT_RULES):
            self.register(rule)

    def register(self, rule: Rule) -> None:
        """
        Register a rule.

        Raises:
            ConfigurationError: If the rule has no id or the id is taken
        """
        if not rule.rule_id:
            raise ConfigurationError(f"Rule {type(rule).__name__} has no rule_id")
        if rule.rule_id in self._rules:
            raise ConfigurationError(
                f"Rule '{rule.rule_id}' is already registered",
                details={"rule_id": rule.rule_id},
            )
        self._rules[rule.rule_id] = rule
        logger.debug("Registered rule", rule_id=rule.rule_id)

    def get(self, rule_id: str) -> Rule:
        """
        Get a rule by id.

        Raises:
            UnknownRuleError: If no rule has that id
        """
        try:
            return self._rules[rule_id]
        except KeyError:
            raise UnknownRuleError(rule_id) from None

    def __contains__(self, rule_id: str) -> bool:
        return rule_id in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def all_rules(self) -> list[Rule]:
        return list(self._rules.values())

    def validate_settings(self, settings: Settings) -> None:
        """
        Check that every rule id named in the settings exists.

        Raises:
            UnknownRuleError: For the first unknown id
        """
        for rule_id in [*settings.disabled_rules, *settings.severity_overrides]:
            if rule_id not in self._rules:
                raise UnknownRuleError(rule_id)

    def enabled_rules(self, settings: Settings) -> list[Rule]:
        """Registered rules minus the disabled ones."""
        self.validate_settings(settings)
        disabled = set(settings.disabled_rules)
        return [rule for rule in self._rules.values() if rule.rule_id not in disabled]

    def document_rules(self, settings: Settings) -> list[DocumentRule]:
        return [r for r in self.enabled_rules(settings) if isinstance(r, DocumentRule)]

    def collection_rules(self, settings: Settings) -> list[CollectionRule]:
        return [r for r in self.enabled_rules(settings) if isinstance(r, CollectionRule)]
