"""
System-wide constants for docs-auditor.
"""

from enum import Enum


# =============================================================================
# Enums
# =============================================================================


class Severity(str, Enum):
    """Finding severities, most severe first."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        """Numeric rank (lower is more severe)."""
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.ERROR: 0,
    Severity.WARNING: 1,
    Severity.INFO: 2,
}


class OutputFormat(str, Enum):
    """Report output formats."""

    TEXT = "text"
    JSON = "json"


class LogFormat(str, Enum):
    """Log renderers."""

    CONSOLE = "console"
    JSON = "json"


# =============================================================================
# Document template
# =============================================================================

TITLE_PLACEHOLDER = "{title}"

DEFAULT_TEMPLATE_HEADINGS = [
    "# {title}",
    "## Overview",
    "## Key Components",
    "## Detailed Design and Specifications",
]

DEFAULT_REQUIRED_SECTIONS = ["Detailed Design and Specifications"]

DEFAULT_SEPARATOR_MARKER = "---"

DEFAULT_PLACEHOLDER_PATTERNS = [
    r"^this section will (?:cover|provide|describe|outline|detail|explain|document|include)\b",
    r"^(?:tbd|tba|todo|wip|coming soon)[.!]?$",
    r"^(?:content|details?) (?:to be|will be) added\b",
    r"^placeholder\b",
]

DEFAULT_PRODUCT_NAME = "Engineering AI Agent"

# Placeholder sentence written into scaffolded stubs, keyed by section name
SECTION_PLACEHOLDERS = {
    "overview": "This section will provide an overview of {title} in the {product} system.",
    "key components": "This section will describe the key components of {title}.",
    "detailed design and specifications": (
        "This section will cover detailed specifications for {title}."
    ),
}

GENERIC_SECTION_PLACEHOLDER = "This section will cover {section} for {title}."

# =============================================================================
# Discovery
# =============================================================================

DEFAULT_INCLUDE = ["**/*.md", "**/*.mdx"]
DEFAULT_EXCLUDE = ["**/node_modules/**"]

CONFIG_FILE_NAMES = [".docs-auditor.yaml", ".docs-auditor.yml"]
CATEGORY_FILE_NAMES = ["_category_.json", "_category_.yml", "_category_.yaml"]

# =============================================================================
# Code fences
# =============================================================================

DEFAULT_FENCE_LANGUAGE = "text"
EXAMPLE_META = "example"
SCRIPT_LANGUAGES = frozenset({"js", "javascript", "jsx", "ts", "typescript", "tsx"})

# =============================================================================
# Titles
# =============================================================================

TITLE_ACRONYMS = frozenset(
    {"ai", "api", "ci", "cd", "llm", "sre", "qa", "pm", "rd", "sa", "sd", "ui", "mdx", "sdk"}
)

# =============================================================================
# Exit codes
# =============================================================================

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130
