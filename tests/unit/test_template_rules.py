"""
Tests for template heading rules.
"""

import pytest

from docs_auditor.core.config import Settings
from docs_auditor.core.constants import Severity
from docs_auditor.rules.base import AuditContext
from docs_auditor.rules.template_rules import (
    SectionSeparatorRule,
    TemplateHeadingDuplicateRule,
    TemplateHeadingMissingRule,
    TemplateHeadingOrderRule,
    TemplateHeadingUnexpectedRule,
    TitleHeadingMismatchRule,
    match_template,
)

FRONT = "---\nsidebar_position: 1\ntitle: Intro\n---\n"


def page(*lines: str) -> str:
    return FRONT + "\n".join(lines) + "\n"


class TestMatchTemplate:
    """Tests for match_template."""

    def test_slots(self, parse_doc, settings):
        document = parse_doc(page("# Intro", "## Overview", "### Detail", "## Extra"))

        matches = match_template(document, settings)

        assert [(m.heading.text, m.slot) for m in matches] == [
            ("Intro", 0),
            ("Overview", 1),
            ("Extra", None),
        ]

    def test_case_and_whitespace_insensitive(self, parse_doc, settings):
        document = parse_doc(page("## key   COMPONENTS"))
        assert match_template(document, settings)[0].slot == 2


class TestTemplateHeadingMissingRule:
    """Tests for TemplateHeadingMissingRule."""

    def test_complete_document(self, parse_doc, context, complete_doc_text):
        assert TemplateHeadingMissingRule().check(parse_doc(complete_doc_text), context) == []

    def test_each_missing_heading_reported(self, parse_doc, context):
        document = parse_doc(page("# Intro", "## Overview", "text"))

        findings = TemplateHeadingMissingRule().check(document, context)

        assert [f.message for f in findings] == [
            "Missing template heading '## Key Components'",
            "Missing template heading '## Detailed Design and Specifications'",
        ]
        assert all(f.line == document.body_start_line for f in findings)

    def test_missing_title_heading(self, parse_doc, context):
        findings = TemplateHeadingMissingRule().check(parse_doc(page("## Overview")), context)
        assert "'# <title>'" in findings[0].message

    def test_wrong_level_counts_as_missing(self, parse_doc, context):
        document = parse_doc(page("# Intro", "### Overview", "## Key Components",
                                  "## Detailed Design and Specifications"))
        findings = TemplateHeadingMissingRule().check(document, context)
        assert [f.message for f in findings] == ["Missing template heading '## Overview'"]


class TestTemplateHeadingUnexpectedRule:
    """Tests for TemplateHeadingUnexpectedRule."""

    def test_extra_heading_at_template_depth(self, parse_doc, context):
        document = parse_doc(page("# Intro", "## Overview", "## Background", "### Fine"))

        findings = TemplateHeadingUnexpectedRule().check(document, context)

        assert len(findings) == 1
        assert findings[0].message == "Unexpected heading '## Background'"
        assert findings[0].line == 7

    def test_second_h1_is_a_duplicate_title_not_unexpected(self, parse_doc, context):
        document = parse_doc(page("# Intro", "# Another"))
        assert TemplateHeadingUnexpectedRule().check(document, context) == []
        assert len(TemplateHeadingDuplicateRule().check(document, context)) == 1


class TestTemplateHeadingDuplicateRule:
    """Tests for TemplateHeadingDuplicateRule."""

    def test_duplicate(self, parse_doc, context):
        document = parse_doc(page("# Intro", "## Overview", "a", "## Overview", "b"))

        findings = TemplateHeadingDuplicateRule().check(document, context)

        assert len(findings) == 1
        assert findings[0].line == 8
        assert "'## Overview'" in findings[0].message


class TestTemplateHeadingOrderRule:
    """Tests for TemplateHeadingOrderRule."""

    def test_in_order(self, parse_doc, context, complete_doc_text):
        assert TemplateHeadingOrderRule().check(parse_doc(complete_doc_text), context) == []

    def test_out_of_order_reports_once(self, parse_doc, context):
        document = parse_doc(page(
            "# Intro",
            "## Key Components",
            "## Overview",
            "## Detailed Design and Specifications",
        ))

        findings = TemplateHeadingOrderRule().check(document, context)

        assert len(findings) == 1
        assert findings[0].line == 7
        assert "expected [<title>, Overview, Key Components" in findings[0].message
        assert "found [Intro, Key Components, Overview" in findings[0].message

    def test_missing_headings_do_not_break_order(self, parse_doc, context):
        document = parse_doc(page("# Intro", "## Detailed Design and Specifications"))
        assert TemplateHeadingOrderRule().check(document, context) == []


class TestTitleHeadingMismatchRule:
    """Tests for TitleHeadingMismatchRule."""

    def test_mismatch(self, parse_doc, context):
        findings = TitleHeadingMismatchRule().check(parse_doc(page("# Introduction")), context)

        assert len(findings) == 1
        assert findings[0].severity == Severity.WARNING

    def test_match_ignores_case(self, parse_doc, context):
        assert TitleHeadingMismatchRule().check(parse_doc(page("# intro")), context) == []


class TestSectionSeparatorRule:
    """Tests for SectionSeparatorRule."""

    def test_separated(self, parse_doc, context, complete_doc_text):
        assert SectionSeparatorRule().check(parse_doc(complete_doc_text), context) == []

    def test_missing_separator(self, parse_doc, context):
        document = parse_doc(page(
            "# Intro",
            "## Overview",
            "text",
            "---",
            "## Key Components",
            "text",
            "## Detailed Design and Specifications",
            "text",
        ))

        findings = SectionSeparatorRule().check(document, context)

        assert len(findings) == 1
        assert findings[0].line == 11
        assert "'Key Components' and 'Detailed Design and Specifications'" in findings[0].message

    def test_marker_inside_code_fence_is_not_a_separator(self, parse_doc, context):
        document = parse_doc(page(
            "# Intro",
            "## Overview",
            "```yaml",
            "---",
            "key: value",
            "```",
            "## Key Components",
            "text",
        ))

        findings = SectionSeparatorRule().check(document, context)

        assert len(findings) == 1
        assert findings[0].line == 11
        assert "'Overview' and 'Key Components'" in findings[0].message

    def test_separator_inside_subsection_counts(self, parse_doc, context):
        document = parse_doc(page(
            "# Intro",
            "## Overview",
            "### Scope",
            "text",
            "---",
            "## Key Components",
        ))
        assert SectionSeparatorRule().check(document, context) == []

    def test_disabled_by_settings(self, parse_doc):
        context = AuditContext(settings=Settings(require_separators=False))
        document = parse_doc(page("# Intro", "## Overview", "## Key Components"))
        assert SectionSeparatorRule().check(document, context) == []

    @pytest.mark.parametrize("marker", ["***", "<hr />"])
    def test_custom_marker(self, parse_doc, marker):
        context = AuditContext(settings=Settings(separator_marker=marker))
        document = parse_doc(page("# Intro", "## Overview", marker, "## Key Components"))
        assert SectionSeparatorRule().check(document, context) == []
