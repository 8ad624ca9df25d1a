"""
Completeness rules: template sections must carry real content.
"""

from __future__ import annotations

import re

from ..core.config import Settings
from ..core.constants import Severity
from ..models.document import Section, StubDocument
from ..models.findings import Finding
from .base import AuditContext, DocumentRule
from .template_rules import first_occurrences, match_template

COMMENT_OPEN = "<!--"
COMMENT_CLOSE = "-->"
DECORATION = re.compile(r"^(?:[>*_+-]|\s)+|[*_\s]+$")


def template_sections(document: StubDocument, settings: Settings) -> list[Section]:
    """Sections of the non-title template headings, first occurrence only."""
    template = settings.template
    by_line = {section.heading.line: section for section in document.sections}
    return [
        by_line[m.heading.line]
        for m in first_occurrences(match_template(document, settings))
        if not template[m.slot].is_title and m.heading.line in by_line
    ]


def strip_comments(text: str, in_comment: bool) -> tuple[str, bool]:
    """
    Remove HTML comments from one line.

    Returns the remaining text and whether a comment is still open at the end of the line.
    """
    kept = []
    while text:
        if in_comment:
            end = text.find(COMMENT_CLOSE)
            if end == -1:
                return "".join(kept), True
            text = text[end + len(COMMENT_CLOSE):]
            in_comment = False
        else:
            start = text.find(COMMENT_OPEN)
            if start == -1:
                kept.append(text)
                break
            kept.append(text[:start])
            text = text[start + len(COMMENT_OPEN):]
            in_comment = True
    return "".join(kept), in_comment


def meaningful_lines(document: StubDocument, section: Section, marker: str) -> list[str]:
    """
    Content lines of a section that count as prose.

    Blank lines, separators, HTML comments (including multi-line ones) and
    sub-heading lines are dropped. Code fence lines are kept as-is.
    """
    headings = {heading.line for heading in document.headings}
    fenced = document.fenced_lines()
    lines = []
    in_comment = False
    for number, text in section.content_lines:
        if number in fenced:
            if text.strip():
                lines.append(text.strip())
            continue
        if number in headings:
            continue
        text, in_comment = strip_comments(text, in_comment)
        stripped = text.strip()
        if not stripped or stripped == marker:
            continue
        lines.append(stripped)
    return lines


def is_placeholder(line: str, patterns: list[re.Pattern[str]]) -> bool:
    text = DECORATION.sub("", line)
    return any(p.search(text) for p in patterns)


class EmptySectionRule(DocumentRule):
    rule_id = "section-empty"
    description = "A template section has no content"

    def check(self, document: StubDocument, context: AuditContext) -> list[Finding]:
        settings = context.settings
        findings = []
        for section in template_sections(document, settings):
            if meaningful_lines(document, section, settings.separator_marker):
                continue
            severity = (
                self.default_severity
                if settings.is_required_section(section.name)
                else Severity.WARNING
            )
            findings.append(
                self.finding(
                    document.rel_path,
                    f"Section '{section.name}' is empty",
                    line=section.heading.line,
                    severity=severity,
                )
            )
        return findings


class PlaceholderSectionRule(DocumentRule):
    rule_id = "section-placeholder"
    description = "A template section contains only placeholder text"
    default_severity = Severity.WARNING

    def check(self, document: StubDocument, context: AuditContext) -> list[Finding]:
        settings = context.settings
        patterns = settings.compiled_placeholders
        findings = []
        for section in template_sections(document, settings):
            lines = meaningful_lines(document, section, settings.separator_marker)
            if lines and all(is_placeholder(line, patterns) for line in lines):
                findings.append(
                    self.finding(
                        document.rel_path,
                        f"Section '{section.name}' contains only placeholder text (unfinished)",
                        line=section.heading.line,
                    )
                )
        return findings
