"""
Template rules: every page carries the template headings, once each, in order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.config import Settings
from ..core.constants import Severity
from ..models.document import Heading, StubDocument, TemplateHeading, normalize_heading
from ..models.findings import Finding
from .base import AuditContext, DocumentRule


@dataclass
class HeadingMatch:
    """A document heading at template depth and the template slot it fills."""

    heading: Heading
    slot: Optional[int]


def match_template(document: StubDocument, settings: Settings) -> list[HeadingMatch]:
    """Pair each heading at template depth with its template slot (None if unexpected)."""
    template = settings.template
    depth = settings.template_depth
    matches = []
    for heading in document.headings:
        if heading.level > depth:
            continue
        slot = next((i for i, spec in enumerate(template) if spec.matches(heading)), None)
        matches.append(HeadingMatch(heading=heading, slot=slot))
    return matches


def first_occurrences(matches: list[HeadingMatch]) -> list[HeadingMatch]:
    seen: set[int] = set()
    firsts = []
    for match in matches:
        if match.slot is None or match.slot in seen:
            continue
        seen.add(match.slot)
        firsts.append(match)
    return firsts


class TemplateHeadingMissingRule(DocumentRule):
    rule_id = "template-heading-missing"
    description = "An expected template heading is absent"

    def check(self, document: StubDocument, context: AuditContext) -> list[Finding]:
        found = {m.slot for m in match_template(document, context.settings)}
        findings = []
        for slot, spec in enumerate(context.settings.template):
            if slot not in found:
                findings.append(
                    self.finding(
                        document.rel_path,
                        f"Missing template heading '{_describe(spec)}'",
                        line=document.body_start_line,
                    )
                )
        return findings


class TemplateHeadingUnexpectedRule(DocumentRule):
    rule_id = "template-heading-unexpected"
    description = "A heading at template depth is not part of the template"

    def check(self, document: StubDocument, context: AuditContext) -> list[Finding]:
        return [
            self.finding(
                document.rel_path,
                f"Unexpected heading '{'#' * m.heading.level} {m.heading.text}'",
                line=m.heading.line,
            )
            for m in match_template(document, context.settings)
            if m.slot is None
        ]


class TemplateHeadingDuplicateRule(DocumentRule):
    rule_id = "template-heading-duplicate"
    description = "A template heading appears more than once"

    def check(self, document: StubDocument, context: AuditContext) -> list[Finding]:
        template = context.settings.template
        seen: set[int] = set()
        findings = []
        for match in match_template(document, context.settings):
            if match.slot is None:
                continue
            if match.slot in seen:
                findings.append(
                    self.finding(
                        document.rel_path,
                        f"Duplicate template heading '{_describe(template[match.slot])}'",
                        line=match.heading.line,
                    )
                )
            seen.add(match.slot)
        return findings


class TemplateHeadingOrderRule(DocumentRule):
    rule_id = "template-heading-order"
    description = "Template headings are out of order"

    def check(self, document: StubDocument, context: AuditContext) -> list[Finding]:
        firsts = first_occurrences(match_template(document, context.settings))
        slots = [m.slot for m in firsts]
        if slots == sorted(slots):
            return []

        template = context.settings.template
        offender = next(
            firsts[i] for i in range(1, len(firsts)) if firsts[i].slot < firsts[i - 1].slot
        )
        expected = ", ".join(
            "<title>" if template[s].is_title else template[s].text for s in sorted(slots)
        )
        actual = ", ".join(m.heading.text for m in firsts)
        return [
            self.finding(
                document.rel_path,
                f"Template headings out of order: expected [{expected}], found [{actual}]",
                line=offender.heading.line,
            )
        ]


class TitleHeadingMismatchRule(DocumentRule):
    rule_id = "title-heading-mismatch"
    description = "The title heading differs from the front-matter title"
    default_severity = Severity.WARNING

    def check(self, document: StubDocument, context: AuditContext) -> list[Finding]:
        title = document.title
        if not title or not title.strip():
            return []

        template = context.settings.template
        for match in match_template(document, context.settings):
            if match.slot is not None and template[match.slot].is_title:
                if normalize_heading(match.heading.text) != normalize_heading(title):
                    return [
                        self.finding(
                            document.rel_path,
                            f"Title heading '{match.heading.text}' does not match "
                            f"front-matter title '{title}'",
                            line=match.heading.line,
                        )
                    ]
                return []
        return []


class SectionSeparatorRule(DocumentRule):
    rule_id = "section-separator-missing"
    description = "Consecutive template sections are not separated by the marker line"
    default_severity = Severity.WARNING

    def check(self, document: StubDocument, context: AuditContext) -> list[Finding]:
        settings = context.settings
        if not settings.require_separators:
            return []

        template = settings.template
        sections = [
            m for m in first_occurrences(match_template(document, settings))
            if not template[m.slot].is_title
        ]
        lines = document.body.split("\n")
        marker = settings.separator_marker
        fenced = document.fenced_lines()

        findings = []
        for previous, current in zip(sections, sections[1:]):
            begin = previous.heading.line - document.body_start_line + 1
            end = current.heading.line - document.body_start_line
            between = [
                lines[index]
                for index in range(begin, end)
                if document.body_start_line + index not in fenced
            ]
            if not any(line.strip() == marker for line in between):
                findings.append(
                    self.finding(
                        document.rel_path,
                        f"No '{marker}' separator between '{previous.heading.text}' "
                        f"and '{current.heading.text}'",
                        line=current.heading.line,
                    )
                )
        return findings


def _describe(spec: TemplateHeading) -> str:
    if spec.is_title:
        return f"{'#' * spec.level} <title>"
    return str(spec)
