"""
Rich rendering of audit reports, sidebars and fix results.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from .core.constants import Severity
from .models.findings import AuditReport
from .models.sidebar import SidebarDefinition, SidebarItem, SidebarItemType
from .rules.base import Rule
from .services.fence_fixer import FixResult

SEVERITY_STYLES = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "yellow",
    Severity.INFO: "cyan",
}


def render_report(report: AuditReport, console: Console, strict: bool = False) -> None:
    """Print findings grouped by document, then a summary panel."""
    for path, findings in report.by_path().items():
        table = Table(title=escape(path), title_justify="left", show_header=True, expand=False)
        table.add_column("Line", justify="right", no_wrap=True)
        table.add_column("Severity", no_wrap=True)
        table.add_column("Rule", no_wrap=True)
        table.add_column("Message", overflow="fold")
        for finding in findings:
            style = SEVERITY_STYLES[finding.severity]
            table.add_row(
                str(finding.line or ""),
                f"[{style}]{finding.severity.value}[/{style}]",
                finding.rule_id + (" *" if finding.fixable else ""),
                escape(finding.message),
            )
        console.print(table)

    failed = report.has_failures(strict)
    border = "red" if failed else "green"
    status = "[bold red]Failed[/bold red]" if failed else "[bold green]Passed[/bold green]"
    console.print(Panel(
        f"{status}\n\n"
        f"{report.documents_checked} document(s) checked\n"
        f"  • {report.error_count} error(s)\n"
        f"  • {report.warning_count} warning(s)\n"
        f"  • {report.info_count} info",
        title="Audit Summary",
        border_style=border,
    ))
    if any(f.fixable for f in report.findings):
        console.print("[dim]* fixable with `docs-auditor fix --write`[/dim]")


def _add_items(branch: Tree, items: list[SidebarItem]) -> None:
    for item in items:
        if item.type == SidebarItemType.CATEGORY:
            label = f"[bold]{escape(item.display_label)}[/bold]"
            if item.id:
                label += f" [dim]({escape(item.id)})[/dim]"
            _add_items(branch.add(label), item.items)
        elif item.type == SidebarItemType.LINK:
            branch.add(f"{escape(item.label or '')} [dim]→ {escape(item.href or '')}[/dim]")
        else:
            branch.add(escape(item.label or item.id or ""))


def render_sidebar(definition: SidebarDefinition, console: Console) -> None:
    """Print each sidebar as a tree."""
    for sidebar in definition.sidebars:
        tree = Tree(f"[bold blue]{escape(sidebar.name)}[/bold blue]")
        _add_items(tree, sidebar.items)
        console.print(tree)


def render_fix_results(results: list[FixResult], console: Console, write: bool) -> None:
    """Print fence changes per document."""
    if not results:
        console.print("[green]✓[/green] No code fences need fixing")
        return

    for result in results:
        console.print(f"[bold]{escape(result.path)}[/bold]")
        for change in result.changes:
            console.print(f"  {change.line}: [red]{escape(change.before.strip())}[/red] → "
                          f"[green]{escape(change.after.strip())}[/green]", highlight=False)

    total = sum(len(r.changes) for r in results)
    if write:
        console.print(f"[green]✓[/green] Fixed {total} fence(s) in {len(results)} document(s)")
    else:
        console.print(f"[yellow]{total} fence(s) in {len(results)} document(s) need fixing "
                      f"(re-run with --write)[/yellow]")


def render_rules(rules: list[Rule], console: Console) -> None:
    """Print the rule catalogue."""
    table = Table(title="Rules", show_header=True)
    table.add_column("Rule", no_wrap=True)
    table.add_column("Severity", no_wrap=True)
    table.add_column("Fixable", justify="center")
    table.add_column("Description", overflow="fold")
    for rule in rules:
        style = SEVERITY_STYLES[rule.default_severity]
        table.add_row(
            rule.rule_id,
            f"[{style}]{rule.default_severity.value}[/{style}]",
            "✓" if rule.fixable else "",
            escape(rule.description),
        )
    console.print(table)
