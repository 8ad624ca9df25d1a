"""
docs-auditor - Main Entry Point

Command-line interface for auditing Docusaurus doc pages: front-matter,
template headings, unfinished sections, code fences and sidebars.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

import yaml
from rich.console import Console
from rich.markup import escape

from .core.config import Settings, load_settings
from .core.constants import (
    EXIT_FINDINGS,
    EXIT_INTERRUPTED,
    EXIT_OK,
    EXIT_USAGE,
    OutputFormat,
)
from .core.exceptions import DocsAuditorError
from .core.logging import get_logger, setup_logging
from .models.findings import AuditReport
from .reporting import render_fix_results, render_report, render_rules, render_sidebar
from .rules.registry import RuleRegistry
from .services.audit_service import AuditService
from .services.document_loader import DocumentLoader
from .services.fence_fixer import FenceFixer
from .services.scaffold_service import ScaffoldService
from .services.sidebar_service import SidebarService

console = Console()
err_console = Console(stderr=True)
logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="docs-auditor",
        description="Audit Docusaurus doc pages for front-matter, template and completeness issues",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Lint every page under docs/
  docs-auditor lint docs

  # Lint and cross-check a sidebar, failing on warnings too
  docs-auditor lint docs --sidebar sidebars.yaml --strict

  # Show the sidebar Docusaurus would autogenerate
  docs-auditor sidebar show docs --format yaml

  # Give every code fence a language and mark script fences as examples
  docs-auditor fix docs --write

  # Create stub pages for sidebar entries that have no file yet
  docs-auditor scaffold docs --sidebar sidebars.yaml
        """
    )

    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Path to a YAML config file (default: .docs-auditor.yaml in the docs dir or cwd)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="count",
        default=0,
        help="Increase verbosity (use -vv for debug)"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log errors"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # lint
    lint = subparsers.add_parser("lint", help="Audit doc pages")
    lint.add_argument("docs_dir", type=Path, help="Docs root directory")
    lint.add_argument("--sidebar", type=Path, help="Sidebar definition (YAML/JSON) to cross-check")
    lint.add_argument(
        "--format",
        choices=[f.value for f in OutputFormat],
        default=OutputFormat.TEXT.value,
        help="Output format (default: text)"
    )
    lint.add_argument("--strict", action="store_true", help="Fail on warnings as well as errors")
    lint.add_argument(
        "--disable",
        action="append",
        default=[],
        metavar="RULE",
        help="Disable a rule (repeatable)"
    )

    # sidebar
    sidebar = subparsers.add_parser("sidebar", help="Sidebar tools")
    sidebar_commands = sidebar.add_subparsers(dest="sidebar_command", required=True)

    show = sidebar_commands.add_parser("show", help="Show the autogenerated sidebar")
    show.add_argument("docs_dir", type=Path, help="Docs root directory")
    show.add_argument("--name", default="docs", help="Sidebar name (default: docs)")
    show.add_argument(
        "--format",
        choices=["tree", "json", "yaml"],
        default="tree",
        help="Output format (default: tree)"
    )

    check = sidebar_commands.add_parser("check", help="Cross-check a sidebar definition")
    check.add_argument("docs_dir", type=Path, help="Docs root directory")
    check.add_argument("--sidebar", type=Path, required=True, help="Sidebar definition (YAML/JSON)")
    check.add_argument(
        "--format",
        choices=[f.value for f in OutputFormat],
        default=OutputFormat.TEXT.value,
        help="Output format (default: text)"
    )
    check.add_argument("--strict", action="store_true", help="Fail on warnings as well as errors")

    # fix
    fix = subparsers.add_parser("fix", help="Normalize code fences for MDX")
    fix.add_argument("docs_dir", type=Path, help="Docs root directory")
    fix.add_argument("--write", action="store_true", help="Write changes (default: dry run)")

    # scaffold
    scaffold = subparsers.add_parser("scaffold", help="Create stub pages for sidebar entries")
    scaffold.add_argument("docs_dir", type=Path, help="Docs root directory")
    scaffold.add_argument("--sidebar", type=Path, required=True, help="Sidebar definition (YAML/JSON)")
    scaffold.add_argument("--dry-run", action="store_true", help="List stubs without writing them")

    # rules
    subparsers.add_parser("rules", help="List available rules")

    return parser


def verbosity_level(args: argparse.Namespace) -> Optional[str]:
    """Log level requested on the command line, if any."""
    if args.verbose >= 2:
        return "DEBUG"
    if args.verbose >= 1:
        return "INFO"
    if args.quiet:
        return "ERROR"
    return None


def configure(args: argparse.Namespace) -> Settings:
    """Load settings and set up logging from CLI arguments."""
    # Provisional setup until settings are known
    setup_logging(verbosity_level(args) or "WARNING")

    docs_dir: Optional[Path] = getattr(args, "docs_dir", None)
    settings = load_settings(
        config_file=args.config,
        search_dirs=(docs_dir, Path.cwd()),
        strict=True if getattr(args, "strict", False) else None,
    )
    disabled = getattr(args, "disable", None)
    if disabled:
        settings = settings.model_copy(
            update={"disabled_rules": [*settings.disabled_rules, *disabled]}
        )

    setup_logging(verbosity_level(args) or settings.log_level, settings.log_format)
    return settings


def emit_report(report: AuditReport, output_format: str, strict: bool) -> int:
    """Print a report and return the exit code it implies."""
    if output_format == OutputFormat.JSON.value:
        print(report.model_dump_json(indent=2))
    else:
        render_report(report, console, strict=strict)
    return EXIT_FINDINGS if report.has_failures(strict) else EXIT_OK


def run_lint(args: argparse.Namespace, settings: Settings) -> int:
    sidebar = SidebarService(settings).load_definition(args.sidebar) if args.sidebar else None
    report = AuditService(settings).audit(args.docs_dir, sidebar=sidebar)
    return emit_report(report, args.format, settings.strict)


def run_sidebar(args: argparse.Namespace, settings: Settings) -> int:
    service = SidebarService(settings)
    documents = DocumentLoader(args.docs_dir, settings).load_all()

    if args.sidebar_command == "check":
        definition = service.load_definition(args.sidebar)
        report = service.check(documents, definition)
        report.docs_dir = str(args.docs_dir)
        return emit_report(report, args.format, settings.strict)

    definition = service.build_autogenerated(documents, args.docs_dir, name=args.name)
    if args.format == "json":
        print(json.dumps(definition.to_config(), indent=2))
    elif args.format == "yaml":
        print(yaml.safe_dump(definition.to_config(), sort_keys=False), end="")
    else:
        render_sidebar(definition, console)
    return EXIT_OK


def run_fix(args: argparse.Namespace, settings: Settings) -> int:
    results = FenceFixer(args.docs_dir, settings).fix_all(write=args.write)
    render_fix_results(results, console, write=args.write)
    if results and not args.write:
        return EXIT_FINDINGS
    return EXIT_OK


def run_scaffold(args: argparse.Namespace, settings: Settings) -> int:
    definition = SidebarService(settings).load_definition(args.sidebar)
    service = ScaffoldService(settings)
    entries = service.plan(definition, args.docs_dir)

    if not entries:
        console.print("[green]✓[/green] Every sidebar entry already has a page")
        return EXIT_OK

    if args.dry_run:
        for entry in entries:
            console.print(
                f"  would create {escape(str(entry.path))} [dim]({escape(entry.title)})[/dim]",
                highlight=False,
            )
        console.print(f"{len(entries)} stub(s) planned")
        return EXIT_OK

    written = service.apply(entries)
    for path in written:
        console.print(f"[green]✓[/green] Created {escape(str(path))}", highlight=False)
    console.print(f"{len(written)} stub(s) created")
    return EXIT_OK


def run_rules(args: argparse.Namespace, settings: Settings) -> int:
    render_rules(RuleRegistry().all_rules(), console)
    return EXIT_OK


COMMANDS = {
    "lint": run_lint,
    "sidebar": run_sidebar,
    "fix": run_fix,
    "scaffold": run_scaffold,
    "rules": run_rules,
}


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        settings = configure(args)
        return COMMANDS[args.command](args, settings)
    except DocsAuditorError as e:
        logger.debug("Command failed", code=e.code, details=e.details)
        err_console.print(f"[red]Error:[/red] {escape(e.message)}", highlight=False)
        for error in e.details.get("errors", []):
            err_console.print(f"  {escape(error['field'])}: {escape(error['message'])}", highlight=False)
        return EXIT_USAGE
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Cancelled by user[/yellow]")
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
