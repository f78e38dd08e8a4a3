#!/usr/bin/env python3
"""
roboot CLI - Declarative HTTP API Testing Tool

Usage:
    roboot run <suite.ibgroboot.yaml> [OPTIONS]
    roboot validate <suite.ibgroboot.yaml>
    roboot kinds
    roboot --version
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from . import __version__
from .assertions import CATALOG, AssertionKind, AssertionResult
from .runner import SuiteRunner
from .schema_parsing import TestCase, load_suite

app = typer.Typer(
    name="roboot",
    help="🤖 roboot - Declarative HTTP API Testing Tool",
    add_completion=False,
)
console = Console()

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def version_callback(value: bool):
    if value:
        console.print(f"🤖 roboot v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True,
        help="Show version and exit"
    ),
):
    """
    🤖 roboot - Declarative HTTP API Testing Tool

    Test HTTP APIs with declarative YAML suites.
    """
    pass


def configure_logging(level: str) -> None:
    """Route log records through rich, once per process."""
    level = level.upper()
    if level not in LOG_LEVELS:
        raise typer.BadParameter(f"must be one of: {', '.join(LOG_LEVELS)}", param_hint="--log-level")
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def print_case(
    index: int,
    case: TestCase,
    results: list[AssertionResult] | None,
    error: str | None,
) -> None:
    """Print one finished test case."""
    if error is not None:
        console.print(f"▶ [bold]{escape(case.description)}[/bold]")
        console.print(f"  [red]⚠️  Error:[/red] {escape(error)}\n")
        return

    passed = all(r.passed for r in results or [])
    icon = "[green]✅[/green]" if passed else "[red]❌[/red]"
    console.print(f"▶ {icon} [bold]{escape(case.description)}[/bold]")
    for result in results or []:
        if result.passed:
            console.print(f"  [green]✓[/green] {escape(result.kind)}")
        else:
            console.print(f"  [red]✗ {escape(result.kind)}:[/red] {escape(result.message)}")
    console.print()


@app.command()
def run(
    suite_file: Path = typer.Argument(
        ...,
        help="Path to the suite YAML file",
        exists=True,
        readable=True,
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q",
        help="Only show errors and final status"
    ),
    output: str = typer.Option(
        "text", "--output", "-o",
        help="Output format: text or json"
    ),
    report_dir: Path = typer.Option(
        Path("reports"), "--report-dir", "-r",
        help="Directory to save reports"
    ),
    no_report: bool = typer.Option(
        False, "--no-report",
        help="Don't save report files"
    ),
    html: bool = typer.Option(
        True, "--html/--no-html",
        help="Also save an HTML report next to the JSON one"
    ),
    strict_kinds: Optional[bool] = typer.Option(
        None, "--strict-kinds/--lenient-kinds",
        help="Fail (instead of skip) unrecognized assertion kinds"
    ),
    log_level: str = typer.Option(
        "WARNING", "--log-level", "-l",
        help="Log level: DEBUG, INFO, WARNING or ERROR"
    ),
):
    """
    Run a test suite.

    Send every test case request, evaluate its expected results,
    and generate a run report.
    """
    configure_logging(log_level)
    verbose = output == "text" and not quiet

    if verbose:
        console.print(f"\n📄 Loading suite: {suite_file}")

    suite, validation = load_suite(suite_file)

    if suite is None:
        console.print(f"\n[red]❌ Validation failed:[/red]")
        console.print(escape(str(validation)))
        raise typer.Exit(code=1)

    if verbose:
        console.print(f"   [green]✅ Valid suite:[/green] {suite.name}")
        for warning in validation.warnings:
            console.print(f"   [yellow]⚠️  {escape(warning.path)}: {escape(warning.message)}[/yellow]")
        console.print(f"\n{'='*60}")
        console.print(f"  [bold]Running:[/bold] {suite.name}")
        console.print(f"  [bold]Target:[/bold] {suite.method.value} {suite.url}")
        console.print(f"  [bold]Test cases:[/bold] {len(suite.test_cases)}")
        console.print(f"{'='*60}\n")

    runner = SuiteRunner(
        suite,
        strict_kinds=strict_kinds,
        on_case=print_case if verbose else None,
    )
    reporter = asyncio.run(runner.run())
    report = reporter.report

    # Output results
    if output == "json":
        console.print_json(data=report.to_dict())
    elif not quiet:
        console.print(escape(report.summary()))
    else:
        color = "green" if report.passed else "red"
        console.print(f"[{color}]{report.status.value.upper()}[/{color}] {suite.name}")

    # Save reports
    if not no_report:
        json_path = reporter.save_json(report_dir / f"{report.run_id}.json")
        if verbose:
            console.print(f"\n📁 Report saved: {json_path}")
        if html:
            html_path = reporter.save_html(report_dir / f"{report.run_id}.html")
            if verbose:
                console.print(f"📁 HTML report saved: {html_path}")

    # Exit with appropriate code
    raise typer.Exit(code=0 if report.passed else 1)


@app.command()
def validate(
    suite_file: Path = typer.Argument(
        ...,
        help="Path to the suite YAML file",
        exists=True,
        readable=True,
    ),
):
    """
    Validate a suite YAML file.

    Check the schema and report any errors without sending requests.
    """
    console.print(f"\n📄 Validating: {suite_file}")

    suite, validation = load_suite(suite_file)

    if suite is None:
        console.print(f"\n[red]❌ Validation failed:[/red]")
        console.print(escape(str(validation)))
        raise typer.Exit(code=1)

    console.print(f"\n[green]✅ Valid suite:[/green] {suite.name}")
    console.print(f"   Target: {suite.method.value} {suite.url}")
    console.print(f"   Test cases: {len(suite.test_cases)}")

    # Show test case summary
    table = Table(title="Test cases")
    table.add_column("#", style="cyan")
    table.add_column("Description")
    table.add_column("Assertions", style="magenta")

    for index, case in enumerate(suite.test_cases):
        kinds = ", ".join(
            str(spec.get("assertion") or spec.get("kind") or "?")
            for spec in case.expected_results
        )
        table.add_row(str(index), escape(case.description), escape(kinds))

    console.print()
    console.print(table)

    if validation.warnings:
        console.print(f"\n[yellow]{len(validation.warnings)} warning(s):[/yellow]")
        for warning in validation.warnings:
            line = f"  ⚠️  {warning.path}: {warning.message}"
            if warning.suggestion:
                line += f" ({warning.suggestion})"
            console.print(escape(line))

    raise typer.Exit(code=0)


@app.command()
def kinds():
    """
    List the supported assertion kinds.
    """
    table = Table(title="Assertion kinds")
    table.add_column("Assertion", style="cyan", no_wrap=True)
    table.add_column("Scope", style="magenta", no_wrap=True)
    table.add_column("Inputs")

    for kind in AssertionKind:
        entry = CATALOG[kind]
        table.add_row(kind.value, entry.scope.value, escape(entry.input_shape))

    console.print(table)


@app.command()
def info():
    """
    Show information about roboot.
    """
    console.print(f"""
🤖 [bold]roboot[/bold] v{__version__}

Declarative HTTP API Testing Tool

[bold]Features:[/bold]
  • Declarative YAML test suites
  • {len(AssertionKind)} built-in assertion kinds, plus custom Python validators
  • Array responses checked item by item, with failing indices reported
  • Pre/post suite scripts
  • JSON and HTML run reports

[bold]Quick Start:[/bold]
  roboot run suites/posts.ibgroboot.yaml
  roboot validate suites/posts.ibgroboot.yaml
  roboot kinds
""")


if __name__ == "__main__":
    app()
