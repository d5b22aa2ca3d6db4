"""Main CLI entry point for c0diff"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from c0diff import __version__
from c0diff.config import DiffConfig
from c0diff.coverage.scope import extract_scopes
from c0diff.diff.parser import DiffLineType
from c0diff.diff.side_by_side import split_file_lines
from c0diff.models.result import CaseReport
from c0diff.reporters.markdown_reporter import MarkdownReporter, collapse_repeated_names
from c0diff.scanner.case_scanner import CaseScanner, FileDiffView

console = Console()

_CELL_STYLES = {
    DiffLineType.ADDED: "green",
    DiffLineType.DELETED: "red",
}


def _configure_logging(debug: bool) -> None:
    """Route library logging through rich; DEBUG with --debug, WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _number(value: Optional[int]) -> str:
    return "" if value is None else str(value)


def _display_side_by_side(view: FileDiffView) -> None:
    table = Table(title=f"📄 {escape(view.file_path)}  {view.summary}", box=box.SIMPLE)
    table.add_column("Old", style="dim", justify="right")
    table.add_column("", overflow="fold")
    table.add_column("New", style="dim", justify="right")
    table.add_column("", overflow="fold")

    for row in view.rows:
        left_style = _CELL_STYLES.get(row.left_type, "")
        right_style = _CELL_STYLES.get(row.right_type, "")
        table.add_row(
            _number(row.left_line_num),
            f"[{left_style}]{escape(row.left_content)}[/{left_style}]"
            if left_style
            else escape(row.left_content),
            _number(row.right_line_num),
            f"[{right_style}]{escape(row.right_content)}[/{right_style}]"
            if right_style
            else escape(row.right_content),
        )

    console.print(table)


def _display_case_table(report: CaseReport) -> None:
    if report.total_cases == 0:
        console.print("[yellow]No branch changes found.[/yellow]")
        return

    for file_result in report.files_with_cases:
        table = Table(
            title=f"🧪 {escape(file_result.file_path)}", box=box.ROUNDED, show_lines=False
        )
        table.add_column("#", style="dim", width=4)
        table.add_column("Class", style="cyan")
        table.add_column("Method", style="bold")
        table.add_column("Branch Condition")
        for idx, row in enumerate(collapse_repeated_names(file_result.cases), 1):
            table.add_row(str(idx), *(escape(cell) for cell in row))
        console.print(table)

    console.print(
        f"\n[bold]{report.total_cases}[/bold] case(s) in "
        f"[bold]{len(report.files_with_cases)}[/bold] file(s)"
    )


def _write_report(report: CaseReport, output_format: str, output: Optional[str]) -> None:
    """Render or persist a case report in the selected format."""
    if output_format == "markdown":
        if output:
            MarkdownReporter.save(report, output)
            console.print(f"\n✅ Markdown report saved to: {output}")
        else:
            click.echo(MarkdownReporter.generate(report))
        return

    if output_format == "json":
        output_data = report.to_dict()
        if output:
            output_path = Path(output)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(
                json.dumps(output_data, indent=2, ensure_ascii=False), encoding="utf-8"
            )
            console.print(f"\n✅ Results saved to: {output_path}")
        else:
            click.echo(json.dumps(output_data, indent=2, ensure_ascii=False))
        return

    _display_case_table(report)


@click.group()
@click.version_option(version=__version__, prog_name="c0diff")
def cli():
    """
    🔀 c0diff - Side-by-side diffs and C0 test cases for changed branches

    Compare two revisions of a git repository and list the branch
    outcomes your tests need to cover.
    """
    pass


@cli.command("side-by-side")
@click.argument("path", type=click.Path(exists=True, file_okay=False), default=".")
@click.option("--base", required=True, help="Old revision (e.g., main)")
@click.option("--head", required=True, help="New revision (e.g., feature-branch)")
@click.option("--file", "file_path", required=True, help="Repository-relative file path")
@click.option("--old-file", "old_path", help="Path at the base revision if the file was renamed")
@click.option(
    "--context-lines",
    "-U",
    type=click.IntRange(min=0),
    help="Diff context lines (default: C0DIFF_CONTEXT_LINES or 3)",
)
@click.option("--summary", is_flag=True, help="Only print the +added -deleted summary")
@click.option("--debug", is_flag=True, help="Show verbose diagnostic output")
def side_by_side(
    path: str,
    base: str,
    head: str,
    file_path: str,
    old_path: Optional[str],
    context_lines: Optional[int],
    summary: bool,
    debug: bool,
):
    """
    Show one file side by side between two revisions.

    Examples:

        c0diff side-by-side . --base main --head feature --file src/Order.cs

        c0diff side-by-side . --base main --head feature --file src/New.cs --old-file src/Old.cs
    """
    _configure_logging(debug)
    try:
        scanner = CaseScanner(Path(path).resolve(), context_lines=context_lines)
        view = scanner.side_by_side(base, head, file_path, old_path=old_path)
        if summary:
            console.print(view.summary)
            return
        _display_side_by_side(view)
    except Exception as e:
        console.print(f"\n[bold red]❌ Error:[/bold red] {e}", style="red")
        sys.exit(1)


@cli.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False), default=".")
@click.option("--base", help="Old revision (e.g., main)")
@click.option("--head", help="New revision (e.g., feature-branch)")
@click.option("--diff", "diff_file", type=click.Path(exists=True), help="Path to diff/patch file")
@click.option(
    "--file", "file_paths", multiple=True, help="Only analyse these files (repeatable)"
)
@click.option(
    "--context-lines",
    "-U",
    type=click.IntRange(min=0),
    help="Diff context lines (default: C0DIFF_CONTEXT_LINES or 3)",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "markdown", "json"]),
    default="table",
    help="Output format (default: table)",
)
@click.option("--output", "-o", type=click.Path(), help="Output file path")
@click.option("--debug", is_flag=True, help="Show verbose diagnostic output")
def cases(
    path: str,
    base: Optional[str],
    head: Optional[str],
    diff_file: Optional[str],
    file_paths: Tuple[str, ...],
    context_lines: Optional[int],
    output_format: str,
    output: Optional[str],
    debug: bool,
):
    """
    Generate C0 test cases for branches touched by a change.

    Examples:

        c0diff cases . --base main --head feature-branch

        c0diff cases . --base HEAD~1 --head HEAD --format markdown -o cases.md

        c0diff cases . --diff changes.patch
    """
    _configure_logging(debug)
    try:
        if (base or head) and not (base and head):
            console.print("[bold red]❌ Must specify both --base and --head[/bold red]")
            sys.exit(1)
        if bool(diff_file) == bool(base and head):
            console.print("[bold red]❌ Choose exactly one of --base/--head or --diff[/bold red]")
            sys.exit(1)

        scanner = CaseScanner(Path(path).resolve(), context_lines=context_lines)
        if diff_file:
            report = scanner.scan_patch(Path(diff_file).read_text(encoding="utf-8"))
            if file_paths:
                report.files = [f for f in report.files if f.file_path in file_paths]
        else:
            report = scanner.scan(base, head, only_files=file_paths or None)

        _write_report(report, output_format, output)
    except Exception as e:
        console.print(f"\n[bold red]❌ Error:[/bold red] {e}", style="red")
        sys.exit(1)


@cli.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.option("--debug", is_flag=True, help="Show verbose diagnostic output")
def scopes(source: str, debug: bool):
    """
    Print the class and method each line of SOURCE belongs to.
    """
    _configure_logging(debug)
    try:
        lines = split_file_lines(Path(source).read_bytes(), DiffConfig.get_encoding())
    except OSError as e:
        console.print(f"[bold red]❌ Cannot read file:[/bold red] {e}")
        sys.exit(1)
    except LookupError as e:
        console.print(f"[bold red]❌ Error:[/bold red] {e}")
        sys.exit(1)

    table = Table(box=box.SIMPLE)
    table.add_column("Line", style="dim", justify="right")
    table.add_column("Class", style="cyan")
    table.add_column("Method", style="bold")
    table.add_column("Source", overflow="fold")
    for number, (line, entry) in enumerate(zip(lines, extract_scopes(lines)), 1):
        table.add_row(
            str(number),
            escape(entry.class_name or ""),
            escape(entry.method_name or ""),
            escape(line),
        )
    console.print(table)


if __name__ == "__main__":
    cli()
