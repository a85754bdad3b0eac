"""Utility functions for terminal UI and user input."""

from typing import Optional
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..client.models import Difficulty, TestStatus, Verdict, VerdictStatus

console = Console()


def scanline(prompt: str = "") -> str:
    """Read a line of input from user."""
    if prompt:
        return input(prompt)
    return input()


def scanline_trim(prompt: str = "") -> str:
    """Read and trim a line of input from user."""
    return scanline(prompt).strip()


def create_table(title: Optional[str], headers: list) -> Table:
    """Create a formatted table for display."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    for header in headers:
        table.add_column(header)
    return table


def format_status_color(status) -> str:
    """Format a verdict or test status with appropriate color."""
    if status in (VerdictStatus.ACCEPTED, TestStatus.PASSED):
        return f"[green]{status.value}[/green]"
    elif status in (VerdictStatus.WRONG_ANSWER, TestStatus.FAILED):
        return f"[red]{status.value}[/red]"
    elif status is VerdictStatus.TIME_LIMIT_EXCEEDED:
        return f"[magenta]{status.value}[/magenta]"
    elif status is VerdictStatus.COMPILE_ERROR:
        return f"[yellow]{status.value}[/yellow]"
    return str(getattr(status, "value", status))


def format_difficulty(difficulty: Difficulty) -> str:
    color = {
        Difficulty.EASY: "green",
        Difficulty.MEDIUM: "yellow",
        Difficulty.HARD: "red",
    }[difficulty]
    return f"[{color}]{difficulty.value}[/{color}]"


def print_verdict(verdict: Verdict) -> None:
    """Show a verdict with its per-test results."""
    if verdict.degraded:
        console.print("\n[bold]Result:[/bold] [yellow]Judge unavailable[/yellow]")
    else:
        console.print(f"\n[bold]Result:[/bold] {format_status_color(verdict.status)}")
        console.print(f"[bold]Score:[/bold] {verdict.score}")

    if verdict.feedback:
        console.print(f"\n{escape(verdict.feedback)}")

    if verdict.test_results:
        console.print("\n[bold cyan]Test Results:[/bold cyan]")
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Test", style="cyan")
        table.add_column("Result", style="white")
        table.add_column("Time", style="yellow")
        table.add_column("Output", style="white")
        table.add_column("Comment", style="white")

        for result in verdict.test_results:
            table.add_row(
                escape(result.test_case_id),
                format_status_color(result.status),
                f"{result.execution_time:g} ms",
                escape(result.actual_output),
                escape(result.message or ""),
            )

        console.print(table)

    if verdict.suggestions:
        console.print("\n[bold cyan]Suggestions:[/bold cyan]")
        for suggestion in verdict.suggestions:
            console.print(f"  - {escape(suggestion)}")

    if verdict.optimized_code:
        console.print("\n[bold cyan]Optimized solution:[/bold cyan]")
        console.print(verdict.optimized_code, markup=False, highlight=False)
