"""
Reporter/Reporter.py — Live console output and JSON report generation.

Provides the :class:`Reporter` used by the CLI to show a form's fields,
record each submission, and persist the submissions to a report file.
"""
from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from Form import Form
from Models import Checkbox, RadioGroup, SelectField, Submission

logger = logging.getLogger(__name__)

# Single shared console instance (stdout)
console = Console()


class Reporter:
    """Collects submissions and drives all user-visible output.

    Responsibilities:
    - Rich-formatted tables of a form's fields and active values
    - Informational / error logging helpers
    - Final JSON report persistence
    """

    def __init__(self, output_file: Optional[str] = None) -> None:
        self.output_file: Optional[str] = output_file
        self.submissions: list[Submission] = []

    # ------------------------------------------------------------------
    # Display helpers
    # ------------------------------------------------------------------

    def print_banner(self) -> None:
        """Print the tool banner to the console."""
        console.print(
            Panel(
                "[bold cyan]Form Surfer[/bold cyan]  |  scripted HTML form submission",
                expand=False,
                style="bold white on black",
            )
        )

    def print_form(self, form: Form) -> None:
        """Print every field of *form* with its kind and active values."""
        active = form.fields()
        table = Table(
            title=f"Form {escape(form.name or '')}  [dim]{form.method} {escape(form.action or '<page>')}[/dim]",
            box=box.ROUNDED,
            show_header=True,
        )
        table.add_column("Field", style="bold cyan")
        table.add_column("Kind", style="magenta")
        table.add_column("Value(s)", style="white")

        for field in form.catalog.fields:
            values = active.get(field.name)
            shown = escape(", ".join(repr(v) for v in values)) if values else "[dim]—[/dim]"
            table.add_row(escape(field.name), _kind(field), shown)
        for button in form.catalog.buttons:
            table.add_row(escape(button.name), "button", escape(repr(button.value)))

        console.print(table)

    def log_submission(self, submission: Submission) -> None:
        """Record *submission* and print a one-line summary."""
        self.submissions.append(submission)
        colour = "green" if submission.status < 400 else "red"
        console.print(
            f"[bold {colour}]{submission.status}[/bold {colour}] "
            f"{submission.method} [cyan]{escape(submission.url)}[/cyan]  "
            f"pairs=[yellow]{len(submission.pairs)}[/yellow]"
        )
        logger.debug("Submitted pairs: %r", submission.pairs)

    def log_info(self, message: str) -> None:
        """Print a standard informational message (supports Rich markup)."""
        console.print(f"[dim]\\[*][/dim] {message}")

    def log_error(self, message: str) -> None:
        """Print an error message (supports Rich markup)."""
        console.print(f"[bold red]\\[!][/bold red] {message}")

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self) -> None:
        """Serialise all submissions to the JSON report file, if one is set."""
        if not self.output_file:
            return
        data = [asdict(s) for s in self.submissions]
        try:
            Path(self.output_file).write_text(json.dumps(data, indent=2))
            console.print(f"\n[green]\\[+][/green] Report saved: [bold]{self.output_file}[/bold]")
        except OSError as exc:
            console.print(f"[red]\\[!][/red] Failed to save report: {exc}")


def _kind(field) -> str:
    if isinstance(field, RadioGroup):
        return "radio"
    if isinstance(field, Checkbox):
        return "checkbox"
    if isinstance(field, SelectField):
        return "select multiple" if field.select.multiple else "select"
    return "text"
