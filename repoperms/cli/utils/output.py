"""Output formatting utilities for CLI."""

import json
from enum import Enum
from typing import Any, Dict, List, Optional

import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table


class OutputFormat(Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"
    YAML = "yaml"


class OutputFormatter:
    """Handle output formatting for different formats."""

    def __init__(self, format_type: str = "table"):
        """
        Initialize output formatter.

        Args:
            format_type: Output format (table, json, yaml)
        """
        self.console = Console()
        self.error_console = Console(stderr=True)
        try:
            self.format = OutputFormat(format_type.lower())
        except ValueError:
            self.format = OutputFormat.TABLE

    def print_list(
        self,
        items: List[Dict[str, Any]],
        columns: Optional[List[str]] = None,
        title: Optional[str] = None,
        no_headers: bool = False,
    ):
        """
        Print a list of items.

        Args:
            items: List of items to print
            columns: Column names to display (for table format)
            title: Table title (for table format)
            no_headers: Whether to hide headers (for table format)
        """
        if self.format == OutputFormat.JSON:
            self.console.print(json.dumps(items, indent=2, default=str), markup=False, highlight=False)
            return

        if self.format == OutputFormat.YAML:
            self.console.print(
                yaml.safe_dump(items, default_flow_style=False, sort_keys=False),
                markup=False,
                highlight=False,
            )
            return

        if not items:
            self.console.print("[dim]No items found[/dim]")
            return

        if not columns:
            columns = list(items[0].keys())

        table = Table(title=title, show_header=not no_headers)
        for col in columns:
            table.add_column(col.replace("_", " ").title())

        for item in items:
            # Ref patterns are regexes; keep brackets literal
            table.add_row(*[_escape(item.get(col, "")) for col in columns])

        self.console.print(table)

    def print_raw(self, text: str):
        """Print text exactly as given."""
        self.console.file.write(text)
        self.console.file.flush()

    def print_success(self, message: str):
        if self.format == OutputFormat.JSON:
            self.console.print(json.dumps({"status": "success", "message": message}), markup=False)
        elif self.format == OutputFormat.YAML:
            self.console.print(yaml.safe_dump({"status": "success", "message": message}), markup=False)
        else:
            self.console.print(f"[green]✓[/green] {_escape(message)}")

    def print_error(self, message: str):
        if self.format == OutputFormat.JSON:
            self.error_console.print(json.dumps({"status": "error", "message": message}), markup=False)
        elif self.format == OutputFormat.YAML:
            self.error_console.print(yaml.safe_dump({"status": "error", "message": message}), markup=False)
        else:
            self.error_console.print(f"[red]✗[/red] {_escape(message)}")

    def print_warning(self, message: str):
        if self.format == OutputFormat.JSON:
            self.error_console.print(json.dumps({"status": "warning", "message": message}), markup=False)
        elif self.format == OutputFormat.YAML:
            self.error_console.print(yaml.safe_dump({"status": "warning", "message": message}), markup=False)
        else:
            self.error_console.print(f"[yellow]⚠[/yellow] {_escape(message)}")


def _escape(value: Any) -> str:
    return escape(str(value))
