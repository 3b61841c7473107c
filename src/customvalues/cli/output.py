"""Output formatting for CLI commands."""

import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from customvalues.exceptions import CustomValuesError
from customvalues.schema.models import BlobEntity, InvertedEntity

console = Console()


class OutputFormatter:
    """Formats output for terminal or JSON mode."""

    def __init__(self, json_mode: bool = False) -> None:
        self.json_mode = json_mode

    def print_json(self, data: Any) -> None:
        print(json.dumps(data, default=str, indent=2))

    def print_table(
        self,
        title: str,
        data: list[dict[str, Any]],
        columns: list[str],
    ) -> None:
        """Print data as Rich table or JSON array."""
        if self.json_mode:
            self.print_json(data)
        else:
            table = Table(title=title, show_header=True, header_style="bold magenta")
            for col in columns:
                table.add_column(col)
            for row in data:
                table.add_row(*[str(row.get(col, "")) for col in columns])
            console.print(table)

    def print_blob_entity(self, entity: BlobEntity) -> None:
        """Print a blob entity and its decoded mapping."""
        if self.json_mode:
            self.print_json(entity.to_dict())
            return

        console.print(f"\n[bold]Blob entity:[/bold] {entity.id}")
        console.print(f"Created: {entity.created_at}")
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Key")
        table.add_column("Value")
        for key, value in entity.values.items():
            table.add_row(key, value)
        console.print(table)

    def print_inverted_entity(self, entity: InvertedEntity) -> None:
        """Print an inverted entity with the rows that were loaded."""
        if self.json_mode:
            self.print_json(entity.to_dict())
            return

        console.print(f"\n[bold]Inverted entity:[/bold] {entity.id}")
        console.print(f"Created: {entity.created_at}")
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Row")
        table.add_column("Name")
        table.add_column("Value")
        for row in entity.values:
            table.add_row(str(row.id), row.name, row.value)
        console.print(table)

    def print_success(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Print success message with optional details."""
        if self.json_mode:
            output = {"success": True, "message": message}
            if details:
                output.update(details)
            self.print_json(output)
        else:
            console.print(f"✓ {message}", style="green")
            if details:
                for key, value in details.items():
                    console.print(f"  {key}: {value}", style="dim")

    def print_error(self, error: Exception) -> None:
        """Print error message."""
        if self.json_mode:
            if isinstance(error, CustomValuesError):
                print(json.dumps(error.to_dict(), default=str, indent=2))
            else:
                print(json.dumps({"error": str(error)}, indent=2))
        else:
            error_text = str(error)
            if isinstance(error, CustomValuesError) and error.context:
                context_str = "\n".join(f"{k}: {v}" for k, v in error.context.items())
                error_text = f"{error_text}\n\n{context_str}"

            panel = Panel(
                error_text,
                title="[red]Error[/red]",
                border_style="red",
            )
            console.print(panel)
