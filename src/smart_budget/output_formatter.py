"""Output formatting for CLI and programmatic use."""

import json
from datetime import datetime
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .models import CATEGORY_LABELS, Category

CATEGORY_STYLES = {"need": "red", "good": "dark_orange", "nice": "blue"}


class JSONEncoder(json.JSONEncoder):
    """Custom JSON encoder for output."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, datetime):
            return obj.isoformat()
        return super().default(obj)


def _category_label(value: str) -> str:
    try:
        return CATEGORY_LABELS[Category(value)]
    except ValueError:
        return value


class OutputFormatter:
    """Formats output for both Rich terminal and JSON modes."""

    def __init__(self, json_mode: bool = False):
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON instead of Rich formatting
        """
        self.json_mode = json_mode
        self.console = Console()

    def output(self, data: dict[str, Any], message: str = "") -> None:
        """Output data in appropriate format.

        Args:
            data: Data to output
            message: Optional message for Rich mode
        """
        if self.json_mode:
            self._output_json(data)
        else:
            self._output_rich(data, message)

    def _output_json(self, data: dict[str, Any]) -> None:
        """Output as JSON to stdout."""
        print(json.dumps(data, cls=JSONEncoder, indent=2))

    def _output_rich(self, data: dict[str, Any], message: str) -> None:
        """Output with Rich formatting."""
        if message:
            self.console.print(f"[green]✓[/green] {message}")

        payload = data.get("data", {})
        if "list" in payload:
            self._render_shopping_list(data)
        elif "item" in payload and isinstance(payload["item"], dict):
            self._render_item(data)
        elif "items" in payload and "category" in payload:
            self._render_category_order(data)
        elif "budget_recommendation" in payload:
            self._render_recommendation(data)
        elif "budget_status" in payload:
            self._render_budget_status(data)

    def _render_shopping_list(self, data: dict) -> None:
        """Render the list one table per category."""
        list_data = data["data"]["list"]

        self._render_budget_status({"data": {"budget_status": list_data["budget"]}})

        if not list_data["total_items"]:
            self.console.print("\n[dim]No items on the list[/dim]")
            return

        for category, items in list_data["categories"].items():
            if not items:
                self.console.print(f"\n[dim]No {_category_label(category).lower()} items[/dim]")
                continue

            style = CATEGORY_STYLES.get(category, "white")
            table = Table(
                title=f"[{style}]{_category_label(category)}[/{style}] ({len(items)})",
                show_header=True,
                header_style="bold cyan",
                title_justify="left",
            )
            table.add_column("", justify="center")
            table.add_column("Item", style="cyan", no_wrap=False)
            table.add_column("Price", style="magenta", justify="right")
            table.add_column("ID", style="dim")

            for item in items:
                if item.get("purchased"):
                    marker = "[green]✓[/green]"
                elif item.get("affordable"):
                    marker = "[white]○[/white]"
                else:
                    marker = "[yellow]⚠[/yellow]"
                name = item["name"]
                if item.get("manual_order") is not None:
                    name += " [dim](pinned)[/dim]"
                table.add_row(marker, name, f"${item['price']:.2f}", item["id"])

            self.console.print()
            self.console.print(table)

        self.console.print(
            f"\nAffordable: {list_data['affordable_count']}  "
            f"Over budget: {list_data['unaffordable_count']}  "
            f"Suggested total: ${list_data['suggested_total']:.2f}"
        )

    def _render_item(self, data: dict) -> None:
        """Render a single item with Rich."""
        item = data["data"]["item"]

        panel_content = f"""[bold]{item["name"]}[/bold]

Price: ${item["price"]:.2f}
Category: {_category_label(item["category"])}
Purchased: {"yes" if item.get("purchased") else "no"}
ID: {item["id"]}"""

        if item.get("manual_order") is not None:
            panel_content += f"\nManual position: {item['manual_order'] + 1}"

        panel = Panel(panel_content, title="Item Details", border_style="green")
        self.console.print(panel)

    def _render_category_order(self, data: dict) -> None:
        """Render a category's items after a reorder."""
        payload = data["data"]
        table = Table(title=_category_label(payload["category"]), show_header=True)
        table.add_column("#", justify="right")
        table.add_column("Item", style="cyan")
        table.add_column("Price", justify="right")

        for position, item in enumerate(payload["items"], start=1):
            table.add_row(str(position), item["name"], f"${item['price']:.2f}")

        self.console.print(table)

    def _render_recommendation(self, data: dict) -> None:
        """Render the affordable/deferred split."""
        rec = data["data"]["budget_recommendation"]
        remaining = rec["remaining_budget"]
        color = "green" if remaining >= 0 else "red"

        self.console.print("\n[bold]Smart Budget Recommendation[/bold]")
        self.console.print(f"Remaining budget: [{color}]${remaining:.2f}[/{color}]")

        for title, key, style in (
            ("Affordable", "affordable_items", "green"),
            ("Over budget", "unaffordable_items", "yellow"),
        ):
            items = rec[key]
            if not items:
                continue
            table = Table(title=f"{title} ({len(items)})", show_header=True, header_style="bold")
            table.add_column("Item", style=style)
            table.add_column("Category")
            table.add_column("Price", justify="right")
            for item in items:
                table.add_row(
                    item["name"], _category_label(item["category"]), f"${item['price']:.2f}"
                )
            self.console.print(table)

        self.console.print(f"Suggested total: [bold]${rec['suggested_total']:.2f}[/bold]")

    def _render_budget_status(self, data: dict) -> None:
        """Render budget status."""
        budget = data["data"]["budget_status"]

        limit = budget.get("monthly_budget", 0)
        spent = budget.get("spent", 0)
        remaining = budget.get("remaining", limit - spent)
        percent = budget.get("percent_used", 0)
        color = "green" if remaining >= 0 else "red"

        self.console.print("\n[bold]Smart Budget[/bold]")
        self.console.print(f"Budget: ${limit:.2f}")
        self.console.print(f"Spent: ${spent:.2f} ({percent:.0f}%)")
        self.console.print(f"Remaining: [{color}]${remaining:.2f}[/{color}]")

    def error(self, message: str, error_code: str | None = None) -> None:
        """Output error message.

        Args:
            message: Error message
            error_code: Optional error code
        """
        if self.json_mode:
            output = {"success": False, "error": message}
            if error_code:
                output["error_code"] = error_code
            print(json.dumps(output))
        else:
            self.console.print(f"[red]✗ Error:[/red] {message}")

    def warning(self, message: str) -> None:
        """Output warning message.

        Args:
            message: Warning message
        """
        if self.json_mode:
            print(json.dumps({"warning": message}))
        else:
            self.console.print(f"[yellow]⚠[/yellow] {message}")
