"""Tests for output formatting."""

import json
from io import StringIO

from rich.console import Console

from smart_budget.output_formatter import OutputFormatter


def rich_formatter() -> tuple[OutputFormatter, StringIO]:
    formatter = OutputFormatter(json_mode=False)
    buffer = StringIO()
    formatter.console = Console(file=buffer, force_terminal=False, width=120)
    return formatter, buffer


def item(name: str, price: float, category: str = "need", **extra) -> dict:
    return {
        "id": f"id-{name.lower()}",
        "name": name,
        "price": price,
        "category": category,
        "purchased": False,
        "manual_order": None,
        **extra,
    }


BUDGET = {"monthly_budget": 50.0, "spent": 60.0, "remaining": -10.0, "percent_used": 120.0}


class TestJSONMode:
    """Tests for JSON output."""

    def test_output_json(self, capsys):
        OutputFormatter(json_mode=True).output({"success": True, "data": {"x": 1}})
        assert json.loads(capsys.readouterr().out) == {"success": True, "data": {"x": 1}}

    def test_error_json(self, capsys):
        OutputFormatter(json_mode=True).error("bad", error_code="VALIDATION_ERROR")
        data = json.loads(capsys.readouterr().out)
        assert data == {"success": False, "error": "bad", "error_code": "VALIDATION_ERROR"}

    def test_warning_json(self, capsys):
        OutputFormatter(json_mode=True).warning("careful")
        assert json.loads(capsys.readouterr().out) == {"warning": "careful"}


class TestRichMode:
    """Tests for Rich rendering."""

    def test_render_list(self):
        formatter, buffer = rich_formatter()
        formatter.output(
            {
                "success": True,
                "data": {
                    "list": {
                        "categories": {
                            "need": [item("Milk", 3.0, affordable=True)],
                            "good": [],
                            "nice": [item("Lamp", 40.0, "nice", affordable=False, manual_order=0)],
                        },
                        "total_items": 2,
                        "affordable_count": 1,
                        "unaffordable_count": 1,
                        "suggested_total": 3.0,
                        "budget": BUDGET,
                    }
                },
            }
        )
        text = buffer.getvalue()

        assert "Need to Have" in text
        assert "Milk" in text
        assert "$40.00" in text
        assert "pinned" in text
        assert "No good to have items" in text
        assert "Remaining: $-10.00" in text

    def test_render_empty_list(self):
        formatter, buffer = rich_formatter()
        formatter.output(
            {
                "data": {
                    "list": {
                        "categories": {"need": [], "good": [], "nice": []},
                        "total_items": 0,
                        "affordable_count": 0,
                        "unaffordable_count": 0,
                        "suggested_total": 0.0,
                        "budget": BUDGET,
                    }
                }
            }
        )
        assert "No items on the list" in buffer.getvalue()

    def test_render_item_with_message(self):
        formatter, buffer = rich_formatter()
        formatter.output({"data": {"item": item("Milk", 3.0)}}, "Added Milk to shopping list")
        text = buffer.getvalue()

        assert "Added Milk to shopping list" in text
        assert "Item Details" in text
        assert "Need to Have" in text

    def test_render_recommendation(self):
        formatter, buffer = rich_formatter()
        formatter.output(
            {
                "data": {
                    "budget_recommendation": {
                        "remaining_budget": 20.0,
                        "affordable_items": [item("A", 10.0), item("C", 5.0, "good")],
                        "unaffordable_items": [item("B", 30.0)],
                        "suggested_total": 15.0,
                    }
                }
            }
        )
        text = buffer.getvalue()

        assert "Affordable (2)" in text
        assert "Over budget (1)" in text
        assert "Suggested total: $15.00" in text

    def test_render_category_order(self):
        formatter, buffer = rich_formatter()
        formatter.output({"data": {"category": "good", "items": [item("Pan", 25.0, "good")]}})
        text = buffer.getvalue()

        assert "Good to Have" in text
        assert "Pan" in text

    def test_error_rich(self):
        formatter, buffer = rich_formatter()
        formatter.error("Something broke")
        assert "Error:" in buffer.getvalue()
