"""Demo view rendering charts declared in YAML."""

from __future__ import annotations

from pathlib import Path
from typing import Final

from django.http import HttpRequest, HttpResponse
from django.shortcuts import render

from charting.data_table import DataTable

from .definitions import load_chart_definitions

DEMO_DEFINITIONS_PATH: Final[Path] = Path(__file__).resolve().parent / "demo_charts.yaml"


def append_total_row(table: DataTable) -> None:
    """Append a `Total` row summing the second column of a label/number table."""

    total = sum(row[1] for row in table.rows if isinstance(row[1], (int, float)))
    table.add_row(["Total", total])


# Templates call callables on lookup; pass the function through untouched.
append_total_row.do_not_call_in_templates = True  # type: ignore[attr-defined]


def demo(request: HttpRequest) -> HttpResponse:
    """Render every chart in the demo definitions file.

    Args:
        request: Incoming request.

    Returns:
        Rendered demo page.
    """

    definitions = load_chart_definitions(DEMO_DEFINITIONS_PATH)
    return render(
        request,
        "visualizations/demo.html",
        {
            "charts": definitions,
            "append_total_row": append_total_row,
            "weekly_columns": ["Day", "Visits"],
            "weekly_visits": [["Mon", 120], ["Tue", 80], ["Wed", 140]],
        },
    )
