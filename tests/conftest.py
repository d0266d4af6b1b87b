"""Pytest fixtures shared across chart and template tests."""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from charting.registry import ChartRegistry


@pytest.fixture
def registry() -> ChartRegistry:
    """Return an empty ChartRegistry."""

    return ChartRegistry()


@pytest.fixture
def pizza_rows() -> list[list[object]]:
    """Return a small label/number dataset."""

    return [["Mushrooms", 3], ["Onions", 1], ["Olives", 1]]


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    - `unit`: pure, fast tests with no template or request machinery.
    - `integration`: tests touching Django templates, views, or settings.

    Each test must have exactly one of these markers.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
