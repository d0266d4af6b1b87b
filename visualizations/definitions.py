"""Chart declarations loaded from YAML.

A definitions file holds a top-level `charts` list. Each entry needs `id` and
`type`; `data`, `columns`, `column_names`, `options` and `html` are optional
and map onto `ChartRegistry.register` arguments::

    charts:
      - id: toppings
        type: PieChart
        columns: [[Topping, string], [Slices, number]]
        data: [[Mushrooms, 3], [Onions, 1]]
        options: {title: How Much Pizza I Ate Last Night}
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from django.core.exceptions import ImproperlyConfigured

from charting.registry import ChartRegistry, RegisteredChart, TableBuilder


@dataclass(frozen=True, slots=True)
class ChartDefinition:
    """A declarative chart registration.

    Args:
        id: Chart/element id.
        type: Library chart class.
        data: Table rows.
        columns: `(name, type)` pairs or bare names.
        options: Display options.
        html: Extra element attributes.
    """

    id: str
    type: str
    data: list[list[Any]] = field(default_factory=list)
    columns: list[Any] | None = None
    options: dict[str, Any] = field(default_factory=dict)
    html: dict[str, Any] = field(default_factory=dict)

    def register(self, registry: ChartRegistry, *, builder: TableBuilder | None = None) -> RegisteredChart:
        """Register this definition on `registry`."""

        return registry.register(
            self.id,
            self.type,
            self.options,
            data=self.data,
            columns=self.columns,
            html=self.html,
            builder=builder,
        )


def parse_chart_definitions(payload: Any, *, source: str = "<string>") -> tuple[ChartDefinition, ...]:
    """Validate a decoded YAML payload into ChartDefinitions.

    Args:
        payload: Result of `yaml.safe_load`.
        source: Label used in error messages.

    Raises:
        ImproperlyConfigured: When the payload does not describe a list of charts.
    """

    if payload is None:
        return ()
    if not isinstance(payload, dict) or not isinstance(payload.get("charts", []), list):
        raise ImproperlyConfigured(f"{source}: expected a mapping with a `charts` list.")

    definitions: list[ChartDefinition] = []
    for idx, raw in enumerate(payload.get("charts") or []):
        if not isinstance(raw, dict):
            raise ImproperlyConfigured(f"{source}: charts[{idx}] must be a mapping.")
        missing = [key for key in ("id", "type") if not raw.get(key)]
        if missing:
            raise ImproperlyConfigured(f"{source}: charts[{idx}] is missing {', '.join(missing)}.")
        unknown = set(raw) - {"id", "type", "data", "columns", "options", "html"}
        if unknown:
            raise ImproperlyConfigured(f"{source}: charts[{idx}] has unknown keys {sorted(unknown)}.")
        definitions.append(
            ChartDefinition(
                id=str(raw["id"]),
                type=str(raw["type"]),
                data=list(raw.get("data") or []),
                columns=raw.get("columns"),
                options=dict(raw.get("options") or {}),
                html=dict(raw.get("html") or {}),
            )
        )
    return tuple(definitions)


def load_chart_definitions(path: Path) -> tuple[ChartDefinition, ...]:
    """Load ChartDefinitions from a YAML file.

    Raises:
        ImproperlyConfigured: When the file is not valid YAML or has the wrong shape.
    """

    raw = path.read_text(encoding="utf-8")
    try:
        payload = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ImproperlyConfigured(f"{path}: invalid YAML.") from exc
    return parse_chart_definitions(payload, source=str(path))


def register_definitions(
    registry: ChartRegistry,
    definitions: Iterable[ChartDefinition],
) -> list[RegisteredChart]:
    """Register every definition in order and return the registrations."""

    return [definition.register(registry) for definition in definitions]
