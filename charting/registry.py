"""Per-page accumulation of declared charts.

One ChartRegistry exists per rendering context (typically one request). Charts
are registered while templates render and consumed once by the script emitter.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Final

from django.forms.utils import flatatt
from django.utils.html import format_html
from django.utils.safestring import SafeString

from .data_table import DataTable, ValidationError
from .escaping import escape_element_id
from .values import MappingOption, coerce_options

logger = logging.getLogger(__name__)

CORECHART_PACKAGE: Final[str] = "corechart"

CORECHART_SYNONYMS: Final[frozenset[str]] = frozenset(
    {"areachart", "barchart", "columnchart", "linechart", "piechart", "combochart"}
)

RESERVED_OPTION_KEYS: Final[tuple[str, ...]] = ("data", "columns", "column_names", "html")

TableBuilder = Callable[[DataTable], object]

_CHART_CLASS_RE: Final[re.Pattern[str]] = re.compile(r"[A-Za-z][A-Za-z0-9_]*")


def camelize(chart_type: str) -> str:
    """Convert `column_chart` style names to `ColumnChart`.

    Already camel-cased names are returned unchanged.
    """

    return "".join(part[:1].upper() + part[1:] for part in str(chart_type).split("_") if part)


def package_for(chart_type: str) -> str:
    """Return the library package that provides `chart_type`.

    The basic 2-D charts share the `corechart` package; other chart types load
    a package named after the lower-cased class name.
    """

    package = camelize(chart_type).lower()
    if package in CORECHART_SYNONYMS:
        return CORECHART_PACKAGE
    return package


@dataclass(frozen=True, slots=True)
class ChartElement:
    """The placeholder element a chart is drawn into.

    Args:
        element_id: Escaped HTML id, identical to the registry key.
        attributes: Extra HTML attributes for the element.
    """

    element_id: str
    attributes: tuple[tuple[str, object], ...] = ()

    def render(self) -> SafeString:
        """Return the `<div>` markup with escaped attribute values."""

        return format_html('<div id="{}"{}><!-- /--></div>', self.element_id, flatatt(dict(self.attributes)))


@dataclass(frozen=True, slots=True)
class RegisteredChart:
    """Result of a registration: the registry key and its matching element."""

    key: str
    element: ChartElement

    def __str__(self) -> str:
        return self.element.render()


@dataclass(frozen=True, slots=True)
class ChartEntry:
    """A registered chart awaiting script emission.

    Args:
        key: Escaped chart id.
        chart_type: Camel-cased library class name, e.g. `PieChart`.
        table: Chart data.
        options: Display options with reserved keys removed.
    """

    key: str
    chart_type: str
    table: DataTable
    options: MappingOption


@dataclass
class ChartRegistry:
    """Insertion-ordered charts plus the packages they require."""

    _entries: dict[str, ChartEntry] = field(default_factory=dict)
    _packages: list[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __getitem__(self, key: str) -> ChartEntry:
        return self._entries[key]

    def __iter__(self) -> Iterator[ChartEntry]:
        return iter(self._entries.values())

    def entries(self) -> list[ChartEntry]:
        """Return chart entries in registration order."""

        return list(self._entries.values())

    def packages(self) -> list[str]:
        """Return required packages, deduplicated in first-seen order."""

        return list(dict.fromkeys(self._packages))

    def register(
        self,
        chart_id: str,
        chart_type: str,
        options: Mapping[str, Any] | None = None,
        *,
        data: Any = None,
        columns: Any = None,
        html: Mapping[str, object] | None = None,
        builder: TableBuilder | None = None,
    ) -> RegisteredChart:
        """Register a chart and return its placeholder element.

        Args:
            chart_id: Chart id; escaped for use as both element id and registry key.
            chart_type: Library chart name, e.g. `PieChart` or `pie_chart`.
            options: Display options. The reserved keys `data`, `columns`,
                `column_names` and `html` are extracted before the remainder is
                treated as display options.
            data: Rows; overrides `options["data"]`.
            columns: `(name, type)` pairs, or a list of plain names used for
                inferred columns; overrides `options["columns"]`.
            html: Extra attributes for the element; overrides `options["html"]`.
            builder: Called with the new DataTable before registration completes.

        Returns:
            RegisteredChart pairing the registry key with its element.

        Raises:
            ValidationError: When the chart type is not a valid class name or the
                column definitions are invalid.
        """

        display_options = dict(options or {})
        reserved = {key: display_options.pop(key, None) for key in RESERVED_OPTION_KEYS}
        rows = data if data is not None else reserved["data"]
        raw_columns = columns if columns is not None else reserved["columns"]
        html_attributes = html if html is not None else (reserved["html"] or {})
        column_names = reserved["column_names"]

        # A list of bare names supplies labels for inferred columns.
        if raw_columns and all(isinstance(column, str) for column in raw_columns):
            column_names, raw_columns = list(raw_columns), None

        class_name = camelize(chart_type)
        if not _CHART_CLASS_RE.fullmatch(class_name):
            raise ValidationError(f"Unsupported chart type {chart_type!r}.")
        self._packages.append(package_for(class_name))

        table = DataTable(rows, raw_columns, column_names=column_names)
        if builder is not None:
            builder(table)

        key = escape_element_id(chart_id)
        if key in self._entries:
            logger.debug("Replacing previously registered chart %r", key)
        self._entries[key] = ChartEntry(
            key=key,
            chart_type=class_name,
            table=table,
            options=coerce_options(display_options),
        )
        logger.debug("Registered %s chart %r with %d rows", class_name, key, len(table))

        attributes = tuple((str(name), value) for name, value in html_attributes.items())
        return RegisteredChart(key=key, element=ChartElement(element_id=key, attributes=attributes))
