"""Build and render the page's chart initialization script.

The emitter first builds a small statement tree from a ChartRegistry and only
renders it to text at the end, so tests can assert on structure.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Final, Union

from .escaping import quote_literal
from .options import serialize_options
from .registry import ChartRegistry
from .values import MappingOption

logger = logging.getLogger(__name__)

DATA_LOOKUP: Final[str] = "chartData"
CHART_LOOKUP: Final[str] = "visualizationCharts"
LOAD_CALLBACK: Final[str] = "drawCharts"
API_VERSION: Final[str] = "1"
RENDERED_MARKER: Final[str] = "<!-- Rendered Google Visualizations /-->"


def _key_literal(key: str) -> str:
    # Keys are escaped element ids and contain no quote or backslash characters.
    return f"'{key}'"


def _data_ref(key: str) -> str:
    return f"{DATA_LOOKUP}[{_key_literal(key)}]"


def _chart_ref(key: str) -> str:
    return f"{CHART_LOOKUP}[{_key_literal(key)}]"


@dataclass(frozen=True, slots=True)
class LoadPackages:
    """`google.load(...)` for the listed packages."""

    packages: tuple[str, ...]
    version: str = API_VERSION

    def render(self) -> str:
        package_list = ",".join(quote_literal(package) for package in self.packages)
        return f"google.load('visualization', {quote_literal(self.version)}, {{'packages':[{package_list}]}});"


@dataclass(frozen=True, slots=True)
class SetOnLoadCallback:
    """Register the function run once the library has loaded."""

    name: str

    def render(self) -> str:
        return f"google.setOnLoadCallback({self.name});"


@dataclass(frozen=True, slots=True)
class DeclareLookup:
    """Declare a page-scoped lookup table keyed by element id."""

    name: str

    def render(self) -> str:
        return f"var {self.name} = {{}};"


@dataclass(frozen=True, slots=True)
class NewDataTable:
    key: str

    def render(self) -> str:
        return f"{_data_ref(self.key)} = new google.visualization.DataTable();"


@dataclass(frozen=True, slots=True)
class AddColumn:
    key: str
    column_type: str
    name: str

    def render(self) -> str:
        return f"{_data_ref(self.key)}.addColumn({quote_literal(self.column_type)}, {quote_literal(self.name)});"


@dataclass(frozen=True, slots=True)
class AddRows:
    """Bulk-load rows already rendered by `DataTable.render_rows`."""

    key: str
    rows: str

    def render(self) -> str:
        return f"{_data_ref(self.key)}.addRows({self.rows});"


@dataclass(frozen=True, slots=True)
class NewChart:
    key: str
    chart_type: str

    def render(self) -> str:
        element = f"document.getElementById({_key_literal(self.key)})"
        return f"{_chart_ref(self.key)} = new google.visualization.{self.chart_type}({element});"


@dataclass(frozen=True, slots=True)
class DrawChart:
    key: str
    options: MappingOption

    def render(self) -> str:
        return f"{_chart_ref(self.key)}.draw({_data_ref(self.key)}, {{{serialize_options(self.options)}}});"


@dataclass(frozen=True, slots=True)
class Function:
    """A named function declaration wrapping a statement body."""

    name: str
    body: tuple["Statement", ...]

    def render(self) -> str:
        lines = [f"function {self.name}() {{"]
        lines.extend(statement.render() for statement in self.body)
        lines.append("}")
        return "\n".join(lines)


Statement = Union[
    LoadPackages,
    SetOnLoadCallback,
    DeclareLookup,
    NewDataTable,
    AddColumn,
    AddRows,
    NewChart,
    DrawChart,
    Function,
]


@dataclass(frozen=True, slots=True)
class ScriptBlock:
    """A `<script>` element followed by a trailing marker comment."""

    statements: tuple[Statement, ...]
    trailer: str = RENDERED_MARKER

    def render(self) -> str:
        body = "\n".join(statement.render() for statement in self.statements)
        return f'<script type="text/javascript">\n{body}\n</script>{self.trailer}'


def build_script(registry: ChartRegistry | None, *, version: str = API_VERSION) -> ScriptBlock | None:
    """Build the statement tree for every registered chart.

    Args:
        registry: The page's registry, or None when no chart was registered.
        version: Library version passed to `google.load`.

    Returns:
        A ScriptBlock, or None when there is nothing to render.

    Raises:
        ValidationError: When a table's rows do not match its columns. Nothing
            is rendered in that case.
    """

    if registry is None or not len(registry):
        return None

    body: list[Statement] = []
    for entry in registry.entries():
        rows = entry.table.render_rows()
        body.append(NewDataTable(entry.key))
        body.extend(AddColumn(entry.key, column.type, column.name) for column in entry.table.columns)
        body.append(AddRows(entry.key, rows))
        body.append(NewChart(entry.key, entry.chart_type))
        body.append(DrawChart(entry.key, entry.options))

    for entry in registry.entries():
        entry.table.freeze()

    return ScriptBlock(
        statements=(
            LoadPackages(tuple(registry.packages()), version),
            SetOnLoadCallback(LOAD_CALLBACK),
            DeclareLookup(DATA_LOOKUP),
            DeclareLookup(CHART_LOOKUP),
            Function(LOAD_CALLBACK, tuple(body)),
        )
    )


def render_script(block: ScriptBlock) -> str:
    """Render a ScriptBlock to HTML text."""

    return block.render()


def render_all(registry: ChartRegistry | None, *, version: str = API_VERSION) -> str | None:
    """Build and render the page script.

    Returns:
        Script HTML, or None when no chart was registered.
    """

    block = build_script(registry, version=version)
    if block is None:
        return None
    logger.debug("Rendering %d charts using packages %s", len(registry), ", ".join(registry.packages()))
    return render_script(block)
