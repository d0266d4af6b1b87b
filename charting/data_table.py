"""Tabular chart data: typed columns plus positional rows.

A DataTable is built once per chart registration, optionally extended by a
builder callback, and frozen when the script emitter serializes it.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Final, Literal

from .escaping import number_literal, quote_literal

ColumnType = Literal["string", "number", "boolean", "date", "datetime", "timeofday"]

COLUMN_TYPES: Final[tuple[str, ...]] = ("string", "number", "boolean", "date", "datetime", "timeofday")


class ValidationError(ValueError):
    """Raised when table columns or rows have an invalid shape."""


@dataclass(frozen=True, slots=True)
class Column:
    """A named, typed column.

    Args:
        name: Column label shown by the charting library.
        type: One of `COLUMN_TYPES`.
    """

    name: str
    type: ColumnType


@dataclass(frozen=True, slots=True)
class Cell:
    """A single `{v: ...}` cell wrapper.

    Args:
        v: The cell value already rendered as a script literal.
    """

    v: str

    def render(self) -> str:
        """Return the cell as a script object literal."""

        return f"{{v: {self.v}}}"


def infer_column_type(value: object) -> ColumnType:
    """Infer a column type from a sample cell value.

    Precedence is boolean, number, datetime, date, time of day, then string.
    """

    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float, Decimal)):
        return "number"
    # datetime before date: datetime is a date subclass.
    if isinstance(value, datetime):
        return "datetime"
    if isinstance(value, date):
        return "date"
    if isinstance(value, time):
        return "timeofday"
    return "string"


def format_cell_value(value: object, column_type: str) -> str:
    """Render one cell value as a script literal for its column type.

    Args:
        value: Raw cell value.
        column_type: Declared or inferred type of the column.

    Returns:
        Literal text, e.g. `'Mushrooms'`, `3`, `true`, `new Date(2024, 0, 31)`.
    """

    if value is None:
        return "null"
    if column_type == "string":
        return quote_literal(value)
    if column_type == "boolean":
        return "true" if value else "false"
    if column_type == "number":
        if isinstance(value, bool):
            return "1" if value else "0"
        if isinstance(value, (int, float, Decimal)):
            return number_literal(value)
        return quote_literal(value)
    if column_type in ("date", "datetime") and isinstance(value, date):
        # JavaScript months are zero-based.
        parts = [value.year, value.month - 1, value.day]
        if column_type == "datetime" and isinstance(value, datetime):
            parts.extend([value.hour, value.minute, value.second])
        return f"new Date({', '.join(str(part) for part in parts)})"
    if column_type == "timeofday" and isinstance(value, time):
        return f"[{value.hour}, {value.minute}, {value.second}]"
    return quote_literal(value)


def _coerce_column(raw: Column | Mapping[str, object] | Sequence[object]) -> Column:
    if isinstance(raw, Column):
        return raw
    if isinstance(raw, Mapping):
        name, column_type = raw.get("name"), raw.get("type", "string")
    elif isinstance(raw, Sequence) and not isinstance(raw, str) and len(raw) == 2:
        name, column_type = raw[0], raw[1]
    else:
        raise ValidationError(f"Column definitions must be (name, type) pairs, got {raw!r}.")
    if column_type not in COLUMN_TYPES:
        raise ValidationError(f"Column {name!r} has unsupported type {column_type!r}.")
    return Column(name=str(name), type=column_type)  # type: ignore[arg-type]


class DataTable:
    """Ordered columns plus rows aligned to them by position.

    Args:
        rows: Initial rows; each row is a sequence of scalar cell values.
        columns: Optional explicit `(name, type)` pairs. When omitted, one column
            is inferred per position of the first row.
        column_names: Names for inferred columns; missing names default to
            `col{index}`.

    Raises:
        ValidationError: When explicit columns repeat a name or use an unknown type.
    """

    def __init__(
        self,
        rows: Iterable[Sequence[object]] | None = None,
        columns: Iterable[Column | Mapping[str, object] | Sequence[object]] | None = None,
        *,
        column_names: Sequence[str] | None = None,
    ) -> None:
        self._columns: list[Column] = []
        self._rows: list[list[object]] = [list(row) for row in (rows or ())]
        self._frozen = False

        if columns is not None:
            for raw in columns:
                column = _coerce_column(raw)
                self.add_column(column.name, column.type)
        elif self._rows:
            names = list(column_names or ())
            for index, value in enumerate(self._rows[0]):
                name = names[index] if index < len(names) else f"col{index}"
                self.add_column(name, infer_column_type(value))

    def __len__(self) -> int:
        return len(self._rows)

    def __repr__(self) -> str:
        return f"DataTable(columns={self.column_names()!r}, rows={len(self._rows)})"

    @property
    def columns(self) -> tuple[Column, ...]:
        return tuple(self._columns)

    @property
    def rows(self) -> tuple[tuple[object, ...], ...]:
        return tuple(tuple(row) for row in self._rows)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def column_names(self) -> list[str]:
        """Return column names in order."""

        return [column.name for column in self._columns]

    def column_types(self) -> list[str]:
        """Return column types in order."""

        return [column.type for column in self._columns]

    def add_column(self, name: str, column_type: str = "string") -> Column:
        """Append a column.

        Args:
            name: Column name; must be unique within the table.
            column_type: One of `COLUMN_TYPES`.

        Returns:
            The appended Column.

        Raises:
            ValidationError: On a duplicate name, an unknown type, or a frozen table.
        """

        self._ensure_mutable()
        if column_type not in COLUMN_TYPES:
            raise ValidationError(f"Column {name!r} has unsupported type {column_type!r}.")
        if name in self.column_names():
            raise ValidationError(f"Column {name!r} already exists.")
        column = Column(name=name, type=column_type)  # type: ignore[arg-type]
        self._columns.append(column)
        return column

    def add_row(self, values: Sequence[object]) -> None:
        """Append a row. Width is only checked when rows are formatted."""

        self._ensure_mutable()
        self._rows.append(list(values))

    def add_rows(self, rows: Iterable[Sequence[object]]) -> None:
        """Append several rows."""

        for row in rows:
            self.add_row(row)

    def freeze(self) -> None:
        """Make the table read-only."""

        self._frozen = True

    def format_rows(self) -> list[list[Cell]]:
        """Wrap every cell as a `{v: ...}` Cell in column order.

        Raises:
            ValidationError: When a row's width differs from the column count.
        """

        width = len(self._columns)
        formatted: list[list[Cell]] = []
        for index, row in enumerate(self._rows):
            if len(row) != width:
                raise ValidationError(f"Row {index} has {len(row)} values but the table has {width} columns.")
            formatted.append(
                [Cell(v=format_cell_value(value, column.type)) for value, column in zip(row, self._columns)]
            )
        return formatted

    def render_rows(self) -> str:
        """Render formatted rows as the argument text for `addRows`."""

        rendered = ["[" + ", ".join(cell.render() for cell in row) + "]" for row in self.format_rows()]
        return "[" + ", ".join(rendered) + "]"

    def _ensure_mutable(self) -> None:
        if self._frozen:
            raise ValidationError("DataTable is read-only once it has been serialized.")
