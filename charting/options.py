"""Serialize nested chart options into script object-literal syntax."""

from __future__ import annotations

from collections.abc import Mapping

from .escaping import number_literal, property_key, quote_literal
from .values import (
    BooleanOption,
    MappingOption,
    NullOption,
    NumberOption,
    OptionValue,
    ScalarOption,
    SequenceOption,
    TextOption,
    coerce_options,
)


def serialize_options(options: Mapping[object, object] | MappingOption | None) -> str:
    """Render an options tree as comma-joined `key: value` pairs.

    Keys keep the caller's insertion order; keys that are not plain
    identifiers are emitted as quoted literals. The result has no surrounding
    braces; callers wrap it where an object literal is needed.

    Args:
        options: A plain mapping or an already coerced MappingOption.

    Returns:
        Text such as `title: 'Sales',legend: {position: 'none'}`.
    """

    tree = coerce_options(options)
    return ",".join(f"{property_key(key)}: {_serialize_value(value)}" for key, value in tree.items)


def _serialize_value(value: OptionValue) -> str:
    if isinstance(value, MappingOption):
        return "{" + serialize_options(value) + "}"
    if isinstance(value, SequenceOption):
        # Sequence items are always quoted, numbers included.
        quoted = (quote_literal(None if isinstance(item, NullOption) else _scalar_text(item)) for item in value.items)
        return "[ " + ", ".join(quoted) + " ]"
    if isinstance(value, TextOption):
        return quote_literal(value.value)
    return _scalar_text(value)


def _scalar_text(value: ScalarOption) -> str:
    if isinstance(value, TextOption):
        return value.value
    if isinstance(value, BooleanOption):
        return "true" if value.value else "false"
    if isinstance(value, NumberOption):
        return number_literal(value.value)
    if isinstance(value, NullOption):
        return "null"
    raise TypeError(f"Unsupported option value: {value!r}")
