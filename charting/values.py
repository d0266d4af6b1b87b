"""Tagged option values.

Caller-supplied option trees are plain Python literals. They are coerced once
into these variants so the serializer dispatches on a closed set of types.
"""

from __future__ import annotations

from collections.abc import Mapping, Set
from dataclasses import dataclass
from decimal import Decimal
from typing import Union


@dataclass(frozen=True, slots=True)
class TextOption:
    """A string scalar."""

    value: str


@dataclass(frozen=True, slots=True)
class NumberOption:
    """An int, float or Decimal scalar."""

    value: int | float | Decimal


@dataclass(frozen=True, slots=True)
class BooleanOption:
    """A boolean scalar."""

    value: bool


@dataclass(frozen=True, slots=True)
class NullOption:
    """An explicit `None`."""


@dataclass(frozen=True, slots=True)
class SequenceOption:
    """A sequence of scalar values."""

    items: tuple["ScalarOption", ...]


@dataclass(frozen=True, slots=True)
class MappingOption:
    """An ordered mapping of option keys to values.

    Args:
        items: `(key, value)` pairs in caller insertion order.
    """

    items: tuple[tuple[str, "OptionValue"], ...]

    def keys(self) -> tuple[str, ...]:
        """Return option keys in insertion order."""

        return tuple(key for key, _value in self.items)


ScalarOption = Union[TextOption, NumberOption, BooleanOption, NullOption]
OptionValue = Union[TextOption, NumberOption, BooleanOption, NullOption, SequenceOption, MappingOption]


def coerce_scalar(raw: object) -> ScalarOption:
    """Coerce a Python scalar into a tagged scalar option."""

    # bool before number: bool is an int subclass.
    if isinstance(raw, bool):
        return BooleanOption(raw)
    if isinstance(raw, (int, float, Decimal)):
        return NumberOption(raw)
    if raw is None:
        return NullOption()
    return TextOption(str(raw))


def coerce_option(raw: object) -> OptionValue:
    """Coerce a caller-supplied option value into its tagged variant.

    Args:
        raw: A scalar, a mapping, or a list/tuple/set of scalars.

    Returns:
        The matching OptionValue. Strings and bytes are treated as scalars, not
        sequences.
    """

    if isinstance(raw, (MappingOption, SequenceOption, TextOption, NumberOption, BooleanOption, NullOption)):
        return raw
    if isinstance(raw, Mapping):
        return coerce_options(raw)
    if isinstance(raw, (list, tuple, Set)):
        return SequenceOption(tuple(coerce_scalar(item) for item in raw))
    return coerce_scalar(raw)


def coerce_options(raw: Mapping[object, object] | MappingOption | None) -> MappingOption:
    """Coerce a top-level options mapping, preserving key order."""

    if raw is None:
        return MappingOption(())
    if isinstance(raw, MappingOption):
        return raw
    return MappingOption(tuple((str(key), coerce_option(value)) for key, value in raw.items()))
