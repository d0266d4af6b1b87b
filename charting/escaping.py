"""Escaping helpers for values embedded in generated script and HTML ids.

Element ids double as lookup keys in the generated script, so both the HTML
`id` attribute and every `chartData[...]` reference go through
`escape_element_id`.
"""

from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import Final

from django.utils.html import escapejs

_ELEMENT_ID_DISALLOWED_RE: Final[re.Pattern[str]] = re.compile(r"[^\w\-:.]", flags=re.ASCII)
_IDENTIFIER_RE: Final[re.Pattern[str]] = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")


def escape_literal(value: object) -> str:
    """Escape a value for use inside a quoted script string.

    Args:
        value: Any value; non-strings are converted with `str()`.

    Returns:
        Text safe inside a single- or double-quoted script literal. Quotes,
        backslashes, control characters and `<`/`>`/`&` are `\\uXXXX` escaped, so
        the output cannot terminate the literal or the enclosing script tag.
    """

    if value is None:
        return ""
    return str(escapejs(str(value)))


def quote_literal(value: object) -> str:
    """Return `value` as a single-quoted, escaped script string literal."""

    return f"'{escape_literal(value)}'"


def escape_element_id(element_id: object) -> str:
    """Restrict an identifier to characters valid in an HTML id attribute.

    Word characters, digits, dashes, colons and periods are kept; everything
    else becomes an underscore.
    """

    return _ELEMENT_ID_DISALLOWED_RE.sub("_", str(element_id))


def number_literal(value: int | float | Decimal) -> str:
    """Render a number as a script numeric literal.

    Non-finite values become `NaN`, `Infinity` or `-Infinity`.
    """

    if isinstance(value, Decimal):
        if value.is_nan():
            return "NaN"
        if value.is_infinite():
            return "-Infinity" if value.is_signed() else "Infinity"
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "-Infinity" if value < 0 else "Infinity"
    return str(value)


def property_key(key: str) -> str:
    """Render an object literal key, quoting it unless it is a plain identifier."""

    if _IDENTIFIER_RE.fullmatch(key):
        return key
    return quote_literal(key)
