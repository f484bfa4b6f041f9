"""Text-to-value conversion for bindable field kinds."""

from __future__ import annotations

import math
import re
from collections.abc import Callable
from typing import Any

from ectoenv.services.errors import ConversionError

KIND_STRING = "string"
KIND_INT = "int"
KIND_BOOL = "bool"
KIND_FLOAT = "float64"
KIND_SLICE = "slice"
KIND_STRUCT = "struct"
KIND_UNSUPPORTED = "unsupported"

# Kinds allowed as list elements
SCALAR_KINDS = frozenset({KIND_STRING, KIND_INT, KIND_BOOL, KIND_FLOAT})

SEQUENCE_SEPARATOR = ","

TRUE_LITERALS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
FALSE_LITERALS = frozenset({"0", "f", "F", "FALSE", "false", "False"})
INFINITY_LITERALS = frozenset({"inf", "infinity"})

INT_MIN = -(2**63)
INT_MAX = 2**63 - 1

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_int(text: str) -> int:
    """Parse a base-10 signed 64-bit integer.

    Args:
        text: Digits with an optional leading sign.

    Returns:
        The parsed integer.

    Raises:
        ValueError: If the text is not a plain decimal integer or overflows.
    """
    if not _INT_PATTERN.fullmatch(text):
        raise ValueError("invalid syntax")
    value = int(text)
    if not INT_MIN <= value <= INT_MAX:
        raise ValueError("value out of range")
    return value


def parse_bool(text: str) -> bool:
    """Parse one of the conventional boolean literals.

    Args:
        text: Literal such as 'true', 'F' or '1'.

    Returns:
        The parsed boolean.

    Raises:
        ValueError: If the literal is not recognised.
    """
    if text in TRUE_LITERALS:
        return True
    if text in FALSE_LITERALS:
        return False
    raise ValueError("invalid syntax")


def parse_float(text: str) -> float:
    """Parse a decimal float, rejecting padding, separators and overflow.

    Args:
        text: Float literal.

    Returns:
        The parsed float.

    Raises:
        ValueError: If the text is not a float literal or overflows.
    """
    if not text.isascii() or text != text.strip() or "_" in text:
        raise ValueError("invalid syntax")
    value = float(text)
    if math.isinf(value) and text.lstrip("+-").lower() not in INFINITY_LITERALS:
        raise ValueError("value out of range")
    return value


def parse_string(text: str) -> str:
    return text


SCALAR_PARSERS: dict[str, Callable[[str], Any]] = {
    KIND_STRING: parse_string,
    KIND_INT: parse_int,
    KIND_BOOL: parse_bool,
    KIND_FLOAT: parse_float,
}


def convert_scalar(field: str, text: str, kind: str) -> Any:  # noqa: ANN401
    """Convert text to a scalar kind.

    Args:
        field: Field name, used in error messages.
        text: Resolved text.
        kind: One of SCALAR_KINDS.

    Returns:
        The converted value.

    Raises:
        ConversionError: If the text cannot be parsed.
    """
    try:
        return SCALAR_PARSERS[kind](text)
    except ValueError as e:
        raise ConversionError(field, text, kind, e) from e


def convert_sequence(field: str, text: str, element_kind: str) -> list[Any]:
    """Split text on commas and convert every element.

    String elements are kept verbatim, so a trailing comma yields a trailing
    empty string. For other kinds an empty element fails to parse.

    Args:
        field: Field name, used in error messages.
        text: Comma-separated text.
        element_kind: One of SCALAR_KINDS.

    Returns:
        The converted elements in split order.

    Raises:
        ConversionError: If any element cannot be parsed.
    """
    if not text and element_kind != KIND_STRING:
        return []

    parser = SCALAR_PARSERS[element_kind]
    values: list[Any] = []
    for index, part in enumerate(text.split(SEQUENCE_SEPARATOR)):
        try:
            values.append(parser(part))
        except ValueError as e:
            raise ConversionError(field, part, element_kind, e, index=index) from e
    return values
