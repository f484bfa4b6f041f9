"""Tests for text conversion and field descriptors."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional

import pytest

from ectoenv.services.conversion import (
    KIND_BOOL,
    KIND_FLOAT,
    KIND_INT,
    KIND_SLICE,
    KIND_STRING,
    KIND_STRUCT,
    KIND_UNSUPPORTED,
    convert_scalar,
    convert_sequence,
    parse_bool,
    parse_float,
    parse_int,
)
from ectoenv.services.descriptors import classify, describe_fields, env_field
from ectoenv.services.errors import ConversionError
from ectoenv.utils.env_loader import resolve_value

# --- Scalar parsing ---


def test_parse_int__accepts_signed_decimal() -> None:
    """Accept digits with an optional sign."""
    assert parse_int("42") == 42
    assert parse_int("-17") == -17
    assert parse_int("+8") == 8
    assert parse_int("007") == 7


@pytest.mark.parametrize(
    "text",
    ["", " 1", "1 ", "1_000", "0x10", "1.0", "seven", "9223372036854775808"],
)
def test_parse_int__rejects_non_decimal_and_overflow(text: str) -> None:
    """Reject padding, separators, other bases and 64-bit overflow."""
    with pytest.raises(ValueError):
        parse_int(text)


def test_parse_int__accepts_64_bit_bounds() -> None:
    """Accept the signed 64-bit extremes."""
    assert parse_int("9223372036854775807") == 2**63 - 1
    assert parse_int("-9223372036854775808") == -(2**63)


def test_parse_bool__accepts_conventional_literals() -> None:
    """Accept the conventional true/false spellings."""
    for literal in ("1", "t", "T", "TRUE", "true", "True"):
        assert parse_bool(literal) is True
    for literal in ("0", "f", "F", "FALSE", "false", "False"):
        assert parse_bool(literal) is False


@pytest.mark.parametrize("text", ["", "yes", "no", "on", "tRuE", " true"])
def test_parse_bool__rejects_other_text(text: str) -> None:
    """Reject anything outside the literal set."""
    with pytest.raises(ValueError):
        parse_bool(text)


def test_parse_float__accepts_decimal_forms() -> None:
    """Accept plain, signed, exponent and special float forms."""
    assert parse_float("3.14") == 3.14
    assert parse_float("-2") == -2.0
    assert parse_float("1e3") == 1000.0
    assert math.isinf(parse_float("inf"))
    assert math.isnan(parse_float("NaN"))
    assert parse_float("-Infinity") == -math.inf


@pytest.mark.parametrize(
    "text",
    ["", "abc", " 1.5", "1_0.5", "1.5\n", "１２", "١٢.٥", "1e400", "-1e400"],
)
def test_parse_float__rejects_invalid_text(text: str) -> None:
    """Reject padding, separators, non-ASCII digits and overflow."""
    with pytest.raises(ValueError):
        parse_float(text)


def test_convert_scalar__wraps_parse_errors() -> None:
    """Wrap parse failures in ConversionError chained to the cause."""
    with pytest.raises(ConversionError) as exc_info:
        convert_scalar("ratio", "half", KIND_FLOAT)

    err = exc_info.value
    assert err.field == "ratio"
    assert err.target_kind == "float64"
    assert err.__cause__ is err.cause
    assert "ratio" in str(err)
    assert "'half'" in str(err)


# --- Sequences ---


def test_convert_sequence__empty_text_yields_empty_list_for_non_strings() -> None:
    """Return an empty list for empty non-string sequences."""
    assert convert_sequence("ids", "", KIND_INT) == []
    assert convert_sequence("flags", "", KIND_BOOL) == []


def test_convert_sequence__does_not_trim_elements() -> None:
    """Keep whitespace in string elements and reject it in numeric ones."""
    assert convert_sequence("names", "a, b", KIND_STRING) == ["a", " b"]

    with pytest.raises(ConversionError) as exc_info:
        convert_sequence("ids", "1, 2", KIND_INT)

    assert exc_info.value.index == 1
    assert exc_info.value.raw_value == " 2"


def test_convert_sequence__trailing_comma_policy() -> None:
    """Keep a trailing empty string but reject a trailing empty number."""
    assert convert_sequence("names", "a,", KIND_STRING) == ["a", ""]

    with pytest.raises(ConversionError):
        convert_sequence("flags", "true,", KIND_BOOL)


# --- Field descriptors ---


@dataclass
class Inner:
    value: str = ""


@dataclass
class Described:
    name: str = env_field("DESCRIBED_NAME", "anon", default="")
    flag: bool = env_field("DESCRIBED_FLAG", default=False)
    ratios: List[float] = env_field("DESCRIBED_RATIOS", default_factory=list)
    inner: Inner = field(default_factory=Inner)
    inners: list[Inner] = field(default_factory=list)
    _hidden: int = 0
    extra: str = env_field("DESCRIBED_EXTRA", default="", metadata={"owner": "ops"})


def test_classify__maps_type_hints_to_kinds() -> None:
    """Classify scalars, lists, records and unsupported types."""
    assert classify(str) == (KIND_STRING, None, None)
    assert classify(bool) == (KIND_BOOL, None, None)
    assert classify(int) == (KIND_INT, None, None)
    assert classify(Optional[float]) == (KIND_FLOAT, None, None)
    assert classify(int | None) == (KIND_INT, None, None)
    assert classify(list[int]) == (KIND_SLICE, KIND_INT, None)
    assert classify(Inner) == (KIND_STRUCT, None, Inner)
    assert classify(list[Inner])[0] == KIND_UNSUPPORTED
    assert classify(dict[str, int])[0] == KIND_UNSUPPORTED
    assert classify(int | str)[0] == KIND_UNSUPPORTED
    assert classify(bytes)[0] == KIND_UNSUPPORTED


def test_describe_fields__reads_metadata_in_declaration_order() -> None:
    """Describe every field with its variable name and default literal."""
    descriptors = describe_fields(Described)

    assert [d.name for d in descriptors] == [
        "name",
        "flag",
        "ratios",
        "inner",
        "inners",
        "_hidden",
        "extra",
    ]
    by_name = {d.name: d for d in descriptors}
    assert by_name["name"].env_name == "DESCRIBED_NAME"
    assert by_name["name"].default_literal == "anon"
    assert by_name["flag"].default_literal is None
    assert by_name["ratios"].element_kind == KIND_FLOAT
    assert by_name["inner"].kind == KIND_STRUCT
    assert by_name["inner"].env_name is None
    assert by_name["inners"].kind == KIND_UNSUPPORTED
    assert by_name["_hidden"].writable is False
    assert by_name["extra"].env_name == "DESCRIBED_EXTRA"


def test_describe_fields__is_cached_per_class() -> None:
    """Return the same descriptor tuple on repeated calls."""
    assert describe_fields(Described) is describe_fields(Described)


def test_env_field__keeps_caller_metadata() -> None:
    """Merge caller metadata with the binding keys."""
    extra = Described.__dataclass_fields__["extra"]

    assert extra.metadata["owner"] == "ops"
    assert extra.metadata["env"] == "DESCRIBED_EXTRA"
    assert "env-default" not in extra.metadata


# --- Environment lookup ---


def test_resolve_value__prefers_environment_then_default() -> None:
    """Use the variable first, then the default literal, then nothing."""
    env = {"SET": "value", "EMPTY": ""}

    assert resolve_value(env, "SET", "fallback") == "value"
    assert resolve_value(env, "EMPTY", "fallback") == "fallback"
    assert resolve_value(env, "MISSING", "fallback") == "fallback"
    assert resolve_value(env, "MISSING") is None
    assert resolve_value(env, "EMPTY", "") is None
