"""Static field descriptors for bindable records.

A record is a dataclass whose fields carry the source variable name and an
optional default literal in their metadata. Descriptors are derived once per
record class and cached, so binding never inspects types again.
"""

from __future__ import annotations

import dataclasses
import logging
import sys
import types
import typing
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from ectoenv.services.conversion import (
    KIND_BOOL,
    KIND_FLOAT,
    KIND_INT,
    KIND_SLICE,
    KIND_STRING,
    KIND_STRUCT,
    KIND_UNSUPPORTED,
    SCALAR_KINDS,
)
from ectoenv.utils.constant import ENV_DEFAULT_TAG, ENV_TAG

_SCALAR_TYPES: dict[Any, str] = {
    str: KIND_STRING,
    bool: KIND_BOOL,
    int: KIND_INT,
    float: KIND_FLOAT,
}


@dataclass(frozen=True)
class FieldDescriptor:
    """How one record field is bound.

    Attributes:
        name: Attribute name on the record.
        env_name: Source variable name, or None when not annotated.
        default_literal: Default text used when the variable is unset.
        kind: Field kind (see ectoenv.services.conversion).
        element_kind: Element kind for list fields.
        record_type: Dataclass type for nested record fields.
        writable: False for private fields.
    """

    name: str
    env_name: str | None
    default_literal: str | None
    kind: str
    element_kind: str | None = None
    record_type: type | None = None
    writable: bool = True


def env_field(
    name: str,
    default_literal: str | None = None,
    **field_kwargs: Any,  # noqa: ANN401
) -> Any:  # noqa: ANN401
    """Declare a dataclass field bound to an environment variable.

    Args:
        name: Environment variable to read.
        default_literal: Text used when the variable is unset or empty.
        **field_kwargs: Passed through to dataclasses.field.

    Returns:
        A dataclasses.field carrying the binding metadata.
    """
    metadata = dict(field_kwargs.pop("metadata", None) or {})
    metadata[ENV_TAG] = name
    if default_literal is not None:
        metadata[ENV_DEFAULT_TAG] = default_literal
    return dataclasses.field(metadata=metadata, **field_kwargs)


def is_record_type(tp: Any) -> bool:  # noqa: ANN401
    return isinstance(tp, type) and dataclasses.is_dataclass(tp)


def _unwrap_optional(tp: Any) -> Any:  # noqa: ANN401
    origin = typing.get_origin(tp)
    if origin is typing.Union or origin is types.UnionType:
        args = [a for a in typing.get_args(tp) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return tp


def classify(tp: Any) -> tuple[str, str | None, type | None]:  # noqa: ANN401
    """Map a type hint to (kind, element_kind, record_type).

    Args:
        tp: Resolved type hint.

    Returns:
        The kind triple. Unknown types map to KIND_UNSUPPORTED.
    """
    tp = _unwrap_optional(tp)

    if tp in _SCALAR_TYPES:
        return _SCALAR_TYPES[tp], None, None
    if is_record_type(tp):
        return KIND_STRUCT, None, tp

    if typing.get_origin(tp) is list:
        args = typing.get_args(tp)
        element = _SCALAR_TYPES.get(args[0]) if len(args) == 1 else None
        if element in SCALAR_KINDS:
            return KIND_SLICE, element, None

    return KIND_UNSUPPORTED, None, None


def _resolve_hints(record_type: type) -> dict[str, Any]:
    """Resolve field annotations, tolerating names that are out of scope.

    Records declared inside a function under postponed evaluation keep their
    annotations as strings naming function locals. Such fields resolve to
    None and are classified as unsupported.

    Args:
        record_type: A dataclass type.

    Returns:
        Mapping of field name to resolved type hint (or None).
    """
    try:
        return typing.get_type_hints(record_type)
    except NameError as e:
        logging.debug("Resolving %s field by field: %s", record_type.__name__, e)

    module = sys.modules.get(record_type.__module__)
    globalns = dict(vars(module)) if module is not None else {}
    localns = {record_type.__name__: record_type}
    hints: dict[str, Any] = {}
    for f in dataclasses.fields(record_type):
        if not isinstance(f.type, str):
            hints[f.name] = f.type
            continue
        try:
            hints[f.name] = eval(f.type, globalns, localns)  # noqa: S307
        except (NameError, AttributeError):
            logging.debug(
                "Skipping field %s.%s: cannot resolve %r",
                record_type.__name__,
                f.name,
                f.type,
            )
            hints[f.name] = None
    return hints


@lru_cache(maxsize=None)
def describe_fields(record_type: type) -> tuple[FieldDescriptor, ...]:
    """Build the descriptor list for a record class.

    Args:
        record_type: A dataclass type.

    Returns:
        Descriptors in field declaration order.
    """
    hints = _resolve_hints(record_type)
    descriptors = []
    for f in dataclasses.fields(record_type):
        kind, element_kind, nested = classify(hints.get(f.name, f.type))
        descriptors.append(
            FieldDescriptor(
                name=f.name,
                env_name=f.metadata.get(ENV_TAG) or None,
                default_literal=f.metadata.get(ENV_DEFAULT_TAG) or None,
                kind=kind,
                element_kind=element_kind,
                record_type=nested,
                writable=not f.name.startswith("_"),
            )
        )
    return tuple(descriptors)
