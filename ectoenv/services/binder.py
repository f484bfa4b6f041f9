"""Bind environment variables to dataclass records.

Walks a record's field descriptors in declaration order, resolves each
annotated field from the environment (or its default literal), converts the
text and writes it in place. Nested records are bound recursively.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from typing import Any

from ectoenv.services.conversion import (
    KIND_SLICE,
    KIND_STRUCT,
    SCALAR_KINDS,
    convert_scalar,
    convert_sequence,
)
from ectoenv.services.descriptors import FieldDescriptor, describe_fields
from ectoenv.services.errors import BindError, InvalidTargetError, NestedBindError
from ectoenv.utils.env_loader import load_project_env, resolve_value


def validate_target(target: Any) -> type:  # noqa: ANN401
    """Check that the target can be bound in place.

    Args:
        target: Object passed to bind_env.

    Returns:
        The target's record class.

    Raises:
        InvalidTargetError: If the target is None, a class, not a dataclass
            instance, or a frozen dataclass instance.
    """
    if target is None or isinstance(target, type):
        raise InvalidTargetError("provided value must be a dataclass instance")
    if not dataclasses.is_dataclass(target):
        raise InvalidTargetError(
            f"provided value must be a dataclass instance, got {type(target).__name__}"
        )
    record_type = type(target)
    if record_type.__dataclass_params__.frozen:
        raise InvalidTargetError(
            f"provided value must be a mutable dataclass instance, "
            f"{record_type.__name__} is frozen"
        )
    return record_type


def bind_env(target: Any) -> None:  # noqa: ANN401
    """Set the fields of a dataclass instance from environment variables.

    The first failure aborts the call. Fields written before it keep their
    new values.

    Args:
        target: A mutable dataclass instance.

    Raises:
        InvalidTargetError: If the target cannot be bound.
        ConversionError: If a value cannot be parsed into its field's type.
        NestedBindError: If binding a nested record fails.
    """
    record_type = validate_target(target)
    _bind_record(target, record_type, load_project_env())


def _bind_record(target: Any, record_type: type, env: Mapping[str, str]) -> None:  # noqa: ANN401
    for descriptor in describe_fields(record_type):
        if not descriptor.writable:
            continue

        if descriptor.kind == KIND_STRUCT:
            _bind_nested(target, descriptor, env)
            continue

        if descriptor.env_name is None:
            continue

        text = resolve_value(env, descriptor.env_name, descriptor.default_literal)
        if text is None:
            continue

        if descriptor.kind in SCALAR_KINDS:
            value = convert_scalar(descriptor.name, text, descriptor.kind)
        elif descriptor.kind == KIND_SLICE:
            value = convert_sequence(descriptor.name, text, descriptor.element_kind)
        else:
            continue

        setattr(target, descriptor.name, value)
        logging.debug("Bound field %s from %s", descriptor.name, descriptor.env_name)


def _is_frozen(record: Any) -> bool:  # noqa: ANN401
    params = getattr(record, "__dataclass_params__", None)
    return params is not None and params.frozen


def _bind_nested(target: Any, descriptor: FieldDescriptor, env: Mapping[str, str]) -> None:  # noqa: ANN401
    nested = getattr(target, descriptor.name, None)
    if nested is None:
        if _is_frozen(descriptor.record_type):
            logging.debug("Skipping field %s: frozen record", descriptor.name)
            return
        try:
            nested = descriptor.record_type()
        except Exception as e:  # noqa: BLE001
            logging.debug(
                "Skipping field %s: cannot create %s: %s",
                descriptor.name,
                descriptor.record_type.__name__,
                e,
            )
            return
        setattr(target, descriptor.name, nested)
    elif _is_frozen(nested):
        logging.debug("Skipping field %s: frozen record", descriptor.name)
        return

    try:
        _bind_record(nested, validate_target(nested), env)
    except BindError as e:
        raise NestedBindError(descriptor.name, e) from e
