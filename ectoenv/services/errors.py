"""Errors raised while binding environment variables to records."""

from __future__ import annotations


class BindError(Exception):
    """Base class for every bind failure."""


class InvalidTargetError(BindError, TypeError):
    """The bind target is not a mutable dataclass instance."""


class ConversionError(BindError, ValueError):
    """A resolved value could not be parsed into the field's type.

    Attributes:
        field: Name of the field being bound.
        raw_value: The offending text (the element text for list fields).
        target_kind: Kind the text was parsed as (e.g. 'int').
        index: Element position for list fields, otherwise None.
        cause: The underlying parse exception.
    """

    def __init__(
        self,
        field: str,
        raw_value: str,
        target_kind: str,
        cause: Exception,
        *,
        index: int | None = None,
    ) -> None:
        self.field = field
        self.raw_value = raw_value
        self.target_kind = target_kind
        self.cause = cause
        self.index = index
        where = f" (element {index})" if index is not None else ""
        super().__init__(
            f"unable to set value for field {field}. failed to parse "
            f"{raw_value!r}{where} as {target_kind}: {cause}"
        )


class NestedBindError(BindError):
    """Binding a nested record failed.

    Attributes:
        field: Name of the outer field holding the nested record.
        cause: The error raised while binding the nested record.
    """

    def __init__(self, field: str, cause: BindError) -> None:
        self.field = field
        self.cause = cause
        super().__init__(f"unable to set value for field {field}: {cause}")
