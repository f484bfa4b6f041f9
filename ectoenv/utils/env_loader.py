"""Environment variable loading utilities."""

from __future__ import annotations

import os
from collections.abc import Mapping


def load_project_env() -> dict[str, str]:
    """Take a snapshot of the process environment.

    Returns:
        A dictionary containing the current environment variables.
    """
    return dict(os.environ)


def resolve_value(
    env: Mapping[str, str],
    name: str,
    default_literal: str | None = None,
) -> str | None:
    """Look up a variable, falling back to a default literal.

    Empty values count as unset.

    Args:
        env: Environment snapshot to read from.
        name: Variable name.
        default_literal: Text to use when the variable is unset or empty.

    Returns:
        The resolved text, or None when neither source has a value.
    """
    value = env.get(name, "")
    if value:
        return value
    if default_literal:
        return default_literal
    return None
