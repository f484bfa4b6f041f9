"""Public entry points for binding environment variables to dataclasses.

Example:
    @dataclass
    class Config:
        name: str = env_field("NAME", "anon", default="")
        count: int = env_field("COUNT", default=0)

    config = Config()
    bind_env(config)

Business logic lives in the services layer; this module only re-exports it.
"""

from __future__ import annotations

from ectoenv.services.binder import bind_env
from ectoenv.services.descriptors import FieldDescriptor, describe_fields, env_field
from ectoenv.services.errors import (
    BindError,
    ConversionError,
    InvalidTargetError,
    NestedBindError,
)
from ectoenv.services.refresher import AutoRefresher, bind_env_with_auto_refresh
from ectoenv.utils.constant import ENV_DEFAULT_TAG, ENV_TAG

__all__ = [
    "ENV_DEFAULT_TAG",
    "ENV_TAG",
    "AutoRefresher",
    "BindError",
    "ConversionError",
    "FieldDescriptor",
    "InvalidTargetError",
    "NestedBindError",
    "bind_env",
    "bind_env_with_auto_refresh",
    "describe_fields",
    "env_field",
]
