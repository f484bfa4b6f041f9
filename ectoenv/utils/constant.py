"""Package-wide constants and configuration."""

from __future__ import annotations

from .env_loader import load_project_env

# Load once (single source of truth)
_ENV = load_project_env()

# Field metadata keys naming the source variable and its default literal
ENV_TAG: str = "env"
ENV_DEFAULT_TAG: str = "env-default"

# Seconds between background re-binds. Read again before every tick when
# no explicit interval is given, so callers may change it at startup.
AUTO_REFRESH_INTERVAL: int = int(_ENV.get("ECTOENV_AUTO_REFRESH_INTERVAL", "60"))
