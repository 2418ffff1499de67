"""Configuration loading with deterministic precedence.

The cascade is always:
1) CLI params
2) Environment variables
3) ``.env`` file (also the durable home of the rotated access token)
4) ~/.config/presence/presence.yaml
5) Built-in model defaults

Environment variable format:
- Prefix: ``PRESENCE_``
- Nested keys: ``__`` separator
- Example: ``PRESENCE_LOGGING__LEVEL=DEBUG`` -> ``logging.level = "DEBUG"``
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, ClassVar, Mapping

from .models import DEFAULT_CONFIG_PATH, DEFAULT_ENV_FILE, PresenceSettings


def load_settings(
    *,
    cli_params: Mapping[str, Any] | None = None,
    config_path: str | Path | None = None,
    env_file: str | Path | None = DEFAULT_ENV_FILE,
) -> PresenceSettings:
    """Load root settings by applying the standard precedence cascade."""
    resolved_config_path = (
        Path(config_path).expanduser() if config_path is not None else DEFAULT_CONFIG_PATH
    )

    resolved_env_file = Path(env_file) if env_file is not None else None

    class _ResolvedPresenceSettings(PresenceSettings):
        _config_path: ClassVar[Path] = resolved_config_path
        _env_file_path: ClassVar[Path | None] = resolved_env_file

    return _ResolvedPresenceSettings(
        _env_file=resolved_env_file,
        **dict(cli_params or {}),
    )
