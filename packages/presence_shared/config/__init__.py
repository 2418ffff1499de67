"""Public API for shared presence configuration utilities."""

from .loader import load_settings
from .models import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_ENV_FILE,
    ComponentsSettings,
    HttpSettings,
    LoggingSettings,
    PresenceSettings,
    resolve_component_settings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_ENV_FILE",
    "ComponentsSettings",
    "HttpSettings",
    "LoggingSettings",
    "PresenceSettings",
    "load_settings",
    "resolve_component_settings",
]
