"""Typed configuration models for presence runtime settings."""

from __future__ import annotations

from pathlib import Path
from typing import ClassVar, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "presence" / "presence.yaml"
DEFAULT_ENV_FILE = Path(".env")


class LoggingSettings(BaseModel):
    """Root logger level, output format and identity fields."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_output: bool = True
    service: str = "presence"
    environment: str = "dev"


class HttpSettings(BaseModel):
    """Where uvicorn binds the records API."""

    host: str = "127.0.0.1"
    port: int = Field(default=3000, gt=0, lt=65536)
    log_level: Literal["critical", "error", "warning", "info", "debug"] = "info"


class ComponentNamespaceSettings(BaseModel):
    """Per-kind map of component name to its raw settings mapping."""

    model_config = ConfigDict(extra="allow")


_COMPONENT_KINDS = ("service", "adapter", "substrate")


class ComponentsSettings(BaseModel):
    """``components.<kind>.<name>`` tree; each component validates its own leaf."""

    model_config = ConfigDict(extra="allow")

    service: ComponentNamespaceSettings = Field(
        default_factory=ComponentNamespaceSettings
    )
    adapter: ComponentNamespaceSettings = Field(
        default_factory=ComponentNamespaceSettings
    )
    substrate: ComponentNamespaceSettings = Field(
        default_factory=ComponentNamespaceSettings
    )

    @model_validator(mode="before")
    @classmethod
    def _reject_flat_component_keys(cls, value: object) -> object:
        """``components.adapter_x`` is a typo for ``components.adapter.x``."""
        if not isinstance(value, dict):
            return value
        for key in value:
            kind, underscore, name = str(key).partition("_")
            if underscore and kind in _COMPONENT_KINDS:
                raise ValueError(
                    f"components.{key} is invalid; use components.{kind}.{name} instead"
                )
        return value


class PresenceSettings(BaseSettings):
    """Process settings: logging, HTTP bind and the components tree."""

    model_config = SettingsConfigDict(
        env_prefix="PRESENCE_",
        env_nested_delimiter="__",
        env_file=DEFAULT_ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
        nested_model_default_partial_update=True,
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)
    components: ComponentsSettings = Field(default_factory=ComponentsSettings)

    _config_path: ClassVar[Path] = DEFAULT_CONFIG_PATH
    _env_file_path: ClassVar[Path | None] = DEFAULT_ENV_FILE

    @property
    def env_file_path(self) -> Path | None:
        """Return the ``.env`` file these settings were loaded from, if any."""
        return self._env_file_path

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Apply precedence: init > env > dotenv > yaml > model defaults."""
        del file_secret_settings
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(
                settings_cls,
                yaml_file=cls._config_path,
                yaml_file_encoding="utf-8",
            ),
        )


TComponentSettings = TypeVar("TComponentSettings", bound=BaseModel)


def resolve_component_settings(
    *,
    settings: PresenceSettings,
    component_id: str,
    model: type[TComponentSettings],
) -> TComponentSettings:
    """Validate ``components.<kind>.<name>`` for ``<kind>_<name>`` into ``model``.

    A component with no configured subtree gets the model defaults.
    """
    kind, underscore, name = component_id.partition("_")
    if not underscore or kind not in _COMPONENT_KINDS:
        raise ValueError(
            f"component_id must be '<service|adapter|substrate>_<name>': {component_id}"
        )
    namespace = getattr(settings.components, kind).model_dump(mode="python")
    raw = namespace.get(name, {})
    if not isinstance(raw, dict):
        raise TypeError(f"components.{kind}.{name} must be a mapping")
    return model.model_validate(raw)
