"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Constructor arguments
  2. Environment variables  (FILE_ENRICHMENT__ENRICHMENT__FIELD=userid)
  3. file-enrichment.yaml   (searched in cwd, then the platform config dir)

``enrichment.field`` and ``enrichment.dictionary_path`` have no defaults and
must come from one of the sources above. Everything is validated at
construction and immutable afterwards.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from file_enrichment.field_reference import parse_field_reference

_CONFIG_FILENAME = "file-enrichment.yaml"
_DEFAULT_CONFIG_DIR = platformdirs.user_config_dir("file-enrichment")


def _find_config_file() -> str | None:
    """Return the path of the first file-enrichment.yaml found, or None."""
    candidates = [
        Path(_CONFIG_FILENAME),
        Path(_DEFAULT_CONFIG_DIR) / _CONFIG_FILENAME,
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class EnrichmentSettings(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    field: str
    override: bool = False
    dictionary_path: Path
    separator: str = ":"
    refresh_interval: float = Field(default=300, gt=0)
    # Empty string means "merge into the base record"
    destination: str = ""

    @field_validator("field")
    @classmethod
    def validate_field(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field must not be empty")
        parse_field_reference(v)
        return v

    @field_validator("separator")
    @classmethod
    def validate_separator(cls, v: str) -> str:
        if not v:
            raise ValueError("separator must not be empty")
        if "\n" in v or "\r" in v:
            raise ValueError("separator must not contain line breaks")
        return v

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        v = v.strip()
        if v:
            parse_field_reference(v)
        return v


class LoggingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: FILE_ENRICHMENT__ENRICHMENT__OVERRIDE=true
        env_prefix="FILE_ENRICHMENT__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
        frozen=True,
    )

    enrichment: EnrichmentSettings
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
