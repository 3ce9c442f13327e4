"""Locator configuration loaded from an optional YAML file."""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

__all__ = [
    "DEFAULT_SETTINGS_NAME",
    "LocatorSettings",
    "SettingsError",
    "load_settings",
]

DEFAULT_SETTINGS_NAME = "ctxroots.yaml"

ANALYSIS_OPTIONS_NAME = "analysis_options.yaml"
OLD_ANALYSIS_OPTIONS_NAME = ".analysis_options"
PACKAGES_FILE_NAME = ".packages"
PACKAGES_DIR_NAME = "packages"
HIDDEN_PREFIX = "."


class SettingsError(ValueError):
    """Raised when the settings file is missing, unreadable, or invalid."""


class LocatorSettings(BaseModel):
    """File names and markers that decide where context roots begin."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    options_file_names: List[str] = Field(
        default_factory=lambda: [ANALYSIS_OPTIONS_NAME, OLD_ANALYSIS_OPTIONS_NAME]
    )
    manifest_file_name: str = PACKAGES_FILE_NAME
    packages_dir_name: str = PACKAGES_DIR_NAME
    hidden_prefix: str = HIDDEN_PREFIX
    sdk_path: Optional[str] = None

    @field_validator("options_file_names")
    @classmethod
    def _require_option_names(cls, value: List[str]) -> List[str]:
        cleaned = [name.strip() for name in value if name and name.strip()]
        if not cleaned:
            raise ValueError("at least one options file name is required")
        return cleaned

    @field_validator("manifest_file_name", "packages_dir_name")
    @classmethod
    def _require_name(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("file names must not be blank")
        return cleaned

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "LocatorSettings":
        """Build settings from a flat mapping or one nested under ``locator``."""
        section = data.get("locator", data)
        if section is None:
            section = {}
        if not isinstance(section, Mapping):
            raise SettingsError("The 'locator' section must be a mapping.")
        try:
            return cls.model_validate(dict(section))
        except ValidationError as error:
            raise SettingsError(f"Invalid locator settings: {error}") from error


def load_settings(path: Path | str | None = None) -> LocatorSettings:
    """Load settings from ``path``.

    When ``path`` is omitted the default ``ctxroots.yaml`` in the working
    directory is used if present; otherwise the built-in defaults apply.  An
    explicit path that does not exist is an error.
    """
    explicit = path is not None
    settings_path = Path(path) if path is not None else Path(DEFAULT_SETTINGS_NAME)
    if not settings_path.exists():
        if explicit:
            raise SettingsError(f"Settings file not found: {settings_path}")
        return LocatorSettings()

    try:
        with settings_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except (OSError, yaml.YAMLError) as error:
        raise SettingsError(f"Failed to read settings from {settings_path}: {error}") from error

    if not isinstance(data, Mapping):
        raise SettingsError(f"Expected mapping at top level of {settings_path}")
    return LocatorSettings.from_mapping(data)
