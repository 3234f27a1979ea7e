# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Build settings for the catalog engine and their TOML loader."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "dsl-catalog"
NAME_PLACEHOLDER: Final[str] = "{name}"


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class CoercionPolicy(str, Enum):
    """Enumerate the policies applied when a raw default cannot be coerced."""

    FAIL = "fail"
    DROP = "drop"


class BuildSettings(BaseModel):
    """Immutable settings shared by the extractor, merger and serializer."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    indent: int | None = Field(default=2, ge=0)
    sort_keys: bool = False
    coercion_policy: CoercionPolicy = CoercionPolicy.FAIL
    max_workers: int = Field(default=1, ge=1)
    validate_schemas: bool = True
    model_pointer: str = "/definitions/{name}/model"
    properties_pointer: str = "/definitions/{name}/propertiesSchema"

    @field_validator("model_pointer", "properties_pointer")
    @classmethod
    def _require_name_placeholder(cls, value: str) -> str:
        if NAME_PLACEHOLDER not in value:
            raise ValueError(f"pointer template must contain '{NAME_PLACEHOLDER}'")
        if not value.startswith("/"):
            raise ValueError("pointer template must start with '/'")
        return value

    def with_overrides(self, **overrides: Any) -> BuildSettings:
        """Return a copy with every non-``None`` override applied.

        Args:
            **overrides: Field values supplied by callers such as the CLI.

        Returns:
            BuildSettings: Validated settings including the overrides.

        Raises:
            ConfigError: If an override fails validation.
        """

        updates = {key: value for key, value in overrides.items() if value is not None}
        if not updates:
            return self
        return _validate({**self.model_dump(), **updates}, source="overrides")


def load_settings(path: Path | None) -> BuildSettings:
    """Load build settings from a TOML document.

    The document may hold the settings as a bare table or nest them under
    ``[tool.dsl-catalog]`` as in ``pyproject.toml``.

    Args:
        path: TOML file to read, or ``None`` for the built-in defaults.

    Returns:
        BuildSettings: Validated settings.

    Raises:
        ConfigError: If the file is missing, unparsable or invalid.
    """

    if path is None:
        return BuildSettings()
    if not path.exists():
        raise ConfigError(f"Configuration file {path} does not exist")
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Configuration at {path} is not valid TOML: {exc}") from exc
    tool_section = data.get(PYPROJECT_TOOL_KEY)
    if isinstance(tool_section, Mapping):
        section = tool_section.get(PYPROJECT_SECTION_KEY, {})
        if not isinstance(section, Mapping):
            raise ConfigError(f"[{PYPROJECT_TOOL_KEY}.{PYPROJECT_SECTION_KEY}] in {path} must be a table")
        data = dict(section)
    return _validate(data, source=str(path))


def _validate(payload: Mapping[str, Any], *, source: str) -> BuildSettings:
    try:
        return BuildSettings.model_validate(dict(payload))
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings from {source}: {exc}") from exc


__all__ = [
    "BuildSettings",
    "CoercionPolicy",
    "ConfigError",
    "load_settings",
]
