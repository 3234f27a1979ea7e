# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared type aliases, entity kinds and constants for the DSL catalog."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Final, TypeAlias

JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONPrimitive | Sequence["JSONValue"] | Mapping[str, "JSONValue"]
JSONObject: TypeAlias = dict[str, JSONValue]


class EntityKind(str, Enum):
    """Enumerate the closed set of catalog kinds."""

    COMPONENT = "component"
    DATAFORMAT = "dataformat"
    LANGUAGE = "language"
    MODEL = "model"
    PATTERN = "pattern"

    @property
    def catalog_name(self) -> str:
        """Return the plural name used for directories and output files."""

        return f"{self.value}s"


ALL_KINDS: Final[tuple[EntityKind, ...]] = tuple(EntityKind)

MODEL_KEY: Final[str] = "model"
PROPERTIES_KEY: Final[str] = "properties"
PROPERTIES_SCHEMA_KEY: Final[str] = "propertiesSchema"
CLASS_COMMENT_PREFIX: Final[str] = "class:"

__all__ = [
    "ALL_KINDS",
    "CLASS_COMMENT_PREFIX",
    "EntityKind",
    "JSONObject",
    "JSONPrimitive",
    "JSONValue",
    "MODEL_KEY",
    "PROPERTIES_KEY",
    "PROPERTIES_SCHEMA_KEY",
]
