# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Schema fragments and the catalog aggregates produced by the merger."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .config import BuildSettings
from .errors import CatalogIntegrityError
from .serialization import catalog_text, dump_json
from .types import MODEL_KEY, PROPERTIES_KEY, PROPERTIES_SCHEMA_KEY, EntityKind, JSONObject, JSONValue
from .utils import thaw_json_value


@dataclass(frozen=True, slots=True)
class SchemaFragment:
    """Normalised schema for one entity extracted from the DSL schema document."""

    name: str
    model: Mapping[str, JSONValue]
    properties_schema: Mapping[str, JSONValue]

    @property
    def schema_properties(self) -> Mapping[str, JSONValue]:
        """Return the ``properties`` map of the properties schema."""

        properties = self.properties_schema.get(PROPERTIES_KEY)
        return properties if isinstance(properties, Mapping) else {}


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """Merged record for one entity."""

    model: Mapping[str, JSONValue]
    properties: Mapping[str, JSONValue]
    properties_schema: Mapping[str, JSONValue]
    extras: Mapping[str, JSONValue] = field(default_factory=lambda: MappingProxyType({}))

    def to_dict(self) -> JSONObject:
        """Return the entry as plain JSON containers in output key order."""

        payload: JSONObject = {
            MODEL_KEY: thaw_json_value(self.model),
            PROPERTIES_KEY: thaw_json_value(self.properties),
            PROPERTIES_SCHEMA_KEY: thaw_json_value(self.properties_schema),
        }
        for key, value in self.extras.items():
            payload[key] = thaw_json_value(value)
        return payload


@dataclass(frozen=True, slots=True)
class Catalog:
    """Immutable mapping from entity name to merged entry for one kind."""

    kind: EntityKind
    entries: Mapping[str, CatalogEntry]

    def __post_init__(self) -> None:
        """Freeze the entry mapping."""

        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, name: object) -> bool:
        return name in self.entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __getitem__(self, name: str) -> CatalogEntry:
        return self.entries[name]

    def to_dict(self) -> JSONObject:
        """Return the catalog as plain JSON containers keyed by entity name."""

        return {name: entry.to_dict() for name, entry in self.entries.items()}


@dataclass(frozen=True, slots=True)
class AggregateCatalog:
    """All five catalogs of one run together with the settings used to serialize them."""

    catalogs: Mapping[EntityKind, Catalog]
    settings: BuildSettings = field(default_factory=BuildSettings)

    def __post_init__(self) -> None:
        """Validate that every catalog is stored under its own kind."""

        for kind, catalog in self.catalogs.items():
            if catalog.kind is not kind:
                raise CatalogIntegrityError(f"catalog for '{catalog.kind.value}' stored under '{kind.value}'")
        object.__setattr__(self, "catalogs", MappingProxyType(dict(self.catalogs)))

    def catalog(self, kind: EntityKind) -> Catalog:
        """Return the catalog built for ``kind``.

        Raises:
            KeyError: If ``kind`` was not built.
        """

        return self.catalogs[kind]

    def catalog_text(self, kind: EntityKind) -> str:
        """Return the standalone serialization of the ``kind`` catalog."""

        return catalog_text(self.catalogs[kind], self.settings)

    def texts(self) -> dict[EntityKind, str]:
        """Return every kind mapped to its standalone catalog text."""

        return {kind: self.catalog_text(kind) for kind in self.catalogs}

    def to_dict(self) -> JSONObject:
        """Return all catalogs as plain JSON keyed by plural catalog name."""

        return {kind.catalog_name: catalog.to_dict() for kind, catalog in self.catalogs.items()}

    def aggregate_text(self) -> str:
        """Serialize all catalogs as a single JSON document keyed by catalog name."""

        return dump_json(self.to_dict(), self.settings)


__all__ = [
    "AggregateCatalog",
    "Catalog",
    "CatalogEntry",
    "SchemaFragment",
]
