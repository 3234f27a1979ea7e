# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Assemble all five catalogs of a run and expose their serialized text."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from functools import partial

from .config import BuildSettings
from .extractor import SchemaExtractor
from .merger import build_catalog
from .model_catalog import AggregateCatalog, Catalog
from .model_raw import RawEntry
from .scanner import RawCatalogSource
from .schema import PropertiesSchemaValidator
from .serialization import catalog_text
from .types import ALL_KINDS, EntityKind, JSONValue

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class CatalogAssembler:
    """Run the per-kind merges over one set of inputs.

    Each call recomputes its catalogs from the immutable inputs, so the
    assembler holds no state between calls.
    """

    raw_entries: Mapping[EntityKind, Sequence[RawEntry]]
    extractor: SchemaExtractor
    settings: BuildSettings = field(default_factory=BuildSettings)
    validator: PropertiesSchemaValidator = field(default_factory=PropertiesSchemaValidator)

    @classmethod
    def from_inputs(
        cls,
        raw_entries: Mapping[EntityKind, Sequence[RawEntry]],
        dsl_schema: Mapping[str, JSONValue],
        settings: BuildSettings | None = None,
    ) -> CatalogAssembler:
        """Create an assembler from raw entries and a parsed DSL schema document."""

        resolved = settings or BuildSettings()
        return cls(
            raw_entries=raw_entries,
            extractor=SchemaExtractor(dsl_schema, resolved),
            settings=resolved,
        )

    @classmethod
    def from_source(
        cls,
        source: RawCatalogSource,
        dsl_schema: Mapping[str, JSONValue],
        settings: BuildSettings | None = None,
    ) -> CatalogAssembler:
        """Create an assembler reading raw entries from ``source``."""

        return cls.from_inputs(source.all_entries(), dsl_schema, settings)

    def build_kind(self, kind: EntityKind) -> Catalog:
        """Build and, when enabled, validate the catalog for ``kind``.

        Raises:
            CatalogIntegrityError: When the catalog cannot be built or fails validation.
        """

        catalog = build_catalog(kind, self.raw_entries.get(kind, ()), self.extractor, self.settings)
        if self.settings.validate_schemas:
            self.validator.validate_catalog(catalog)
        return catalog

    def build(self) -> AggregateCatalog:
        """Build all five catalogs, serially or on a thread pool.

        Returns:
            AggregateCatalog: Catalogs keyed by kind in declaration order.

        Raises:
            CatalogIntegrityError: When any kind fails; no partial aggregate is returned.
        """

        if self.settings.max_workers > 1:
            built = self._build_in_parallel()
        else:
            built = {kind: self.build_kind(kind) for kind in ALL_KINDS}
        catalogs = {kind: built[kind] for kind in ALL_KINDS}
        LOGGER.info("assembled %d catalogs", len(catalogs))
        return AggregateCatalog(catalogs=catalogs, settings=self.settings)

    def _build_in_parallel(self) -> dict[EntityKind, Catalog]:
        built: dict[EntityKind, Catalog] = {}
        with ThreadPoolExecutor(max_workers=self.settings.max_workers) as executor:
            future_map = {executor.submit(partial(self.build_kind, kind)): kind for kind in ALL_KINDS}
            for future in as_completed(future_map):
                built[future_map[future]] = future.result()
        return built

    def catalog_text(self, kind: EntityKind) -> str:
        """Return the serialized catalog for ``kind`` built on its own."""

        return catalog_text(self.build_kind(kind), self.settings)

    def aggregate_catalog_text(self) -> dict[EntityKind, str]:
        """Return every kind mapped to its serialized catalog."""

        return self.build().texts()


__all__ = ["CatalogAssembler"]
