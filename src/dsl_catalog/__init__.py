# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Public export surface for the DSL catalog normalisation engine."""

from __future__ import annotations

from typing import Final

from .assembler import CatalogAssembler
from .build import BuildReport, write_catalogs
from .config import BuildSettings, CoercionPolicy, ConfigError, load_settings
from .errors import (
    CatalogIntegrityError,
    CatalogValidationError,
    MalformedInputError,
    MissingFragmentError,
    TypeCoercionError,
)
from .extractor import SchemaExtractor
from .merger import build_catalog, merge_entry
from .model_catalog import AggregateCatalog, Catalog, CatalogEntry, SchemaFragment
from .model_raw import RawEntry
from .scanner import RawCatalogSource
from .serialization import catalog_text
from .types import EntityKind

__all__: Final[tuple[str, ...]] = (
    "AggregateCatalog",
    "BuildReport",
    "BuildSettings",
    "Catalog",
    "CatalogAssembler",
    "CatalogEntry",
    "CatalogIntegrityError",
    "CatalogValidationError",
    "CoercionPolicy",
    "ConfigError",
    "EntityKind",
    "MalformedInputError",
    "MissingFragmentError",
    "RawCatalogSource",
    "RawEntry",
    "SchemaExtractor",
    "SchemaFragment",
    "TypeCoercionError",
    "build_catalog",
    "catalog_text",
    "load_settings",
    "merge_entry",
    "write_catalogs",
)
