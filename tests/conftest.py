# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from pathlib import Path

import pytest

from dsl_catalog.assembler import CatalogAssembler
from dsl_catalog.io import load_dsl_schema
from dsl_catalog.scanner import RawCatalogSource
from dsl_catalog.types import JSONValue


@pytest.fixture
def data_root() -> Path:
    """Return the directory holding the catalog input snapshot."""
    return Path(__file__).resolve().parent / "data"


@pytest.fixture
def raw_root(data_root: Path) -> Path:
    return data_root / "raw"


@pytest.fixture
def schema_path(data_root: Path) -> Path:
    return data_root / "dsl-schema.json"


@pytest.fixture
def dsl_schema(schema_path: Path) -> Mapping[str, JSONValue]:
    """Return the parsed DSL schema document of the snapshot."""
    return load_dsl_schema(schema_path)


@pytest.fixture
def raw_source(raw_root: Path) -> RawCatalogSource:
    return RawCatalogSource(raw_root)


@pytest.fixture
def assembler(raw_source: RawCatalogSource, dsl_schema: Mapping[str, JSONValue]) -> CatalogAssembler:
    """Return an assembler over the snapshot with default settings."""
    return CatalogAssembler.from_source(raw_source, dsl_schema)


@pytest.fixture(autouse=True)
def _reset_library_logger() -> Iterator[None]:
    logger = logging.getLogger("dsl_catalog")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
