# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for assembling and serializing all catalogs of a run."""

from __future__ import annotations

from collections.abc import Mapping

import pytest

from dsl_catalog.assembler import CatalogAssembler
from dsl_catalog.config import BuildSettings
from dsl_catalog.errors import CatalogIntegrityError, MissingFragmentError
from dsl_catalog.model_catalog import AggregateCatalog, Catalog
from dsl_catalog.scanner import RawCatalogSource
from dsl_catalog.serialization import catalog_text, parse_catalog_text
from dsl_catalog.types import ALL_KINDS, EntityKind, JSONValue


def _walk_properties(properties: Mapping[str, JSONValue]):
    for prop_schema in properties.values():
        if isinstance(prop_schema, Mapping):
            yield prop_schema
            nested = prop_schema.get("properties")
            if isinstance(nested, Mapping):
                yield from _walk_properties(nested)


def test_aggregate_text_matches_standalone_text(assembler: CatalogAssembler) -> None:
    aggregate_texts = assembler.aggregate_catalog_text()

    assert list(aggregate_texts) == list(ALL_KINDS)
    for kind in ALL_KINDS:
        assert aggregate_texts[kind] == assembler.catalog_text(kind)


def test_catalog_text_round_trips(assembler: CatalogAssembler) -> None:
    aggregate = assembler.build()

    for kind in ALL_KINDS:
        catalog = aggregate.catalog(kind)
        assert parse_catalog_text(catalog_text(catalog, aggregate.settings)) == catalog.to_dict()


def test_parallel_build_matches_serial(raw_source: RawCatalogSource, dsl_schema: Mapping[str, JSONValue]) -> None:
    serial = CatalogAssembler.from_source(raw_source, dsl_schema).build()
    parallel = CatalogAssembler.from_source(raw_source, dsl_schema, BuildSettings(max_workers=4)).build()

    assert list(parallel.catalogs) == list(ALL_KINDS)
    assert parallel.texts() == serial.texts()
    assert parallel.aggregate_text() == serial.aggregate_text()


def test_pattern_count_matches_snapshot(assembler: CatalogAssembler, raw_source: RawCatalogSource) -> None:
    expected = len(raw_source.documents(EntityKind.PATTERN))

    assert len(assembler.build_kind(EntityKind.PATTERN)) == expected


def test_every_array_has_typed_items(assembler: CatalogAssembler) -> None:
    aggregate = assembler.build()

    for kind in ALL_KINDS:
        for entry in aggregate.catalog(kind).to_dict().values():
            for prop_schema in _walk_properties(entry["propertiesSchema"]["properties"]):
                if prop_schema.get("type") == "array":
                    assert isinstance(prop_schema["items"].get("type"), str)


def test_no_references_or_compositions_are_emitted(assembler: CatalogAssembler) -> None:
    aggregate = assembler.build()

    for kind in ALL_KINDS:
        for entry in aggregate.catalog(kind).to_dict().values():
            for prop_schema in _walk_properties(entry["propertiesSchema"]["properties"]):
                assert not {"$ref", "anyOf", "oneOf", "allOf"} & set(prop_schema)


def test_aggregate_document_is_keyed_by_catalog_name(assembler: CatalogAssembler) -> None:
    aggregate = assembler.build()

    payload = parse_catalog_text(aggregate.aggregate_text())

    assert list(payload) == ["components", "dataformats", "languages", "models", "patterns"]
    assert list(payload) == [kind.catalog_name for kind in ALL_KINDS]
    assert sorted(payload["languages"]) == ["language", "simple"]


def test_builds_are_deterministic(assembler: CatalogAssembler) -> None:
    assert assembler.build().aggregate_text() == assembler.build().aggregate_text()


def test_sorted_keys_setting(raw_source: RawCatalogSource, dsl_schema: Mapping[str, JSONValue]) -> None:
    settings = BuildSettings(sort_keys=True, indent=None)
    assembler = CatalogAssembler.from_source(raw_source, dsl_schema, settings)

    text = assembler.catalog_text(EntityKind.DATAFORMAT)

    assert "\n" not in text
    assert text.index('"custom"') < text.index('"json"')


def test_missing_fragment_aborts_whole_build(raw_source: RawCatalogSource, dsl_schema: Mapping[str, JSONValue]) -> None:
    definitions = dict(dsl_schema["definitions"])  # type: ignore[arg-type]
    del definitions["log"]
    schema = {**dsl_schema, "definitions": definitions}

    with pytest.raises(MissingFragmentError):
        CatalogAssembler.from_source(raw_source, schema).build()
    with pytest.raises(MissingFragmentError):
        CatalogAssembler.from_source(raw_source, schema, BuildSettings(max_workers=3)).build()


def test_empty_kind_builds_empty_catalog(dsl_schema: Mapping[str, JSONValue]) -> None:
    aggregate = CatalogAssembler.from_inputs({}, dsl_schema).build()

    assert all(len(aggregate.catalog(kind)) == 0 for kind in ALL_KINDS)
    assert aggregate.catalog_text(EntityKind.MODEL) == "{}"


def test_aggregate_rejects_mismatched_catalog() -> None:
    with pytest.raises(CatalogIntegrityError):
        AggregateCatalog(catalogs={EntityKind.MODEL: Catalog(kind=EntityKind.PATTERN, entries={})})
