# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for raw document loading and directory scanning."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from dsl_catalog.errors import MalformedInputError
from dsl_catalog.io import load_document, load_dsl_schema, write_text
from dsl_catalog.model_raw import RawEntry
from dsl_catalog.scanner import RawCatalogSource
from dsl_catalog.types import ALL_KINDS, EntityKind


def _write_json(path: Path, payload: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding="utf-8")


def test_documents_are_sorted_and_skip_private_files(tmp_path: Path) -> None:
    patterns = tmp_path / "patterns"
    for name in ("split", "aggregate", "_template"):
        _write_json(patterns / f"{name}.json", {"model": {"name": name}})
    (patterns / "notes.txt").write_text("ignored", encoding="utf-8")

    documents = RawCatalogSource(tmp_path).documents(EntityKind.PATTERN)

    assert [path.name for path in documents] == ["aggregate.json", "split.json"]


def test_missing_kind_directory_yields_nothing(tmp_path: Path) -> None:
    source = RawCatalogSource(tmp_path)

    assert source.entries(EntityKind.DATAFORMAT) == ()
    assert set(source.all_entries()) == set(ALL_KINDS)


def test_snapshot_entries_record_their_source(raw_source: RawCatalogSource, raw_root: Path) -> None:
    entries = raw_source.entries(EntityKind.COMPONENT)

    assert [entry.name for entry in entries] == ["direct", "etcd3", "google-drive", "sql"]
    assert entries[0].source == raw_root / "components" / "direct.json"


def test_raw_entry_requires_model_block() -> None:
    with pytest.raises(MalformedInputError) as excinfo:
        RawEntry.from_mapping({"properties": {}}, kind=EntityKind.COMPONENT, name="sql")
    assert excinfo.value.entity == "sql"


def test_raw_entry_requires_name() -> None:
    with pytest.raises(MalformedInputError, match="no name"):
        RawEntry.from_mapping({"model": {"title": "Nameless"}}, kind=EntityKind.MODEL)


def test_raw_entry_rejects_non_object_property() -> None:
    with pytest.raises(MalformedInputError):
        RawEntry.from_mapping({"model": {"name": "log"}, "properties": {"message": "text"}}, kind=EntityKind.PATTERN)


def test_raw_entry_defaults_and_tags() -> None:
    raw = RawEntry.from_mapping(
        {
            "model": {"name": "log", "title": "Logger"},
            "properties": {
                "message": {"type": "string"},
                "level": {"type": "enum", "default": "INFO"},
                "marker": {"defaultValue": None},
                "loose": {"type": "gizmo"},
            },
        },
        kind=EntityKind.PATTERN,
    )

    assert raw.title == "Logger"
    assert raw.default("level") == (True, "INFO")
    assert raw.default("marker") == (False, None)
    assert raw.type_tag("marker") is None
    with pytest.raises(MalformedInputError) as excinfo:
        raw.type_tag("loose")
    assert excinfo.value.prop == "loose"


def test_load_document_reports_bad_json(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(MalformedInputError, match="failed to parse JSON"):
        load_document(path)


def test_load_document_rejects_non_utf8_bytes(tmp_path: Path) -> None:
    path = tmp_path / "binary.json"
    path.write_bytes(b"\xff\xfe")

    with pytest.raises(MalformedInputError, match="not UTF-8") as excinfo:
        load_document(path)
    assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)


def test_unreadable_document_is_named_with_stem_as_entity(tmp_path: Path) -> None:
    _write_json(tmp_path / "patterns" / "split.json", {"definition": {"name": "split"}})

    with pytest.raises(MalformedInputError, match=r"split\.json") as excinfo:
        RawCatalogSource(tmp_path).entries(EntityKind.PATTERN)
    assert excinfo.value.entity == "split"
    assert excinfo.value.kind is EntityKind.PATTERN


def test_nameless_document_is_named_with_stem_as_entity(tmp_path: Path) -> None:
    _write_json(tmp_path / "models" / "choice.json", {"model": {"title": "Choice"}})

    with pytest.raises(MalformedInputError, match=r"choice\.json: 'model' block has no name") as excinfo:
        RawCatalogSource(tmp_path).entries(EntityKind.MODEL)
    assert excinfo.value.entity == "choice"


def test_load_dsl_schema_requires_object(tmp_path: Path) -> None:
    path = tmp_path / "schema.json"
    _write_json(path, ["not", "an", "object"])

    with pytest.raises(MalformedInputError):
        load_dsl_schema(path)
    with pytest.raises(FileNotFoundError):
        load_dsl_schema(tmp_path / "missing.json")


def test_write_text_creates_parents(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "out" / "catalog.json"

    write_text(target, "{}")

    assert target.read_text(encoding="utf-8") == "{}"
