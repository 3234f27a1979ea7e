# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for writing catalogs and the checksummed index."""

from __future__ import annotations

import json
from pathlib import Path

from dsl_catalog.assembler import CatalogAssembler
from dsl_catalog.build import AGGREGATE_FILENAME, INDEX_FILENAME, write_catalogs
from dsl_catalog.checksum import combine_checksums, text_checksum
from dsl_catalog.types import ALL_KINDS


def test_write_catalogs_emits_all_files(assembler: CatalogAssembler, tmp_path: Path) -> None:
    aggregate = assembler.build()

    report = write_catalogs(aggregate, tmp_path / "out")

    written = sorted(path.name for path in (tmp_path / "out").iterdir())
    assert written == sorted([*(f"{kind.catalog_name}.json" for kind in ALL_KINDS), AGGREGATE_FILENAME, INDEX_FILENAME])
    assert [record.kind for record in report.records] == list(ALL_KINDS)
    for record in report.records:
        text = (tmp_path / "out" / record.file).read_text(encoding="utf-8")
        assert text == aggregate.catalog_text(record.kind)
        assert record.checksum == text_checksum(text)
        assert record.entries == len(aggregate.catalog(record.kind))


def test_index_describes_written_catalogs(assembler: CatalogAssembler, tmp_path: Path) -> None:
    report = write_catalogs(assembler.build(), tmp_path)

    index = json.loads((tmp_path / INDEX_FILENAME).read_text(encoding="utf-8"))

    assert index["aggregate"] == AGGREGATE_FILENAME
    assert index["checksum"] == report.checksum
    assert index["catalogs"]["patterns"]["file"] == "patterns.json"
    assert index["catalogs"]["languages"]["entries"] == 2


def test_aggregate_file_matches_aggregate_text(assembler: CatalogAssembler, tmp_path: Path) -> None:
    aggregate = assembler.build()

    write_catalogs(aggregate, tmp_path)

    assert (tmp_path / AGGREGATE_FILENAME).read_text(encoding="utf-8") == aggregate.aggregate_text()


def test_combined_checksum_is_stable(assembler: CatalogAssembler, tmp_path: Path) -> None:
    first = write_catalogs(assembler.build(), tmp_path / "first")
    second = write_catalogs(assembler.build(), tmp_path / "second")

    assert first.checksum == second.checksum


def test_combine_checksums_depends_on_names_and_order() -> None:
    base = combine_checksums([("a", "1"), ("b", "2")])

    assert base != combine_checksums([("b", "2"), ("a", "1")])
    assert base != combine_checksums([("a1", ""), ("b", "2")])
    assert text_checksum("") == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
