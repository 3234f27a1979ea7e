# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Write assembled catalogs and their checksummed index to an output directory."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .checksum import combine_checksums, text_checksum
from .io import write_text
from .model_catalog import AggregateCatalog
from .serialization import dump_json
from .types import EntityKind, JSONObject

LOGGER = logging.getLogger(__name__)

AGGREGATE_FILENAME: Final[str] = "aggregate.json"
INDEX_FILENAME: Final[str] = "index.json"


@dataclass(frozen=True, slots=True)
class CatalogFileRecord:
    """Index record for one written catalog file."""

    kind: EntityKind
    file: str
    entries: int
    checksum: str

    def to_dict(self) -> JSONObject:
        return {
            "kind": self.kind.value,
            "file": self.file,
            "entries": self.entries,
            "checksum": self.checksum,
        }


@dataclass(frozen=True, slots=True)
class BuildReport:
    """Summary of one ``write_catalogs`` call."""

    output_dir: Path
    records: tuple[CatalogFileRecord, ...]
    checksum: str

    def to_dict(self) -> JSONObject:
        return {
            "catalogs": {record.kind.catalog_name: record.to_dict() for record in self.records},
            "aggregate": AGGREGATE_FILENAME,
            "checksum": self.checksum,
        }


def write_catalogs(aggregate: AggregateCatalog, output_dir: Path) -> BuildReport:
    """Write each catalog, the aggregate document and the index to ``output_dir``.

    Args:
        aggregate: Catalogs assembled for this run.
        output_dir: Directory receiving the files; created when missing.

    Returns:
        BuildReport: Records describing the written files.
    """

    texts = aggregate.texts()
    records: list[CatalogFileRecord] = []
    for kind, text in texts.items():
        filename = f"{kind.catalog_name}.json"
        write_text(output_dir / filename, text)
        records.append(
            CatalogFileRecord(
                kind=kind,
                file=filename,
                entries=len(aggregate.catalog(kind)),
                checksum=text_checksum(text),
            ),
        )
        LOGGER.debug("wrote %s", output_dir / filename)
    write_text(output_dir / AGGREGATE_FILENAME, aggregate.aggregate_text())
    report = BuildReport(
        output_dir=output_dir,
        records=tuple(records),
        checksum=combine_checksums((kind.value, text) for kind, text in texts.items()),
    )
    write_text(output_dir / INDEX_FILENAME, dump_json(report.to_dict(), aggregate.settings))
    LOGGER.info("wrote %d catalogs to %s", len(records), output_dir)
    return report


__all__ = [
    "AGGREGATE_FILENAME",
    "INDEX_FILENAME",
    "BuildReport",
    "CatalogFileRecord",
    "write_catalogs",
]
