# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Filesystem scanning of the raw metadata tree, one directory per kind."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .errors import MalformedInputError
from .io import load_json_object
from .model_raw import RawEntry
from .types import ALL_KINDS, EntityKind

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class RawCatalogSource:
    """Read raw entries laid out as ``<root>/<catalog-name>/<entity>.json``."""

    root: Path

    def documents(self, kind: EntityKind) -> tuple[Path, ...]:
        """Return sorted raw document paths for ``kind``.

        Files whose name starts with ``_`` are skipped. A missing kind
        directory yields no documents.
        """
        kind_root = self.root / kind.catalog_name
        if not kind_root.is_dir():
            LOGGER.debug("no raw directory for %s at %s", kind.value, kind_root)
            return ()
        return tuple(sorted(path for path in kind_root.glob("*.json") if not path.name.startswith("_")))

    def entries(self, kind: EntityKind) -> tuple[RawEntry, ...]:
        """Return the raw entries for ``kind`` in document order.

        Raises:
            MalformedInputError: If a document is unreadable. The message names
                the document, and the file stem stands in for a missing entity.
        """
        return tuple(self._entry(path, kind) for path in self.documents(kind))

    @staticmethod
    def _entry(path: Path, kind: EntityKind) -> RawEntry:
        document = load_json_object(path)
        try:
            return RawEntry.from_mapping(document, kind=kind, source=path)
        except MalformedInputError as exc:
            raise MalformedInputError(
                f"{path.name}: {exc.reason}",
                kind=kind,
                entity=exc.entity or path.stem,
                prop=exc.prop,
            ) from exc

    def all_entries(self) -> dict[EntityKind, tuple[RawEntry, ...]]:
        """Return the raw entries of every kind."""

        return {kind: self.entries(kind) for kind in ALL_KINDS}


__all__ = ["RawCatalogSource"]
