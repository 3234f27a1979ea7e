# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Helpers for converting catalogs to deterministic JSON text."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from .config import BuildSettings
from .types import JSONValue

if TYPE_CHECKING:
    from .model_catalog import Catalog


def dump_json(payload: JSONValue, settings: BuildSettings) -> str:
    """Serialize ``payload`` using the layout options from ``settings``.

    Args:
        payload: Plain JSON payload composed of ``dict``/``list`` containers.
        settings: Settings providing ``indent`` and ``sort_keys``.

    Returns:
        str: JSON text with non-ASCII characters preserved.
    """

    return json.dumps(
        payload,
        indent=settings.indent,
        sort_keys=settings.sort_keys,
        ensure_ascii=False,
        allow_nan=False,
    )


def catalog_text(catalog: Catalog, settings: BuildSettings | None = None) -> str:
    """Return the standalone JSON text for ``catalog``."""

    return dump_json(catalog.to_dict(), settings or BuildSettings())


def parse_catalog_text(text: str) -> dict[str, JSONValue]:
    """Parse catalog text back into plain JSON containers.

    Raises:
        ValueError: If ``text`` is not a JSON object.
    """

    payload = json.loads(text)
    if not isinstance(payload, dict):
        raise ValueError("catalog text must encode a JSON object")
    return payload


__all__ = ["catalog_text", "dump_json", "parse_catalog_text"]
