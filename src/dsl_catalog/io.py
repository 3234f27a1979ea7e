# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""I/O helpers for reading raw metadata documents and the DSL schema."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import cast

from .errors import MalformedInputError
from .types import JSONValue


def load_dsl_schema(path: Path) -> Mapping[str, JSONValue]:
    """Load the DSL JSON-Schema document whose definitions feed every catalog."""

    return load_json_object(path)


def load_document(path: Path) -> JSONValue:
    """Read ``path`` as UTF-8 JSON.

    Raises:
        FileNotFoundError: If the document is missing.
        MalformedInputError: If the bytes are not UTF-8 or the text is not JSON.
    """
    if not path.exists():
        raise FileNotFoundError(path)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedInputError(f"{path}: not UTF-8 text (byte {exc.start})") from exc
    try:
        return cast(JSONValue, json.loads(text))
    except json.JSONDecodeError as exc:
        raise MalformedInputError(f"{path}: failed to parse JSON at line {exc.lineno}: {exc.msg}") from exc


def load_json_object(path: Path) -> Mapping[str, JSONValue]:
    """Load a JSON document that must hold an object at its root."""

    return _ensure_json_object(load_document(path), context=str(path))


def write_text(path: Path, text: str) -> None:
    """Write ``text`` to ``path`` as UTF-8, creating parent directories."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def _ensure_json_object(value: JSONValue, *, context: str) -> Mapping[str, JSONValue]:
    if not isinstance(value, Mapping):
        raise MalformedInputError(f"{context}: expected a JSON object, got {type(value).__name__}")
    return value


__all__ = ["load_document", "load_dsl_schema", "load_json_object", "write_text"]
