# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Utility helpers for validating, copying and addressing catalog JSON structures."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Final

from .errors import MalformedInputError
from .types import EntityKind, JSONObject, JSONValue

_MISSING: Final[object] = object()


def expect_mapping(
    value: JSONValue | None,
    *,
    key: str,
    kind: EntityKind | None = None,
    entity: str | None = None,
) -> Mapping[str, JSONValue]:
    """Return ``value`` as a mapping of JSON values or raise an error.

    Args:
        value: Raw JSON value extracted from a catalog payload.
        key: Attribute name used in error messages.
        kind: Entity kind being processed, when known.
        entity: Entity name being processed, when known.

    Returns:
        Mapping[str, JSONValue]: Mapping derived from ``value``.

    Raises:
        MalformedInputError: If ``value`` is not a mapping.
    """
    if not isinstance(value, Mapping):
        raise MalformedInputError(f"expected '{key}' to be an object", kind=kind, entity=entity)
    return value


def optional_mapping(
    value: JSONValue | None,
    *,
    key: str,
    kind: EntityKind | None = None,
    entity: str | None = None,
) -> Mapping[str, JSONValue]:
    """Return ``value`` as a mapping, treating ``None`` as an empty object.

    Raises:
        MalformedInputError: If ``value`` is present but not a mapping.
    """
    if value is None:
        return {}
    return expect_mapping(value, key=key, kind=kind, entity=entity)


def optional_string(
    value: JSONValue | None,
    *,
    key: str,
    kind: EntityKind | None = None,
    entity: str | None = None,
) -> str | None:
    """Return ``value`` as an optional string with validation.

    Args:
        value: Raw JSON value extracted from a catalog payload.
        key: Attribute name used in error messages.
        kind: Entity kind being processed, when known.
        entity: Entity name being processed, when known.

    Returns:
        str | None: ``value`` when it is a string, otherwise ``None`` for missing values.

    Raises:
        MalformedInputError: If ``value`` is present but not a string.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        raise MalformedInputError(f"expected '{key}' to be a string if present", kind=kind, entity=entity)
    return value


def copy_json_value(value: JSONValue) -> JSONValue:
    """Return a deep, mutable copy of ``value`` built from ``dict`` and ``list``.

    Args:
        value: JSON value that may contain mapping proxies or tuples.

    Returns:
        JSONValue: Independent copy composed of built-in containers.
    """

    if isinstance(value, Mapping):
        return {str(key): copy_json_value(item) for key, item in value.items()}
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [copy_json_value(item) for item in value]
    return value


def copy_json_object(value: Mapping[str, JSONValue]) -> JSONObject:
    """Return a deep, mutable copy of the JSON object ``value``."""

    return {str(key): copy_json_value(item) for key, item in value.items()}


def freeze_json_mapping(value: Mapping[str, JSONValue], *, context: str) -> Mapping[str, JSONValue]:
    """Return an immutable mapping with recursively frozen JSON values.

    Args:
        value: Mapping to freeze.
        context: Human-friendly prefix describing the value location.

    Returns:
        Mapping[str, JSONValue]: Mapping with recursively frozen entries.

    Raises:
        MalformedInputError: If any key is not a string.
    """
    frozen: dict[str, JSONValue] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            raise MalformedInputError(f"{context}: expected keys to be strings")
        frozen[key] = freeze_json_value(item, context=f"{context}.{key}")
    return MappingProxyType(frozen)


def freeze_json_value(value: JSONValue, *, context: str) -> JSONValue:
    """Return a recursively frozen view of ``value``.

    Args:
        value: JSON value to normalise.
        context: Human-friendly prefix describing the value location.

    Returns:
        JSONValue: Frozen JSON value (mappings become mapping proxies, sequences tuples).

    Raises:
        MalformedInputError: If ``value`` is not JSON compatible.
    """
    if isinstance(value, Mapping):
        return freeze_json_mapping(value, context=context)
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return tuple(freeze_json_value(item, context=context) for item in value)
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    raise MalformedInputError(f"{context}: unsupported JSON value type {type(value).__name__}")


def thaw_json_value(value: JSONValue) -> JSONValue:
    """Return a plain JSON-compatible representation of ``value``.

    Args:
        value: Frozen JSON value that may contain mapping proxies or tuples.

    Returns:
        JSONValue: JSON-compatible value composed of built-in ``dict`` and
        ``list`` containers.
    """

    if isinstance(value, Mapping):
        return {str(key): thaw_json_value(item) for key, item in value.items()}
    if isinstance(value, (tuple, list)):
        return [thaw_json_value(item) for item in value]
    return value


def escape_pointer_token(token: str) -> str:
    """Escape ``token`` for use as a single RFC 6901 JSON-pointer segment."""

    return token.replace("~", "~0").replace("/", "~1")


def _unescape_pointer_token(token: str) -> str:
    return token.replace("~1", "/").replace("~0", "~")


def resolve_pointer(document: JSONValue, pointer: str) -> JSONValue | None:
    """Return the value addressed by ``pointer`` in ``document``.

    Args:
        document: JSON document to traverse.
        pointer: RFC 6901 pointer, optionally prefixed with ``#`` as in ``$ref`` values.

    Returns:
        JSONValue | None: Addressed value, or ``None`` when any segment is missing.
    """

    if pointer.startswith("#"):
        pointer = pointer[1:]
    if pointer == "":
        return document
    if not pointer.startswith("/"):
        return None
    current: JSONValue | object = document
    for raw_token in pointer[1:].split("/"):
        token = _unescape_pointer_token(raw_token)
        if isinstance(current, Mapping):
            current = current.get(token, _MISSING)
        elif isinstance(current, Sequence) and not isinstance(current, (str, bytes, bytearray)):
            if not token.isdigit() or int(token) >= len(current):
                return None
            current = current[int(token)]
        else:
            return None
        if current is _MISSING:
            return None
    return current  # type: ignore[return-value]


__all__ = [
    "copy_json_object",
    "copy_json_value",
    "escape_pointer_token",
    "expect_mapping",
    "freeze_json_mapping",
    "freeze_json_value",
    "optional_mapping",
    "optional_string",
    "resolve_pointer",
    "thaw_json_value",
]
