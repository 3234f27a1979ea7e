# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Extraction of normalised per-entity fragments from the DSL schema document."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Final

from .config import NAME_PLACEHOLDER, BuildSettings
from .errors import MalformedInputError
from .model_catalog import SchemaFragment
from .types import PROPERTIES_KEY, JSONObject, JSONValue
from .utils import copy_json_object, escape_pointer_token, freeze_json_mapping, resolve_pointer

LOGGER = logging.getLogger(__name__)

REF_KEY: Final[str] = "$ref"
COMPOSITION_KEYS: Final[tuple[str, ...]] = ("anyOf", "oneOf", "allOf")
_DROPPED_KEYS: Final[frozenset[str]] = frozenset({REF_KEY, *COMPOSITION_KEYS})
_DEFAULT_ITEMS_TYPE: Final[str] = "string"


@dataclass(frozen=True, slots=True)
class SchemaExtractor:
    """Stateless lookup of schema fragments by entity name.

    The extractor never mutates ``document``; every fragment is built from
    fresh copies, so it may be shared between threads.
    """

    document: Mapping[str, JSONValue]
    settings: BuildSettings = field(default_factory=BuildSettings)

    def fragment_for(self, name: str) -> SchemaFragment | None:
        """Return the normalised fragment for ``name`` or ``None`` when absent.

        Args:
            name: Entity name used to address the model and properties sub-schemas.

        Returns:
            SchemaFragment | None: Fragment when both sub-schemas exist, otherwise ``None``.

        Raises:
            MalformedInputError: If a sub-schema is not an object or a property type
                cannot be resolved.
        """

        model = self._lookup(self.settings.model_pointer, name)
        properties_schema = self._lookup(self.settings.properties_pointer, name)
        if model is None or properties_schema is None:
            LOGGER.debug("no schema fragment for %s", name)
            return None
        if not isinstance(model, Mapping):
            raise MalformedInputError("schema model node is not an object", entity=name)
        if not isinstance(properties_schema, Mapping):
            raise MalformedInputError("schema properties node is not an object", entity=name)

        normalized = copy_json_object(properties_schema)
        declared = properties_schema.get(PROPERTIES_KEY)
        if declared is not None:
            if not isinstance(declared, Mapping):
                raise MalformedInputError(f"schema '{PROPERTIES_KEY}' is not an object", entity=name)
            normalized[PROPERTIES_KEY] = self._normalize_properties(declared, entity=name, path=(), expanding=())
        return SchemaFragment(
            name=name,
            model=freeze_json_mapping(model, context=f"{name}.model"),
            properties_schema=freeze_json_mapping(normalized, context=f"{name}.propertiesSchema"),
        )

    def _lookup(self, template: str, name: str) -> JSONValue | None:
        pointer = template.replace(NAME_PLACEHOLDER, escape_pointer_token(name))
        return resolve_pointer(self.document, pointer)

    def _normalize_properties(
        self,
        properties: Mapping[str, JSONValue],
        *,
        entity: str,
        path: tuple[str, ...],
        expanding: tuple[str, ...],
    ) -> JSONObject:
        normalized: JSONObject = {}
        for prop_name, prop_schema in properties.items():
            prop_path = (*path, prop_name)
            if not isinstance(prop_schema, Mapping):
                raise MalformedInputError("property schema is not an object", entity=entity, prop=".".join(prop_path))
            normalized[prop_name] = self._normalize_property(
                prop_schema,
                entity=entity,
                path=prop_path,
                expanding=expanding,
            )
        return normalized

    def _normalize_property(
        self,
        schema: Mapping[str, JSONValue],
        *,
        entity: str,
        path: tuple[str, ...],
        expanding: tuple[str, ...],
    ) -> JSONObject:
        """Return ``schema`` with a concrete ``type`` and without references.

        ``items`` and nested ``properties`` are read from the node that
        supplied the type, so a ``$ref`` or composition branch keeps its
        structure. ``expanding`` lists the references already being expanded
        on the current path; re-entering one stops the expansion there.
        """

        resolution = self._resolve_type(schema, entity=entity, prop=".".join(path))
        recursive = any(reference in expanding for reference in resolution.references)
        chain = (*expanding, *resolution.references)
        result: JSONObject = {key: value for key, value in copy_json_object(schema).items() if key not in _DROPPED_KEYS}
        result["type"] = resolution.schema_type
        if resolution.schema_type == "array":
            result["items"] = self._normalize_items(
                resolution.structural(schema, "items"),
                entity=entity,
                path=path,
                expanding=chain,
                shallow=recursive,
            )
        nested = resolution.structural(schema, PROPERTIES_KEY)
        if recursive:
            result.pop(PROPERTIES_KEY, None)
        elif resolution.schema_type == "object" and isinstance(nested, Mapping):
            result[PROPERTIES_KEY] = self._normalize_properties(nested, entity=entity, path=path, expanding=chain)
        return result

    def _normalize_items(
        self,
        items: JSONValue | None,
        *,
        entity: str,
        path: tuple[str, ...],
        expanding: tuple[str, ...],
        shallow: bool,
    ) -> JSONObject:
        if isinstance(items, Sequence) and not isinstance(items, (str, bytes, bytearray)):
            items = items[0] if items else None
        if not isinstance(items, Mapping) or not items:
            LOGGER.debug("array %s.%s has no item schema; assuming %s", entity, ".".join(path), _DEFAULT_ITEMS_TYPE)
            return {"type": _DEFAULT_ITEMS_TYPE}
        items_path = (*path, "items")
        if shallow:
            return {"type": self._resolve_type(items, entity=entity, prop=".".join(items_path)).schema_type}
        return self._normalize_property(items, entity=entity, path=items_path, expanding=expanding)

    def _resolve_type(self, schema: Mapping[str, JSONValue], *, entity: str, prop: str) -> _Resolution:
        resolved = self._try_resolve_type(schema, entity=entity, prop=prop, seen=())
        if resolved is None:
            raise MalformedInputError("cannot resolve schema type", entity=entity, prop=prop)
        return resolved

    def _try_resolve_type(
        self,
        schema: Mapping[str, JSONValue],
        *,
        entity: str,
        prop: str,
        seen: tuple[str, ...],
    ) -> _Resolution | None:
        declared = schema.get("type")
        if isinstance(declared, str):
            return _Resolution(declared, schema, seen)
        if isinstance(declared, Sequence) and not isinstance(declared, (str, bytes, bytearray)):
            for member in declared:
                if isinstance(member, str) and member != "null":
                    return _Resolution(member, schema, seen)
        reference = schema.get(REF_KEY)
        if isinstance(reference, str):
            return self._resolve_reference(reference, entity=entity, prop=prop, seen=seen)
        if "const" in schema:
            return _Resolution(_infer_literal_type(schema["const"]), schema, seen)
        enum = schema.get("enum")
        if isinstance(enum, Sequence) and not isinstance(enum, (str, bytes, bytearray)):
            return _Resolution(_infer_literal_type(enum[0]) if enum else "string", schema, seen)
        for key in COMPOSITION_KEYS:
            branches = schema.get(key)
            if not isinstance(branches, Sequence) or isinstance(branches, (str, bytes, bytearray)):
                continue
            for branch in branches:
                if isinstance(branch, Mapping):
                    resolution = self._try_resolve_type(branch, entity=entity, prop=prop, seen=seen)
                    if resolution is not None:
                        return resolution
        if PROPERTIES_KEY in schema:
            return _Resolution("object", schema, seen)
        if "items" in schema:
            return _Resolution("array", schema, seen)
        return None

    def _resolve_reference(
        self,
        reference: str,
        *,
        entity: str,
        prop: str,
        seen: tuple[str, ...],
    ) -> _Resolution | None:
        if not reference.startswith("#"):
            raise MalformedInputError(f"external reference '{reference}' is not supported", entity=entity, prop=prop)
        if reference in seen:
            raise MalformedInputError(f"reference cycle through '{reference}'", entity=entity, prop=prop)
        target = resolve_pointer(self.document, reference)
        if not isinstance(target, Mapping):
            raise MalformedInputError(f"unresolvable reference '{reference}'", entity=entity, prop=prop)
        return self._try_resolve_type(target, entity=entity, prop=prop, seen=(*seen, reference))


@dataclass(frozen=True, slots=True)
class _Resolution:
    """Resolved type of a property schema and the node that declared it."""

    schema_type: str
    node: Mapping[str, JSONValue]
    references: tuple[str, ...]

    def structural(self, schema: Mapping[str, JSONValue], key: str) -> JSONValue | None:
        """Return ``key`` from ``schema`` itself, else from the declaring node."""

        value = schema.get(key)
        return value if value is not None else self.node.get(key)


def _infer_literal_type(value: JSONValue) -> str:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return "array"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, Mapping):
        return "object"
    return "string"


__all__ = ["SchemaExtractor"]
