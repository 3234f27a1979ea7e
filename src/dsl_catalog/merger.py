# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Merge raw metadata entries with schema fragments into per-kind catalogs."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, MutableMapping
from typing import Final

from .config import BuildSettings, CoercionPolicy
from .errors import MalformedInputError, MissingFragmentError, TypeCoercionError
from .extractor import SchemaExtractor
from .model_catalog import Catalog, CatalogEntry, SchemaFragment
from .model_raw import DESCRIPTION_KEY, DISPLAY_NAME_KEY, RawEntry
from .rules import STRUCTURAL_MODEL_FIELDS, rules_for
from .type_tags import ClassReferenceTag, coerce_default
from .types import PROPERTIES_KEY, EntityKind, JSONObject, JSONValue
from .utils import copy_json_object, copy_json_value, freeze_json_mapping

LOGGER = logging.getLogger(__name__)

COMMENT_KEY: Final[str] = "$comment"
_STRUCTURAL_SCHEMA_KEYS: Final[tuple[str, ...]] = ("items", PROPERTIES_KEY, "additionalProperties")
_EMPTY_PROPERTIES_SCHEMA: Final[Mapping[str, JSONValue]] = {"type": "object", PROPERTIES_KEY: {}}


def build_catalog(
    kind: EntityKind,
    raw_entries: Iterable[RawEntry],
    extractor: SchemaExtractor,
    settings: BuildSettings | None = None,
) -> Catalog:
    """Build the catalog for ``kind`` from its raw entries.

    Args:
        kind: Entity kind being built.
        raw_entries: Raw entries in source order.
        extractor: Schema extractor bound to the DSL schema document.
        settings: Build settings; defaults apply when omitted.

    Returns:
        Catalog: Complete, immutable catalog for ``kind``.

    Raises:
        MissingFragmentError: If an entity of a schema-requiring kind has no fragment.
        MalformedInputError: If an entry or its fragment is unreadable, or a name repeats.
        TypeCoercionError: If a default cannot be coerced under the ``fail`` policy.
    """

    resolved_settings = settings or extractor.settings
    rules = rules_for(kind)
    entries: dict[str, CatalogEntry] = {}
    excluded = 0
    for raw in raw_entries:
        if raw.kind is not kind:
            raise MalformedInputError(f"entry belongs to kind '{raw.kind.value}'", kind=kind, entity=raw.name)
        if rules.excludes(raw.name):
            LOGGER.debug("excluding %s/%s", kind.value, raw.name)
            excluded += 1
            continue
        if raw.name in entries:
            raise MalformedInputError("duplicate entity name", kind=kind, entity=raw.name)
        fragment = _fragment_for(raw, extractor)
        if fragment is None:
            if rules.requires_schema:
                raise MissingFragmentError("no schema fragment for entity", kind=kind, entity=raw.name)
            fragment = SchemaFragment(name=raw.name, model={}, properties_schema=_EMPTY_PROPERTIES_SCHEMA)
        entries[raw.name] = merge_entry(raw, fragment, resolved_settings)
    LOGGER.info("built %s catalog: %d entries, %d excluded", kind.value, len(entries), excluded)
    return Catalog(kind=kind, entries=entries)


def _fragment_for(raw: RawEntry, extractor: SchemaExtractor) -> SchemaFragment | None:
    try:
        return extractor.fragment_for(raw.name)
    except MalformedInputError as exc:
        if exc.kind is not None:
            raise
        raise MalformedInputError(exc.reason, kind=raw.kind, entity=exc.entity or raw.name, prop=exc.prop) from exc


def merge_entry(raw: RawEntry, fragment: SchemaFragment, settings: BuildSettings) -> CatalogEntry:
    """Merge ``raw`` with its schema ``fragment`` into one catalog entry.

    Args:
        raw: Raw metadata entry.
        fragment: Normalised schema fragment for the same entity name.
        settings: Build settings selecting the coercion policy.

    Returns:
        CatalogEntry: Frozen merged entry.

    Raises:
        MalformedInputError: If a schema property is not an object or a type tag is unreadable.
        TypeCoercionError: If a default cannot be coerced under the ``fail`` policy.
    """

    context = f"{raw.kind.value}:{raw.name}"
    schema = copy_json_object(fragment.properties_schema)
    title = raw.title
    if title is not None:
        schema["title"] = title
    schema_properties = schema.get(PROPERTIES_KEY)
    if isinstance(schema_properties, MutableMapping):
        for prop_name in raw.properties:
            prop_schema = schema_properties.get(prop_name)
            if prop_schema is None:
                LOGGER.debug("%s: property %s has display metadata only", context, prop_name)
                continue
            if not isinstance(prop_schema, MutableMapping):
                raise MalformedInputError("property schema is not an object", kind=raw.kind, entity=raw.name, prop=prop_name)
            _enrich_property(raw, prop_name, prop_schema, settings)
    return CatalogEntry(
        model=freeze_json_mapping(_merge_model(raw, fragment), context=f"{context}.model"),
        properties=freeze_json_mapping(copy_json_object(raw.properties), context=f"{context}.properties"),
        properties_schema=freeze_json_mapping(schema, context=f"{context}.propertiesSchema"),
        extras=freeze_json_mapping(copy_json_object(raw.extras), context=context),
    )


def _merge_model(raw: RawEntry, fragment: SchemaFragment) -> JSONObject:
    merged = copy_json_object(fragment.model)
    merged.update(copy_json_object(raw.model))
    for key in STRUCTURAL_MODEL_FIELDS:
        if key in fragment.model:
            merged[key] = copy_json_value(fragment.model[key])
    return merged


def _enrich_property(
    raw: RawEntry,
    prop_name: str,
    prop_schema: MutableMapping[str, JSONValue],
    settings: BuildSettings,
) -> None:
    metadata = raw.properties[prop_name]
    display_name = metadata.get(DISPLAY_NAME_KEY)
    if "title" not in prop_schema and isinstance(display_name, str):
        prop_schema["title"] = display_name
    description = metadata.get(DESCRIPTION_KEY)
    if "description" not in prop_schema and isinstance(description, str):
        prop_schema["description"] = description

    tag = raw.type_tag(prop_name)
    if isinstance(tag, ClassReferenceTag):
        _degrade_class_reference(prop_schema, tag)

    present, value = raw.default(prop_name)
    if not present:
        return
    try:
        prop_schema["default"] = coerce_default(value, prop_schema, kind=raw.kind, entity=raw.name, prop=prop_name)
    except TypeCoercionError as exc:
        if settings.coercion_policy is not CoercionPolicy.DROP:
            raise
        prop_schema.pop("default", None)
        LOGGER.warning("dropping default: %s", exc)


def _degrade_class_reference(prop_schema: MutableMapping[str, JSONValue], tag: ClassReferenceTag) -> None:
    for key in (*_STRUCTURAL_SCHEMA_KEYS, "default"):
        prop_schema.pop(key, None)
    prop_schema["type"] = tag.schema_type
    prop_schema[COMMENT_KEY] = tag.comment


__all__ = ["COMMENT_KEY", "build_catalog", "merge_entry"]
