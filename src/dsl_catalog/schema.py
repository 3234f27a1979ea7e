# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Structural validation of the properties schemas emitted into catalogs."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError
from jsonschema.validators import validator_for

from .errors import CatalogValidationError
from .merger import COMMENT_KEY
from .model_catalog import AggregateCatalog, Catalog
from .types import CLASS_COMMENT_PREFIX, PROPERTIES_KEY, EntityKind, JSONValue
from .utils import thaw_json_value

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class PropertiesSchemaValidator:
    """Validate emitted ``propertiesSchema`` trees with :mod:`jsonschema`.

    Besides the meta-schema check, every array must carry a typed ``items``
    descriptor, every class-referencing property must be a ``string`` and
    every default must satisfy its own property schema.
    """

    default_validator: Any = Draft7Validator

    def validate_aggregate(self, aggregate: AggregateCatalog) -> None:
        """Validate every catalog contained in ``aggregate``."""

        for catalog in aggregate.catalogs.values():
            self.validate_catalog(catalog)

    def validate_catalog(self, catalog: Catalog) -> None:
        """Validate every entry of ``catalog``.

        Raises:
            CatalogValidationError: When an entry schema is invalid.
        """

        for name, entry in catalog.entries.items():
            self.validate_schema(entry.properties_schema, kind=catalog.kind, entity=name)
        LOGGER.debug("validated %d %s schemas", len(catalog), catalog.kind.value)

    def validate_schema(self, schema: Mapping[str, JSONValue], *, kind: EntityKind, entity: str) -> None:
        """Validate one properties schema.

        Args:
            schema: Emitted properties schema.
            kind: Entity kind used in error reporting.
            entity: Entity name used in error reporting.

        Raises:
            CatalogValidationError: When the schema violates the meta-schema or an
                emitted-shape invariant.
        """

        plain = thaw_json_value(schema)
        validator_cls = validator_for(plain, default=self.default_validator)
        try:
            validator_cls.check_schema(plain)
        except SchemaError as exc:
            raise CatalogValidationError(f"invalid schema: {exc.message}", kind=kind, entity=entity) from exc
        properties = plain.get(PROPERTIES_KEY) if isinstance(plain, dict) else None
        if not isinstance(properties, dict):
            return
        for path, prop_schema in _walk_properties(properties, ()):
            self._check_property(prop_schema, validator_cls, kind=kind, entity=entity, prop=".".join(path))

    @staticmethod
    def _check_property(
        prop_schema: dict[str, JSONValue],
        validator_cls: Any,
        *,
        kind: EntityKind,
        entity: str,
        prop: str,
    ) -> None:
        if prop_schema.get("type") == "array":
            items = prop_schema.get("items")
            if not isinstance(items, dict) or not isinstance(items.get("type"), str):
                raise CatalogValidationError("array property has no typed items", kind=kind, entity=entity, prop=prop)
        comment = prop_schema.get(COMMENT_KEY)
        if isinstance(comment, str) and comment.startswith(CLASS_COMMENT_PREFIX) and prop_schema.get("type") != "string":
            raise CatalogValidationError("class reference is not typed as string", kind=kind, entity=entity, prop=prop)
        if "default" in prop_schema:
            error = next(iter(validator_cls(prop_schema).iter_errors(prop_schema["default"])), None)
            if error is not None:
                raise CatalogValidationError(f"default does not match schema: {error.message}", kind=kind, entity=entity, prop=prop)


def _walk_properties(
    properties: dict[str, JSONValue],
    path: tuple[str, ...],
) -> Iterator[tuple[tuple[str, ...], dict[str, JSONValue]]]:
    for name, prop_schema in properties.items():
        if not isinstance(prop_schema, dict):
            continue
        prop_path = (*path, name)
        yield prop_path, prop_schema
        nested = prop_schema.get(PROPERTIES_KEY)
        if isinstance(nested, dict):
            yield from _walk_properties(nested, prop_path)


__all__ = ["PropertiesSchemaValidator"]
