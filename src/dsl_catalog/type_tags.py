# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Loose type-tag parsing and default-value coercion rules.

Raw metadata describes property types loosely: a primitive name such as
``boolean`` or ``java.lang.Long``, a collection notation such as
``java.util.List<java.lang.String>`` or ``string[]``, or a fully-qualified
class reference such as ``javax.sql.DataSource``. This module maps every tag
onto one of three tagged variants and owns the rules that coerce textual
defaults into properly typed JSON values.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Final, Literal, TypeAlias

from .errors import MalformedInputError, TypeCoercionError
from .types import CLASS_COMMENT_PREFIX, EntityKind, JSONValue
from .utils import copy_json_value

SchemaType: TypeAlias = Literal["string", "boolean", "integer", "number", "array", "object", "null"]

_PRIMITIVE_ALIASES: Final[dict[str, SchemaType]] = {
    "string": "string",
    "str": "string",
    "char": "string",
    "enum": "string",
    "duration": "string",
    "java.lang.string": "string",
    "java.lang.character": "string",
    "java.time.duration": "string",
    "boolean": "boolean",
    "bool": "boolean",
    "java.lang.boolean": "boolean",
    "integer": "integer",
    "int": "integer",
    "long": "integer",
    "short": "integer",
    "byte": "integer",
    "java.lang.integer": "integer",
    "java.lang.long": "integer",
    "java.lang.short": "integer",
    "java.lang.byte": "integer",
    "java.math.biginteger": "integer",
    "number": "number",
    "double": "number",
    "float": "number",
    "java.lang.double": "number",
    "java.lang.float": "number",
    "java.math.bigdecimal": "number",
    "object": "object",
    "java.lang.object": "object",
    "java.util.map": "object",
    "java.util.properties": "object",
}
_COLLECTION_BASES: Final[frozenset[str]] = frozenset(
    {
        "array",
        "list",
        "set",
        "collection",
        "java.util.list",
        "java.util.set",
        "java.util.collection",
    },
)
_GENERIC_RE: Final[re.Pattern[str]] = re.compile(r"^(?P<base>[\w.$]+)\s*<(?P<args>.*)>$")
_ARRAY_SUFFIX: Final[str] = "[]"
_DEFAULT_ELEMENT: Final[str] = "string"


@dataclass(frozen=True, slots=True)
class PrimitiveTag:
    """Type tag naming a JSON-Schema primitive."""

    schema_type: SchemaType


@dataclass(frozen=True, slots=True)
class CollectionTag:
    """Type tag describing a homogeneous collection of ``element`` values."""

    element: TypeTag

    @property
    def schema_type(self) -> SchemaType:
        return "array"


@dataclass(frozen=True, slots=True)
class ClassReferenceTag:
    """Type tag naming a host-language class that is referenced opaquely."""

    class_name: str

    @property
    def schema_type(self) -> SchemaType:
        return "string"

    @property
    def comment(self) -> str:
        """Return the ``$comment`` annotation carried by degraded properties."""

        return f"{CLASS_COMMENT_PREFIX}{self.class_name}"


TypeTag: TypeAlias = PrimitiveTag | CollectionTag | ClassReferenceTag


def parse_type_tag(type_name: str | None, java_type: str | None = None) -> TypeTag:
    """Return the tagged variant describing a raw property type.

    Collection notation in either field wins. A primitive ``type_name`` other
    than ``object`` wins over ``java_type`` so enumerations and durations stay
    primitive. Otherwise ``java_type`` decides between a primitive, a map and
    a class reference.

    Args:
        type_name: Loose type name from the raw metadata (``type``).
        java_type: Optional fully-qualified type (``javaType``).

    Returns:
        TypeTag: Parsed type tag.

    Raises:
        MalformedInputError: If no tag is given or ``type_name`` is unknown.
    """

    for candidate in (java_type, type_name):
        if candidate:
            collection = _parse_collection(candidate.strip())
            if collection is not None:
                return collection
    if type_name:
        alias = _PRIMITIVE_ALIASES.get(type_name.strip().lower())
        if alias is not None and alias != "object":
            return PrimitiveTag(alias)
    if java_type:
        return _parse_class_name(java_type.strip())
    if type_name:
        normalized = type_name.strip()
        if normalized.lower() == "object":
            return PrimitiveTag("object")
        if "." in normalized:
            return _parse_class_name(normalized)
        raise MalformedInputError(f"unknown type tag '{normalized}'")
    raise MalformedInputError("missing type tag")


def _parse_collection(tag: str) -> CollectionTag | None:
    if tag.endswith(_ARRAY_SUFFIX):
        return CollectionTag(_parse_element(tag[: -len(_ARRAY_SUFFIX)].strip()))
    match = _GENERIC_RE.match(tag)
    if match is not None:
        if match.group("base").lower() not in _COLLECTION_BASES:
            return None
        return CollectionTag(_parse_element(match.group("args").strip()))
    if tag.lower() in _COLLECTION_BASES:
        return CollectionTag(PrimitiveTag(_DEFAULT_ELEMENT))
    return None


def _parse_element(tag: str) -> TypeTag:
    if not tag or tag == "?":
        return PrimitiveTag(_DEFAULT_ELEMENT)
    if tag.startswith("? extends "):
        tag = tag[len("? extends ") :].strip()
    collection = _parse_collection(tag)
    if collection is not None:
        return collection
    return _parse_class_name(tag)


def _parse_class_name(name: str) -> TypeTag:
    match = _GENERIC_RE.match(name)
    base = match.group("base") if match is not None else name
    alias = _PRIMITIVE_ALIASES.get(base.lower())
    if alias is not None:
        return PrimitiveTag(alias)
    return ClassReferenceTag(name)


def declared_type(schema_property: Mapping[str, JSONValue]) -> SchemaType | None:
    """Return the JSON-Schema type declared by ``schema_property``.

    A list of types resolves to its first non-``null`` member.
    """

    declared = schema_property.get("type")
    if isinstance(declared, str):
        return declared  # type: ignore[return-value]
    if isinstance(declared, Sequence) and not isinstance(declared, (str, bytes, bytearray)):
        for member in declared:
            if isinstance(member, str) and member != "null":
                return member  # type: ignore[return-value]
    return None


def coerce_default(
    value: JSONValue,
    schema_property: Mapping[str, JSONValue],
    *,
    kind: EntityKind | None = None,
    entity: str | None = None,
    prop: str | None = None,
) -> JSONValue:
    """Coerce a raw default ``value`` to the type declared by ``schema_property``.

    Args:
        value: Raw default, often a textual placeholder such as ``"false"``.
        schema_property: Normalised schema for the property.
        kind: Entity kind used in error reporting.
        entity: Entity name used in error reporting.
        prop: Property name used in error reporting.

    Returns:
        JSONValue: Default converted to the declared type. Values of
        properties without a declared type are returned unchanged.

    Raises:
        TypeCoercionError: If ``value`` cannot represent the declared type.
    """

    try:
        return _coerce(value, schema_property)
    except ValueError as exc:
        raise TypeCoercionError(str(exc), kind=kind, entity=entity, prop=prop) from exc


def _coerce(value: JSONValue, schema_property: Mapping[str, JSONValue]) -> JSONValue:
    schema_type = declared_type(schema_property)
    if schema_type is None:
        return copy_json_value(value)
    if schema_type == "array":
        return _coerce_array(value, schema_property)
    coercer = _SCALAR_COERCERS.get(schema_type)
    if coercer is None:
        raise ValueError(f"unsupported schema type '{schema_type}'")
    return coercer(value)


def _coerce_string(value: JSONValue) -> JSONValue:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    raise ValueError(f"cannot coerce {value!r} to string")


def _coerce_boolean(value: JSONValue) -> JSONValue:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    raise ValueError(f"cannot coerce {value!r} to boolean")


def _coerce_integer(value: JSONValue) -> JSONValue:
    if isinstance(value, bool):
        raise ValueError(f"cannot coerce {value!r} to integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise ValueError(f"cannot coerce {value!r} to integer")


def _coerce_number(value: JSONValue) -> JSONValue:
    if isinstance(value, bool):
        raise ValueError(f"cannot coerce {value!r} to number")
    if isinstance(value, (int, float)):
        number: int | float = value
    elif isinstance(value, str):
        text = value.strip()
        try:
            number = int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                raise ValueError(f"cannot coerce {value!r} to number") from None
    else:
        raise ValueError(f"cannot coerce {value!r} to number")
    if not math.isfinite(number):
        raise ValueError(f"cannot coerce {value!r} to a finite number")
    return number


def _coerce_object(value: JSONValue) -> JSONValue:
    if isinstance(value, Mapping):
        return copy_json_value(value)
    raise ValueError(f"cannot coerce {value!r} to object")


def _coerce_null(value: JSONValue) -> JSONValue:
    if value is None:
        return None
    raise ValueError(f"cannot coerce {value!r} to null")


def _coerce_array(value: JSONValue, schema_property: Mapping[str, JSONValue]) -> JSONValue:
    items = schema_property.get("items")
    item_schema: Mapping[str, JSONValue] = items if isinstance(items, Mapping) else {}
    if isinstance(value, str):
        elements: Sequence[JSONValue] = [part.strip() for part in value.split(",") if part.strip()]
    elif isinstance(value, Sequence):
        elements = value
    elif isinstance(value, Mapping):
        raise ValueError(f"cannot coerce {value!r} to array")
    else:
        elements = [value]
    return [_coerce(element, item_schema) for element in elements]


_SCALAR_COERCERS: Final[dict[str, Callable[[JSONValue], JSONValue]]] = {
    "string": _coerce_string,
    "boolean": _coerce_boolean,
    "integer": _coerce_integer,
    "number": _coerce_number,
    "object": _coerce_object,
    "null": _coerce_null,
}


__all__ = [
    "ClassReferenceTag",
    "CollectionTag",
    "PrimitiveTag",
    "SchemaType",
    "TypeTag",
    "coerce_default",
    "declared_type",
    "parse_type_tag",
]
