# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Raw metadata entries as supplied by the per-kind source catalogs."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .errors import MalformedInputError
from .rules import rules_for
from .type_tags import TypeTag, parse_type_tag
from .types import PROPERTIES_KEY, EntityKind, JSONValue
from .utils import expect_mapping, freeze_json_mapping, optional_mapping, optional_string

DEFAULT_VALUE_KEYS: Final[tuple[str, ...]] = ("defaultValue", "default")
TYPE_KEY: Final[str] = "type"
JAVA_TYPE_KEY: Final[str] = "javaType"
DISPLAY_NAME_KEY: Final[str] = "displayName"
DESCRIPTION_KEY: Final[str] = "description"


@dataclass(frozen=True, slots=True)
class RawEntry:
    """One entity's raw metadata: a model block and a properties block."""

    kind: EntityKind
    name: str
    model: Mapping[str, JSONValue]
    properties: Mapping[str, Mapping[str, JSONValue]]
    extras: Mapping[str, JSONValue]
    source: Path | None = None

    @staticmethod
    def from_mapping(
        data: Mapping[str, JSONValue],
        *,
        kind: EntityKind,
        name: str | None = None,
        source: Path | None = None,
    ) -> RawEntry:
        """Create a raw entry from a parsed metadata document.

        Args:
            data: Raw metadata document for one entity.
            kind: Entity kind the document belongs to.
            name: Optional explicit entity name; defaults to the model block's ``name``.
            source: Optional file the document was read from.

        Returns:
            RawEntry: Frozen raw entry.

        Raises:
            MalformedInputError: If the model block, the name or a property is unreadable.
        """

        rules = rules_for(kind)
        model = expect_mapping(data.get(rules.model_block), key=rules.model_block, kind=kind, entity=name)
        resolved_name = name or optional_string(model.get("name"), key="name", kind=kind)
        if not resolved_name:
            raise MalformedInputError(f"'{rules.model_block}' block has no name", kind=kind)
        raw_properties = optional_mapping(
            data.get(PROPERTIES_KEY),
            key=PROPERTIES_KEY,
            kind=kind,
            entity=resolved_name,
        )
        context = f"{kind.value}:{resolved_name}"
        properties: dict[str, Mapping[str, JSONValue]] = {}
        for prop_name, prop_value in raw_properties.items():
            prop_mapping = expect_mapping(
                prop_value,
                key=f"{PROPERTIES_KEY}.{prop_name}",
                kind=kind,
                entity=resolved_name,
            )
            properties[prop_name] = freeze_json_mapping(prop_mapping, context=f"{context}.{prop_name}")
        extras = {block: data[block] for block in rules.passthrough_blocks if block in data}
        return RawEntry(
            kind=kind,
            name=resolved_name,
            model=freeze_json_mapping(model, context=f"{context}.{rules.model_block}"),
            properties=properties,
            extras=freeze_json_mapping(extras, context=context),
            source=source,
        )

    @property
    def title(self) -> str | None:
        """Return the model title, when the raw model declares one."""

        return optional_string(self.model.get("title"), key="title", kind=self.kind, entity=self.name)

    def type_tag(self, prop: str) -> TypeTag | None:
        """Return the parsed type tag of ``prop`` or ``None`` when it declares none.

        Raises:
            MalformedInputError: If the property declares an unreadable type tag.
        """

        metadata = self.properties[prop]
        type_name = optional_string(metadata.get(TYPE_KEY), key=TYPE_KEY, kind=self.kind, entity=self.name)
        java_type = optional_string(metadata.get(JAVA_TYPE_KEY), key=JAVA_TYPE_KEY, kind=self.kind, entity=self.name)
        if not type_name and not java_type:
            return None
        try:
            return parse_type_tag(type_name, java_type)
        except MalformedInputError as exc:
            raise MalformedInputError(exc.reason, kind=self.kind, entity=self.name, prop=prop) from exc

    def default(self, prop: str) -> tuple[bool, JSONValue]:
        """Return ``(present, value)`` for the raw default of ``prop``; ``null`` counts as absent."""

        metadata = self.properties[prop]
        for key in DEFAULT_VALUE_KEYS:
            value = metadata.get(key)
            if value is not None:
                return True, value
        return False, None


__all__ = [
    "DEFAULT_VALUE_KEYS",
    "DESCRIPTION_KEY",
    "DISPLAY_NAME_KEY",
    "RawEntry",
]
