# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Declarative per-kind rule table consulted by the catalog merger."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Final

from .types import MODEL_KEY, EntityKind

STRUCTURAL_MODEL_FIELDS: Final[tuple[str, ...]] = ("kind",)


@dataclass(frozen=True, slots=True)
class KindRules:
    """Normalisation rules applied to every entry of one entity kind."""

    kind: EntityKind
    excluded_names: frozenset[str] = frozenset()
    requires_schema: bool = True
    model_block: str = MODEL_KEY
    passthrough_blocks: tuple[str, ...] = ()

    def excludes(self, name: str) -> bool:
        """Return ``True`` when ``name`` must never appear in the kind's catalog."""

        return name in self.excluded_names


KIND_RULES: Final[Mapping[EntityKind, KindRules]] = MappingProxyType(
    {
        EntityKind.COMPONENT: KindRules(
            kind=EntityKind.COMPONENT,
            model_block="component",
            passthrough_blocks=("componentProperties", "headers"),
        ),
        EntityKind.DATAFORMAT: KindRules(kind=EntityKind.DATAFORMAT),
        # ``file`` is the legacy alias of the ``simple`` language.
        EntityKind.LANGUAGE: KindRules(kind=EntityKind.LANGUAGE, excluded_names=frozenset({"file"})),
        EntityKind.MODEL: KindRules(kind=EntityKind.MODEL),
        EntityKind.PATTERN: KindRules(kind=EntityKind.PATTERN),
    },
)


def rules_for(kind: EntityKind) -> KindRules:
    """Return the rule set registered for ``kind``."""

    return KIND_RULES[kind]


__all__ = [
    "KIND_RULES",
    "STRUCTURAL_MODEL_FIELDS",
    "KindRules",
    "rules_for",
]
