# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Custom exceptions raised by catalog build operations."""

from __future__ import annotations

from .types import EntityKind


class CatalogIntegrityError(RuntimeError):
    """Raised when catalog inputs violate semantic invariants.

    Every error records where it happened so the offending source record can
    be located: the entity ``kind``, the entity name and, where relevant, the
    property name. Any of them may be ``None``.
    """

    def __init__(
        self,
        message: str,
        *,
        kind: EntityKind | None = None,
        entity: str | None = None,
        prop: str | None = None,
    ) -> None:
        """Create the error with ``message`` and optional location details."""

        self.reason = message
        self.kind = kind
        self.entity = entity
        self.prop = prop
        super().__init__(self._render())

    def _render(self) -> str:
        location: list[str] = []
        if self.kind is not None:
            location.append(f"kind={self.kind.value}")
        if self.entity is not None:
            location.append(f"entity={self.entity}")
        if self.prop is not None:
            location.append(f"property={self.prop}")
        if not location:
            return self.reason
        return f"[{' '.join(location)}] {self.reason}"


class MissingFragmentError(CatalogIntegrityError):
    """Raised when a raw entity has no matching schema fragment."""


class MalformedInputError(CatalogIntegrityError):
    """Raised when a raw entry or schema fragment is structurally unreadable."""


class TypeCoercionError(CatalogIntegrityError):
    """Raised when a raw default cannot be coerced to its declared schema type."""


class CatalogValidationError(CatalogIntegrityError):
    """Raised when an emitted properties schema fails structural validation."""


__all__ = (
    "CatalogIntegrityError",
    "CatalogValidationError",
    "MalformedInputError",
    "MissingFragmentError",
    "TypeCoercionError",
)
