# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Checksum utilities for serialized catalogs."""

from __future__ import annotations

import hashlib
from collections.abc import Iterable


def text_checksum(text: str) -> str:
    """Return the hex-encoded SHA-256 checksum of ``text`` encoded as UTF-8."""

    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def combine_checksums(named_texts: Iterable[tuple[str, str]]) -> str:
    """Calculate one checksum covering several named texts.

    Args:
        named_texts: ``(name, text)`` pairs; order matters.

    Returns:
        str: Hex-encoded SHA-256 checksum over every name and text.
    """
    hasher = hashlib.sha256()
    for name, text in named_texts:
        hasher.update(name.encode("utf-8"))
        hasher.update(b"\0")
        hasher.update(text.encode("utf-8"))
        hasher.update(b"\0")
    return hasher.hexdigest()


__all__ = ["combine_checksums", "text_checksum"]
