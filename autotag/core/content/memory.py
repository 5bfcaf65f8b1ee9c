# autotag/core/content/memory.py
"""
In-memory SecretProvider / ContentRepository.

Deterministic, zero-network stand-ins for the CMS. Used by the CLI and tests;
also a reference for writing a real adapter.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping

from autotag.schemas.models import ContentItem


class InMemorySecretProvider:
    def __init__(self, secrets: Mapping[str, Mapping[str, str]] | None = None) -> None:
        self._secrets: dict[str, dict[str, str]] = {h: dict(s) for h, s in (secrets or {}).items()}

    def set(self, host_id: str, key: str, value: str) -> None:
        self._secrets.setdefault(host_id, {})[key] = value

    def get_secrets(self, host_id: str) -> Mapping[str, str]:
        if host_id not in self._secrets:
            raise LookupError(f"unknown host: {host_id}")
        return dict(self._secrets[host_id])


class InMemoryContentRepository:
    """
    Stores tags in the item's properties (list under the tag field variable)
    and keeps the last saved copy of every item by identifier.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.saved: dict[str, ContentItem] = {}
        self.tag_writes: list[tuple[str, str, str]] = []

    def add_tag(self, item: ContentItem, tag: str, field_variable: str) -> None:
        with self._lock:
            values = item.tag_values(field_variable)
            if tag not in values:
                values.append(tag)
            item.properties[field_variable] = values
            self.tag_writes.append((item.inode, tag, field_variable))

    def save(self, item: ContentItem) -> ContentItem:
        with self._lock:
            stored = item.model_copy(deep=True)
            self.saved[item.identifier] = stored
            return stored
