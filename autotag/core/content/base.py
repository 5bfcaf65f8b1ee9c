# autotag/core/content/base.py
"""
Contracts for the collaborators the pipeline does not own.

- `SecretProvider`: per-tenant secret lookup (the app secret store).
- `ContentRepository`: the narrow write surface used to persist results.

Both are injected into the pipeline; nothing here reaches for global locators.
Concrete implementations live elsewhere (e.g. `memory.py` for tests and the CLI,
or an adapter around a real CMS).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from autotag.schemas.models import ContentItem


@runtime_checkable
class SecretProvider(Protocol):
    def get_secrets(self, host_id: str) -> Mapping[str, str]:
        """
        Return the tenant's secret entries as plain strings.

        May raise when the store is unreachable or the host is unknown; callers
        (ConfigResolver) treat any failure as "no secrets".
        """
        ...


@runtime_checkable
class ContentRepository(Protocol):
    def add_tag(self, item: ContentItem, tag: str, field_variable: str) -> None:
        """Attach one tag value to the item's tag field. Raises on failure."""
        ...

    def save(self, item: ContentItem) -> ContentItem:
        """Persist the item (check-in) and return the stored version."""
        ...


__all__ = [
    "SecretProvider",
    "ContentRepository",
]
