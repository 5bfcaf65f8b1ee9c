# autotag/core/content/__init__.py
from .base import ContentRepository, SecretProvider
from .memory import InMemoryContentRepository, InMemorySecretProvider

__all__ = [
    "SecretProvider",
    "ContentRepository",
    "InMemorySecretProvider",
    "InMemoryContentRepository",
]
