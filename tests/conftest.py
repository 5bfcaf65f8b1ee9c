# tests/conftest.py
from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from autotag.core.content.memory import InMemoryContentRepository, InMemorySecretProvider
from autotag.core.logging import clear_secrets
from autotag.core.settings import PipelineSettings
from autotag.core.vision.cache import DedupCache
from autotag.orchestrators.vision_tagging import VisionTaggingPipeline
from autotag.schemas.models import ContentItem
from autotag.tools.vision.mock_provider import MockVisionClient
from tests.utils import (
    DEFAULT_HOST,
    DEFAULT_SECRETS,
    make_item,
    png_bytes as _make_png,
    write_jpeg,
)


# -------- Environment isolation --------
@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    for key in ("OPENAI_API_KEY", "AUTOTAG_VISION_CLIENT", "AUTOTAG_DEBUG", "AUTOTAG_LOG_FILE"):
        monkeypatch.delenv(key, raising=False)
    clear_secrets()
    yield
    clear_secrets()


# -------- Collaborators --------
@pytest.fixture
def secrets() -> InMemorySecretProvider:
    return InMemorySecretProvider({DEFAULT_HOST: dict(DEFAULT_SECRETS)})


@pytest.fixture
def repository() -> InMemoryContentRepository:
    return InMemoryContentRepository()


@pytest.fixture
def mock_client() -> MockVisionClient:
    return MockVisionClient(alt_text="a dog", tags=("dog", "park"))


@pytest.fixture
def settings() -> PipelineSettings:
    return PipelineSettings()


@pytest.fixture
def pipeline(secrets, repository, mock_client, settings) -> VisionTaggingPipeline:
    return VisionTaggingPipeline(
        secrets=secrets,
        repository=repository,
        client=mock_client,
        cache=DedupCache(settings.cache_ttl_s, settings.cache_max_entries),
        settings=settings,
    )


# -------- Images & items --------
@pytest.fixture
def jpeg_path(tmp_path: Path) -> Path:
    return write_jpeg(tmp_path / "dog.jpg")


@pytest.fixture
def image_item(jpeg_path: Path) -> Callable[..., ContentItem]:
    """
    Factory for content items backed by the default JPEG.
    Usage:
        item = image_item(properties={"altText": "existing"})
    """

    def _factory(**kwargs) -> ContentItem:
        return make_item(kwargs.pop("image_path", jpeg_path), **kwargs)

    return _factory


@pytest.fixture
def png_bytes():
    """
    Fixture that returns a callable to generate PNG bytes with low compression.
    Usage:
        data = png_bytes(64, 64)
    """
    return _make_png


# -------- Pytest markers --------
def pytest_configure(config):
    config.addinivalue_line("markers", "integration: marks integration tests")
