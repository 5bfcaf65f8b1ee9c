from __future__ import annotations

from pathlib import Path

import pytest

from autotag.core.content.memory import InMemoryContentRepository
from autotag.core.vision.eligibility import MARKER_TAG
from autotag.core.vision.errors import TagPersistenceError
from autotag.core.vision.persistence import PersistenceCoordinator
from tests.utils import ALT_FIELD, TAG_FIELD, make_content_type, make_item


class _FailingRepository(InMemoryContentRepository):
    """Fails on the n-th add_tag call (1-based)."""

    def __init__(self, fail_on: int) -> None:
        super().__init__()
        self.fail_on = fail_on
        self.attempts = 0

    def add_tag(self, item, tag, field_variable):
        self.attempts += 1
        if self.attempts == self.fail_on:
            raise OSError("database is locked")
        super().add_tag(item, tag, field_variable)


def test_save_tags_writes_marker_then_tags(jpeg_path: Path):
    repo = InMemoryContentRepository()
    item = make_item(jpeg_path)

    n = PersistenceCoordinator(repo).save_tags(item, ["dog", "park"])

    assert n == 3
    assert [t for _, t, _ in repo.tag_writes] == [MARKER_TAG, "dog", "park"]
    assert item.tag_values(TAG_FIELD) == [MARKER_TAG, "dog", "park"]


def test_save_tags_noop_without_tag_field(jpeg_path: Path):
    repo = InMemoryContentRepository()
    item = make_item(jpeg_path, content_type=make_content_type(with_tag_field=False))
    assert PersistenceCoordinator(repo).save_tags(item, ["dog"]) == 0
    assert repo.tag_writes == []


def test_save_tags_aborts_on_first_failure_without_rollback(jpeg_path: Path):
    repo = _FailingRepository(fail_on=3)
    item = make_item(jpeg_path)

    with pytest.raises(TagPersistenceError) as exc:
        PersistenceCoordinator(repo).save_tags(item, ["dog", "park", "grass"])

    assert "park" in str(exc.value)
    assert isinstance(exc.value.__cause__, OSError)
    # partial state is kept
    assert item.tag_values(TAG_FIELD) == [MARKER_TAG, "dog"]
    assert repo.attempts == 3


def test_set_alt_text(jpeg_path: Path):
    item = make_item(jpeg_path)
    alt = item.content_type.field_map()[ALT_FIELD]
    pc = PersistenceCoordinator(InMemoryContentRepository())

    assert pc.set_alt_text(item, alt, "") is None
    assert pc.set_alt_text(item, alt, None) is None
    assert item.get_string_property(ALT_FIELD) is None

    out = pc.set_alt_text(item, alt, "a dog")
    assert out is item
    assert item.get_string_property(ALT_FIELD) == "a dog"


def test_set_alt_text_never_overwrites(jpeg_path: Path):
    item = make_item(jpeg_path, properties={ALT_FIELD: "existing"})
    alt = item.content_type.field_map()[ALT_FIELD]
    assert PersistenceCoordinator(InMemoryContentRepository()).set_alt_text(item, alt, "a dog") is None
    assert item.get_string_property(ALT_FIELD) == "existing"
