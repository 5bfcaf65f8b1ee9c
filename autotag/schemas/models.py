# autotag/schemas/models.py

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

_HASH_CHUNK = 8192

# =========================
# Images
# =========================


def sha256_of_path(p: Path) -> str:
    h = hashlib.sha256()
    with p.open("rb") as f:
        for chunk in iter(lambda: f.read(_HASH_CHUNK), b""):
            h.update(chunk)
    return h.hexdigest()


class ImageAsset(BaseModel):
    """
    An image-bearing field value on a content item.

    Read-only to the pipeline. `sha256` is the digest of the file bytes and is
    the dedup key for vision results; it never depends on the path or mtime.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, extra="ignore")

    path: Path = Field(..., description="Filesystem path of the stored binary.")
    field_variable: str = Field(..., description="Variable of the binary field this asset belongs to.")
    bytes_size: int = Field(..., ge=0, description="Size of the stored file in bytes.")
    sha256: str = Field(..., description="Hex SHA-256 of the file bytes (empty when unknown).")

    @property
    def filename(self) -> str:
        return self.path.name

    @classmethod
    def from_path(cls, path: Path | str, field_variable: str) -> ImageAsset:
        p = Path(path)
        return cls(path=p, field_variable=field_variable, bytes_size=p.stat().st_size, sha256=sha256_of_path(p))


# =========================
# Vision config & results
# =========================


class VisionConfig(BaseModel):
    """
    Per-tenant vision settings, resolved once per invocation.

    Immutable snapshot; build a new one for every run instead of sharing.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    model: str = Field(..., description="Chat-completion model identifier.")
    max_tokens: int = Field(..., gt=0, description="Max output tokens for the completion.")
    prompt: str = Field(..., description="Instruction text sent next to the image.")
    alt_text_fields: tuple[str, ...] = Field(..., description="Ordered candidate field variables for alt text.")
    autotag_content_types: tuple[str, ...] = Field(
        default=(), description="Lower-cased content-type variables that always qualify for auto tagging."
    )
    api_key: SecretStr | None = Field(None, description="Tenant credential for the completions API, if any.")


class TaggingResult(BaseModel):
    """Output of one successful vision call: alt text plus ordered tags."""

    model_config = ConfigDict(frozen=True)

    alt_text: str = Field(..., description="Accessibility description for the image.")
    tags: tuple[str, ...] = Field(default=(), description="Keyword tags in model order.")


# =========================
# Content (external entity)
# =========================

FieldType = Literal["binary", "tag", "text", "textarea", "other"]


class ContentField(BaseModel):
    """One declared field of a content type."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    variable: str
    name: str = ""
    field_type: FieldType = "text"
    field_variables: dict[str, str] = Field(
        default_factory=dict, description="Per-field marker attributes (e.g. the alt-text/tag markers)."
    )


class ContentType(BaseModel):
    """Schema of a content item: its variable plus ordered field declarations."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    variable: str
    name: str = ""
    fields: list[ContentField] = Field(default_factory=list)

    def first_field_of_type(self, kind: FieldType) -> ContentField | None:
        return next((f for f in self.fields if f.field_type == kind), None)

    def field_map(self) -> dict[str, ContentField]:
        return {f.variable: f for f in self.fields}

    def fields_with_variable(self, key: str) -> list[ContentField]:
        return [f for f in self.fields if key in f.field_variables]


class ContentItem(BaseModel):
    """
    A unit of managed content as seen by the pipeline.

    Mutable: alt text is set in place and the caller decides when to persist.
    Tag fields hold a list of strings under the field's variable.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="ignore", validate_assignment=False)

    identifier: str
    inode: str
    host: str = Field(..., description="Tenant/host identifier used to resolve configuration.")
    title: str = ""
    content_type: ContentType
    properties: dict[str, Any] = Field(default_factory=dict)
    binaries: dict[str, ImageAsset] = Field(default_factory=dict)

    @field_validator("host")
    @classmethod
    def _host_not_blank(cls, v: str) -> str:
        return v.strip()

    def get_string_property(self, variable: str) -> str | None:
        val = self.properties.get(variable)
        if val is None:
            return None
        if isinstance(val, (list, tuple)):
            return ",".join(str(x) for x in val)
        return str(val)

    def set_string_property(self, variable: str, value: str) -> None:
        self.properties[variable] = value

    def tag_values(self, variable: str) -> list[str]:
        raw = self.properties.get(variable)
        if raw is None:
            return []
        if isinstance(raw, str):
            return [t.strip() for t in raw.split(",") if t.strip()]
        return [str(t) for t in raw]

    def binary(self, variable: str) -> ImageAsset | None:
        return self.binaries.get(variable)
