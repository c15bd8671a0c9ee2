"""Raw manifest document schema.

Direct typing of a decoded v2 channel manifest, e.g.:

    manifest-version = "2"
    date = "2022-11-30"

    [pkg.cargo]
    version = "0.67.0-nightly (ba607b23d 2022-11-22)"
    git_commit_hash = "c0ca8a2be4e6f1d2ae8e8e5b9cbb1d41c2a1ecbd"

    [pkg.cargo.target.x86_64-unknown-linux-gnu]
    available = true
    url = "https://static.rust-lang.org/dist/2022-11-30/cargo-nightly-x86_64-unknown-linux-gnu.tar.gz"
    hash = "..."
    xz_url = "https://static.rust-lang.org/dist/2022-11-30/cargo-nightly-x86_64-unknown-linux-gnu.tar.xz"
    xz_hash = "..."

Validation here is structural only; semantic checks happen when the
Manifest model is built.
"""

from __future__ import annotations

import datetime
import tomllib
from collections.abc import Iterator, Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from toolchain_manifest.errors import ManifestDecodeError, ManifestStructureError
from toolchain_manifest.hash_value import Hash160, Hash256


class CompressionKind(str, Enum):
    """Archive compression of a package artifact."""

    GZIP = "gz"
    XZ = "xz"
    ZSTD = "zst"


class _RawModel(BaseModel):
    """Common configuration for raw document models."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        strict=True,
        arbitrary_types_allowed=True,
    )


def _parse_digest(value: Any, digest_type: type[Hash160] | type[Hash256]) -> Any:
    if value is None or isinstance(value, digest_type):
        return value
    if not isinstance(value, str):
        raise ValueError(f"digest must be a hex string, got {type(value).__name__}")
    return digest_type.parse(value)


class RawComponent(_RawModel):
    """Component or extension entry declared under the "rust" package."""

    package: str = Field(..., alias="pkg")
    target: str


class RawPackageBuild(_RawModel):
    """Build record of one package for one target key."""

    available: bool
    gz_url: str | None = Field(default=None, alias="url")
    gz_hash: Hash256 | None = Field(default=None, alias="hash")
    xz_url: str | None = None
    xz_hash: Hash256 | None = None
    zst_url: str | None = None
    zst_hash: Hash256 | None = None
    components: list[RawComponent] | None = None
    extensions: list[RawComponent] | None = None

    @field_validator("gz_hash", "xz_hash", "zst_hash", mode="plain")
    @classmethod
    def validate_hash(cls, v: Any) -> Any:
        """Parse hex digests."""
        return _parse_digest(v, Hash256)

    @model_validator(mode="after")
    def validate_pairs(self) -> RawPackageBuild:
        """Ensure each url has its hash and vice versa."""
        for kind, url, digest in self._pairs():
            if (url is None) != (digest is None):
                raise ValueError(f"{kind.value} url and hash must be given together")
        return self

    def _pairs(self) -> Iterator[tuple[CompressionKind, str | None, Hash256 | None]]:
        yield CompressionKind.GZIP, self.gz_url, self.gz_hash
        yield CompressionKind.XZ, self.xz_url, self.xz_hash
        yield CompressionKind.ZSTD, self.zst_url, self.zst_hash

    def artifact_pairs(self) -> list[tuple[CompressionKind, str, Hash256]]:
        """Get (compression, url, digest) for every artifact of an available build."""
        if not self.available:
            return []
        return [
            (kind, url, digest)
            for kind, url, digest in self._pairs()
            if url is not None and digest is not None
        ]


class RawPackage(_RawModel):
    """Package record: version metadata and per-target builds."""

    version: str | None = None
    git_commit_hash: Hash160 | None = None
    targets: dict[str, RawPackageBuild] = Field(..., alias="target")

    @field_validator("git_commit_hash", mode="plain")
    @classmethod
    def validate_commit(cls, v: Any) -> Any:
        """Parse hex commit hash."""
        return _parse_digest(v, Hash160)


class RawRename(_RawModel):
    """Rename entry: the old name maps to a new one."""

    to: str


class RawArtifactBuild(_RawModel):
    """One downloadable file of a standalone artifact (e.g. an installer)."""

    url: str
    hash_sha256: Hash256 = Field(..., alias="hash-sha256")

    @field_validator("hash_sha256", mode="plain")
    @classmethod
    def validate_hash(cls, v: Any) -> Any:
        """Parse hex digest."""
        if v is None:
            raise ValueError("hash-sha256 is required")
        return _parse_digest(v, Hash256)


class RawArtifact(_RawModel):
    """Standalone artifact with per-target files."""

    targets: dict[str, list[RawArtifactBuild]] = Field(..., alias="target")


class RawManifest(_RawModel):
    """Top-level channel manifest document."""

    manifest_version: str = Field(..., alias="manifest-version")
    date: datetime.date = Field(..., strict=False)
    profiles: dict[str, list[str]] = Field(default_factory=dict)
    renames: dict[str, RawRename] = Field(default_factory=dict)
    artifacts: dict[str, RawArtifact] = Field(default_factory=dict)
    packages: dict[str, RawPackage] = Field(..., alias="pkg")


def decode_manifest_text(text: str) -> dict[str, Any]:
    """Decode TOML manifest text into a key/value tree.

    Raises:
        ManifestDecodeError: If the text is not valid TOML.
    """
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        msg = f"TOML deserialization error: {e}"
        raise ManifestDecodeError(msg) from e


def parse_raw_manifest(document: Mapping[str, Any]) -> RawManifest:
    """Validate a decoded document against the manifest schema.

    Raises:
        ManifestStructureError: On unknown keys, wrong types or missing fields.
    """
    try:
        return RawManifest.model_validate(document)
    except ValidationError as e:
        msg = f"Manifest had incorrect structure: {e}"
        raise ManifestStructureError(msg) from e
