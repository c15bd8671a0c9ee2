"""Install specifications and resolution results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, NamedTuple

import orjson

from toolchain_manifest.package import largest_digest

if TYPE_CHECKING:
    from toolchain_manifest.hash_value import Hash160, HashValue
    from toolchain_manifest.package import PackageArtifact
    from toolchain_manifest.target import SupportedTarget


class PackageRef(NamedTuple):
    """Canonical package name and the target of the build to install."""

    name: str
    target: SupportedTarget

    def __str__(self) -> str:
        return f"{self.name} ({self.target})"


def package_ref_sort_key(ref: PackageRef) -> tuple[str, str]:
    """Sort key giving a stable order to package sets."""
    return ref.name, str(ref.target)


@dataclass(frozen=True)
class InstallSpec:
    """Declarative install request.

    Attributes:
        profile: Profile name declared in the manifest (e.g. "minimal").
        components: Extra component names (e.g. "clippy", "rust-src").
        targets: Extra target triples to install the standard library for.
    """

    profile: str
    components: frozenset[str] = frozenset()
    targets: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        # Accept any iterable of names
        object.__setattr__(self, "components", frozenset(self.components))
        object.__setattr__(self, "targets", frozenset(self.targets))


@dataclass(frozen=True)
class PackageDownload:
    """Resolved package to fetch, with every artifact and its digests.

    Attributes:
        name: Canonical package name.
        version: Package version string.
        git_commit_hash: Source commit the package was built from.
        target: Target of the resolved build.
        artifacts: Downloadable archives (one per compression kind).
    """

    name: str
    version: str
    git_commit_hash: Hash160
    target: SupportedTarget
    artifacts: tuple[PackageArtifact, ...]

    def unique_identifier(self) -> HashValue | None:
        """Deterministic identifier of the download (largest artifact digest)."""
        return largest_digest(self.artifacts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        identifier = self.unique_identifier()
        return {
            "name": self.name,
            "version": self.version,
            "git_commit_hash": str(self.git_commit_hash),
            "target": str(self.target),
            "unique_identifier": None if identifier is None else str(identifier),
            "artifacts": [artifact.to_dict() for artifact in self.artifacts],
        }

    def to_json(self) -> bytes:
        """Serialize to JSON bytes using orjson."""
        return orjson.dumps(self.to_dict())
