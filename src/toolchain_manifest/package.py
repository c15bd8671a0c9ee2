"""Package model: versions, per-target builds and their artifacts.

A package's build table is a tagged union:
- TargetIndependent: one build valid for every platform (key "*").
- TargetDependent: one build per platform triple.

A build of None records a target that is declared but unavailable, which is
distinct from a target that is not declared at all.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from toolchain_manifest.errors import (
    PackageNotTargetIndependentError,
    PackageUnavailableError,
    PackageUnknownError,
)
from toolchain_manifest.target import SpecificTarget, SupportedTarget, TargetTriple

if TYPE_CHECKING:
    from toolchain_manifest.hash_value import Hash160, Hash256, HashValue
    from toolchain_manifest.raw import CompressionKind

SHA256 = "sha256"


@dataclass(frozen=True)
class PackageArtifact:
    """One downloadable archive of a package build.

    Attributes:
        compression: Archive compression kind.
        url: Download URL.
        digests: Digest algorithm name to expected digest.
    """

    compression: CompressionKind
    url: str
    digests: Mapping[str, HashValue]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "compression": self.compression.value,
            "url": self.url,
            "digests": {name: str(digest) for name, digest in self.digests.items()},
        }


def largest_digest(artifacts: Iterable[PackageArtifact]) -> HashValue | None:
    """Pick the largest digest across artifacts, None if there are none.

    Used as a deterministic identifier when a build exposes several digests
    (one per compression kind).
    """
    digests = [digest for artifact in artifacts for digest in artifact.digests.values()]
    return max(digests) if digests else None


@dataclass(frozen=True)
class PackageBuild:
    """Available build of a package for one target."""

    artifacts: tuple[PackageArtifact, ...] = ()

    def unique_identifier(self) -> HashValue | None:
        """Deterministic identifier of this build (largest artifact digest)."""
        return largest_digest(self.artifacts)


@dataclass(frozen=True)
class TargetIndependent:
    """Build table of a package with a single build for every target."""

    build: PackageBuild | None


@dataclass(frozen=True)
class TargetDependent:
    """Build table of a package with one build per platform."""

    builds: Mapping[TargetTriple, PackageBuild | None]


BuildTable = TargetIndependent | TargetDependent


@dataclass(frozen=True)
class Package:
    """Package with version metadata and its build table.

    Attributes:
        name: Unique package name.
        version: Human-readable version, absent for metadata-only packages.
        git_commit_hash: Source commit, absent for metadata-only packages.
        builds: Build table.
    """

    name: str
    version: str | None
    git_commit_hash: Hash160 | None
    builds: BuildTable

    @property
    def is_target_independent(self) -> bool:
        return isinstance(self.builds, TargetIndependent)

    @property
    def targets(self) -> frozenset[TargetTriple]:
        """Platforms declared for a target-dependent package."""
        if isinstance(self.builds, TargetDependent):
            return frozenset(self.builds.builds)
        return frozenset()

    def build_for(self, target: SupportedTarget) -> PackageBuild:
        """Get the build for a target.

        A target-independent package serves every lookup with its single build.

        Raises:
            PackageNotTargetIndependentError: Universal lookup on a
                target-dependent package.
            PackageUnknownError: Target never declared for this package.
            PackageUnavailableError: Target declared but marked unavailable.
        """
        if isinstance(self.builds, TargetIndependent):
            build = self.builds.build
        elif not isinstance(target, SpecificTarget):
            raise PackageNotTargetIndependentError(self.name)
        elif target.triple not in self.builds.builds:
            raise PackageUnknownError(self.name, target)
        else:
            build = self.builds.builds[target.triple]

        if build is None:
            raise PackageUnavailableError(self.name, target)
        return build


@dataclass(frozen=True)
class Component:
    """Component or extension declared for a host platform.

    Attributes:
        package: Canonical package name.
        target: Target the component's build is for.
        is_extension: True for optional add-ons, False for core components.
    """

    package: str
    target: SupportedTarget
    is_extension: bool = False


@dataclass(frozen=True)
class ArtifactFile:
    """One file of a standalone artifact."""

    url: str
    sha256: Hash256


@dataclass(frozen=True)
class ManifestArtifact:
    """Standalone artifact (e.g. an installer) with per-target files."""

    name: str
    builds: Mapping[SupportedTarget, tuple[ArtifactFile, ...]]

    def builds_for(self, host: TargetTriple) -> list[ArtifactFile]:
        """Get all files usable on a host platform."""
        files: list[ArtifactFile] = []
        for target, target_files in self.builds.items():
            if target.supports(host):
                files.extend(target_files)
        return files
