"""Manifest model and install resolution.

Construction turns a validated raw document into an immutable Manifest:
1. Per-package build tables (target-independent or per-triple).
2. Unavailable builds recorded as None.
3. Per-host components and extensions collected from the "rust" package.
4. Rename table and its inverse.
5. Per-host component name maps.

Resolution then answers, for a host platform:
- which (package, target) a component name denotes,
- which packages an InstallSpec requires,
- which artifacts must be downloaded for them.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from toolchain_manifest.errors import (
    ConflictingTargetDependenceError,
    ManifestStructureError,
    MissingPackageVersionError,
    PackageUnknownError,
    RustMissingError,
    UnknownProfileError,
    UnknownTargetError,
)
from toolchain_manifest.install import (
    InstallSpec,
    PackageDownload,
    PackageRef,
    package_ref_sort_key,
)
from toolchain_manifest.package import (
    SHA256,
    ArtifactFile,
    BuildTable,
    Component,
    ManifestArtifact,
    Package,
    PackageArtifact,
    PackageBuild,
    TargetDependent,
    TargetIndependent,
)
from toolchain_manifest.raw import decode_manifest_text, parse_raw_manifest
from toolchain_manifest.target import (
    TARGET_INDEPENDENT_NAME,
    SpecificTarget,
    SupportedTarget,
    TargetTriple,
    parse_supported_target,
    parse_target_triple,
)

if TYPE_CHECKING:
    from toolchain_manifest.raw import (
        RawArtifact,
        RawComponent,
        RawManifest,
        RawPackage,
        RawPackageBuild,
    )

logger = logging.getLogger(__name__)

SUPPORTED_MANIFEST_VERSION = "2"

# Package that declares every component and extension per host
RUST_PACKAGE = "rust"

# Standard library component for an extra target is "rust-std-{triple}"
STD_COMPONENT_PREFIX = "rust-std"


def _package_build(raw_build: RawPackageBuild) -> PackageBuild | None:
    if not raw_build.available:
        return None
    artifacts = tuple(
        PackageArtifact(
            compression=kind,
            url=url,
            digests=MappingProxyType({SHA256: digest}),
        )
        for kind, url, digest in raw_build.artifact_pairs()
    )
    return PackageBuild(artifacts=artifacts)


def _build_table(name: str, raw_package: RawPackage) -> BuildTable:
    targets = raw_package.targets
    if TARGET_INDEPENDENT_NAME in targets:
        if len(targets) != 1:
            raise ConflictingTargetDependenceError(name)
        return TargetIndependent(_package_build(targets[TARGET_INDEPENDENT_NAME]))

    builds: dict[TargetTriple, PackageBuild | None] = {}
    for key, raw_build in targets.items():
        builds[parse_target_triple(key)] = _package_build(raw_build)
    return TargetDependent(MappingProxyType(builds))


def _package(name: str, raw_package: RawPackage) -> Package:
    return Package(
        name=name,
        version=raw_package.version,
        git_commit_hash=raw_package.git_commit_hash,
        builds=_build_table(name, raw_package),
    )


def _components(
    raw_components: list[RawComponent] | None,
    *,
    is_extension: bool,
) -> list[Component]:
    return [
        Component(
            package=raw.package,
            target=parse_supported_target(raw.target),
            is_extension=is_extension,
        )
        for raw in raw_components or []
    ]


def _host_components(
    rust: Package,
    raw_rust: RawPackage,
) -> dict[TargetTriple, tuple[Component, ...]]:
    if not isinstance(rust.builds, TargetDependent):
        msg = f'Package "{RUST_PACKAGE}" must be target-dependent'
        raise ManifestStructureError(msg)

    components: dict[TargetTriple, tuple[Component, ...]] = {}
    for key, raw_build in raw_rust.targets.items():
        declared = _components(raw_build.components, is_extension=False)
        declared += _components(raw_build.extensions, is_extension=True)
        # Drop repeated declarations, keep first-seen order
        components[parse_target_triple(key)] = tuple(dict.fromkeys(declared))
    return components


def _artifact(name: str, raw_artifact: RawArtifact) -> ManifestArtifact:
    builds: dict[SupportedTarget, tuple[ArtifactFile, ...]] = {}
    for key, raw_files in raw_artifact.targets.items():
        builds[parse_supported_target(key)] = tuple(
            ArtifactFile(url=raw.url, sha256=raw.hash_sha256) for raw in raw_files
        )
    return ManifestArtifact(name=name, builds=MappingProxyType(builds))


def invert_renames(renames: Mapping[str, str]) -> dict[str, str]:
    """Map each new name back to the name it replaced.

    If several old names map to one new name, the last in document order wins.
    """
    return {new: old for old, new in renames.items()}


def build_component_names(
    host: TargetTriple,
    components: tuple[Component, ...],
    legacy_names: Mapping[str, str],
) -> dict[str, PackageRef]:
    """Derive every name a user may type for the components of one host.

    Each component is registered under its canonical package name and, when
    the package was renamed, under its legacy name:
    - "{name}-{triple}" for target-specific components,
    - bare "{name}" when the component's target supports the host.
    Later registrations overwrite earlier ones.
    """
    names: dict[str, PackageRef] = {}
    for component in components:
        ref = PackageRef(component.package, component.target)
        aliases = [component.package]
        legacy = legacy_names.get(component.package)
        if legacy is not None:
            aliases.append(legacy)

        for alias in aliases:
            if isinstance(component.target, SpecificTarget):
                names[f"{alias}-{component.target.triple}"] = ref
            if component.target.supports(host):
                names[alias] = ref
    return names


@dataclass(frozen=True)
class Manifest:
    """Validated, immutable channel manifest.

    Attributes:
        version: Manifest format version.
        date: Release date.
        profiles: Profile name to component names.
        renames: Old component name to new name.
        packages: Package name to package.
        artifacts: Standalone artifact name to artifact.
        components: Host platform to declared components and extensions.
        component_names: Host platform to user-facing name map.
    """

    version: str
    date: datetime.date
    profiles: Mapping[str, tuple[str, ...]]
    renames: Mapping[str, str]
    packages: Mapping[str, Package]
    artifacts: Mapping[str, ManifestArtifact]
    components: Mapping[TargetTriple, tuple[Component, ...]]
    component_names: Mapping[TargetTriple, Mapping[str, PackageRef]]

    @classmethod
    def from_raw(cls, raw: RawManifest) -> Manifest:
        """Build the model from a validated raw document.

        Raises:
            ConflictingTargetDependenceError: Package keyed by "*" and triples.
            RustMissingError: No "rust" package.
            TargetParseError: Invalid target key.
            ManifestStructureError: "rust" package is target-independent.
        """
        if raw.manifest_version != SUPPORTED_MANIFEST_VERSION:
            logger.warning(
                "Unexpected manifest version",
                extra={
                    "manifest_version": raw.manifest_version,
                    "supported": SUPPORTED_MANIFEST_VERSION,
                },
            )

        packages = {name: _package(name, raw_package) for name, raw_package in raw.packages.items()}

        if RUST_PACKAGE not in packages:
            raise RustMissingError()
        components = _host_components(packages[RUST_PACKAGE], raw.packages[RUST_PACKAGE])

        renames = {old: rename.to for old, rename in raw.renames.items()}
        legacy_names = invert_renames(renames)

        component_names = {
            host: MappingProxyType(build_component_names(host, host_components, legacy_names))
            for host, host_components in components.items()
        }

        artifacts = {name: _artifact(name, raw_artifact) for name, raw_artifact in raw.artifacts.items()}

        manifest = cls(
            version=raw.manifest_version,
            date=raw.date,
            profiles=MappingProxyType({name: tuple(names) for name, names in raw.profiles.items()}),
            renames=MappingProxyType(renames),
            packages=MappingProxyType(packages),
            artifacts=MappingProxyType(artifacts),
            components=MappingProxyType(components),
            component_names=MappingProxyType(component_names),
        )
        logger.info(
            "Parsed manifest",
            extra={
                "date": raw.date.isoformat(),
                "package_count": len(packages),
                "profile_count": len(raw.profiles),
                "host_count": len(components),
            },
        )
        return manifest

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> Manifest:
        """Build the model from a decoded key/value tree."""
        return cls.from_raw(parse_raw_manifest(document))

    @classmethod
    def from_toml(cls, text: str) -> Manifest:
        """Build the model from TOML manifest text."""
        return cls.from_document(decode_manifest_text(text))

    @property
    def hosts(self) -> frozenset[TargetTriple]:
        """Host platforms declared under the "rust" package."""
        return frozenset(self.components)

    def get_package(self, name: str) -> Package:
        """Get a package by canonical name.

        Raises:
            PackageUnknownError: If no such package exists.
        """
        package = self.packages.get(name)
        if package is None:
            raise PackageUnknownError(name)
        return package

    def resolve(self, host: TargetTriple, component_name: str) -> PackageRef:
        """Resolve a user-facing component name on a host.

        Raises:
            UnknownTargetError: Host not declared under "rust".
            PackageUnknownError: Name not known on this host.
        """
        names = self.component_names.get(host)
        if names is None:
            raise UnknownTargetError(host)
        ref = names.get(component_name)
        if ref is None:
            raise PackageUnknownError(component_name, host)
        return ref

    def find_packages_for_install(self, host: TargetTriple, spec: InstallSpec) -> set[PackageRef]:
        """Expand an install specification into the packages it requires.

        Profile entries unknown on the host are skipped; profiles list
        components that only exist on some platforms. Explicit components
        and targets must resolve.

        Raises:
            UnknownProfileError: Profile not declared.
            UnknownTargetError: Host not declared under "rust".
            PackageUnknownError: Explicit component or target not available.
        """
        profile = self.profiles.get(spec.profile)
        if profile is None:
            raise UnknownProfileError(spec.profile)
        if host not in self.component_names:
            raise UnknownTargetError(host)

        packages: set[PackageRef] = set()
        for name in profile:
            try:
                packages.add(self.resolve(host, name))
            except PackageUnknownError:
                logger.debug(
                    "Skipping profile component absent on host",
                    extra={"profile": spec.profile, "component": name, "host": str(host)},
                )

        for name in sorted(spec.components):
            packages.add(self.resolve(host, name))

        for target in sorted(spec.targets):
            packages.add(self.resolve(host, f"{STD_COMPONENT_PREFIX}-{target}"))

        return packages

    def find_downloads_for_install(
        self,
        host: TargetTriple,
        spec: InstallSpec,
    ) -> list[PackageDownload]:
        """Expand an install specification into downloads, sorted by name and target.

        Raises:
            Everything find_packages_for_install raises, plus
            PackageNotTargetIndependentError, PackageUnavailableError and
            MissingPackageVersionError for packages that cannot be fetched.
        """
        downloads: list[PackageDownload] = []
        for ref in sorted(self.find_packages_for_install(host, spec), key=package_ref_sort_key):
            package = self.get_package(ref.name)
            build = package.build_for(ref.target)
            if package.version is None or package.git_commit_hash is None:
                raise MissingPackageVersionError(package.name)
            downloads.append(
                PackageDownload(
                    name=package.name,
                    version=package.version,
                    git_commit_hash=package.git_commit_hash,
                    target=ref.target,
                    artifacts=build.artifacts,
                )
            )

        logger.debug(
            "Resolved downloads",
            extra={"host": str(host), "profile": spec.profile, "download_count": len(downloads)},
        )
        return downloads
