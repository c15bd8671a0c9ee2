"""Toolchain distribution manifests and install resolution.

Parses a v2 channel manifest into an immutable model and resolves an
install specification (profile + components + extra targets) into packages
and the artifacts to download with their expected digests.
"""

from toolchain_manifest.errors import (
    ConflictingTargetDependenceError,
    ManifestDecodeError,
    ManifestError,
    ManifestNotFoundError,
    ManifestStructureError,
    MissingPackageVersionError,
    PackageNotTargetIndependentError,
    PackageUnavailableError,
    PackageUnknownError,
    RustMissingError,
    TargetParseError,
    UnknownProfileError,
    UnknownTargetError,
)
from toolchain_manifest.hash_value import (
    Hash160,
    Hash256,
    HashParseError,
    HashValue,
    InvalidByteError,
    InvalidLengthError,
)
from toolchain_manifest.install import InstallSpec, PackageDownload, PackageRef
from toolchain_manifest.manifest import Manifest
from toolchain_manifest.package import (
    Component,
    Package,
    PackageArtifact,
    PackageBuild,
    TargetDependent,
    TargetIndependent,
)
from toolchain_manifest.raw import CompressionKind, RawManifest, parse_raw_manifest
from toolchain_manifest.target import (
    UNIVERSAL,
    SpecificTarget,
    SupportedTarget,
    TargetTriple,
    UniversalTarget,
    parse_supported_target,
    parse_target_triple,
)
from toolchain_manifest.toolchain import Channel, Toolchain, parse_channel, parse_toolchain

__all__ = [
    "UNIVERSAL",
    "Channel",
    "Component",
    "CompressionKind",
    "ConflictingTargetDependenceError",
    "Hash160",
    "Hash256",
    "HashParseError",
    "HashValue",
    "InstallSpec",
    "InvalidByteError",
    "InvalidLengthError",
    "Manifest",
    "ManifestDecodeError",
    "ManifestError",
    "ManifestNotFoundError",
    "ManifestStructureError",
    "MissingPackageVersionError",
    "Package",
    "PackageArtifact",
    "PackageBuild",
    "PackageDownload",
    "PackageNotTargetIndependentError",
    "PackageRef",
    "PackageUnavailableError",
    "PackageUnknownError",
    "RawManifest",
    "RustMissingError",
    "SpecificTarget",
    "SupportedTarget",
    "TargetDependent",
    "TargetIndependent",
    "TargetParseError",
    "TargetTriple",
    "Toolchain",
    "UniversalTarget",
    "UnknownProfileError",
    "UnknownTargetError",
    "parse_channel",
    "parse_raw_manifest",
    "parse_supported_target",
    "parse_target_triple",
    "parse_toolchain",
]
