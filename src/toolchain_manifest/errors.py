"""Exception hierarchy for manifest parsing and install resolution.

Errors fall into three groups:
- Structural: the document does not have the expected shape.
- Construction: the document is well-formed but semantically invalid.
- Resolution: a query against a valid manifest cannot be satisfied.

Every error derives from ManifestError so callers can catch one type.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from toolchain_manifest.target import SupportedTarget, TargetTriple


class ManifestError(Exception):
    """Base exception for manifest operations."""


class ManifestDecodeError(ManifestError):
    """Raised when manifest text cannot be decoded (e.g. invalid TOML)."""


class ManifestStructureError(ManifestError):
    """Raised when a decoded document does not match the manifest schema."""


class TargetParseError(ManifestError, ValueError):
    """Raised when a string is not a valid target triple."""

    def __init__(self, text: str, reason: str) -> None:
        super().__init__(f"Failed to parse target triple {text!r}: {reason}")
        self.text = text
        self.reason = reason


class ConflictingTargetDependenceError(ManifestError):
    """Raised when a package is listed as both target-dependent and independent."""

    def __init__(self, package: str) -> None:
        super().__init__(f"Package {package} listed as both target-dependent and independent")
        self.package = package


class RustMissingError(ManifestError):
    """Raised when the anchor package "rust" is absent from the manifest."""

    def __init__(self) -> None:
        super().__init__('Package "rust" was missing from manifest')


class UnknownTargetError(ManifestError):
    """Raised when a host platform has no declared components."""

    def __init__(self, host: TargetTriple) -> None:
        super().__init__(f"Unknown target: {host}")
        self.host = host


class UnknownProfileError(ManifestError):
    """Raised when an install specification names an undeclared profile."""

    def __init__(self, profile: str) -> None:
        super().__init__(f"Unknown profile: {profile}")
        self.profile = profile


class PackageUnknownError(ManifestError):
    """Raised when a name cannot be resolved to a package for a target."""

    def __init__(self, package: str, target: TargetTriple | SupportedTarget | None = None) -> None:
        if target is None:
            message = f"Unknown package: {package}"
        else:
            message = f"Unknown package {package} for target {target}"
        super().__init__(message)
        self.package = package
        self.target = target


class PackageNotTargetIndependentError(ManifestError):
    """Raised when a target-dependent package is queried without a target."""

    def __init__(self, package: str) -> None:
        super().__init__(f"Attempted to treat package {package} as architecture independent")
        self.package = package


class PackageUnavailableError(ManifestError):
    """Raised when a build is declared for a target but marked unavailable."""

    def __init__(self, package: str, target: SupportedTarget) -> None:
        super().__init__(f"Package {package} unavailable for target {target}")
        self.package = package
        self.target = target


class MissingPackageVersionError(ManifestError):
    """Raised when a package to download carries no version or commit hash."""

    def __init__(self, package: str) -> None:
        super().__init__(f"Package {package} has no version information")
        self.package = package


class ManifestNotFoundError(ManifestError):
    """Raised when the distribution server has no manifest for a toolchain."""

    def __init__(self, url: str) -> None:
        super().__init__(f"No manifest found at {url}")
        self.url = url
