"""Target triples and the universal/specific target descriptor.

A manifest keys builds either by a platform triple such as
``x86_64-unknown-linux-gnu`` or by the sentinel ``*``, meaning the build is
valid for every platform.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from toolchain_manifest.errors import TargetParseError

TARGET_INDEPENDENT_NAME = "*"

_COMPONENT_PATTERN = re.compile(r"^[A-Za-z0-9_.]+$")

# Shortest real triples (wasm32-wasi) have two components
MIN_COMPONENTS = 2
MAX_COMPONENTS = 5


@dataclass(frozen=True, order=True)
class TargetTriple:
    """Parsed platform identifier (arch-vendor-os[-env]).

    Attributes:
        components: Hyphen-separated components in order.
    """

    components: tuple[str, ...]

    @property
    def architecture(self) -> str:
        """First component of the triple."""
        return self.components[0]

    def __str__(self) -> str:
        return "-".join(self.components)

    def __repr__(self) -> str:
        return f"TargetTriple({str(self)!r})"


def parse_target_triple(text: str) -> TargetTriple:
    """Parse a platform triple.

    Raises:
        TargetParseError: If the text is not a plausible triple.
    """
    components = tuple(text.split("-"))
    if len(components) < MIN_COMPONENTS or len(components) > MAX_COMPONENTS:
        raise TargetParseError(text, f"expected 2-5 components, got {len(components)}")
    for component in components:
        if not _COMPONENT_PATTERN.match(component):
            raise TargetParseError(text, f"invalid component {component!r}")
    return TargetTriple(components)


@dataclass(frozen=True)
class UniversalTarget:
    """Descriptor for a build valid on every platform."""

    def supports(self, triple: TargetTriple) -> bool:
        return True

    def __str__(self) -> str:
        return TARGET_INDEPENDENT_NAME


@dataclass(frozen=True)
class SpecificTarget:
    """Descriptor for a build valid on exactly one platform."""

    triple: TargetTriple

    def supports(self, triple: TargetTriple) -> bool:
        return self.triple == triple

    def __str__(self) -> str:
        return str(self.triple)


SupportedTarget = UniversalTarget | SpecificTarget

UNIVERSAL = UniversalTarget()


def parse_supported_target(text: str) -> SupportedTarget:
    """Parse a manifest target key ("*" or a triple)."""
    if text == TARGET_INDEPENDENT_NAME:
        return UNIVERSAL
    return SpecificTarget(parse_target_triple(text))
