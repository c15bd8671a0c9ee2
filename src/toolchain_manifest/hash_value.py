"""Digest values with a canonical lowercase-hex text form.

Manifests carry two kinds of digests:
    git_commit_hash = "a0ca8a2be4e6f1d2ae8e8e5b9cbb1d41c2a1ecbd"   (Hash160)
    xz_hash = "6d3c6b3e...c9a1"                                   (Hash256)

Values compare byte-wise, so among digests of equal length the ordering is the
numeric ordering of their big-endian value.
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from typing import ClassVar, Self

_HEX_DIGITS = frozenset(string.hexdigits)


class HashParseError(ValueError):
    """Base exception for digest parsing."""


class InvalidByteError(HashParseError):
    """Raised when digest text contains a non-hex character."""

    def __init__(self, character: str) -> None:
        super().__init__(f"Invalid byte: {character!r}")
        self.character = character


class InvalidLengthError(HashParseError):
    """Raised when digest text or bytes have the wrong length."""

    def __init__(self, length: int) -> None:
        super().__init__(f"Invalid length: {length}")
        self.length = length


@dataclass(frozen=True, order=True)
class HashValue:
    """Immutable digest value.

    Attributes:
        raw: Digest bytes.
    """

    # Byte length required by fixed-size subclasses, None for any length
    LENGTH: ClassVar[int | None] = None

    raw: bytes

    def __post_init__(self) -> None:
        raw = bytes(self.raw)
        if self.LENGTH is not None and len(raw) != self.LENGTH:
            raise InvalidLengthError(len(raw))
        object.__setattr__(self, "raw", raw)

    @classmethod
    def from_bytes(cls, raw: bytes) -> Self:
        """Wrap raw digest bytes."""
        return cls(raw)

    @classmethod
    def parse(cls, text: str) -> Self:
        """Parse a hex digest (either case).

        Raises:
            InvalidLengthError: If the text has odd length, or the wrong
                length for a fixed-size digest.
            InvalidByteError: If the text contains a non-hex character.
        """
        length = len(text)
        if length % 2 != 0:
            raise InvalidLengthError(length)
        if cls.LENGTH is not None and length != cls.LENGTH * 2:
            raise InvalidLengthError(length)
        for character in text:
            if character not in _HEX_DIGITS:
                raise InvalidByteError(character)
        return cls(bytes.fromhex(text))

    def to_text(self) -> str:
        """Return the lowercase hex form."""
        return self.raw.hex()

    def __str__(self) -> str:
        return self.to_text()

    def __repr__(self) -> str:
        return f'{type(self).__name__}("{self.to_text()}")'


class Hash160(HashValue):
    """160-bit digest (git commit hashes)."""

    LENGTH = 20


class Hash256(HashValue):
    """256-bit digest (SHA-256 artifact hashes)."""

    LENGTH = 32
