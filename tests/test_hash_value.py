"""Tests for digest parsing and ordering."""

from __future__ import annotations

import pytest

from toolchain_manifest.hash_value import (
    Hash160,
    Hash256,
    HashParseError,
    HashValue,
    InvalidByteError,
    InvalidLengthError,
)

SHA256_HEX = "6d3c6b3e0f5f2a8f4b0b4f1c2d6e8a9b0c1d2e3f405162738495a6b7c8d9eaf1"
SHA1_HEX = "a0ca8a2be4e6f1d2ae8e8e5b9cbb1d41c2a1ecbd"


class TestHashValueParse:
    """Tests for HashValue.parse."""

    def test_roundtrip_lowercase(self) -> None:
        """Parsing then rendering gives the same lowercase text."""
        assert Hash256.parse(SHA256_HEX).to_text() == SHA256_HEX
        assert str(Hash160.parse(SHA1_HEX)) == SHA1_HEX

    def test_uppercase_accepted_and_normalized(self) -> None:
        """Uppercase hex parses and renders lowercase."""
        digest = Hash256.parse(SHA256_HEX.upper())
        assert digest.to_text() == SHA256_HEX
        assert digest == Hash256.parse(SHA256_HEX)

    def test_variable_length(self) -> None:
        """Base HashValue accepts any even length."""
        assert HashValue.parse("00ff").raw == b"\x00\xff"
        assert HashValue.parse("").raw == b""

    def test_odd_length_rejected(self) -> None:
        """Odd-length text is an InvalidLength error."""
        with pytest.raises(InvalidLengthError) as exc_info:
            HashValue.parse("abc")
        assert exc_info.value.length == 3

    def test_wrong_fixed_length_rejected(self) -> None:
        """Fixed-size digests reject text of another even length."""
        with pytest.raises(InvalidLengthError) as exc_info:
            Hash256.parse(SHA1_HEX)
        assert exc_info.value.length == 40

        with pytest.raises(InvalidLengthError):
            Hash160.parse(SHA256_HEX)

    def test_invalid_character_rejected(self) -> None:
        """Non-hex characters are an InvalidByte error naming the character."""
        text = SHA1_HEX[:-1] + "g"
        with pytest.raises(InvalidByteError) as exc_info:
            Hash160.parse(text)
        assert exc_info.value.character == "g"

    def test_errors_are_value_errors(self) -> None:
        """Parse errors share a base that is a ValueError."""
        with pytest.raises(HashParseError):
            Hash256.parse("zz")
        assert issubclass(HashParseError, ValueError)


class TestHashValueBytes:
    """Tests for construction from bytes."""

    def test_from_bytes(self) -> None:
        """Raw bytes of the right length are wrapped as-is."""
        raw = bytes(range(32))
        digest = Hash256.from_bytes(raw)
        assert digest.raw == raw
        assert digest.to_text() == raw.hex()

    @pytest.mark.parametrize("raw", [b"", b"\x00", b"\xff\x00\x10", bytes(range(256))])
    def test_text_roundtrip(self, raw: bytes) -> None:
        """Rendering then parsing gives back the same value."""
        value = HashValue.from_bytes(raw)
        assert HashValue.parse(value.to_text()) == value
        assert len(value.to_text()) == 2 * len(raw)

    def test_from_bytes_wrong_length(self) -> None:
        """Fixed-size digests reject bytes of another length."""
        with pytest.raises(InvalidLengthError):
            Hash160.from_bytes(bytes(19))

    def test_repr(self) -> None:
        """Repr names the type and the hex text."""
        assert repr(Hash160.parse(SHA1_HEX)) == f'Hash160("{SHA1_HEX}")'


class TestHashValueOrdering:
    """Tests for equality, hashing and ordering."""

    def test_equal_values_hash_equal(self) -> None:
        """Equal digests are interchangeable as dict keys."""
        a = Hash256.parse(SHA256_HEX)
        b = Hash256.parse(SHA256_HEX.upper())
        assert {a: 1}[b] == 1

    def test_ordering_is_bytewise(self) -> None:
        """Larger leading bytes compare greater."""
        low = Hash256.from_bytes(b"\x00" + bytes(31))
        high = Hash256.from_bytes(b"\x01" + bytes(31))
        assert low < high
        assert max([high, low]) == high

    def test_frozen(self) -> None:
        """Digests are immutable."""
        digest = Hash256.parse(SHA256_HEX)
        with pytest.raises(AttributeError):
            digest.raw = b""  # type: ignore[misc]
