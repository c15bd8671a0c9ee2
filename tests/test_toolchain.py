"""Tests for toolchain names and manifest URLs."""

from __future__ import annotations

import datetime

import pytest

from toolchain_manifest.errors import TargetParseError
from toolchain_manifest.toolchain import (
    BETA,
    NIGHTLY,
    STABLE,
    Channel,
    ChannelParseError,
    ReleaseTrack,
    Toolchain,
    parse_channel,
    parse_toolchain,
)


class TestParseChannel:
    """Tests for parse_channel."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [("stable", STABLE), ("beta", BETA), ("nightly", NIGHTLY)],
    )
    def test_named(self, text: str, expected: Channel) -> None:
        """Named tracks parse to their constants."""
        assert parse_channel(text) == expected
        assert str(parse_channel(text)) == text

    def test_version(self) -> None:
        """Two or three numeric components form a version channel."""
        assert parse_channel("1.65.0") == Channel(ReleaseTrack.VERSION, (1, 65, 0))
        assert parse_channel("1.65") == Channel(ReleaseTrack.VERSION, (1, 65))
        assert str(parse_channel("1.65.0")) == "1.65.0"

    @pytest.mark.parametrize("text", ["1", "1.2.3.4"])
    def test_wrong_component_count(self, text: str) -> None:
        """Versions need two or three components."""
        with pytest.raises(ChannelParseError, match="Incorrect number of components"):
            parse_channel(text)

    @pytest.mark.parametrize("text", ["latest", "1.x", "1.-2", "1.65536", "1.", "1.٣"])
    def test_non_integer(self, text: str) -> None:
        """Components must be ASCII integers in range."""
        with pytest.raises(ChannelParseError, match="Could not parse version number component"):
            parse_channel(text)


class TestParseToolchain:
    """Tests for parse_toolchain."""

    def test_channel_only(self) -> None:
        """A bare channel has no date or host."""
        toolchain = parse_toolchain("stable")
        assert toolchain == Toolchain(STABLE)

    def test_channel_and_date(self) -> None:
        """A date follows the channel."""
        toolchain = parse_toolchain("nightly-2022-11-30")
        assert toolchain.channel == NIGHTLY
        assert toolchain.date == datetime.date(2022, 11, 30)
        assert toolchain.host is None

    def test_full(self) -> None:
        """Channel, date and host together."""
        toolchain = parse_toolchain("nightly-2022-11-30-x86_64-unknown-linux-gnu")
        assert toolchain.date == datetime.date(2022, 11, 30)
        assert str(toolchain.host) == "x86_64-unknown-linux-gnu"
        assert str(toolchain) == "nightly-2022-11-30-x86_64-unknown-linux-gnu"

    def test_version_and_host(self) -> None:
        """Without a date, everything after the channel is the host."""
        toolchain = parse_toolchain("1.65.0-x86_64-pc-windows-msvc")
        assert toolchain.channel == Channel(ReleaseTrack.VERSION, (1, 65, 0))
        assert toolchain.date is None
        assert str(toolchain.host) == "x86_64-pc-windows-msvc"

    def test_invalid_channel(self) -> None:
        """An unknown channel is rejected."""
        with pytest.raises(ChannelParseError):
            parse_toolchain("weekly-x86_64-unknown-linux-gnu")

    def test_invalid_host(self) -> None:
        """A trailing single component is not a host triple."""
        with pytest.raises(TargetParseError):
            parse_toolchain("stable-linux")


class TestManifestUrl:
    """Tests for Toolchain.manifest_url."""

    def test_latest(self) -> None:
        """Undated toolchains use the channel manifest at the dist root."""
        assert parse_toolchain("stable").manifest_url() == (
            "https://static.rust-lang.org/dist/channel-rust-stable.toml"
        )

    def test_dated(self) -> None:
        """Dated toolchains use the dated archive."""
        assert parse_toolchain("nightly-2022-11-30").manifest_url() == (
            "https://static.rust-lang.org/dist/2022-11-30/channel-rust-nightly.toml"
        )

    def test_version(self) -> None:
        """Version channels name the manifest by version."""
        assert parse_toolchain("1.65.0").manifest_url() == (
            "https://static.rust-lang.org/dist/channel-rust-1.65.0.toml"
        )

    def test_custom_server(self) -> None:
        """A trailing slash on the server is ignored."""
        assert parse_toolchain("beta").manifest_url("https://mirror.example.com/rust/") == (
            "https://mirror.example.com/rust/dist/channel-rust-beta.toml"
        )
