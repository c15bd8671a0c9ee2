"""Toolchain names and manifest locations.

Toolchain string format:
    {channel}[-{YYYY-MM-DD}][-{host triple}]

Examples:
    stable
    1.65.0-x86_64-unknown-linux-gnu
    nightly-2022-11-30-x86_64-pc-windows-msvc
"""

from __future__ import annotations

import datetime
import re
from dataclasses import dataclass
from enum import Enum

from toolchain_manifest.target import TargetTriple, parse_target_triple

DEFAULT_DIST_SERVER = "https://static.rust-lang.org"

# Version channel components are unsigned 16-bit integers
MAX_VERSION_COMPONENT = 0xFFFF

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class ChannelParseError(ValueError):
    """Raised when a channel name cannot be parsed."""


class ReleaseTrack(str, Enum):
    """Kind of release channel."""

    STABLE = "stable"
    BETA = "beta"
    NIGHTLY = "nightly"
    VERSION = "version"


@dataclass(frozen=True)
class Channel:
    """Release channel: a named track or a fixed version.

    Attributes:
        track: Named track, or VERSION for a fixed release.
        version: (major, minor) or (major, minor, patch) for VERSION channels.
    """

    track: ReleaseTrack
    version: tuple[int, ...] | None = None

    def __str__(self) -> str:
        if self.track == ReleaseTrack.VERSION and self.version is not None:
            return ".".join(str(part) for part in self.version)
        return self.track.value


STABLE = Channel(ReleaseTrack.STABLE)
BETA = Channel(ReleaseTrack.BETA)
NIGHTLY = Channel(ReleaseTrack.NIGHTLY)

_NAMED_CHANNELS = {channel.track.value: channel for channel in (STABLE, BETA, NIGHTLY)}


def parse_channel(text: str) -> Channel:
    """Parse "stable", "beta", "nightly" or a MAJOR.MINOR[.PATCH] version.

    Raises:
        ChannelParseError: If a version component is not an integer in range,
            or the version has other than two or three components.
    """
    named = _NAMED_CHANNELS.get(text)
    if named is not None:
        return named

    components: list[int] = []
    for part in text.split("."):
        if not (part.isascii() and part.isdigit()) or int(part) > MAX_VERSION_COMPONENT:
            raise ChannelParseError("Could not parse version number component as integer")
        components.append(int(part))

    if not 2 <= len(components) <= 3:
        msg = f"Incorrect number of components in version: {len(components)}"
        raise ChannelParseError(msg)
    return Channel(ReleaseTrack.VERSION, tuple(components))


@dataclass(frozen=True)
class Toolchain:
    """Parsed toolchain name.

    Attributes:
        channel: Release channel.
        date: Archive date, None for the latest release of the channel.
        host: Host platform, None when not given.
    """

    channel: Channel
    date: datetime.date | None = None
    host: TargetTriple | None = None

    def manifest_url(self, dist_server: str = DEFAULT_DIST_SERVER) -> str:
        """URL of the channel manifest on a distribution server."""
        server = dist_server.rstrip("/")
        if self.date is not None:
            return f"{server}/dist/{self.date.isoformat()}/channel-rust-{self.channel}.toml"
        return f"{server}/dist/channel-rust-{self.channel}.toml"

    def __str__(self) -> str:
        parts = [str(self.channel)]
        if self.date is not None:
            parts.append(self.date.isoformat())
        if self.host is not None:
            parts.append(str(self.host))
        return "-".join(parts)


def _parse_date(text: str) -> datetime.date | None:
    if not _DATE_PATTERN.match(text):
        return None
    try:
        return datetime.date.fromisoformat(text)
    except ValueError:
        return None


def parse_toolchain(text: str) -> Toolchain:
    """Parse a toolchain name.

    The first hyphen-separated component is the channel. If at least three
    components follow and form a date, they are the date. Anything left is
    the host triple.

    Raises:
        ChannelParseError: Invalid channel.
        TargetParseError: Invalid host triple.
    """
    channel_text, *rest = text.split("-")
    channel = parse_channel(channel_text)

    date = None
    if len(rest) >= 3:
        date = _parse_date("-".join(rest[:3]))
        if date is not None:
            rest = rest[3:]

    host = parse_target_triple("-".join(rest)) if rest else None
    return Toolchain(channel=channel, date=date, host=host)
