"""
Distribution server configuration.

Values may come from the environment:
- RUSTUP_DIST_SERVER: base URL of the distribution server
- TOOLCHAIN_MANIFEST_TIMEOUT_S: request timeout in seconds
- TOOLCHAIN_MANIFEST_MAX_RETRIES: retries for transient failures
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from urllib.parse import urlsplit

from toolchain_manifest.toolchain import DEFAULT_DIST_SERVER

DIST_SERVER_ENV_VAR = "RUSTUP_DIST_SERVER"
TIMEOUT_ENV_VAR = "TOOLCHAIN_MANIFEST_TIMEOUT_S"
MAX_RETRIES_ENV_VAR = "TOOLCHAIN_MANIFEST_MAX_RETRIES"

DEFAULT_TIMEOUT_S = 30.0
DEFAULT_MAX_RETRIES = 3


@dataclass
class DistConfig:
    """Where and how to fetch channel manifests."""

    dist_server: str = DEFAULT_DIST_SERVER
    request_timeout_s: float = DEFAULT_TIMEOUT_S
    max_retries: int = DEFAULT_MAX_RETRIES

    def __post_init__(self) -> None:
        self.dist_server = self.dist_server.rstrip("/")
        if urlsplit(self.dist_server).scheme not in ("http", "https"):
            raise ValueError(f"dist_server must be an http(s) URL, got {self.dist_server!r}")
        if self.request_timeout_s <= 0:
            raise ValueError(f"request_timeout_s must be > 0, got {self.request_timeout_s}")
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> DistConfig:
        """Build a config, overriding defaults from environment variables."""
        if environ is None:
            environ = os.environ
        return cls(
            dist_server=environ.get(DIST_SERVER_ENV_VAR) or DEFAULT_DIST_SERVER,
            request_timeout_s=float(environ.get(TIMEOUT_ENV_VAR) or DEFAULT_TIMEOUT_S),
            max_retries=int(environ.get(MAX_RETRIES_ENV_VAR) or DEFAULT_MAX_RETRIES),
        )
