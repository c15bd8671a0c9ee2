"""
Async client for fetching channel manifests from a distribution server.

Only the manifest document is fetched here; artifact download is left to
the caller, which gets URLs and expected digests from the resolved
PackageDownload list.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import random
from types import TracebackType
from typing import TYPE_CHECKING

import aiohttp

from toolchain_manifest.config import DistConfig
from toolchain_manifest.connectors.backoff import (
    RETRYABLE_STATUSES,
    BackoffConfig,
    BackoffState,
    compute_backoff_delay,
)
from toolchain_manifest.errors import ManifestNotFoundError
from toolchain_manifest.manifest import Manifest

if TYPE_CHECKING:
    from collections.abc import Mapping

    from toolchain_manifest.toolchain import Toolchain

logger = logging.getLogger(__name__)


def _retry_after_ms(headers: Mapping[str, str]) -> int | None:
    """Parse a Retry-After header given in seconds."""
    if "Retry-After" not in headers:
        return None
    with contextlib.suppress(ValueError):
        return int(headers["Retry-After"]) * 1000
    return None


class DistClient:
    """
    Fetches channel manifests with retry on transient failures.

    Network errors, timeouts, 429 and 5xx responses are retried with
    exponential backoff. A 404 means the channel or date does not exist and
    raises ManifestNotFoundError; other 4xx responses are not retried.
    """

    def __init__(
        self,
        config: DistConfig | None = None,
        backoff_config: BackoffConfig | None = None,
        *,
        rng: random.Random | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            config: Distribution server configuration.
            backoff_config: Retry backoff; max_retries defaults to config.max_retries.
            rng: Optional seeded Random for deterministic jitter.
        """
        self._config = config or DistConfig()
        self._backoff_config = backoff_config or BackoffConfig(max_retries=self._config.max_retries)
        self._rng = rng
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> DistClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._config.request_timeout_s)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def fetch_text(self, url: str) -> str:
        """
        GET a URL and return its body as text.

        Raises:
            ManifestNotFoundError: On 404.
            aiohttp.ClientResponseError: On other 4xx, or when retries of a
                retryable status are exhausted.
            aiohttp.ClientError: On network errors after retries.
            TimeoutError: On timeouts after retries.
        """
        state = BackoffState()
        while True:
            retry_after_ms = None
            try:
                session = await self._get_session()
                async with session.request("GET", url) as response:
                    if response.status == 404:
                        raise ManifestNotFoundError(url)

                    if response.status >= 400:
                        text = await response.text()
                        error = aiohttp.ClientResponseError(
                            response.request_info,
                            response.history,
                            status=response.status,
                            message=text[:200],
                        )
                        if response.status not in RETRYABLE_STATUSES:
                            logger.error(
                                "HTTP error",
                                extra={"status": response.status, "url": url},
                            )
                            raise error

                        retry_after_ms = _retry_after_ms(response.headers)
                        state.record_error()
                        logger.warning(
                            "Retryable HTTP status",
                            extra={
                                "status": response.status,
                                "url": url,
                                "attempt": state.attempt,
                            },
                        )
                        if state.exhausted(self._backoff_config):
                            raise error
                    else:
                        body = await response.text()
                        logger.info("Fetched manifest", extra={"url": url, "size_bytes": len(body)})
                        return body

            except aiohttp.ClientResponseError:
                raise
            except (aiohttp.ClientError, TimeoutError) as e:
                state.record_error()
                logger.warning(
                    "Request failed",
                    extra={"url": url, "error": str(e), "attempt": state.attempt},
                )
                if state.exhausted(self._backoff_config):
                    raise

            delay_ms = compute_backoff_delay(
                self._backoff_config,
                state,
                retry_after_ms,
                rng=self._rng,
            )
            if delay_ms > 0:
                logger.debug("Backing off before retry", extra={"delay_ms": delay_ms})
                await asyncio.sleep(delay_ms / 1000)

    async def fetch_manifest_text(self, toolchain: Toolchain) -> str:
        """Fetch the raw TOML manifest of a toolchain."""
        url = toolchain.manifest_url(self._config.dist_server)
        logger.info("Fetching manifest", extra={"toolchain": str(toolchain), "url": url})
        return await self.fetch_text(url)

    async def fetch_manifest(self, toolchain: Toolchain) -> Manifest:
        """Fetch and parse the manifest of a toolchain."""
        return Manifest.from_toml(await self.fetch_manifest_text(toolchain))
