"""Connectors for fetching manifests from a distribution server."""

from toolchain_manifest.connectors.backoff import (
    RETRYABLE_STATUSES,
    BackoffConfig,
    BackoffState,
    compute_backoff_delay,
)
from toolchain_manifest.connectors.dist_client import DistClient

__all__ = [
    "RETRYABLE_STATUSES",
    "BackoffConfig",
    "BackoffState",
    "DistClient",
    "compute_backoff_delay",
]
